"""
MongoDB connection for the mongo store backend
One client per process, shared by every registry built from app config
"""

import os
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure

logger = logging.getLogger(__name__)

_registry_db = None
_mongo_client = None


def get_db_connection(connection_string: Optional[str] = None, db_name: Optional[str] = None):
    """
    Database holding the registry collections (singleton)

    Args:
        connection_string: MongoDB URI, falls back to MONGODB_URI
        db_name: Database name, falls back to DATABASE_NAME

    Returns:
        Database: MongoDB database instance
    """
    global _registry_db, _mongo_client

    if _registry_db is not None:
        return _registry_db

    connection_string = connection_string or os.getenv('MONGODB_URI')
    if not connection_string:
        raise ValueError("MONGODB_URI environment variable not set")
    db_name = db_name or os.getenv('DATABASE_NAME', 'chaincheck')

    try:
        # tz_aware keeps registered_at / verified_at in UTC on the way back
        client = MongoClient(
            connection_string,
            maxPoolSize=50,
            serverSelectionTimeoutMS=10000,
            tz_aware=True
        )
        client.admin.command('ping')
    except ConnectionFailure as e:
        logger.error(f"Registry database unreachable: {e}")
        raise

    _mongo_client = client
    _registry_db = client[db_name]
    logger.info(f"Registry store connected: {db_name}")
    return _registry_db


def close_db_connection():
    """Close the shared client; called at interpreter exit"""
    global _registry_db, _mongo_client

    if _mongo_client is None:
        return

    try:
        _mongo_client.close()
        logger.info("Registry database connection closed")
    finally:
        _registry_db = None
        _mongo_client = None

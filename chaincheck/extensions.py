# extensions.py
"""
Registry wiring for the Flask app
Builds the store and services from app config and exposes them to routes
"""

import atexit
import logging

from flask import current_app

from chaincheck.registry import ChainCheckRegistry
from chaincheck.services.auth import TokenService, WalletAuthService
from chaincheck.store import MemoryRegistryStore, MongoRegistryStore

logger = logging.getLogger(__name__)


def build_store(app_config):
    backend = app_config.get('STORE_BACKEND', 'memory')

    if backend == 'memory':
        return MemoryRegistryStore()

    if backend == 'mongo':
        from chaincheck.config.database import close_db_connection, get_db_connection
        db = get_db_connection(app_config.get('MONGODB_URI'), app_config.get('DATABASE_NAME'))
        atexit.register(close_db_connection)
        return MongoRegistryStore(db)

    raise ValueError(f"Unknown STORE_BACKEND: {backend}")


def init_app(app):
    """Attach registry, token and wallet-auth services to app.extensions"""
    owner = app.config.get('CHAINCHECK_OWNER_ADDRESS')
    if not owner:
        raise ValueError("CHAINCHECK_OWNER_ADDRESS environment variable not set")

    registry = ChainCheckRegistry(
        owner=owner,
        store=build_store(app.config),
        max_serials_per_batch=app.config.get('MAX_SERIALS_PER_BATCH')
    )
    tokens = TokenService(app.config['JWT_SECRET_KEY'], app.config.get('JWT_EXPIRATION_HOURS', 8))

    app.extensions['chaincheck_registry'] = registry
    app.extensions['chaincheck_tokens'] = tokens
    app.extensions['chaincheck_wallet_auth'] = WalletAuthService(
        tokens, registry.store, app.config.get('CHALLENGE_TTL_SECONDS', 300)
    )

    logger.info(f"Registry ready (backend={app.config.get('STORE_BACKEND', 'memory')}, owner={registry.owner()})")
    return registry


def get_registry() -> ChainCheckRegistry:
    return current_app.extensions['chaincheck_registry']


def get_wallet_auth() -> WalletAuthService:
    return current_app.extensions['chaincheck_wallet_auth']

"""
Configuration module
Centralized configuration for environment, database and logging
"""

from .database import get_db_connection, close_db_connection
from .environment import Config, Environment
from .logging_config import setup_logging

__all__ = [
    'get_db_connection', 'close_db_connection', 'Config', 'Environment', 'setup_logging'
]

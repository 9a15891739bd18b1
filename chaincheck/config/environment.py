# config/environment.py
import os
from enum import Enum
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == '':
        return None
    return int(value)


class Config:
    """Environment-based configuration"""

    def __init__(self):
        self.env = Environment(os.getenv('FLASK_ENV', 'development'))

    def get_config(self) -> Dict[str, Any]:
        base_config = {
            'ENVIRONMENT': self.env.value,
            'SECRET_KEY': os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production'),
            'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-jwt-secret-key-change-in-production'),
            'JWT_EXPIRATION_HOURS': int(os.getenv('JWT_EXPIRATION_HOURS', '8')),
            'CHALLENGE_TTL_SECONDS': int(os.getenv('CHALLENGE_TTL_SECONDS', '300')),
            'CHAINCHECK_OWNER_ADDRESS': os.getenv('CHAINCHECK_OWNER_ADDRESS'),
            'STORE_BACKEND': os.getenv('STORE_BACKEND', 'memory'),
            'MONGODB_URI': os.getenv('MONGODB_URI'),
            'DATABASE_NAME': os.getenv('DATABASE_NAME', 'chaincheck'),
            'MAX_SERIALS_PER_BATCH': _optional_int(os.getenv('MAX_SERIALS_PER_BATCH')),
            'CORS_ORIGINS': os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(','),
            'RATELIMIT_STORAGE_URI': os.getenv('RATELIMIT_STORAGE_URI', 'memory://'),
            'VERIFY_RATE_LIMIT': os.getenv('VERIFY_RATE_LIMIT', '50 per minute'),
            'AUTH_RATE_LIMIT': os.getenv('AUTH_RATE_LIMIT', '10 per minute'),
            'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
        }

        if self.env == Environment.DEVELOPMENT:
            return {**base_config, **self._development_config()}
        elif self.env == Environment.TESTING:
            return {**base_config, **self._testing_config()}
        elif self.env == Environment.STAGING:
            return {**base_config, **self._staging_config()}
        else:
            return {**base_config, **self._production_config()}

    def _development_config(self) -> Dict[str, Any]:
        return {
            'DEBUG': True,
            'MONGODB_URI': os.getenv('MONGODB_URI', 'mongodb://localhost:27017/chaincheck_dev'),
        }

    def _testing_config(self) -> Dict[str, Any]:
        return {
            'DEBUG': False,
            'TESTING': True,
            'STORE_BACKEND': 'memory',
            'RATELIMIT_ENABLED': False,
        }

    def _staging_config(self) -> Dict[str, Any]:
        return {
            'DEBUG': False,
            'STORE_BACKEND': os.getenv('STORE_BACKEND', 'mongo'),
        }

    def _production_config(self) -> Dict[str, Any]:
        return {
            'DEBUG': False,
            'STORE_BACKEND': os.getenv('STORE_BACKEND', 'mongo'),
            'RATELIMIT_STORAGE_URI': os.getenv('RATELIMIT_STORAGE_URI', 'memory://'),
        }

# security/rate_limiting.py
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Storage comes from RATELIMIT_STORAGE_URI in app config
limiter = Limiter(key_func=get_remote_address)


def verify_rate_limit() -> str:
    return current_app.config.get('VERIFY_RATE_LIMIT', '50 per minute')


def auth_rate_limit() -> str:
    return current_app.config.get('AUTH_RATE_LIMIT', '10 per minute')

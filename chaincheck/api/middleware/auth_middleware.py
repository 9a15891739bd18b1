"""
Authentication Middleware
Only handles token extraction and validation; privilege checks live in the registry
"""

import logging
from functools import wraps

from flask import current_app, g, request

from chaincheck.core.exceptions import AuthError
from chaincheck.utils.input_validators import ZERO_ADDRESS

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """Middleware for authentication - token handling only"""
    
    @staticmethod
    def extract_token() -> str:
        """
        Extract JWT token from Authorization header
        
        Returns:
            Token string
            
        Raises:
            AuthError: If no token found
        """
        auth_header = request.headers.get('Authorization')
        
        if not auth_header:
            raise AuthError("No authorization header")
        
        if not auth_header.startswith('Bearer '):
            raise AuthError("Invalid authorization header format")
        
        return auth_header[7:]  # Remove 'Bearer ' prefix

    @staticmethod
    def current_caller() -> str:
        """Address resolved for this request, zero address when anonymous"""
        return getattr(g, 'caller', None) or ZERO_ADDRESS

    @staticmethod
    def token_required(f):
        """Routes that act on behalf of a signed-in wallet"""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            token = AuthMiddleware.extract_token()
            payload = current_app.extensions['chaincheck_tokens'].verify_token(token)
            g.caller = payload['sub']
            return f(*args, **kwargs)
        return decorated_function

    @staticmethod
    def optional_auth(f):
        """Public routes; a valid token attributes the call, a bad one is ignored"""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            g.caller = None
            if request.headers.get('Authorization'):
                try:
                    token = AuthMiddleware.extract_token()
                    payload = current_app.extensions['chaincheck_tokens'].verify_token(token)
                    g.caller = payload['sub']
                except AuthError as e:
                    logger.info(f"Ignoring invalid credentials on public route: {e}")
            return f(*args, **kwargs)
        return decorated_function


auth_middleware = AuthMiddleware()

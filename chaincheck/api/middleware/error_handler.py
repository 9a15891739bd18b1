"""
Error Handler Middleware
Centralized error handling for the application
"""

import logging
import traceback

from flask import request
from werkzeug.exceptions import HTTPException

from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.core.exceptions import AuthError, ChainCheckError

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling"""
    
    @staticmethod
    def init_app(app):
        """Initialize error handlers for Flask app"""
        
        # Registry errors: Unauthorized, InvalidInput, Conflict, NotFound, RegistryPaused
        @app.errorhandler(ChainCheckError)
        def handle_registry_error(error):
            logger.warning(f"{type(error).__name__}: {error.message} - {request.path}")
            return response_middleware.create_error_response(
                error.message,
                error.status_code,
                {'type': type(error).__name__}
            )
        
        # Authentication errors
        @app.errorhandler(AuthError)
        def handle_auth_error(error):
            logger.warning(f"Authentication error: {str(error)} - {request.path}")
            return response_middleware.create_error_response(
                str(error),
                401,
                {'type': 'AuthError'}
            )
        
        # HTTP exceptions
        @app.errorhandler(HTTPException)
        def handle_http_exception(error):
            logger.info(f"HTTP {error.code}: {request.path}")
            return response_middleware.create_error_response(error.description, error.code)
        
        # Generic exception handler
        @app.errorhandler(Exception)
        def handle_unexpected_error(error):
            logger.error(f"Unexpected error: {str(error)}")
            logger.error(traceback.format_exc())
            
            if app.config.get('DEBUG'):
                return response_middleware.create_error_response(
                    str(error),
                    500,
                    {'type': type(error).__name__, 'traceback': traceback.format_exc()}
                )
            return response_middleware.create_error_response('An unexpected error occurred', 500)


# api/middleware/logging_middleware.py
import logging
import time

from flask import g, request

logger = logging.getLogger('requests')


class RequestLogger:
    """Request/response logging"""
    
    @staticmethod
    def log_request():
        """Log incoming request details"""
        g.start_time = time.time()
        logger.debug(f"{request.method} {request.path} from {request.remote_addr}")
    
    @staticmethod
    def log_response(response):
        """Log response status and duration"""
        duration_ms = (time.time() - g.pop('start_time', time.time())) * 1000
        logger.info(f"{request.method} {request.path} {response.status_code} {duration_ms:.1f}ms")
        return response

    @staticmethod
    def init_app(app):
        app.before_request(RequestLogger.log_request)
        app.after_request(RequestLogger.log_response)

# config/logging_config.py
import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = 'INFO'):
    """Setup logging configuration for the application"""
    
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT
    )
    
    # Create specific loggers
    request_logger = logging.getLogger('requests')
    security_logger = logging.getLogger('security')
    
    request_logger.setLevel(logging.INFO)
    security_logger.setLevel(logging.WARNING)
    
    return {
        'request': request_logger,
        'security': security_logger
    }

# chaincheck/__init__.py
"""
ChainCheck: manufacturer batch registry with one-shot serial verification
"""
import logging
from typing import Any, Dict, Optional

from flask import Flask
from flask_cors import CORS

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(config_overrides: Optional[Dict[str, Any]] = None):
    """Application factory pattern"""
    from chaincheck.config.environment import Config
    from chaincheck.config.logging_config import setup_logging

    app = Flask(__name__)

    app.config.update(Config().get_config())
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.info(f"Configuration loaded ({app.config['ENVIRONMENT']})")

    CORS(app,
         origins=app.config.get('CORS_ORIGINS'),
         allow_headers=['Content-Type', 'Authorization'],
         methods=['GET', 'POST', 'OPTIONS'])

    from chaincheck import extensions
    extensions.init_app(app)

    from chaincheck.security.rate_limiting import limiter
    limiter.init_app(app)

    from chaincheck.api.middleware.logging_middleware import RequestLogger
    from chaincheck.monitoring import metrics
    RequestLogger.init_app(app)
    metrics.init_app(app)

    from chaincheck.api.route_registry import register_routes
    register_routes(app)

    from chaincheck.api.middleware.error_handler import ErrorHandler
    ErrorHandler.init_app(app)

    from chaincheck.cli import chaincheck_cli
    app.cli.add_command(chaincheck_cli)

    return app

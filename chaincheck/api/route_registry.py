"""
API Route Registry
Central registration of all API routes
"""
import logging
from flask import Flask

logger = logging.getLogger(__name__)


def register_routes(app: Flask):
    """Register all API routes with the Flask app"""
    
    try:
        # Auth Routes
        from chaincheck.api.v1.auth_routes import auth_bp
        app.register_blueprint(auth_bp, url_prefix='/v1/auth')
        logger.info("Registered: /v1/auth")
        
        # Admin Routes
        from chaincheck.api.v1.admin.manufacturer_management_routes import admin_manufacturer_bp
        from chaincheck.api.v1.admin.system_routes import system_bp
        
        app.register_blueprint(admin_manufacturer_bp, url_prefix='/v1/admin')
        app.register_blueprint(system_bp, url_prefix='/v1/admin')
        logger.info("Registered: /v1/admin/* (2 blueprints)")
        
        # Manufacturer Routes
        from chaincheck.api.v1.manufacturer.product_routes import product_bp
        app.register_blueprint(product_bp, url_prefix='/v1/manufacturer/products')
        logger.info("Registered: /v1/manufacturer/products")
        
        # Public Routes
        from chaincheck.api.v1.verification.public_routes import public_verification_bp
        from chaincheck.api.v1.registry_routes import registry_bp
        
        app.register_blueprint(public_verification_bp, url_prefix='/v1/verification')
        app.register_blueprint(registry_bp, url_prefix='/v1')
        logger.info("Registered: /v1/verification/*, /v1/products, /v1/stats, /v1/events")
        
        @app.route('/health', methods=['GET'])
        def health_check():
            """Basic health check endpoint"""
            from chaincheck.extensions import get_registry
            registry = get_registry()
            return {
                'status': 'healthy',
                'service': 'chaincheck-registry',
                'version': '1.0.0',
                'paused': registry.paused()
            }, 200
        
        logger.info("Registered: Health check endpoint")
        return True
        
    except ImportError as e:
        logger.error(f"Failed to import route module: {e}")
        raise


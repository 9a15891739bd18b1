"""
Manufacturer Product Routes
Batch registration for authorized manufacturers
"""
import logging

from flask import Blueprint, g, request

from chaincheck.api.middleware.auth_middleware import auth_middleware
from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.extensions import get_registry
from chaincheck.validators.product_validator import ProductValidator

product_bp = Blueprint('manufacturer_products', __name__)
logger = logging.getLogger(__name__)


@product_bp.route('', methods=['POST'])
@auth_middleware.token_required
def register_product():
    """
    Register one batch
    Body: batch_id, name, brand, serial_hashes (32-byte hex commitments)
    """
    data = request.get_json(silent=True)

    error = ProductValidator.validate_registration_payload(data)
    if error:
        return response_middleware.create_error_response(error, 400)

    batch = get_registry().register_product(
        g.caller,
        data['batch_id'],
        data['name'],
        data['brand'],
        data['serial_hashes']
    )
    return response_middleware.create_success_response(batch.to_dict(), 'Product batch registered', 201)


@product_bp.route('/batch', methods=['POST'])
@auth_middleware.token_required
def register_products():
    """Register several batches; each one succeeds or fails on its own"""
    data = request.get_json(silent=True)

    error = ProductValidator.validate_batch_registration_payload(data)
    if error:
        return response_middleware.create_error_response(error, 400)

    registry = get_registry()
    results = registry.register_products(g.caller, data['batches'])
    registered = sum(1 for r in results if r['success'])

    return response_middleware.create_success_response({
        'results': results,
        'registered': registered,
        'failed': len(results) - registered,
        'statistics': registry.get_statistics()
    }, f'{registered} of {len(results)} batches registered')

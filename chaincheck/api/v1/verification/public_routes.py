"""
Public Verification Routes
Anyone can verify; a bearer token only attributes the scan to a wallet
"""
from flask import Blueprint, request
import logging

from chaincheck.api.middleware.auth_middleware import auth_middleware
from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.extensions import get_registry
from chaincheck.security.rate_limiting import limiter, verify_rate_limit
from chaincheck.utils.crypto_utils import generate_serial_hash, normalize_commitment
from chaincheck.utils.qr_utils import parse_qr_payload
from chaincheck.validators.product_validator import ProductValidator

public_verification_bp = Blueprint('public_verification', __name__)
logger = logging.getLogger(__name__)


def _verification_result(serial_hash, batch_id, authentic):
    registry = get_registry()
    return {
        'authentic': authentic,
        'result': 'authentic' if authentic else 'counterfeit',
        'serial_hash': normalize_commitment(serial_hash),
        'batch_id': batch_id,
        'product': registry.get_product(batch_id).to_dict()
    }


@public_verification_bp.route('/verify', methods=['POST'])
@limiter.limit(verify_rate_limit)
@auth_middleware.optional_auth
def verify_product():
    """
    Verify a serial hash against its batch
    Body: serial_hash, batch_id
    """
    data = request.get_json(silent=True)

    error = ProductValidator.validate_verification_payload(data)
    if error:
        return response_middleware.create_error_response(error, 400)

    authentic = get_registry().verify(
        auth_middleware.current_caller(),
        data['serial_hash'],
        data['batch_id']
    )
    result = _verification_result(data['serial_hash'], int(data['batch_id']), authentic)
    message = 'Product is authentic' if authentic else 'Potential counterfeit detected'
    return response_middleware.create_success_response(result, message)


@public_verification_bp.route('/scan', methods=['POST'])
@limiter.limit(verify_rate_limit)
@auth_middleware.optional_auth
def scan_product():
    """
    Verify straight from scanned QR content
    Body: qr_data ("batchId:serialNumber" or JSON)
    """
    data = request.get_json(silent=True) or {}

    if not data.get('qr_data'):
        return response_middleware.create_error_response('qr_data is required', 400)

    payload = parse_qr_payload(data['qr_data'])
    serial_hash = generate_serial_hash(payload.batch_id, payload.serial_number)

    authentic = get_registry().verify(auth_middleware.current_caller(), serial_hash, payload.batch_id)
    result = _verification_result(serial_hash, payload.batch_id, authentic)
    result['qr_format'] = payload.format
    message = 'Product is authentic' if authentic else 'Potential counterfeit detected'
    return response_middleware.create_success_response(result, message)


@public_verification_bp.route('/serials/<serial_hash>', methods=['GET'])
def serial_status(serial_hash):
    return response_middleware.create_success_response({
        'serial_hash': serial_hash,
        'verified': get_registry().is_serial_verified(serial_hash)
    })

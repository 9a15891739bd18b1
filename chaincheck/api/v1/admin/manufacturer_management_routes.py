"""
Admin Manufacturer Management Routes
Owner-only authorization changes and ownership transfer, public lookups
"""
import logging

from flask import Blueprint, g, request

from chaincheck.api.middleware.auth_middleware import auth_middleware
from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.extensions import get_registry
from chaincheck.validators.product_validator import ProductValidator

admin_manufacturer_bp = Blueprint('admin_manufacturer', __name__)
logger = logging.getLogger(__name__)


@admin_manufacturer_bp.route('/manufacturers', methods=['POST'])
@auth_middleware.token_required
def set_manufacturer_authorization():
    """Authorize or revoke a manufacturer (owner only)"""
    data = request.get_json(silent=True)

    error = ProductValidator.validate_authorization_payload(data)
    if error:
        return response_middleware.create_error_response(error, 400)

    authorized = data.get('authorized', True)
    registry = get_registry()
    registry.set_manufacturer_authorization(g.caller, data['address'], authorized)

    return response_middleware.create_success_response(
        {'address': data['address'], 'authorized': registry.is_authorized(data['address'])},
        'Manufacturer authorized' if authorized else 'Manufacturer authorization revoked'
    )


@admin_manufacturer_bp.route('/manufacturers', methods=['GET'])
def list_manufacturers():
    manufacturers = get_registry().get_manufacturers()
    return response_middleware.create_success_response({
        'manufacturers': manufacturers,
        'count': len(manufacturers)
    })


@admin_manufacturer_bp.route('/manufacturers/<address>', methods=['GET'])
def get_manufacturer_status(address):
    return response_middleware.create_success_response({
        'address': address,
        'authorized': get_registry().is_authorized(address)
    })


@admin_manufacturer_bp.route('/owner', methods=['GET'])
def get_owner():
    return response_middleware.create_success_response({'owner': get_registry().owner()})


@admin_manufacturer_bp.route('/ownership', methods=['POST'])
@auth_middleware.token_required
def transfer_ownership():
    """Hand the administrator role to another address (owner only)"""
    data = request.get_json(silent=True) or {}

    if not data.get('new_owner'):
        return response_middleware.create_error_response('new_owner is required', 400)

    new_owner = get_registry().transfer_ownership(g.caller, data['new_owner'])
    return response_middleware.create_success_response(
        {'previous_owner': g.caller, 'owner': new_owner},
        'Ownership transferred'
    )

"""
Admin System Routes
Pause switch and data export
"""
import logging

from flask import Blueprint, g

from chaincheck.api.middleware.auth_middleware import auth_middleware
from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.extensions import get_registry

system_bp = Blueprint('admin_system', __name__)
logger = logging.getLogger(__name__)


@system_bp.route('/status', methods=['GET'])
def registry_status():
    registry = get_registry()
    return response_middleware.create_success_response({
        'owner': registry.owner(),
        'paused': registry.paused(),
        **registry.get_statistics()
    })


@system_bp.route('/pause', methods=['POST'])
@auth_middleware.token_required
def pause_registry():
    """Emergency stop: registration and verification are disabled"""
    get_registry().pause(g.caller)
    return response_middleware.create_success_response({'paused': True}, 'Registry paused')


@system_bp.route('/unpause', methods=['POST'])
@auth_middleware.token_required
def unpause_registry():
    get_registry().unpause(g.caller)
    return response_middleware.create_success_response({'paused': False}, 'Registry active')


@system_bp.route('/export', methods=['GET'])
@auth_middleware.token_required
def export_registry():
    """Full backup document (owner only)"""
    registry = get_registry()
    registry.access_control.require_owner(g.caller)
    return response_middleware.create_success_response(registry.export_snapshot(), 'Export complete')

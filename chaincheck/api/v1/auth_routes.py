"""
Auth Routes
Wallet sign-in: request a challenge, sign it, exchange it for a bearer token
"""
import logging

from flask import Blueprint, g, request

from chaincheck.api.middleware.auth_middleware import auth_middleware
from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.extensions import get_registry, get_wallet_auth
from chaincheck.security.rate_limiting import auth_rate_limit, limiter

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


@auth_bp.route('/challenge', methods=['POST'])
@limiter.limit(auth_rate_limit)
def create_challenge():
    """Issue a sign-in message for a wallet address"""
    data = request.get_json(silent=True) or {}

    if not data.get('address'):
        return response_middleware.create_error_response('address is required', 400)

    challenge = get_wallet_auth().create_challenge(data['address'])
    return response_middleware.create_success_response(challenge, 'Sign this message to log in')


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(auth_rate_limit)
def login():
    """Exchange a signed challenge for a token"""
    data = request.get_json(silent=True) or {}

    if not data.get('address') or not data.get('signature'):
        return response_middleware.create_error_response('address and signature are required', 400)

    result = get_wallet_auth().login(data['address'], data['signature'])
    return response_middleware.create_success_response(result, 'Login successful')


@auth_bp.route('/me', methods=['GET'])
@auth_middleware.token_required
def whoami():
    registry = get_registry()
    return response_middleware.create_success_response({
        'address': g.caller,
        'is_owner': g.caller == registry.owner(),
        'is_authorized_manufacturer': registry.is_authorized(g.caller)
    })

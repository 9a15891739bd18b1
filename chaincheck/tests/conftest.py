# tests/conftest.py
import os

import pytest
from eth_account import Account

os.environ['FLASK_ENV'] = 'testing'

from chaincheck import create_app
from chaincheck.registry import ChainCheckRegistry
from chaincheck.utils.crypto_utils import generate_serial_hash

TEST_JWT_SECRET = 'test-jwt-secret-key-with-enough-length-for-hs256'


@pytest.fixture
def owner():
    return Account.create()


@pytest.fixture
def manufacturer():
    return Account.create()


@pytest.fixture
def consumer():
    return Account.create()


@pytest.fixture
def registry(owner):
    """Fresh in-memory registry owned by the owner account"""
    return ChainCheckRegistry(owner.address)


@pytest.fixture
def authorized_registry(registry, owner, manufacturer):
    registry.set_manufacturer_authorization(owner.address, manufacturer.address, True)
    return registry


@pytest.fixture
def serial_hashes():
    """Commitments for SN001-SN003 of batch 1"""
    return [generate_serial_hash(1, f"SN00{i}") for i in range(1, 4)]


@pytest.fixture
def app(owner):
    """Create test app"""
    app = create_app({
        'TESTING': True,
        'STORE_BACKEND': 'memory',
        'RATELIMIT_ENABLED': False,
        'CHAINCHECK_OWNER_ADDRESS': owner.address,
        'JWT_SECRET_KEY': TEST_JWT_SECRET,
    })

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """Build authorization headers for an account"""
    def _headers(account):
        token = app.extensions['chaincheck_tokens'].generate_token(account.address)
        return {'Authorization': f'Bearer {token}'}
    return _headers

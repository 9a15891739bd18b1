# tests/unit/test_auth.py
from datetime import timedelta

import jwt
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from chaincheck.core.exceptions import AuthError, InvalidInput
from chaincheck.services.auth import TokenService, WalletAuthService
from chaincheck.store import MemoryRegistryStore

SECRET = 'unit-test-secret-key-long-enough-for-hs256'


def _sign(account, message):
    signed = Account.sign_message(encode_defunct(text=message), private_key=account.key)
    return Web3.to_hex(signed.signature)


def test_jwt_token_generation():
    """Test JWT token generation and verification"""
    tokens = TokenService(SECRET, 1)
    token = tokens.generate_token("0x742d35Cc6634C0532925a3b844Bc454e4438f44e")
    payload = tokens.verify_token(token)

    assert payload['sub'] == "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
    assert payload['exp'] > payload['iat']


def test_tampered_token_rejected():
    token = TokenService(SECRET).generate_token("0x742d35Cc6634C0532925a3b844Bc454e4438f44e")

    with pytest.raises(AuthError):
        TokenService('another-secret-key-long-enough-for-hs256').verify_token(token)
    with pytest.raises(AuthError):
        TokenService(SECRET).verify_token(token + 'x')


def test_expired_token_rejected():
    with pytest.raises(AuthError) as exc_info:
        TokenService(SECRET, -1).verify_token(TokenService(SECRET, -1).generate_token("0xabc"))
    assert str(exc_info.value) == "Token has expired"


def test_token_without_subject_rejected():
    token = jwt.encode({'iat': 0}, SECRET, algorithm='HS256')
    with pytest.raises(AuthError):
        TokenService(SECRET).verify_token(token)


def test_wallet_login_round_trip():
    account = Account.create()
    auth = WalletAuthService(TokenService(SECRET), MemoryRegistryStore())

    challenge = auth.create_challenge(account.address.lower())
    assert challenge['address'] == account.address
    assert challenge['nonce'] in challenge['message']

    result = auth.login(account.address, _sign(account, challenge['message']))

    assert result['address'] == account.address
    assert TokenService(SECRET).verify_token(result['token'])['sub'] == account.address


def test_challenge_is_single_use():
    account = Account.create()
    auth = WalletAuthService(TokenService(SECRET), MemoryRegistryStore())
    challenge = auth.create_challenge(account.address)
    signature = _sign(account, challenge['message'])

    auth.login(account.address, signature)
    with pytest.raises(AuthError):
        auth.login(account.address, signature)


def test_signature_from_other_wallet_rejected():
    account, impostor = Account.create(), Account.create()
    auth = WalletAuthService(TokenService(SECRET), MemoryRegistryStore())
    challenge = auth.create_challenge(account.address)

    with pytest.raises(AuthError) as exc_info:
        auth.login(account.address, _sign(impostor, challenge['message']))
    assert str(exc_info.value) == "Signature verification failed"


def test_malformed_signature_rejected():
    account = Account.create()
    auth = WalletAuthService(TokenService(SECRET), MemoryRegistryStore())
    auth.create_challenge(account.address)

    with pytest.raises(AuthError):
        auth.login(account.address, '0x1234')


def test_expired_challenge_rejected():
    account = Account.create()
    auth = WalletAuthService(TokenService(SECRET), MemoryRegistryStore())
    auth.challenge_ttl = timedelta(seconds=-1)
    challenge = auth.create_challenge(account.address)

    with pytest.raises(AuthError) as exc_info:
        auth.login(account.address, _sign(account, challenge['message']))
    assert str(exc_info.value) == "Challenge has expired"


def test_challenge_requires_valid_address():
    with pytest.raises(InvalidInput):
        WalletAuthService(TokenService(SECRET), MemoryRegistryStore()).create_challenge('not-an-address')


def test_expired_challenges_are_purged():
    """Abandoned challenges do not pile up"""
    store = MemoryRegistryStore()
    auth = WalletAuthService(TokenService(SECRET), store, challenge_ttl_seconds=0)

    for _ in range(50):
        auth.create_challenge(Account.create().address)

    assert len(store._challenges) == 1


def test_live_challenges_are_kept():
    store = MemoryRegistryStore()
    auth = WalletAuthService(TokenService(SECRET), store)
    accounts = [Account.create() for _ in range(3)]

    for account in accounts:
        auth.create_challenge(account.address)

    assert len(store._challenges) == 3


def test_challenge_survives_across_service_instances():
    """Workers sharing a store can finish each other's logins"""
    store = MemoryRegistryStore()
    account = Account.create()
    challenge = WalletAuthService(TokenService(SECRET), store).create_challenge(account.address)

    result = WalletAuthService(TokenService(SECRET), store).login(
        account.address, _sign(account, challenge['message'])
    )
    assert result['address'] == account.address

# services/auth/wallet_auth_service.py
"""
Wallet sign-in
The caller proves control of an address by personal-signing a server nonce
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from eth_account import Account
from eth_account.messages import encode_defunct

from chaincheck.core.exceptions import AuthError
from chaincheck.utils.input_validators import normalize_address

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')


def build_sign_in_message(address: str, nonce: str, issued_at: datetime) -> str:
    return f"""
Sign in to ChainCheck

Wallet: {address}
Nonce: {nonce}
Issued At: {issued_at.isoformat()}

By signing this message, you confirm ownership of this wallet address.
    """.strip()


class WalletAuthService:
    """Challenge/response login that ends in a bearer token"""

    def __init__(self, token_service, challenge_store, challenge_ttl_seconds: int = 300):
        """
        Args:
            token_service: Issues the bearer token after a good signature
            challenge_store: Registry store; keeps outstanding challenges so
                any worker sharing the store can complete the login
            challenge_ttl_seconds: Lifetime of a challenge
        """
        self.token_service = token_service
        self.challenges = challenge_store
        self.challenge_ttl = timedelta(seconds=challenge_ttl_seconds)

    def create_challenge(self, address: str) -> Dict[str, Any]:
        """
        Issue a one-time message for the wallet to sign
        
        A new challenge replaces any outstanding one for the same address.
        """
        address = normalize_address(address)
        issued_at = datetime.now(timezone.utc)
        nonce = secrets.token_hex(16)
        message = build_sign_in_message(address, nonce, issued_at)

        purged = self.challenges.purge_challenges(issued_at)
        if purged:
            logger.debug(f"Purged {purged} expired sign-in challenges")
        self.challenges.save_challenge(address, message, issued_at + self.challenge_ttl)

        return {
            'address': address,
            'message': message,
            'nonce': nonce,
            'expires_at': (issued_at + self.challenge_ttl).isoformat()
        }

    def login(self, address: str, signature: str) -> Dict[str, Any]:
        """
        Check a signed challenge and issue a token
        
        Raises:
            AuthError: No live challenge, or the signature belongs to another key
        """
        address = normalize_address(address)

        challenge = self.challenges.pop_challenge(address)

        if not challenge:
            raise AuthError("No pending challenge for this address")

        if datetime.now(timezone.utc) > challenge['expires_at']:
            raise AuthError("Challenge has expired")

        try:
            recovered = Account.recover_message(
                encode_defunct(text=challenge['message']),
                signature=signature
            )
        except Exception as e:
            security_logger.warning(f"Malformed signature for {address}: {e}")
            raise AuthError("Invalid signature")

        if recovered.lower() != address.lower():
            security_logger.warning(f"Signature mismatch for {address} (recovered {recovered})")
            raise AuthError("Signature verification failed")

        logger.info(f"Wallet {address} signed in")
        return {
            'address': address,
            'token': self.token_service.generate_token(address),
            'expires_in_hours': self.token_service.token_expiry_hours
        }

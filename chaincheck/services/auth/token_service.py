# services/auth/token_service.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from chaincheck.core.exceptions import AuthError

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and checks HS256 bearer tokens whose subject is a wallet address"""

    def __init__(self, secret_key: str, token_expiry_hours: int = 8):
        self.secret_key = secret_key
        self.token_expiry_hours = token_expiry_hours

    def generate_token(self, address: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': address,
            'iat': now,
            'exp': now + timedelta(hours=self.token_expiry_hours)
        }
        return jwt.encode(payload, self.secret_key, algorithm='HS256')

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Decode a bearer token
        
        Raises:
            AuthError: If the token is expired, tampered with or has no subject
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=['HS256'])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token")

        if not payload.get('sub'):
            raise AuthError("Invalid token payload")
        return payload

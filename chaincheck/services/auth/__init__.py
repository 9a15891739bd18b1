"""
Auth Services Module
"""

from .token_service import TokenService
from .wallet_auth_service import WalletAuthService, build_sign_in_message

__all__ = ['TokenService', 'WalletAuthService', 'build_sign_in_message']

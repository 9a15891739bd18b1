# utils/input_validators.py
"""
Pure Input Validation Utilities
Low-level validation functions with no business logic
"""

import re
from typing import Any, Optional

from web3 import Web3

from chaincheck.core.exceptions import InvalidInput

ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'
MAX_BATCH_ID = 2 ** 256 - 1


def is_valid_ethereum_address(address: str) -> bool:
    """
    Check if Ethereum address format is valid
    
    Args:
        address: Ethereum wallet address
        
    Returns:
        True if valid, False otherwise
    """
    if not address or not isinstance(address, str):
        return False
    
    # Ethereum address pattern: 0x followed by 40 hexadecimal characters
    pattern = r'^0x[a-fA-F0-9]{40}$'
    if re.match(pattern, address.strip()) is None:
        return False

    # Mixed case must carry a valid EIP-55 checksum
    return Web3.is_address(address.strip())


def normalize_address(address: Any, allow_zero: bool = False) -> str:
    """
    Validate an identity and return its checksummed form
    
    Raises:
        InvalidInput: If the address is malformed, or is the zero
            address and allow_zero is False
    """
    if not isinstance(address, str) or not is_valid_ethereum_address(address):
        raise InvalidInput(f"Invalid address: {address!r}")

    checksummed = Web3.to_checksum_address(address.strip())
    if not allow_zero and checksummed == ZERO_ADDRESS:
        raise InvalidInput("Zero address is not a valid identity")
    return checksummed


def to_identity(address: Any) -> Optional[str]:
    """Checksummed address, or None when the value is not an address"""
    if not is_valid_ethereum_address(address):
        return None
    return Web3.to_checksum_address(address.strip())


def validate_batch_id(batch_id: Any, max_value: int = MAX_BATCH_ID) -> int:
    """
    Validate a batch id
    
    Accepts positive integers and decimal strings of positive integers,
    up to max_value (the storage backend may hold fewer bits than uint256).
    
    Raises:
        InvalidInput: For zero, negative, boolean or non-numeric ids
    """
    if isinstance(batch_id, bool):
        raise InvalidInput("Invalid batch ID")

    if isinstance(batch_id, str):
        if not re.match(r'^\d+$', batch_id.strip()):
            raise InvalidInput("Invalid batch ID")
        batch_id = int(batch_id.strip())

    if not isinstance(batch_id, int) or batch_id <= 0 or batch_id > max_value:
        raise InvalidInput("Invalid batch ID")

    return batch_id


def validate_text(value: Any, field_name: str, max_length: int = 256) -> str:
    """Non-empty text field"""
    if not isinstance(value, str) or not value:
        raise InvalidInput(f"{field_name} required")
    if len(value) > max_length:
        raise InvalidInput(f"{field_name} cannot exceed {max_length} characters")
    return value

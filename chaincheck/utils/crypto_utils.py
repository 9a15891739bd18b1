# utils/crypto_utils.py
"""
Serial number commitments

A commitment is keccak256(abi.encode(uint256 batchId, string serialNumber)),
the same construction the manufacturer tooling and the scanning client use.
The registry itself only ever sees commitments.
"""

import re
from typing import Any

from eth_abi import encode
from web3 import Web3

from chaincheck.core.exceptions import InvalidInput

COMMITMENT_LENGTH = 32
COMMITMENT_PATTERN = re.compile(r'^(0x)?[0-9a-fA-F]{64}$')


def generate_serial_hash(batch_id: int, serial_number: str) -> str:
    """
    Compute the commitment for one serialized unit
    
    Args:
        batch_id: Batch the unit belongs to
        serial_number: Plaintext serial printed on the unit
        
    Returns:
        0x-prefixed lowercase hex of the 32-byte keccak256 digest
    """
    encoded = encode(['uint256', 'string'], [int(batch_id), serial_number])
    return Web3.to_hex(Web3.keccak(encoded))


def normalize_commitment(commitment: Any) -> str:
    """
    Canonical form of a commitment: 0x-prefixed lowercase hex
    
    Accepts raw 32-byte values and hex strings with or without the 0x prefix.
    
    Raises:
        InvalidInput: If the value is not a 32-byte commitment
    """
    if isinstance(commitment, (bytes, bytearray)):
        if len(commitment) != COMMITMENT_LENGTH:
            raise InvalidInput("Serial hash must be 32 bytes")
        return Web3.to_hex(bytes(commitment))

    if not isinstance(commitment, str) or not COMMITMENT_PATTERN.match(commitment.strip()):
        raise InvalidInput("Serial hash must be 32 bytes of hex")

    value = commitment.strip().lower()
    if not value.startswith('0x'):
        value = '0x' + value
    return value

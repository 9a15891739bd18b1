# tests/unit/test_utils.py
import pytest
from eth_abi import encode
from web3 import Web3

from chaincheck.core.exceptions import InvalidInput
from chaincheck.utils.crypto_utils import generate_serial_hash, normalize_commitment
from chaincheck.utils.input_validators import (
    ZERO_ADDRESS, is_valid_ethereum_address, normalize_address, validate_batch_id, validate_text
)
from chaincheck.utils.qr_utils import parse_qr_payload


def test_serial_hash_matches_abi_encoding():
    """Commitment is keccak256 over abi.encode(uint256, string)"""
    expected = Web3.keccak(encode(['uint256', 'string'], [1, "SN123456789"])).hex()

    serial_hash = generate_serial_hash(1, "SN123456789")
    assert serial_hash.lower().endswith(expected.lower()[-64:])
    assert len(serial_hash) == 66
    assert serial_hash.startswith('0x')


def test_serial_hash_depends_on_batch():
    assert generate_serial_hash(1, "SN001") == generate_serial_hash(1, "SN001")
    assert generate_serial_hash(1, "SN001") != generate_serial_hash(2, "SN001")
    assert generate_serial_hash(1, "SN001") != generate_serial_hash(1, "SN002")


def test_normalize_commitment_forms():
    serial_hash = generate_serial_hash(3, "X")

    assert normalize_commitment(serial_hash.upper().replace('0X', '0x')) == serial_hash
    assert normalize_commitment(serial_hash[2:]) == serial_hash
    assert normalize_commitment(bytes.fromhex(serial_hash[2:])) == serial_hash


@pytest.mark.parametrize('value', ['0x1234', 'zz' * 32, b'\x00' * 31, None, 123])
def test_normalize_commitment_rejects(value):
    with pytest.raises(InvalidInput):
        normalize_commitment(value)


def test_address_validation():
    assert is_valid_ethereum_address('0x742d35Cc6634C0532925a3b844Bc454e4438f44e') == True
    assert is_valid_ethereum_address('0x742d35cc6634c0532925a3b844bc454e4438f44e') == True
    assert is_valid_ethereum_address('0x742d35Cc6634C0532925a3b844Bc454e4438f44') == False
    assert is_valid_ethereum_address('742d35Cc6634C0532925a3b844Bc454e4438f44e') == False
    assert is_valid_ethereum_address(None) == False


def test_normalize_address():
    lower = '0x742d35cc6634c0532925a3b844bc454e4438f44e'
    assert normalize_address(lower) == Web3.to_checksum_address(lower)
    assert normalize_address(ZERO_ADDRESS, allow_zero=True) == ZERO_ADDRESS

    with pytest.raises(InvalidInput):
        normalize_address(ZERO_ADDRESS)
    with pytest.raises(InvalidInput):
        normalize_address('0x123')


def test_validate_batch_id():
    assert validate_batch_id(5) == 5
    assert validate_batch_id("42") == 42
    assert validate_batch_id(2 ** 256 - 1) == 2 ** 256 - 1

    for bad in (0, -1, True, "abc", "1.5", None, 2 ** 256):
        with pytest.raises(InvalidInput):
            validate_batch_id(bad)


def test_validate_batch_id_backend_limit():
    assert validate_batch_id(2 ** 63 - 1, 2 ** 63 - 1) == 2 ** 63 - 1

    with pytest.raises(InvalidInput):
        validate_batch_id(2 ** 63, 2 ** 63 - 1)
    with pytest.raises(InvalidInput):
        validate_batch_id(str(2 ** 64), 2 ** 63 - 1)


def test_validate_text():
    assert validate_text("Nike", "brand") == "Nike"

    with pytest.raises(InvalidInput) as exc_info:
        validate_text("", "brand")
    assert exc_info.value.message == "brand required"

    with pytest.raises(InvalidInput):
        validate_text("x" * 257, "name")


def test_parse_colon_qr():
    payload = parse_qr_payload(" 12:SN-0001 ")

    assert payload.batch_id == 12
    assert payload.serial_number == "SN-0001"
    assert payload.format == 'colon'


def test_parse_json_qr():
    payload = parse_qr_payload('{"batchId": "7", "serialNumber": "ABC"}')

    assert payload.batch_id == 7
    assert payload.serial_number == "ABC"
    assert payload.format == 'json'


@pytest.mark.parametrize('qr_data, message', [
    ('', "Invalid QR code data"),
    ('{not json}', "Invalid JSON format"),
    ('{"batchId": 1}', "Missing batchId or serialNumber in JSON"),
    ('abc:SN1', "Invalid batch ID format"),
    ('0:SN1', "Invalid batch ID format"),
    ('5:', "Serial number is required"),
    ('just-text', "QR code format not recognized. Expected format: 'batchId:serialNumber' or JSON"),
])
def test_parse_qr_rejects(qr_data, message):
    with pytest.raises(InvalidInput) as exc_info:
        parse_qr_payload(qr_data)
    assert exc_info.value.message == message

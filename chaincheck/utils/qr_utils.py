# utils/qr_utils.py
"""
QR payload parsing

Printed codes carry either "batchId:serialNumber" or
{"batchId": ..., "serialNumber": ...}.
"""

import json
from dataclasses import dataclass

from chaincheck.core.exceptions import InvalidInput


@dataclass
class QRPayload:
    batch_id: int
    serial_number: str
    format: str


def _parse_batch_id(value) -> int:
    if isinstance(value, bool):
        raise InvalidInput("Invalid batch ID format")
    try:
        batch_id = int(value)
    except (TypeError, ValueError):
        raise InvalidInput("Invalid batch ID format")
    if batch_id <= 0:
        raise InvalidInput("Invalid batch ID format")
    return batch_id


def parse_qr_payload(qr_data: str) -> QRPayload:
    """
    Parse scanned QR content into batch id and serial number
    
    Raises:
        InvalidInput: If the content matches neither format
    """
    if not qr_data or not isinstance(qr_data, str):
        raise InvalidInput("Invalid QR code data")

    trimmed = qr_data.strip()

    if trimmed.startswith('{') and trimmed.endswith('}'):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            raise InvalidInput("Invalid JSON format")

        if not isinstance(parsed, dict) or not parsed.get('batchId') or not parsed.get('serialNumber'):
            raise InvalidInput("Missing batchId or serialNumber in JSON")

        serial_number = str(parsed['serialNumber']).strip()
        if not serial_number:
            raise InvalidInput("Serial number is required in JSON")

        return QRPayload(_parse_batch_id(parsed['batchId']), serial_number, 'json')

    parts = trimmed.split(':')
    if len(parts) == 2:
        batch_id = _parse_batch_id(parts[0].strip())
        serial_number = parts[1].strip()
        if not serial_number:
            raise InvalidInput("Serial number is required")
        return QRPayload(batch_id, serial_number, 'colon')

    raise InvalidInput(
        "QR code format not recognized. Expected format: 'batchId:serialNumber' or JSON"
    )

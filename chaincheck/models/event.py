# models/event.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict


class EventType(Enum):
    MANUFACTURER_AUTHORIZED = "ManufacturerAuthorized"
    PRODUCT_REGISTERED = "ProductRegistered"
    VERIFIED = "Verified"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
    PAUSED = "Paused"
    UNPAUSED = "Unpaused"


@dataclass(frozen=True)
class Event:
    """Notification recorded by the registry, numbered in emission order"""
    sequence: int
    name: EventType
    args: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sequence': self.sequence,
            'event': self.name.value,
            'args': dict(self.args),
            'timestamp': self.timestamp.isoformat(),
        }

    def to_document(self) -> Dict[str, Any]:
        return {
            'sequence': self.sequence,
            'name': self.name.value,
            'args': dict(self.args),
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Event':
        timestamp = doc['timestamp']
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            sequence=int(doc['sequence']),
            name=EventType(doc['name']),
            args=dict(doc.get('args', {})),
            timestamp=timestamp,
        )

# models/batch.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional


@dataclass(frozen=True)
class Batch:
    """One registered production run and its serial commitments"""
    batch_id: int
    name: str = ""
    brand: str = ""
    serial_commitments: FrozenSet[str] = field(default_factory=frozenset)
    registered_at: Optional[datetime] = None
    exists: bool = False
    manufacturer: Optional[str] = None

    @classmethod
    def empty(cls, batch_id: int = 0) -> 'Batch':
        """Placeholder returned for a batch id that was never registered"""
        return cls(batch_id=batch_id)

    @property
    def serial_count(self) -> int:
        return len(self.serial_commitments)

    def has_commitment(self, commitment: str) -> bool:
        return commitment in self.serial_commitments

    def to_dict(self, include_commitments: bool = False) -> Dict[str, Any]:
        data = {
            'batch_id': self.batch_id,
            'name': self.name,
            'brand': self.brand,
            'exists': self.exists,
            'registered_at': self.registered_at.isoformat() if self.registered_at else None,
            'serial_count': self.serial_count,
            'manufacturer': self.manufacturer,
        }
        if include_commitments:
            data['serial_commitments'] = sorted(self.serial_commitments)
        return data

    def to_document(self) -> Dict[str, Any]:
        """MongoDB document, keyed by batch id"""
        return {
            '_id': self.batch_id,
            'name': self.name,
            'brand': self.brand,
            'serial_commitments': sorted(self.serial_commitments),
            'registered_at': self.registered_at,
            'manufacturer': self.manufacturer,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Batch':
        registered_at = doc.get('registered_at')
        # pymongo hands back naive datetimes unless the client is tz-aware
        if registered_at is not None and registered_at.tzinfo is None:
            registered_at = registered_at.replace(tzinfo=timezone.utc)

        return cls(
            batch_id=int(doc['_id']),
            name=doc.get('name', ''),
            brand=doc.get('brand', ''),
            serial_commitments=frozenset(doc.get('serial_commitments', [])),
            registered_at=registered_at,
            exists=True,
            manufacturer=doc.get('manufacturer'),
        )

# registry.py
"""
ChainCheck registry facade

Direct-library realization of the registry surface. Mutating calls take
the caller identity as their first argument.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from chaincheck.models import Batch, Event
from chaincheck.services.access_control_service import AccessControlService
from chaincheck.services.event_service import EventService
from chaincheck.services.product_service import ProductService
from chaincheck.services.verification_service import VerificationService
from chaincheck.store import MemoryRegistryStore

logger = logging.getLogger(__name__)


class ChainCheckRegistry:
    """Manufacturer authorization, batch registry and one-shot verification"""

    def __init__(self, owner: str, store=None, max_serials_per_batch: Optional[int] = None):
        self.store = store if store is not None else MemoryRegistryStore()
        self.events = EventService(self.store)
        self.access_control = AccessControlService(self.store, self.events)
        self.products = ProductService(
            self.store, self.access_control, self.events, max_serials_per_batch
        )
        self.verification = VerificationService(self.store, self.access_control, self.events)

        self.access_control.initialize(owner)

    # Access control

    def owner(self) -> str:
        return self.access_control.get_owner()

    def set_manufacturer_authorization(self, caller: str, identity: str, authorized: bool) -> None:
        self.access_control.set_manufacturer_authorization(caller, identity, authorized)

    def is_authorized(self, identity: str) -> bool:
        return self.access_control.is_authorized(identity)

    def get_manufacturers(self) -> List[str]:
        return self.access_control.get_manufacturers()

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        return self.access_control.transfer_ownership(caller, new_owner)

    def pause(self, caller: str) -> None:
        self.access_control.pause(caller)

    def unpause(self, caller: str) -> None:
        self.access_control.unpause(caller)

    def paused(self) -> bool:
        return self.access_control.is_paused()

    # Batch registry

    def register_product(self, caller: str, batch_id: int, name: str, brand: str,
                         serial_commitments: Iterable[Any]) -> Batch:
        return self.products.register_product(caller, batch_id, name, brand, serial_commitments)

    def register_products(self, caller: str, batches: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self.products.register_products(caller, batches)

    def get_product(self, batch_id: Any) -> Batch:
        return self.products.get_product(batch_id)

    # Verification

    def verify(self, caller: Optional[str], serial_hash: Any, batch_id: Any) -> bool:
        return self.verification.verify(caller, serial_hash, batch_id)

    def is_serial_verified(self, serial_hash: Any) -> bool:
        return self.verification.is_serial_verified(serial_hash)

    # Counters & events

    def total_products(self) -> int:
        return self.events.total_products()

    def total_verifications(self) -> int:
        return self.events.total_verifications()

    def get_statistics(self) -> Dict[str, int]:
        return {
            'total_products': self.total_products(),
            'total_verifications': self.total_verifications(),
            'total_manufacturers': len(self.get_manufacturers()),
        }

    def query_events(self, name=None, from_sequence: int = 1,
                     to_sequence: Optional[int] = None) -> List[Event]:
        return self.events.query_events(name, from_sequence, to_sequence)

    def export_snapshot(self) -> Dict[str, Any]:
        """Consistent JSON-serializable backup of the whole registry"""
        with self.store.transaction():
            snapshot = {
                'timestamp': datetime.now(timezone.utc).isoformat(),
                'data': {
                    'owner': self.owner(),
                    'paused': self.paused(),
                    'authorized_manufacturers': self.get_manufacturers(),
                    'product_batches': [
                        batch.to_dict(include_commitments=True)
                        for batch in self.products.list_products()
                    ],
                    'verified_serials': self.store.list_consumed(),
                    'statistics': self.get_statistics(),
                }
            }

        data = snapshot['data']
        logger.info(
            f"Snapshot exported: {len(data['authorized_manufacturers'])} manufacturers, "
            f"{len(data['product_batches'])} batches, {len(data['verified_serials'])} verifications"
        )
        return snapshot

# services/product_service.py
"""
Product Service
Batch registration and lookup
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from chaincheck.core.exceptions import ChainCheckError, Conflict, InvalidInput
from chaincheck.models import Batch, EventType
from chaincheck.utils.crypto_utils import normalize_commitment
from chaincheck.utils.input_validators import validate_batch_id, validate_text

logger = logging.getLogger(__name__)


class ProductService:
    """Stores batches and their serial commitments"""

    def __init__(self, store, access_control, events, max_serials_per_batch: Optional[int] = None):
        self.store = store
        self.access_control = access_control
        self.events = events
        self.max_serials_per_batch = max_serials_per_batch

    def register_product(self, caller: str, batch_id: int, name: str, brand: str,
                         serial_commitments: Iterable[Any]) -> Batch:
        """
        Register one batch atomically
        
        Every check runs before anything is written, in this order:
        paused, caller authorization, batch id, name, brand, commitments,
        batch size cap, duplicate id.
        
        Args:
            caller: Registering manufacturer
            batch_id: Positive, caller-chosen id
            name: Product name
            brand: Product brand
            serial_commitments: 32-byte commitments of the units in the batch
            
        Returns:
            The stored Batch
        """
        with self.store.transaction():
            self.access_control.require_not_paused()
            manufacturer = self.access_control.require_manufacturer(caller)

            batch_id = validate_batch_id(batch_id, self.store.max_batch_id)
            name = validate_text(name, "name")
            brand = validate_text(brand, "brand")
            commitments = self._normalize_commitments(serial_commitments)

            if self.store.get_batch(batch_id) is not None:
                raise Conflict("batch already exists")

            batch = Batch(
                batch_id=batch_id,
                name=name,
                brand=brand,
                serial_commitments=commitments,
                registered_at=datetime.now(timezone.utc),
                exists=True,
                manufacturer=manufacturer
            )

            # A concurrent writer on a shared store can still win the id
            if not self.store.insert_batch(batch):
                raise Conflict("batch already exists")

            self.events.record_product_registered()
            self.events.emit(
                EventType.PRODUCT_REGISTERED,
                batch_id=batch_id,
                name=name,
                brand=brand,
                serial_count=batch.serial_count
            )

        logger.info(f"Batch {batch_id} registered by {manufacturer} with {batch.serial_count} serials")
        return batch

    def register_products(self, caller: str, batches: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Register several batches, each in its own transaction
        
        A failing batch does not stop the ones after it.
        
        Returns:
            One result per input: batch_id, success, error
        """
        if not isinstance(batches, list) or not batches:
            raise InvalidInput("batches required")

        results = []
        for entry in batches:
            entry = entry if isinstance(entry, dict) else {}
            batch_id = entry.get('batch_id')
            try:
                self.register_product(
                    caller,
                    batch_id,
                    entry.get('name'),
                    entry.get('brand'),
                    entry.get('serial_hashes') or []
                )
                results.append({'batch_id': batch_id, 'success': True, 'error': None})
            except ChainCheckError as e:
                logger.warning(f"Failed to register batch {batch_id}: {e.message}")
                results.append({
                    'batch_id': batch_id,
                    'success': False,
                    'error': e.message,
                    'error_type': type(e).__name__
                })
        return results

    def get_product(self, batch_id: Any) -> Batch:
        """Stored batch, or a placeholder with exists=False; never fails"""
        try:
            batch_id = validate_batch_id(batch_id, self.store.max_batch_id)
        except InvalidInput:
            return Batch.empty(batch_id if isinstance(batch_id, int) and not isinstance(batch_id, bool) else 0)

        batch = self.store.get_batch(batch_id)
        return batch if batch is not None else Batch.empty(batch_id)

    def list_products(self) -> List[Batch]:
        return self.store.list_batches()

    def _normalize_commitments(self, serial_commitments: Iterable[Any]) -> frozenset:
        if serial_commitments is None or isinstance(serial_commitments, (str, bytes)):
            raise InvalidInput("serials required")

        commitments = [normalize_commitment(c) for c in serial_commitments]
        if not commitments:
            raise InvalidInput("serials required")

        if self.max_serials_per_batch and len(commitments) > self.max_serials_per_batch:
            raise InvalidInput(f"batch exceeds {self.max_serials_per_batch} serials")

        return frozenset(commitments)

# services/verification_service.py
"""
Verification Service
One-shot authenticity check: the first presentation of a serial hash
is authentic, every later one is counterfeit
"""

import logging
from typing import Any, Optional

from chaincheck.core.exceptions import InvalidInput, NotFound
from chaincheck.models import EventType
from chaincheck.utils.crypto_utils import normalize_commitment
from chaincheck.utils.input_validators import ZERO_ADDRESS, normalize_address, validate_batch_id

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')


class VerificationService:
    """Consumes serial commitments on their first authentic verification"""

    def __init__(self, store, access_control, events):
        self.store = store
        self.access_control = access_control
        self.events = events

    def verify(self, caller: Optional[str], serial_hash: Any, batch_id: Any) -> bool:
        """
        Verify a unit and consume its serial hash
        
        A hash that is not part of the batch and a hash that was already
        consumed produce the same False result and the same event.
        
        Args:
            caller: Verifying identity, None for an anonymous scan
            serial_hash: 32-byte commitment of the unit
            batch_id: Batch the unit claims to belong to
            
        Returns:
            True for the first authentic presentation, False otherwise
            
        Raises:
            RegistryPaused: If the registry is paused
            InvalidInput: For a bad batch id, hash or caller
            NotFound: If the batch was never registered
        """
        with self.store.transaction():
            self.access_control.require_not_paused()
            batch_id = validate_batch_id(batch_id, self.store.max_batch_id)
            serial_hash = normalize_commitment(serial_hash)
            verifier = normalize_address(caller, allow_zero=True) if caller else ZERO_ADDRESS

            batch = self.store.get_batch(batch_id)
            if batch is None:
                raise NotFound("product batch not found")

            authentic = batch.has_commitment(serial_hash) and self.store.mark_consumed(serial_hash, batch_id)

            self.events.record_verification(authentic)
            self.events.emit(
                EventType.VERIFIED,
                serial_hash=serial_hash,
                batch_id=batch_id,
                is_authentic=authentic,
                verifier=verifier
            )

        if authentic:
            logger.info(f"Authentic: {serial_hash[:10]}... batch {batch_id} verified by {verifier}")
        else:
            security_logger.warning(f"Potential counterfeit: {serial_hash[:10]}... batch {batch_id} by {verifier}")
        return authentic

    def is_serial_verified(self, serial_hash: Any) -> bool:
        """Current consumed state, read-only; malformed hashes read as False"""
        try:
            serial_hash = normalize_commitment(serial_hash)
        except InvalidInput:
            return False
        return self.store.is_consumed(serial_hash)

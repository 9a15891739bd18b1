# store/memory_store.py
"""
In-memory authoritative store
One re-entrant lock serializes every registry transaction
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from chaincheck.models import Batch, Event, EventType
from chaincheck.store.journal import JournaledStore
from chaincheck.utils.input_validators import MAX_BATCH_ID

logger = logging.getLogger(__name__)


class MemoryRegistryStore(JournaledStore):
    """Process-local store; state lives as long as the instance"""

    max_batch_id = MAX_BATCH_ID

    def __init__(self):
        super().__init__()
        self._owner: Optional[str] = None
        self._paused = False
        self._counters: Dict[str, int] = {}
        self._manufacturers: Dict[str, bool] = {}
        self._batches: Dict[int, Batch] = {}
        self._verified: Dict[str, datetime] = {}
        self._events: List[Event] = []
        self._challenges: Dict[str, Dict[str, Any]] = {}

    # Registry state

    def get_owner(self) -> Optional[str]:
        return self._owner

    def set_owner(self, owner: str) -> None:
        with self._lock:
            previous = self._owner
            self._owner = owner
            self._record_undo(lambda: setattr(self, '_owner', previous))

    def is_paused(self) -> bool:
        return self._paused

    def set_paused(self, paused: bool) -> None:
        with self._lock:
            previous = self._paused
            self._paused = paused
            self._record_undo(lambda: setattr(self, '_paused', previous))

    # Manufacturer authorization

    def get_authorization(self, address: str) -> bool:
        return self._manufacturers.get(address, False)

    def set_authorization(self, address: str, authorized: bool) -> None:
        with self._lock:
            if address in self._manufacturers:
                previous = self._manufacturers[address]
                self._record_undo(lambda: self._manufacturers.__setitem__(address, previous))
            else:
                self._record_undo(lambda: self._manufacturers.pop(address, None))
            self._manufacturers[address] = authorized

    def list_authorizations(self) -> Dict[str, bool]:
        """Every identity ever set, in first-set order"""
        with self._lock:
            return dict(self._manufacturers)

    # Batches

    def get_batch(self, batch_id: int) -> Optional[Batch]:
        return self._batches.get(batch_id)

    def insert_batch(self, batch: Batch) -> bool:
        """Insert unless the id is taken; False means the id already exists"""
        with self._lock:
            if batch.batch_id in self._batches:
                return False
            self._batches[batch.batch_id] = batch
            self._record_undo(lambda: self._batches.pop(batch.batch_id, None))
            return True

    def list_batches(self) -> List[Batch]:
        with self._lock:
            return [self._batches[key] for key in sorted(self._batches)]

    # Verification records

    def is_consumed(self, commitment: str) -> bool:
        return commitment in self._verified

    def mark_consumed(self, commitment: str, batch_id: int) -> bool:
        """Compare-and-set; True only for the call that flips the record"""
        with self._lock:
            if commitment in self._verified:
                return False
            self._verified[commitment] = datetime.now(timezone.utc)
            self._record_undo(lambda: self._verified.pop(commitment, None))
            return True

    def list_consumed(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {'serial_hash': commitment, 'verified_at': verified_at.isoformat()}
                for commitment, verified_at in self._verified.items()
            ]

    # Counters

    def increment_counter(self, name: str) -> int:
        with self._lock:
            previous = self._counters.get(name, 0)
            self._counters[name] = previous + 1
            self._record_undo(lambda: self._counters.__setitem__(name, previous))
            return self._counters[name]

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    # Events

    def append_event(self, name: EventType, args: Dict[str, Any]) -> Event:
        with self._lock:
            event = Event(sequence=len(self._events) + 1, name=name, args=dict(args))
            self._events.append(event)
            self._record_undo(lambda: self._events.remove(event))
            return event

    def list_events(self, name: Optional[EventType] = None, from_sequence: int = 1,
                    to_sequence: Optional[int] = None) -> List[Event]:
        with self._lock:
            return [
                event for event in self._events
                if (name is None or event.name == name)
                and event.sequence >= from_sequence
                and (to_sequence is None or event.sequence <= to_sequence)
            ]

    # Sign-in challenges

    def save_challenge(self, address: str, message: str, expires_at: datetime) -> None:
        with self._lock:
            self._challenges[address] = {'message': message, 'expires_at': expires_at}

    def pop_challenge(self, address: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._challenges.pop(address, None)

    def purge_challenges(self, now: datetime) -> int:
        with self._lock:
            expired = [a for a, c in self._challenges.items() if c['expires_at'] <= now]
            for address in expired:
                del self._challenges[address]
            return len(expired)

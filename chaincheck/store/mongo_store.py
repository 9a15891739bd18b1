# store/mongo_store.py
"""
MongoDB-backed authoritative store

Atomicity comes from per-key primitives rather than a global lock:
unique _id inserts for batches and consumed serials, $inc for counters
and event sequence numbers. The local lock only orders transactions
issued from this process; a failed transaction is undone with
compensating writes from the journal.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from chaincheck.models import Batch, Event, EventType
from chaincheck.store.journal import JournaledStore

logger = logging.getLogger(__name__)

STATE_ID = 'registry'

# BSON integers are signed 64-bit
MONGO_MAX_BATCH_ID = 2 ** 63 - 1


class MongoRegistryStore(JournaledStore):
    """Store backed by a pymongo Database"""

    max_batch_id = MONGO_MAX_BATCH_ID

    def __init__(self, db):
        super().__init__()
        self.db = db
        self._ensure_indexes()

    def _ensure_indexes(self):
        try:
            self.db.events.create_index([('sequence', ASCENDING)], unique=True)
            self.db.events.create_index([('name', ASCENDING)])
            self.db.manufacturers.create_index([('first_authorized_at', ASCENDING)])
            # Mongo drops expired sign-in challenges on its own
            self.db.auth_challenges.create_index([('expires_at', ASCENDING)], expireAfterSeconds=0)
        except Exception as e:
            logger.error(f"Failed to create registry indexes: {e}")
            raise

    def _state(self) -> Dict[str, Any]:
        return self.db.registry_state.find_one({'_id': STATE_ID}) or {}

    def _set_state(self, **fields) -> None:
        self.db.registry_state.update_one(
            {'_id': STATE_ID},
            {'$set': fields},
            upsert=True
        )

    # Registry state

    def get_owner(self) -> Optional[str]:
        return self._state().get('owner')

    def set_owner(self, owner: str) -> None:
        previous = self.get_owner()
        self._set_state(owner=owner)
        self._record_undo(lambda: self._set_state(owner=previous))

    def is_paused(self) -> bool:
        return bool(self._state().get('paused', False))

    def set_paused(self, paused: bool) -> None:
        previous = self.is_paused()
        self._set_state(paused=paused)
        self._record_undo(lambda: self._set_state(paused=previous))

    # Manufacturer authorization

    def get_authorization(self, address: str) -> bool:
        doc = self.db.manufacturers.find_one({'_id': address})
        return bool(doc and doc.get('authorized'))

    def set_authorization(self, address: str, authorized: bool) -> None:
        previous = self.db.manufacturers.find_one({'_id': address})
        now = datetime.now(timezone.utc)
        self.db.manufacturers.update_one(
            {'_id': address},
            {
                '$set': {'authorized': authorized, 'updated_at': now},
                '$setOnInsert': {'first_authorized_at': now}
            },
            upsert=True
        )

        if previous is None:
            self._record_undo(lambda: self.db.manufacturers.delete_one({'_id': address}))
        else:
            self._record_undo(lambda: self.db.manufacturers.update_one(
                {'_id': address},
                {'$set': {'authorized': previous.get('authorized'), 'updated_at': previous.get('updated_at')}}
            ))

    def list_authorizations(self) -> Dict[str, bool]:
        cursor = self.db.manufacturers.find().sort('first_authorized_at', ASCENDING)
        return {doc['_id']: bool(doc.get('authorized')) for doc in cursor}

    # Batches

    def get_batch(self, batch_id: int) -> Optional[Batch]:
        if batch_id > self.max_batch_id:
            return None
        doc = self.db.batches.find_one({'_id': batch_id})
        return Batch.from_document(doc) if doc else None

    def insert_batch(self, batch: Batch) -> bool:
        try:
            self.db.batches.insert_one(batch.to_document())
        except DuplicateKeyError:
            logger.info(f"Batch {batch.batch_id} already exists")
            return False
        self._record_undo(lambda: self.db.batches.delete_one({'_id': batch.batch_id}))
        return True

    def list_batches(self) -> List[Batch]:
        return [Batch.from_document(doc) for doc in self.db.batches.find().sort('_id', ASCENDING)]

    # Verification records

    def is_consumed(self, commitment: str) -> bool:
        return self.db.verified_serials.find_one({'_id': commitment}) is not None

    def mark_consumed(self, commitment: str, batch_id: int) -> bool:
        try:
            self.db.verified_serials.insert_one({
                '_id': commitment,
                'batch_id': batch_id,
                'verified_at': datetime.now(timezone.utc)
            })
        except DuplicateKeyError:
            return False
        self._record_undo(lambda: self.db.verified_serials.delete_one({'_id': commitment}))
        return True

    def list_consumed(self) -> List[Dict[str, Any]]:
        records = []
        for doc in self.db.verified_serials.find().sort('verified_at', ASCENDING):
            verified_at = doc['verified_at']
            if verified_at.tzinfo is None:
                verified_at = verified_at.replace(tzinfo=timezone.utc)
            records.append({'serial_hash': doc['_id'], 'verified_at': verified_at.isoformat()})
        return records

    # Counters

    def increment_counter(self, name: str) -> int:
        doc = self.db.registry_state.find_one_and_update(
            {'_id': STATE_ID},
            {'$inc': {name: 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        self._record_undo(lambda: self.db.registry_state.update_one(
            {'_id': STATE_ID}, {'$inc': {name: -1}}
        ))
        return int(doc[name])

    def get_counter(self, name: str) -> int:
        return int(self._state().get(name, 0))

    # Events

    def append_event(self, name: EventType, args: Dict[str, Any]) -> Event:
        seq_doc = self.db.event_sequence.find_one_and_update(
            {'_id': 'events'},
            {'$inc': {'sequence': 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        # A rolled-back event leaves a gap in the sequence, never a reuse
        event = Event(sequence=int(seq_doc['sequence']), name=name, args=dict(args))
        self.db.events.insert_one(event.to_document())
        self._record_undo(lambda: self.db.events.delete_one({'sequence': event.sequence}))
        return event

    def list_events(self, name: Optional[EventType] = None, from_sequence: int = 1,
                    to_sequence: Optional[int] = None) -> List[Event]:
        sequence_filter = {'$gte': from_sequence}
        if to_sequence is not None:
            sequence_filter['$lte'] = to_sequence

        query = {'sequence': sequence_filter}
        if name is not None:
            query['name'] = name.value

        cursor = self.db.events.find(query).sort('sequence', ASCENDING)
        return [Event.from_document(doc) for doc in cursor]

    # Sign-in challenges, shared by every worker on the same database

    def save_challenge(self, address: str, message: str, expires_at: datetime) -> None:
        self.db.auth_challenges.replace_one(
            {'_id': address},
            {'_id': address, 'message': message, 'expires_at': expires_at},
            upsert=True
        )

    def pop_challenge(self, address: str) -> Optional[Dict[str, Any]]:
        doc = self.db.auth_challenges.find_one_and_delete({'_id': address})
        if not doc:
            return None
        expires_at = doc['expires_at']
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return {'message': doc['message'], 'expires_at': expires_at}

    def purge_challenges(self, now: datetime) -> int:
        return self.db.auth_challenges.delete_many({'expires_at': {'$lte': now}}).deleted_count

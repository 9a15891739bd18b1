# tests/unit/test_transactions.py
from unittest.mock import MagicMock

import pytest
from pymongo import ReturnDocument

from chaincheck.models import EventType
from chaincheck.registry import ChainCheckRegistry
from chaincheck.store import MemoryRegistryStore, MongoRegistryStore
from chaincheck.utils.crypto_utils import generate_serial_hash


class EventLogDown(Exception):
    pass


def _fail_event_writes(monkeypatch, store):
    def append_event(name, args):
        raise EventLogDown("event log unavailable")
    monkeypatch.setattr(store, 'append_event', append_event)


def test_failed_registration_leaves_no_batch(monkeypatch, authorized_registry, manufacturer, serial_hashes):
    """Registration that fails at the event write commits nothing"""
    events_before = len(authorized_registry.query_events())
    _fail_event_writes(monkeypatch, authorized_registry.store)

    with pytest.raises(EventLogDown):
        authorized_registry.register_product(manufacturer.address, 1, "Sneakers", "Nike", serial_hashes)

    monkeypatch.undo()
    assert authorized_registry.get_product(1).exists == False
    assert authorized_registry.total_products() == 0
    assert len(authorized_registry.query_events()) == events_before

    # The id is still free
    authorized_registry.register_product(manufacturer.address, 1, "Sneakers", "Nike", serial_hashes)
    assert authorized_registry.total_products() == 1


def test_failed_verification_leaves_serial_unconsumed(monkeypatch, authorized_registry, manufacturer,
                                                      consumer, serial_hashes):
    authorized_registry.register_product(manufacturer.address, 1, "Sneakers", "Nike", serial_hashes)
    _fail_event_writes(monkeypatch, authorized_registry.store)

    with pytest.raises(EventLogDown):
        authorized_registry.verify(consumer.address, serial_hashes[0], 1)

    monkeypatch.undo()
    assert authorized_registry.is_serial_verified(serial_hashes[0]) == False
    assert authorized_registry.total_verifications() == 0
    assert authorized_registry.verify(consumer.address, serial_hashes[0], 1) == True


def test_failed_authorization_is_undone(monkeypatch, registry, owner, manufacturer):
    _fail_event_writes(monkeypatch, registry.store)

    with pytest.raises(EventLogDown):
        registry.set_manufacturer_authorization(owner.address, manufacturer.address, True)

    monkeypatch.undo()
    assert registry.is_authorized(manufacturer.address) == False
    assert registry.get_manufacturers() == [owner.address]


def test_failed_pause_and_transfer_are_undone(monkeypatch, registry, owner, consumer):
    _fail_event_writes(monkeypatch, registry.store)

    with pytest.raises(EventLogDown):
        registry.pause(owner.address)
    with pytest.raises(EventLogDown):
        registry.transfer_ownership(owner.address, consumer.address)

    monkeypatch.undo()
    assert registry.paused() == False
    assert registry.owner() == owner.address
    assert registry.is_authorized(consumer.address) == False


def test_batch_registration_keeps_earlier_batches(monkeypatch, authorized_registry, manufacturer):
    """Each batch is its own transaction"""
    authorized_registry.register_products(manufacturer.address, [
        {'batch_id': 1, 'name': 'A', 'brand': 'B', 'serial_hashes': [generate_serial_hash(1, 'x')]},
    ])
    _fail_event_writes(monkeypatch, authorized_registry.store)

    with pytest.raises(EventLogDown):
        authorized_registry.register_products(manufacturer.address, [
            {'batch_id': 2, 'name': 'A', 'brand': 'B', 'serial_hashes': [generate_serial_hash(2, 'x')]},
        ])

    monkeypatch.undo()
    assert authorized_registry.get_product(1).exists == True
    assert authorized_registry.get_product(2).exists == False
    assert authorized_registry.total_products() == 1


def test_nested_transaction_rolls_back_with_outer():
    store = MemoryRegistryStore()

    with pytest.raises(EventLogDown):
        with store.transaction():
            store.increment_counter('total_products')
            with store.transaction():
                store.append_event(EventType.PAUSED, {'account': '0xabc'})
            raise EventLogDown()

    assert store.get_counter('total_products') == 0
    assert store.list_events() == []


def test_writes_outside_transaction_are_kept():
    store = MemoryRegistryStore()
    store.increment_counter('total_products')

    with pytest.raises(EventLogDown):
        with store.transaction():
            raise EventLogDown()

    assert store.get_counter('total_products') == 1


def test_mongo_registration_rollback_compensates(monkeypatch, owner, manufacturer, serial_hashes):
    db = MagicMock()
    db.registry_state.find_one.return_value = {'_id': 'registry', 'owner': owner.address}
    db.manufacturers.find_one.return_value = {'_id': manufacturer.address, 'authorized': True}
    db.batches.find_one.return_value = None
    db.registry_state.find_one_and_update.return_value = {'_id': 'registry', 'total_products': 1}

    registry = ChainCheckRegistry(owner.address, store=MongoRegistryStore(db))
    _fail_event_writes(monkeypatch, registry.store)

    with pytest.raises(EventLogDown):
        registry.register_product(manufacturer.address, 1, "Sneakers", "Nike", serial_hashes)

    db.batches.delete_one.assert_called_once_with({'_id': 1})
    db.registry_state.update_one.assert_called_with(
        {'_id': 'registry'}, {'$inc': {'total_products': -1}}
    )
    args, kwargs = db.registry_state.find_one_and_update.call_args
    assert kwargs['return_document'] == ReturnDocument.AFTER

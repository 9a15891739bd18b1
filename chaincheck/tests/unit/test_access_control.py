# tests/unit/test_access_control.py
import pytest

from chaincheck.core.exceptions import InvalidInput, RegistryPaused, Unauthorized
from chaincheck.models import EventType
from chaincheck.registry import ChainCheckRegistry
from chaincheck.store import MemoryRegistryStore
from chaincheck.utils.input_validators import ZERO_ADDRESS


def test_owner_grants_and_revokes(registry, owner, manufacturer):
    registry.set_manufacturer_authorization(owner.address, manufacturer.address, True)
    assert registry.is_authorized(manufacturer.address) == True

    registry.set_manufacturer_authorization(owner.address, manufacturer.address, False)
    assert registry.is_authorized(manufacturer.address) == False


def test_non_owner_cannot_authorize(registry, manufacturer, consumer):
    with pytest.raises(Unauthorized):
        registry.set_manufacturer_authorization(consumer.address, manufacturer.address, True)
    assert registry.is_authorized(manufacturer.address) == False


def test_authorized_manufacturer_is_not_admin(authorized_registry, manufacturer, consumer):
    """Manufacturer rights do not include granting rights"""
    with pytest.raises(Unauthorized):
        authorized_registry.set_manufacturer_authorization(manufacturer.address, consumer.address, True)


def test_zero_address_rejected(registry, owner):
    with pytest.raises(InvalidInput):
        registry.set_manufacturer_authorization(owner.address, ZERO_ADDRESS, True)


def test_non_boolean_flag_rejected(registry, owner, manufacturer):
    with pytest.raises(InvalidInput):
        registry.set_manufacturer_authorization(owner.address, manufacturer.address, "yes")


def test_authorization_is_idempotent_and_re_emits(registry, owner, manufacturer):
    registry.set_manufacturer_authorization(owner.address, manufacturer.address, True)
    registry.set_manufacturer_authorization(owner.address, manufacturer.address, True)

    events = registry.query_events(EventType.MANUFACTURER_AUTHORIZED)
    assert len(events) == 2
    assert all(e.args == {'maker': manufacturer.address, 'authorized': True} for e in events)
    assert registry.get_manufacturers().count(manufacturer.address) == 1


def test_is_authorized_never_fails(registry, owner):
    assert registry.is_authorized("not-an-address") == False
    assert registry.is_authorized(None) == False
    assert registry.is_authorized(owner.address.lower()) == True


def test_revoked_manufacturer_cannot_register(authorized_registry, owner, manufacturer, serial_hashes):
    authorized_registry.set_manufacturer_authorization(owner.address, manufacturer.address, False)

    with pytest.raises(Unauthorized):
        authorized_registry.register_product(manufacturer.address, 1, "n", "b", serial_hashes)


def test_transfer_ownership(registry, owner, consumer):
    registry.transfer_ownership(owner.address, consumer.address)

    assert registry.owner() == consumer.address
    assert registry.is_authorized(consumer.address) == True

    with pytest.raises(Unauthorized):
        registry.pause(owner.address)

    events = registry.query_events(EventType.OWNERSHIP_TRANSFERRED)
    assert events[0].args == {'previous_owner': ZERO_ADDRESS, 'new_owner': owner.address}
    assert events[1].args == {'previous_owner': owner.address, 'new_owner': consumer.address}


def test_transfer_ownership_requires_owner(registry, consumer):
    with pytest.raises(Unauthorized):
        registry.transfer_ownership(consumer.address, consumer.address)


def test_pause_blocks_registration_and_verification(authorized_registry, owner, manufacturer,
                                                    consumer, serial_hashes):
    authorized_registry.register_product(manufacturer.address, 1, "Sneakers", "Nike", serial_hashes)
    authorized_registry.pause(owner.address)

    assert authorized_registry.paused() == True
    with pytest.raises(RegistryPaused):
        authorized_registry.register_product(manufacturer.address, 2, "n", "b", serial_hashes)
    with pytest.raises(RegistryPaused):
        authorized_registry.verify(consumer.address, serial_hashes[0], 1)

    # Reads stay available
    assert authorized_registry.get_product(1).exists == True
    assert authorized_registry.is_serial_verified(serial_hashes[0]) == False

    authorized_registry.unpause(owner.address)
    assert authorized_registry.verify(consumer.address, serial_hashes[0], 1) == True


def test_pause_is_owner_only_and_not_repeatable(registry, owner, consumer):
    with pytest.raises(Unauthorized):
        registry.pause(consumer.address)

    registry.pause(owner.address)
    with pytest.raises(InvalidInput):
        registry.pause(owner.address)

    registry.unpause(owner.address)
    with pytest.raises(InvalidInput):
        registry.unpause(owner.address)

    names = [e.name for e in registry.query_events()]
    assert names[-2:] == [EventType.PAUSED, EventType.UNPAUSED]


def test_existing_store_keeps_its_owner(owner, consumer):
    store = MemoryRegistryStore()
    ChainCheckRegistry(owner.address, store=store)
    reopened = ChainCheckRegistry(consumer.address, store=store)

    assert reopened.owner() == owner.address
    assert reopened.is_authorized(consumer.address) == False
    assert len(reopened.query_events(EventType.OWNERSHIP_TRANSFERRED)) == 1


def test_invalid_owner_rejected():
    with pytest.raises(InvalidInput):
        ChainCheckRegistry(ZERO_ADDRESS)

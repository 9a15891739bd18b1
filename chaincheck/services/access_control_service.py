# services/access_control_service.py
"""
Access Control Service
Owner and manufacturer authorization, ownership transfer, pause switch
"""

import logging
from typing import List, Optional

from chaincheck.core.exceptions import InvalidInput, RegistryPaused, Unauthorized
from chaincheck.models import EventType
from chaincheck.utils.input_validators import ZERO_ADDRESS, normalize_address, to_identity

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('security')


class AccessControlService:
    """Guards privileged registry calls"""

    def __init__(self, store, events):
        self.store = store
        self.events = events

    def initialize(self, owner: str) -> str:
        """
        Install the administrator on a fresh store
        
        The owner is authorized as a manufacturer at creation. A store that
        already has an owner keeps it.
        
        Returns:
            The effective owner address
        """
        owner = normalize_address(owner)

        with self.store.transaction():
            existing = self.store.get_owner()
            if existing:
                if existing != owner:
                    logger.warning(f"Store already owned by {existing}; ignoring configured owner {owner}")
                return existing

            self.store.set_owner(owner)
            self.store.set_authorization(owner, True)
            self.events.emit(
                EventType.OWNERSHIP_TRANSFERRED,
                previous_owner=ZERO_ADDRESS,
                new_owner=owner
            )
            logger.info(f"Registry initialized with owner {owner}")
            return owner

    # Guards

    def get_owner(self) -> Optional[str]:
        return self.store.get_owner()

    def require_owner(self, caller: str) -> str:
        identity = to_identity(caller)
        if identity is None or identity != self.store.get_owner():
            security_logger.warning(f"Owner-only call rejected for {caller}")
            raise Unauthorized("caller is not the owner")
        return identity

    def require_manufacturer(self, caller: str) -> str:
        if not self.is_authorized(caller):
            security_logger.warning(f"Registration rejected for unauthorized caller {caller}")
            raise Unauthorized("not an authorized manufacturer")
        return to_identity(caller)

    def require_not_paused(self) -> None:
        if self.store.is_paused():
            raise RegistryPaused("registry is paused")

    # Manufacturer authorization

    def is_authorized(self, identity: str) -> bool:
        """Pure read, never fails; malformed identities are not authorized"""
        address = to_identity(identity)
        if address is None:
            return False
        return self.store.get_authorization(address)

    def set_manufacturer_authorization(self, caller: str, identity: str, authorized: bool) -> None:
        """
        Grant or revoke manufacturer rights
        
        Args:
            caller: Identity making the call, must be the owner
            identity: Manufacturer address
            authorized: New flag value
            
        Raises:
            Unauthorized: If caller is not the owner
            InvalidInput: If identity is malformed or the zero address
        """
        with self.store.transaction():
            self.require_owner(caller)
            if not isinstance(authorized, bool):
                raise InvalidInput("authorized must be a boolean")
            maker = normalize_address(identity)

            self.store.set_authorization(maker, authorized)
            self.events.emit(EventType.MANUFACTURER_AUTHORIZED, maker=maker, authorized=authorized)

        logger.info(f"Manufacturer {maker} {'authorized' if authorized else 'revoked'}")

    def get_manufacturers(self) -> List[str]:
        """Currently authorized identities in first-authorization order"""
        return [
            address for address, authorized in self.store.list_authorizations().items()
            if authorized
        ]

    # Ownership

    def transfer_ownership(self, caller: str, new_owner: str) -> str:
        with self.store.transaction():
            previous = self.require_owner(caller)
            new_owner = normalize_address(new_owner)

            self.store.set_owner(new_owner)
            self.store.set_authorization(new_owner, True)
            self.events.emit(
                EventType.OWNERSHIP_TRANSFERRED,
                previous_owner=previous,
                new_owner=new_owner
            )

        logger.info(f"Ownership transferred from {previous} to {new_owner}")
        return new_owner

    # Pause switch

    def is_paused(self) -> bool:
        return self.store.is_paused()

    def pause(self, caller: str) -> None:
        with self.store.transaction():
            account = self.require_owner(caller)
            if self.store.is_paused():
                raise InvalidInput("registry is already paused")
            self.store.set_paused(True)
            self.events.emit(EventType.PAUSED, account=account)

        security_logger.warning(f"Registry PAUSED by {account}")

    def unpause(self, caller: str) -> None:
        with self.store.transaction():
            account = self.require_owner(caller)
            if not self.store.is_paused():
                raise InvalidInput("registry is not paused")
            self.store.set_paused(False)
            self.events.emit(EventType.UNPAUSED, account=account)

        logger.info(f"Registry unpaused by {account}")

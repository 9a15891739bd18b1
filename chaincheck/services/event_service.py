# services/event_service.py
"""
Event & Counter Service
Records registry notifications and the monotonic totals
"""

import logging
from typing import Any, Dict, List, Optional, Union

from chaincheck.core.exceptions import InvalidInput
from chaincheck.models import Event, EventType
from chaincheck.monitoring.metrics import EVENTS_EMITTED, PRODUCTS_REGISTERED, VERIFICATIONS

logger = logging.getLogger(__name__)

TOTAL_PRODUCTS = 'total_products'
TOTAL_VERIFICATIONS = 'total_verifications'


class EventService:
    """Append-only event log plus the product/verification counters"""

    def __init__(self, store):
        self.store = store

    def emit(self, event_type: EventType, **args) -> Event:
        event = self.store.append_event(event_type, args)
        EVENTS_EMITTED.labels(event=event_type.value).inc()
        logger.info(f"Event #{event.sequence} {event_type.value} {args}")
        return event

    def record_product_registered(self) -> int:
        total = self.store.increment_counter(TOTAL_PRODUCTS)
        PRODUCTS_REGISTERED.inc()
        return total

    def record_verification(self, authentic: bool) -> Optional[int]:
        """Count an outcome; only authentic outcomes touch the registry counter"""
        VERIFICATIONS.labels(outcome='authentic' if authentic else 'counterfeit').inc()
        if not authentic:
            return None
        return self.store.increment_counter(TOTAL_VERIFICATIONS)

    def total_products(self) -> int:
        return self.store.get_counter(TOTAL_PRODUCTS)

    def total_verifications(self) -> int:
        return self.store.get_counter(TOTAL_VERIFICATIONS)

    def query_events(self, name: Union[EventType, str, None] = None, from_sequence: int = 1,
                     to_sequence: Optional[int] = None) -> List[Event]:
        """
        Recorded events in emission order
        
        Args:
            name: Optional event name filter (EventType or its string value)
            from_sequence: First sequence number to include
            to_sequence: Last sequence number to include, or None for latest
            
        Raises:
            InvalidInput: For an unknown event name or a bad range
        """
        if name is not None and not isinstance(name, EventType):
            try:
                name = EventType(name)
            except ValueError:
                raise InvalidInput(f"Unknown event: {name}")

        if from_sequence is None:
            from_sequence = 1
        if from_sequence < 1:
            raise InvalidInput("from_sequence must be at least 1")
        if to_sequence is not None and to_sequence < from_sequence:
            raise InvalidInput("to_sequence must not be before from_sequence")

        return self.store.list_events(name, from_sequence, to_sequence)

    def summarize_verifications(self, events: List[Event]) -> Dict[str, Any]:
        authentic = sum(1 for e in events if e.name == EventType.VERIFIED and e.args.get('is_authentic'))
        counterfeit = sum(1 for e in events if e.name == EventType.VERIFIED and not e.args.get('is_authentic'))
        return {'authentic': authentic, 'potential_counterfeits': counterfeit}

from .batch import Batch
from .event import Event, EventType

__all__ = ['Batch', 'Event', 'EventType']

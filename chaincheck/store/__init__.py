"""
Authoritative store backends
"""

from .memory_store import MemoryRegistryStore
from .mongo_store import MongoRegistryStore

__all__ = ['MemoryRegistryStore', 'MongoRegistryStore']

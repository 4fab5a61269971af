"""
Storage module for fortune records.

Architecture:
- fortune_store.py: Authoritative in-memory store behind a reader/writer lock
- redis_store.py: Redis mirror used for persistence and read refresh
- factory.py: Startup probe with fallback to memory-only operation
"""

from fortune_api.storage.base import SecondaryStore
from fortune_api.storage.factory import create_fortune_store, create_secondary_store
from fortune_api.storage.fortune_store import FortuneStore
from fortune_api.storage.locking import LockedMapping, ReadWriteLock
from fortune_api.storage.redis_store import RedisSecondaryStore

__all__ = [
    "FortuneStore",
    "SecondaryStore",
    "RedisSecondaryStore",
    "LockedMapping",
    "ReadWriteLock",
    "create_fortune_store",
    "create_secondary_store",
]

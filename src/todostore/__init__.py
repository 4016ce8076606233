"""
Durable Todo record store.

``RecordStore`` keeps a table of Todo records in memory, guarded by a
reader/writer lock, and rewrites its single backing file atomically on every
change. The FastAPI service built on top of it lives in ``todostore.main``.
"""

from .errors import CorruptionError, NotFoundError, PersistenceError, StoreError, ValidationError
from .models import Record
from .store import RecordStore

__all__ = [
    "CorruptionError",
    "NotFoundError",
    "PersistenceError",
    "Record",
    "RecordStore",
    "StoreError",
    "ValidationError",
]

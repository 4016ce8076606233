from __future__ import annotations

from typing import Optional


class StoreError(Exception):
    """Base class for every failure raised by the record store."""


# PUBLIC_INTERFACE
class ValidationError(StoreError, ValueError):
    """
    Caller-supplied data violates a record invariant (empty title, title too
    long, wrong type). Fix the input and call again.
    """

    def __init__(self, message: str, field: str = "title") -> None:
        super().__init__(message)
        self.message = message
        self.field = field


# PUBLIC_INTERFACE
class NotFoundError(StoreError, LookupError):
    """No record with the requested ID exists."""

    def __init__(self, record_id: int, operation: str) -> None:
        super().__init__(f"{operation}: record {record_id} not found")
        self.record_id = record_id
        self.operation = operation


# PUBLIC_INTERFACE
class PersistenceError(StoreError):
    """
    Writing the backing file failed. The in-memory table has already been
    restored to its state before the call, so the operation may be retried.
    """

    def __init__(self, operation: str, path: str, record_id: Optional[int] = None) -> None:
        target = f" record {record_id}" if record_id is not None else ""
        super().__init__(f"{operation}{target}: could not persist to {path}")
        self.operation = operation
        self.record_id = record_id
        self.path = path


# PUBLIC_INTERFACE
class CorruptionError(StoreError):
    """The backing file exists but cannot be decoded."""

    def __init__(self, path: Optional[str], reason: str, line: Optional[int] = None) -> None:
        where = f"{path or '<memory>'}" + (f":{line}" if line is not None else "")
        super().__init__(f"{where}: {reason}")
        self.path = path
        self.reason = reason
        self.line = line

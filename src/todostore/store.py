from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import List, Optional

from .codec import decode_records, encode_records
from .errors import CorruptionError, NotFoundError, PersistenceError
from .locks import ReadWriteLock
from .models import Record, check_done, clean_title
from .persistence import write_atomically


# PUBLIC_INTERFACE
class RecordStore:
    """
    Thread-safe Todo record store backed by a single file.

    The whole table lives in memory and is loaded once when the store is
    constructed. Every mutation rewrites the backing file atomically while
    holding the write lock; if that write fails the in-memory change is
    undone before the error is raised, so memory and disk never diverge.

    Records handed out are copies; mutating them does not affect the store.
    """

    def __init__(self, path: str) -> None:
        self._path = os.fspath(path)
        self._lock = ReadWriteLock()
        self._items: dict[int, Record] = {}
        self._next_id = 1
        self._load()

    @property
    def path(self) -> str:
        return self._path

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _load(self) -> None:
        try:
            with open(self._path, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            return
        except OSError as e:
            raise CorruptionError(self._path, f"cannot read file: {e.strerror or e}") from e

        records = decode_records(data, path=self._path)
        self._items = {r["id"]: r for r in records}
        self._next_id = max(self._items, default=0) + 1

    def _persist(self, operation: str, record_id: Optional[int]) -> None:
        """Write the full table to disk. Caller must hold the write lock."""
        payload = encode_records(self._items[k] for k in sorted(self._items))
        try:
            write_atomically(self._path, payload)
        except OSError as e:
            raise PersistenceError(operation, self._path, record_id) from e

    def create(self, title: str) -> Record:
        """
        Create and return a new record with a fresh ID.

        Raises:
            ValidationError: if the title is empty or longer than 255 chars.
            PersistenceError: if the backing file could not be written; the
                record is not added and its ID is released.
        """
        title = clean_title(title)
        with self._lock.write_locked():
            record_id = self._next_id
            record: Record = {
                "id": record_id,
                "title": title,
                "done": False,
                "created_at": self._now(),
            }
            self._items[record_id] = record
            self._next_id = record_id + 1
            try:
                self._persist("create", record_id)
            except BaseException:
                del self._items[record_id]
                self._next_id = record_id
                raise
            return record.copy()

    def get(self, record_id: int) -> Record:
        """Return the record with ``record_id`` or raise NotFoundError."""
        with self._lock.read_locked():
            item = self._items.get(record_id)
            if item is None:
                raise NotFoundError(record_id, "get")
            return item.copy()

    def list(self) -> List[Record]:
        """Return all records in ascending ID order."""
        with self._lock.read_locked():
            return [self._items[k].copy() for k in sorted(self._items)]

    def update(self, record_id: int, title: str, done: bool) -> Record:
        """
        Replace ``title`` and ``done`` of an existing record. ``id`` and
        ``created_at`` never change.

        Raises:
            ValidationError: on an invalid title or non-boolean ``done``.
            NotFoundError: if no record has this ID.
            PersistenceError: if the backing file could not be written; the
                record keeps its previous values.
        """
        title = clean_title(title)
        done = check_done(done)
        with self._lock.write_locked():
            existing = self._items.get(record_id)
            if existing is None:
                raise NotFoundError(record_id, "update")

            previous = existing.copy()
            existing["title"] = title
            existing["done"] = done
            try:
                self._persist("update", record_id)
            except BaseException:
                self._items[record_id] = previous
                raise
            return existing.copy()

    def delete(self, record_id: int) -> None:
        """
        Remove a record. Its ID is never handed out again by this store.

        Raises:
            NotFoundError: if no record has this ID.
            PersistenceError: if the backing file could not be written; the
                record is put back.
        """
        with self._lock.write_locked():
            removed = self._items.pop(record_id, None)
            if removed is None:
                raise NotFoundError(record_id, "delete")
            try:
                self._persist("delete", record_id)
            except BaseException:
                self._items[record_id] = removed
                raise

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._items)

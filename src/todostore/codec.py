"""
CSV encoding of the record table.

The backing file is UTF-8 text with a header row naming the fields
``id,title,done,created_at`` followed by one row per record, ascending by ID.
Booleans are written as ``true``/``false`` and timestamps as ISO-8601 with
microseconds and UTC offset, so a decoded table compares equal to the one
that was encoded.
"""
from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import CorruptionError
from .models import Record, clean_title

FIELDS = ("id", "title", "done", "created_at")


class StoredRow(BaseModel):
    """One decoded CSV row. Values arrive as strings and are coerced here."""

    model_config = ConfigDict(extra="forbid")

    id: int = Field(..., gt=0)
    title: str
    done: bool
    created_at: datetime

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        # A persisted title is already trimmed; anything else was not written by us.
        if clean_title(v) != v:
            raise ValueError("title has surrounding whitespace")
        return v

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


# PUBLIC_INTERFACE
def encode_records(records: Iterable[Record]) -> bytes:
    """Serialize records (in the order given) to the CSV file format."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(FIELDS)
    for r in records:
        writer.writerow(
            [
                r["id"],
                r["title"],
                "true" if r["done"] else "false",
                r["created_at"].isoformat(timespec="microseconds"),
            ]
        )
    return buf.getvalue().encode("utf-8")


# PUBLIC_INTERFACE
def decode_records(data: bytes, path: Optional[str] = None) -> List[Record]:
    """
    Parse the CSV file format back into records, ascending by ID.

    Decoding is all-or-nothing: the first malformed row aborts the load.

    Raises:
        CorruptionError: on invalid UTF-8, CSV syntax errors, a missing or
        unexpected header, rows with the wrong shape or invalid values, or
        duplicate IDs.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptionError(path, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    records: dict[int, Record] = {}
    try:
        header = next(reader, None)
        if header is None:
            raise CorruptionError(path, "file is empty, expected a header row", line=1)
        if tuple(header) != FIELDS:
            raise CorruptionError(path, f"unexpected header {header!r}", line=1)

        for row in reader:
            line = reader.line_num
            if len(row) != len(FIELDS):
                raise CorruptionError(path, f"expected {len(FIELDS)} columns, got {len(row)}", line=line)
            try:
                parsed = StoredRow.model_validate(dict(zip(FIELDS, row)))
            except PydanticValidationError as e:
                raise CorruptionError(path, f"invalid row: {e.errors()[0]['msg']}", line=line) from e
            if parsed.id in records:
                raise CorruptionError(path, f"duplicate id {parsed.id}", line=line)
            records[parsed.id] = {
                "id": parsed.id,
                "title": parsed.title,
                "done": parsed.done,
                "created_at": parsed.created_at,
            }
    except csv.Error as e:
        raise CorruptionError(path, f"malformed CSV: {e}", line=reader.line_num) from e

    return [records[k] for k in sorted(records)]

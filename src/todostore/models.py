from __future__ import annotations

from datetime import datetime
from typing import Any, TypedDict

from .errors import ValidationError

TITLE_MAX_LENGTH = 255


# PUBLIC_INTERFACE
class Record(TypedDict):
    """
    A Todo record as held by the store.

    Fields:
    - id: Unique positive integer assigned by the store, never reused
    - title: Trimmed title (1..255 chars)
    - done: Completion flag, False on creation
    - created_at: Timezone-aware UTC creation timestamp, immutable
    """

    id: int
    title: str
    done: bool
    created_at: datetime


# PUBLIC_INTERFACE
def clean_title(value: Any) -> str:
    """
    Strip surrounding whitespace and enforce the 1..255 length rule.

    Raises:
        ValidationError: if the value is not a string, is empty after
        trimming, is longer than 255 characters or is not UTF-8 encodable.
    """
    if not isinstance(value, str):
        raise ValidationError("title must be a string")
    s = value.strip()
    if not (1 <= len(s) <= TITLE_MAX_LENGTH):
        raise ValidationError(f"title length must be between 1 and {TITLE_MAX_LENGTH} characters")
    try:
        s.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError("title must be valid unicode text") from e
    return s


def check_done(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("done must be a boolean", field="done")
    return value

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

# Title length and whitespace rules are enforced by RecordStore, not here, so
# that every caller of the store goes through the same single check.


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """Schema for creating a new Todo item."""

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk"}})

    title: str = Field(..., description="Short title for the todo item (1..255 chars after trimming)")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for replacing the mutable fields of a Todo item.
    Both fields are required; id and created_at cannot be changed.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk", "done": True}})

    title: str = Field(..., description="Short title for the todo item (1..255 chars after trimming)")
    done: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """Schema returned by the API for a Todo item."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy milk",
                "done": False,
                "created_at": "2025-01-25T10:15:30.123456Z",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    done: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")


class TodoList(BaseModel):
    """Envelope for list responses."""

    items: List[TodoOut] = Field(..., description="Todo items in ascending id order")
    total: int = Field(..., description="Number of items returned")

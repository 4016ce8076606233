from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from ..schemas import TodoCreate, TodoList, TodoOut, TodoUpdate
from ..store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)


# PUBLIC_INTERFACE
def get_store(request: Request) -> RecordStore:
    """Return the store opened by the application lifespan."""
    return request.app.state.store


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        422: {"description": "Validation error"},
        503: {"description": "Backing file could not be written"},
    },
)
def create_todo(payload: TodoCreate, store: RecordStore = Depends(get_store)) -> TodoOut:
    """
    Create a new Todo.
    """
    created = store.create(payload.title)
    logger.info("created todo %d", created["id"])
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoList,
    summary="List Todos",
    description=(
        "List all todos in ascending id order.\n\n"
        "Query parameters:\n"
        "- done: only return items with this completion status"
    ),
)
def list_todos(
    done: Optional[bool] = Query(None, description="Filter by completion status"),
    store: RecordStore = Depends(get_store),
) -> TodoList:
    items = store.list()
    if done is not None:
        items = [t for t in items if t["done"] == done]
    return TodoList(items=[TodoOut(**t) for t in items], total=len(items))


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: int, store: RecordStore = Depends(get_store)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**store.get(todo_id))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Replace the title and completion flag of an existing Todo item.",
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
        422: {"description": "Validation error"},
        503: {"description": "Backing file could not be written"},
    },
)
def put_todo(todo_id: int, payload: TodoUpdate, store: RecordStore = Depends(get_store)) -> TodoOut:
    updated = store.update(todo_id, payload.title, payload.done)
    logger.info("updated todo %d (done=%s)", todo_id, updated["done"])
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
        503: {"description": "Backing file could not be written"},
    },
)
def delete_todo(todo_id: int, store: RecordStore = Depends(get_store)) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    store.delete(todo_id)
    logger.info("deleted todo %d", todo_id)
    return None

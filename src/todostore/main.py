from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import CorruptionError, NotFoundError, PersistenceError, ValidationError
from .routers import todos as todos_router
from .routers.todos import get_store
from .settings import get_settings
from .store import RecordStore

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]


# PUBLIC_INTERFACE
def configure_logging(level: int) -> None:
    """Install a basic stderr handler for the service loggers (no-op if one exists)."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("todostore").setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Open the record store once per process. A corrupt backing file aborts
    start-up instead of serving an empty or partial table.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    os.makedirs(os.path.dirname(os.path.abspath(settings.store_path)), exist_ok=True)
    try:
        store = RecordStore(settings.store_path)
    except CorruptionError:
        logger.critical("backing file %s is corrupt, refusing to start", settings.store_path, exc_info=True)
        raise
    logger.info("loaded %d todos from %s", len(store), store.path)
    app.state.store = store
    yield


app = FastAPI(
    title="Todo Backend",
    description="Backend API service for managing todos in a durable single-file record store.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

_settings = get_settings()

allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str, detail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "detail": detail},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return _error(422, "ValidationError", "Request validation failed", exc.errors())


@app.exception_handler(ValidationError)
async def store_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(
        422,
        "ValidationError",
        "Request validation failed",
        [{"loc": ["body", exc.field], "msg": exc.message, "type": "value_error"}],
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, "NotFound", str(exc), "Todo not found")


@app.exception_handler(PersistenceError)
async def persistence_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("%s", exc, exc_info=exc)
    return _error(503, "PersistenceError", "Todo could not be saved, please retry", exc.operation)


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check(store: RecordStore = Depends(get_store)):
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health and the number of stored todos.
    """
    return {"message": "Healthy", "records": len(store)}


app.include_router(todos_router.router)

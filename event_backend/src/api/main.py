import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .exceptions import EventNotFoundError, EventValidationError, StorageError
from .logging_config import setup_logging
from .repositories import get_repository
from .routers import events as events_router
from .settings import get_settings

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "events",
        "description": "CRUD operations for calendar events, filtering and completion status.",
    },
]

_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_file)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Open the store once per process; the schema is created here for SQLite
    get_repository()
    if _settings.database_username and _settings.persistence_backend == "sqlite":
        logger.info("DATABASE_USERNAME is set but SQLite does not use credentials")
    logger.info("CORS allow-list: %s", ", ".join(_settings.cors_allow_origins))
    yield


app = FastAPI(
    title="Event Calendar Backend",
    description="Backend API service for managing calendar events of a single-user front-end.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)


def _error_response(status_code: int, error: str, message: str, detail=None) -> JSONResponse:
    content = {"error": error, "message": message}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


# Registered before CORSMiddleware so it sits inside it and 500s still carry CORS headers
@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError", "Internal server error"
        )


# Credentials are allowed, so the middleware echoes the requesting origin instead of '*'
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=["*"],
)


def _is_malformed_body(errors) -> bool:
    """True when the body itself could not be read as a JSON object."""
    for err in errors:
        if err.get("type") == "json_invalid":
            return True
        if tuple(err.get("loc", ())) == ("body",):
            return True
    return False


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Map framework-level parsing failures (bad JSON, wrong types, bad query or
    path parameters) to 400.

    Response format:
        {
            "error": "ValidationError" | "MalformedRequest",
            "message": "...",
            "detail": [... pydantic/fastapi error details ...]
        }
    """
    errors = exc.errors()
    if _is_malformed_body(errors):
        error, message = "MalformedRequest", "Request body must be a JSON object"
    else:
        error, message = "ValidationError", "Request validation failed"
    logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    return _error_response(status.HTTP_400_BAD_REQUEST, error, message, jsonable_encoder(errors))


@app.exception_handler(EventValidationError)
async def event_validation_exception_handler(request: Request, exc: EventValidationError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "ValidationError",
        "Request validation failed",
        [e.model_dump() for e in exc.errors],
    )


@app.exception_handler(EventNotFoundError)
async def not_found_exception_handler(request: Request, exc: EventNotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, "NotFound", str(exc))


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("%s %s failed in the store: %s", request.method, request.url.path, exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "StorageError", "Storage backend failure")


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# Include routers
app.include_router(events_router.router)

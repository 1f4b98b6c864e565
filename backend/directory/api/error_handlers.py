"""Global exception handlers rendering every failure as an envelope.

Domain errors carry their own status; request validation becomes 400 with one
message per violation; anything else is a 500 that never leaks details unless
DEBUG is on.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from directory.core.config import settings
from directory.core.errors import DirectoryError, ValidationFailure
from directory.models.employee import FIELD_LABELS

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_directory_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_directory_error_handler(app: FastAPI) -> None:
    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        if exc.http_status >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        content = exc.to_envelope()
        if settings.DEBUG and exc.__cause__ is not None:
            content["error"] = str(exc.__cause__)
        return JSONResponse(status_code=exc.http_status, content=content)


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = validation_messages(exc.errors())
        logger.warning("Validation error on %s: %s", request.url.path, messages)
        failure = ValidationFailure(errors=messages)
        return JSONResponse(status_code=failure.http_status, content=failure.to_envelope())


def _register_http_error_handler(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        content: dict[str, Any] = {"ok": False, "message": "Server Error"}
        if settings.DEBUG:
            content["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def validation_messages(errors: list[dict[str, Any]]) -> list[str]:
    """Turn pydantic error dicts into human-readable field messages."""
    messages: list[str] = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = loc[-1] if loc else None

        if error.get("type") == "json_invalid":
            messages.append("Invalid JSON body")
        elif field is None:
            messages.append("Request body is required" if error.get("type") == "missing" else error["msg"])
        elif field in FIELD_LABELS and (error.get("type") == "missing" or error.get("input") is None):
            messages.append(f"{FIELD_LABELS[field]} is required")
        elif error.get("type") in ("required", "too_short", "too_long", "email", "department"):
            messages.append(error["msg"])
        else:
            messages.append(f"{field}: {error['msg']}")
    return messages

"""Domain exceptions and the JSON error envelope.

Every error response has the shape ``{"message": str, "errors"?: list}``.
Handlers are registered on the application by ``register_exception_handlers``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        if message:
            self.public_message = message


class InvalidInputError(AppError):
    """Input rejected by a service after schema validation passed."""

    status_code = 400
    public_message = "Invalid request data"


class UpstreamError(AppError):
    """A dependency (identity provider, LLM) failed.

    The public message is generic; the cause is logged, never returned.
    """

    status_code = 502
    public_message = "Upstream service failed"


class AuthenticationError(UpstreamError):
    status_code = 401
    public_message = "Authentication failed"


class SearchError(AppError):
    status_code = 500
    public_message = "Search failed"


def _format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into ``{"field", "message"}`` pairs."""
    formatted: list[dict[str, str]] = []
    for err in errors:
        # Drop the leading "body" / "query" / "path" segment
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        formatted.append(
            {
                "field": ".".join(loc),
                "message": err.get("msg", "Invalid value"),
            }
        )
    return formatted


async def _validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = _format_validation_errors(list(exc.errors()))
    logger.info(
        "request_validation_failed",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": errors},
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500 or isinstance(exc, UpstreamError):
        logger.error(
            "request_failed",
            extra={
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "error_message": str(exc.__cause__ or exc),
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.public_message},
    )


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(application: FastAPI) -> None:
    """Install the JSON error envelope on *application*."""
    application.add_exception_handler(RequestValidationError, _validation_handler)
    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(AppError, _app_error_handler)
    application.add_exception_handler(Exception, _unhandled_handler)

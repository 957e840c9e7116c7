"""Domain error taxonomy and its HTTP rendering.

Services raise the exceptions defined here; the handlers installed by
`install_exception_handlers` translate them into JSON responses so that
every operation reports failures the same way.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quillpress.core.settings import settings

logger = logging.getLogger(__name__)


class QuillError(RuntimeError):
    """Base class for errors that map onto a client-visible status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong!"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(QuillError):
    """Missing, invalid or expired session token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(QuillError):
    """Authenticated, but not the owner of the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class NotFound(QuillError):
    """Resource absent or identifier malformed."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationFailed(QuillError):
    """A required field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateIdentity(QuillError):
    """Registration conflicts with an existing username or email."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InvalidOperation(QuillError):
    """The requested transition is not allowed (e.g. following yourself)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid operation"


class InternalError(QuillError):
    """Store or unexpected failure."""


def _internal_payload(exc: Exception) -> dict[str, str]:
    payload = {"detail": InternalError.default_message}
    if not settings.is_production:
        payload["error"] = str(exc)
    return payload


async def _quill_error_handler(request: Request, exc: QuillError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content=_internal_payload(exc))
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Starlette raises a bare "Not Found" when no route matched.
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return JSONResponse(status_code=exc.status_code, content={"detail": "Route not found"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_internal_payload(exc),
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the domain, HTTP and catch-all handlers on `app`."""
    app.add_exception_handler(QuillError, _quill_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)

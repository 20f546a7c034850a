"""Exception handlers — map request errors onto HTTP responses.

Bodies are ``{"error": message}``; filter errors also name the offending
``field``. Auth failures never say which check failed.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from searchspot.core.engine import UnknownResourceError
from searchspot.core.errors import (
    AuthError,
    BadQueryError,
    CorruptIndexError,
    DocumentNotFoundError,
    InvalidFilterError,
    SearchspotError,
    UnavailableError,
)

logger = logging.getLogger(__name__)

# More specific classes first
_STATUS: list[tuple[type[Exception], int]] = [
    (InvalidFilterError, 422),
    (AuthError, 401),
    (DocumentNotFoundError, 404),
    (UnknownResourceError, 404),
    (UnavailableError, 503),
    (BadQueryError, 500),
    (CorruptIndexError, 500),
]


def status_for(exc: Exception) -> int:
    for exc_type, status in _STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    status = status_for(exc)
    if isinstance(exc, InvalidFilterError):
        body = {"error": str(exc), "field": exc.field}
    elif isinstance(exc, AuthError):
        body = {"error": "unauthorized"}
    elif isinstance(exc, UnknownResourceError):
        body = {"error": f"Unknown resource '{exc.args[0]}'"}
    else:
        body = {"error": str(exc)}

    if status >= 500:
        logger.warning("%s %s failed with %d: %s", request.method, request.url.path, status, exc)
    return JSONResponse(status_code=status, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install :func:`handle_error` for every request error family."""
    app.add_exception_handler(SearchspotError, handle_error)
    app.add_exception_handler(UnknownResourceError, handle_error)

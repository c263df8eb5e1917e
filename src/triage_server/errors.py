"""Exception handlers that turn SDK errors into HTTP responses.

Status selection for ``ValueError``:
  1. SDK subclasses map by type (``InvalidTransition`` → 409,
     ``InvalidSessionState`` / ``CatalogValidationError`` → 400)
  2. other ValueErrors (e.g. an unknown strategy name reaching the engine)
     are matched on message keywords, defaulting to 400

``KeyError`` means an unknown reference id (404), except ``UnknownQuestion``,
which only escapes the engine when its own invariants break (500).

Clients only ever see a generic detail string; the exception text goes to
the server log.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from triage_rulesets.errors import (
    CatalogValidationError,
    InvalidSessionState,
    InvalidTransition,
    UnknownQuestion,
)

logger = logging.getLogger(__name__)

_STATUS_BY_TYPE: list[tuple[type[ValueError], int]] = [
    (InvalidTransition, 409),
    (InvalidSessionState, 400),
    (CatalogValidationError, 400),
]

# Fallback for plain ValueErrors; first match wins
_MESSAGE_PATTERNS: list[tuple[str, int]] = [
    ("already finished", 409),
    ("not found", 404),
]

_DETAIL_BY_STATUS: dict[int, str] = {
    400: "Invalid request",
    404: "Resource not found",
    409: "Session already finished",
    500: "Internal server error",
}


def _status_for(exc: ValueError) -> int:
    for exc_type, code in _STATUS_BY_TYPE:
        if isinstance(exc, exc_type):
            return code
    msg = str(exc).lower()
    for pattern, code in _MESSAGE_PATTERNS:
        if pattern in msg:
            return code
    return 400


def _error_response(status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content={"detail": _DETAIL_BY_STATUS[status]})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Answer a caller mistake with 400, 404 or 409."""
    status = _status_for(exc)
    logger.warning("%s [%d] at %s: %s", type(exc).__name__, status, request.url, exc)
    return _error_response(status)


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Unknown reference ids are 404; a broken engine invariant is 500."""
    if isinstance(exc, UnknownQuestion):
        logger.error("Invariant violation at %s: %s", request.url, exc)
        return _error_response(500)
    logger.warning("Unknown id at %s: %s", request.url, exc)
    return _error_response(404)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback and return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return _error_response(500)

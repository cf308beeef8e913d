"""Global exception handlers.

Endpoints translate the errors they expect; anything that escapes is mapped
here so clients never see store or hashing internals.
"""

import logging
import math

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from forum_core.core.errors import (
    EmailExists,
    ForumError,
    HashingFailure,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    SessionNotFound,
    StoreFailure,
    TooManyRequests,
    Unauthenticated,
    UsernameExists,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "Internal Server Error"

_STATUS_BY_ERROR: tuple[tuple[type[ForumError], int], ...] = (
    (InvalidCredentials, status.HTTP_401_UNAUTHORIZED),
    (SessionNotFound, status.HTTP_401_UNAUTHORIZED),
    (Unauthenticated, status.HTTP_401_UNAUTHORIZED),
    (TooManyRequests, status.HTTP_429_TOO_MANY_REQUESTS),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (EmailExists, status.HTTP_409_CONFLICT),
    (UsernameExists, status.HTTP_409_CONFLICT),
    (StoreFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (HashingFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: ForumError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    """Map a domain error to its HTTP status with a ``detail`` body."""
    status_code = status_for(exc)
    headers = None
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "%s during %s %s", exc.code, request.method, request.url.path, exc_info=exc
        )
        detail = INTERNAL_ERROR_DETAIL
    else:
        logger.info("%s during %s %s", exc.code, request.method, request.url.path)
        detail = exc.message
        if isinstance(exc, TooManyRequests):
            headers = {"Retry-After": str(max(1, math.ceil(exc.retry_after)))}

    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for anything unexpected; nothing about the failure is returned."""
    logger.error(
        "Unhandled %s during %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain handler ahead of the general fallback."""
    app.exception_handler(ForumError)(forum_error_handler)
    app.exception_handler(Exception)(general_exception_handler)

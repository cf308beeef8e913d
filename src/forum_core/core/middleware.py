"""HTTP middleware: request logging and security headers."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response

logger = logging.getLogger("forum_core.requests")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
}

CallNext = Callable[[Request], Awaitable[Response]]


async def log_requests(request: Request, call_next: CallNext) -> Response:
    """Log method, path, status and duration for every request.

    Cookies and bodies are never logged.
    """
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        client = request.client.host if request.client else "unknown"
        logger.info(
            "%s %s -> %d (%.1f ms) from %s",
            request.method,
            request.url.path,
            status_code,
            elapsed_ms,
            client,
        )


async def add_security_headers(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def setup_middleware(app: FastAPI) -> None:
    """Register the HTTP middleware; logging wraps everything else."""
    app.middleware("http")(add_security_headers)
    app.middleware("http")(log_requests)

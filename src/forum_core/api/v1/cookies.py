"""Session cookie transport."""

from __future__ import annotations

from datetime import datetime

from fastapi import Response

from forum_core.core.settings import settings


def set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    """Attach the session token cookie to ``response``."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        expires=expires_at,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Instruct the client to drop its session cookie immediately."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def cleared_cookie_headers() -> dict[str, str]:
    """Return the ``Set-Cookie`` header that drops the session cookie.

    For responses built from an ``HTTPException``, which do not carry
    headers set on the dependency's ``Response``.
    """
    response = Response()
    clear_session_cookie(response)
    return {"set-cookie": response.headers["set-cookie"]}

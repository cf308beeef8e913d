"""Shared API dependencies: request identity, access policy and rate limiting."""

import logging
import math
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Response, status

from forum_core.core.errors import TooManyRequests
from forum_core.core.settings import settings
from forum_core.models import User
from forum_core.services import (
    AuthService,
    ForumServices,
    RateLimiter,
    ReactionEngine,
)

from .cookies import clear_session_cookie, cleared_cookie_headers

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


def get_services(request: Request) -> ForumServices:
    """Return the service graph built at application startup."""
    return request.app.state.services


ServicesDep = Annotated[ForumServices, Depends(get_services)]


def get_auth_service(services: ServicesDep) -> AuthService:
    return services.auth


def get_rate_limiter(services: ServicesDep) -> RateLimiter:
    return services.rate_limiter


def get_reaction_engine(services: ServicesDep) -> ReactionEngine:
    return services.reactions


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
ReactionEngineDep = Annotated[ReactionEngine, Depends(get_reaction_engine)]


def client_key_for(request: Request) -> str:
    """Return the rate-limit key for a request: the peer host without port."""
    if request.client is None or not request.client.host:
        return "unknown"
    return request.client.host


def wants_json(request: Request) -> bool:
    """Return True for AJAX or JSON clients, which get 401 instead of a redirect."""
    accept = request.headers.get("accept", "")
    return (
        request.headers.get("x-requested-with") == "XMLHttpRequest"
        or "application/json" in accept
    )


def get_optional_user_id(
    request: Request,
    response: Response,
    auth: AuthServiceDep,
) -> int | None:
    """Resolve the session cookie to a user id, or None for anonymous.

    A cookie that no longer maps to a live session is cleared.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None

    user_id = auth.identity_for(token)
    if user_id is None:
        request.state.stale_session = True
        clear_session_cookie(response)
        logger.info("Invalid or expired session presented by %s", client_key_for(request))
    return user_id


OptionalUserIdDep = Annotated[int | None, Depends(get_optional_user_id)]


def require_user_id(request: Request, user_id: OptionalUserIdDep) -> int:
    """Enforce authenticated-only access.

    A stale session cookie is cleared on the rejection response too.

    Raises:
        HTTPException: 401 for JSON clients, otherwise a redirect to the login page.
    """
    if user_id is not None:
        return user_id

    headers: dict[str, str] = {}
    if getattr(request.state, "stale_session", False):
        headers.update(cleared_cookie_headers())

    if wants_json(request):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers=headers or None,
        )
    headers["Location"] = LOGIN_PATH
    raise HTTPException(
        status_code=status.HTTP_302_FOUND,
        detail="Login required",
        headers=headers,
    )


UserIdDep = Annotated[int, Depends(require_user_id)]


def get_current_user(user_id: UserIdDep, auth: AuthServiceDep) -> User:
    """Return the authenticated user record.

    Raises:
        HTTPException: If the session's user no longer exists.
    """
    user = auth.get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def enforce_rate_limit(request: Request, limiter: RateLimiterDep) -> None:
    """Count the request against the client's window.

    Raises:
        HTTPException: 429 with ``Retry-After`` when over budget.
    """
    try:
        limiter.check(client_key_for(request))
    except TooManyRequests as err:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=err.message,
            headers={"Retry-After": str(max(1, math.ceil(err.retry_after)))},
        ) from err


RateLimited = Depends(enforce_rate_limit)

# src/forum_core/api/v1/endpoints/auth.py
"""Authentication endpoints for the forum API."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response, status

from forum_core.core.errors import (
    EmailExists,
    InvalidCredentials,
    InvalidInput,
    SessionNotFound,
    UsernameExists,
)
from forum_core.core.settings import settings
from forum_core.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse

from ..cookies import clear_session_cookie, set_session_cookie
from ..dependencies import AuthServiceDep, CurrentUserDep, RateLimited

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    dependencies=[RateLimited],
)
def register_user(payload: RegisterRequest, auth: AuthServiceDep) -> UserResponse:
    """Create an account from email, username and password."""
    try:
        user = auth.register(payload.email, payload.username, payload.password)
    except InvalidInput as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=err.message,
        ) from err
    except (EmailExists, UsernameExists) as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=err.message,
        ) from err

    return UserResponse.model_validate(user)


@router.post(
    "/login",
    summary="Log in with email or username",
    response_model=LoginResponse,
    dependencies=[RateLimited],
)
def login_user(
    payload: LoginRequest,
    response: Response,
    auth: AuthServiceDep,
) -> LoginResponse:
    """Verify credentials, replace any prior session and set the session cookie."""
    try:
        user, issued = auth.authenticate(payload.login, payload.password)
    except InvalidCredentials as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=err.message,
        ) from err

    set_session_cookie(response, issued.token, issued.expires_at)
    return LoginResponse(user_id=user.id, username=user.username, expires_at=issued.expires_at)


@router.post("/logout", summary="End the current session")
def logout_user(request: Request, response: Response, auth: AuthServiceDep) -> dict[str, str]:
    """Revoke the session, if any, and always clear the cookie."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        try:
            auth.logout(token)
        except SessionNotFound:
            logger.debug("Logout with a session that was already gone")

    clear_session_cookie(response)
    return {"status": "ok"}


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: CurrentUserDep) -> UserResponse:
    """Return the authenticated account."""
    return UserResponse.model_validate(current_user)

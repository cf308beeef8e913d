"""Domain exception types for the forum core.

Services raise these; the API layer translates them into HTTP responses.
Messages are safe to show to clients and never carry query text.
"""

from __future__ import annotations


class ForumError(Exception):
    """Base error for forum core failures."""

    code = "forum_error"
    message = "Forum error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class InvalidCredentials(ForumError):
    """Login or password is wrong; which one is never disclosed."""

    code = "invalid_credentials"
    message = "Invalid email/username or password."


class SessionNotFound(ForumError):
    """Token is absent, expired or revoked."""

    code = "session_not_found"
    message = "Session not found or expired"


class TooManyRequests(ForumError):
    """Client exceeded its request budget for the current window."""

    code = "too_many_requests"
    message = "Too Many Requests"

    def __init__(self, retry_after: float, message: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class Unauthenticated(ForumError):
    """An operation that needs an identity was called without one."""

    code = "unauthenticated"
    message = "Unauthorized"


class NotFound(ForumError):
    """Referenced subject or row does not exist."""

    code = "not_found"
    message = "Not found"


class StoreFailure(ForumError):
    """Underlying persistence error."""

    code = "store_failure"
    message = "Internal Server Error"


class HashingFailure(ForumError):
    """Password hashing could not be performed."""

    code = "hashing_failure"
    message = "Internal Server Error"


class InvalidInput(ForumError):
    """Registration input failed validation."""

    code = "invalid_input"
    message = "invalid input"


class EmailExists(ForumError):
    code = "email_exists"
    message = "Email already registered."


class UsernameExists(ForumError):
    code = "username_exists"
    message = "Username already taken."

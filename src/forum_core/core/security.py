"""Password hashing and session token primitives built on bcrypt."""
from __future__ import annotations

import secrets

import bcrypt

from forum_core.core.errors import HashingFailure
from forum_core.core.settings import settings

# bcrypt only considers the first 72 bytes of input.
_BCRYPT_MAX_BYTES = 72

# 16 random bytes -> 128 bits of entropy.
SESSION_TOKEN_BYTES = 16


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt digest of ``password``.

    Args:
        password: Plain-text password.
        rounds: bcrypt cost factor; defaults to ``settings.bcrypt_rounds``.

    Raises:
        HashingFailure: If bcrypt cannot produce a salt or digest.
    """
    cost = settings.bcrypt_rounds if rounds is None else rounds
    try:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=cost)).decode("ascii")
    except (ValueError, OSError) as err:
        raise HashingFailure() from err


def verify_password(hashed: str, password: str) -> bool:
    """Return True if ``password`` matches ``hashed``.

    A malformed digest is reported exactly like a wrong password.
    """
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        return False


def generate_session_token() -> str:
    """Return an unguessable, URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)

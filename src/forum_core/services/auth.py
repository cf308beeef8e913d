"""Registration, login and logout on top of the session manager."""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from forum_core.core import security
from forum_core.core.errors import (
    EmailExists,
    InvalidCredentials,
    InvalidInput,
    SessionNotFound,
    UsernameExists,
)
from forum_core.db.session import transaction
from forum_core.models.user import User
from forum_core.repositories import UserRepository
from forum_core.services.sessions import IssuedSession, SessionManager

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
# Unicode letters, digits and underscore.
USERNAME_RE = re.compile(r"^\w{3,20}$")
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 32


def validate_user_credentials(email: str, username: str, password: str) -> None:
    """Check registration input.

    Raises:
        InvalidInput: Describing the first field that failed.
    """
    if not EMAIL_RE.match(email) or not 5 <= len(email) <= 50:
        raise InvalidInput("invalid email format or length (5-50 characters)")
    if not USERNAME_RE.fullmatch(username):
        raise InvalidInput(
            "invalid username format or length "
            "(3-20 characters, letters, numbers, underscore only)"
        )
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise InvalidInput("invalid password format or length (6-32 characters)")


def _duplicate_error(err: IntegrityError) -> EmailExists | UsernameExists:
    """Name the unique column behind a constraint violation."""
    if "email" in str(err.orig).lower():
        return EmailExists()
    return UsernameExists()


@lru_cache(maxsize=1)
def _dummy_digest() -> str:
    # Verified against when the login is unknown, so both failure paths cost the same.
    return security.hash_password("forum-core-unknown-login")


class AuthService:
    """Account operations exposed to request handlers."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        sessions: SessionManager,
    ) -> None:
        self._session_factory = session_factory
        self.sessions = sessions

    def register(self, email: str, username: str, password: str) -> User:
        """Create a new account.

        Raises:
            InvalidInput: If any field fails validation.
            EmailExists: If the email is taken.
            UsernameExists: If the username is taken, ignoring case.
        """
        validate_user_credentials(email, username, password)
        password_hash = security.hash_password(password)

        with transaction(self._session_factory, "register_user") as db:
            users = UserRepository(db)
            if users.email_exists(email):
                raise EmailExists()
            if users.username_exists(username):
                raise UsernameExists()
            try:
                user = users.create(email=email, username=username, password_hash=password_hash)
            except IntegrityError as err:
                # A concurrent registration won the race past the checks above.
                raise _duplicate_error(err) from err

        logger.info("Registered user '%s' (ID: %d)", user.username, user.id)
        return user

    def authenticate(self, login: str, password: str) -> tuple[User, IssuedSession]:
        """Verify a login (email or username) and open a fresh session.

        Raises:
            InvalidCredentials: If the login is unknown or the password is wrong.
        """
        with transaction(self._session_factory, "find_credentials", read_only=True) as db:
            user = UserRepository(db).find_by_login(login)

        if user is None:
            security.verify_password(_dummy_digest(), password)
            logger.info("Login failed for unknown login %r", login)
            raise InvalidCredentials()
        if not security.verify_password(user.password_hash, password):
            logger.info("Login failed for user '%s' (ID: %d)", user.username, user.id)
            raise InvalidCredentials()

        issued = self.sessions.create_session(user.id)
        logger.info("User '%s' (ID: %d) logged in successfully.", user.username, user.id)
        return user, issued

    def identity_for(self, token: str | None) -> int | None:
        """Return the user id for ``token``, or None for anonymous."""
        if not token:
            return None
        try:
            return self.sessions.resolve(token)
        except SessionNotFound:
            return None

    def logout(self, token: str) -> None:
        """Revoke the session behind ``token``.

        Raises:
            SessionNotFound: If the session was already gone.
        """
        self.sessions.revoke(token)

    def get_user(self, user_id: int) -> User | None:
        with transaction(self._session_factory, "get_user", read_only=True) as db:
            return UserRepository(db).get(user_id)

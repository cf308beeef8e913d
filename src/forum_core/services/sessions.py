"""Session lifecycle: issue, resolve, revoke and expire login sessions."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session, sessionmaker

from forum_core.core.errors import NotFound, SessionNotFound
from forum_core.core.security import generate_session_token
from forum_core.core.settings import settings
from forum_core.db.session import transaction
from forum_core.db.time import as_utc, utcnow
from forum_core.repositories import SessionRepository, UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedSession:
    """Token handed to a client after a successful login."""

    token: str
    user_id: int
    expires_at: datetime


class SessionManager:
    """Single-session-per-account store backed by the ``sessions`` table.

    Every session moves NoSession -> Active -> (Expired | Revoked), and
    both terminal states delete the row. Expiry is enforced lazily by
    ``resolve``; ``sweep_expired`` only reclaims space.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the manager.

        Args:
            session_factory: Factory for database sessions; one per operation.
            ttl: Session lifetime. Defaults to ``settings.session_ttl``.
            clock: Returns the current aware UTC time.
        """
        self._session_factory = session_factory
        self.ttl = settings.session_ttl if ttl is None else ttl
        self._clock = clock

    def create_session(self, user_id: int) -> IssuedSession:
        """Replace every session of ``user_id`` with a fresh one.

        The delete and insert share one transaction, so the user is never
        observed with zero or two sessions.

        Raises:
            NotFound: If the user does not exist.
        """
        issued = IssuedSession(
            token=generate_session_token(),
            user_id=user_id,
            expires_at=self._clock() + self.ttl,
        )
        with transaction(self._session_factory, "create_session") as db:
            if UserRepository(db).lock(user_id) is None:
                raise NotFound("User not found")
            sessions = SessionRepository(db)
            replaced = sessions.delete_for_user(user_id)
            sessions.insert(user_id=user_id, token=issued.token, expires_at=issued.expires_at)

        if replaced:
            logger.info("Replaced %d prior session(s) for user %d", replaced, user_id)
        return issued

    def resolve(self, token: str) -> int:
        """Return the user id owning ``token``.

        The lookup does not take the write lock; only an expired row is
        deleted, in its own write transaction, before reporting it missing.

        Raises:
            SessionNotFound: If the token is unknown or expired.
        """
        if not token:
            raise SessionNotFound()

        with transaction(self._session_factory, "resolve_session", read_only=True) as db:
            row = SessionRepository(db).find_by_token(token)
        if row is None:
            raise SessionNotFound()

        if self._clock() > as_utc(row.expires_at):
            with transaction(self._session_factory, "expire_session") as db:
                SessionRepository(db).delete_by_token(token)
            logger.debug("Expired session removed for user %d", row.user_id)
            raise SessionNotFound()
        return row.user_id

    def revoke(self, token: str) -> None:
        """Delete the session for ``token``.

        Raises:
            SessionNotFound: If no row matched.
        """
        with transaction(self._session_factory, "revoke_session") as db:
            deleted = SessionRepository(db).delete_by_token(token) if token else 0
        if not deleted:
            raise SessionNotFound()

    def sweep_expired(self) -> int:
        """Delete all expired sessions and return how many were removed."""
        now = self._clock()
        with transaction(self._session_factory, "sweep_sessions") as db:
            removed = SessionRepository(db).delete_expired(now)
        if removed:
            logger.info("Cleaned up %d expired sessions.", removed)
        return removed

    def session_count(self, user_id: int) -> int:
        with transaction(self._session_factory, "count_sessions", read_only=True) as db:
            return SessionRepository(db).count_for_user(user_id)

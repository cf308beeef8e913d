"""Data access helpers for login sessions."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from forum_core.models.session import UserSession

__all__ = ["SessionRepository"]


class SessionRepository:
    """Session-table operations; the caller owns the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(self, *, user_id: int, token: str, expires_at: datetime) -> UserSession:
        row = UserSession(user_id=user_id, token=token, expires_at=expires_at)
        self.session.add(row)
        self.session.flush()
        return row

    def find_by_token(self, token: str) -> UserSession | None:
        stmt = select(UserSession).where(UserSession.token == token)
        return self.session.execute(stmt).scalars().first()

    def delete_for_user(self, user_id: int) -> int:
        """Delete every session of ``user_id`` and return how many were removed."""
        result = self.session.execute(delete(UserSession).where(UserSession.user_id == user_id))
        return result.rowcount or 0

    def delete_by_token(self, token: str) -> int:
        result = self.session.execute(delete(UserSession).where(UserSession.token == token))
        return result.rowcount or 0

    def delete_expired(self, now: datetime) -> int:
        """Delete sessions that expired before ``now``."""
        result = self.session.execute(delete(UserSession).where(UserSession.expires_at < now))
        return result.rowcount or 0

    def count_for_user(self, user_id: int) -> int:
        stmt = select(func.count()).select_from(UserSession).where(UserSession.user_id == user_id)
        return int(self.session.execute(stmt).scalar_one())

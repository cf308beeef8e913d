"""Data access helpers for user accounts."""
from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from forum_core.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(self, user_id: int) -> User | None:
        """Return a user by identifier."""
        return self.session.get(User, user_id)

    def find_by_login(self, login: str) -> User | None:
        """Return the user whose email, or case-insensitive username, equals ``login``."""
        stmt = select(User).where(
            or_(User.email == login, func.lower(User.username) == login.lower())
        )
        return self.session.execute(stmt).scalars().first()

    def email_exists(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email)
        return self.session.execute(stmt).first() is not None

    def username_exists(self, username: str) -> bool:
        stmt = select(User.id).where(func.lower(User.username) == username.lower())
        return self.session.execute(stmt).first() is not None

    def create(self, *, email: str, username: str, password_hash: str) -> User:
        """Insert a new user and return the persisted ORM instance."""
        user = User(email=email, username=username, password_hash=password_hash)
        self.session.add(user)
        self.session.flush()
        return user

    def lock(self, user_id: int) -> User | None:
        """Return the user row locked for update, serializing per-user writes."""
        stmt = select(User).where(User.id == user_id).with_for_update()
        return self.session.execute(stmt).scalars().first()

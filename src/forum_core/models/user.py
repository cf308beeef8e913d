# src/forum_core/models/user.py
"""SQLAlchemy models for registered users."""

from __future__ import annotations

from sqlalchemy import Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base


class User(Base):
    """Registered account; the password digest is the user's credential."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        # Never include the password digest.
        return f"User(id={self.id!r}, username={self.username!r})"


# Usernames are unique regardless of case.
Index("ix_users_username_lower", func.lower(User.username), unique=True)

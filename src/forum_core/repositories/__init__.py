"""Data access layer over SQLAlchemy sessions."""

from .reaction_repo import ReactionRepository
from .session_repo import SessionRepository
from .user_repo import UserRepository

__all__ = ["ReactionRepository", "SessionRepository", "UserRepository"]

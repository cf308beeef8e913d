# src/forum_core/models/__init__.py
"""SQLAlchemy models for the forum core."""

from .post import Comment, Post
from .reaction import CommentReaction, Polarity, PostReaction, SubjectKind
from .session import UserSession
from .user import User

__all__ = [
    "Comment", "Post",
    "CommentReaction", "PostReaction", "Polarity", "SubjectKind",
    "UserSession",
    "User",
]

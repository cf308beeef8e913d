# src/forum_core/models/reaction.py
"""Models capturing like/dislike reactions on posts and comments."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base


class SubjectKind(str, Enum):
    """Kind of entity a reaction is attached to."""

    POST = "post"
    COMMENT = "comment"


class Polarity(str, Enum):
    """Direction of a reaction."""

    LIKE = "like"
    DISLIKE = "dislike"

    @classmethod
    def from_is_like(cls, is_like: bool) -> Polarity:
        return cls.LIKE if is_like else cls.DISLIKE

    @property
    def is_like(self) -> bool:
        return self is Polarity.LIKE


class PostReaction(Base):
    """Per-user reaction on a post.

    The unique index on (post_id, user_id) guarantees at most one
    reaction per user per post; absence of a row means "no reaction".
    """

    __tablename__ = "post_reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[int] = mapped_column(
        "post_id",
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # True = like, False = dislike.
    is_like: Mapped[bool] = mapped_column(Boolean, nullable=False)


class CommentReaction(Base):
    """Per-user reaction on a comment."""

    __tablename__ = "comment_reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[int] = mapped_column(
        "comment_id",
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_like: Mapped[bool] = mapped_column(Boolean, nullable=False)


Index(
    "uq_post_reactions_post_user",
    PostReaction.subject_id,
    PostReaction.user_id,
    unique=True,
)
Index(
    "uq_comment_reactions_comment_user",
    CommentReaction.subject_id,
    CommentReaction.user_id,
    unique=True,
)

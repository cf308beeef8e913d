"""Data access helpers for post and comment reactions."""
from __future__ import annotations

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.orm import Session

from forum_core.models.post import Comment, Post
from forum_core.models.reaction import CommentReaction, Polarity, PostReaction, SubjectKind

__all__ = ["ReactionRepository"]

_SUBJECT_MODELS = {
    SubjectKind.POST: Post,
    SubjectKind.COMMENT: Comment,
}

_REACTION_MODELS = {
    SubjectKind.POST: PostReaction,
    SubjectKind.COMMENT: CommentReaction,
}


class ReactionRepository:
    """Reaction-table operations for one subject kind.

    Posts and comments keep reactions in separate tables with identical
    shape; this class hides which one is in use.
    """

    def __init__(self, session: Session, kind: SubjectKind) -> None:
        self.session = session
        self.kind = SubjectKind(kind)
        self._subject = _SUBJECT_MODELS[self.kind]
        self._model = _REACTION_MODELS[self.kind]

    def subject_exists(self, subject_id: int) -> bool:
        stmt = select(self._subject.id).where(self._subject.id == subject_id)
        return self.session.execute(stmt).first() is not None

    def lock_subject(self, subject_id: int) -> bool:
        """Lock the subject row for update; return False if it does not exist."""
        stmt = select(self._subject.id).where(self._subject.id == subject_id).with_for_update()
        return self.session.execute(stmt).first() is not None

    def find(self, subject_id: int, user_id: int) -> Polarity | None:
        """Return the user's current polarity on the subject, if any."""
        stmt = select(self._model.is_like).where(
            self._model.subject_id == subject_id,
            self._model.user_id == user_id,
        )
        is_like = self.session.execute(stmt).scalar_one_or_none()
        if is_like is None:
            return None
        return Polarity.from_is_like(is_like)

    def insert(self, subject_id: int, user_id: int, polarity: Polarity) -> None:
        self.session.add(
            self._model(subject_id=subject_id, user_id=user_id, is_like=polarity.is_like)
        )
        self.session.flush()

    def update_polarity(self, subject_id: int, user_id: int, polarity: Polarity) -> None:
        self.session.execute(
            update(self._model)
            .where(self._model.subject_id == subject_id, self._model.user_id == user_id)
            .values(is_like=polarity.is_like)
        )

    def delete(self, subject_id: int, user_id: int) -> None:
        self.session.execute(
            delete(self._model).where(
                self._model.subject_id == subject_id,
                self._model.user_id == user_id,
            )
        )

    def count(self, subject_id: int) -> tuple[int, int]:
        """Return ``(likes, dislikes)`` for the subject."""
        stmt = select(
            func.coalesce(func.sum(case((self._model.is_like.is_(True), 1), else_=0)), 0),
            func.coalesce(func.sum(case((self._model.is_like.is_(False), 1), else_=0)), 0),
        ).where(self._model.subject_id == subject_id)
        likes, dislikes = self.session.execute(stmt).one()
        return int(likes), int(dislikes)

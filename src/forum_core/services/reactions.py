"""Like/dislike state transitions for posts and comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from forum_core.core.errors import NotFound, StoreFailure, Unauthenticated
from forum_core.db.session import transaction
from forum_core.models.reaction import Polarity, SubjectKind
from forum_core.repositories import ReactionRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class ReactionOutcome:
    """Aggregate counts after a toggle, plus the caller's new state."""

    likes: int
    dislikes: int
    state: Polarity | None


def next_state(current: Polarity | None, requested: Polarity) -> Polarity | None:
    """Return the reaction state after ``requested`` is applied to ``current``.

    Repeating the current polarity clears it; anything else switches to the
    requested polarity.
    """
    if current is requested:
        return None
    return requested


class ReactionEngine:
    """Applies reaction toggles as one transaction per call.

    No in-process lock is taken: the subject row is locked for update (and
    SQLite transactions begin IMMEDIATE), so toggles on one subject
    serialize at the store while different subjects proceed in parallel.
    The unique index on (subject, user) catches anything that slips through;
    such a conflict is retried against the committed state.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._session_factory = session_factory
        self._max_attempts = max(1, max_attempts)

    def toggle(
        self,
        subject_id: int,
        subject_kind: SubjectKind | str,
        user_id: int | None,
        polarity: Polarity | str,
    ) -> ReactionOutcome:
        """Apply ``polarity`` for ``user_id`` on a subject and return fresh counts.

        Raises:
            Unauthenticated: If no user id is supplied.
            NotFound: If the subject does not exist.
            StoreFailure: If the store fails or conflicts persist.
        """
        if user_id is None:
            raise Unauthenticated()
        kind = SubjectKind(subject_kind)
        requested = Polarity(polarity)

        state = self._apply(subject_id, kind, user_id, requested)
        likes, dislikes = self._count(subject_id, kind)
        logger.info(
            "Reaction on %s %d by user %d: %s (likes=%d, dislikes=%d)",
            kind.value,
            subject_id,
            user_id,
            state.value if state else "none",
            likes,
            dislikes,
        )
        return ReactionOutcome(likes=likes, dislikes=dislikes, state=state)

    def _apply(
        self,
        subject_id: int,
        kind: SubjectKind,
        user_id: int,
        requested: Polarity,
    ) -> Polarity | None:
        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._session_factory.begin() as db:
                    reactions = ReactionRepository(db, kind)
                    if not reactions.lock_subject(subject_id):
                        raise NotFound(f"{kind.value.capitalize()} not found")

                    current = reactions.find(subject_id, user_id)
                    target = next_state(current, requested)
                    if current is None and target is not None:
                        reactions.insert(subject_id, user_id, target)
                    elif target is None:
                        reactions.delete(subject_id, user_id)
                    else:
                        reactions.update_polarity(subject_id, user_id, target)
                return target
            except IntegrityError:
                # Duplicate insert or the subject vanished; re-read and retry.
                logger.warning(
                    "Reaction conflict on %s %d (attempt %d/%d)",
                    kind.value,
                    subject_id,
                    attempt,
                    self._max_attempts,
                )
            except SQLAlchemyError as err:
                logger.error(
                    "Store failure during toggle_reaction: %s", type(err).__name__, exc_info=True
                )
                raise StoreFailure() from err
        raise StoreFailure("Reaction conflict could not be resolved")

    def _count(self, subject_id: int, kind: SubjectKind) -> tuple[int, int]:
        with transaction(self._session_factory, "count_reactions", read_only=True) as db:
            return ReactionRepository(db, kind).count(subject_id)

    def counts(self, subject_id: int, subject_kind: SubjectKind | str) -> tuple[int, int]:
        """Return ``(likes, dislikes)`` for an existing subject.

        Raises:
            NotFound: If the subject does not exist.
        """
        kind = SubjectKind(subject_kind)
        with transaction(self._session_factory, "count_reactions", read_only=True) as db:
            reactions = ReactionRepository(db, kind)
            if not reactions.subject_exists(subject_id):
                raise NotFound(f"{kind.value.capitalize()} not found")
            return reactions.count(subject_id)

    def current_reaction(
        self,
        subject_id: int,
        subject_kind: SubjectKind | str,
        user_id: int,
    ) -> Polarity | None:
        """Return the user's reaction on the subject, or None."""
        kind = SubjectKind(subject_kind)
        with transaction(self._session_factory, "find_reaction", read_only=True) as db:
            return ReactionRepository(db, kind).find(subject_id, user_id)

# src/forum_core/api/v1/endpoints/reactions.py
"""Like/dislike endpoints for posts and comments.

Reaction toggles are deliberately not rate limited: users must be able to
flip a reaction quickly.
"""

from fastapi import APIRouter, HTTPException, status

from forum_core.core.errors import NotFound
from forum_core.models.reaction import SubjectKind
from forum_core.schemas.reaction import (
    MyReactionResponse,
    ReactionCounts,
    ReactionResponse,
    ReactionToggle,
)

from ..dependencies import ReactionEngineDep, UserIdDep

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("/", response_model=ReactionResponse)
def toggle_reaction(
    payload: ReactionToggle,
    user_id: UserIdDep,
    engine: ReactionEngineDep,
) -> ReactionResponse:
    """Toggle a like or dislike and return the subject's fresh counts."""
    try:
        outcome = engine.toggle(
            payload.subject_id,
            payload.subject_kind,
            user_id,
            payload.polarity,
        )
    except NotFound as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=err.message) from err

    return ReactionResponse(
        likes=outcome.likes,
        dislikes=outcome.dislikes,
        reaction=outcome.state,
    )


@router.get("/{subject_kind}/{subject_id}", response_model=ReactionCounts)
def get_reaction_counts(
    subject_kind: SubjectKind,
    subject_id: int,
    engine: ReactionEngineDep,
) -> ReactionCounts:
    """Return like and dislike counts for a post or comment."""
    try:
        likes, dislikes = engine.counts(subject_id, subject_kind)
    except NotFound as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=err.message) from err
    return ReactionCounts(likes=likes, dislikes=dislikes)


@router.get("/{subject_kind}/{subject_id}/mine", response_model=MyReactionResponse)
def get_my_reaction(
    subject_kind: SubjectKind,
    subject_id: int,
    user_id: UserIdDep,
    engine: ReactionEngineDep,
) -> MyReactionResponse:
    """Return the current user's reaction on a post or comment."""
    return MyReactionResponse(reaction=engine.current_reaction(subject_id, subject_kind, user_id))

"""Reaction-related Pydantic schemas."""

from pydantic import BaseModel, Field

from forum_core.models.reaction import Polarity, SubjectKind


class ReactionToggle(BaseModel):
    """Schema for toggling a like or dislike."""

    subject_id: int = Field(..., ge=1)
    subject_kind: SubjectKind = Field(..., description="post or comment")
    polarity: Polarity = Field(..., description="like or dislike")


class ReactionCounts(BaseModel):
    likes: int
    dislikes: int


class ReactionResponse(ReactionCounts):
    """Counts after a toggle plus the caller's resulting reaction."""

    reaction: Polarity | None = Field(None, description="None when the toggle cleared it")


class MyReactionResponse(BaseModel):
    reaction: Polarity | None = None

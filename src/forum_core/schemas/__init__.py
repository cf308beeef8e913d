"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .reaction import MyReactionResponse, ReactionCounts, ReactionResponse, ReactionToggle
from .user import LoginRequest, LoginResponse, RegisterRequest, UserResponse

__all__ = [
    "MyReactionResponse", "ReactionCounts", "ReactionResponse", "ReactionToggle",
    "LoginRequest", "LoginResponse", "RegisterRequest", "UserResponse",
]

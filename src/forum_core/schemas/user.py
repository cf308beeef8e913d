"""User and authentication Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Registration form; field rules are enforced by the auth service."""

    email: str = Field(..., description="Account email address")
    username: str = Field(..., description="3-20 letters, digits or underscores")
    password: str = Field(..., description="6-32 characters")


class LoginRequest(BaseModel):
    """Login with either email or username."""

    login: str = Field(..., description="Email or username")
    password: str


class UserResponse(BaseModel):
    """Public view of an account."""

    id: int
    username: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Returned after a successful login; the token travels in a cookie."""

    user_id: int
    username: str
    expires_at: datetime

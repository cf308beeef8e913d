# src/forum_core/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .reactions import router as reactions_router

__all__ = [
    "auth_router",
    "reactions_router",
]

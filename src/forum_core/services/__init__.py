"""Business logic services for the forum core."""

from .auth import AuthService
from .container import ForumServices, build_services
from .periodic import PeriodicTask
from .rate_limit import RateLimiter, RateLimitResult
from .reactions import ReactionEngine, ReactionOutcome
from .sessions import IssuedSession, SessionManager

__all__ = [
    "AuthService",
    "ForumServices", "build_services",
    "PeriodicTask",
    "RateLimiter", "RateLimitResult",
    "ReactionEngine", "ReactionOutcome",
    "IssuedSession", "SessionManager",
]

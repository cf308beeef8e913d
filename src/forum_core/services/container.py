"""Construction of the process-wide service graph."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from forum_core.core.settings import Settings, settings
from forum_core.services.auth import AuthService
from forum_core.services.periodic import PeriodicTask
from forum_core.services.rate_limit import RateLimiter
from forum_core.services.reactions import ReactionEngine
from forum_core.services.sessions import SessionManager


@dataclass
class ForumServices:
    """Explicitly owned stores and services, built once at startup."""

    sessions: SessionManager
    rate_limiter: RateLimiter
    reactions: ReactionEngine
    auth: AuthService
    session_sweep_interval_seconds: float

    def background_tasks(self) -> list[PeriodicTask]:
        """Return the expiry and eviction sweeps for these services."""
        return [
            PeriodicTask(
                "session-expiry",
                self.session_sweep_interval_seconds,
                self.sessions.sweep_expired,
            ),
            PeriodicTask(
                "rate-limit-eviction",
                self.rate_limiter.window_seconds,
                self.rate_limiter.evict_stale,
            ),
        ]


def build_services(
    session_factory: sessionmaker[Session] | None = None,
    *,
    app_settings: Settings | None = None,
) -> ForumServices:
    """Wire the service graph from settings.

    Args:
        session_factory: Database session factory; defaults to ``SessionLocal``.
        app_settings: Settings to read; defaults to the module settings.
    """
    cfg = app_settings or settings
    if session_factory is None:
        from forum_core.db.session import SessionLocal

        session_factory = SessionLocal

    sessions = SessionManager(session_factory, ttl=cfg.session_ttl)
    return ForumServices(
        sessions=sessions,
        rate_limiter=RateLimiter(
            max_requests=cfg.rate_limit_max_requests,
            window_seconds=cfg.rate_limit_window_seconds,
        ),
        reactions=ReactionEngine(session_factory),
        auth=AuthService(session_factory, sessions),
        session_sweep_interval_seconds=cfg.session_sweep_interval_seconds,
    )

"""In-memory fixed-window rate limiter keyed by client host.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- A window opens on the first request after the previous one lapsed, so a
  burst straddling two windows can admit up to ``2 * max_requests``.
- Each client has its own lock; the table lock is held only to look up,
  insert or evict entries, never across a counter update.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from forum_core.core.errors import TooManyRequests
from forum_core.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single ``allow`` call.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        retry_after_seconds: Time until the window lapses when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: float | None = None


@dataclass
class ClientWindow:
    """Counter state for one client key."""

    window_start: float
    request_count: int = 0
    evicted: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class RateLimiter:
    """Fixed-window request counter per client key."""

    def __init__(
        self,
        *,
        max_requests: int | None = None,
        window_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_requests: Requests admitted per window.
            window_seconds: Window length in seconds.
            clock: Monotonic time source in seconds.

        Raises:
            ValueError: If either limit is not positive.
        """
        self.max_requests = (
            settings.rate_limit_max_requests if max_requests is None else max_requests
        )
        self.window_seconds = (
            settings.rate_limit_window_seconds if window_seconds is None else window_seconds
        )
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._clock = clock
        self._table_lock = threading.Lock()
        self._clients: dict[str, ClientWindow] = {}

    def __len__(self) -> int:
        with self._table_lock:
            return len(self._clients)

    def _get_or_create(self, client_key: str) -> ClientWindow:
        with self._table_lock:
            state = self._clients.get(client_key)
            if state is None:
                state = ClientWindow(window_start=self._clock())
                self._clients[client_key] = state
            return state

    def allow(self, client_key: str) -> RateLimitResult:
        """Count one request for ``client_key`` and decide whether it passes.

        A denial does not reset the window; the count keeps accumulating
        until the window lapses.

        Raises:
            ValueError: If ``client_key`` is empty.
        """
        if not client_key:
            raise ValueError("client_key must be a non-empty string")

        while True:
            state = self._get_or_create(client_key)
            with state.lock:
                if state.evicted:
                    # Dropped by eviction while we waited; look it up again.
                    continue

                now = self._clock()
                if state.request_count == 0 or now - state.window_start > self.window_seconds:
                    state.window_start = now
                    state.request_count = 1
                    return RateLimitResult(
                        allowed=True,
                        limit=self.max_requests,
                        remaining=self.max_requests - 1,
                    )

                state.request_count += 1
                if state.request_count > self.max_requests:
                    retry_after = max(0.0, state.window_start + self.window_seconds - now)
                    logger.debug("Rate limit exceeded for %s", client_key)
                    return RateLimitResult(
                        allowed=False,
                        limit=self.max_requests,
                        remaining=0,
                        retry_after_seconds=retry_after,
                    )
                return RateLimitResult(
                    allowed=True,
                    limit=self.max_requests,
                    remaining=self.max_requests - state.request_count,
                )

    def check(self, client_key: str) -> RateLimitResult:
        """Like ``allow`` but raise on denial.

        Raises:
            TooManyRequests: If the client is over its budget.
        """
        result = self.allow(client_key)
        if not result.allowed:
            raise TooManyRequests(retry_after=result.retry_after_seconds or 0.0)
        return result

    def evict_stale(self) -> int:
        """Drop clients idle for more than two windows; return how many."""
        cutoff = 2 * self.window_seconds
        removed = 0
        with self._table_lock:
            now = self._clock()
            for client_key, state in list(self._clients.items()):
                with state.lock:
                    if now - state.window_start > cutoff:
                        state.evicted = True
                        del self._clients[client_key]
                        removed += 1
        if removed:
            logger.debug("Evicted %d idle rate-limit entries", removed)
        return removed

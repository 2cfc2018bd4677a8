"""
Dashboard Rate Limiter — In-memory sliding window per access token.

Keyed by scope:key (e.g. "admin:<token hash>"). The limit defaults to
settings.admin_rate_limit_rpm; windows live in process memory and reset on
restart.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque

from whatscommerce.config import settings

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Requests-per-window limiter that can tell a caller when to retry."""

    def __init__(self, window_seconds: float = 60.0) -> None:
        self._window_seconds = window_seconds
        self._hits: dict[str, deque[float]] = {}

    def _prune(self, window_key: str, now: float) -> deque[float]:
        hits = self._hits.get(window_key)
        if hits is None:
            return deque()
        while hits and hits[0] <= now - self._window_seconds:
            hits.popleft()
        if not hits:
            # Idle tokens don't keep an entry around
            del self._hits[window_key]
        return hits

    def check(self, scope: str, key: str, rpm_limit: int | None = None) -> bool:
        """Record a request; False when the key is already at its limit."""
        limit = settings.admin_rate_limit_rpm if rpm_limit is None else rpm_limit
        window_key = f"{scope}:{key}"
        now = time.monotonic()

        hits = self._prune(window_key, now)
        if len(hits) >= limit:
            logger.warning("Rate limit hit: %s (%d per %.0fs)", scope, limit, self._window_seconds)
            return False

        hits.append(now)
        self._hits[window_key] = hits
        return True

    def retry_after(self, scope: str, key: str) -> int:
        """Whole seconds until the oldest request leaves the window (0 if none)."""
        window_key = f"{scope}:{key}"
        now = time.monotonic()
        hits = self._prune(window_key, now)
        if not hits:
            return 0
        return max(1, math.ceil(hits[0] + self._window_seconds - now))

    def tracked_keys(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        """Clear all windows (for testing)."""
        self._hits.clear()


_rate_limiter: SlidingWindowRateLimiter | None = None


def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Get or create the singleton rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = SlidingWindowRateLimiter()
    return _rate_limiter


def reset_rate_limiter() -> None:
    """Drop the singleton (for testing)."""
    global _rate_limiter
    _rate_limiter = None

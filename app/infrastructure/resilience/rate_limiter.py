"""Per-key fixed-window rate limiter.

Each key (``"{operation}:{client_id}"``) owns a window that admits
``max_requests`` calls per ``window_seconds``. The first call after a window
expires starts a fresh window. A denied call never increments the counter,
so ``count <= limit`` always holds.

All window reads and writes happen under one ``threading.Lock`` so two
concurrent checks for the same key can never both pass the limit. The lock
is never held across an ``await``.

Usage:
    limiter = RateLimiter(max_requests=100, window_seconds=60)
    decision = limiter.is_allowed(rate_limit_key("send_message", client_id))
    if not decision.allowed:
        raise RateLimitedError(retry_after=decision.retry_after(limiter.clock.now()))
"""

import math
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from infrastructure.logging import get_module_logger
from infrastructure.resilience.clock import Clock, SystemClock

logger = get_module_logger()


def rate_limit_key(operation: str, client_id: Optional[str]) -> str:
    """Build the limiter key for an operation performed by a client."""
    return f"{operation}:{client_id or 'unknown'}"


@dataclass
class RateWindow:
    """Counter for one key within one fixed window."""

    key: str
    count: int
    window_start: float
    limit: int
    window_seconds: float

    @property
    def reset_time(self) -> float:
        return self.window_start + self.window_seconds

    def is_expired(self, now: float) -> bool:
        return now - self.window_start >= self.window_seconds


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check.

    Attributes:
        allowed: Whether the call may proceed
        remaining: Calls left in the current window
        reset_time: Epoch seconds at which the window resets
    """

    allowed: bool
    remaining: int
    reset_time: float

    def retry_after(self, now: float) -> int:
        """Whole seconds until the window resets, never less than one."""
        return max(1, math.ceil(self.reset_time - now))


class RateLimiter:
    """Thread-safe fixed-window limiter keyed by operation and client.

    Args:
        max_requests: Calls admitted per key per window
        window_seconds: Window length
        clock: Time source (defaults to SystemClock)
        cleanup_interval: Number of checks between purges of expired windows
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Optional[Clock] = None,
        cleanup_interval: int = 1000,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock or SystemClock()
        self.cleanup_interval = cleanup_interval

        self._windows: Dict[str, RateWindow] = {}
        self._checks = 0
        self._lock = threading.Lock()

    def is_allowed(self, key: str) -> RateLimitDecision:
        """Check and record one call for ``key``.

        Never raises; denial is reported through the decision.
        """
        with self._lock:
            now = self.clock.now()
            self._checks += 1
            if self._checks % self.cleanup_interval == 0:
                self._purge_expired_locked(now)

            window = self._windows.get(key)
            if window is None or window.is_expired(now):
                window = RateWindow(
                    key=key,
                    count=1,
                    window_start=now,
                    limit=self.max_requests,
                    window_seconds=self.window_seconds,
                )
                self._windows[key] = window
                return RateLimitDecision(
                    allowed=True,
                    remaining=window.limit - 1,
                    reset_time=window.reset_time,
                )

            if window.count >= window.limit:
                logger.warning(
                    "rate_limit_exceeded",
                    key=key,
                    limit=window.limit,
                    reset_in_seconds=round(window.reset_time - now, 3),
                )
                return RateLimitDecision(
                    allowed=False, remaining=0, reset_time=window.reset_time
                )

            window.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=window.limit - window.count,
                reset_time=window.reset_time,
            )

    def get_window(self, key: str) -> Optional[RateWindow]:
        """Snapshot of the current window for ``key``, if one exists."""
        with self._lock:
            window = self._windows.get(key)
            if window is None:
                return None
            return RateWindow(
                key=window.key,
                count=window.count,
                window_start=window.window_start,
                limit=window.limit,
                window_seconds=window.window_seconds,
            )

    def reset(self, key: Optional[str] = None) -> None:
        """Forget one key's window, or every window when ``key`` is None."""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)

    def purge_expired(self) -> int:
        """Drop expired windows. Returns the number removed."""
        with self._lock:
            return self._purge_expired_locked(self.clock.now())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [k for k, w in self._windows.items() if w.is_expired(now)]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("rate_limit_windows_purged", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

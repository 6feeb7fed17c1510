"""Injectable time and randomness sources.

Every time-dependent component (rate limiter windows, circuit breaker
cooldowns, retry backoff, quiet hours) reads time through a ``Clock`` so
tests can substitute a deterministic one. Jitter reads randomness through a
``RandomSource`` callable returning a float in ``[0, 1)``.
"""

import asyncio
import random
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable

RandomSource = Callable[[], float]

default_random: RandomSource = random.random


class Clock(ABC):
    """Source of the current time and of non-blocking waits."""

    @abstractmethod
    def now(self) -> float:
        """Current time as epoch seconds."""

    def now_datetime(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        return datetime.fromtimestamp(self.now(), tz=timezone.utc)

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the calling coroutine without blocking the event loop."""


class SystemClock(Clock):
    """Wall clock backed by ``time.time`` and ``asyncio.sleep``."""

    def now(self) -> float:
        return time.time()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))

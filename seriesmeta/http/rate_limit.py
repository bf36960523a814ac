"""
Per-provider admission control backed by pyrate-limiter.

Every attempt made by `RateLimitedExecutor` takes exactly one permit from the
limiter of the provider it belongs to. Waiting is bounded: a caller that does
not obtain a permit within `RateLimiterConfig.timeout_seconds` gets a
`RateLimitTimeout` instead of blocking forever.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from pyrate_limiter import Limiter, Rate

from seriesmeta.http.errors import RateLimitTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimiterConfig:
    permits_per_period: int = 10
    period_seconds: float = 1.0
    timeout_seconds: float = 5.0

    def __post_init__(self) -> None:
        if self.permits_per_period < 1:
            raise ValueError(f"permits_per_period must be >= 1 (got {self.permits_per_period}).")
        if self.period_seconds <= 0:
            raise ValueError(f"period_seconds must be positive (got {self.period_seconds}).")
        if self.timeout_seconds < 0:
            raise ValueError(f"timeout_seconds must be >= 0 (got {self.timeout_seconds}).")


class RateLimiter(Protocol):
    """Port consumed by the executor; one instance per provider."""

    def acquire(self, *, timeout_seconds: float | None = None) -> None: ...


class ProviderRateLimiter:
    _POLL_INTERVAL_SECONDS = 0.025

    def __init__(
        self,
        name: str,
        config: RateLimiterConfig | None = None,
        *,
        now: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.name = name
        self.config = config or RateLimiterConfig()
        self._now = now
        self._sleep = sleep
        rate = Rate(self.config.permits_per_period, int(self.config.period_seconds * 1000))
        self._limiter = Limiter(rate, raise_when_fail=False, max_delay=None)
        self._lock = threading.Lock()
        self._permits_acquired = 0

    @property
    def permits_acquired(self) -> int:
        with self._lock:
            return self._permits_acquired

    def acquire(self, *, timeout_seconds: float | None = None) -> None:
        """
        Block until a permit is available.

        `timeout_seconds` can only shorten the configured admission timeout.
        """

        timeout = self.config.timeout_seconds
        if timeout_seconds is not None:
            timeout = max(0.0, min(timeout, timeout_seconds))

        start = self._now()
        while not self._limiter.try_acquire(self.name, weight=1):
            waited = self._now() - start
            if waited >= timeout:
                raise RateLimitTimeout(
                    f"Rate limit permit for {self.name!r} not granted within {timeout:.2f}s."
                )
            self._sleep(min(self._POLL_INTERVAL_SECONDS, timeout - waited))

        with self._lock:
            self._permits_acquired += 1

        waited = self._now() - start
        if waited > 0.5:
            logger.debug("rate limiter %s admitted after %.2fs", self.name, waited)

"""
Registry of per-provider resilience state.

Build one `ResilienceRegistry` at process start and pass it to every executor.
All calls to the same provider name share one limiter (and therefore one
budget); different provider names never share limiter state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from seriesmeta.http.rate_limit import ProviderRateLimiter, RateLimiterConfig
from seriesmeta.http.retry import RetryConfig


@dataclass(frozen=True)
class ResiliencePolicy:
    name: str
    rate_limiter: ProviderRateLimiter
    retry: RetryConfig


class ResilienceRegistry:
    def __init__(
        self,
        *,
        default_rate_limit: RateLimiterConfig | None = None,
        default_retry: RetryConfig | None = None,
    ) -> None:
        self._default_rate_limit = default_rate_limit or RateLimiterConfig()
        self._default_retry = default_retry or RetryConfig()
        self._lock = threading.Lock()
        self._policies: dict[str, ResiliencePolicy] = {}

    def register(
        self,
        name: str,
        *,
        rate_limit: RateLimiterConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> ResiliencePolicy:
        with self._lock:
            if name in self._policies:
                raise ValueError(f"Resilience policy for {name!r} is already registered.")
            policy = self._build(name, rate_limit=rate_limit, retry=retry)
            self._policies[name] = policy
            return policy

    def get(self, name: str) -> ResiliencePolicy:
        """Return the policy for `name`, creating it from the defaults on first use."""

        with self._lock:
            policy = self._policies.get(name)
            if policy is None:
                policy = self._build(name, rate_limit=None, retry=None)
                self._policies[name] = policy
            return policy

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._policies)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._policies

    def _build(
        self,
        name: str,
        *,
        rate_limit: RateLimiterConfig | None,
        retry: RetryConfig | None,
    ) -> ResiliencePolicy:
        return ResiliencePolicy(
            name=name,
            rate_limiter=ProviderRateLimiter(name, rate_limit or self._default_rate_limit),
            retry=retry or self._default_retry,
        )

"""
Resilient HTTP layer shared by all metadata providers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from seriesmeta.http.client import HttpRequest, HttpResponse, RateLimitedExecutor
    from seriesmeta.http.deadline import call_deadline
    from seriesmeta.http.errors import (
        DeadlineExceeded,
        HttpClientError,
        NotFound,
        RateLimitTimeout,
        RequestFailed,
        TransportFailure,
    )
    from seriesmeta.http.rate_limit import ProviderRateLimiter, RateLimiterConfig
    from seriesmeta.http.registry import ResiliencePolicy, ResilienceRegistry
    from seriesmeta.http.retry import RetryConfig

_EXPORTS = {
    "HttpRequest": "client",
    "HttpResponse": "client",
    "RateLimitedExecutor": "client",
    "call_deadline": "deadline",
    "DeadlineExceeded": "errors",
    "HttpClientError": "errors",
    "NotFound": "errors",
    "RateLimitTimeout": "errors",
    "RequestFailed": "errors",
    "TransportFailure": "errors",
    "ProviderRateLimiter": "rate_limit",
    "RateLimiterConfig": "rate_limit",
    "ResiliencePolicy": "registry",
    "ResilienceRegistry": "registry",
    "RetryConfig": "retry",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str):
    if name in _EXPORTS:
        from importlib import import_module

        module = import_module(f"seriesmeta.http.{_EXPORTS[name]}")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

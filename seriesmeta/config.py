"""
Environment-driven settings.

Call `seriesmeta.utils.env.load_env()` first when a `.env` file should be
honored; `load_settings()` only reads the process environment (or the mapping
passed as `env`).

Per-provider variables use the `SERIESMETA_<PROVIDER>_` prefix, e.g.
`SERIESMETA_KODANSHA_FETCH_BOOK_COVERS=false`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from seriesmeta.http.client import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from seriesmeta.http.rate_limit import RateLimiterConfig
from seriesmeta.http.retry import RetryConfig
from seriesmeta.metadata.matching import DEFAULT_MATCH_THRESHOLD
from seriesmeta.metadata.models import Provider
from seriesmeta.utils.env import env_bool, env_float, env_int, env_str

ENV_PREFIX = "SERIESMETA_"

# Nautiljon pages are scraped HTML and get a lower default rate.
_DEFAULT_PERMITS = {
    Provider.KODANSHA: 10,
    Provider.NAUTILJON: 5,
}


@dataclass(frozen=True)
class ProviderSettings:
    provider: Provider
    enabled: bool = True
    fetch_series_covers: bool = True
    fetch_book_covers: bool = True
    rate_limit: RateLimiterConfig = field(default_factory=RateLimiterConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)


@dataclass(frozen=True)
class AppSettings:
    providers: Mapping[Provider, ProviderSettings]
    http_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    name_match_threshold: float = DEFAULT_MATCH_THRESHOLD


def load_provider_settings(provider: Provider, *, env: Mapping[str, str] | None = None) -> ProviderSettings:
    prefix = f"{ENV_PREFIX}{provider.value}_"
    rate_limit = RateLimiterConfig(
        permits_per_period=env_int(
            f"{prefix}RATE_LIMIT_PERMITS", _DEFAULT_PERMITS.get(provider, 10), env=env, minimum=1
        ),
        period_seconds=env_float(f"{prefix}RATE_LIMIT_PERIOD_SECONDS", 1.0, env=env, minimum=0.001),
        timeout_seconds=env_float(f"{prefix}RATE_LIMIT_TIMEOUT_SECONDS", 5.0, env=env, minimum=0.0),
    )
    retry = RetryConfig(
        max_attempts=env_int(f"{prefix}RETRY_MAX_ATTEMPTS", 3, env=env, minimum=1),
        backoff_seconds=env_float(f"{prefix}RETRY_BACKOFF_SECONDS", 0.5, env=env, minimum=0.0),
    )
    return ProviderSettings(
        provider=provider,
        enabled=env_bool(f"{prefix}ENABLED", True, env=env),
        fetch_series_covers=env_bool(f"{prefix}FETCH_SERIES_COVERS", True, env=env),
        fetch_book_covers=env_bool(f"{prefix}FETCH_BOOK_COVERS", True, env=env),
        rate_limit=rate_limit,
        retry=retry,
    )


def load_settings(*, env: Mapping[str, str] | None = None) -> AppSettings:
    return AppSettings(
        providers={provider: load_provider_settings(provider, env=env) for provider in Provider},
        http_timeout_seconds=env_float(
            f"{ENV_PREFIX}HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS, env=env, minimum=0.001
        ),
        user_agent=env_str(f"{ENV_PREFIX}USER_AGENT", DEFAULT_USER_AGENT, env=env),
        name_match_threshold=env_float(
            f"{ENV_PREFIX}NAME_MATCH_THRESHOLD",
            DEFAULT_MATCH_THRESHOLD,
            env=env,
            minimum=0.0,
            maximum=100.0,
        ),
    )

from __future__ import annotations

from collections.abc import Callable

import requests

from seriesmeta.config import AppSettings, ProviderSettings
from seriesmeta.http.client import RateLimitedExecutor
from seriesmeta.http.registry import ResilienceRegistry
from seriesmeta.metadata.matching import FuzzyNameMatcher, NameSimilarityMatcher
from seriesmeta.metadata.models import Provider
from seriesmeta.metadata.provider import MetadataProvider
from seriesmeta.metadata.providers.kodansha.client import KodanshaClient
from seriesmeta.metadata.providers.kodansha.mapper import KodanshaMetadataMapper
from seriesmeta.metadata.providers.kodansha.provider import KodanshaMetadataProvider
from seriesmeta.metadata.providers.nautiljon.client import NautiljonClient
from seriesmeta.metadata.providers.nautiljon.mapper import NautiljonMetadataMapper
from seriesmeta.metadata.providers.nautiljon.provider import NautiljonMetadataProvider

ProviderBuilder = Callable[[RateLimitedExecutor, NameSimilarityMatcher, ProviderSettings], MetadataProvider]


def _build_kodansha(
    executor: RateLimitedExecutor,
    matcher: NameSimilarityMatcher,
    settings: ProviderSettings,
) -> MetadataProvider:
    return KodanshaMetadataProvider(
        KodanshaClient(executor),
        KodanshaMetadataMapper(),
        matcher,
        fetch_series_covers=settings.fetch_series_covers,
        fetch_book_covers=settings.fetch_book_covers,
    )


def _build_nautiljon(
    executor: RateLimitedExecutor,
    matcher: NameSimilarityMatcher,
    settings: ProviderSettings,
) -> MetadataProvider:
    return NautiljonMetadataProvider(
        NautiljonClient(executor),
        NautiljonMetadataMapper(),
        matcher,
        fetch_series_covers=settings.fetch_series_covers,
        fetch_book_covers=settings.fetch_book_covers,
    )


_BUILDERS: dict[Provider, ProviderBuilder] = {
    Provider.KODANSHA: _build_kodansha,
    Provider.NAUTILJON: _build_nautiljon,
}


def build_resilience_registry(settings: AppSettings) -> ResilienceRegistry:
    registry = ResilienceRegistry()
    for provider, provider_settings in settings.providers.items():
        registry.register(provider.value, rate_limit=provider_settings.rate_limit, retry=provider_settings.retry)
    return registry


def build_metadata_providers(
    settings: AppSettings,
    *,
    registry: ResilienceRegistry | None = None,
    session: requests.Session | None = None,
    matcher: NameSimilarityMatcher | None = None,
) -> dict[Provider, MetadataProvider]:
    """
    Wire one provider per enabled source.

    Pass the same `registry` to every call in a process so that all executors
    of a source share one rate-limit budget.
    """

    registry = registry or build_resilience_registry(settings)
    session = session or requests.Session()
    matcher = matcher or FuzzyNameMatcher(settings.name_match_threshold)

    providers: dict[Provider, MetadataProvider] = {}
    for provider, provider_settings in settings.providers.items():
        if not provider_settings.enabled:
            continue
        executor = RateLimitedExecutor.from_registry(
            registry,
            provider.value,
            session=session,
            default_headers={"user-agent": settings.user_agent},
            timeout_seconds=settings.http_timeout_seconds,
        )
        providers[provider] = _BUILDERS[provider](executor, matcher, provider_settings)
    return providers

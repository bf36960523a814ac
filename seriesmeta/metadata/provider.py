from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from seriesmeta.metadata.models import (
    Provider,
    ProviderBookId,
    ProviderBookMetadata,
    ProviderSeriesId,
    ProviderSeriesMetadata,
    SeriesSearchResult,
)


@runtime_checkable
class MetadataProvider(Protocol):
    """
    Port used by the rest of the system to retrieve metadata from one external source.

    Implementations must:
    - route every outbound call through a `RateLimitedExecutor`
    - raise `NotFound` (never return None) when a direct id lookup is absent
    - return None from `match_series_metadata` when no candidate matches
    """

    def provider_name(self) -> Provider: ...

    def get_series_metadata(self, series_id: ProviderSeriesId) -> ProviderSeriesMetadata: ...

    def get_book_metadata(self, series_id: ProviderSeriesId, book_id: ProviderBookId) -> ProviderBookMetadata: ...

    def search_series(self, series_name: str, limit: int = 5) -> Sequence[SeriesSearchResult]: ...

    def match_series_metadata(self, series_name: str) -> ProviderSeriesMetadata | None: ...

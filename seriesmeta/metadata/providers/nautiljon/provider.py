from __future__ import annotations

import logging

from seriesmeta.metadata.matching import NameSimilarityMatcher
from seriesmeta.metadata.models import (
    Provider,
    ProviderBookId,
    ProviderBookMetadata,
    ProviderSeriesId,
    ProviderSeriesMetadata,
    SeriesSearchResult,
)
from seriesmeta.metadata.providers.common import truncate_search_input
from seriesmeta.metadata.providers.nautiljon.client import NautiljonClient
from seriesmeta.metadata.providers.nautiljon.mapper import NautiljonMetadataMapper
from seriesmeta.metadata.providers.nautiljon.model import NautiljonSeries, NautiljonSeriesId, NautiljonVolumeId

logger = logging.getLogger(__name__)


class NautiljonMetadataProvider:
    def __init__(
        self,
        client: NautiljonClient,
        mapper: NautiljonMetadataMapper,
        name_matcher: NameSimilarityMatcher,
        *,
        fetch_series_covers: bool = True,
        fetch_book_covers: bool = True,
    ) -> None:
        self._client = client
        self._mapper = mapper
        self._name_matcher = name_matcher
        self._fetch_series_covers = fetch_series_covers
        self._fetch_book_covers = fetch_book_covers

    def provider_name(self) -> Provider:
        return Provider.NAUTILJON

    def get_series_metadata(self, series_id: ProviderSeriesId) -> ProviderSeriesMetadata:
        series = self._client.get_series(NautiljonSeriesId(series_id.id))
        return self._to_series_metadata(series)

    def get_book_metadata(self, series_id: ProviderSeriesId, book_id: ProviderBookId) -> ProviderBookMetadata:
        volume = self._client.get_book(NautiljonSeriesId(series_id.id), NautiljonVolumeId(book_id.id))
        thumbnail = self._client.get_volume_thumbnail(volume) if self._fetch_book_covers else None
        return self._mapper.to_book_metadata(volume, thumbnail)

    def search_series(self, series_name: str, limit: int = 5) -> list[SeriesSearchResult]:
        results = self._client.search_series(truncate_search_input(series_name))
        return [self._mapper.to_search_result(result) for result in results[: max(0, limit)]]

    def match_series_metadata(self, series_name: str) -> ProviderSeriesMetadata | None:
        results = self._client.search_series(truncate_search_input(series_name))
        match = next(
            (
                r
                for r in results
                if self._name_matcher.matches(series_name, [t for t in (r.title, r.alternative_title) if t])
            ),
            None,
        )
        if match is None:
            logger.debug("nautiljon: no match for %r among %d results", series_name, len(results))
            return None
        return self._to_series_metadata(self._client.get_series(match.series_id))

    def _to_series_metadata(self, series: NautiljonSeries) -> ProviderSeriesMetadata:
        thumbnail = self._client.get_series_thumbnail(series) if self._fetch_series_covers else None
        return self._mapper.to_series_metadata(series, thumbnail)

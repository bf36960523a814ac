from __future__ import annotations

import logging
from dataclasses import replace

from seriesmeta.metadata.matching import NameSimilarityMatcher
from seriesmeta.metadata.models import (
    Provider,
    ProviderBookId,
    ProviderBookMetadata,
    ProviderSeriesId,
    ProviderSeriesMetadata,
    SeriesSearchResult,
)
from seriesmeta.metadata.pagination import expand_listing
from seriesmeta.metadata.providers.common import sanitize_search_input
from seriesmeta.metadata.providers.kodansha.client import KodanshaClient
from seriesmeta.metadata.providers.kodansha.mapper import KodanshaMetadataMapper
from seriesmeta.metadata.providers.kodansha.model import KodanshaBookId, KodanshaSeries, KodanshaSeriesId

logger = logging.getLogger(__name__)

# The series endpoint truncates its `volumes` list to one of these sizes.
KODANSHA_TRUNCATED_LISTING_SIZES = frozenset({4, 30})


class KodanshaMetadataProvider:
    def __init__(
        self,
        client: KodanshaClient,
        mapper: KodanshaMetadataMapper,
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
        return Provider.KODANSHA

    def get_series_metadata(self, series_id: ProviderSeriesId) -> ProviderSeriesMetadata:
        series = self._get_series(KodanshaSeriesId(series_id.id))
        return self._to_series_metadata(series)

    def get_book_metadata(self, series_id: ProviderSeriesId, book_id: ProviderBookId) -> ProviderBookMetadata:
        book = self._client.get_book(KodanshaBookId(book_id.id))
        thumbnail = self._client.get_thumbnail(book.cover_url) if self._fetch_book_covers else None
        return self._mapper.to_book_metadata(book, thumbnail)

    def search_series(self, series_name: str, limit: int = 5) -> list[SeriesSearchResult]:
        results = self._client.search_series(sanitize_search_input(series_name))
        return [self._mapper.to_search_result(result) for result in results[: max(0, limit)]]

    def match_series_metadata(self, series_name: str) -> ProviderSeriesMetadata | None:
        results = self._client.search_series(sanitize_search_input(series_name))
        match = next((r for r in results if self._name_matcher.matches(series_name, r.title)), None)
        if match is None:
            logger.debug("kodansha: no match for %r among %d results", series_name, len(results))
            return None
        return self._to_series_metadata(self._get_series(match.series_id))

    def _to_series_metadata(self, series: KodanshaSeries) -> ProviderSeriesMetadata:
        thumbnail = self._client.get_thumbnail(series.cover_url) if self._fetch_series_covers else None
        return self._mapper.to_series_metadata(series, thumbnail)

    def _get_series(self, series_id: KodanshaSeriesId) -> KodanshaSeries:
        series = self._client.get_series(series_id)
        books = expand_listing(
            series.books,
            lambda page: self._client.get_series_books_page(series.id, page),
            page_sizes=KODANSHA_TRUNCATED_LISTING_SIZES,
        )
        if books is series.books:
            return series
        return replace(series, books=tuple(books))

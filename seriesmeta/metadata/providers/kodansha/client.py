"""
Kodansha USA catalog client.

Endpoints (all JSON, relative to `KODANSHA_API_BASE_URL`):
- `GET /search/V3?query=...`                series search
- `GET /series/V2/{id}`                     series details with a truncated `volumes` list
- `GET /product/forSeries/{id}?page=N`      paginated volumes of a series
- `GET /product/{id}`                       volume details

All calls go through the provider's `RateLimitedExecutor`.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from seriesmeta.http.client import HttpRequest, RateLimitedExecutor
from seriesmeta.metadata.models import Image
from seriesmeta.metadata.pagination import PageEnvelope
from seriesmeta.metadata.providers.common import fetch_thumbnail
from seriesmeta.metadata.providers.kodansha.model import (
    KodanshaBook,
    KodanshaBookId,
    KodanshaClientError,
    KodanshaSearchResult,
    KodanshaSeries,
    KodanshaSeriesBook,
    KodanshaSeriesId,
    parse_book,
    parse_book_list_page,
    parse_search_results,
    parse_series,
)

KODANSHA_API_BASE_URL = "https://api.kodansha.us"
KODANSHA_SITE_BASE_URL = "https://kodansha.us"
KODANSHA_BOOK_LIST_PAGE_SIZE = 30


class KodanshaClient:
    def __init__(self, executor: RateLimitedExecutor, *, base_url: str = KODANSHA_API_BASE_URL) -> None:
        self._executor = executor
        self._base_url = base_url.rstrip("/")

    def search_series(self, name: str) -> list[KodanshaSearchResult]:
        payload = self._get_json("/search/V3", params={"query": name})
        return parse_search_results(payload)

    def get_series(self, series_id: KodanshaSeriesId) -> KodanshaSeries:
        return parse_series(self._get_json(f"/series/V2/{series_id.id}"))

    def get_series_books_page(self, series_id: KodanshaSeriesId, page: int) -> PageEnvelope[KodanshaSeriesBook]:
        payload = self._get_json(
            f"/product/forSeries/{series_id.id}",
            params={"page": int(page), "pageSize": KODANSHA_BOOK_LIST_PAGE_SIZE},
        )
        return parse_book_list_page(payload)

    def get_book(self, book_id: KodanshaBookId) -> KodanshaBook:
        return parse_book(self._get_json(f"/product/{book_id.id}"))

    def get_thumbnail(self, url: str | None) -> Image | None:
        return fetch_thumbnail(self._executor, url)

    def _get_json(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        request = HttpRequest(
            url=f"{self._base_url}{path}",
            headers={"accept": "application/json"},
            params=params,
        )
        text = self._executor.execute(request)
        try:
            return json.loads(text)
        except ValueError as exc:
            raise KodanshaClientError(f"Kodansha returned non-JSON response for {path}.") from exc

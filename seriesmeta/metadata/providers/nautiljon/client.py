"""
Nautiljon catalog client.

Nautiljon has no public API; series and volume data are scraped from the HTML
pages under `NAUTILJON_BASE_URL` and parsed by `parser.py`. All calls go
through the provider's `RateLimitedExecutor`.
"""

from __future__ import annotations

from urllib.parse import quote

from seriesmeta.http.client import HttpRequest, RateLimitedExecutor
from seriesmeta.metadata.models import Image
from seriesmeta.metadata.providers.common import fetch_thumbnail
from seriesmeta.metadata.providers.nautiljon.model import (
    NautiljonSearchResult,
    NautiljonSeries,
    NautiljonSeriesId,
    NautiljonVolume,
    NautiljonVolumeId,
)
from seriesmeta.metadata.providers.nautiljon.parser import (
    NAUTILJON_BASE_URL,
    parse_search_results,
    parse_series,
    parse_volume,
)

_HTML_HEADERS = {
    "accept": "text/html,application/xhtml+xml",
    "accept-language": "fr-FR,fr;q=0.9,en;q=0.5",
}


def series_url(series_id: NautiljonSeriesId, *, base_url: str = NAUTILJON_BASE_URL) -> str:
    return f"{base_url}/mangas/{quote(series_id.id, safe='+')}.html"


def volume_url(
    series_id: NautiljonSeriesId,
    volume_id: NautiljonVolumeId,
    *,
    base_url: str = NAUTILJON_BASE_URL,
) -> str:
    return f"{base_url}/mangas/{quote(series_id.id, safe='+')}/{quote(volume_id.id, safe=',')}.html"


class NautiljonClient:
    def __init__(self, executor: RateLimitedExecutor, *, base_url: str = NAUTILJON_BASE_URL) -> None:
        self._executor = executor
        self._base_url = base_url.rstrip("/")

    def search_series(self, name: str) -> list[NautiljonSearchResult]:
        html = self._get_html(f"{self._base_url}/mangas/", params={"q": name})
        return parse_search_results(html)

    def get_series(self, series_id: NautiljonSeriesId) -> NautiljonSeries:
        html = self._get_html(series_url(series_id, base_url=self._base_url))
        return parse_series(html, series_id)

    def get_book(self, series_id: NautiljonSeriesId, volume_id: NautiljonVolumeId) -> NautiljonVolume:
        html = self._get_html(volume_url(series_id, volume_id, base_url=self._base_url))
        return parse_volume(html, series_id, volume_id)

    def get_series_thumbnail(self, series: NautiljonSeries) -> Image | None:
        return fetch_thumbnail(self._executor, series.image_url)

    def get_volume_thumbnail(self, volume: NautiljonVolume) -> Image | None:
        return fetch_thumbnail(self._executor, volume.image_url)

    def _get_html(self, url: str, *, params: dict[str, str] | None = None) -> str:
        return self._executor.execute(HttpRequest(url=url, headers=_HTML_HEADERS, params=params))

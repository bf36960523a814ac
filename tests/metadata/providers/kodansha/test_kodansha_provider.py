from __future__ import annotations

import json
from pathlib import Path

import pytest

from seriesmeta.metadata.models import Image, Provider, ProviderBookId, ProviderSeriesId, SeriesStatus
from seriesmeta.metadata.pagination import PageEnvelope
from seriesmeta.metadata.providers.kodansha.model import (
    KodanshaBook,
    KodanshaBookId,
    KodanshaSearchResult,
    KodanshaSeries,
    KodanshaSeriesBook,
    KodanshaSeriesId,
)


def _fixture_path(name: str) -> Path:
    return Path(__file__).resolve().parents[3] / "fixtures" / "kodansha" / name


def _books(*numbers: int) -> tuple[KodanshaSeriesBook, ...]:
    return tuple(KodanshaSeriesBook(id=KodanshaBookId(str(2000 + n)), number=n, name=f"Vol {n}") for n in numbers)


class _FakeClient:
    def __init__(
        self,
        *,
        search_results: list[KodanshaSearchResult] | None = None,
        series: dict[str, KodanshaSeries] | None = None,
        pages: dict[int, PageEnvelope[KodanshaSeriesBook]] | None = None,
        book: KodanshaBook | None = None,
        series_error: Exception | None = None,
        book_error: Exception | None = None,
    ) -> None:
        self.search_results = search_results or []
        self.series = series or {}
        self.pages = pages or {}
        self.book = book
        self.series_error = series_error
        self.book_error = book_error
        self.queries: list[str] = []
        self.series_requested: list[str] = []
        self.pages_requested: list[int] = []
        self.books_requested: list[str] = []
        self.thumbnails_requested: list[str | None] = []

    def search_series(self, name: str) -> list[KodanshaSearchResult]:
        self.queries.append(name)
        return list(self.search_results)

    def get_series(self, series_id: KodanshaSeriesId) -> KodanshaSeries:
        self.series_requested.append(series_id.id)
        if self.series_error is not None:
            raise self.series_error
        return self.series[series_id.id]

    def get_series_books_page(self, series_id: KodanshaSeriesId, page: int) -> PageEnvelope[KodanshaSeriesBook]:
        self.pages_requested.append(page)
        return self.pages[page]

    def get_book(self, book_id: KodanshaBookId) -> KodanshaBook:
        self.books_requested.append(book_id.id)
        if self.book_error is not None:
            raise self.book_error
        assert self.book is not None
        return self.book

    def get_thumbnail(self, url: str | None) -> Image | None:
        self.thumbnails_requested.append(url)
        return Image(data=b"cover", mime_type="image/jpeg") if url else None


class _AcceptTitles:
    def __init__(self, accepted: set[str]) -> None:
        self.accepted = accepted
        self.calls: list[tuple[str, object]] = []

    def matches(self, name: str, candidates) -> bool:  # noqa: ANN001
        self.calls.append((name, candidates))
        return candidates in self.accepted


def _provider(client: _FakeClient, matcher=None, **kwargs):  # noqa: ANN001, ANN003, ANN202
    from seriesmeta.metadata.providers.kodansha.mapper import KodanshaMetadataMapper
    from seriesmeta.metadata.providers.kodansha.provider import KodanshaMetadataProvider

    return KodanshaMetadataProvider(client, KodanshaMetadataMapper(), matcher or _AcceptTitles(set()), **kwargs)


def _series(series_id: str, title: str, books=_books(1, 2, 3, 4, 5)) -> KodanshaSeries:  # noqa: ANN001
    return KodanshaSeries(
        id=KodanshaSeriesId(series_id),
        title=title,
        cover_url=f"https://cdn.kodansha.us/series/{series_id}.jpg",
        books=books,
    )


def _hit(series_id: str, title: str) -> KodanshaSearchResult:
    return KodanshaSearchResult(series_id=KodanshaSeriesId(series_id), title=title)


def test_provider_name() -> None:
    assert _provider(_FakeClient()).provider_name() == Provider.KODANSHA


def test_search_sanitizes_query_and_honors_limit() -> None:
    client = _FakeClient(search_results=[_hit("1", "A"), _hit("2", "B"), _hit("3", "C")])
    provider = _provider(client)

    results = provider.search_series("Attack on Titan (2012)...", limit=2)

    assert client.queries == ["Attack on Titan"]
    assert [(r.provider, r.result_id, r.title) for r in results] == [
        (Provider.KODANSHA, "1", "A"),
        (Provider.KODANSHA, "2", "B"),
    ]
    assert provider.search_series("Attack on Titan", limit=0) == []


def test_match_picks_first_accepted_result_in_source_order() -> None:
    client = _FakeClient(
        search_results=[_hit("1", "A"), _hit("2", "B"), _hit("3", "C")],
        series={"2": _series("2", "B"), "3": _series("3", "C")},
    )
    matcher = _AcceptTitles({"B", "C"})
    provider = _provider(client, matcher)

    result = provider.match_series_metadata("B (2019)")

    assert result is not None
    assert result.id == ProviderSeriesId("2")
    assert result.metadata.title == "B"
    assert client.queries == ["B"]
    assert client.series_requested == ["2"]
    assert [c[0] for c in matcher.calls] == ["B (2019)", "B (2019)"]


def test_match_returns_none_without_fetching_when_nothing_matches() -> None:
    client = _FakeClient(search_results=[_hit("1", "A")])

    assert _provider(client, _AcceptTitles({"Z"})).match_series_metadata("Z") is None
    assert client.series_requested == []


def test_series_not_found_propagates() -> None:
    from seriesmeta.http.errors import NotFound

    client = _FakeClient(series_error=NotFound(404, "", url="https://api.kodansha.us/series/V2/9"))

    with pytest.raises(NotFound):
        _provider(client).get_series_metadata(ProviderSeriesId("9"))


def test_book_not_found_propagates_without_cover_fetch() -> None:
    from seriesmeta.http.errors import NotFound

    client = _FakeClient(book_error=NotFound(404, "", url="https://api.kodansha.us/product/9"))

    with pytest.raises(NotFound):
        _provider(client).get_book_metadata(ProviderSeriesId("1050"), ProviderBookId("9"))

    assert client.books_requested == ["9"]
    assert client.thumbnails_requested == []


def test_truncated_book_listing_is_expanded_from_pages() -> None:
    client = _FakeClient(
        series={"1050": _series("1050", "Attack on Titan", books=_books(1, 2, 3, 4))},
        pages={
            1: PageEnvelope(items=_books(1, 2, 3, 4), page=1, total_pages=2),
            2: PageEnvelope(items=_books(5, 6), page=2, total_pages=2),
        },
    )

    result = _provider(client).get_series_metadata(ProviderSeriesId("1050"))

    assert client.pages_requested == [1, 2]
    assert [b.number for b in result.books] == [1, 2, 3, 4, 5, 6]
    assert result.metadata.total_book_count == 6


def test_untruncated_book_listing_is_used_as_is() -> None:
    client = _FakeClient(series={"1050": _series("1050", "Attack on Titan", books=_books(1, 2, 3, 4, 5))})

    result = _provider(client).get_series_metadata(ProviderSeriesId("1050"))

    assert client.pages_requested == []
    assert [b.id.id for b in result.books] == ["2001", "2002", "2003", "2004", "2005"]


def test_series_cover_is_fetched_only_when_enabled() -> None:
    client = _FakeClient(series={"1": _series("1", "A")})

    with_cover = _provider(client).get_series_metadata(ProviderSeriesId("1"))
    assert with_cover.metadata.thumbnail == Image(data=b"cover", mime_type="image/jpeg")
    assert client.thumbnails_requested == ["https://cdn.kodansha.us/series/1.jpg"]

    client.thumbnails_requested.clear()
    without_cover = _provider(client, fetch_series_covers=False).get_series_metadata(ProviderSeriesId("1"))
    assert without_cover.metadata.thumbnail is None
    assert client.thumbnails_requested == []


def test_book_metadata_honors_book_cover_flag() -> None:
    book = KodanshaBook(
        id=KodanshaBookId("2001"),
        name="Attack on Titan 1",
        series_id=KodanshaSeriesId("1050"),
        number=1,
        cover_url="https://cdn.kodansha.us/product/2001.jpg",
        readable_url="attack-on-titan-1",
    )
    client = _FakeClient(book=book)

    result = _provider(client).get_book_metadata(ProviderSeriesId("1050"), ProviderBookId("2001"))
    assert result.metadata.thumbnail is not None
    assert result.series_id == ProviderSeriesId("1050")
    assert result.url == "https://kodansha.us/product/attack-on-titan-1"

    client.thumbnails_requested.clear()
    result = _provider(client, fetch_book_covers=False).get_book_metadata(
        ProviderSeriesId("1050"), ProviderBookId("2001")
    )
    assert result.metadata.thumbnail is None
    assert client.thumbnails_requested == []


class _Response:
    def __init__(self, status_code: int, content: bytes, url: str) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = {}
        self.url = url

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def __enter__(self) -> _Response:
        return self

    def __exit__(self, *args) -> None:  # noqa: ANN002
        return None


class _RoutedSession:
    """Serves Kodansha fixtures by URL (and `page` param for listings)."""

    def __init__(self, routes: dict[tuple[str, object], bytes]) -> None:
        self.routes = routes
        self.requested: list[tuple[str, object]] = []

    def request(self, method: str, url: str, *, params=None, **kwargs) -> _Response:  # noqa: ANN001, ANN003
        key = (url, (params or {}).get("page"))
        self.requested.append(key)
        if key not in self.routes:
            return _Response(404, b"not found", url)
        return _Response(200, self.routes[key], url)


def test_match_end_to_end_through_executor() -> None:
    from seriesmeta.http.client import RateLimitedExecutor
    from seriesmeta.http.rate_limit import ProviderRateLimiter, RateLimiterConfig
    from seriesmeta.metadata.matching import FuzzyNameMatcher
    from seriesmeta.metadata.providers.kodansha.client import KodanshaClient
    from seriesmeta.metadata.providers.kodansha.mapper import KodanshaMetadataMapper
    from seriesmeta.metadata.providers.kodansha.provider import KodanshaMetadataProvider

    api = "https://api.kodansha.us"
    session = _RoutedSession(
        {
            (f"{api}/search/V3", None): _fixture_path("search_sample.json").read_bytes(),
            (f"{api}/series/V2/1050", None): _fixture_path("series_sample.json").read_bytes(),
            (f"{api}/product/forSeries/1050", 1): _fixture_path("books_page_1.json").read_bytes(),
            (f"{api}/product/forSeries/1050", 2): _fixture_path("books_page_2.json").read_bytes(),
            ("https://cdn.kodansha.us/series/attack-on-titan.jpg", None): b"\xff\xd8\xff",
        }
    )
    limiter = ProviderRateLimiter("KODANSHA", RateLimiterConfig(permits_per_period=100, period_seconds=1.0))
    executor = RateLimitedExecutor("KODANSHA", rate_limiter=limiter, session=session)
    provider = KodanshaMetadataProvider(KodanshaClient(executor), KodanshaMetadataMapper(), FuzzyNameMatcher())

    result = provider.match_series_metadata("Attack on Titan")

    assert result is not None
    assert result.id == ProviderSeriesId("1050")
    assert result.provider == Provider.KODANSHA
    assert result.url == "https://kodansha.us/series/attack-on-titan"
    assert [b.id.id for b in result.books] == ["2001", "2002", "2003", "2004", "2005", "2006"]

    metadata = result.metadata
    assert metadata.status == SeriesStatus.ENDED
    assert metadata.age_rating == 16
    assert metadata.publisher == "Kodansha Comics"
    assert metadata.genres == ("Action", "Fantasy")
    assert {(a.name, a.role) for a in metadata.authors} == {
        ("Hajime Isayama", "WRITER"),
        ("Hajime Isayama", "PENCILLER"),
        ("Sheldon Drzka", "TRANSLATOR"),
    }
    assert metadata.thumbnail == Image(data=b"\xff\xd8\xff", mime_type="image/jpeg")

    # search + series + two listing pages + cover
    assert len(session.requested) == 5
    assert limiter.permits_acquired == 5


def test_missing_product_raises_not_found_through_executor() -> None:
    from seriesmeta.http.client import RateLimitedExecutor
    from seriesmeta.http.errors import NotFound
    from seriesmeta.http.rate_limit import ProviderRateLimiter, RateLimiterConfig
    from seriesmeta.metadata.matching import FuzzyNameMatcher
    from seriesmeta.metadata.providers.kodansha.client import KodanshaClient
    from seriesmeta.metadata.providers.kodansha.mapper import KodanshaMetadataMapper
    from seriesmeta.metadata.providers.kodansha.provider import KodanshaMetadataProvider

    session = _RoutedSession({})
    limiter = ProviderRateLimiter("KODANSHA", RateLimiterConfig(permits_per_period=100, period_seconds=1.0))
    executor = RateLimitedExecutor("KODANSHA", rate_limiter=limiter, session=session)
    provider = KodanshaMetadataProvider(KodanshaClient(executor), KodanshaMetadataMapper(), FuzzyNameMatcher())

    with pytest.raises(NotFound) as excinfo:
        provider.get_book_metadata(ProviderSeriesId("1050"), ProviderBookId("9999"))

    assert excinfo.value.url == "https://api.kodansha.us/product/9999"
    assert session.requested == [("https://api.kodansha.us/product/9999", None)]
    assert limiter.permits_acquired == 1

"""
Kodansha API payload models and normalization helpers.

Payload parsing is kept separate from `KodanshaClient` so tests can validate
it against recorded fixtures without any HTTP.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from seriesmeta.metadata.pagination import PageEnvelope


class KodanshaClientError(ValueError):
    """Kodansha returned a payload with an unexpected shape."""


@dataclass(frozen=True)
class KodanshaSeriesId:
    id: str


@dataclass(frozen=True)
class KodanshaBookId:
    id: str


@dataclass(frozen=True)
class KodanshaCreator:
    name: str
    role: str | None = None


@dataclass(frozen=True)
class KodanshaSearchResult:
    series_id: KodanshaSeriesId
    title: str
    thumbnail_url: str | None = None
    readable_url: str | None = None


@dataclass(frozen=True)
class KodanshaSeriesBook:
    id: KodanshaBookId
    number: int | None
    name: str | None = None
    readable_url: str | None = None


@dataclass(frozen=True)
class KodanshaSeries:
    id: KodanshaSeriesId
    title: str
    description: str | None = None
    genres: Sequence[str] = ()
    creators: Sequence[KodanshaCreator] = ()
    age_rating: str | None = None
    completion_status: str | None = None
    publisher: str | None = None
    cover_url: str | None = None
    readable_url: str | None = None
    books: Sequence[KodanshaSeriesBook] = ()


@dataclass(frozen=True)
class KodanshaBook:
    id: KodanshaBookId
    name: str | None
    series_id: KodanshaSeriesId | None = None
    number: int | None = None
    description: str | None = None
    release_date: date | None = None
    isbn: str | None = None
    page_count: int | None = None
    creators: Sequence[KodanshaCreator] = ()
    cover_url: str | None = None
    readable_url: str | None = None


def _parse_optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return int(float(stripped))
        except ValueError:
            return None
    return None


def _parse_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_date(value: Any) -> date | None:
    text = _parse_optional_str(value)
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _first_thumbnail_url(value: Any) -> str | None:
    if not isinstance(value, list):
        return None
    for item in value:
        if isinstance(item, Mapping):
            url = _parse_optional_str(item.get("url"))
            if url:
                return url
    return None


def _parse_creators(value: Any) -> tuple[KodanshaCreator, ...]:
    if not isinstance(value, list):
        return ()
    creators: list[KodanshaCreator] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        name = _parse_optional_str(item.get("name"))
        if not name:
            continue
        creators.append(KodanshaCreator(name=name, role=_parse_optional_str(item.get("role"))))
    return tuple(creators)


def _parse_genres(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    genres: list[str] = []
    for item in value:
        name = item.get("name") if isinstance(item, Mapping) else item
        text = _parse_optional_str(name)
        if text:
            genres.append(text)
    return tuple(genres)


def _unwrap_response(payload: Any, what: str) -> Any:
    if not isinstance(payload, Mapping):
        raise KodanshaClientError(f"Kodansha {what} returned unexpected JSON shape (not an object).")
    if "response" not in payload:
        raise KodanshaClientError(f"Missing `response` in Kodansha {what} payload.")
    return payload["response"]


def _parse_series_book(item: Mapping[str, Any]) -> KodanshaSeriesBook | None:
    book_id = _parse_optional_str(item.get("id"))
    if not book_id:
        return None
    return KodanshaSeriesBook(
        id=KodanshaBookId(book_id),
        number=_parse_optional_int(item.get("volumeNumber")),
        name=_parse_optional_str(item.get("name")),
        readable_url=_parse_optional_str(item.get("readableUrl")),
    )


def _parse_series_books(value: Any) -> tuple[KodanshaSeriesBook, ...]:
    if not isinstance(value, list):
        return ()
    books = [_parse_series_book(item) for item in value if isinstance(item, Mapping)]
    return tuple(book for book in books if book is not None)


def parse_search_results(payload: Any) -> list[KodanshaSearchResult]:
    """
    Parse `/search/V3` results, keeping series hits in source order.

    Non-series hits (products, news) are skipped.
    """

    if not isinstance(payload, list):
        raise KodanshaClientError("Kodansha search returned unexpected JSON shape (not a list).")

    results: list[KodanshaSearchResult] = []
    for hit in payload:
        if not isinstance(hit, Mapping) or hit.get("type") != "series":
            continue
        content = hit.get("content")
        if not isinstance(content, Mapping):
            continue
        series_id = _parse_optional_str(content.get("id"))
        title = _parse_optional_str(content.get("title"))
        if not series_id or not title:
            continue
        results.append(
            KodanshaSearchResult(
                series_id=KodanshaSeriesId(series_id),
                title=title,
                thumbnail_url=_first_thumbnail_url(content.get("thumbnails")),
                readable_url=_parse_optional_str(content.get("readableUrl")),
            )
        )
    return results


def parse_series(payload: Any) -> KodanshaSeries:
    data = _unwrap_response(payload, "series")
    if not isinstance(data, Mapping):
        raise KodanshaClientError("Kodansha series `response` is not an object.")

    series_id = _parse_optional_str(data.get("id"))
    title = _parse_optional_str(data.get("title"))
    if not series_id or not title:
        raise KodanshaClientError("Kodansha series payload is missing `id` or `title`.")

    return KodanshaSeries(
        id=KodanshaSeriesId(series_id),
        title=title,
        description=_parse_optional_str(data.get("description")),
        genres=_parse_genres(data.get("genres")),
        creators=_parse_creators(data.get("creators")),
        age_rating=_parse_optional_str(data.get("ageRating")),
        completion_status=_parse_optional_str(data.get("completionStatus")),
        publisher=_parse_optional_str(data.get("publisher")),
        cover_url=_first_thumbnail_url(data.get("thumbnails")),
        readable_url=_parse_optional_str(data.get("readableUrl")),
        books=_parse_series_books(data.get("volumes")),
    )


def parse_book_list_page(payload: Any) -> PageEnvelope[KodanshaSeriesBook]:
    items = _unwrap_response(payload, "book list")
    if not isinstance(items, list):
        raise KodanshaClientError("Kodansha book list `response` is not a list.")

    page = _parse_optional_int(payload.get("page"))
    total_pages = _parse_optional_int(payload.get("totalPages"))
    if page is None or page < 1:
        raise KodanshaClientError("Kodansha book list payload is missing a valid `page`.")
    if total_pages is None:
        # Sources that omit the total are treated as a single page.
        total_pages = page

    return PageEnvelope(items=_parse_series_books(items), page=page, total_pages=total_pages)


def parse_book(payload: Any) -> KodanshaBook:
    data = _unwrap_response(payload, "product")
    if not isinstance(data, Mapping):
        raise KodanshaClientError("Kodansha product `response` is not an object.")

    book_id = _parse_optional_str(data.get("id"))
    if not book_id:
        raise KodanshaClientError("Kodansha product payload is missing `id`.")

    series_id = _parse_optional_str(data.get("seriesId"))
    return KodanshaBook(
        id=KodanshaBookId(book_id),
        name=_parse_optional_str(data.get("name")),
        series_id=KodanshaSeriesId(series_id) if series_id else None,
        number=_parse_optional_int(data.get("volumeNumber")),
        description=_parse_optional_str(data.get("description")),
        release_date=_parse_date(data.get("releaseDate")),
        isbn=_parse_optional_str(data.get("isbn")),
        page_count=_parse_optional_int(data.get("pageCount")),
        creators=_parse_creators(data.get("creators")),
        cover_url=_first_thumbnail_url(data.get("thumbnails")),
        readable_url=_parse_optional_str(data.get("readableUrl")),
    )

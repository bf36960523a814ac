from __future__ import annotations

from collections.abc import Sequence

from seriesmeta.metadata.models import (
    Author,
    BookMetadata,
    Image,
    Provider,
    ProviderBookId,
    ProviderBookMetadata,
    ProviderSeriesId,
    ProviderSeriesMetadata,
    SeriesBook,
    SeriesMetadata,
    SeriesSearchResult,
    SeriesStatus,
)
from seriesmeta.metadata.providers.kodansha.client import KODANSHA_SITE_BASE_URL
from seriesmeta.metadata.providers.kodansha.model import (
    KodanshaBook,
    KodanshaCreator,
    KodanshaSearchResult,
    KodanshaSeries,
)

_ROLE_MAP = {
    "author": ("WRITER", "PENCILLER"),
    "story": ("WRITER",),
    "writer": ("WRITER",),
    "art": ("PENCILLER",),
    "artist": ("PENCILLER",),
    "translator": ("TRANSLATOR",),
    "letterer": ("LETTERER",),
}

_AGE_RATINGS = {
    "all ages": 0,
    "t": 13,
    "teen": 13,
    "t+": 16,
    "ot": 16,
    "older teen": 16,
    "m": 18,
    "mature": 18,
}

_STATUS_MAP = {
    "ongoing": SeriesStatus.ONGOING,
    "complete": SeriesStatus.ENDED,
    "completed": SeriesStatus.ENDED,
    "hiatus": SeriesStatus.HIATUS,
}


def _authors(creators: Sequence[KodanshaCreator]) -> tuple[Author, ...]:
    authors: list[Author] = []
    for creator in creators:
        role_key = (creator.role or "author").strip().casefold()
        roles = _ROLE_MAP.get(role_key, (role_key.upper(),))
        authors.extend(Author(name=creator.name, role=role) for role in roles)
    return tuple(authors)


def _site_url(kind: str, readable_url: str | None) -> str | None:
    if not readable_url:
        return None
    return f"{KODANSHA_SITE_BASE_URL}/{kind}/{readable_url}"


class KodanshaMetadataMapper:
    def to_series_metadata(self, series: KodanshaSeries, thumbnail: Image | None = None) -> ProviderSeriesMetadata:
        status = _STATUS_MAP.get((series.completion_status or "").casefold())
        age_rating = _AGE_RATINGS.get((series.age_rating or "").casefold())

        metadata = SeriesMetadata(
            title=series.title,
            status=status,
            summary=series.description,
            publisher=series.publisher or "Kodansha",
            genres=tuple(series.genres),
            authors=_authors(series.creators),
            age_rating=age_rating,
            total_book_count=len(series.books) or None,
            thumbnail=thumbnail,
        )
        books = tuple(
            SeriesBook(id=ProviderBookId(book.id.id), number=book.number, name=book.name) for book in series.books
        )
        return ProviderSeriesMetadata(
            id=ProviderSeriesId(series.id.id),
            provider=Provider.KODANSHA,
            metadata=metadata,
            books=books,
            url=_site_url("series", series.readable_url),
        )

    def to_book_metadata(self, book: KodanshaBook, thumbnail: Image | None = None) -> ProviderBookMetadata:
        metadata = BookMetadata(
            title=book.name,
            summary=book.description,
            number=book.number,
            release_date=book.release_date,
            isbn=book.isbn,
            page_count=book.page_count,
            authors=_authors(book.creators),
            thumbnail=thumbnail,
        )
        return ProviderBookMetadata(
            id=ProviderBookId(book.id.id),
            provider=Provider.KODANSHA,
            metadata=metadata,
            series_id=ProviderSeriesId(book.series_id.id) if book.series_id else None,
            url=_site_url("product", book.readable_url),
        )

    def to_search_result(self, result: KodanshaSearchResult) -> SeriesSearchResult:
        return SeriesSearchResult(
            provider=Provider.KODANSHA,
            result_id=result.series_id.id,
            title=result.title,
            url=_site_url("series", result.readable_url),
            image_url=result.thumbnail_url,
        )

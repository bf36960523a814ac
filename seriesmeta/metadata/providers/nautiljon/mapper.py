from __future__ import annotations

from collections.abc import Sequence
from datetime import date

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
from seriesmeta.metadata.providers.nautiljon.client import series_url, volume_url
from seriesmeta.metadata.providers.nautiljon.model import (
    NautiljonAuthor,
    NautiljonSearchResult,
    NautiljonSeries,
    NautiljonVolume,
)

_ROLE_MAP = {
    "auteur": ("WRITER", "PENCILLER"),
    "auteurs": ("WRITER", "PENCILLER"),
    "scénariste": ("WRITER",),
    "dessinateur": ("PENCILLER",),
    "traducteur": ("TRANSLATOR",),
}

_STATUS_MAP = {
    "en cours": SeriesStatus.ONGOING,
    "terminé": SeriesStatus.ENDED,
    "en pause": SeriesStatus.HIATUS,
    "abandonné": SeriesStatus.ABANDONED,
}


def _authors(authors: Sequence[NautiljonAuthor]) -> tuple[Author, ...]:
    out: list[Author] = []
    for author in authors:
        roles = _ROLE_MAP.get(author.role.casefold(), (author.role.upper(),))
        out.extend(Author(name=author.name, role=role) for role in roles)
    return tuple(out)


class NautiljonMetadataMapper:
    def to_series_metadata(self, series: NautiljonSeries, thumbnail: Image | None = None) -> ProviderSeriesMetadata:
        alternative_titles = [t for t in (series.original_title, *series.alternative_titles) if t]
        metadata = SeriesMetadata(
            title=series.title,
            status=_STATUS_MAP.get((series.status or "").casefold()),
            summary=series.description,
            publisher=series.french_publisher or series.original_publisher,
            alternative_titles=tuple(dict.fromkeys(alternative_titles)),
            genres=tuple(series.genres),
            tags=tuple(series.themes),
            authors=_authors(series.authors),
            age_rating=series.recommended_age,
            release_date=date(series.start_year, 1, 1) if series.start_year else None,
            total_book_count=series.volumes_count,
            thumbnail=thumbnail,
        )
        books = tuple(
            SeriesBook(id=ProviderBookId(volume.id.id), number=volume.number, name=volume.title)
            for volume in series.volumes
        )
        return ProviderSeriesMetadata(
            id=ProviderSeriesId(series.id.id),
            provider=Provider.NAUTILJON,
            metadata=metadata,
            books=books,
            url=series_url(series.id),
        )

    def to_book_metadata(self, volume: NautiljonVolume, thumbnail: Image | None = None) -> ProviderBookMetadata:
        metadata = BookMetadata(
            title=volume.title,
            summary=volume.description,
            number=volume.number,
            release_date=volume.release_date,
            isbn=volume.isbn,
            page_count=volume.page_count,
            authors=_authors(volume.authors),
            thumbnail=thumbnail,
        )
        return ProviderBookMetadata(
            id=ProviderBookId(volume.id.id),
            provider=Provider.NAUTILJON,
            metadata=metadata,
            series_id=ProviderSeriesId(volume.series_id.id),
            url=volume_url(volume.series_id, volume.id),
        )

    def to_search_result(self, result: NautiljonSearchResult) -> SeriesSearchResult:
        return SeriesSearchResult(
            provider=Provider.NAUTILJON,
            result_id=result.series_id.id,
            title=result.title,
            url=series_url(result.series_id),
            image_url=result.image_url,
        )

"""
Canonical metadata shapes returned by every provider.

Provider-specific payloads are translated into these by each provider's
mapper; nothing outside a provider package should depend on a source's native
shape.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Provider(str, Enum):
    KODANSHA = "KODANSHA"
    NAUTILJON = "NAUTILJON"


class SeriesStatus(str, Enum):
    ONGOING = "ONGOING"
    ENDED = "ENDED"
    HIATUS = "HIATUS"
    ABANDONED = "ABANDONED"


@dataclass(frozen=True)
class ProviderSeriesId:
    id: str


@dataclass(frozen=True)
class ProviderBookId:
    id: str


@dataclass(frozen=True)
class Image:
    data: bytes
    mime_type: str | None = None


@dataclass(frozen=True)
class Author:
    name: str
    role: str  # e.g. "WRITER", "PENCILLER", "TRANSLATOR"


@dataclass(frozen=True)
class SeriesSearchResult:
    provider: Provider
    result_id: str
    title: str
    url: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class SeriesBook:
    id: ProviderBookId
    number: int | None
    name: str | None = None
    edition: str | None = None


@dataclass(frozen=True)
class SeriesMetadata:
    title: str
    status: SeriesStatus | None = None
    summary: str | None = None
    publisher: str | None = None
    alternative_titles: Sequence[str] = ()
    genres: Sequence[str] = ()
    tags: Sequence[str] = ()
    authors: Sequence[Author] = ()
    age_rating: int | None = None
    release_date: date | None = None
    total_book_count: int | None = None
    thumbnail: Image | None = None


@dataclass(frozen=True)
class ProviderSeriesMetadata:
    id: ProviderSeriesId
    provider: Provider
    metadata: SeriesMetadata
    books: Sequence[SeriesBook] = ()
    url: str | None = None


@dataclass(frozen=True)
class BookMetadata:
    title: str | None = None
    summary: str | None = None
    number: int | None = None
    release_date: date | None = None
    isbn: str | None = None
    page_count: int | None = None
    authors: Sequence[Author] = ()
    tags: Sequence[str] = ()
    thumbnail: Image | None = None


@dataclass(frozen=True)
class ProviderBookMetadata:
    id: ProviderBookId
    provider: Provider
    metadata: BookMetadata
    series_id: ProviderSeriesId | None = None
    url: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date


class NautiljonClientError(ValueError):
    """A Nautiljon page did not contain the expected structure."""


@dataclass(frozen=True)
class NautiljonSeriesId:
    id: str  # URL slug, e.g. "one+piece"


@dataclass(frozen=True)
class NautiljonVolumeId:
    id: str  # e.g. "volume-1,1234"


@dataclass(frozen=True)
class NautiljonAuthor:
    name: str
    role: str  # label as displayed, e.g. "Auteur", "Dessinateur"


@dataclass(frozen=True)
class NautiljonSearchResult:
    series_id: NautiljonSeriesId
    title: str
    alternative_title: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class NautiljonVolumeRef:
    id: NautiljonVolumeId
    number: int | None
    title: str | None = None


@dataclass(frozen=True)
class NautiljonSeries:
    id: NautiljonSeriesId
    title: str
    original_title: str | None = None
    alternative_titles: Sequence[str] = ()
    description: str | None = None
    genres: Sequence[str] = ()
    themes: Sequence[str] = ()
    authors: Sequence[NautiljonAuthor] = ()
    original_publisher: str | None = None
    french_publisher: str | None = None
    status: str | None = None  # e.g. "En cours", "Terminé"
    start_year: int | None = None
    recommended_age: int | None = None
    volumes_count: int | None = None
    image_url: str | None = None
    volumes: Sequence[NautiljonVolumeRef] = ()


@dataclass(frozen=True)
class NautiljonVolume:
    id: NautiljonVolumeId
    series_id: NautiljonSeriesId
    title: str | None
    number: int | None = None
    description: str | None = None
    release_date: date | None = None
    isbn: str | None = None
    page_count: int | None = None
    authors: Sequence[NautiljonAuthor] = ()
    image_url: str | None = None

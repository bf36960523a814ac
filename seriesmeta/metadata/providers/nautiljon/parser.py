"""
HTML parsers for Nautiljon catalog pages.

Nautiljon renders every fact of a series or volume page as a list item whose
first child is a bold label:

    <li><span class="bold">Éditeur VF : </span><a href="...">Glénat</a></li>

`_parse_info_items()` turns those into a label -> item mapping which the page
parsers read from. Tests should use recorded HTML fixtures.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from urllib.parse import unquote, urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from seriesmeta.metadata.providers.nautiljon.model import (
    NautiljonAuthor,
    NautiljonClientError,
    NautiljonSearchResult,
    NautiljonSeries,
    NautiljonSeriesId,
    NautiljonVolume,
    NautiljonVolumeId,
    NautiljonVolumeRef,
)

NAUTILJON_BASE_URL = "https://www.nautiljon.com"

_SERIES_HREF_RE = re.compile(r"^/mangas/([^/]+)\.html$")
_VOLUME_HREF_RE = re.compile(r"^/mangas/([^/]+)/(volume-[^/]+)\.html$")
_VOLUME_NUMBER_RE = re.compile(r"volume-(\d+)")
_INT_RE = re.compile(r"(\d+)")
_YEAR_RE = re.compile(r"\b(\d{4})\b")
_STATUS_RE = re.compile(r"\(([^)]+)\)")
_FR_DATE_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")

_AUTHOR_LABELS = ("Auteur", "Auteurs", "Scénariste", "Dessinateur", "Traducteur")


def _clean(text: str | None) -> str | None:
    if text is None:
        return None
    cleaned = " ".join(text.split())
    return cleaned or None


def _label_of(item: Tag) -> str | None:
    label = item.find("span", class_="bold")
    if not isinstance(label, Tag):
        return None
    return _clean(label.get_text().replace(":", ""))


def _parse_info_items(soup: BeautifulSoup) -> dict[str, Tag]:
    items: dict[str, Tag] = {}
    for li in soup.find_all("li"):
        label = _label_of(li)
        if label and label not in items:
            items[label] = li
    return items


def _value_text(item: Tag | None) -> str | None:
    if item is None:
        return None
    label = item.find("span", class_="bold")
    parts = [s for s in item.strings if not (isinstance(label, Tag) and s.parent is label)]
    return _clean("".join(parts))


def _link_texts(item: Tag | None) -> tuple[str, ...]:
    if item is None:
        return ()
    texts = [_clean(a.get_text()) for a in item.find_all("a")]
    return tuple(t for t in texts if t)


def _parse_int(text: str | None) -> int | None:
    if not text:
        return None
    match = _INT_RE.search(text)
    return int(match.group(1)) if match else None


def _parse_fr_date(text: str | None) -> date | None:
    if not text:
        return None
    match = _FR_DATE_RE.search(text)
    if not match:
        return None
    day, month, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _absolute(url: str | None) -> str | None:
    if not url:
        return None
    return urljoin(NAUTILJON_BASE_URL, url)


def _page_title(soup: BeautifulSoup) -> str | None:
    h1 = soup.find("h1", class_="h1titre")
    if not isinstance(h1, Tag):
        return None
    name = h1.find(attrs={"itemprop": "name"})
    return _clean((name if isinstance(name, Tag) else h1).get_text())


def _image_url(soup: BeautifulSoup) -> str | None:
    img = soup.find("img", attrs={"itemprop": "image"})
    if not isinstance(img, Tag):
        return None
    return _absolute(img.get("src"))


def _description(soup: BeautifulSoup) -> str | None:
    node = soup.find("div", class_="description")
    if not isinstance(node, Tag):
        return None
    return _clean(node.get_text(" "))


def _authors(items: dict[str, Tag]) -> tuple[NautiljonAuthor, ...]:
    authors: list[NautiljonAuthor] = []
    for label in _AUTHOR_LABELS:
        for name in _link_texts(items.get(label)):
            authors.append(NautiljonAuthor(name=name, role=label))
    return tuple(authors)


def _split_titles(text: str | None) -> tuple[str, ...]:
    if not text:
        return ()
    return tuple(t for t in (_clean(part) for part in text.split("/")) if t)


def _merge_volume_refs(values: Iterable[NautiljonVolumeRef]) -> list[NautiljonVolumeRef]:
    # A volume is usually linked twice (cover + caption); keep the first position, prefer a titled link.
    merged: dict[str, NautiljonVolumeRef] = {}
    for v in values:
        existing = merged.get(v.id.id)
        if existing is None or (existing.title is None and v.title):
            merged[v.id.id] = v
    return list(merged.values())


def series_id_from_href(href: str | None) -> NautiljonSeriesId | None:
    if not href:
        return None
    path = urlsplit(href).path
    match = _SERIES_HREF_RE.match(path)
    if not match:
        return None
    return NautiljonSeriesId(unquote(match.group(1)))


def volume_number(volume_id: NautiljonVolumeId) -> int | None:
    match = _VOLUME_NUMBER_RE.search(volume_id.id)
    return int(match.group(1)) if match else None


def parse_search_results(html: str) -> list[NautiljonSearchResult]:
    soup = BeautifulSoup(html, "html.parser")
    results: list[NautiljonSearchResult] = []
    for row in soup.select("table.search tbody tr"):
        link = row.find("a", class_="eTitre")
        if not isinstance(link, Tag):
            continue
        series_id = series_id_from_href(link.get("href"))
        title = _clean(link.get_text())
        if series_id is None or not title:
            continue

        alternative = row.find("span", class_="infos_small")
        alternative_title = _clean(alternative.get_text()) if isinstance(alternative, Tag) else None
        if alternative_title:
            alternative_title = alternative_title.strip("()").strip() or None

        img = row.select_one("td.image img")
        results.append(
            NautiljonSearchResult(
                series_id=series_id,
                title=title,
                alternative_title=alternative_title,
                image_url=_absolute(img.get("src")) if isinstance(img, Tag) else None,
            )
        )
    return results


def parse_series(html: str, series_id: NautiljonSeriesId) -> NautiljonSeries:
    soup = BeautifulSoup(html, "html.parser")
    title = _page_title(soup)
    if not title:
        raise NautiljonClientError(f"Nautiljon series page {series_id.id!r} has no title.")

    items = _parse_info_items(soup)
    volumes_text = _value_text(items.get("Nb volumes VF")) or _value_text(items.get("Nb volumes VO"))
    status_match = _STATUS_RE.search(volumes_text or "")
    origin = _value_text(items.get("Origine")) or _value_text(items.get("Année VO"))
    year_match = _YEAR_RE.search(origin or "")

    volumes: list[NautiljonVolumeRef] = []
    for link in soup.find_all("a", href=True):
        match = _VOLUME_HREF_RE.match(urlsplit(link["href"]).path)
        if not match or unquote(match.group(1)) != series_id.id:
            continue
        volume_id = NautiljonVolumeId(unquote(match.group(2)))
        volumes.append(
            NautiljonVolumeRef(id=volume_id, number=volume_number(volume_id), title=_clean(link.get("title")))
        )

    return NautiljonSeries(
        id=series_id,
        title=title,
        original_title=_value_text(items.get("Titre original")),
        alternative_titles=_split_titles(_value_text(items.get("Titre alternatif"))),
        description=_description(soup),
        genres=_link_texts(items.get("Genres")),
        themes=_link_texts(items.get("Thèmes")),
        authors=_authors(items),
        original_publisher=next(iter(_link_texts(items.get("Éditeur VO"))), None),
        french_publisher=next(iter(_link_texts(items.get("Éditeur VF"))), None),
        status=_clean(status_match.group(1)) if status_match else None,
        start_year=int(year_match.group(1)) if year_match else None,
        recommended_age=_parse_int(_value_text(items.get("Âge conseillé"))),
        volumes_count=_parse_int(volumes_text),
        image_url=_image_url(soup),
        volumes=_merge_volume_refs(volumes),
    )


def parse_volume(html: str, series_id: NautiljonSeriesId, volume_id: NautiljonVolumeId) -> NautiljonVolume:
    soup = BeautifulSoup(html, "html.parser")
    items = _parse_info_items(soup)
    release = _value_text(items.get("Date de parution VF")) or _value_text(items.get("Date de parution VO"))

    return NautiljonVolume(
        id=volume_id,
        series_id=series_id,
        title=_page_title(soup),
        number=volume_number(volume_id),
        description=_description(soup),
        release_date=_parse_fr_date(release),
        isbn=_value_text(items.get("ISBN")),
        page_count=_parse_int(_value_text(items.get("Nb pages"))),
        authors=_authors(items),
        image_url=_image_url(soup),
    )

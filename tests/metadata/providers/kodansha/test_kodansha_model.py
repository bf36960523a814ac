from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from seriesmeta.metadata.providers.kodansha.model import (
    KodanshaBookId,
    KodanshaClientError,
    KodanshaSeriesId,
    parse_book,
    parse_book_list_page,
    parse_search_results,
    parse_series,
)


def _load_fixture(name: str):  # noqa: ANN202
    base = Path(__file__).resolve().parents[3] / "fixtures" / "kodansha"
    return json.loads((base / name).read_text(encoding="utf-8"))


def test_parse_search_results_keeps_series_hits_in_order() -> None:
    results = parse_search_results(_load_fixture("search_sample.json"))

    assert [r.series_id for r in results] == [KodanshaSeriesId("1050"), KodanshaSeriesId("1077")]
    assert results[0].title == "Attack on Titan"
    assert results[0].readable_url == "attack-on-titan"
    assert results[0].thumbnail_url == "https://cdn.kodansha.us/series/attack-on-titan.jpg"
    assert results[1].thumbnail_url is None


def test_parse_search_results_rejects_non_list_payload() -> None:
    with pytest.raises(KodanshaClientError):
        parse_search_results({"response": []})


def test_parse_series_fixture() -> None:
    series = parse_series(_load_fixture("series_sample.json"))

    assert series.id == KodanshaSeriesId("1050")
    assert series.title == "Attack on Titan"
    assert series.genres == ("Action", "Fantasy")
    assert [(c.name, c.role) for c in series.creators] == [
        ("Hajime Isayama", "Author"),
        ("Sheldon Drzka", "Translator"),
    ]
    assert series.age_rating == "OT"
    assert series.completion_status == "Completed"
    assert series.publisher == "Kodansha Comics"
    assert series.cover_url == "https://cdn.kodansha.us/series/attack-on-titan.jpg"
    assert [b.id.id for b in series.books] == ["2001", "2002", "2003", "2004"]
    assert [b.number for b in series.books] == [1, 2, 3, 4]


def test_parse_series_requires_id_and_title() -> None:
    with pytest.raises(KodanshaClientError):
        parse_series({"response": {"id": 1}})
    with pytest.raises(KodanshaClientError):
        parse_series({"status": "ok"})


def test_parse_book_list_page_reads_page_and_total() -> None:
    page = parse_book_list_page(_load_fixture("books_page_2.json"))

    assert page.page == 2
    assert page.total_pages == 2
    assert [b.id.id for b in page.items] == ["2005", "2006"]
    assert page.items[1].number == 6


def test_parse_book_list_page_without_total_is_single_page() -> None:
    page = parse_book_list_page({"response": [{"id": 1, "volumeNumber": 1}], "page": 1})

    assert page.total_pages == 1


def test_parse_book_list_page_requires_valid_page() -> None:
    with pytest.raises(KodanshaClientError):
        parse_book_list_page({"response": [], "page": 0, "totalPages": 1})


def test_parse_book_fixture() -> None:
    book = parse_book(_load_fixture("product_sample.json"))

    assert book.id == KodanshaBookId("2001")
    assert book.series_id == KodanshaSeriesId("1050")
    assert book.name == "Attack on Titan 1"
    assert book.number == 1
    assert book.release_date == date(2012, 6, 19)
    assert book.isbn == "9781612620244"
    assert book.page_count == 208
    assert book.cover_url == "https://cdn.kodansha.us/product/attack-on-titan-1.jpg"


def test_parse_book_tolerates_bad_optional_fields() -> None:
    book = parse_book({"response": {"id": "7", "releaseDate": "soon", "pageCount": "n/a", "volumeNumber": True}})

    assert book.release_date is None
    assert book.page_count is None
    assert book.number is None
    assert book.series_id is None

"""
Lazy page walking for sources that truncate listings.

`PageWalker` is a pull-based iterator over `PageEnvelope`s: nothing is fetched
when it is created, and page N+1 is only requested once page N has been
consumed. Every fetch is a full resilient call (rate limit + retry), so a
caller that stops early saves real requests.

Termination rules:
- stop once the last fetched page reports `page >= total_pages`
- never request a page number above the first page's `total_pages` + 1,
  even when later pages report a larger total
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterator, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PageEnvelope(Generic[T]):
    items: Sequence[T]
    page: int  # 1-indexed
    total_pages: int


class PageWalker(Generic[T]):
    def __init__(self, fetch_page: Callable[[int], PageEnvelope[T]]) -> None:
        self._fetch_page = fetch_page
        self._next_number: int | None = 1
        self._max_page: int | None = None
        self.pages_fetched = 0

    def next_page(self) -> PageEnvelope[T] | None:
        """Fetch and return the next page, or None once the walk has ended."""

        if self._next_number is None:
            return None

        number = self._next_number
        page = self._fetch_page(number)
        self.pages_fetched += 1

        if page.page != number:
            logger.warning("requested page %d but source reported page %d", number, page.page)

        if self._max_page is None:
            # One page of slack over the first declared total.
            self._max_page = max(page.total_pages, 1) + 1
        elif page.total_pages + 1 != self._max_page:
            logger.warning(
                "source changed total_pages mid-walk (first=%d, page %d reports %d)",
                self._max_page - 1,
                number,
                page.total_pages,
            )

        self._next_number = self._following(number, page)
        return page

    def _following(self, number: int, page: PageEnvelope[T]) -> int | None:
        if page.page >= page.total_pages:
            return None
        candidate = number + 1
        if self._max_page is not None and candidate > self._max_page:
            logger.warning("stopping page walk at page %d (bound %d)", number, self._max_page)
            return None
        return candidate

    def __iter__(self) -> Iterator[PageEnvelope[T]]:
        return self

    def __next__(self) -> PageEnvelope[T]:
        page = self.next_page()
        if page is None:
            raise StopIteration
        return page


def iter_page_items(fetch_page: Callable[[int], PageEnvelope[T]]) -> Iterator[T]:
    """Yield the items of every page, in fetch order, fetching pages on demand."""

    for page in PageWalker(fetch_page):
        yield from page.items


def should_expand(declared_size: int, page_sizes: Collection[int]) -> bool:
    """A declared size equal to a known page size means the source truncated the listing."""

    return declared_size in page_sizes


def expand_listing(
    declared: Sequence[T],
    fetch_page: Callable[[int], PageEnvelope[T]],
    *,
    page_sizes: Collection[int],
) -> Sequence[T]:
    """
    Return the full listing when the declared one looks truncated.

    The declared listing is returned unchanged (and no page is fetched) when
    its size does not match a page size; it is also kept when the aggregated
    listing is not strictly larger.
    """

    if not should_expand(len(declared), page_sizes):
        return declared

    expanded = list(iter_page_items(fetch_page))
    if len(expanded) > len(declared):
        return expanded
    logger.debug("page walk returned %d items for %d declared; keeping declared", len(expanded), len(declared))
    return declared

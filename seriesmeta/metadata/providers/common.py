from __future__ import annotations

import mimetypes
import re
from urllib.parse import urlsplit

from seriesmeta.http.client import HttpRequest, RateLimitedExecutor
from seriesmeta.metadata.models import Image

SEARCH_INPUT_MAX_LENGTH = 400

_PARENTHETICAL_RE = re.compile(r"\(([^)]+)\)")
_WHITESPACE_RE = re.compile(r"\s+")


def truncate_search_input(name: str) -> str:
    return (name or "")[:SEARCH_INPUT_MAX_LENGTH]


def sanitize_search_input(name: str) -> str:
    """
    Normalize a library series name into a catalog search query.

    Example: "Foo (2020)..." -> "Foo"
    """

    value = truncate_search_input(name)
    value = _PARENTHETICAL_RE.sub("", value)
    value = value.replace("...", "")
    return _WHITESPACE_RE.sub(" ", value).strip()


def fetch_thumbnail(executor: RateLimitedExecutor, url: str | None) -> Image | None:
    if not url:
        return None
    data = executor.execute_with_bytes(HttpRequest(url=url, headers={"accept": "image/*"}))
    mime_type, _ = mimetypes.guess_type(urlsplit(url).path)
    return Image(data=data, mime_type=mime_type)

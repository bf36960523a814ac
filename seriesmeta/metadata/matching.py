from __future__ import annotations

import re
import unicodedata
from collections.abc import Sequence
from typing import Protocol

from rapidfuzz import fuzz

_NON_WORD_RE = re.compile(r"[\W_]+", re.UNICODE)

DEFAULT_MATCH_THRESHOLD = 90.0


class NameSimilarityMatcher(Protocol):
    """Boolean verdict: is `name` equivalent to any of `candidates`?"""

    def matches(self, name: str, candidates: str | Sequence[str]) -> bool: ...


def normalize_name(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value or "")
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_WORD_RE.sub(" ", without_marks.casefold()).strip()


def _as_list(candidates: str | Sequence[str]) -> list[str]:
    if isinstance(candidates, str):
        return [candidates]
    return [c for c in candidates if isinstance(c, str)]


class ExactNameMatcher:
    def matches(self, name: str, candidates: str | Sequence[str]) -> bool:
        query = normalize_name(name)
        if not query:
            return False
        return any(normalize_name(c) == query for c in _as_list(candidates))


class FuzzyNameMatcher:
    """
    Similarity match on normalized names (case, accents and punctuation ignored).

    `threshold` is a rapidfuzz ratio in the 0..100 range.
    """

    def __init__(self, threshold: float = DEFAULT_MATCH_THRESHOLD) -> None:
        if not 0 <= threshold <= 100:
            raise ValueError(f"threshold must be within 0..100 (got {threshold}).")
        self.threshold = threshold

    def matches(self, name: str, candidates: str | Sequence[str]) -> bool:
        query = normalize_name(name)
        if not query:
            return False
        for candidate in _as_list(candidates):
            normalized = normalize_name(candidate)
            if normalized and fuzz.ratio(query, normalized) >= self.threshold:
                return True
        return False

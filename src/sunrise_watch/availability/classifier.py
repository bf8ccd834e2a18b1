"""Keyword classification of normalised page text."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from sunrise_watch.catalog.keywords import NEGATIVE_KEYWORDS, POSITIVE_KEYWORDS

from .models import AvailabilityResolution, AvailabilityStatus, TextClassification
from .normalizer import normalize_for_search

# Characters either side of a room keyword that may hold its status symbol.
# Wide enough for a multi-train section; the single-train page is denser.
DEFAULT_WINDOW_RADIUS = 160
SINGLE_TRAIN_WINDOW_RADIUS = 40


@dataclass(frozen=True, slots=True)
class KeywordEntry:
    raw: str
    normalized: str


def build_keyword_entries(keywords: Iterable[str]) -> List[KeywordEntry]:
    entries: List[KeywordEntry] = []
    for raw in keywords:
        normalized = normalize_for_search(raw)
        if normalized:
            entries.append(KeywordEntry(raw=raw, normalized=normalized))
    return entries


POSITIVE_KEYWORD_ENTRIES: tuple[KeywordEntry, ...] = tuple(build_keyword_entries(POSITIVE_KEYWORDS))
NEGATIVE_KEYWORD_ENTRIES: tuple[KeywordEntry, ...] = tuple(build_keyword_entries(NEGATIVE_KEYWORDS))


def find_keyword_match(normalized_text: str, entries: Sequence[KeywordEntry]) -> Optional[KeywordEntry]:
    if not normalized_text:
        return None
    for entry in entries:
        if entry.normalized in normalized_text:
            return entry
    return None


def classify_normalized(normalized_text: str) -> TextClassification:
    """Classify text that has already been through :func:`normalize_for_search`.

    Negative phrases are checked first so "no seats" wording wins over any
    positive-looking substring in the same text.
    """
    if not normalized_text:
        return TextClassification(AvailabilityStatus.UNKNOWN)

    negative = find_keyword_match(normalized_text, NEGATIVE_KEYWORD_ENTRIES)
    if negative:
        return TextClassification(AvailabilityStatus.UNAVAILABLE, negative.raw)

    positive = find_keyword_match(normalized_text, POSITIVE_KEYWORD_ENTRIES)
    if positive:
        return TextClassification(AvailabilityStatus.AVAILABLE, positive.raw)

    return TextClassification(AvailabilityStatus.UNKNOWN)


def classify_text(text: Optional[str]) -> TextClassification:
    if not text:
        return TextClassification(AvailabilityStatus.UNKNOWN)
    return classify_normalized(normalize_for_search(text))


def classify_near_keyword(
    normalized_haystack: str,
    keyword_candidates: Iterable[str],
    *,
    radius: int = DEFAULT_WINDOW_RADIUS,
) -> AvailabilityResolution:
    """Classify only the text surrounding each occurrence of a room keyword.

    Room names repeat across trains and sections, so a status symbol found
    anywhere on the page must not be attributed to every room. Each alias is
    tried in order and every occurrence is inspected; the first window that
    classifies wins.
    """
    if not normalized_haystack:
        return AvailabilityResolution.unknown()
    radius = max(0, radius)

    for candidate in keyword_candidates:
        keyword = normalize_for_search(candidate)
        if not keyword:
            continue
        index = normalized_haystack.find(keyword)
        while index != -1:
            window_start = max(0, index - radius)
            window_end = min(len(normalized_haystack), index + len(keyword) + radius)
            analysis = classify_normalized(normalized_haystack[window_start:window_end])
            if analysis.status is not AvailabilityStatus.UNKNOWN:
                return AvailabilityResolution(analysis.status, analysis.keyword)
            index = normalized_haystack.find(keyword, index + len(keyword))

    return AvailabilityResolution.unknown()

"""Precedence rules that turn row signals into a single resolution."""
from __future__ import annotations

from typing import Iterable, Optional

from sunrise_watch.catalog.keywords import NEGATIVE_ICON_TEXTS

from .classifier import classify_text
from .models import AvailabilityResolution, AvailabilityStatus, RowSnapshot
from .normalizer import normalize_for_search

_NEGATIVE_ICON_NORMALIZED: tuple[str, ...] = tuple(
    dict.fromkeys(text for text in map(normalize_for_search, NEGATIVE_ICON_TEXTS) if text)
)


def is_negative_icon(label: str) -> bool:
    """True when an icon label contains one of the "no seats" phrases."""
    normalized = normalize_for_search(label)
    if not normalized:
        return False
    return any(negative in normalized for negative in _NEGATIVE_ICON_NORMALIZED)


def _classify_indicator(text: Optional[str]) -> AvailabilityResolution:
    analysis = classify_text(text)
    if analysis.status is AvailabilityStatus.UNKNOWN:
        return AvailabilityResolution.unknown()
    return AvailabilityResolution(analysis.status, analysis.keyword or text)


def resolve_snapshot(snapshot: RowSnapshot) -> AvailabilityResolution:
    """Resolve one row, trying icons, then attribute labels, then row text.

    The page renders a "no seats" icon when a room is sold out and some other
    icon otherwise, so any icon that is not a negative phrase counts as
    available. Only the first pass that yields a signal decides the outcome.
    """
    first_negative_icon: Optional[str] = None
    for icon in snapshot.icon_indicators:
        if is_negative_icon(icon):
            if first_negative_icon is None:
                first_negative_icon = icon
            continue
        return AvailabilityResolution(AvailabilityStatus.AVAILABLE, icon)

    if first_negative_icon is not None:
        return AvailabilityResolution(AvailabilityStatus.UNAVAILABLE, first_negative_icon)

    for indicator in snapshot.attribute_indicators:
        resolution = _classify_indicator(indicator)
        if resolution.is_known:
            return resolution

    if snapshot.text_content:
        return _classify_indicator(snapshot.text_content)

    return AvailabilityResolution.unknown()


def select_best(resolutions: Iterable[AvailabilityResolution]) -> AvailabilityResolution:
    """Merge candidate rows: first available, else first unavailable, else first unknown."""
    best: Optional[AvailabilityResolution] = None
    for resolution in resolutions:
        if best is None or resolution.status.rank > best.status.rank:
            best = resolution
            if best.status is AvailabilityStatus.AVAILABLE:
                break
    return best or AvailabilityResolution.unknown()

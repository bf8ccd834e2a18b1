"""Availability resolution engine: normalisation, classification and precedence."""

from .classifier import (
    DEFAULT_WINDOW_RADIUS,
    SINGLE_TRAIN_WINDOW_RADIUS,
    KeywordEntry,
    build_keyword_entries,
    classify_near_keyword,
    classify_normalized,
    classify_text,
)
from .models import (
    AvailabilityCheckResult,
    AvailabilityResolution,
    AvailabilityStatus,
    RoomAvailability,
    RowSnapshot,
    TextClassification,
    TrainAvailability,
)
from .normalizer import normalize_for_search
from .resolver import is_negative_icon, resolve_snapshot, select_best

__all__ = [
    "DEFAULT_WINDOW_RADIUS",
    "SINGLE_TRAIN_WINDOW_RADIUS",
    "AvailabilityCheckResult",
    "AvailabilityResolution",
    "AvailabilityStatus",
    "KeywordEntry",
    "RoomAvailability",
    "RowSnapshot",
    "TextClassification",
    "TrainAvailability",
    "build_keyword_entries",
    "classify_near_keyword",
    "classify_normalized",
    "classify_text",
    "is_negative_icon",
    "normalize_for_search",
    "resolve_snapshot",
    "select_best",
]

"""Canonicalise page text so keyword lookups ignore width, spacing and brackets."""
from __future__ import annotations

import re
import unicodedata

_WHITESPACE = re.compile(r"[\s\u3000]+")
_STRIPPED_PUNCTUATION = "()（）・･-~〜―‐"
_STRIP_TABLE = str.maketrans("", "", _STRIPPED_PUNCTUATION)


def normalize_for_search(text: str) -> str:
    """Return ``text`` in the comparable form used by every keyword lookup.

    NFKC folds full/half-width variants together, then whitespace (including
    the ideographic space) and the bracket/dash/middle-dot set are removed.
    Availability symbols such as ``○`` and ``×`` are left untouched.
    """
    if not text:
        return ""
    folded = unicodedata.normalize("NFKC", text)
    stripped = _WHITESPACE.sub("", folded).translate(_STRIP_TABLE)
    # Removing a separator can leave a combining mark next to a new base
    # character; re-compose so a second pass is a no-op.
    return unicodedata.normalize("NFKC", stripped)

"""
Inkrecon - Name Normalizer

Canonicalises a card display name for case- and punctuation-insensitive
comparison:
    "Mickey Mouse - Wayward Sorcerer!" -> "mickey mouse wayward sorcerer"

Pure and idempotent. Uses no locale or global state.
"""

from __future__ import annotations

import re

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    """
    Normalize a name: lowercase, strip punctuation, collapse whitespace, trim.

    Returns an empty string for None or empty input.
    """
    if not name:
        return ""

    lowered = name.lower()
    stripped = _NON_WORD.sub("", lowered)
    collapsed = _WHITESPACE.sub(" ", stripped)
    return collapsed.strip()

"""
Inkrecon - Rarity Normalizer

Providers disagree on rarity spelling. One emits "Super Rare", another
"super_rare". Every master record's rarity passes through here.

Rule order:
1. None / empty -> None
2. collapse whitespace runs, trim, lowercase
3. substitution table (data, see settings.RARITY_SUBSTITUTIONS)

Unknown tokens pass through lowercased and trimmed. The normalizer never
fails and never drops a value. Callers decide whether to warn about tokens
outside the known vocabulary.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping
from typing import Any

import structlog

from inkrecon.config import settings

logger = structlog.get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_rarity(
    raw: Any,
    substitutions: Mapping[str, str] | None = None,
) -> str | None:
    """
    Canonicalize a raw provider rarity token.

    Args:
        raw: Raw rarity value (usually a string, tolerated otherwise).
        substitutions: Override for the variant-spelling table
            (default: settings.RARITY_SUBSTITUTIONS).

    Returns:
        Canonical rarity token, or None for empty/absent input.
    """
    if raw is None:
        return None

    token = _WHITESPACE.sub(" ", str(raw)).strip().lower()
    if not token:
        return None

    table = substitutions if substitutions is not None else settings.RARITY_SUBSTITUTIONS
    mapped = table.get(token, token)

    if mapped != token:
        logger.debug("rarity_substituted", raw=str(raw), rarity=mapped)
    return mapped


def is_known_rarity(rarity: str | None, vocabulary: Collection[str] | None = None) -> bool:
    """True if a normalized rarity belongs to the canonical vocabulary."""
    if rarity is None:
        return False
    known = vocabulary if vocabulary is not None else settings.KNOWN_RARITIES
    return rarity in known

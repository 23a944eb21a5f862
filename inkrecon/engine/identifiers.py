"""
Inkrecon - Identifier Resolver

Card identifiers are the join key across providers:
    "{set_code}-{card_number}" (example: "006-094")

The set code is always re-derived from the identifier prefix. A provider's
own set_code field is never trusted over it.

Scope is configuration: callers pass the set of recognised codes (e.g. the
nine core sets), or None for "all".
"""

from __future__ import annotations

from collections.abc import Collection, Mapping

from inkrecon.config import settings
from inkrecon.engine.errors import MalformedIdentifier

SEPARATOR = "-"


def parse_identifier(identifier: str) -> tuple[str, str]:
    """
    Split a card identifier into (set_code, number).

    Splits on the first separator only, so "P1-012-a" yields ("P1", "012-a").

    Raises:
        MalformedIdentifier: If the identifier is empty, not a string, has no
            separator, or either side of the separator is empty.
    """
    if not isinstance(identifier, str) or not identifier:
        raise MalformedIdentifier(identifier, "empty or non-string identifier")

    if SEPARATOR not in identifier:
        raise MalformedIdentifier(identifier)

    set_code, number = identifier.split(SEPARATOR, 1)
    if not set_code:
        raise MalformedIdentifier(identifier, "empty set code")
    if not number:
        raise MalformedIdentifier(identifier, "empty card number")

    return set_code, number


def is_in_scope(set_code: str, scope: Collection[str] | None) -> bool:
    """Pure membership test. A scope of None means every set is in scope."""
    if scope is None:
        return True
    return set_code in scope


def set_name_for(set_code: str, set_names: Mapping[str, str] | None = None) -> str:
    """Display name for a set code, falling back to "Set <code>"."""
    names = set_names if set_names is not None else settings.SET_NAMES
    return names.get(set_code, f"Set {set_code}")

"""
Inkrecon - Shared pytest Fixtures

Provides provider snapshots shaped like the real Dreamborn / Lorcast /
JustTCG exports, already adapted to {identifier: ProviderRecord}.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from inkrecon.models.records import ProviderRecord


def make_record(identifier: str, name: str | None, rarity: str | None = "common", **kwargs: Any) -> ProviderRecord:
    """Build a ProviderRecord with sensible defaults."""
    return ProviderRecord(identifier=identifier, name=name, rarity=rarity, **kwargs)


@pytest.fixture
def record() -> Callable[..., ProviderRecord]:
    """Factory fixture for ProviderRecord."""
    return make_record


@pytest.fixture
def sample_providers() -> dict[str, dict[str, ProviderRecord]]:
    """
    Three providers over a handful of cards.

    - 001-100: case difference between dreamborn and lorcast
    - 006-094: punctuation difference
    - 002-050: subtitle difference
    - 009-229: enchanted, missing from justtcg
    - 007-204: sealed product in justtcg only
    - P1-001:  promo outside the core sets
    """
    dreamborn = {
        "001-100": make_record("001-100", "Elsa", "legendary"),
        "006-094": make_record("006-094", "Prepare to Board!", "common"),
        "002-050": make_record("002-050", "Mickey Mouse - Wayward Sorcerer", "Super Rare"),
        "009-229": make_record("009-229", "Moana", "enchanted"),
        "P1-001": make_record("P1-001", "Stitch", "promo"),
    }
    lorcast = {
        "001-100": make_record("001-100", "elsa", "Legendary", title="Snow Queen", source_id="crd_1"),
        "006-094": make_record("006-094", "Prepare to Board", "common", source_id="crd_2"),
        "002-050": make_record("002-050", "Mickey Mouse", "super rare", source_id="crd_3"),
        "009-229": make_record("009-229", "Moana", "Enchanted", source_id="crd_4"),
    }
    justtcg = {
        "001-100": make_record("001-100", "Elsa - Snow Queen", "legendary", source_id="jt_1"),
        "006-094": make_record("006-094", "Prepare to Board!", "common", source_id="jt_2"),
        "007-204": make_record("007-204", "Archazia's Island Booster Pack", None, source_id="jt_3"),
    }
    return {"dreamborn": dreamborn, "lorcast": lorcast, "justtcg": justtcg}

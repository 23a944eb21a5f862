"""
Inkrecon - Coverage & Validation Statistics

Per-set provider coverage and the high-value gap list.

Coverage arithmetic invariants (per set code):
    all_providers <= min(providers[p] for p in providers)
    providers[p]  <= total

Flagging: a card whose rarity is high-value, that the watched provider lacks
while at least one other provider has it, is a candidate for manual
investigation (pagination gaps, separate enchanted endpoints, numbering
drift). It is not an error.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Collection, Iterable, Sequence

import structlog

from inkrecon.config import settings
from inkrecon.models.records import CoverageStat, FlaggedCard, MasterCardRecord

logger = structlog.get_logger(__name__)


def compute_coverage(
    records: Iterable[MasterCardRecord],
    providers: Sequence[str],
) -> dict[str, CoverageStat]:
    """
    Count provider presence per set code.

    Args:
        records: Merged master records.
        providers: Every provider that took part in the run, in report order.

    Returns:
        {set_code: CoverageStat}, ordered by set code.
    """
    totals: Counter[str] = Counter()
    per_provider: dict[str, Counter[str]] = defaultdict(Counter)
    all_present: Counter[str] = Counter()

    for record in records:
        totals[record.set_code] += 1
        present = [p for p in providers if record.sources_available.get(p)]
        for provider in present:
            per_provider[record.set_code][provider] += 1
        if providers and len(present) == len(providers):
            all_present[record.set_code] += 1

    return {
        set_code: CoverageStat(
            set_code=set_code,
            total=totals[set_code],
            providers={p: per_provider[set_code][p] for p in providers},
            all_providers=all_present[set_code],
        )
        for set_code in sorted(totals)
    }


def count_source_combinations(
    records: Iterable[MasterCardRecord],
    providers: Sequence[str],
) -> dict[str, int]:
    """
    Count records by the exact combination of providers that have them.

    Keys join provider names with "+" in report order, e.g. "dreamborn+lorcast".
    """
    combos: Counter[str] = Counter()
    for record in records:
        present = [p for p in providers if record.sources_available.get(p)]
        combos["+".join(present)] += 1
    return dict(sorted(combos.items()))


def find_high_value_gaps(
    records: Iterable[MasterCardRecord],
    providers: Sequence[str],
    high_value_rarities: Collection[str] | None = None,
    missing_provider: str | None = None,
    set_codes: Collection[str] | None = None,
) -> list[FlaggedCard]:
    """
    List high-value cards absent from one watched provider.

    Args:
        records: Merged master records.
        providers: Every provider that took part in the run.
        high_value_rarities: Canonical rarities worth flagging
            (default: settings.HIGH_VALUE_RARITIES).
        missing_provider: Provider whose gaps are flagged
            (default: settings.FLAG_MISSING_PROVIDER).
        set_codes: Restrict flagging to these sets. None or empty flags every
            set (default: settings.FLAG_SET_CODES).

    Returns:
        FlaggedCard list ordered by set code, then identifier.
    """
    rarities = high_value_rarities if high_value_rarities is not None else settings.HIGH_VALUE_RARITIES
    watched = missing_provider if missing_provider is not None else settings.FLAG_MISSING_PROVIDER
    sets = set_codes if set_codes is not None else settings.FLAG_SET_CODES

    if watched not in providers:
        logger.warning(
            "flag_provider_not_in_run",
            missing_provider=watched,
            providers=list(providers),
        )
        return []

    flagged: list[FlaggedCard] = []
    for record in records:
        if record.rarity not in rarities:
            continue
        if sets and record.set_code not in sets:
            continue
        if record.sources_available.get(watched):
            continue

        others = [p for p in providers if p != watched and record.sources_available.get(p)]
        if not others:
            continue

        flagged.append(
            FlaggedCard(
                identifier=record.id,
                name=record.name,
                rarity=record.rarity,
                set_code=record.set_code,
                missing_provider=watched,
                present_in=others,
            )
        )

    flagged.sort(key=lambda card: (card.set_code, card.identifier))
    return flagged

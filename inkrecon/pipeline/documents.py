"""
Inkrecon - Output Documents

Turns a ReconciliationResult into the three persisted documents downstream
price aggregation reads:
- master database   {metadata, investigation_notes, cards | playable_cards + market_products}
- mismatch report   {metadata, by_category, by_set, by_provider_pair, mismatches}
- coverage document {metadata, sets}

created_at is injectable. With a fixed timestamp, identical inputs produce
byte-identical files.
"""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

from inkrecon.engine.identifiers import set_name_for
from inkrecon.engine.reconcile import ReconciliationResult

logger = structlog.get_logger(__name__)


def _timestamp(created_at: datetime | None) -> str:
    return (created_at or datetime.now(timezone.utc)).isoformat()


def _cards(records: dict[str, Any]) -> dict[str, Any]:
    return {card_id: card.model_dump(mode="json") for card_id, card in records.items()}


def build_master_document(
    result: ReconciliationResult,
    *,
    split: bool = False,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """
    Build the master database document.

    Args:
        result: Output of reconcile().
        split: Emit playable_cards / market_products instead of one cards map.
        created_at: Timestamp for metadata (default: now, UTC).
    """
    warning_counts = Counter(w.kind.value for w in result.warnings)
    flags_by_rarity: dict[str, list[str]] = {}
    for flag in result.flags:
        flags_by_rarity.setdefault(flag.rarity, []).append(flag.identifier)

    document: dict[str, Any] = {
        "metadata": {
            "created_at": _timestamp(created_at),
            "scope": result.scope if result.scope is not None else "all",
            "providers": result.providers,
            "total_cards": len(result.master_db),
            "playable_cards": len(result.playable_cards),
            "market_products": len(result.market_products),
            "sources": result.provider_counts,
            "priced": result.priced_counts,
            "coverage_summary": {
                "all_providers": result.all_providers_count,
                "any_two_or_more": result.multi_source_count,
                "combinations": result.source_combinations,
            },
            "rarity_distribution": result.rarity_distribution,
            "rarity_normalizations": result.rarity_normalizations,
            "warnings": dict(sorted(warning_counts.items())),
        },
        "investigation_notes": {
            "high_value_missing": {
                "cards": [flag.model_dump(mode="json") for flag in result.flags],
                "by_rarity": dict(sorted(flags_by_rarity.items())),
            },
            "missing_from_sources": result.missing_from_sources,
            "data_quality_warnings": [w.model_dump(mode="json") for w in result.warnings],
        },
    }

    if split:
        document["playable_cards"] = _cards(result.playable_cards)
        document["market_products"] = _cards(result.market_products)
    else:
        document["cards"] = _cards(result.master_db)
    return document


def build_mismatch_report(
    result: ReconciliationResult,
    *,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """Mismatch list plus aggregate counts per category, set and provider pair."""
    return {
        "metadata": {
            "created_at": _timestamp(created_at),
            "total_analyzed": result.analyzed,
            "total_mismatches": len(result.mismatches),
        },
        "by_category": result.mismatch_counts_by_category,
        "by_set": result.mismatch_counts_by_set,
        "by_provider_pair": result.pair_disagreements,
        "mismatches": [m.model_dump(mode="json") for m in result.mismatches],
    }


def build_coverage_document(
    result: ReconciliationResult,
    *,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """Per-set counts and derived percentages, per provider and for all providers."""
    sets: dict[str, Any] = {}
    for set_code, stat in result.coverage.items():
        sets[set_code] = {
            "set_name": set_name_for(set_code),
            "total": stat.total,
            "providers": {
                provider: {"count": count, "percentage": stat.percentage(provider)}
                for provider, count in stat.providers.items()
            },
            "all_providers": {
                "count": stat.all_providers,
                "percentage": stat.all_providers_percentage,
            },
        }

    return {
        "metadata": {
            "created_at": _timestamp(created_at),
            "providers": result.providers,
            "total_cards": len(result.master_db),
        },
        "sets": sets,
    }


def write_document(path: Path, document: dict[str, Any]) -> Path:
    """Write a document as indented UTF-8 JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
        f.write("\n")

    logger.info("document_written", path=str(path), bytes=path.stat().st_size)
    return path

"""
Inkrecon - Reconciliation Engine

Builds one canonical master record per card from N provider snapshots.

Pipeline, in strict order:
1. Universe    - union of every well-formed identifier, restricted to scope
2. Sources     - which providers hold a record for each identifier
3. Mismatch    - raw-name comparison of the primary pair (first two named
                 providers in PROVIDER_ORDER), classified when they differ
4. Merge       - per-field precedence over PROVIDER_PRECEDENCE
5. Rarity      - chosen rarity passed through the normalizer
6. Product     - sealed product vs playable heuristic
7. Coverage    - per-set provider counts
8. Flags       - high-value cards missing from the watched provider

Every run is a full recompute over read-only snapshots. Per-run state lives
in an explicit _RunAccumulator that is created, filled and discarded inside
reconcile(). Nothing is kept at module level.

Known limitation: only the primary pair is classified. When three providers
report a card and the second and third disagree while the first matches one
of them, that disagreement does not produce a MismatchRecord. It is still
counted in pair_disagreements.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Collection, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from inkrecon.config import settings
from inkrecon.engine.coverage import (
    compute_coverage,
    count_source_combinations,
    find_high_value_gaps,
)
from inkrecon.engine.errors import InvariantViolation, MalformedIdentifier, MissingRequiredField
from inkrecon.engine.identifiers import is_in_scope, parse_identifier, set_name_for
from inkrecon.engine.mismatch import classify_mismatch
from inkrecon.engine.names import normalize_name
from inkrecon.engine.product_type import classify_product_type
from inkrecon.engine.rarity import is_known_rarity, normalize_rarity
from inkrecon.models.records import (
    CoverageStat,
    FlaggedCard,
    MasterCardRecord,
    MismatchCategory,
    MismatchRecord,
    ProductType,
    ProviderPricing,
    ProviderRecord,
    ReconciliationWarning,
    WarningKind,
)

logger = structlog.get_logger(__name__)

ProviderCollections = Mapping[str, Mapping[str, ProviderRecord]]

# Merged by per-field precedence alongside name, title and rarity
CARD_ATTRIBUTES = ("card_type", "cost", "ink", "lore", "strength", "willpower")


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------


@dataclass
class ReconciliationResult:
    """
    Everything one reconciliation run produces.

    Iterating yields (master_db, mismatches, coverage, flags) so callers can
    unpack the four primary outputs directly.
    """

    master_db: dict[str, MasterCardRecord]
    mismatches: list[MismatchRecord]
    coverage: dict[str, CoverageStat]
    flags: list[FlaggedCard]
    providers: list[str] = field(default_factory=list)
    scope: list[str] | None = None
    warnings: list[ReconciliationWarning] = field(default_factory=list)
    pair_disagreements: dict[str, int] = field(default_factory=dict)
    rarity_normalizations: int = 0
    analyzed: int = 0

    def __iter__(self) -> Iterator[Any]:
        return iter((self.master_db, self.mismatches, self.coverage, self.flags))

    @property
    def playable_cards(self) -> dict[str, MasterCardRecord]:
        return {
            card_id: card
            for card_id, card in self.master_db.items()
            if card.product_type == ProductType.PLAYABLE
        }

    @property
    def market_products(self) -> dict[str, MasterCardRecord]:
        return {
            card_id: card
            for card_id, card in self.master_db.items()
            if card.product_type == ProductType.SEALED_PRODUCT
        }

    @property
    def provider_counts(self) -> dict[str, int]:
        """Records per provider within the merged universe."""
        return {
            p: sum(1 for card in self.master_db.values() if card.sources_available.get(p))
            for p in self.providers
        }

    @property
    def priced_counts(self) -> dict[str, int]:
        """Cards per provider whose record carries at least one priced variant."""
        return {
            p: sum(1 for card in self.master_db.values() if p in card.pricing and card.pricing[p].has_pricing)
            for p in self.providers
        }

    @property
    def source_combinations(self) -> dict[str, int]:
        return count_source_combinations(self.master_db.values(), self.providers)

    @property
    def all_providers_count(self) -> int:
        return sum(stat.all_providers for stat in self.coverage.values())

    @property
    def multi_source_count(self) -> int:
        """Cards present in two or more providers."""
        return sum(1 for card in self.master_db.values() if len(card.providers_present) >= 2)

    @property
    def rarity_distribution(self) -> dict[str, int]:
        counts = Counter(card.rarity for card in self.master_db.values() if card.rarity)
        return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))

    @property
    def missing_from_sources(self) -> dict[str, list[str]]:
        return {
            p: [card_id for card_id, card in self.master_db.items() if not card.sources_available.get(p)]
            for p in self.providers
        }

    @property
    def mismatch_counts_by_category(self) -> dict[str, int]:
        counts = Counter(m.category for m in self.mismatches)
        return {category.value: counts.get(category, 0) for category in MismatchCategory}

    @property
    def mismatch_counts_by_set(self) -> dict[str, int]:
        counts = Counter(m.set_code for m in self.mismatches)
        return dict(sorted(counts.items()))


# ---------------------------------------------------------------------------
# Per-run accumulator
# ---------------------------------------------------------------------------


@dataclass
class _RunAccumulator:
    """Mutable state for a single run. Created and consumed inside reconcile()."""

    warnings: list[ReconciliationWarning] = field(default_factory=list)
    pair_disagreements: Counter[str] = field(default_factory=Counter)
    rarity_normalizations: int = 0
    analyzed: int = 0

    def warn(
        self,
        kind: WarningKind,
        message: str,
        provider: str | None = None,
        identifier: str | None = None,
    ) -> None:
        self.warnings.append(
            ReconciliationWarning(
                kind=kind,
                provider=provider,
                identifier=identifier,
                message=message,
            )
        )
        logger.warning(
            "reconciliation_data_quality",
            kind=kind.value,
            provider=provider,
            identifier=identifier,
            detail=message,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def resolve_provider_order(configured: Sequence[str], present: Collection[str]) -> list[str]:
    """
    Configured order restricted to providers present in this run.

    Providers not named in the configured order are appended alphabetically
    so the result never depends on mapping iteration order.
    """
    ordered = [p for p in configured if p in present]
    extras = sorted(p for p in present if p not in ordered)
    return ordered + extras


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _first_present(
    records: Mapping[str, ProviderRecord],
    precedence: Sequence[str],
    field_name: str,
) -> tuple[str | None, Any]:
    """Reduce-left over precedence: first provider with a usable value wins."""
    for provider in precedence:
        record = records.get(provider)
        if record is None:
            continue
        value = getattr(record, field_name)
        if _has_value(value):
            return provider, value
    return None, None


def require_name(provider: str, record: ProviderRecord) -> str:
    """
    Return the record's raw name.

    Raises:
        MissingRequiredField: If the name is absent or blank.
    """
    if not _has_value(record.name):
        raise MissingRequiredField(provider, record.identifier, "name")
    return record.name  # type: ignore[return-value]


def _same_set_code(derived: str, reported: str) -> bool:
    if derived == reported:
        return True
    # Some providers drop zero padding ("1" for "001")
    return derived.isdigit() and reported.isdigit() and int(derived) == int(reported)


def _index_identifiers(
    providers: ProviderCollections,
    order: Sequence[str],
    acc: _RunAccumulator,
) -> dict[str, tuple[str, str]]:
    """
    Parse every identifier once. Returns {identifier: (set_code, number)}.

    Malformed identifiers become warnings. If every record is malformed the
    input format itself is wrong and MalformedIdentifier propagates.
    """
    parsed: dict[str, tuple[str, str]] = {}
    total = 0
    first_error: MalformedIdentifier | None = None

    for provider in order:
        for key in sorted(providers[provider]):
            record = providers[provider][key]
            total += 1
            if record.identifier != key:
                raise InvariantViolation(
                    f"Provider {provider!r} maps key {key!r} to record {record.identifier!r}"
                )
            if key in parsed:
                continue
            try:
                parsed[key] = parse_identifier(key)
            except MalformedIdentifier as e:
                first_error = first_error or e
                acc.warn(WarningKind.MALFORMED_IDENTIFIER, str(e), provider=provider, identifier=key)

    if total > 0 and not parsed and first_error is not None:
        raise MalformedIdentifier(
            first_error.identifier,
            f"every one of {total} provider records has a malformed identifier",
        ) from first_error

    return parsed


def _merge_card(
    identifier: str,
    set_code: str,
    number: str,
    records: Mapping[str, ProviderRecord],
    order: Sequence[str],
    precedence: Sequence[str],
    product_type: ProductType,
    acc: _RunAccumulator,
) -> MasterCardRecord:
    """Build the canonical record for one identifier (steps 4-5). Product type is decided by the caller."""
    _, name = _first_present(records, precedence, "name")
    _, title = _first_present(records, precedence, "title")
    rarity_provider, raw_rarity = _first_present(records, precedence, "rarity")

    rarity = normalize_rarity(raw_rarity)
    if raw_rarity is not None and rarity != raw_rarity:
        acc.rarity_normalizations += 1
    if rarity is not None and not is_known_rarity(rarity):
        acc.warn(
            WarningKind.UNKNOWN_RARITY,
            f"Unrecognized rarity {rarity!r} kept verbatim",
            provider=rarity_provider,
            identifier=identifier,
        )

    for provider in order:
        record = records.get(provider)
        if record is not None and record.set_code and not _same_set_code(set_code, record.set_code):
            acc.warn(
                WarningKind.SET_CODE_CONFLICT,
                f"Provider set code {record.set_code!r} ignored in favour of {set_code!r}",
                provider=provider,
                identifier=identifier,
            )

    return MasterCardRecord(
        id=identifier,
        name=name,
        title=title,
        rarity=rarity,
        set_code=set_code,
        set_name=set_name_for(set_code),
        card_number=number,
        sources_available={p: p in records for p in order},
        product_type=product_type,
        source_ids={
            p: records[p].source_id
            for p in order
            if p in records and records[p].source_id
        },
        pricing={p: ProviderPricing.from_record(records[p]) for p in order if p in records},
        **{attr: _first_present(records, precedence, attr)[1] for attr in CARD_ATTRIBUTES},
    )


def _compare_names(
    identifier: str,
    set_code: str,
    records: Mapping[str, ProviderRecord],
    order: Sequence[str],
    acc: _RunAccumulator,
) -> MismatchRecord | None:
    """Classify the primary pair's disagreement, if any (step 3)."""
    named: list[tuple[str, str]] = []
    for provider in order:
        record = records.get(provider)
        if record is None:
            continue
        try:
            named.append((provider, require_name(provider, record)))
        except MissingRequiredField as e:
            acc.warn(WarningKind.MISSING_NAME, str(e), provider=provider, identifier=identifier)

    if len(named) < 2:
        return None
    acc.analyzed += 1

    for i, (provider_i, name_i) in enumerate(named):
        for provider_j, name_j in named[i + 1:]:
            if name_i != name_j:
                acc.pair_disagreements[f"{provider_i}_vs_{provider_j}"] += 1

    (provider_a, name_a), (provider_b, name_b) = named[0], named[1]
    if name_a == name_b:
        return None

    by_provider = dict(named)
    return MismatchRecord(
        identifier=identifier,
        names={p: by_provider.get(p) for p in order},
        normalized={provider_a: normalize_name(name_a), provider_b: normalize_name(name_b)},
        category=classify_mismatch(name_a, name_b),
        set_code=set_code,
        compared=(provider_a, provider_b),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def reconcile(
    providers: ProviderCollections,
    scope: Collection[str] | None = None,
    *,
    high_value_rarities: Collection[str] | None = None,
    provider_order: Sequence[str] | None = None,
    precedence: Sequence[str] | None = None,
    flag_missing_provider: str | None = None,
    flag_set_codes: Collection[str] | None = None,
    keep_sealed_outside_scope: bool = False,
) -> ReconciliationResult:
    """
    Reconcile provider snapshots into master records and reports.

    Args:
        providers: {provider_name: {identifier: ProviderRecord}}. Read-only.
        scope: In-scope set codes, or None for every set.
        high_value_rarities: Rarities flagged when the watched provider lacks
            them (default: settings.HIGH_VALUE_RARITIES).
        provider_order: Primary-pair order (default: settings.PROVIDER_ORDER).
        precedence: Merge precedence (default: settings.PROVIDER_PRECEDENCE).
        flag_missing_provider: Watched provider (default: settings.FLAG_MISSING_PROVIDER).
        flag_set_codes: Sets eligible for flagging (default: settings.FLAG_SET_CODES).
        keep_sealed_outside_scope: Keep out-of-scope identifiers whose merged
            record is a sealed product.

    Returns:
        ReconciliationResult. Data-quality issues are on result.warnings.

    Raises:
        MalformedIdentifier: If every provider record is malformed.
        InvariantViolation: On internal inconsistency (never a data problem).
    """
    scope_list = sorted(scope) if scope is not None else None

    if not providers:
        logger.info("reconciliation_empty_input")
        return ReconciliationResult(master_db={}, mismatches=[], coverage={}, flags=[], scope=scope_list)

    order = resolve_provider_order(
        provider_order if provider_order is not None else settings.PROVIDER_ORDER,
        providers.keys(),
    )
    merge_order = resolve_provider_order(
        precedence if precedence is not None else settings.PROVIDER_PRECEDENCE,
        providers.keys(),
    )

    logger.info(
        "reconciliation_started",
        providers=order,
        precedence=merge_order,
        scope=scope_list,
        records={p: len(providers[p]) for p in order},
    )

    acc = _RunAccumulator()
    parsed = _index_identifiers(providers, order, acc)

    master_db: dict[str, MasterCardRecord] = {}
    mismatches: list[MismatchRecord] = []
    skipped_out_of_scope = 0

    for identifier in sorted(parsed):
        set_code, number = parsed[identifier]
        in_scope = is_in_scope(set_code, scope)
        if not in_scope and not keep_sealed_outside_scope:
            skipped_out_of_scope += 1
            continue

        records = {p: providers[p][identifier] for p in order if identifier in providers[p]}
        if not records:
            raise InvariantViolation(f"Identifier {identifier!r} has no provider records")

        _, chosen_name = _first_present(records, merge_order, "name")
        product_type = classify_product_type(chosen_name)
        if not in_scope and product_type != ProductType.SEALED_PRODUCT:
            skipped_out_of_scope += 1
            continue

        card = _merge_card(identifier, set_code, number, records, order, merge_order, product_type, acc)
        master_db[identifier] = card
        mismatch = _compare_names(identifier, set_code, records, order, acc)
        if mismatch is not None:
            mismatches.append(mismatch)

    mismatches.sort(key=lambda m: (m.set_code, m.identifier))

    coverage = compute_coverage(master_db.values(), order)
    flags = find_high_value_gaps(
        master_db.values(),
        order,
        high_value_rarities=high_value_rarities,
        missing_provider=flag_missing_provider,
        set_codes=flag_set_codes,
    )

    result = ReconciliationResult(
        master_db=master_db,
        mismatches=mismatches,
        coverage=coverage,
        flags=flags,
        providers=order,
        scope=scope_list,
        warnings=sorted(acc.warnings, key=lambda w: w.sort_key),
        pair_disagreements=dict(sorted(acc.pair_disagreements.items())),
        rarity_normalizations=acc.rarity_normalizations,
        analyzed=acc.analyzed,
    )

    logger.info(
        "reconciliation_complete",
        cards=len(master_db),
        sealed_products=len(result.market_products),
        skipped_out_of_scope=skipped_out_of_scope,
        mismatches=len(mismatches),
        flagged=len(flags),
        warnings=len(result.warnings),
    )
    return result

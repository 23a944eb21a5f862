"""
Inkrecon - Reconciliation Data Model

Pydantic models for everything that flows through a reconciliation run:
- ProviderRecord: one provider's view of one card (read-only input)
- MasterCardRecord: the merged canonical card (write-once output)
- ProviderPricing: per-provider pricing presence carried on a master card
- MismatchRecord: a classified naming disagreement (write-once output)
- CoverageStat: per-set provider coverage counts
- FlaggedCard: high-value card with a suspicious provider gap
- ReconciliationWarning: accumulated data-quality issue

Output models are frozen. Nothing mutates them after a run creates them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ProductType(str, Enum):
    """Whether a merged record is a playable card or a sealed product."""
    PLAYABLE = "playable"
    SEALED_PRODUCT = "sealed_product"


class MismatchCategory(str, Enum):
    """Naming disagreement categories, listed in classification priority order."""
    CASE_DIFFERENCE = "case_difference"
    PUNCTUATION_DIFFERENCE = "punctuation_difference"
    SUBTITLE_DIFFERENCE = "subtitle_difference"
    WORD_ORDER_DIFFERENCE = "word_order_difference"
    SIGNIFICANT_DIFFERENCE = "significant_difference"


class WarningKind(str, Enum):
    """Data-quality warning kinds. None of these abort a run."""
    MALFORMED_IDENTIFIER = "malformed_identifier"
    MISSING_NAME = "missing_name"
    UNKNOWN_RARITY = "unknown_rarity"
    SET_CODE_CONFLICT = "set_code_conflict"


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class ProviderRecord(BaseModel):
    """A single provider's record for a single card identifier."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    identifier: str = Field(..., description="Card identifier, '<set_code>-<number>'")
    name: str | None = Field(default=None, description="Display name as the provider spells it")
    title: str | None = Field(default=None, description="Subtitle / version line")
    rarity: str | None = Field(default=None, description="Raw provider rarity token")
    set_code: str | None = Field(default=None, description="Provider's own set code field, if any")
    source_id: str | None = Field(default=None, description="Provider-native record id")
    tcgplayer_id: str | None = Field(default=None, description="TCGplayer product id, if the provider links one")
    pricing: dict[str, Any] | None = Field(default=None, description="Pricing keyed by variant")

    # Card attributes
    card_type: str | None = None
    cost: int | None = None
    ink: str | None = None
    lore: int | None = None
    strength: int | None = None
    willpower: int | None = None

    @field_validator("rarity", "set_code", "source_id", "tcgplayer_id", "ink", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> str | None:
        """Providers occasionally emit numbers where strings are expected."""
        if v is None:
            return None
        return str(v)

    @field_validator("card_type", mode="before")
    @classmethod
    def join_types(cls, v: Any) -> str | None:
        """Lorcast lists card types, e.g. ["Action", "Song"]."""
        if v is None:
            return None
        if isinstance(v, (list, tuple)):
            return ", ".join(str(t) for t in v) or None
        return str(v)

    @field_validator("cost", "lore", "strength", "willpower", mode="before")
    @classmethod
    def coerce_stat(cls, v: Any) -> int | None:
        """Whole-number stats only. Anything else (blank, "X", bool) is treated as absent."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float) and v.is_integer():
            return int(v)
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class ProviderPricing(BaseModel):
    """What one provider contributes towards price aggregation for one card."""

    model_config = ConfigDict(frozen=True)

    has_pricing: bool
    variant_count: int
    tcgplayer_id: str | None = None

    @classmethod
    def from_record(cls, record: ProviderRecord) -> ProviderPricing:
        variants = record.pricing or {}
        return cls(
            has_pricing=bool(variants),
            variant_count=len(variants),
            tcgplayer_id=record.tcgplayer_id,
        )


class MasterCardRecord(BaseModel):
    """Canonical merged record for one card identifier."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None
    title: str | None
    rarity: str | None
    set_code: str
    set_name: str
    card_number: str
    sources_available: dict[str, bool]
    product_type: ProductType
    card_type: str | None = None
    cost: int | None = None
    ink: str | None = None
    lore: int | None = None
    strength: int | None = None
    willpower: int | None = None
    source_ids: dict[str, str] = Field(default_factory=dict)
    pricing: dict[str, ProviderPricing] = Field(default_factory=dict)

    @property
    def providers_present(self) -> list[str]:
        return [p for p, present in self.sources_available.items() if present]


class MismatchRecord(BaseModel):
    """A classified naming disagreement between the primary provider pair."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    names: dict[str, str | None]
    normalized: dict[str, str]
    category: MismatchCategory
    set_code: str
    compared: tuple[str, str]


class CoverageStat(BaseModel):
    """
    Provider coverage counts for one set code.

    Only raw counts are stored. Percentages are derived on demand.
    """

    model_config = ConfigDict(frozen=True)

    set_code: str
    total: int
    providers: dict[str, int]
    all_providers: int

    def percentage(self, provider: str) -> float:
        if self.total == 0:
            return 0.0
        return round(self.providers.get(provider, 0) / self.total * 100, 1)

    @property
    def all_providers_percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.all_providers / self.total * 100, 1)


class FlaggedCard(BaseModel):
    """High-value card missing from the watched provider. For manual follow-up."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str | None
    rarity: str
    set_code: str
    missing_provider: str
    present_in: list[str]


class ReconciliationWarning(BaseModel):
    """A data-quality issue observed during a run."""

    model_config = ConfigDict(frozen=True)

    kind: WarningKind
    provider: str | None = None
    identifier: str | None = None
    message: str

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        return (self.kind.value, self.provider or "", self.identifier or "", self.message)

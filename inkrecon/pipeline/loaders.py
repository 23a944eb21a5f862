"""
Inkrecon - Provider Snapshot Loaders

Adapts provider JSON snapshots into the uniform mapping the engine consumes:
    {identifier: ProviderRecord}

Accepted shapes:
- {"cards": {identifier: {...}}, ...}   (Lorcast / JustTCG exports)
- {identifier: {...}}                   (bare mapping)
- [{"id": identifier, ...}, ...]        (Dreamborn export, array of records)

Fetching the snapshots is out of scope here. This module only reads files
that already exist.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field, field_validator

from inkrecon.engine.errors import InvariantViolation
from inkrecon.models.records import ProviderRecord

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Raw snapshot model
# ---------------------------------------------------------------------------


class RawProviderCard(BaseModel):
    """
    One card as it appears in any provider snapshot.

    Field aliases cover the spellings the three providers use. Unknown keys
    are ignored. Dreamborn has no ink field, so its first colour stands in.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = None
    title: str | None = Field(default=None, validation_alias=AliasChoices("title", "version", "subtitle"))
    rarity: Any = None
    set_code: Any = Field(default=None, validation_alias=AliasChoices("set_code", "setCode", "setId"))
    source_id: Any = Field(default=None, validation_alias=AliasChoices("justtcg_id", "id"))
    tcgplayer_id: Any = Field(
        default=None,
        validation_alias=AliasChoices("tcgplayer_id", AliasPath("raw_data", "tcgplayer_id")),
    )
    pricing: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("pricing", "variants", "prices")
    )
    card_type: Any = Field(default=None, validation_alias=AliasChoices("type", "card_type"))
    cost: Any = None
    ink: Any = Field(default=None, validation_alias=AliasChoices("ink", AliasPath("colors", 0)))
    lore: Any = None
    strength: Any = None
    willpower: Any = None

    @field_validator("pricing", mode="before")
    @classmethod
    def only_mappings(cls, v: Any) -> dict[str, Any] | None:
        """Dreamborn 'variants' is a list of finish names, not pricing."""
        if isinstance(v, Mapping):
            return dict(v)
        return None

    def to_record(self, identifier: str) -> ProviderRecord:
        return ProviderRecord(
            identifier=identifier,
            **self.model_dump(),
        )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def records_from_payload(
    payload: Any,
    provider: str,
    id_field: str = "id",
) -> dict[str, ProviderRecord]:
    """
    Convert a decoded snapshot into {identifier: ProviderRecord}.

    Raises:
        ValueError: If the payload is neither a mapping nor a list, or a
            mapping entry is not an object.
        InvariantViolation: If an array snapshot repeats an identifier.
    """
    if isinstance(payload, Mapping) and isinstance(payload.get("cards"), (Mapping, list)):
        payload = payload["cards"]

    records: dict[str, ProviderRecord] = {}

    if isinstance(payload, Mapping):
        for identifier, raw in payload.items():
            if not isinstance(raw, Mapping):
                raise ValueError(
                    f"Provider {provider!r} entry {identifier!r} is {type(raw).__name__}, expected object"
                )
            records[str(identifier)] = RawProviderCard.model_validate(raw).to_record(str(identifier))
        return records

    if isinstance(payload, list):
        skipped = 0
        for raw in payload:
            if not isinstance(raw, Mapping) or not raw.get(id_field):
                skipped += 1
                continue
            identifier = str(raw[id_field])
            if identifier in records:
                raise InvariantViolation(
                    f"Provider {provider!r} lists identifier {identifier!r} more than once"
                )
            records[identifier] = RawProviderCard.model_validate(raw).to_record(identifier)
        if skipped:
            logger.warning("provider_records_without_id", provider=provider, skipped=skipped, id_field=id_field)
        return records

    raise ValueError(f"Provider {provider!r} snapshot has unsupported shape {type(payload).__name__}")


def load_provider_file(
    path: Path,
    provider: str,
    id_field: str = "id",
) -> dict[str, ProviderRecord]:
    """Read one provider snapshot from disk."""
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    records = records_from_payload(payload, provider, id_field=id_field)
    logger.info("provider_loaded", provider=provider, path=str(path), records=len(records))
    return records


def load_providers(paths: Mapping[str, Path]) -> dict[str, dict[str, ProviderRecord]]:
    """
    Load every provider snapshot that exists.

    Missing files are skipped with a warning; the provider is then absent
    from the run rather than present with zero records.
    """
    providers: dict[str, dict[str, ProviderRecord]] = {}
    for provider, path in paths.items():
        if not path.exists():
            logger.warning("provider_file_missing", provider=provider, path=str(path))
            continue
        providers[provider] = load_provider_file(path, provider)
    return providers

"""
Inkrecon - Configuration & Constants

Every provider ordering, scope list, rarity table and heuristic phrase list
lives here. No hardcoded values in reconciliation logic.

Usage:
    from inkrecon.config import settings
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Central configuration for Inkrecon.

    Loads from environment variables with fallback defaults. List and dict
    fields accept JSON in the environment (e.g. PROVIDER_ORDER='["a","b"]').
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # -----------------------------------------------------------------------
    # Providers
    # -----------------------------------------------------------------------
    # Order used to pick the primary comparison pair for name mismatches
    PROVIDER_ORDER: list[str] = ["dreamborn", "lorcast", "justtcg"]

    # Per-field merge precedence (first non-null value wins)
    PROVIDER_PRECEDENCE: list[str] = ["lorcast", "dreamborn", "justtcg"]

    # -----------------------------------------------------------------------
    # Sets & Scope
    # -----------------------------------------------------------------------
    CORE_SET_CODES: list[str] = [
        "001", "002", "003", "004", "005", "006", "007", "008", "009",
    ]
    SET_NAMES: dict[str, str] = {
        "001": "The First Chapter",
        "002": "Rise of the Floodborn",
        "003": "Into the Inklands",
        "004": "Ursula's Return",
        "005": "Shimmering Skies",
        "006": "Azurite Sea",
        "007": "Archazia's Island",
        "008": "Reign of Jafar",
        "009": "Fabled",
        "D23": "D23 Collection",
        "P1": "Promo Set 1",
        "P2": "Promo Set 2",
    }

    # -----------------------------------------------------------------------
    # Rarity vocabulary
    # -----------------------------------------------------------------------
    # Applied after trim + lowercase. Keys are provider spellings.
    RARITY_SUBSTITUTIONS: dict[str, str] = {
        "super rare": "super_rare",
    }
    KNOWN_RARITIES: list[str] = [
        "common",
        "uncommon",
        "rare",
        "super_rare",
        "legendary",
        "enchanted",
        "epic",
        "iconic",
        "promo",
    ]

    # -----------------------------------------------------------------------
    # High-value gap flagging
    # -----------------------------------------------------------------------
    HIGH_VALUE_RARITIES: list[str] = ["enchanted", "super_rare", "legendary"]
    FLAG_MISSING_PROVIDER: str = "justtcg"
    FLAG_SET_CODES: list[str] = Field(default_factory=list)  # empty = every set

    # -----------------------------------------------------------------------
    # Sealed product heuristic
    # Approximate by nature. Curate these lists, do not trust them blindly.
    # -----------------------------------------------------------------------
    SEALED_PRODUCT_PHRASES: list[str] = [
        "booster pack",
        "booster box",
        "starter deck",
        "deck box",
        "collection",
    ]
    SEALED_PRODUCT_EXCLUSIONS: list[str] = [
        "leader",
        "elder",
        "full deck",
    ]

    # -----------------------------------------------------------------------
    # Files
    # -----------------------------------------------------------------------
    DATA_DIR: Path = Path("data")
    OUTPUT_DIR: Path = Path("data")
    PROVIDER_FILES: dict[str, str] = {
        "dreamborn": "cards-formatted.json",
        "lorcast": "LORCAST.json",
        "justtcg": "JUSTTCG.json",
    }
    MASTER_DATABASE_FILE: str = "MASTER_CARD_DATABASE.json"
    MISMATCH_REPORT_FILE: str = "NAME_MISMATCH_ANALYSIS.json"
    COVERAGE_REPORT_FILE: str = "SET_COVERAGE.json"

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"


# Singleton instance
settings = Settings()

"""
Models package - export all reconciliation models.
"""

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

__all__ = [
    "CoverageStat",
    "FlaggedCard",
    "MasterCardRecord",
    "MismatchCategory",
    "MismatchRecord",
    "ProductType",
    "ProviderPricing",
    "ProviderRecord",
    "ReconciliationWarning",
    "WarningKind",
]

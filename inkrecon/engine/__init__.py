from inkrecon.engine.coverage import compute_coverage, find_high_value_gaps
from inkrecon.engine.errors import (
    InvariantViolation,
    MalformedIdentifier,
    MissingRequiredField,
    ReconciliationError,
)
from inkrecon.engine.identifiers import is_in_scope, parse_identifier
from inkrecon.engine.mismatch import classify_mismatch
from inkrecon.engine.names import normalize_name
from inkrecon.engine.product_type import classify_product_type
from inkrecon.engine.rarity import normalize_rarity
from inkrecon.engine.reconcile import ReconciliationResult, reconcile

__all__ = [
    "InvariantViolation",
    "MalformedIdentifier",
    "MissingRequiredField",
    "ReconciliationError",
    "ReconciliationResult",
    "classify_mismatch",
    "classify_product_type",
    "compute_coverage",
    "find_high_value_gaps",
    "is_in_scope",
    "normalize_name",
    "normalize_rarity",
    "parse_identifier",
    "reconcile",
]

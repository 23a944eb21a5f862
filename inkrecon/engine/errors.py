"""
Inkrecon - Error Taxonomy

Data-quality problems (MalformedIdentifier, MissingRequiredField) are caught
by the reconciliation engine and turned into warnings on the run result.
InvariantViolation is a programming error and always propagates.
"""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for every error raised by the reconciliation core."""


class MalformedIdentifier(ReconciliationError, ValueError):
    """A card identifier cannot be split into set code and number."""

    def __init__(self, identifier: object, reason: str = "missing '-' separator"):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Malformed card identifier {identifier!r}: {reason}")


class MissingRequiredField(ReconciliationError, ValueError):
    """A provider record lacks a usable value for a required field."""

    def __init__(self, provider: str, identifier: str, field: str):
        self.provider = provider
        self.identifier = identifier
        self.field = field
        super().__init__(
            f"Record {identifier!r} from provider {provider!r} has no usable {field!r}"
        )


class InvariantViolation(ReconciliationError, RuntimeError):
    """
    An internal consistency check failed.

    Raised for duplicate identifiers inside one provider collection, mapping
    keys that disagree with the record they point at, or a card universe
    entry with zero sources. Must never be downgraded to a warning.
    """

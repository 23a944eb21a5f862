"""
Inkrecon - Mismatch Classifier

Two providers report the same identifier under different raw names. Assign
exactly one category, evaluating predicates in this fixed priority order
(first match wins):

    | # | Category                | Predicate                                      |
    |:--|:------------------------|:-----------------------------------------------|
    | 1 | case_difference         | normalized equal AND lowercase equal           |
    | 2 | punctuation_difference  | normalized equal, lowercase differs            |
    | 3 | subtitle_difference     | either raw name contains " - "                 |
    | 4 | word_order_difference   | sorted normalized words equal                  |
    | 5 | significant_difference  | fallback                                       |

The categories overlap before priority is applied. The order itself is the
contract, so it lives in one tuple rather than in call-site conditionals.
"""

from __future__ import annotations

from typing import Callable, NamedTuple

import structlog

from inkrecon.engine.names import normalize_name
from inkrecon.models.records import MismatchCategory

logger = structlog.get_logger(__name__)

SUBTITLE_SEPARATOR = " - "


class NamePair(NamedTuple):
    """Precomputed forms of the two names under comparison."""
    raw_a: str
    raw_b: str
    lower_a: str
    lower_b: str
    norm_a: str
    norm_b: str

    @classmethod
    def of(cls, name_a: str, name_b: str) -> NamePair:
        return cls(
            raw_a=name_a,
            raw_b=name_b,
            lower_a=name_a.lower(),
            lower_b=name_b.lower(),
            norm_a=normalize_name(name_a),
            norm_b=normalize_name(name_b),
        )


def _is_case_difference(pair: NamePair) -> bool:
    return pair.norm_a == pair.norm_b and pair.lower_a == pair.lower_b


def _is_punctuation_difference(pair: NamePair) -> bool:
    return pair.norm_a == pair.norm_b and pair.lower_a != pair.lower_b


def _is_subtitle_difference(pair: NamePair) -> bool:
    return SUBTITLE_SEPARATOR in pair.raw_a or SUBTITLE_SEPARATOR in pair.raw_b


def _is_word_order_difference(pair: NamePair) -> bool:
    return sorted(pair.norm_a.split()) == sorted(pair.norm_b.split())


def _always(pair: NamePair) -> bool:
    return True


# Priority order. Do not reorder without updating the table above.
CLASSIFIERS: tuple[tuple[MismatchCategory, Callable[[NamePair], bool]], ...] = (
    (MismatchCategory.CASE_DIFFERENCE, _is_case_difference),
    (MismatchCategory.PUNCTUATION_DIFFERENCE, _is_punctuation_difference),
    (MismatchCategory.SUBTITLE_DIFFERENCE, _is_subtitle_difference),
    (MismatchCategory.WORD_ORDER_DIFFERENCE, _is_word_order_difference),
    (MismatchCategory.SIGNIFICANT_DIFFERENCE, _always),
)


def classify_mismatch(name_a: str, name_b: str) -> MismatchCategory:
    """
    Classify a naming disagreement into exactly one category.

    Args:
        name_a: Name from the first provider of the primary pair.
        name_b: Name from the second provider of the primary pair.

    Returns:
        The first MismatchCategory (in priority order) whose predicate holds.

    Raises:
        ValueError: If either name is None or the raw names are identical.
            Identical names are not a mismatch and must not be classified.
    """
    if name_a is None or name_b is None:
        raise ValueError("Cannot classify a mismatch with a missing name")
    if name_a == name_b:
        raise ValueError(f"Names are identical, not a mismatch: {name_a!r}")

    pair = NamePair.of(name_a, name_b)
    for category, predicate in CLASSIFIERS:
        if predicate(pair):
            logger.debug(
                "mismatch_classified",
                name_a=name_a,
                name_b=name_b,
                category=category.value,
            )
            return category

    # Unreachable while CLASSIFIERS ends with a catch-all
    raise AssertionError("CLASSIFIERS must end with a catch-all predicate")

"""
Inkrecon - Sealed Product Heuristic

Providers price booster packs, boxes and starter decks alongside single
cards under the same identifier scheme. A merged record is a sealed product
when its name contains a sealed-product phrase AND none of the exclusion
phrases that mark character names ("Elder ...", "... Leader").

This is a substring heuristic and is knowingly approximate: a card named
"Booster Pack of Leadership" would be misclassified. Both phrase lists are
configuration and should be curated by hand.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from inkrecon.config import settings
from inkrecon.models.records import ProductType

logger = structlog.get_logger(__name__)


def classify_product_type(
    name: str | None,
    sealed_phrases: Sequence[str] | None = None,
    exclusion_phrases: Sequence[str] | None = None,
) -> ProductType:
    """
    Classify a merged card name as playable or sealed product.

    Args:
        name: Canonical name chosen by the merge step.
        sealed_phrases: Override for settings.SEALED_PRODUCT_PHRASES.
        exclusion_phrases: Override for settings.SEALED_PRODUCT_EXCLUSIONS.

    Returns:
        ProductType.SEALED_PRODUCT or ProductType.PLAYABLE. Missing names are playable.
    """
    if not name:
        return ProductType.PLAYABLE

    phrases = sealed_phrases if sealed_phrases is not None else settings.SEALED_PRODUCT_PHRASES
    exclusions = (
        exclusion_phrases if exclusion_phrases is not None else settings.SEALED_PRODUCT_EXCLUSIONS
    )

    lowered = name.lower()
    looks_sealed = any(phrase in lowered for phrase in phrases)
    excluded = any(phrase in lowered for phrase in exclusions)

    if looks_sealed and not excluded:
        return ProductType.SEALED_PRODUCT

    if looks_sealed and excluded:
        logger.debug("sealed_phrase_excluded", name=name)
    return ProductType.PLAYABLE

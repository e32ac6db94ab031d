"""Static relevance score used to order result sets.

score = 1.0 + deal bonus - len(name) / 50, never below 0.1.

Deal bonus: LOYALTY 10.0, SALE or PROMO 5.0, anything else 0.0. Deal items
surface first; among comparable deals, shorter (more generic) names rank
slightly higher.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from catalog_search.domain.model import CatalogItem, DealType


BASE_SCORE = 1.0
MIN_SCORE = 0.1
NAME_LENGTH_DIVISOR = 50.0

DEAL_BONUS: Mapping[DealType, float] = {
    DealType.LOYALTY: 10.0,
    DealType.SALE: 5.0,
    DealType.PROMO: 5.0,
}


def deal_bonus(deal_type: DealType | None) -> float:
    if deal_type is None:
        return 0.0
    return DEAL_BONUS.get(deal_type, 0.0)


def relevance_score(item: CatalogItem) -> float:
    score = BASE_SCORE + deal_bonus(item.deal_type) - len(item.name) / NAME_LENGTH_DIVISOR
    return max(score, MIN_SCORE)


def compute_scores(items: Iterable[CatalogItem]) -> dict[str, float]:
    """Score every item, keyed by identifier."""
    return {item.id: relevance_score(item) for item in items}

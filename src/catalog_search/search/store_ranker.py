"""Rank stores by how often a keyword occurs in their item names.

Occurrences are counted with Boyer-Moore (overlaps included) and the ranking
is drained from a max-heap, so the first entry is the store with the most
occurrences. Stores with equal counts come out in name order.
"""

from __future__ import annotations

from collections.abc import Iterable
import heapq

from catalog_search.domain.model import CatalogItem
from catalog_search.domain.search import StoreRanking
from catalog_search.search.boyer_moore import count_occurrences


def count_by_store(items: Iterable[CatalogItem], keyword: str) -> dict[str, int]:
    """Total keyword occurrences per store; stores with none are left out."""
    pattern = keyword.lower().strip()
    if not pattern:
        return {}

    totals: dict[str, int] = {}
    for item in items:
        count = count_occurrences(item.name.lower(), pattern)
        if count > 0:
            totals[item.store_name] = totals.get(item.store_name, 0) + count
    return totals


class StoreRanker:
    """Keyword occurrence ranking over a fixed item set."""

    def __init__(self, items: Iterable[CatalogItem]) -> None:
        self._items = tuple(items)

    def rank_by_keyword(self, keyword: str, limit: int | None = None) -> list[StoreRanking]:
        totals = count_by_store(self._items, keyword)

        # heapq is a min-heap; negated counts make it a max-heap.
        heap = [(-count, store) for store, count in totals.items()]
        heapq.heapify(heap)

        bound = len(heap) if limit is None else min(limit, len(heap))
        rankings: list[StoreRanking] = []
        for rank in range(1, bound + 1):
            neg_count, store = heapq.heappop(heap)
            rankings.append(StoreRanking(rank=rank, store_name=store, occurrences=-neg_count))
        return rankings

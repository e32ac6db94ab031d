"""Browse, compare, recommend and deal queries over the published snapshot.

These read the same snapshot the search pipeline uses and never touch the
catalog store, so they see exactly the items the last reload published.
"""

from __future__ import annotations

from collections.abc import Sequence
import heapq
import logging

from catalog_search.domain.analysis import CompareRequest, RecommendRequest
from catalog_search.domain.model import CatalogItem, DealType, parse_price
from catalog_search.search.pagination import paginate
from catalog_search.service_layer.search_service import CatalogSearchService


logger = logging.getLogger(__name__)

IN_STOCK = "in-stock"

NEED_MATCH_POINTS = 5.0
PREFERRED_STORE_POINTS = 3.0
LOYALTY_POINTS = 2.0
PRICE_PENALTY_DIVISOR = 10.0


def discount_percent(item: CatalogItem) -> float:
    """``(price - sale) / price * 100``; 0.0 when either price is unusable."""
    price = parse_price(item.price)
    sale = parse_price(item.sale_price)
    if price is None or sale is None or price <= 0:
        return 0.0
    return (price - sale) / price * 100.0


def _price_sort_key(item: CatalogItem) -> tuple[int, float, str]:
    price = item.effective_price
    if price is None:
        return (1, 0.0, item.id)
    return (0, price, item.id)


class CatalogAnalysisService:
    """Read-only catalog queries that sit beside search."""

    def __init__(self, search_service: CatalogSearchService) -> None:
        self._search_service = search_service

    @property
    def default_page_size(self) -> int:
        return self._search_service.settings.default_page_size

    def get_item(self, item_id: str) -> CatalogItem | None:
        return self._search_service.snapshot.items_by_id.get(item_id)

    def list_items(self, page: int = 0, size: int | None = None) -> list[CatalogItem]:
        return self._page(self._search_service.snapshot.items, page, size)

    def items_by_category(self, category: str, page: int = 0, size: int | None = None) -> list[CatalogItem]:
        return self._page(self._search_service.snapshot.items_by_category.get(category, ()), page, size)

    def items_by_store(self, store_name: str, page: int = 0, size: int | None = None) -> list[CatalogItem]:
        return self._page(self._search_service.snapshot.items_by_store.get(store_name, ()), page, size)

    def compare_items(self, request: CompareRequest) -> list[CatalogItem]:
        """Items passing every filter in ``request``, cheapest first.

        Items whose price cannot be parsed are dropped when a price range is
        given and sorted after every priced item otherwise.
        """
        category = request.category.lower() if request.category is not None else None
        stores = set(request.stores)

        matched: list[CatalogItem] = []
        for item in self._search_service.snapshot.items:
            if category is not None and item.category.lower() != category:
                continue
            if request.availability and (item.availability or "").strip().lower() != IN_STOCK:
                continue
            if stores and item.store_name not in stores:
                continue
            if request.sale_only and not item.has_deal:
                continue
            if request.price_range is not None:
                price = item.effective_price
                low, high = request.price_range
                if price is None or not low <= price <= high:
                    continue
            matched.append(item)

        matched.sort(key=_price_sort_key)
        return matched

    def recommend_stores(self, request: RecommendRequest) -> list[str]:
        """Store names ordered by summed per-item preference score."""
        needs = [need.lower() for need in request.product_needs]
        preferred = request.preferred_provider.lower() if request.preferred_provider else None

        totals: dict[str, float] = {}
        for item in self._search_service.snapshot.items:
            name = item.name.lower()
            score = 0.0
            if any(need in name for need in needs):
                score += NEED_MATCH_POINTS
            if preferred is not None and item.store_name.lower() == preferred:
                score += PREFERRED_STORE_POINTS
            if request.loyalty_program and item.deal_type is DealType.LOYALTY:
                score += LOYALTY_POINTS
            score -= (item.effective_price or 0.0) / PRICE_PENALTY_DIVISOR
            totals[item.store_name] = totals.get(item.store_name, 0.0) + score

        ranked = sorted(totals.items(), key=lambda entry: (-entry[1], entry[0]))
        logger.debug("Recommended %d stores for needs=%s", len(ranked), needs)
        return [store for store, _ in ranked]

    def top_deals(self, limit: int = 10) -> list[CatalogItem]:
        """Deal items with the largest discount first."""
        if limit <= 0:
            return []

        heap = [(-discount_percent(item), item.id) for item in self._search_service.snapshot.items if item.has_deal]
        heapq.heapify(heap)

        items_by_id = self._search_service.snapshot.items_by_id
        deals: list[CatalogItem] = []
        while heap and len(deals) < limit:
            _, item_id = heapq.heappop(heap)
            deals.append(items_by_id[item_id])
        return deals

    def _page(self, items: Sequence[CatalogItem], page: int, size: int | None) -> list[CatalogItem]:
        return paginate(items, page, self.default_page_size if size is None else size)

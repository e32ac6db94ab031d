"""Domain layer: catalog items and query value objects."""

from catalog_search.domain.analysis import CompareRequest, RecommendRequest
from catalog_search.domain.model import CatalogItem, DealType, parse_price
from catalog_search.domain.search import KeywordCount, SearchOutcome, StoreRanking


__all__ = [
    "CatalogItem",
    "CompareRequest",
    "DealType",
    "KeywordCount",
    "RecommendRequest",
    "SearchOutcome",
    "StoreRanking",
    "parse_price",
]

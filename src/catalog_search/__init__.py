"""In-memory catalog search and ranking engine."""

from catalog_search.config import Settings
from catalog_search.service_layer.search_service import CatalogSearchService


__all__ = ["CatalogSearchService", "Settings"]

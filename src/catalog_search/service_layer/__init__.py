"""Service layer: search orchestration, query tracking and catalog analysis."""

from catalog_search.service_layer.analysis_service import CatalogAnalysisService
from catalog_search.service_layer.search_service import CatalogReloadError, CatalogSearchService
from catalog_search.service_layer.search_tracking import SearchTracker


__all__ = ["CatalogAnalysisService", "CatalogReloadError", "CatalogSearchService", "SearchTracker"]

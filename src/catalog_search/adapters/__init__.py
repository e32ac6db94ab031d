"""Adapters for the external catalog store."""

from catalog_search.adapters.catalog_store import (
    AbstractCatalogStore,
    CatalogStoreError,
    InMemoryCatalogStore,
    JsonFileCatalogStore,
)


__all__ = [
    "AbstractCatalogStore",
    "CatalogStoreError",
    "InMemoryCatalogStore",
    "JsonFileCatalogStore",
]

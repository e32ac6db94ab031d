"""Shared test fixtures and configuration."""

import copy
import os

import pytest


# Keep developer environment and .env files out of Settings() in tests
for key in list(os.environ):
    if key.startswith("CATALOG_SEARCH_"):
        del os.environ[key]

from catalog_search.adapters.catalog_store import InMemoryCatalogStore
from catalog_search.config import Settings
from catalog_search.domain.model import CatalogItem
from catalog_search.service_layer.search_service import CatalogSearchService


SAMPLE_ITEMS = [
    {
        "id": "p1",
        "productName": "Organic Whole Milk",
        "category": "Dairy",
        "storeName": "FreshMart",
        "price": "$4.99",
        "salePrice": "$3.99",
        "dealType": "SALE",
        "availability": "In-stock",
    },
    {
        "id": "p2",
        "productName": "Milk Chocolate Bar",
        "category": "Snacks",
        "storeName": "QuickShop",
        "price": "$2.50",
        "dealType": "NONE",
        "availability": "In-stock",
    },
    {
        "id": "p3",
        "productName": "Almond Milk Unsweetened",
        "category": "Dairy",
        "storeName": "FreshMart",
        "price": "$3.49",
        "salePrice": "$2.99",
        "loyaltyPrice": "$2.79",
        "dealType": "LOYALTY",
        "availability": "Out-of-stock",
    },
    {
        "id": "p4",
        "productName": "Organic Bananas",
        "category": "Produce",
        "storeName": "GreenGrocer",
        "price": "$1.99",
        "salePrice": "$1.49",
        "dealType": "PROMO",
        "availability": "In-stock",
    },
    {
        "id": "p5",
        "productName": "Whole Wheat Bread",
        "category": "Bakery",
        "storeName": "QuickShop",
        "price": "$3.00",
        "availability": "In-stock",
    },
    {
        "id": "p6",
        "productName": "Milano Cookies",
        "category": "Snacks",
        "storeName": "GreenGrocer",
        "price": "$4.25",
        "salePrice": "$3.40",
        "dealType": "CLEARANCE",
        "availability": "In-stock",
    },
    {
        "id": "p7",
        "productName": "Sourdough Bread Loaf",
        "category": "Bakery",
        "storeName": "FreshMart",
        "price": "N/A",
    },
]


@pytest.fixture
def sample_payload() -> list[dict]:
    """Catalog entries as the store serializes them (camelCase keys)."""
    return copy.deepcopy(SAMPLE_ITEMS)


@pytest.fixture
def sample_items() -> list[CatalogItem]:
    """Seven items across three stores, four categories and every deal type."""
    return [CatalogItem.model_validate(entry) for entry in SAMPLE_ITEMS]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def catalog_store(sample_items) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(sample_items)


@pytest.fixture
def search_service(catalog_store, test_settings) -> CatalogSearchService:
    """Service with the sample catalog already loaded."""
    return CatalogSearchService(catalog_store, settings=test_settings)

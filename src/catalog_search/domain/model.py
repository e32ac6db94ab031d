"""Catalog domain model.

``CatalogItem`` is owned by the external catalog store; the engine only ever
holds read-only snapshots of it, so the model is frozen. Field names are
snake_case but the store's camelCase names (``productName``, ``storeName``,
``dealType``...) are accepted on input.
"""

from enum import Enum
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DealType(str, Enum):
    """Promotional classification attached to an item."""

    LOYALTY = "LOYALTY"
    SALE = "SALE"
    PROMO = "PROMO"
    CLEARANCE = "CLEARANCE"
    NONE = "NONE"


class CatalogItem(BaseModel):
    """Value object for a single catalog item."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(alias="productName")
    category: str = ""
    store_name: str = Field(default="", alias="storeName")
    price: str | None = None
    sale_price: str | None = Field(default=None, alias="salePrice")
    loyalty_price: str | None = Field(default=None, alias="loyaltyPrice")
    deal_type: DealType | None = Field(default=None, alias="dealType")
    description: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    availability: str | None = None
    product_url: str | None = Field(default=None, alias="productUrl")

    @field_validator("deal_type", mode="before")
    @classmethod
    def _normalize_deal_type(cls, value: object) -> object:
        if value is None or isinstance(value, DealType):
            return value
        text = str(value).strip().upper()
        if not text:
            return None
        try:
            return DealType(text)
        except ValueError:
            return DealType.NONE

    @field_validator("price", "sale_price", "loyalty_price", mode="before")
    @classmethod
    def _stringify_price(cls, value: object) -> object:
        # Stores hand back prices as "$3.99" strings or bare numbers.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def has_deal(self) -> bool:
        return self.deal_type is not None and self.deal_type is not DealType.NONE

    @property
    def effective_price(self) -> float | None:
        """Sale price when one is set, otherwise the base price."""
        if self.sale_price is not None and self.sale_price.strip():
            return parse_price(self.sale_price)
        return parse_price(self.price)


def parse_price(raw: str | None) -> float | None:
    """Parse a store price such as ``"$3.99"``; ``None`` when it is not a number."""

    if raw is None:
        return None
    try:
        value = float(raw.replace("$", "").replace(",", "").strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value

"""Request objects for catalog comparison and store recommendation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CompareRequest(BaseModel):
    """Filters applied by ``CatalogAnalysisService.compare_items``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: str | None = None
    price_range: tuple[float, float] | None = Field(default=None, alias="priceRange")
    stores: list[str] = Field(default_factory=list)
    availability: bool = False
    sale_only: bool = Field(default=False, alias="saleOnly")

    @field_validator("price_range")
    @classmethod
    def _ordered_range(cls, value: tuple[float, float] | None) -> tuple[float, float] | None:
        if value is not None and value[0] > value[1]:
            raise ValueError("price_range lower bound must not exceed upper bound")
        return value


class RecommendRequest(BaseModel):
    """Shopper preferences used to rank stores."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    preferred_provider: str | None = Field(default=None, alias="preferredProvider")
    product_needs: list[str] = Field(default_factory=list, alias="productNeeds")
    budget: str | None = None
    delivery: str | None = None
    loyalty_program: bool = Field(default=False, alias="loyaltyProgram")

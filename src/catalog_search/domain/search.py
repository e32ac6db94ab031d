"""Value objects returned by the query surface.

All are immutable so a result handed to a caller can never drift from the
snapshot it was computed against.
"""

from pydantic import BaseModel, ConfigDict, Field

from catalog_search.domain.model import CatalogItem


class SearchOutcome(BaseModel):
    """Result of a search that reports spelling corrections.

    ``suggestions`` is ``None`` when the query was rejected by validation and
    an empty list when the query was accepted but needed no correction.
    """

    model_config = ConfigDict(frozen=True)

    items: list[CatalogItem] = Field(default_factory=list)
    original_query: str
    corrected_query: str | None = None
    suggestions: list[str] | None = Field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return self.suggestions is None

    @property
    def was_corrected(self) -> bool:
        return self.corrected_query is not None


class StoreRanking(BaseModel):
    """One row of a keyword-occurrence store ranking."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    store_name: str
    occurrences: int = Field(ge=0)


class KeywordCount(BaseModel):
    """How often a keyword has been searched."""

    model_config = ConfigDict(frozen=True)

    keyword: str
    count: int = Field(ge=0)

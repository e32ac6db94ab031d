"""Centralized configuration for catalog-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Every field can be overridden with a ``CATALOG_SEARCH_`` prefixed variable
    (``CATALOG_SEARCH_DEFAULT_PAGE_SIZE=50``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Catalog source
    catalog_path: Path | None = Field(default=None, description="JSON file backing the file catalog store")
    reload_on_startup: bool = Field(default=True, description="Build the first snapshot on service construction")

    # Query validation
    query_min_length: int = Field(default=2, ge=1, description="Shortest accepted query after trimming")
    query_max_length: int = Field(default=100, ge=1, description="Longest accepted query after trimming")
    default_page_size: int = Field(default=20, ge=1, description="Page size used when the caller gives none")

    # Indexing
    min_index_token_length: int = Field(
        default=3, ge=1, description="Name tokens shorter than this are not added to the inverted index"
    )

    # Autocomplete and spell correction
    autocomplete_limit: int = Field(default=10, ge=1, description="Maximum autocomplete suggestions")
    spell_max_distance: int = Field(default=2, ge=1, description="Largest edit distance offered as a correction")
    spell_suggestion_limit: int = Field(default=5, ge=1, description="Corrections fetched per unknown token")
    correction_suggestion_cap: int = Field(
        default=5, ge=1, description="Maximum suggestions reported alongside a corrected query"
    )

    # Store ranking
    store_keyword_min_length: int = Field(default=2, ge=1, description="Shortest keyword for store ranking")
    store_keyword_max_length: int = Field(default=50, ge=1, description="Longest keyword for store ranking")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_bounds(self) -> "Settings":
        if self.query_min_length > self.query_max_length:
            raise ValueError("query_min_length must not exceed query_max_length")
        if self.store_keyword_min_length > self.store_keyword_max_length:
            raise ValueError("store_keyword_min_length must not exceed store_keyword_max_length")
        return self

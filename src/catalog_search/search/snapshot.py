"""Immutable bundle of every structure derived from one catalog load.

A snapshot is built completely off to the side and only then published by
the search service with a single reference assignment, so a reader holding a
snapshot always sees an index, a score table and a trie built from the same
item set.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
import time
from types import MappingProxyType

from catalog_search.domain.model import CatalogItem
from catalog_search.search.inverted_index import MIN_TOKEN_LENGTH, InvertedIndex, split_words
from catalog_search.search.relevance import compute_scores
from catalog_search.search.trie import PrefixTrie


logger = logging.getLogger(__name__)


class DuplicateItemError(ValueError):
    """Raised when two catalog items share an identifier."""


@dataclass(frozen=True)
class CatalogSnapshot:
    """Everything a query reads, as of one reload."""

    items: tuple[CatalogItem, ...]
    items_by_id: Mapping[str, CatalogItem]
    items_by_category: Mapping[str, tuple[CatalogItem, ...]]
    items_by_store: Mapping[str, tuple[CatalogItem, ...]]
    index: InvertedIndex
    scores: Mapping[str, float]
    trie: PrefixTrie
    version: int = 0
    built_at: float = field(default_factory=time.time)

    def __len__(self) -> int:
        return len(self.items)

    def score(self, item_id: str) -> float:
        return self.scores.get(item_id, 0.0)

    @classmethod
    def empty(cls) -> CatalogSnapshot:
        return build_snapshot((), version=0)


def build_snapshot(
    items: Iterable[CatalogItem],
    *,
    version: int = 0,
    min_token_length: int = MIN_TOKEN_LENGTH,
) -> CatalogSnapshot:
    """Index ``items`` into a new snapshot.

    The trie receives every full name plus each name word long enough to be
    indexed, so autocomplete starts out knowing the catalog vocabulary.

    Raises:
        DuplicateItemError: two items share an identifier.
    """
    start = time.perf_counter()
    ordered = tuple(items)

    by_id: dict[str, CatalogItem] = {}
    by_category: dict[str, list[CatalogItem]] = {}
    by_store: dict[str, list[CatalogItem]] = {}
    trie = PrefixTrie()

    for item in ordered:
        if item.id in by_id:
            raise DuplicateItemError(f"Duplicate catalog item id: {item.id!r}")
        by_id[item.id] = item
        by_category.setdefault(item.category, []).append(item)
        by_store.setdefault(item.store_name, []).append(item)

        trie.insert(item.name)
        for word in split_words(item.name):
            if len(word) >= min_token_length:
                trie.insert(word)

    index = InvertedIndex.from_items(ordered, min_token_length=min_token_length)
    scores = compute_scores(ordered)

    snapshot = CatalogSnapshot(
        items=ordered,
        items_by_id=MappingProxyType(by_id),
        items_by_category=MappingProxyType({k: tuple(v) for k, v in by_category.items()}),
        items_by_store=MappingProxyType({k: tuple(v) for k, v in by_store.items()}),
        index=index,
        scores=MappingProxyType(scores),
        trie=trie,
        version=version,
    )
    logger.debug(
        "Built catalog snapshot v%d: %d items, %d tokens in %.3fs",
        version,
        len(ordered),
        len(index),
        time.perf_counter() - start,
    )
    return snapshot

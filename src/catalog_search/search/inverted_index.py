"""Inverted index from normalized name tokens to item identifiers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import re

from catalog_search.domain.model import CatalogItem


_NON_ALNUM = re.compile(r"[^a-z0-9]")

MIN_TOKEN_LENGTH = 3


def normalize_token(word: str) -> str:
    """Lowercase ``word`` and strip every character outside ``[a-z0-9]``."""
    return _NON_ALNUM.sub("", word.lower()).strip()


def split_words(text: str) -> list[str]:
    """Lowercased whitespace split; the only tokenization the engine does."""
    return text.lower().split()


class InvertedIndex:
    """Maps normalized token -> set of item identifiers.

    Built once per reload and read-only afterwards, so lookups need no locking.
    """

    def __init__(self, min_token_length: int = MIN_TOKEN_LENGTH) -> None:
        self.min_token_length = min_token_length
        self._postings: dict[str, set[str]] = {}
        self._vocabulary: frozenset[str] = frozenset()

    @classmethod
    def from_items(cls, items: Iterable[CatalogItem], min_token_length: int = MIN_TOKEN_LENGTH) -> InvertedIndex:
        index = cls(min_token_length=min_token_length)
        index.rebuild({item.id: split_words(item.name) for item in items})
        return index

    def rebuild(self, tokens_per_item: Mapping[str, Iterable[str]]) -> None:
        """Replace the index with postings for ``item id -> name words``.

        Words shorter than ``min_token_length`` are skipped before
        normalization; words that normalize to nothing are skipped after.
        """
        postings: dict[str, set[str]] = {}
        for item_id, words in tokens_per_item.items():
            for word in words:
                if len(word) < self.min_token_length:
                    continue
                token = normalize_token(word)
                if not token:
                    continue
                postings.setdefault(token, set()).add(item_id)
        self._postings = postings
        self._vocabulary = frozenset(postings)

    def lookup(self, token: str) -> frozenset[str]:
        ids = self._postings.get(token)
        return frozenset(ids) if ids else frozenset()

    def vocabulary(self) -> frozenset[str]:
        return self._vocabulary

    def item_ids(self) -> frozenset[str]:
        """Every identifier referenced by at least one posting."""
        ids: set[str] = set()
        for posting in self._postings.values():
            ids.update(posting)
        return frozenset(ids)

    def __contains__(self, token: object) -> bool:
        return token in self._postings

    def __len__(self) -> int:
        return len(self._postings)

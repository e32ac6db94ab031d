"""Prefix trie for autocomplete suggestions.

Each node maps a character to its child and records whether the path from the
root spells a complete term, plus how many times that term was inserted.
Suggestions are every complete term under a prefix, ordered by frequency
(descending) then alphabetically.

Reloads build a fresh trie; the only writes a published trie sees come from
query tracking, so inserts and reads share one lock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading


DEFAULT_SUGGESTION_LIMIT = 10


@dataclass
class TrieNode:
    """Single node in the trie."""

    children: dict[str, TrieNode] = field(default_factory=dict)
    is_end_of_word: bool = False
    frequency: int = 0


@dataclass(frozen=True)
class Suggestion:
    """A complete term found under a prefix."""

    word: str
    frequency: int


def _normalize(word: str | None) -> str:
    if not word:
        return ""
    return word.lower().strip()


class PrefixTrie:
    """Frequency-weighted prefix tree."""

    def __init__(self) -> None:
        self._root = TrieNode()
        self._lock = threading.Lock()

    def insert(self, word: str | None) -> None:
        """Insert ``word``, bumping its frequency. Blank input is ignored."""
        word = _normalize(word)
        if not word:
            return

        with self._lock:
            node = self._root
            for ch in word:
                child = node.children.get(ch)
                if child is None:
                    child = TrieNode()
                    node.children[ch] = child
                node = child
            node.is_end_of_word = True
            node.frequency += 1

    def contains_exact(self, word: str | None) -> bool:
        word = _normalize(word)
        if not word:
            return False
        with self._lock:
            node = self._find_node(word)
            return node is not None and node.is_end_of_word

    def frequency(self, word: str | None) -> int:
        """Number of times ``word`` was inserted (0 when absent)."""
        word = _normalize(word)
        if not word:
            return 0
        with self._lock:
            node = self._find_node(word)
            if node is None or not node.is_end_of_word:
                return 0
            return node.frequency

    def suggest(self, prefix: str | None, limit: int = DEFAULT_SUGGESTION_LIMIT) -> list[str]:
        """Return up to ``limit`` complete terms starting with ``prefix``."""
        return [s.word for s in self.suggest_with_frequency(prefix, limit)]

    def suggest_with_frequency(self, prefix: str | None, limit: int = DEFAULT_SUGGESTION_LIMIT) -> list[Suggestion]:
        prefix = _normalize(prefix)
        if not prefix or limit <= 0:
            return []

        with self._lock:
            start = self._find_node(prefix)
            if start is None:
                return []
            found = self._collect(start, prefix)

        found.sort(key=lambda s: (-s.frequency, s.word))
        return found[:limit]

    def clear(self) -> None:
        """Drop every term; the root node itself is kept."""
        with self._lock:
            self._root.children.clear()

    def __len__(self) -> int:
        """Number of distinct complete terms."""
        with self._lock:
            return len(self._collect(self._root, ""))

    def _find_node(self, prefix: str) -> TrieNode | None:
        node = self._root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    @staticmethod
    def _collect(start: TrieNode, prefix: str) -> list[Suggestion]:
        # Explicit stack: depth is bounded by memory, not the recursion limit.
        found: list[Suggestion] = []
        stack: list[tuple[TrieNode, str]] = [(start, prefix)]
        while stack:
            node, word = stack.pop()
            if node.is_end_of_word:
                found.append(Suggestion(word=word, frequency=node.frequency))
            for ch, child in node.children.items():
                stack.append((child, word + ch))
        return found

"""Query popularity tracking.

Every accepted query is counted here. This is the one piece of state that
read traffic writes, so all access goes through a lock. Counts survive
catalog reloads.
"""

from __future__ import annotations

from collections import Counter
import threading

from catalog_search.domain.search import KeywordCount


def _normalize(keyword: str | None) -> str:
    if not keyword:
        return ""
    return keyword.lower().strip()


class SearchTracker:
    """Thread-safe keyword -> search count table."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._lock = threading.Lock()

    def record(self, keyword: str | None) -> None:
        keyword = _normalize(keyword)
        if not keyword:
            return
        with self._lock:
            self._counts[keyword] += 1

    def frequency(self, keyword: str | None) -> int:
        keyword = _normalize(keyword)
        if not keyword:
            return 0
        with self._lock:
            return self._counts.get(keyword, 0)

    def top_keywords(self, limit: int) -> list[KeywordCount]:
        """Most searched keywords, count descending then alphabetical."""
        if limit <= 0:
            return []
        with self._lock:
            entries = list(self._counts.items())
        entries.sort(key=lambda entry: (-entry[1], entry[0]))
        return [KeywordCount(keyword=keyword, count=count) for keyword, count in entries[:limit]]

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

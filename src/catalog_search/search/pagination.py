"""Zero-based page slicing shared by every listing operation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar


T = TypeVar("T")


def paginate(items: Sequence[T], page: int, size: int) -> list[T]:
    """Return ``items[page*size : page*size+size]``.

    A start index at or beyond the end, a negative page, or a non-positive
    size gives an empty page.
    """
    if page < 0 or size < 1:
        return []
    start = page * size
    if start >= len(items):
        return []
    return list(items[start : start + size])

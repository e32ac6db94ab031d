"""Boyer-Moore substring search with the bad-character rule.

The bad-character table is a plain dict keyed by character, so it works for
any Unicode text rather than a fixed 8-bit alphabet. Matches advance the
alignment by one position, which makes ``count_occurrences`` see overlapping
matches (``"ana"`` occurs twice in ``"banana"``).
"""

from __future__ import annotations

from collections.abc import Iterator


def build_bad_character_table(pattern: str) -> dict[str, int]:
    """Map each character of ``pattern`` to its rightmost index."""
    return {ch: i for i, ch in enumerate(pattern)}


def iter_match_positions(text: str, pattern: str) -> Iterator[int]:
    """Yield every start index where ``pattern`` occurs in ``text``.

    An empty pattern yields nothing; callers decide what an empty pattern
    means for them.
    """
    n, m = len(text), len(pattern)
    if m == 0 or m > n:
        return

    last = build_bad_character_table(pattern)
    shift = 0
    while shift <= n - m:
        j = m - 1
        while j >= 0 and pattern[j] == text[shift + j]:
            j -= 1

        if j < 0:
            yield shift
            shift += 1
        else:
            shift += max(1, j - last.get(text[shift + j], -1))


def contains(text: str, pattern: str) -> bool:
    """True when ``pattern`` occurs in ``text``. The empty pattern always matches."""
    if not pattern:
        return True
    return next(iter_match_positions(text, pattern), None) is not None


def count_occurrences(text: str, pattern: str) -> int:
    """Count every occurrence of ``pattern`` in ``text``, overlaps included.

    Examples:
        >>> count_occurrences("banana", "ana")
        2
        >>> count_occurrences("aaaa", "aa")
        3
    """
    return sum(1 for _ in iter_match_positions(text, pattern))

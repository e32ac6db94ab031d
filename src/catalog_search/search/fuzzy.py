"""Edit-distance spelling correction against the indexed vocabulary.

Defaults:
- Corrections must be within 2 edits of the query token
- At most 5 corrections per token
- A distance of 0 is never offered: the token is already spelled right
"""

from __future__ import annotations

from collections.abc import Iterable

from catalog_search.search.inverted_index import normalize_token


DEFAULT_MAX_DISTANCE = 2
DEFAULT_SUGGESTION_LIMIT = 5


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Insertions, deletions and substitutions each cost 1. Only two rows of
    the dynamic-programming table are kept.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 as soon as the
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character edits needed to change s1
        into s2, or max_distance+1 when max_distance is set and exceeded.

    Examples:
        >>> levenshtein_distance("orgnic", "organic")
        1
        >>> levenshtein_distance("milkk", "milk")
        1
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string as columns
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = j
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            if curr_row[i] < row_min:
                row_min = curr_row[i]

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def rank_corrections(
    word: str,
    vocabulary: Iterable[str],
    max_distance: int = DEFAULT_MAX_DISTANCE,
) -> list[tuple[str, int]]:
    """Return ``(term, distance)`` pairs with ``0 < distance <= max_distance``.

    Sorted by distance, then alphabetically.
    """
    query = normalize_token(word)
    if not query:
        return []

    matches: list[tuple[str, int]] = []
    for term in vocabulary:
        distance = levenshtein_distance(query, term, max_distance)
        if 0 < distance <= max_distance:
            matches.append((term, distance))

    matches.sort(key=lambda x: (x[1], x[0]))
    return matches


def suggest_corrections(
    word: str,
    vocabulary: Iterable[str],
    max_distance: int = DEFAULT_MAX_DISTANCE,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[str]:
    """Best spelling corrections for ``word``, closest first."""
    if limit <= 0:
        return []
    return [term for term, _ in rank_corrections(word, vocabulary, max_distance)[:limit]]

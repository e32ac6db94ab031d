"""Unit tests for edit-distance spelling correction."""

import pytest

from catalog_search.search.fuzzy import levenshtein_distance, rank_corrections, suggest_corrections


@pytest.mark.unit
class TestLevenshteinDistance:
    """Tests for levenshtein_distance function."""

    def test_identical_strings(self):
        assert levenshtein_distance("organic", "organic") == 0

    def test_empty_strings(self):
        assert levenshtein_distance("", "") == 0
        assert levenshtein_distance("abc", "") == 3
        assert levenshtein_distance("", "abc") == 3

    def test_known_typos(self):
        assert levenshtein_distance("orgnic", "organic") == 1
        assert levenshtein_distance("milkk", "milk") == 1
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_symmetric(self):
        assert levenshtein_distance("bread", "beard") == levenshtein_distance("beard", "bread")

    def test_case_sensitive(self):
        assert levenshtein_distance("Milk", "milk") == 1

    def test_early_exit_caps_result(self):
        assert levenshtein_distance("abcdef", "uvwxyz", max_distance=2) == 3

    def test_length_gap_exits_immediately(self):
        assert levenshtein_distance("a", "abcdefgh", max_distance=2) == 3

    def test_within_threshold_is_exact(self):
        assert levenshtein_distance("orgnic", "organic", max_distance=2) == 1


@pytest.mark.unit
class TestSuggestCorrections:
    """Tests for rank_corrections and suggest_corrections."""

    def test_closest_first(self):
        vocabulary = {"organic", "orange"}

        suggestions = suggest_corrections("orgnic", vocabulary)

        assert suggestions[0] == "organic"

    def test_exact_match_is_not_a_correction(self):
        assert suggest_corrections("milk", {"milk", "silk"}) == ["silk"]

    def test_beyond_max_distance_is_dropped(self):
        assert suggest_corrections("bread", {"broccoli"}) == []

    def test_ties_are_alphabetical(self):
        assert rank_corrections("bat", {"cat", "hat", "bag"}) == [("bag", 1), ("cat", 1), ("hat", 1)]

    def test_limit(self):
        vocabulary = {"cat", "hat", "bag", "mat", "rat", "sat", "vat"}

        assert len(suggest_corrections("bat", vocabulary, limit=5)) == 5
        assert suggest_corrections("bat", vocabulary, limit=0) == []

    def test_query_is_normalized(self):
        assert suggest_corrections("Orgnic!", {"organic"}) == ["organic"]

    def test_blank_query(self):
        assert suggest_corrections("!!", {"organic"}) == []

    def test_custom_max_distance(self):
        assert suggest_corrections("orgnc", {"organic"}, max_distance=1) == []
        assert suggest_corrections("orgnc", {"organic"}, max_distance=2) == ["organic"]

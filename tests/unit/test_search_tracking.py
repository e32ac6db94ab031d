"""Unit tests for query popularity tracking."""

import threading

import pytest

from catalog_search.domain.search import KeywordCount
from catalog_search.service_layer.search_tracking import SearchTracker


@pytest.mark.unit
class TestSearchTracker:
    """Tests for SearchTracker."""

    def test_record_and_frequency(self):
        tracker = SearchTracker()

        tracker.record("Milk")
        tracker.record(" milk ")
        tracker.record("bread")

        assert tracker.frequency("MILK") == 2
        assert tracker.frequency("bread") == 1
        assert tracker.frequency("cheese") == 0
        assert len(tracker) == 2

    @pytest.mark.parametrize("keyword", [None, "", "   "])
    def test_blank_keywords_are_ignored(self, keyword):
        tracker = SearchTracker()

        tracker.record(keyword)

        assert len(tracker) == 0
        assert tracker.frequency(keyword) == 0

    def test_top_keywords_order(self):
        tracker = SearchTracker()
        for keyword in ["milk", "bread", "milk", "eggs", "bread", "apples", "milk"]:
            tracker.record(keyword)

        assert tracker.top_keywords(3) == [
            KeywordCount(keyword="milk", count=3),
            KeywordCount(keyword="bread", count=2),
            KeywordCount(keyword="apples", count=1),
        ]

    def test_top_keywords_non_positive_limit(self):
        tracker = SearchTracker()
        tracker.record("milk")

        assert tracker.top_keywords(0) == []

    def test_reset(self):
        tracker = SearchTracker()
        tracker.record("milk")

        tracker.reset()

        assert tracker.top_keywords(10) == []

    def test_concurrent_records_are_not_lost(self):
        tracker = SearchTracker()

        def worker():
            for _ in range(1000):
                tracker.record("milk")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert tracker.frequency("milk") == 8000

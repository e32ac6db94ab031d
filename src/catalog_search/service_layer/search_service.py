"""Catalog search orchestration.

One pipeline serves both search entry points:

1. validate the query against a character whitelist and length bounds
2. try it as a case-insensitive regex when it contains regex tokens
3. look its words up in the inverted index
4. (correction mode only) rewrite unknown words to their closest indexed
   spelling and rerun the pipeline on the rewritten query
5. fall back to a Boyer-Moore substring scan over item names
6. rank by relevance score and paginate
7. track the query for popularity and autocomplete

All index structures live in an immutable ``CatalogSnapshot``. ``reload()``
builds a new snapshot from the catalog store and publishes it with one
reference assignment; a query reads ``self._snapshot`` once and uses that
snapshot for its whole run, so it never sees a half-built index.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
import time

from catalog_search.adapters.catalog_store import AbstractCatalogStore
from catalog_search.config import Settings
from catalog_search.domain.model import CatalogItem
from catalog_search.domain.search import KeywordCount, SearchOutcome, StoreRanking
from catalog_search.observability.context import bind_log_context
from catalog_search.observability.metrics import (
    RELOAD_COUNT,
    RELOAD_LATENCY,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    SNAPSHOT_ITEMS,
    track_latency,
)
from catalog_search.observability.tracing import create_span
from catalog_search.search.boyer_moore import contains
from catalog_search.search.fuzzy import suggest_corrections
from catalog_search.search.inverted_index import normalize_token
from catalog_search.search.pagination import paginate
from catalog_search.search.snapshot import CatalogSnapshot, build_snapshot
from catalog_search.search.store_ranker import StoreRanker
from catalog_search.service_layer.search_tracking import SearchTracker


logger = logging.getLogger(__name__)

# Characters that make a query worth compiling as a regex.
_REGEX_TOKENS = re.compile(r"[|*+?()\[\]{}^$\\]")

STAGE_REJECTED = "rejected"
STAGE_REGEX = "regex"
STAGE_INDEX = "index"
STAGE_CORRECTION = "correction"
STAGE_SUBSTRING = "substring"
STAGE_NONE = "none"


class CatalogReloadError(RuntimeError):
    """Raised when a reload fails; the previous snapshot stays published."""


def _build_query_pattern(min_length: int, max_length: int) -> re.Pattern[str]:
    # Letters, digits, whitespace, hyphen, period and the regex tokens | * + ? ( )
    return re.compile(rf"[a-zA-Z0-9\s\-.|*+?()]{{{min_length},{max_length}}}", re.ASCII)


class CatalogSearchService:
    """Search, autocomplete and ranking over an in-memory catalog snapshot."""

    def __init__(
        self,
        store: AbstractCatalogStore,
        settings: Settings | None = None,
        tracker: SearchTracker | None = None,
    ) -> None:
        """Initialize the service and, unless disabled, load the first snapshot.

        Args:
            store: Catalog store read on every reload
            settings: Engine settings (read from the environment when omitted)
            tracker: Query popularity tracker; a fresh one when omitted

        Raises:
            CatalogReloadError: the startup reload failed
        """
        self.settings = settings or Settings()
        self._store = store
        self._tracker = tracker or SearchTracker()
        self._query_pattern = _build_query_pattern(self.settings.query_min_length, self.settings.query_max_length)
        self._reload_lock = threading.Lock()
        self._snapshot = CatalogSnapshot.empty()

        if self.settings.reload_on_startup:
            self.reload()

    @property
    def snapshot(self) -> CatalogSnapshot:
        """The currently published snapshot."""
        return self._snapshot

    @property
    def tracker(self) -> SearchTracker:
        return self._tracker

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reload(self) -> CatalogSnapshot:
        """Rebuild every index from the store and publish the result.

        Reloads are serialized with each other; queries keep running against
        the old snapshot until the new one is published.

        Raises:
            CatalogReloadError: the store failed or returned invalid data.
        """
        return self._reload(cancelled=None)

    async def reload_async(self) -> CatalogSnapshot:
        """Run ``reload()`` in a worker thread.

        Cancelling the awaiting task stops the new snapshot from being
        published once the worker finishes building it.
        """
        cancelled = threading.Event()
        try:
            return await asyncio.to_thread(self._reload, cancelled)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    def _reload(self, cancelled: threading.Event | None) -> CatalogSnapshot:
        store_label = type(self._store).__name__
        start = time.perf_counter()

        with (
            self._reload_lock,
            create_span("catalog.reload", attributes={"catalog.store": store_label}),
            track_latency(RELOAD_LATENCY, store=store_label),
        ):
            previous = self._snapshot
            try:
                items = self._store.list_all_items()
                snapshot = build_snapshot(
                    items,
                    version=previous.version + 1,
                    min_token_length=self.settings.min_index_token_length,
                )
            except Exception as exc:
                RELOAD_COUNT.labels(status="error").inc()
                logger.error(
                    "Catalog reload failed; keeping snapshot v%d (%d items): %s",
                    previous.version,
                    len(previous),
                    exc,
                    exc_info=True,
                )
                raise CatalogReloadError(f"Catalog reload failed: {exc}") from exc

            if cancelled is not None and cancelled.is_set():
                RELOAD_COUNT.labels(status="cancelled").inc()
                logger.info("Catalog reload cancelled; discarding snapshot v%d", snapshot.version)
                return previous

            self._snapshot = snapshot

        RELOAD_COUNT.labels(status="ok").inc()
        SNAPSHOT_ITEMS.labels(store=store_label).set(len(snapshot))
        logger.info(
            "Published catalog snapshot v%d: %d items, %d index tokens (%.3fs)",
            snapshot.version,
            len(snapshot),
            len(snapshot.index),
            time.perf_counter() - start,
        )
        return snapshot

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------

    def search(self, query: str | None, page: int = 0, size: int | None = None) -> list[CatalogItem]:
        """Ranked, paginated items matching ``query`` (no spelling correction)."""
        return self._execute(query, page, size, operation="search", with_correction=False).items

    def search_with_correction(self, query: str | None, page: int = 0, size: int | None = None) -> SearchOutcome:
        """Like ``search`` but retries misspelled queries and reports the correction."""
        return self._execute(query, page, size, operation="search_with_correction", with_correction=True)

    def autocomplete(self, prefix: str | None) -> list[str]:
        """Most popular indexed terms and past queries starting with ``prefix``."""
        with track_latency(SEARCH_LATENCY, operation="autocomplete"):
            return self._snapshot.trie.suggest(prefix, self.settings.autocomplete_limit)

    def rank_stores_by_keyword(self, keyword: str | None) -> list[StoreRanking]:
        """Stores ordered by total keyword occurrences across their item names."""
        if keyword is None or not keyword.strip():
            return []
        if not self.settings.store_keyword_min_length <= len(keyword) <= self.settings.store_keyword_max_length:
            logger.debug("Store ranking keyword rejected: length %d", len(keyword))
            return []
        with track_latency(SEARCH_LATENCY, operation="rank_stores"):
            return StoreRanker(self._snapshot.items).rank_by_keyword(keyword)

    def top_searched_keywords(self, limit: int = 10) -> list[KeywordCount]:
        return self._tracker.top_keywords(limit)

    def keyword_frequency(self, keyword: str | None) -> int:
        return self._tracker.frequency(keyword)

    def is_valid_query(self, query: str | None) -> bool:
        """Whitelist and length check applied before any matching."""
        if query is None:
            return False
        trimmed = query.strip()
        if not trimmed:
            return False
        return self._query_pattern.fullmatch(trimmed) is not None

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _execute(
        self,
        query: str | None,
        page: int,
        size: int | None,
        *,
        operation: str,
        with_correction: bool,
    ) -> SearchOutcome:
        page_size = self.settings.default_page_size if size is None else size
        snapshot = self._snapshot
        with bind_log_context(operation=operation), track_latency(SEARCH_LATENCY, operation=operation):
            outcome, stage = self._run_pipeline(snapshot, query, page, page_size, with_correction=with_correction)
        SEARCH_REQUESTS.labels(operation=operation, stage=stage).inc()
        logger.debug(
            "Search %r via %s stage: %d items on page %d (snapshot v%d)",
            query,
            stage,
            len(outcome.items),
            page,
            snapshot.version,
        )
        return outcome

    def _run_pipeline(
        self,
        snapshot: CatalogSnapshot,
        query: str | None,
        page: int,
        size: int,
        *,
        with_correction: bool,
    ) -> tuple[SearchOutcome, str]:
        if not self.is_valid_query(query):
            logger.debug("Rejected query %r", query)
            return SearchOutcome(original_query=query or "", suggestions=None), STAGE_REJECTED

        self._tracker.record(query)
        normalized = query.lower().strip()

        stage, matched = self._match_regex(snapshot, normalized)
        if not matched:
            stage, matched = self._match_index(snapshot, normalized)

        if not matched and with_correction:
            corrected, suggestions = self._correct(snapshot, normalized)
            if corrected is not None:
                logger.info("Corrected query %r -> %r", normalized, corrected)
                retry, _ = self._run_pipeline(snapshot, corrected, page, size, with_correction=False)
                outcome = SearchOutcome(
                    items=retry.items,
                    original_query=query,
                    corrected_query=corrected,
                    suggestions=suggestions,
                )
                return outcome, STAGE_CORRECTION

        if not matched:
            stage, matched = self._match_substring(snapshot, normalized)

        ranked = self._rank(snapshot, matched)
        snapshot.trie.insert(query)

        outcome = SearchOutcome(items=paginate(ranked, page, size), original_query=query, suggestions=[])
        return outcome, stage if matched else STAGE_NONE

    def _match_regex(self, snapshot: CatalogSnapshot, normalized: str) -> tuple[str, set[str]]:
        if not _REGEX_TOKENS.search(normalized):
            return STAGE_REGEX, set()
        # TODO: bound regex execution time; nested quantifiers such as (a+)+ can still backtrack exponentially.
        try:
            pattern = re.compile(normalized, re.IGNORECASE)
        except re.error as exc:
            logger.debug("Query %r is not a usable pattern: %s", normalized, exc)
            return STAGE_REGEX, set()
        return STAGE_REGEX, {item.id for item in snapshot.items if pattern.search(item.name.lower())}

    def _match_index(self, snapshot: CatalogSnapshot, normalized: str) -> tuple[str, set[str]]:
        matched: set[str] = set()
        for word in normalized.split():
            matched |= snapshot.index.lookup(normalize_token(word))
        return STAGE_INDEX, {item_id for item_id in matched if item_id in snapshot.items_by_id}

    def _match_substring(self, snapshot: CatalogSnapshot, normalized: str) -> tuple[str, set[str]]:
        return STAGE_SUBSTRING, {item.id for item in snapshot.items if contains(item.name.lower(), normalized)}

    def _correct(self, snapshot: CatalogSnapshot, normalized: str) -> tuple[str | None, list[str]]:
        """Rewrite unknown words to their best correction.

        Returns ``(None, [])`` when nothing could be corrected.
        """
        vocabulary = snapshot.index.vocabulary()
        words: list[str] = []
        gathered: list[str] = []
        for word in normalized.split():
            if normalize_token(word) in snapshot.index:
                words.append(word)
                continue
            corrections = suggest_corrections(
                word,
                vocabulary,
                max_distance=self.settings.spell_max_distance,
                limit=self.settings.spell_suggestion_limit,
            )
            if corrections:
                words.append(corrections[0])
                gathered.extend(corrections)
            else:
                words.append(word)

        corrected = " ".join(words)
        if corrected == normalized or not gathered:
            return None, []
        return corrected, list(dict.fromkeys(gathered))[: self.settings.correction_suggestion_cap]

    @staticmethod
    def _rank(snapshot: CatalogSnapshot, item_ids: set[str]) -> list[CatalogItem]:
        # Score descending; identifier breaks ties so pages are reproducible.
        ordered = sorted(item_ids, key=lambda item_id: (-snapshot.score(item_id), item_id))
        return [snapshot.items_by_id[item_id] for item_id in ordered]

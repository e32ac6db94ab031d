"""Catalog store abstractions and implementations.

The store is the system of record for catalog items. The search engine only
needs to list everything on reload; ``save_item`` exists for write-backs made
by collaborators outside the query path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
import logging
import os
from pathlib import Path
import tempfile
import threading

import orjson
from pydantic import ValidationError

from catalog_search.domain.model import CatalogItem


logger = logging.getLogger(__name__)


class CatalogStoreError(RuntimeError):
    """Raised when the store cannot be read or written."""


class AbstractCatalogStore(ABC):
    """Abstract repository for catalog items."""

    @abstractmethod
    def list_all_items(self) -> list[CatalogItem]:
        """Return every item currently in the store."""
        raise NotImplementedError

    @abstractmethod
    def save_item(self, item: CatalogItem) -> None:
        """Insert ``item`` or replace the stored item with the same id."""
        raise NotImplementedError


class InMemoryCatalogStore(AbstractCatalogStore):
    """Dict-backed store that keeps insertion order."""

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: dict[str, CatalogItem] = {}
        self._lock = threading.Lock()
        for item in items:
            self._items[item.id] = item

    def list_all_items(self) -> list[CatalogItem]:
        with self._lock:
            return list(self._items.values())

    def save_item(self, item: CatalogItem) -> None:
        with self._lock:
            self._items[item.id] = item

    def __len__(self) -> int:
        return len(self._items)


class JsonFileCatalogStore(AbstractCatalogStore):
    """Store backed by a JSON array of item objects.

    Reads accept the camelCase field names used by the upstream catalog
    (``productName``, ``storeName``...). Writes go through a temp file and
    ``os.replace`` so readers never see a truncated file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def list_all_items(self) -> list[CatalogItem]:
        with self._lock:
            return self._read()

    def save_item(self, item: CatalogItem) -> None:
        with self._lock:
            items = {existing.id: existing for existing in self._read()} if self.path.exists() else {}
            items[item.id] = item
            self._write(items.values())

    def _read(self) -> list[CatalogItem]:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise CatalogStoreError(f"Cannot read catalog file {self.path}: {exc}") from exc

        try:
            payload = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise CatalogStoreError(f"Catalog file {self.path} is not valid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise CatalogStoreError(f"Catalog file {self.path} must hold a JSON array of items")

        items: list[CatalogItem] = []
        for position, entry in enumerate(payload):
            try:
                items.append(CatalogItem.model_validate(entry))
            except ValidationError as exc:
                raise CatalogStoreError(f"Invalid catalog item at index {position} in {self.path}: {exc}") from exc

        logger.debug("Read %d catalog items from %s", len(items), self.path)
        return items

    def _write(self, items: Iterable[CatalogItem]) -> None:
        payload = [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]
        data = orjson.dumps(payload, option=orjson.OPT_INDENT_2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise CatalogStoreError(f"Cannot write catalog file {self.path}: {exc}") from exc

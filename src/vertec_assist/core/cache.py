from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from vertec_assist.core.errors import CacheError
from vertec_assist.core.protocols import PersistentStore
from vertec_assist.core.types import Dataset

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A cached data snapshot together with its fetch timestamp."""

    data: Any
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, document: dict[str, Any]) -> "CacheEntry":
        if "data" not in document or "timestamp" not in document:
            raise CacheError("Cache document is missing data or timestamp")
        return cls(data=document["data"], timestamp=float(document["timestamp"]))


class JsonFileStore:
    """Persists one JSON document per cache key inside a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory).expanduser()

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> dict[str, Any] | None:
        path = self._path_for(key)
        if not path.exists():
            return None

        try:
            with path.open(encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CacheError(f"Failed to read cache file {path}", cause=e) from e

        if not isinstance(document, dict):
            raise CacheError(f"Cache file {path} does not contain an object")
        return document

    def save(self, key: str, document: dict[str, Any]) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as e:
            raise CacheError(f"Failed to write cache file {path}", cause=e) from e

    def delete(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise CacheError(f"Failed to delete cache file for {key}", cause=e) from e


class ModelCache:
    """Two-layer (memory + persistent store) cache for one dataset.

    Entries older than the configured lifetime are treated as absent and
    purged from both layers on access.
    """

    def __init__(
        self,
        key: str,
        lifetime_days: int = 30,
        store: PersistentStore | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.key = key
        self.lifetime_days = lifetime_days
        self.store = store
        self.clock = clock
        self._entry: CacheEntry | None = None

    @property
    def lifetime_seconds(self) -> float:
        return self.lifetime_days * SECONDS_PER_DAY

    def is_expired(self, entry: CacheEntry) -> bool:
        return entry.age(self.clock()) > self.lifetime_seconds

    def load(self) -> None:
        """Load the persisted entry into memory, purging it when expired or corrupt."""
        if self.store is None:
            return

        try:
            document = self.store.load(self.key)
            if document is None:
                return
            entry = CacheEntry.from_dict(document)
        except CacheError as e:
            logger.warning(f"Discarding unreadable cache entry {self.key}: {e}")
            self._purge_store()
            return

        if self.is_expired(entry):
            logger.info(f"Cached data for {self.key} expired, clearing data")
            self._purge_store()
            return

        self._entry = entry
        logger.info(f"Data for {self.key} loaded from cache")

    def get(self) -> Any | None:
        entry = self._entry
        if entry is None:
            return None

        if self.is_expired(entry):
            logger.info(f"Cached data for {self.key} expired")
            self.clear()
            return None

        return entry.data

    @property
    def timestamp(self) -> float | None:
        return self._entry.timestamp if self._entry else None

    def set(self, data: Any) -> None:
        entry = CacheEntry(data=data, timestamp=self.clock())
        self._entry = entry

        if self.store is None:
            return

        try:
            self.store.save(self.key, entry.to_dict())
            logger.info(f"Data for {self.key} saved to cache")
        except CacheError as e:
            logger.warning(f"Could not persist cache entry {self.key}: {e}")

    def clear(self) -> None:
        self._entry = None
        self._purge_store()

    def _purge_store(self) -> None:
        if self.store is None:
            return
        try:
            self.store.delete(self.key)
        except CacheError as e:
            logger.warning(f"Could not purge cache entry {self.key}: {e}")


class CacheContext:
    """Process-wide owner of the per-dataset caches.

    Caches work in memory only until ``initialize`` binds a persistent store.
    """

    def __init__(
        self,
        lifetime_days: int = 30,
        clock: Callable[[], float] = time.time,
    ):
        self.lifetime_days = lifetime_days
        self.clock = clock
        self.store: PersistentStore | None = None
        self._caches: dict[Dataset, ModelCache] = {}

    @property
    def is_initialized(self) -> bool:
        return self.store is not None

    def initialize(self, store: PersistentStore) -> None:
        self.store = store
        for dataset in Dataset:
            cache = self.cache(dataset)
            cache.store = store
            cache.load()

    def cache(self, dataset: Dataset) -> ModelCache:
        if dataset not in self._caches:
            self._caches[dataset] = ModelCache(
                key=dataset.cache_key,
                lifetime_days=self.lifetime_days,
                store=self.store,
                clock=self.clock,
            )
        return self._caches[dataset]

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()

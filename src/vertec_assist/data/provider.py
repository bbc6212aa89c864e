from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from vertec_assist.config import Settings, get_settings
from vertec_assist.core.cache import ModelCache
from vertec_assist.core.errors import ConfigurationError, FetchError, SchemaError
from vertec_assist.core.protocols import PageFetcher
from vertec_assist.schema.merge import merge_language_variants
from vertec_assist.schema.models import ClassSet

logger = logging.getLogger(__name__)


class SchemaProvider:
    """Owns the current schema snapshot.

    The snapshot is an immutable ``ClassSet``; a refresh builds a new one
    and swaps the reference, so synchronous readers never see a half-updated
    schema.
    """

    def __init__(
        self,
        cache: ModelCache,
        fetcher_factory: Callable[[], PageFetcher] | None = None,
        settings: Settings | None = None,
    ):
        self.cache = cache
        self.settings = settings or get_settings()
        self._fetcher_factory = fetcher_factory or self._default_fetcher
        self._snapshot: ClassSet | None = None
        self._snapshot_timestamp: float | None = None

    def _default_fetcher(self) -> PageFetcher:
        from vertec_assist.data.client import ModelApiClient

        return ModelApiClient(
            timeout=self.settings.request_timeout,
            page_limit=self.settings.api.vertec_page_limit,
        )

    def current(self) -> ClassSet | None:
        """Return the loaded snapshot without touching the network."""
        records = self.cache.get()
        if records is None:
            self._snapshot = None
            self._snapshot_timestamp = None
            return None

        if self._snapshot is not None and self._snapshot_timestamp == self.cache.timestamp:
            return self._snapshot

        try:
            snapshot = ClassSet.from_records(records)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Cached model data is unreadable, purging: {e}")
            self.cache.clear()
            self._snapshot = None
            return None

        self._swap(snapshot)
        return snapshot

    async def fetch_schema(self, force_refresh: bool = False) -> ClassSet:
        """Return the schema, from cache unless ``force_refresh`` is set.

        Raises:
            ConfigurationError: No model URL is configured.
            FetchError: The API could not be read.
            SchemaError: The API returned records that are not classes.
        """
        if not force_refresh:
            snapshot = self.current()
            if snapshot is not None:
                logger.debug("Model data loaded from cache")
                return snapshot

        primary, alternate = await self._fetch_variants()

        try:
            records = merge_language_variants(primary, alternate)
            snapshot = ClassSet.from_records(records)
        except (TypeError, ValueError, AttributeError) as e:
            raise SchemaError("Model API returned malformed class records", cause=e) from e

        self.cache.set(records)
        self._swap(snapshot)
        logger.info(f"Loaded {len(snapshot)} classes")
        return snapshot

    async def reload(self) -> ClassSet:
        self.clear()
        return await self.fetch_schema(force_refresh=True)

    def clear(self) -> None:
        self.cache.clear()
        self._snapshot = None
        self._snapshot_timestamp = None

    def _swap(self, snapshot: ClassSet) -> None:
        self._snapshot = snapshot
        self._snapshot_timestamp = self.cache.timestamp

    async def _fetch_variants(
        self,
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]] | None]:
        url = self.settings.model_url
        if not url:
            raise ConfigurationError("No model URL configured (VERTEC_MODEL_URL)")

        fetcher = self._fetcher_factory()
        try:
            primary = await fetcher.fetch_all(url)
            alternate = None
            if self.settings.model_url_alt:
                alternate = await fetcher.fetch_all(self.settings.model_url_alt)
        except FetchError:
            logger.error(f"Failed to load model data from {url}", exc_info=True)
            raise
        finally:
            close = getattr(fetcher, "close", None)
            if close is not None:
                await close()

        return primary, alternate

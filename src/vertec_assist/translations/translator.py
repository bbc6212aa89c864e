from __future__ import annotations

import logging
from typing import Any

from vertec_assist.config import Settings, get_settings
from vertec_assist.core.cache import ModelCache
from vertec_assist.core.errors import ConfigurationError
from vertec_assist.core.types import Language, TranslationKind
from vertec_assist.translations.loader import (
    class_entries,
    load_rows,
    member_entries,
    text_entries,
)
from vertec_assist.translations.models import TranslationEntry

logger = logging.getLogger(__name__)

Tables = dict[TranslationKind, list[TranslationEntry]]


class Translator:
    """Bilingual lookup over the configured translation files."""

    def __init__(self, cache: ModelCache | None = None, settings: Settings | None = None):
        self.cache = cache
        self.settings = settings or get_settings()
        self._tables: Tables | None = None
        self._tables_timestamp: float | None = None

    def load(self, force_refresh: bool = False) -> Tables:
        """Return all loaded tables, reading the files when nothing is cached.

        Raises:
            ConfigurationError: Neither translation file is configured.
            TranslationError: A configured file cannot be read.
        """
        if not force_refresh:
            tables = self._cached_tables()
            if tables is not None:
                return tables

        tables = self._read_files()
        if self.cache is not None:
            self.cache.set(
                {kind.value: [e.to_dict() for e in entries] for kind, entries in tables.items()}
            )
        self._tables = tables
        self._tables_timestamp = self.cache.timestamp if self.cache else None
        return tables

    def reload(self) -> Tables:
        self.clear()
        return self.load(force_refresh=True)

    def clear(self) -> None:
        if self.cache is not None:
            self.cache.clear()
        self._tables = None
        self._tables_timestamp = None

    def entries(self, kind: TranslationKind) -> list[TranslationEntry]:
        tables = self.load()
        if kind not in tables:
            raise ConfigurationError(f"No {kind.value} translation file configured")
        return tables[kind]

    def search(self, kind: TranslationKind, query: str) -> list[TranslationEntry]:
        """Entries whose German or English label contains ``query``."""
        return [entry for entry in self.entries(kind) if entry.contains(query)]

    def translate(
        self, kind: TranslationKind, term: str, target: Language
    ) -> str | None:
        for entry in self.entries(kind):
            if entry.matches(term):
                return entry.label(target) or None
        logger.debug(f"No {kind.value} translation for {term!r}")
        return None

    def translate_class(self, term: str, target: Language) -> str | None:
        return self.translate(TranslationKind.CLASS, term, target)

    def translate_member(self, term: str, target: Language) -> str | None:
        return self.translate(TranslationKind.MEMBER, term, target)

    def translate_text(self, term: str, target: Language) -> str | None:
        return self.translate(TranslationKind.TEXT, term, target)

    def _cached_tables(self) -> Tables | None:
        if self.cache is None:
            return self._tables

        data = self.cache.get()
        if data is None:
            self._tables = None
            return None

        if self._tables is not None and self._tables_timestamp == self.cache.timestamp:
            return self._tables

        try:
            tables = _tables_from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Cached translations are unreadable, purging: {e}")
            self.cache.clear()
            return None

        self._tables = tables
        self._tables_timestamp = self.cache.timestamp
        return tables

    def _read_files(self) -> Tables:
        tables: Tables = {}

        classes_members_path = self.settings.classes_members_path
        if classes_members_path:
            rows = load_rows(classes_members_path)
            tables[TranslationKind.CLASS] = class_entries(rows)
            tables[TranslationKind.MEMBER] = member_entries(rows)
        else:
            logger.warning("No class/member translation file configured")

        translations_path = self.settings.translations_path
        if translations_path:
            tables[TranslationKind.TEXT] = text_entries(load_rows(translations_path))
        else:
            logger.warning("No text translation file configured")

        if not tables:
            raise ConfigurationError(
                "No translation files configured "
                "(VERTEC_CLASSES_MEMBERS_PATH, VERTEC_TRANSLATIONS_PATH)"
            )

        logger.info(
            "Loaded translations: "
            + ", ".join(f"{len(v)} {k.value}" for k, v in tables.items())
        )
        return tables


def _tables_from_dict(data: dict[str, Any]) -> Tables:
    return {
        TranslationKind(kind): [TranslationEntry.from_dict(e) for e in entries]
        for kind, entries in data.items()
    }

"""Readers for the Vertec translation export files.

Two files are supported:

- the class/member table, a JSON list of ``{ClassDE, ClassEN, MemberDE, MemberEN}``
- the text table, a JSON list of rows whose German and English text sit in
  one of several columns (``NVD``, ``DD0``, ``DE0``, ``DD1``, ``DE1`` and
  ``NVE``, ``EN0``, ``EN1``)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from vertec_assist.core.errors import TranslationError
from vertec_assist.translations.models import TranslationEntry

logger = logging.getLogger(__name__)

GERMAN_TEXT_COLUMNS = ("NVD", "DD0", "DE0", "DD1", "DE1")
ENGLISH_TEXT_COLUMNS = ("NVE", "EN0", "EN1")


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Read a translation file and return its object rows.

    Raises:
        TranslationError: The file is missing, unreadable or not a JSON list.
    """
    path = Path(path).expanduser()
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise TranslationError(
            f"Could not load JSON file from path: {path}", path=str(path), cause=e
        ) from e

    if not isinstance(data, list):
        raise TranslationError(f"Expected a JSON list in {path}", path=str(path))

    rows = [row for row in data if isinstance(row, dict)]
    if len(rows) != len(data):
        logger.debug(f"Skipped {len(data) - len(rows)} non-object rows in {path}")
    return rows


def _first_text(row: dict[str, Any], columns: tuple[str, ...]) -> str:
    for column in columns:
        value = row.get(column)
        if value:
            return str(value)
    return ""


def class_entries(rows: list[dict[str, Any]]) -> list[TranslationEntry]:
    """One entry per German class name, first occurrence wins."""
    entries: dict[str, TranslationEntry] = {}
    for row in rows:
        german = str(row.get("ClassDE") or "")
        if not german or german in entries:
            continue
        entries[german] = TranslationEntry(german=german, english=str(row.get("ClassEN") or ""))
    return list(entries.values())


def member_entries(rows: list[dict[str, Any]]) -> list[TranslationEntry]:
    """One entry per German member name with its owning classes as detail."""
    owners: dict[str, list[str]] = {}
    english: dict[str, str] = {}
    for row in rows:
        german = str(row.get("MemberDE") or "")
        if not german:
            continue
        english.setdefault(german, str(row.get("MemberEN") or ""))
        owners.setdefault(german, []).append(
            f"{row.get('ClassDE') or ''}, {row.get('ClassEN') or ''}"
        )

    return [
        TranslationEntry(german=german, english=english[german], detail=", ".join(classes))
        for german, classes in owners.items()
    ]


def text_entries(rows: list[dict[str, Any]]) -> list[TranslationEntry]:
    entries = []
    for row in rows:
        german = _first_text(row, GERMAN_TEXT_COLUMNS)
        english = _first_text(row, ENGLISH_TEXT_COLUMNS)
        if german or english:
            entries.append(TranslationEntry(german=german, english=english))
    return entries

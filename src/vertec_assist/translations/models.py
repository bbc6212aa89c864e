from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vertec_assist.core.types import Language


@dataclass(frozen=True)
class TranslationEntry:
    """A German/English label pair.

    ``detail`` carries extra context, for members the classes that own them.
    """

    german: str
    english: str = ""
    detail: str = ""

    def label(self, language: Language) -> str:
        value = self.german if language == Language.GERMAN else self.english
        return value.strip()

    def matches(self, term: str) -> bool:
        term = term.strip().lower()
        return bool(term) and term in (self.german.strip().lower(), self.english.strip().lower())

    def contains(self, query: str) -> bool:
        query = query.strip().lower()
        return query in self.german.lower() or query in self.english.lower()

    def to_dict(self) -> dict[str, str]:
        return {"german": self.german, "english": self.english, "detail": self.detail}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranslationEntry:
        return cls(
            german=str(data.get("german") or ""),
            english=str(data.get("english") or ""),
            detail=str(data.get("detail") or ""),
        )

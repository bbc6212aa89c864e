from enum import Enum


class Language(str, Enum):
    GERMAN = "de"
    ENGLISH = "en"

    @classmethod
    def from_label(cls, label: str) -> "Language | None":
        mapping = {
            "de": cls.GERMAN,
            "deutsch": cls.GERMAN,
            "german": cls.GERMAN,
            "en": cls.ENGLISH,
            "englisch": cls.ENGLISH,
            "english": cls.ENGLISH,
        }
        return mapping.get(label.strip().lower())


class Dataset(str, Enum):
    MODEL = "model"
    TRANSLATIONS = "translations"

    @property
    def cache_key(self) -> str:
        return f"vertec.cache.{self.value}data"


class CompletionKind(str, Enum):
    MEMBER = "member"
    ASSOCIATION = "association"


class TranslationKind(str, Enum):
    CLASS = "class"
    MEMBER = "member"
    TEXT = "text"

"""Bilingual (German/English) lookup of Vertec class, member and text labels."""

from vertec_assist.translations.loader import (
    class_entries,
    load_rows,
    member_entries,
    text_entries,
)
from vertec_assist.translations.models import TranslationEntry
from vertec_assist.translations.translator import Translator

__all__ = [
    "class_entries",
    "load_rows",
    "member_entries",
    "text_entries",
    "TranslationEntry",
    "Translator",
]

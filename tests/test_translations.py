"""Tests for translation file loading and bilingual lookup."""

import json

import pytest

from vertec_assist.config import Settings, TranslationSettings
from vertec_assist.core import (
    ConfigurationError,
    Dataset,
    JsonFileStore,
    Language,
    ModelCache,
    TranslationError,
    TranslationKind,
)
from vertec_assist.translations import (
    TranslationEntry,
    Translator,
    class_entries,
    load_rows,
    member_entries,
    text_entries,
)

CLASS_MEMBER_ROWS = [
    {"ClassDE": "Projekt", "ClassEN": "Project", "MemberDE": "code", "MemberEN": "code"},
    {"ClassDE": "Projekt", "ClassEN": "Project", "MemberDE": "beschrieb", "MemberEN": "description"},
    {"ClassDE": "Projektphase", "ClassEN": "ProjectPhase", "MemberDE": "code", "MemberEN": "code"},
    {"ClassDE": "Projektphase", "ClassEN": "ProjectPhase", "MemberDE": "aktiv", "MemberEN": "active"},
]

TEXT_ROWS = [
    {"NVD": "Rechnung", "NVE": "Invoice"},
    {"NVD": "", "DD0": "Leistung", "EN0": "Service"},
    {"DE1": "Spesen", "EN1": "Expenses"},
    {"NVD": None, "DE0": "Offen", "NVE": None, "EN0": "", "EN1": "Open"},
    {"unrelated": "row"},
]


@pytest.fixture
def translation_files(tmp_path):
    classes_members = tmp_path / "classes_members.json"
    classes_members.write_text(json.dumps(CLASS_MEMBER_ROWS), encoding="utf-8")
    texts = tmp_path / "translations.json"
    texts.write_text(json.dumps(TEXT_ROWS), encoding="utf-8")
    return classes_members, texts


@pytest.fixture
def settings(clean_settings, translation_files):
    classes_members, texts = translation_files
    return Settings(
        translations=TranslationSettings(
            vertec_classes_members_path=classes_members,
            vertec_translations_path=texts,
        )
    )


@pytest.fixture
def translator(settings):
    return Translator(settings=settings)


class TestLoader:
    """Tests for reading the export files."""

    def test_load_rows(self, translation_files):
        rows = load_rows(translation_files[0])
        assert len(rows) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(TranslationError) as exc_info:
            load_rows(tmp_path / "missing.json")
        assert exc_info.value.path.endswith("missing.json")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "object.json"
        path.write_text('{"ClassDE": "Projekt"}', encoding="utf-8")

        with pytest.raises(TranslationError):
            load_rows(path)

    def test_class_entries_deduplicated(self):
        entries = class_entries(CLASS_MEMBER_ROWS)
        assert entries == [
            TranslationEntry("Projekt", "Project"),
            TranslationEntry("Projektphase", "ProjectPhase"),
        ]

    def test_member_entries_list_owning_classes(self):
        entries = {e.german: e for e in member_entries(CLASS_MEMBER_ROWS)}

        assert list(entries) == ["code", "beschrieb", "aktiv"]
        assert entries["code"].detail == "Projekt, Project, Projektphase, ProjectPhase"
        assert entries["aktiv"].english == "active"

    def test_text_columns_in_priority_order(self):
        entries = text_entries(TEXT_ROWS)
        assert [(e.german, e.english) for e in entries] == [
            ("Rechnung", "Invoice"),
            ("Leistung", "Service"),
            ("Spesen", "Expenses"),
            ("Offen", "Open"),
        ]


class TestTranslator:
    """Tests for bilingual lookup."""

    def test_translate_class_to_english(self, translator):
        assert translator.translate_class("Projekt", Language.ENGLISH) == "Project"

    def test_translate_class_to_german(self, translator):
        assert translator.translate_class("projectphase", Language.GERMAN) == "Projektphase"

    def test_translate_member(self, translator):
        assert translator.translate_member("AKTIV", Language.ENGLISH) == "active"
        assert translator.translate_member("description", Language.GERMAN) == "beschrieb"

    def test_translate_text(self, translator):
        assert translator.translate_text("spesen", Language.ENGLISH) == "Expenses"
        assert translator.translate_text("Invoice", Language.GERMAN) == "Rechnung"

    def test_unknown_term(self, translator):
        assert translator.translate_class("Gibtsnicht", Language.ENGLISH) is None

    def test_search(self, translator):
        found = translator.search(TranslationKind.CLASS, "phase")
        assert [e.german for e in found] == ["Projektphase"]

    def test_missing_file_configuration(self, clean_settings, translation_files):
        settings = Settings(
            translations=TranslationSettings(vertec_classes_members_path=translation_files[0])
        )
        translator = Translator(settings=settings)

        assert translator.translate_class("Projekt", Language.ENGLISH) == "Project"
        with pytest.raises(ConfigurationError):
            translator.translate_text("Rechnung", Language.ENGLISH)

    def test_nothing_configured(self, clean_settings):
        with pytest.raises(ConfigurationError):
            Translator(settings=Settings()).load()

    def test_unreadable_file(self, clean_settings, tmp_path):
        settings = Settings(
            translations=TranslationSettings(vertec_translations_path=tmp_path / "missing.json")
        )
        with pytest.raises(TranslationError):
            Translator(settings=settings).load()


class TestTranslationCache:
    """Tests for caching loaded translations."""

    def test_cached_tables_survive_file_removal(self, settings, translation_files, tmp_path):
        store = JsonFileStore(tmp_path / "cache")
        cache = ModelCache(Dataset.TRANSLATIONS.cache_key, store=store)
        Translator(cache=cache, settings=settings).load()

        for path in translation_files:
            path.unlink()

        restored = ModelCache(Dataset.TRANSLATIONS.cache_key, store=store)
        restored.load()
        translator = Translator(cache=restored, settings=settings)

        assert translator.translate_member("code", Language.ENGLISH) == "code"
        assert translator.translate_text("Offen", Language.ENGLISH) == "Open"

    def test_reload_reads_files_again(self, settings, translation_files):
        cache = ModelCache(Dataset.TRANSLATIONS.cache_key)
        translator = Translator(cache=cache, settings=settings)
        translator.load()

        rows = CLASS_MEMBER_ROWS + [
            {"ClassDE": "Rechnung", "ClassEN": "Invoice", "MemberDE": "", "MemberEN": ""}
        ]
        translation_files[0].write_text(json.dumps(rows), encoding="utf-8")

        assert translator.translate_class("Rechnung", Language.ENGLISH) is None
        translator.reload()
        assert translator.translate_class("Rechnung", Language.ENGLISH) == "Invoice"

    def test_corrupt_cache_is_reloaded(self, settings):
        cache = ModelCache(Dataset.TRANSLATIONS.cache_key)
        cache.set({"nonsense": []})

        translator = Translator(cache=cache, settings=settings)
        assert translator.translate_class("Projekt", Language.ENGLISH) == "Project"

"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
from dotenv import load_dotenv

from vertec_assist.config import get_settings
from vertec_assist.resolution import ChainResolver
from vertec_assist.schema import ClassSet

# Load .env file at test collection time
load_dotenv(Path(__file__).parent.parent / ".env")


def _ref(class_id: int, name: str) -> dict:
    return {"class_id": class_id, "name": name}


def _member(name: str, name_alt: str, member_type: str, **extra) -> dict:
    return {"name": name, "name_alt": name_alt, "member_type": member_type, **extra}


PROJEKT_PHASEN = {
    "name": "ProjektPhasen",
    "perceived_name": "phasen",
    "perceived_name_alt": "phases",
    "association_class": None,
    "is_derived": False,
    "role1_class": _ref(2, "Projekt"),
    "role1_name": "projekt",
    "is_role1_navigable": True,
    "is_role1_multi": False,
    "role1_description": "Projekt der Phase",
    "role2_class": _ref(3, "Projektphase"),
    "role2_name": "phasen",
    "is_role2_navigable": True,
    "is_role2_multi": True,
    "is_role2_composite": True,
    "role2_description": "Phasen des Projekts",
}

PROJEKT_LEITER = {
    "name": "ProjektLeiter",
    "perceived_name": "projektleiter",
    "perceived_name_alt": "projectmanager",
    "role1_class": _ref(2, "Projekt"),
    "role1_name": "geleiteteProjekte",
    "is_role1_multi": True,
    "role2_class": _ref(4, "Projektbearbeiter"),
    "role2_name": "projektleiter",
    "is_role2_navigable": True,
    "is_role2_multi": False,
    "role2_description": "Verantwortlicher Leiter",
}

BEARBEITER_PROJEKTE = {
    "name": "BearbeiterProjekte",
    "perceived_name": "projekte",
    "perceived_name_alt": "projects",
    "role1_class": _ref(5, "Bearbeiter"),
    "role1_name": "bearbeiter",
    "is_role1_multi": False,
    "role2_class": _ref(2, "Projekt"),
    "role2_name": "projekte",
    "is_role2_navigable": True,
    "is_role2_multi": True,
}

PHASE_UNTERPHASEN = {
    "name": "PhaseUnterphasen",
    "perceived_name": "unterphasen",
    "perceived_name_alt": "subphases",
    "role1_class": _ref(3, "Projektphase"),
    "role1_name": "oberphase",
    "is_role1_multi": False,
    "role2_class": _ref(3, "Projektphase"),
    "role2_name": "unterphasen",
    "is_role2_navigable": True,
    "is_role2_multi": True,
}


def build_schema_records() -> list[dict]:
    """Raw API records for a small Vertec model.

    Hierarchy::

        Eintrag
        ├── Projekt
        ├── Projektphase
        └── Bearbeiter
            └── Projektbearbeiter
    """
    return [
        {
            "class_id": 1,
            "name": "Eintrag",
            "name_alt": "Entry",
            "superclass": None,
            "is_abstract": True,
            "is_persistent": True,
            "description": "Basisklasse",
            "members": [_member("bemerkung", "remark", "String", length=255)],
            "associations": [],
        },
        {
            "class_id": 2,
            "name": "Projekt",
            "name_alt": "Project",
            "superclass": _ref(1, "Eintrag"),
            "table_mapping": "Projekt",
            "is_persistent": True,
            "description": "Ein Projekt",
            "members": [
                _member("code", "code", "String", length=30, is_indexed=True),
                _member("beschrieb", "description", "String", is_nullable=True),
            ],
            "associations": [PROJEKT_PHASEN, PROJEKT_LEITER],
        },
        {
            "class_id": 3,
            "name": "Projektphase",
            "name_alt": "ProjectPhase",
            "superclass": _ref(1, "Eintrag"),
            "is_persistent": True,
            "description": "Phase eines Projekts",
            "members": [
                _member("aktiv", "active", "Boolean", description="Phase ist aktiv"),
                _member("code", "code", "String"),
                _member("vorlage", "template", "Projektphase", is_derived=True),
            ],
            "associations": [
                {**PROJEKT_PHASEN, "perceived_name": "projekt", "perceived_name_alt": "project"},
                PHASE_UNTERPHASEN,
            ],
        },
        {
            "class_id": 4,
            "name": "Projektbearbeiter",
            "name_alt": "ProjectUser",
            "superclass": _ref(5, "Bearbeiter"),
            "is_persistent": True,
            "members": [_member("aktiv", "active", "Boolean")],
            "associations": [],
        },
        {
            "class_id": 5,
            "name": "Bearbeiter",
            "name_alt": "Worker",
            "superclass": _ref(1, "Eintrag"),
            "is_abstract": True,
            "members": [_member("kuerzel", "abbreviation", "String", length=10)],
            "associations": [BEARBEITER_PROJEKTE],
        },
    ]


@pytest.fixture
def schema_records() -> list[dict]:
    """Raw class records as the model API delivers them."""
    return build_schema_records()


@pytest.fixture
def classes(schema_records) -> ClassSet:
    """The sample model as an immutable class set."""
    return ClassSet.from_records(schema_records)


@pytest.fixture
def resolver(classes) -> ChainResolver:
    """Chain resolver over the sample model."""
    return ChainResolver(classes)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """Settings isolated from the developer's environment and .env file."""
    for name in (
        "VERTEC_MODEL_URL",
        "VERTEC_MODEL_URL_ALT",
        "VERTEC_REQUEST_TIMEOUT",
        "VERTEC_PAGE_LIMIT",
        "VERTEC_CACHE_LIFETIME_DAYS",
        "VERTEC_CACHE_DIR",
        "VERTEC_CLASSES_MEMBERS_PATH",
        "VERTEC_TRANSLATIONS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

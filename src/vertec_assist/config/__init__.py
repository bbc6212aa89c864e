"""Configuration module for vertec-assist."""

from vertec_assist.config.settings import (
    CacheSettings,
    ModelApiSettings,
    Settings,
    TranslationSettings,
    get_settings,
)

__all__ = [
    "CacheSettings",
    "ModelApiSettings",
    "Settings",
    "TranslationSettings",
    "get_settings",
]

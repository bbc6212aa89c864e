"""Vertec Assist - type inference, completion and model tools for Vertec scripts."""

__version__ = "0.1.0"

from vertec_assist.config import Settings, get_settings
from vertec_assist.data import SchemaProvider
from vertec_assist.providers import CompletionProvider, HoverProvider
from vertec_assist.resolution import ChainResolver, Position
from vertec_assist.schema import ClassSet, resolve_inheritance

__all__ = [
    "get_settings",
    "ChainResolver",
    "ClassSet",
    "CompletionProvider",
    "HoverProvider",
    "Position",
    "resolve_inheritance",
    "SchemaProvider",
    "Settings",
]

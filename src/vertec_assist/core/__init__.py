"""Core abstractions and shared utilities for vertec-assist."""

from vertec_assist.core.cache import (
    CacheContext,
    CacheEntry,
    JsonFileStore,
    ModelCache,
)
from vertec_assist.core.protocols import (
    PageFetcher,
    PersistentStore,
    SnapshotCache,
)
from vertec_assist.core.types import (
    CompletionKind,
    Dataset,
    Language,
    TranslationKind,
)
from vertec_assist.core.errors import (
    CacheError,
    ConfigurationError,
    FetchError,
    SchemaError,
    TranslationError,
    VertecAssistError,
)

__all__ = [
    "CacheContext",
    "CacheEntry",
    "JsonFileStore",
    "ModelCache",
    "PageFetcher",
    "PersistentStore",
    "SnapshotCache",
    "CompletionKind",
    "Dataset",
    "Language",
    "TranslationKind",
    "CacheError",
    "ConfigurationError",
    "FetchError",
    "SchemaError",
    "TranslationError",
    "VertecAssistError",
]

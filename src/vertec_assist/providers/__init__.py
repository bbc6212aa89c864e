"""Completion and hover surfaces over chain resolution results."""

from vertec_assist.providers.completion import (
    CompletionItem,
    CompletionProvider,
    items_for_class,
)
from vertec_assist.providers.documentation import (
    build_association_documentation,
    build_class_documentation,
    build_member_documentation,
)
from vertec_assist.providers.hover import Hover, HoverProvider

__all__ = [
    "CompletionItem",
    "CompletionProvider",
    "items_for_class",
    "build_association_documentation",
    "build_class_documentation",
    "build_member_documentation",
    "Hover",
    "HoverProvider",
]

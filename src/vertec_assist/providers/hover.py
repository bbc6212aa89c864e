from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from vertec_assist.providers.documentation import (
    build_association_documentation,
    build_class_documentation,
    build_member_documentation,
)
from vertec_assist.resolution.chain_parser import chain_before_dot
from vertec_assist.resolution.chain_resolver import ChainResolver
from vertec_assist.resolution.models import Position, SourceDocument
from vertec_assist.schema.inheritance import InheritanceResolver

logger = logging.getLogger(__name__)

_RE_TYPE_COMMENT = re.compile(r"#\s*type:")


@dataclass(frozen=True)
class Hover:
    contents: str
    start: int
    end: int


class HoverProvider:
    """Documentation for the word under the cursor."""

    def __init__(self, resolver: ChainResolver):
        self.resolver = resolver

    def provide_hover(
        self,
        source: SourceDocument | str,
        position: Position,
    ) -> Hover | None:
        document = (
            source if isinstance(source, SourceDocument) else SourceDocument.from_text(source)
        )
        word_range = document.word_range_at(position)
        if word_range is None:
            return None

        start, end = word_range
        line = document.line_at(position.line)
        word = line[start:end]
        before = line[:start]

        type_comment = _RE_TYPE_COMMENT.search(line)
        base = chain_before_dot(before)
        if type_comment and start >= type_comment.end():
            contents = self.class_hover(word)
        elif base is not None:
            contents = self.property_hover(document, position, base, word)
        else:
            contents = self.variable_hover(document, position, word)

        if contents is None:
            return None
        return Hover(contents=contents, start=start, end=end)

    def class_hover(self, class_name: str) -> str | None:
        classes = self.resolver.classes
        if not classes:
            return None
        cls = classes.find(class_name)
        return build_class_documentation(cls) if cls else None

    def variable_hover(
        self,
        document: SourceDocument,
        position: Position,
        name: str,
    ) -> str | None:
        binding = self.resolver.find_binding(document, position, name)
        if not binding.is_resolved or binding.is_collection:
            return None
        return self.class_hover(binding.type_name)

    def property_hover(
        self,
        document: SourceDocument,
        position: Position,
        base: str,
        name: str,
    ) -> str | None:
        classes = self.resolver.classes
        if not classes:
            return None

        result = self.resolver.resolve_chain(document, position, base)
        if not result.is_single:
            return None

        owner = classes.find(result.type_name)
        if owner is None:
            return None

        resolved = InheritanceResolver(classes).resolve(owner)
        member = resolved.find_member(name)
        if member is not None:
            return build_member_documentation(member, owner)

        association = resolved.find_association(name)
        if association is not None:
            return build_association_documentation(association, owner, classes)

        logger.debug(f"{name} is neither member nor association of {owner.name}")
        return None

from __future__ import annotations

import logging
from dataclasses import dataclass

from vertec_assist.core.types import CompletionKind
from vertec_assist.providers.documentation import (
    build_association_documentation,
    build_member_documentation,
)
from vertec_assist.resolution.chain_parser import completion_context
from vertec_assist.resolution.chain_resolver import ChainResolver
from vertec_assist.resolution.models import ChainResult, Position, SourceDocument
from vertec_assist.schema.inheritance import InheritanceResolver
from vertec_assist.schema.models import (
    ClassSet,
    EnrichedAssociation,
    EnrichedMember,
    VertecClass,
)
from vertec_assist.schema.roles import get_role_info

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionItem:
    label: str
    label_alt: str | None
    kind: CompletionKind
    detail: str
    documentation: str
    source_class: str
    is_inherited: bool

    @property
    def filter_text(self) -> str:
        return f"{self.label} | {self.label_alt or ''}"

    @property
    def sort_text(self) -> str:
        return self.filter_text

    def matches_prefix(self, prefix: str) -> bool:
        prefix = prefix.lower()
        return self.label.lower().startswith(prefix) or bool(
            self.label_alt and self.label_alt.lower().startswith(prefix)
        )


def member_item(member: EnrichedMember, owner: VertecClass) -> CompletionItem:
    return CompletionItem(
        label=member.name,
        label_alt=member.name_alt,
        kind=CompletionKind.MEMBER,
        detail=member.member_type or "Member",
        documentation=build_member_documentation(member, owner),
        source_class=member.source_class,
        is_inherited=member.is_inherited_by(owner),
    )


def association_item(
    association: EnrichedAssociation,
    owner: VertecClass,
    classes: ClassSet,
) -> CompletionItem:
    role = get_role_info(association, owner, classes)
    target = role.role_class_name if role else None
    target_alt = role.role_class_alt if role else None
    return CompletionItem(
        label=association.perceived_name,
        label_alt=association.perceived_name_alt,
        kind=CompletionKind.ASSOCIATION,
        detail=f"→ {target} | {target_alt}",
        documentation=build_association_documentation(association, owner, classes),
        source_class=association.source_class,
        is_inherited=association.is_inherited_by(owner),
    )


def items_for_class(cls: VertecClass, classes: ClassSet) -> list[CompletionItem]:
    """Members first, then associations, each in inheritance order."""
    members, associations = InheritanceResolver(classes).resolve(cls)
    items = [member_item(m, cls) for m in members]
    items.extend(association_item(a, cls, classes) for a in associations)
    return items


class CompletionProvider:
    """Offers next-step names after ``chain.`` in a script."""

    def __init__(self, resolver: ChainResolver):
        self.resolver = resolver

    def items_for_result(self, result: ChainResult) -> list[CompletionItem] | None:
        # A collection offers nothing until it is indexed.
        if not result.is_single:
            return None

        classes = self.resolver.classes
        if not classes:
            return None

        cls = classes.find(result.type_name)
        if cls is None:
            return None
        return items_for_class(cls, classes)

    def provide_completions(
        self,
        source: SourceDocument | str,
        position: Position,
        filter_prefix: bool = False,
    ) -> list[CompletionItem] | None:
        document = (
            source if isinstance(source, SourceDocument) else SourceDocument.from_text(source)
        )
        context = completion_context(document.text_before(position))
        if context is None:
            return None

        chain, partial = context
        result = self.resolver.resolve_chain(document, position, chain)
        items = self.items_for_result(result)
        if items is None:
            logger.debug(f"No completions for {chain}: {result}")
            return None

        if filter_prefix and partial:
            items = [item for item in items if item.matches_prefix(partial)]
        return items

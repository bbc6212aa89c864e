from __future__ import annotations

import logging
from collections.abc import Callable

from vertec_assist.resolution.chain_parser import parse_chain
from vertec_assist.resolution.models import (
    ChainResult,
    ChainStep,
    Position,
    ResolutionContext,
    SourceDocument,
    VariableBinding,
)
from vertec_assist.resolution.variable_tracker import VariableTypeTracker
from vertec_assist.schema.inheritance import InheritanceResolver
from vertec_assist.schema.models import ClassSet, VertecClass
from vertec_assist.schema.roles import get_role_info

logger = logging.getLogger(__name__)

SchemaSource = Callable[[], "ClassSet | None"]


def map_member_type(member_type: str, classes: ClassSet) -> VertecClass | None:
    """Map a member's declared type name to a class, by either name."""
    if not member_type:
        return None
    return classes.find(member_type.strip())


class ChainResolver:
    """Infers the entity type an access chain like ``projekt.phasen[0]`` denotes.

    Any failing step makes the whole chain unresolved; partial results are
    never returned.
    """

    def __init__(self, schema: ClassSet | SchemaSource | None):
        if isinstance(schema, ClassSet) or schema is None:
            self._schema_source: SchemaSource = lambda: schema
        else:
            self._schema_source = schema
        self.tracker = VariableTypeTracker(self._resolve_expression)

    @property
    def classes(self) -> ClassSet | None:
        return self._schema_source()

    def resolve_chain(
        self,
        source: SourceDocument | str,
        position: Position,
        chain: str,
    ) -> ChainResult:
        document = (
            source if isinstance(source, SourceDocument) else SourceDocument.from_text(source)
        )
        return self._resolve_expression(document, position, chain, ResolutionContext())

    def find_binding(
        self,
        source: SourceDocument | str,
        position: Position,
        name: str,
    ) -> VariableBinding:
        return self.tracker.find_binding(source, position, name)

    def find_type(self, source: SourceDocument | str, position: Position, name: str) -> str | None:
        return self.tracker.find_type(source, position, name)

    def is_collection(self, source: SourceDocument | str, position: Position, name: str) -> bool:
        return self.tracker.is_collection(source, position, name)

    def resolve_step(self, type_name: str, segment: str) -> ChainResult:
        """Resolve one named segment on a single (non-collection) value."""
        classes = self.classes
        if classes is None:
            return ChainResult.unresolved()
        return self._step(classes, type_name, segment)

    def _resolve_expression(
        self,
        document: SourceDocument,
        position: Position,
        chain: str,
        context: ResolutionContext,
    ) -> ChainResult:
        classes = self.classes
        if classes is None:
            logger.debug("No schema loaded, chain resolution declined")
            return ChainResult.unresolved()

        steps = parse_chain(chain)
        if not steps or steps[0].is_subscript:
            return ChainResult.unresolved()

        base = steps[0].name
        guard_key = (base, position.line)
        if guard_key in context.in_progress or context.depth >= context.max_depth:
            logger.debug(f"Recursion guard: skipping {chain} at line {position.line}")
            return ChainResult.unresolved()

        context.in_progress.add(guard_key)
        context.depth += 1
        try:
            binding = self.tracker.find_binding(document, position, base, context)
        finally:
            context.depth -= 1
            context.in_progress.discard(guard_key)

        if not binding.is_resolved:
            return ChainResult.unresolved()

        base_class = classes.find(binding.type_name)
        type_name = base_class.name if base_class else binding.type_name
        return self._walk(classes, type_name, binding.is_collection, steps[1:], chain)

    def _walk(
        self,
        classes: ClassSet,
        type_name: str,
        is_collection: bool,
        steps: list[ChainStep],
        chain: str,
    ) -> ChainResult:
        for step in steps:
            if step.is_subscript:
                if not is_collection:
                    logger.debug(f"Subscript on single value in {chain}")
                    return ChainResult.unresolved()
                is_collection = False
                continue

            if is_collection:
                logger.debug(f"Member access on collection in {chain}, index first")
                return ChainResult.unresolved()

            result = self._step(classes, type_name, step.name)
            if not result.is_resolved:
                logger.debug(f"Unresolvable step {step.name} on {type_name} in {chain}")
                return ChainResult.unresolved()

            type_name, is_collection = result.type_name, result.is_collection

        return ChainResult(type_name, is_collection)

    def _step(self, classes: ClassSet, type_name: str, segment: str) -> ChainResult:
        current = classes.find(type_name)
        if current is None:
            return ChainResult.unresolved()

        resolved = InheritanceResolver(classes).resolve(current)

        member = resolved.find_member(segment)
        if member is not None:
            target = map_member_type(member.member_type, classes)
            if target is not None:
                # Members are never collection valued.
                return ChainResult(target.name, False)

        association = resolved.find_association(segment)
        if association is not None:
            role = get_role_info(association, current, classes)
            if role is not None and role.role_class_name:
                return ChainResult(role.role_class_name, role.is_multi)

        return ChainResult.unresolved()


def resolve_chain(
    classes: ClassSet | None,
    source: SourceDocument | str,
    position: Position,
    chain: str,
) -> ChainResult:
    return ChainResolver(classes).resolve_chain(source, position, chain)

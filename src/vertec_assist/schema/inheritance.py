from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from vertec_assist.schema.models import (
    ClassSet,
    EnrichedAssociation,
    EnrichedMember,
    VertecClass,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedMembers:
    """Flattened members and associations visible on a class.

    Own items come first, then each ancestor's items, nearest ancestor first.
    """

    members: tuple[EnrichedMember, ...] = ()
    associations: tuple[EnrichedAssociation, ...] = ()

    def __iter__(self):
        # Allows ``members, associations = resolver.resolve(cls)``
        return iter((self.members, self.associations))

    def find_member(self, name: str) -> EnrichedMember | None:
        for member in self.members:
            if member.matches(name):
                return member
        return None

    def find_association(self, name: str) -> EnrichedAssociation | None:
        for association in self.associations:
            if association.matches(name):
                return association
        return None


def as_class_set(classes: ClassSet | Iterable[VertecClass]) -> ClassSet:
    if isinstance(classes, ClassSet):
        return classes
    return ClassSet(classes=tuple(classes))


class InheritanceResolver:
    """Walks superclass chains over a possibly malformed class set."""

    def __init__(self, classes: ClassSet | Iterable[VertecClass]):
        self.classes = as_class_set(classes)

    def get_ancestry(self, cls: VertecClass) -> list[VertecClass]:
        """Return ``cls`` followed by its superclasses, nearest first.

        Stops at a missing or dangling superclass reference and at the first
        class id already visited, so cyclic data terminates.
        """
        chain = [cls]
        visited = {cls.class_id}
        current = cls

        while current.superclass is not None:
            parent_id = current.superclass.class_id
            if parent_id in visited:
                logger.debug(
                    f"Superclass cycle detected at {current.name} -> {current.superclass.name}"
                )
                break

            parent = self.classes.get(parent_id)
            if parent is None:
                logger.debug(
                    f"Dangling superclass {current.superclass.name} ({parent_id}) on {current.name}"
                )
                break

            visited.add(parent_id)
            chain.append(parent)
            current = parent

        return chain

    def resolve(self, cls: VertecClass) -> ResolvedMembers:
        members: list[EnrichedMember] = []
        associations: list[EnrichedAssociation] = []

        for level in self.get_ancestry(cls):
            source = level.display_name
            members.extend(EnrichedMember.from_member(m, source) for m in level.members)
            associations.extend(
                EnrichedAssociation.from_association(a, source) for a in level.associations
            )

        return ResolvedMembers(members=tuple(members), associations=tuple(associations))

    def is_subclass(self, child: VertecClass, parent: VertecClass) -> bool:
        return any(c.class_id == parent.class_id for c in self.get_ancestry(child))

    def get_subclasses(self, cls: VertecClass) -> list[VertecClass]:
        return [
            candidate
            for candidate in self.classes
            if candidate.class_id != cls.class_id and self.is_subclass(candidate, cls)
        ]


def resolve_inheritance(
    cls: VertecClass,
    all_classes: ClassSet | Iterable[VertecClass],
) -> ResolvedMembers:
    return InheritanceResolver(all_classes).resolve(cls)

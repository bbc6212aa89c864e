"""Model browser data: the members and associations of one class, grouped
into those the class declares itself and those it inherits."""

from __future__ import annotations

from dataclasses import dataclass

from vertec_assist.schema.inheritance import InheritanceResolver
from vertec_assist.schema.models import (
    ClassSet,
    EnrichedAssociation,
    EnrichedMember,
    VertecClass,
)
from vertec_assist.schema.roles import RoleInfo, resolve_roles


@dataclass(frozen=True)
class AssociationView:
    """An association together with the end it navigates to."""

    association: EnrichedAssociation
    target: RoleInfo | None

    @property
    def target_name(self) -> str | None:
        return self.target.role_class_name if self.target else None

    @property
    def target_name_alt(self) -> str | None:
        return self.target.role_class_alt if self.target else None

    @property
    def is_multi(self) -> bool:
        return bool(self.target and self.target.is_multi)


@dataclass(frozen=True)
class ClassDescription:
    cls: VertecClass
    own_members: tuple[EnrichedMember, ...] = ()
    inherited_members: tuple[EnrichedMember, ...] = ()
    own_associations: tuple[AssociationView, ...] = ()
    inherited_associations: tuple[AssociationView, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.own_members
            or self.inherited_members
            or self.own_associations
            or self.inherited_associations
        )


def describe_class(cls: VertecClass, classes: ClassSet) -> ClassDescription:
    members, associations = InheritanceResolver(classes).resolve(cls)

    views = []
    for association in associations:
        pair = resolve_roles(association, cls, classes)
        views.append(AssociationView(association, pair.far if pair else None))

    return ClassDescription(
        cls=cls,
        own_members=tuple(m for m in members if not m.is_inherited_by(cls)),
        inherited_members=tuple(m for m in members if m.is_inherited_by(cls)),
        own_associations=tuple(
            v for v in views if not v.association.is_inherited_by(cls)
        ),
        inherited_associations=tuple(
            v for v in views if v.association.is_inherited_by(cls)
        ),
    )

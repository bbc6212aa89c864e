"""Near/far role resolution for two-sided associations.

Every association carries two role descriptors. Which one is the end a
script navigates *to* depends on the class the association is viewed from,
so the decision lives here and nowhere else.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from vertec_assist.schema.inheritance import InheritanceResolver, as_class_set
from vertec_assist.schema.models import (
    Association,
    AssociationRole,
    ClassSet,
    VertecClass,
)

logger = logging.getLogger(__name__)


class RoleMatch(Enum):
    IDENTITY = "identity"
    ANCESTOR = "ancestor"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RoleInfo:
    """Role-specific metadata of one association end."""

    role_index: int
    role_class_id: int | None
    role_class_name: str | None
    role_class_alt: str | None
    role_name: str
    role_name_alt: str | None
    is_navigable: bool
    is_multi: bool
    is_composite: bool
    is_hidden: bool
    description: str

    @classmethod
    def from_role(
        cls, role: AssociationRole, index: int, classes: ClassSet
    ) -> RoleInfo:
        target = classes.resolve_ref(role.role_class)
        if target is not None:
            class_name, class_alt = target.name, target.name_alt
        elif role.role_class is not None:
            class_name = class_alt = role.role_class.name or None
        else:
            class_name = class_alt = None

        return cls(
            role_index=index,
            role_class_id=role.class_id,
            role_class_name=class_name,
            role_class_alt=class_alt,
            role_name=role.name,
            role_name_alt=role.name_alt,
            is_navigable=role.is_navigable,
            is_multi=role.is_multi,
            is_composite=role.is_composite,
            is_hidden=role.is_hidden,
            description=role.description,
        )


@dataclass(frozen=True)
class RolePair:
    """The two ends of an association as seen from one viewing class.

    ``far`` is the end navigated to; ``near`` is the viewing class's own end.
    """

    near: RoleInfo
    far: RoleInfo
    match: RoleMatch

    @property
    def is_fallback(self) -> bool:
        return self.match is RoleMatch.FALLBACK


def _roles_for_class(
    association: Association, class_id: int
) -> tuple[int, int] | None:
    """Return (near_index, far_index) when ``class_id`` sits on a role end."""
    on_role1 = association.role1.class_id == class_id
    on_role2 = association.role2.class_id == class_id

    if on_role1 and on_role2:
        # Self association: the far end is the role named like the association.
        for index, role in ((2, association.role2), (1, association.role1)):
            if association.matches(role.name) or (
                role.name_alt and association.matches(role.name_alt)
            ):
                return (3 - index, index)
        return (1, 2)
    if on_role1:
        return (1, 2)
    if on_role2:
        return (2, 1)
    return None


def resolve_roles(
    association: Association,
    viewing_class: VertecClass,
    all_classes: ClassSet | Iterable[VertecClass],
) -> RolePair | None:
    """Decide which role is near and which is far for ``viewing_class``.

    The viewing class itself is tried first, then its ancestors nearest
    first (associations inherited from a superclass name the superclass on
    their role). Without any match role1 is treated as the far end.
    Returns None only when the association has no role data at all.
    """
    if not association.has_role_data:
        return None

    classes = as_class_set(all_classes)
    ancestry = InheritanceResolver(classes).get_ancestry(viewing_class)

    indices = None
    match = RoleMatch.FALLBACK
    for depth, cls in enumerate(ancestry):
        indices = _roles_for_class(association, cls.class_id)
        if indices is not None:
            match = RoleMatch.IDENTITY if depth == 0 else RoleMatch.ANCESTOR
            break

    if indices is None:
        logger.debug(
            f"No role of association {association.name} matches {viewing_class.name}, "
            f"falling back to role1 as far end"
        )
        indices = (2, 1)

    roles = {1: association.role1, 2: association.role2}
    near_index, far_index = indices
    return RolePair(
        near=RoleInfo.from_role(roles[near_index], near_index, classes),
        far=RoleInfo.from_role(roles[far_index], far_index, classes),
        match=match,
    )


def get_role_info(
    association: Association,
    viewing_class: VertecClass,
    all_classes: ClassSet | Iterable[VertecClass],
    use_far_role: bool = False,
) -> RoleInfo | None:
    """Role metadata of ``association`` seen from ``viewing_class``.

    With ``use_far_role`` False this is the end reached by navigating the
    association (target class, its navigability and multiplicity). With
    ``use_far_role`` True it is the complementary role, the viewing end.
    """
    pair = resolve_roles(association, viewing_class, all_classes)
    if pair is None:
        return None
    return pair.near if use_far_role else pair.far

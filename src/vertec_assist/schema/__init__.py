"""Vertec schema model, inheritance flattening and association roles."""

from vertec_assist.schema.inheritance import (
    InheritanceResolver,
    ResolvedMembers,
    resolve_inheritance,
)
from vertec_assist.schema.merge import deduplicate_classes, merge_language_variants
from vertec_assist.schema.models import (
    Association,
    AssociationRole,
    ClassRef,
    ClassSet,
    EnrichedAssociation,
    EnrichedMember,
    Member,
    VertecClass,
)
from vertec_assist.schema.roles import (
    RoleInfo,
    RoleMatch,
    RolePair,
    get_role_info,
    resolve_roles,
)

__all__ = [
    "InheritanceResolver",
    "ResolvedMembers",
    "resolve_inheritance",
    "deduplicate_classes",
    "merge_language_variants",
    "Association",
    "AssociationRole",
    "ClassRef",
    "ClassSet",
    "EnrichedAssociation",
    "EnrichedMember",
    "Member",
    "VertecClass",
    "RoleInfo",
    "RoleMatch",
    "RolePair",
    "get_role_info",
    "resolve_roles",
]

"""Markdown documentation for classes, members and associations."""

from __future__ import annotations

from vertec_assist.schema.models import (
    ClassSet,
    EnrichedAssociation,
    EnrichedMember,
    VertecClass,
)
from vertec_assist.schema.roles import resolve_roles

MISSING = "-/-"


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def build_class_documentation(cls: VertecClass) -> str:
    parts: list[str] = []

    if cls.description:
        parts.extend([cls.description, ""])

    parts.extend([f"**Names:** {cls.name} | {cls.name_alt} (ID: {cls.class_id})", ""])

    if cls.table_mapping:
        parts.extend([f"**DB:** {cls.table_mapping}", ""])

    if cls.superclass:
        parts.extend([f"**Parent:** {cls.superclass.name}", ""])

    if cls.is_abstract:
        parts.extend(["**Abstract:** Yes", ""])

    parts.append(f"**Persistent:** {_yes_no(cls.is_persistent)}")
    return "\n".join(parts)


def build_member_documentation(
    member: EnrichedMember,
    owner: VertecClass | None = None,
) -> str:
    parts: list[str] = []

    if member.description:
        parts.extend([member.description, ""])

    parts.extend([f"**Names:** {member.name} | {member.name_alt}", ""])
    parts.extend([f"**Type:** {member.member_type or MISSING}", ""])

    if owner is not None and member.source_class and member.is_inherited_by(owner):
        parts.extend([f"**Inherited from:** {member.source_class}", ""])

    if member.length:
        parts.extend([f"**Length:** {member.length}", ""])

    parts.extend([f"**Persistent:** {_yes_no(member.is_persistent)}", ""])
    parts.extend([f"**Nullable:** {_yes_no(member.is_nullable)}", ""])
    parts.append(f"**Indexed:** {_yes_no(member.is_indexed)}")
    return "\n".join(parts)


def build_association_documentation(
    association: EnrichedAssociation,
    owner: VertecClass,
    classes: ClassSet,
) -> str:
    pair = resolve_roles(association, owner, classes)
    target = pair.far if pair else None
    parts: list[str] = []

    if target and target.description:
        parts.extend([target.description, ""])

    parts.extend(
        [
            f"**Names:** {association.perceived_name} | "
            f"{association.perceived_name_alt or MISSING}",
            "",
        ]
    )

    target_name = target.role_class_name if target else None
    target_alt = target.role_class_alt if target else None
    parts.extend(
        [f"**Class:** {target_name or MISSING} | {target_alt or MISSING}", ""]
    )

    if association.source_class and association.is_inherited_by(owner):
        parts.extend([f"**Inherited from:** {association.source_class}", ""])

    if association.association_class:
        parts.extend([f"**Link Class:** {association.association_class.name}", ""])

    parts.extend([f"**Navigable:** {_yes_no(bool(target and target.is_navigable))}", ""])
    parts.extend([f"**Persistent:** {_yes_no(association.is_persistent)}", ""])
    parts.append(f"**Multi:** {_yes_no(bool(target and target.is_multi))}")
    return "\n".join(parts)

"""Data models for the Vertec class/member/association schema."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from typing import Any


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _optional_text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _same_name(candidate: str | None, name: str) -> bool:
    return bool(candidate) and candidate.lower() == name.lower()


@dataclass(frozen=True)
class ClassRef:
    """Reference to a class by id and (primary) name."""

    class_id: int
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ClassRef | None:
        if not isinstance(data, dict) or data.get("class_id") is None:
            return None
        return cls(class_id=int(data["class_id"]), name=_text(data.get("name")))


@dataclass(frozen=True)
class Member:
    name: str
    name_alt: str = ""
    member_type: str = ""
    description: str = ""
    length: int | None = None
    is_nullable: bool = False
    is_derived: bool = False
    is_indexed: bool = False

    def matches(self, name: str) -> bool:
        return _same_name(self.name, name) or _same_name(self.name_alt, name)

    @property
    def is_persistent(self) -> bool:
        return not self.is_derived

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Member:
        name = _text(data.get("name"))
        length = data.get("length")
        return cls(
            name=name,
            name_alt=_text(data.get("name_alt")) or name,
            member_type=_text(data.get("member_type")),
            description=_text(data.get("description")),
            length=int(length) if isinstance(length, (int, float)) else None,
            is_nullable=bool(data.get("is_nullable", False)),
            is_derived=bool(data.get("is_derived", False)),
            is_indexed=bool(data.get("is_indexed", False)),
        )


@dataclass(frozen=True)
class AssociationRole:
    """One end of an association.

    ``is_multi`` tells whether this end is a collection when navigated to
    from the other end.
    """

    role_class: ClassRef | None = None
    name: str = ""
    name_alt: str | None = None
    is_navigable: bool = False
    is_multi: bool = False
    is_composite: bool = False
    is_hidden: bool = False
    description: str = ""

    @property
    def class_id(self) -> int | None:
        return self.role_class.class_id if self.role_class else None

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int) -> AssociationRole:
        prefix = f"role{index}"
        return cls(
            role_class=ClassRef.from_dict(data.get(f"{prefix}_class")),
            name=_text(data.get(f"{prefix}_name")),
            name_alt=_optional_text(data.get(f"{prefix}_name_alt")),
            is_navigable=bool(data.get(f"is_{prefix}_navigable", False)),
            is_multi=bool(data.get(f"is_{prefix}_multi", False)),
            is_composite=bool(data.get(f"is_{prefix}_composite", False)),
            is_hidden=bool(data.get(f"is_{prefix}_hidden", False)),
            description=_text(data.get(f"{prefix}_description")),
        )


@dataclass(frozen=True)
class Association:
    name: str
    name_alt: str | None = None
    perceived_name: str = ""
    perceived_name_alt: str | None = None
    association_class: ClassRef | None = None
    is_derived: bool = False
    description: str = ""
    role1: AssociationRole = field(default_factory=AssociationRole)
    role2: AssociationRole = field(default_factory=AssociationRole)

    def matches(self, name: str) -> bool:
        """Match against the perceived names a script author types."""
        return _same_name(self.perceived_name, name) or _same_name(
            self.perceived_name_alt, name
        )

    @property
    def is_persistent(self) -> bool:
        return not self.is_derived

    @property
    def has_role_data(self) -> bool:
        return self.role1.role_class is not None or self.role2.role_class is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Association:
        name = _text(data.get("name"))
        return cls(
            name=name,
            name_alt=_optional_text(data.get("name_alt")),
            perceived_name=_text(data.get("perceived_name")) or name,
            perceived_name_alt=_optional_text(data.get("perceived_name_alt")),
            association_class=ClassRef.from_dict(data.get("association_class")),
            is_derived=bool(data.get("is_derived", False)),
            description=_text(data.get("description")),
            role1=AssociationRole.from_dict(data, 1),
            role2=AssociationRole.from_dict(data, 2),
        )


@dataclass(frozen=True)
class VertecClass:
    class_id: int
    name: str
    name_alt: str = ""
    superclass: ClassRef | None = None
    table_mapping: str = ""
    is_abstract: bool = False
    is_persistent: bool = False
    is_hidden: bool = False
    description: str = ""
    members: tuple[Member, ...] = ()
    associations: tuple[Association, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name_alt or self.name

    def matches(self, name: str) -> bool:
        return _same_name(self.name, name) or _same_name(self.name_alt, name)

    def is_named(self, label: str | None) -> bool:
        """Whether ``label`` (for instance a source class tag) names this class."""
        return bool(label) and label in (self.name, self.name_alt)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VertecClass:
        if data.get("class_id") is None:
            raise ValueError("class record without class_id")

        name = _text(data.get("name"))
        return cls(
            class_id=int(data["class_id"]),
            name=name,
            name_alt=_text(data.get("name_alt")) or name,
            superclass=ClassRef.from_dict(data.get("superclass")),
            table_mapping=_text(data.get("table_mapping")),
            is_abstract=bool(data.get("is_abstract", False)),
            is_persistent=bool(data.get("is_persistent", False)),
            is_hidden=bool(data.get("is_hidden", False)),
            description=_text(data.get("description")),
            members=tuple(
                Member.from_dict(m) for m in data.get("members") or [] if isinstance(m, dict)
            ),
            associations=tuple(
                Association.from_dict(a)
                for a in data.get("associations") or []
                if isinstance(a, dict)
            ),
        )


@dataclass(frozen=True)
class EnrichedMember(Member):
    """A member annotated with the class that declares it."""

    source_class: str = ""

    @classmethod
    def from_member(cls, member: Member, source_class: str) -> EnrichedMember:
        values = {f.name: getattr(member, f.name) for f in fields(Member)}
        return cls(**values, source_class=source_class)

    def is_inherited_by(self, cls: VertecClass) -> bool:
        return not cls.is_named(self.source_class)


@dataclass(frozen=True)
class EnrichedAssociation(Association):
    """An association annotated with the class that declares it."""

    source_class: str = ""

    @classmethod
    def from_association(
        cls, association: Association, source_class: str
    ) -> EnrichedAssociation:
        values = {f.name: getattr(association, f.name) for f in fields(Association)}
        return cls(**values, source_class=source_class)

    def is_inherited_by(self, cls: VertecClass) -> bool:
        return not cls.is_named(self.source_class)


@dataclass(frozen=True)
class ClassSet:
    """Immutable snapshot of all classes with id and name indices."""

    classes: tuple[VertecClass, ...] = ()
    _by_id: dict[int, VertecClass] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _by_name: dict[str, VertecClass] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for cls in self.classes:
            self._by_id.setdefault(cls.class_id, cls)
            for label in (cls.name, cls.name_alt):
                if label:
                    self._by_name.setdefault(label.lower(), cls)

    def __iter__(self) -> Iterator[VertecClass]:
        return iter(self.classes)

    def __len__(self) -> int:
        return len(self.classes)

    def __contains__(self, cls: object) -> bool:
        return isinstance(cls, VertecClass) and self._by_id.get(cls.class_id) is cls

    def get(self, class_id: int) -> VertecClass | None:
        return self._by_id.get(class_id)

    def find(self, name: str) -> VertecClass | None:
        """Find a class by German or English name, case-insensitively."""
        if not name:
            return None
        return self._by_name.get(name.lower())

    def resolve_ref(self, ref: ClassRef | None) -> VertecClass | None:
        if ref is None:
            return None
        return self.get(ref.class_id)

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> ClassSet:
        return cls(classes=tuple(VertecClass.from_dict(r) for r in records))

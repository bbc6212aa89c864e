"""Tests for the inheritance resolver.

Tests cover:
- Own members of root classes
- Multi-level flattening order and source tagging
- Cycle and dangling superclass tolerance
- Subclass detection
"""

import pytest

from vertec_assist.schema import (
    ClassRef,
    ClassSet,
    InheritanceResolver,
    Member,
    VertecClass,
    resolve_inheritance,
)


def _cls(class_id, name, superclass=None, members=()):
    return VertecClass(
        class_id=class_id,
        name=name,
        name_alt=name,
        superclass=ClassRef(superclass[0], superclass[1]) if superclass else None,
        members=tuple(Member(name=m, name_alt=m) for m in members),
    )


@pytest.fixture
def inheritance(classes):
    return InheritanceResolver(classes)


class TestRootClass:
    """Tests for classes without a superclass."""

    def test_returns_only_own_items(self, classes):
        """A root class yields exactly its own members and associations."""
        eintrag = classes.find("Eintrag")
        members, associations = resolve_inheritance(eintrag, classes)

        assert [m.name for m in members] == ["bemerkung"]
        assert associations == ()

    def test_own_items_tagged_with_class(self, classes):
        """Every item of a root class is tagged with that class."""
        eintrag = classes.find("Eintrag")
        resolved = resolve_inheritance(eintrag, classes)

        assert all(eintrag.is_named(m.source_class) for m in resolved.members)
        assert all(not m.is_inherited_by(eintrag) for m in resolved.members)

    def test_accepts_plain_iterable(self):
        """The class set may be given as any iterable of classes."""
        root = _cls(1, "Root", members=["a", "b"])
        members, _ = resolve_inheritance(root, [root])

        assert [m.name for m in members] == ["a", "b"]
        assert {m.source_class for m in members} == {"Root"}


class TestMultiLevel:
    """Tests for multi-level superclass chains."""

    def test_order_is_own_then_nearest_ancestor(self, classes):
        """Items follow the chain: own, parent, grandparent."""
        bearbeiter = classes.find("Projektbearbeiter")
        members, _ = resolve_inheritance(bearbeiter, classes)

        assert [m.name for m in members] == ["aktiv", "kuerzel", "bemerkung"]
        assert [m.source_class for m in members] == ["ProjectUser", "Worker", "Entry"]

    def test_inherited_associations_are_tagged(self, classes):
        """Associations declared on an ancestor carry that ancestor as source."""
        bearbeiter = classes.find("Projektbearbeiter")
        _, associations = resolve_inheritance(bearbeiter, classes)

        assert [a.perceived_name for a in associations] == ["projekte"]
        assert associations[0].source_class == "Worker"
        assert associations[0].is_inherited_by(bearbeiter)

    def test_ancestry(self, inheritance, classes):
        """get_ancestry returns the class followed by its superclasses."""
        chain = inheritance.get_ancestry(classes.find("Projektbearbeiter"))
        assert [c.name for c in chain] == ["Projektbearbeiter", "Bearbeiter", "Eintrag"]

    def test_original_members_untouched(self, classes):
        """Enrichment does not change the declared members."""
        projekt = classes.find("Projekt")
        resolve_inheritance(projekt, classes)

        assert not hasattr(projekt.members[0], "source_class")


class TestMalformedData:
    """Tests for cyclic and dangling superclass references."""

    def test_cycle_terminates(self):
        """A superclass cycle is walked once without revisiting any class."""
        a = _cls(1, "A", superclass=(2, "B"), members=["a"])
        b = _cls(2, "B", superclass=(3, "C"), members=["b"])
        c = _cls(3, "C", superclass=(1, "A"), members=["c"])
        members, _ = resolve_inheritance(a, ClassSet((a, b, c)))

        assert [m.name for m in members] == ["a", "b", "c"]
        assert [m.source_class for m in members] == ["A", "B", "C"]

    def test_self_reference_terminates(self):
        """A class naming itself as superclass yields only its own items."""
        a = _cls(1, "A", superclass=(1, "A"), members=["a"])
        members, _ = resolve_inheritance(a, [a])

        assert [m.name for m in members] == ["a"]

    def test_dangling_superclass_stops_walk(self):
        """A superclass id missing from the set ends the chain."""
        a = _cls(1, "A", superclass=(99, "Missing"), members=["a"])
        members, _ = resolve_inheritance(a, [a])

        assert [m.name for m in members] == ["a"]


class TestSubclasses:
    """Tests for subclass queries."""

    def test_is_subclass(self, inheritance, classes):
        """A class is a subclass of every class in its ancestry."""
        child = classes.find("Projektbearbeiter")

        assert inheritance.is_subclass(child, classes.find("Eintrag"))
        assert inheritance.is_subclass(child, classes.find("Bearbeiter"))
        assert not inheritance.is_subclass(child, classes.find("Projekt"))

    def test_get_subclasses(self, inheritance, classes):
        """get_subclasses finds direct and indirect subclasses."""
        names = {c.name for c in inheritance.get_subclasses(classes.find("Bearbeiter"))}
        assert names == {"Projektbearbeiter"}

        names = {c.name for c in inheritance.get_subclasses(classes.find("Eintrag"))}
        assert names == {"Projekt", "Projektphase", "Bearbeiter", "Projektbearbeiter"}


class TestResolvedMembersLookup:
    """Tests for case-insensitive lookup on resolved items."""

    @pytest.mark.parametrize("name", ["Aktiv", "aktiv", "AKTIV", "active", "ACTIVE"])
    def test_member_lookup_ignores_case(self, classes, name):
        """Members match on either name regardless of case."""
        resolved = resolve_inheritance(classes.find("Projektphase"), classes)
        member = resolved.find_member(name)

        assert member is not None
        assert member.name == "aktiv"

    @pytest.mark.parametrize("name", ["Phasen", "phasen", "PHASEN", "Phases"])
    def test_association_lookup_ignores_case(self, classes, name):
        """Associations match on either perceived name regardless of case."""
        resolved = resolve_inheritance(classes.find("Projekt"), classes)
        association = resolved.find_association(name)

        assert association is not None
        assert association.name == "ProjektPhasen"

    def test_unknown_name(self, classes):
        """Unknown names return None."""
        resolved = resolve_inheritance(classes.find("Projekt"), classes)

        assert resolved.find_member("gibtsnicht") is None
        assert resolved.find_association("gibtsnicht") is None

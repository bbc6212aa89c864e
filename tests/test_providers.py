"""Tests for the completion and hover providers."""

import pytest

from vertec_assist.core import CompletionKind
from vertec_assist.providers import (
    CompletionProvider,
    HoverProvider,
    build_association_documentation,
    build_class_documentation,
    build_member_documentation,
    items_for_class,
)
from vertec_assist.resolution import ChainResolver, Position
from vertec_assist.schema import resolve_inheritance

SCRIPT = """\
projekt = argobject  # type: Projekt
phasen = projekt.phasen
leiter = projekt.projektleiter
"""


def with_line(line: str) -> tuple[str, Position]:
    """Append ``line`` to the script and put the cursor at its end."""
    text = SCRIPT + line
    return text, Position(len(text.splitlines()) - 1, len(line))


@pytest.fixture
def completions(resolver):
    return CompletionProvider(resolver)


@pytest.fixture
def hovers(resolver):
    return HoverProvider(resolver)


class TestCompletion:
    """Tests for completion item generation."""

    def test_members_then_associations(self, completions):
        text, position = with_line("projekt.")
        items = completions.provide_completions(text, position)

        labels = [item.label for item in items]
        assert labels == ["code", "beschrieb", "bemerkung", "phasen", "projektleiter"]
        assert [item.kind for item in items[:3]] == [CompletionKind.MEMBER] * 3
        assert [item.kind for item in items[3:]] == [CompletionKind.ASSOCIATION] * 2

    def test_inherited_provenance(self, completions):
        text, position = with_line("projekt.")
        items = {item.label: item for item in completions.provide_completions(text, position)}

        assert items["code"].is_inherited is False
        assert items["bemerkung"].is_inherited is True
        assert items["bemerkung"].source_class == "Entry"

    def test_association_detail_names_target(self, completions):
        text, position = with_line("projekt.")
        items = {item.label: item for item in completions.provide_completions(text, position)}

        assert items["phasen"].label_alt == "phases"
        assert items["phasen"].detail == "→ Projektphase | ProjectPhase"

    def test_collection_suppresses_suggestions(self, completions):
        """A chain ending on a collection offers nothing until indexed."""
        text, position = with_line("projekt.phasen.")
        assert completions.provide_completions(text, position) is None

        text, position = with_line("phasen.")
        assert completions.provide_completions(text, position) is None

    def test_indexed_collection_offers_element_members(self, completions):
        text, position = with_line("phasen[0].")
        labels = [item.label for item in completions.provide_completions(text, position)]

        assert "aktiv" in labels
        assert "projekt" in labels
        assert "unterphasen" in labels

    def test_unresolved_chain(self, completions):
        text, position = with_line("unknown_var.")
        assert completions.provide_completions(text, position) is None

    def test_no_dot_no_completion(self, completions):
        text, position = with_line("projekt")
        assert completions.provide_completions(text, position) is None

    def test_prefix_filter(self, completions):
        """With filtering, the partial name matches either label."""
        text, position = with_line("projekt.pha")
        items = completions.provide_completions(text, position, filter_prefix=True)
        assert [item.label for item in items] == ["phasen"]

        text, position = with_line("projekt.DESC")
        items = completions.provide_completions(text, position, filter_prefix=True)
        assert [item.label for item in items] == ["beschrieb"]

    def test_filter_text_contains_both_names(self, classes):
        items = items_for_class(classes.find("Projekt"), classes)
        assert items[0].filter_text == "code | code"
        assert items[1].sort_text == "beschrieb | description"

    def test_no_schema(self):
        provider = CompletionProvider(ChainResolver(None))
        text, position = with_line("projekt.")
        assert provider.provide_completions(text, position) is None


class TestHover:
    """Tests for hover documentation."""

    def test_hover_on_member(self, hovers):
        text, _ = with_line("phasen[0].aktiv")
        line = len(text.splitlines()) - 1
        hover = hovers.provide_hover(text, Position(line, 12))

        assert hover is not None
        assert "Phase ist aktiv" in hover.contents
        assert "**Names:** aktiv | active" in hover.contents
        assert (hover.start, hover.end) == (10, 15)

    def test_hover_on_association(self, hovers):
        text, _ = with_line("projekt.phasen")
        line = len(text.splitlines()) - 1
        hover = hovers.provide_hover(text, Position(line, 10))

        assert "Phasen des Projekts" in hover.contents
        assert "**Class:** Projektphase | ProjectPhase" in hover.contents
        assert "**Multi:** Yes" in hover.contents

    def test_hover_on_type_comment(self, hovers):
        hover = hovers.provide_hover(SCRIPT, Position(0, 32))

        assert hover is not None
        assert "Ein Projekt" in hover.contents
        assert "**Names:** Projekt | Project (ID: 2)" in hover.contents

    def test_hover_on_variable(self, hovers):
        text, _ = with_line("leiter")
        line = len(text.splitlines()) - 1
        hover = hovers.provide_hover(text, Position(line, 3))

        assert "**Names:** Projektbearbeiter | ProjectUser" in hover.contents

    def test_hover_on_collection_variable_declined(self, hovers):
        text, _ = with_line("phasen")
        line = len(text.splitlines()) - 1
        assert hovers.provide_hover(text, Position(line, 3)) is None

    def test_hover_on_unknown(self, hovers):
        text, _ = with_line("projekt.gibtsnicht")
        line = len(text.splitlines()) - 1
        assert hovers.provide_hover(text, Position(line, 12)) is None

    def test_hover_on_whitespace(self, hovers):
        assert hovers.provide_hover("   ", Position(0, 1)) is None


class TestDocumentation:
    """Tests for the markdown documentation builders."""

    def test_class_documentation(self, classes):
        doc = build_class_documentation(classes.find("Projekt"))

        assert doc.startswith("Ein Projekt")
        assert "**DB:** Projekt" in doc
        assert "**Parent:** Eintrag" in doc
        assert "**Persistent:** Yes" in doc

    def test_inherited_member_documentation(self, classes):
        projekt = classes.find("Projekt")
        member = resolve_inheritance(projekt, classes).find_member("bemerkung")
        doc = build_member_documentation(member, projekt)

        assert "**Inherited from:** Entry" in doc
        assert "**Length:** 255" in doc

    def test_own_member_documentation(self, classes):
        projekt = classes.find("Projekt")
        member = resolve_inheritance(projekt, classes).find_member("code")
        doc = build_member_documentation(member, projekt)

        assert "Inherited from" not in doc
        assert "**Indexed:** Yes" in doc
        assert "**Type:** String" in doc

    def test_association_documentation_from_far_end(self, classes):
        phase = classes.find("Projektphase")
        association = resolve_inheritance(phase, classes).find_association("projekt")
        doc = build_association_documentation(association, phase, classes)

        assert doc.startswith("Projekt der Phase")
        assert "**Class:** Projekt | Project" in doc
        assert "**Multi:** No" in doc

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BindingPattern(Enum):
    """Line patterns that bind a variable, in the order they are tried."""

    ANNOTATED_ASSIGNMENT = 1
    LOOP_BINDING = 2
    PLAIN_ASSIGNMENT = 3
    PARAMETER_ANNOTATION = 4


@dataclass(frozen=True)
class Position:
    """Zero-based line and character offset."""

    line: int
    character: int


@dataclass(frozen=True)
class SourceDocument:
    """Read-only, line-indexed view of a script."""

    lines: tuple[str, ...] = ()

    @classmethod
    def from_text(cls, text: str) -> SourceDocument:
        return cls(lines=tuple(text.splitlines()))

    def __len__(self) -> int:
        return len(self.lines)

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""

    def text_before(self, position: Position) -> str:
        return self.line_at(position.line)[: max(position.character, 0)]

    def word_range_at(self, position: Position) -> tuple[int, int] | None:
        """Return the [start, end) character range of the word under ``position``."""
        text = self.line_at(position.line)
        start = end = min(max(position.character, 0), len(text))

        while start > 0 and (text[start - 1].isalnum() or text[start - 1] == "_"):
            start -= 1
        while end < len(text) and (text[end].isalnum() or text[end] == "_"):
            end += 1

        if start == end:
            return None
        return start, end


@dataclass(frozen=True)
class ChainStep:
    """One step of an access chain: a named segment or a subscript."""

    name: str = ""
    is_subscript: bool = False

    def __str__(self) -> str:
        return "[]" if self.is_subscript else self.name


@dataclass(frozen=True)
class ChainResult:
    type_name: str | None = None
    is_collection: bool = False

    @property
    def is_resolved(self) -> bool:
        return self.type_name is not None

    @property
    def is_single(self) -> bool:
        return self.type_name is not None and not self.is_collection

    @classmethod
    def unresolved(cls) -> ChainResult:
        return cls(None, False)


@dataclass(frozen=True)
class VariableBinding:
    """The binding that gives a variable its type at some point of a script."""

    name: str
    type_name: str | None
    is_collection: bool = False
    pattern: BindingPattern | None = None
    line: int | None = None
    expression: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.type_name is not None


@dataclass
class ResolutionContext:
    """Per-request recursion guard for mutually recursive resolution."""

    in_progress: set[tuple[str, int]] = field(default_factory=set)
    max_depth: int = 32
    depth: int = 0

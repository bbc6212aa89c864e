"""Backward line scanner that finds the binding of a variable.

Scanning starts at the cursor line (only the text before the cursor counts)
and walks upward until the nearest enclosing ``def``/``class`` line. Nested
definitions that do not enclose the cursor are skipped. Each line is
tested against the binding patterns in strict priority order:

1. annotated assignment (``x = ...  # type: Projekt``, ``x: Projekt = ...``)
2. loop binding (``for x in projekt.phasen:``)
3. plain assignment (``x = projekt.projektleiter``)
4. parameter annotation (``def f(x):  # type: (Projekt) -> None``)

The first matching line decides. A matching line whose expression cannot be
resolved still ends the scan, so an earlier, shadowed binding never leaks.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from vertec_assist.resolution.chain_parser import CHAIN_PATTERN
from vertec_assist.resolution.models import (
    BindingPattern,
    ChainResult,
    Position,
    ResolutionContext,
    SourceDocument,
    VariableBinding,
)

logger = logging.getLogger(__name__)

ExpressionResolver = Callable[
    [SourceDocument, Position, str, ResolutionContext], ChainResult
]

_TYPE_SPEC = (
    r"(?:(?:list|List|Sequence|Iterable|tuple|Tuple)\[\s*(?P<elem>\w+)\s*(?:,\s*\.\.\.\s*)?\]"
    r"|(?P<type>\w+))"
)

_RE_BLOCK_BOUNDARY = re.compile(r"^\s*(?:async\s+)?(?:def|class)\s+")
_RE_TYPE_COMMENT_LINE = re.compile(rf"^\s*#\s*type:\s*{_TYPE_SPEC}\s*$")
_RE_DEF = re.compile(
    r"^\s*(?:async\s+)?def\s+\w+\s*\((?P<params>[^)]*)\)(?P<rest>.*)$"
)
_RE_SIGNATURE_COMMENT = re.compile(r"#\s*type:\s*\((?P<types>[^)]*)\)")
_RE_CHAIN_FULL = re.compile(CHAIN_PATTERN)


@dataclass(frozen=True)
class _LinePatterns:
    """Compiled per-variable patterns."""

    annotated: tuple[re.Pattern[str], ...]
    loop: re.Pattern[str]
    assignment: re.Pattern[str]

    @classmethod
    def for_name(cls, name: str) -> _LinePatterns:
        n = re.escape(name)
        start = r"(?:^|;)\s*"
        return cls(
            annotated=(
                re.compile(rf"{start}{n}\s*=(?!=).*#\s*type:\s*{_TYPE_SPEC}"),
                re.compile(rf"{start}{n}\s*:\s*{_TYPE_SPEC}\s*(?:=|$)"),
                re.compile(rf"\bfor\s+{n}\s+in\s+.*:.*#\s*type:\s*{_TYPE_SPEC}"),
            ),
            loop=re.compile(rf"\bfor\s+{n}\s+in\s+(?P<rest>.*)$"),
            assignment=re.compile(rf"{start}{n}\s*=(?!=)\s*(?P<expr>[^#;]*?)\s*(?:[#;].*)?$"),
        )


def _type_from_match(match: re.Match[str]) -> tuple[str | None, bool]:
    elem = match.group("elem")
    if elem:
        return elem, True
    return match.group("type"), False


def _loop_iterable(header: str) -> str | None:
    """Return the iterable of a ``for`` header, up to its closing colon.

    Colons inside brackets (slices, dict literals) are skipped. Returns None
    when the header has no closing colon yet.
    """
    depth = 0
    for index, char in enumerate(header):
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth = max(depth - 1, 0)
        elif depth == 0 and char == "#":
            return None
        elif depth == 0 and char == ":":
            return header[:index].strip()
    return None


def _indentation(text: str) -> int:
    return len(text) - len(text.lstrip())


def _scope_lines(
    document: SourceDocument, position: Position
) -> list[tuple[int, str]]:
    """Return the (line number, text) pairs visible from ``position``, nearest first.

    The walk ends with the nearest enclosing ``def``/``class`` line, found by
    indentation. Definitions that do not enclose the cursor are skipped
    together with their bodies.
    """
    start_line = min(position.line, len(document) - 1)
    cursor_line = document.line_at(start_line)
    scope_indent = _indentation(cursor_line) if cursor_line.strip() else None
    visible: list[tuple[int, str, int]] = []

    for line_no in range(start_line, -1, -1):
        is_cursor_line = line_no == position.line
        text = document.text_before(position) if is_cursor_line else document.line_at(line_no)
        stripped = text.strip()
        if not is_cursor_line and (not stripped or stripped.startswith("#")):
            continue

        indent = _indentation(document.line_at(line_no))
        if _RE_BLOCK_BOUNDARY.match(text):
            if is_cursor_line or scope_indent is None or indent < scope_indent:
                visible.append((line_no, text, indent))
                break
            while visible and visible[-1][2] > indent:
                visible.pop()
            continue

        visible.append((line_no, text, indent))
        if stripped and (scope_indent is None or indent < scope_indent):
            scope_indent = indent

    return [(line_no, text) for line_no, text, _ in visible]


def _split_parameters(params: str) -> list[tuple[str, str | None]]:
    """Return (name, inline annotation) pairs, ``self``/``cls`` excluded."""
    result = []
    for raw in params.split(","):
        raw = raw.strip().lstrip("*")
        if not raw or raw == "/":
            continue
        name, _, annotation = raw.split("=", 1)[0].partition(":")
        name = name.strip()
        if name in ("self", "cls") or not name:
            continue
        result.append((name, annotation.strip() or None))
    return result


class VariableTypeTracker:
    """Finds the type a variable holds at a cursor position."""

    def __init__(self, resolve_expression: ExpressionResolver):
        self.resolve_expression = resolve_expression
        self._matchers: tuple[
            tuple[BindingPattern, Callable[..., VariableBinding | None]], ...
        ] = (
            (BindingPattern.ANNOTATED_ASSIGNMENT, self._match_annotated),
            (BindingPattern.LOOP_BINDING, self._match_loop),
            (BindingPattern.PLAIN_ASSIGNMENT, self._match_assignment),
            (BindingPattern.PARAMETER_ANNOTATION, self._match_parameter),
        )

    def find_binding(
        self,
        source: SourceDocument | str,
        position: Position,
        name: str,
        context: ResolutionContext | None = None,
    ) -> VariableBinding:
        document = (
            source if isinstance(source, SourceDocument) else SourceDocument.from_text(source)
        )
        context = context or ResolutionContext()
        unresolved = VariableBinding(name=name, type_name=None)

        if not name or not re.fullmatch(r"\w+", name) or not len(document):
            return unresolved
        if position.line < 0:
            return unresolved

        patterns = _LinePatterns.for_name(name)

        for line_no, text in _scope_lines(document, position):
            for pattern, matcher in self._matchers:
                binding = matcher(document, line_no, text, name, patterns, context)
                if binding is not None:
                    logger.debug(
                        f"{name} bound by {pattern.name} on line {line_no}: "
                        f"{binding.type_name} (collection={binding.is_collection})"
                    )
                    return binding

        return unresolved

    def find_type(
        self,
        source: SourceDocument | str,
        position: Position,
        name: str,
    ) -> str | None:
        return self.find_binding(source, position, name).type_name

    def is_collection(
        self,
        source: SourceDocument | str,
        position: Position,
        name: str,
    ) -> bool:
        binding = self.find_binding(source, position, name)
        return binding.is_resolved and binding.is_collection

    def _preceding_type_comment(
        self, document: SourceDocument, line_no: int
    ) -> tuple[str | None, bool] | None:
        if line_no <= 0:
            return None
        match = _RE_TYPE_COMMENT_LINE.match(document.line_at(line_no - 1))
        return _type_from_match(match) if match else None

    def _resolve(
        self,
        document: SourceDocument,
        line_no: int,
        expression: str,
        context: ResolutionContext,
    ) -> ChainResult:
        # Resolve from the start of the binding line so ``x = x.parent`` looks
        # further up instead of at itself.
        return self.resolve_expression(
            document, Position(line_no, 0), expression, context
        )

    def _match_annotated(
        self,
        document: SourceDocument,
        line_no: int,
        text: str,
        name: str,
        patterns: _LinePatterns,
        context: ResolutionContext,
    ) -> VariableBinding | None:
        for regex in patterns.annotated:
            match = regex.search(text)
            if match:
                type_name, is_collection = _type_from_match(match)
                if type_name == "ignore":
                    continue
                return VariableBinding(
                    name=name,
                    type_name=type_name,
                    is_collection=is_collection,
                    pattern=BindingPattern.ANNOTATED_ASSIGNMENT,
                    line=line_no,
                )
        return None

    def _match_loop(
        self,
        document: SourceDocument,
        line_no: int,
        text: str,
        name: str,
        patterns: _LinePatterns,
        context: ResolutionContext,
    ) -> VariableBinding | None:
        match = patterns.loop.search(text)
        if not match:
            return None

        expression = _loop_iterable(match.group("rest"))
        if expression is None:
            return None
        binding = VariableBinding(
            name=name,
            type_name=None,
            pattern=BindingPattern.LOOP_BINDING,
            line=line_no,
            expression=expression,
        )

        hinted = self._preceding_type_comment(document, line_no)
        if hinted is not None:
            return VariableBinding(
                name=name,
                type_name=hinted[0],
                is_collection=hinted[1],
                pattern=BindingPattern.LOOP_BINDING,
                line=line_no,
                expression=expression,
            )

        if not _RE_CHAIN_FULL.fullmatch(expression):
            return binding

        iterable = self._resolve(document, line_no, expression, context)
        if not iterable.is_resolved or not iterable.is_collection:
            return binding

        # Iterating a collection yields its elements.
        return VariableBinding(
            name=name,
            type_name=iterable.type_name,
            is_collection=False,
            pattern=BindingPattern.LOOP_BINDING,
            line=line_no,
            expression=expression,
        )

    def _match_assignment(
        self,
        document: SourceDocument,
        line_no: int,
        text: str,
        name: str,
        patterns: _LinePatterns,
        context: ResolutionContext,
    ) -> VariableBinding | None:
        match = patterns.assignment.search(text)
        if not match:
            return None

        expression = match.group("expr").strip()
        hinted = self._preceding_type_comment(document, line_no)
        if hinted is not None:
            return VariableBinding(
                name=name,
                type_name=hinted[0],
                is_collection=hinted[1],
                pattern=BindingPattern.PLAIN_ASSIGNMENT,
                line=line_no,
                expression=expression,
            )

        if not _RE_CHAIN_FULL.fullmatch(expression):
            return VariableBinding(
                name=name,
                type_name=None,
                pattern=BindingPattern.PLAIN_ASSIGNMENT,
                line=line_no,
                expression=expression,
            )

        result = self._resolve(document, line_no, expression, context)
        return VariableBinding(
            name=name,
            type_name=result.type_name,
            is_collection=result.is_collection,
            pattern=BindingPattern.PLAIN_ASSIGNMENT,
            line=line_no,
            expression=expression,
        )

    def _match_parameter(
        self,
        document: SourceDocument,
        line_no: int,
        text: str,
        name: str,
        patterns: _LinePatterns,
        context: ResolutionContext,
    ) -> VariableBinding | None:
        match = _RE_DEF.match(text)
        if not match:
            return None

        parameters = _split_parameters(match.group("params"))
        names = [p[0] for p in parameters]
        if name not in names:
            return None

        index = names.index(name)
        annotation = parameters[index][1]
        type_name: str | None = None
        is_collection = False

        if annotation:
            annotation_match = re.fullmatch(_TYPE_SPEC, annotation)
            if annotation_match:
                type_name, is_collection = _type_from_match(annotation_match)

        if type_name is None:
            signature = _RE_SIGNATURE_COMMENT.search(match.group("rest"))
            if signature:
                types = [t.strip() for t in signature.group("types").split(",") if t.strip()]
                if index < len(types):
                    type_match = re.fullmatch(_TYPE_SPEC, types[index])
                    if type_match:
                        type_name, is_collection = _type_from_match(type_match)

        if type_name is None:
            return None

        return VariableBinding(
            name=name,
            type_name=type_name,
            is_collection=is_collection,
            pattern=BindingPattern.PARAMETER_ANNOTATION,
            line=line_no,
        )

"""Minimal ``.pyi`` stubs for Vertec classes.

The stubs only declare class names and the superclass relation so a type
checker accepts ``# type: Projekt`` annotations. Attribute access goes
through ``__getattr__`` and is left to the completion provider.
"""

from __future__ import annotations

import keyword
import logging
from pathlib import Path

from vertec_assist.schema.models import ClassSet, VertecClass

logger = logging.getLogger(__name__)

PACKAGE_NAME = "vertec"


def is_stub_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _docstring(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"""{escaped}"""'


def class_stub(cls: VertecClass, classes: ClassSet) -> str:
    superclass = classes.resolve_ref(cls.superclass)
    parent = superclass.name if superclass and is_stub_name(superclass.name) else None

    lines = ['"""Auto-generated stub for Vertec class"""', "from typing import Any", ""]
    if parent:
        lines.extend(
            [
                "from typing import TYPE_CHECKING",
                "if TYPE_CHECKING:",
                f"    from .{parent} import {parent}",
                "",
            ]
        )

    lines.append(f"class {cls.name}({parent or 'object'}):")
    lines.append(f"    {_docstring(cls.description or f'Vertec class: {cls.name}')}")
    lines.extend(
        [
            "",
            "    def __getattr__(self, name: str) -> Any:",
            '        """Dynamic attribute access - allows any attribute"""',
            "        ...",
            "",
        ]
    )
    return "\n".join(lines)


def _all_block(names: list[str]) -> list[str]:
    return ["__all__ = [", *(f'    "{name}",' for name in names), "]", ""]


def init_stub(names: list[str]) -> str:
    lines = ['"""Vertec API Type Stubs - Minimal mode for type checking"""', ""]
    lines.extend(f"from .{name} import {name}" for name in names)
    lines.append("")
    lines.extend(_all_block(names))
    return "\n".join(lines)


def builtins_stub(names: list[str]) -> str:
    lines = [
        '"""Vertec Type Hints - Minimal stub for type checking"""',
        "from typing import TYPE_CHECKING",
        "",
        "if TYPE_CHECKING:",
    ]
    lines.extend(
        f"    from {PACKAGE_NAME}.{name} import {name} as {name}" for name in names
    )
    if not names:
        lines.append("    pass")
    lines.append("")
    lines.extend(_all_block(names))
    return "\n".join(lines)


def generate_stubs(classes: ClassSet, output_dir: Path) -> list[Path]:
    """Write the stub package for ``classes`` below ``output_dir``.

    Returns the paths of the per-class stub files written.
    """
    output_dir = Path(output_dir).expanduser()
    package_dir = output_dir / PACKAGE_NAME
    package_dir.mkdir(parents=True, exist_ok=True)

    names: list[str] = []
    written: list[Path] = []
    for cls in classes:
        if not is_stub_name(cls.name):
            logger.debug(f"Skipping stub for class with invalid name {cls.name!r}")
            continue
        if cls.name in names:
            continue

        path = package_dir / f"{cls.name}.pyi"
        path.write_text(class_stub(cls, classes), encoding="utf-8")
        names.append(cls.name)
        written.append(path)

    (package_dir / "__init__.pyi").write_text(init_stub(names), encoding="utf-8")
    (package_dir / "py.typed").write_text("", encoding="utf-8")
    (output_dir / "__builtins__.pyi").write_text(builtins_stub(names), encoding="utf-8")

    logger.info(f"Generated {len(written)} stub files in {package_dir}")
    return written

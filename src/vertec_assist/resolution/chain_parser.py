from __future__ import annotations

import re

from vertec_assist.resolution.models import ChainStep

CHAIN_PATTERN = r"\w+(?:\.\w+|\[[^\[\]]*\])*"

_RE_CHAIN = re.compile(CHAIN_PATTERN)
_RE_STEP = re.compile(r"(\w+)|\[[^\[\]]*\]")
_RE_COMPLETION_CONTEXT = re.compile(rf"({CHAIN_PATTERN})\.(\w*)$")
_RE_CHAIN_BEFORE_DOT = re.compile(rf"({CHAIN_PATTERN})\.$")


def parse_chain(chain: str) -> list[ChainStep]:
    """Split ``a.b[0].c`` into ordered steps.

    Returns an empty list for text that is not a plain access chain
    (calls, operators, a leading subscript).
    """
    chain = chain.strip()
    if not chain or not _RE_CHAIN.fullmatch(chain):
        return []

    steps = []
    for match in _RE_STEP.finditer(chain):
        if match.group(1) is not None:
            steps.append(ChainStep(name=match.group(1)))
        else:
            steps.append(ChainStep(is_subscript=True))
    return steps


def completion_context(text_before_cursor: str) -> tuple[str, str] | None:
    """Return (chain, partial) for text ending in ``chain.partial``."""
    match = _RE_COMPLETION_CONTEXT.search(text_before_cursor)
    if not match:
        return None
    return match.group(1), match.group(2)


def chain_before_dot(text: str) -> str | None:
    """Return the chain directly preceding a trailing dot, if any."""
    match = _RE_CHAIN_BEFORE_DOT.search(text)
    return match.group(1) if match else None

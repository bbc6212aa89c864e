"""Type inference for dot/subscript access chains in Vertec scripts.

Resolves chains like ``projekt.phasen[0].aktiv`` to the entity type they
denote and whether that value is a collection.

Key components:
- ChainResolver: walks a chain through members and associations
- VariableTypeTracker: finds the binding of the chain's base variable
- parse_chain: splits chain text into named and subscript steps

Usage:
    from vertec_assist.resolution import ChainResolver, Position

    resolver = ChainResolver(class_set)
    result = resolver.resolve_chain(text, Position(12, 8), "projekt.phasen[0]")
    if result.is_single:
        ...
"""

from vertec_assist.resolution.chain_parser import (
    chain_before_dot,
    completion_context,
    parse_chain,
)
from vertec_assist.resolution.chain_resolver import (
    ChainResolver,
    map_member_type,
    resolve_chain,
)
from vertec_assist.resolution.models import (
    BindingPattern,
    ChainResult,
    ChainStep,
    Position,
    ResolutionContext,
    SourceDocument,
    VariableBinding,
)
from vertec_assist.resolution.variable_tracker import VariableTypeTracker

__all__ = [
    "chain_before_dot",
    "completion_context",
    "parse_chain",
    "ChainResolver",
    "map_member_type",
    "resolve_chain",
    "BindingPattern",
    "ChainResult",
    "ChainStep",
    "Position",
    "ResolutionContext",
    "SourceDocument",
    "VariableBinding",
    "VariableTypeTracker",
]

"""
Collect literal constant assignments into a nested name -> value map.

The map mirrors module and class nesting: every namespace becomes a nested
dictionary keyed by its (possibly `::` qualified) name, every constant
assignment with a literal value becomes a leaf holding the literal node.
Namespaces that end up without constants are pruned.

Calls on the right-hand side are handed to a caller supplied resolver that may
compute a literal replacement; anything it cannot resolve is skipped.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

from emitter import render_node
from nodes import (
    Begin,
    Casgn,
    Cbase,
    Class,
    Const,
    False_,
    Float,
    Int,
    Module,
    Nil,
    Node,
    Send,
    Str,
    Sym,
    True_,
)

logger = logging.getLogger(__name__)

ConstantMap = Dict[str, Union[Node, "ConstantMap"]]
Resolver = Callable[[Send], Optional[Node]]

LITERAL_TYPES = (Int, Float, Sym, True_, False_, Nil, Str)


def make_constant_map() -> ConstantMap:
    return {}


def constant_name(node: Optional[Node]) -> Optional[str]:
    """
    Qualified name of a constant path (``A::B``), or None for other nodes.

    The top-level marker contributes an empty segment, so ``::A`` is keyed
    apart from a relative ``A``.
    """
    if isinstance(node, Cbase):
        return ""
    if isinstance(node, (Const, Casgn)):
        if node.scope is None:
            return node.name
        base = constant_name(node.scope)
        if base is None:
            return None
        return f"{base}::{node.name}"
    return None


def explore_constants(
    constants: ConstantMap,
    node: Optional[Node],
    resolver: Optional[Resolver] = None,
) -> None:
    """Record the literal constants defined by ``node`` into ``constants``."""
    if node is None:
        return
    if isinstance(node, (Module, Class)):
        _explore_namespace(constants, node, resolver)
    else:
        _explore_body(constants, node, resolver)


def _explore_namespace(constants: ConstantMap, node: Node, resolver: Optional[Resolver]) -> None:
    name = constant_name(node.name)
    if name is None:
        logger.debug("Skipping namespace with dynamic name: %s", node.name.type)
        return

    namespace = constants.get(name)
    if not isinstance(namespace, dict):
        namespace = make_constant_map()
        constants[name] = namespace

    if node.body is not None:
        _explore_body(namespace, node.body, resolver)

    if not namespace:
        del constants[name]


def _explore_body(constants: ConstantMap, node: Node, resolver: Optional[Resolver]) -> None:
    if isinstance(node, Casgn):
        _record_assignment(constants, node, resolver)
    elif isinstance(node, (Module, Class)):
        explore_constants(constants, node, resolver)
    elif isinstance(node, Begin):
        for statement in node.statements:
            _explore_body(constants, statement, resolver)


def _record_assignment(constants: ConstantMap, node: Casgn, resolver: Optional[Resolver]) -> None:
    value = node.value
    if isinstance(value, Send):
        if resolver is None:
            return
        value = resolver(value)
        if value is None:
            logger.debug("Resolver left %s unresolved", node.name)
            return

    if not isinstance(value, LITERAL_TYPES):
        return

    name = constant_name(node) or node.name
    constants[name] = value


def constants_to_source(constants: ConstantMap) -> Dict[str, Any]:
    """Render every leaf of the map as Ruby source, keeping the nesting."""
    rendered: Dict[str, Any] = {}
    for name, value in constants.items():
        if isinstance(value, dict):
            rendered[name] = constants_to_source(value)
        else:
            rendered[name] = render_node(value)
    return rendered


__all__ = [
    "ConstantMap",
    "LITERAL_TYPES",
    "Resolver",
    "constant_name",
    "constants_to_source",
    "explore_constants",
    "make_constant_map",
]

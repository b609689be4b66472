"""
Merge repeated class and module declarations.

Reopening a class is common in Ruby source that was concatenated from several
files. `combine_modules` folds every repeat declaration of a qualified name
into the first one, in place:

    class Foo            class Foo
      def a; end           def a; end
    end           ==>      def b; end
    class Foo            end
      def b; end
    end

When the first body leaves a bare visibility modifier (`private`, `protected`,
`module_function`) in effect, a bare `public` call is appended before the
merged statements so that the modifier does not leak into them.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from analyzer import constant_name
from nodes import Begin, Class, Module, Node, Send, is_statement_list

from .core import definition_body, normalize_definition_body

logger = logging.getLogger(__name__)

VISIBILITY_MODIFIERS = frozenset({"private", "protected", "module_function"})


def combine_modules(root: Optional[Node]) -> None:
    """Combine duplicate declarations in ``root`` and, recursively, in their bodies."""
    if root is None:
        return
    if is_statement_list(root):
        _combine_sequence(root)
    elif isinstance(root, (Class, Module)):
        _combine_sequence(normalize_definition_body(root))


def _combine_sequence(sequence: Begin) -> None:
    known: Dict[str, Node] = {}
    kept: List[Node] = []
    for statement in sequence.statements:
        if not isinstance(statement, (Class, Module)):
            kept.append(statement)
            continue

        name = constant_name(statement.name)
        if name is None:
            logger.debug("Leaving %s with dynamic name alone", statement.type)
            kept.append(statement)
            continue

        normalize_definition_body(statement)
        existing = known.get(name)
        if existing is None:
            _combine_sequence(statement.body)
            known[name] = statement
            kept.append(statement)
        else:
            _merge_declarations(existing, statement, name)

    sequence.statements = kept


def _merge_declarations(existing: Node, repeat: Node, name: str) -> None:
    target = definition_body(existing)
    addition = definition_body(repeat)

    if has_unresolved_visibility(target):
        target.statements.append(Send(None, "public"))
    target.statements.extend(addition.statements)
    addition.statements = []

    if isinstance(existing, Class) and isinstance(repeat, Class):
        if existing.superclass is None and repeat.superclass is not None:
            existing.superclass = repeat.superclass
            repeat.superclass = None

    logger.debug("Merged repeated %s %s", repeat.type, name)
    # Nested declarations that now sit side by side get merged as well.
    _combine_sequence(target)


def _visibility_call(node: Node) -> Optional[str]:
    if not isinstance(node, Send):
        return None
    if node.recv is not None or node.args or node.dot_l is not None or node.operator_l is not None:
        return None
    if node.method_name in VISIBILITY_MODIFIERS or node.method_name == "public":
        return node.method_name
    return None


def has_unresolved_visibility(body: Begin) -> bool:
    """True when the last bare visibility call of ``body`` is not `public`."""
    current: Optional[str] = None
    for statement in body.statements:
        modifier = _visibility_call(statement)
        if modifier is not None:
            current = modifier
    return current in VISIBILITY_MODIFIERS


__all__ = ["VISIBILITY_MODIFIERS", "combine_modules", "has_unresolved_visibility"]

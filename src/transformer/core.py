"""
Shared plumbing for the in-place tree transforms.

Transforms mutate the tree they are given: they replace a child field, splice a
statement list into another, or rewrite leaf identifier strings. Subtrees are
moved between owners, never referenced from two places at once.
"""

from __future__ import annotations

from typing import Optional

from nodes import Begin, Node, is_statement_list, normalize_body


class TransformError(RuntimeError):
    """Raised when a transform finds the tree in a shape it cannot handle."""

    def __init__(self, message: str, node: Optional[Node] = None):
        loc = ""
        if node is not None and node.expression_l is not None:
            loc = f" (offset {node.expression_l.begin})"
        super().__init__(f"{message}{loc}")
        self.node = node


def normalize_definition_body(node: Node) -> Begin:
    """Replace ``node.body`` by its statement-sequence form and return it."""
    node.body = normalize_body(node.body)
    return node.body


def definition_body(node: Node) -> Begin:
    """Return the already normalized body of a class or module declaration."""
    body = getattr(node, "body", None)
    if not is_statement_list(body):
        kind = body.type if body is not None else "nothing"
        raise TransformError(
            f"Expected a normalized statement body on {node.type}, found {kind}", node
        )
    return body


__all__ = ["TransformError", "definition_body", "normalize_definition_body"]

"""Tag based dispatch over the node tree."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from .tree import Node, iter_child_nodes


class NodeVisitor:
    """
    Walk a node tree calling ``visit_<tag>`` for each node kind.

    Kinds without a handler fall through to ``generic_visit``, which visits the
    children in declaration order. Extra positional arguments are threaded
    through unchanged so subclasses can carry per-walk state (a rename table,
    a writer context) without storing it on the instance.
    """

    def visit(self, node: Node, *args: Any) -> Any:
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is None:
            return self.generic_visit(node, *args)
        return handler(node, *args)

    def generic_visit(self, node: Node, *args: Any) -> None:
        self.visit_sequence(iter_child_nodes(node), *args)

    def visit_optional(self, node: Optional[Node], *args: Any) -> None:
        if node is not None:
            self.visit(node, *args)

    def visit_sequence(self, nodes: Iterable[Node], *args: Any) -> None:
        for node in list(nodes):
            self.visit(node, *args)


__all__ = ["NodeVisitor"]

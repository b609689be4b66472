"""
Rename local variables and parameters to a canonical short alphabet.

Every method, class, module and singleton class body starts a fresh
`RenameTable`; blocks work on a copy of the enclosing table. Parameters are
registered in declaration order, so `def m(foo, bar)` becomes `def m(a, b)`,
and every local read or write in the scope is rewritten through the table.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Set

from analyzer import BindingKind, RenameTable, ScopeType
from nodes import Class, Def, Defs, MatchVar, Module, Node, NodeVisitor, SClass, iter_child_nodes

logger = logging.getLogger(__name__)

NUMBERED_PARAMETER = re.compile(r"\A_[1-9]\Z")

SCOPE_TYPES = (Def, Defs, Class, Module, SClass)


def pattern_binders(node: Optional[Node]) -> Set[str]:
    """Names bound by pattern matching in ``node``, not entering nested scopes."""
    names: Set[str] = set()
    stack = [node] if node is not None else []
    while stack:
        current = stack.pop()
        if isinstance(current, MatchVar):
            names.add(current.name)
        for child in iter_child_nodes(current):
            if not isinstance(child, SCOPE_TYPES):
                stack.append(child)
    return names


def _fresh_table(scope_type: ScopeType, *bodies: Optional[Node]) -> RenameTable:
    table = RenameTable(scope_type)
    for body in bodies:
        table.reserve(pattern_binders(body))
    return table


class VariableRenamer(NodeVisitor):
    """Walks a tree threading the rename table of the current scope."""

    def rename(self, root: Node) -> RenameTable:
        table = _fresh_table(ScopeType.PROGRAM, root)
        self.visit(root, table)
        return table

    # -------------------------------------------------------------- scopes

    def _visit_method(self, node: Node) -> None:
        table = _fresh_table(ScopeType.METHOD, node.args, node.body)
        self.visit_optional(node.args, table)
        self.visit_optional(node.body, table)
        renamed = table.renamed_bindings()
        if renamed:
            logger.debug(
                "Renamed %d local(s) in %s: %s",
                len(renamed),
                node.name,
                ", ".join(f"{b.name}->{b.alias}" for b in renamed),
            )

    def visit_def(self, node, table: RenameTable) -> None:
        self._visit_method(node)

    def visit_defs(self, node, table: RenameTable) -> None:
        self.visit(node.definee, table)
        self._visit_method(node)

    def visit_class(self, node, table: RenameTable) -> None:
        self.visit(node.name, table)
        self.visit_optional(node.superclass, table)
        self.visit_optional(node.body, _fresh_table(ScopeType.MODULE, node.body))

    def visit_module(self, node, table: RenameTable) -> None:
        self.visit(node.name, table)
        self.visit_optional(node.body, _fresh_table(ScopeType.MODULE, node.body))

    def visit_sclass(self, node, table: RenameTable) -> None:
        self.visit(node.expr, table)
        self.visit_optional(node.body, _fresh_table(ScopeType.MODULE, node.body))

    def visit_block(self, node, table: RenameTable) -> None:
        self.visit(node.call, table)
        inner = table.copy(ScopeType.BLOCK)
        self.visit_optional(node.args, inner)
        self.visit_optional(node.body, inner)

    def visit_numblock(self, node, table: RenameTable) -> None:
        self.visit(node.call, table)
        self.visit(node.body, table.copy(ScopeType.BLOCK))

    # ---------------------------------------------------------- parameters

    def _rename_parameter(self, node, table: RenameTable) -> None:
        if node.name is not None:
            node.name = table.resolve(node.name, BindingKind.PARAMETER)

    def visit_arg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)

    def visit_kwarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)

    def visit_restarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)

    def visit_kwrestarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)

    def visit_blockarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)

    def visit_shadowarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)

    def visit_optarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)
        self.visit(node.default, table)

    def visit_kwoptarg(self, node, table: RenameTable) -> None:
        self._rename_parameter(node, table)
        self.visit(node.default, table)

    # -------------------------------------------------------------- locals

    def visit_lvar(self, node, table: RenameTable) -> None:
        if NUMBERED_PARAMETER.match(node.name):
            return
        node.name = table.resolve(node.name)

    def visit_lvasgn(self, node, table: RenameTable) -> None:
        node.name = table.resolve(node.name)
        self.visit_optional(node.value, table)

    def visit_match_var(self, node, table: RenameTable) -> None:
        node.name = table.pin(node.name)


def rename_variables(root: Optional[Node]) -> None:
    """Rewrite local variable and parameter names of ``root`` in place."""
    if root is None:
        return
    VariableRenamer().rename(root)


__all__ = ["VariableRenamer", "rename_variables"]

"""Append a marker string statement to module bodies."""

from __future__ import annotations

import logging
from typing import List, Optional

from nodes import Module, Node, Str, is_statement_list, synthetic_loc

from .core import normalize_definition_body

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "test"


def insert_marker(root: Optional[Node], text: str = DEFAULT_MARKER) -> int:
    """
    Append ``"text"`` as the last statement of the root module.

    When the root is a statement sequence every top-level module receives the
    marker. Returns the number of modules changed.
    """
    if isinstance(root, Module):
        modules: List[Module] = [root]
    elif is_statement_list(root):
        modules = [statement for statement in root.statements if isinstance(statement, Module)]
    else:
        modules = []

    for module in modules:
        body = normalize_definition_body(module)
        body.statements.append(Str(text, begin_l=synthetic_loc(), end_l=synthetic_loc()))

    logger.debug("Inserted marker %r into %d module(s)", text, len(modules))
    return len(modules)


__all__ = ["DEFAULT_MARKER", "insert_marker"]

"""Immutable rendering context threaded through the code writer."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

INDENT_UNIT = "  "


@dataclass(frozen=True)
class WriterContext:
    """
    Indentation depth plus the tag of the node that is rendering a child.

    Derivations return new values; a context is never mutated or shared between
    sibling calls.
    """

    indent: int = 0
    parent_kind: Optional[str] = None

    def child(self, parent_kind: Optional[str]) -> "WriterContext":
        return replace(self, parent_kind=parent_kind)

    def indented(self) -> "WriterContext":
        return replace(self, indent=self.indent + 1)

    def outdented(self) -> "WriterContext":
        return replace(self, indent=max(self.indent - 1, 0))

    @property
    def padding(self) -> str:
        return INDENT_UNIT * self.indent


__all__ = ["INDENT_UNIT", "WriterContext"]

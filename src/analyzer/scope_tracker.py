"""
Rename tables for local variable canonicalisation.

A `RenameTable` belongs to one lexical scope (the program, a method body, a
class or module body, a block). It maps each original local name to a short
alias drawn from a fixed alphabet, handing out the next unused letter the first
time a name is seen. Blocks start from a copy of the enclosing table so they can
extend the naming without changing it for the outer scope.

Two degenerate cases are settled here rather than by callers:

* once the alphabet is exhausted, further names keep their original spelling
  (suffixed with `_` when that spelling is already some other name's alias);
* names bound by pattern matching are pinned: they are recorded without an
  alias and later occurrences keep the original name too. The renamer reserves
  a scope's binder names up front so no other local is handed the same letter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)

ALIAS_ALPHABET = tuple("abcdefghijklmnopqrstuvwxyz")


class ScopeType(str, Enum):
    PROGRAM = "program"
    METHOD = "method"
    MODULE = "module"
    BLOCK = "block"


class BindingKind(str, Enum):
    PARAMETER = "parameter"
    LOCAL = "local"
    PATTERN = "pattern"


@dataclass(frozen=True)
class Binding:
    """A name registered in a scope together with the alias it renders as."""

    name: str
    alias: str
    kind: BindingKind

    @property
    def renamed(self) -> bool:
        return self.alias != self.name


@dataclass
class RenameTable:
    scope_type: ScopeType
    bindings: Dict[str, Binding] = field(default_factory=dict)
    next_letter: int = 0
    reserved: Set[str] = field(default_factory=set)

    @property
    def exhausted(self) -> bool:
        return self._next_free_letter() is None

    def lookup(self, name: str) -> Optional[Binding]:
        return self.bindings.get(name)

    def reserve(self, names: Iterable[str]) -> None:
        """Keep ``names`` (pattern binders of the scope) out of the alias pool."""
        self.reserved.update(names)

    def _taken(self) -> Set[str]:
        return {binding.alias for binding in self.bindings.values()}

    def _next_free_letter(self) -> Optional[int]:
        taken = self._taken() | self.reserved
        for index in range(self.next_letter, len(ALIAS_ALPHABET)):
            if ALIAS_ALPHABET[index] not in taken:
                return index
        return None

    def resolve(self, name: str, kind: BindingKind = BindingKind.LOCAL) -> str:
        """Return the alias for ``name``, assigning the next free letter on first use."""
        binding = self.bindings.get(name)
        if binding is not None:
            return binding.alias

        index = self._next_free_letter()
        if index is None:
            logger.debug("Alias alphabet exhausted in %s scope; keeping %r", self.scope_type.value, name)
            alias = name
            taken = self._taken()
            while alias in taken:
                alias += "_"
        else:
            alias = ALIAS_ALPHABET[index]
            self.next_letter = index + 1
        self.bindings[name] = Binding(name=name, alias=alias, kind=kind)
        return alias

    def pin(self, name: str) -> str:
        """
        Register a pattern binder so that it and later reads keep their spelling.

        A name already bound in the scope is the same local, so it keeps the
        alias it has; the alias in effect is returned.
        """
        binding = self.bindings.get(name)
        if binding is not None:
            return binding.alias
        self.bindings[name] = Binding(name=name, alias=name, kind=BindingKind.PATTERN)
        return name

    def copy(self, scope_type: ScopeType = ScopeType.BLOCK) -> "RenameTable":
        return RenameTable(
            scope_type=scope_type,
            bindings=dict(self.bindings),
            next_letter=self.next_letter,
            reserved=set(self.reserved),
        )

    def renamed_bindings(self) -> List[Binding]:
        return [binding for binding in self.bindings.values() if binding.renamed]


__all__ = [
    "ALIAS_ALPHABET",
    "Binding",
    "BindingKind",
    "RenameTable",
    "ScopeType",
]

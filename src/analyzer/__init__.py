"""Read-only analyses over Ruby node trees: rename scopes and constant maps."""

from .constants import (
    ConstantMap,
    Resolver,
    constant_name,
    constants_to_source,
    explore_constants,
    make_constant_map,
)
from .scope_tracker import (
    ALIAS_ALPHABET,
    Binding,
    BindingKind,
    RenameTable,
    ScopeType,
)

__all__ = [
    "ALIAS_ALPHABET",
    "Binding",
    "BindingKind",
    "ConstantMap",
    "RenameTable",
    "Resolver",
    "ScopeType",
    "constant_name",
    "constants_to_source",
    "explore_constants",
    "make_constant_map",
]

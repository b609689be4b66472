"""In-place source-to-source transforms over Ruby node trees."""

from .combiner import combine_modules, has_unresolved_visibility
from .core import TransformError, definition_body, normalize_definition_body
from .markers import insert_marker
from .renamer import VariableRenamer, rename_variables

__all__ = [
    "TransformError",
    "VariableRenamer",
    "combine_modules",
    "definition_body",
    "has_unresolved_visibility",
    "insert_marker",
    "normalize_definition_body",
    "rename_variables",
]

"""Utilities for rendering Ruby node trees back to source code."""

from .context import WriterContext
from .documentation import Comment, DocumentationContext
from .writer import (
    CodeWriter,
    EmitOptions,
    EmitResult,
    UnsupportedNodeError,
    emit_module,
    render_node,
    write_code,
)

__all__ = [
    "CodeWriter",
    "Comment",
    "DocumentationContext",
    "EmitOptions",
    "EmitResult",
    "UnsupportedNodeError",
    "WriterContext",
    "emit_module",
    "render_node",
    "write_code",
]

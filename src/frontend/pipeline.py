"""
Front-end integration utilities stitching together parsing and comment lookup.

The `run_frontend` function accepts raw Ruby source, invokes the parser to
obtain a node tree, optionally builds the documentation context the writer uses
to re-attach leading comments, and persists cached artefacts when requested.
`load_tree` reads a tree back from its JSON form, either a bare serialized node
or a cached parse result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from emitter import DocumentationContext
from nodes import Node, NodeFormatError, node_from_dict
from parser import ParseResult, parse_ruby

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from the parsing pipeline."""

    parse: ParseResult
    documentation: Optional[DocumentationContext]

    @property
    def has_ast(self) -> bool:
        return self.parse.ast is not None

    @property
    def diagnostics(self):
        return list(self.parse.errors)


def run_frontend(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    documentation: bool = False,
    exclude_method_body: bool = False,
    cache_dir: Optional[Union[str, Path]] = None,
) -> FrontEndResult:
    """
    Parse Ruby input and prepare what the writer needs to render it back.

    Args:
        source: Raw Ruby source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: Forwarded to the parser; when False syntax errors raise.
        documentation: Build a documentation context from the parsed comments.
        exclude_method_body: Render methods as signatures only (implies
            `documentation`).
        cache_dir: Optional directory to write parse artefacts (`None` disables).

    Returns:
        FrontEndResult containing the parser output and optional documentation.
    """
    parse_result = parse_ruby(source, source_name=source_name, tolerant=tolerant)

    context: Optional[DocumentationContext] = None
    if documentation or exclude_method_body:
        context = DocumentationContext(
            parse_result.comments,
            source,
            exclude_method_body=exclude_method_body,
        )

    if cache_dir is not None:
        _persist_parse(cache_dir, parse_result)

    return FrontEndResult(parse=parse_result, documentation=context)


def load_tree(text: str) -> Optional[Node]:
    """Load a node tree from JSON produced by `node_to_dict` or `ParseResult.to_json`."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise NodeFormatError(f"Invalid JSON tree: {exc}") from exc
    if isinstance(payload, dict) and "type" not in payload and "ast" in payload:
        payload = payload["ast"]
    if payload is None:
        return None
    return node_from_dict(payload)


def _persist_parse(cache_dir: Union[str, Path], parse_result: ParseResult) -> None:
    """Store the raw parse output to disk for reuse in subsequent runs."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    cache_file = path / f"{parse_result.source_hash}.json"
    cache_file.write_text(parse_result.to_json(), encoding="utf-8")
    logger.debug("Cached parse of %s at %s", parse_result.source_name, cache_file)


__all__ = ["FrontEndResult", "load_tree", "run_frontend"]

"""
Command-line interface for rewriting Ruby source files.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from analyzer import constants_to_source, explore_constants, make_constant_map
from emitter import DocumentationContext, EmitOptions, UnsupportedNodeError, emit_module
from frontend import load_tree, run_frontend
from nodes import Node, NodeFormatError
from parser import RubySyntaxError
from transformer import TransformError, combine_modules, insert_marker, rename_variables

logger = logging.getLogger("rbunparse")

USAGE_HINT = (
    "usage: rbunparse <source-file> <instruction>\n"
    "instructions: write, edit_method, combine_modules, explore_constants, insert_marker\n"
)


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def _print_diagnostics(messages: List[str]) -> None:
    if not messages:
        return
    for message in messages:
        sys.stderr.write(message + "\n")


def _write_only(root: Optional[Node]) -> None:
    return None


TRANSFORMS: Dict[str, Callable[[Optional[Node]], object]] = {
    "write": _write_only,
    "edit_method": rename_variables,
    "combine_modules": combine_modules,
    "insert_marker": insert_marker,
}

INSTRUCTIONS = sorted([*TRANSFORMS, "explore_constants"])


def _load(args: argparse.Namespace, input_path: Path, source: str):
    """Return the tree, the documentation context and the diagnostic lines."""
    if input_path.suffix == ".json":
        return load_tree(source), None, []

    frontend_result = run_frontend(
        source,
        source_name=str(input_path),
        tolerant=not args.strict,
        documentation=args.docs,
        exclude_method_body=args.skeleton,
        cache_dir=args.cache_dir,
    )
    diagnostics = []
    for error in frontend_result.parse.errors:
        loc = _format_location(error.line, error.column)
        diagnostics.append(f"ERROR {input_path}{loc}: {error.description}")
    return frontend_result.parse.ast, frontend_result.documentation, diagnostics


def run_command(args: argparse.Namespace) -> int:
    if args.instruction not in INSTRUCTIONS:
        sys.stderr.write(f"ERROR: Unknown instruction: {args.instruction}\n")
        sys.stderr.write(USAGE_HINT)
        return 1

    input_path = Path(args.source).resolve()
    logger.debug("Running %s on %s", args.instruction, input_path)
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return 1

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return 1

    try:
        root, documentation, diagnostics = _load(args, input_path, source)
    except RubySyntaxError as exc:
        for error in exc.errors:
            loc = _format_location(error.line, error.column)
            sys.stderr.write(f"ERROR {input_path}{loc}: {error.description}\n")
        return 1
    except NodeFormatError as exc:
        sys.stderr.write(f"ERROR {input_path}: {exc}\n")
        return 1

    if args.instruction == "explore_constants":
        constants = make_constant_map()
        explore_constants(constants, root)
        output = json.dumps(constants_to_source(constants), indent=2, ensure_ascii=False) + "\n"
    else:
        try:
            TRANSFORMS[args.instruction](root)
            output = _render(root, documentation, args.strict, input_path, diagnostics)
        except TransformError as exc:
            sys.stderr.write(f"ERROR: Transformation failed: {exc}\n")
            return 1
        except UnsupportedNodeError as exc:
            sys.stderr.write(f"ERROR: Rendering failed: {exc}\n")
            return 1

    if args.out:
        output_path = Path(args.out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    _print_diagnostics(diagnostics)

    has_errors = any(message.startswith("ERROR") for message in diagnostics)
    if args.strict and diagnostics:
        has_errors = True
    return 1 if has_errors else 0


def _render(
    root: Optional[Node],
    documentation: Optional[DocumentationContext],
    strict: bool,
    input_path: Path,
    diagnostics: List[str],
) -> str:
    emit_result = emit_module(root, EmitOptions(strict=strict, documentation=documentation))
    for message in emit_result.diagnostics:
        diagnostics.append(f"WARNING {input_path}: {message}")
    return emit_result.source


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rbunparse",
        description="Parse a Ruby file, apply an instruction and write the source back",
    )
    parser.add_argument("source", help="Path to the Ruby file (or a JSON node tree)")
    parser.add_argument(
        "instruction",
        help=f"One of: {', '.join(INSTRUCTIONS)}",
    )
    parser.add_argument("--out", help="Output file path (defaults to stdout)")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Disable tolerant parsing and fail on unsupported nodes.",
    )
    parser.add_argument(
        "--docs",
        action="store_true",
        help="Re-attach leading comments to definitions.",
    )
    parser.add_argument(
        "--skeleton",
        action="store_true",
        help="Render method signatures and their comments without bodies.",
    )
    parser.add_argument("--cache-dir", help="Directory to store parse results as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())

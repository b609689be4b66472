"""
Ruby parsing built on `tree-sitter` and the `tree-sitter-ruby` grammar.

`parse_ruby` runs the concrete syntax tree produced by tree-sitter through a
converter that builds the typed node tree from `nodes`. The converter tracks
local variable scopes the way Ruby does, so that a bare identifier becomes a
local read when a prior assignment or parameter declared it and a receiver-less
call otherwise. Presence markers (quotes, brackets, parentheses, `do`) are
recorded from the tokens tree-sitter reports.

Syntax errors and constructs without a tree equivalent are reported as
`ParseError` diagnostics and replaced by a placeholder string node. Callers can
opt into strict handling with ``tolerant=False``, in which case syntax errors
raise `RubySyntaxError`.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Tuple

import tree_sitter_ruby
from tree_sitter import Language, Parser

from emitter import Comment
from nodes import (
    Alias,
    And,
    AndAsgn,
    Arg,
    Args,
    Array,
    ArrayPattern,
    BackRef,
    Begin,
    Block,
    Blockarg,
    BlockPass,
    Break,
    Case,
    CaseMatch,
    Casgn,
    Cbase,
    Class,
    Complex,
    Const,
    ConstPattern,
    CSend,
    Cvar,
    Cvasgn,
    Def,
    Defined,
    Defs,
    Dstr,
    Dsym,
    EmptyElse,
    Encoding,
    Ensure,
    Erange,
    False_,
    File,
    FindPattern,
    Float,
    For,
    ForwardArg,
    ForwardedArgs,
    Gvar,
    Gvasgn,
    Hash,
    HashPattern,
    Heredoc,
    If,
    IfGuard,
    IfMod,
    IfTernary,
    Index,
    IndexAsgn,
    InPattern,
    Int,
    Irange,
    Ivar,
    Ivasgn,
    Kwargs,
    KwBegin,
    Kwarg,
    Kwnilarg,
    Kwoptarg,
    Kwrestarg,
    Kwsplat,
    Lambda,
    Line,
    Loc,
    Lvar,
    Lvasgn,
    Masgn,
    MatchAlt,
    MatchAs,
    MatchNilPattern,
    MatchPattern,
    MatchPatternP,
    MatchRest,
    MatchVar,
    Mlhs,
    Module,
    Next,
    Nil,
    Node,
    NthRef,
    Numblock,
    OpAsgn,
    Optarg,
    Or,
    OrAsgn,
    Pair,
    Pin,
    Postexe,
    Preexe,
    Rational,
    Redo,
    Regexp,
    RegOpt,
    Rescue,
    RescueBody,
    Restarg,
    Retry,
    Return,
    SClass,
    Self_,
    Send,
    Shadowarg,
    Splat,
    Str,
    Super,
    Sym,
    True_,
    Undef,
    UnlessGuard,
    Until,
    UntilPost,
    When,
    While,
    WhilePost,
    Xstr,
    Yield,
    ZSuper,
    is_statement_list,
    node_to_dict,
    statements_to_node,
    synthetic_loc,
)

logger = logging.getLogger(__name__)

RUBY_LANGUAGE = Language(tree_sitter_ruby.language())

UNSUPPORTED = "unsupported"

_SKIPPED_TYPES = frozenset({"comment", "heredoc_body", "empty_statement", "uninterpreted"})
_BODY_WRAPPERS = frozenset({"body_statement", "block_body", "then", "do"})
_KEYWORD_NODES = {"__FILE__": File, "__LINE__": Line, "__ENCODING__": Encoding}
_BACK_REFS = frozenset({"$&", "$`", "$'", "$+"})
_NTH_REF = re.compile(r"\A\$([1-9][0-9]*)\Z")
_NUMBERED_PARAMETER = re.compile(r"\A_([1-9])\Z")
_TRAILING_FLAGS = re.compile(r"[a-z]*\Z")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "s": " ",
    "r": "\r",
    "e": "\x1b",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}


@dataclass(frozen=True)
class ParseError:
    """Represents a syntax error or an unsupported construct."""

    description: str
    line: Optional[int]
    column: Optional[int]


class RubySyntaxError(ValueError):
    """Raised for invalid source when tolerant parsing is disabled."""

    def __init__(self, errors: List[ParseError]):
        first = errors[0]
        super().__init__(f"{first.description} (line {first.line}, column {first.column})")
        self.errors = errors


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of the node tree plus metadata about the parse run."""

    ast: Optional[Node]
    comments: List[Comment]
    errors: List[ParseError]
    source_hash: str
    source_name: str

    def to_json(self) -> str:
        """Serialise the parse result to JSON for debugging or caching."""
        payload = {
            "ast": node_to_dict(self.ast) if self.ast is not None else None,
            "comments": [[comment.begin, comment.end] for comment in self.comments],
            "errors": [error.__dict__ for error in self.errors],
            "source_hash": self.source_hash,
            "source_name": self.source_name,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)


def _hash_source(source: str) -> str:
    """Create a deterministic hash for cache keying."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def decode_escape(sequence: str) -> str:
    """Decode one backslash escape of a double-quoted Ruby string."""
    body = sequence[1:]
    if not body:
        return sequence
    head = body[0]
    if head == "\n":
        return ""
    if head == "u":
        if body[1:2] == "{":
            return "".join(chr(int(code, 16)) for code in body[2:].rstrip("}").split())
        return chr(int(body[1:5], 16))
    if head == "x" and len(body) > 1:
        return chr(int(body[1:3], 16))
    if head in "01234567":
        return chr(int(body[:3], 8))
    if head in ("c", "C") and len(body) > 1:
        return chr(ord(body[-1]) & 0x1F)
    if head == "M" and len(body) > 2:
        return chr(ord(body[-1]) | 0x80)
    if len(body) == 1 and head in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[head]
    return body


def _unescape_single(raw: str, delimiters: str) -> str:
    """Undo the escapes a single-quoted literal understands."""
    result: List[str] = []
    index = 0
    while index < len(raw):
        char = raw[index]
        following = raw[index + 1 : index + 2]
        if char == "\\" and following and (following == "\\" or following in delimiters):
            result.append(following)
            index += 2
            continue
        result.append(char)
        index += 1
    return "".join(result)


def _closing_for(opening: str) -> str:
    pairs = {"(": ")", "[": "]", "{": "}", "<": ">"}
    return pairs.get(opening, opening)


@dataclass
class _LocalScope:
    names: Set[str] = field(default_factory=set)
    inherits: bool = False


class _TreeConverter:
    def __init__(self, source: bytes) -> None:
        self._source = source
        self._scopes: List[_LocalScope] = [_LocalScope()]
        self._numbered: List[int] = []
        self._heredoc_bodies: List = []
        self.comments: List[Comment] = []
        self.errors: List[ParseError] = []

    # ------------------------------------------------------------------ helpers

    def _text(self, ts) -> str:
        return self._source[ts.start_byte : ts.end_byte].decode("utf-8")

    def _slice(self, start: int, end: int) -> str:
        return self._source[start:end].decode("utf-8")

    @staticmethod
    def _loc(ts) -> Loc:
        return Loc(ts.start_byte, ts.end_byte)

    @staticmethod
    def _named(ts) -> List:
        return [child for child in ts.named_children if child.type not in _SKIPPED_TYPES]

    @staticmethod
    def _token(ts, kind: str):
        for child in ts.children:
            if not child.is_named and child.type == kind:
                return child
        return None

    def _make(self, node_class, ts, *args, **kwargs) -> Node:
        return node_class(*args, expression_l=self._loc(ts), **kwargs)

    def _position(self, ts) -> Tuple[int, int]:
        row, column = ts.start_point
        return row + 1, column

    def _unsupported(self, ts, message: str) -> Node:
        line, column = self._position(ts)
        self.errors.append(ParseError(description=message, line=line, column=column))
        logger.debug("%s at %s:%s", message, line, column)
        return self._make(Str, ts, UNSUPPORTED)

    # ------------------------------------------------------------------ scopes

    @contextmanager
    def _scope(self, inherits: bool) -> Iterator[_LocalScope]:
        scope = _LocalScope(inherits=inherits)
        self._scopes.append(scope)
        try:
            yield scope
        finally:
            self._scopes.pop()

    def _declare(self, name: Optional[str]) -> None:
        if name:
            self._scopes[-1].names.add(name)

    def _is_local(self, name: str) -> bool:
        for scope in reversed(self._scopes):
            if name in scope.names:
                return True
            if not scope.inherits:
                return False
        return False

    # --------------------------------------------------------------- traversal

    def scan(self, root) -> None:
        """Collect comments, heredoc bodies and syntax errors in document order."""
        stack = [root]
        while stack:
            ts = stack.pop()
            if ts.type == "comment":
                end = ts.end_byte
                if self._source[end : end + 1] == b"\n":
                    end += 1
                self.comments.append(Comment(ts.start_byte, end))
                continue
            if ts.type == "heredoc_body":
                self._heredoc_bodies.append(ts)
            if ts.type == "ERROR" or ts.is_missing:
                line, column = self._position(ts)
                if ts.is_missing:
                    description = f"Missing {ts.type}"
                else:
                    snippet = self._text(ts).strip().splitlines()
                    description = f"Syntax error near {snippet[0][:40]!r}" if snippet else "Syntax error"
                self.errors.append(ParseError(description=description, line=line, column=column))
            stack.extend(reversed(ts.children))
        self.comments.sort(key=lambda comment: comment.begin)
        self._heredoc_bodies.sort(key=lambda ts: ts.start_byte)

    def convert(self, ts) -> Node:
        handler = getattr(self, f"_convert_{ts.type}", None)
        if handler is None:
            return self._unsupported(ts, f"Unsupported syntax: {ts.type}")
        return handler(ts)

    def _optional(self, ts) -> Optional[Node]:
        return self.convert(ts) if ts is not None else None

    def _statements(self, children) -> List[Node]:
        return [self.convert(child) for child in children if child.type not in _SKIPPED_TYPES]

    def _statements_node(self, ts) -> Optional[Node]:
        if ts is None:
            return None
        return statements_to_node(self._statements(self._named(ts)))

    def _body_children(self, ts, *exclude: str) -> List:
        body = ts.child_by_field_name("body")
        if body is not None:
            if body.type in _BODY_WRAPPERS:
                return self._named(body)
            return [body]
        excluded: Set[int] = set()
        for name in exclude:
            excluded.update(child.id for child in ts.children_by_field_name(name))
        return [child for child in self._named(ts) if child.id not in excluded]

    def _body(self, children) -> Optional[Node]:
        """Build a body, folding `rescue`/`else`/`ensure` clauses around it."""
        statements: List = []
        clauses: List[Node] = []
        else_clause = None
        ensure_clause = None
        for child in children:
            if child.type == "rescue":
                clauses.append(self._rescue_clause(child))
            elif child.type == "else":
                else_clause = child
            elif child.type == "ensure":
                ensure_clause = child
            else:
                statements.append(child)

        body = statements_to_node(self._statements(statements))
        if clauses or else_clause is not None:
            body = Rescue(body, clauses, self._statements_node(else_clause))
        if ensure_clause is not None:
            body = Ensure(body, self._statements_node(ensure_clause))
        return body

    def _rescue_clause(self, ts) -> RescueBody:
        exceptions = ts.child_by_field_name("exceptions")
        variable = ts.child_by_field_name("variable")
        exc_list = None
        if exceptions is not None:
            exc_list = self._make(
                Array, exceptions, [self.convert(child) for child in self._named(exceptions)]
            )
        exc_var = None
        if variable is not None:
            targets = self._named(variable)
            exc_var = self._target(targets[0]) if targets else None
        body = statements_to_node(self._statements(self._body_children(ts, "exceptions", "variable")))
        return self._make(RescueBody, ts, exc_list, exc_var, body)

    # ---------------------------------------------------------------- program

    def _convert_program(self, ts) -> Optional[Node]:
        return statements_to_node(self._statements(self._named(ts)))

    def _convert_body_statement(self, ts):
        return self._body(self._named(ts))

    def _convert_parenthesized_statements(self, ts):
        return self._make(
            Begin,
            ts,
            self._statements(self._named(ts)),
            begin_l=Loc(ts.start_byte, ts.start_byte + 1),
            end_l=Loc(ts.end_byte - 1, ts.end_byte),
        )

    def _convert_ERROR(self, ts):
        # Already reported by the scan.
        return self._make(Str, ts, UNSUPPORTED)

    # ------------------------------------------------------------ identifiers

    def _convert_identifier(self, ts):
        name = self._text(ts)
        if name in _KEYWORD_NODES:
            return self._make(_KEYWORD_NODES[name], ts)
        numbered = _NUMBERED_PARAMETER.match(name)
        if numbered and self._numbered and not self._is_local(name):
            self._numbered[-1] = max(self._numbered[-1], int(numbered.group(1)))
            return self._make(Lvar, ts, name)
        if self._is_local(name):
            return self._make(Lvar, ts, name)
        return self._make(Send, ts, None, name)

    def _convert_constant(self, ts):
        return self._make(Const, ts, None, self._text(ts))

    def _convert_instance_variable(self, ts):
        return self._make(Ivar, ts, self._text(ts))

    def _convert_class_variable(self, ts):
        return self._make(Cvar, ts, self._text(ts))

    def _convert_global_variable(self, ts):
        name = self._text(ts)
        nth = _NTH_REF.match(name)
        if nth:
            return self._make(NthRef, ts, nth.group(1))
        if name in _BACK_REFS:
            return self._make(BackRef, ts, name)
        return self._make(Gvar, ts, name)

    def _convert_scope_resolution(self, ts):
        scope_ts = ts.child_by_field_name("scope")
        name_ts = ts.child_by_field_name("name")
        separator = self._token(ts, "::")
        scope = self.convert(scope_ts) if scope_ts is not None else self._make(Cbase, ts)
        double_colon_l = self._loc(separator) if separator is not None else synthetic_loc(2)
        if name_ts.type != "constant":
            return self._make(Send, ts, scope, self._text(name_ts), dot_l=double_colon_l)
        return self._make(Const, ts, scope, self._text(name_ts), double_colon_l=double_colon_l)

    def _convert_self(self, ts):
        return self._make(Self_, ts)

    def _convert_nil(self, ts):
        return self._make(Nil, ts)

    def _convert_true(self, ts):
        return self._make(True_, ts)

    def _convert_false(self, ts):
        return self._make(False_, ts)

    def _convert_super(self, ts):
        return self._make(ZSuper, ts)

    def _convert_file(self, ts):
        return self._make(File, ts)

    def _convert_line(self, ts):
        return self._make(Line, ts)

    def _convert_encoding(self, ts):
        return self._make(Encoding, ts)

    # --------------------------------------------------------------- literals

    def _convert_integer(self, ts):
        return self._make(Int, ts, self._text(ts))

    def _convert_float(self, ts):
        return self._make(Float, ts, self._text(ts))

    def _convert_rational(self, ts):
        return self._make(Rational, ts, self._text(ts))

    def _convert_complex(self, ts):
        return self._make(Complex, ts, self._text(ts))

    def _literal_parts(self, ts, start: int, end: int, *, decode: bool = True) -> List[Node]:
        """
        Split the content of a literal into string fragments and interpolations.

        Text between the named children (and any gap tree-sitter leaves
        unclaimed) is literal; escape sequences are decoded when ``decode``.
        """
        parts: List[Node] = []
        literal: List[str] = []
        cursor = start

        def flush() -> None:
            if literal:
                parts.append(Str("".join(literal)))
                literal.clear()

        for child in ts.children:
            if not child.is_named or child.start_byte < start or child.end_byte > end:
                continue
            if child.start_byte > cursor:
                literal.append(self._slice(cursor, child.start_byte))
            if child.type == "interpolation":
                flush()
                parts.append(self._interpolation(child))
            elif child.type == "escape_sequence" and decode:
                literal.append(decode_escape(self._text(child)))
            else:
                literal.append(self._text(child))
            cursor = child.end_byte
        if cursor < end:
            literal.append(self._slice(cursor, end))
        flush()
        return parts

    def _interpolation(self, ts) -> Node:
        if self._text(ts).startswith("#{"):
            return self._make(
                Begin,
                ts,
                self._statements(self._named(ts)),
                begin_l=Loc(ts.start_byte, ts.start_byte + 2),
                end_l=Loc(ts.end_byte - 1, ts.end_byte),
            )
        children = self._named(ts)
        return self.convert(children[0]) if children else self._unsupported(ts, "Empty interpolation")

    @staticmethod
    def _only_literal(parts: List[Node]) -> Optional[str]:
        if all(isinstance(part, Str) for part in parts):
            return "".join(part.value for part in parts)
        return None

    def _delimited(self, ts, opening_width: int, single: bool):
        start = ts.start_byte + opening_width
        end = ts.end_byte - 1
        begin_l = Loc(ts.start_byte, start)
        end_l = Loc(end, ts.end_byte)
        if single:
            opening = self._slice(start - 1, start)
            delimiters = opening + _closing_for(opening)
            return [Str(_unescape_single(self._slice(start, end), delimiters))], begin_l, end_l
        return self._literal_parts(ts, start, end), begin_l, end_l

    @staticmethod
    def _percent_opening(text: str) -> int:
        return 3 if len(text) > 1 and text[1].isalpha() else 2

    def _convert_string(self, ts):
        text = self._text(ts)
        if text.startswith("%"):
            width = self._percent_opening(text)
            single = text[1] == "q"
        else:
            width = 1
            single = text.startswith("'")
        parts, begin_l, end_l = self._delimited(ts, width, single)
        value = self._only_literal(parts)
        if value is not None:
            return self._make(Str, ts, value, begin_l=begin_l, end_l=end_l)
        return self._make(Dstr, ts, parts, begin_l=begin_l, end_l=end_l)

    def _convert_character(self, ts):
        text = self._text(ts)[1:]
        value = decode_escape(text) if text.startswith("\\") else text
        return self._make(
            Str,
            ts,
            value,
            begin_l=Loc(ts.start_byte, ts.start_byte + 1),
            end_l=Loc(ts.start_byte, ts.start_byte + 1),
        )

    def _convert_chained_string(self, ts):
        return self._make(Dstr, ts, [self.convert(child) for child in self._named(ts)])

    def _convert_simple_symbol(self, ts):
        return self._make(
            Sym, ts, self._text(ts)[1:], begin_l=Loc(ts.start_byte, ts.start_byte + 1)
        )

    def _convert_hash_key_symbol(self, ts):
        return self._make(Sym, ts, self._text(ts))

    def _convert_delimited_symbol(self, ts):
        text = self._text(ts)
        if text.startswith("%"):
            width, single = 3, True
        else:
            width, single = 2, text.startswith(":'")
        parts, begin_l, end_l = self._delimited(ts, width, single)
        value = self._only_literal(parts)
        if value is not None:
            return self._make(Sym, ts, value, begin_l=begin_l, end_l=end_l)
        return self._make(Dsym, ts, parts, begin_l=begin_l, end_l=end_l)

    def _convert_subshell(self, ts):
        text = self._text(ts)
        width = self._percent_opening(text) if text.startswith("%") else 1
        parts, begin_l, end_l = self._delimited(ts, width, False)
        return self._make(Xstr, ts, parts, begin_l=begin_l, end_l=end_l)

    def _convert_regex(self, ts):
        text = self._text(ts)
        flags = _TRAILING_FLAGS.search(text).group(0)
        width = 3 if text.startswith("%r") else 1
        start = ts.start_byte + width
        end = ts.end_byte - len(flags) - 1
        parts = self._literal_parts(ts, start, end, decode=False)
        return self._make(
            Regexp,
            ts,
            parts,
            RegOpt(flags or None),
            begin_l=Loc(ts.start_byte, start),
            end_l=Loc(end, end + 1),
        )

    def _word_list(self, ts, make_word):
        text = self._text(ts)
        interpolating = text[1:2].isupper()
        elements: List[Node] = []
        for word in self._named(ts):
            parts = self._literal_parts(word, word.start_byte, word.end_byte, decode=interpolating)
            elements.append(make_word(word, parts))
        return self._make(
            Array,
            ts,
            elements,
            begin_l=synthetic_loc(),
            end_l=synthetic_loc(),
        )

    def _convert_string_array(self, ts):
        def make_word(word, parts):
            value = self._only_literal(parts)
            if value is not None:
                return self._make(Str, word, value, begin_l=synthetic_loc(), end_l=synthetic_loc())
            return self._make(Dstr, word, parts, begin_l=synthetic_loc(), end_l=synthetic_loc())

        return self._word_list(ts, make_word)

    def _convert_symbol_array(self, ts):
        def make_word(word, parts):
            value = self._only_literal(parts)
            if value is not None:
                return self._make(Sym, word, value, begin_l=synthetic_loc())
            return self._make(Dsym, word, parts, begin_l=synthetic_loc(), end_l=synthetic_loc())

        return self._word_list(ts, make_word)

    def _convert_heredoc_beginning(self, ts):
        if not self._heredoc_bodies:
            return self._unsupported(ts, "Heredoc without body")
        body = self._heredoc_bodies.pop(0)
        text = self._text(ts)
        squiggly = text[2:3] == "~"
        raw = "'" in text

        end_marker = next((c for c in body.named_children if c.type == "heredoc_end"), None)
        if end_marker is None:
            return self._unsupported(ts, "Unterminated heredoc")

        start = body.start_byte
        if start > 0 and self._source[start - 1 : start] != b"\n":
            start = self._source.index(b"\n", start) + 1
        end = self._source.rfind(b"\n", start, end_marker.start_byte) + 1
        end = max(end, start)

        if raw:
            parts: List[Node] = [Str(self._slice(start, end))]
        else:
            parts = self._literal_parts(body, start, end)
        if squiggly:
            parts = self._dedent_parts(parts)
        return self._make(
            Heredoc,
            ts,
            parts,
            heredoc_body_l=Loc(start, end),
            heredoc_end_l=self._loc(end_marker),
        )

    @staticmethod
    def _dedent_parts(parts: List[Node]) -> List[Node]:
        """Strip the common leading whitespace of a `<<~` heredoc."""
        lines: List[str] = []
        at_line_start = True
        for part in parts:
            if isinstance(part, Str):
                for line in part.value.split("\n")[(0 if at_line_start else 1) :]:
                    lines.append(line)
                at_line_start = part.value.endswith("\n")
            else:
                if at_line_start:
                    lines.append("x")
                at_line_start = False
        indents = [len(line) - len(line.lstrip(" \t")) for line in lines if line.strip()]
        width = min(indents) if indents else 0
        if not width:
            return parts

        result: List[Node] = []
        at_line_start = True
        for part in parts:
            if not isinstance(part, Str):
                result.append(part)
                at_line_start = False
                continue
            pieces = part.value.split("\n")
            for index, piece in enumerate(pieces):
                if index > 0 or at_line_start:
                    strip = len(piece) - len(piece.lstrip(" \t"))
                    pieces[index] = piece[min(strip, width) :]
            result.append(Str("\n".join(pieces)))
            at_line_start = part.value.endswith("\n")
        return result

    # ------------------------------------------------------------ collections

    def _convert_array(self, ts):
        elements = [self.convert(child) for child in self._named(ts)]
        return self._make(
            Array,
            ts,
            elements,
            begin_l=Loc(ts.start_byte, ts.start_byte + 1),
            end_l=Loc(ts.end_byte - 1, ts.end_byte),
        )

    def _convert_hash(self, ts):
        pairs = [self.convert(child) for child in self._named(ts)]
        return self._make(
            Hash,
            ts,
            pairs,
            begin_l=Loc(ts.start_byte, ts.start_byte + 1),
            end_l=Loc(ts.end_byte - 1, ts.end_byte),
        )

    def _convert_pair(self, ts):
        key_ts = ts.child_by_field_name("key")
        value_ts = ts.child_by_field_name("value")
        arrow = self._token(ts, "=>")
        operator = arrow or self._token(ts, ":")
        key = self.convert(key_ts)
        if arrow is None and isinstance(key, Dstr):
            key = self._make(Dsym, key_ts, key.parts, begin_l=key.begin_l, end_l=key.end_l)
        if value_ts is not None:
            value = self.convert(value_ts)
        else:
            # `{name:}` reads the local or calls the method of that name.
            name = key.name if isinstance(key, Sym) else self._text(key_ts)
            value = Lvar(name) if self._is_local(name) else Send(None, name)
        operator_l = self._loc(operator) if operator is not None else None
        return self._make(Pair, ts, key, value, operator_l=operator_l)

    def _convert_range(self, ts):
        operator = ts.child_by_field_name("operator")
        exclusive = operator is not None and self._text(operator) == "..."
        node_class = Erange if exclusive else Irange
        return self._make(
            node_class,
            ts,
            self._optional(ts.child_by_field_name("begin")),
            self._optional(ts.child_by_field_name("end")),
        )

    def _convert_splat_argument(self, ts):
        children = self._named(ts)
        return self._make(Splat, ts, self.convert(children[0]) if children else None)

    def _convert_hash_splat_argument(self, ts):
        children = self._named(ts)
        if not children:
            return self._make(Kwsplat, ts)
        return self._make(Kwsplat, ts, self.convert(children[0]))

    def _convert_block_argument(self, ts):
        children = self._named(ts)
        return self._make(BlockPass, ts, self.convert(children[0]) if children else None)

    def _convert_forward_argument(self, ts):
        return self._make(ForwardedArgs, ts)

    def _convert_pattern(self, ts):
        # `when` pattern wrapper
        children = self._named(ts)
        return self.convert(children[0]) if children else self._unsupported(ts, "Empty pattern")

    def _arguments(self, ts) -> Tuple[List[Node], Optional[Loc], Optional[Loc]]:
        if ts is None:
            return [], None, None
        args: List[Node] = []
        pairs: List[Node] = []
        for child in self._named(ts):
            if child.type in ("pair", "hash_splat_argument"):
                pairs.append(self.convert(child))
                continue
            if pairs:
                args.append(Kwargs(pairs))
                pairs = []
            args.append(self.convert(child))
        if pairs:
            args.append(Kwargs(pairs))
        opening = self._token(ts, "(")
        closing = self._token(ts, ")")
        begin_l = self._loc(opening) if opening is not None else None
        end_l = self._loc(closing) if closing is not None else None
        return args, begin_l, end_l

    @staticmethod
    def _argument_list(ts):
        for child in ts.named_children:
            if child.type == "argument_list":
                return child
        return None

    # -------------------------------------------------------------- operators

    def _convert_binary(self, ts):
        operator = self._text(ts.child_by_field_name("operator"))
        left = self.convert(ts.child_by_field_name("left"))
        right = self.convert(ts.child_by_field_name("right"))
        if operator in ("&&", "and"):
            return self._make(And, ts, left, right)
        if operator in ("||", "or"):
            return self._make(Or, ts, left, right)
        return self._make(Send, ts, left, operator, [right])

    def _convert_unary(self, ts):
        operator = self._text(ts.child_by_field_name("operator"))
        operand_ts = ts.child_by_field_name("operand")
        if operator == "defined?":
            if operand_ts.type == "parenthesized_statements":
                statements = self._statements(self._named(operand_ts))
                return self._make(
                    Defined,
                    ts,
                    statements_to_node(statements) or self._make(Nil, operand_ts),
                    begin_l=Loc(operand_ts.start_byte, operand_ts.start_byte + 1),
                    end_l=Loc(operand_ts.end_byte - 1, operand_ts.end_byte),
                )
            return self._make(Defined, ts, self.convert(operand_ts))
        if operator == "-" and operand_ts.type in ("integer", "float", "rational", "complex"):
            literal = self.convert(operand_ts)
            literal.value = "-" + literal.value
            literal.expression_l = self._loc(ts)
            return literal
        operand = self.convert(operand_ts)
        method = {"!": "!", "not": "!", "-": "-@", "+": "+@", "~": "~"}.get(operator)
        if method is None:
            return self._unsupported(ts, f"Unsupported unary operator {operator}")
        return self._make(Send, ts, operand, method)

    def _convert_conditional(self, ts):
        return self._make(
            IfTernary,
            ts,
            self.convert(ts.child_by_field_name("condition")),
            self.convert(ts.child_by_field_name("consequence")),
            self.convert(ts.child_by_field_name("alternative")),
        )

    # ------------------------------------------------------------ assignments

    def _target(self, ts) -> Node:
        """Value-less assignment target for the left-hand side ``ts``."""
        kind = ts.type
        if kind == "identifier":
            name = self._text(ts)
            self._declare(name)
            return self._make(Lvasgn, ts, name)
        if kind == "instance_variable":
            return self._make(Ivasgn, ts, self._text(ts))
        if kind == "class_variable":
            return self._make(Cvasgn, ts, self._text(ts))
        if kind == "global_variable":
            return self._make(Gvasgn, ts, self._text(ts))
        if kind == "constant":
            return self._make(Casgn, ts, None, self._text(ts))
        if kind == "scope_resolution":
            const = self._convert_scope_resolution(ts)
            if isinstance(const, Const):
                return self._make(
                    Casgn, ts, const.scope, const.name, double_colon_l=const.double_colon_l
                )
            return const
        if kind == "call":
            receiver = ts.child_by_field_name("receiver")
            method = ts.child_by_field_name("method")
            operator = ts.child_by_field_name("operator")
            recv = self._optional(receiver)
            dot_l = self._loc(operator) if operator is not None else None
            node_class = CSend if operator is not None and self._text(operator) == "&." else Send
            return self._make(node_class, ts, recv, self._text(method), dot_l=dot_l)
        if kind == "element_reference":
            recv, indexes = self._element_reference_parts(ts)
            return self._make(IndexAsgn, ts, recv, indexes)
        if kind in ("left_assignment_list", "destructured_left_assignment"):
            return self._mlhs(ts)
        if kind == "rest_assignment":
            children = self._named(ts)
            return self._make(Splat, ts, self._target(children[0]) if children else None)
        return self._unsupported(ts, f"Unsupported assignment target: {kind}")

    def _mlhs(self, ts) -> Mlhs:
        items = [self._target(child) for child in self._named(ts)]
        if ts.type == "destructured_left_assignment":
            return self._make(
                Mlhs,
                ts,
                items,
                begin_l=Loc(ts.start_byte, ts.start_byte + 1),
                end_l=Loc(ts.end_byte - 1, ts.end_byte),
            )
        return self._make(Mlhs, ts, items)

    def _assign(self, target: Node, value: Node, operator_l: Optional[Loc]) -> Node:
        if isinstance(target, (Send, CSend)):
            target.method_name += "="
            target.args = [value]
            target.operator_l = operator_l or synthetic_loc()
        elif isinstance(target, (Lvasgn, Ivasgn, Cvasgn, Gvasgn, Casgn, IndexAsgn)):
            target.value = value
        return target

    def _right_hand_side(self, ts) -> Node:
        if ts.type == "right_assignment_list":
            return self._make(Array, ts, [self.convert(child) for child in self._named(ts)])
        if ts.type == "splat_argument":
            return self._make(Array, ts, [self.convert(ts)])
        return self.convert(ts)

    def _convert_assignment(self, ts):
        left_ts = ts.child_by_field_name("left")
        right_ts = ts.child_by_field_name("right")
        if left_ts.type in ("left_assignment_list", "destructured_left_assignment"):
            lhs = self._mlhs(left_ts)
            return self._make(Masgn, ts, lhs, self._right_hand_side(right_ts))
        target = self._target(left_ts)
        operator = self._token(ts, "=")
        value = self._right_hand_side(right_ts)
        node = self._assign(target, value, self._loc(operator) if operator is not None else None)
        node.expression_l = self._loc(ts)
        return node

    def _convert_operator_assignment(self, ts):
        target = self._target(ts.child_by_field_name("left"))
        operator = self._text(ts.child_by_field_name("operator"))
        value = self._right_hand_side(ts.child_by_field_name("right"))
        if operator == "||=":
            return self._make(OrAsgn, ts, target, value)
        if operator == "&&=":
            return self._make(AndAsgn, ts, target, value)
        return self._make(OpAsgn, ts, target, operator[:-1], value)

    # ------------------------------------------------------------------ calls

    def _convert_call(self, ts):
        receiver = ts.child_by_field_name("receiver")
        method = ts.child_by_field_name("method")
        operator = ts.child_by_field_name("operator")
        block = ts.child_by_field_name("block")

        recv = self._optional(receiver)
        args, begin_l, end_l = self._arguments(ts.child_by_field_name("arguments"))
        name = self._text(method) if method is not None else "call"

        if method is not None and method.type == "super" and receiver is None:
            call = self._make(Super, ts, args, begin_l=begin_l, end_l=end_l)
        elif operator is not None and self._text(operator) == "&.":
            call = self._make(
                CSend, ts, recv, name, args, dot_l=self._loc(operator), begin_l=begin_l, end_l=end_l
            )
        else:
            dot_l = self._loc(operator) if operator is not None else None
            call = self._make(Send, ts, recv, name, args, dot_l=dot_l, begin_l=begin_l, end_l=end_l)

        if block is None:
            return call
        return self._block(block, call)

    def _block(self, ts, call: Node) -> Node:
        do_block = ts.type == "do_block"
        width = 2 if do_block else 1
        begin_l = Loc(ts.start_byte, ts.start_byte + width)
        end_l = Loc(ts.end_byte - (3 if do_block else 1), ts.end_byte)
        parameters = ts.child_by_field_name("parameters")
        with self._scope(inherits=True):
            args = self._parameters(parameters) if parameters is not None else None
            self._numbered.append(0)
            try:
                body = self._body(self._body_children(ts, "parameters"))
            finally:
                numargs = self._numbered.pop()
        if args is None and numargs and body is not None:
            return self._make(Numblock, ts, call, numargs, body)
        return self._make(Block, ts, call, args, body, begin_l=begin_l, end_l=end_l)

    def _convert_lambda(self, ts):
        parameters = ts.child_by_field_name("parameters")
        body_ts = ts.child_by_field_name("body")
        with self._scope(inherits=True):
            args = self._parameters(parameters) if parameters is not None else None
            body = self._body(self._body_children(body_ts)) if body_ts is not None else None
        do_block = body_ts is not None and body_ts.type == "do_block"
        anchor = body_ts if body_ts is not None else ts
        return self._make(
            Block,
            ts,
            self._make(Lambda, ts),
            args,
            body,
            begin_l=Loc(anchor.start_byte, anchor.start_byte + (2 if do_block else 1)),
            end_l=Loc(ts.end_byte - (3 if do_block else 1), ts.end_byte),
        )

    def _element_reference_parts(self, ts) -> Tuple[Node, List[Node]]:
        object_ts = ts.child_by_field_name("object")
        recv = self.convert(object_ts)
        indexes = [
            self.convert(child) for child in self._named(ts) if child.id != object_ts.id
        ]
        return recv, indexes

    def _convert_element_reference(self, ts):
        recv, indexes = self._element_reference_parts(ts)
        return self._make(Index, ts, recv, indexes)

    def _jump(self, ts, node_class) -> Node:
        args, _, _ = self._arguments(self._argument_list(ts))
        return self._make(node_class, ts, args)

    def _convert_return(self, ts):
        return self._jump(ts, Return)

    def _convert_break(self, ts):
        return self._jump(ts, Break)

    def _convert_next(self, ts):
        return self._jump(ts, Next)

    def _convert_redo(self, ts):
        return self._make(Redo, ts)

    def _convert_retry(self, ts):
        return self._make(Retry, ts)

    def _convert_yield(self, ts):
        args, begin_l, end_l = self._arguments(self._argument_list(ts))
        return self._make(Yield, ts, args, begin_l=begin_l, end_l=end_l)

    # ------------------------------------------------------------- parameters

    def _parameters(self, ts) -> Args:
        locals_ids = {child.id for child in ts.children_by_field_name("locals")}
        args: List[Node] = []
        for child in self._named(ts):
            if child.id in locals_ids:
                name = self._text(child)
                self._declare(name)
                args.append(self._make(Shadowarg, child, name))
            else:
                args.append(self._parameter(child))
        opening = self._token(ts, "(")
        closing = self._token(ts, ")")
        trailing = self._trailing_comma(ts, locals_ids) if ts.type == "block_parameters" else None
        return self._make(
            Args,
            ts,
            args,
            begin_l=self._loc(opening) if opening is not None else None,
            end_l=self._loc(closing) if closing is not None else None,
            trailing_comma_l=self._loc(trailing) if trailing is not None else None,
        )

    @staticmethod
    def _trailing_comma(ts, locals_ids: Set[int]):
        """The `,` of `|a, |`, which makes the block splat a single array argument."""
        trailing = None
        for child in ts.children:
            if not child.is_named and child.type == ";":
                break
            if not child.is_named and child.type == ",":
                trailing = child
            elif child.is_named and child.type != "comment" and child.id not in locals_ids:
                trailing = None
        return trailing

    def _parameter_name(self, ts) -> Optional[str]:
        name_ts = ts.child_by_field_name("name")
        if name_ts is None:
            return None
        name = self._text(name_ts)
        self._declare(name)
        return name

    def _parameter(self, ts) -> Node:
        kind = ts.type
        if kind == "identifier":
            name = self._text(ts)
            self._declare(name)
            return self._make(Arg, ts, name)
        if kind == "optional_parameter":
            name = self._parameter_name(ts)
            return self._make(Optarg, ts, name, self.convert(ts.child_by_field_name("value")))
        if kind == "keyword_parameter":
            name = self._parameter_name(ts)
            value = ts.child_by_field_name("value")
            if value is None:
                return self._make(Kwarg, ts, name)
            return self._make(Kwoptarg, ts, name, self.convert(value))
        if kind == "splat_parameter":
            return self._make(Restarg, ts, self._parameter_name(ts))
        if kind == "hash_splat_parameter":
            return self._make(Kwrestarg, ts, self._parameter_name(ts))
        if kind == "hash_splat_nil":
            return self._make(Kwnilarg, ts)
        if kind == "block_parameter":
            return self._make(Blockarg, ts, self._parameter_name(ts))
        if kind == "forward_parameter":
            return self._make(ForwardArg, ts)
        if kind == "destructured_parameter":
            return self._make(
                Mlhs,
                ts,
                [self._parameter(child) for child in self._named(ts)],
                begin_l=Loc(ts.start_byte, ts.start_byte + 1),
                end_l=Loc(ts.end_byte - 1, ts.end_byte),
            )
        return self._unsupported(ts, f"Unsupported parameter: {kind}")

    # ------------------------------------------------------------ definitions

    def _method_parts(self, ts):
        parameters = ts.child_by_field_name("parameters")
        args = self._parameters(parameters) if parameters is not None else None
        assignment = self._token(ts, "=")
        if assignment is not None:
            body = self._optional(ts.child_by_field_name("body"))
            return args, body, self._loc(assignment)
        body = self._body(self._body_children(ts, "name", "parameters", "object"))
        return args, body, None

    def _convert_method(self, ts):
        name = self._text(ts.child_by_field_name("name"))
        with self._scope(inherits=False):
            args, body, assignment_l = self._method_parts(ts)
        return self._make(Def, ts, name, args, body, assignment_l=assignment_l)

    def _convert_singleton_method(self, ts):
        definee = self.convert(ts.child_by_field_name("object"))
        name = self._text(ts.child_by_field_name("name"))
        with self._scope(inherits=False):
            args, body, assignment_l = self._method_parts(ts)
        return self._make(Defs, ts, definee, name, args, body, assignment_l=assignment_l)

    def _convert_class(self, ts):
        name = self.convert(ts.child_by_field_name("name"))
        superclass = None
        superclass_ts = ts.child_by_field_name("superclass")
        if superclass_ts is not None:
            expressions = self._named(superclass_ts)
            superclass = self.convert(expressions[0]) if expressions else None
        with self._scope(inherits=False):
            body = self._body(self._body_children(ts, "name", "superclass"))
        return self._make(Class, ts, name, superclass, body)

    def _convert_module(self, ts):
        name = self.convert(ts.child_by_field_name("name"))
        with self._scope(inherits=False):
            body = self._body(self._body_children(ts, "name"))
        return self._make(Module, ts, name, body)

    def _convert_singleton_class(self, ts):
        expr = self.convert(ts.child_by_field_name("value"))
        with self._scope(inherits=False):
            body = self._body(self._body_children(ts, "value"))
        return self._make(SClass, ts, expr, body)

    def _method_symbol(self, ts) -> Node:
        if ts.type in ("simple_symbol", "delimited_symbol", "global_variable"):
            return self.convert(ts)
        return self._make(Sym, ts, self._text(ts))

    def _convert_alias(self, ts):
        return self._make(
            Alias,
            ts,
            self._method_symbol(ts.child_by_field_name("name")),
            self._method_symbol(ts.child_by_field_name("alias")),
        )

    def _convert_undef(self, ts):
        return self._make(Undef, ts, [self._method_symbol(child) for child in self._named(ts)])

    # ---------------------------------------------------------------- control

    def _clause(self, ts) -> Optional[Node]:
        if ts is None:
            return None
        if ts.type == "elsif":
            return self._convert_elsif(ts)
        return self._statements_node(ts)

    def _conditional(self, ts, keyword_width: int) -> If:
        cond = self.convert(ts.child_by_field_name("condition"))
        consequence = self._clause(ts.child_by_field_name("consequence"))
        alternative = self._clause(ts.child_by_field_name("alternative"))
        return self._make(
            If,
            ts,
            cond,
            consequence,
            alternative,
            keyword_l=Loc(ts.start_byte, ts.start_byte + keyword_width),
        )

    def _convert_if(self, ts):
        return self._conditional(ts, 2)

    def _convert_elsif(self, ts):
        return self._conditional(ts, 5)

    def _convert_unless(self, ts):
        cond = self.convert(ts.child_by_field_name("condition"))
        consequence = self._clause(ts.child_by_field_name("consequence"))
        alternative = self._clause(ts.child_by_field_name("alternative"))
        return self._make(
            If,
            ts,
            cond,
            alternative,
            consequence,
            keyword_l=Loc(ts.start_byte, ts.start_byte + 6),
        )

    def _modifier(self, ts):
        body = self.convert(ts.child_by_field_name("body"))
        cond = self.convert(ts.child_by_field_name("condition"))
        return body, cond

    def _convert_if_modifier(self, ts):
        body, cond = self._modifier(ts)
        return self._make(IfMod, ts, cond, body, None)

    def _convert_unless_modifier(self, ts):
        body, cond = self._modifier(ts)
        return self._make(IfMod, ts, cond, None, body)

    def _convert_while_modifier(self, ts):
        body, cond = self._modifier(ts)
        if isinstance(body, KwBegin):
            return self._make(WhilePost, ts, cond, body)
        return self._make(While, ts, cond, body)

    def _convert_until_modifier(self, ts):
        body, cond = self._modifier(ts)
        if isinstance(body, KwBegin):
            return self._make(UntilPost, ts, cond, body)
        return self._make(Until, ts, cond, body)

    def _convert_rescue_modifier(self, ts):
        body = self.convert(ts.child_by_field_name("body"))
        handler = self.convert(ts.child_by_field_name("handler"))
        return self._make(Rescue, ts, body, [RescueBody(body=handler)])

    def _loop(self, ts, node_class):
        cond = self.convert(ts.child_by_field_name("condition"))
        body = statements_to_node(self._statements(self._body_children(ts, "condition")))
        return self._make(node_class, ts, cond, body, end_l=Loc(ts.end_byte - 3, ts.end_byte))

    def _convert_while(self, ts):
        return self._loop(ts, While)

    def _convert_until(self, ts):
        return self._loop(ts, Until)

    def _convert_for(self, ts):
        pattern = ts.child_by_field_name("pattern")
        value = ts.child_by_field_name("value")
        iteratee_ts = self._named(value)[0] if value.type == "in" else value
        iteratee = self.convert(iteratee_ts)
        iterator = self._target(pattern)
        body = statements_to_node(self._statements(self._body_children(ts, "pattern", "value")))
        return self._make(For, ts, iterator, iteratee, body)

    def _else_clause(self, ts) -> Optional[Node]:
        for child in self._named(ts):
            if child.type == "else":
                return self._statements_node(child) or self._make(EmptyElse, child)
        return None

    def _convert_case(self, ts):
        expr = self._optional(ts.child_by_field_name("value"))
        whens = [self._when(child) for child in self._named(ts) if child.type == "when"]
        return self._make(Case, ts, expr, whens, self._else_clause(ts))

    def _when(self, ts) -> Node:
        patterns = [self.convert(child) for child in ts.children_by_field_name("pattern")]
        body = statements_to_node(self._statements(self._body_children(ts, "pattern")))
        return self._make(When, ts, patterns, body)

    def _convert_case_match(self, ts):
        expr = self.convert(ts.child_by_field_name("value"))
        clauses = [self._in_clause(child) for child in self._named(ts) if child.type == "in_clause"]
        return self._make(CaseMatch, ts, expr, clauses, self._else_clause(ts))

    def _in_clause(self, ts) -> Node:
        pattern = self._pattern(ts.child_by_field_name("pattern"))
        guard_ts = ts.child_by_field_name("guard")
        guard = None
        if guard_ts is not None:
            cond = self.convert(guard_ts.child_by_field_name("condition"))
            guard_class = IfGuard if guard_ts.type == "if_guard" else UnlessGuard
            guard = self._make(guard_class, guard_ts, cond)
        body = statements_to_node(self._statements(self._body_children(ts, "pattern", "guard")))
        return self._make(InPattern, ts, pattern, guard, body)

    def _convert_begin(self, ts):
        body = self._body(self._body_children(ts))
        if body is None:
            statements: List[Node] = []
        elif is_statement_list(body):
            statements = body.statements
        else:
            statements = [body]
        return self._make(
            KwBegin,
            ts,
            statements,
            begin_l=Loc(ts.start_byte, ts.start_byte + 5),
            end_l=Loc(ts.end_byte - 3, ts.end_byte),
        )

    def _convert_begin_block(self, ts):
        return self._make(Preexe, ts, statements_to_node(self._statements(self._named(ts))))

    def _convert_end_block(self, ts):
        return self._make(Postexe, ts, statements_to_node(self._statements(self._named(ts))))

    # --------------------------------------------------------------- patterns

    def _convert_test_pattern(self, ts):
        value = self.convert(ts.child_by_field_name("value"))
        return self._make(MatchPatternP, ts, value, self._pattern(ts.child_by_field_name("pattern")))

    def _convert_match_pattern(self, ts):
        value = self.convert(ts.child_by_field_name("value"))
        return self._make(MatchPattern, ts, value, self._pattern(ts.child_by_field_name("pattern")))

    def _pattern(self, ts) -> Node:
        kind = ts.type
        if kind == "identifier":
            name = self._text(ts)
            self._declare(name)
            return self._make(MatchVar, ts, name)
        if kind in ("array_pattern", "find_pattern"):
            return self._sequence_pattern(ts, ArrayPattern if kind == "array_pattern" else FindPattern)
        if kind == "hash_pattern":
            return self._hash_pattern(ts)
        if kind == "splat_parameter":
            name = self._parameter_name(ts)
            return self._make(MatchRest, ts, MatchVar(name) if name else None)
        if kind == "hash_splat_parameter":
            name = self._parameter_name(ts)
            return self._make(MatchRest, ts, MatchVar(name) if name else None)
        if kind == "hash_splat_nil":
            return self._make(MatchNilPattern, ts)
        if kind == "alternative_pattern":
            alternatives = [self._pattern(child) for child in ts.children_by_field_name("alternatives")]
            if not alternatives:
                alternatives = [self._pattern(child) for child in self._named(ts)]
            node = alternatives[0]
            for alternative in alternatives[1:]:
                node = self._make(MatchAlt, ts, node, alternative)
            return node
        if kind == "as_pattern":
            value = self._pattern(ts.child_by_field_name("value"))
            name_ts = ts.child_by_field_name("name")
            name = self._text(name_ts)
            self._declare(name)
            return self._make(MatchAs, ts, value, self._make(MatchVar, name_ts, name))
        if kind == "variable_reference_pattern":
            return self._make(Pin, ts, self.convert(ts.child_by_field_name("name")))
        if kind == "expression_reference_pattern":
            value = ts.child_by_field_name("value")
            inner = self.convert(value)
            return self._make(
                Pin,
                ts,
                self._make(
                    Begin,
                    ts,
                    [inner],
                    begin_l=synthetic_loc(),
                    end_l=synthetic_loc(),
                ),
            )
        if kind == "parenthesized_pattern":
            children = self._named(ts)
            return self._pattern(children[0]) if children else self._unsupported(ts, "Empty pattern")
        return self.convert(ts)

    def _sequence_pattern(self, ts, node_class) -> Node:
        class_ts = ts.child_by_field_name("class")
        elements = [
            self._pattern(child)
            for child in self._named(ts)
            if class_ts is None or child.id != class_ts.id
        ]
        bracketed = self._token(ts, "[") is not None
        if class_ts is not None:
            return self._make(
                ConstPattern, ts, self.convert(class_ts), self._make(node_class, ts, elements)
            )
        if bracketed:
            return self._make(
                node_class,
                ts,
                elements,
                begin_l=Loc(ts.start_byte, ts.start_byte + 1),
                end_l=Loc(ts.end_byte - 1, ts.end_byte),
            )
        return self._make(node_class, ts, elements)

    def _hash_pattern(self, ts) -> Node:
        class_ts = ts.child_by_field_name("class")
        elements: List[Node] = []
        for child in self._named(ts):
            if class_ts is not None and child.id == class_ts.id:
                continue
            if child.type == "keyword_pattern":
                elements.append(self._keyword_pattern(child))
            else:
                elements.append(self._pattern(child))
        braced = self._token(ts, "{") is not None
        pattern = self._make(
            HashPattern,
            ts,
            elements,
            begin_l=Loc(ts.start_byte, ts.start_byte + 1) if braced else None,
            end_l=Loc(ts.end_byte - 1, ts.end_byte) if braced else None,
        )
        if class_ts is not None:
            pattern.begin_l = pattern.end_l = None
            return self._make(ConstPattern, ts, self.convert(class_ts), pattern)
        return pattern

    def _keyword_pattern(self, ts) -> Node:
        key_ts = ts.child_by_field_name("key")
        value_ts = ts.child_by_field_name("value")
        key_text = self._text(key_ts)
        if key_ts.type == "string":
            key = self.convert(key_ts)
            key_name = key.value if isinstance(key, Str) else key_text
        else:
            key_name = key_text.rstrip(":")
            key = self._make(Sym, key_ts, key_name)
        if value_ts is None:
            self._declare(key_name)
            return self._make(MatchVar, ts, key_name)
        return self._make(Pair, ts, key, self._pattern(value_ts), operator_l=synthetic_loc())




def parse_ruby(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
) -> ParseResult:
    """
    Parse Ruby source text into a node tree.

    Args:
        source: Raw Ruby source code.
        source_name: Optional label used for diagnostics (defaults to `<input>`).
        tolerant: When True, syntax errors become diagnostics and the broken
            region is replaced by a placeholder; when False they raise.

    Returns:
        ParseResult containing the tree, comment spans, diagnostics and metadata.

    Raises:
        RubySyntaxError: If the source has syntax errors and `tolerant` is False.
    """
    data = source.encode("utf-8")
    tree = Parser(RUBY_LANGUAGE).parse(data)

    converter = _TreeConverter(data)
    converter.scan(tree.root_node)
    syntax_errors = list(converter.errors)
    if syntax_errors and not tolerant:
        raise RubySyntaxError(syntax_errors)

    ast = converter.convert(tree.root_node)
    if converter.errors:
        logger.debug("%s: %d diagnostic(s)", source_name, len(converter.errors))

    return ParseResult(
        ast=ast,
        comments=converter.comments,
        errors=converter.errors,
        source_hash=_hash_source(source),
        source_name=source_name,
    )


__all__ = [
    "ParseError",
    "ParseResult",
    "RubySyntaxError",
    "decode_escape",
    "parse_ruby",
]

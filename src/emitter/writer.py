"""
Render Ruby node trees back to source text.

`CodeWriter` walks a tree with one `_write_<tag>` method per node kind and
writes canonical surface syntax to any text sink exposing `write(str)`. Surface
choices that the tree cannot derive from its structure (brackets, quotes,
parentheses, `do` vs `{`) come from the presence markers recorded by the parser.

Layout protocol: a node is written inline, starting at the current cursor and
without a trailing newline; statement sequences are the only place where the
writer emits indentation and line terminators. Clause nodes (`when`, `in`,
`rescue` bodies) are the exception: they are rendered by their owner at the
clause indentation and terminate their own lines.

`emit_module` is the buffered convenience entry point mirroring the rest of the
pipeline; `write_code` renders into a caller supplied sink.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from nodes import (
    And,
    AndAsgn,
    BackRef,
    Begin,
    Block,
    Break,
    Case,
    CaseMatch,
    Casgn,
    Class,
    Complex,
    CSend,
    Cvar,
    Cvasgn,
    Def,
    Defined,
    Defs,
    Dstr,
    EFlipFlop,
    EmptyElse,
    Ensure,
    Erange,
    Float,
    For,
    Gvar,
    Gvasgn,
    Hash,
    If,
    IFlipFlop,
    IfMod,
    IfTernary,
    IndexAsgn,
    Int,
    Irange,
    Ivar,
    Ivasgn,
    KwBegin,
    Lambda,
    Lvasgn,
    Masgn,
    MatchPattern,
    MatchPatternP,
    Module,
    Next,
    Node,
    NthRef,
    OpAsgn,
    Or,
    OrAsgn,
    Rational,
    Rescue,
    Return,
    SClass,
    Send,
    Shadowarg,
    Str,
    Super,
    Until,
    UntilPost,
    While,
    WhilePost,
    Yield,
    is_statement_list,
)

from .context import WriterContext
from .documentation import DocumentationContext

logger = logging.getLogger(__name__)

PLACEHOLDER = "unsupported"

STRING_PARENTS = frozenset({"dstr", "dsym", "xstr", "heredoc", "x_heredoc", "regexp"})
DOCUMENTED_KINDS = frozenset({"class", "module", "sclass", "def", "defs", "casgn", "send"})

UNARY_OPERATORS = {"-@": "-", "+@": "+", "!": "!", "~": "~"}

# Binding strength used to decide where parentheses are required when a tree
# did not record them (hand built or transformed subtrees).
ATOM_PRECEDENCE = 100
POSTFIX_PRECEDENCE = 90
NOT_PRECEDENCE = 17
POWER_PRECEDENCE = 16
NEGATE_PRECEDENCE = 15
BINARY_PRECEDENCE = {
    "**": POWER_PRECEDENCE,
    "*": 14,
    "/": 14,
    "%": 14,
    "+": 13,
    "-": 13,
    "<<": 12,
    ">>": 12,
    "&": 11,
    "|": 10,
    "^": 10,
    ">": 9,
    ">=": 9,
    "<": 9,
    "<=": 9,
    "<=>": 8,
    "==": 8,
    "===": 8,
    "!=": 8,
    "=~": 8,
    "!~": 8,
}
AND_PRECEDENCE = 7
OR_PRECEDENCE = 6
RANGE_PRECEDENCE = 5
TERNARY_PRECEDENCE = 4
MATCH_PRECEDENCE = 3
ASSIGNMENT_PRECEDENCE = 2
COMMAND_PRECEDENCE = 2
MODIFIER_PRECEDENCE = 1

_ASSIGNMENT_TYPES = (
    Lvasgn,
    Ivasgn,
    Cvasgn,
    Gvasgn,
    Casgn,
    OpAsgn,
    OrAsgn,
    AndAsgn,
    IndexAsgn,
    Masgn,
)

_TARGET_TYPES = (Lvasgn, Ivasgn, Cvasgn, Gvasgn, Casgn, IndexAsgn)

_PLAIN_SYMBOL = re.compile(
    r"\A(?:[A-Za-z_][A-Za-z0-9_]*[?!=]?|@@?[A-Za-z_][A-Za-z0-9_]*|\$[A-Za-z_][A-Za-z0-9_]*|\$[0-9]+)\Z"
)
_PLAIN_LABEL = re.compile(r"\A[A-Za-z_][A-Za-z0-9_]*[?!]?\Z")
_IDENTIFIER = re.compile(r"\A[A-Za-z_][A-Za-z0-9_]*\Z")
_OPERATOR_SYMBOLS = frozenset(BINARY_PRECEDENCE) | frozenset(
    {"!", "~", "+@", "-@", "[]", "[]=", "`"}
)

_STRING_ESCAPES = {
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\x1b": "\\e",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


class UnsupportedNodeError(RuntimeError):
    """Raised in strict mode when a node shape has no surface rendering."""

    def __init__(self, message: str, node: Optional[Node] = None):
        super().__init__(message)
        self.node = node


def escape_string(value: str, delimiter: str = '"') -> str:
    """Escape literal text for a string body closed by ``delimiter``."""
    escaped: List[str] = []
    for index, char in enumerate(value):
        if char == delimiter:
            escaped.append("\\" + char)
        elif char in _STRING_ESCAPES:
            escaped.append(_STRING_ESCAPES[char])
        elif char == "#" and value[index + 1 : index + 2] in ("{", "@", "$"):
            escaped.append("\\#")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            escaped.append(f"\\x{ord(char):02X}")
        else:
            escaped.append(char)
    return "".join(escaped)


def escape_regexp(source: str) -> str:
    """Escape every ``/`` that is not already escaped; other text is kept raw."""
    escaped: List[str] = []
    pending_backslash = False
    for char in source:
        if pending_backslash:
            escaped.append(char)
            pending_backslash = False
        elif char == "\\":
            escaped.append(char)
            pending_backslash = True
        elif char == "/":
            escaped.append("\\/")
        else:
            escaped.append(char)
    return "".join(escaped)


def is_plain_symbol(name: str) -> bool:
    return name in _OPERATOR_SYMBOLS or bool(_PLAIN_SYMBOL.match(name))


def _format_location(node: Optional[Node]) -> str:
    if node is None or node.expression_l is None:
        return ""
    return f" (offset {node.expression_l.begin})"


def _is_attribute_assignment(node: Node) -> bool:
    if not isinstance(node, (Send, CSend)) or node.recv is None:
        return False
    if node.operator_l is not None:
        return True
    name = node.method_name
    return (
        name.endswith("=")
        and _IDENTIFIER.match(name[:-1]) is not None
        and node.begin_l is None
        and len(node.args) == 1
    )


def _is_operator_send(node: Node) -> bool:
    return (
        isinstance(node, Send)
        and node.recv is not None
        and node.dot_l is None
        and node.operator_l is None
    )


def _precedence(node: Node) -> int:
    """How tightly a rendered node binds when used as an operand."""
    if isinstance(node, (Send, CSend)):
        if _is_operator_send(node):
            name = node.method_name
            if name in UNARY_OPERATORS and not node.args:
                return NEGATE_PRECEDENCE if name == "-@" else NOT_PRECEDENCE
            if name in BINARY_PRECEDENCE and len(node.args) == 1:
                return BINARY_PRECEDENCE[name]
            if name in ("[]", "[]="):
                return ATOM_PRECEDENCE
        if _is_attribute_assignment(node):
            return ASSIGNMENT_PRECEDENCE
        if node.args and node.begin_l is None:
            return COMMAND_PRECEDENCE
        return ATOM_PRECEDENCE
    if isinstance(node, (Int, Float, Rational, Complex)) and node.value.startswith("-"):
        return NEGATE_PRECEDENCE
    if isinstance(node, And):
        return AND_PRECEDENCE
    if isinstance(node, Or):
        return OR_PRECEDENCE
    if isinstance(node, (Irange, Erange, IFlipFlop, EFlipFlop)):
        return RANGE_PRECEDENCE
    if isinstance(node, Defined) and node.begin_l is None:
        return RANGE_PRECEDENCE
    if isinstance(node, IfTernary):
        return TERNARY_PRECEDENCE
    if isinstance(node, (MatchPattern, MatchPatternP)):
        return MATCH_PRECEDENCE
    if isinstance(node, _ASSIGNMENT_TYPES):
        if _is_assignment_target(node):
            return ATOM_PRECEDENCE
        return ASSIGNMENT_PRECEDENCE
    if isinstance(node, (Return, Break, Next, Yield, Super)) and node.args:
        if getattr(node, "begin_l", None) is None:
            return COMMAND_PRECEDENCE
    if isinstance(node, (IfMod, WhilePost, UntilPost)):
        return MODIFIER_PRECEDENCE
    if isinstance(node, (While, Until)) and node.end_l is None:
        return MODIFIER_PRECEDENCE
    if isinstance(node, Rescue) and _is_modifier_rescue(node):
        return MODIFIER_PRECEDENCE
    return ATOM_PRECEDENCE


def _is_assignment_target(node: Node) -> bool:
    """Value-less assignments are bare targets (`mlhs` items, `for` variables)."""
    return isinstance(node, _TARGET_TYPES) and node.value is None


def _is_modifier_rescue(node: Rescue) -> bool:
    if node.else_ is not None or len(node.rescue_bodies) != 1:
        return False
    clause = node.rescue_bodies[0]
    return (
        clause.exc_list is None
        and clause.exc_var is None
        and clause.body is not None
        and not is_statement_list(clause.body)
        and node.body is not None
        and not is_statement_list(node.body)
        and not isinstance(node.body, (Rescue, Ensure))
    )


def _is_do_block(node: Block) -> bool:
    return node.begin_l is not None and node.begin_l.size == 2


def _is_block_structured(node: Optional[Node]) -> bool:
    """True for nodes that span several lines when rendered."""
    if node is None:
        return False
    if isinstance(node, (Def, Defs)):
        return node.assignment_l is None
    if isinstance(node, (If, Case, CaseMatch, For, Class, Module, SClass, KwBegin)):
        return True
    if isinstance(node, (While, Until)):
        return node.end_l is not None
    if isinstance(node, Block):
        return _is_do_block(node)
    if isinstance(node, Rescue):
        return not _is_modifier_rescue(node)
    if isinstance(node, Ensure):
        return True
    return is_statement_list(node)


class CodeWriter:
    """Recursive renderer with one `_write_<tag>` method per node kind."""

    def __init__(
        self,
        sink,
        *,
        documentation: Optional[DocumentationContext] = None,
        strict: bool = False,
    ) -> None:
        self.sink = sink
        self.documentation = documentation
        self.strict = strict
        self.diagnostics: List[str] = []

    # ------------------------------------------------------------ entry points

    def write(self, node: Node, context: Optional[WriterContext] = None) -> None:
        """Render ``node`` inline at ``context``."""
        self._write(node, context or WriterContext())

    def write_program(
        self, root: Optional[Node], context: Optional[WriterContext] = None
    ) -> None:
        """Render ``root`` as a statement sequence, one statement per line."""
        self._write_body(root, context or WriterContext(), clauses=False)

    # ----------------------------------------------------------------- helpers

    def _emit(self, text: str) -> None:
        self.sink.write(text)

    def _write(self, node: Node, ctx: WriterContext) -> None:
        handler = getattr(self, f"_write_{getattr(node, 'type', None)}", None)
        if handler is None or not isinstance(node, Node):
            self._generic_write(node, ctx)
            return
        handler(node, ctx)

    def _generic_write(self, node: Node, ctx: WriterContext) -> None:
        kind = getattr(node, "type", type(node).__name__)
        self._unsupported(node, f"No surface rendering for node type {kind!r}")

    def _unsupported(self, node: Optional[Node], reason: str) -> None:
        message = f"{reason}{_format_location(node)}"
        if self.strict:
            raise UnsupportedNodeError(message, node)
        logger.warning("Writing placeholder: %s", message)
        self.diagnostics.append(message)
        self._emit(PLACEHOLDER)

    def _write_optional(self, node: Optional[Node], ctx: WriterContext) -> None:
        if node is not None:
            self._write(node, ctx)

    def _write_separated(
        self, nodes: Sequence[Node], ctx: WriterContext, separator: str = ", "
    ) -> None:
        for index, node in enumerate(nodes):
            if index:
                self._emit(separator)
            self._write(node, ctx)

    def _write_statements(self, statements: Sequence[Node], ctx: WriterContext) -> None:
        for statement in statements:
            self._write_statement(statement, ctx)

    def _write_statement(self, node: Node, ctx: WriterContext) -> None:
        if is_statement_list(node):
            self._write_statements(node.statements, ctx)
            return
        self._emit(ctx.padding)
        self._write_leading_documentation(node, ctx)
        self._write(node, ctx)
        self._emit("\n")

    def _write_body(
        self, body: Optional[Node], ctx: WriterContext, *, clauses: bool = True
    ) -> None:
        """
        Render a construct body at ``ctx``.

        With ``clauses`` a `rescue`/`ensure` body is laid out in clause form,
        its keywords one level shallower than ``ctx``; bodies that cannot host
        clauses (the program, brace blocks) render those nodes inline instead.
        """
        if body is None:
            return
        if clauses and isinstance(body, (Rescue, Ensure)):
            self._write_clauses(body, ctx)
            return
        self._write_statement(body, ctx)

    def _write_leading_documentation(self, node: Node, ctx: WriterContext) -> None:
        if self.documentation is None or node.expression_l is None:
            return
        if node.type not in DOCUMENTED_KINDS:
            return
        if isinstance(node, Send) and node.recv is not None:
            return
        self.documentation.write_documentation(self.sink, ctx.indent, node.expression_l.begin)

    def _write_operand(self, node: Node, ctx: WriterContext, minimum: int) -> None:
        if _precedence(node) < minimum:
            self._emit("(")
            self._write(node, ctx)
            self._emit(")")
        else:
            self._write(node, ctx)

    def _write_binary(
        self,
        lhs: Node,
        operator: str,
        rhs: Node,
        ctx: WriterContext,
        precedence: int,
    ) -> None:
        right_assoc = operator == "**"
        self._write_operand(lhs, ctx, precedence + 1 if right_assoc else precedence)
        self._emit(f" {operator} ")
        self._write_operand(rhs, ctx, precedence if right_assoc else precedence + 1)

    def _write_inline_sequence(self, node: Node, ctx: WriterContext) -> None:
        """Render a statement sequence where only one expression fits."""
        if is_statement_list(node):
            self._emit("(")
            self._write_separated(node.statements, ctx.child("begin"), "; ")
            self._emit(")")
        else:
            self._write(node, ctx)

    def _write_assignment(self, name: str, value: Optional[Node], ctx: WriterContext) -> None:
        self._emit(name)
        if value is not None:
            self._emit(" = ")
            self._write_operand(value, ctx, ASSIGNMENT_PRECEDENCE)

    def _write_delimited(
        self,
        node: Node,
        items: Sequence[Node],
        ctx: WriterContext,
        opening: str,
        closing: str,
    ) -> None:
        if getattr(node, "begin_l", None) is not None:
            self._emit(opening)
        self._write_separated(items, ctx)
        if getattr(node, "end_l", None) is not None:
            self._emit(closing)

    # ---------------------------------------------------------------- literals

    def _write_int(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.value)

    def _write_float(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.value)

    def _write_rational(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.value)

    def _write_complex(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.value)

    def _write_true(self, node: Node, ctx: WriterContext) -> None:
        self._emit("true")

    def _write_false(self, node: Node, ctx: WriterContext) -> None:
        self._emit("false")

    def _write_nil(self, node: Node, ctx: WriterContext) -> None:
        self._emit("nil")

    def _write_self(self, node: Node, ctx: WriterContext) -> None:
        self._emit("self")

    def _write_file(self, node: Node, ctx: WriterContext) -> None:
        self._emit("__FILE__")

    def _write_line(self, node: Node, ctx: WriterContext) -> None:
        self._emit("__LINE__")

    def _write_encoding(self, node: Node, ctx: WriterContext) -> None:
        self._emit("__ENCODING__")

    def _write_str(self, node: Node, ctx: WriterContext) -> None:
        if ctx.parent_kind == "pair":
            self._write_label(node.value)
        elif node.begin_l is None and node.end_l is None:
            self._emit(node.value)
        else:
            self._emit('"' + escape_string(node.value) + '"')

    def _write_dstr(self, node: Node, ctx: WriterContext) -> None:
        if node.begin_l is None and ctx.parent_kind not in STRING_PARENTS:
            # Adjacent literals ("a" "b") keep their own delimiters.
            self._write_separated(node.parts, ctx.child("begin"), " ")
            return
        self._write_quoted_parts(node.parts, ctx.child("dstr"), '"')

    def _write_heredoc(self, node: Node, ctx: WriterContext) -> None:
        self._write_quoted_parts(node.parts, ctx.child("heredoc"), '"')

    def _write_xstr(self, node: Node, ctx: WriterContext) -> None:
        self._write_quoted_parts(node.parts, ctx.child("xstr"), "`")

    def _write_x_heredoc(self, node: Node, ctx: WriterContext) -> None:
        self._write_quoted_parts(node.parts, ctx.child("x_heredoc"), "`")

    def _write_sym(self, node: Node, ctx: WriterContext) -> None:
        name = node.name
        if ctx.parent_kind == "pair":
            self._write_label(name)
        elif node.begin_l is None:
            self._emit(name)
        elif node.end_l is None and is_plain_symbol(name):
            self._emit(":" + name)
        else:
            self._emit(':"' + escape_string(name) + '"')

    def _write_dsym(self, node: Node, ctx: WriterContext) -> None:
        if ctx.parent_kind == "pair":
            self._write_quoted_parts(node.parts, ctx.child("dsym"), '"')
            self._emit(":")
            return
        self._emit(":")
        self._write_quoted_parts(node.parts, ctx.child("dsym"), '"')

    def _write_label(self, name: str) -> None:
        if _PLAIN_LABEL.match(name):
            self._emit(name + ":")
        else:
            self._emit('"' + escape_string(name) + '":')

    def _write_regexp(self, node: Node, ctx: WriterContext) -> None:
        self._emit("/")
        self._write_parts(node.parts, ctx.child("regexp"), "/", raw=True)
        self._emit("/")
        self._write_optional(node.options, ctx)

    def _write_regopt(self, node: Node, ctx: WriterContext) -> None:
        if node.options:
            self._emit(node.options)

    def _write_quoted_parts(self, parts: Sequence[Node], ctx: WriterContext, delimiter: str) -> None:
        self._emit(delimiter)
        self._write_parts(parts, ctx, delimiter)
        self._emit(delimiter)

    def _write_parts(
        self, parts: Sequence[Node], ctx: WriterContext, delimiter: str, *, raw: bool = False
    ) -> None:
        """
        Render the body of an interpolated literal.

        Adjacent literal fragments are escaped together so that a `#` ending one
        fragment is judged against the text that follows it.
        """
        literal: List[str] = []
        for part in parts:
            if isinstance(part, Str):
                literal.append(part.value)
                continue
            self._flush_literal(literal, delimiter, raw)
            literal = []
            if isinstance(part, Dstr) and part.begin_l is None:
                self._write_parts(part.parts, ctx, delimiter, raw=raw)
            elif isinstance(part, Begin):
                self._write(part, ctx)
            elif isinstance(part, (Ivar, Cvar, Gvar, BackRef)):
                self._emit("#" + part.name)
            elif isinstance(part, NthRef):
                self._emit("#$" + part.name)
            else:
                self._unsupported(part, f"Unsupported interpolation part {part.type!r}")
        self._flush_literal(literal, delimiter, raw)

    def _flush_literal(self, literal: List[str], delimiter: str, raw: bool) -> None:
        if not literal:
            return
        text = "".join(literal)
        self._emit(escape_regexp(text) if raw else escape_string(text, delimiter))

    # --------------------------------------------------------------- variables

    def _write_lvar(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_ivar(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_cvar(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_gvar(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_nth_ref(self, node: Node, ctx: WriterContext) -> None:
        self._emit("$" + node.name)

    def _write_back_ref(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_const(self, node: Node, ctx: WriterContext) -> None:
        if node.scope is not None:
            self._write_operand(node.scope, ctx.child("const"), POSTFIX_PRECEDENCE)
        if node.scope is not None or node.double_colon_l is not None:
            self._emit("::")
        self._emit(node.name)

    def _write_cbase(self, node: Node, ctx: WriterContext) -> None:
        # The separator is written by the scoped constant itself.
        pass

    # ------------------------------------------------------------- assignments

    def _write_lvasgn(self, node: Node, ctx: WriterContext) -> None:
        self._write_assignment(node.name, node.value, ctx.child("lvasgn"))

    def _write_ivasgn(self, node: Node, ctx: WriterContext) -> None:
        self._write_assignment(node.name, node.value, ctx.child("ivasgn"))

    def _write_cvasgn(self, node: Node, ctx: WriterContext) -> None:
        self._write_assignment(node.name, node.value, ctx.child("cvasgn"))

    def _write_gvasgn(self, node: Node, ctx: WriterContext) -> None:
        self._write_assignment(node.name, node.value, ctx.child("gvasgn"))

    def _write_casgn(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("casgn")
        if node.scope is not None:
            self._write_operand(node.scope, child, POSTFIX_PRECEDENCE)
        if node.scope is not None or node.double_colon_l is not None:
            self._emit("::")
        self._write_assignment(node.name, node.value, child)

    def _write_op_asgn(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("op_asgn")
        self._write(node.recv, child)
        self._emit(f" {node.operator}= ")
        self._write_operand(node.value, child, ASSIGNMENT_PRECEDENCE)

    def _write_or_asgn(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("or_asgn")
        self._write(node.recv, child)
        self._emit(" ||= ")
        self._write_operand(node.value, child, ASSIGNMENT_PRECEDENCE)

    def _write_and_asgn(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("and_asgn")
        self._write(node.recv, child)
        self._emit(" &&= ")
        self._write_operand(node.value, child, ASSIGNMENT_PRECEDENCE)

    def _write_index_asgn(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("index_asgn")
        self._write_operand(node.recv, child, POSTFIX_PRECEDENCE)
        self._emit("[")
        self._write_separated(node.indexes, child)
        self._emit("]")
        if node.value is not None:
            self._emit(" = ")
            self._write_operand(node.value, child, ASSIGNMENT_PRECEDENCE)

    def _write_masgn(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("masgn")
        self._write(node.lhs, child)
        self._emit(" = ")
        self._write_operand(node.rhs, child, ASSIGNMENT_PRECEDENCE)

    def _write_mlhs(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.items, ctx.child("mlhs"), "(", ")")

    # ------------------------------------------------------------- expressions

    def _write_and(self, node: Node, ctx: WriterContext) -> None:
        self._write_binary(node.lhs, "&&", node.rhs, ctx.child("and"), AND_PRECEDENCE)

    def _write_or(self, node: Node, ctx: WriterContext) -> None:
        self._write_binary(node.lhs, "||", node.rhs, ctx.child("or"), OR_PRECEDENCE)

    def _write_array(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.elements, ctx.child("array"), "[", "]")

    def _write_hash(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.pairs, ctx.child("hash"), "{", "}")

    def _write_kwargs(self, node: Node, ctx: WriterContext) -> None:
        self._write_separated(node.pairs, ctx.child("hash"))

    def _write_pair(self, node: Node, ctx: WriterContext) -> None:
        if node.operator_l is not None:
            label = node.operator_l.size < 2 and node.key.type in ("sym", "dsym", "str")
        else:
            label = node.key.type == "sym"
        if label:
            self._write(node.key, ctx.child("pair"))
            self._emit(" ")
        else:
            self._write(node.key, ctx.child("hash"))
            self._emit(" => ")
        self._write(node.value, ctx.child("hash"))

    def _write_kwsplat(self, node: Node, ctx: WriterContext) -> None:
        self._emit("**")
        if node.value is not None:
            self._write_operand(node.value, ctx.child("kwsplat"), POSTFIX_PRECEDENCE)

    def _write_splat(self, node: Node, ctx: WriterContext) -> None:
        self._emit("*")
        if node.value is not None:
            self._write_operand(node.value, ctx.child("splat"), POSTFIX_PRECEDENCE)

    def _write_block_pass(self, node: Node, ctx: WriterContext) -> None:
        self._emit("&")
        if node.value is not None:
            self._write_operand(node.value, ctx.child("block_pass"), POSTFIX_PRECEDENCE)

    def _write_index(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("index")
        self._write_operand(node.recv, child, POSTFIX_PRECEDENCE)
        self._emit("[")
        self._write_separated(node.indexes, child)
        self._emit("]")

    def _write_range(self, node: Node, operator: str, ctx: WriterContext) -> None:
        if node.left is not None:
            self._write_operand(node.left, ctx, RANGE_PRECEDENCE + 1)
        self._emit(operator)
        if node.right is not None:
            self._write_operand(node.right, ctx, RANGE_PRECEDENCE + 1)

    def _write_irange(self, node: Node, ctx: WriterContext) -> None:
        self._write_range(node, "..", ctx.child("irange"))

    def _write_erange(self, node: Node, ctx: WriterContext) -> None:
        self._write_range(node, "...", ctx.child("erange"))

    def _write_iflipflop(self, node: Node, ctx: WriterContext) -> None:
        self._write_range(node, "..", ctx.child("iflipflop"))

    def _write_eflipflop(self, node: Node, ctx: WriterContext) -> None:
        self._write_range(node, "...", ctx.child("eflipflop"))

    def _write_defined(self, node: Node, ctx: WriterContext) -> None:
        if node.begin_l is not None:
            self._emit("defined?(")
            self._write(node.value, ctx.child("defined"))
            self._emit(")")
        else:
            self._emit("defined? ")
            self._write(node.value, ctx.child("defined"))

    # ----------------------------------------------------------------- control

    def _write_if(self, node: Node, ctx: WriterContext) -> None:
        keyword_size = node.keyword_l.size if node.keyword_l is not None else None
        unless = keyword_size == 6 or (node.if_true is None and node.if_false is not None)
        inner = ctx.child("if").indented()
        if unless:
            self._emit("unless ")
            self._write(node.cond, ctx.child("if"))
            self._emit("\n")
            self._write_body(node.if_false, inner)
            if node.if_true is not None:
                self._emit(ctx.padding + "else\n")
                self._write_body(node.if_true, inner)
        else:
            self._emit("if ")
            self._write(node.cond, ctx.child("if"))
            self._emit("\n")
            self._write_if_branches(node, ctx)
        self._emit(ctx.padding + "end")

    def _write_if_branches(self, node: If, ctx: WriterContext) -> None:
        inner = ctx.child("if").indented()
        self._write_body(node.if_true, inner)
        alternative = node.if_false
        if (
            isinstance(alternative, If)
            and alternative.keyword_l is not None
            and alternative.keyword_l.size == 5
        ):
            self._emit(ctx.padding + "elsif ")
            self._write(alternative.cond, ctx.child("if"))
            self._emit("\n")
            self._write_if_branches(alternative, ctx)
        elif alternative is not None:
            self._emit(ctx.padding + "else\n")
            self._write_body(alternative, inner)

    def _write_if_mod(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("if_mod")
        keyword = "if" if node.if_true is not None else "unless"
        body = node.if_true if node.if_true is not None else node.if_false
        if body is None:
            self._emit("nil")
        else:
            self._write_inline_sequence(body, child)
        self._emit(f" {keyword} ")
        self._write(node.cond, child)

    def _write_if_ternary(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("if_ternary")
        self._write_operand(node.cond, child, TERNARY_PRECEDENCE + 1)
        self._emit(" ? ")
        self._write_operand(node.if_true, child, TERNARY_PRECEDENCE)
        self._emit(" : ")
        self._write_operand(node.if_false, child, TERNARY_PRECEDENCE)

    def _write_clause_list(self, clauses, else_body, ctx: WriterContext) -> None:
        clause_ctx = ctx.indented()
        for clause in clauses:
            self._emit(clause_ctx.padding)
            self._write(clause, clause_ctx)
        if else_body is not None:
            self._emit(clause_ctx.padding + "else\n")
            if not isinstance(else_body, EmptyElse):
                self._write_body(else_body, clause_ctx.indented(), clauses=False)

    def _write_case(self, node: Node, ctx: WriterContext) -> None:
        self._emit("case")
        if node.expr is not None:
            self._emit(" ")
            self._write(node.expr, ctx.child("case"))
        self._emit("\n")
        self._write_clause_list(node.when_bodies, node.else_body, ctx.child("case"))
        self._emit(ctx.padding + "end")

    def _write_when(self, node: Node, ctx: WriterContext) -> None:
        self._emit("when ")
        self._write_separated(node.patterns, ctx.child("when"))
        self._emit("\n")
        self._write_body(node.body, ctx.child("when").indented(), clauses=False)

    def _write_case_match(self, node: Node, ctx: WriterContext) -> None:
        self._emit("case ")
        self._write(node.expr, ctx.child("case_match"))
        self._emit("\n")
        self._write_clause_list(node.in_bodies, node.else_body, ctx.child("case_match"))
        self._emit(ctx.padding + "end")

    def _write_in_pattern(self, node: Node, ctx: WriterContext) -> None:
        self._emit("in ")
        self._write(node.pattern, ctx.child("in_pattern"))
        if node.guard is not None:
            self._emit(" ")
            self._write(node.guard, ctx.child("in_pattern"))
        self._emit("\n")
        self._write_body(node.body, ctx.child("in_pattern").indented(), clauses=False)

    def _write_if_guard(self, node: Node, ctx: WriterContext) -> None:
        self._emit("if ")
        self._write(node.cond, ctx.child("if_guard"))

    def _write_unless_guard(self, node: Node, ctx: WriterContext) -> None:
        self._emit("unless ")
        self._write(node.cond, ctx.child("unless_guard"))

    def _write_loop(self, keyword: str, node: Node, ctx: WriterContext) -> None:
        child = ctx.child(node.type)
        if node.end_l is None and node.body is not None:
            self._write_inline_sequence(node.body, child)
            self._emit(f" {keyword} ")
            self._write(node.cond, child)
            return
        self._emit(f"{keyword} ")
        self._write(node.cond, child)
        self._emit("\n")
        self._write_body(node.body, child.indented(), clauses=False)
        self._emit(ctx.padding + "end")

    def _write_while(self, node: Node, ctx: WriterContext) -> None:
        self._write_loop("while", node, ctx)

    def _write_until(self, node: Node, ctx: WriterContext) -> None:
        self._write_loop("until", node, ctx)

    def _write_while_post(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.body, ctx.child("while_post"))
        self._emit(" while ")
        self._write(node.cond, ctx.child("while_post"))

    def _write_until_post(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.body, ctx.child("until_post"))
        self._emit(" until ")
        self._write(node.cond, ctx.child("until_post"))

    def _write_for(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("for")
        self._emit("for ")
        self._write(node.iterator, child)
        self._emit(" in ")
        self._write(node.iteratee, child)
        self._emit("\n")
        self._write_body(node.body, child.indented(), clauses=False)
        self._emit(ctx.padding + "end")

    def _write_jump(self, keyword: str, node: Node, ctx: WriterContext) -> None:
        self._emit(keyword)
        if node.args:
            self._emit(" ")
            self._write_separated(node.args, ctx.child(node.type))

    def _write_break(self, node: Node, ctx: WriterContext) -> None:
        self._write_jump("break", node, ctx)

    def _write_next(self, node: Node, ctx: WriterContext) -> None:
        self._write_jump("next", node, ctx)

    def _write_return(self, node: Node, ctx: WriterContext) -> None:
        self._write_jump("return", node, ctx)

    def _write_redo(self, node: Node, ctx: WriterContext) -> None:
        self._emit("redo")

    def _write_retry(self, node: Node, ctx: WriterContext) -> None:
        self._emit("retry")

    def _write_begin(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("begin")
        if ctx.parent_kind in STRING_PARENTS:
            self._emit("#{")
            self._write_separated(node.statements, child, "; ")
            self._emit("}")
        elif node.begin_l is not None:
            self._emit("(")
            self._write_separated(node.statements, child, "; ")
            self._emit(")")
        else:
            for index, statement in enumerate(node.statements):
                if index:
                    self._emit("\n" + ctx.padding)
                self._write(statement, ctx)

    def _write_kwbegin(self, node: Node, ctx: WriterContext) -> None:
        inner = ctx.child("kwbegin").indented()
        self._emit("begin\n")
        for statement in node.statements:
            self._write_body(statement, inner)
        self._emit(ctx.padding + "end")

    def _write_clauses(self, node: Node, ctx: WriterContext) -> None:
        if isinstance(node, Ensure):
            self._write_body(node.body, ctx)
            self._emit(ctx.outdented().padding + "ensure\n")
            self._write_body(node.ensure, ctx, clauses=False)
            return
        self._write_body(node.body, ctx, clauses=False)
        keyword_ctx = ctx.outdented().child("rescue")
        for clause in node.rescue_bodies:
            self._emit(keyword_ctx.padding)
            self._write(clause, keyword_ctx)
        if node.else_ is not None:
            self._emit(keyword_ctx.padding + "else\n")
            self._write_body(node.else_, ctx, clauses=False)

    def _write_wrapped_clauses(self, node: Node, ctx: WriterContext) -> None:
        self._emit("begin\n")
        self._write_clauses(node, ctx.child(node.type).indented())
        self._emit(ctx.padding + "end")

    def _write_rescue(self, node: Node, ctx: WriterContext) -> None:
        if _is_modifier_rescue(node):
            child = ctx.child("rescue")
            self._write_operand(node.body, child, ASSIGNMENT_PRECEDENCE)
            self._emit(" rescue ")
            self._write_operand(node.rescue_bodies[0].body, child, ASSIGNMENT_PRECEDENCE)
            return
        self._write_wrapped_clauses(node, ctx)

    def _write_rescue_body(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("rescue_body")
        self._emit("rescue")
        if node.exc_list is not None:
            self._emit(" ")
            self._write(node.exc_list, child)
        if node.exc_var is not None:
            self._emit(" => ")
            self._write(node.exc_var, child)
        self._emit("\n")
        self._write_body(node.body, child.indented(), clauses=False)

    def _write_ensure(self, node: Node, ctx: WriterContext) -> None:
        self._write_wrapped_clauses(node, ctx)

    def _write_empty_else(self, node: Node, ctx: WriterContext) -> None:
        # The `else` keyword is owned by the enclosing case.
        pass

    def _write_brace_body(self, body: Optional[Node], ctx: WriterContext) -> None:
        if body is None:
            self._emit(" }")
        elif _is_block_structured(body):
            self._emit("\n")
            self._write_body(body, ctx.indented(), clauses=False)
            self._emit(ctx.padding + "}")
        else:
            self._emit(" ")
            self._write(body, ctx)
            self._emit(" }")

    def _write_preexe(self, node: Node, ctx: WriterContext) -> None:
        self._emit("BEGIN {")
        self._write_brace_body(node.body, ctx.child("preexe"))

    def _write_postexe(self, node: Node, ctx: WriterContext) -> None:
        self._emit("END {")
        self._write_brace_body(node.body, ctx.child("postexe"))

    # ------------------------------------------------------------- definitions

    def _write_def(self, node: Node, ctx: WriterContext) -> None:
        self._emit("def ")
        self._write_method(node, ctx)

    def _write_defs(self, node: Node, ctx: WriterContext) -> None:
        self._emit("def ")
        self._write_operand(node.definee, ctx.child("defs"), POSTFIX_PRECEDENCE)
        self._emit(".")
        self._write_method(node, ctx)

    def _write_method(self, node, ctx) -> None:
        child = ctx.child(node.type)
        self._emit(node.name)
        if node.args is not None:
            self._emit("(")
            self._write(node.args, child)
            self._emit(")")
        if node.assignment_l is not None:
            self._emit(" = ")
            self._write_optional(node.body, child)
            return
        self._emit("\n")
        if not (self.documentation is not None and self.documentation.method_body_excluded):
            self._write_body(node.body, child.indented())
        self._emit(ctx.padding + "end")

    def _write_class(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("class")
        self._emit("class ")
        self._write(node.name, child)
        if node.superclass is not None:
            self._emit(" < ")
            self._write(node.superclass, child)
        self._emit("\n")
        self._write_body(node.body, child.indented())
        self._emit(ctx.padding + "end")

    def _write_module(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("module")
        self._emit("module ")
        self._write(node.name, child)
        self._emit("\n")
        self._write_body(node.body, child.indented())
        self._emit(ctx.padding + "end")

    def _write_sclass(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("sclass")
        self._emit("class << ")
        self._write(node.expr, child)
        self._emit("\n")
        self._write_body(node.body, child.indented())
        self._emit(ctx.padding + "end")

    def _write_alias(self, node: Node, ctx: WriterContext) -> None:
        self._emit("alias ")
        self._write(node.to, ctx.child("alias"))
        self._emit(" ")
        self._write(node.from_, ctx.child("alias"))

    def _write_undef(self, node: Node, ctx: WriterContext) -> None:
        self._emit("undef ")
        self._write_separated(node.names, ctx.child("undef"))

    def _write_args(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("args")
        regular = [arg for arg in node.args if not isinstance(arg, Shadowarg)]
        shadow = [arg for arg in node.args if isinstance(arg, Shadowarg)]
        self._write_separated(regular, child)
        if node.trailing_comma_l is not None:
            self._emit(",")
        if shadow:
            self._emit("; ")
            self._write_separated(shadow, child)

    def _write_arg(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_optarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit(f"{node.name} = ")
        self._write(node.default, ctx.child("optarg"))

    def _write_restarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit("*" + (node.name or ""))

    def _write_kwarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit(f"{node.name}:")

    def _write_kwoptarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit(f"{node.name}: ")
        self._write(node.default, ctx.child("kwoptarg"))

    def _write_kwrestarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit("**" + (node.name or ""))

    def _write_kwnilarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit("**nil")

    def _write_blockarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit("&" + (node.name or ""))

    def _write_shadowarg(self, node: Node, ctx: WriterContext) -> None:
        self._emit(node.name)

    def _write_procarg0(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.args, ctx.child("procarg0"), "(", ")")

    def _write_forward_arg(self, node: Node, ctx: WriterContext) -> None:
        self._emit("...")

    def _write_forwarded_args(self, node: Node, ctx: WriterContext) -> None:
        self._emit("...")

    # ------------------------------------------------------------------- calls

    def _write_send(self, node: Node, ctx: WriterContext) -> None:
        self._write_call(node, ctx)

    def _write_csend(self, node: Node, ctx: WriterContext) -> None:
        self._write_call(node, ctx)

    def _write_call(self, node, ctx, *, force_parens: bool = False) -> None:
        child = ctx.child(node.type)
        name = node.method_name
        recv = node.recv

        if _is_operator_send(node):
            if name in UNARY_OPERATORS and not node.args:
                self._emit(UNARY_OPERATORS[name])
                minimum = NEGATE_PRECEDENCE if name == "-@" else NOT_PRECEDENCE
                self._write_operand(recv, child, minimum)
                return
            if name in BINARY_PRECEDENCE and len(node.args) == 1:
                self._write_binary(recv, name, node.args[0], child, BINARY_PRECEDENCE[name])
                return
            if name == "[]":
                self._write_operand(recv, child, POSTFIX_PRECEDENCE)
                self._emit("[")
                self._write_separated(node.args, child)
                self._emit("]")
                return
            if name == "[]=" and node.args:
                self._write_operand(recv, child, POSTFIX_PRECEDENCE)
                self._emit("[")
                self._write_separated(node.args[:-1], child)
                self._emit("] = ")
                self._write_operand(node.args[-1], child, ASSIGNMENT_PRECEDENCE)
                return

        if recv is not None:
            self._write_operand(recv, child, POSTFIX_PRECEDENCE)
            if isinstance(node, CSend):
                self._emit("&.")
            elif node.dot_l is not None and node.dot_l.size == 2:
                self._emit("::")
            else:
                self._emit(".")

        if _is_attribute_assignment(node):
            self._emit(name[:-1] + " = ")
            self._write_separated(node.args, child)
            return

        self._emit(name)
        self._write_arguments(node.args, node.begin_l is not None, child, force_parens)

    def _write_arguments(self, args, parenthesized, ctx, force_parens=False) -> None:
        # A leading brace literal would be read as a block without parentheses.
        leading_hash = bool(args) and isinstance(args[0], Hash) and args[0].begin_l is not None
        if parenthesized or (args and (force_parens or leading_hash)):
            self._emit("(")
            self._write_separated(args, ctx)
            self._emit(")")
        elif args:
            self._emit(" ")
            self._write_separated(args, ctx)

    def _write_super(self, node: Node, ctx: WriterContext) -> None:
        self._emit("super")
        self._write_arguments(
            node.args, node.begin_l is not None or not node.args, ctx.child("super")
        )

    def _write_zsuper(self, node: Node, ctx: WriterContext) -> None:
        self._emit("super")

    def _write_yield(self, node: Node, ctx: WriterContext) -> None:
        self._emit("yield")
        self._write_arguments(node.args, node.begin_l is not None, ctx.child("yield"))

    def _write_lambda(self, node: Node, ctx: WriterContext) -> None:
        self._emit("->")

    def _write_block(self, node: Node, ctx: WriterContext) -> None:
        do_block = _is_do_block(node)
        child = ctx.child("block")
        stabby = isinstance(node.call, Lambda)
        if stabby:
            self._emit("->")
            if node.args is not None:
                self._emit("(")
                self._write(node.args, child)
                self._emit(")")
        else:
            self._write_block_call(node.call, child, not do_block)
        self._emit(" do" if do_block else " {")
        if node.args is not None and not stabby:
            self._emit(" |")
            self._write(node.args, child)
            self._emit("|")
        if do_block:
            self._emit("\n")
            self._write_body(node.body, child.indented())
            self._emit(ctx.padding + "end")
        else:
            self._write_brace_body(node.body, child)

    def _write_block_call(self, call: Node, ctx: WriterContext, brace: bool) -> None:
        if isinstance(call, (Send, CSend)):
            self._write_call(call, ctx, force_parens=brace)
        else:
            self._write(call, ctx)

    def _write_numblock(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("numblock")
        if isinstance(node.call, Lambda):
            self._emit("->")
        else:
            self._write_block_call(node.call, child, True)
        self._emit(" {")
        self._write_brace_body(node.body, child)

    # ---------------------------------------------------------------- patterns

    def _write_array_pattern(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.elements, ctx.child("array_pattern"), "[", "]")

    def _write_array_pattern_with_tail(self, node: Node, ctx: WriterContext) -> None:
        if node.begin_l is not None:
            self._emit("[")
        self._write_separated(node.elements, ctx.child("array_pattern_with_tail"))
        self._emit(",")
        if node.end_l is not None:
            self._emit("]")

    def _write_hash_pattern(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.elements, ctx.child("hash_pattern"), "{", "}")

    def _write_find_pattern(self, node: Node, ctx: WriterContext) -> None:
        self._write_delimited(node, node.elements, ctx.child("find_pattern"), "[", "]")

    def _write_const_pattern(self, node: Node, ctx: WriterContext) -> None:
        child = ctx.child("const_pattern")
        self._write(node.const, child)
        self._emit("(")
        self._write(node.pattern, child)
        self._emit(")")

    def _write_match_var(self, node: Node, ctx: WriterContext) -> None:
        if ctx.parent_kind == "hash_pattern":
            self._emit(node.name + ":")
        else:
            self._emit(node.name)

    def _write_match_rest(self, node: Node, ctx: WriterContext) -> None:
        self._emit("**" if ctx.parent_kind == "hash_pattern" else "*")
        self._write_optional(node.name, ctx.child("match_rest"))

    def _write_match_as(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.value, ctx.child("match_as"))
        self._emit(" => ")
        self._write(node.as_, ctx.child("match_as"))

    def _write_match_alt(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.lhs, ctx.child("match_alt"))
        self._emit(" | ")
        self._write(node.rhs, ctx.child("match_alt"))

    def _write_match_nil_pattern(self, node: Node, ctx: WriterContext) -> None:
        self._emit("**nil")

    def _write_match_pattern(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.value, ctx.child("match_pattern"))
        self._emit(" => ")
        self._write(node.pattern, ctx.child("match_pattern"))

    def _write_match_pattern_p(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.value, ctx.child("match_pattern_p"))
        self._emit(" in ")
        self._write(node.pattern, ctx.child("match_pattern_p"))

    def _write_match_current_line(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.re, ctx.child("match_current_line"))

    def _write_match_with_lvasgn(self, node: Node, ctx: WriterContext) -> None:
        self._write(node.re, ctx.child("match_with_lvasgn"))
        self._emit(" =~ ")
        self._write(node.value, ctx.child("match_with_lvasgn"))

    def _write_pin(self, node: Node, ctx: WriterContext) -> None:
        self._emit("^")
        self._write(node.var, ctx.child("pin"))


def write_code(
    node: Node,
    sink,
    context: Optional[WriterContext] = None,
    *,
    documentation: Optional[DocumentationContext] = None,
    strict: bool = False,
) -> List[str]:
    """
    Render ``node`` into ``sink`` and return the placeholder diagnostics.

    Errors raised by the sink propagate unchanged.
    """
    writer = CodeWriter(sink, documentation=documentation, strict=strict)
    writer.write(node, context)
    return writer.diagnostics


def render_node(node: Node, *, strict: bool = False) -> str:
    """Render a single expression to a string."""
    buffer = io.StringIO()
    write_code(node, buffer, strict=strict)
    return buffer.getvalue()


@dataclass(frozen=True)
class EmitOptions:
    trailing_newline: bool = True
    strict: bool = False
    documentation: Optional[DocumentationContext] = None


@dataclass(frozen=True)
class EmitResult:
    source: str
    diagnostics: List[str]


def emit_module(root: Optional[Node], options: Optional[EmitOptions] = None) -> EmitResult:
    """
    Render a program tree to Ruby source text, one top-level statement per line.
    """
    options = options or EmitOptions()

    buffer = io.StringIO()
    writer = CodeWriter(buffer, documentation=options.documentation, strict=options.strict)
    writer.write_program(root)

    source = buffer.getvalue()
    if not options.trailing_newline and source.endswith("\n"):
        source = source[:-1]

    return EmitResult(source=source, diagnostics=list(writer.diagnostics))


__all__ = [
    "CodeWriter",
    "EmitOptions",
    "EmitResult",
    "PLACEHOLDER",
    "UnsupportedNodeError",
    "emit_module",
    "escape_regexp",
    "escape_string",
    "is_plain_symbol",
    "render_node",
    "write_code",
]

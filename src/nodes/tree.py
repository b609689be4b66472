"""
Typed Ruby syntax tree consumed by the writer and the tree transforms.

Every node kind is a mutable dataclass tagged with a class level ``type`` string
(``"send"``, ``"lvasgn"``, ``"kwbegin"`` ...). Declaring a subclass registers it in
``NODE_TYPES`` so visitors can dispatch on the tag and tests can check that a
consumer handles every kind.

Source spans (``Loc``) are kept only where they record whether a surface token
was present in the original text (brackets, parentheses, quotes, ``do`` vs ``{``).
They are presence markers: the writer looks at whether they are set and, for a
few of them, at their width, never at the offsets themselves. The only consumer
of real offsets is the documentation lookup, which uses ``expression_l``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Iterator, List, Optional, Type


@dataclass(frozen=True)
class Loc:
    """Half-open byte range ``[begin, end)`` in the parsed source."""

    begin: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.begin


def synthetic_loc(width: int = 1) -> Loc:
    """Marker for a token that a transform introduces (no real source position)."""
    return Loc(0, width)


NODE_TYPES: Dict[str, Type["Node"]] = {}


@dataclass
class Node:
    """Base class of all node kinds."""

    type = "node"

    expression_l: Optional[Loc] = field(
        default=None, kw_only=True, repr=False, compare=False
    )

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        NODE_TYPES[cls.type] = cls


# ---------------------------------------------------------------- literals


@dataclass
class Int(Node):
    """Integer literal, ``value`` is the source spelling (``1_000``, ``0x1f``)."""

    type = "int"
    value: str


@dataclass
class Float(Node):
    type = "float"
    value: str


@dataclass
class Rational(Node):
    type = "rational"
    value: str


@dataclass
class Complex(Node):
    type = "complex"
    value: str


@dataclass
class Str(Node):
    """String literal; ``value`` is the decoded content (escapes resolved)."""

    type = "str"
    value: str
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Dstr(Node):
    """Interpolated string, or adjacent literals when no quotes are recorded."""

    type = "dstr"
    parts: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Sym(Node):
    type = "sym"
    name: str
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Dsym(Node):
    type = "dsym"
    parts: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Xstr(Node):
    """Backtick command string."""

    type = "xstr"
    parts: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Heredoc(Node):
    type = "heredoc"
    parts: List[Node] = field(default_factory=list)
    heredoc_body_l: Optional[Loc] = None
    heredoc_end_l: Optional[Loc] = None


@dataclass
class XHeredoc(Node):
    type = "x_heredoc"
    parts: List[Node] = field(default_factory=list)
    heredoc_body_l: Optional[Loc] = None
    heredoc_end_l: Optional[Loc] = None


@dataclass
class Regexp(Node):
    """Regexp literal; ``str`` parts hold raw source text (escapes kept)."""

    type = "regexp"
    parts: List[Node] = field(default_factory=list)
    options: Optional[Node] = None
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class RegOpt(Node):
    type = "regopt"
    options: Optional[str] = None


@dataclass
class True_(Node):
    type = "true"


@dataclass
class False_(Node):
    type = "false"


@dataclass
class Nil(Node):
    type = "nil"


@dataclass
class Self_(Node):
    type = "self"


@dataclass
class File(Node):
    type = "file"


@dataclass
class Line(Node):
    type = "line"


@dataclass
class Encoding(Node):
    type = "encoding"


# --------------------------------------------------------------- variables


@dataclass
class Lvar(Node):
    type = "lvar"
    name: str


@dataclass
class Ivar(Node):
    type = "ivar"
    name: str


@dataclass
class Cvar(Node):
    type = "cvar"
    name: str


@dataclass
class Gvar(Node):
    type = "gvar"
    name: str


@dataclass
class NthRef(Node):
    """``$1``; ``name`` holds the digits only."""

    type = "nth_ref"
    name: str


@dataclass
class BackRef(Node):
    type = "back_ref"
    name: str


@dataclass
class Const(Node):
    type = "const"
    scope: Optional[Node]
    name: str
    double_colon_l: Optional[Loc] = None


@dataclass
class Cbase(Node):
    """Top-level scope marker (leading ``::``)."""

    type = "cbase"


# ------------------------------------------------------------- assignments


@dataclass
class Lvasgn(Node):
    type = "lvasgn"
    name: str
    value: Optional[Node] = None


@dataclass
class Ivasgn(Node):
    type = "ivasgn"
    name: str
    value: Optional[Node] = None


@dataclass
class Cvasgn(Node):
    type = "cvasgn"
    name: str
    value: Optional[Node] = None


@dataclass
class Gvasgn(Node):
    type = "gvasgn"
    name: str
    value: Optional[Node] = None


@dataclass
class Casgn(Node):
    type = "casgn"
    scope: Optional[Node]
    name: str
    value: Optional[Node] = None
    double_colon_l: Optional[Loc] = None


@dataclass
class OpAsgn(Node):
    """``recv op= value``; ``recv`` is a value-less assignment, send or index."""

    type = "op_asgn"
    recv: Node
    operator: str
    value: Node


@dataclass
class OrAsgn(Node):
    type = "or_asgn"
    recv: Node
    value: Node


@dataclass
class AndAsgn(Node):
    type = "and_asgn"
    recv: Node
    value: Node


@dataclass
class IndexAsgn(Node):
    type = "index_asgn"
    recv: Node
    indexes: List[Node] = field(default_factory=list)
    value: Optional[Node] = None


@dataclass
class Masgn(Node):
    type = "masgn"
    lhs: Node
    rhs: Node


@dataclass
class Mlhs(Node):
    type = "mlhs"
    items: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


# ------------------------------------------------------------- expressions


@dataclass
class And(Node):
    type = "and"
    lhs: Node
    rhs: Node


@dataclass
class Or(Node):
    type = "or"
    lhs: Node
    rhs: Node


@dataclass
class Array(Node):
    type = "array"
    elements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Hash(Node):
    type = "hash"
    pairs: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Pair(Node):
    """Hash entry; an ``operator_l`` two or more wide is ``=>``, else label form."""

    type = "pair"
    key: Node
    value: Node
    operator_l: Optional[Loc] = None


@dataclass
class Kwargs(Node):
    """Brace-less trailing hash in an argument list."""

    type = "kwargs"
    pairs: List[Node] = field(default_factory=list)


@dataclass
class Kwsplat(Node):
    type = "kwsplat"
    value: Optional[Node] = None


@dataclass
class Splat(Node):
    type = "splat"
    value: Optional[Node] = None


@dataclass
class BlockPass(Node):
    type = "block_pass"
    value: Optional[Node] = None


@dataclass
class Index(Node):
    type = "index"
    recv: Node
    indexes: List[Node] = field(default_factory=list)


@dataclass
class Irange(Node):
    type = "irange"
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass
class Erange(Node):
    type = "erange"
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass
class IFlipFlop(Node):
    type = "iflipflop"
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass
class EFlipFlop(Node):
    type = "eflipflop"
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass
class Defined(Node):
    type = "defined"
    value: Node
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


# ---------------------------------------------------------------- control


@dataclass
class If(Node):
    """``if``/``unless``/``elsif``; ``keyword_l`` width tells which keyword."""

    type = "if"
    cond: Node
    if_true: Optional[Node] = None
    if_false: Optional[Node] = None
    keyword_l: Optional[Loc] = None


@dataclass
class IfMod(Node):
    type = "if_mod"
    cond: Node
    if_true: Optional[Node] = None
    if_false: Optional[Node] = None


@dataclass
class IfTernary(Node):
    type = "if_ternary"
    cond: Node
    if_true: Node
    if_false: Node


@dataclass
class Case(Node):
    type = "case"
    expr: Optional[Node]
    when_bodies: List[Node] = field(default_factory=list)
    else_body: Optional[Node] = None


@dataclass
class When(Node):
    type = "when"
    patterns: List[Node] = field(default_factory=list)
    body: Optional[Node] = None


@dataclass
class CaseMatch(Node):
    type = "case_match"
    expr: Node
    in_bodies: List[Node] = field(default_factory=list)
    else_body: Optional[Node] = None


@dataclass
class InPattern(Node):
    type = "in_pattern"
    pattern: Node
    guard: Optional[Node] = None
    body: Optional[Node] = None


@dataclass
class IfGuard(Node):
    type = "if_guard"
    cond: Node


@dataclass
class UnlessGuard(Node):
    type = "unless_guard"
    cond: Node


@dataclass
class While(Node):
    """Prefix loop when ``end_l`` is recorded, statement modifier otherwise."""

    type = "while"
    cond: Node
    body: Optional[Node] = None
    end_l: Optional[Loc] = None


@dataclass
class Until(Node):
    type = "until"
    cond: Node
    body: Optional[Node] = None
    end_l: Optional[Loc] = None


@dataclass
class WhilePost(Node):
    type = "while_post"
    cond: Node
    body: Node


@dataclass
class UntilPost(Node):
    type = "until_post"
    cond: Node
    body: Node


@dataclass
class For(Node):
    type = "for"
    iterator: Node
    iteratee: Node
    body: Optional[Node] = None


@dataclass
class Break(Node):
    type = "break"
    args: List[Node] = field(default_factory=list)


@dataclass
class Next(Node):
    type = "next"
    args: List[Node] = field(default_factory=list)


@dataclass
class Redo(Node):
    type = "redo"


@dataclass
class Retry(Node):
    type = "retry"


@dataclass
class Return(Node):
    type = "return"
    args: List[Node] = field(default_factory=list)


@dataclass
class Begin(Node):
    """Statement sequence; parenthesized when ``begin_l`` is recorded."""

    type = "begin"
    statements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class KwBegin(Node):
    """Explicit ``begin ... end`` block."""

    type = "kwbegin"
    statements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Rescue(Node):
    type = "rescue"
    body: Optional[Node] = None
    rescue_bodies: List[Node] = field(default_factory=list)
    else_: Optional[Node] = None


@dataclass
class RescueBody(Node):
    type = "rescue_body"
    exc_list: Optional[Node] = None
    exc_var: Optional[Node] = None
    body: Optional[Node] = None


@dataclass
class Ensure(Node):
    type = "ensure"
    body: Optional[Node] = None
    ensure: Optional[Node] = None


@dataclass
class EmptyElse(Node):
    type = "empty_else"


@dataclass
class Preexe(Node):
    type = "preexe"
    body: Optional[Node] = None


@dataclass
class Postexe(Node):
    type = "postexe"
    body: Optional[Node] = None


# ------------------------------------------------------------- definitions


@dataclass
class Def(Node):
    """Method definition; endless (``def m = expr``) when ``assignment_l`` is set."""

    type = "def"
    name: str
    args: Optional[Node] = None
    body: Optional[Node] = None
    assignment_l: Optional[Loc] = None


@dataclass
class Defs(Node):
    type = "defs"
    definee: Node
    name: str
    args: Optional[Node] = None
    body: Optional[Node] = None
    assignment_l: Optional[Loc] = None


@dataclass
class Class(Node):
    type = "class"
    name: Node
    superclass: Optional[Node] = None
    body: Optional[Node] = None


@dataclass
class Module(Node):
    type = "module"
    name: Node
    body: Optional[Node] = None


@dataclass
class SClass(Node):
    """``class << expr`` reopening of a singleton class."""

    type = "sclass"
    expr: Node
    body: Optional[Node] = None


@dataclass
class Alias(Node):
    type = "alias"
    to: Node
    from_: Node


@dataclass
class Undef(Node):
    type = "undef"
    names: List[Node] = field(default_factory=list)


@dataclass
class Args(Node):
    type = "args"
    args: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None
    trailing_comma_l: Optional[Loc] = None


@dataclass
class Arg(Node):
    type = "arg"
    name: str


@dataclass
class Optarg(Node):
    type = "optarg"
    name: str
    default: Node


@dataclass
class Restarg(Node):
    type = "restarg"
    name: Optional[str] = None


@dataclass
class Kwarg(Node):
    type = "kwarg"
    name: str


@dataclass
class Kwoptarg(Node):
    type = "kwoptarg"
    name: str
    default: Node


@dataclass
class Kwrestarg(Node):
    type = "kwrestarg"
    name: Optional[str] = None


@dataclass
class Kwnilarg(Node):
    type = "kwnilarg"


@dataclass
class Blockarg(Node):
    type = "blockarg"
    name: Optional[str] = None


@dataclass
class Shadowarg(Node):
    """Block-local variable (``|x; y|``)."""

    type = "shadowarg"
    name: str


@dataclass
class Procarg0(Node):
    type = "procarg0"
    args: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class ForwardArg(Node):
    type = "forward_arg"


@dataclass
class ForwardedArgs(Node):
    type = "forwarded_args"


# ------------------------------------------------------------------- calls


@dataclass
class Send(Node):
    """
    Method call. ``dot_l`` two wide is ``::``; ``begin_l``/``end_l`` record
    argument parentheses; ``operator_l`` marks attribute assignment
    (``recv.name = value`` with ``method_name`` ending in ``=``).
    """

    type = "send"
    recv: Optional[Node]
    method_name: str
    args: List[Node] = field(default_factory=list)
    dot_l: Optional[Loc] = None
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None
    operator_l: Optional[Loc] = None


@dataclass
class CSend(Node):
    """Safe-navigation call (``recv&.name``)."""

    type = "csend"
    recv: Node
    method_name: str
    args: List[Node] = field(default_factory=list)
    dot_l: Optional[Loc] = None
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None
    operator_l: Optional[Loc] = None


@dataclass
class Super(Node):
    type = "super"
    args: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class ZSuper(Node):
    """Bare ``super`` forwarding the current arguments."""

    type = "zsuper"


@dataclass
class Yield(Node):
    type = "yield"
    args: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Block(Node):
    """Block attached to ``call``; ``begin_l`` two wide (``do``) means do/end."""

    type = "block"
    call: Node
    args: Optional[Node] = None
    body: Optional[Node] = None
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class Numblock(Node):
    """Block using numbered parameters (``_1``)."""

    type = "numblock"
    call: Node
    numargs: int
    body: Node


@dataclass
class Lambda(Node):
    """The ``->`` call of a stabby lambda block."""

    type = "lambda"


# ---------------------------------------------------------------- patterns


@dataclass
class ArrayPattern(Node):
    type = "array_pattern"
    elements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class ArrayPatternWithTail(Node):
    type = "array_pattern_with_tail"
    elements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class HashPattern(Node):
    type = "hash_pattern"
    elements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class FindPattern(Node):
    type = "find_pattern"
    elements: List[Node] = field(default_factory=list)
    begin_l: Optional[Loc] = None
    end_l: Optional[Loc] = None


@dataclass
class ConstPattern(Node):
    type = "const_pattern"
    const: Node
    pattern: Node


@dataclass
class MatchVar(Node):
    type = "match_var"
    name: str


@dataclass
class MatchRest(Node):
    type = "match_rest"
    name: Optional[Node] = None


@dataclass
class MatchAs(Node):
    type = "match_as"
    value: Node
    as_: Node


@dataclass
class MatchAlt(Node):
    type = "match_alt"
    lhs: Node
    rhs: Node


@dataclass
class MatchNilPattern(Node):
    type = "match_nil_pattern"


@dataclass
class MatchPattern(Node):
    """``value => pattern``"""

    type = "match_pattern"
    value: Node
    pattern: Node


@dataclass
class MatchPatternP(Node):
    """``value in pattern``"""

    type = "match_pattern_p"
    value: Node
    pattern: Node


@dataclass
class MatchCurrentLine(Node):
    type = "match_current_line"
    re: Node


@dataclass
class MatchWithLvasgn(Node):
    type = "match_with_lvasgn"
    re: Node
    value: Node


@dataclass
class Pin(Node):
    type = "pin"
    var: Node


# ----------------------------------------------------------------- helpers


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of ``node`` in field declaration order."""
    for item in fields(node):
        value = getattr(node, item.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for element in value:
                if isinstance(element, Node):
                    yield element


def make_begin(statements: Optional[List[Node]] = None) -> Begin:
    """Bare statement sequence without delimiters."""
    return Begin(statements=list(statements or []))


def is_statement_list(node: Optional[Node]) -> bool:
    return isinstance(node, Begin) and node.begin_l is None


def normalize_body(body: Optional[Node]) -> Begin:
    """
    Bring a definition body into statement-sequence shape.

    ``None`` becomes an empty sequence, a single statement a one element
    sequence; an existing bare sequence is returned unchanged.
    """
    if body is None:
        return make_begin()
    if is_statement_list(body):
        return body
    return make_begin([body])


def statements_to_node(statements: List[Node]) -> Optional[Node]:
    """Collapse a statement list the way a parser reports a body."""
    if not statements:
        return None
    if len(statements) == 1:
        return statements[0]
    return make_begin(statements)


__all__ = [
    "Alias",
    "And",
    "AndAsgn",
    "Arg",
    "Args",
    "Array",
    "ArrayPattern",
    "ArrayPatternWithTail",
    "BackRef",
    "Begin",
    "Block",
    "Blockarg",
    "BlockPass",
    "Break",
    "Case",
    "CaseMatch",
    "Casgn",
    "Cbase",
    "Class",
    "Complex",
    "Const",
    "ConstPattern",
    "CSend",
    "Cvar",
    "Cvasgn",
    "Def",
    "Defined",
    "Defs",
    "Dstr",
    "Dsym",
    "EFlipFlop",
    "EmptyElse",
    "Encoding",
    "Ensure",
    "Erange",
    "False_",
    "File",
    "FindPattern",
    "Float",
    "For",
    "ForwardArg",
    "ForwardedArgs",
    "Gvar",
    "Gvasgn",
    "Hash",
    "HashPattern",
    "Heredoc",
    "If",
    "IfGuard",
    "IFlipFlop",
    "IfMod",
    "IfTernary",
    "Index",
    "IndexAsgn",
    "InPattern",
    "Int",
    "Irange",
    "is_statement_list",
    "iter_child_nodes",
    "Ivar",
    "Ivasgn",
    "Kwarg",
    "Kwargs",
    "KwBegin",
    "Kwnilarg",
    "Kwoptarg",
    "Kwrestarg",
    "Kwsplat",
    "Lambda",
    "Line",
    "Loc",
    "Lvar",
    "Lvasgn",
    "make_begin",
    "Masgn",
    "MatchAlt",
    "MatchAs",
    "MatchCurrentLine",
    "MatchNilPattern",
    "MatchPattern",
    "MatchPatternP",
    "MatchRest",
    "MatchVar",
    "MatchWithLvasgn",
    "Mlhs",
    "Module",
    "Next",
    "Nil",
    "Node",
    "NODE_TYPES",
    "normalize_body",
    "NthRef",
    "Numblock",
    "OpAsgn",
    "Optarg",
    "Or",
    "OrAsgn",
    "Pair",
    "Pin",
    "Postexe",
    "Preexe",
    "Procarg0",
    "Rational",
    "Redo",
    "Regexp",
    "RegOpt",
    "Rescue",
    "RescueBody",
    "Restarg",
    "Retry",
    "Return",
    "SClass",
    "Self_",
    "Send",
    "Shadowarg",
    "Splat",
    "statements_to_node",
    "Str",
    "Super",
    "Sym",
    "synthetic_loc",
    "True_",
    "Undef",
    "UnlessGuard",
    "Until",
    "UntilPost",
    "When",
    "While",
    "WhilePost",
    "XHeredoc",
    "Xstr",
    "Yield",
    "ZSuper",
]

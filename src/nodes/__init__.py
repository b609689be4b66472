"""Typed Ruby syntax tree: node kinds, traversal and serialization."""

from .serialize import NodeFormatError, node_from_dict, node_to_dict
from .tree import (
    Alias,
    And,
    AndAsgn,
    Arg,
    Args,
    Array,
    ArrayPattern,
    ArrayPatternWithTail,
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
    EFlipFlop,
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
    IFlipFlop,
    IfMod,
    IfTernary,
    Index,
    IndexAsgn,
    InPattern,
    Int,
    Irange,
    is_statement_list,
    iter_child_nodes,
    Ivar,
    Ivasgn,
    Kwarg,
    Kwargs,
    KwBegin,
    Kwnilarg,
    Kwoptarg,
    Kwrestarg,
    Kwsplat,
    Lambda,
    Line,
    Loc,
    Lvar,
    Lvasgn,
    make_begin,
    Masgn,
    MatchAlt,
    MatchAs,
    MatchCurrentLine,
    MatchNilPattern,
    MatchPattern,
    MatchPatternP,
    MatchRest,
    MatchVar,
    MatchWithLvasgn,
    Mlhs,
    Module,
    Next,
    Nil,
    Node,
    NODE_TYPES,
    normalize_body,
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
    Procarg0,
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
    statements_to_node,
    Str,
    Super,
    Sym,
    synthetic_loc,
    True_,
    Undef,
    UnlessGuard,
    Until,
    UntilPost,
    When,
    While,
    WhilePost,
    XHeredoc,
    Xstr,
    Yield,
    ZSuper,
)
from .visitor import NodeVisitor

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
    "NodeFormatError",
    "NodeVisitor",
    "node_from_dict",
    "node_to_dict",
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

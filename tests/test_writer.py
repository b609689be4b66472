import io

import pytest

from emitter import CodeWriter, EmitOptions, UnsupportedNodeError, emit_module, render_node, write_code
from nodes import (
    NODE_TYPES,
    And,
    Arg,
    Args,
    Array,
    ArrayPattern,
    Begin,
    Block,
    Case,
    CaseMatch,
    Casgn,
    Cbase,
    Class,
    Const,
    CSend,
    Def,
    Dstr,
    Ensure,
    For,
    Hash,
    HashPattern,
    Heredoc,
    If,
    IfGuard,
    IfMod,
    IfTernary,
    Index,
    InPattern,
    Int,
    Ivar,
    Ivasgn,
    KwBegin,
    Kwsplat,
    Lambda,
    Loc,
    Lvar,
    Lvasgn,
    Masgn,
    MatchRest,
    MatchVar,
    Mlhs,
    Module,
    Nil,
    OpAsgn,
    Optarg,
    Or,
    OrAsgn,
    Pair,
    Regexp,
    RegOpt,
    Rescue,
    RescueBody,
    Send,
    Splat,
    Str,
    Sym,
    When,
    While,
)

DOT = Loc(0, 1)
DO = Loc(0, 2)
BRACE = Loc(0, 1)


def _str(value):
    return Str(value, begin_l=Loc(0, 1), end_l=Loc(0, 1))


def _call(name, *args, recv=None, parens=False):
    return Send(
        recv,
        name,
        list(args),
        dot_l=DOT if recv is not None else None,
        begin_l=Loc(0, 1) if parens else None,
        end_l=Loc(0, 1) if parens else None,
    )


def _emit(root):
    return emit_module(root, EmitOptions()).source


def test_every_node_kind_has_a_writer():
    missing = [tag for tag in NODE_TYPES if not hasattr(CodeWriter, f"_write_{tag}")]
    assert missing == []


def test_string_escaping():
    assert render_node(_str("hi")) == '"hi"'
    assert render_node(_str('a"b\n#{')) == '"a\\"b\\n\\#{"'


def test_symbol_forms():
    assert render_node(Sym("foo", begin_l=Loc(0, 1))) == ":foo"
    assert render_node(Sym("foo bar", begin_l=Loc(0, 1))) == ':"foo bar"'
    assert render_node(Sym("foo")) == "foo"


def test_hash_pair_styles():
    labelled = Hash([Pair(Sym("a"), Int("1"), operator_l=Loc(0, 1))], begin_l=BRACE, end_l=BRACE)
    assert render_node(labelled) == "{a: 1}"

    arrow = Hash([Pair(_str("k"), Int("1"), operator_l=Loc(0, 2))], begin_l=BRACE, end_l=BRACE)
    assert render_node(arrow) == '{"k" => 1}'


def test_send_argument_forms():
    assert render_node(_call("puts", _str("hi"))) == 'puts "hi"'
    assert render_node(_call("puts", _str("hi"), parens=True)) == 'puts("hi")'
    assert render_node(_call("foo", recv=Lvar("a"))) == "a.foo"
    assert render_node(CSend(Lvar("a"), "foo", dot_l=Loc(0, 2))) == "a&.foo"
    assert render_node(Send(Lvar("a"), "!")) == "!a"
    assert render_node(Index(Lvar("a"), [Int("0")])) == "a[0]"


def test_attribute_assignment():
    node = Send(Lvar("a"), "foo=", [Int("1")], dot_l=DOT, operator_l=Loc(0, 1))
    assert render_node(node) == "a.foo = 1"


def test_operator_precedence_parentheses():
    nested_right = Send(Int("1"), "+", [Send(Int("2"), "*", [Int("3")])])
    assert render_node(nested_right) == "1 + 2 * 3"

    nested_left = Send(Send(Int("1"), "+", [Int("2")]), "*", [Int("3")])
    assert render_node(nested_left) == "(1 + 2) * 3"

    power_left = Send(Send(Int("2"), "**", [Int("3")]), "**", [Int("4")])
    assert render_node(power_left) == "(2 ** 3) ** 4"

    power_right = Send(Int("2"), "**", [Send(Int("3"), "**", [Int("4")])])
    assert render_node(power_right) == "2 ** 3 ** 4"

    assert render_node(Or(And(Lvar("a"), Lvar("b")), Lvar("c"))) == "a && b || c"
    assert render_node(And(Or(Lvar("a"), Lvar("b")), Lvar("c"))) == "(a || b) && c"


def test_assignments():
    assert render_node(Lvasgn("x", Int("1"))) == "x = 1"
    assert render_node(OpAsgn(Lvasgn("x"), "+", Int("1"))) == "x += 1"
    assert render_node(OrAsgn(Ivasgn("@x"), Array([], begin_l=DOT, end_l=DOT))) == "@x ||= []"
    masgn = Masgn(Mlhs([Lvasgn("a"), Lvasgn("b")]), Array([Int("1"), Int("2")]))
    assert render_node(masgn) == "a, b = 1, 2"


def test_constants():
    assert render_node(Const(Cbase(), "Foo", double_colon_l=Loc(0, 2))) == "::Foo"
    assert render_node(Const(Const(None, "A"), "B", double_colon_l=Loc(0, 2))) == "A::B"
    assert render_node(Casgn(None, "LIMIT", Int("10"))) == "LIMIT = 10"


def test_if_elsif_else():
    node = If(
        Lvar("a"),
        _call("foo"),
        If(Lvar("b"), _call("bar"), _call("baz"), keyword_l=Loc(0, 5)),
        keyword_l=Loc(0, 2),
    )
    assert _emit(node) == "if a\n  foo\nelsif b\n  bar\nelse\n  baz\nend\n"


def test_unless_and_modifiers():
    assert _emit(If(Lvar("x"), None, _call("foo"))) == "unless x\n  foo\nend\n"
    assert render_node(IfMod(Lvar("x"), _call("foo"), None)) == "foo if x"
    assert render_node(IfMod(Lvar("x"), None, _call("foo"))) == "foo unless x"
    assert render_node(IfTernary(Lvar("a"), Int("1"), Int("2"))) == "a ? 1 : 2"


def test_case_clause_indentation():
    node = Case(
        Lvar("x"),
        [When([Int("1")], _call("foo")), When([Int("2"), Int("3")], None)],
        _call("bar"),
    )
    assert _emit(node) == "case x\n  when 1\n    foo\n  when 2, 3\n  else\n    bar\nend\n"


def test_loops():
    prefix = While(Lvar("x"), _call("foo"), end_l=Loc(0, 3))
    assert _emit(prefix) == "while x\n  foo\nend\n"
    assert render_node(While(Lvar("x"), _call("foo"))) == "foo while x"


def test_method_definitions():
    greet = Def("greet", Args([Arg("name")]), _call("puts", Lvar("name")))
    assert _emit(greet) == "def greet(name)\n  puts name\nend\n"
    assert _emit(Def("m", None, None)) == "def m\nend\n"
    endless = Def("m", Args([]), Int("1"), assignment_l=Loc(0, 1))
    assert _emit(endless) == "def m() = 1\n"
    optional = Def("m", Args([Optarg("a", Int("1"))]), None)
    assert _emit(optional) == "def m(a = 1)\nend\n"


def test_nested_definition_indentation():
    tree = Module(
        Const(None, "A"),
        Class(Const(None, "B"), Const(None, "Base"), Def("m", None, _call("foo"))),
    )
    assert _emit(tree) == (
        "module A\n"
        "  class B < Base\n"
        "    def m\n"
        "      foo\n"
        "    end\n"
        "  end\n"
        "end\n"
    )


def test_rescue_clauses_in_method():
    body = Rescue(
        _call("foo"),
        [RescueBody(Array([Const(None, "StandardError")]), Lvasgn("e"), _call("bar"))],
        None,
    )
    assert _emit(Def("m", None, body)) == "def m\n  foo\nrescue StandardError => e\n  bar\nend\n"


def test_ensure_inside_begin():
    node = KwBegin([Ensure(_call("foo"), _call("bar"))])
    assert _emit(node) == "begin\n  foo\nensure\n  bar\nend\n"


def test_modifier_rescue():
    node = Rescue(_call("foo"), [RescueBody(body=Nil())], None)
    assert render_node(node) == "foo rescue nil"
    assert render_node(Lvasgn("x", node)) == "x = (foo rescue nil)"


def test_blocks():
    each = _call("each", recv=Lvar("items"))
    brace = Block(each, Args([Arg("i")]), _call("puts", Lvar("i")), begin_l=BRACE, end_l=BRACE)
    assert render_node(brace) == "items.each { |i| puts i }"

    each = _call("each", recv=Lvar("items"))
    do_block = Block(each, Args([Arg("i")]), _call("puts", Lvar("i")), begin_l=DO, end_l=Loc(0, 3))
    assert _emit(do_block) == "items.each do |i|\n  puts i\nend\n"

    with_args = Block(_call("foo", Int("1")), None, Nil(), begin_l=BRACE, end_l=BRACE)
    assert render_node(with_args) == "foo(1) { nil }"

    stabby = Block(Lambda(), Args([Arg("x")]), Lvar("x"), begin_l=BRACE, end_l=BRACE)
    assert render_node(stabby) == "->(x) { x }"


def test_interpolated_literals():
    node = Dstr(
        [Str("a "), Begin([Lvar("x")], begin_l=Loc(0, 2), end_l=DOT), Str("!"), Ivar("@y")],
        begin_l=DOT,
        end_l=DOT,
    )
    assert render_node(node) == '"a #{x}!#@y"'
    assert render_node(Regexp([Str("a/b")], RegOpt("i"), begin_l=DOT, end_l=DOT)) == "/a\\/b/i"
    assert render_node(Heredoc([Str("line\n")])) == '"line\\n"'


def test_patterns():
    node = CaseMatch(
        Lvar("x"),
        [
            InPattern(
                ArrayPattern([MatchVar("a"), MatchRest(MatchVar("rest"))], begin_l=DOT, end_l=DOT),
                None,
                Lvar("a"),
            ),
            InPattern(
                HashPattern(
                    [Pair(Sym("name"), MatchVar("n"), operator_l=Loc(0, 1)), MatchVar("age")],
                    begin_l=DOT,
                    end_l=DOT,
                ),
                IfGuard(Lvar("n")),
                Nil(),
            ),
        ],
        None,
    )
    assert _emit(node) == (
        "case x\n"
        "  in [a, *rest]\n"
        "    a\n"
        "  in {name: n, age:} if n\n"
        "    nil\n"
        "end\n"
    )


def test_unsupported_part_uses_placeholder():
    node = Dstr([Int("1")], begin_l=DOT, end_l=DOT)
    sink = io.StringIO()
    diagnostics = write_code(node, sink)
    assert sink.getvalue() == '"unsupported"'
    assert len(diagnostics) == 1


def test_unsupported_part_raises_in_strict_mode():
    node = Dstr([Int("1")], begin_l=DOT, end_l=DOT)
    with pytest.raises(UnsupportedNodeError):
        render_node(node, strict=True)


def test_program_without_trailing_newline():
    root = Begin([_call("foo"), _call("bar")])
    assert emit_module(root, EmitOptions(trailing_newline=False)).source == "foo\nbar"
    assert emit_module(None).source == ""


def test_splat_targets_are_not_parenthesized():
    masgn = Masgn(
        Mlhs([Lvasgn("x"), Splat(Lvasgn("y"))]),
        Array([Int("1"), Int("2"), Int("3")]),
    )
    assert render_node(masgn) == "x, *y = 1, 2, 3"

    loop = For(Mlhs([Lvasgn("a"), Splat(Lvasgn("b"))]), Lvar("c"), None)
    assert _emit(loop) == "for a, *b in c\nend\n"

    assert render_node(Splat(Send(Int("1"), "+", [Int("2")]))) == "*(1 + 2)"


def test_anonymous_keyword_splat():
    call = _call("p", Kwsplat(), parens=True)
    assert render_node(call) == "p(**)"
    assert render_node(Kwsplat(Lvar("opts"))) == "**opts"


def test_block_parameters_keep_trailing_comma():
    block = Block(
        _call("proc"),
        Args([Arg("a")], trailing_comma_l=Loc(0, 1)),
        Lvar("a"),
        begin_l=BRACE,
        end_l=BRACE,
    )
    assert render_node(block) == "proc { |a,| a }"


class _FailingSink:
    def write(self, text):
        raise OSError("disk full")


def test_sink_errors_propagate():
    with pytest.raises(OSError):
        write_code(_call("foo"), _FailingSink())

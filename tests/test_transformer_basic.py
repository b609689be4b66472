import pytest

from emitter import emit_module
from nodes import (
    Arg,
    Args,
    ArrayPattern,
    Begin,
    Block,
    CaseMatch,
    Cbase,
    Class,
    Const,
    Def,
    InPattern,
    Int,
    Loc,
    Lvar,
    Lvasgn,
    MatchVar,
    Module,
    Numblock,
    Optarg,
    Send,
    Str,
    Sym,
    make_begin,
)
from transformer import (
    TransformError,
    combine_modules,
    definition_body,
    has_unresolved_visibility,
    insert_marker,
    rename_variables,
)

BRACE = Loc(0, 1)


def _class(name, *statements, superclass=None, scope=None):
    const = Const(scope, name, double_colon_l=Loc(0, 2) if scope is not None else None)
    return Class(const, superclass, make_begin(list(statements)) if statements else None)


def _def(name, body=None, args=None):
    return Def(name, args, body)


def _emit(root):
    return emit_module(root).source


# ---------------------------------------------------------------- combiner


def test_repeated_classes_are_merged():
    root = make_begin([_class("Foo", _def("a")), _class("Foo", _def("b"))])
    combine_modules(root)

    assert len(root.statements) == 1
    assert _emit(root) == "class Foo\n  def a\n  end\n  def b\n  end\nend\n"


def test_public_is_inserted_after_unresolved_private():
    root = make_begin(
        [
            _class("Foo", Send(None, "private"), _def("a")),
            _class("Foo", _def("b")),
        ]
    )
    combine_modules(root)

    body = root.statements[0].body
    assert [getattr(s, "method_name", getattr(s, "name", None)) for s in body.statements] == [
        "private",
        "a",
        "public",
        "b",
    ]


def test_no_public_when_visibility_already_reset():
    first = _class("Foo", Send(None, "private"), _def("a"), Send(None, "public"))
    root = make_begin([first, _class("Foo", _def("b"))])
    combine_modules(root)

    assert len(root.statements[0].body.statements) == 4


def test_visibility_call_with_arguments_is_resolved():
    body = make_begin([Send(None, "private", [Sym("a", begin_l=Loc(0, 1))])])
    assert not has_unresolved_visibility(body)
    assert has_unresolved_visibility(make_begin([Send(None, "module_function")]))


def test_nested_declarations_merge_after_outer_merge():
    root = make_begin(
        [
            Module(Const(None, "A"), _class("B", _def("a"))),
            Module(Const(None, "A"), _class("B", _def("b"))),
        ]
    )
    combine_modules(root)

    assert _emit(root) == (
        "module A\n"
        "  class B\n"
        "    def a\n"
        "    end\n"
        "    def b\n"
        "    end\n"
        "  end\n"
        "end\n"
    )


def test_top_level_marker_keeps_names_apart():
    root = make_begin([_class("Foo", _def("a"), scope=Cbase()), _class("Foo", _def("b"))])
    combine_modules(root)
    assert len(root.statements) == 2


def test_superclass_is_taken_from_repeat():
    root = make_begin(
        [_class("Foo", _def("a")), _class("Foo", _def("b"), superclass=Const(None, "Base"))]
    )
    combine_modules(root)
    assert root.statements[0].superclass == Const(None, "Base")


def test_root_module_is_combined_inside():
    root = Module(
        Const(None, "Outer"),
        make_begin([_class("Foo", _def("a")), _class("Foo", _def("b"))]),
    )
    combine_modules(root)
    assert len(root.body.statements) == 1


def test_dynamic_names_are_left_alone():
    dynamic = Class(Send(None, "klass"), None, None)
    root = make_begin([dynamic, Class(Send(None, "klass"), None, None)])
    combine_modules(root)
    assert len(root.statements) == 2


def test_unnormalized_body_is_an_error():
    with pytest.raises(TransformError):
        definition_body(Class(Const(None, "Foo"), None, Int("1")))


# ----------------------------------------------------------------- renamer


def test_parameters_and_locals_are_renamed_in_order():
    method = Def(
        "greet",
        Args([Arg("name"), Optarg("greeting", Str("hi", begin_l=BRACE, end_l=BRACE))]),
        Begin(
            [
                Lvasgn("message", Send(Lvar("greeting"), "+", [Lvar("name")])),
                Send(None, "puts", [Lvar("message")]),
            ]
        ),
    )
    rename_variables(method)

    assert _emit(method) == 'def greet(a, b = "hi")\n  c = b + a\n  puts c\nend\n'


def test_blocks_extend_a_copy_of_the_enclosing_table():
    each = Send(Lvar("xs"), "each", dot_l=Loc(0, 1))
    block = Block(
        each,
        Args([Arg("item")]),
        Send(None, "puts", [Lvar("item"), Lvar("xs")]),
        begin_l=BRACE,
        end_l=BRACE,
    )
    method = Def("m", Args([Arg("xs")]), Begin([block, Lvasgn("total", Int("0"))]))
    rename_variables(method)

    assert _emit(method) == "def m(a)\n  a.each { |b| puts b, a }\n  b = 0\nend\n"


def test_each_method_starts_a_fresh_table():
    root = make_begin(
        [
            Def("one", Args([Arg("x")]), Lvar("x")),
            Def("two", Args([Arg("y")]), Lvar("y")),
        ]
    )
    rename_variables(root)
    assert [d.args.args[0].name for d in root.statements] == ["a", "a"]


def test_names_past_the_alphabet_keep_their_spelling():
    names = [f"p{index}" for index in range(27)]
    method = Def("m", Args([Arg(name) for name in names]), Lvar("p26"))
    rename_variables(method)

    renamed = [arg.name for arg in method.args.args]
    assert renamed[:26] == list("abcdefghijklmnopqrstuvwxyz")
    assert renamed[26] == "p26"
    assert method.body.name == "p26"


def test_pattern_binders_are_pinned():
    match = CaseMatch(Lvar("value"), [InPattern(MatchVar("found"), None, Lvar("found"))], None)
    method = Def("m", Args([Arg("value")]), match)
    rename_variables(method)

    assert match.expr.name == "a"
    assert match.in_bodies[0].pattern.name == "found"
    assert match.in_bodies[0].body.name == "found"


def test_numbered_parameters_are_not_renamed():
    block = Numblock(Send(Lvar("xs"), "map", dot_l=Loc(0, 1)), 1, Send(Lvar("_1"), "to_s", dot_l=Loc(0, 1)))
    method = Def("m", Args([Arg("xs")]), block)
    rename_variables(method)

    assert _emit(method) == "def m(a)\n  a.map { _1.to_s }\nend\n"


def test_pattern_binder_letters_are_not_reused():
    pattern = ArrayPattern([MatchVar("a")], begin_l=BRACE, end_l=BRACE)
    body = Send(Lvar("a"), "+", [Lvar("foo")])
    match = CaseMatch(Lvar("foo"), [InPattern(pattern, None, body)], None)
    method = Def("m", Args([Arg("foo")]), match)
    rename_variables(method)

    assert method.args.args[0].name == "b"
    assert pattern.elements[0].name == "a"
    assert _emit(method) == (
        "def m(b)\n  case b\n    in [a]\n      a + b\n  end\nend\n"
    )


def test_binder_of_an_existing_local_follows_its_alias():
    match = CaseMatch(Int("1"), [InPattern(MatchVar("x"), None, Lvar("x"))], None)
    method = Def("m", Args([Arg("x")]), match)
    rename_variables(method)

    assert method.args.args[0].name == "a"
    assert match.in_bodies[0].pattern.name == "a"
    assert match.in_bodies[0].body.name == "a"


def test_kept_spelling_does_not_collide_with_an_alias():
    names = [f"p{index}" for index in range(26)] + ["a"]
    method = Def("m", Args([Arg(name) for name in names]), Lvar("p0"))
    rename_variables(method)

    renamed = [arg.name for arg in method.args.args]
    assert renamed[0] == "a"
    assert renamed[26] == "a_"
    assert len(set(renamed)) == 27


# ----------------------------------------------------------------- markers


def test_marker_is_appended_to_root_module():
    root = Module(Const(None, "M"), _def("m"))
    assert insert_marker(root) == 1
    assert _emit(root) == 'module M\n  def m\n  end\n  "test"\nend\n'


def test_marker_goes_into_each_top_level_module():
    root = make_begin(
        [Module(Const(None, "A"), None), _class("B"), Module(Const(None, "C"), None)]
    )
    assert insert_marker(root, "marker") == 2
    assert root.statements[0].body.statements[-1].value == "marker"
    assert root.statements[1].body is None

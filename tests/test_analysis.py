import pytest

from analyzer import constant_name, constants_to_source, explore_constants, make_constant_map
from nodes import (
    Casgn,
    Cbase,
    Class,
    Const,
    Int,
    Loc,
    Lvar,
    Module,
    NodeFormatError,
    Send,
    Str,
    Sym,
    make_begin,
    node_from_dict,
    node_to_dict,
)

QUOTE = Loc(0, 1)


def _module(name, *statements):
    return Module(Const(None, name), make_begin(list(statements)))


def test_constant_names():
    assert constant_name(Const(None, "A")) == "A"
    assert constant_name(Const(Const(None, "A"), "B")) == "A::B"
    assert constant_name(Const(Cbase(), "A")) == "::A"
    assert constant_name(Const(Lvar("x"), "A")) is None
    assert constant_name(Send(None, "klass")) is None


def test_nested_namespaces_and_pruning():
    tree = make_begin(
        [
            _module(
                "Config",
                Casgn(None, "VERSION", Str("1.0", begin_l=QUOTE, end_l=QUOTE)),
                _module("Inner", Casgn(None, "ENABLED", Sym("yes", begin_l=QUOTE))),
                _module("Empty", Send(None, "puts")),
            ),
            Class(Const(None, "Nothing"), None, None),
        ]
    )
    constants = make_constant_map()
    explore_constants(constants, tree)

    assert constants_to_source(constants) == {
        "Config": {"VERSION": '"1.0"', "Inner": {"ENABLED": ":yes"}},
    }


def test_scoped_assignment_uses_qualified_key():
    constants = make_constant_map()
    explore_constants(constants, _module("A", Casgn(Const(None, "B"), "C", Int("1"))))
    assert constants_to_source(constants) == {"A": {"B::C": "1"}}


def test_calls_go_through_the_resolver():
    def resolver(call):
        if call.method_name == "gen":
            left, right = (int(arg.value) for arg in call.args)
            return Int(str(left * 200 + right))
        return None

    tree = _module(
        "M",
        Casgn(None, "CODE", Send(None, "gen", [Int("2"), Int("2")])),
        Casgn(None, "OTHER", Send(None, "unknown")),
    )
    constants = make_constant_map()
    explore_constants(constants, tree, resolver)

    assert constants_to_source(constants) == {"M": {"CODE": "402"}}


def test_calls_are_skipped_without_resolver():
    constants = make_constant_map()
    explore_constants(constants, _module("M", Casgn(None, "CODE", Send(None, "gen"))))
    assert constants == {}


def test_non_literal_values_are_skipped():
    constants = make_constant_map()
    explore_constants(constants, _module("M", Casgn(None, "X", Lvar("x")), Casgn(None, "Y", Int("2"))))
    assert constants_to_source(constants) == {"M": {"Y": "2"}}


def test_node_serialization():
    call = Send(None, "puts", [Str("hi", begin_l=Loc(5, 6), end_l=Loc(8, 9))], expression_l=Loc(0, 9))

    assert node_to_dict(call) == {
        "type": "send",
        "expression_l": [0, 9],
        "method_name": "puts",
        "args": [{"type": "str", "value": "hi", "begin_l": [5, 6], "end_l": [8, 9]}],
    }
    restored = node_from_dict(node_to_dict(call))
    assert restored == call
    assert restored.args[0].begin_l == Loc(5, 6)


def test_serialization_rejects_unknown_kinds():
    with pytest.raises(NodeFormatError):
        node_from_dict({"type": "bogus"})
    with pytest.raises(NodeFormatError):
        node_from_dict({"type": "str", "value": "x", "begin_l": [1]})
    with pytest.raises(NodeFormatError):
        node_from_dict(["send"])

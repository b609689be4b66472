import json
from pathlib import Path

import pytest

from emitter import EmitOptions, emit_module
from frontend import load_tree, run_frontend
from nodes import Block, Def, Dstr, Lvar, Lvasgn, Send, Str, node_to_dict
from parser import RubySyntaxError, parse_ruby

CASES = Path(__file__).parent / "cases"


def _source(name: str) -> str:
    return (CASES / name).read_text(encoding="utf-8")


@pytest.mark.parametrize("name", ["greeter.rb", "control_flow.rb", "blocks.rb"])
def test_fixture_round_trips(name):
    source = _source(name)
    result = run_frontend(source, source_name=name)

    assert result.has_ast
    assert result.diagnostics == []
    assert emit_module(result.parse.ast).source == source


def test_documentation_round_trip():
    source = _source("documented.rb")
    result = run_frontend(source, documentation=True)

    assert len(result.parse.comments) == 2
    emitted = emit_module(result.parse.ast, EmitOptions(documentation=result.documentation))
    assert emitted.source == source


def test_skeleton_keeps_signatures_and_comments():
    result = run_frontend(_source("documented.rb"), exclude_method_body=True)
    emitted = emit_module(result.parse.ast, EmitOptions(documentation=result.documentation))

    assert emitted.source == (
        "# A friendly class.\n"
        "class Greeter\n"
        "  # Says hello.\n"
        "  def greet(name)\n"
        "  end\n"
        "end\n"
    )


def test_locals_are_told_apart_from_calls():
    tree = parse_ruby("x = 1\nx\ny\n").ast

    assignment, read, call = tree.statements
    assert isinstance(assignment, Lvasgn)
    assert read == Lvar("x")
    assert call == Send(None, "y")


def test_method_parameters_are_locals_inside_the_body():
    method = parse_ruby("def m(a)\n  a + b\nend\n").ast

    assert isinstance(method, Def)
    assert method.body == Send(Lvar("a"), "+", [Send(None, "b")])


def test_block_parameters_stay_inside_the_block():
    tree = parse_ruby("items.each { |i| i }\ni\n").ast

    block, after = tree.statements
    assert isinstance(block, Block)
    assert block.body == Lvar("i")
    assert after == Send(None, "i")


def test_string_literals():
    assert parse_ruby("'a\\'b'").ast.value == "a'b"
    assert parse_ruby('"tab\\t"').ast.value == "tab\t"

    interpolated = parse_ruby('"hi #{name}"').ast
    assert isinstance(interpolated, Dstr)
    assert interpolated.parts[0] == Str("hi ")


def test_broken_source_reports_diagnostics():
    result = run_frontend(_source("broken.rb"), source_name="broken.rb")

    assert result.diagnostics
    assert all(error.line >= 1 for error in result.diagnostics)


def test_broken_source_raises_when_not_tolerant():
    with pytest.raises(RubySyntaxError) as excinfo:
        parse_ruby(_source("broken.rb"), tolerant=False)
    assert excinfo.value.errors


def test_parse_cache_is_written_and_loadable(tmp_path):
    source = _source("greeter.rb")
    result = run_frontend(source, cache_dir=tmp_path)

    cached = tmp_path / f"{result.parse.source_hash}.json"
    assert cached.exists()
    assert load_tree(cached.read_text(encoding="utf-8")) == result.parse.ast


def test_load_tree_accepts_a_bare_node():
    tree = parse_ruby('puts "hi"\n').ast

    assert load_tree(json.dumps(node_to_dict(tree))) == tree


@pytest.mark.parametrize(
    "source",
    [
        "x, *y = 1, 2, 3\n",
        "for a, *b in c\nend\n",
        "z = proc { |a,| a }\n",
        "def o(**) = p(**)\n",
    ],
)
def test_source_round_trips(source):
    assert emit_module(parse_ruby(source).ast).source == source


def test_trailing_block_comma_is_recorded():
    block = parse_ruby("proc { |a, | a }\n").ast
    assert block.args.trailing_comma_l is not None
    assert parse_ruby("proc { |a| a }\n").ast.args.trailing_comma_l is None

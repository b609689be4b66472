import io

from emitter import Comment, DocumentationContext, EmitOptions, emit_module
from nodes import Class, Const, Def, Loc, Send


def _comments(source, *texts):
    spans = []
    for text in texts:
        begin = source.index(text)
        spans.append(Comment(begin, begin + len(text) + 1))
    return spans


def test_leading_comment_block_at_top_level():
    source = "# a\n# b\ndef m\nend\n"
    context = DocumentationContext(_comments(source, "# a", "# b"), source)
    node_begin = source.index("def")

    assert [c.begin for c in context.leading_comments(0, node_begin)] == [0, 4]

    sink = io.StringIO()
    assert context.write_documentation(sink, 0, node_begin) == 2
    assert sink.getvalue() == "# a\n# b\n"


def test_indented_comment_is_followed_by_padding():
    source = "class A\n  # doc\n  def m\n  end\nend\n"
    context = DocumentationContext(_comments(source, "# doc"), source)
    node_begin = source.index("def")

    sink = io.StringIO()
    context.write_documentation(sink, 1, node_begin)
    assert sink.getvalue() == "# doc\n  "
    assert context.leading_comments(0, node_begin) == []


def test_separated_comment_is_not_attached():
    source = "# far\n\ndef m\nend\n"
    context = DocumentationContext(_comments(source, "# far"), source)
    assert context.leading_comments(0, source.index("def")) == []


def test_writer_reattaches_documentation():
    source = "class A\n  # doc\n  def m\n  end\nend\n"
    context = DocumentationContext(_comments(source, "# doc"), source)
    method = Def("m", None, None, expression_l=Loc(source.index("def"), len(source) - 5))
    tree = Class(Const(None, "A"), None, method)

    result = emit_module(tree, EmitOptions(documentation=context))
    assert result.source == source


def test_receiver_calls_are_not_documented():
    source = "# doc\nfoo.bar\n"
    context = DocumentationContext(_comments(source, "# doc"), source)
    call = Send(Send(None, "foo"), "bar", dot_l=Loc(9, 10), expression_l=Loc(6, 13))

    assert emit_module(call, EmitOptions(documentation=context)).source == "foo.bar\n"


def test_skeleton_mode_drops_method_bodies():
    source = "# doc\ndef m\n  work\nend\n"
    context = DocumentationContext(_comments(source, "# doc"), source, exclude_method_body=True)
    method = Def("m", None, Send(None, "work"), expression_l=Loc(6, len(source) - 1))

    assert context.method_body_excluded
    assert emit_module(method, EmitOptions(documentation=context)).source == "# doc\ndef m\nend\n"

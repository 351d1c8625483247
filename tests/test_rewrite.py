import pytest

from indexarith.core.ast import BinOp, Call, Name, RangeLit, TupleLit, render
from indexarith.core.parser_expr import parse_expression
from indexarith.core.rewrite import OperatorRewriter, rewrite_expr, wrap_direction


def _rewritten(src: str):
    return rewrite_expr(parse_expression(src)).body


@pytest.mark.parametrize(
    "src, name",
    [
        ("a + b", "plus"),
        ("a - b", "minus"),
        ("a ∩ b", "cap"),
        ("a & b", "cap"),
        ("intersect(a, b)", "cap"),
        ("a ± 1", "stretch"),
        ("a ∓ 1", "shrink"),
        ("-a", "minus"),
        ("+a", "plus"),
    ],
)
def test_operator_substitution(src, name):
    node = _rewritten(src)
    assert isinstance(node, Call)
    assert node.name == name


def test_binary_call_keeps_operands():
    node = _rewritten("a + b")
    assert [arg.id for arg in node.args] == ["a", "b"]
    assert node.source == "a + b"


def test_rewrite_recurses_into_arguments():
    assert render(_rewritten("(a + b) ∩ c ± 1")) == "stretch(cap(plus(a, b), c), 1)"
    assert render(_rewritten("f(a - 1, (b + 1, 2))")) == "f(minus(a, 1), (plus(b, 1), 2))"


def test_rewrite_reaches_range_literal_bounds():
    node = _rewritten("a + 1:-2:b")
    assert isinstance(node, RangeLit)
    assert isinstance(node.first, Call) and node.first.name == "plus"
    assert isinstance(node.step, Call) and node.step.name == "minus"
    assert isinstance(node.last, Name)


def test_escape_becomes_identity_and_blocks_rewriting():
    node = _rewritten("$(a + b) + c")
    assert node.name == "plus"
    inner = node.args[0]
    assert isinstance(inner, Call) and inner.name == "identity"
    assert isinstance(inner.args[0], BinOp)
    assert inner.args[0].op == "+"


def test_escape_protects_intersect_calls_and_tuples():
    node = _rewritten("$(intersect(a, (b ∩ c, 1)))")
    assert node.name == "identity"
    call = node.args[0]
    assert call.name == "intersect"
    assert isinstance(call.args[1], TupleLit)
    assert isinstance(call.args[1].items[0], BinOp)


def test_rewrite_does_not_mutate_input():
    tree = parse_expression("a + b")
    rewrite_expr(tree)
    assert isinstance(tree.body, BinOp)


def test_rewrite_counts_substitutions():
    rewriter = OperatorRewriter()
    rewriter.rewrite(parse_expression("a + b ∩ intersect(c, $(d - e))"))
    assert rewriter.rewrites == 3


@pytest.mark.parametrize("direction", ["forward", "backward"])
def test_wrap_direction(direction):
    tree = wrap_direction(rewrite_expr(parse_expression("I ± 2")), direction)
    assert render(tree) == f"{direction}(stretch(I, 2))"


def test_wrap_direction_rejects_unknown():
    with pytest.raises(ValueError, match="Unsupported direction"):
        wrap_direction(parse_expression("a"), "sideways")

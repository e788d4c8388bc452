"""Test function build_tree and the expression node models."""
from pydantic import ValidationError
import pytest

from arithmetic_evaluator.common.errors import InvariantViolationError, MalformedExpressionError
from arithmetic_evaluator.common.tokens import Operation, make_token
from arithmetic_evaluator.core.converter import to_postfix
from arithmetic_evaluator.core.tokenizer import tokenize
from arithmetic_evaluator.core.tree import LeafNode, OperatorNode, build_tree, iter_postorder


def postfix(*symbols: str) -> list:
    return [make_token(symbol) for symbol in symbols]


def test_build_tree_from_postfix() -> None:
    """Operators take the last two operands, in left-right order."""
    expected = OperatorNode(
        op=Operation.ADDITION,
        left=OperatorNode(op=Operation.MULTIPLICATION, left=LeafNode(literal="4"), right=LeafNode(literal="3")),
        right=OperatorNode(op=Operation.EXPONENTIATION, left=LeafNode(literal="2"), right=LeafNode(literal="7")),
    )
    assert build_tree(postfix("4", "3", "*", "2", "7", "^", "+")) == expected


def test_build_tree_operand_order() -> None:
    """The first popped node is the right operand."""
    tree = build_tree(postfix("5", "3", "-"))
    assert tree.left == LeafNode(literal="5")
    assert tree.right == LeafNode(literal="3")


def test_build_tree_single_number() -> None:
    """A single number is a leaf."""
    assert build_tree(postfix("42")) == LeafNode(literal="42")


@pytest.mark.parametrize("expr,rendered", [
    ("5+3", "(5 + 3)"),
    ("2^3^2", "(2 ^ (3 ^ 2))"),
    ("5-3-2", "((5 - 3) - 2)"),
    ("4*3+2^7", "((4 * 3) + (2 ^ 7))"),
])
def test_tree_rendering(expr: str, rendered: str) -> None:
    """Trees render as fully parenthesised infix text."""
    assert str(build_tree(to_postfix(tokenize(expr)))) == rendered


@pytest.mark.parametrize("symbols", [
    ("1", "+"),
    ("+",),
    ("1", "2", "+", "*"),
])
def test_build_tree_missing_operand(symbols: tuple) -> None:
    """An operator without two operands is malformed."""
    with pytest.raises(MalformedExpressionError):
        build_tree(postfix(*symbols))


@pytest.mark.parametrize("symbols", [
    (),
    ("1", "2"),
    ("4", "5", "2", "-"),
])
def test_build_tree_wrong_operand_count(symbols: tuple) -> None:
    """Zero trees or leftover operands are malformed."""
    with pytest.raises(MalformedExpressionError):
        build_tree(postfix(*symbols))


@pytest.mark.parametrize("separator", ["(", ")"])
def test_build_tree_rejects_separators(separator: str) -> None:
    """A parenthesis in postfix order is an internal defect."""
    with pytest.raises(InvariantViolationError):
        build_tree(postfix("1", separator))


def test_nodes_are_immutable() -> None:
    """Nodes cannot be reassigned once built."""
    tree = build_tree(postfix("1", "2", "+"))
    with pytest.raises(ValidationError):
        tree.left = LeafNode(literal="3")


def test_leaf_rejects_non_numeric_literal() -> None:
    """Leaves only hold digits and dots."""
    with pytest.raises(ValidationError):
        LeafNode(literal="nan")


def test_tree_rendering_deep_chain() -> None:
    """Rendering a long left-associative chain does not recurse per level."""
    tree = build_tree(to_postfix(tokenize("+".join(["1"] * 5000))))
    rendered = str(tree)
    assert rendered.startswith("(" * 4999 + "1 + 1)")
    assert rendered.endswith(" + 1)")


def test_iter_postorder() -> None:
    """Nodes come after both operands, left operand first."""
    tree = build_tree(to_postfix(tokenize("1-2*3")))
    assert [str(node) if isinstance(node, LeafNode) else node.op.symbol for node in iter_postorder(tree)] == [
        "1", "2", "3", "*", "-",
    ]

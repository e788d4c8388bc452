"""Test the step-by-step reduction trace."""
import math

import pytest

from arithmetic_evaluator.common.errors import MalformedExpressionError
from arithmetic_evaluator.common.tokens import Operation
from arithmetic_evaluator.core.converter import to_postfix
from arithmetic_evaluator.core.evaluator import evaluate
from arithmetic_evaluator.core.tokenizer import tokenize
from arithmetic_evaluator.core.trace import ReductionStep, ReductionTrace, trace, trace_reduction
from arithmetic_evaluator.core.tree import build_tree


def tree_of(expr: str):
    return build_tree(to_postfix(tokenize(expr)))


def test_trace_reduction_order() -> None:
    """The deepest operator node is collapsed first, leftmost on ties."""
    steps = trace_reduction(tree_of("4*3+2^7"))
    assert [step.op for step in steps] == [
        Operation.MULTIPLICATION,
        Operation.EXPONENTIATION,
        Operation.ADDITION,
    ]
    assert [step.expression for step in steps] == ["(12 + (2 ^ 7))", "(12 + 128)", "140"]
    assert steps[-1].result == 140.0


def test_trace_reduction_prefers_deeper_node() -> None:
    """A deeper right branch is reduced before a shallower left one."""
    steps = trace_reduction(tree_of("1*2+3*(4-5)"))
    assert steps[0].op is Operation.SUBTRACTION
    assert (steps[0].left, steps[0].right, steps[0].result) == (4.0, 5.0, -1.0)
    assert steps[0].expression == "((1 * 2) + (3 * -1))"


def test_trace_reduction_does_not_modify_tree() -> None:
    """The traced tree is left untouched."""
    tree = tree_of("2^3^2")
    snapshot = tree.model_copy(deep=True)
    trace_reduction(tree)
    assert tree == snapshot


def test_trace_single_number() -> None:
    """A single number needs no reduction step."""
    result = trace("42")
    assert result.steps == []
    assert result.result == 42.0


def test_trace_propagates_errors() -> None:
    """Invalid expressions raise the same errors as evaluate."""
    with pytest.raises(MalformedExpressionError):
        trace("1+")


@pytest.mark.parametrize("expr", [
    "5+3",
    "4*3+2^7",
    "2^3^2",
    "2^(3+4)",
    "4*(5-2)^(3*(5-6))",
    "1/0",
    "0/0",
    "(1-9)^(1/3)",
    "((1+2)*(3+4))-(5/(6-7))^2",
])
def test_trace_matches_evaluate(expr: str) -> None:
    """Collapsing node by node gives the same value as recursive evaluation."""
    expected = evaluate(expr)
    result = trace(expr)
    assert len(result.steps) == sum(1 for token in tokenize(expr) if str(token) in "+-*/^")
    if math.isnan(expected):
        assert math.isnan(result.result)
    else:
        assert result.result == expected


def test_trace_long_chain() -> None:
    """A 5000-term sum is traced step by step without hitting the recursion limit."""
    result = trace("+".join(["1"] * 5000), render=False)
    assert len(result.steps) == 4999
    assert [step.result for step in result.steps[:3]] == [2.0, 3.0, 4.0]
    assert result.steps[0].expression is None
    assert result.result == 5000.0


def test_trace_renders_deep_tree() -> None:
    """Rendering the remaining expression works on trees deeper than the recursion limit."""
    steps = trace_reduction(tree_of("+".join(["1"] * 1500)))
    assert steps[0].expression == "(" * 1498 + "2" + " + 1)" * 1498
    assert steps[-1].expression == "1500"


@pytest.mark.parametrize("model", [ReductionStep, ReductionTrace])
def test_trace_models_describe_fields(model) -> None:
    """Every field of the trace models carries a description for schema consumers."""
    assert all(field.description for field in model.model_fields.values())

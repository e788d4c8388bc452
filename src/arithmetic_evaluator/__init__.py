"""Evaluate arithmetic expressions with + - * / ^ and parentheses."""
from arithmetic_evaluator.common.errors import (
    EvaluationError,
    ExpressionError,
    InputSyntaxError,
    InvalidNumericLiteralError,
    InvariantViolationError,
    MalformedExpressionError,
    UnbalancedParenthesesError,
    UnrecognizedCharacterError,
)
from arithmetic_evaluator.core.converter import to_postfix
from arithmetic_evaluator.core.evaluator import evaluate, evaluate_tree
from arithmetic_evaluator.core.tokenizer import tokenize
from arithmetic_evaluator.core.trace import trace, trace_reduction
from arithmetic_evaluator.core.tree import build_tree

__all__ = [
    "EvaluationError",
    "ExpressionError",
    "InputSyntaxError",
    "InvalidNumericLiteralError",
    "InvariantViolationError",
    "MalformedExpressionError",
    "UnbalancedParenthesesError",
    "UnrecognizedCharacterError",
    "build_tree",
    "evaluate",
    "evaluate_tree",
    "to_postfix",
    "tokenize",
    "trace",
    "trace_reduction",
]

__version__ = "0.1.0"

"""Evaluate expression trees and expression text."""
from collections.abc import Callable as ABCCallable
import math
import operator
from typing import Callable, Dict, List

from arithmetic_evaluator.common.errors import InvalidNumericLiteralError, InvariantViolationError
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.tokens import NUMBER_CHARACTERS, Operation
from arithmetic_evaluator.core.converter import to_postfix
from arithmetic_evaluator.core.tokenizer import tokenize
from arithmetic_evaluator.core.tree import ExpressionNode, LeafNode, OperatorNode, build_tree, iter_postorder

# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]


def _divide(left: float, right: float) -> float:
    """Floating-point division following IEEE 754 for a zero divisor instead of raising."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        # Sign of the infinity depends on both operands, including a -0.0 divisor
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1


def _power(base: float, exponent: float) -> float:
    """
    Real-valued power function with C ``pow`` results where ``math.pow`` raises.

    - Overflow gives an infinity, negative for a negative base and odd exponent
    - Zero raised to a negative power gives an infinity
    - Any other invalid domain, e.g. a negative base with a fractional exponent, gives NaN
    """
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0.0 and exponent < 0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


# Mapping of operators to the function computing them
OPERATORS: Dict[Operation, OperatorFn] = {
    Operation.ADDITION: operator.add,
    Operation.SUBTRACTION: operator.sub,
    Operation.MULTIPLICATION: operator.mul,
    Operation.DIVISION: _divide,
    Operation.EXPONENTIATION: _power,
}


def parse_literal(literal: str) -> float:
    """
    Parse a number literal into a float.

    :param str literal: Literal text of a number token

    :return: Parsed value
    :rtype: float
    :raises InvalidNumericLiteralError: If the literal is not a decimal number, e.g. "1.2.3"
    """
    if not literal or not set(literal) <= NUMBER_CHARACTERS:
        raise InvalidNumericLiteralError(literal)
    try:
        return float(literal)
    except ValueError:
        raise InvalidNumericLiteralError(literal) from None


def apply_operator(left: float, op: Operation, right: float) -> float:
    """
    Apply a binary operator to two values.

    Division by zero and invalid powers follow floating-point semantics
    (infinity or NaN) and are never treated as errors.

    :param float left: First operand
    :param Operation op: Operator to apply
    :param float right: Second operand

    :return: Computed value
    :rtype: float
    """
    return OPERATORS[op](left, right)


def evaluate_tree(tree: ExpressionNode) -> float:
    """
    Compute the value of an expression tree by post-order traversal.

    The walk uses an explicit value stack, so deeply nested trees such as long
    left-associative chains do not hit the interpreter recursion limit. The tree
    is left untouched.

    :param ExpressionNode tree: Root of the expression tree

    :return: Computed value, in full float precision
    :rtype: float
    :raises InvalidNumericLiteralError: If a leaf literal is not a decimal number
    """
    values: List[float] = []
    for node in iter_postorder(tree):
        if isinstance(node, LeafNode):
            values.append(parse_literal(node.literal))
        elif isinstance(node, OperatorNode):
            # Operands were pushed left first
            right = values.pop()
            left = values.pop()
            values.append(apply_operator(left, node.op, right))
        else:
            raise InvariantViolationError(f"Unexpected node in expression tree: {node!r}")
    return values.pop()


def evaluate(expression: str) -> float:
    """
    Evaluate an arithmetic expression safely.

    Algorithm:
        1. Tokenize the text
        2. Convert to postfix using Shunting-yard
        3. Build the expression tree
        4. Evaluate the tree

    No eval() and no dynamic code execution are involved. The first error
    raised by a stage is propagated unchanged.

    :param str expression: Arithmetic expression string

    :return: Computed result as float
    :rtype: float
    :raises ExpressionError: If the expression is invalid or malformed
    """
    tokens = tokenize(expression)
    postfix = to_postfix(tokens)
    tree = build_tree(postfix)
    result = evaluate_tree(tree)
    logger.debug("Evaluated %r = %s", expression, result)
    return result

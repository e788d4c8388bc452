"""Reorder infix tokens into Reverse Polish Notation (postfix)."""
import logging
from typing import Iterable, List

from arithmetic_evaluator.common.errors import InvariantViolationError, UnbalancedParenthesesError
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.tokens import (
    Associativity,
    LeftSeparator,
    NumberToken,
    Operation,
    OperatorToken,
    RightSeparator,
    Token,
    format_tokens,
)


def _pops_before(top: Operation, incoming: Operation) -> bool:
    """
    Tell whether the operator on top of the stack must be output before pushing ``incoming``.

    Equal precedence pops only for left-associative operators, so "5-3-2" groups
    as "(5-3)-2" while "2^3^2" groups as "2^(3^2)".

    :param Operation top: Operator currently on top of the stack
    :param Operation incoming: Operator being read

    :rtype: bool
    """
    if top.precedence > incoming.precedence:
        return True
    return top.precedence == incoming.precedence and incoming.associativity is Associativity.LEFT


def to_postfix(tokens: Iterable[Token]) -> List[Token]:
    """
    Convert infix tokens into postfix order using the Shunting-yard algorithm.

    The Shunting-yard algorithm keeps operators on a stack until every operand
    they apply to has been output, which resolves precedence and associativity
    and removes the parentheses.

    Examples:
        - Infix expression: 4 * 3 + 2 ^ 7
        - Postfix expression: 4 3 * 2 7 ^ +

    :param Iterable[Token] tokens: Infix tokens, as produced by ``tokenize``

    :return: Tokens in postfix order, without separators
    :rtype: List[Token]
    :raises UnbalancedParenthesesError: If a parenthesis has no counterpart
    """
    output: List[Token] = []
    stack: List[Token] = []

    for token in tokens:
        if isinstance(token, NumberToken):
            # Numbers are added directly to the output
            output.append(token)
        elif isinstance(token, LeftSeparator):
            stack.append(token)
        elif isinstance(token, RightSeparator):
            # Flush the group; the matching '(' is dropped
            while True:
                if not stack:
                    raise UnbalancedParenthesesError("Found ')' without a matching '('")
                top = stack.pop()
                if isinstance(top, LeftSeparator):
                    break
                output.append(top)
        elif isinstance(token, OperatorToken):
            while stack and isinstance(stack[-1], OperatorToken) and _pops_before(stack[-1].op, token.op):
                output.append(stack.pop())
            stack.append(token)
        else:
            raise InvariantViolationError(f"Unexpected token in infix sequence: {token!r}")

    # Remaining operators leave in reverse order (stack top first)
    while stack:
        top = stack.pop()
        if isinstance(top, LeftSeparator):
            raise UnbalancedParenthesesError("Found '(' without a matching ')'")
        output.append(top)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Postfix order: %s", format_tokens(output))
    return output

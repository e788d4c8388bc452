"""Binary expression tree built from postfix tokens."""
from typing import Annotated, Iterable, Iterator, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arithmetic_evaluator.common.errors import InvariantViolationError, MalformedExpressionError
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.tokens import (
    NumberToken,
    Operation,
    OperatorToken,
    Token,
    validate_number_text,
)


class LeafNode(BaseModel):
    """Operand holding the literal text of a number."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = "leaf"
    literal: str = Field(..., description="Number literal, parsed at evaluation time")

    @field_validator("literal")
    def literal_must_be_numeric(cls, v: str) -> str:
        """Ensure that the literal only holds digits and dots."""
        return validate_number_text(v)

    def __str__(self) -> str:
        return self.literal


class OperatorNode(BaseModel):
    """Binary operator applied to exactly two ordered operands."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["operator"] = "operator"
    op: Operation = Field(..., description="Operator applied to the operands")
    left: "ExpressionNode" = Field(..., description="First operand")
    right: "ExpressionNode" = Field(..., description="Second operand")

    def __str__(self) -> str:
        return render_tree(self)


ExpressionNode = Annotated[Union[LeafNode, OperatorNode], Field(discriminator="kind")]

OperatorNode.model_rebuild()


def iter_postorder(tree: ExpressionNode) -> Iterator[ExpressionNode]:
    """
    Yield every node after both of its operands, left operand first.

    Uses an explicit stack, so the depth of the tree is only bounded by memory.

    :param ExpressionNode tree: Root of the expression tree

    :return: Iterator over the nodes in post-order
    :rtype: Iterator[ExpressionNode]
    """
    stack: List[Tuple[ExpressionNode, bool]] = [(tree, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded or not isinstance(node, OperatorNode):
            yield node
            continue
        stack.append((node, True))
        # Right is pushed first so that the left operand comes out first
        stack.append((node.right, False))
        stack.append((node.left, False))


def render_tree(tree: ExpressionNode) -> str:
    """
    Render a tree as fully parenthesised infix text, e.g. "((4 * 3) + (2 ^ 7))".

    :param ExpressionNode tree: Root of the expression tree

    :return: Infix text
    :rtype: str
    """
    rendered: List[str] = []
    for node in iter_postorder(tree):
        if isinstance(node, OperatorNode):
            right = rendered.pop()
            left = rendered.pop()
            rendered.append(f"({left} {node.op.symbol} {right})")
        else:
            rendered.append(str(node))
    return rendered.pop()


def build_tree(postfix_tokens: Iterable[Token]) -> ExpressionNode:
    """
    Build an expression tree from tokens in postfix order.

    Postfix places the second operand last, so an operator pops its right
    operand first and its left operand second.

    :param Iterable[Token] postfix_tokens: Tokens as produced by ``to_postfix``

    :return: Root of the expression tree
    :rtype: ExpressionNode
    :raises MalformedExpressionError: If the tokens do not reduce to exactly one tree
    :raises InvariantViolationError: If a parenthesis is found in the postfix sequence
    """
    stack: List[ExpressionNode] = []

    for token in postfix_tokens:
        if isinstance(token, NumberToken):
            stack.append(LeafNode(literal=token.text))
        elif isinstance(token, OperatorToken):
            # Operator requires two operands
            if len(stack) < 2:
                raise MalformedExpressionError(f"Operator {token.op.symbol!r} is missing an operand")
            right: ExpressionNode = stack.pop()
            left: ExpressionNode = stack.pop()
            stack.append(OperatorNode(op=token.op, left=left, right=right))
        else:
            raise InvariantViolationError(f"Unexpected token in postfix sequence: {token!r}")

    if not stack:
        raise MalformedExpressionError("Empty expression")
    if len(stack) > 1:
        raise MalformedExpressionError(f"Invalid expression ({len(stack) - 1} operand(s) without an operator)")

    logger.debug("Expression tree: %s", stack[0])
    return stack[0]

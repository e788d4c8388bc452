"""Step-by-step reduction of an expression tree, for display and debugging."""
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.tokens import Operation
from arithmetic_evaluator.core.converter import to_postfix
from arithmetic_evaluator.core.evaluator import apply_operator, parse_literal
from arithmetic_evaluator.core.tokenizer import tokenize
from arithmetic_evaluator.core.tree import ExpressionNode, LeafNode, OperatorNode, build_tree


class ReductionStep(BaseModel):
    """One operator node collapsed into its value."""

    model_config = ConfigDict(frozen=True)

    op: Operation = Field(..., description="Operator that was applied")
    left: float = Field(..., description="Value of the first operand")
    right: float = Field(..., description="Value of the second operand")
    result: float = Field(..., description="Value the node collapsed into")
    expression: Optional[str] = Field(default=None, description="Remaining expression after the collapse, when rendered")


class ReductionTrace(BaseModel):
    """Every reduction step of an expression, in order, and its final value."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Traced arithmetic expression")
    steps: List[ReductionStep] = Field(..., description="Reduction steps in the order they were applied")
    result: float = Field(..., description="Final value of the expression")


class _FlatTree:
    """
    Working copy of a tree, indexed in breadth-first order.

    Index 0 is the root. ``values[i]`` is None while node ``i`` is an operator
    left to reduce.
    """

    def __init__(self, tree: ExpressionNode) -> None:
        self.ops: List[Optional[Operation]] = []
        self.children: List[Optional[Tuple[int, int]]] = []
        self.depths: List[int] = []
        self.values: List[Optional[float]] = []

        queue: List[ExpressionNode] = [tree]
        self.depths.append(0)
        index = 0
        # The queue doubles as the index: nodes keep the position they were enqueued at
        while index < len(queue):
            node = queue[index]
            if isinstance(node, OperatorNode):
                self.ops.append(node.op)
                self.children.append((len(queue), len(queue) + 1))
                self.values.append(None)
                queue.extend((node.left, node.right))
                self.depths.extend((self.depths[index] + 1, self.depths[index] + 1))
            elif isinstance(node, LeafNode):
                self.ops.append(None)
                self.children.append(None)
                self.values.append(parse_literal(node.literal))
            index += 1

    def reduction_order(self) -> List[int]:
        """
        Operator indexes, deepest first and leftmost on ties.

        Breadth-first indexes already run left to right within a level, and the
        operands of an operator are always one level deeper, so each node comes
        after both of its operands.
        """
        operators = [i for i, pair in enumerate(self.children) if pair is not None]
        return sorted(operators, key=lambda i: (-self.depths[i], i))

    def reduce(self, index: int) -> ReductionStep:
        left_index, right_index = self.children[index]
        left, right = self.values[left_index], self.values[right_index]
        op = self.ops[index]
        value = apply_operator(left, op, right)
        self.values[index] = value
        return ReductionStep(op=op, left=left, right=right, result=value)

    def render(self) -> str:
        """Render the current state as infix text, reduced nodes shown as values."""
        rendered: List[str] = []
        stack: List[Tuple[int, bool]] = [(0, False)]
        while stack:
            index, expanded = stack.pop()
            value = self.values[index]
            if value is not None:
                rendered.append(f"{value:g}")
            elif expanded:
                right = rendered.pop()
                left = rendered.pop()
                rendered.append(f"({left} {self.ops[index].symbol} {right})")
            else:
                left_index, right_index = self.children[index]
                stack.append((index, True))
                stack.append((right_index, False))
                stack.append((left_index, False))
        return rendered.pop()


def trace_reduction(tree: ExpressionNode, render: bool = True) -> List[ReductionStep]:
    """
    Reduce a copy of the tree one operator node at a time.

    Each step collapses the deepest operator node (leftmost on ties) into its
    value. The tree itself is not modified, and the last step's result is the
    value ``evaluate_tree`` returns.

    Rendering the remaining expression after every step costs time proportional
    to the size of the tree; pass ``render=False`` to only record the values.

    :param ExpressionNode tree: Root of the expression tree
    :param bool render: Record the remaining expression in each step

    :return: Reduction steps in the order they were applied, empty for a single number
    :rtype: List[ReductionStep]
    """
    flat = _FlatTree(tree)
    steps: List[ReductionStep] = []

    for index in flat.reduction_order():
        step = flat.reduce(index)
        if render:
            step = step.model_copy(update={"expression": flat.render()})
        logger.debug("Reduced %g %s %g = %g", step.left, step.op.symbol, step.right, step.result)
        steps.append(step)

    return steps


def trace(expression: str, render: bool = True) -> ReductionTrace:
    """
    Evaluate an expression and report every reduction step.

    :param str expression: Arithmetic expression string
    :param bool render: Record the remaining expression in each step

    :return: Steps and final value
    :rtype: ReductionTrace
    :raises ExpressionError: If the expression is invalid or malformed
    """
    tree = build_tree(to_postfix(tokenize(expression)))
    steps = trace_reduction(tree, render=render)
    result = steps[-1].result if steps else parse_literal(tree.literal)
    return ReductionTrace(expression=expression, steps=steps, result=result)

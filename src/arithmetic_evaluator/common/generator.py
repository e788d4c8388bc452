"""Random arithmetic expressions, used as test data and by the CLI."""
import random
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from arithmetic_evaluator.common.tokens import Operation

DEFAULT_OPERATORS: Tuple[Operation, ...] = (
    Operation.ADDITION,
    Operation.SUBTRACTION,
    Operation.MULTIPLICATION,
    Operation.DIVISION,
)


class ExpressionGenerator(BaseModel):
    """
    Generate grammar-valid expressions of a given number of terms.

    Numbers are drawn uniformly from [minimum, maximum) and written with two
    decimals; operators are drawn from ``operators``. A fixed seed always gives
    the same expression.
    """

    model_config = ConfigDict(frozen=True)

    terms: int = Field(..., ge=1, description="Number of operands in the expression")
    seed: Optional[int] = Field(default=None, description="Seed of the random generator")
    minimum: float = Field(default=0.0, ge=0.0, description="Lowest operand value")
    maximum: float = Field(default=10.0, description="Operand values stay below this bound")
    operators: Tuple[Operation, ...] = Field(default=DEFAULT_OPERATORS, min_length=1)

    @model_validator(mode="after")
    def bounds_must_be_ordered(self) -> "ExpressionGenerator":
        """Ensure that the operand range is not empty."""
        if self.maximum <= self.minimum:
            raise ValueError("maximum must be greater than minimum")
        return self

    def _number(self, rng: random.Random) -> str:
        return f"{rng.uniform(self.minimum, self.maximum):.2f}"

    def generate(self) -> str:
        """
        Build one expression, e.g. "3.14*0.52-9.80".

        :return: Expression without whitespace
        :rtype: str
        """
        rng = random.Random(self.seed)
        parts = [self._number(rng)]
        for _ in range(self.terms - 1):
            parts.append(rng.choice(self.operators).symbol)
            parts.append(self._number(rng))
        return "".join(parts)


def generate_expression(terms: int, seed: Optional[int] = None) -> str:
    """Shortcut for ``ExpressionGenerator(terms=terms, seed=seed).generate()``."""
    return ExpressionGenerator(terms=terms, seed=seed).generate()

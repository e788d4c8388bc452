"""Token vocabulary shared by every stage of the evaluation pipeline."""
from enum import Enum
from typing import Annotated, Dict, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Characters a number literal is made of; the literal itself is parsed later
NUMBER_CHARACTERS: frozenset = frozenset("0123456789.")


def validate_number_text(value: str) -> str:
    """
    Ensure a literal only contains digits and dots.

    :param str value: Literal text

    :return: The unchanged literal
    :rtype: str
    :raises ValueError: If the literal is empty or holds any other character
    """
    if not value or not set(value) <= NUMBER_CHARACTERS:
        raise ValueError(f"Number literal must be made of digits and '.', got {value!r}")
    return value


class Associativity(str, Enum):
    """Grouping direction of adjacent operators with the same precedence."""

    LEFT = "left"
    RIGHT = "right"


class Operation(str, Enum):
    """Binary operators, keyed by the symbol used in expressions."""

    ADDITION = "+"
    SUBTRACTION = "-"
    MULTIPLICATION = "*"
    DIVISION = "/"
    EXPONENTIATION = "^"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> int:
        """Binding strength, higher binds tighter."""
        return PRECEDENCE[self]

    @property
    def associativity(self) -> Associativity:
        return ASSOCIATIVITY[self]


PRECEDENCE: Dict[Operation, int] = {
    Operation.ADDITION: 2,
    Operation.SUBTRACTION: 2,
    Operation.MULTIPLICATION: 3,
    Operation.DIVISION: 3,
    Operation.EXPONENTIATION: 4,
}

ASSOCIATIVITY: Dict[Operation, Associativity] = {
    Operation.ADDITION: Associativity.LEFT,
    Operation.SUBTRACTION: Associativity.LEFT,
    Operation.MULTIPLICATION: Associativity.LEFT,
    Operation.DIVISION: Associativity.LEFT,
    Operation.EXPONENTIATION: Associativity.RIGHT,
}

OPERATOR_SYMBOLS: frozenset = frozenset(op.symbol for op in Operation)


class NumberToken(BaseModel):
    """Number literal, kept as text until evaluation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    text: str = Field(..., description="Exact literal text taken from the expression")

    @field_validator("text")
    def text_must_be_numeric(cls, v: str) -> str:
        """Ensure that the literal only holds digits and dots."""
        return validate_number_text(v)

    def __str__(self) -> str:
        return self.text


class OperatorToken(BaseModel):
    """One of the binary operators."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["operator"] = "operator"
    op: Operation = Field(..., description="Operator kind")

    def __str__(self) -> str:
        return self.op.symbol


class LeftSeparator(BaseModel):
    """Opening parenthesis."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["left_separator"] = "left_separator"

    def __str__(self) -> str:
        return "("


class RightSeparator(BaseModel):
    """Closing parenthesis."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["right_separator"] = "right_separator"

    def __str__(self) -> str:
        return ")"


Token = Annotated[
    Union[NumberToken, OperatorToken, LeftSeparator, RightSeparator],
    Field(discriminator="kind"),
]


def make_token(symbol: str) -> Token:
    """
    Build a token from its textual form.

    Anything that is not a parenthesis or an operator symbol is taken as a
    number literal.

    :param str symbol: Token text, e.g. "(", "^" or "4.5"

    :return: The matching token
    :rtype: Token
    """
    if symbol == "(":
        return LeftSeparator()
    if symbol == ")":
        return RightSeparator()
    if symbol in OPERATOR_SYMBOLS:
        return OperatorToken(op=Operation(symbol))
    return NumberToken(text=symbol)


def format_tokens(tokens: Iterable[Token]) -> str:
    """Render a token sequence space separated, e.g. ``"5 3 +"``."""
    return " ".join(str(token) for token in tokens)

"""Exceptions raised while turning expression text into a value."""


class ExpressionError(ValueError):
    """Base class for every failure of the evaluation pipeline."""


class InputSyntaxError(ExpressionError):
    """The expression text does not follow the accepted grammar."""


class UnrecognizedCharacterError(InputSyntaxError):
    """A character outside the expression alphabet was found."""

    def __init__(self, character: str, position: int) -> None:
        self.character = character
        self.position = position
        super().__init__(f"Unrecognized character {character!r} at position {position}")


class UnbalancedParenthesesError(InputSyntaxError):
    """A '(' or ')' has no matching counterpart."""


class MalformedExpressionError(InputSyntaxError):
    """The postfix sequence does not reduce to exactly one expression tree."""


class EvaluationError(ExpressionError):
    """Failure raised once the expression has been parsed."""


class InvalidNumericLiteralError(EvaluationError):
    """A number literal cannot be read as a decimal value."""

    def __init__(self, literal: str) -> None:
        self.literal = literal
        super().__init__(f"Invalid numeric literal: {literal!r}")


class InvariantViolationError(EvaluationError):
    """An earlier pipeline stage produced output it must never produce."""


class InputFileError(ValueError):
    """An expressions file or archive cannot be read."""

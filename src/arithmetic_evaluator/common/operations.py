"""Pydantic models for arithmetic operation requests and results."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class OperationRequest(BaseModel):
    """Represents a single arithmetic expression to evaluate."""

    line: int = Field(default=1, ge=1, description="Line number of the expression in the input")
    expression: str = Field(..., description="Arithmetic expression as a string")

    @field_validator("expression")
    def expression_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the expression is not empty."""
        if not v.strip():
            raise ValueError("Expression cannot be empty")
        return v


class OperationResult(BaseModel):
    """Represents the outcome of an evaluated arithmetic expression, either a value or an error."""

    line: int = Field(default=1, ge=1, description="Line number of the expression in the input")
    expression: str = Field(..., description="Original arithmetic expression")
    result: Optional[float] = Field(default=None, description="Evaluated numeric result of the expression")
    error: Optional[str] = Field(default=None, description="Error message when evaluation failed")
    error_kind: Optional[str] = Field(default=None, description="Name of the error raised, e.g. MalformedExpressionError")

    @model_validator(mode="after")
    def exactly_one_outcome(self) -> "OperationResult":
        """Ensure that either a result or an error is set, never both."""
        if (self.result is None) == (self.error is None):
            raise ValueError("OperationResult needs exactly one of 'result' or 'error'")
        return self

    @property
    def succeeded(self) -> bool:
        """True when the expression was evaluated, False when it carries an error."""
        return self.error is None

    def format_line(self) -> str:
        """
        Render the result as a line of the results file.

        :return: "<expression> = <result>" or "<expression> -> ERROR: <error>"
        :rtype: str
        """
        if self.succeeded:
            return f"{self.expression} = {self.result}"
        return f"{self.expression} -> ERROR: {self.error}"

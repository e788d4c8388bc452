"""Worker process evaluating one arithmetic expression."""
from multiprocessing.connection import Connection

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.errors import ExpressionError
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.operations import OperationRequest, OperationResult
from arithmetic_evaluator.core.evaluator import evaluate


class WorkerProcess(BaseModel):
    """
    Worker process responsible for evaluating a single arithmetic expression.

    Lifecycle:
        - Spawned by the batch evaluator
        - Receives one request only
        - Sends an OperationResult dump, value or error, through a Pipe
        - Terminates immediately after computation
    """

    # Make the Pydantic instance immutable (read-only) for safety
    # Allow arbitrary types like multiprocessing.Connection
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: Connection = Field(..., description="Connection object for sending results back to the batch evaluator")
    request: OperationRequest = Field(..., description="Expression to evaluate and its line number")

    def evaluate(self) -> OperationResult:
        """
        Evaluate the request, turning expression errors into an error result.

        :return: Result carrying either the value or the error
        :rtype: OperationResult
        """
        line, expression = self.request.line, self.request.expression
        try:
            result = evaluate(expression)
        except ExpressionError as exc:
            logger.error(
                f"👷❌ Worker failed on line {line}: {exc}\n"
                f"Invalid arithmetic expression, could not evaluate: {expression!r}"
            )
            return OperationResult(line=line, expression=expression, error=str(exc), error_kind=type(exc).__name__)

        logger.info(f"👷✅ Worker finished on line {line}: {result}")
        return OperationResult(line=line, expression=expression, result=result)

    def run(self) -> None:
        """
        Evaluate the expression and send the result or error through the pipe.

        :return: None
        """
        logger.info(f"👷🏁 Worker started on line {self.request.line}: {self.request.expression}")
        try:
            self.conn.send(self.evaluate().model_dump())
        finally:
            # Always close the connection
            self.conn.close()

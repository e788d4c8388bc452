"""Evaluate many arithmetic expressions using worker processes."""
from multiprocessing import Pipe, Process, cpu_count
from multiprocessing.connection import Connection
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.batch.loader import load_expressions
from arithmetic_evaluator.batch.worker import WorkerProcess
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.operations import OperationRequest, OperationResult

ActiveWorker = Tuple[Process, Connection, OperationRequest]


class BatchEvaluator(BaseModel):
    """
    Evaluate a list of expressions, one worker process per expression.

    Features:
        - Spawns one worker process per expression.
        - Writes results immediately to disk as soon as a worker finishes.
        - Ensures each worker is destroyed immediately after finishing.
        - Handles multiple simultaneous workers up to max_workers (CPU core count by default).
    """

    model_config = ConfigDict(frozen=True)

    output_file: Path = Field(..., description="Path to write computation results")
    max_workers: Optional[int] = Field(default=None, ge=1, description="Maximum number of live workers, defaults to CPU count")

    def _spawn_worker(self, request: OperationRequest) -> ActiveWorker:
        """
        Spawn a WorkerProcess for the given request and return process and pipe.

        :param OperationRequest request: Expression and its line number

        :return: Tuple of (Process, parent connection, request)
        :rtype: ActiveWorker
        """
        parent_conn, child_conn = Pipe(duplex=False)
        worker = WorkerProcess(conn=child_conn, request=request)
        process = Process(target=worker.run)
        process.start()
        # The child owns its end of the pipe now
        child_conn.close()
        return process, parent_conn, request

    @staticmethod
    def _receive_result(pipe_conn: Connection, request: OperationRequest) -> OperationResult:
        """
        Read the result sent by a worker, or build an error result if it died without sending one.

        :param Connection pipe_conn: Parent end of the worker pipe
        :param OperationRequest request: Request the worker was given

        :return: Result of the request
        :rtype: OperationResult
        """
        try:
            if pipe_conn.poll():
                return OperationResult(**pipe_conn.recv())
        except EOFError:
            pass
        finally:
            pipe_conn.close()

        logger.error(f"👷❌ Worker on line {request.line} exited without a result")
        return OperationResult(
            line=request.line,
            expression=request.expression,
            error="Worker exited without a result",
            error_kind="WorkerError",
        )

    def _collect_finished_workers(
        self, active_workers: List[ActiveWorker], f_out: TextIO
    ) -> List[OperationResult]:
        """
        Collect results from all finished workers and write them to the output file.

        Finished workers are removed from the active_workers list.

        :param list active_workers: List of tuples (Process, Connection, OperationRequest)
        :param TextIO f_out: Open file handle for writing results

        :return: Results of the workers collected by this call
        :rtype: List[OperationResult]
        """
        collected: List[OperationResult] = []
        # Iterate in reverse to safely remove finished workers while iterating
        for i in reversed(range(len(active_workers))):
            proc, pipe_conn, request = active_workers[i]
            if not proc.is_alive():
                result = self._receive_result(pipe_conn, request)
                proc.join()
                active_workers.pop(i)

                # Write output immediately
                f_out.write(result.format_line() + "\n")
                f_out.flush()
                collected.append(result)
        return collected

    def run(self, expressions: List[str]) -> List[OperationResult]:
        """
        Evaluate every expression and write one result line per expression to the output file.

        Lines are written in completion order; the returned list is ordered by line number.

        :param List[str] expressions: Expressions to evaluate, line numbers start at 1

        :return: One result per expression
        :rtype: List[OperationResult]
        """
        requests = [
            OperationRequest(line=line, expression=expr)
            for line, expr in enumerate(expressions, start=1)
        ]
        logger.info(f"🧮 Evaluating {len(requests)} expression(s) into {self.output_file}")

        # Limit number of active workers to max_workers or number of expressions
        max_workers: int = min(self.max_workers or cpu_count(), max(len(requests), 1))
        active_workers: List[ActiveWorker] = []
        results: List[OperationResult] = []

        with self.output_file.open("w", encoding="utf-8") as f_out:
            for request in requests:
                # Wait until a worker slot is available
                while len(active_workers) >= max_workers:
                    results.extend(self._collect_finished_workers(active_workers, f_out))

                # Spawn new worker for current expression
                active_workers.append(self._spawn_worker(request))

            # Collect remaining active workers
            while active_workers:
                results.extend(self._collect_finished_workers(active_workers, f_out))

        failures = sum(1 for result in results if not result.succeeded)
        logger.info(f"🧮✅ Batch finished: {len(results) - failures} succeeded, {failures} failed")
        return sorted(results, key=lambda result: result.line)

    def run_file(self, input_file: Path) -> List[OperationResult]:
        """
        Load the expressions of a text file or archive and evaluate them.

        :param Path input_file: Path to the input file or archive

        :return: One result per expression
        :rtype: List[OperationResult]
        """
        return self.run(load_expressions(input_file))

"""
Command-line entrypoint of the arithmetic evaluator.

Subcommands:
- eval: evaluate one expression and print the result, optionally with every reduction step
- batch: evaluate a file (or archive) of expressions with worker processes
- generate: print a random expression
"""
import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError

from arithmetic_evaluator.batch.runner import BatchEvaluator
from arithmetic_evaluator.common.errors import ExpressionError, InputFileError
from arithmetic_evaluator.common.generator import ExpressionGenerator
from arithmetic_evaluator.common.logger import configure_logging, logger
from arithmetic_evaluator.core.evaluator import evaluate
from arithmetic_evaluator.core.trace import trace


class EvalArgs(BaseModel):
    """Validated arguments of the ``eval`` subcommand."""

    expression: str = Field(..., min_length=1)
    trace: bool = False


class BatchArgs(BaseModel):
    """
    Validated arguments of the ``batch`` subcommand.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing arithmetic operations.
    output : Path, optional
        Path of the results file, derived from file_path when omitted.
    workers : int, optional
        Maximum number of simultaneous worker processes.
    """

    file_path: FilePath
    output: Optional[Path] = None
    workers: Optional[int] = Field(default=None, ge=1)


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    stem = input_path.name[: -len("".join(input_path.suffixes))] if input_path.suffixes else input_path.name
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arithmetic-evaluator",
        description="Evaluate arithmetic expressions with + - * / ^ and parentheses",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    eval_parser = subparsers.add_parser("eval", help="Evaluate one expression")
    eval_parser.add_argument("expression", help="Arithmetic expression, e.g. '4*3+2^7'")
    eval_parser.add_argument("--trace", action="store_true", help="Print every reduction step")

    batch_parser = subparsers.add_parser("batch", help="Evaluate a file or archive of expressions")
    batch_parser.add_argument("file_path", help="Path to the file containing arithmetic operations")
    batch_parser.add_argument("-o", "--output", help="Path of the results file")
    batch_parser.add_argument("-w", "--workers", type=int, help="Maximum number of worker processes")

    generate_parser = subparsers.add_parser("generate", help="Print a random expression")
    generate_parser.add_argument("terms", type=int, help="Number of operands")
    generate_parser.add_argument("--seed", type=int, help="Seed for a reproducible expression")

    return parser


def run_eval(args: EvalArgs) -> int:
    """
    Evaluate one expression and print the result.

    :return: Process exit code, 1 when the expression is invalid
    :rtype: int
    """
    try:
        if args.trace:
            reduction = trace(args.expression)
            for step in reduction.steps:
                print(f"{step.left:g} {step.op.symbol} {step.right:g} = {step.result:g}  ->  {step.expression}")
            result = reduction.result
        else:
            result = evaluate(args.expression)
    except ExpressionError as exc:
        logger.error(f"❌ {type(exc).__name__}: {exc}")
        return 1

    print(result)
    return 0


def run_batch(args: BatchArgs) -> int:
    """
    Evaluate every expression of a file and write the results file.

    :return: Process exit code, 1 when at least one expression failed
    :rtype: int
    """
    input_path = Path(args.file_path)
    output_path = args.output or build_output_path(input_path)

    try:
        results = BatchEvaluator(output_file=output_path, max_workers=args.workers).run_file(input_path)
    except InputFileError as exc:
        logger.error(f"Could not read {input_path}: {exc}")
        return 1

    print(f"{len(results)} result(s) written to {output_path}")
    return 0 if all(result.succeeded for result in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function used by the ``arithmetic-evaluator`` script.

    :param argv: Arguments, defaults to sys.argv[1:]
    :return: Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging("INFO")

    try:
        if args.command == "eval":
            return run_eval(EvalArgs(expression=args.expression, trace=args.trace))
        if args.command == "batch":
            return run_batch(BatchArgs(file_path=args.file_path, output=args.output, workers=args.workers))
        print(ExpressionGenerator(terms=args.terms, seed=args.seed).generate())
        return 0
    except ValidationError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    raise SystemExit(main())

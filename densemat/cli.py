"""
Command-Line Interface for densemat.

Reads a matrix, applies row operations in the order given and prints the
result.

Usage:
    python -m densemat [INPUT] [OPTIONS]

Options:
    --swap I J          Swap rows I and J
    --mult ROW SCALAR   Multiply ROW by SCALAR
    --add TO FROM       Add row FROM onto row TO
    --json PATH         Also write the result as JSON
    --excel PATH        Also write the result as an Excel workbook
    --verbose           Print progress to stderr
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .export import MatrixExcelExporter
from .io import read_matrix, save_matrix_json
from .matrix import Matrix
from .parsing import MatrixParseError

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_BAD_INDEX = 2
EXIT_INPUT_ERROR = 3

Operation = Tuple[str, Tuple]


class _OrderedOperation(argparse.Action):
    """Collects every row operation into one list, keeping command-line order."""

    converters = (int, int)

    def __call__(self, parser, namespace, values, option_string=None):
        try:
            args = tuple(convert(value) for convert, value in zip(self.converters, values))
        except ValueError:
            parser.error(
                f"{option_string} {' '.join(values)}: expected "
                f"{' '.join(convert.__name__ for convert in self.converters)}"
            )
        operations = getattr(namespace, "operations", None) or []
        operations.append((self.dest, args))
        namespace.operations = operations


class _MultOperation(_OrderedOperation):
    converters = (int, float)


def _row_indices(operation: Operation) -> List[int]:
    name, args = operation
    if name == "mult":
        return [args[0]]
    return list(args)


def validate_operations(matrix: Matrix, operations: Sequence[Operation]) -> List[str]:
    """Return one message per operation that references a missing row."""

    problems = []
    for name, args in operations:
        for index in _row_indices((name, args)):
            if 0 <= index < matrix.rows:
                continue
            if matrix.rows == 0:
                reason = "matrix has no rows"
            else:
                reason = f"row {index} is outside 0..{matrix.rows - 1}"
            problems.append(f"--{name} {' '.join(str(a) for a in args)}: {reason}")
    return problems


def apply_operations(matrix: Matrix, operations: Sequence[Operation]) -> Matrix:
    """Apply already validated operations to ``matrix`` in place."""

    for name, args in operations:
        if name == "swap":
            matrix.swap_rows(*args)
        elif name == "mult":
            matrix.mult_row(*args)
        elif name == "add":
            matrix.add_row(*args)
        else:
            raise ValueError(f"Unknown row operation '{name}'")
    return matrix


def _log(verbose: bool, message: str) -> None:
    if verbose:
        print(message, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="densemat",
        description="Read a dense matrix, apply elementary row operations and print it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input format:
  rows cols v00 v01 ... (whitespace separated, row-major)

Examples:
  python -m densemat matrix.txt --swap 0 2
  echo "2 2 1 2 3 4" | python -m densemat --mult 0 2.5 --add 1 0
        """
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Matrix text file (default: stdin)"
    )
    parser.add_argument(
        "--swap",
        action=_OrderedOperation,
        nargs=2,
        metavar=("I", "J"),
        help="Swap rows I and J (can specify multiple times)"
    )
    parser.add_argument(
        "--mult",
        action=_MultOperation,
        nargs=2,
        metavar=("ROW", "SCALAR"),
        help="Multiply ROW by SCALAR (can specify multiple times)"
    )
    parser.add_argument(
        "--add",
        action=_OrderedOperation,
        nargs=2,
        metavar=("TO", "FROM"),
        help="Add row FROM onto row TO (can specify multiple times)"
    )
    parser.add_argument(
        "--json",
        metavar="PATH",
        help="Write the resulting matrix as JSON"
    )
    parser.add_argument(
        "--excel",
        metavar="PATH",
        help="Write the resulting matrix to an Excel workbook"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print detailed progress"
    )
    parser.set_defaults(operations=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""

    parser = build_parser()
    args = parser.parse_args(argv)
    operations = args.operations or []

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    source = sys.stdin if args.input == "-" else args.input
    try:
        matrix = read_matrix(source)
    except MatrixParseError as exc:
        print(f"Error: could not parse matrix: {exc}", file=sys.stderr)
        return EXIT_PARSE_ERROR
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: could not read {args.input}: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    _log(args.verbose, f"Read {matrix.rows}x{matrix.cols} matrix")

    problems = validate_operations(matrix, operations)
    if problems:
        for message in problems:
            print(f"Error: {message}", file=sys.stderr)
        return EXIT_BAD_INDEX

    apply_operations(matrix, operations)
    _log(args.verbose, f"Applied {len(operations)} row operation(s)")

    sys.stdout.write(str(matrix))

    if args.json:
        save_matrix_json(matrix, args.json)
        _log(args.verbose, f"JSON saved to: {args.json}")

    if args.excel:
        exporter = MatrixExcelExporter()
        exporter.add_matrix(matrix, "Result")
        exporter.save(args.excel)
        _log(args.verbose, f"Workbook saved to: {args.excel}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

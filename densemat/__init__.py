"""Dense row-major float32 matrices with elementary row operations."""

from .matrix import DTYPE, IndexOutOfRange, Matrix, format_matrix, format_value
from .parsing import (
    ElementCountMismatch,
    MalformedElement,
    MalformedHeader,
    MatrixParseError,
    parse_matrix,
)
from .io import (
    load_matrix_json,
    matrix_from_dict,
    matrix_to_dict,
    read_matrix,
    save_matrix_json,
)

__all__ = [
    "DTYPE",
    "IndexOutOfRange",
    "Matrix",
    "format_matrix",
    "format_value",
    "ElementCountMismatch",
    "MalformedElement",
    "MalformedHeader",
    "MatrixParseError",
    "parse_matrix",
    "load_matrix_json",
    "matrix_from_dict",
    "matrix_to_dict",
    "read_matrix",
    "save_matrix_json",
]

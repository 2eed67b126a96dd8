"""Reading matrices from text streams and JSON persistence."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any, Dict, Optional, Union

from .matrix import Matrix
from .parsing import parse_matrix

logger = logging.getLogger(__name__)

_Source = Union[str, Path, IO[str]]


def _read_text(source: _Source) -> str:
    if hasattr(source, "read"):
        return source.read()  # type: ignore[union-attr]
    path = Path(source)
    logger.debug("Reading matrix text from %s", path)
    return path.read_text(encoding="utf-8")


def read_matrix(source: _Source) -> Matrix:
    """Read the whole of ``source`` and parse it as matrix text.

    ``source`` may be a path or an open text stream such as ``sys.stdin``.
    Parse failures raise a :class:`~densemat.parsing.MatrixParseError`;
    file-system errors propagate unchanged.
    """

    matrix = parse_matrix(_read_text(source))
    logger.debug("Parsed %dx%d matrix", matrix.rows, matrix.cols)
    return matrix


def matrix_to_dict(matrix: Matrix) -> Dict[str, Any]:
    """Serialize ``matrix`` to a JSON-compatible dictionary."""

    return {
        "rows": matrix.rows,
        "cols": matrix.cols,
        "data": [float(value) for value in matrix.data],
    }


def _dimension(data: Dict[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Matrix JSON '{key}' must be an integer; received {value!r}")
    return value


def matrix_from_dict(data: Dict[str, Any]) -> Matrix:
    """Create a :class:`Matrix` from :func:`matrix_to_dict` output."""

    if not isinstance(data, dict):
        raise ValueError("Matrix JSON must contain an object at the top level")
    missing = [key for key in ("rows", "cols", "data") if key not in data]
    if missing:
        raise ValueError(f"Matrix JSON is missing keys: {', '.join(missing)}")
    values = data["data"]
    if not isinstance(values, list):
        raise ValueError("Matrix JSON 'data' must be a flat list of numbers")
    return Matrix(
        _dimension(data, "rows"), _dimension(data, "cols"), [float(value) for value in values]
    )


def save_matrix_json(
    matrix: Matrix, target: Union[str, Path, IO[str]], *, indent: Optional[int] = 2
) -> None:
    """Write ``matrix`` as JSON to a path or file-like object."""

    payload = json.dumps(matrix_to_dict(matrix), indent=indent)
    if hasattr(target, "write"):
        target.write(payload)  # type: ignore[union-attr]
    else:
        path = Path(target)
        path.write_text(payload, encoding="utf-8")
        logger.debug("Saved %dx%d matrix to %s", matrix.rows, matrix.cols, path)


def load_matrix_json(source: _Source) -> Matrix:
    """Load a matrix previously written by :func:`save_matrix_json`."""

    return matrix_from_dict(json.loads(_read_text(source)))


__all__ = [
    "load_matrix_json",
    "matrix_from_dict",
    "matrix_to_dict",
    "read_matrix",
    "save_matrix_json",
]

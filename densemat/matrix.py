"""Dense row-major matrix with in-place elementary row operations."""
from __future__ import annotations

import operator
from typing import Iterable, List, Sequence

import numpy as np

DTYPE = np.float32


class IndexOutOfRange(IndexError):
    """Raised when a row index falls outside ``[0, rows)``.

    This signals a broken caller contract rather than bad user input.  Row
    indices taken from user input must be validated before they reach the
    matrix.
    """

    def __init__(self, index: int, rows: int):
        super().__init__(f"Row index {index} out of range for matrix with {rows} rows")
        self.index = index
        self.rows = rows


def format_value(value: float) -> str:
    """Render a float32 value in its shortest positional form."""

    if np.isnan(value):
        return "NaN"
    if np.isinf(value):
        return "inf" if value > 0 else "-inf"
    return np.format_float_positional(DTYPE(value), trim="-")


class Matrix:
    """Fixed-shape dense matrix of single-precision floats.

    Elements live in one contiguous float32 buffer in row-major order, so
    element ``(i, j)`` sits at offset ``i * cols + j``.  The shape never changes
    after construction; only element values and the order of rows do.

    Row views returned by :meth:`row` alias the buffer directly and stay valid
    for as long as the matrix is alive.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, rows: int, cols: int, data: Sequence[float]):
        rows = operator.index(rows)
        cols = operator.index(cols)
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative; received {rows}x{cols}")

        with np.errstate(over="ignore"):
            buffer = np.array(data, dtype=DTYPE)
        if buffer.ndim != 1:
            raise ValueError("Matrix data must be a flat sequence in row-major order")
        if buffer.size != rows * cols:
            raise ValueError(
                f"A {rows}x{cols} matrix needs {rows * cols} values; received {buffer.size}"
            )

        self._rows = rows
        self._cols = cols
        self._data = np.ascontiguousarray(buffer)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Build a matrix from a list of equally sized rows."""

        n_rows = len(rows)
        n_cols = len(rows[0]) if n_rows else 0
        if any(len(row) != n_cols for row in rows):
            raise ValueError("All rows must have the same number of columns")
        flat: List[float] = [value for row in rows for value in row]
        return cls(n_rows, n_cols, flat)

    @classmethod
    def parse(cls, text: str) -> "Matrix":
        """Parse ``rows cols v0 v1 ...`` text into a matrix."""

        from .parsing import parse_matrix

        return parse_matrix(text)

    from_str = parse

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self):
        return self._rows, self._cols

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the whole row-major buffer."""

        view = self._data.view()
        view.flags.writeable = False
        return view

    def _check_row(self, index: int) -> int:
        index = operator.index(index)
        if not 0 <= index < self._rows:
            raise IndexOutOfRange(index, self._rows)
        return index

    def _span(self, index: int) -> slice:
        start = index * self._cols
        return slice(start, start + self._cols)

    def row(self, index: int) -> np.ndarray:
        """Return a read-only view of row ``index`` without copying."""

        index = self._check_row(index)
        view = self._data[self._span(index)]
        view.flags.writeable = False
        return view

    __getitem__ = row

    def __len__(self) -> int:
        return self._rows

    def iter_rows(self) -> Iterable[np.ndarray]:
        for index in range(self._rows):
            yield self.row(index)

    def to_rows(self) -> List[List[float]]:
        """Copy the contents into nested Python lists."""

        return [[float(value) for value in row] for row in self.iter_rows()]

    def swap_rows(self, i: int, j: int) -> None:
        """Exchange rows ``i`` and ``j`` in place."""

        i = self._check_row(i)
        j = self._check_row(j)
        if i == j:
            return
        first, second = self._span(i), self._span(j)
        scratch = self._data[first].copy()
        self._data[first] = self._data[second]
        self._data[second] = scratch

    def mult_row(self, row: int, scalar: float) -> None:
        """Multiply every element of ``row`` by ``scalar`` in place."""

        row = self._check_row(row)
        with np.errstate(all="ignore"):
            self._data[self._span(row)] *= DTYPE(scalar)

    def add_row(self, to: int, from_: int) -> None:
        """Add row ``from_`` element-wise onto row ``to``.

        ``to == from_`` doubles the row.
        """

        to = self._check_row(to)
        from_ = self._check_row(from_)
        with np.errstate(all="ignore"):
            self._data[self._span(to)] += self._data[self._span(from_)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self) -> str:
        return f"Matrix(rows={self._rows}, cols={self._cols})"

    def __str__(self) -> str:
        return format_matrix(self)


def format_matrix(matrix: Matrix) -> str:
    """Render ``matrix`` as one bracketed line per row.

    ``[ 1 2 3 ]`` style output is meant for display and is not accepted by the
    parser.
    """

    lines = []
    for row in matrix.iter_rows():
        cells = "".join(f"{format_value(value)} " for value in row)
        lines.append(f"[ {cells}]\n")
    return "".join(lines)


__all__ = [
    "DTYPE",
    "IndexOutOfRange",
    "Matrix",
    "format_matrix",
    "format_value",
]

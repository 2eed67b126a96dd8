"""Text parser for dense matrices.

The accepted grammar is a stream of whitespace separated tokens::

    rows cols v(0,0) v(0,1) ... v(rows-1,cols-1)

``rows`` and ``cols`` are non-negative integers.  Exactly ``rows * cols`` real
numbers follow in row-major order.  Line breaks carry no meaning, so the same
matrix can be written on one line or laid out row by row.
"""
from __future__ import annotations

import math
import re
from decimal import Decimal
from fractions import Fraction
from typing import List, Optional, Sequence

import numpy as np

from .matrix import DTYPE, Matrix

_INTEGER = re.compile(r"\+?[0-9]+")
_REAL = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_HEADER_NAMES = ("rows", "cols")
# Halfway between the largest float32 and 2**128; magnitudes from here up round to inf.
_FLOAT32_OVERFLOW = Fraction(2**128 - 2**103)


class MatrixParseError(ValueError):
    """Base class for recoverable errors raised while parsing matrix text.

    ``position`` is the zero-based index of the offending token and ``token``
    its text, or ``None`` when the token is missing.
    """

    def __init__(self, message: str, *, position: int, token: Optional[str] = None):
        super().__init__(message)
        self.position = position
        self.token = token


class MalformedHeader(MatrixParseError):
    """The row or column count is missing or not a non-negative integer."""


class MalformedElement(MatrixParseError):
    """A data token is not a real number."""


class ElementCountMismatch(MatrixParseError):
    """The number of data tokens differs from ``rows * cols``."""

    def __init__(self, expected: int, actual: int, *, position: int, token: Optional[str] = None):
        super().__init__(
            f"Expected {expected} matrix elements; found {actual}",
            position=position,
            token=token,
        )
        self.expected = expected
        self.actual = actual


def _parse_dimension(tokens: Sequence[str], position: int) -> int:
    name = _HEADER_NAMES[position]
    if position >= len(tokens):
        raise MalformedHeader(f"Missing {name} count", position=position)
    token = tokens[position]
    if not _INTEGER.fullmatch(token):
        raise MalformedHeader(
            f"Invalid {name} count {token!r}: expected a non-negative integer",
            position=position,
            token=token,
        )
    return int(token)


def _to_float32(token: str) -> np.float32:
    """Convert a real-number token to the nearest float32, ties to even.

    The float32 neighbours of the float64 value are compared against the exact
    decimal value of the token, so the result is rounded once.
    """

    wide = float(token)
    with np.errstate(over="ignore", under="ignore"):
        narrowed = DTYPE(wide)
    if not math.isfinite(wide) or not 2.0**-151 < abs(wide) < 2.0**129:
        return narrowed

    exact = Fraction(Decimal(token))
    if abs(exact) >= _FLOAT32_OVERFLOW:
        return DTYPE(math.copysign(math.inf, wide))
    candidates = [
        value
        for value in (
            np.nextafter(narrowed, DTYPE(-np.inf)),
            narrowed,
            np.nextafter(narrowed, DTYPE(np.inf)),
        )
        if np.isfinite(value)
    ]
    return min(
        candidates,
        key=lambda value: (abs(Fraction(float(value)) - exact), int(value.view(np.uint32)) & 1),
    )


def _parse_element(token: str, position: int) -> np.float32:
    if not _REAL.fullmatch(token):
        raise MalformedElement(
            f"Invalid matrix element {token!r} at token {position}",
            position=position,
            token=token,
        )
    return _to_float32(token)


def parse_matrix(text: str) -> Matrix:
    """Parse ``text`` into a :class:`Matrix`.

    Raises one of :class:`MalformedHeader`, :class:`ElementCountMismatch` or
    :class:`MalformedElement`.  No matrix is built unless the whole input is
    valid.
    """

    tokens = text.split()
    rows = _parse_dimension(tokens, 0)
    cols = _parse_dimension(tokens, 1)

    expected = rows * cols
    body = tokens[2:]
    if len(body) != expected:
        # Point at the first surplus token, or just past the end when short.
        position = 2 + min(expected, len(body))
        token = body[expected] if len(body) > expected else None
        raise ElementCountMismatch(expected, len(body), position=position, token=token)

    values: List[np.float32] = [
        _parse_element(token, position) for position, token in enumerate(body, start=2)
    ]
    return Matrix(rows, cols, values)


__all__ = [
    "ElementCountMismatch",
    "MalformedElement",
    "MalformedHeader",
    "MatrixParseError",
    "parse_matrix",
]

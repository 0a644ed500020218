"""
Textual matrix literals.

Rows are separated by ``;`` and values within a row by whitespace:

    "1 2 3; 4 5 6"   ->  2 x 3
    "3; 3; 3;"       ->  3 x 1 column vector

Empty rows (e.g. from a trailing ``;``) are ignored.
"""

from typing import List

from .dense import Matrix
from .errors import MalformedLiteralError


def parse_rows(text: str) -> List[List[float]]:
    """
    Split a literal into a list of float rows without checking raggedness.

    Raises
    ------
    MalformedLiteralError
        If a token is not a number.
    """
    rows = []
    for chunk in text.split(";"):
        tokens = chunk.split()
        if not tokens:
            continue
        try:
            rows.append([float(tok) for tok in tokens])
        except ValueError as exc:
            raise MalformedLiteralError(
                f"Row '{chunk.strip()}' contains a non-numeric value"
            ) from exc
    return rows


def parse_matrix(text: str) -> Matrix:
    """
    Parse a matrix literal.

    Raises
    ------
    MalformedLiteralError
        If the literal is empty, ragged or non-numeric.

    Examples
    --------
    >>> parse_matrix("1 2; 3 4").size
    (2, 2)
    """
    rows = parse_rows(text)
    if not rows:
        raise MalformedLiteralError(f"Matrix literal {text!r} has no rows")
    return Matrix.from_rows(rows)


def format_matrix(matrix: Matrix) -> str:
    """Render a matrix back into literal form (``repr`` floats, ``; `` rows)."""
    return "; ".join(" ".join(repr(v) for v in row) for row in matrix.tolist())

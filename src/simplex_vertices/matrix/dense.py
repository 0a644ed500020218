"""
Dense matrix value type.

A Matrix owns a float64 numpy buffer of shape (rows, cols). Every operation
returns a new Matrix; nothing aliases the caller's data. Arithmetic is
exposed through named methods rather than operators, and equality comes in
two flavours: ``equals`` (exact, entry-for-entry) and ``allclose``
(tolerance-based).

Elimination-based operations (triangulation, LU, solve, inverse,
determinant) live in ``elimination.py``; the methods here delegate to it.
"""

import numpy as np
from typing import Iterable, List, Sequence, Tuple

from ..config import EQUALITY_TOLERANCE, PIVOT_TOLERANCE
from .errors import (
    DimensionMismatchError,
    MalformedLiteralError,
    OutOfRangeError,
)


Size = Tuple[int, int]


class Matrix:
    """
    An arbitrarily sized dense matrix of float64 values.

    Parameters
    ----------
    rows : int
        Number of rows.
    cols : int
        Number of columns.

    Examples
    --------
    >>> m = Matrix(2, 3)
    >>> m.size
    (2, 3)
    >>> m[1, 2]
    0.0
    """

    __slots__ = ("_data",)

    def __init__(self, rows: int, cols: int):
        if rows < 0 or cols < 0:
            raise DimensionMismatchError(
                f"Matrix size must be non-negative, got ({rows}, {cols})"
            )
        self._data = np.zeros((int(rows), int(cols)), dtype=np.float64)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def _wrap(cls, data: np.ndarray) -> "Matrix":
        """Adopt an array this module just allocated (no copy)."""
        m = cls.__new__(cls)
        m._data = data
        return m

    @classmethod
    def from_numpy(cls, array) -> "Matrix":
        """Build a matrix from a 2-D array-like, copying the values."""
        data = np.array(array, dtype=np.float64, copy=True)
        if data.ndim != 2:
            raise DimensionMismatchError(
                f"Expected a 2-D array, got {data.ndim} dimension(s)"
            )
        return cls._wrap(data)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Build a matrix from a list of equal-length rows."""
        rows = [list(r) for r in rows]
        if not rows:
            return cls(0, 0)
        width = len(rows[0])
        for r, row in enumerate(rows):
            if len(row) != width:
                raise MalformedLiteralError(
                    f"Matrix rows cannot be jagged. Expected: {width} "
                    f"Got: {len(row)} (row {r})"
                )
        return cls._wrap(np.array(rows, dtype=np.float64).reshape(len(rows), width))

    @classmethod
    def column(cls, values: Iterable[float]) -> "Matrix":
        """Build an (n x 1) column vector."""
        data = np.array(list(values), dtype=np.float64).reshape(-1, 1)
        return cls._wrap(data)

    @classmethod
    def from_string(cls, text: str) -> "Matrix":
        """Parse a literal such as ``"1 2 3; 4 5 6"``. See literal.parse_matrix."""
        from .literal import parse_matrix
        return parse_matrix(text)

    @classmethod
    def ones(cls, rows: int, cols: int) -> "Matrix":
        """Generate a new matrix filled with ones."""
        return cls._wrap(np.ones((rows, cols), dtype=np.float64))

    @classmethod
    def zeroes(cls, rows: int, cols: int) -> "Matrix":
        """Generate a new matrix filled with zeroes."""
        return cls(rows, cols)

    @classmethod
    def identity(cls, size: int) -> "Matrix":
        """Generate a new square identity matrix."""
        return cls._wrap(np.eye(size, dtype=np.float64))

    def copy(self) -> "Matrix":
        """Return an independent deep copy."""
        return Matrix._wrap(self._data.copy())

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the underlying values as a numpy array."""
        return self._data.copy()

    def tolist(self) -> List[List[float]]:
        return self._data.tolist()

    # -------------------------------------------------------------------------
    # Shape and indexing
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def size(self) -> Size:
        """(rows, cols)."""
        return self._data.shape

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def _check_index(self, key) -> Tuple[int, int]:
        try:
            row, col = key
        except (TypeError, ValueError):
            raise OutOfRangeError(f"Matrix index must be a (row, col) pair, got {key!r}")
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise OutOfRangeError(
                f"Index ({row}, {col}) out of range for matrix of size {self.size}"
            )
        return int(row), int(col)

    def __getitem__(self, key) -> float:
        row, col = self._check_index(key)
        return float(self._data[row, col])

    def __setitem__(self, key, value: float) -> None:
        row, col = self._check_index(key)
        self._data[row, col] = value

    def __repr__(self) -> str:
        body = "; ".join(" ".join(repr(float(v)) for v in row) for row in self._data)
        return f"Matrix({self.rows},{self.cols}): {body}"

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def _check_same_size(self, other: "Matrix", verb: str) -> None:
        if self.size != other.size:
            raise DimensionMismatchError(
                f"Matrices cannot be {verb}. {self.size} vs {other.size}"
            )

    def add(self, other: "Matrix") -> "Matrix":
        """Elementwise sum; sizes must match."""
        self._check_same_size(other, "added")
        return Matrix._wrap(self._data + other._data)

    def subtract(self, other: "Matrix") -> "Matrix":
        """Elementwise difference; sizes must match."""
        self._check_same_size(other, "subtracted")
        return Matrix._wrap(self._data - other._data)

    def multiply(self, other: "Matrix") -> "Matrix":
        """Matrix product; requires self.cols == other.rows."""
        if self.cols != other.rows:
            raise DimensionMismatchError(
                f"Matrices cannot be multiplied. {self.size} vs {other.size}"
            )
        return Matrix._wrap(self._data @ other._data)

    def scale(self, scalar: float) -> "Matrix":
        """Multiply every entry by ``scalar``."""
        return Matrix._wrap(self._data * float(scalar))

    def equals(self, other: "Matrix") -> bool:
        """
        Exact equality: same size and every entry bit-for-bit equal.

        Results of elimination rarely compare exactly; prefer ``allclose``.
        """
        if self.size != other.size:
            return False
        return bool(np.array_equal(self._data, other._data))

    def allclose(self, other: "Matrix", tol: float = EQUALITY_TOLERANCE) -> bool:
        """Same size and every entry within ``tol`` (absolute)."""
        if self.size != other.size:
            return False
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=tol))

    def transpose(self) -> "Matrix":
        return Matrix._wrap(self._data.T.copy())

    def compose_horizontal(self, other: "Matrix") -> "Matrix":
        """Attach ``other`` to the right of this matrix."""
        if self.rows != other.rows:
            raise DimensionMismatchError(
                "Cannot compose matrices with different row sizes horizontally. "
                f"{self.size} vs {other.size}"
            )
        return Matrix._wrap(np.hstack([self._data, other._data]))

    def compose_vertical(self, other: "Matrix") -> "Matrix":
        """Attach ``other`` below this matrix."""
        if self.cols != other.cols:
            raise DimensionMismatchError(
                "Cannot compose matrices with different column sizes vertically. "
                f"{self.size} vs {other.size}"
            )
        return Matrix._wrap(np.vstack([self._data, other._data]))

    def _sorted_indices(self, indices: Iterable[int], limit: int, axis: str) -> List[int]:
        ordered = sorted(int(i) for i in indices)
        for i in ordered:
            if not 0 <= i < limit:
                raise OutOfRangeError(
                    f"{axis} index {i} out of range for matrix of size {self.size}"
                )
        return ordered

    def select_columns(self, columns: Iterable[int]) -> "Matrix":
        """New matrix made of the given columns, in ascending index order."""
        cols = self._sorted_indices(columns, self.cols, "Column")
        return Matrix._wrap(self._data[:, cols].reshape(self.rows, len(cols)))

    def select_rows(self, rows: Iterable[int]) -> "Matrix":
        """New matrix made of the given rows, in ascending index order."""
        picked = self._sorted_indices(rows, self.rows, "Row")
        return Matrix._wrap(self._data[picked, :].reshape(len(picked), self.cols))

    # -------------------------------------------------------------------------
    # Elimination (see elimination.py)
    # -------------------------------------------------------------------------

    def upper_triangular(self, tol: float = PIVOT_TOLERANCE) -> "Matrix":
        from .elimination import upper_triangular
        return upper_triangular(self, tol=tol)

    def upper_triangular_ones(self, tol: float = PIVOT_TOLERANCE) -> "Matrix":
        from .elimination import upper_triangular_ones
        return upper_triangular_ones(self, tol=tol)

    def decompose(self, tol: float = PIVOT_TOLERANCE):
        from .elimination import decompose
        return decompose(self, tol=tol)

    def solve(self, equality: "Matrix", tol: float = PIVOT_TOLERANCE) -> "Matrix":
        from .elimination import solve
        return solve(self, equality, tol=tol)

    def inverse(self, tol: float = PIVOT_TOLERANCE) -> "Matrix":
        from .elimination import inverse
        return inverse(self, tol=tol)

    def determinant(self, tol: float = PIVOT_TOLERANCE) -> float:
        from .elimination import determinant
        return determinant(self, tol=tol)

    def can_solve(self, tol: float = PIVOT_TOLERANCE) -> bool:
        from .elimination import can_solve
        return can_solve(self, tol=tol)

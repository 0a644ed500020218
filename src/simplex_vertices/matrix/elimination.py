"""
Gaussian elimination on dense matrices.

Implements:
- Forward elimination without pivoting (upper_triangular, upper_triangular_ones)
- Doolittle LU decomposition with swap-on-zero partial pivoting (decompose)
- Gauss-Jordan solve for one or more right-hand sides (solve)
- Inverse, determinant and solvability probe built on top of those

Every public routine copies its input before touching it. The individual
elimination steps (pivot search, row swap, normalisation, elimination
below and above the pivot) are exposed as functions acting in place on
private numpy buffers.

Pivoting policy: a row swap happens only when the diagonal entry is zero
(|value| <= tol); the first nonzero entry below it is swapped up. With the
default tol=0.0 this reproduces exact zero-pivot detection.
"""

import numpy as np
from typing import NamedTuple, Optional

from ..config import PIVOT_TOLERANCE
from .dense import Matrix
from .errors import (
    DegenerateMatrixError,
    DimensionMismatchError,
    MatrixError,
    NotSquareError,
    SingularMatrixError,
)


# =============================================================================
# Elimination steps (in place, on private buffers)
# =============================================================================

def find_pivot_row(
    data: np.ndarray,
    col: int,
    start_row: int,
    tol: float = PIVOT_TOLERANCE,
) -> Optional[int]:
    """
    Return the first row >= start_row whose entry in ``col`` is nonzero.

    Parameters
    ----------
    data : np.ndarray
        Working buffer.
    col : int
        Pivot column.
    start_row : int
        First candidate row.
    tol : float
        Entries with |value| <= tol count as zero.

    Returns
    -------
    int or None
        Row index, or None if the column is zero from start_row down.
    """
    for row in range(start_row, data.shape[0]):
        if abs(data[row, col]) > tol:
            return row
    return None


def swap_rows(data: np.ndarray, i: int, j: int) -> None:
    """Exchange rows i and j of ``data``."""
    if i != j:
        data[[i, j], :] = data[[j, i], :]


def normalize_pivot_row(
    data: np.ndarray,
    row: int,
    col: int,
    rhs: Optional[np.ndarray] = None,
) -> None:
    """Divide ``row`` (and the matching rhs row) so the pivot becomes 1."""
    divisor = data[row, col]
    if divisor != 1.0:
        data[row, col:] /= divisor
        if rhs is not None:
            rhs[row, :] /= divisor


def eliminate_below(
    data: np.ndarray,
    row: int,
    col: int,
    rhs: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Clear ``col`` beneath the pivot at (row, col).

    Returns
    -------
    np.ndarray
        The multipliers l_r = data[r, col] / pivot for every row below,
        i.e. the entries of the L factor for this column.
    """
    pivot = data[row, col]
    multipliers = np.zeros(data.shape[0] - row - 1, dtype=np.float64)
    for k, r in enumerate(range(row + 1, data.shape[0])):
        if data[r, col] == 0.0:
            continue
        mult = data[r, col] / pivot
        multipliers[k] = mult
        data[r, col:] -= mult * data[row, col:]
        if rhs is not None:
            rhs[r, :] -= mult * rhs[row, :]
    return multipliers


def eliminate_above(
    data: np.ndarray,
    row: int,
    col: int,
    rhs: Optional[np.ndarray] = None,
) -> None:
    """Clear ``col`` above a pivot that has already been normalised to 1."""
    for r in range(row - 1, -1, -1):
        mult = data[r, col]
        if mult == 0.0:
            continue
        data[r, :] -= mult * data[row, :]
        if rhs is not None:
            rhs[r, :] -= mult * rhs[row, :]


def back_substitute(data: np.ndarray, rhs: np.ndarray) -> None:
    """Reduce a unit upper-triangular system to the identity, updating rhs."""
    for pivot in range(data.shape[0] - 1, 0, -1):
        eliminate_above(data, pivot, pivot, rhs)


# =============================================================================
# Triangulation
# =============================================================================

def _triangulate(matrix: Matrix, normalize: bool, tol: float) -> Matrix:
    data = matrix.to_numpy()
    for pivot in range(min(data.shape)):
        if abs(data[pivot, pivot]) <= tol:
            raise DegenerateMatrixError(
                "Matrix state is degenerate, cannot finish triangulation "
                f"(zero pivot at column {pivot})."
            )
        if normalize:
            normalize_pivot_row(data, pivot, pivot)
        eliminate_below(data, pivot, pivot)
    return Matrix.from_numpy(data)


def upper_triangular(matrix: Matrix, tol: float = PIVOT_TOLERANCE) -> Matrix:
    """
    Forward Gaussian elimination without row swaps.

    Raises
    ------
    DegenerateMatrixError
        If any pivot position is zero when it is reached.
    """
    return _triangulate(matrix, normalize=False, tol=tol)


def upper_triangular_ones(matrix: Matrix, tol: float = PIVOT_TOLERANCE) -> Matrix:
    """
    Forward Gaussian elimination without row swaps, pivots scaled to 1.

    Examples
    --------
    >>> m = Matrix.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 10]])
    >>> m.upper_triangular_ones().tolist()
    [[1.0, 2.0, 3.0], [0.0, 1.0, 2.0], [0.0, 0.0, 1.0]]
    """
    return _triangulate(matrix, normalize=True, tol=tol)


# =============================================================================
# LU decomposition
# =============================================================================

class LUDecomposition(NamedTuple):
    """
    Result of ``decompose``.

    Attributes
    ----------
    lower : Matrix
        Unit lower-triangular factor L (rows x rows).
    upper : Matrix
        Upper-triangular factor U (rows x cols).
    permutation : Matrix
        Row permutation P with P * original == L * U. Identity when no
        swap occurred.
    swaps : int
        Number of row exchanges performed.
    """
    lower: Matrix
    upper: Matrix
    permutation: Matrix
    swaps: int


def decompose(matrix: Matrix, tol: float = PIVOT_TOLERANCE) -> LUDecomposition:
    """
    Doolittle LU decomposition with swap-on-zero partial pivoting.

    When a diagonal entry is zero the first nonzero entry below it is
    swapped up. The swap is applied to U, to the multipliers already stored
    in L, and to the tracked permutation, so ``L * U`` equals the
    row-permuted original ``P * A``; it equals ``A`` itself only when
    ``swaps == 0``.

    Raises
    ------
    DegenerateMatrixError
        If a pivot column has no nonzero entry at or below the diagonal.

    Examples
    --------
    >>> lu = Matrix.from_rows([[1, 4, -3], [-2, 8, 5], [3, 4, 7]]).decompose()
    >>> lu.lower.tolist()
    [[1.0, 0.0, 0.0], [-2.0, 1.0, 0.0], [3.0, -0.5, 1.0]]
    >>> lu.swaps
    0
    """
    upper = matrix.to_numpy()
    n_rows = upper.shape[0]
    lower = np.eye(n_rows, dtype=np.float64)
    order = np.arange(n_rows)
    swaps = 0

    for pivot in range(min(upper.shape)):
        if abs(upper[pivot, pivot]) <= tol:
            swap_row = find_pivot_row(upper, pivot, pivot + 1, tol)
            if swap_row is not None:
                swap_rows(upper, pivot, swap_row)
                # Only the multiplier columns left of the pivot move with the row
                lower[[pivot, swap_row], :pivot] = lower[[swap_row, pivot], :pivot]
                order[[pivot, swap_row]] = order[[swap_row, pivot]]
                swaps += 1

        if abs(upper[pivot, pivot]) <= tol:
            raise DegenerateMatrixError(
                "Matrix state is degenerate, cannot finish decomposition "
                f"(no nonzero pivot in column {pivot})."
            )

        lower[pivot + 1:, pivot] = eliminate_below(upper, pivot, pivot)

    permutation = np.eye(n_rows, dtype=np.float64)[order]
    return LUDecomposition(
        lower=Matrix.from_numpy(lower),
        upper=Matrix.from_numpy(upper),
        permutation=Matrix.from_numpy(permutation),
        swaps=swaps,
    )


# =============================================================================
# Solving
# =============================================================================

def solve(matrix: Matrix, equality: Matrix, tol: float = PIVOT_TOLERANCE) -> Matrix:
    """
    Solve ``matrix * X = equality`` by Gauss-Jordan elimination.

    Each column of ``equality`` is an independent right-hand side.

    Parameters
    ----------
    matrix : Matrix
        Square coefficient matrix.
    equality : Matrix
        Right-hand sides, shape (matrix.rows, k).
    tol : float
        Zero-pivot threshold.

    Returns
    -------
    Matrix
        Solution of shape (matrix.rows, k).

    Raises
    ------
    NotSquareError
        If ``matrix`` is not square.
    DimensionMismatchError
        If ``equality.rows != matrix.rows``.
    DegenerateMatrixError
        If a pivot column has no nonzero entry at or below the pivot row.
    """
    if not matrix.is_square:
        raise NotSquareError(
            f"Solver requires a square coefficient matrix, got {matrix.size}"
        )
    if equality.rows != matrix.rows:
        raise DimensionMismatchError(
            "Solver requires identical number of rows between equals and "
            f"constraints. {matrix.size} vs {equality.size}"
        )

    data = matrix.to_numpy()
    rhs = equality.to_numpy()

    for pivot in range(data.shape[0]):
        if abs(data[pivot, pivot]) <= tol:
            swap_row = find_pivot_row(data, pivot, pivot + 1, tol)
            if swap_row is None:
                raise DegenerateMatrixError(
                    "Matrix state is degenerate, cannot finish solving "
                    f"(no nonzero pivot in column {pivot})."
                )
            swap_rows(data, pivot, swap_row)
            swap_rows(rhs, pivot, swap_row)

        normalize_pivot_row(data, pivot, pivot, rhs)
        eliminate_below(data, pivot, pivot, rhs)

    back_substitute(data, rhs)
    return Matrix.from_numpy(rhs)


def inverse(matrix: Matrix, tol: float = PIVOT_TOLERANCE) -> Matrix:
    """
    Invert a square matrix by solving against the identity.

    Raises
    ------
    NotSquareError
        If the matrix is not square.
    SingularMatrixError
        If elimination hits an unresolvable zero pivot.
    """
    if not matrix.is_square:
        raise NotSquareError(f"Unable to invert a non-square matrix {matrix.size}.")
    try:
        return solve(matrix, Matrix.identity(matrix.rows), tol=tol)
    except DegenerateMatrixError as exc:
        raise SingularMatrixError("Unable to invert a singular matrix.") from exc


def determinant(matrix: Matrix, tol: float = PIVOT_TOLERANCE) -> float:
    """
    Determinant from the LU factors: (-1)^swaps * prod(diag U).

    A matrix that fails to decompose is reported as 0.0 rather than raising.

    Raises
    ------
    NotSquareError
        If the matrix is not square.
    """
    if not matrix.is_square:
        raise NotSquareError("Non-square matrices do not have determinants.")
    try:
        lu = decompose(matrix, tol=tol)
    except DegenerateMatrixError:
        return 0.0

    det = float(np.prod(np.diag(lu.upper.to_numpy())))
    det *= float(np.prod(np.diag(lu.lower.to_numpy())))
    if lu.swaps % 2:
        det = -det
    return det


def can_solve(matrix: Matrix, tol: float = PIVOT_TOLERANCE) -> bool:
    """Return True if ``solve`` succeeds against a zero right-hand side."""
    try:
        solve(matrix, Matrix(matrix.rows, 1), tol=tol)
    except MatrixError:
        return False
    return True

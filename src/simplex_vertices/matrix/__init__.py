"""
Dense matrix engine.

Implements:
- Matrix value type with named algebraic operations
- Forward elimination, LU decomposition, Gauss-Jordan solve
- Inverse, determinant and solvability probe
- Error kinds shared with the partition and dictionary layers

Main entry points:
- `Matrix(rows, cols)`, `Matrix.from_rows(...)`, `parse_matrix("1 2; 3 4")`
- `Matrix.solve(rhs)`, `Matrix.inverse()`, `Matrix.decompose()`
"""

from .errors import (
    MatrixError,
    DimensionMismatchError,
    OutOfRangeError,
    DegenerateMatrixError,
    SingularMatrixError,
    NotSquareError,
    MalformedLiteralError,
    InvalidPartitionError,
    InvalidPartitionSizeError,
    InvalidPartitionCoverageError,
)

from .dense import Matrix

from .elimination import (
    LUDecomposition,
    upper_triangular,
    upper_triangular_ones,
    decompose,
    solve,
    inverse,
    determinant,
    can_solve,
)

from .literal import parse_matrix, format_matrix

__all__ = [
    # Errors
    "MatrixError",
    "DimensionMismatchError",
    "OutOfRangeError",
    "DegenerateMatrixError",
    "SingularMatrixError",
    "NotSquareError",
    "MalformedLiteralError",
    "InvalidPartitionError",
    "InvalidPartitionSizeError",
    "InvalidPartitionCoverageError",
    # Value type
    "Matrix",
    # Elimination
    "LUDecomposition",
    "upper_triangular",
    "upper_triangular_ones",
    "decompose",
    "solve",
    "inverse",
    "determinant",
    "can_solve",
    # Literals
    "parse_matrix",
    "format_matrix",
]

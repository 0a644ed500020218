"""
Error kinds raised by the matrix engine and the partition layer.

Each exception carries an ``error_kind`` string so batch code can record
the failure on a result record instead of propagating it.
"""


class MatrixError(ValueError):
    """Base class for all matrix engine failures."""
    error_kind = "MatrixError"


class DimensionMismatchError(MatrixError):
    """Operands have incompatible shapes for the requested operation."""
    error_kind = "DimensionMismatch"


class OutOfRangeError(MatrixError, IndexError):
    """Row or column index outside the declared size."""
    error_kind = "OutOfRange"


class DegenerateMatrixError(MatrixError):
    """A zero pivot could not be resolved by a row swap."""
    error_kind = "Degenerate"


class SingularMatrixError(MatrixError):
    """Inverse requested on a matrix that cannot be reduced."""
    error_kind = "Singular"


class NotSquareError(MatrixError):
    """Operation is only defined for square matrices."""
    error_kind = "NotSquare"


class MalformedLiteralError(MatrixError):
    """Textual matrix literal is ragged, empty or non-numeric."""
    error_kind = "MalformedLiteral"


class InvalidPartitionError(MatrixError):
    """Base class for malformed Basic/NonBasic partitions."""
    error_kind = "InvalidPartition"


class InvalidPartitionSizeError(InvalidPartitionError):
    """Basic or NonBasic set has the wrong cardinality."""
    error_kind = "InvalidPartitionSize"


class InvalidPartitionCoverageError(InvalidPartitionError):
    """Basic and NonBasic do not form a disjoint cover of {0..n+m-1}."""
    error_kind = "InvalidPartitionCoverage"

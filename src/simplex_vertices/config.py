"""
Global configuration and numerical constants for vertex enumeration.

The enumerator builds one simplex dictionary per Basic/NonBasic partition
of the augmented variable set {0, ..., n+m-1} (n structural variables plus
m slack variables), so problem size is governed by C(n+m, m).
"""

from math import comb
from pathlib import Path


# =============================================================================
# Elimination
# =============================================================================

PIVOT_TOLERANCE = 0.0
"""A pivot with |value| <= PIVOT_TOLERANCE is treated as zero (exact by default)."""

EQUALITY_TOLERANCE = 1e-9
"""Default absolute tolerance for Matrix.allclose."""


# =============================================================================
# Dictionary classification
# =============================================================================

CLASSIFICATION_TOLERANCE = 0.0
"""
Slack allowed when testing basic values >= 0 and reduced costs <= 0.

Zero reproduces the exact sign tests; loosen it for ill-conditioned inputs.
"""

OBJECTIVE_SENSES = ("max", "min")
"""Supported objective senses. Dictionaries are always built in max form."""


# =============================================================================
# Verification
# =============================================================================

MPMATH_PRECISION = 50
"""Number of decimal digits used when re-verifying a dictionary with mpmath."""

PRECISION_RESIDUAL_TOLERANCE = 1e-9
"""Largest float64 vs mpmath discrepancy accepted by verify_dictionary."""

CROSSCHECK_TOLERANCE = 1e-6
"""Tolerance when comparing the enumerated optimum with scipy's linprog."""


# =============================================================================
# Enumeration
# =============================================================================

MAX_PARTITIONS_WARNING = 200_000
"""Partition count above which a verbose enumeration prints a warning."""

DEFAULT_WORKERS = 1
"""Default number of worker processes for enumeration."""

DEFAULT_CHUNKSIZE = 64
"""Partitions handed to a worker process per task."""

POINT_DECIMALS = 9
"""Decimals kept when deduplicating vertex points reached from several bases."""


# =============================================================================
# File Paths
# =============================================================================

_THIS_DIR = Path(__file__).parent
PROJECT_ROOT = _THIS_DIR.parent.parent

DATA_DIR = PROJECT_ROOT / "data"
"""Directory for enumeration output files (created on first write)."""


# =============================================================================
# Utility Functions
# =============================================================================

def get_partition_count(num_vars: int, num_constraints: int) -> int:
    """
    Compute the number of Basic/NonBasic partitions, C(n+m, m).

    For the 3-variable, 3-constraint cube this should return 20.
    """
    if num_vars < 0 or num_constraints < 0:
        raise ValueError(
            f"Sizes must be non-negative, got n={num_vars}, m={num_constraints}"
        )
    return comb(num_vars + num_constraints, num_constraints)


# Verify expected count
assert get_partition_count(3, 3) == 20, "Partition count should be 20 for n=m=3"

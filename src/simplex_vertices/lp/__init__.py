"""
Linear programming layer: problem records and simplex dictionaries.

Implements:
- LPProblem (A x <= b, x >= 0, objective c, max/min sense)
- Dictionary evaluation and classification per Basic/NonBasic partition
- mpmath re-verification of a dictionary's classification
- scipy linprog cross-check of the enumerated optimum

Main entry points:
- `build_dictionary(A, b, c, basic, non_basic)`: Evaluate one partition
- `Dictionary.from_problem(problem, partition)`: Same, from an LPProblem
- `verify_dictionary(problem, dictionary)`: Extended-precision check
- `crosscheck_optimum(problem, optimal_value)`: Compare against linprog
"""

from .problem import LPProblem

from .dictionary import (
    Dictionary,
    build_dictionary,
    vertex_point,
    STATUS_INVALID,
    STATUS_NOT_BASIC,
    STATUS_INFEASIBLE,
    STATUS_SUBOPTIMAL,
    STATUS_UNBOUNDED,
    STATUS_OPTIMAL,
    STATUSES,
)

from .precision import PrecisionCheck, verify_dictionary

from .crosscheck import CrosscheckResult, solve_with_linprog, crosscheck_optimum

__all__ = [
    # Problem
    "LPProblem",
    # Dictionary
    "Dictionary",
    "build_dictionary",
    "vertex_point",
    "STATUS_INVALID",
    "STATUS_NOT_BASIC",
    "STATUS_INFEASIBLE",
    "STATUS_SUBOPTIMAL",
    "STATUS_UNBOUNDED",
    "STATUS_OPTIMAL",
    "STATUSES",
    # Verification
    "PrecisionCheck",
    "verify_dictionary",
    "CrosscheckResult",
    "solve_with_linprog",
    "crosscheck_optimum",
]

"""
Linear program in inequality form: A x <= b, x >= 0, objective c.

Dictionaries are always built for maximisation of zeta = c^T x. A
minimisation problem is stored as given and its objective is negated by
``max_objective``; ``objective_value`` maps a max-form zeta back to the
problem's own sense.
"""

import numpy as np
from dataclasses import dataclass

from ..config import OBJECTIVE_SENSES
from ..matrix import DimensionMismatchError, Matrix, parse_matrix


@dataclass(frozen=True)
class LPProblem:
    """
    Problem data for vertex enumeration.

    Attributes
    ----------
    A : Matrix
        Constraint coefficients, shape (m, n).
    b : Matrix
        Constraint bounds, shape (m, 1).
    c : Matrix
        Objective coefficients, shape (n, 1).
    sense : str
        "max" or "min".
    """
    A: Matrix
    b: Matrix
    c: Matrix
    sense: str = "max"

    def __post_init__(self):
        if self.sense not in OBJECTIVE_SENSES:
            raise ValueError(
                f"sense must be one of {OBJECTIVE_SENSES}, got {self.sense!r}"
            )
        m, n = self.A.size
        if self.b.size != (m, 1):
            raise DimensionMismatchError(
                f"b must be a ({m}, 1) column for A of size {self.A.size}, "
                f"got {self.b.size}"
            )
        if self.c.size != (n, 1):
            raise DimensionMismatchError(
                f"c must be a ({n}, 1) column for A of size {self.A.size}, "
                f"got {self.c.size}"
            )
        # Own private copies so later edits to the caller's matrices do not leak in
        object.__setattr__(self, "A", self.A.copy())
        object.__setattr__(self, "b", self.b.copy())
        object.__setattr__(self, "c", self.c.copy())

    @classmethod
    def from_strings(cls, A: str, b: str, c: str, sense: str = "max") -> "LPProblem":
        """Build a problem from matrix literals, e.g. ``A="1 0; 0 1"``."""
        return cls(parse_matrix(A), parse_matrix(b), parse_matrix(c), sense=sense)

    @classmethod
    def from_arrays(cls, A, b, c, sense: str = "max") -> "LPProblem":
        """Build a problem from array-likes; b and c may be flat."""
        A_arr = np.atleast_2d(np.asarray(A, dtype=np.float64))
        return cls(
            Matrix.from_numpy(A_arr),
            Matrix.column(np.ravel(b)),
            Matrix.column(np.ravel(c)),
            sense=sense,
        )

    @property
    def num_constraints(self) -> int:
        return self.A.rows

    @property
    def num_vars(self) -> int:
        return self.A.cols

    @property
    def max_objective(self) -> Matrix:
        """Objective in maximisation form."""
        return self.c.copy() if self.sense == "max" else self.c.scale(-1.0)

    def objective_value(self, zeta: float) -> float:
        """Translate a max-form dictionary zeta into this problem's sense."""
        return zeta if self.sense == "max" else -zeta

"""
Extended-precision re-verification of a float64 dictionary.

Zero-pivot and sign tests in float64 can be fooled by rounding: a basic
value of -1e-17 marks an otherwise valid vertex infeasible, and a
near-singular basis can slip through inversion. ``verify_dictionary``
recomputes the basic values and reduced costs with mpmath at ``dps``
decimal digits and reports whether the float64 classification survives.
"""

from dataclasses import dataclass
from typing import List, Optional

from mpmath import mp, mpf

from ..config import (
    CLASSIFICATION_TOLERANCE,
    MPMATH_PRECISION,
    PRECISION_RESIDUAL_TOLERANCE,
)
from ..matrix import Matrix
from .dictionary import Dictionary
from .problem import LPProblem


@dataclass
class PrecisionCheck:
    """
    Result of an mpmath re-verification.

    Attributes
    ----------
    checked : bool
        False when the dictionary had no basis to verify.
    basis_ok : bool
        True if the basis could be factored at extended precision.
    feasible : Optional[bool]
        Feasibility recomputed at extended precision.
    optimal : Optional[bool]
        Optimality recomputed at extended precision (None if infeasible).
    max_value_residual : float
        max |x_B(float64) - x_B(mpmath)|.
    max_cost_residual : float
        max |reduced cost(float64) - reduced cost(mpmath)|.
    agrees : bool
        True if the float64 flags match and both residuals are within
        tolerance.
    message : str
        Human-readable summary.
    """
    checked: bool
    basis_ok: bool = False
    feasible: Optional[bool] = None
    optimal: Optional[bool] = None
    max_value_residual: float = 0.0
    max_cost_residual: float = 0.0
    agrees: bool = False
    message: str = ""


def _to_mp(matrix: Matrix) -> "mp.matrix":
    return mp.matrix([[mpf(v) for v in row] for row in matrix.tolist()])


def _augmented_columns(problem: LPProblem) -> List[List[mpf]]:
    """Columns of [A | I] as lists of mpf."""
    m, n = problem.A.size
    rows = problem.A.tolist()
    columns = [[mpf(rows[i][j]) for i in range(m)] for j in range(n)]
    for k in range(m):
        columns.append([mpf(1) if i == k else mpf(0) for i in range(m)])
    return columns


def verify_dictionary(
    problem: LPProblem,
    dictionary: Dictionary,
    dps: int = MPMATH_PRECISION,
    tol: float = CLASSIFICATION_TOLERANCE,
    residual_tol: float = PRECISION_RESIDUAL_TOLERANCE,
) -> PrecisionCheck:
    """
    Recompute a dictionary's basic values and reduced costs with mpmath.

    Parameters
    ----------
    problem : LPProblem
        The problem the dictionary was built from.
    dictionary : Dictionary
        Float64 dictionary to verify.
    dps : int
        mpmath decimal places.
    tol : float
        Sign tolerance, as used when the dictionary was built.
    residual_tol : float
        Largest acceptable float64 vs mpmath discrepancy.

    Returns
    -------
    PrecisionCheck
    """
    if not dictionary.is_basic:
        return PrecisionCheck(checked=False, message="Dictionary has no basis to verify.")
    if problem.num_constraints == 0:
        return PrecisionCheck(
            checked=False, message="Problem has no constraints; nothing to factor."
        )

    saved_dps = mp.dps
    mp.dps = dps

    try:
        m = problem.num_constraints
        columns = _augmented_columns(problem)
        objective = [mpf(v) for v in problem.max_objective.to_numpy().ravel()]
        costs = objective + [mpf(0)] * m

        basis = mp.matrix(m, m)
        for k, j in enumerate(dictionary.basic):
            for i in range(m):
                basis[i, k] = columns[j][i]
        rhs = _to_mp(problem.b)

        try:
            x_basic = mp.lu_solve(basis, rhs)
            c_basic = mp.matrix([costs[j] for j in dictionary.basic])
            multipliers = mp.lu_solve(basis.T, c_basic)
        except ZeroDivisionError:
            return PrecisionCheck(
                checked=True, basis_ok=False, agrees=False,
                message="Basis is singular at extended precision.",
            )

        value_residual = mpf(0)
        for i in range(m):
            diff = abs(x_basic[i] - mpf(dictionary.basic_var_values[i, 0]))
            if diff > value_residual:
                value_residual = diff

        cost_residual = mpf(0)
        reduced = []
        for k, j in enumerate(dictionary.non_basic):
            rc = costs[j] - sum(multipliers[i] * columns[j][i] for i in range(m))
            reduced.append(rc)
            diff = abs(rc - mpf(dictionary.zeta_non_basic_vars[0, k]))
            if diff > cost_residual:
                cost_residual = diff

        feasible = all(x_basic[i] >= -tol for i in range(m))
        optimal = all(rc <= tol for rc in reduced) if feasible else None

        agrees = feasible == dictionary.is_feasible
        if feasible and dictionary.is_feasible:
            agrees = agrees and optimal == dictionary.is_optimal
        within = value_residual <= residual_tol and cost_residual <= residual_tol
        agrees = agrees and within

        if agrees:
            message = f"Classification confirmed at dps={dps}."
        elif not within:
            message = (
                f"Residuals too large at dps={dps}: values {float(value_residual):.3e}, "
                f"costs {float(cost_residual):.3e}."
            )
        else:
            message = (
                f"Classification differs at dps={dps}: feasible={feasible}, "
                f"optimal={optimal}."
            )

        return PrecisionCheck(
            checked=True,
            basis_ok=True,
            feasible=feasible,
            optimal=optimal,
            max_value_residual=float(value_residual),
            max_cost_residual=float(cost_residual),
            agrees=agrees,
            message=message,
        )

    finally:
        mp.dps = saved_dps

"""
Cross-check of the enumerated optimum against scipy.optimize.linprog.

Solves the same problem

    maximise (or minimise) c^T x   subject to   A x <= b,  x >= 0

with the HiGHS backend and compares objective values. Vertices are not
compared directly because an optimum may be attained at several vertices.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional
from scipy.optimize import linprog

from ..config import CROSSCHECK_TOLERANCE
from .problem import LPProblem


@dataclass
class CrosscheckResult:
    """
    Outcome of a linprog cross-check.

    Attributes
    ----------
    status : str
        "optimal", "infeasible", "unbounded" or "failed".
    lp_status : int
        Raw status code from scipy.optimize.linprog:
        0 = optimal, 1 = iteration limit, 2 = infeasible,
        3 = unbounded, 4 = numerical difficulties.
    objective : Optional[float]
        Optimal objective in the problem's own sense.
    x : Optional[np.ndarray]
        An optimal point found by linprog.
    matches : Optional[bool]
        Whether the enumerated result agrees (None if nothing to compare).
    message : str
        Solver or comparison message.
    """
    status: str
    lp_status: int
    objective: Optional[float] = None
    x: Optional[np.ndarray] = None
    matches: Optional[bool] = None
    message: str = ""


_STATUS_NAMES = {0: "optimal", 2: "infeasible", 3: "unbounded"}


def solve_with_linprog(problem: LPProblem, method: str = "highs") -> CrosscheckResult:
    """
    Solve the problem directly with linprog.

    Parameters
    ----------
    problem : LPProblem
        Problem in inequality form.
    method : str
        LP solver method (default "highs").

    Returns
    -------
    CrosscheckResult
        With ``matches`` left as None.
    """
    n = problem.num_vars
    # linprog minimises, so negate the max-form objective
    c = -problem.max_objective.to_numpy().ravel()
    A_ub = problem.A.to_numpy() if problem.num_constraints else None
    b_ub = problem.b.to_numpy().ravel() if problem.num_constraints else None
    bounds = [(0, None)] * n
    # Presolve may report "infeasible or unbounded" without saying which
    options = {"presolve": False}

    res = linprog(
        c, A_ub=A_ub, b_ub=b_ub,
        bounds=bounds, method=method, options=options,
    )

    status = _STATUS_NAMES.get(res.status, "failed")
    if res.status == 0:
        return CrosscheckResult(
            status=status,
            lp_status=0,
            objective=problem.objective_value(-float(res.fun)),
            x=np.asarray(res.x, dtype=np.float64),
            message=res.message,
        )
    return CrosscheckResult(status=status, lp_status=res.status, message=res.message)


def crosscheck_optimum(
    problem: LPProblem,
    optimal_value: Optional[float],
    any_unbounded: bool = False,
    tol: float = CROSSCHECK_TOLERANCE,
    method: str = "highs",
) -> CrosscheckResult:
    """
    Compare an enumerated optimum with linprog's answer.

    Parameters
    ----------
    problem : LPProblem
        The enumerated problem.
    optimal_value : float or None
        Objective at the enumerated optimal vertex (problem's sense), or
        None if enumeration found no optimal dictionary.
    any_unbounded : bool
        True if enumeration flagged some feasible dictionary as unbounded.
    tol : float
        Relative/absolute tolerance on the objective.

    Returns
    -------
    CrosscheckResult
        With ``matches`` filled in.
    """
    result = solve_with_linprog(problem, method=method)

    if result.status == "optimal":
        if optimal_value is None:
            result.matches = False
            result.message = (
                f"linprog found optimum {result.objective:.6g} but enumeration "
                "found no optimal vertex"
            )
        else:
            scale = max(1.0, abs(result.objective))
            result.matches = abs(result.objective - optimal_value) <= tol * scale
            result.message = (
                f"linprog objective {result.objective:.6g} vs "
                f"enumerated {optimal_value:.6g}"
            )
    elif result.status == "unbounded":
        result.matches = optimal_value is None and any_unbounded
    elif result.status == "infeasible":
        result.matches = optimal_value is None and not any_unbounded

    return result

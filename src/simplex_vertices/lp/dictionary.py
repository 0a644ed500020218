"""
Simplex dictionary for one Basic/NonBasic partition.

Given A (m x n), b (m x 1), c (n x 1) and a partition of the augmented
indices {0..n+m-1}, the dictionary re-expresses the system

    A_bar = [A | I_m],   c_bar = [c ; 0_m],   A_bar x = b

in terms of the non-basic variables:

    x_B  = inv(B) b  +  inv(B) (-A_bar_N) x_N
    zeta = c_B^T inv(B) b  +  (c_N^T - c_B^T inv(B) A_bar_N) x_N

where B = A_bar[:, Basic]. Evaluation walks a small state machine:

    created -> invalid | valid
            -> not basic | basic
            -> infeasible | feasible
            -> optimal | suboptimal (bounded) | unbounded

Each stage is terminal on failure; later flags keep their default False.
Partition and basis failures are recorded on the dictionary (``message``,
``error_kind``) rather than raised, so a batch over all partitions always
completes.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..config import CLASSIFICATION_TOLERANCE, PIVOT_TOLERANCE
from ..matrix import (
    DegenerateMatrixError,
    DimensionMismatchError,
    InvalidPartitionError,
    Matrix,
    SingularMatrixError,
)
from ..partitions import Partition, check_partition
from .problem import LPProblem


# Terminal states
STATUS_INVALID = "invalid"
STATUS_NOT_BASIC = "not_basic"
STATUS_INFEASIBLE = "infeasible"
STATUS_SUBOPTIMAL = "suboptimal"
STATUS_UNBOUNDED = "unbounded"
STATUS_OPTIMAL = "optimal"

STATUSES = (
    STATUS_INVALID,
    STATUS_NOT_BASIC,
    STATUS_INFEASIBLE,
    STATUS_SUBOPTIMAL,
    STATUS_UNBOUNDED,
    STATUS_OPTIMAL,
)


@dataclass(frozen=True)
class Dictionary:
    """
    Read-only simplex dictionary for one partition.

    Attributes
    ----------
    basic, non_basic : tuple of int
        The partition as evaluated (ascending when valid).
    num_vars : int
        Number of structural variables n (length of ``point``).
    zeta : float or None
        Objective value c_bar_B^T inv(B) b (max form); None if not basic.
    basic_var_values : Matrix or None
        inv(B) b, shape (m, 1).
    zeta_non_basic_vars : Matrix or None
        Reduced costs, shape (1, n).
    non_basic_var_coeff : Matrix or None
        inv(B) (-A_bar_N), shape (m, n).
    is_valid, is_basic, is_feasible, is_optimal, is_unbounded : bool
        Classification flags.
    status : str
        Terminal state, one of STATUSES.
    message : str
        Human-readable explanation of the terminal state.
    error_kind : str or None
        Error kind that stopped evaluation (e.g. "Singular").
    unbounded_variable : int or None
        First entering variable index that admits an unbounded ray.
    point : tuple of float
        Vertex coordinates in the original n-dimensional space.
    """
    basic: Tuple[int, ...]
    non_basic: Tuple[int, ...]
    num_vars: int
    zeta: Optional[float] = None
    basic_var_values: Optional[Matrix] = None
    zeta_non_basic_vars: Optional[Matrix] = None
    non_basic_var_coeff: Optional[Matrix] = None
    is_valid: bool = False
    is_basic: bool = False
    is_feasible: bool = False
    is_optimal: bool = False
    is_unbounded: bool = False
    status: str = STATUS_INVALID
    message: str = ""
    error_kind: Optional[str] = None
    unbounded_variable: Optional[int] = None
    point: Tuple[float, ...] = ()

    @property
    def is_vertex(self) -> bool:
        """A feasible basis corresponds to a vertex of the polyhedron."""
        return self.is_feasible

    @classmethod
    def from_problem(
        cls,
        problem: LPProblem,
        partition: Partition,
        tol: float = CLASSIFICATION_TOLERANCE,
        pivot_tol: float = PIVOT_TOLERANCE,
    ) -> "Dictionary":
        """Build the dictionary of ``partition`` for an LPProblem (max form)."""
        return build_dictionary(
            problem.A, problem.b, problem.max_objective,
            partition.basic, partition.non_basic,
            tol=tol, pivot_tol=pivot_tol,
        )


def _check_problem_shapes(A: Matrix, b: Matrix, c: Matrix) -> None:
    m, n = A.size
    if b.size != (m, 1):
        raise DimensionMismatchError(
            f"b must be ({m}, 1) for A of size {A.size}, got {b.size}"
        )
    if c.size != (n, 1):
        raise DimensionMismatchError(
            f"c must be ({n}, 1) for A of size {A.size}, got {c.size}"
        )


def vertex_point(
    basic: Iterable[int],
    basic_var_values: Matrix,
    num_vars: int,
) -> Tuple[float, ...]:
    """
    Map basic variable values back to original coordinates.

    Basic value i belongs to the i-th smallest basic index; slack indices
    (>= num_vars) are dropped and non-basic coordinates are zero.
    """
    coords = [0.0] * num_vars
    for row, index in enumerate(sorted(basic)):
        if index < num_vars:
            coords[index] = basic_var_values[row, 0]
    return tuple(coords)


def build_dictionary(
    A: Matrix,
    b: Matrix,
    c: Matrix,
    basic: Iterable[int],
    non_basic: Iterable[int],
    tol: float = CLASSIFICATION_TOLERANCE,
    pivot_tol: float = PIVOT_TOLERANCE,
) -> Dictionary:
    """
    Evaluate the simplex dictionary of one partition.

    Parameters
    ----------
    A : Matrix
        Constraint coefficients, shape (m, n).
    b : Matrix
        Constraint bounds, shape (m, 1).
    c : Matrix
        Objective to maximise, shape (n, 1).
    basic, non_basic : iterable of int
        Partition of {0..n+m-1}.
    tol : float
        Sign tolerance for feasibility / optimality / unboundedness tests.
    pivot_tol : float
        Zero-pivot threshold used when inverting the basis.

    Returns
    -------
    Dictionary
        Always returned; failed stages are reported through its flags.

    Raises
    ------
    DimensionMismatchError
        If b or c do not match A. This is a caller error, not a property
        of the partition.
    """
    _check_problem_shapes(A, b, c)
    m, n = A.size
    basic = tuple(basic)
    non_basic = tuple(non_basic)

    # Partition checks
    try:
        check_partition(basic, non_basic, n, m)
    except InvalidPartitionError as exc:
        return Dictionary(
            basic=basic, non_basic=non_basic, num_vars=n,
            status=STATUS_INVALID, message=str(exc), error_kind=exc.error_kind,
        )

    basic = tuple(sorted(basic))
    non_basic = tuple(sorted(non_basic))

    # Augment with slack variables
    a_bar = A.compose_horizontal(Matrix.identity(m))
    c_bar = c.compose_vertical(Matrix(m, 1))

    # A failed inversion means the partition is not a basis
    try:
        inv_b = a_bar.select_columns(basic).inverse(tol=pivot_tol)
    except (SingularMatrixError, DegenerateMatrixError) as exc:
        return Dictionary(
            basic=basic, non_basic=non_basic, num_vars=n, is_valid=True,
            status=STATUS_NOT_BASIC,
            message="Partition is not basic, A cannot be inverted.",
            error_kind=exc.error_kind,
        )

    c_basic_t = c_bar.select_rows(basic).transpose()
    c_non_basic_t = c_bar.select_rows(non_basic).transpose()
    a_non_basic = a_bar.select_columns(non_basic)

    basic_values = inv_b.multiply(b)
    zeta = c_basic_t.multiply(basic_values)[0, 0]
    reduced_costs = c_non_basic_t.subtract(
        c_basic_t.multiply(inv_b).multiply(a_non_basic)
    )
    coeff = inv_b.multiply(a_bar.scale(-1.0).select_columns(non_basic))
    point = vertex_point(basic, basic_values, n)

    computed = dict(
        basic=basic, non_basic=non_basic, num_vars=n,
        zeta=zeta,
        basic_var_values=basic_values,
        zeta_non_basic_vars=reduced_costs,
        non_basic_var_coeff=coeff,
        is_valid=True, is_basic=True,
        point=point,
    )

    # Feasibility: every basic variable >= 0
    for row in range(basic_values.rows):
        if basic_values[row, 0] < -tol:
            return Dictionary(
                **computed,
                status=STATUS_INFEASIBLE,
                message=(
                    "Partition is not feasible, negative basic variable value "
                    f"(x{basic[row]} = {basic_values[row, 0]:.6g})."
                ),
            )

    # Optimality: no reduced cost strictly positive
    improving = [j for j in range(reduced_costs.cols) if reduced_costs[0, j] > tol]
    if not improving:
        return Dictionary(
            **computed,
            is_feasible=True, is_optimal=True,
            status=STATUS_OPTIMAL,
            message="Partition is optimal.",
        )

    # Unboundedness: an improving column along which no basic variable decreases
    for j in improving:
        if all(coeff[row, j] >= -tol for row in range(coeff.rows)):
            return Dictionary(
                **computed,
                is_feasible=True, is_unbounded=True,
                status=STATUS_UNBOUNDED,
                message=(
                    f"Partition is unbounded, increasing x{non_basic[j]} "
                    "never leaves the feasible region."
                ),
                unbounded_variable=non_basic[j],
            )

    return Dictionary(
        **computed,
        is_feasible=True,
        status=STATUS_SUBOPTIMAL,
        message=f"Partition is feasible but not optimal ({len(improving)} improving direction(s)).",
    )

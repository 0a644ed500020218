"""
Tests for simplex dictionary evaluation and classification.

Reference problems:
- Cube: x, y, z <= 3, maximise x + y + z. Optimal vertex (3, 3, 3).
- Wedge: x - y <= 1, maximise x + y. Unbounded along y.
- Empty: x <= -1 with x >= 0. No feasible basis.
"""

import pytest
import numpy as np

from simplex_vertices.matrix import DimensionMismatchError, Matrix
from simplex_vertices.partitions import generate_partitions, make_partition
from simplex_vertices.lp import (
    LPProblem,
    Dictionary,
    build_dictionary,
    vertex_point,
    STATUS_INVALID,
    STATUS_NOT_BASIC,
    STATUS_INFEASIBLE,
    STATUS_SUBOPTIMAL,
    STATUS_UNBOUNDED,
    STATUS_OPTIMAL,
)


@pytest.fixture
def cube():
    return LPProblem.from_strings("1 0 0; 0 1 0; 0 0 1", "3; 3; 3", "1; 1; 1")


@pytest.fixture
def wedge():
    return LPProblem.from_strings("1 -1", "1", "1; 1")


def _build(problem, basic):
    part = make_partition(basic, problem.num_vars, problem.num_constraints)
    return Dictionary.from_problem(problem, part)


# ============================================================================
# State machine
# ============================================================================

class TestClassification:
    """One test per terminal state."""

    def test_optimal(self, cube):
        d = _build(cube, [0, 1, 2])
        assert d.status == STATUS_OPTIMAL
        assert d.is_valid and d.is_basic and d.is_feasible and d.is_optimal
        assert not d.is_unbounded
        assert d.point == (3.0, 3.0, 3.0)
        assert d.zeta == 9.0
        assert d.message == "Partition is optimal."
        assert d.is_vertex

    def test_suboptimal_bounded(self, cube):
        """The origin is feasible but every x_i improves the objective."""
        d = _build(cube, [3, 4, 5])
        assert d.status == STATUS_SUBOPTIMAL
        assert d.is_feasible
        assert not d.is_optimal
        assert not d.is_unbounded
        assert d.point == (0.0, 0.0, 0.0)
        assert d.zeta == 0.0
        assert d.zeta_non_basic_vars.tolist() == [[1.0, 1.0, 1.0]]
        assert d.non_basic_var_coeff.equals(Matrix.identity(3).scale(-1))

    def test_not_basic(self, cube):
        """Columns e0, e1, e0 of [A | I] are singular."""
        d = _build(cube, [0, 1, 3])
        assert d.status == STATUS_NOT_BASIC
        assert d.is_valid
        assert not d.is_basic
        assert not d.is_feasible
        assert d.message == "Partition is not basic, A cannot be inverted."
        assert d.error_kind == "Singular"
        assert d.zeta is None
        assert d.point == ()

    def test_invalid_size(self, cube):
        d = build_dictionary(cube.A, cube.b, cube.c, (0, 1), (2, 3, 4, 5))
        assert d.status == STATUS_INVALID
        assert not d.is_valid
        assert not d.is_basic
        assert d.error_kind == "InvalidPartitionSize"
        assert d.message == "Error. B partition expected 3 elements but got 2"

    def test_invalid_coverage(self, cube):
        d = build_dictionary(cube.A, cube.b, cube.c, (0, 0, 1), (2, 3, 4))
        assert d.status == STATUS_INVALID
        assert d.error_kind == "InvalidPartitionCoverage"

    def test_infeasible(self, wedge):
        d = _build(wedge, [1])
        assert d.status == STATUS_INFEASIBLE
        assert d.is_basic
        assert not d.is_feasible
        assert not d.is_optimal
        assert "x1" in d.message
        assert d.basic_var_values.tolist() == [[-1.0]]

    def test_unbounded_from_slack_basis(self, wedge):
        d = _build(wedge, [2])
        assert d.status == STATUS_UNBOUNDED
        assert d.is_feasible
        assert d.is_unbounded
        assert not d.is_optimal
        assert d.unbounded_variable == 1

    def test_unbounded_from_vertex(self, wedge):
        """At (1, 0) increasing y keeps x - y <= 1 satisfied forever."""
        d = _build(wedge, [0])
        assert d.status == STATUS_UNBOUNDED
        assert d.point == (1.0, 0.0)
        assert d.zeta_non_basic_vars.tolist() == [[2.0, -1.0]]
        assert d.unbounded_variable == 1

    def test_no_feasible_basis(self):
        p = LPProblem.from_strings("1", "-1", "1")
        ds = [Dictionary.from_problem(p, part) for part in generate_partitions(1, 1)]
        assert all(d.is_basic for d in ds)
        assert not any(d.is_feasible for d in ds)


# ============================================================================
# Derived quantities
# ============================================================================

class TestDerivedQuantities:
    """Shapes and consistency of the stored matrices."""

    def test_shapes(self, cube):
        d = _build(cube, [0, 4, 5])
        assert d.basic_var_values.size == (3, 1)
        assert d.zeta_non_basic_vars.size == (1, 3)
        assert d.non_basic_var_coeff.size == (3, 3)

    def test_unsorted_input_is_sorted(self, cube):
        d = build_dictionary(cube.A, cube.b, cube.c, (2, 0, 1), (5, 3, 4))
        assert d.basic == (0, 1, 2)
        assert d.non_basic == (3, 4, 5)
        assert d.is_optimal

    def test_min_sense_cube(self):
        """Minimising -x-y-z is the same dictionary as maximising x+y+z."""
        p = LPProblem.from_strings("1 0 0; 0 1 0; 0 0 1", "3; 3; 3", "-1; -1; -1", sense="min")
        d = _build(p, [0, 1, 2])
        assert d.is_optimal
        assert d.point == (3.0, 3.0, 3.0)
        assert p.objective_value(d.zeta) == -9.0

    def test_vertex_point_drops_slacks(self):
        values = Matrix.column([7.0, 8.0])
        assert vertex_point((1, 3), values, 2) == (0.0, 7.0)
        assert vertex_point((3, 0), values, 2) == (7.0, 0.0)

    def test_dimension_mismatch_raises(self, cube):
        with pytest.raises(DimensionMismatchError):
            build_dictionary(cube.A, Matrix.column([1, 2]), cube.c, (0, 1, 2), (3, 4, 5))

    def test_inputs_untouched(self, cube):
        A, b, c = cube.A.copy(), cube.b.copy(), cube.c.copy()
        for part in generate_partitions(3, 3):
            build_dictionary(A, b, c, part.basic, part.non_basic)
        assert A.equals(cube.A) and b.equals(cube.b) and c.equals(cube.c)


class TestFlagConsistency:
    """Flags are reproducible from the stored matrices."""

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_random_problem(self, seed):
        rng = np.random.default_rng(seed)
        A = rng.normal(size=(3, 3))
        b = rng.uniform(0.5, 2.0, size=3)
        c = rng.normal(size=3)
        p = LPProblem.from_arrays(A, b, c)

        for part in generate_partitions(3, 3):
            d = Dictionary.from_problem(p, part)
            assert d.is_valid
            if not d.is_basic:
                continue
            values = d.basic_var_values.to_numpy()
            assert d.is_feasible == bool(np.all(values >= 0))
            if not d.is_feasible:
                assert not d.is_optimal and not d.is_unbounded
                continue
            costs = d.zeta_non_basic_vars.to_numpy()
            assert d.is_optimal == bool(np.all(costs <= 0))
            assert not (d.is_optimal and d.is_unbounded)

            x = np.array(d.point)
            assert np.all(A @ x <= b + 1e-9)
            assert abs(float(c @ x) - d.zeta) < 1e-9

    def test_cube_counts(self, cube):
        ds = [Dictionary.from_problem(cube, part) for part in generate_partitions(3, 3)]
        assert len(ds) == 20
        assert sum(d.is_basic for d in ds) == 8
        assert sum(d.is_feasible for d in ds) == 8
        assert sum(d.is_optimal for d in ds) == 1
        assert sum(d.is_unbounded for d in ds) == 0

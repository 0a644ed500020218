"""
Tests for the scipy linprog cross-check.
"""

import pytest
import numpy as np

from simplex_vertices.lp import LPProblem, solve_with_linprog, crosscheck_optimum


@pytest.fixture
def cube_min():
    return LPProblem.from_strings(
        "1 0 0; 0 1 0; 0 0 1", "3; 3; 3", "-1; -1; -1", sense="min"
    )


class TestSolveWithLinprog:
    """Direct linprog solves."""

    def test_cube_optimum(self, cube_min):
        result = solve_with_linprog(cube_min)
        assert result.status == "optimal"
        assert result.lp_status == 0
        assert result.objective == pytest.approx(-9.0)
        np.testing.assert_allclose(result.x, [3.0, 3.0, 3.0], atol=1e-8)

    def test_max_sense(self):
        p = LPProblem.from_strings("1 1", "4", "1; 2")
        result = solve_with_linprog(p)
        assert result.objective == pytest.approx(8.0)

    def test_unbounded(self):
        p = LPProblem.from_strings("1 -1", "1", "1; 1")
        assert solve_with_linprog(p).status == "unbounded"

    def test_infeasible(self):
        p = LPProblem.from_strings("1", "-1", "1")
        assert solve_with_linprog(p).status == "infeasible"


class TestCrosscheckOptimum:
    """Comparison of enumerated results against linprog."""

    def test_match(self, cube_min):
        result = crosscheck_optimum(cube_min, -9.0)
        assert result.matches is True

    def test_mismatch(self, cube_min):
        result = crosscheck_optimum(cube_min, -8.0)
        assert result.matches is False

    def test_missing_optimum(self, cube_min):
        result = crosscheck_optimum(cube_min, None)
        assert result.matches is False
        assert "no optimal vertex" in result.message

    def test_unbounded_agrees(self):
        p = LPProblem.from_strings("1 -1", "1", "1; 1")
        assert crosscheck_optimum(p, None, any_unbounded=True).matches is True
        assert crosscheck_optimum(p, None, any_unbounded=False).matches is False

    def test_infeasible_agrees(self):
        p = LPProblem.from_strings("1", "-1", "1")
        assert crosscheck_optimum(p, None).matches is True

"""
Tests for mpmath re-verification of float64 dictionaries.
"""

import dataclasses

import pytest
from mpmath import mp

from simplex_vertices.matrix import Matrix
from simplex_vertices.partitions import generate_partitions, make_partition
from simplex_vertices.lp import LPProblem, Dictionary, verify_dictionary


@pytest.fixture
def cube():
    return LPProblem.from_strings("1 0 0; 0 1 0; 0 0 1", "3; 3; 3", "1; 1; 1")


class TestVerifyDictionary:
    """Tests for verify_dictionary."""

    def test_optimal_confirmed(self, cube):
        d = Dictionary.from_problem(cube, make_partition([0, 1, 2], 3, 3))
        check = verify_dictionary(cube, d)
        assert check.checked
        assert check.basis_ok
        assert check.feasible is True
        assert check.optimal is True
        assert check.agrees
        assert check.max_value_residual == 0.0
        assert check.max_cost_residual == 0.0

    def test_suboptimal_confirmed(self, cube):
        d = Dictionary.from_problem(cube, make_partition([3, 4, 5], 3, 3))
        check = verify_dictionary(cube, d)
        assert check.feasible is True
        assert check.optimal is False
        assert check.agrees

    def test_all_cube_bases_agree(self, cube):
        for part in generate_partitions(3, 3):
            d = Dictionary.from_problem(cube, part)
            check = verify_dictionary(cube, d)
            assert check.checked == d.is_basic
            if check.checked:
                assert check.agrees, check.message

    def test_not_basic_is_skipped(self, cube):
        d = Dictionary.from_problem(cube, make_partition([0, 1, 3], 3, 3))
        check = verify_dictionary(cube, d)
        assert not check.checked
        assert not check.agrees

    def test_infeasible_confirmed(self):
        p = LPProblem.from_strings("1 -1", "1", "1; 1")
        d = Dictionary.from_problem(p, make_partition([1], 2, 1))
        check = verify_dictionary(p, d)
        assert check.feasible is False
        assert check.optimal is None
        assert check.agrees

    def test_tampered_values_detected(self, cube):
        d = Dictionary.from_problem(cube, make_partition([0, 1, 2], 3, 3))
        bad = dataclasses.replace(d, basic_var_values=Matrix.column([2.0, 3.0, 3.0]))
        check = verify_dictionary(cube, bad)
        assert not check.agrees
        assert check.max_value_residual == pytest.approx(1.0)
        assert "Residuals too large" in check.message

    def test_precision_restored(self, cube):
        saved = mp.dps
        d = Dictionary.from_problem(cube, make_partition([0, 1, 2], 3, 3))
        verify_dictionary(cube, d, dps=80)
        assert mp.dps == saved

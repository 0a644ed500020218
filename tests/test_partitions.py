"""
Unit tests for Basic/NonBasic partition enumeration.

For n variables and m constraints the augmented index set is
{0, ..., n+m-1} and every m-subset is a Basic set, giving C(n+m, m)
partitions. For the 3x3 cube this is exactly 20.
"""

import pytest
from math import comb

from simplex_vertices.matrix import (
    InvalidPartitionError,
    InvalidPartitionSizeError,
    InvalidPartitionCoverageError,
)
from simplex_vertices.partitions import (
    Partition,
    generate_partitions,
    iter_partitions,
    partition_count,
    next_combination,
    check_partition,
    is_valid_partition,
    make_partition,
    get_partition_rank,
    get_partition_at_rank,
    shard_bounds,
    iter_partition_shard,
)


# ============================================================================
# Generation
# ============================================================================

class TestGeneratePartitions:
    """Tests for generate_partitions / iter_partitions."""

    def test_cube_count_is_20(self):
        assert len(generate_partitions(3, 3)) == 20

    @pytest.mark.parametrize("n,m", [(0, 0), (1, 0), (0, 2), (2, 3), (3, 3), (4, 2), (5, 5)])
    def test_count_matches_formula(self, n, m):
        assert len(generate_partitions(n, m)) == comb(n + m, m) == partition_count(n, m)

    @pytest.mark.parametrize("n,m", [(2, 3), (3, 3), (4, 2)])
    def test_disjoint_cover(self, n, m):
        """Every partition splits {0..n+m-1} into disjoint Basic/NonBasic sets."""
        universe = set(range(n + m))
        for p in generate_partitions(n, m):
            assert len(p.basic) == m
            assert len(p.non_basic) == n
            assert set(p.basic) & set(p.non_basic) == set()
            assert set(p.basic) | set(p.non_basic) == universe

    def test_no_duplicates(self):
        basics = [p.basic for p in generate_partitions(3, 3)]
        assert len(set(basics)) == len(basics)

    def test_ascending_and_lexicographic(self):
        parts = generate_partitions(3, 3)
        for p in parts:
            assert list(p.basic) == sorted(p.basic)
            assert list(p.non_basic) == sorted(p.non_basic)
        basics = [p.basic for p in parts]
        assert basics == sorted(basics)
        assert basics[0] == (0, 1, 2)
        assert basics[-1] == (3, 4, 5)

    def test_iter_matches_generate(self):
        assert list(iter_partitions(2, 3)) == generate_partitions(2, 3)

    def test_negative_sizes(self):
        with pytest.raises(ValueError):
            generate_partitions(-1, 2)
        with pytest.raises(ValueError):
            partition_count(2, -1)

    def test_partition_properties(self):
        p = Partition(basic=(0, 2), non_basic=(1,))
        assert p.num_constraints == 2
        assert p.num_vars == 1
        assert str(p) == "B=[0, 2] N=[1]"


class TestNextCombination:
    """Tests for next_combination."""

    def test_walks_all(self):
        """Repeated next_combination visits every subset in order."""
        expected = [p.basic for p in generate_partitions(3, 3)]
        current = expected[0]
        walked = [current]
        while True:
            current = next_combination(current, 6)
            if current is None:
                break
            walked.append(current)
        assert walked == expected

    def test_last_is_none(self):
        assert next_combination((3, 4, 5), 6) is None

    def test_empty_subset(self):
        assert next_combination((), 3) is None


# ============================================================================
# Validation
# ============================================================================

class TestCheckPartition:
    """Tests for check_partition and friends."""

    def test_valid(self):
        check_partition((0, 1, 2), (3, 4, 5), 3, 3)

    def test_basic_size(self):
        with pytest.raises(InvalidPartitionSizeError) as excinfo:
            check_partition((0, 1), (2, 3, 4, 5), 3, 3)
        assert str(excinfo.value) == "Error. B partition expected 3 elements but got 2"

    def test_non_basic_size(self):
        with pytest.raises(InvalidPartitionSizeError) as excinfo:
            check_partition((0, 1, 2), (3, 4), 3, 3)
        assert "N partition expected 3" in str(excinfo.value)

    def test_duplicate(self):
        with pytest.raises(InvalidPartitionCoverageError):
            check_partition((0, 0, 1), (2, 3, 4), 3, 3)

    def test_missing(self):
        with pytest.raises(InvalidPartitionCoverageError) as excinfo:
            check_partition((0, 1, 2), (3, 4, 6), 3, 3)
        assert str(excinfo.value) == "Error. Missing partition element 5"

    def test_errors_share_base(self):
        assert issubclass(InvalidPartitionSizeError, InvalidPartitionError)
        assert issubclass(InvalidPartitionCoverageError, InvalidPartitionError)
        assert InvalidPartitionSizeError.error_kind == "InvalidPartitionSize"
        assert InvalidPartitionCoverageError.error_kind == "InvalidPartitionCoverage"

    def test_is_valid_partition(self):
        assert is_valid_partition([0, 2], [1], 1, 2)
        assert not is_valid_partition([0, 0], [1], 1, 2)
        assert not is_valid_partition([0], [1, 2], 1, 2)

    def test_make_partition(self):
        p = make_partition([5, 1, 3], 3, 3)
        assert p.basic == (1, 3, 5)
        assert p.non_basic == (0, 2, 4)

    def test_make_partition_invalid(self):
        with pytest.raises(InvalidPartitionSizeError):
            make_partition([0, 1], 3, 3)
        with pytest.raises(InvalidPartitionCoverageError):
            make_partition([0, 1, 7], 3, 3)


# ============================================================================
# Ranking and sharding
# ============================================================================

class TestRanking:
    """Tests for rank / unrank."""

    def test_roundtrip_all(self):
        for rank, p in enumerate(generate_partitions(3, 3)):
            assert get_partition_rank(p, 3, 3) == rank
            assert get_partition_at_rank(rank, 3, 3) == p

    def test_roundtrip_rectangular(self):
        for rank, p in enumerate(generate_partitions(4, 2)):
            assert get_partition_at_rank(rank, 4, 2) == p

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            get_partition_at_rank(20, 3, 3)
        with pytest.raises(ValueError):
            get_partition_at_rank(-1, 3, 3)


class TestSharding:
    """Tests for shard_bounds / iter_partition_shard."""

    def test_bounds(self):
        assert [shard_bounds(20, i, 3) for i in range(3)] == [(0, 6), (6, 13), (13, 20)]

    def test_more_shards_than_items(self):
        bounds = [shard_bounds(2, i, 4) for i in range(4)]
        assert sum(stop - start for start, stop in bounds) == 2

    def test_invalid(self):
        with pytest.raises(ValueError):
            shard_bounds(20, 3, 3)
        with pytest.raises(ValueError):
            shard_bounds(20, 0, 0)

    @pytest.mark.parametrize("num_shards", [1, 2, 3, 7, 25])
    def test_union_is_full_order(self, num_shards):
        combined = []
        for shard_id in range(num_shards):
            combined.extend(iter_partition_shard(3, 3, shard_id, num_shards))
        assert combined == generate_partitions(3, 3)

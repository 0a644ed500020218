"""
Basic/NonBasic partition enumeration.

For a problem with n structural variables and m constraints the augmented
variable set is {0, ..., n+m-1}: indices 0..n-1 are the original
variables, n..n+m-1 the slack variables. A partition picks m of them as
Basic and leaves the remaining n as NonBasic.

Partitions are generated in lexicographic order of their Basic set, each
subset exactly once, so there are exactly C(n+m, m) of them. That count
grows combinatorially (C(12, 6) = 924, C(20, 10) = 184756); bound the
problem size or split the work with ``iter_partition_shard``.
"""

from dataclasses import dataclass
from itertools import combinations
from math import comb
from typing import Iterable, Iterator, List, Optional, Tuple

from ..matrix.errors import (
    InvalidPartitionCoverageError,
    InvalidPartitionSizeError,
)


IndexSet = Tuple[int, ...]


@dataclass(frozen=True)
class Partition:
    """
    One Basic/NonBasic split of the augmented variable indices.

    Attributes
    ----------
    basic : tuple of int
        Ascending Basic indices (length m).
    non_basic : tuple of int
        Ascending NonBasic indices (length n).
    """
    basic: IndexSet
    non_basic: IndexSet

    @property
    def num_constraints(self) -> int:
        return len(self.basic)

    @property
    def num_vars(self) -> int:
        return len(self.non_basic)

    def __str__(self) -> str:
        return f"B={list(self.basic)} N={list(self.non_basic)}"


def _complement(basic: IndexSet, universe: int) -> IndexSet:
    members = set(basic)
    return tuple(i for i in range(universe) if i not in members)


def _check_sizes(num_vars: int, num_constraints: int) -> None:
    if num_vars < 0 or num_constraints < 0:
        raise ValueError(
            f"Sizes must be non-negative, got n={num_vars}, m={num_constraints}"
        )


def generate_partitions(num_vars: int, num_constraints: int) -> List[Partition]:
    """
    Generate every Basic/NonBasic partition.

    Parameters
    ----------
    num_vars : int
        Number of structural variables n.
    num_constraints : int
        Number of constraints m (= number of slack variables).

    Returns
    -------
    list of Partition
        C(n+m, m) partitions, lexicographic in their Basic sets.

    Examples
    --------
    >>> parts = generate_partitions(1, 1)
    >>> [(p.basic, p.non_basic) for p in parts]
    [((0,), (1,)), ((1,), (0,))]
    """
    return list(iter_partitions(num_vars, num_constraints))


def iter_partitions(num_vars: int, num_constraints: int) -> Iterator[Partition]:
    """
    Iterate over every Basic/NonBasic partition.

    Memory-efficient alternative to generate_partitions() when the
    partitions are consumed once.
    """
    _check_sizes(num_vars, num_constraints)
    universe = num_vars + num_constraints
    for basic in combinations(range(universe), num_constraints):
        yield Partition(basic=basic, non_basic=_complement(basic, universe))


def partition_count(num_vars: int, num_constraints: int) -> int:
    """
    Number of partitions, C(n+m, m), without generating them.

    Examples
    --------
    >>> partition_count(3, 3)
    20
    >>> partition_count(2, 3)
    10
    """
    _check_sizes(num_vars, num_constraints)
    return comb(num_vars + num_constraints, num_constraints)


def next_combination(basic: IndexSet, universe: int) -> Optional[IndexSet]:
    """
    Lexicographic successor of an ascending k-subset of {0..universe-1}.

    Returns
    -------
    tuple of int or None
        The next subset, or None if ``basic`` is the last one.

    Examples
    --------
    >>> next_combination((0, 1), 4)
    (0, 2)
    >>> next_combination((1, 3), 4)
    (2, 3)
    >>> next_combination((2, 3), 4) is None
    True
    """
    k = len(basic)
    current = list(basic)
    for i in range(k - 1, -1, -1):
        if current[i] < universe - k + i:
            current[i] += 1
            for j in range(i + 1, k):
                current[j] = current[i] + (j - i)
            return tuple(current)
    return None


def check_partition(
    basic: Iterable[int],
    non_basic: Iterable[int],
    num_vars: int,
    num_constraints: int,
) -> None:
    """
    Validate a partition against a problem of size (n, m).

    Raises
    ------
    InvalidPartitionSizeError
        If |basic| != m or |non_basic| != n.
    InvalidPartitionCoverageError
        If some index of 0..n+m-1 is not in exactly one of the two sets.
    """
    basic = list(basic)
    non_basic = list(non_basic)
    if len(basic) != num_constraints:
        raise InvalidPartitionSizeError(
            f"Error. B partition expected {num_constraints} elements "
            f"but got {len(basic)}"
        )
    if len(non_basic) != num_vars:
        raise InvalidPartitionSizeError(
            f"Error. N partition expected {num_vars} elements "
            f"but got {len(non_basic)}"
        )

    universe = num_vars + num_constraints
    seen = {}
    for i in basic + non_basic:
        seen[i] = seen.get(i, 0) + 1
    for i in range(universe):
        if seen.get(i, 0) == 0:
            raise InvalidPartitionCoverageError(f"Error. Missing partition element {i}")
        if seen[i] > 1:
            raise InvalidPartitionCoverageError(f"Error. Duplicate partition element {i}")
    extra = sorted(i for i in seen if not 0 <= i < universe)
    if extra:
        raise InvalidPartitionCoverageError(
            f"Error. Partition element {extra[0]} outside 0..{universe - 1}"
        )


def is_valid_partition(
    basic: Iterable[int],
    non_basic: Iterable[int],
    num_vars: int,
    num_constraints: int,
) -> bool:
    """
    Check if (basic, non_basic) is a valid partition for size (n, m).

    Examples
    --------
    >>> is_valid_partition([0, 2], [1], 1, 2)
    True
    >>> is_valid_partition([0, 0], [1], 1, 2)
    False
    """
    try:
        check_partition(basic, non_basic, num_vars, num_constraints)
    except (InvalidPartitionSizeError, InvalidPartitionCoverageError):
        return False
    return True


def make_partition(
    basic: Iterable[int],
    num_vars: int,
    num_constraints: int,
) -> Partition:
    """
    Build a Partition from its Basic set, taking the complement as NonBasic.

    Raises
    ------
    InvalidPartitionSizeError, InvalidPartitionCoverageError
        If ``basic`` is not an m-subset of {0..n+m-1}.
    """
    ordered = tuple(sorted(int(i) for i in basic))
    universe = num_vars + num_constraints
    if len(ordered) != num_constraints:
        raise InvalidPartitionSizeError(
            f"Error. B partition expected {num_constraints} elements "
            f"but got {len(ordered)}"
        )
    for i in ordered:
        if not 0 <= i < universe:
            raise InvalidPartitionCoverageError(
                f"Error. Partition element {i} outside 0..{universe - 1}"
            )
    non_basic = _complement(ordered, universe)
    check_partition(ordered, non_basic, num_vars, num_constraints)
    return Partition(basic=ordered, non_basic=non_basic)


def get_partition_rank(partition: Partition, num_vars: int, num_constraints: int) -> int:
    """
    Get the 0-based lexicographic position of a partition.

    This is the inverse of get_partition_at_rank().

    Examples
    --------
    >>> get_partition_rank(make_partition([0, 1, 2], 3, 3), 3, 3)
    0
    >>> get_partition_rank(make_partition([3, 4, 5], 3, 3), 3, 3)
    19
    """
    check_partition(partition.basic, partition.non_basic, num_vars, num_constraints)
    universe = num_vars + num_constraints
    k = num_constraints
    rank = 0
    prev = -1
    for i, value in enumerate(partition.basic):
        # Count subsets that agree so far but pick a smaller value here
        for skipped in range(prev + 1, value):
            rank += comb(universe - 1 - skipped, k - 1 - i)
        prev = value
    return rank


def get_partition_at_rank(rank: int, num_vars: int, num_constraints: int) -> Partition:
    """
    Get the partition at a given lexicographic position.

    Raises
    ------
    ValueError
        If rank is out of range.

    Examples
    --------
    >>> get_partition_at_rank(0, 3, 3).basic
    (0, 1, 2)
    >>> get_partition_at_rank(19, 3, 3).basic
    (3, 4, 5)
    """
    total = partition_count(num_vars, num_constraints)
    if rank < 0 or rank >= total:
        raise ValueError(f"Rank {rank} out of range [0, {total - 1}]")

    universe = num_vars + num_constraints
    k = num_constraints
    basic = []
    value = 0
    for i in range(k):
        while True:
            block = comb(universe - 1 - value, k - 1 - i)
            if rank < block:
                break
            rank -= block
            value += 1
        basic.append(value)
        value += 1

    basic = tuple(basic)
    return Partition(basic=basic, non_basic=_complement(basic, universe))


def shard_bounds(total: int, shard_id: int, num_shards: int) -> Tuple[int, int]:
    """
    Contiguous [start, stop) rank range owned by one shard.

    Examples
    --------
    >>> [shard_bounds(20, i, 3) for i in range(3)]
    [(0, 6), (6, 13), (13, 20)]
    """
    if num_shards < 1:
        raise ValueError(f"num_shards must be >= 1, got {num_shards}")
    if not 0 <= shard_id < num_shards:
        raise ValueError(f"shard_id must be in [0, {num_shards - 1}], got {shard_id}")
    return shard_id * total // num_shards, (shard_id + 1) * total // num_shards


def iter_partition_shard(
    num_vars: int,
    num_constraints: int,
    shard_id: int,
    num_shards: int,
) -> Iterator[Partition]:
    """
    Iterate over one contiguous shard of the lexicographic partition order.

    The union of all shards is exactly iter_partitions(n, m), in order.
    """
    start, stop = shard_bounds(
        partition_count(num_vars, num_constraints), shard_id, num_shards
    )
    if start >= stop:
        return

    universe = num_vars + num_constraints
    basic = get_partition_at_rank(start, num_vars, num_constraints).basic
    for _ in range(stop - start):
        yield Partition(basic=basic, non_basic=_complement(basic, universe))
        basic = next_combination(basic, universe)
        if basic is None:
            break

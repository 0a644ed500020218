"""
Basic/NonBasic partition enumeration over the augmented variable set.
"""

from .partition import (
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

__all__ = [
    "Partition",
    "generate_partitions",
    "iter_partitions",
    "partition_count",
    "next_combination",
    "check_partition",
    "is_valid_partition",
    "make_partition",
    "get_partition_rank",
    "get_partition_at_rank",
    "shard_bounds",
    "iter_partition_shard",
]

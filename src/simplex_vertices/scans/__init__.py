"""
Vertex enumeration scans.

Implements:
- Dictionary evaluation for every Basic/NonBasic partition
- Worker-process and sharded execution with cooperative cancellation
- CSV output and optional mpmath / linprog verification
"""

from .enumerate import (
    EnumerationConfig,
    EnumerationResult,
    EnumerationSummary,
    evaluate_partition,
    enumerate_dictionaries,
    run_enumeration,
    write_csv_header,
    append_dictionary_to_csv,
    load_enumeration_results,
)

__all__ = [
    "EnumerationConfig",
    "EnumerationResult",
    "EnumerationSummary",
    "evaluate_partition",
    "enumerate_dictionaries",
    "run_enumeration",
    "write_csv_header",
    "append_dictionary_to_csv",
    "load_enumeration_results",
]

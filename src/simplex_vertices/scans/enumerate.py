"""
Vertex enumeration: evaluate a dictionary for every Basic/NonBasic partition.

For a problem with n variables and m constraints there are C(n+m, m)
partitions. Each one is evaluated independently from the immutable problem
data, so the batch can be split across worker processes (``workers``) or
across separate jobs (``shard_id`` / ``num_shards``). A failing partition
never aborts the batch: invalid, non-basic and infeasible partitions are
simply recorded with their flags and message.

Output for a renderer:
    - feasible_points: ordered, deduplicated vertex coordinates
    - optimal_point / optimal_value: first optimal dictionary found
    - summary(): counts of valid/basic/feasible/optimal/unbounded partitions

Usage:
    python -m simplex_vertices.scans.enumerate \\
        --constraints "1 0 0; 0 1 0; 0 0 1" --bounds "3; 3; 3" \\
        --objective="-1; -1; -1" --sense min \\
        --workers 4 --output data/vertices.csv --verbose
"""

import argparse
import csv
from collections import Counter, deque
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..config import (
    CLASSIFICATION_TOLERANCE,
    DATA_DIR,
    DEFAULT_CHUNKSIZE,
    DEFAULT_WORKERS,
    MAX_PARTITIONS_WARNING,
    MPMATH_PRECISION,
    PIVOT_TOLERANCE,
    POINT_DECIMALS,
)
from ..matrix import MatrixError
from ..partitions import (
    Partition,
    iter_partition_shard,
    iter_partitions,
    partition_count,
    shard_bounds,
)
from ..lp.problem import LPProblem
from ..lp.dictionary import Dictionary
from ..lp.precision import PrecisionCheck, verify_dictionary
from ..lp.crosscheck import CrosscheckResult, crosscheck_optimum


Point = Tuple[float, ...]


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class EnumerationConfig:
    """Configuration for one enumeration run."""
    workers: int = DEFAULT_WORKERS
    chunksize: int = DEFAULT_CHUNKSIZE
    shard_id: Optional[int] = None
    num_shards: Optional[int] = None
    max_partitions: Optional[int] = None
    tolerance: float = CLASSIFICATION_TOLERANCE
    pivot_tol: float = PIVOT_TOLERANCE
    verify: bool = False
    verify_dps: int = MPMATH_PRECISION
    crosscheck: bool = False
    output: Optional[Path] = None
    verbose: bool = False

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.chunksize < 1:
            raise ValueError(f"chunksize must be >= 1, got {self.chunksize}")
        if (self.shard_id is None) != (self.num_shards is None):
            raise ValueError("shard_id and num_shards must be given together")
        if self.num_shards is not None:
            shard_bounds(0, self.shard_id, self.num_shards)
        if self.max_partitions is not None and self.max_partitions < 0:
            raise ValueError(f"max_partitions must be >= 0, got {self.max_partitions}")

    def iter_partitions(self, num_vars: int, num_constraints: int) -> Iterator[Partition]:
        """Partitions this run is responsible for, in lexicographic order."""
        if self.num_shards is not None:
            parts = iter_partition_shard(
                num_vars, num_constraints, self.shard_id, self.num_shards
            )
        else:
            parts = iter_partitions(num_vars, num_constraints)
        if self.max_partitions is not None:
            parts = islice(parts, self.max_partitions)
        return parts

    def planned_count(self, num_vars: int, num_constraints: int) -> int:
        """Number of partitions this run will evaluate if not cancelled."""
        total = partition_count(num_vars, num_constraints)
        if self.num_shards is not None:
            start, stop = shard_bounds(total, self.shard_id, self.num_shards)
            total = stop - start
        if self.max_partitions is not None:
            total = min(total, self.max_partitions)
        return total


# =============================================================================
# Results
# =============================================================================

@dataclass
class EnumerationSummary:
    """Counts over all evaluated dictionaries."""
    total: int
    valid: int
    basic: int
    feasible: int
    optimal: int
    unbounded: int
    statuses: Dict[str, int]
    messages: Dict[str, int]

    def format(self) -> str:
        lines = [
            f"Partitions evaluated: {self.total}",
            f"  valid={self.valid} basic={self.basic} feasible={self.feasible} "
            f"optimal={self.optimal} unbounded={self.unbounded}",
        ]
        for message, count in sorted(self.messages.items(), key=lambda kv: -kv[1]):
            lines.append(f"  {count:6d}  {message}")
        return "\n".join(lines)


@dataclass
class EnumerationResult:
    """
    All dictionaries of one enumeration run plus derived renderer output.

    Attributes
    ----------
    problem : LPProblem
        The enumerated problem.
    dictionaries : list of Dictionary
        One per evaluated partition, in lexicographic partition order.
    planned : int
        Number of partitions the run intended to evaluate.
    cancelled : bool
        True if should_stop() ended scheduling early.
    precision_checks : list of PrecisionCheck
        mpmath verification of each feasible dictionary (when enabled).
    crosscheck : CrosscheckResult or None
        linprog comparison (when enabled).
    """
    problem: LPProblem
    dictionaries: List[Dictionary] = field(default_factory=list)
    planned: int = 0
    cancelled: bool = False
    precision_checks: List[PrecisionCheck] = field(default_factory=list)
    crosscheck: Optional[CrosscheckResult] = None

    @property
    def feasible_points(self) -> List[Point]:
        """Feasible vertex coordinates, first occurrence order, no duplicates."""
        seen = set()
        points = []
        for d in self.dictionaries:
            if not d.is_feasible:
                continue
            key = tuple(round(v, POINT_DECIMALS) for v in d.point)
            if key in seen:
                continue
            seen.add(key)
            points.append(d.point)
        return points

    @property
    def optimal_dictionary(self) -> Optional[Dictionary]:
        for d in self.dictionaries:
            if d.is_optimal:
                return d
        return None

    @property
    def optimal_point(self) -> Optional[Point]:
        d = self.optimal_dictionary
        return d.point if d is not None else None

    @property
    def optimal_value(self) -> Optional[float]:
        """Objective at the optimal vertex, in the problem's own sense."""
        d = self.optimal_dictionary
        return self.problem.objective_value(d.zeta) if d is not None else None

    @property
    def is_unbounded(self) -> bool:
        return any(d.is_unbounded for d in self.dictionaries)

    def summary(self) -> EnumerationSummary:
        ds = self.dictionaries
        return EnumerationSummary(
            total=len(ds),
            valid=sum(d.is_valid for d in ds),
            basic=sum(d.is_basic for d in ds),
            feasible=sum(d.is_feasible for d in ds),
            optimal=sum(d.is_optimal for d in ds),
            unbounded=sum(d.is_unbounded for d in ds),
            statuses=dict(Counter(d.status for d in ds)),
            messages=dict(Counter(d.message for d in ds)),
        )


# =============================================================================
# Evaluation
# =============================================================================

def evaluate_partition(
    problem: LPProblem,
    partition: Partition,
    tol: float = CLASSIFICATION_TOLERANCE,
    pivot_tol: float = PIVOT_TOLERANCE,
) -> Dictionary:
    """Build and classify the dictionary of one partition."""
    return Dictionary.from_problem(problem, partition, tol=tol, pivot_tol=pivot_tol)


def _evaluate_chunk(
    problem: LPProblem,
    partitions: List[Partition],
    tol: float,
    pivot_tol: float,
) -> List[Dictionary]:
    """Worker-process entry point: evaluate a list of partitions."""
    return [evaluate_partition(problem, p, tol, pivot_tol) for p in partitions]


def _chunks(parts: Iterator[Partition], size: int) -> Iterator[List[Partition]]:
    while True:
        chunk = list(islice(parts, size))
        if not chunk:
            return
        yield chunk


def _enumerate_serial(
    problem: LPProblem,
    parts: Iterator[Partition],
    config: EnumerationConfig,
    should_stop: Optional[Callable[[], bool]],
) -> Tuple[List[Dictionary], bool]:
    dictionaries = []
    for partition in parts:
        if should_stop is not None and should_stop():
            return dictionaries, True
        dictionaries.append(
            evaluate_partition(problem, partition, config.tolerance, config.pivot_tol)
        )
    return dictionaries, False


def _enumerate_parallel(
    problem: LPProblem,
    parts: Iterator[Partition],
    config: EnumerationConfig,
    should_stop: Optional[Callable[[], bool]],
) -> Tuple[List[Dictionary], bool]:
    dictionaries = []
    cancelled = False
    # Bounded window of in-flight chunks so cancellation stops scheduling promptly
    window = 2 * config.workers
    pending = deque()

    with ProcessPoolExecutor(max_workers=config.workers) as executor:
        for chunk in _chunks(parts, config.chunksize):
            if should_stop is not None and should_stop():
                cancelled = True
                break
            pending.append(executor.submit(
                _evaluate_chunk, problem, chunk, config.tolerance, config.pivot_tol,
            ))
            if len(pending) >= window:
                dictionaries.extend(pending.popleft().result())
        while pending:
            dictionaries.extend(pending.popleft().result())

    return dictionaries, cancelled


def enumerate_dictionaries(
    problem: LPProblem,
    config: Optional[EnumerationConfig] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> EnumerationResult:
    """
    Evaluate the dictionary of every partition assigned to this run.

    Parameters
    ----------
    problem : LPProblem
        Problem to enumerate.
    config : EnumerationConfig, optional
        Run configuration (defaults: serial, exact tolerances).
    should_stop : callable, optional
        Polled before each partition (serial) or chunk (parallel) is
        scheduled; once it returns True nothing further is scheduled.
        Work already scheduled still completes.

    Returns
    -------
    EnumerationResult
        Dictionaries in lexicographic partition order.
    """
    config = config or EnumerationConfig()
    n, m = problem.num_vars, problem.num_constraints
    planned = config.planned_count(n, m)

    if config.verbose:
        print(f"Enumeration: {planned} of {partition_count(n, m)} partitions "
              f"(n={n}, m={m}, workers={config.workers})")
        if planned > MAX_PARTITIONS_WARNING:
            print(f"  WARNING: {planned} partitions exceeds "
                  f"{MAX_PARTITIONS_WARNING}; consider sharding or a smaller problem")

    parts = config.iter_partitions(n, m)
    if config.workers > 1:
        dictionaries, cancelled = _enumerate_parallel(problem, parts, config, should_stop)
    else:
        dictionaries, cancelled = _enumerate_serial(problem, parts, config, should_stop)

    if config.verbose and cancelled:
        print(f"  Cancelled after {len(dictionaries)}/{planned} partitions")

    return EnumerationResult(
        problem=problem,
        dictionaries=dictionaries,
        planned=planned,
        cancelled=cancelled,
    )


# =============================================================================
# CSV I/O
# =============================================================================

CSV_COLUMNS = [
    "basic", "non_basic", "status", "is_valid", "is_basic", "is_feasible",
    "is_optimal", "is_unbounded", "zeta", "point", "message",
]


def _join(values) -> str:
    return " ".join(str(v) for v in values)


def write_csv_header(output_path: Path) -> None:
    """Write the CSV header for enumeration results."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)


def append_dictionary_to_csv(output_path: Path, dictionary: Dictionary) -> None:
    """Append one dictionary as a CSV row."""
    with open(output_path, 'a', newline='') as f:
        writer = csv.writer(f)
        writer.writerow([
            _join(dictionary.basic),
            _join(dictionary.non_basic),
            dictionary.status,
            int(dictionary.is_valid),
            int(dictionary.is_basic),
            int(dictionary.is_feasible),
            int(dictionary.is_optimal),
            int(dictionary.is_unbounded),
            "" if dictionary.zeta is None else repr(dictionary.zeta),
            _join(repr(v) for v in dictionary.point) if dictionary.is_basic else "",
            dictionary.message,
        ])


def load_enumeration_results(csv_path: Path) -> List[dict]:
    """
    Load enumeration results from CSV.

    Returns
    -------
    list of dict
        One record per partition with parsed index tuples, booleans,
        zeta (float or None) and point (tuple of float, empty if not basic).
    """
    results = []
    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            results.append({
                "basic": tuple(int(v) for v in row["basic"].split()),
                "non_basic": tuple(int(v) for v in row["non_basic"].split()),
                "status": row["status"],
                "is_valid": row["is_valid"] == "1",
                "is_basic": row["is_basic"] == "1",
                "is_feasible": row["is_feasible"] == "1",
                "is_optimal": row["is_optimal"] == "1",
                "is_unbounded": row["is_unbounded"] == "1",
                "zeta": float(row["zeta"]) if row["zeta"] else None,
                "point": tuple(float(v) for v in row["point"].split()),
                "message": row["message"],
            })
    return results


# =============================================================================
# Main run
# =============================================================================

def run_enumeration(
    problem: LPProblem,
    config: Optional[EnumerationConfig] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> EnumerationResult:
    """
    Enumerate, then optionally verify, cross-check and write CSV output.

    Parameters
    ----------
    problem : LPProblem
        Problem to enumerate.
    config : EnumerationConfig, optional
        Run configuration.
    should_stop : callable, optional
        Cancellation probe, see enumerate_dictionaries.

    Returns
    -------
    EnumerationResult
    """
    config = config or EnumerationConfig()
    result = enumerate_dictionaries(problem, config, should_stop=should_stop)

    if config.verify:
        feasible = [d for d in result.dictionaries if d.is_feasible]
        if config.verbose:
            print(f"Verifying {len(feasible)} feasible dictionaries "
                  f"at dps={config.verify_dps}...")
        for d in feasible:
            check = verify_dictionary(
                problem, d, dps=config.verify_dps, tol=config.tolerance,
            )
            result.precision_checks.append(check)
            if config.verbose and not check.agrees:
                print(f"  B={list(d.basic)}: {check.message}")

    if config.crosscheck:
        result.crosscheck = crosscheck_optimum(
            problem, result.optimal_value, any_unbounded=result.is_unbounded,
        )
        if config.verbose:
            verdict = "MATCH" if result.crosscheck.matches else "MISMATCH"
            print(f"linprog cross-check: {result.crosscheck.status} -> {verdict} "
                  f"({result.crosscheck.message})")

    if config.output is not None:
        write_csv_header(config.output)
        for d in result.dictionaries:
            append_dictionary_to_csv(config.output, d)
        if config.verbose:
            print(f"Results written to {config.output}")

    if config.verbose:
        print(result.summary().format())
        print(f"Feasible vertices: {len(result.feasible_points)}")
        if result.optimal_point is not None:
            print(f"Optimal vertex: {result.optimal_point} "
                  f"(objective {result.optimal_value:.6g})")
        elif result.is_unbounded:
            print("No optimal vertex: objective is unbounded")
        else:
            print("No optimal vertex found")

    return result


# =============================================================================
# CLI
# =============================================================================

def main(argv: Optional[List[str]] = None) -> None:
    """Command-line entry point for vertex enumeration."""
    parser = argparse.ArgumentParser(
        description="Enumerate and classify the vertices of A x <= b, x >= 0"
    )
    parser.add_argument(
        "-A", "--constraints", type=str, required=True,
        help='Constraint matrix literal, e.g. "1 0; 0 1"'
    )
    parser.add_argument(
        "-b", "--bounds", type=str, required=True,
        help='Constraint bounds column literal, e.g. "3; 3"'
    )
    parser.add_argument(
        "-c", "--objective", type=str, required=True,
        help='Objective column literal, e.g. "1; 1"'
    )
    parser.add_argument(
        "--sense", type=str, default="max", choices=["max", "min"],
        help="Objective sense (default: max)"
    )
    parser.add_argument(
        "--workers", type=int, default=DEFAULT_WORKERS,
        help=f"Number of worker processes (default: {DEFAULT_WORKERS})"
    )
    parser.add_argument(
        "--chunksize", type=int, default=DEFAULT_CHUNKSIZE,
        help=f"Partitions per worker task (default: {DEFAULT_CHUNKSIZE})"
    )
    parser.add_argument(
        "--shard-id", type=int, default=None,
        help="Shard index for split enumeration (0-based)"
    )
    parser.add_argument(
        "--num-shards", type=int, default=None,
        help="Total number of shards for split enumeration"
    )
    parser.add_argument(
        "--max-partitions", type=int, default=None,
        help="Stop after this many partitions"
    )
    parser.add_argument(
        "--tolerance", type=float, default=CLASSIFICATION_TOLERANCE,
        help=f"Sign tolerance for classification (default: {CLASSIFICATION_TOLERANCE})"
    )
    parser.add_argument(
        "--pivot-tol", type=float, default=PIVOT_TOLERANCE,
        help=f"Zero-pivot threshold (default: {PIVOT_TOLERANCE})"
    )
    parser.add_argument(
        "--verify", action="store_true",
        help="Re-verify feasible dictionaries with mpmath"
    )
    parser.add_argument(
        "--verify-dps", type=int, default=MPMATH_PRECISION,
        help=f"mpmath decimal places for --verify (default: {MPMATH_PRECISION})"
    )
    parser.add_argument(
        "--crosscheck", action="store_true",
        help="Compare the optimum with scipy.optimize.linprog"
    )
    parser.add_argument(
        "--output", type=str, default=None,
        help=f"Output CSV path (e.g. {DATA_DIR / 'vertices.csv'})"
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Print progress"
    )

    args = parser.parse_args(argv)

    try:
        problem = LPProblem.from_strings(
            args.constraints, args.bounds, args.objective, sense=args.sense,
        )
        config = EnumerationConfig(
            workers=args.workers,
            chunksize=args.chunksize,
            shard_id=args.shard_id,
            num_shards=args.num_shards,
            max_partitions=args.max_partitions,
            tolerance=args.tolerance,
            pivot_tol=args.pivot_tol,
            verify=args.verify,
            verify_dps=args.verify_dps,
            crosscheck=args.crosscheck,
            output=Path(args.output) if args.output else None,
            verbose=args.verbose,
        )
    except (MatrixError, ValueError) as exc:
        parser.error(str(exc))

    run_enumeration(problem, config)


if __name__ == "__main__":
    main()

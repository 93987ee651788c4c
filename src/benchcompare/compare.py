"""
Regression comparator.

Matches the entries of a current run against a baseline run by name and
computes a directional regression ratio for every matched pair. The ratio is
oriented so that a value above 1 always means the current run is worse.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from benchcompare import logger
from benchcompare.models import Benchmark, BenchmarkResult
from benchcompare.registries import is_bigger_better


@dataclass(frozen=True)
class ComparisonEntry:
    """One benchmark present in both runs."""

    name: str
    current: BenchmarkResult
    baseline: BenchmarkResult
    ratio: float


@dataclass(frozen=True)
class Comparison:
    """
    Result of comparing two benchmark runs.

    Attributes:
        current_commit_id: Commit of the current run
        baseline_commit_id: Commit of the baseline run
        entries: Matched pairs in the order of the current run
        unmatched_current: Names found only in the current run
        unmatched_baseline: Names found only in the baseline run
    """

    current_commit_id: str
    baseline_commit_id: str
    entries: Tuple[ComparisonEntry, ...]
    unmatched_current: Tuple[str, ...] = ()
    unmatched_baseline: Tuple[str, ...] = ()

    @property
    def ratios(self) -> Tuple[float, ...]:
        return tuple(entry.ratio for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


def regression_ratio(current: float, baseline: float, bigger_is_better: bool) -> float:
    """
    Compute the ratio of ``current`` to ``baseline`` oriented so > 1 is a regression.

    A zero denominator yields ``inf`` when the numerator is positive and
    ``1.0`` when both values are zero.
    """
    numerator, denominator = (baseline, current) if bigger_is_better else (current, baseline)
    if denominator == 0:
        return 1.0 if numerator == 0 else float("inf")
    return numerator / denominator


def compare_benchmarks(current: Benchmark, baseline: Benchmark) -> Comparison:
    """
    Match ``current`` against ``baseline`` by benchmark name.

    Entries present in only one of the runs are skipped. The direction policy
    is taken from ``current.tool``; a differing ``baseline.tool`` is not
    checked. Neither input is modified.
    """
    bigger_is_better = is_bigger_better(current.tool)

    baseline_by_name: Dict[str, BenchmarkResult] = {}
    for bench in baseline.benches:
        baseline_by_name.setdefault(bench.name, bench)

    entries = []
    unmatched_current = []
    for bench in current.benches:
        prev = baseline_by_name.get(bench.name)
        if prev is None:
            unmatched_current.append(bench.name)
            continue
        entries.append(ComparisonEntry(
            name=bench.name,
            current=bench,
            baseline=prev,
            ratio=regression_ratio(bench.value, prev.value, bigger_is_better),
        ))

    current_names = set(current.bench_names())
    unmatched_baseline = [name for name in baseline_by_name if name not in current_names]

    if unmatched_current or unmatched_baseline:
        logger.debug(
            f"Skipping unmatched benchmarks: current only {unmatched_current}, "
            f"baseline only {unmatched_baseline}"
        )

    return Comparison(
        current_commit_id=current.commit.id,
        baseline_commit_id=baseline.commit.id,
        entries=tuple(entries),
        unmatched_current=tuple(unmatched_current),
        unmatched_baseline=tuple(unmatched_baseline),
    )

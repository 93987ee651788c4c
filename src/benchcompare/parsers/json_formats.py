"""
Parsers for JSON benchmark reports (pytest-benchmark and Google Benchmark).

Both tools write a document with a top-level ``benchmarks`` array. A payload
that is not JSON at all is reported distinctly from a JSON document that
lacks the expected structure, and both differ from a document that simply
contains no benchmarks.
"""

import json
import math
from typing import Any, Callable, Dict, List, Tuple

from pydantic import ValidationError

from benchcompare import logger
from benchcompare.exceptions import MalformedInputError
from benchcompare.models import BenchmarkResult
from benchcompare.parsers.text_formats import DEFAULT_SOURCE, require_results
from benchcompare.utils.formatting import format_number

# Google Benchmark time_unit -> nanoseconds per unit
NANOSECONDS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
}

# pytest-benchmark reports seconds; (upper bound, scale, label) for display
_MEAN_UNITS: Tuple[Tuple[float, float, str], ...] = (
    (1.0e-6, 1e9, "nsec"),
    (1.0e-3, 1e6, "usec"),
    (1.0, 1e3, "msec"),
)


def _load_benchmarks(output: str, tool: str, hint: str) -> List[Any]:
    try:
        document = json.loads(output)
    except ValueError as e:
        raise MalformedInputError(
            f"Output file for '{tool}' must be JSON file generated by {hint}: {e}",
            error_code="PARSE_002",
            context={'tool': tool},
        ) from e

    benchmarks = document.get("benchmarks") if isinstance(document, dict) else None
    if not isinstance(benchmarks, list):
        raise MalformedInputError(
            f"Output file for '{tool}' must contain a 'benchmarks' array",
            error_code="PARSE_001",
            context={'tool': tool},
        )
    return benchmarks


def _collect(
    benchmarks: List[Any],
    tool: str,
    to_fields: Callable[[Dict[str, Any]], Dict[str, Any]],
) -> List[BenchmarkResult]:
    results = []
    for index, bench in enumerate(benchmarks):
        try:
            fields = to_fields(bench)
            if not math.isfinite(fields["value"]):
                logger.debug(f"Dropping {tool} result '{fields['name']}' with non-finite value {fields['value']!r}")
                continue
            results.append(BenchmarkResult(**fields))
        except (KeyError, TypeError, ValueError, AttributeError, ValidationError) as e:
            raise MalformedInputError(
                f"Unexpected structure of benchmark #{index} in '{tool}' output: {e}",
                error_code="PARSE_001",
                context={'tool': tool, 'index': index},
            ) from e
    return results


def human_readable_seconds(seconds: float) -> Tuple[float, str]:
    """
    Scale a duration in seconds to nsec, usec, msec or sec for display.

    >>> human_readable_seconds(0.5)
    (500.0, 'msec')
    """
    for upper, scale, label in _MEAN_UNITS:
        if seconds < upper:
            return seconds * scale, label
    return seconds, "sec"


def _pytest_fields(bench: Dict[str, Any]) -> Dict[str, Any]:
    stats = bench["stats"]
    mean = float(stats["mean"])

    ops = stats.get("ops")
    if ops is None:
        ops = 1.0 / mean if mean else math.inf

    scaled_mean, mean_unit = human_readable_seconds(mean)
    return {
        "name": bench.get("fullname") or bench["name"],
        "value": float(ops),
        "unit": "iter/sec",
        "range": f"stddev: {format_number(stats['stddev'])}",
        "extra": f"mean: {format_number(scaled_mean)} {mean_unit}\nrounds: {format_number(stats['rounds'])}",
    }


def parse_pytest(output: str, source: str = DEFAULT_SOURCE) -> List[BenchmarkResult]:
    """
    Extract pytest-benchmark results from ``--benchmark-json`` output.

    The value is throughput in iterations per second (``stats.ops``, or the
    inverse of ``stats.mean`` when ``ops`` is absent).
    """
    benchmarks = _load_benchmarks(output, "pytest", "--benchmark-json option")
    return require_results(_collect(benchmarks, "pytest", _pytest_fields), source)


def _googlecpp_fields(bench: Dict[str, Any]) -> Dict[str, Any]:
    time_unit = bench.get("time_unit", "ns")
    if time_unit not in NANOSECONDS_PER_UNIT:
        raise ValueError(f"unknown time_unit '{time_unit}'")
    factor = NANOSECONDS_PER_UNIT[time_unit]

    return {
        "name": bench["name"],
        "value": float(bench["real_time"] * factor),
        "unit": "ns/iter",
        "extra": (
            f"iterations: {format_number(bench['iterations'])}\n"
            f"cpu: {format_number(bench['cpu_time'] * factor)} ns\n"
            f"threads: {format_number(bench.get('threads', 1))}"
        ),
    }


def parse_googlecpp(output: str, source: str = DEFAULT_SOURCE) -> List[BenchmarkResult]:
    """Extract Google Benchmark results from ``--benchmark_format=json`` output; values in ns."""
    benchmarks = _load_benchmarks(output, "googlecpp", "--benchmark_format=json option")
    return require_results(_collect(benchmarks, "googlecpp", _googlecpp_fields), source)

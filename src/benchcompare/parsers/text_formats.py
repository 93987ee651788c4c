"""
Parsers for line-oriented benchmark tool output.

Every parser maps the raw text printed by one tool to an ordered list of
``BenchmarkResult``. The grammars below are the contracts with the tools'
output formats; lines that do not match are ignored, and an output without a
single usable entry is an error.
"""

import math
import re
from typing import List, Optional

from benchcompare import logger
from benchcompare.exceptions import EmptyResultError, MalformedInputError
from benchcompare.models import BenchmarkResult
from benchcompare.utils.formatting import parse_number

DEFAULT_SOURCE = "benchmark output"

# cargo bench (libtest):
#   test bench_fib_20 ... bench:      18,149 ns/iter (+/- 755)
CARGO_LINE = re.compile(
    r"^test (?P<name>.+?)\s+\.\.\. bench:\s+(?P<value>[0-9][0-9,.]*) ns/iter"
    r" \(\+/- (?P<range>[0-9][0-9,.]*)\)$"
)

# go test -bench:
#   BenchmarkFib10-8   5000000   325 ns/op   0 B/op   0 allocs/op
# The optional -<procs> suffix is GOMAXPROCS; B/op and allocs/op columns are ignored.
GO_LINE = re.compile(
    r"^(?P<name>Benchmark\S+?)(?:-(?P<procs>\d+))?\s+(?P<times>\d+)\s+"
    r"(?P<value>[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?)\s+(?P<unit>\S+)(?:\s+.*)?$"
)

# benchmark.js; the name is everything before the last " x ":
#   fib(10) x 1,431,759 ops/sec ±0.74% (93 runs sampled)
BENCHMARKJS_SEPARATOR = " x "
BENCHMARKJS_TAIL = re.compile(
    r"^ x (?P<value>[0-9][0-9,.]*)\s+(?P<unit>\S+)\s+(?P<range>(?:±|\+-)[^%]+%)"
    r" \((?P<samples>\d+) (?:runs sampled|samples)\)$"
)

# Catch2 console reporter, one table per test case section:
#   benchmark name          samples    iterations    estimated
#                           mean       low mean      high mean
#                           std dev    low std dev   high std dev
#   ------------------------------------------------------------
#   Fibonacci 20            100        2             8.4318 ms
#                           43.186 us  41.402 us     46.246 us
#                           11.719 us  7.847 us      17.747 us
#   <blank>
CATCH2_SECTION_HEADER = re.compile(r"^benchmark name +samples +iterations +(?:estimated|est run time)")
CATCH2_CASE_START = re.compile(r"(?P<samples>\d+) +(?P<iterations>\d+) +(?:\d+(?:\.\d+)?) (?:ns|us|ms|s)\s*$")
CATCH2_VALUES = re.compile(
    r"^ +(?P<value>\d+(?:\.\d+)?) (?P<unit>ns|us|ms|s)"
    r" +(?:\d+(?:\.\d+)?) (?:ns|us|ms|s) +(?:\d+(?:\.\d+)?) (?:ns|us|ms|s)"
)
CATCH2_SEPARATOR = re.compile(r"^-+$")
BLANK_LINE = re.compile(r"^\s*$")


def _finite(value: float, name: str, tool: str) -> Optional[float]:
    if math.isfinite(value):
        return value
    logger.debug(f"Dropping {tool} result '{name}' with non-finite value {value!r}")
    return None


def _parse_value(token: str, tool: str, source: str, lineno: int) -> float:
    try:
        return parse_number(token)
    except ValueError:
        raise MalformedInputError(
            f"Invalid number '{token}' in {tool} output at line {lineno} of {source}",
            context={'tool': tool, 'line': lineno, 'source': source},
        ) from None


def require_results(results: List[BenchmarkResult], source: str) -> List[BenchmarkResult]:
    """
    Return results unchanged, or fail when nothing was extracted.

    Raises:
        EmptyResultError: If ``results`` is empty
    """
    if not results:
        raise EmptyResultError(source)
    return results


def parse_cargo(output: str, source: str = DEFAULT_SOURCE) -> List[BenchmarkResult]:
    """Extract ``cargo bench`` results; values are ns/iter."""
    results = []
    for lineno, line in enumerate(output.splitlines(), start=1):
        m = CARGO_LINE.match(line)
        if m is None:
            continue
        name = m.group("name").strip()
        value = _finite(_parse_value(m.group("value"), "cargo", source, lineno), name, "cargo")
        if value is None:
            continue
        results.append(BenchmarkResult(
            name=name,
            value=value,
            unit="ns/iter",
            range=f"± {m.group('range').replace(',', '')}",
        ))
    return require_results(results, source)


def parse_go(output: str, source: str = DEFAULT_SOURCE) -> List[BenchmarkResult]:
    """Extract ``go test -bench`` results; ``extra`` holds iterations and procs."""
    results = []
    for line in output.splitlines():
        m = GO_LINE.match(line)
        if m is None:
            continue
        name = m.group("name")
        value = _finite(float(m.group("value")), name, "go")
        if value is None:
            continue
        extra = f"{m.group('times')} times"
        if m.group("procs") is not None:
            extra += f"\n{m.group('procs')} procs"
        results.append(BenchmarkResult(name=name, value=value, unit=m.group("unit"), extra=extra))
    return require_results(results, source)


def parse_benchmarkjs(output: str, source: str = DEFAULT_SOURCE) -> List[BenchmarkResult]:
    """Extract benchmark.js results; values are throughput (ops/sec)."""
    results = []
    for lineno, line in enumerate(output.splitlines(), start=1):
        idx = line.rfind(BENCHMARKJS_SEPARATOR)
        if idx <= 0:
            continue
        m = BENCHMARKJS_TAIL.match(line[idx:])
        if m is None:
            continue
        name = line[:idx].strip()
        value = _finite(_parse_value(m.group("value"), "benchmarkjs", source, lineno), name, "benchmarkjs")
        if value is None:
            continue
        results.append(BenchmarkResult(
            name=name,
            value=value,
            unit=m.group("unit"),
            range=m.group("range"),
            extra=f"{m.group('samples')} samples",
        ))
    return require_results(results, source)


class _Catch2Scanner:
    """Line cursor over Catch2 output that reports 1-based line numbers."""

    def __init__(self, output: str):
        self._lines = output.splitlines()
        self._pos = 0

    @property
    def line_number(self) -> int:
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._lines)

    def next_line(self) -> Optional[str]:
        if self.at_end():
            return None
        line = self._lines[self._pos]
        self._pos += 1
        return line

    def peek(self) -> Optional[str]:
        return None if self.at_end() else self._lines[self._pos]

    def skip_to_separator(self) -> None:
        while True:
            line = self.next_line()
            if line is None:
                raise MalformedInputError(
                    f"Separator '------' does not appear after benchmark suite at line {self.line_number}",
                    error_code="PARSE_003",
                    context={'tool': 'catch2'},
                )
            if CATCH2_SEPARATOR.match(line):
                return

    def _values_line(self, what: str, name: str) -> "re.Match[str]":
        line = self.next_line()
        m = CATCH2_VALUES.match(line) if line is not None else None
        if m is None:
            raise MalformedInputError(
                f"{what} values cannot be retrieved for benchmark '{name}' on parsing input "
                f"'{'EOF' if line is None else line}' at line {self.line_number}",
                error_code="PARSE_003",
                context={'tool': 'catch2'},
            )
        return m

    def next_case(self) -> Optional[BenchmarkResult]:
        """Parse one benchmark case, or return None at the end of a section."""
        line = self.peek()
        start = CATCH2_CASE_START.search(line) if line is not None else None
        if start is None:
            return None
        self.next_line()
        name = line[:start.start()].strip()

        mean = self._values_line("Mean", name)
        std_dev = self._values_line("Std-dev", name)

        blank = self.next_line()
        if blank is None or not BLANK_LINE.match(blank):
            raise MalformedInputError(
                f"Empty line is not following after 'std dev' line of benchmark '{name}' "
                f"at line {self.line_number}",
                error_code="PARSE_003",
                context={'tool': 'catch2'},
            )

        value = _finite(float(mean.group("value")), name, "catch2")
        if value is None:
            return self.next_case()

        return BenchmarkResult(
            name=name,
            value=value,
            unit=mean.group("unit"),
            range=f"± {std_dev.group('value')}",
            extra=f"{start.group('samples')} samples\n{start.group('iterations')} iterations",
        )


def parse_catch2(output: str, source: str = DEFAULT_SOURCE) -> List[BenchmarkResult]:
    """
    Extract Catch2 benchmark tables.

    Each case keeps the unit of its own mean column (ns, us, ms or s); the
    range is the std-dev figure printed on the following line.

    Raises:
        MalformedInputError: If a table section is structurally broken
        EmptyResultError: If no table section is present
    """
    scanner = _Catch2Scanner(output)
    results = []

    while not scanner.at_end():
        line = scanner.next_line()
        if not CATCH2_SECTION_HEADER.match(line):
            continue

        scanner.skip_to_separator()

        found = 0
        while True:
            case = scanner.next_case()
            if case is None:
                break
            results.append(case)
            found += 1

        if found == 0:
            raise MalformedInputError(
                f"No benchmark found for bench suite at line {scanner.line_number}. "
                f"Possibly mangled output from Catch2",
                error_code="PARSE_003",
                context={'tool': 'catch2'},
            )

    return require_results(results, source)

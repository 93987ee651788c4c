"""
parsers package - Benchmark tool output parsers.

Each parser is a pure function ``(output: str, source: str) -> list[BenchmarkResult]``
sharing no state with the others, so outputs of different tools can be parsed
concurrently.
"""

from .json_formats import parse_googlecpp, parse_pytest
from .text_formats import parse_benchmarkjs, parse_cargo, parse_catch2, parse_go

__all__ = [
    'parse_benchmarkjs',
    'parse_cargo',
    'parse_catch2',
    'parse_go',
    'parse_googlecpp',
    'parse_pytest',
]

"""
Tool registry binding every supported tool to its parser and regression direction.

The set of tools is closed: ``ToolType`` enumerates them and ``TOOL_SPECS``
holds exactly one ``ToolSpec`` per member. Dispatch is a single lookup, and
an import-time check keeps the table exhaustive.

Direction is decided per tool, not per unit. pytest results are throughput
(iter/sec), so pytest is bigger-is-better alongside benchmark.js.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Protocol, Union, runtime_checkable

from benchcompare.exceptions import UnsupportedToolError
from benchcompare.models import BenchmarkResult, ToolType
from benchcompare.parsers import (
    parse_benchmarkjs,
    parse_cargo,
    parse_catch2,
    parse_go,
    parse_googlecpp,
    parse_pytest,
)


@runtime_checkable
class OutputParser(Protocol):
    """Protocol for tool output parsers."""

    def __call__(self, output: str, source: str = ...) -> List[BenchmarkResult]:
        """
        Parse raw tool output.

        Args:
            output: Text printed or written by the benchmark tool
            source: Where the output came from, used in error messages

        Raises:
            MalformedInputError: If output does not match the tool's syntax
            EmptyResultError: If no entry could be extracted
        """
        ...


@dataclass(frozen=True)
class ToolSpec:
    """
    Static description of one supported tool.

    Attributes:
        tool: Tool identifier
        parser: Function turning the tool's output into results
        bigger_is_better: True when larger values mean better performance
        output_format: Short description of the expected output
    """

    tool: ToolType
    parser: OutputParser
    bigger_is_better: bool
    output_format: str


TOOL_SPECS: Mapping[ToolType, ToolSpec] = MappingProxyType({
    ToolType.CARGO: ToolSpec(ToolType.CARGO, parse_cargo, False, "cargo bench text"),
    ToolType.GO: ToolSpec(ToolType.GO, parse_go, False, "go test -bench text"),
    ToolType.BENCHMARKJS: ToolSpec(ToolType.BENCHMARKJS, parse_benchmarkjs, True, "benchmark.js text"),
    ToolType.PYTEST: ToolSpec(ToolType.PYTEST, parse_pytest, True, "pytest-benchmark --benchmark-json"),
    ToolType.GOOGLECPP: ToolSpec(ToolType.GOOGLECPP, parse_googlecpp, False, "Google Benchmark JSON"),
    ToolType.CATCH2: ToolSpec(ToolType.CATCH2, parse_catch2, False, "Catch2 console table"),
})

_missing = set(ToolType) - set(TOOL_SPECS)
if _missing:  # pragma: no cover
    raise RuntimeError(f"Tool registry is missing entries for {sorted(t.value for t in _missing)}")


def resolve_tool(tool: Union[str, ToolType]) -> ToolType:
    """
    Convert a tool identifier into a ``ToolType``.

    Raises:
        UnsupportedToolError: If ``tool`` is not a supported tool
    """
    if isinstance(tool, ToolType):
        return tool
    try:
        return ToolType(tool)
    except ValueError:
        raise UnsupportedToolError(tool) from None


def get_tool_spec(tool: Union[str, ToolType]) -> ToolSpec:
    """Look up the ``ToolSpec`` for a tool identifier."""
    return TOOL_SPECS[resolve_tool(tool)]


def is_bigger_better(tool: Union[str, ToolType]) -> bool:
    """Return True when larger values of ``tool`` mean better performance."""
    return get_tool_spec(tool).bigger_is_better


def supported_tools() -> List[str]:
    """Return the identifiers of all supported tools in declaration order."""
    return list(ToolType.values())


__all__ = [
    'OutputParser',
    'ToolSpec',
    'TOOL_SPECS',
    'resolve_tool',
    'get_tool_spec',
    'is_bigger_better',
    'supported_tools',
]

"""
Extraction dispatcher.

Selects the parser for a tool, reads the tool's output, and wraps the parsed
results with commit, date and tool metadata into a ``Benchmark`` record. A
read or parse failure is terminal for that extraction; nothing is retried and
no partial record is returned.
"""

import time
from pathlib import Path
from typing import Callable, Optional, Union

from benchcompare import logger
from benchcompare.exceptions import LoadError
from benchcompare.models import Benchmark, Commit, ToolType
from benchcompare.registries import get_tool_spec

PathLike = Union[str, Path]
OutputReader = Callable[[Path], str]
Clock = Callable[[], int]


def read_output_file(path: Path) -> str:
    """
    Read benchmark tool output as UTF-8 text.

    Raises:
        LoadError: If the file cannot be read or decoded
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LoadError(
            f"Benchmark output '{path}' is not UTF-8 text: {e}",
            error_code="LOAD_002",
            context={'file_path': path},
        ) from e
    except OSError as e:
        raise LoadError(
            f"Cannot read benchmark output '{path}': {e}",
            error_code="LOAD_001",
            context={'file_path': path},
        ) from e


def now_millis() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def extract_result(
    output_path: PathLike,
    tool: Union[str, ToolType],
    commit: Commit,
    *,
    reader: Optional[OutputReader] = None,
    clock: Optional[Clock] = None,
) -> Benchmark:
    """
    Extract a normalized ``Benchmark`` from one benchmark tool output.

    Args:
        output_path: Path of the file holding the tool's output
        tool: Tool identifier (one of ``ToolType``)
        commit: Commit the run belongs to, stored as given
        reader: Function returning the raw output for a path
        clock: Function returning the current time in epoch milliseconds

    Returns:
        Benchmark whose ``benches`` follow the order found in the output

    Raises:
        UnsupportedToolError: If ``tool`` is unknown (checked before any I/O)
        LoadError: If the output cannot be read
        MalformedInputError: If the output does not match the tool's syntax
        EmptyResultError: If no benchmark result was found
    """
    spec = get_tool_spec(tool)
    path = Path(output_path)

    output = (reader or read_output_file)(path)
    logger.debug(f"Read {len(output)} characters of {spec.tool} output from {path}")

    benches = spec.parser(output, source=str(path))
    logger.info(f"Extracted {len(benches)} {spec.tool} benchmark results from {path}")

    return Benchmark(
        commit=commit,
        date=(clock or now_millis)(),
        tool=spec.tool,
        benches=tuple(benches),
    )

"""
benchcompare Exception Hierarchy

Domain-specific exceptions for every stage of the extract-and-compare pipeline:

- BenchCompareError: Base exception for all benchcompare errors
- UnsupportedToolError: Unknown tool identifier at dispatch time
- MalformedInputError: Payload does not match the tool's expected syntax
- EmptyResultError: Syntactically valid payload without any usable entry
- LoadError: Benchmark output could not be read
- ConfigError: Job configuration (tool, paths, thresholds, CC list) is invalid
- CommitInfoError: Commit descriptor could not be derived from the event payload
- PublishError: Rendered report could not be delivered to its sink

Each exception carries an error code for programmatic handling and a context
dictionary for debugging. The human readable message always comes first in
``str(exc)`` so callers can match on its prefix.

Usage Examples:
    >>> try:
    ...     bench = extract_result(path, "pytest", commit)
    ... except MalformedInputError as e:
    ...     logger.error(f"Bad benchmark output: {e}")
    ...     if e.error_code == "PARSE_002":
    ...         # Output was not JSON
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional


class BenchCompareError(Exception):
    """
    Base exception class for all benchcompare errors.

    Attributes:
        error_code (str): Unique identifier for programmatic error handling
        context (Dict[str, Any]): Additional context information for debugging

    Error Codes:
        BENCH_001: Generic benchcompare error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "BENCH_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Initialize the error with message, error code, and context.

        Args:
            message: Human-readable error description
            error_code: Unique identifier for programmatic error handling
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = dict(context or {})

        if hasattr(sys, '_getframe'):
            frame = sys._getframe(1)
            while frame is not None and frame.f_code.co_name == "__init__":
                frame = frame.f_back
            if frame is not None:
                self.context.setdefault('source_function', frame.f_code.co_name)

    def with_context(self, context: Dict[str, Any]) -> 'BenchCompareError':
        """
        Add additional context to the exception and return self for chaining.

        Example:
            >>> raise LoadError("Cannot read output").with_context({
            ...     "file_path": "/tmp/out.txt",
            ... })
        """
        self.context.update(context)
        return self

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Return the message followed by error code and context details."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [Error Code: {self.error_code}, Context: {context_str}]"
        return f"{self.message} [Error Code: {self.error_code}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )


class UnsupportedToolError(BenchCompareError):
    """
    Raised when a tool identifier is not one of the supported tools.

    Error Codes:
        TOOL_001: Unexpected tool identifier
    """

    def __init__(
        self,
        tool: Any,
        error_code: str = "TOOL_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(f"FATAL: Unexpected tool: '{tool}'", error_code, context)
        self.tool = tool
        self.context['tool'] = tool


class MalformedInputError(BenchCompareError):
    """
    Raised when benchmark output does not match the tool's expected syntax.

    Error Codes:
        PARSE_001: Unexpected document structure
        PARSE_002: Output is not valid JSON
        PARSE_003: Text table structure is broken
    """

    def __init__(
        self,
        message: str,
        error_code: str = "PARSE_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)

        if context and 'tool' in context:
            self.context['tool'] = str(context['tool'])


class EmptyResultError(BenchCompareError):
    """
    Raised when a syntactically valid payload yields zero usable entries.

    Error Codes:
        PARSE_004: No benchmark result found
    """

    def __init__(
        self,
        source: Any,
        error_code: str = "PARSE_004",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(f"No benchmark result was found in {source}", error_code, context)
        self.source = str(source)


class LoadError(BenchCompareError):
    """
    Raised when benchmark output cannot be read.

    Error Codes:
        LOAD_001: File not found or inaccessible
        LOAD_002: File is not valid UTF-8 text
    """

    def __init__(
        self,
        message: str,
        error_code: str = "LOAD_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)

        if context and isinstance(context.get('file_path'), (str, Path)):
            self.context['file_path'] = str(context['file_path'])


class ConfigError(BenchCompareError):
    """
    Raised when job configuration cannot be loaded or validated.

    Error Codes:
        CONFIG_001: Required input missing or empty
        CONFIG_002: YAML parsing error
        CONFIG_003: Pydantic validation failure
        CONFIG_004: Invalid file path input
        CONFIG_005: Alert threshold greater than fail threshold
        CONFIG_006: Invalid percentage or boolean input
        CONFIG_007: Comment option enabled without a report sink
        CONFIG_008: Invalid CC user name
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)

        if context:
            if isinstance(context.get('config_path'), (str, Path)):
                self.context['config_path'] = str(context['config_path'])
            if 'input_name' in context:
                self.context['input_name'] = context['input_name']


class CommitInfoError(BenchCompareError):
    """
    Raised when commit or repository information is missing from the event payload.

    Error Codes:
        GIT_001: Pull request information missing
        GIT_002: Repository information missing
        GIT_003: Event payload file unreadable
    """

    def __init__(
        self,
        message: str,
        error_code: str = "GIT_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class PublishError(BenchCompareError):
    """
    Raised when a rendered report cannot be delivered.

    Publishing failures never change the regression verdict that was
    already computed.

    Error Codes:
        PUBLISH_001: Sink rejected the report
    """

    def __init__(
        self,
        message: str,
        error_code: str = "PUBLISH_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


def log_and_raise(
    exception: BenchCompareError,
    logger: Optional[Any] = None,
    level: str = "error"
) -> None:
    """
    Log an exception with its context and then raise it.

    Args:
        exception: The exception to log and raise
        logger: Logger instance to use (optional)
        level: Log level ("error", "warning", "critical")

    Raises:
        The provided exception after logging
    """
    if logger is not None:
        log_method = getattr(logger, level, logger.error)
        log_method(f"{exception.__class__.__name__}: {exception.describe()}")

    raise exception


__all__ = [
    'BenchCompareError',
    'UnsupportedToolError',
    'MalformedInputError',
    'EmptyResultError',
    'LoadError',
    'ConfigError',
    'CommitInfoError',
    'PublishError',
    'log_and_raise',
]

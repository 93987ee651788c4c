"""
benchcompare - Benchmark output extraction and regression alerting for CI.

This module owns the Loguru logger configuration shared by the whole package.
Logging can be reconfigured from tests (pytest.monkeypatch, caplog bridges) and
from the command line entry point; it is auto-initialized only when the package
is imported outside of a pytest session.
"""

__version__ = "0.1.0"

import os
import sys
import warnings
from pathlib import Path
from typing import Dict, Optional, TextIO, Union

from loguru import logger


# --- Logger Configuration Classes and Types ---

class LoggingConfigError(Exception):
    """Exception raised when logging configuration fails validation or setup."""
    pass


class LoggerState:
    """
    Tracks which Loguru sinks were installed by benchcompare.

    Keeping the sink ids lets tests and the CLI reconfigure logging without
    leaking handlers between runs.
    """

    def __init__(self):
        self._initialized = False
        self._test_mode = False
        self._sink_ids = []

    def is_initialized(self) -> bool:
        """Check if logger has been initialized."""
        return self._initialized

    def is_test_mode(self) -> bool:
        """Check if logger is in test mode."""
        return self._test_mode

    def mark_initialized(self, test_mode: bool = False):
        """Mark logger as initialized."""
        self._initialized = True
        self._test_mode = test_mode

    def add_sink_id(self, sink_id: int):
        """Track sink IDs for cleanup."""
        self._sink_ids.append(sink_id)

    def reset(self):
        """Reset logger state for test isolation."""
        self._initialized = False
        self._test_mode = False
        self._sink_ids.clear()


_logger_state = LoggerState()

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


# --- Configuration Validation Functions ---

def validate_log_level(level: str) -> str:
    """
    Validate a log level name.

    Args:
        level: Log level string to validate (case insensitive)

    Returns:
        Upper-cased log level

    Raises:
        LoggingConfigError: If log level is invalid
    """
    level_upper = str(level).upper()

    if level_upper not in VALID_LOG_LEVELS:
        raise LoggingConfigError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    return level_upper


# --- Core Logging Configuration Functions ---

def configure_console_logging(
    level: str = "INFO",
    format_template: Optional[str] = None,
    colorize: bool = True,
    destination: TextIO = sys.stderr
) -> int:
    """
    Configure the console logging sink.

    Args:
        level: Log level for console output
        format_template: Custom format template (uses default if None)
        colorize: Enable colored console output
        destination: Console destination (default: sys.stderr)

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)

        if format_template is None:
            format_template = (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{module}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
            )

        sink_id = logger.add(
            destination,
            level=validated_level,
            format=format_template,
            colorize=colorize
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure console logging: {e}") from e


def configure_file_logging(
    log_file_path: Union[str, Path],
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "7 days",
    encoding: str = "utf-8"
) -> int:
    """
    Configure a rotating file logging sink.

    Args:
        log_file_path: Path to log file (parent directories are created)
        level: Log level for file output
        rotation: Log rotation setting
        retention: Log retention setting
        encoding: File encoding

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)
        path = Path(log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sink_id = logger.add(
            str(path),
            rotation=rotation,
            retention=retention,
            level=validated_level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            encoding=encoding
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure file logging: {e}") from e


# --- Test-Specific Entry Points ---

def configure_test_logging(
    console_level: str = "DEBUG",
    console_destination: Optional[TextIO] = None,
) -> Dict[str, int]:
    """
    Configure logging for test scenarios.

    Removes every existing sink, then installs a colorless console sink so that
    test output is deterministic.

    Args:
        console_level: Console log level for tests
        console_destination: Console destination (None uses sys.stderr)

    Returns:
        Dictionary mapping sink types to sink IDs
    """
    reset_logging()

    sink_ids = {
        'console': configure_console_logging(
            level=console_level,
            destination=console_destination if console_destination is not None else sys.stderr,
            colorize=False,
        )
    }

    _logger_state.mark_initialized(test_mode=True)
    return sink_ids


def reset_logging():
    """
    Remove all Loguru sinks and forget the tracked state.

    Raises:
        LoggingConfigError: If reset fails
    """
    try:
        logger.remove()
        _logger_state.reset()
    except Exception as e:
        raise LoggingConfigError(f"Failed to reset logging configuration: {e}") from e


# --- Production Logging Initialization ---

def initialize_logging(
    console_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
    file_level: str = "DEBUG",
) -> Dict[str, int]:
    """
    Initialize logging for command line runs.

    Console output always goes to stderr so that rendered reports on stdout
    stay clean. A file sink is added when ``log_dir`` is given or when the
    ``BENCHCOMPARE_LOG_DIR`` environment variable is set.

    Args:
        console_level: Console logging level
        log_dir: Directory for log files
        file_level: File logging level

    Returns:
        Dictionary mapping sink types to sink IDs

    Raises:
        LoggingConfigError: If initialization fails
    """
    reset_logging()

    sink_ids = {'console': configure_console_logging(level=console_level)}

    log_dir = log_dir or os.environ.get("BENCHCOMPARE_LOG_DIR")
    if log_dir:
        sink_ids['file'] = configure_file_logging(
            Path(log_dir) / "benchcompare_{time:YYYYMMDD}.log",
            level=file_level,
        )

    _logger_state.mark_initialized(test_mode=False)
    return sink_ids


# --- Module-Level Logger State Access ---

def get_logger_state() -> LoggerState:
    """Get current logger state for test inspection."""
    return _logger_state


def is_logging_initialized() -> bool:
    """Check if logging has been initialized."""
    return _logger_state.is_initialized()


def _is_pytest_running() -> bool:
    return "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ


def _auto_initialize_logging():
    if not _logger_state.is_initialized() and not _is_pytest_running():
        try:
            initialize_logging()
        except LoggingConfigError as e:
            warnings.warn(f"Failed to initialize logging: {e}. Using basic stderr logging.")
            logger.add(sys.stderr, level="INFO")
            _logger_state.mark_initialized(test_mode=False)


_auto_initialize_logging()

# --- End Logger Configuration ---


# Public API. Imported after the logger so that submodules can use
# ``from benchcompare import logger`` during their own import.
from benchcompare.exceptions import (  # noqa: E402
    BenchCompareError,
    CommitInfoError,
    ConfigError,
    EmptyResultError,
    LoadError,
    MalformedInputError,
    PublishError,
    UnsupportedToolError,
)
from benchcompare.models import (  # noqa: E402
    Benchmark,
    BenchmarkResult,
    Commit,
    CommitUser,
    ToolType,
)
from benchcompare.extract import extract_result  # noqa: E402
from benchcompare.compare import Comparison, ComparisonEntry, compare_benchmarks  # noqa: E402
from benchcompare.alert import (  # noqa: E402
    AlertOutcome,
    AlertReport,
    Thresholds,
    build_alert_report,
    compare_and_alert,
)

__all__ = [
    '__version__',
    'logger',
    'LoggingConfigError',
    'configure_console_logging',
    'configure_file_logging',
    'configure_test_logging',
    'reset_logging',
    'initialize_logging',
    'get_logger_state',
    'is_logging_initialized',
    'BenchCompareError',
    'CommitInfoError',
    'ConfigError',
    'EmptyResultError',
    'LoadError',
    'MalformedInputError',
    'PublishError',
    'UnsupportedToolError',
    'Benchmark',
    'BenchmarkResult',
    'Commit',
    'CommitUser',
    'ToolType',
    'extract_result',
    'Comparison',
    'ComparisonEntry',
    'compare_benchmarks',
    'AlertOutcome',
    'AlertReport',
    'Thresholds',
    'build_alert_report',
    'compare_and_alert',
]

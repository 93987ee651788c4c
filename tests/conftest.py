"""
Pytest configuration for the benchcompare test suite.

Provides:
- Loguru to caplog bridge so tests can assert on log output
- A Hypothesis profile for property-based tests
- Factories for commits, benchmark results and benchmark runs
- Access to the golden tool outputs under ``tests/data``
"""

import contextlib
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, Union

# Add the src directory to the Python path
src_path = str(Path(__file__).parent.parent / "src")
sys.path.insert(0, src_path)

import pytest
from hypothesis import settings
from loguru import logger

from benchcompare.models import Benchmark, BenchmarkResult, Commit, CommitUser, ToolType

settings.register_profile("benchcompare", max_examples=100, deadline=None)
settings.load_profile("benchcompare")

DATA_DIR = Path(__file__).parent / "data"


# ============================================================================
# LOGURU INTEGRATION
# ============================================================================

@pytest.fixture(autouse=True, scope="function")
def capture_loguru_logs_globally(caplog):
    """
    Route Loguru records into pytest's caplog.

    The handler is added per test and removed afterwards so records never
    leak between tests.
    """
    class PropagateHandler(logging.Handler):
        def emit(self, record):
            logging.getLogger(record.name or "benchcompare").handle(record)

    caplog.set_level(logging.DEBUG)
    handler_id = logger.add(
        PropagateHandler(),
        format="{message}",
        level="DEBUG",
        catch=True,
        enqueue=False,
    )

    yield

    with contextlib.suppress(ValueError):
        logger.remove(handler_id)


# ============================================================================
# DATA FIXTURES
# ============================================================================

@pytest.fixture(scope="session")
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture(scope="session")
def extract_data_dir() -> Path:
    return DATA_DIR / "extract"


def _commit(commit_id: str = "123456789abcdef", **overrides) -> Commit:
    user = CommitUser(name="user", username="user", email="user@example.com")
    fields = dict(
        id=commit_id,
        message="this is dummy",
        timestamp="2020-11-15T01:23:45+09:00",
        url=f"https://github.com/user/repo/commit/{commit_id}",
        author=user,
        committer=user,
    )
    fields.update(overrides)
    return Commit(**fields)


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory for commits; the first positional argument is the commit id."""
    return _commit


@pytest.fixture
def dummy_commit() -> Commit:
    return _commit()


BenchSpec = Union[BenchmarkResult, Tuple[str, float]]


def _bench(name: str, value: float, unit: str = "ns/iter", range: Optional[str] = "± 20", extra=None):
    return BenchmarkResult(name=name, value=value, unit=unit, range=range, extra=extra)


@pytest.fixture
def make_result() -> Callable[..., BenchmarkResult]:
    return _bench


@pytest.fixture
def make_benchmark() -> Callable[..., Benchmark]:
    """
    Factory for benchmark runs.

    ``benches`` holds ``BenchmarkResult`` objects or ``(name, value)`` pairs;
    pairs are expanded with the ``unit`` and ``range`` given to the factory.
    """
    def factory(
        commit_id: str,
        benches: Iterable[BenchSpec],
        tool: Union[str, ToolType] = ToolType.CARGO,
        unit: str = "ns/iter",
        range: Optional[str] = "± 20",
        date: int = 1712131503296,
    ) -> Benchmark:
        results = tuple(
            bench if isinstance(bench, BenchmarkResult) else _bench(bench[0], bench[1], unit=unit, range=range)
            for bench in benches
        )
        return Benchmark(commit=_commit(commit_id), date=date, tool=tool, benches=results)

    return factory

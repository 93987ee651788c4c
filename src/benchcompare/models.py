"""
Pydantic models for normalized benchmark records.

A ``Benchmark`` is one run's full result set: the commit it belongs to, the
time it was extracted, the tool that produced the output, and the ordered
``BenchmarkResult`` entries found in that output. All models are frozen; a
record is built once per extraction and never mutated afterwards.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator


class ToolType(str, Enum):
    """Benchmark tools whose output can be extracted."""

    CARGO = "cargo"
    GO = "go"
    BENCHMARKJS = "benchmarkjs"
    PYTEST = "pytest"
    GOOGLECPP = "googlecpp"
    CATCH2 = "catch2"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def values(cls) -> Tuple[str, ...]:
        return tuple(tool.value for tool in cls)


class CommitUser(BaseModel):
    """Author or committer of a commit."""

    model_config = ConfigDict(frozen=True)

    name: str
    username: str
    email: Optional[str] = None


class Commit(BaseModel):
    """
    Identifies the code revision a benchmark run belongs to.

    Only ``id`` is interpreted by the comparator (report table headers); the
    other fields are carried through for consumers of the record.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    message: str = ""
    timestamp: str = ""
    url: str = ""
    author: CommitUser
    committer: CommitUser


class BenchmarkResult(BaseModel):
    """
    One measured metric.

    Attributes:
        name: Identifier used to match entries across runs
        value: Finite measured magnitude
        unit: Display unit (e.g. ``ns/iter``, ``ops/sec``)
        range: Optional variance description, display only
        extra: Optional multi-line annotation, display only
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    value: FiniteFloat
    unit: str = Field(min_length=1)
    range: Optional[str] = None
    extra: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Benchmark result name must not be blank")
        return v


class Benchmark(BaseModel):
    """
    One run's normalized result set.

    ``tool`` decides both which parser produced ``benches`` and which
    regression direction applies when this record is compared.
    """

    model_config = ConfigDict(frozen=True)

    commit: Commit
    date: int = Field(ge=0, description="Milliseconds since the epoch")
    tool: ToolType
    benches: Tuple[BenchmarkResult, ...]

    def bench_names(self) -> Tuple[str, ...]:
        return tuple(bench.name for bench in self.benches)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible representation of the record."""
        return self.model_dump(mode="json", exclude_none=True)

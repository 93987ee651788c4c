"""
Pydantic configuration model for a compare-and-alert job.

``AlertConfig`` validates everything the engine consumes from its job
configuration: the tool, the two benchmark output files, thresholds, the CC
list and the reporting switches. Validation failures that correspond to a
known job input raise ``ConfigError`` with that input's message; malformed
values that pydantic itself rejects are converted by ``create_config``.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from benchcompare import logger
from benchcompare.alert import DEFAULT_BENCHMARK_NAME, Thresholds
from benchcompare.exceptions import ConfigError
from benchcompare.models import ToolType
from benchcompare.utils.formatting import format_number


def resolve_file_path(value: Any, input_name: str) -> Path:
    """
    Expand ``~``, make ``value`` absolute and require an existing regular file.

    Raises:
        ConfigError: If the path cannot be resolved or is not a file
    """
    raw = str(value)
    try:
        path = Path(os.path.expanduser(raw)).resolve()
    except (OSError, RuntimeError) as e:
        raise ConfigError(
            f"Invalid value for '{input_name}' input: Cannot resolve '{raw}': {e}",
            error_code="CONFIG_004",
            context={'input_name': input_name},
        ) from e

    if raw.startswith("~") and path == Path(raw).resolve():
        raise ConfigError(
            f"Invalid value for '{input_name}' input: Cannot resolve '~' in {raw}",
            error_code="CONFIG_004",
            context={'input_name': input_name},
        )

    try:
        stat_ok = path.is_file()
        exists = stat_ok or path.exists()
    except OSError as e:
        raise ConfigError(
            f"Invalid value for '{input_name}' input: Cannot stat '{path}': {e}",
            error_code="CONFIG_004",
            context={'input_name': input_name},
        ) from e

    if not exists:
        raise ConfigError(
            f"Invalid value for '{input_name}' input: Cannot stat '{path}': no such file",
            error_code="CONFIG_004",
            context={'input_name': input_name},
        )
    if not stat_ok:
        raise ConfigError(
            f"Invalid value for '{input_name}' input: Specified path '{path}' is not a file",
            error_code="CONFIG_004",
            context={'input_name': input_name},
        )
    return path


class AlertConfig(BaseModel):
    """
    Validated job configuration.

    Attributes:
        name: Benchmark suite name shown in reports
        tool: Tool that produced both output files
        pr_benchmark_file_path: Output of the change under test
        base_benchmark_file_path: Output of the base revision
        comment_always: Publish the comparison table on every run
        comment_on_alert: Publish the report when an alert is raised
        fail_on_alert: Fail the job when the fail threshold is exceeded
        alert_threshold: Ratio above which a regression is reported
        fail_threshold: Ratio above which the job fails (defaults to alert_threshold)
        alert_comment_cc_users: ``@``-prefixed handles mentioned in alerts
        summary_file: Markdown file that receives published reports
        workflow: Workflow name used for the report footer link
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = DEFAULT_BENCHMARK_NAME
    tool: ToolType
    pr_benchmark_file_path: Path
    base_benchmark_file_path: Path
    comment_always: bool = False
    comment_on_alert: bool = False
    fail_on_alert: bool = False
    alert_threshold: float = Field(ge=0)
    fail_threshold: Optional[float] = Field(default=None, ge=0)
    alert_comment_cc_users: List[str] = Field(default_factory=list)
    summary_file: Optional[Path] = None
    workflow: str = ""

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ConfigError("Name must not be empty", error_code="CONFIG_001", context={'input_name': 'name'})
        return v

    @field_validator('tool', mode='before')
    @classmethod
    def validate_tool(cls, v: Any) -> Any:
        if isinstance(v, ToolType) or v in ToolType.values():
            return v
        raise ConfigError(
            f"Invalid value '{v}' for 'tool' input. It must be one of {', '.join(ToolType.values())}",
            error_code="CONFIG_001",
            context={'input_name': 'tool'},
        )

    @field_validator('pr_benchmark_file_path', mode='before')
    @classmethod
    def validate_pr_file(cls, v: Any) -> Path:
        return resolve_file_path(v, 'pr-benchmark-file-path')

    @field_validator('base_benchmark_file_path', mode='before')
    @classmethod
    def validate_base_file(cls, v: Any) -> Path:
        return resolve_file_path(v, 'base-benchmark-file-path')

    @field_validator('alert_comment_cc_users')
    @classmethod
    def validate_cc_users(cls, v: List[str]) -> List[str]:
        for user in v:
            if not user.startswith('@'):
                raise ConfigError(
                    f"User name in 'alert-comment-cc-users' input must start with '@' but got '{user}'",
                    error_code="CONFIG_008",
                    context={'input_name': 'alert-comment-cc-users'},
                )
        return v

    @model_validator(mode='before')
    @classmethod
    def default_fail_threshold(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get('fail_threshold') is None and 'alert_threshold' in data:
            data = {**data, 'fail_threshold': data['alert_threshold']}
        return data

    @model_validator(mode='after')
    def validate_relations(self) -> 'AlertConfig':
        if self.fail_threshold is not None and self.alert_threshold > self.fail_threshold:
            raise ConfigError(
                f"'alert-threshold' value must be smaller than 'fail-threshold' value but got "
                f"{format_number(self.alert_threshold)} > {format_number(self.fail_threshold)}",
                error_code="CONFIG_005",
            )
        for option, enabled in (('comment-always', self.comment_always), ('comment-on-alert', self.comment_on_alert)):
            if enabled and self.summary_file is None:
                raise ConfigError(
                    f"'{option}' is enabled but 'summary-file' is not set. "
                    f"Please give a file to write the report to",
                    error_code="CONFIG_007",
                    context={'input_name': option},
                )
        return self

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(alert_threshold=self.alert_threshold, fail_threshold=self.fail_threshold)


def create_config(data: Dict[str, Any]) -> AlertConfig:
    """
    Build an ``AlertConfig`` from a mapping, reporting every failure as ``ConfigError``.

    Raises:
        ConfigError: If any value is missing or invalid
    """
    try:
        config = AlertConfig(**data)
    except ValidationError as e:
        error_details = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error['loc'])
            error_details.append(f"Field '{field_path}': {error['msg']}")

        detailed_error = "Configuration validation failed:\n" + "\n".join(error_details)
        logger.error(detailed_error)
        raise ConfigError(
            detailed_error,
            error_code="CONFIG_003",
            context={'validation_errors': error_details},
        ) from e

    logger.debug(f"Configuration validated for tool {config.tool} and benchmark '{config.name}'")
    return config

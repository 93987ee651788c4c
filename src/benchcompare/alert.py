"""
Alert formatting and the compare-and-alert entry point.

``build_alert_report`` is a pure function: given a ``Comparison`` and the
thresholds it decides alert/fail status per entry and renders the Markdown
report as an immutable ``AlertReport``. ``compare_and_alert`` chains the
comparator and the formatter and hands the rendered text to an optional
publisher.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from benchcompare import logger
from benchcompare.compare import Comparison, compare_benchmarks
from benchcompare.exceptions import BenchCompareError, ConfigError, PublishError
from benchcompare.models import Benchmark, BenchmarkResult
from benchcompare.publish import ReportPublisher
from benchcompare.utils.formatting import format_number, format_ratio

DEFAULT_BENCHMARK_NAME = "Benchmark"

ALERT_TITLE = "# **Performance Alert**"
REPORT_TITLE = "# Performance Report"


@dataclass(frozen=True)
class Thresholds:
    """
    Ratio thresholds for alerting and failing.

    An entry alerts when its ratio is strictly greater than
    ``alert_threshold`` and fails when it is strictly greater than
    ``fail_threshold``. ``alert_threshold == 0`` reports every run.
    """

    alert_threshold: float
    fail_threshold: float

    def __post_init__(self):
        if self.alert_threshold < 0 or self.fail_threshold < 0:
            raise ConfigError(
                f"Thresholds must not be negative but got alert {self.alert_threshold}, "
                f"fail {self.fail_threshold}",
                error_code="CONFIG_005",
            )
        if self.fail_threshold < self.alert_threshold:
            raise ConfigError(
                f"'alert-threshold' value must be smaller than 'fail-threshold' value but got "
                f"{format_number(self.alert_threshold)} > {format_number(self.fail_threshold)}",
                error_code="CONFIG_005",
            )

    @classmethod
    def single(cls, threshold: float) -> "Thresholds":
        """Thresholds where every alert is also a failure."""
        return cls(alert_threshold=threshold, fail_threshold=threshold)


@dataclass(frozen=True)
class AlertReport:
    """
    Verdict and rendered report for one comparison.

    Attributes:
        report_text: Markdown report, or None when nothing alerted
        exceeded_alert: At least one entry exceeded the alert threshold
        exceeded_fail: At least one entry exceeded the fail threshold
        per_entry_alert: Alert flag per comparison entry, in entry order
        per_entry_fail: Fail flag per comparison entry, in entry order
    """

    report_text: Optional[str]
    exceeded_alert: bool
    exceeded_fail: bool
    per_entry_alert: Tuple[bool, ...]
    per_entry_fail: Tuple[bool, ...]

    @property
    def alert_count(self) -> int:
        return sum(self.per_entry_alert)

    @property
    def fail_count(self) -> int:
        return sum(self.per_entry_fail)


@dataclass(frozen=True)
class AlertOutcome:
    """
    Everything ``compare_and_alert`` learned about one pair of runs.

    ``should_fail`` is the CI gate signal; ``publish_error`` records a sink
    failure without changing it.
    """

    comparison: Comparison
    alert: AlertReport
    should_fail: bool
    published_to: Optional[str] = None
    publish_error: Optional[PublishError] = None

    @property
    def report(self) -> Optional[str]:
        return self.alert.report_text


def _value_cell(result: BenchmarkResult) -> str:
    cell = f"`{format_number(result.value)}` {result.unit}"
    if result.range:
        cell += f" (`{result.range}`)"
    return cell


def build_comparison_table(comparison: Comparison) -> Tuple[str, ...]:
    """Render every matched entry as a Markdown table, current order."""
    lines = [
        f"| Benchmark suite | Current: {comparison.current_commit_id} "
        f"| Previous: {comparison.baseline_commit_id} | Ratio |",
        "|-|-|-|-|",
    ]
    for entry in comparison.entries:
        lines.append(
            f"| `{entry.name}` | {_value_cell(entry.current)} | {_value_cell(entry.baseline)} "
            f"| `{format_ratio(entry.ratio)}` |"
        )
    return tuple(lines)


def _footer(workflow_url: str) -> str:
    return f"This comment was automatically generated by [workflow]({workflow_url})."


def _has_display_name(display_name: Optional[str]) -> bool:
    return bool(display_name) and display_name != DEFAULT_BENCHMARK_NAME


def build_alert_report(
    comparison: Comparison,
    thresholds: Thresholds,
    *,
    display_name: Optional[str] = None,
    cc_users: Sequence[str] = (),
    workflow_url: str = "",
) -> AlertReport:
    """
    Decide alert/fail status and render the regression report.

    Args:
        comparison: Output of ``compare_benchmarks``
        thresholds: Alert and fail thresholds (fail >= alert)
        display_name: Name of the benchmark suite shown in the report
        cc_users: ``@``-prefixed handles mentioned at the end of the report
        workflow_url: Link to the workflow that produced the report

    Returns:
        AlertReport with ``report_text`` None when no entry alerted
    """
    per_entry_alert = tuple(entry.ratio > thresholds.alert_threshold for entry in comparison.entries)
    per_entry_fail = tuple(entry.ratio > thresholds.fail_threshold for entry in comparison.entries)
    exceeded_alert = any(per_entry_alert)
    exceeded_fail = any(per_entry_fail)

    if not exceeded_alert:
        return AlertReport(None, False, False, per_entry_alert, per_entry_fail)

    title = REPORT_TITLE if thresholds.alert_threshold == 0 else ALERT_TITLE
    suite = f" **'{display_name}'**" if _has_display_name(display_name) else ""

    lines = [
        title,
        "",
        f"Possible performance regression was detected for benchmark{suite}.",
        "Benchmark result of this commit is worse than the previous benchmark result exceeding "
        f"threshold `{format_ratio(thresholds.alert_threshold)}`.",
        "",
        *build_comparison_table(comparison),
        "",
        _footer(workflow_url),
    ]
    if cc_users:
        lines.extend(["", f"CC: {', '.join(cc_users)}"])

    text = "\n".join(lines)
    # With equal thresholds every alert is also a failure, so no prefix
    if exceeded_fail and thresholds.fail_threshold != thresholds.alert_threshold:
        text = (
            f"{sum(per_entry_fail)} of {sum(per_entry_alert)} alerts exceeded the failure threshold "
            f"`{format_ratio(thresholds.fail_threshold)}` specified by fail-threshold input:\n\n{text}"
        )

    return AlertReport(text, exceeded_alert, exceeded_fail, per_entry_alert, per_entry_fail)


def build_summary_report(
    comparison: Comparison,
    *,
    display_name: Optional[str] = None,
    workflow_url: str = "",
) -> str:
    """Render the full comparison table regardless of thresholds."""
    lines = [
        f"# {display_name or DEFAULT_BENCHMARK_NAME}",
        "",
        "<details>",
        "",
        *build_comparison_table(comparison),
        "",
        "</details>",
        "",
        _footer(workflow_url),
    ]
    return "\n".join(lines)


def _publish(publisher: ReportPublisher, commit_id: str, body: str):
    try:
        return publisher.publish(commit_id, body), None
    except BenchCompareError as e:
        error = e if isinstance(e, PublishError) else PublishError(str(e), context=e.context)
    except OSError as e:
        error = PublishError(f"Failed to publish report for commit {commit_id}: {e}")
    logger.error(f"Publishing report failed: {error.describe()}")
    return None, error


def compare_and_alert(
    current: Benchmark,
    baseline: Benchmark,
    thresholds: Thresholds,
    *,
    display_name: Optional[str] = None,
    cc_users: Sequence[str] = (),
    fail_on_alert: bool = True,
    comment_always: bool = False,
    comment_on_alert: bool = False,
    publisher: Optional[ReportPublisher] = None,
    workflow_url: str = "",
) -> AlertOutcome:
    """
    Compare two runs, render the alert report and optionally publish it.

    Args:
        current: Benchmark of the change under test
        baseline: Benchmark of the base revision
        thresholds: Alert and fail thresholds
        display_name: Benchmark suite name used in the report
        cc_users: Handles mentioned in the report
        fail_on_alert: Turn fail-threshold violations into ``should_fail``
        comment_always: Publish the full comparison table on every run
        comment_on_alert: Publish the alert report when an entry alerted
        publisher: Report sink used by the comment options
        workflow_url: Link placed in the report footer

    Returns:
        AlertOutcome with the comparison, verdict and publishing status

    Raises:
        ConfigError: If a comment option is enabled without a publisher
    """
    if (comment_always or comment_on_alert) and publisher is None:
        option = "comment-always" if comment_always else "comment-on-alert"
        raise ConfigError(
            f"'{option}' input is set but no report publisher is configured",
            error_code="CONFIG_007",
        )

    comparison = compare_benchmarks(current, baseline)
    alert = build_alert_report(
        comparison,
        thresholds,
        display_name=display_name,
        cc_users=cc_users,
        workflow_url=workflow_url,
    )

    published_to = None
    publish_error = None
    if comment_always:
        body = build_summary_report(comparison, display_name=display_name, workflow_url=workflow_url)
        published_to, publish_error = _publish(publisher, current.commit.id, body)

    if alert.exceeded_alert:
        logger.warning(
            f"{alert.alert_count} of {len(comparison)} benchmarks exceeded the alert threshold "
            f"{format_ratio(thresholds.alert_threshold)}"
        )
        if comment_on_alert and publish_error is None:
            published_to, publish_error = _publish(publisher, current.commit.id, alert.report_text)
    else:
        logger.info(f"No performance alert found across {len(comparison)} matched benchmarks")

    should_fail = fail_on_alert and alert.exceeded_fail
    if alert.exceeded_alert and not alert.exceeded_fail:
        logger.info(
            f"{alert.alert_count} alerts were found but none exceeded the failure threshold "
            f"{format_ratio(thresholds.fail_threshold)}"
        )

    return AlertOutcome(
        comparison=comparison,
        alert=alert,
        should_fail=should_fail,
        published_to=published_to,
        publish_error=publish_error,
    )

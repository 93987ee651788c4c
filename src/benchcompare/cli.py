"""
Command line entry point.

Extracts the pull request and base benchmark outputs, compares them and
reports the verdict through the exit status:

* ``0`` no alert, or alerts below the failure threshold
* ``1`` the failure threshold was exceeded (with ``fail-on-alert``) or the
  report could not be published
* ``2`` invalid configuration, unreadable output or unknown tool

Without ``--tool``/``--pr-file``/``--base-file`` or ``--config`` the job
configuration is read from the CI action inputs (``INPUT_*`` variables).
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from benchcompare import __version__, initialize_logging, logger
from benchcompare.alert import compare_and_alert
from benchcompare.config import AlertConfig, config_from_job_input, create_config, load_config
from benchcompare.config.yaml_config import normalize_config_data
from benchcompare.exceptions import BenchCompareError, ConfigError
from benchcompare.extract import extract_result
from benchcompare.git import (
    EVENT_PATH_ENV,
    get_base_commit,
    get_latest_pr_commit,
    load_event_payload,
    workflow_url_from_payload,
)
from benchcompare.models import Commit, CommitUser
from benchcompare.publish import StepSummaryPublisher
from benchcompare.registries import TOOL_SPECS, supported_tools

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

LOCAL_USER = CommitUser(name="local", username="local")


def _tools_help() -> str:
    lines = ["Supported tools:"]
    for spec in TOOL_SPECS.values():
        lines.append(f"  {spec.tool.value:<11} {spec.output_format}")
    return "\n".join(lines) + "\n"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benchcompare",
        description="Compare two benchmark runs and alert on performance regressions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_tools_help() + """
Examples:
  # Compare two cargo bench outputs, alert above 150% and fail above 200%
  benchcompare --tool cargo --pr-file pr.txt --base-file base.txt \\
      --alert-threshold 150% --fail-threshold 200% --fail-on-alert

  # Read everything from a YAML file
  benchcompare --config benchcompare.yml

  # Inside a CI action step, read the INPUT_* variables
  benchcompare
        """,
    )
    parser.add_argument('--tool', choices=supported_tools(), help='Tool that produced both outputs')
    parser.add_argument('--pr-file', type=Path, help='Benchmark output of the pull request')
    parser.add_argument('--base-file', type=Path, help='Benchmark output of the base revision')
    parser.add_argument('--name', help='Benchmark suite name shown in the report')
    parser.add_argument('--alert-threshold', help="Alert ratio, as a percentage ('200%%') or a ratio ('2.0')")
    parser.add_argument('--fail-threshold', help='Failure ratio; defaults to the alert threshold')
    parser.add_argument('--fail-on-alert', action='store_true', help='Exit with 1 when the failure threshold is exceeded')
    parser.add_argument('--comment-always', action='store_true', help='Publish the comparison table on every run')
    parser.add_argument('--comment-on-alert', action='store_true', help='Publish the report when an alert is raised')
    parser.add_argument('--cc', action='append', default=[], metavar='@USER', help='Mention a user in alert reports')
    parser.add_argument('--config', type=Path, help='YAML configuration file')
    parser.add_argument(
        '--event-path',
        type=Path,
        help=f'CI event payload with pull request commit information (default: ${EVENT_PATH_ENV})',
    )
    parser.add_argument('--summary-file', type=Path, help='Markdown file that receives published reports')
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Console logging level (default: INFO)',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def _has_explicit_options(args: argparse.Namespace) -> bool:
    return any(value is not None for value in (args.tool, args.pr_file, args.base_file))


def _config_from_args(args: argparse.Namespace) -> AlertConfig:
    data: Dict[str, Any] = {
        'tool': args.tool,
        'pr_benchmark_file_path': args.pr_file,
        'base_benchmark_file_path': args.base_file,
        'name': args.name,
        'alert_threshold': args.alert_threshold,
        'fail_threshold': args.fail_threshold,
        'fail_on_alert': args.fail_on_alert,
        'comment_always': args.comment_always,
        'comment_on_alert': args.comment_on_alert,
        'alert_comment_cc_users': args.cc,
        'summary_file': args.summary_file,
        'workflow': os.environ.get('GITHUB_WORKFLOW', ''),
    }
    required = (
        ('--tool', 'tool'),
        ('--pr-file', 'pr_benchmark_file_path'),
        ('--base-file', 'base_benchmark_file_path'),
        ('--alert-threshold', 'alert_threshold'),
    )
    missing = [option for option, key in required if data[key] is None]
    if missing:
        raise ConfigError(
            f"Missing required options: {', '.join(missing)}",
            error_code="CONFIG_006",
            context={'missing_options': missing},
        )
    return create_config(normalize_config_data(data, Path.cwd()))


def resolve_config(args: argparse.Namespace) -> AlertConfig:
    """Pick the configuration source: YAML file, explicit options, or CI inputs."""
    if args.config is not None:
        config = load_config(args.config)
        if args.summary_file is not None:
            config = config.model_copy(update={'summary_file': args.summary_file})
        return config
    if _has_explicit_options(args):
        return _config_from_args(args)
    return config_from_job_input()


def resolve_commits(event_path: Optional[Path], workflow: str) -> Tuple[Commit, Commit, str]:
    """
    Commits for the two runs and the workflow link for the report footer.

    Outside CI (no event payload) placeholder commits named ``current`` and
    ``previous`` are used.
    """
    if event_path is None and not os.environ.get(EVENT_PATH_ENV):
        logger.debug("No event payload available, using placeholder commits")
        current = Commit(id="current", author=LOCAL_USER, committer=LOCAL_USER)
        previous = Commit(id="previous", author=LOCAL_USER, committer=LOCAL_USER)
        return current, previous, ""

    payload = load_event_payload(event_path)
    workflow_url = workflow_url_from_payload(payload, workflow)
    return get_latest_pr_commit(payload), get_base_commit(payload), workflow_url


def run(args: argparse.Namespace) -> int:
    config = resolve_config(args)
    current_commit, base_commit, workflow_url = resolve_commits(args.event_path, config.workflow)

    current = extract_result(config.pr_benchmark_file_path, config.tool, current_commit)
    baseline = extract_result(config.base_benchmark_file_path, config.tool, base_commit)

    publisher = StepSummaryPublisher(config.summary_file) if config.summary_file is not None else None
    outcome = compare_and_alert(
        current,
        baseline,
        config.thresholds,
        display_name=config.name,
        cc_users=config.alert_comment_cc_users,
        fail_on_alert=config.fail_on_alert,
        comment_always=config.comment_always,
        comment_on_alert=config.comment_on_alert,
        publisher=publisher,
        workflow_url=workflow_url,
    )

    if outcome.report is not None:
        print(outcome.report)

    if outcome.should_fail:
        logger.error(f"{outcome.alert.fail_count} benchmarks exceeded the failure threshold")
        return EXIT_FAILED
    if outcome.publish_error is not None:
        return EXIT_FAILED
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line interface and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    initialize_logging(console_level=args.log_level)

    try:
        return run(args)
    except BenchCompareError as e:
        logger.error(e.describe())
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())

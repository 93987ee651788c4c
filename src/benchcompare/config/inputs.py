"""
Read a job configuration from CI action inputs.

The CI runner exposes each action input ``foo-bar`` as the environment
variable ``INPUT_FOO-BAR``. Inputs are strings; this module converts them
(percentages, booleans, comma separated lists) and hands the result to
``create_config`` for validation.
"""

import os
import re
from typing import Any, Dict, List, Mapping, Optional

from benchcompare import logger
from benchcompare.alert import DEFAULT_BENCHMARK_NAME
from benchcompare.config.models import AlertConfig, create_config
from benchcompare.exceptions import ConfigError

STEP_SUMMARY_ENV = "GITHUB_STEP_SUMMARY"
WORKFLOW_ENV = "GITHUB_WORKFLOW"

# Leading float literal, accepted the way the runner's parseFloat accepts it
_FLOAT_PREFIX = re.compile(r'^\s*[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def _env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Mapping[str, str], default: str = "") -> str:
    """Return the stripped value of input ``name`` or ``default`` when it is unset."""
    value = environ.get(_env_name(name))
    if value is None:
        return default
    return value.strip()


def get_bool_input(name: str, environ: Mapping[str, str]) -> bool:
    value = get_input(name, environ)
    if not value:
        return False
    if value not in ("true", "false"):
        raise ConfigError(
            f"'{name}' input must be boolean value 'true' or 'false' but got '{value}'",
            error_code="CONFIG_006",
            context={'input_name': name},
        )
    return value == "true"


def parse_float_prefix(text: str) -> Optional[float]:
    """
    Parse the leading float literal of ``text``.

    >>> parse_float_prefix("150.5abc")
    150.5
    >>> parse_float_prefix("foo") is None
    True
    """
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return None
    return float(match.group(0).replace("Infinity", "inf"))


def get_percentage_input(name: str, environ: Mapping[str, str]) -> Optional[float]:
    """
    Convert a percentage input such as ``200%`` into a ratio (``2.0``).

    Returns:
        The ratio, or None when the input is empty

    Raises:
        ConfigError: If the value lacks ``%`` or is not a number
    """
    value = get_input(name, environ)
    if not value:
        return None
    if not value.endswith('%'):
        raise ConfigError(
            f"'{name}' input must ends with '%' for percentage value (e.g. '200%')",
            error_code="CONFIG_006",
            context={'input_name': name},
        )

    number = value[:-1]
    percentage = parse_float_prefix(number)
    if percentage is None:
        raise ConfigError(
            f"Specified value '{number}' in '{name}' input cannot be parsed as float number",
            error_code="CONFIG_006",
            context={'input_name': name},
        )
    return percentage / 100


def get_comma_separated_input(name: str, environ: Mapping[str, str]) -> List[str]:
    value = get_input(name, environ)
    return [item.strip() for item in value.split(',') if item.strip()]


def config_from_job_input(environ: Optional[Mapping[str, str]] = None) -> AlertConfig:
    """
    Build and validate an ``AlertConfig`` from ``INPUT_*`` variables.

    Args:
        environ: Variables to read; defaults to ``os.environ``

    Returns:
        Validated AlertConfig

    Raises:
        ConfigError: With the message of the first invalid input
    """
    environ = os.environ if environ is None else environ

    alert_threshold = get_percentage_input('alert-threshold', environ)
    if alert_threshold is None:
        raise ConfigError(
            "'alert-threshold' input must not be empty",
            error_code="CONFIG_006",
            context={'input_name': 'alert-threshold'},
        )

    data: Dict[str, Any] = {
        'name': get_input('name', environ, default=DEFAULT_BENCHMARK_NAME),
        'tool': get_input('tool', environ),
        'pr_benchmark_file_path': get_input('pr-benchmark-file-path', environ),
        'base_benchmark_file_path': get_input('base-benchmark-file-path', environ),
        'comment_always': get_bool_input('comment-always', environ),
        'comment_on_alert': get_bool_input('comment-on-alert', environ),
        'fail_on_alert': get_bool_input('fail-on-alert', environ),
        'alert_threshold': alert_threshold,
        'fail_threshold': get_percentage_input('fail-threshold', environ),
        'alert_comment_cc_users': get_comma_separated_input('alert-comment-cc-users', environ),
        'workflow': environ.get(WORKFLOW_ENV, ""),
    }

    summary_file = get_input('summary-file', environ) or environ.get(STEP_SUMMARY_ENV)
    if summary_file:
        data['summary_file'] = summary_file

    logger.debug(f"Read job inputs for tool '{data['tool']}' from {_env_name('tool')}")
    return create_config(data)

"""
YAML configuration loading.

The YAML file carries the same keys as the action inputs, either in their
input spelling (``alert-threshold``) or as field names (``alert_threshold``).
Thresholds may be written as percentages (``"200%"``) or as plain ratios
(``2.0``). Relative benchmark file paths are resolved against the directory
containing the YAML file.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from benchcompare import logger
from benchcompare.config.inputs import parse_float_prefix
from benchcompare.config.models import AlertConfig, create_config
from benchcompare.exceptions import ConfigError

_THRESHOLD_KEYS = ('alert_threshold', 'fail_threshold')
_PATH_KEYS = ('pr_benchmark_file_path', 'base_benchmark_file_path', 'summary_file')


def _threshold(key: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text.endswith('%'):
        return text
    percentage = parse_float_prefix(text[:-1])
    if percentage is None:
        raise ConfigError(
            f"Specified value '{text[:-1]}' in '{key.replace('_', '-')}' input cannot be parsed as float number",
            error_code="CONFIG_006",
            context={'input_name': key},
        )
    return percentage / 100


def normalize_config_data(data: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    """Map input-style keys to field names and resolve thresholds and paths."""
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        field = str(key).replace('-', '_')
        if value is None:
            continue
        if field in _THRESHOLD_KEYS:
            value = _threshold(field, value)
        elif field in _PATH_KEYS:
            path = Path(str(value)).expanduser()
            value = path if path.is_absolute() else base_dir / path
        elif field == 'alert_comment_cc_users' and isinstance(value, str):
            value = [user.strip() for user in value.split(',') if user.strip()]
        normalized[field] = value
    return normalized


def load_config(path: Union[str, Path]) -> AlertConfig:
    """
    Load and validate a job configuration from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated AlertConfig

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or holds
            an invalid configuration
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(
            f"Configuration file not found: {path}",
            error_code="CONFIG_002",
            context={'config_path': str(path)},
        ) from e
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Error parsing YAML configuration: {e}",
            error_code="CONFIG_002",
            context={'config_path': str(path)},
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Cannot read configuration file {path}: {e}",
            error_code="CONFIG_002",
            context={'config_path': str(path)},
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration in {path} must be a mapping, got {type(data).__name__}",
            error_code="CONFIG_002",
            context={'config_path': str(path)},
        )

    logger.debug(f"Loaded configuration from {path}")
    return create_config(normalize_config_data(data, path.parent))

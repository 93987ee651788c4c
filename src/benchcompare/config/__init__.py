"""Job configuration: pydantic model, CI action inputs and YAML files."""

from benchcompare.config.models import AlertConfig, create_config, resolve_file_path
from benchcompare.config.inputs import config_from_job_input
from benchcompare.config.yaml_config import load_config

__all__ = [
    "AlertConfig",
    "create_config",
    "resolve_file_path",
    "config_from_job_input",
    "load_config",
]

"""Load runner configuration from YAML files."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from selftest_runner.errors import ConfigError
from selftest_runner.models.config import RunnerConfig

log = logging.getLogger(__name__)


def load_config(config_path: Path | None) -> RunnerConfig:
    """Load a runner configuration.

    Args:
        config_path: YAML file to read, or None for the defaults

    Returns:
        Parsed configuration; keys absent from the file keep their defaults

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML or does
            not describe a valid configuration

    """
    if config_path is None:
        return RunnerConfig()

    try:
        content = config_path.read_text()
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        config = RunnerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    log.info("Loaded configuration from %s", config_path)
    return config

"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from crashreport.exceptions import ConfigurationError

from .schema import CrashReportConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path) -> CrashReportConfig:
    """
    Load configuration from YAML file with environment variable substitution.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated CrashReportConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing
        ValidationError: If config doesn't match schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    config_dict = yaml.safe_load(substitute_env_vars(raw_yaml)) or {}
    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")

    return CrashReportConfig.model_validate(config_dict)


def validate_config(config: CrashReportConfig, require_api_key: bool = False) -> None:
    """
    Perform checks that depend on how the configuration will be used.

    Args:
        config: Configuration to validate
        require_api_key: Whether reports are going to be submitted

    Raises:
        ConfigurationError: If submission is requested without an API key
    """
    if require_api_key and not config.raygun.api_key:
        raise ConfigurationError("Submission requested but raygun.api_key is not set")

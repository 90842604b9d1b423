"""Configuration loading with hierarchy support."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml

from connexec.config import defaults
from connexec.config.schemas import ConnexecConfig


def get_default_config_path() -> Path:
    """Get the default user configuration path."""
    return Path.home() / defaults.CONFIG_DIR_NAME / defaults.CONFIG_FILE_NAME


def get_config_paths() -> list[Path]:
    """Get ordered list of configuration paths to check."""
    paths = []

    user_config = get_default_config_path()
    if user_config.exists():
        paths.append(user_config)

    project_config = Path.cwd() / defaults.PROJECT_CONFIG_NAME
    if project_config.exists():
        paths.append(project_config)

    return paths


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file."""
    with open(path, "r") as f:
        content = yaml.safe_load(f) or {}
    if not isinstance(content, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return content


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables.

    Environment variables are prefixed with CONNEXEC_ and use double underscores
    for nested keys. For example:
    - CONNEXEC_LOG_LEVEL=DEBUG -> {"log_level": "DEBUG"}
    - CONNEXEC_EXECUTION__THREADS=8 -> {"execution": {"threads": 8}}
    """
    overrides: dict[str, Any] = {}
    prefix = defaults.ENV_PREFIX

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        parts = key[len(prefix):].lower().split("__")

        current = overrides
        for part in parts[:-1]:
            current = current.setdefault(part, {})

        current[parts[-1]] = _parse_env_value(value)

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse an environment variable value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    return value


def load_config(
    config_path: Optional[Path] = None,
    include_env: bool = True,
) -> ConnexecConfig:
    """Load configuration from all sources with proper hierarchy.

    Loading order (later overrides earlier):
    1. Default values (from schema)
    2. User config (~/.connexec/config.yaml)
    3. Project config (.connexec.yaml in cwd)
    4. Explicit config file (--config argument)
    5. Environment variables (CONNEXEC_*)

    Args:
        config_path: Optional explicit configuration file path
        include_env: Whether to include environment variable overrides

    Returns:
        Validated ConnexecConfig instance

    Raises:
        FileNotFoundError: If the explicit config file does not exist
    """
    merged_config: dict[str, Any] = {}

    for path in get_config_paths():
        merged_config = deep_merge(merged_config, load_yaml_config(path))

    if config_path:
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        merged_config = deep_merge(merged_config, load_yaml_config(config_path))

    if include_env:
        merged_config = deep_merge(merged_config, get_env_overrides())

    return ConnexecConfig(**merged_config)

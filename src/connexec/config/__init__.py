"""Configuration management for connexec."""

from connexec.config.schemas import (
    ConnectionConfig,
    ConnexecConfig,
    ExecutionConfig,
    TelemetryConfig,
)
from connexec.config.loader import load_config, get_default_config_path

__all__ = [
    "ConnexecConfig",
    "ExecutionConfig",
    "ConnectionConfig",
    "TelemetryConfig",
    "load_config",
    "get_default_config_path",
]

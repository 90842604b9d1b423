"""Configuration schemas using Pydantic for validation."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from connexec.config import defaults


class ExecutionConfig(BaseModel):
    """Bulk execution and result layout configuration."""

    threads: int = Field(
        default=defaults.DEFAULT_THREADS,
        gt=0,
        description="Maximum number of devices worked on concurrently",
    )
    base_dir: Path = Field(
        default=Path("."),
        description="Directory holding the result folder and failure log",
    )
    output_prefix: str = Field(
        default=defaults.DEFAULT_OUTPUT_PREFIX,
        min_length=1,
        description="Prefix of the dated result folder",
    )
    failed_log: str = Field(
        default=defaults.DEFAULT_FAILED_LOG,
        min_length=1,
        description="File name of the shared failure log",
    )


class ConnectionConfig(BaseModel):
    """Device connection configuration."""

    conn_timeout: int = Field(
        default=defaults.DEFAULT_CONN_TIMEOUT,
        gt=0,
        description="TCP connect timeout in seconds",
    )


class TelemetryConfig(BaseModel):
    """Logging configuration."""

    log_file: Optional[Path] = Field(
        default=None,
        description="Path to log file",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log records as JSON instead of console text",
    )


class ConnexecConfig(BaseModel):
    """Root configuration for connexec."""

    execution: ExecutionConfig = Field(
        default_factory=ExecutionConfig,
        description="Execution configuration",
    )
    connection: ConnectionConfig = Field(
        default_factory=ConnectionConfig,
        description="Connection configuration",
    )
    telemetry: TelemetryConfig = Field(
        default_factory=TelemetryConfig,
        description="Telemetry configuration",
    )
    log_level: str = Field(
        default=defaults.DEFAULT_LOG_LEVEL,
        description="Global log level",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

"""Bulk command execution across network devices.

This module provides:
- Device records and the delimited inventory reader
- Dialect routing (elevation and submission mode per device type)
- netmiko-backed device connections
- A thread-safe result sink
- The bounded parallel orchestrator
"""

from connexec.orchestrator.connection import (
    ConnectionCapability,
    NetmikoConnection,
    netmiko_device_type,
)
from connexec.orchestrator.devices import (
    DeviceRecord,
    InventoryError,
    load_devices,
    parse_row,
    split_commands,
)
from connexec.orchestrator.dialects import (
    DEFAULT_DIALECT,
    DIALECTS,
    DialectProfile,
    SubmissionMode,
    resolve_dialect,
)
from connexec.orchestrator.errors import (
    ConnectionCapabilityError,
    DeviceAuthenticationError,
    DeviceConfigError,
    DeviceConnectionError,
    DeviceTimeoutError,
)
from connexec.orchestrator.executor import Orchestrator, OrchestratorConfigError
from connexec.orchestrator.outcomes import (
    ExecutionOutcome,
    OutcomeKind,
    RunSummary,
    classify_error,
)
from connexec.orchestrator.sink import ResultSink, ResultSinkError, RunContext

__all__ = [
    # Devices
    "DeviceRecord",
    "InventoryError",
    "load_devices",
    "parse_row",
    "split_commands",
    # Dialects
    "SubmissionMode",
    "DialectProfile",
    "DIALECTS",
    "DEFAULT_DIALECT",
    "resolve_dialect",
    # Connections
    "ConnectionCapability",
    "NetmikoConnection",
    "netmiko_device_type",
    "ConnectionCapabilityError",
    "DeviceAuthenticationError",
    "DeviceConfigError",
    "DeviceConnectionError",
    "DeviceTimeoutError",
    # Outcomes
    "OutcomeKind",
    "ExecutionOutcome",
    "RunSummary",
    "classify_error",
    # Sink
    "RunContext",
    "ResultSink",
    "ResultSinkError",
    # Orchestrator
    "Orchestrator",
    "OrchestratorConfigError",
]

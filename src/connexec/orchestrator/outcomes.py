"""Execution outcomes and run summaries.

Every device produces exactly one ExecutionOutcome, which the result sink
persists.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from connexec.orchestrator.errors import (
    ConnectionCapabilityError,
    DeviceAuthenticationError,
    DeviceConfigError,
    DeviceConnectionError,
    DeviceTimeoutError,
)


class OutcomeKind(str, Enum):
    """What happened when commands were run on a device."""

    SUCCESS = "success"
    AUTH_FAILURE = "auth_failure"
    TIMEOUT_FAILURE = "timeout_failure"
    CONFIG_ERROR = "config_error"
    CONNECTION_FAILURE = "connection_failure"


def _one_line(text: str) -> str:
    return " ".join(text.split())


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of running one device's command sequence.

    Attributes:
        host: Device host
        kind: Outcome kind
        output: Combined command output (successes only)
        detail: Error detail (failures only)
    """

    host: str
    kind: OutcomeKind
    output: str = ""
    detail: str = ""

    @classmethod
    def success(cls, host: str, output: str) -> "ExecutionOutcome":
        return cls(host=host, kind=OutcomeKind.SUCCESS, output=output)

    @classmethod
    def auth_failure(cls, host: str, detail: str = "") -> "ExecutionOutcome":
        return cls(host=host, kind=OutcomeKind.AUTH_FAILURE, detail=detail)

    @classmethod
    def timeout_failure(cls, host: str, detail: str = "") -> "ExecutionOutcome":
        return cls(host=host, kind=OutcomeKind.TIMEOUT_FAILURE, detail=detail)

    @classmethod
    def config_error(cls, host: str, detail: str = "") -> "ExecutionOutcome":
        return cls(host=host, kind=OutcomeKind.CONFIG_ERROR, detail=detail)

    @classmethod
    def connection_failure(cls, host: str, detail: str = "") -> "ExecutionOutcome":
        return cls(host=host, kind=OutcomeKind.CONNECTION_FAILURE, detail=detail)

    @property
    def succeeded(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def failure_reason(self) -> str:
        """Human-readable reason written to the failure log.

        Raises:
            ValueError: For successful outcomes
        """
        if self.kind == OutcomeKind.AUTH_FAILURE:
            return "Invalid username or password"
        if self.kind == OutcomeKind.TIMEOUT_FAILURE:
            return "Login timed out"
        if self.kind == OutcomeKind.CONFIG_ERROR:
            return f"Invalid device record: {_one_line(self.detail)}"
        if self.kind == OutcomeKind.CONNECTION_FAILURE:
            return f"Connection failed: {_one_line(self.detail)}"
        raise ValueError(f"{self.kind.value} outcome has no failure reason")


def classify_error(host: str, error: ConnectionCapabilityError) -> ExecutionOutcome:
    """Convert a per-device connection error into an outcome.

    Errors outside the known subclasses count as connection failures.
    """
    detail = str(error)
    if isinstance(error, DeviceAuthenticationError):
        return ExecutionOutcome.auth_failure(host, detail)
    if isinstance(error, DeviceTimeoutError):
        return ExecutionOutcome.timeout_failure(host, detail)
    if isinstance(error, DeviceConfigError):
        return ExecutionOutcome.config_error(host, detail)
    if isinstance(error, DeviceConnectionError):
        return ExecutionOutcome.connection_failure(host, detail)
    return ExecutionOutcome.connection_failure(host, detail)


@dataclass
class RunSummary:
    """Counts for one completed run.

    Attributes:
        total_devices: Number of devices scheduled
        counts: Number of outcomes per kind
        duration_ms: Wall-clock duration of the run
    """

    total_devices: int
    counts: dict[OutcomeKind, int] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def from_outcomes(
        cls,
        outcomes: Iterable[ExecutionOutcome],
        total_devices: int,
        duration_ms: float,
    ) -> "RunSummary":
        counts = {kind: 0 for kind in OutcomeKind}
        for outcome in outcomes:
            counts[outcome.kind] += 1
        return cls(total_devices=total_devices, counts=counts, duration_ms=duration_ms)

    @property
    def successful(self) -> int:
        return self.counts.get(OutcomeKind.SUCCESS, 0)

    @property
    def failed(self) -> int:
        return sum(n for kind, n in self.counts.items() if kind != OutcomeKind.SUCCESS)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_devices": self.total_devices,
            "successful": self.successful,
            "failed": self.failed,
            "counts": {kind.value: n for kind, n in self.counts.items()},
            "duration_ms": self.duration_ms,
        }

"""Tests for execution outcomes."""

import pytest

from connexec.orchestrator.errors import (
    ConnectionCapabilityError,
    DeviceAuthenticationError,
    DeviceConfigError,
    DeviceConnectionError,
    DeviceTimeoutError,
)
from connexec.orchestrator.outcomes import (
    ExecutionOutcome,
    OutcomeKind,
    RunSummary,
    classify_error,
)


class TestExecutionOutcome:
    """Tests for ExecutionOutcome."""

    def test_success(self):
        """Should carry output and no failure reason."""
        outcome = ExecutionOutcome.success("r1", "Cisco IOS Software")
        assert outcome.succeeded is True
        assert outcome.output == "Cisco IOS Software"
        with pytest.raises(ValueError):
            outcome.failure_reason

    def test_fixed_reasons(self):
        """Should use the fixed login failure reasons."""
        assert ExecutionOutcome.auth_failure("r1").failure_reason == "Invalid username or password"
        assert ExecutionOutcome.timeout_failure("r1").failure_reason == "Login timed out"

    def test_detail_reasons_are_one_line(self):
        """Should collapse multi-line details."""
        outcome = ExecutionOutcome.connection_failure("r1", "Socket closed\n  by peer")
        assert outcome.failure_reason == "Connection failed: Socket closed by peer"

        outcome = ExecutionOutcome.config_error("r1", "read timeout 'x' is not an integer")
        assert outcome.failure_reason == "Invalid device record: read timeout 'x' is not an integer"


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize(
        "error, kind",
        [
            (DeviceAuthenticationError("x"), OutcomeKind.AUTH_FAILURE),
            (DeviceTimeoutError("x"), OutcomeKind.TIMEOUT_FAILURE),
            (DeviceConfigError("x"), OutcomeKind.CONFIG_ERROR),
            (DeviceConnectionError("x"), OutcomeKind.CONNECTION_FAILURE),
        ],
    )
    def test_maps_every_error(self, error, kind):
        """Should map each error class to one outcome kind."""
        outcome = classify_error("r1", error)
        assert outcome.kind == kind
        assert outcome.host == "r1"
        assert outcome.detail == "x"

    def test_base_error_is_connection_failure(self):
        """Should treat the base error class as a connection failure."""
        outcome = classify_error("r1", ConnectionCapabilityError("boom"))
        assert outcome.kind == OutcomeKind.CONNECTION_FAILURE
        assert outcome.failure_reason == "Connection failed: boom"


class TestRunSummary:
    """Tests for RunSummary."""

    def test_from_outcomes(self):
        """Should count outcomes per kind."""
        summary = RunSummary.from_outcomes(
            [
                ExecutionOutcome.success("r1", "a"),
                ExecutionOutcome.success("r2", "b"),
                ExecutionOutcome.auth_failure("r3"),
            ],
            total_devices=3,
            duration_ms=12.5,
        )
        assert summary.successful == 2
        assert summary.failed == 1
        assert summary.counts[OutcomeKind.TIMEOUT_FAILURE] == 0

    def test_to_dict(self):
        """Should convert to dictionary."""
        summary = RunSummary.from_outcomes([], total_devices=0, duration_ms=1.0)
        d = summary.to_dict()
        assert d["total_devices"] == 0
        assert d["successful"] == 0
        assert d["counts"]["success"] == 0
        assert d["duration_ms"] == 1.0

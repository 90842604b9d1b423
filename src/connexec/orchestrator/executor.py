"""Bounded parallel execution of command batches across devices.

One task per device runs on a fixed-size thread pool. Each task drives the
device through connect, optional elevation, command submission and
disconnect, turns the result into an ExecutionOutcome and hands it to the
result sink. Per-device errors never leave the task; only result sink
failures abort the run.
"""

import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Optional, Sequence

from connexec.orchestrator.connection import ConnectionCapability
from connexec.orchestrator.devices import DeviceRecord
from connexec.orchestrator.dialects import resolve_dialect
from connexec.orchestrator.errors import ConnectionCapabilityError
from connexec.orchestrator.outcomes import (
    ExecutionOutcome,
    OutcomeKind,
    RunSummary,
    classify_error,
)
from connexec.orchestrator.sink import ResultSink
from connexec.telemetry.logger import bind_context, clear_context, get_logger

logger = get_logger(__name__)


class OrchestratorConfigError(ValueError):
    """Raised for invalid run parameters."""


class Orchestrator:
    """Runs command batches on many devices with bounded concurrency.

    Example:
        orchestrator = Orchestrator(NetmikoConnection(), ResultSink(RunContext.create()))
        summary = orchestrator.run(load_devices("devices.csv"), concurrency_limit=4)
    """

    def __init__(self, connection: ConnectionCapability, sink: ResultSink) -> None:
        """Initialize the orchestrator.

        Args:
            connection: Connection capability used by every task
            sink: Result sink receiving every outcome
        """
        self.connection = connection
        self.sink = sink

    def run(
        self,
        devices: Sequence[DeviceRecord],
        concurrency_limit: int,
    ) -> RunSummary:
        """Execute every device's commands and record every outcome.

        Returns only after each device has produced exactly one outcome and
        the sink has persisted it.

        Args:
            devices: Target devices, duplicates allowed
            concurrency_limit: Maximum number of devices worked on at once

        Returns:
            RunSummary with per-kind counts

        Raises:
            OrchestratorConfigError: If concurrency_limit is less than 1
            ResultSinkError: If an outcome could not be persisted
        """
        if isinstance(concurrency_limit, bool) or not isinstance(concurrency_limit, int):
            raise OrchestratorConfigError(
                f"concurrency limit must be an integer, got {concurrency_limit!r}"
            )
        if concurrency_limit < 1:
            raise OrchestratorConfigError(
                f"concurrency limit must be at least 1, got {concurrency_limit}"
            )

        start_time = time.perf_counter()
        logger.info(
            "Starting run",
            devices=len(devices),
            concurrency_limit=concurrency_limit,
            output_dir=str(self.sink.context.output_dir),
        )

        outcomes: list[ExecutionOutcome] = []
        if devices:
            with ThreadPoolExecutor(
                max_workers=concurrency_limit,
                thread_name_prefix="connexec",
            ) as pool:
                futures = [pool.submit(self.execute_device, device) for device in devices]
                _, pending = wait(futures, return_when=FIRST_EXCEPTION)
                failed = self._first_failure(futures)
                if failed is not None:
                    for future in pending:
                        future.cancel()
                    logger.error("Aborting run", error=str(failed.exception()))
                    # Let already-running tasks finish before propagating
                    wait(futures)
                    raise failed.exception()
                outcomes = [future.result() for future in futures]

        summary = RunSummary.from_outcomes(
            outcomes,
            total_devices=len(devices),
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        logger.info(
            "Run completed",
            total_devices=summary.total_devices,
            successful=summary.successful,
            failed=summary.failed,
            duration_ms=summary.duration_ms,
        )
        return summary

    @staticmethod
    def _first_failure(futures: list[Future]) -> Optional[Future]:
        for future in futures:
            if future.done() and not future.cancelled() and future.exception() is not None:
                return future
        return None

    def execute_device(self, device: DeviceRecord) -> ExecutionOutcome:
        """Run one device's task and record its outcome.

        Raises:
            ResultSinkError: If the outcome could not be persisted
        """
        bind_context(host=device.host)
        try:
            outcome = self.sink.record(self.build_outcome(device))
            if outcome.kind == OutcomeKind.SUCCESS:
                logger.info("Device completed", commands=len(device.commands))
            else:
                logger.warning(
                    "Device failed",
                    outcome=outcome.kind.value,
                    detail=outcome.detail,
                )
            return outcome
        finally:
            clear_context()

    def build_outcome(self, device: DeviceRecord) -> ExecutionOutcome:
        """Drive one device through its session and classify the result."""
        try:
            return ExecutionOutcome.success(device.host, self._run_session(device))
        except ConnectionCapabilityError as e:
            return classify_error(device.host, e)
        except Exception as e:
            logger.exception("Unexpected device error")
            return ExecutionOutcome.connection_failure(
                device.host, f"{type(e).__name__}: {e}"
            )

    def _run_session(self, device: DeviceRecord) -> str:
        read_timeout = device.read_timeout_seconds
        dialect = resolve_dialect(device.device_type)

        session = self.connection.connect(device, read_timeout)
        try:
            if dialect.needs_elevation:
                self.connection.elevate(session, device.secret)
            return self.connection.send_commands(
                session,
                device.commands,
                dialect.submission_mode,
                dialect.prompt_marker,
            )
        finally:
            self.connection.disconnect(session)

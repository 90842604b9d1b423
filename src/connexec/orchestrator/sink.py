"""Run context and the thread-safe result sink.

Successful output goes to one file per device in a dated result directory.
Failures are appended, one line each, to a shared failure log.
"""

import contextlib
import os
import tempfile
import threading
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Union

from connexec.config import defaults
from connexec.orchestrator.outcomes import ExecutionOutcome
from connexec.telemetry.logger import get_logger

logger = get_logger(__name__)


class ResultSinkError(Exception):
    """Raised when results cannot be persisted. Fatal for the whole run."""


@dataclass(frozen=True)
class RunContext:
    """Where one run writes its results.

    Attributes:
        output_dir: Per-run directory for device output files
        failed_log: Shared failure log path
    """

    output_dir: Path
    failed_log: Path

    @classmethod
    def create(
        cls,
        base_dir: Union[str, Path] = ".",
        output_prefix: str = defaults.DEFAULT_OUTPUT_PREFIX,
        failed_log_name: str = defaults.DEFAULT_FAILED_LOG,
        today: Optional[date] = None,
    ) -> "RunContext":
        """Derive the run paths from the run date.

        Args:
            base_dir: Directory holding results and the failure log
            output_prefix: Result directory prefix
            failed_log_name: Failure log file name
            today: Run date (defaults to the current date)

        Returns:
            RunContext for this run
        """
        base = Path(base_dir)
        stamp = (today or date.today()).strftime(defaults.OUTPUT_DATE_FORMAT)
        return cls(
            output_dir=base / f"{output_prefix}{stamp}",
            failed_log=base / failed_log_name,
        )

    def output_path(self, host: str) -> Path:
        """Output file for a host. Path separators in the host are replaced."""
        safe = host.replace("/", "_").replace("\\", "_")
        return self.output_dir / f"{safe}.txt"


class ResultSink:
    """Persists execution outcomes; safe to call from many threads.

    A single lock serializes output directory creation, failure log
    appends and console echo. Device output files are written without the
    lock and renamed into place. A host whose file cannot be written gets a
    failure line instead.

    Example:
        sink = ResultSink(RunContext.create())
        sink.record(ExecutionOutcome.success("10.0.0.1", output))
    """

    def __init__(
        self,
        context: RunContext,
        echo: Optional[Callable[[str], None]] = print,
    ) -> None:
        """Initialize the sink.

        Args:
            context: Run paths
            echo: Console feedback callable, None to disable
        """
        self.context = context
        self._echo = echo
        self._lock = threading.Lock()
        self._dir_ready = False

    def record(self, outcome: ExecutionOutcome) -> ExecutionOutcome:
        """Persist one outcome durably.

        A host whose output file cannot be written is recorded in the
        failure log as an invalid device record instead.

        Returns:
            The outcome as persisted

        Raises:
            ResultSinkError: If the output directory or the failure log
                cannot be written
        """
        if outcome.succeeded:
            self.ensure_output_dir()
            try:
                self._write_output(outcome)
            except (OSError, ValueError) as e:
                error_text = getattr(e, "strerror", None) or str(e)
                logger.warning("Cannot write output file", host=outcome.host, error=str(e))
                outcome = ExecutionOutcome.config_error(
                    outcome.host, f"cannot write output file: {error_text}"
                )

        if outcome.succeeded:
            message = f"Executed commands on {outcome.host}"
        else:
            reason = outcome.failure_reason
            self._append_failure(outcome.host, reason)
            message = f"{reason} on {outcome.host}"

        if self._echo is not None:
            with self._lock:
                self._echo(message)
        return outcome

    def ensure_output_dir(self) -> Path:
        """Create the output directory if needed and return it."""
        with self._lock:
            if not self._dir_ready:
                try:
                    self.context.output_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise ResultSinkError(
                        f"Cannot create output directory {self.context.output_dir}: {e}"
                    ) from e
                self._dir_ready = True
        return self.context.output_dir

    def _write_output(self, outcome: ExecutionOutcome) -> None:
        path = self.context.output_path(outcome.host)
        # Write aside and rename so duplicate hosts never leave a mixed file
        fd, tmp_name = tempfile.mkstemp(dir=self.context.output_dir, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(outcome.output)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

        logger.debug("Output saved", host=outcome.host, path=str(path), size=len(outcome.output))

    def _append_failure(self, host: str, reason: str) -> None:
        line = f"{host} {reason}\n"
        with self._lock:
            try:
                with open(self.context.failed_log, "a", encoding="utf-8") as f:
                    f.write(line)
                    f.flush()
                    os.fsync(f.fileno())
            except OSError as e:
                raise ResultSinkError(
                    f"Cannot append to failure log {self.context.failed_log}: {e}"
                ) from e

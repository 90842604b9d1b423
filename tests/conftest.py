"""Pytest configuration and fixtures."""

import threading
import time
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Optional, Sequence

import pytest

from connexec.config.schemas import ConnexecConfig
from connexec.orchestrator.devices import DeviceRecord
from connexec.orchestrator.dialects import SubmissionMode
from connexec.orchestrator.sink import ResultSink, RunContext

RUN_DATE = date(2024, 5, 17)


@dataclass
class FakeSession:
    """Session handle returned by FakeConnection."""

    host: str
    calls: list[tuple] = field(default_factory=list)


class FakeConnection:
    """In-memory ConnectionCapability for orchestrator tests.

    Per-host behavior is configured with `outputs` (host -> output text) and
    `errors` (host -> exception raised from connect). Hosts without a
    configured output echo their commands back, one per line. `send_errors` raises
    from send_commands instead. `delay` makes each session hold its slot.
    """

    def __init__(
        self,
        outputs: Optional[dict[str, str]] = None,
        errors: Optional[dict[str, Exception]] = None,
        send_errors: Optional[dict[str, Exception]] = None,
        elevate_errors: Optional[dict[str, Exception]] = None,
        delay: float = 0.0,
        barrier: Optional[threading.Barrier] = None,
    ) -> None:
        self.outputs = outputs or {}
        self.errors = errors or {}
        self.send_errors = send_errors or {}
        self.elevate_errors = elevate_errors or {}
        self.delay = delay
        self.barrier = barrier
        self.sessions: list[FakeSession] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def connect(self, device: DeviceRecord, read_timeout: int) -> FakeSession:
        if device.host in self.errors:
            raise self.errors[device.host]
        session = FakeSession(host=device.host)
        session.calls.append(("connect", read_timeout))
        with self._lock:
            self.sessions.append(session)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        if self.barrier is not None:
            self.barrier.wait(timeout=5)
        return session

    def elevate(self, session: FakeSession, secret: str) -> None:
        session.calls.append(("elevate", secret))
        if session.host in self.elevate_errors:
            raise self.elevate_errors[session.host]

    def send_commands(
        self,
        session: FakeSession,
        commands: Sequence[str],
        mode: SubmissionMode,
        prompt_marker: Optional[str] = None,
    ) -> str:
        session.calls.append(("send", tuple(commands), mode, prompt_marker))
        if self.delay:
            time.sleep(self.delay)
        if session.host in self.send_errors:
            raise self.send_errors[session.host]
        return self.outputs.get(session.host, "\n".join(commands))

    def disconnect(self, session: FakeSession) -> None:
        session.calls.append(("disconnect",))
        with self._lock:
            self.active -= 1

    def calls_for(self, host: str) -> list[list[tuple]]:
        return [s.calls for s in self.sessions if s.host == host]


def make_device(host: str, **kwargs: Any) -> DeviceRecord:
    """Build a device record with test defaults."""
    values: dict[str, Any] = {
        "username": "admin",
        "password": "secret-pw",
        "secret": "enable-pw",
        "device_type": "CiscoIOS",
        "readtime": "30",
        "commands": ("show version", "show clock"),
    }
    values.update(kwargs)
    return DeviceRecord(host=host, **values)


@pytest.fixture
def test_config() -> ConnexecConfig:
    """Create a test configuration."""
    return ConnexecConfig()


@pytest.fixture
def run_context(tmp_path: Path) -> RunContext:
    """Run context rooted in a temporary directory."""
    return RunContext.create(base_dir=tmp_path, today=RUN_DATE)


@pytest.fixture
def echoed() -> list[str]:
    """Collects console echo lines."""
    return []


@pytest.fixture
def sink(run_context: RunContext, echoed: list[str]) -> ResultSink:
    """Result sink writing into the temporary run context."""
    return ResultSink(run_context, echo=echoed.append)


@pytest.fixture
def inventory_file(tmp_path: Path) -> Path:
    """Write a small inventory file."""
    path = tmp_path / "devices.csv"
    path.write_text(
        "host,username,device_type,password,secret,readtime,mult_command\n"
        "10.0.0.1,admin,CiscoIOS,pw1,en1,30,show version;show clock\n"
        "10.0.0.2,admin,HuaweiTelnet,pw2,,45,display version\n"
        "10.0.0.3,admin,PaloAltoPanorama,pw3,,60,show system info;show jobs all\n"
    )
    return path


@pytest.fixture
def device_factory():
    """Factory for device records with test defaults."""
    return make_device


@pytest.fixture
def connection_factory():
    """Factory for FakeConnection instances."""
    return FakeConnection

"""Device connections backed by netmiko.

The executor talks to devices only through the ConnectionCapability
protocol. NetmikoConnection is the production implementation; it translates
library exceptions into the closed error set in connexec.orchestrator.errors.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Sequence

from netmiko import ConnectHandler
from netmiko.exceptions import (
    NetmikoAuthenticationException,
    NetmikoBaseException,
    NetmikoTimeoutException,
    ReadTimeout,
)
from paramiko.ssh_exception import SSHException

from connexec.config import defaults
from connexec.orchestrator.devices import DeviceRecord
from connexec.orchestrator.dialects import SubmissionMode
from connexec.orchestrator.errors import (
    ConnectionCapabilityError,
    DeviceAuthenticationError,
    DeviceConfigError,
    DeviceConnectionError,
    DeviceTimeoutError,
)
from connexec.telemetry.logger import get_logger

logger = get_logger(__name__)

# Inventory tags to netmiko driver names. Unlisted tags are passed through.
NETMIKO_DEVICE_TYPES: dict[str, str] = {
    "CiscoIOS": "cisco_ios",
    "CiscoIOSTelnet": "cisco_ios_telnet",
    "CiscoNXOS": "cisco_nxos",
    "CiscoASA": "cisco_asa",
    "CiscoXR": "cisco_xr",
    "Arista": "arista_eos",
    "Juniper": "juniper_junos",
    "Huawei": "huawei",
    "HuaweiTelnet": "huawei_telnet",
    "HPComware": "hp_comware",
    "HPComwareTelnet": "hp_comware_telnet",
    "PaloAltoPanorama": "paloalto_panos",
    "PaloAlto": "paloalto_panos",
}


def netmiko_device_type(device_type: str) -> str:
    """Map an inventory device type tag to a netmiko driver name."""
    tag = device_type.strip()
    return NETMIKO_DEVICE_TYPES.get(tag, tag)


class ConnectionCapability(Protocol):
    """Connect/elevate/send/disconnect protocol used by the executor.

    Implementations raise only ConnectionCapabilityError subclasses from
    connect, elevate and send_commands. disconnect never raises.
    """

    def connect(self, device: DeviceRecord, read_timeout: int) -> Any:
        ...

    def elevate(self, session: Any, secret: str) -> None:
        ...

    def send_commands(
        self,
        session: Any,
        commands: Sequence[str],
        mode: SubmissionMode,
        prompt_marker: Optional[str] = None,
    ) -> str:
        ...

    def disconnect(self, session: Any) -> None:
        ...


@contextmanager
def _translated_errors(
    host: str,
    stage: str,
    value_error: type[ConnectionCapabilityError] = DeviceConnectionError,
) -> Iterator[None]:
    """Re-raise library exceptions as connection capability errors."""
    try:
        yield
    except ConnectionCapabilityError:
        raise
    except (NetmikoTimeoutException, ReadTimeout, TimeoutError) as e:
        raise DeviceTimeoutError(f"{stage} on {host} timed out: {e}") from e
    except NetmikoAuthenticationException as e:
        raise DeviceAuthenticationError(f"{stage} on {host} rejected: {e}") from e
    except ValueError as e:
        raise value_error(f"{stage} on {host} failed: {e}") from e
    except (NetmikoBaseException, SSHException, OSError, EOFError) as e:
        raise DeviceConnectionError(f"{stage} on {host} failed: {e}") from e


class NetmikoConnection:
    """ConnectionCapability implementation using netmiko ConnectHandler.

    Example:
        conn = NetmikoConnection(conn_timeout=10)
        session = conn.connect(device, read_timeout=30)
        try:
            output = conn.send_commands(session, device.commands, SubmissionMode.LINE)
        finally:
            conn.disconnect(session)
    """

    def __init__(self, conn_timeout: float = defaults.DEFAULT_CONN_TIMEOUT) -> None:
        """Initialize the connection factory.

        Args:
            conn_timeout: TCP connect timeout in seconds
        """
        self.conn_timeout = conn_timeout

    def _connection_params(self, device: DeviceRecord, read_timeout: int) -> dict[str, Any]:
        return {
            "device_type": netmiko_device_type(device.device_type),
            "host": device.host,
            "username": device.username,
            "password": device.password,
            "secret": device.secret,
            "conn_timeout": self.conn_timeout,
            "read_timeout_override": read_timeout,
        }

    def connect(self, device: DeviceRecord, read_timeout: int) -> Any:
        """Open a session to the device.

        Raises:
            DeviceTimeoutError: Connection timed out
            DeviceAuthenticationError: Credentials rejected
            DeviceConfigError: Unsupported device type
            DeviceConnectionError: Any other failure
        """
        params = self._connection_params(device, read_timeout)
        logger.debug(
            "Connecting",
            host=device.host,
            driver=params["device_type"],
            read_timeout=read_timeout,
        )
        with _translated_errors(device.host, "connect", value_error=DeviceConfigError):
            return ConnectHandler(**params)

    def elevate(self, session: Any, secret: str) -> None:
        """Enter privileged mode with the secret given at connect time.

        Raises:
            DeviceAuthenticationError: Elevation was refused
        """
        if not secret:
            return
        with _translated_errors(session.host, "enable", value_error=DeviceAuthenticationError):
            session.enable()

    def send_commands(
        self,
        session: Any,
        commands: Sequence[str],
        mode: SubmissionMode,
        prompt_marker: Optional[str] = None,
    ) -> str:
        """Send commands in order and return their combined output."""
        if not commands:
            return ""

        kwargs: dict[str, Any] = {}
        if mode == SubmissionMode.PROMPT:
            if not prompt_marker:
                raise DeviceConfigError("prompt submission requires a prompt marker")
            kwargs["expect_string"] = prompt_marker

        with _translated_errors(session.host, "send"):
            return session.send_multiline(list(commands), **kwargs)

    def disconnect(self, session: Any) -> None:
        """Close the session, logging rather than raising on failure."""
        try:
            session.disconnect()
        except Exception as e:
            logger.warning(
                "Disconnect failed",
                host=getattr(session, "host", None),
                error=str(e),
            )

"""Device records and the delimited inventory reader.

A device record describes one target and how to reach it. Records are
immutable once read; the executor and the connection layer only read them.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from connexec.config import defaults
from connexec.orchestrator.errors import DeviceConfigError
from connexec.telemetry.logger import get_logger

logger = get_logger(__name__)


class InventoryError(Exception):
    """Raised when the inventory file cannot be read."""


@dataclass(frozen=True)
class DeviceRecord:
    """A single target device.

    Attributes:
        host: Connection address, also used to name the output file
        username: Login username
        password: Login password
        secret: Privilege-elevation password, empty for no elevation
        device_type: Dialect tag selecting how commands are submitted
        readtime: Raw read timeout field, parsed by read_timeout_seconds
        commands: Ordered commands to send
    """

    host: str
    username: str = ""
    password: str = ""
    secret: str = ""
    device_type: str = ""
    readtime: str = str(defaults.DEFAULT_READ_TIMEOUT)
    commands: tuple[str, ...] = ()

    @property
    def read_timeout_seconds(self) -> int:
        """Parse the read timeout field.

        Raises:
            DeviceConfigError: If the field is not a positive integer
        """
        text = self.readtime.strip()
        digits = text[1:] if text.startswith("-") else text
        # ASCII digits with an optional minus sign
        if not (digits.isascii() and digits.isdigit()):
            raise DeviceConfigError(f"read timeout {self.readtime!r} is not an integer")
        value = int(text)
        if value <= 0:
            raise DeviceConfigError(f"read timeout {value} must be positive")
        return value

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary, masking credentials."""
        return {
            "host": self.host,
            "username": self.username,
            "device_type": self.device_type,
            "readtime": self.readtime,
            "commands": list(self.commands),
            "password": "***" if self.password else "",
            "secret": "***" if self.secret else "",
        }


def split_commands(text: str) -> tuple[str, ...]:
    """Split a command field into individual commands.

    Args:
        text: Commands joined with ';'

    Returns:
        Tuple of non-empty, stripped commands
    """
    return tuple(
        cmd.strip() for cmd in text.split(defaults.COMMAND_SEPARATOR) if cmd.strip()
    )


def parse_row(row: list[str]) -> DeviceRecord:
    """Build a device record from one input row.

    Args:
        row: Fields in inventory column order

    Returns:
        DeviceRecord

    Raises:
        ValueError: If the row is short or has no host
    """
    if len(row) < len(defaults.INPUT_COLUMNS):
        raise ValueError(
            f"expected {len(defaults.INPUT_COLUMNS)} fields, got {len(row)}"
        )
    fields = dict(zip(defaults.INPUT_COLUMNS, (f.strip() for f in row)))
    if not fields["host"]:
        raise ValueError("host is empty")

    return DeviceRecord(
        host=fields["host"],
        username=fields["username"],
        password=fields["password"],
        secret=fields["secret"],
        device_type=fields["device_type"],
        readtime=fields["readtime"],
        commands=split_commands(fields["mult_command"]),
    )


def load_devices(path: Union[str, Path]) -> list[DeviceRecord]:
    """Load device records from a delimited inventory file.

    The first line is a header and is ignored. Blank lines are skipped, and
    rows that cannot be attributed to a host are skipped with a warning.

    Args:
        path: Path to the inventory file

    Returns:
        Device records in file order

    Raises:
        InventoryError: If the file cannot be opened or decoded
    """
    path = Path(path)
    devices: list[DeviceRecord] = []

    try:
        with open(path, "r", newline="", encoding="utf-8-sig") as f:
            reader = csv.reader(
                f,
                delimiter=defaults.INPUT_DELIMITER,
                quoting=csv.QUOTE_NONE,
            )
            next(reader, None)
            for line_no, row in enumerate(reader, start=2):
                if not any(field.strip() for field in row):
                    continue
                try:
                    devices.append(parse_row(row))
                except ValueError as e:
                    logger.warning(
                        "Skipping inventory row",
                        path=str(path),
                        line=line_no,
                        error=str(e),
                    )
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise InventoryError(f"Cannot read inventory file {path}: {e}") from e

    logger.info("Inventory loaded", path=str(path), device_count=len(devices))
    return devices

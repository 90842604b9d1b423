"""Tests for device records and the inventory reader."""

import dataclasses
from pathlib import Path

import pytest

from connexec.orchestrator.devices import (
    DeviceRecord,
    InventoryError,
    load_devices,
    parse_row,
    split_commands,
)
from connexec.orchestrator.errors import DeviceConfigError


class TestDeviceRecord:
    """Tests for DeviceRecord dataclass."""

    def test_create_minimal(self):
        """Should create record with only a host."""
        device = DeviceRecord(host="10.0.0.1")
        assert device.host == "10.0.0.1"
        assert device.commands == ()
        assert device.read_timeout_seconds == 30

    def test_is_immutable(self):
        """Should not allow field assignment."""
        device = DeviceRecord(host="10.0.0.1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            device.host = "10.0.0.2"  # type: ignore[misc]

    def test_read_timeout_parsed(self):
        """Should parse numeric read timeout with surrounding spaces."""
        device = DeviceRecord(host="r1", readtime=" 45 ")
        assert device.read_timeout_seconds == 45

    @pytest.mark.parametrize("readtime", ["abc", "", "4.5", "+30", "3_0", "-", "\u0663\u0660"])
    def test_read_timeout_non_numeric(self, readtime):
        """Should raise DeviceConfigError for non-integer values."""
        device = DeviceRecord(host="r1", readtime=readtime)
        with pytest.raises(DeviceConfigError, match="not an integer"):
            device.read_timeout_seconds

    @pytest.mark.parametrize("readtime", ["0", "-5"])
    def test_read_timeout_not_positive(self, readtime):
        """Should raise DeviceConfigError for zero or negative values."""
        device = DeviceRecord(host="r1", readtime=readtime)
        with pytest.raises(DeviceConfigError, match="must be positive"):
            device.read_timeout_seconds

    def test_to_dict_masks_credentials(self):
        """Should not expose passwords."""
        device = DeviceRecord(host="r1", password="pw", secret="")
        d = device.to_dict()
        assert d["host"] == "r1"
        assert d["password"] == "***"
        assert d["secret"] == ""


class TestSplitCommands:
    """Tests for split_commands."""

    def test_split_in_order(self):
        """Should keep command order."""
        assert split_commands("show version;show clock;show ip int brief") == (
            "show version",
            "show clock",
            "show ip int brief",
        )

    def test_strips_and_drops_empty(self):
        """Should strip whitespace and drop empty pieces."""
        assert split_commands(" show version ; ;show clock;") == (
            "show version",
            "show clock",
        )

    def test_empty_field(self):
        """Should return empty tuple for empty field."""
        assert split_commands("") == ()


class TestParseRow:
    """Tests for parse_row."""

    def test_column_order(self):
        """Should map columns host, username, device_type, password, secret, readtime, commands."""
        device = parse_row(
            ["10.0.0.1", "admin", "CiscoIOS", "pw", "en", "20", "show run;show ver"]
        )
        assert device == DeviceRecord(
            host="10.0.0.1",
            username="admin",
            password="pw",
            secret="en",
            device_type="CiscoIOS",
            readtime="20",
            commands=("show run", "show ver"),
        )

    def test_short_row(self):
        """Should reject rows with missing columns."""
        with pytest.raises(ValueError, match="expected 7 fields"):
            parse_row(["10.0.0.1", "admin"])

    def test_empty_host(self):
        """Should reject rows without host."""
        with pytest.raises(ValueError, match="host is empty"):
            parse_row(["", "admin", "CiscoIOS", "pw", "", "30", "show ver"])

    def test_bad_timeout_kept_for_later(self):
        """Should keep a malformed timeout so the device gets its own failure."""
        device = parse_row(["r1", "admin", "CiscoIOS", "pw", "", "abc", "show ver"])
        assert device.readtime == "abc"


class TestLoadDevices:
    """Tests for load_devices."""

    def test_load_inventory(self, inventory_file: Path):
        """Should load every row after the header."""
        devices = load_devices(inventory_file)
        assert [d.host for d in devices] == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]
        assert devices[1].device_type == "HuaweiTelnet"
        assert devices[1].secret == ""
        assert devices[2].commands == ("show system info", "show jobs all")

    def test_skips_blank_and_invalid_rows(self, tmp_path: Path):
        """Should skip blank lines and rows without host."""
        path = tmp_path / "devices.csv"
        path.write_text(
            "host,username,device_type,password,secret,readtime,mult_command\n"
            "\n"
            ",admin,CiscoIOS,pw,,30,show ver\n"
            "r1,admin,CiscoIOS,pw,,30,show ver\n"
            "r2,admin\n"
        )
        devices = load_devices(path)
        assert [d.host for d in devices] == ["r1"]

    def test_keeps_duplicate_hosts(self, tmp_path: Path):
        """Should keep duplicate hosts as separate records."""
        path = tmp_path / "devices.csv"
        path.write_text(
            "header\n"
            "r1,admin,CiscoIOS,pw,,30,show ver\n"
            "r1,admin,CiscoIOS,pw,,30,show clock\n"
        )
        devices = load_devices(path)
        assert len(devices) == 2

    def test_header_only(self, tmp_path: Path):
        """Should return no devices for header-only file."""
        path = tmp_path / "devices.csv"
        path.write_text("host,username,device_type,password,secret,readtime,mult_command\n")
        assert load_devices(path) == []

    def test_missing_file(self, tmp_path: Path):
        """Should raise InventoryError for missing file."""
        with pytest.raises(InventoryError, match="Cannot read inventory file"):
            load_devices(tmp_path / "missing.csv")

"""Errors raised by the connection layer for a single device.

The set is closed: the executor maps each class to exactly one outcome kind.
"""


class ConnectionCapabilityError(Exception):
    """Base class for per-device connection errors."""


class DeviceTimeoutError(ConnectionCapabilityError):
    """Connect or read timed out."""


class DeviceAuthenticationError(ConnectionCapabilityError):
    """Credentials or privilege-elevation secret were rejected."""


class DeviceConfigError(ConnectionCapabilityError):
    """The device record itself is unusable (bad timeout, unknown driver)."""


class DeviceConnectionError(ConnectionCapabilityError):
    """Any other transport or protocol failure."""

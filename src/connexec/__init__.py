"""
connexec - run command batches on many network devices in parallel.

Reads a device inventory, connects to each device with netmiko, sends its
commands and writes the output to a dated result directory. Devices that
cannot be reached or logged into are listed in a shared failure log.
"""

__version__ = "0.1.0"

from connexec.config.schemas import ConnexecConfig

__all__ = [
    "__version__",
    "ConnexecConfig",
]

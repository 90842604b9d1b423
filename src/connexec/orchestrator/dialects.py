"""Dialect routing for command submission.

Maps a device type tag to whether privilege elevation happens before
commands are sent, and how the commands are submitted.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class SubmissionMode(str, Enum):
    """How a batch of commands is submitted to a session."""

    LINE = "line"  # each command waits for the device prompt
    PROMPT = "prompt"  # each command waits for an explicit prompt marker


@dataclass(frozen=True)
class DialectProfile:
    """Submission rules for one CLI dialect.

    Attributes:
        needs_elevation: Enter privileged mode before sending commands
        submission_mode: How commands are submitted
        prompt_marker: Terminal prompt marker for PROMPT mode
    """

    needs_elevation: bool
    submission_mode: SubmissionMode = SubmissionMode.LINE
    prompt_marker: Optional[str] = None


PANORAMA_PROMPT = "> "

# Line-oriented CLIs without a separate enable step
_NO_ELEVATION = DialectProfile(needs_elevation=False)
_PANORAMA = DialectProfile(
    needs_elevation=False,
    submission_mode=SubmissionMode.PROMPT,
    prompt_marker=PANORAMA_PROMPT,
)

DEFAULT_DIALECT = DialectProfile(needs_elevation=True)

DIALECTS: Mapping[str, DialectProfile] = MappingProxyType(
    {
        "Huawei": _NO_ELEVATION,
        "HuaweiTelnet": _NO_ELEVATION,
        "HPComware": _NO_ELEVATION,
        "HPComwareTelnet": _NO_ELEVATION,
        "PaloAltoPanorama": _PANORAMA,
    }
)


def resolve_dialect(device_type: str) -> DialectProfile:
    """Look up the dialect profile for a device type.

    Unknown types get the default profile (elevate, then line mode).
    """
    return DIALECTS.get(device_type.strip(), DEFAULT_DIALECT)

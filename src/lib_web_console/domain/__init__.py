"""Domain values and policies used by the console component."""

from __future__ import annotations

from .command import CommandLine
from .errors import (
    ConfigurationError,
    ConsoleError,
    InvalidArgumentError,
    ReadinessError,
    SessionActiveError,
    SpawnError,
    UnsupportedTargetError,
)
from .instructions import ClientInstruction
from .levels import ConsoleLevel

__all__ = [
    "ClientInstruction",
    "CommandLine",
    "ConfigurationError",
    "ConsoleError",
    "ConsoleLevel",
    "InvalidArgumentError",
    "ReadinessError",
    "SessionActiveError",
    "SpawnError",
    "UnsupportedTargetError",
]

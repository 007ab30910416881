"""Public package surface of the browser console component.

Import :class:`Console` together with a push-channel adapter; everything
else is exposed for hosts that compose their own transports or tests.
"""

from __future__ import annotations

from .adapters import ConsoleLogHandler, ConsoleWriter, RichTerminalChannel, SseChannel, SubprocessSpawner
from .config import ConsoleSettings, build_settings, enable_dotenv
from .console import Console
from .domain import (
    ClientInstruction,
    CommandLine,
    ConfigurationError,
    ConsoleError,
    ConsoleLevel,
    InvalidArgumentError,
    ReadinessError,
    SessionActiveError,
    SpawnError,
    UnsupportedTargetError,
)

__all__ = [
    "ClientInstruction",
    "CommandLine",
    "ConfigurationError",
    "Console",
    "ConsoleError",
    "ConsoleLevel",
    "ConsoleLogHandler",
    "ConsoleSettings",
    "ConsoleWriter",
    "InvalidArgumentError",
    "ReadinessError",
    "RichTerminalChannel",
    "SessionActiveError",
    "SpawnError",
    "SseChannel",
    "SubprocessSpawner",
    "UnsupportedTargetError",
    "build_settings",
    "enable_dotenv",
]

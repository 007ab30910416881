"""Adapters connecting the console to transports, processes and logging."""

from __future__ import annotations

from .channel import RichTerminalChannel, SseChannel
from .logging_handler import ConsoleLogHandler
from .process import SubprocessSpawner
from .writer import ConsoleWriter

__all__ = ["ConsoleLogHandler", "ConsoleWriter", "RichTerminalChannel", "SseChannel", "SubprocessSpawner"]

"""Protocols implemented by adapters and consumed by the console."""

from __future__ import annotations

from .channel import PushChannelPort
from .process import ProcessHandle, ProcessSpawnerPort

__all__ = ["ProcessHandle", "ProcessSpawnerPort", "PushChannelPort"]

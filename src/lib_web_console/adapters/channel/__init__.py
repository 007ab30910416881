"""Push-channel adapters."""

from __future__ import annotations

from .sse import MIMETYPE, SseChannel, encode_frame
from .terminal import RichTerminalChannel, markup_to_text

__all__ = ["MIMETYPE", "RichTerminalChannel", "SseChannel", "encode_frame", "markup_to_text"]

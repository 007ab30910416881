"""Use cases orchestrating console sessions and process streaming."""

from __future__ import annotations

from .session import SessionRunner, create_run_session
from .stream_process import StreamCallable, create_stream_process

__all__ = ["SessionRunner", "StreamCallable", "create_run_session", "create_stream_process"]

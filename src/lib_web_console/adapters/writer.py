"""Text sinks handed to console sessions in place of standard output.

Purpose
-------
Turn arbitrary ``write`` calls into console lines. Complete lines are emitted
immediately; a trailing partial line waits for more text or for
:meth:`ConsoleWriter.close`.

While the console's bypass flag is raised, writes pass straight through to
the wrapped stream so the channel's own transport output is never captured a
second time.

Contents
--------
* :class:`ConsoleWriter` – line-emitting text sink of one session.
* :class:`StdoutDispatcher` – process-wide ``sys.stdout`` replacement routing
  each write to the writer bound in the calling context.
* :func:`capture_stdout` – bind a fresh writer for the current context.

System Role
-----------
Sessions of different consoles may run on different threads at the same
time. ``sys.stdout`` is replaced once while any capture is active and every
write is resolved through a :class:`contextvars.ContextVar`, so a ``print``
only ever reaches the session of the thread that issued it.
"""

from __future__ import annotations

import contextvars
import io
import sys
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TextIO


class ConsoleWriter(io.TextIOBase):
    """Writable text stream forwarding lines to ``emit``."""

    def __init__(
        self,
        emit: Callable[[str], Any],
        *,
        bypass: Callable[[], bool] = lambda: False,
        passthrough: TextIO | None = None,
    ) -> None:
        super().__init__()
        self._emit = emit
        self._bypass = bypass
        self._passthrough = passthrough
        self._pending = ""

    def writable(self) -> bool:
        return True

    @property
    def encoding(self) -> str:  # type: ignore[override]
        return getattr(self._passthrough, "encoding", None) or "utf-8"

    def write(self, text: str) -> int:  # type: ignore[override]
        if self.closed:
            raise ValueError("I/O operation on closed ConsoleWriter")
        if self._bypass():
            if self._passthrough is not None:
                self._passthrough.write(text)
            return len(text)
        self._pending += text
        *lines, self._pending = self._pending.split("\n")
        for line in lines:
            self._emit(line)
        return len(text)

    def flush(self) -> None:
        if self._passthrough is not None and not self._passthrough.closed:
            self._passthrough.flush()

    def close(self) -> None:
        if not self.closed and self._pending:
            pending, self._pending = self._pending, ""
            self._emit(pending)
        super().close()


_CURRENT_WRITER: contextvars.ContextVar[ConsoleWriter | None] = contextvars.ContextVar(
    "lib_web_console_writer", default=None
)


class StdoutDispatcher(io.TextIOBase):
    """Route writes to the writer bound in the current context, else to ``fallback``.

    Examples
    --------
    >>> fallback = io.StringIO()
    >>> dispatcher = StdoutDispatcher(fallback)
    >>> _ = dispatcher.write("unbound\\n")
    >>> fallback.getvalue()
    'unbound\\n'
    """

    def __init__(self, fallback: TextIO) -> None:
        super().__init__()
        self.fallback = fallback

    def _target(self) -> TextIO:
        writer = _CURRENT_WRITER.get()
        if writer is None or writer.closed:
            return self.fallback
        return writer  # type: ignore[return-value]

    def writable(self) -> bool:
        return True

    @property
    def encoding(self) -> str:  # type: ignore[override]
        return getattr(self.fallback, "encoding", None) or "utf-8"

    def isatty(self) -> bool:
        return _CURRENT_WRITER.get() is None and self.fallback.isatty()

    def write(self, text: str) -> int:  # type: ignore[override]
        return self._target().write(text)

    def flush(self) -> None:
        self._target().flush()


class _StdoutInstallation:
    """Reference-counted installation of one :class:`StdoutDispatcher`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dispatcher: StdoutDispatcher | None = None
        self._users = 0

    def acquire(self) -> StdoutDispatcher:
        with self._lock:
            if self._dispatcher is None:
                self._dispatcher = StdoutDispatcher(sys.stdout)
                sys.stdout = self._dispatcher
            self._users += 1
            return self._dispatcher

    def release(self) -> None:
        with self._lock:
            self._users -= 1
            if self._users > 0 or self._dispatcher is None:
                return
            if sys.stdout is self._dispatcher:
                sys.stdout = self._dispatcher.fallback
            self._dispatcher = None


_INSTALLATION = _StdoutInstallation()


@contextmanager
def capture_stdout(emit: Callable[[str], Any], *, bypass: Callable[[], bool] = lambda: False) -> Iterator[ConsoleWriter]:
    """Capture ``print`` output of the current context into a new writer.

    The writer's passthrough is the stream that was ``sys.stdout`` before
    the first capture, so bypassed writes never loop back into a session.
    """
    dispatcher = _INSTALLATION.acquire()
    writer = ConsoleWriter(emit, bypass=bypass, passthrough=dispatcher.fallback)
    token = _CURRENT_WRITER.set(writer)
    try:
        yield writer
    finally:
        _CURRENT_WRITER.reset(token)
        writer.close()
        _INSTALLATION.release()


__all__ = ["ConsoleWriter", "StdoutDispatcher", "capture_stdout"]

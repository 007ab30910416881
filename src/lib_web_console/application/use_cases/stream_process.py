"""Use case relaying a child process's output line by line.

Purpose
-------
Multiplex the stdout and stderr pipes of one child process with a bounded
readiness wait so neither stream can block the other, and hand every
non-empty line to the matching sink.

Contents
--------
* :class:`_LineBuffer` – per-pipe byte buffer keeping lines atomic.
* :func:`create_stream_process` factory returning the streaming callable.

System Role
-----------
Called by :meth:`lib_web_console.console.Console.run_command` inside an
active session. Ordering between the two pipes is best-effort; ordering within
one pipe is preserved.
"""

from __future__ import annotations

import errno
import logging
import os
import selectors
import subprocess
import threading
from typing import IO, Any, Callable

from lib_web_console.application.ports.process import ProcessHandle
from lib_web_console.domain.errors import ReadinessError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 65536

StreamCallable = Callable[..., int]


class _LineBuffer:
    """Accumulate bytes from one pipe and emit complete, non-empty lines."""

    def __init__(self, sink: Callable[[str], Any], encoding: str) -> None:
        self._sink = sink
        self._encoding = encoding
        self._pending = bytearray()

    def feed(self, chunk: bytes) -> None:
        self._pending.extend(chunk)
        while True:
            index = self._pending.find(b"\n")
            if index < 0:
                return
            line = bytes(self._pending[:index])
            del self._pending[: index + 1]
            self._emit(line)

    def flush(self) -> None:
        if self._pending:
            line = bytes(self._pending)
            self._pending.clear()
            self._emit(line)

    def _emit(self, raw: bytes) -> None:
        text = raw.decode(self._encoding, errors="replace").rstrip()
        if text:
            self._sink(text)


def _read_available(selector: selectors.BaseSelector, key: selectors.SelectorKey, *, drain: bool) -> None:
    """Read from a ready pipe; unregister it on EOF.

    With ``drain`` the pipe is read until it would block, otherwise a single
    chunk is consumed so the other pipe gets its turn.
    """
    buffer: _LineBuffer = key.data
    fd = key.fd
    while True:
        try:
            chunk = os.read(fd, _CHUNK_SIZE)
        except BlockingIOError:
            return
        except OSError as exc:
            if exc.errno == errno.EAGAIN:
                return
            raise
        if not chunk:
            selector.unregister(key.fileobj)
            buffer.flush()
            return
        buffer.feed(chunk)
        if not drain:
            return


def create_stream_process(
    *,
    on_stdout: Callable[[str], Any],
    on_stderr: Callable[[str], Any],
    poll_interval: float = 2.0,
    encoding: str = "utf-8",
    selector_factory: Callable[[], selectors.BaseSelector] = selectors.DefaultSelector,
) -> StreamCallable:
    """Build the streaming loop bound to the console's sinks.

    Parameters
    ----------
    on_stdout, on_stderr:
        Receivers for decoded, right-stripped lines of each pipe.
    poll_interval:
        Upper bound in seconds for one readiness wait.
    encoding:
        Codec used to decode child output; undecodable bytes are replaced.
    selector_factory:
        Factory for the readiness primitive (overridable in tests).

    Returns
    -------
    StreamCallable
        ``stream(handle, cancel=None)`` returning the exit code once the
        process has stopped running.
    """

    def stream(handle: ProcessHandle, cancel: threading.Event | None = None) -> int:
        selector = selector_factory()
        pipes: list[IO[bytes]] = []
        try:
            for pipe, sink in ((handle.stdout, on_stdout), (handle.stderr, on_stderr)):
                if pipe is None:
                    continue
                os.set_blocking(pipe.fileno(), False)
                selector.register(pipe, selectors.EVENT_READ, _LineBuffer(sink, encoding))
                pipes.append(pipe)

            while True:
                if cancel is not None and cancel.is_set() and handle.poll() is None:
                    logger.debug("terminating cancelled child process")
                    handle.terminate()

                if not selector.get_map():
                    try:
                        handle.wait(timeout=poll_interval)
                    except subprocess.TimeoutExpired:
                        continue
                    break

                try:
                    ready = selector.select(poll_interval)
                except (OSError, ValueError) as exc:
                    raise ReadinessError("Waiting for process output failed", error=str(exc)) from exc

                if handle.poll() is not None:
                    for key in list(selector.get_map().values()):
                        _read_available(selector, key, drain=True)
                    break

                for key, _mask in ready:
                    _read_available(selector, key, drain=False)
        finally:
            for key in list(selector.get_map().values()):
                selector.unregister(key.fileobj)
                key.data.flush()
            selector.close()
            for pipe in pipes:
                pipe.close()

        exit_code = handle.poll()
        if exit_code is None:
            exit_code = handle.wait()
        logger.debug("child process exited with %s", exit_code)
        return exit_code

    return stream


__all__ = ["StreamCallable", "create_stream_process"]

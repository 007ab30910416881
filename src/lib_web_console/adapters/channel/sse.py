"""Server-Sent Events channel implementing :class:`PushChannelPort`.

Purpose
-------
Frame client instructions as SSE ``data:`` events and deliver them either to
a transport callable (a WSGI ``write``, a socket wrapper) or, through
:meth:`SseChannel.stream`, to a generator a web framework can return as a
streaming ``text/event-stream`` response.

Contents
--------
* :func:`encode_frame` – one instruction to one SSE frame.
* :class:`SseChannel` – the channel adapter.

System Role
-----------
Default transport of the console in web applications. Routing and response
construction stay with the host framework.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Iterator, Optional

from lib_web_console.application.ports.channel import PushChannelPort
from lib_web_console.domain.instructions import ClientInstruction

from ._deferred import DeferredActionChannel

LOGGER = logging.getLogger(__name__)

MIMETYPE = "text/event-stream"

_DONE = object()


def encode_frame(instruction: ClientInstruction, *, event: str | None = None) -> str:
    """Return the SSE frame carrying ``instruction``.

    Examples
    --------
    >>> encode_frame(ClientInstruction.clear("console"))
    'data: {"action": "clear", "target": "console", "payload": ""}\\n\\n'
    >>> encode_frame(ClientInstruction.clear("c"), event="console").splitlines()[0]
    'event: console'
    """
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {instruction.to_json()}\n\n"


class SseChannel(DeferredActionChannel, PushChannelPort):
    """Push instructions as Server-Sent Events.

    ``echo_function`` takes precedence over ``transport`` when set, which lets
    callers capture the frames produced during a block of work.
    """

    def __init__(
        self,
        *,
        transport: Optional[Callable[[str], None]] = None,
        event: str | None = None,
        heartbeat: float | None = 15.0,
        on_disconnect: Optional[Callable[[], None]] = None,
        join_timeout: float = 1.0,
    ) -> None:
        super().__init__()
        self.on_disconnect = on_disconnect
        self._join_timeout = join_timeout
        self._disconnected = False
        self._transport = transport
        self._event = event
        self._heartbeat = heartbeat
        self._queue: queue.Queue[object] | None = None

    def send(self, instruction: ClientInstruction) -> None:
        frame = encode_frame(instruction, event=self._event)
        if self.echo_function is not None:
            self.echo_function(frame)
        elif self._disconnected:
            LOGGER.debug("dropping frame, stream client disconnected: %s", instruction.action)
        elif self._queue is not None:
            self._queue.put(frame)
        elif self._transport is not None:
            self._transport(frame)
        else:
            LOGGER.debug("dropping frame, channel has no transport: %s", instruction.action)

    def stream(self) -> Iterator[str]:
        """Run the registered action on a worker thread and yield its frames.

        Comment frames are yielded every ``heartbeat`` seconds of silence so
        proxies keep the connection open. An exception raised by the action
        is re-raised from the generator once its frames are delivered.

        Closing the generator early (the client went away) drops every later
        frame, calls ``on_disconnect`` and waits at most ``join_timeout``
        seconds for the worker before returning.
        """
        frames: queue.Queue[object] = queue.Queue()
        failure: list[BaseException] = []
        self._queue = frames
        self._disconnected = False

        def _work() -> None:
            try:
                self.trigger()
            except BaseException as exc:  # re-raised in the consuming thread
                failure.append(exc)
            finally:
                frames.put(_DONE)

        worker = threading.Thread(target=_work, name="sse-console", daemon=True)
        worker.start()
        try:
            while True:
                try:
                    item = frames.get(timeout=self._heartbeat)
                except queue.Empty:
                    yield ": heartbeat\n\n"
                    continue
                if item is _DONE:
                    break
                yield str(item)
        except GeneratorExit:
            self._disconnected = True
            LOGGER.debug("stream client disconnected")
            if self.on_disconnect is not None:
                self.on_disconnect()
            raise
        finally:
            self._queue = None
            worker.join(self._join_timeout if self._disconnected else None)
        if failure:
            raise failure[0]


__all__ = ["MIMETYPE", "SseChannel", "encode_frame"]

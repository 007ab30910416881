"""Bridge from :mod:`logging` records to the console's severity methods.

Purpose
-------
Show stdlib log records in the console of the session that emitted them.

Contents
--------
* :class:`ConsoleLogHandler` – handler forwarding records to a fixed console
  or, without one, to the console bound in the emitting context.
* :func:`capture_logging` – bind a console to the current context and keep a
  shared handler attached to the captured logger while any session needs it.
"""

from __future__ import annotations

import contextvars
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator

from lib_web_console.domain.levels import ConsoleLevel

_OWN_LOGGERS = "lib_web_console"

_CURRENT_CONSOLE: contextvars.ContextVar[Any] = contextvars.ContextVar("lib_web_console_log_target", default=None)


class ConsoleLogHandler(logging.Handler):
    """Forward formatted records to ``console.log``.

    Records emitted by this package are skipped so the console never logs
    about itself while it is writing. Without a ``console`` the target is
    looked up per record in the current context; records from contexts
    without a bound console are ignored.

    Examples
    --------
    >>> class Sink:
    ...     def __init__(self):
    ...         self.calls = []
    ...     def log(self, level, message, context=None):
    ...         self.calls.append((level, message))
    >>> sink = Sink()
    >>> handler = ConsoleLogHandler(sink)
    >>> _ = handler.handle(logging.makeLogRecord({"msg": "hi", "levelno": logging.INFO, "name": "app"}))
    >>> sink.calls
    [(<ConsoleLevel.INFO: 20>, 'hi')]
    """

    def __init__(self, console: Any = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._console = console
        self.addFilter(lambda record: not record.name.startswith(_OWN_LOGGERS))

    def emit(self, record: logging.LogRecord) -> None:
        console = self._console if self._console is not None else _CURRENT_CONSOLE.get()
        if console is None:
            return
        try:
            message = self.format(record)
            console.log(ConsoleLevel.from_python_level(record.levelno), message)
        except Exception:
            self.handleError(record)


class _HandlerRegistry:
    """One context-routed handler per captured logger, reference counted."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[ConsoleLogHandler, int]] = {}

    def acquire(self, name: str) -> ConsoleLogHandler:
        with self._lock:
            handler, users = self._entries.get(name, (None, 0))
            if handler is None:
                handler = ConsoleLogHandler()
                logging.getLogger(name or None).addHandler(handler)
            self._entries[name] = (handler, users + 1)
            return handler

    def release(self, name: str) -> None:
        with self._lock:
            handler, users = self._entries[name]
            if users > 1:
                self._entries[name] = (handler, users - 1)
                return
            del self._entries[name]
            logging.getLogger(name or None).removeHandler(handler)


_REGISTRY = _HandlerRegistry()


@contextmanager
def capture_logging(console: Any, logger_name: str = "") -> Iterator[ConsoleLogHandler]:
    """Route records of ``logger_name`` (root when empty) to ``console`` for this context."""

    handler = _REGISTRY.acquire(logger_name)
    token = _CURRENT_CONSOLE.set(console)
    try:
        yield handler
    finally:
        _CURRENT_CONSOLE.reset(token)
        _REGISTRY.release(logger_name)


__all__ = ["ConsoleLogHandler", "capture_logging"]

"""Console component streaming command and log output to a browser.

Purpose
-------
Expose the terminal-like console: a session controller wrapping user
callbacks, an output emitter speaking the ``<font>``/``<br/>`` markup
contract, a leveled-logging surface, and a process runner relaying child
stdout/stderr while the process runs.

Contents
--------
* :class:`Console` – the component and composition point of the domain,
  application and adapter layers.

System Role
-----------
Host applications create one console per rendered widget, hand it a push
channel (Server-Sent Events by default) and register work with :meth:`set`,
:meth:`run_command` or :meth:`run_method`. Everything a session produces is
pushed as client instructions; nothing is retained.
"""

from __future__ import annotations

import html
import importlib
import json
import logging
import sys
import threading
import warnings
from contextlib import AbstractContextManager, ExitStack, closing, contextmanager
from typing import Any, Callable, Iterator, Mapping, Sequence

from .adapters.channel.sse import SseChannel
from .adapters.logging_handler import capture_logging
from .adapters.process import SubprocessSpawner
from .adapters.writer import ConsoleWriter, capture_stdout
from .application.ports.channel import PushChannelPort
from .application.ports.process import ProcessSpawnerPort
from .application.use_cases.session import create_run_session
from .application.use_cases.stream_process import create_stream_process
from .config import ConsoleSettings, build_settings
from .domain.command import CommandLine
from .domain.errors import ConfigurationError, SessionActiveError, UnsupportedTargetError
from .domain.instructions import ClientInstruction
from .domain.levels import ConsoleLevel
from .domain.lines import colorize, escape_context, render_line
from .domain.logger_slot import app_of, substitute_logger

LOGGER = logging.getLogger(__name__)

Context = Mapping[str, Any] | None

_NON_TARGETS = (bool, int, float, complex, bytes, bytearray)


class Console:
    """Terminal-like output widget driven by a push channel.

    Parameters
    ----------
    channel:
        Transport implementing :class:`PushChannelPort`; defaults to an
        :class:`SseChannel` without transport.
    name:
        Identifier of the client-side element receiving instructions.
    app:
        Optional host application. When it exposes a ``logger`` attribute the
        console installs itself there for the duration of each session.
    settings:
        Session and streaming knobs; defaults to :func:`build_settings`.
    spawner:
        Process adapter used by :meth:`run_command`.
    event:
        ``True`` to run on page load, or the name of the client event that
        triggers the console. Interpreted by the host's rendering layer.

    Examples
    --------
    >>> frames = []
    >>> console = Console(SseChannel(transport=frames.append), settings=ConsoleSettings(capture_logging=False))
    >>> _ = console.execute(lambda c: c.output("a < b"))
    >>> "a &lt; b<br/>" in frames[0]
    True
    """

    def __init__(
        self,
        channel: PushChannelPort | None = None,
        *,
        name: str = "console",
        app: Any = None,
        settings: ConsoleSettings | None = None,
        spawner: ProcessSpawnerPort | None = None,
        event: bool | str = True,
    ) -> None:
        self.channel: PushChannelPort = channel if channel is not None else SseChannel()
        self.name = name
        self.app = app
        self.settings = settings if settings is not None else build_settings()
        self.event = event
        self.last_exit_code: int | None = None
        self.output_bypass = False
        self._spawner: ProcessSpawnerPort = spawner if spawner is not None else SubprocessSpawner()
        self._session_lock = threading.Lock()
        self._session_active = False
        self._writer: ConsoleWriter | None = None
        self._cancel = threading.Event()
        self._deferred: list[Callable[[], Any]] = []
        if getattr(self.channel, "on_disconnect", False) is None:
            self.channel.on_disconnect = self.cancel  # type: ignore[attr-defined]
        self._run_session = create_run_session(emit_text=self.output, emit_html=self.output_html)
        self._stream = create_stream_process(
            on_stdout=self.output,
            on_stderr=self.warning,
            poll_interval=self.settings.poll_interval,
            encoding=self.settings.encoding,
        )

    # -- session controller -------------------------------------------------

    @property
    def in_session(self) -> bool:
        """Return ``True`` while a session callback is running."""

        return self._session_active

    @property
    def writer(self) -> ConsoleWriter | None:
        """Text sink of the running session, ``None`` outside sessions."""

        return self._writer

    def set(self, callback: Callable[["Console"], Any] | None = None, event: bool | str | None = None) -> "Console":
        """Register ``callback`` to run as a session when the channel triggers.

        The callback receives this console and may call :meth:`output`,
        :meth:`output_html`, :meth:`run_command` or :meth:`run_method` any
        number of times.

        Raises
        ------
        ConfigurationError
            When no callback is given.
        """
        if callback is None:
            raise ConfigurationError("Please specify the callback argument")
        if event is not None:
            self.event = event
        if callback != self._run_deferred:
            self._deferred = []
        self.channel.set(lambda: self.execute(callback))
        return self

    def js_execute(self) -> PushChannelPort:
        """Return the channel the client must connect to for execution."""

        return self.channel

    def execute(self, callback: Callable[["Console"], Any]) -> "Console":
        """Run ``callback`` as a session right now.

        Failures raised by the callback are rendered into the console;
        :class:`ConfigurationError` propagates after cleanup.

        Raises
        ------
        SessionActiveError
            When a session is already running on this console.
        """
        if not self._session_lock.acquire(blocking=False):
            raise SessionActiveError("A console session is already running", console=self.name)
        try:
            self._cancel.clear()
            self._run_session(callback, self, self._session_scopes())
        finally:
            self._session_lock.release()
        return self

    def ensure_session(self, work: Callable[[], Any]) -> Any:
        """Run ``work`` in the active session, or register a session for it.

        Returns the result of ``work`` when a session is running and ``None``
        when the work was deferred to the channel.

        Deferred work accumulates: every call made before the channel
        triggers runs, in call order, inside the same registered session.
        """
        if self._session_active:
            return work()
        self._deferred.append(work)
        if len(self._deferred) == 1:
            self.set(self._run_deferred)
        return None

    def _run_deferred(self, _console: "Console") -> None:
        for work in list(self._deferred):
            work()

    def trigger(self) -> "Console":
        """Ask the channel to run the registered session now."""

        self.channel.trigger()
        return self

    def cancel(self) -> None:
        """Terminate the child process streamed by the running session."""

        self._cancel.set()

    def _session_scopes(self) -> Iterator[Any]:
        yield self._active_scope()
        yield substitute_logger(self.app, self)
        if self.settings.capture_logging:
            yield capture_logging(self, self.settings.captured_logger)
        yield self._writer_scope()

    @contextmanager
    def _active_scope(self) -> Iterator[None]:
        self._session_active = True
        LOGGER.debug("session opened on %s", self.name)
        try:
            yield
        finally:
            self._session_active = False
            self.output_bypass = False
            LOGGER.debug("session closed on %s", self.name)

    @contextmanager
    def _writer_scope(self) -> Iterator[ConsoleWriter]:
        if self.settings.capture_stdout:
            scope: AbstractContextManager[ConsoleWriter] = capture_stdout(self.output, bypass=self._bypass_active)
        else:
            scope = closing(ConsoleWriter(self.output, bypass=self._bypass_active, passthrough=sys.stdout))
        with scope as writer:
            self._writer = writer
            try:
                yield writer
            finally:
                self._writer = None

    # -- output emitter -------------------------------------------------------

    def _bypass_active(self) -> bool:
        return self.output_bypass

    @contextmanager
    def _bypassing(self) -> Iterator[None]:
        self.output_bypass = True
        try:
            yield
        finally:
            self.output_bypass = False

    def output(self, message: Any, context: Context = None) -> "Console":
        """Emit one escaped text line; string context values are escaped too."""

        return self.output_html(html.escape(str(message)), escape_context(context))

    def output_html(self, message: str, context: Context = None) -> "Console":
        """Emit one raw HTML line after ``{placeholder}`` interpolation."""

        fragment = render_line(message, context)
        with self._bypassing():
            self.channel.send(ClientInstruction.append(self.name, fragment))
        return self

    emit_text = output
    emit_html = output_html

    def send(self, instruction: ClientInstruction | str) -> "Console":
        """Push an arbitrary client instruction; strings are sent as ``eval``."""

        if isinstance(instruction, str):
            instruction = ClientInstruction.evaluate(self.name, instruction)
        with self._bypassing():
            self.channel.send(instruction)
        return self

    def clear(self) -> "Console":
        return self.send(ClientInstruction.clear(self.name))

    # -- process runner -------------------------------------------------------

    def run_command(self, executable: str, args: Sequence[Any] = ()) -> "Console | bool | None":
        """Execute ``executable`` with escaped ``args`` and stream its output.

        Stdout lines are emitted with :meth:`output`, stderr lines with
        :meth:`warning`. Outside a session the call registers a session that
        frames the run with a banner and the exit code.

        ``executable`` is quoted as one shell word, like every argument: a
        value such as ``"ls -la"`` names a program called ``ls -la`` and is
        not split. Pass options through ``args``.

        Returns
        -------
        Console | bool | None
            This console on exit code ``0``, ``False`` on any other exit code,
            ``None`` when the run was deferred to the channel. The code itself
            is kept in :attr:`last_exit_code`.

        Raises
        ------
        InvalidArgumentError
            When an argument is not a string, number or boolean.
        SpawnError, ReadinessError
            When the process cannot be started or observed.

        Examples
        --------
        ``console.run_command('ping', ['-c', '5', '8.8.8.8'])``
        """
        command = CommandLine.build(executable, args)
        if self._session_active:
            return self._stream_command(command)
        self.ensure_session(lambda: self._stream_with_banner(command))
        return None

    exec_command = run_command

    def _stream_with_banner(self, command: CommandLine) -> None:
        self.output(f"--[ Executing {command.describe()} ]--------------")
        self._stream_command(command)
        self.output(f"--[ Exit code: {self.last_exit_code} ]------------")

    def _stream_command(self, command: CommandLine) -> "Console | bool":
        handle = self._spawner.spawn(command)
        self.last_exit_code = self._stream(handle, self._cancel)
        return self if self.last_exit_code == 0 else False

    # -- method invocation ------------------------------------------------------

    def run_method(self, target: Any, method: str, args: Sequence[Any] = ()) -> "Console":
        """Invoke ``target.method(*args)`` inside a session.

        ``target`` is either an object or the import path of a module
        (``"pkg.mod"``) or module attribute (``"pkg.mod:Class"``). For objects
        whose ``app`` exposes a logger slot the console is substituted as the
        logger during the call. The return value is shown as JSON.
        """
        label, func = self._resolve_method(target, method)
        if self._session_active:
            self._invoke(target, label, func, args)
        else:
            self.ensure_session(lambda: self._invoke(target, label, func, args))
        return self

    def set_model(self, model: Any, method: str | None = None, args: Sequence[Any] = ()) -> Any:
        """Deprecated alias of :meth:`run_method` returning ``model``."""

        warnings.warn("Console.set_model() is deprecated, use Console.run_method()", DeprecationWarning, stacklevel=2)
        if method is None:
            raise ConfigurationError("Please specify the method argument")
        self.run_method(model, method, args)
        return model

    @staticmethod
    def _resolve_method(target: Any, method: str) -> tuple[str, Callable[..., Any]]:
        if target is None or isinstance(target, _NON_TARGETS):
            raise UnsupportedTargetError("Incorrect value for an object", object=target)
        if isinstance(target, str):
            owner = _import_target(target)
            label = f"{target}.{method}"
        else:
            owner = target
            label = f"{type(target).__name__}.{method}"
        func = getattr(owner, method, None)
        if not callable(func):
            raise UnsupportedTargetError("Method is not callable", object=target, method=method)
        return label, func

    def _invoke(self, target: Any, label: str, func: Callable[..., Any], args: Sequence[Any]) -> None:
        with ExitStack() as stack:
            if not isinstance(target, str):
                stack.enter_context(substitute_logger(app_of(target), self))
                if hasattr(target, "debug") and not callable(target.debug):
                    stack.enter_context(_debug_enabled(target))
            self.output(f"--[ Executing {label} ]--------------")
            result = func(*args)
            self.output(f"--[ Result: {json.dumps(result, default=str)} ]------------")

    # -- leveled logging --------------------------------------------------------

    def emergency(self, message: Any, context: Context = None) -> None:
        """System is unusable."""
        self._log(ConsoleLevel.EMERGENCY, message, context)

    def alert(self, message: Any, context: Context = None) -> None:
        """Action must be taken immediately."""
        self._log(ConsoleLevel.ALERT, message, context)

    def critical(self, message: Any, context: Context = None) -> None:
        """Critical conditions."""
        self._log(ConsoleLevel.CRITICAL, message, context)

    def error(self, message: Any, context: Context = None) -> None:
        """Runtime errors that do not require immediate action."""
        self._log(ConsoleLevel.ERROR, message, context)

    def warning(self, message: Any, context: Context = None) -> None:
        """Exceptional occurrences that are not errors."""
        self._log(ConsoleLevel.WARNING, message, context)

    def notice(self, message: Any, context: Context = None) -> None:
        """Normal but significant events."""
        self._log(ConsoleLevel.NOTICE, message, context)

    def info(self, message: Any, context: Context = None) -> None:
        """Interesting events."""
        self._log(ConsoleLevel.INFO, message, context)

    def debug(self, message: Any, context: Context = None) -> None:
        """Detailed debug information."""
        self._log(ConsoleLevel.DEBUG, message, context)

    def log(self, level: ConsoleLevel | str | int, message: Any, context: Context = None) -> None:
        """Log with an arbitrary level given as enum member, name or number."""

        self._log(ConsoleLevel.coerce(level), message, context)

    def _log(self, level: ConsoleLevel, message: Any, context: Context) -> None:
        self.output_html(colorize(str(message), level), escape_context(context))


def _import_target(path: str) -> Any:
    module_name, _, attribute = path.partition(":")
    try:
        owner = importlib.import_module(module_name)
    except ImportError as exc:
        raise UnsupportedTargetError("Cannot import target", object=path) from exc
    for part in filter(None, attribute.split(".")):
        try:
            owner = getattr(owner, part)
        except AttributeError as exc:
            raise UnsupportedTargetError("Cannot resolve target", object=path) from exc
    return owner


@contextmanager
def _debug_enabled(target: Any) -> Iterator[None]:
    previous = target.debug
    target.debug = True
    try:
        yield
    finally:
        target.debug = previous


__all__ = ["Console"]

"""Exception taxonomy for console sessions.

Purpose
-------
Separate failures that are *rendered* into the console (operational errors
raised by user callbacks) from failures that are *fatal* to the caller
(programmer errors such as bad process arguments).

Contents
--------
* :class:`ConsoleError` – framework error carrying structured ``params``;
  sessions render it line by line.
* :class:`ConfigurationError` and subclasses – never captured by a session.
* :data:`RUNTIME_FAULTS` – built-in exception types rendered as ``Error: ...``.
"""

from __future__ import annotations

import html
from typing import Any


class ConsoleError(Exception):
    """Framework error whose message and parameters are shown in the console.

    Examples
    --------
    >>> err = ConsoleError("Report failed", report="q3")
    >>> err.html_lines()
    ['<b>Report failed</b>', "report: 'q3'"]
    """

    def __init__(self, message: str, **params: Any) -> None:
        super().__init__(message)
        self.message = message
        self.params = dict(params)

    def html_lines(self) -> list[str]:
        """Return the escaped HTML lines describing this error."""

        lines = [f"<b>{html.escape(self.message)}</b>"]
        for key, value in self.params.items():
            lines.append(f"{html.escape(str(key))}: {html.escape(repr(value), quote=False)}")
        return lines


class ConfigurationError(Exception):
    """Programmer error that must propagate to the caller."""

    def __init__(self, message: str, **params: Any) -> None:
        super().__init__(message)
        self.message = message
        self.params = dict(params)

    def __str__(self) -> str:
        if not self.params:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
        return f"{self.message} ({details})"


class InvalidArgumentError(ConfigurationError, TypeError):
    """A process argument is not a primitive scalar."""


class UnsupportedTargetError(ConfigurationError, TypeError):
    """``run_method`` received a target it cannot invoke."""


class SpawnError(ConfigurationError):
    """The child process or its pipes could not be created."""


class ReadinessError(ConfigurationError):
    """Waiting for pipe readiness failed."""


class SessionActiveError(ConfigurationError):
    """A second session was started while one is running on the same console."""


RUNTIME_FAULTS: tuple[type[BaseException], ...] = (
    ArithmeticError,
    AssertionError,
    AttributeError,
    LookupError,
    NameError,
    TypeError,
    RecursionError,
    MemoryError,
)


__all__ = [
    "ConfigurationError",
    "ConsoleError",
    "InvalidArgumentError",
    "ReadinessError",
    "RUNTIME_FAULTS",
    "SessionActiveError",
    "SpawnError",
    "UnsupportedTargetError",
]

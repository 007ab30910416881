"""Command-line construction for the process runner.

Every argument must be a primitive scalar and is shell-escaped with
:func:`shlex.quote`; the executable is escaped the same way. Escaping is the
only injection defence between console callers and the shell.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from numbers import Real
from typing import Any, Sequence

from .errors import InvalidArgumentError


def _render_scalar(value: Any) -> str:
    """Return the textual form of a scalar argument.

    Examples
    --------
    >>> _render_scalar(True), _render_scalar(False), _render_scalar(5), _render_scalar(2.5)
    ('1', '', '5', '2.5')
    """
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, str):
        return value
    if isinstance(value, Real):
        return str(value)
    raise InvalidArgumentError("Arguments must be scalar", arg=value)


@dataclass(slots=True, frozen=True)
class CommandLine:
    """Validated executable and arguments ready to hand to the shell."""

    executable: str
    args: tuple[str, ...] = ()

    @classmethod
    def build(cls, executable: str, args: Sequence[Any] = ()) -> "CommandLine":
        """Validate ``args`` and return a command line.

        The executable is a single word for the shell. Whitespace inside it
        is quoted, not split, so program paths containing spaces work and
        options belong in ``args``.

        Raises
        ------
        InvalidArgumentError
            When the executable is not a non-empty string or any argument is
            not a string, number or boolean.
        """
        if not isinstance(executable, str) or not executable.strip():
            raise InvalidArgumentError("Executable must be a non-empty string", exec=executable)
        if isinstance(args, (str, bytes)):
            raise InvalidArgumentError("Arguments must be a sequence", args=args)
        return cls(executable, tuple(_render_scalar(value) for value in args))

    def to_shell(self) -> str:
        """Return the escaped command string.

        Examples
        --------
        >>> CommandLine.build("ping", ["-c", 5, "8.8.8.8; rm -rf /"]).to_shell()
        "ping -c 5 '8.8.8.8; rm -rf /'"
        """
        return " ".join([shlex.quote(self.executable), *(shlex.quote(arg) for arg in self.args)])

    def describe(self) -> str:
        """Return the banner fragment naming the command."""

        if not self.args:
            return self.executable
        return f"{self.executable} with {len(self.args)} arguments"


__all__ = ["CommandLine"]

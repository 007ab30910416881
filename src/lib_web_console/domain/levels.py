"""Severity levels understood by the console logger surface.

Purpose
-------
Offer a closed enumeration of the eight standard leveled-logging severities so
dispatch and presentation never rely on string-keyed method lookup.

Contents
--------
* :class:`ConsoleLevel` enum with conversion helpers and presentation colour.
* ``_COLOR_TABLE`` constant mapping levels to ``<font color=...>`` values.

System Role
-----------
Used by :class:`lib_web_console.console.Console` to route ``log(level, ...)``
calls and by the logging bridge to translate stdlib records.
"""

from __future__ import annotations

import logging
from enum import Enum


class ConsoleLevel(Enum):
    """Enumerated severities, numerically compatible with :mod:`logging`."""

    EMERGENCY = 70
    ALERT = 60
    CRITICAL = 50
    ERROR = 40
    WARNING = 30
    NOTICE = 25
    INFO = 20
    DEBUG = 10

    @property
    def severity(self) -> str:
        """Return the lowercase severity name used by the logger methods."""

        return self.name.lower()

    @property
    def color(self) -> str:
        """Return the colour used for the ``<font>`` wrapper of this level."""

        return _COLOR_TABLE[self]

    def to_python_level(self) -> int:
        """Return the closest :mod:`logging` constant for this level."""

        return min(self.value, logging.CRITICAL)

    @classmethod
    def from_name(cls, name: str) -> "ConsoleLevel":
        normalized = name.strip().upper()
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "ConsoleLevel":
        """Translate a stdlib logging level into the nearest lower severity.

        Examples
        --------
        >>> ConsoleLevel.from_python_level(logging.WARNING)
        <ConsoleLevel.WARNING: 30>
        >>> ConsoleLevel.from_python_level(35)
        <ConsoleLevel.WARNING: 30>
        >>> ConsoleLevel.from_python_level(0)
        <ConsoleLevel.DEBUG: 10>
        """
        for candidate in cls:
            if candidate.value <= level:
                return candidate
        return cls.DEBUG

    @classmethod
    def coerce(cls, level: "ConsoleLevel | str | int") -> "ConsoleLevel":
        """Return a :class:`ConsoleLevel` for an enum member, name or number."""

        if isinstance(level, ConsoleLevel):
            return level
        if isinstance(level, bool):
            raise TypeError(f"Unsupported log level: {level!r}")
        if isinstance(level, int):
            return cls.from_python_level(level)
        if isinstance(level, str):
            return cls.from_name(level)
        raise TypeError(f"Unsupported log level: {level!r}")


_COLOR_TABLE = {
    ConsoleLevel.EMERGENCY: "pink",
    ConsoleLevel.ALERT: "pink",
    ConsoleLevel.CRITICAL: "pink",
    ConsoleLevel.ERROR: "pink",
    ConsoleLevel.WARNING: "pink",
    ConsoleLevel.NOTICE: "yellow",
    ConsoleLevel.INFO: "gray",
    ConsoleLevel.DEBUG: "cyan",
}
# Font colours rendered by existing browser clients.


__all__ = ["ConsoleLevel"]

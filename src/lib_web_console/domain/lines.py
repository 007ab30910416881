"""Output line rendering shared by the text, HTML and logger emitters.

Purpose
-------
Keep the literal markup contract with existing browser clients in one place:
``{name}`` placeholder interpolation, the ``<font color=...>`` severity
wrapper and the trailing ``<br/>`` line break.

Contents
--------
* :func:`interpolate` – substitute string placeholders from a context map.
* :func:`escape_context` – HTML-escape string values of a context map.
* :func:`colorize` – wrap an escaped message for a :class:`ConsoleLevel`.
* :func:`render_line` – interpolate and append the line break.
"""

from __future__ import annotations

import html
import re
from typing import Any, Mapping

from .levels import ConsoleLevel

LINE_BREAK = "<br/>"

_PLACEHOLDER = re.compile(r"{([a-z0-9_-]+)}", re.IGNORECASE)


def interpolate(message: str, context: Mapping[str, Any] | None = None) -> str:
    """Replace ``{key}`` with ``context[key]`` when the value is a string.

    Missing keys and non-string values leave the placeholder untouched.

    Examples
    --------
    >>> interpolate("hello {name}", {"name": "x"})
    'hello x'
    >>> interpolate("hello {missing}", {})
    'hello {missing}'
    >>> interpolate("{count} items", {"count": 3})
    '{count} items'
    """
    if not context:
        return message

    def _replace(match: re.Match[str]) -> str:
        value = context.get(match.group(1))
        if isinstance(value, str):
            return value
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, message)


def escape_context(context: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``context`` with string values HTML-escaped."""

    if not context:
        return {}
    return {key: html.escape(value) if isinstance(value, str) else value for key, value in context.items()}


def colorize(message: str, level: ConsoleLevel) -> str:
    """Escape ``message`` and wrap it in the colour markup for ``level``.

    Examples
    --------
    >>> colorize("<b>", ConsoleLevel.DEBUG)
    "<font color='cyan'>&lt;b&gt;</font>"
    """
    return f"<font color='{level.color}'>{html.escape(message)}</font>"


def render_line(message: str, context: Mapping[str, Any] | None = None) -> str:
    """Return the fragment pushed to clients for one output line."""

    return interpolate(message, context) + LINE_BREAK


__all__ = ["LINE_BREAK", "colorize", "escape_context", "interpolate", "render_line"]

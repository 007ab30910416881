"""Rich-powered terminal channel implementing :class:`PushChannelPort`.

Purpose
-------
Render the console's client instructions on a local terminal so the same
session code serves command-line use: ``<font color=...>`` becomes a Rich
style, ``<br/>`` a newline, entities are unescaped and other tags dropped.

Contents
--------
* :data:`_STYLE_MAP` – font colour to Rich style mapping.
* :func:`markup_to_text` – convert one appended fragment to :class:`rich.text.Text`.
* :class:`RichTerminalChannel` – the channel adapter.
"""

from __future__ import annotations

import html
import re
from typing import Mapping

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.text import Text

from lib_web_console.application.ports.channel import PushChannelPort
from lib_web_console.domain.instructions import APPEND, CLEAR, ClientInstruction

from ._deferred import DeferredActionChannel

_STYLE_MAP: Mapping[str, str] = {
    "pink": "bold magenta",
    "yellow": "yellow",
    "gray": "grey50",
    "grey": "grey50",
    "cyan": "cyan",
}

_TOKEN = re.compile(r"<br\s*/?>|<font\s+color=['\"]?([#\w-]+)['\"]?\s*>|</font>|<b>|</b>|<[^>]*>", re.IGNORECASE)


def _style_for(color: str, palette: Mapping[str, str]) -> str:
    style = palette.get(color, color)
    try:
        Style.parse(style)
    except StyleSyntaxError:
        return ""
    return style


def markup_to_text(fragment: str, styles: Mapping[str, str] | None = None) -> Text:
    """Return a Rich :class:`Text` equivalent of an HTML line fragment.

    Examples
    --------
    >>> markup_to_text("<font color='pink'>a &lt; b</font><br/>").plain
    'a < b\\n'
    """
    palette = dict(_STYLE_MAP)
    if styles:
        palette.update(styles)
    text = Text()
    stack: list[str] = []
    position = 0
    for match in _TOKEN.finditer(fragment):
        if match.start() > position:
            text.append(html.unescape(fragment[position : match.start()]), style=" ".join(stack) or None)
        token = match.group(0).lower()
        if token.startswith("<br"):
            text.append("\n")
        elif match.group(1) is not None:
            stack.append(_style_for(match.group(1).lower(), palette))
        elif token == "<b>":
            stack.append("bold")
        elif token in ("</font>", "</b>") and stack:
            stack.pop()
        position = match.end()
    if position < len(fragment):
        text.append(html.unescape(fragment[position:]), style=" ".join(stack) or None)
    return text


class RichTerminalChannel(DeferredActionChannel, PushChannelPort):
    """Print appended fragments to a Rich console."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__()
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color, highlight=False)
        self._styles = dict(styles) if styles else None

    @property
    def console(self) -> Console:
        return self._console

    def send(self, instruction: ClientInstruction) -> None:
        if self.echo_function is not None:
            self.echo_function(instruction.to_json())
            return
        if instruction.action == APPEND:
            self._console.print(markup_to_text(instruction.payload, self._styles), end="", highlight=False)
        elif instruction.action == CLEAR:
            self._console.clear()


__all__ = ["RichTerminalChannel", "markup_to_text"]

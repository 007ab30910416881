from __future__ import annotations

import json

from rich.console import Console as RichConsole

from lib_web_console.adapters.channel.terminal import RichTerminalChannel, markup_to_text
from lib_web_console.domain.instructions import ClientInstruction


def test_markup_is_converted_to_plain_lines() -> None:
    text = markup_to_text("<font color='pink'>disk &amp; cpu</font><br/>")
    assert text.plain == "disk & cpu\n"


def test_font_colours_become_rich_styles() -> None:
    text = markup_to_text("<font color='yellow'>note</font>")
    assert [str(span.style) for span in text.spans] == ["yellow"]


def test_bold_and_unknown_colours() -> None:
    text = markup_to_text("<b>title</b><font color='no-such-colour'>x</font>")
    assert text.plain == "titlex"
    assert [str(span.style) for span in text.spans] == ["bold"]


def test_custom_styles_override_the_palette() -> None:
    text = markup_to_text("<font color='pink'>x</font>", {"pink": "red"})
    assert [str(span.style) for span in text.spans] == ["red"]


def test_unknown_tags_are_dropped() -> None:
    assert markup_to_text("<i>a</i><span>b</span>").plain == "ab"


def test_channel_prints_appended_fragments(record_console: RichConsole) -> None:
    channel = RichTerminalChannel(console=record_console)

    channel.send(ClientInstruction.append("c", "first<br/>"))
    channel.send(ClientInstruction.append("c", "<font color='cyan'>second</font><br/>"))

    assert record_console.export_text() == "first\nsecond\n"


def test_eval_instructions_are_ignored(record_console: RichConsole) -> None:
    channel = RichTerminalChannel(console=record_console)
    channel.send(ClientInstruction.evaluate("c", "window.scrollTo(0, 0)"))
    assert record_console.export_text() == ""


def test_echo_function_receives_json(record_console: RichConsole) -> None:
    channel = RichTerminalChannel(console=record_console)
    echoed: list[str] = []
    channel.echo_function = echoed.append

    channel.send(ClientInstruction.append("c", "x<br/>"))

    assert json.loads(echoed[0])["payload"] == "x<br/>"
    assert record_console.export_text() == ""

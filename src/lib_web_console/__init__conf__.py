"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

from typing import Callable

name = "lib_web_console"
title = "Browser console widget streaming commands, logs and output over a push channel"
version = "0.1.0"
author = "bitranox"
shell_command = "lib_web_console"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Print the metadata banner, one line per call of ``writer``."""

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    emit = writer if writer is not None else print
    for line in lines:
        emit(line)


def summary_info() -> str:
    """Return the metadata banner as one newline-terminated string."""

    lines: list[str] = []
    print_info(writer=lines.append)
    return "\n".join(lines) + "\n"

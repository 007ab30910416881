from __future__ import annotations

import selectors
import sys
import threading
from pathlib import Path

import pytest

from lib_web_console.adapters.process import SubprocessSpawner
from lib_web_console.application.use_cases.stream_process import _LineBuffer, create_stream_process
from lib_web_console.domain.command import CommandLine
from lib_web_console.domain.errors import ReadinessError

pytestmark = pytest.mark.skipif(sys.platform.startswith("win"), reason="pipe multiplexing needs POSIX pipes")


def _spawn(python: str, script: Path, *args: str):
    return SubprocessSpawner().spawn(CommandLine.build(python, [str(script), *args]))


def test_line_buffer_joins_split_chunks_and_skips_blank_lines() -> None:
    lines: list[str] = []
    buffer = _LineBuffer(lines.append, "utf-8")

    buffer.feed(b"first li")
    buffer.feed(b"ne\n\n   \nsecond\r\npartial")
    assert lines == ["first line", "second"]

    buffer.flush()
    assert lines == ["first line", "second", "partial"]


def test_line_buffer_replaces_undecodable_bytes() -> None:
    lines: list[str] = []
    buffer = _LineBuffer(lines.append, "utf-8")
    buffer.feed(b"caf\xff\n")
    assert lines == ["caf�"]


def test_stdout_lines_arrive_in_order(python: str, stub_script: Path) -> None:
    out: list[str] = []
    err: list[str] = []
    stream = create_stream_process(on_stdout=out.append, on_stderr=err.append, poll_interval=0.05)

    code = stream(_spawn(python, stub_script, "-c", "5", "8.8.8.8"))

    assert code == 0
    assert out == ["-c", "5", "8.8.8.8"]
    assert err == []


def test_stderr_lines_go_to_their_own_sink(python: str, stub_script: Path) -> None:
    out: list[str] = []
    err: list[str] = []
    stream = create_stream_process(on_stdout=out.append, on_stderr=err.append, poll_interval=0.05)

    code = stream(_spawn(python, stub_script, "out=one", "err=oops", "out=two", "exit=3"))

    assert code == 3
    assert out == ["one", "two"]
    assert err == ["oops"]


def test_output_written_right_before_exit_is_not_lost(python: str, stub_script: Path) -> None:
    out: list[str] = []
    stream = create_stream_process(on_stdout=out.append, on_stderr=lambda _line: None, poll_interval=5.0)

    args = [f"out=line{index}" for index in range(200)]
    code = stream(_spawn(python, stub_script, *args))

    assert code == 0
    assert out == [f"line{index}" for index in range(200)]


def test_cancel_terminates_the_child(python: str, stub_script: Path) -> None:
    out: list[str] = []
    cancel = threading.Event()

    def on_stdout(line: str) -> None:
        out.append(line)
        cancel.set()

    stream = create_stream_process(on_stdout=on_stdout, on_stderr=lambda _line: None, poll_interval=0.05)

    code = stream(_spawn(python, stub_script, "out=started", "sleep=30", "out=never"), cancel)

    assert out == ["started"]
    assert code != 0


class _BrokenSelector(selectors.DefaultSelector):
    def select(self, timeout=None):
        raise OSError("selector exploded")


def test_readiness_failure_raises_readiness_error(python: str, stub_script: Path) -> None:
    stream = create_stream_process(
        on_stdout=lambda _line: None,
        on_stderr=lambda _line: None,
        poll_interval=0.05,
        selector_factory=_BrokenSelector,
    )
    handle = _spawn(python, stub_script, "sleep=0.2")

    with pytest.raises(ReadinessError, match="Waiting for process output failed"):
        stream(handle)
    handle.wait()

from __future__ import annotations

import sys
import textwrap
from io import StringIO
from pathlib import Path
from typing import Callable

import pytest
from rich.console import Console as RichConsole

from lib_web_console.config import ConsoleSettings
from lib_web_console.console import Console
from lib_web_console.domain.instructions import APPEND, ClientInstruction

_STUB_SOURCE = textwrap.dedent(
    """
    import sys
    import time

    code = 0
    for arg in sys.argv[1:]:
        kind, sep, value = arg.partition("=")
        if sep and kind == "out":
            print(value, flush=True)
        elif sep and kind == "err":
            print(value, file=sys.stderr, flush=True)
        elif sep and kind == "sleep":
            time.sleep(float(value))
        elif sep and kind == "exit":
            code = int(value)
        else:
            print(arg, flush=True)
    sys.exit(code)
    """
)


class RecordingChannel:
    """In-memory push channel capturing every instruction."""

    def __init__(self) -> None:
        self.echo_function = None
        self.instructions: list[ClientInstruction] = []
        self.action: Callable[[], None] | None = None
        self.bypass_seen: list[bool] = []
        self.console: Console | None = None
        self._servicing = False

    def set(self, action: Callable[[], None]) -> None:
        self.action = action

    def send(self, instruction: ClientInstruction) -> None:
        if self.console is not None:
            self.bypass_seen.append(self.console.output_bypass)
        self.instructions.append(instruction)

    def trigger(self) -> None:
        assert self.action is not None
        self._servicing = True
        try:
            self.action()
        finally:
            self._servicing = False

    def triggered(self) -> bool:
        return self._servicing

    @property
    def lines(self) -> list[str]:
        return [item.payload for item in self.instructions if item.action == APPEND]


@pytest.fixture
def record_console() -> RichConsole:
    return RichConsole(file=StringIO(), record=True, width=120, color_system=None)


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def channel_factory() -> Callable[[], RecordingChannel]:
    return RecordingChannel


@pytest.fixture
def settings() -> ConsoleSettings:
    return ConsoleSettings(poll_interval=0.05, capture_logging=False)


@pytest.fixture
def console(channel: RecordingChannel, settings: ConsoleSettings) -> Console:
    instance = Console(channel, name="term", settings=settings)
    channel.console = instance
    return instance


@pytest.fixture
def stub_script(tmp_path: Path) -> Path:
    """Child process echoing its arguments; ``out=``/``err=``/``exit=``/``sleep=`` steer it."""

    path = tmp_path / "stub_process.py"
    path.write_text(_STUB_SOURCE)
    return path


@pytest.fixture
def python() -> str:
    return sys.executable


@pytest.fixture(autouse=True)
def _isolate_console_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CONSOLE_POLL_INTERVAL",
        "CONSOLE_CAPTURE_STDOUT",
        "CONSOLE_CAPTURE_LOGGING",
        "CONSOLE_CAPTURED_LOGGER",
        "CONSOLE_ENCODING",
        "CONSOLE_FORCE_COLOR",
        "CONSOLE_NO_COLOR",
        "CONSOLE_USE_DOTENV",
    ):
        monkeypatch.delenv(name, raising=False)

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from lib_web_console.adapters.process import SubprocessSpawner
from lib_web_console.domain.command import CommandLine
from lib_web_console.domain.errors import SpawnError

pytestmark = pytest.mark.skipif(sys.platform.startswith("win"), reason="commands run through a POSIX shell")


def test_spawn_pipes_both_streams(python: str, stub_script: Path) -> None:
    handle = SubprocessSpawner().spawn(CommandLine.build(python, [str(stub_script), "out=o", "err=e"]))
    stdout, stderr = handle.communicate(timeout=30)

    assert handle.returncode == 0
    assert stdout.strip() == b"o"
    assert stderr.strip() == b"e"


def test_shell_metacharacters_reach_the_child_literally(python: str, stub_script: Path, tmp_path: Path) -> None:
    marker = tmp_path / "injected"
    hostile = f"x; touch {marker}"
    handle = SubprocessSpawner().spawn(CommandLine.build(python, [str(stub_script), hostile]))
    stdout, _ = handle.communicate(timeout=30)

    assert stdout.decode().strip() == hostile
    assert not marker.exists()


def test_missing_working_directory_raises_spawn_error(tmp_path: Path) -> None:
    spawner = SubprocessSpawner(cwd=str(tmp_path / "missing"))

    with pytest.raises(SpawnError, match="Command failed to execute") as info:
        spawner.spawn(CommandLine.build("echo", ["hi"]))

    assert info.value.params == {"exec": "echo", "args": ["hi"]}

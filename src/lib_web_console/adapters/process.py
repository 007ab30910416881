"""Subprocess adapter implementing :class:`ProcessSpawnerPort`."""

from __future__ import annotations

import logging
import subprocess
from typing import Mapping

from lib_web_console.application.ports.process import ProcessHandle, ProcessSpawnerPort
from lib_web_console.domain.command import CommandLine
from lib_web_console.domain.errors import SpawnError

LOGGER = logging.getLogger(__name__)


class SubprocessSpawner(ProcessSpawnerPort):
    """Start commands through the shell with piped stdout and stderr.

    The command string comes from :meth:`CommandLine.to_shell`, so every
    component is escaped before the shell sees it. Stdin is not connected.
    """

    def __init__(self, *, cwd: str | None = None, env: Mapping[str, str] | None = None) -> None:
        self._cwd = cwd
        self._env = dict(env) if env is not None else None

    def spawn(self, command: CommandLine) -> ProcessHandle:
        shell_line = command.to_shell()
        LOGGER.debug("spawning %s", shell_line)
        try:
            return subprocess.Popen(
                shell_line,
                shell=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=self._cwd,
                env=self._env,
            )
        except (OSError, ValueError) as exc:
            raise SpawnError("Command failed to execute", exec=command.executable, args=list(command.args)) from exc


__all__ = ["SubprocessSpawner"]

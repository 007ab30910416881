"""Process port describing how child processes are spawned and observed."""

from __future__ import annotations

from typing import IO, Optional, Protocol, runtime_checkable

from lib_web_console.domain.command import CommandLine


@runtime_checkable
class ProcessHandle(Protocol):
    """Running child process with separate stdout and stderr pipes.

    :class:`subprocess.Popen` satisfies this protocol.
    """

    stdout: Optional[IO[bytes]]
    stderr: Optional[IO[bytes]]
    returncode: Optional[int]

    def poll(self) -> Optional[int]:
        """Return the exit code, or ``None`` while the process runs."""

    def wait(self, timeout: Optional[float] = None) -> int:
        """Block until the process exits and return its exit code."""

    def terminate(self) -> None:
        """Ask the process to stop."""


@runtime_checkable
class ProcessSpawnerPort(Protocol):
    """Start a child process for a validated command line."""

    def spawn(self, command: CommandLine) -> ProcessHandle:
        """Return a handle with readable ``stdout``/``stderr`` pipes."""


__all__ = ["ProcessHandle", "ProcessSpawnerPort"]

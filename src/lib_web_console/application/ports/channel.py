"""Push-channel port describing the server-to-client transport contract.

Purpose
-------
Define the narrow surface the console depends on so transports (Server-Sent
Events, a terminal renderer, test recorders) plug in without leaking their
framing or connection handling upstream.

Contents
--------
* :class:`PushChannelPort` – runtime-checkable protocol with ``set``,
  ``send``, ``trigger`` and ``triggered`` plus the ``echo_function`` override.

System Role
-----------
The console registers its deferred session with ``set`` and pushes every
output line through ``send``; when the deferred action runs is the channel's
decision (a client connecting, a CLI invoking ``trigger``).
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

from lib_web_console.domain.instructions import ClientInstruction


@runtime_checkable
class PushChannelPort(Protocol):
    """Deliver client instructions produced during a deferred action."""

    echo_function: Optional[Callable[[str], None]]

    def set(self, action: Callable[[], None]) -> None:
        """Register ``action`` to run when the channel is triggered."""

    def send(self, instruction: ClientInstruction) -> None:
        """Push one instruction to the connected client."""

    def trigger(self) -> None:
        """Run the registered action now."""

    def triggered(self) -> bool:
        """Return ``True`` while the registered action is being serviced."""


__all__ = ["PushChannelPort"]

"""Shared deferred-action bookkeeping for channel adapters."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from lib_web_console.domain.errors import ConfigurationError


class DeferredActionChannel:
    """Hold the action registered via ``set`` and run it on ``trigger``."""

    echo_function: Optional[Callable[[str], None]]

    def __init__(self) -> None:
        self.echo_function = None
        self._action: Callable[[], None] | None = None
        self._servicing = threading.Event()

    def set(self, action: Callable[[], None]) -> None:
        self._action = action

    @property
    def action(self) -> Callable[[], None] | None:
        return self._action

    def triggered(self) -> bool:
        return self._servicing.is_set()

    def trigger(self) -> None:
        if self._action is None:
            raise ConfigurationError("No action registered on the channel")
        self._servicing.set()
        try:
            self._action()
        finally:
            self._servicing.clear()


__all__ = ["DeferredActionChannel"]

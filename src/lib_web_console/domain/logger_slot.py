"""Scoped substitution of a host application's logger.

Purpose
-------
Replace ``host.logger`` for the duration of a ``with`` block and restore the
previous value on every exit path. Nested scopes form a natural stack: each
scope restores exactly the value it displaced.

Contents
--------
* :func:`has_logger_slot` – detect hosts exposing a ``logger`` attribute.
* :func:`substitute_logger` – context manager performing the swap.
* :func:`app_of` – locate the host application of an arbitrary object.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator


def has_logger_slot(host: Any) -> bool:
    """Return ``True`` when ``host`` exposes a ``logger`` attribute."""

    return host is not None and hasattr(host, "logger")


def app_of(target: Any) -> Any:
    """Return ``target.app`` when it carries a logger slot, else ``None``."""

    app = getattr(target, "app", None)
    return app if has_logger_slot(app) else None


@contextmanager
def substitute_logger(host: Any, replacement: Any) -> Iterator[Any]:
    """Install ``replacement`` as ``host.logger`` inside the block.

    Hosts without a logger slot are left untouched, which lets callers compose
    the scope unconditionally.

    Examples
    --------
    >>> class App:
    ...     logger = "original"
    >>> app = App()
    >>> with substitute_logger(app, "console"):
    ...     app.logger
    'console'
    >>> app.logger
    'original'
    """
    if not has_logger_slot(host):
        yield None
        return
    previous = host.logger
    host.logger = replacement
    try:
        yield previous
    finally:
        host.logger = previous


__all__ = ["app_of", "has_logger_slot", "substitute_logger"]

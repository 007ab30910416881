"""Use case running one console session around a user callback.

Purpose
-------
Compose the session scopes (active flag, logger substitution, output and
logging capture), invoke the callback and translate its failures into console
output according to the error taxonomy.

Contents
--------
* :func:`create_run_session` factory returning the session runner.

System Role
-----------
Invoked by :meth:`lib_web_console.console.Console.execute`. Cleanup relies on
:class:`contextlib.ExitStack` so every scope unwinds on success, on rendered
failures and on propagated configuration errors alike.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, ExitStack
from typing import Any, Callable, Iterable

from lib_web_console.domain.errors import RUNTIME_FAULTS, ConfigurationError, ConsoleError

logger = logging.getLogger(__name__)

SessionRunner = Callable[[Callable[[Any], Any], Any, Iterable[AbstractContextManager[Any]]], None]


def create_run_session(
    *,
    emit_text: Callable[[str], Any],
    emit_html: Callable[[str], Any],
) -> SessionRunner:
    """Build the session runner bound to the console's emitters.

    Parameters
    ----------
    emit_text:
        Escaping line emitter used for runtime faults and other exceptions.
    emit_html:
        Raw markup emitter used for the lines of a :class:`ConsoleError`.

    Returns
    -------
    SessionRunner
        ``run(callback, subject, scopes)`` entering ``scopes`` in order,
        calling ``callback(subject)`` and unwinding the scopes in reverse.
    """

    def run(callback: Callable[[Any], Any], subject: Any, scopes: Iterable[AbstractContextManager[Any]]) -> None:
        with ExitStack() as stack:
            for scope in scopes:
                stack.enter_context(scope)
            logger.debug("console session started")
            try:
                callback(subject)
            except ConfigurationError:
                raise
            except ConsoleError as exc:
                for line in exc.html_lines():
                    emit_html(line)
            except RUNTIME_FAULTS as exc:
                emit_text(f"Error: {exc}")
            except Exception as exc:
                emit_text(f"Exception: {exc}")
            logger.debug("console session finished")

    return run


__all__ = ["SessionRunner", "create_run_session"]

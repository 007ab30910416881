"""Configuration helpers: optional ``.env`` loading and console settings.

Purpose
-------
Let deployments tune the console through environment variables (optionally
sourced from a nearby ``.env`` file) while keeping explicit keyword arguments
as the fallback.

Contents
--------
* :data:`DOTENV_ENV_VAR` – toggle controlling ``.env`` loading in the CLI.
* :func:`should_use_dotenv` / :func:`enable_dotenv` – dotenv policy and loader.
* :class:`ConsoleSettings` and :func:`build_settings` – validated settings.

System Role
-----------
Consumed by :class:`lib_web_console.console.Console` and the CLI. Environment
variables take precedence over keyword arguments.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "CONSOLE_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

_DOTENV_LOADED: Path | None = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is enabled.

    An explicit CLI flag wins over the environment toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    Parameters
    ----------
    search_from:
        Directory to start the upward search from; defaults to the current
        working directory.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """
    global _DOTENV_LOADED

    if search_from is not None:
        candidate = _search_upwards(search_from)
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        return None
    resolved = candidate.resolve()
    load_dotenv(resolved, override=False)
    _DOTENV_LOADED = resolved
    return resolved


def _search_upwards(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


@dataclass(slots=True, frozen=True)
class ConsoleSettings:
    """Validated knobs for console sessions and process streaming.

    Attributes
    ----------
    poll_interval:
        Seconds one readiness wait may block while streaming a process.
    capture_stdout:
        Redirect :data:`sys.stdout` into the session's writer.
    capture_logging:
        Attach a :class:`~lib_web_console.adapters.ConsoleLogHandler` to
        ``captured_logger`` for the session.
    captured_logger:
        Name of the logger to capture; empty string means the root logger.
    encoding:
        Codec used to decode child process output.
    force_color, no_color:
        Colour overrides for the terminal channel.
    """

    poll_interval: float = 2.0
    capture_stdout: bool = True
    capture_logging: bool = True
    captured_logger: str = ""
    encoding: str = "utf-8"
    force_color: bool = False
    no_color: bool = False

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError("CONSOLE_POLL_INTERVAL must be positive")
        if not self.encoding.strip():
            raise ValueError("CONSOLE_ENCODING must not be empty")


def build_settings(
    *,
    poll_interval: float = 2.0,
    capture_stdout: bool = True,
    capture_logging: bool = True,
    captured_logger: str = "",
    encoding: str = "utf-8",
    force_color: bool = False,
    no_color: bool = False,
) -> ConsoleSettings:
    """Return settings with ``CONSOLE_*`` environment overrides applied.

    Raises
    ------
    ValueError
        When an override cannot be parsed or fails validation.
    """
    raw_interval = os.getenv("CONSOLE_POLL_INTERVAL")
    if raw_interval is not None:
        try:
            poll_interval = float(raw_interval)
        except ValueError as exc:
            raise ValueError(f"CONSOLE_POLL_INTERVAL must be a number, got {raw_interval!r}") from exc

    return ConsoleSettings(
        poll_interval=poll_interval,
        capture_stdout=_env_bool("CONSOLE_CAPTURE_STDOUT", capture_stdout),
        capture_logging=_env_bool("CONSOLE_CAPTURE_LOGGING", capture_logging),
        captured_logger=os.getenv("CONSOLE_CAPTURED_LOGGER", captured_logger),
        encoding=os.getenv("CONSOLE_ENCODING", encoding),
        force_color=_env_bool("CONSOLE_FORCE_COLOR", force_color),
        no_color=_env_bool("CONSOLE_NO_COLOR", no_color),
    )


__all__ = [
    "DOTENV_ENV_VAR",
    "ConsoleSettings",
    "build_settings",
    "enable_dotenv",
    "should_use_dotenv",
]

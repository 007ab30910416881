"""Command-line interface driving the console from a terminal.

Purpose
-------
Run commands and module-level callables through the same session machinery
web hosts use, rendering the output either on the local terminal (Rich) or as
raw Server-Sent-Events frames for piping into other tools.

Contents
--------
* :func:`cli` – Click group with the global traceback/dotenv options.
* ``info``, ``run``, ``sse``, ``call`` – subcommands.
* :func:`main` – :mod:`lib_cli_exit_tools` wrapper restoring traceback state.
"""

from __future__ import annotations

import os
from typing import Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as console_config
from .adapters.channel.sse import SseChannel
from .adapters.channel.terminal import RichTerminalChannel
from .application.ports.channel import PushChannelPort
from .console import Console

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _apply_dotenv(ctx: click.Context, use_dotenv: bool) -> None:
    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if console_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(console_config.DOTENV_ENV_VAR)):
        console_config.enable_dotenv()


def _make_console(channel: PushChannelPort | None = None) -> Console:
    settings = console_config.build_settings()
    if channel is None:
        channel = RichTerminalChannel(force_color=settings.force_color, no_color=settings.no_color)
    return Console(channel, settings=settings)


def _sse_channel() -> SseChannel:
    stream = click.get_text_stream("stdout")
    return SseChannel(transport=lambda frame: click.echo(frame, nl=False, file=stream))


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Stream commands and callables through a web console session."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    _apply_dotenv(ctx, use_dotenv)
    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("run", context_settings={**CLICK_CONTEXT_SETTINGS, "ignore_unknown_options": True})
@click.argument("executable")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli_run(executable: str, args: tuple[str, ...]) -> None:
    """Run EXECUTABLE with ARGS, streaming its output to the terminal."""

    console = _make_console()
    console.run_command(executable, list(args))
    console.trigger()
    if console.last_exit_code:
        raise SystemExit(console.last_exit_code)


@cli.command("sse", context_settings={**CLICK_CONTEXT_SETTINGS, "ignore_unknown_options": True})
@click.argument("executable")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli_sse(executable: str, args: tuple[str, ...]) -> None:
    """Run EXECUTABLE with ARGS, printing Server-Sent-Events frames."""

    console = _make_console(_sse_channel())
    console.run_command(executable, list(args))
    console.trigger()
    if console.last_exit_code:
        raise SystemExit(console.last_exit_code)


@cli.command("call", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("target")
@click.argument("method")
@click.argument("args", nargs=-1)
def cli_call(target: str, method: str, args: tuple[str, ...]) -> None:
    """Call METHOD of the module (or ``module:Attr``) TARGET with string ARGS."""

    console = _make_console()
    console.run_method(target, method, list(args))
    console.trigger()


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli`.

    Parameters
    ----------
    argv:
        Arguments without the program name; ``None`` reads ``sys.argv``.
    restore_traceback:
        Reset the global traceback preferences afterwards so embedding code
        and tests see the values they configured.

    Returns
    -------
    int
        Exit code reported by the command.
    """
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]

# topmark:header:start
#
#   project      : DiagFrame
#   file         : main.py
#   file_relpath : src/diagframe/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame command-line interface.

Group-level options (verbosity and color) are initialized once and placed into
``ctx.obj``; subcommands read the console from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from diagframe.cli.commands.config import config_command
from diagframe.cli.commands.fixture import fixture_command
from diagframe.cli.commands.render import render_command
from diagframe.cli.commands.svg import svg_command
from diagframe.cli.commands.version import version_command
from diagframe.cli.console import ClickConsole
from diagframe.cli.options import (
    CONTEXT_SETTINGS,
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from diagframe.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from diagframe.cli.console import ConsoleLike
    from diagframe.config.logging import DiagframeLogger

logger: DiagframeLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging & color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    level_cli = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity"] = verbose - quiet

    # DIAGFRAME_LOG_LEVEL wins over -v; without either, logging stays unconfigured.
    level_env = resolve_env_log_level()
    log_level = level_env if level_env is not None else (level_cli if verbose else None)
    ctx.obj["log_level"] = log_level
    if log_level is not None:
        setup_logging(level=log_level)

    effective_color_mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color = resolve_color_mode(cli_mode=effective_color_mode)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings=CONTEXT_SETTINGS,
    invoke_without_command=True,
    help="DiagFrame: render compiler-style diagnostics as text and SVG.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the DiagFrame CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'diagframe render REPORT.toml' to render a report.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(render_command)

cli.add_command(svg_command)

cli.add_command(fixture_command)

cli.add_command(config_command)

cli.add_command(version_command)

if __name__ == "__main__":
    cli()

# topmark:header:start
#
#   project      : DiagFrame
#   file         : options.py
#   file_relpath : src/diagframe/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI option utilities for the DiagFrame CLI.

This module centralizes reusable options (verbosity, color, configuration and
rendering) and their resolution logic, so commands and groups can stay thin.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click

from diagframe.cli.cli_types import EnumChoiceParam
from diagframe.cli.errors import DiagframeUsageError
from diagframe.cli.keys import CliOpt
from diagframe.config.logging import TRACE_LEVEL
from diagframe.rendering.theme import OutputTheme

P = ParamSpec("P")
R = TypeVar("R")

#: Click context settings shared by all commands.
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
}


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the logging level requested with ``-v``/``-q``.

    Args:
        verbose_count: Number of times the verbose flag (-v) is passed.
        quiet_count: Number of times the quiet flag (-q) is passed.

    Returns:
        The logging level as an integer: TRACE for ``-vvv``, DEBUG for ``-vv``,
        INFO for ``-v``, ERROR for ``-q`` and WARNING otherwise.

    Raises:
        DiagframeUsageError: If both verbose and quiet flags are used simultaneously.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise DiagframeUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:
        return TRACE_LEVEL
    if verbose_count == 2:
        return logging.DEBUG
    if verbose_count == 1:
        return logging.INFO
    if quiet_count >= 1:
        return logging.ERROR
    return logging.WARNING


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds counting ``-v/--verbose`` and ``-q/--quiet`` options to a command."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress informational output.",
    )(f)
    return f


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Args:
        cli_mode: Explicit color mode from CLI options (auto, always, never).
        stdout_isatty: Whether stdout is a TTY; if None, auto-detected.

    Returns:
        True if color output should be enabled, False otherwise.

    Behavior:
        Honors --color and --no-color CLI flags, then the FORCE_COLOR and
        NO_COLOR environment variables, and otherwise enables color if stdout
        is a TTY.
    """
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        isatty = getattr(sys.stdout, "isatty", None)
        stdout_isatty = bool(isatty()) if callable(isatty) else False
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds ``--color`` (auto, always, never) and ``--no-color`` options to a command."""
    f = click.option(
        "--color",
        "color_mode",
        type=EnumChoiceParam(ColorMode),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Apply ``--no-config`` and ``--config`` options to a command."""
    f = click.option(
        CliOpt.NO_CONFIG,
        "no_config",
        is_flag=True,
        help="Ignore pyproject.toml and diagframe.toml in the working directory.",
    )(f)
    f = click.option(
        CliOpt.CONFIG,
        "config_paths",
        multiple=True,
        metavar="FILE",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
        help="Additional config file(s) to load and merge.",
    )(f)
    return f


def common_render_options(f: Callable[P, R]) -> Callable[P, R]:
    """Apply the text renderer options (theme, width, anonymized line numbers, short form)."""
    f = click.option(
        CliOpt.THEME,
        "theme",
        type=EnumChoiceParam(OutputTheme),
        default=None,
        help=f"Glyph set ({', '.join(t.value for t in OutputTheme)}).",
    )(f)
    f = click.option(
        CliOpt.TERM_WIDTH,
        "term_width",
        type=click.IntRange(min=0),
        default=None,
        help="Terminal width used to cut long source lines.",
    )(f)
    f = click.option(
        CliOpt.ANONYMIZE_LINE_NUMBERS,
        "anonymized_line_numbers",
        is_flag=True,
        help="Print 'LL' instead of line numbers.",
    )(f)
    f = click.option(
        CliOpt.SHORT,
        "short_message",
        is_flag=True,
        help="Render a one-line summary of the first group.",
    )(f)
    return f


def output_option(f: Callable[P, R]) -> Callable[P, R]:
    """Apply ``-o/--output FILE`` (stdout when omitted)."""
    return click.option(
        "-o",
        CliOpt.OUTPUT,
        "output_path",
        type=click.Path(dir_okay=False, writable=True),
        default=None,
        help="Write the result to FILE instead of stdout.",
    )(f)

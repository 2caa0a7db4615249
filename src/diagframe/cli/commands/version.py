# topmark:header:start
#
#   project      : DiagFrame
#   file         : version.py
#   file_relpath : src/diagframe/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame `version` command.

Prints the current DiagFrame version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from enum import Enum

import click

from diagframe.cli.cli_types import EnumChoiceParam
from diagframe.cli.cmd_common import get_console, get_effective_verbosity
from diagframe.cli.keys import CliCmd, CliOpt
from diagframe.constants import DIAGFRAME_VERSION


class VersionFormat(str, Enum):
    """Output formats of `diagframe version`."""

    TEXT = "text"
    JSON = "json"


@click.command(
    name=CliCmd.VERSION,
    help="Show the current version of DiagFrame.",
)
@click.option(
    CliOpt.FORMAT,
    "output_format",
    type=EnumChoiceParam(VersionFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in VersionFormat)}).",
)
def version_command(*, output_format: VersionFormat | None = None) -> None:
    """Show the current version of DiagFrame.

    Args:
        output_format (VersionFormat | None): Plain text (default) or JSON.
    """
    ctx = click.get_current_context()
    console = get_console(ctx)

    fmt = output_format or VersionFormat.TEXT
    if fmt is VersionFormat.JSON:
        console.print(json.dumps({"version": DIAGFRAME_VERSION}))
    elif get_effective_verbosity(ctx) > 0:
        console.print(console.styled("DiagFrame version:", bold=True, underline=True))
        console.print(f"    {console.styled(DIAGFRAME_VERSION, bold=True)}")
    else:
        console.print(console.styled(DIAGFRAME_VERSION, bold=True))

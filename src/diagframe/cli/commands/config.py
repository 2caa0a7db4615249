# topmark:header:start
#
#   project      : DiagFrame
#   file         : config.py
#   file_relpath : src/diagframe/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame `config` command group.

  * ``diagframe config dump``: show the effective merged configuration as TOML.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from diagframe.cli.cmd_common import build_config, get_console
from diagframe.cli.keys import CliCmd
from diagframe.cli.options import CONTEXT_SETTINGS, common_config_options
from diagframe.config.io import nest_under_tool_section, to_toml
from diagframe.config.logging import get_logger
from diagframe.constants import PYPROJECT_TOOL_SECTION

if TYPE_CHECKING:
    from diagframe.config.logging import DiagframeLogger

logger: DiagframeLogger = get_logger(__name__)


@click.group(
    name=CliCmd.CONFIG,
    help="Inspect DiagFrame configuration.",
    context_settings=CONTEXT_SETTINGS,
)
def config_command() -> None:
    """Group for configuration-related subcommands."""


@config_command.command(
    name=CliCmd.CONFIG_DUMP,
    help=(
        "Dump the effective configuration (defaults, pyproject.toml, diagframe.toml "
        "and --config files merged) as TOML."
    ),
    context_settings=CONTEXT_SETTINGS,
)
@common_config_options
@click.option(
    "--pyproject",
    "for_pyproject",
    is_flag=True,
    help=f"Nest the output under [tool.{PYPROJECT_TOOL_SECTION}] for pyproject.toml.",
)
def config_dump_command(
    *,
    no_config: bool,
    config_paths: tuple[str, ...],
    for_pyproject: bool,
) -> None:
    """Print the effective configuration."""
    console = get_console(click.get_current_context())
    config = build_config(no_config=no_config, config_paths=config_paths)

    data = config.to_toml_dict()
    if for_pyproject:
        data = nest_under_tool_section(data, PYPROJECT_TOOL_SECTION)
    logger.debug("Config sources: %s", config.config_files)
    console.print(to_toml(data), nl=False)

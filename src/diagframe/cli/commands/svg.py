# topmark:header:start
#
#   project      : DiagFrame
#   file         : svg.py
#   file_relpath : src/diagframe/cli/commands/svg.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame `svg` command.

Converts ANSI-styled terminal text (for instance the output of
``diagframe render --format ansi`` or of a compiler run with colors forced)
into an SVG document.
"""

from __future__ import annotations

import click

from diagframe.cli.cmd_common import (
    STDIN_SENTINEL,
    build_config,
    get_console,
    library_errors,
    read_text_input,
    write_output,
)
from diagframe.cli.keys import CliCmd
from diagframe.cli.options import CONTEXT_SETTINGS, common_config_options, output_option
from diagframe.export.svg import render_svg


@click.command(
    name=CliCmd.SVG,
    help="Convert ANSI-styled terminal text to an SVG document (reads STDIN by default).",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("input_path", metavar="[INPUT|-]", required=False, default=STDIN_SENTINEL)
@common_config_options
@output_option
def svg_command(
    *,
    input_path: str,
    no_config: bool,
    config_paths: tuple[str, ...],
    output_path: str | None,
) -> None:
    """Convert terminal text to SVG."""
    console = get_console(click.get_current_context())
    config = build_config(no_config=no_config, config_paths=config_paths)

    with library_errors():
        text = read_text_input(input_path)

    write_output(console, render_svg(text, config.svg), output_path)

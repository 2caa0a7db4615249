# topmark:header:start
#
#   project      : DiagFrame
#   file         : render.py
#   file_relpath : src/diagframe/cli/commands/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame `render` command.

Renders a report document (TOML, see `diagframe.diagnostic.loaders`) as plain
text, ANSI-styled text or an SVG document.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

import click

from diagframe.cli.cli_types import EnumChoiceParam
from diagframe.cli.cmd_common import (
    build_config,
    get_console,
    library_errors,
    read_text_input,
    write_output,
)
from diagframe.cli.keys import CliCmd, CliOpt
from diagframe.cli.options import (
    CONTEXT_SETTINGS,
    common_config_options,
    common_render_options,
    output_option,
)
from diagframe.config.logging import get_logger
from diagframe.diagnostic.loaders import load_report
from diagframe.export.svg import render_svg_from_segments

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diagframe.config.logging import DiagframeLogger
    from diagframe.config.model import Config
    from diagframe.diagnostic.model import Group
    from diagframe.rendering.theme import OutputTheme

logger: DiagframeLogger = get_logger(__name__)


class RenderFormat(str, Enum):
    """Output formats of `diagframe render`."""

    TEXT = "text"
    ANSI = "ansi"
    SVG = "svg"


def render_overrides(
    *,
    theme: OutputTheme | None,
    term_width: int | None,
    anonymized_line_numbers: bool,
    short_message: bool,
) -> dict[str, Any]:
    """Map the renderer CLI options to config overrides (unset flags override nothing)."""
    return {
        "theme": theme,
        "term_width": term_width,
        "anonymized_line_numbers": anonymized_line_numbers or None,
        "short_message": short_message or None,
    }


def render_document(groups: Sequence[Group], config: Config, fmt: RenderFormat) -> str:
    """Render ``groups`` in format ``fmt``.

    Text formats end with a newline; SVG documents end with one already.
    """
    if fmt is RenderFormat.TEXT:
        return config.renderer(styled=False).render(groups) + "\n"
    if fmt is RenderFormat.ANSI:
        return config.renderer(styled=True).render(groups) + "\n"
    lines = config.renderer(styled=True).render_lines(groups)
    return render_svg_from_segments(lines, config.svg)


@click.command(
    name=CliCmd.RENDER,
    help=(
        "Render a report document (TOML) as text, ANSI-styled text or SVG. "
        "Use '-' to read the report from STDIN."
    ),
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("report_path", metavar="REPORT.toml", type=str)
@click.option(
    CliOpt.FORMAT,
    "output_format",
    type=EnumChoiceParam(RenderFormat),
    default=None,
    help=(
        f"Output format ({', '.join(f.value for f in RenderFormat)}); "
        "defaults to ansi when the config sets styled = true, else text."
    ),
)
@common_render_options
@common_config_options
@output_option
def render_command(
    *,
    report_path: str,
    output_format: RenderFormat | None,
    theme: OutputTheme | None,
    term_width: int | None,
    anonymized_line_numbers: bool,
    short_message: bool,
    no_config: bool,
    config_paths: tuple[str, ...],
    output_path: str | None,
) -> None:
    """Render a report document.

    Args:
        report_path (str): Path of the report (``-`` for STDIN).
        output_format (RenderFormat | None): Output format.
        theme (OutputTheme | None): Glyph set override.
        term_width (int | None): Terminal width override.
        anonymized_line_numbers (bool): Print ``LL`` instead of line numbers.
        short_message (bool): Render a one-line summary.
        no_config (bool): Skip project config discovery.
        config_paths (tuple[str, ...]): Extra config files.
        output_path (str | None): Output file (stdout when None).
    """
    ctx = click.get_current_context()
    console = get_console(ctx)
    config = build_config(
        no_config=no_config,
        config_paths=config_paths,
        overrides=render_overrides(
            theme=theme,
            term_width=term_width,
            anonymized_line_numbers=anonymized_line_numbers,
            short_message=short_message,
        ),
    )
    fmt = output_format or (RenderFormat.ANSI if config.styled else RenderFormat.TEXT)
    logger.debug("Rendering %s as %s", report_path, fmt.value)

    with library_errors():
        groups = load_report(read_text_input(report_path))
        document = render_document(groups, config, fmt)

    write_output(console, document, output_path)

# topmark:header:start
#
#   project      : DiagFrame
#   file         : fixture.py
#   file_relpath : src/diagframe/cli/commands/fixture.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame `fixture` command group.

  * ``diagframe fixture check FILE...``: report whether SVG fixtures are well-formed.
  * ``diagframe fixture compare REPORT.toml FIXTURE.svg``: render a report and
    compare it with a stored fixture (``--update`` rewrites the fixture).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from diagframe.cli.cmd_common import (
    build_config,
    get_console,
    get_effective_verbosity,
    library_errors,
    read_text_input,
)
from diagframe.cli.commands.render import RenderFormat, render_document, render_overrides
from diagframe.cli.errors import DiagframeCliError
from diagframe.cli.keys import CliCmd, CliOpt
from diagframe.cli.options import CONTEXT_SETTINGS, common_config_options, common_render_options
from diagframe.config.logging import get_logger
from diagframe.diagnostic.loaders import load_report
from diagframe.errors import FixtureMismatchError
from diagframe.export.fixture import assert_fixture, validate_svg
from diagframe.utils.diff import render_patch

if TYPE_CHECKING:
    from diagframe.config.logging import DiagframeLogger
    from diagframe.rendering.theme import OutputTheme

logger: DiagframeLogger = get_logger(__name__)


@click.group(
    name=CliCmd.FIXTURE,
    help="Validate and compare SVG fixtures.",
    context_settings=CONTEXT_SETTINGS,
)
def fixture_command() -> None:
    """Group for fixture subcommands."""


@fixture_command.command(
    name=CliCmd.FIXTURE_CHECK,
    help="Check that SVG fixtures are well-formed. Exits with 1 if any is not.",
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("paths", metavar="FILE...", nargs=-1, required=True)
def fixture_check_command(*, paths: tuple[str, ...]) -> None:
    """Check fixtures and list their problems."""
    ctx = click.get_current_context()
    console = get_console(ctx)
    verbosity = get_effective_verbosity(ctx)

    failed = 0
    for path in paths:
        with library_errors():
            text = read_text_input(path)
        report = validate_svg(text)
        if report.ok:
            if verbosity >= 0:
                ok = console.styled("ok", fg="green")
                console.print(f"{path}: {ok} ({report.lines} lines)")
            continue
        failed += 1
        console.print(f"{path}: {console.styled('not well-formed', fg='bright_red', bold=True)}")
        for problem in report.problems:
            console.print(f"  - {problem}")

    if failed:
        raise DiagframeCliError(f"{failed} of {len(paths)} fixture(s) are not well-formed")


@fixture_command.command(
    name=CliCmd.FIXTURE_COMPARE,
    help=(
        "Render REPORT.toml as SVG and compare it with FIXTURE.svg. "
        "Exits with 2 on mismatch. A missing fixture is written (and reported as a mismatch)."
    ),
    context_settings=CONTEXT_SETTINGS,
)
@click.argument("report_path", metavar="REPORT.toml", type=str)
@click.argument("fixture_path", metavar="FIXTURE.svg", type=click.Path(dir_okay=False))
@click.option(
    CliOpt.UPDATE,
    "update",
    is_flag=True,
    help="Rewrite the fixture with the rendered document instead of comparing.",
)
@common_render_options
@common_config_options
def fixture_compare_command(
    *,
    report_path: str,
    fixture_path: str,
    update: bool,
    theme: OutputTheme | None,
    term_width: int | None,
    anonymized_line_numbers: bool,
    short_message: bool,
    no_config: bool,
    config_paths: tuple[str, ...],
) -> None:
    """Compare a rendered report with a stored fixture."""
    console = get_console(click.get_current_context())
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
    target = Path(fixture_path)

    with library_errors():
        groups = load_report(read_text_input(report_path))
        document = render_document(groups, config, RenderFormat.SVG)

    if update:
        with library_errors():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(document, encoding="utf-8")
        console.print(f"{fixture_path}: updated")
        return

    with library_errors():
        try:
            assert_fixture(document, target)
        except FixtureMismatchError as exc:
            logger.debug("Fixture mismatch for %s", fixture_path)
            if exc.diff:
                console.print(render_patch(exc.diff), nl=False)
            raise
    console.print(f"{fixture_path}: {console.styled('matches', fg='green')}")

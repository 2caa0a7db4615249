# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_render_command.py
#   file_relpath : tests/cli/test_render_command.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests: `render` output formats, overrides and exit codes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from diagframe.export.ansi import strip_ansi
from diagframe.export.fixture import validate_svg
from tests.cli.conftest import (
    REPORT_TEXT,
    REPORT_TOML,
    assert_CONFIG_ERROR,
    assert_FILE_NOT_FOUND,
    assert_REPORT_ERROR,
    assert_SUCCESS,
    run_cli_in,
    write_report,
)

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.cli


def test_render_text(tmp_path: Path) -> None:
    """The default format is plain text, newline-terminated."""
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml"])
    assert_SUCCESS(result)
    assert result.output == REPORT_TEXT


def test_render_reads_stdin(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["render", "-"], input_text=REPORT_TOML)
    assert_SUCCESS(result)
    assert result.output == REPORT_TEXT


def test_render_ansi_keeps_escape_sequences(tmp_path: Path) -> None:
    """ANSI output is written verbatim even when console colors are off."""
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["--no-color", "render", "report.toml", "--format", "ansi"])
    assert_SUCCESS(result)
    assert "\x1b[" in result.output
    assert strip_ansi(result.output) == REPORT_TEXT


def test_render_svg(tmp_path: Path) -> None:
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml", "--format", "svg"])
    assert_SUCCESS(result)
    assert result.output.startswith("<svg ")
    report = validate_svg(result.output)
    assert report.ok, report.problems
    assert report.lines == len(REPORT_TEXT.splitlines())


def test_render_to_output_file(tmp_path: Path) -> None:
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml", "-o", "out.txt"])
    assert_SUCCESS(result)
    assert result.output == ""
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == REPORT_TEXT


def test_render_short_message(tmp_path: Path) -> None:
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml", "--short"])
    assert_SUCCESS(result)
    assert result.output == "src/main.rs:2:18: error[E0308]: mismatched types: expected `u32`\n"


def test_render_anonymized_line_numbers(tmp_path: Path) -> None:
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml", "--anonymize-line-numbers"])
    assert_SUCCESS(result)
    assert 'LL |     let x: u32 = "a";' in result.output
    assert "2 |" not in result.output


def test_render_unicode_theme(tmp_path: Path) -> None:
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml", "--theme", "UNICODE"])
    assert_SUCCESS(result)
    assert "╭▸ src/main.rs:2:18" in result.output


def test_config_file_sets_defaults(tmp_path: Path) -> None:
    """diagframe.toml in the working directory applies; CLI flags still win."""
    write_report(tmp_path)
    (tmp_path / "diagframe.toml").write_text(
        '[renderer]\ntheme = "unicode"\nshort_message = true\n', encoding="utf-8"
    )
    result = run_cli_in(tmp_path, ["render", "report.toml"])
    assert_SUCCESS(result)
    assert result.output.startswith("src/main.rs:2:18: ")

    result = run_cli_in(tmp_path, ["render", "report.toml", "--no-config"])
    assert_SUCCESS(result)
    assert result.output == REPORT_TEXT

    result = run_cli_in(tmp_path, ["render", "report.toml", "--theme", "ascii"])
    assert_SUCCESS(result)
    assert "╭▸" not in result.output


def test_styled_config_switches_default_format(tmp_path: Path) -> None:
    write_report(tmp_path)
    (tmp_path / "styled.toml").write_text("[renderer]\nstyled = true\n", encoding="utf-8")
    result = run_cli_in(tmp_path, ["render", "report.toml", "--config", "styled.toml"])
    assert_SUCCESS(result)
    assert "\x1b[" in result.output

    result = run_cli_in(
        tmp_path, ["render", "report.toml", "--config", "styled.toml", "--format", "text"]
    )
    assert_SUCCESS(result)
    assert result.output == REPORT_TEXT


def test_missing_report_file(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["render", "missing.toml"])
    assert_FILE_NOT_FOUND(result)
    assert "missing.toml" in result.output


@pytest.mark.parametrize(
    "text",
    [
        "[[group\n",
        '[[group]]\nlevel = "fatal"\n',
        '[[group]]\nlevel = "error"\ntitle = "x"\n\n[[group.element]]\ntype = "table"\n',
    ],
)
def test_malformed_report(tmp_path: Path, text: str) -> None:
    write_report(tmp_path, text=text)
    result = run_cli_in(tmp_path, ["render", "report.toml"])
    assert_REPORT_ERROR(result)


def test_span_out_of_bounds_is_a_report_error(tmp_path: Path) -> None:
    write_report(tmp_path, text=REPORT_TOML.replace("end = 32", "end = 320"))
    result = run_cli_in(tmp_path, ["render", "report.toml"])
    assert_REPORT_ERROR(result)


def test_invalid_config_file(tmp_path: Path) -> None:
    write_report(tmp_path)
    (tmp_path / "diagframe.toml").write_text('[renderer]\ntheme = "fancy"\n', encoding="utf-8")
    result = run_cli_in(tmp_path, ["render", "report.toml"])
    assert_CONFIG_ERROR(result)
    assert "renderer.theme" in result.output

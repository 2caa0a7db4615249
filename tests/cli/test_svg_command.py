# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_svg_command.py
#   file_relpath : tests/cli/test_svg_command.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests: `svg` converts ANSI-styled text into SVG documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from diagframe.export.fixture import validate_svg
from tests.cli.conftest import assert_FILE_NOT_FOUND, assert_SUCCESS, run_cli_in

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.cli

COLORED = "\x1b[31mred\x1b[0m plain\nsecond line\n"


def test_svg_reads_stdin_by_default(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["svg"], input_text=COLORED)
    assert_SUCCESS(result)
    assert '<tspan class="fg-red">red</tspan>' in result.output
    report = validate_svg(result.output)
    assert report.ok, report.problems
    assert report.lines == 2


def test_svg_from_file_to_file(tmp_path: Path) -> None:
    (tmp_path / "out.ansi").write_text(COLORED, encoding="utf-8")
    result = run_cli_in(tmp_path, ["svg", "out.ansi", "-o", "out.svg"])
    assert_SUCCESS(result)
    document = (tmp_path / "out.svg").read_text(encoding="utf-8")
    assert document.startswith("<svg ")
    assert validate_svg(document).ok


def test_svg_layout_comes_from_config(tmp_path: Path) -> None:
    (tmp_path / "diagframe.toml").write_text(
        '[svg]\npadding = 4\nfg = "#FFFFFF"\n', encoding="utf-8"
    )
    result = run_cli_in(tmp_path, ["svg"], input_text="x\n")
    assert_SUCCESS(result)
    assert '<tspan x="4px"' in result.output
    assert ".fg { fill: #FFFFFF }" in result.output


def test_svg_missing_input(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["svg", "nope.ansi"])
    assert_FILE_NOT_FOUND(result)

# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_fixture_commands.py
#   file_relpath : tests/cli/test_fixture_commands.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests: `fixture check` and `fixture compare`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.cli.conftest import (
    REPORT_TOML,
    assert_FAILURE,
    assert_FILE_NOT_FOUND,
    assert_FIXTURE_MISMATCH,
    assert_SUCCESS,
    run_cli_in,
    write_report,
)

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.cli


def _render_svg(tmp_path: Path, name: str = "good.svg") -> Path:
    write_report(tmp_path)
    result = run_cli_in(tmp_path, ["render", "report.toml", "--format", "svg", "-o", name])
    assert_SUCCESS(result)
    return tmp_path / name


def test_check_reports_well_formed_fixtures(tmp_path: Path) -> None:
    _render_svg(tmp_path)
    result = run_cli_in(tmp_path, ["--no-color", "fixture", "check", "good.svg"])
    assert_SUCCESS(result)
    assert result.output.strip() == "good.svg: ok (5 lines)"


def test_check_quiet_prints_nothing_for_good_fixtures(tmp_path: Path) -> None:
    _render_svg(tmp_path)
    result = run_cli_in(tmp_path, ["-q", "fixture", "check", "good.svg"])
    assert_SUCCESS(result)
    assert result.output == ""


def test_check_lists_problems(tmp_path: Path) -> None:
    _render_svg(tmp_path)
    (tmp_path / "bad.svg").write_text("<svg><rect/>", encoding="utf-8")
    result = run_cli_in(tmp_path, ["--no-color", "fixture", "check", "good.svg", "bad.svg"])
    assert_FAILURE(result)
    assert "good.svg: ok" in result.output
    assert "bad.svg: not well-formed" in result.output
    assert "  - not well-formed XML" in result.output
    assert "1 of 2 fixture(s) are not well-formed" in result.output


def test_check_missing_file(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["fixture", "check", "absent.svg"])
    assert_FILE_NOT_FOUND(result)


def test_compare_writes_missing_fixture_then_matches(tmp_path: Path) -> None:
    write_report(tmp_path)
    argv = ["--no-color", "fixture", "compare", "report.toml", "fixtures/e0308.svg"]

    result = run_cli_in(tmp_path, argv)
    assert_FIXTURE_MISMATCH(result)
    assert (tmp_path / "fixtures" / "e0308.svg").is_file()

    result = run_cli_in(tmp_path, argv)
    assert_SUCCESS(result)
    assert result.output.strip() == "fixtures/e0308.svg: matches"


def test_compare_mismatch_prints_a_diff(tmp_path: Path) -> None:
    fixture = _render_svg(tmp_path, "e0308.svg")
    write_report(tmp_path, text=REPORT_TOML.replace("mismatched types", "wrong types"))
    result = run_cli_in(tmp_path, ["--no-color", "fixture", "compare", "report.toml", "e0308.svg"])
    assert_FIXTURE_MISMATCH(result)
    assert "+++ actual" in result.output
    assert "mismatched types" in result.output
    assert "wrong types" in result.output
    # The stored fixture is left alone.
    assert "mismatched types" in fixture.read_text(encoding="utf-8")


def test_compare_update_rewrites_the_fixture(tmp_path: Path) -> None:
    fixture = _render_svg(tmp_path, "e0308.svg")
    write_report(tmp_path, text=REPORT_TOML.replace("mismatched types", "wrong types"))
    argv = ["--no-color", "fixture", "compare", "report.toml", "e0308.svg"]

    result = run_cli_in(tmp_path, [*argv, "--update"])
    assert_SUCCESS(result)
    assert result.output.strip() == "e0308.svg: updated"
    assert "wrong types" in fixture.read_text(encoding="utf-8")

    assert_SUCCESS(run_cli_in(tmp_path, argv))


def test_compare_uses_render_options(tmp_path: Path) -> None:
    _render_svg(tmp_path, "e0308.svg")
    argv = ["fixture", "compare", "report.toml", "e0308.svg"]
    assert_FIXTURE_MISMATCH(run_cli_in(tmp_path, [*argv, "--theme", "unicode"]))
    assert_SUCCESS(run_cli_in(tmp_path, [*argv, "--theme", "ascii"]))

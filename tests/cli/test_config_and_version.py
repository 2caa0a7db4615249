# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_config_and_version.py
#   file_relpath : tests/cli/test_config_and_version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests: the root group, `config dump` and `version`."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import tomlkit

from diagframe.cli.exit_codes import ExitCode
from diagframe.constants import DIAGFRAME_VERSION
from tests.cli.conftest import assert_CONFIG_ERROR, assert_SUCCESS, run_cli, run_cli_in

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.cli


def test_no_subcommand_prints_hint_and_help() -> None:
    result = run_cli([])
    assert_SUCCESS(result)
    assert "Hint: use 'diagframe render REPORT.toml'" in result.output
    assert "Commands:" in result.output
    for name in ("render", "svg", "fixture", "config", "version"):
        assert name in result.output


def test_verbose_and_quiet_are_exclusive() -> None:
    result = run_cli(["-v", "-q", "version"])
    assert result.exit_code == ExitCode.USAGE_ERROR, result.output
    assert "mutually exclusive" in result.output


def test_version_text() -> None:
    result = run_cli(["--no-color", "version"])
    assert_SUCCESS(result)
    assert result.output.strip() == DIAGFRAME_VERSION


def test_version_json() -> None:
    result = run_cli(["--no-color", "version", "--format", "json"])
    assert_SUCCESS(result)
    assert json.loads(result.output) == {"version": DIAGFRAME_VERSION}


def test_config_dump_defaults(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["--no-color", "config", "dump"])
    assert_SUCCESS(result)
    data: Any = tomlkit.parse(result.output)
    assert data["renderer"]["theme"] == "ascii"
    assert data["renderer"]["term_width"] == 140
    assert data["svg"]["line_height"] == 18


def test_config_dump_merges_local_files(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.diagframe.renderer]\ntheme = "unicode"\nterm_width = 100\n', encoding="utf-8"
    )
    (tmp_path / "diagframe.toml").write_text("[renderer]\nterm_width = 90\n", encoding="utf-8")

    result = run_cli_in(tmp_path, ["--no-color", "config", "dump"])
    assert_SUCCESS(result)
    data: Any = tomlkit.parse(result.output)
    assert data["renderer"]["theme"] == "unicode"
    assert data["renderer"]["term_width"] == 90

    result = run_cli_in(tmp_path, ["--no-color", "config", "dump", "--no-config"])
    data = tomlkit.parse(result.output)
    assert data["renderer"]["theme"] == "ascii"


def test_config_dump_for_pyproject(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["--no-color", "config", "dump", "--pyproject"])
    assert_SUCCESS(result)
    data: Any = tomlkit.parse(result.output)
    assert data["tool"]["diagframe"]["renderer"]["theme"] == "ascii"


def test_config_dump_invalid_file(tmp_path: Path) -> None:
    (tmp_path / "bad.toml").write_text("[svg]\nbg = 'black'\n", encoding="utf-8")
    result = run_cli_in(tmp_path, ["config", "dump", "--config", "bad.toml"])
    assert_CONFIG_ERROR(result)
    assert "svg.bg must be a #RRGGBB color" in result.output

# topmark:header:start
#
#   project      : DiagFrame
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running DiagFrame in a controlled working directory.

`run_cli_in()` changes the process working directory to the given
``tmp_path`` before invoking the Click CLI, so that relative report paths and
config discovery (``pyproject.toml`` / ``diagframe.toml`` in the working
directory) are resolved against the temporary test directory.
"""

from __future__ import annotations

import os
from typing import IO, TYPE_CHECKING, Any

from click.testing import CliRunner, Result

from diagframe.cli.exit_codes import ExitCode
from diagframe.cli.main import cli

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

# A minimal report: one error with a primary annotation on line 2.
REPORT_TOML: str = '''\
[[group]]
level = "error"
title = "mismatched types"
id = "E0308"

[[group.element]]
type = "snippet"
path = "src/main.rs"
source = """
fn main() {
    let x: u32 = "a";
}
"""

[[group.element.annotation]]
kind = "primary"
start = 29
end = 32
label = "expected `u32`"
'''

REPORT_TEXT: str = """\
error[E0308]: mismatched types
 --> src/main.rs:2:18
  |
2 |     let x: u32 = "a";
  |                  ^^^ expected `u32`
"""


def run_cli_in(
    tmp_path: Path,
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with `tmp_path` as the working directory.

    Args:
        tmp_path (Path): Directory used as the CWD for the command invocation.
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["render", "r.toml"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by `CliRunner.invoke`.
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(cli, argv, input=input_text)
    finally:
        os.chdir(cwd)


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does not depend on files or config
    discovery (e.g. ``--help`` or ``version``).
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text)


def write_report(tmp_path: Path, name: str = "report.toml", text: str = REPORT_TOML) -> Path:
    """Write a report document below ``tmp_path`` and return its path."""
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_FAILURE(result: Result) -> None:
    """Assert that the command exited with FAILURE (code 1)."""
    assert result.exit_code == ExitCode.FAILURE, result.output


def assert_FIXTURE_MISMATCH(result: Result) -> None:
    """Assert that the command exited with FIXTURE_MISMATCH (code 2)."""
    assert result.exit_code == ExitCode.FIXTURE_MISMATCH, result.output


def assert_REPORT_ERROR(result: Result) -> None:
    """Assert that the command exited with REPORT_ERROR (code 65)."""
    assert result.exit_code == ExitCode.REPORT_ERROR, result.output


def assert_FILE_NOT_FOUND(result: Result) -> None:
    """Assert that the command exited with FILE_NOT_FOUND (code 66)."""
    assert result.exit_code == ExitCode.FILE_NOT_FOUND, result.output


def assert_CONFIG_ERROR(result: Result) -> None:
    """Assert that the command exited with CONFIG_ERROR (code 78)."""
    assert result.exit_code == ExitCode.CONFIG_ERROR, result.output

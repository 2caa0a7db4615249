# topmark:header:start
#
#   project      : DiagFrame
#   file         : errors.py
#   file_relpath : src/diagframe/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the DiagFrame CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes. Library errors are translated into them by
    [`library_errors`][diagframe.cli.cmd_common.library_errors].

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from diagframe.cli.exit_codes import ExitCode


class DiagframeCliError(click.ClickException):
    """Base class for all DiagFrame CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(f"Error: {self.format_message()}")
                return
        super().show(file)


class DiagframeUsageError(DiagframeCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class DiagframeConfigError(DiagframeCliError):
    """Error for configuration errors (malformed TOML, wrong value types)."""

    exit_code = ExitCode.CONFIG_ERROR


class DiagframeFileNotFoundError(DiagframeCliError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class DiagframeIOError(DiagframeCliError):
    """Error for I/O errors reading/writing files."""

    exit_code = ExitCode.IO_ERROR


class DiagframeReportError(DiagframeCliError):
    """Error for malformed report documents and reports that cannot be rendered."""

    exit_code = ExitCode.REPORT_ERROR


class DiagframeFixtureMismatchError(DiagframeCliError):
    """Error when rendered output differs from a stored fixture."""

    exit_code = ExitCode.FIXTURE_MISMATCH

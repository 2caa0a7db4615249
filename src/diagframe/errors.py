# topmark:header:start
#
#   project      : DiagFrame
#   file         : errors.py
#   file_relpath : src/diagframe/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Library exceptions for DiagFrame.

These exceptions are raised by the rendering, loading and fixture layers.
They are UI-agnostic: the CLI translates them into Click exceptions with
standardized exit codes (see `diagframe.cli.errors`).
"""

from __future__ import annotations


class DiagframeError(Exception):
    """Base class for all DiagFrame library errors."""


class SpanOutOfBoundsError(DiagframeError, ValueError):
    """An annotation or patch span reaches past the end of its snippet source."""

    def __init__(self, start: int, end: int, source_len: int) -> None:
        super().__init__(
            f"Annotation range `{start}..{end}` is beyond the end of buffer `{source_len}`"
        )
        self.start = start
        self.end = end
        self.source_len = source_len


class EmptyReportError(DiagframeError, ValueError):
    """A report has nothing to render (no groups, or no title where one is required)."""


class ReportFormatError(DiagframeError, ValueError):
    """A serialized report (TOML) does not match the expected shape.

    Attributes:
        where (str): Dotted table path of the offending entry (e.g. ``group[0].element[1]``).
    """

    def __init__(self, where: str, message: str) -> None:
        super().__init__(f"{where}: {message}" if where else message)
        self.where = where


class FixtureMismatchError(DiagframeError, AssertionError):
    """Rendered output differs from the stored fixture (or the fixture was just created).

    Attributes:
        diff (str): Unified diff between the stored fixture and the actual output.
    """

    def __init__(self, message: str, diff: str = "") -> None:
        super().__init__(message)
        self.diff = diff


class ConfigError(DiagframeError, ValueError):
    """A configuration value has the wrong type or an invalid value."""

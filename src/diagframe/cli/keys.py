# topmark:header:start
#
#   project      : DiagFrame
#   file         : keys.py
#   file_relpath : src/diagframe/cli/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical CLI command names and option spellings for DiagFrame.

Centralizing these values avoids string duplication between command
definitions, help texts and tests.
"""

from __future__ import annotations

from typing import Final


class CliCmd:
    """Command names exposed by the DiagFrame CLI."""

    RENDER: Final[str] = "render"
    SVG: Final[str] = "svg"
    FIXTURE: Final[str] = "fixture"
    FIXTURE_CHECK: Final[str] = "check"
    FIXTURE_COMPARE: Final[str] = "compare"
    CONFIG: Final[str] = "config"
    CONFIG_DUMP: Final[str] = "dump"
    VERSION: Final[str] = "version"


class CliOpt:
    """User-facing long option spellings (leading ``--`` included)."""

    CONFIG: Final[str] = "--config"
    NO_CONFIG: Final[str] = "--no-config"
    FORMAT: Final[str] = "--format"
    OUTPUT: Final[str] = "--output"
    THEME: Final[str] = "--theme"
    TERM_WIDTH: Final[str] = "--term-width"
    ANONYMIZE_LINE_NUMBERS: Final[str] = "--anonymize-line-numbers"
    SHORT: Final[str] = "--short"
    UPDATE: Final[str] = "--update"

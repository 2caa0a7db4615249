# topmark:header:start
#
#   project      : DiagFrame
#   file         : keys.py
#   file_relpath : src/diagframe/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for DiagFrame configuration.

These names are the external configuration schema as it appears in
``diagframe.toml`` and in ``[tool.diagframe]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by DiagFrame configuration."""

    # [renderer]
    SECTION_RENDERER: Final[str] = "renderer"

    KEY_THEME: Final[str] = "theme"
    KEY_TERM_WIDTH: Final[str] = "term_width"
    KEY_ANONYMIZED_LINE_NUMBERS: Final[str] = "anonymized_line_numbers"
    KEY_SHORT_MESSAGE: Final[str] = "short_message"
    KEY_STYLED: Final[str] = "styled"

    # [svg]
    SECTION_SVG: Final[str] = "svg"

    KEY_FONT_FAMILY: Final[str] = "font_family"
    KEY_FONT_SIZE: Final[str] = "font_size"
    KEY_LINE_HEIGHT: Final[str] = "line_height"
    KEY_PADDING: Final[str] = "padding"
    KEY_CHAR_WIDTH: Final[str] = "char_width"
    KEY_FG: Final[str] = "fg"
    KEY_BG: Final[str] = "bg"

    RENDERER_KEYS: Final[frozenset[str]] = frozenset(
        {KEY_THEME, KEY_TERM_WIDTH, KEY_ANONYMIZED_LINE_NUMBERS, KEY_SHORT_MESSAGE, KEY_STYLED}
    )
    SVG_KEYS: Final[frozenset[str]] = frozenset(
        {
            KEY_FONT_FAMILY,
            KEY_FONT_SIZE,
            KEY_LINE_HEIGHT,
            KEY_PADDING,
            KEY_CHAR_WIDTH,
            KEY_FG,
            KEY_BG,
        }
    )

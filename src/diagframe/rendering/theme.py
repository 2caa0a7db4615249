# topmark:header:start
#
#   project      : DiagFrame
#   file         : theme.py
#   file_relpath : src/diagframe/rendering/theme.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Output themes: the glyphs used to draw the diagnostic frame.

Two themes are available: ``ASCII`` (the classic ``-->``/``|``/``^`` look) and
``UNICODE`` (box-drawing characters). Underline glyphs are grouped per theme and
per primary/secondary annotation in [`UnderlineParts`][diagframe.rendering.theme.UnderlineParts].

Glossary of the underline parts, with the unicode glyphs for a primary span:

```text
              X0 Y0
label_start > ┯━━━━ < underline
              │ < vertical_text_line
              text

multiline_whole_line > ┏ X0 Y0
                       ┃   X1 Y1
                       ┗━━━━┛ < multiline_end_same_line
```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from diagframe.rendering.styles import ElementStyle


class OutputTheme(str, Enum):
    """Glyph set used to draw the diagnostic frame."""

    ASCII = "ascii"
    UNICODE = "unicode"

    @property
    def col_separator(self) -> str:
        """Vertical separator between line numbers and code."""
        return "|" if self is OutputTheme.ASCII else "│"

    @property
    def file_start(self) -> str:
        """Prefix of the primary location line."""
        return "--> " if self is OutputTheme.ASCII else " ╭▸ "

    @property
    def secondary_file_start(self) -> str:
        """Prefix of a secondary location line."""
        return "::: " if self is OutputTheme.ASCII else " ⸬  "

    @property
    def multi_suggestion_separator(self) -> str:
        """Separator drawn between consecutive suggestions."""
        return "|" if self is OutputTheme.ASCII else "├╴"

    @property
    def margin(self) -> str:
        """Placeholder for elided code."""
        return "..." if self is OutputTheme.ASCII else "…"

    @property
    def diff(self) -> str:
        """Marker for replaced code in suggestions."""
        return "~" if self is OutputTheme.ASCII else "±"

    @property
    def window_start(self) -> str:
        """Glyphs opening a code window."""
        return "|" if self is OutputTheme.ASCII else "╭╴"

    @property
    def window_end(self) -> str:
        """Glyphs closing a code window."""
        return "|" if self is OutputTheme.ASCII else "╰╴"

    def note_separator(self, is_cont: bool) -> str:
        """Prefix of a ``= note:`` line; ``is_cont`` means another element follows."""
        if self is OutputTheme.ASCII:
            return "= "
        return "├ " if is_cont else "╰ "

    def line_separator(self, col: int) -> tuple[int, str]:
        """Column and glyphs of the line drawn between non-adjacent source lines."""
        if self is OutputTheme.ASCII:
            return 0, "..."
        return col - 2, "‡"

    def multiline_line(self, primary: bool) -> str:
        """Vertical bar drawn to the left of a multi-line span."""
        if self is OutputTheme.ASCII:
            return "|"
        return "┃" if primary else "│"

    def underline(self, primary: bool) -> UnderlineParts:
        """Return the underline glyph set for a primary or secondary annotation."""
        return _UNDERLINES[(self, primary)]


@dataclass(frozen=True)
class UnderlineParts:
    """Glyphs used to underline one kind of annotation."""

    style: ElementStyle
    underline: str
    label_start: str
    vertical_text_line: str
    multiline_vertical: str
    multiline_horizontal: str
    multiline_whole_line: str
    multiline_start_down: str
    bottom_right: str
    top_left: str
    top_right_flat: str
    bottom_left: str
    multiline_end_up: str
    multiline_end_same_line: str
    multiline_bottom_right_with_text: str


def _ascii(style: ElementStyle, mark: str) -> UnderlineParts:
    return UnderlineParts(
        style=style,
        underline=mark,
        label_start=mark,
        vertical_text_line="|",
        multiline_vertical="|",
        multiline_horizontal="_",
        multiline_whole_line="/",
        multiline_start_down=mark,
        bottom_right="|",
        top_left=" ",
        top_right_flat=mark,
        bottom_left="|",
        multiline_end_up=mark,
        multiline_end_same_line=mark,
        multiline_bottom_right_with_text="|",
    )


_UNDERLINES: dict[tuple[OutputTheme, bool], UnderlineParts] = {
    (OutputTheme.ASCII, True): _ascii(ElementStyle.UNDERLINE_PRIMARY, "^"),
    (OutputTheme.ASCII, False): _ascii(ElementStyle.UNDERLINE_SECONDARY, "-"),
    (OutputTheme.UNICODE, True): UnderlineParts(
        style=ElementStyle.UNDERLINE_PRIMARY,
        underline="━",
        label_start="┯",
        vertical_text_line="│",
        multiline_vertical="┃",
        multiline_horizontal="━",
        multiline_whole_line="┏",
        multiline_start_down="╿",
        bottom_right="┙",
        top_left="┏",
        top_right_flat="┛",
        bottom_left="┗",
        multiline_end_up="╿",
        multiline_end_same_line="┛",
        multiline_bottom_right_with_text="┥",
    ),
    (OutputTheme.UNICODE, False): UnderlineParts(
        style=ElementStyle.UNDERLINE_SECONDARY,
        underline="─",
        label_start="┬",
        vertical_text_line="│",
        multiline_vertical="│",
        multiline_horizontal="─",
        multiline_whole_line="┌",
        multiline_start_down="│",
        bottom_right="┘",
        top_left="┌",
        top_right_flat="┘",
        bottom_left="└",
        multiline_end_up="│",
        multiline_end_same_line="┘",
        multiline_bottom_right_with_text="┤",
    ),
}

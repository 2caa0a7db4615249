# topmark:header:start
#
#   project      : DiagFrame
#   file         : styles.py
#   file_relpath : src/diagframe/rendering/styles.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Text styles, the renderer stylesheet and semantic element styles.

A [`Style`][diagframe.rendering.styles.Style] is a terminal text style. Its SGR
escape prefix is produced with ``click.style`` so that the same codes are
emitted as by the rest of the CLI. A
[`Stylesheet`][diagframe.rendering.styles.Stylesheet] assigns a `Style` to each
role (levels, line numbers, additions, ...), and an
[`ElementStyle`][diagframe.rendering.styles.ElementStyle] is the semantic tag
stored in each cell of the styled buffer; it is resolved against the group's
level and the stylesheet only when the buffer is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Union

import click

if TYPE_CHECKING:
    from diagframe.diagnostic.level import Level, LevelKind

# A named ANSI color ("red", "bright_blue", ...), a 256-color index or an RGB triple.
Color = Union[str, int, tuple[int, int, int]]

RESET: str = "\x1b[0m"

ANSI_COLOR_NAMES: tuple[str, ...] = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)


@dataclass(frozen=True)
class Style:
    """A terminal text style.

    Attributes:
        fg (Color | None): Foreground color or None for the terminal default.
        bg (Color | None): Background color or None for the terminal default.
        bold (bool): Bold (increased intensity) text.
        dim (bool): Dim (decreased intensity) text.
        italic (bool): Italic text.
        underline (bool): Underlined text.
    """

    fg: Color | None = None
    bg: Color | None = None
    bold: bool = False
    dim: bool = False
    italic: bool = False
    underline: bool = False

    @property
    def is_plain(self) -> bool:
        """Return True if the style carries no color and no effect."""
        return self == PLAIN

    def effects(self, *, bold: bool = False, dim: bool = False, italic: bool = False) -> Style:
        """Return a copy with the given effects switched on in addition to the current ones."""
        return replace(
            self,
            bold=self.bold or bold,
            dim=self.dim or dim,
            italic=self.italic or italic,
        )

    def render(self) -> str:
        """Return the SGR escape sequence that switches this style on.

        Returns:
            str: The escape prefix, or an empty string for the plain style.
        """
        if self.is_plain:
            return ""
        return click.style(
            "",
            fg=self.fg,
            bg=self.bg,
            bold=self.bold or None,
            dim=self.dim or None,
            italic=self.italic or None,
            underline=self.underline or None,
            reset=False,
        )

    def render_reset(self) -> str:
        """Return the escape sequence that switches this style off (empty for the plain style)."""
        return "" if self.is_plain else RESET


PLAIN = Style()


@dataclass(frozen=True)
class Stylesheet:
    """Styles used by the renderer, one per role."""

    error: Style = PLAIN
    warning: Style = PLAIN
    info: Style = PLAIN
    note: Style = PLAIN
    help: Style = PLAIN
    line_num: Style = PLAIN
    emphasis: Style = PLAIN
    none: Style = PLAIN
    context: Style = PLAIN
    addition: Style = PLAIN
    removal: Style = PLAIN

    @classmethod
    def plain(cls) -> Stylesheet:
        """Return a stylesheet without any styling."""
        return cls()

    @classmethod
    def styled(cls) -> Stylesheet:
        """Return the default terminal stylesheet."""
        bright_blue = Style(fg="bright_blue")
        return cls(
            error=Style(fg="bright_red", bold=True),
            warning=Style(fg="yellow", bold=True),
            info=bright_blue.effects(bold=True),
            note=Style(fg="bright_green", bold=True),
            help=Style(fg="bright_cyan", bold=True),
            line_num=bright_blue.effects(bold=True),
            emphasis=Style(bold=True),
            none=PLAIN,
            context=bright_blue.effects(bold=True),
            addition=Style(fg="bright_green"),
            removal=Style(fg="bright_red"),
        )

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Return the names of the stylesheet roles."""
        return tuple(f.name for f in fields(cls))

    def with_style(self, name: str, style: Style) -> Stylesheet:
        """Return a copy with the style for role ``name`` replaced.

        Raises:
            ValueError: If ``name`` is not a stylesheet role.
        """
        if name not in self.field_names():
            raise ValueError(f"Unknown stylesheet field: {name!r}")
        return replace(self, **{name: style})

    def for_level(self, kind: LevelKind) -> Style:
        """Return the style of a diagnostic level."""
        return getattr(self, kind.value)


class ElementStyle(Enum):
    """Semantic style of a cell in the styled buffer."""

    MAIN_HEADER_MSG = "main_header_msg"
    HEADER_MSG = "header_msg"
    LINE_AND_COLUMN = "line_and_column"
    LINE_NUMBER = "line_number"
    QUOTATION = "quotation"
    UNDERLINE_PRIMARY = "underline_primary"
    UNDERLINE_SECONDARY = "underline_secondary"
    LABEL_PRIMARY = "label_primary"
    LABEL_SECONDARY = "label_secondary"
    NO_STYLE = "no_style"
    LEVEL_ERROR = "error"
    LEVEL_WARNING = "warning"
    LEVEL_INFO = "info"
    LEVEL_NOTE = "note"
    LEVEL_HELP = "help"
    ADDITION = "addition"
    REMOVAL = "removal"

    @classmethod
    def for_level(cls, kind: LevelKind) -> ElementStyle:
        """Return the element style used to print the label of a level."""
        return cls(kind.value)

    def resolve(self, level: Level, stylesheet: Stylesheet) -> Style:
        """Resolve this element style to a concrete `Style`.

        Args:
            level (Level): The primary level of the group being rendered.
            stylesheet (Stylesheet): The renderer stylesheet.

        Returns:
            Style: The style to print the cell with.
        """
        if self is ElementStyle.ADDITION:
            return stylesheet.addition
        if self is ElementStyle.REMOVAL:
            return stylesheet.removal
        if self is ElementStyle.LINE_NUMBER:
            return stylesheet.line_num
        if self is ElementStyle.MAIN_HEADER_MSG:
            return stylesheet.emphasis
        if self in (ElementStyle.UNDERLINE_PRIMARY, ElementStyle.LABEL_PRIMARY):
            return stylesheet.for_level(level.kind)
        if self in (ElementStyle.UNDERLINE_SECONDARY, ElementStyle.LABEL_SECONDARY):
            return stylesheet.context
        if self.value in _LEVEL_VALUES:
            return getattr(stylesheet, self.value)
        # LINE_AND_COLUMN, QUOTATION, HEADER_MSG, NO_STYLE
        return stylesheet.none


_LEVEL_VALUES: frozenset[str] = frozenset({"error", "warning", "info", "note", "help"})

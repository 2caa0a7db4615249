# topmark:header:start
#
#   project      : DiagFrame
#   file         : buffer.py
#   file_relpath : src/diagframe/rendering/buffer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""A growable grid of styled characters.

Drawing a diagnostic is easier on a canvas than on a stream: underlines, labels
and connector lines are written at arbitrary (line, column) positions, possibly
out of order, and only turned into text once everything is in place. Each cell
holds one character and a semantic
[`ElementStyle`][diagframe.rendering.styles.ElementStyle].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from diagframe.rendering.styles import ElementStyle

if TYPE_CHECKING:
    from diagframe.diagnostic.level import Level
    from diagframe.rendering.styles import Style, Stylesheet

# A run of consecutive characters sharing one resolved style.
Segment = tuple[str, "Style"]


@dataclass(frozen=True)
class StyledChar:
    """A single buffer cell."""

    ch: str
    style: ElementStyle


SPACE = StyledChar(" ", ElementStyle.NO_STYLE)


class StyledBuffer:
    """Two-dimensional buffer of `StyledChar` cells."""

    def __init__(self) -> None:
        self.lines: list[list[StyledChar]] = []

    def __repr__(self) -> str:
        return f"StyledBuffer(lines={self.num_lines()})"

    def num_lines(self) -> int:
        """Return the number of lines in the buffer."""
        return len(self.lines)

    def _ensure_lines(self, line: int) -> None:
        while len(self.lines) <= line:
            self.lines.append([])

    def putc(self, line: int, col: int, ch: str, style: ElementStyle) -> None:
        """Set the cell at ``(line, col)``, growing the buffer with blank cells as needed."""
        self._ensure_lines(line)
        row = self.lines[line]
        if col >= len(row):
            row.extend([SPACE] * (col + 1 - len(row)))
        row[col] = StyledChar(ch, style)

    def puts(self, line: int, col: int, text: str, style: ElementStyle) -> None:
        """Write ``text`` one character per cell starting at ``(line, col)``."""
        for offset, ch in enumerate(text):
            self.putc(line, col + offset, ch, style)

    def prepend(self, line: int, text: str, style: ElementStyle) -> None:
        """Insert ``text`` at the start of ``line``, shifting existing cells right."""
        self._ensure_lines(line)
        row = self.lines[line]
        if row:
            row[0:0] = [SPACE] * len(text)
        self.puts(line, 0, text, style)

    def append(self, line: int, text: str, style: ElementStyle) -> None:
        """Write ``text`` after the last cell of ``line``."""
        if line >= self.num_lines():
            self.puts(line, 0, text, style)
        else:
            self.puts(line, len(self.lines[line]), text, style)

    def replace(self, line: int, start: int, end: int, text: str) -> None:
        """Replace cells ``start..end`` of ``line`` with ``text`` styled as a line number.

        The cells ``start..end - len(text)`` are dropped first, so the line
        shrinks by ``end - start - len(text)`` cells. Nothing happens for an
        empty range or a range outside the line.
        """
        if start >= end or line >= self.num_lines():
            return
        row = self.lines[line]
        drop_end = end - len(text)
        if drop_end < start or end > len(row):
            return
        del row[start:drop_end]
        for offset, ch in enumerate(text):
            row[start + offset] = StyledChar(ch, ElementStyle.LINE_NUMBER)

    def set_style(self, line: int, col: int, style: ElementStyle, overwrite: bool) -> None:
        """Restyle an existing cell.

        Without ``overwrite`` only unstyled (``NO_STYLE``) and source
        (``QUOTATION``) cells are changed. Missing cells are ignored.
        """
        if not 0 <= line < len(self.lines):
            return
        row = self.lines[line]
        if not 0 <= col < len(row):
            return
        cell = row[col]
        if overwrite or cell.style in (ElementStyle.NO_STYLE, ElementStyle.QUOTATION):
            row[col] = StyledChar(cell.ch, style)

    def set_style_range(
        self,
        line: int,
        col_start: int,
        col_end: int,
        style: ElementStyle,
        overwrite: bool,
    ) -> None:
        """Restyle the cells ``col_start..col_end`` of ``line``."""
        for col in range(col_start, col_end):
            self.set_style(line, col, style, overwrite)

    def segments(self, level: Level, stylesheet: Stylesheet) -> list[list[Segment]]:
        """Group each line into runs of characters sharing one resolved style.

        Args:
            level (Level): The group's primary level (used for primary annotations).
            stylesheet (Stylesheet): Stylesheet resolving element styles.

        Returns:
            list[list[Segment]]: One list of ``(text, style)`` runs per line.
        """
        result: list[list[Segment]] = []
        for row in self.lines:
            runs: list[Segment] = []
            text: list[str] = []
            current: Style | None = None
            for cell in row:
                style = cell.style.resolve(level, stylesheet)
                if style != current and text:
                    assert current is not None
                    runs.append(("".join(text), current))
                    text = []
                current = style
                text.append(cell.ch)
            if text and current is not None:
                runs.append(("".join(text), current))
            result.append(runs)
        return result

    def render(self, level: Level, stylesheet: Stylesheet) -> str:
        """Render the buffer to text with ANSI escape sequences.

        Each run is opened with its style's escape prefix and closed with the
        matching reset; plain runs carry no escapes at all. Lines are joined
        with ``\\n`` and the result has no trailing newline.

        Args:
            level (Level): The group's primary level (used for primary annotations).
            stylesheet (Stylesheet): Stylesheet resolving element styles.

        Returns:
            str: The rendered text.
        """
        out: list[str] = []
        for runs in self.segments(level, stylesheet):
            out.append(
                "".join(f"{style.render()}{text}{style.render_reset()}" for text, style in runs)
            )
        return "\n".join(out)

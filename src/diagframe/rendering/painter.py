# topmark:header:start
#
#   project      : DiagFrame
#   file         : painter.py
#   file_relpath : src/diagframe/rendering/painter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Drawing primitives shared by the span highlighter and the diff formatter.

A [`Painter`][diagframe.rendering.painter.Painter] knows the output theme and
the line-number policy, and writes frame elements (column separators, location
lines, numbered source lines) into a
[`StyledBuffer`][diagframe.rendering.buffer.StyledBuffer].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from diagframe.constants import ANONYMIZED_LINE_NUM, DEFAULT_TERM_WIDTH
from diagframe.rendering.styles import ElementStyle
from diagframe.rendering.theme import OutputTheme
from diagframe.rendering.width import char_width, str_width

if TYPE_CHECKING:
    from diagframe.diagnostic.model import Origin
    from diagframe.rendering.buffer import StyledBuffer
    from diagframe.rendering.margin import Margin
    from diagframe.rendering.theme import UnderlineParts


@dataclass(frozen=True)
class Painter:
    """Frame drawing helpers for one renderer configuration."""

    theme: OutputTheme = OutputTheme.ASCII
    anonymized_line_numbers: bool = False
    short_message: bool = False
    term_width: int = DEFAULT_TERM_WIDTH

    def underline(self, primary: bool) -> UnderlineParts:
        """Return the underline glyphs for a primary or secondary annotation."""
        return self.theme.underline(primary)

    def maybe_anonymized(self, line_num: int, width: int) -> str:
        """Return a right-aligned line number, or ``LL`` when line numbers are anonymized."""
        text = ANONYMIZED_LINE_NUM if self.anonymized_line_numbers else str(line_num)
        return text.rjust(width)

    def draw_col_separator(self, buffer: StyledBuffer, line: int, col: int) -> None:
        buffer.puts(line, col, f"{self.theme.col_separator} ", ElementStyle.LINE_NUMBER)

    def draw_col_separator_no_space(self, buffer: StyledBuffer, line: int, col: int) -> None:
        buffer.putc(line, col, self.theme.col_separator, ElementStyle.LINE_NUMBER)

    def draw_col_separator_start(self, buffer: StyledBuffer, line: int, col: int) -> None:
        buffer.puts(line, col, self.theme.window_start, ElementStyle.LINE_NUMBER)

    def draw_col_separator_end(self, buffer: StyledBuffer, line: int, col: int) -> None:
        buffer.puts(line, col, self.theme.window_end, ElementStyle.LINE_NUMBER)

    def draw_note_separator(self, buffer: StyledBuffer, line: int, col: int, is_cont: bool) -> None:
        buffer.puts(line, col, self.theme.note_separator(is_cont), ElementStyle.LINE_NUMBER)

    def draw_line_separator(self, buffer: StyledBuffer, line: int, col: int) -> None:
        column, dots = self.theme.line_separator(col)
        buffer.puts(line, column, dots, ElementStyle.LINE_NUMBER)

    def draw_multiline_line(
        self,
        buffer: StyledBuffer,
        line: int,
        offset: int,
        depth: int,
        style: ElementStyle,
    ) -> None:
        """Draw the vertical bar of a multi-line span at nesting ``depth``."""
        primary = style in (ElementStyle.UNDERLINE_PRIMARY, ElementStyle.LABEL_PRIMARY)
        buffer.putc(line, offset + depth - 1, self.theme.multiline_line(primary), style)

    def draw_range(
        self,
        buffer: StyledBuffer,
        symbol: str,
        line: int,
        col_from: int,
        col_to: int,
        style: ElementStyle,
    ) -> None:
        for col in range(col_from, col_to):
            buffer.putc(line, col, symbol, style)

    def render_origin(
        self,
        buffer: StyledBuffer,
        max_line_num_len: int,
        origin: Origin,
        line_offset: int,
    ) -> None:
        """Draw a location line (``--> path:line:col`` or ``::: path``)."""
        if not self.short_message:
            prefix = self.theme.file_start if origin.primary else self.theme.secondary_file_start
            buffer.prepend(line_offset, prefix, ElementStyle.LINE_NUMBER)

        if origin.line is not None and origin.char_column is not None:
            text = f"{origin.path}:{origin.line}:{origin.char_column}"
        elif origin.line is not None:
            text = f"{origin.path}:{origin.line}"
        else:
            text = origin.path

        buffer.append(line_offset, text, ElementStyle.LINE_AND_COLUMN)
        if not self.short_message:
            for _ in range(max_line_num_len):
                buffer.prepend(line_offset, " ", ElementStyle.NO_STYLE)

    def draw_line(
        self,
        buffer: StyledBuffer,
        source_string: str,
        line_index: int,
        line_offset: int,
        width_offset: int,
        code_offset: int,
        max_line_num_len: int,
        margin: Margin,
    ) -> int:
        """Draw a numbered source line, cut to the margin window.

        Args:
            buffer (StyledBuffer): Target buffer.
            source_string (str): The normalized source line (tabs already expanded).
            line_index (int): Line number to print.
            line_offset (int): Buffer line to draw on.
            width_offset (int): Column of the code area (after the separator).
            code_offset (int): Column where code starts (after multi-line gutters).
            max_line_num_len (int): Width of the line-number column.
            margin (Margin): Horizontal window.

        Returns:
            int: The first shown display column of the line.
        """
        line_len = str_width(source_string)
        left = margin.left(line_len)
        right = margin.right(line_len)

        code_chars: list[str] = []
        skipped = 0
        taken = 0
        skipping = True
        for ch in source_string:
            if skipping:
                skipped += char_width(ch)
                if skipped <= left:
                    continue
                skipping = False
            taken += char_width(ch)
            if taken > right - left:
                break
            code_chars.append(ch)
        code = "".join(code_chars)

        placeholder = self.theme.margin
        padding = str_width(placeholder)
        width_taken = 0
        chars_taken = 0
        if margin.was_cut_left():
            # Mark the code hidden on the left.
            for ch in code:
                width_taken += char_width(ch)
                chars_taken += 1
                if width_taken >= padding:
                    break
            if width_taken > padding:
                left -= width_taken - padding
            buffer.puts(line_offset, code_offset, placeholder, ElementStyle.LINE_NUMBER)

        shown = code[chars_taken:]
        buffer.puts(line_offset, code_offset + width_taken, shown, ElementStyle.QUOTATION)

        if line_len > right:
            # Mark the code hidden on the right.
            char_taken = 0
            width_taken_inner = 0
            for ch in reversed(code):
                width_taken_inner += char_width(ch)
                char_taken += 1
                if width_taken_inner >= padding:
                    break
            buffer.puts(
                line_offset,
                code_offset + width_taken + len(shown) - char_taken,
                placeholder,
                ElementStyle.LINE_NUMBER,
            )

        buffer.puts(
            line_offset,
            0,
            self.maybe_anonymized(line_index, max_line_num_len),
            ElementStyle.LINE_NUMBER,
        )
        self.draw_col_separator_no_space(buffer, line_offset, width_offset - 2)
        return left

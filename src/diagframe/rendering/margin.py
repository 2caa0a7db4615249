# topmark:header:start
#
#   project      : DiagFrame
#   file         : margin.py
#   file_relpath : src/diagframe/rendering/margin.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Horizontal windowing of source lines wider than the terminal."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

# Room left for the `...` placeholder when code is cut.
ELLIPSIS_PASSING: Final[int] = 6
# Leading whitespace wider than this is trimmed...
LONG_WHITESPACE: Final[int] = 20
# ...keeping this much of it.
LONG_WHITESPACE_PADDING: Final[int] = 4


@dataclass
class Margin:
    """Column window of the code shown for one snippet.

    All values are display columns. ``computed_left``/``computed_right`` are
    derived at construction time.

    Attributes:
        whitespace_left (int): Smallest indentation of the shown lines.
        span_left (int): Left-most column pointed at by an annotation.
        span_right (int): Right-most column pointed at by an annotation.
        label_right (int): Right-most column reached by an inline label.
        term_width (int): Columns available for code.
        max_line_len (int): Length of the longest shown line.
    """

    whitespace_left: int
    span_left: int
    span_right: int
    label_right: int
    term_width: int
    max_line_len: int
    computed_left: int = field(init=False, default=0)
    computed_right: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.whitespace_left = max(self.whitespace_left - ELLIPSIS_PASSING, 0)
        self.span_left = max(self.span_left - ELLIPSIS_PASSING, 0)
        self.span_right += ELLIPSIS_PASSING
        self.label_right += ELLIPSIS_PASSING
        self._compute()

    def _compute(self) -> None:
        # Long runs of indentation carry no information.
        if self.whitespace_left > LONG_WHITESPACE:
            self.computed_left = self.whitespace_left - (LONG_WHITESPACE - LONG_WHITESPACE_PADDING)
        else:
            self.computed_left = 0
        self.computed_right = max(self.max_line_len, self.computed_left)

        if self.computed_right - self.computed_left <= self.term_width:
            return
        if self.label_right - self.whitespace_left <= self.term_width:
            # Trimming the whitespace is enough.
            self.computed_left = self.whitespace_left
            self.computed_right = self.computed_left + self.term_width
        elif self.label_right - self.span_left <= self.term_width:
            # Center spans and labels.
            padding_left = (self.term_width - (self.label_right - self.span_left)) // 2
            self.computed_left = max(self.span_left - padding_left, 0)
            self.computed_right = self.computed_left + self.term_width
        elif self.span_right - self.span_left <= self.term_width:
            # Keep the spans, labels may be cut.
            padding_left = (self.term_width - (self.span_right - self.span_left)) // 5 * 2
            self.computed_left = max(self.span_left - padding_left, 0)
            self.computed_right = self.computed_left + self.term_width
        else:
            self.computed_left = self.span_left
            self.computed_right = self.span_right

    def was_cut_left(self) -> bool:
        """Return True if code is hidden on the left side."""
        return self.computed_left > 0

    def left(self, line_len: int) -> int:
        """Return the first shown column of a line of ``line_len`` columns."""
        return min(self.computed_left, line_len)

    def right(self, line_len: int) -> int:
        """Return the column after the last shown one of a line of ``line_len`` columns."""
        if max(line_len - self.computed_left, 0) <= self.term_width:
            return line_len
        return min(line_len, self.computed_right)

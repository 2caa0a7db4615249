# topmark:header:start
#
#   project      : DiagFrame
#   file         : suggestion.py
#   file_relpath : src/diagframe/rendering/suggestion.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diff formatter: draws suggested code changes.

A suggestion snippet is first spliced (its patches applied to the code they
touch), then shown in one of four ways:

* ``DIFF``: a single-line change that removes code shows the old line as
  ``N - old`` and the new one as ``N + new``;
* ``ADD``: a patch inserting whole lines shows them as ``N + line``;
* ``UNDERLINE``: other single-line changes show the new code with ``+``
  (insertion) or ``~`` (replacement) under the inserted text;
* ``NONE``: multi-line changes mark each line with ``+`` or ``~``.

```text
help: consider borrowing here
  |
2 |     let x: &u32 = &"a";
  |            +      +
```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from diagframe.config.logging import get_logger
from diagframe.rendering.styles import ElementStyle
from diagframe.rendering.width import normalize_whitespace, rust_lines, str_width

if TYPE_CHECKING:
    from diagframe.config.logging import DiagframeLogger
    from diagframe.diagnostic.model import Patch, Snippet
    from diagframe.rendering.buffer import StyledBuffer
    from diagframe.rendering.painter import Painter
    from diagframe.rendering.source_map import LineInfo, SourceMap, SubstitutionHighlight

logger: DiagframeLogger = get_logger(__name__)

# Unhighlighted runs longer than this are collapsed to first line, `...`, last line.
MAX_UNHIGHLIGHTED_RUN = 3


class DisplaySuggestion(Enum):
    """How a suggestion is displayed."""

    UNDERLINE = "underline"
    DIFF = "diff"
    NONE = "none"
    ADD = "add"


@dataclass(frozen=True)
class DiffFormatter:
    """Draws suggestion snippets (source code with patches)."""

    painter: Painter

    def render_suggestion(
        self,
        buffer: StyledBuffer,
        suggestion: Snippet,
        max_line_num_len: int,
        sm: SourceMap,
        primary_path: str | None,
        is_cont: bool,
    ) -> None:
        """Draw a suggestion snippet.

        Args:
            buffer (StyledBuffer): Target buffer; drawing starts after its last line.
            suggestion (Snippet): Snippet holding the patches.
            max_line_num_len (int): Width of the line-number column.
            sm (SourceMap): Source map of the snippet.
            primary_path (str | None): Path of the group's primary location; a
                suggestion on another path prints its own location line.
            is_cont (bool): True when the previous element was a suggestion too.
        """
        p = self.painter
        theme = p.theme
        row_num = buffer.num_lines() + (0 if is_cont else 1)

        for i, (complete, parts, highlights) in enumerate(sm.splice_lines(suggestion.patches)):
            has_deletion = any(
                part.is_deletion(sm) or part.is_destructive_replacement(sm) for part in parts
            )
            complete_lines = rust_lines(complete)
            is_multiline = len(complete_lines) > 1

            if i == 0:
                p.draw_col_separator_start(buffer, row_num - 1, max_line_num_len + 1)
            else:
                buffer.puts(
                    row_num - 1,
                    max_line_num_len + 1,
                    theme.multi_suggestion_separator,
                    ElementStyle.LINE_NUMBER,
                )

            if suggestion.path is not None and suggestion.path != primary_path:
                loc, _ = sm.span_to_locations(parts[0].span)
                arrow = theme.file_start
                buffer.puts(row_num - 1, 0, arrow, ElementStyle.LINE_NUMBER)
                location = f"{suggestion.path}:{loc.line}:{loc.char + 1}"
                if is_cont:
                    buffer.append(row_num - 1, location, ElementStyle.LINE_AND_COLUMN)
                else:
                    col = max(max_line_num_len + 1, len(arrow))
                    buffer.puts(row_num - 1, col, location, ElementStyle.LINE_AND_COLUMN)
                for _ in range(max_line_num_len):
                    buffer.prepend(row_num - 1, " ", ElementStyle.NO_STYLE)
                p.draw_col_separator_no_space(buffer, row_num, max_line_num_len + 1)
                row_num += 1

            mode = self._display_mode(parts[0].replacement, len(parts), complete, has_deletion)
            logger.debug("suggestion %d on %s shown as %s", i, suggestion.path, mode.value)
            if mode is DisplaySuggestion.DIFF:
                row_num += 1

            file_lines = sm.span_to_lines(parts[0].span)
            line_start, line_end = sm.span_to_locations(parts[0].span)

            if not complete_lines:
                # The whole line(s) are removed.
                for line in range(line_start.line, line_end.line + 1):
                    row = row_num - 1 + line - line_start.line
                    buffer.puts(
                        row,
                        0,
                        p.maybe_anonymized(line, max_line_num_len),
                        ElementStyle.LINE_NUMBER,
                    )
                    buffer.puts(row, max_line_num_len + 1, "- ", ElementStyle.REMOVAL)
                    buffer.puts(
                        row,
                        max_line_num_len + 3,
                        normalize_whitespace(sm.get_line(line) or ""),
                        ElementStyle.REMOVAL,
                    )
                row_num += line_end.line - line_start.line

            last_pos = 0
            is_item_attribute = False
            unhighlighted: list[tuple[int, str]] = []
            for line_pos, (line, highlight_parts) in enumerate(zip(complete_lines, highlights)):
                last_pos = line_pos
                if not highlight_parts:
                    unhighlighted.append((line_pos, line))
                    continue
                stripped = line.strip()
                if (
                    len(highlight_parts) == 1
                    and stripped.startswith("#[")
                    and stripped.endswith("]")
                ):
                    is_item_attribute = True

                if unhighlighted:
                    row_num = self._draw_context(
                        buffer,
                        row_num,
                        unhighlighted,
                        line_start.line,
                        mode,
                        max_line_num_len,
                        file_lines,
                        is_multiline,
                    )
                    unhighlighted = []

                row_num = self._draw_code_line(
                    buffer,
                    row_num,
                    highlight_parts,
                    line_pos + line_start.line,
                    line,
                    mode,
                    max_line_num_len,
                    file_lines,
                    is_multiline,
                )

            if mode is DisplaySuggestion.ADD and is_item_attribute:
                # Show the line the attribute applies to.
                end = parts[0].span[1]
                attr_lines = sm.span_to_lines((end, end))
                lo, _ = sm.span_to_locations(parts[0].span)
                following = sm.get_line(lo.line)
                if following is not None:
                    row_num = self._draw_code_line(
                        buffer,
                        row_num,
                        [],
                        lo.line + last_pos + 1,
                        normalize_whitespace(following),
                        DisplaySuggestion.NONE,
                        max_line_num_len,
                        attr_lines,
                        is_multiline,
                    )

            if mode is not DisplaySuggestion.NONE:
                row_num = self._underline_parts(buffer, row_num, parts, sm, mode, max_line_num_len)

            # Lines left over after the highlighted ones are elided.
            if len(complete_lines) > len(highlights) + 1:
                placeholder = theme.margin
                buffer.puts(
                    row_num,
                    max(max_line_num_len - str_width(placeholder), 0),
                    placeholder,
                    ElementStyle.LINE_NUMBER,
                )
            else:
                row = row_num if mode is DisplaySuggestion.NONE else row_num - 1
                p.draw_col_separator_end(buffer, row, max_line_num_len + 1)
                row_num = row + 1

    @staticmethod
    def _display_mode(
        first_replacement: str,
        num_parts: int,
        complete: str,
        has_deletion: bool,
    ) -> DisplaySuggestion:
        is_multiline = len(rust_lines(complete)) > 1
        if has_deletion and not is_multiline:
            return DisplaySuggestion.DIFF
        if (
            num_parts == 1
            and first_replacement.endswith("\n")
            and first_replacement.strip() == complete.strip()
        ):
            # Whole lines are added before existing code.
            return DisplaySuggestion.ADD
        if (num_parts != 1 or first_replacement.strip() != complete.strip()) and not is_multiline:
            return DisplaySuggestion.UNDERLINE
        return DisplaySuggestion.NONE

    def _draw_context(
        self,
        buffer: StyledBuffer,
        row_num: int,
        unhighlighted: list[tuple[int, str]],
        line_start: int,
        mode: DisplaySuggestion,
        max_line_num_len: int,
        file_lines: list[LineInfo],
        is_multiline: bool,
    ) -> int:
        """Draw unchanged lines preceding a changed one, collapsing long runs.

        Returns:
            int: The next free buffer row.
        """
        shown = unhighlighted
        elided = len(unhighlighted) > MAX_UNHIGHLIGHTED_RUN
        if elided:
            shown = [unhighlighted[0], unhighlighted[-1]]
        for n, (pos, line) in enumerate(shown):
            if elided and n == 1:
                placeholder = self.painter.theme.margin
                buffer.puts(
                    row_num,
                    max(max_line_num_len - str_width(placeholder), 0),
                    placeholder,
                    ElementStyle.LINE_NUMBER,
                )
                row_num += 1
            row_num = self._draw_code_line(
                buffer,
                row_num,
                [],
                pos + line_start,
                line,
                mode,
                max_line_num_len,
                file_lines,
                is_multiline,
            )
        return row_num

    def _underline_parts(
        self,
        buffer: StyledBuffer,
        row_num: int,
        parts: list[Patch],
        sm: SourceMap,
        mode: DisplaySuggestion,
        max_line_num_len: int,
    ) -> int:
        """Underline inserted text (``UNDERLINE``) or color removed text (``DIFF``).

        Returns:
            int: The next free buffer row.
        """
        padding = max_line_num_len + 3
        # (column, width change) of the parts already applied on the line.
        offsets: list[tuple[int, int]] = []
        for part in parts:
            snippet = sm.span_to_snippet(part.span) or ""
            span_start, span_end = sm.span_to_locations(part.span)
            span_start_pos = span_start.display
            span_end_pos = span_end.display

            # Leading and trailing whitespace is not underlined, unless that is all there is.
            is_whitespace_addition = not part.replacement.strip()
            if is_whitespace_addition:
                lead = 0
                sub_len = str_width(part.replacement)
            else:
                lead = len(part.replacement) - len(part.replacement.lstrip())
                sub_len = str_width(part.replacement.strip())

            offset = sum(change for col, change in offsets if span_start_pos >= col)
            underline_start = span_start_pos + lead + offset
            underline_end = underline_start + sub_len

            if mode is DisplaySuggestion.UNDERLINE:
                mark = "+" if part.is_addition(sm) else self.painter.theme.diff
                for col in range(underline_start, underline_end):
                    buffer.putc(row_num, padding + col, mark, ElementStyle.ADDITION)

            if mode is DisplaySuggestion.DIFF:
                self._color_removal(buffer, row_num, snippet, padding, span_start_pos, span_end_pos)

            full_sub_len = str_width(part.replacement)
            offsets.append((span_end_pos, full_sub_len - (span_end_pos - span_start_pos)))
        return row_num + 1

    @staticmethod
    def _color_removal(
        buffer: StyledBuffer,
        row_num: int,
        snippet: str,
        padding: int,
        span_start_pos: int,
        span_end_pos: int,
    ) -> None:
        """Style the removed code on the ``N - old`` line(s) drawn above ``row_num``.

        ```text
           |
        LL - OLDER   <- row_num - 2
        LL + NEWER
           |         <- row_num
        ```
        """
        removed = rust_lines(snippet)
        newlines = len(removed)
        if 0 < newlines < row_num:
            for i, line in enumerate(removed):
                line = normalize_whitespace(line)
                row = row_num - 2 - (newlines - i - 1)
                if i == 0:
                    start = padding + span_start_pos
                    end = padding + span_start_pos + len(line)
                elif i == newlines - 1:
                    start = padding
                    end = padding + span_end_pos
                else:
                    start = padding
                    end = padding + len(line)
                buffer.set_style_range(row, start, end, ElementStyle.REMOVAL, True)
        else:
            buffer.set_style_range(
                row_num - 2,
                padding + span_start_pos,
                padding + span_end_pos,
                ElementStyle.REMOVAL,
                True,
            )

    def _draw_code_line(
        self,
        buffer: StyledBuffer,
        row_num: int,
        highlight_parts: list[SubstitutionHighlight],
        line_num: int,
        line_to_add: str,
        mode: DisplaySuggestion,
        max_line_num_len: int,
        file_lines: list[LineInfo],
        is_multiline: bool,
    ) -> int:
        """Draw one line of suggested code.

        Returns:
            int: The next free buffer row.
        """
        p = self.painter
        num_col = max_line_num_len + 1
        code_col = max_line_num_len + 3

        if mode is DisplaySuggestion.DIFF and file_lines:
            # A multi-line removal prints every removed line.
            for index, line_to_remove in enumerate(file_lines[:-1]):
                buffer.puts(
                    row_num - 1,
                    0,
                    p.maybe_anonymized(line_num + index, max_line_num_len),
                    ElementStyle.LINE_NUMBER,
                )
                buffer.puts(row_num - 1, num_col, "- ", ElementStyle.REMOVAL)
                buffer.puts(
                    row_num - 1,
                    code_col,
                    normalize_whitespace(line_to_remove.line),
                    ElementStyle.NO_STYLE,
                )
                row_num += 1
            last_line = file_lines[-1]
            if last_line.line == line_to_add:
                # Identical old and new lines are both skipped.
                row_num -= 2
            else:
                buffer.puts(
                    row_num - 1,
                    0,
                    p.maybe_anonymized(line_num + len(file_lines) - 1, max_line_num_len),
                    ElementStyle.LINE_NUMBER,
                )
                buffer.puts(row_num - 1, num_col, "- ", ElementStyle.REMOVAL)
                buffer.puts(
                    row_num - 1,
                    code_col,
                    normalize_whitespace(last_line.line),
                    ElementStyle.NO_STYLE,
                )
                if not line_to_add.strip():
                    # Only whitespace is left: the line is removed, not changed.
                    row_num -= 1
                else:
                    buffer.puts(
                        row_num,
                        0,
                        p.maybe_anonymized(line_num, max_line_num_len),
                        ElementStyle.LINE_NUMBER,
                    )
                    buffer.puts(row_num, num_col, "+ ", ElementStyle.ADDITION)
                    buffer.append(row_num, normalize_whitespace(line_to_add), ElementStyle.NO_STYLE)
        elif is_multiline:
            buffer.puts(
                row_num, 0, p.maybe_anonymized(line_num, max_line_num_len), ElementStyle.LINE_NUMBER
            )
            whole_line = (
                len(highlight_parts) == 1
                and highlight_parts[0].start == 0
                and highlight_parts[0].end == len(line_to_add)
            )
            if whole_line:
                buffer.puts(row_num, num_col, "+ ", ElementStyle.ADDITION)
            elif not highlight_parts:
                p.draw_col_separator_no_space(buffer, row_num, num_col)
            else:
                buffer.puts(row_num, num_col, f"{p.theme.diff} ", ElementStyle.ADDITION)
            buffer.puts(row_num, code_col, normalize_whitespace(line_to_add), ElementStyle.NO_STYLE)
        elif mode is DisplaySuggestion.ADD:
            buffer.puts(
                row_num, 0, p.maybe_anonymized(line_num, max_line_num_len), ElementStyle.LINE_NUMBER
            )
            buffer.puts(row_num, num_col, "+ ", ElementStyle.ADDITION)
            buffer.append(row_num, normalize_whitespace(line_to_add), ElementStyle.NO_STYLE)
        else:
            buffer.puts(
                row_num, 0, p.maybe_anonymized(line_num, max_line_num_len), ElementStyle.LINE_NUMBER
            )
            p.draw_col_separator(buffer, row_num, num_col)
            buffer.append(row_num, normalize_whitespace(line_to_add), ElementStyle.NO_STYLE)

        # Color added or replaced text.
        for hl in highlight_parts:
            if hl.start != hl.end:
                tabs = sum(3 for ch in line_to_add[: hl.start] if ch == "\t")
                buffer.set_style_range(
                    row_num,
                    code_col + hl.start + tabs,
                    code_col + hl.end + tabs,
                    ElementStyle.ADDITION,
                    True,
                )
        return row_num + 1

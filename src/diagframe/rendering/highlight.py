# topmark:header:start
#
#   project      : DiagFrame
#   file         : highlight.py
#   file_relpath : src/diagframe/rendering/highlight.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Span highlighter: draws annotated source code.

For a cause snippet this draws the location line, each annotated source line
with its number, the underline rows under annotated spans and their labels:

```text
  --> src/main.rs:2:18
   |
2 |     let x: u32 = "a";
   |            ---   ^^^ expected `u32`, found `&str`
   |            |
   |            expected due to this
```

Labels are placed on the underline row when they fit and on hanging rows
connected with ``|`` otherwise. Multi-line spans are drawn with connectors in
a gutter to the left of the code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from diagframe.config.logging import get_logger
from diagframe.diagnostic.model import Origin
from diagframe.rendering.margin import Margin
from diagframe.rendering.source_map import LineAnnotationType, overlaps
from diagframe.rendering.styles import ElementStyle
from diagframe.rendering.theme import OutputTheme
from diagframe.rendering.width import normalize_whitespace

if TYPE_CHECKING:
    from diagframe.config.logging import DiagframeLogger
    from diagframe.diagnostic.model import Snippet
    from diagframe.rendering.buffer import StyledBuffer
    from diagframe.rendering.painter import Painter
    from diagframe.rendering.source_map import AnnotatedLineInfo, LineAnnotation, SourceMap

logger: DiagframeLogger = get_logger(__name__)

# Leading whitespace of at least this many cells is never "leading" (sentinel).
_NO_MARGIN = 1 << 62


def _first_primary_line(annotated_lines: list[AnnotatedLineInfo]) -> AnnotatedLineInfo | None:
    for line in annotated_lines:
        if any(a.is_primary for a in line.annotations):
            return line
    for line in annotated_lines:
        if line.annotations:
            return line
    return None


def primary_location(annotated_lines: list[AnnotatedLineInfo]) -> tuple[int | None, int | None]:
    """Return the line and 1-based column shown in a snippet's primary location line.

    The line is the first one holding a primary annotation (or any annotation);
    the column is that of its left-most primary annotation.
    """
    primary_line = _first_primary_line(annotated_lines)
    if primary_line is None:
        return None, None
    column: int | None = None
    if primary_line.annotations:
        first = min(primary_line.annotations, key=lambda a: (not a.is_primary, a.start.char))
        column = first.start.char + 1
    return primary_line.line_index, column


@dataclass(frozen=True)
class SpanHighlighter:
    """Draws cause snippets (source code with annotations)."""

    painter: Painter

    @property
    def theme(self) -> OutputTheme:
        return self.painter.theme

    def render_snippet(
        self,
        buffer: StyledBuffer,
        max_line_num_len: int,
        snippet: Snippet,
        is_primary: bool,
        sm: SourceMap,
        annotated_lines: list[AnnotatedLineInfo],
        multiline_depth: int,
        is_cont: bool,
    ) -> None:
        """Draw a cause snippet.

        Args:
            buffer (StyledBuffer): Target buffer; drawing starts after its last line.
            max_line_num_len (int): Width of the line-number column.
            snippet (Snippet): The snippet being drawn.
            is_primary (bool): True for the first snippet on the group's primary path.
            sm (SourceMap): Source map of the snippet.
            annotated_lines (list[AnnotatedLineInfo]): Lines to draw.
            multiline_depth (int): Deepest multi-line nesting in the group.
            is_cont (bool): Whether more elements follow in the window.
        """
        p = self.painter
        self._render_location(buffer, max_line_num_len, snippet, is_primary, annotated_lines)

        # Vertical bars of multi-line spans still open: (depth, style).
        multilines: list[tuple[int, ElementStyle]] = []
        margin = self._margin(annotated_lines, max_line_num_len, multiline_depth)
        logger.trace(
            "snippet %s: %d line(s), window %d..%d",
            snippet.path,
            len(annotated_lines),
            margin.computed_left,
            margin.computed_right,
        )
        width_offset = 3 + max_line_num_len
        code_offset = width_offset if multiline_depth == 0 else width_offset + multiline_depth + 1

        for idx, line_info in enumerate(annotated_lines):
            previous_buffer_line = buffer.num_lines()
            depths = self.render_source_line(
                line_info,
                buffer,
                width_offset,
                code_offset,
                max_line_num_len,
                margin,
                not is_cont and idx + 1 == len(annotated_lines),
            )

            to_add: dict[int, ElementStyle] = {}
            for depth, style in depths:
                index = next((i for i, (d, _) in enumerate(multilines) if d == depth), None)
                if index is not None:
                    # swap_remove
                    multilines[index] = multilines[-1]
                    multilines.pop()
                else:
                    to_add[depth] = style

            for depth, style in multilines:
                for line in range(previous_buffer_line, buffer.num_lines()):
                    p.draw_multiline_line(buffer, line, width_offset, depth, style)

            if idx < len(annotated_lines) - 1:
                delta = annotated_lines[idx + 1].line_index - line_info.line_index
                if delta >= 2:
                    bridge_line = buffer.num_lines()
                    if delta > 2:
                        p.draw_line_separator(buffer, bridge_line, width_offset)
                    else:
                        # A single hidden line is cheaper to show than to elide.
                        unannotated = sm.get_line(line_info.line_index + 1) or ""
                        p.draw_line(
                            buffer,
                            normalize_whitespace(unannotated),
                            annotated_lines[idx + 1].line_index - 1,
                            bridge_line,
                            width_offset,
                            code_offset,
                            max_line_num_len,
                            margin,
                        )
                    for depth, style in multilines:
                        p.draw_multiline_line(buffer, bridge_line, width_offset, depth, style)
                    for ann in line_info.annotations:
                        if ann.annotation_type is LineAnnotationType.MULTILINE_START:
                            p.draw_multiline_line(
                                buffer,
                                bridge_line,
                                width_offset,
                                ann.depth,
                                ElementStyle.UNDERLINE_PRIMARY
                                if ann.is_primary
                                else ElementStyle.UNDERLINE_SECONDARY,
                            )

            multilines.extend(to_add.items())

    def _render_location(
        self,
        buffer: StyledBuffer,
        max_line_num_len: int,
        snippet: Snippet,
        is_primary: bool,
        annotated_lines: list[AnnotatedLineInfo],
    ) -> None:
        p = self.painter
        if snippet.path is not None:
            origin = Origin(path=snippet.path)
            if is_primary:
                line, column = primary_location(annotated_lines)
                origin = Origin(path=snippet.path, line=line, char_column=column, primary=True)
            else:
                # Spacing line between the previous window and `::: path`.
                p.draw_col_separator_no_space(buffer, buffer.num_lines(), max_line_num_len + 1)
                if annotated_lines:
                    first_line = annotated_lines[0]
                    column = (
                        first_line.annotations[0].start.char + 1
                        if first_line.annotations
                        else None
                    )
                    origin = Origin(
                        path=snippet.path, line=first_line.line_index, char_column=column
                    )
            line_offset = buffer.num_lines()
            p.render_origin(buffer, max_line_num_len, origin, line_offset)
            p.draw_col_separator_no_space(buffer, line_offset + 1, max_line_num_len + 1)
            return

        line_offset = buffer.num_lines()
        if is_primary:
            if self.theme is OutputTheme.UNICODE:
                buffer.puts(
                    line_offset, max_line_num_len, self.theme.file_start, ElementStyle.LINE_NUMBER
                )
            else:
                p.draw_col_separator_no_space(buffer, line_offset, max_line_num_len + 1)
        else:
            p.draw_col_separator_no_space(buffer, line_offset, max_line_num_len + 1)
            buffer.puts(
                line_offset + 1,
                max_line_num_len,
                self.theme.secondary_file_start,
                ElementStyle.LINE_NUMBER,
            )

    def _margin(
        self,
        annotated_lines: list[AnnotatedLineInfo],
        max_line_num_len: int,
        multiline_depth: int,
    ) -> Margin:
        whitespace_margin = _NO_MARGIN
        for line_info in annotated_lines:
            leading = 0
            for ch in line_info.line:
                if not ch.isspace():
                    break
                leading += 4 if ch == "\t" else 1
            if any(not ch.isspace() for ch in line_info.line):
                whitespace_margin = min(whitespace_margin, leading)
        if whitespace_margin == _NO_MARGIN:
            whitespace_margin = 0

        span_left_margin = _NO_MARGIN
        span_right_margin = 0
        label_right_margin = 0
        max_line_len = 0
        for line_info in annotated_lines:
            max_line_len = max(max_line_len, len(line_info.line.encode("utf-8")))
            for ann in line_info.annotations:
                span_left_margin = min(span_left_margin, ann.start.display, ann.end.display)
                span_right_margin = max(span_right_margin, ann.start.display, ann.end.display)
                label_right = len(ann.label) + 1 if ann.label is not None else 0
                label_right_margin = max(label_right_margin, ann.end.display + label_right)
        if span_left_margin == _NO_MARGIN:
            span_left_margin = 0

        width_offset = 3 + max_line_num_len
        code_offset = width_offset if multiline_depth == 0 else width_offset + multiline_depth + 1
        column_width = max(self.painter.term_width - code_offset, 0)
        return Margin(
            whitespace_left=whitespace_margin,
            span_left=span_left_margin,
            span_right=span_right_margin,
            label_right=label_right_margin,
            term_width=column_width,
            max_line_len=max_line_len,
        )

    def render_source_line(
        self,
        line_info: AnnotatedLineInfo,
        buffer: StyledBuffer,
        width_offset: int,
        code_offset: int,
        max_line_num_len: int,
        margin: Margin,
        close_window: bool,
    ) -> list[tuple[int, ElementStyle]]:
        """Draw one source line and the annotations attached to it.

        ```text
          LL | ... code ...
             |     ^^-^ span label
             |       |
             |       secondary span label
        ```

        Returns:
            list[tuple[int, ElementStyle]]: ``(depth, style)`` of each multi-line
            span starting or ending on this line.
        """
        if line_info.line_index == 0:
            return []

        p = self.painter
        source_string = normalize_whitespace(line_info.line)
        line_offset = buffer.num_lines()
        left = p.draw_line(
            buffer,
            source_string,
            line_info.line_index,
            line_offset,
            width_offset,
            code_offset,
            max_line_num_len,
            margin,
        )

        # A multi-line span starting at the first non-blank column is drawn as
        # `/` in the gutter instead of a `_^` connector.
        buffer_ops: list[tuple[int, int, str, ElementStyle]] = []
        short_annotations: list[tuple[int, ElementStyle]] = []
        short_start = True
        for ann in line_info.annotations:
            if ann.annotation_type is LineAnnotationType.MULTILINE_START:
                if all(ch.isspace() for ch in source_string[: ann.start.display]):
                    uline = p.underline(ann.is_primary)
                    short_annotations.append((ann.depth, uline.style))
                    buffer_ops.append(
                        (
                            line_offset,
                            width_offset + ann.depth - 1,
                            uline.multiline_whole_line,
                            uline.style,
                        )
                    )
                else:
                    short_start = False
                    break
            elif ann.annotation_type is not LineAnnotationType.MULTILINE_LINE:
                short_start = False
                break
        if short_start:
            for y, x, ch, style in buffer_ops:
                buffer.putc(y, x, ch, style)
            return short_annotations

        # Right-most spans first: their connectors must not cross other labels.
        annotations = sorted(
            line_info.annotations, key=lambda a: (a.start.display, a.start.char), reverse=True
        )
        positions, line_len, overlap = self._position_labels(annotations)

        if all(a.is_line for a in line_info.annotations):
            return []

        if all(a.annotation_type is LineAnnotationType.MULTILINE_START for _, a in positions):
            max_pos = max((pos for pos, _ in positions), default=None)
            if max_pos is not None:
                # Reverse the rows of stacked multi-line starts to avoid crossings.
                positions = [(max_pos - pos, a) for pos, a in positions]
                line_len = max(line_len - 1, 0)

        for pos in range(line_len + 1):
            p.draw_col_separator_no_space(buffer, line_offset + pos + 1, width_offset - 2)
        if close_window:
            p.draw_col_separator_end(buffer, line_offset + line_len + 1, width_offset - 2)

        def col(display: int) -> int:
            return max(code_offset + display - left, 0)

        # Horizontal connectors of multi-line spans, and highlighted source.
        for pos, ann in positions:
            uline = p.underline(ann.is_primary)
            if ann.is_multiline_edge:
                p.draw_range(
                    buffer,
                    uline.multiline_horizontal,
                    line_offset + pos + 1,
                    width_offset + ann.depth,
                    col(ann.start.display),
                    uline.style,
                )
            elif ann.highlight_source:
                buffer.set_style_range(
                    line_offset,
                    col(ann.start.display),
                    col(ann.end.display),
                    uline.style,
                    ann.is_primary,
                )

        # Vertical lines of labels hanging below the underline row.
        for pos, ann in positions:
            uline = p.underline(ann.is_primary)
            row = pos + 1
            if row > 1 and (ann.has_label() or ann.takes_space()):
                vertical = (
                    uline.multiline_vertical if ann.is_line else uline.vertical_text_line
                )
                for r in range(line_offset + 1, line_offset + row + 1):
                    buffer.putc(r, col(ann.start.display), vertical, uline.style)
                if ann.annotation_type is LineAnnotationType.MULTILINE_START:
                    buffer.putc(
                        line_offset + row, col(ann.start.display), uline.bottom_right, uline.style
                    )
                if ann.annotation_type is LineAnnotationType.MULTILINE_END and ann.has_label():
                    buffer.putc(
                        line_offset + row,
                        col(ann.start.display),
                        uline.multiline_bottom_right_with_text,
                        uline.style,
                    )
            if ann.annotation_type is LineAnnotationType.MULTILINE_START:
                gutter = width_offset + ann.depth - 1
                buffer.putc(line_offset + row, gutter, uline.top_left, uline.style)
                for r in range(line_offset + row + 1, line_offset + line_len + 2):
                    buffer.putc(r, gutter, uline.multiline_vertical, uline.style)
            elif ann.annotation_type is LineAnnotationType.MULTILINE_END:
                gutter = width_offset + ann.depth - 1
                for r in range(line_offset, line_offset + row):
                    buffer.putc(r, gutter, uline.multiline_vertical, uline.style)
                buffer.putc(line_offset + row, gutter, uline.bottom_left, uline.style)

        # Labels.
        for pos, ann in positions:
            style = ElementStyle.LABEL_PRIMARY if ann.is_primary else ElementStyle.LABEL_SECONDARY
            if pos == 0:
                row = pos + 1
                label_col = max((ann.end.display + (2 if ann.end.display == 0 else 1)) - left, 0)
            else:
                row = pos + 2
                label_col = max(ann.start.display - left, 0)
            if ann.label is not None:
                buffer.puts(line_offset + row, code_offset + label_col, ann.label, style)

        # Underlines, widest first so that narrower spans stay visible.
        positions.sort(key=lambda item: (-item[1].len(), item[1].is_primary))
        for pos, ann in positions:
            uline = p.underline(ann.is_primary)
            for d in range(ann.start.display, ann.end.display):
                buffer.putc(line_offset + 1, col(d), uline.underline, uline.style)

            if ann.is_multiline_edge:
                if ann.annotation_type is LineAnnotationType.MULTILINE_START:
                    glyph = uline.top_right_flat if pos == 0 else uline.multiline_start_down
                else:
                    glyph = uline.multiline_end_same_line if pos == 0 else uline.multiline_end_up
                buffer.putc(line_offset + 1, col(ann.start.display), glyph, uline.style)
            elif pos != 0 and ann.has_label():
                buffer.putc(
                    line_offset + 1, col(ann.start.display), uline.label_start, uline.style
                )

        # Elide the middle of very long single-line spans.
        for _, ann in positions:
            if overlap[id(ann)] or ann.annotation_type is not LineAnnotationType.SINGLELINE:
                continue
            width = ann.end.display - ann.start.display
            if width > margin.term_width * 2 and width > 10:
                pad = max(margin.term_width // 3, 5)
                start = col(ann.start.display + pad)
                end = col(ann.end.display - pad)
                buffer.replace(line_offset, start, end, self.theme.margin)
                buffer.replace(line_offset + 1, start, end, self.theme.margin)

        return [
            (
                ann.depth,
                ElementStyle.LABEL_PRIMARY if ann.is_primary else ElementStyle.LABEL_SECONDARY,
            )
            for _, ann in positions
            if ann.is_multiline_edge
        ]

    @staticmethod
    def _position_labels(
        annotations: list[LineAnnotation],
    ) -> tuple[list[tuple[int, LineAnnotation]], int, dict[int, bool]]:
        """Assign each annotation the row its label is drawn on.

        Row 0 is the underline row itself. The right-most label stays there when
        it does not collide with another span; others hang below, one row each.

        Returns:
            tuple[list[tuple[int, LineAnnotation]], int, dict[int, bool]]: The
            ``(row, annotation)`` pairs, the number of label rows, and per
            annotation (keyed by ``id``) whether it overlaps another one.
        """
        overlap = {id(a): False for a in annotations}
        positions: list[tuple[int, LineAnnotation]] = []
        line_len = 0
        p = 0
        for i, ann in enumerate(annotations):
            for j, nxt in enumerate(annotations):
                if overlaps(nxt, ann, 0) and j > 1:
                    overlap[id(ann)] = True
                    overlap[id(nxt)] = True
                if overlaps(nxt, ann, 0) and ann.has_label() and j > i and p == 0:
                    # An unlabelled annotation over the same span merges with this one.
                    if (
                        nxt.start.display == ann.start.display
                        and nxt.start.char == ann.start.char
                        and nxt.end.display == ann.end.display
                        and nxt.end.char == ann.end.char
                        and not nxt.has_label()
                    ):
                        continue
                    p += 1
                    break
            positions.append((p, ann))
            for j, nxt in enumerate(annotations):
                if j <= i:
                    continue
                pad = len(nxt.label) + 2 if nxt.label is not None else 0
                if (
                    (overlaps(nxt, ann, pad) and ann.has_label() and nxt.has_label())
                    or (ann.takes_space() and nxt.has_label())
                    or (ann.has_label() and nxt.takes_space())
                    or (ann.takes_space() and nxt.takes_space())
                    or (
                        overlaps(nxt, ann, pad)
                        and (nxt.end.display, nxt.end.char) <= (ann.end.display, ann.end.char)
                        and nxt.has_label()
                        and p == 0
                    )
                ):
                    p += 1
                    break
            line_len = max(line_len, p)

        if line_len != 0:
            line_len += 1
        return positions, line_len, overlap

# topmark:header:start
#
#   project      : DiagFrame
#   file         : renderer.py
#   file_relpath : src/diagframe/rendering/renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Renderer for diagnostic reports.

A report (a sequence of [`Group`][diagframe.diagnostic.model.Group]s) is drawn
group by group into [`StyledBuffer`][diagframe.rendering.buffer.StyledBuffer]s:
the title first, then each element in order (messages, cause snippets drawn by
the [`SpanHighlighter`][diagframe.rendering.highlight.SpanHighlighter],
suggestions drawn by the [`DiffFormatter`][diagframe.rendering.suggestion.DiffFormatter],
bare locations and padding lines). The buffers are then turned into text,
with or without ANSI styling.

Example:
    ```python
    source = "fn main() {\\n    let x: u32 = \\"a\\";\\n}\\n"
    report = [
        Group.with_title(Level.ERROR.title("mismatched types").with_id("E0308")).element(
            Snippet(source, path="src/main.rs")
            .annotation(AnnotationKind.PRIMARY.span(29, 32).with_label("expected `u32`"))
        )
    ]
    print(Renderer.plain().render(report))
    ```
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from diagframe.config.logging import get_logger
from diagframe.constants import ANONYMIZED_LINE_NUM, DEFAULT_TERM_WIDTH
from diagframe.diagnostic.model import Message, Origin, Padding, Snippet, Title
from diagframe.errors import EmptyReportError
from diagframe.rendering.buffer import StyledBuffer
from diagframe.rendering.highlight import SpanHighlighter, primary_location
from diagframe.rendering.painter import Painter
from diagframe.rendering.source_map import SourceMap
from diagframe.rendering.styles import ElementStyle, Style, Stylesheet
from diagframe.rendering.suggestion import DiffFormatter
from diagframe.rendering.theme import OutputTheme
from diagframe.rendering.width import normalize_whitespace, num_decimal_digits, rust_lines

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diagframe.config.logging import DiagframeLogger
    from diagframe.diagnostic.level import Level
    from diagframe.diagnostic.model import Element, Group
    from diagframe.rendering.buffer import Segment
    from diagframe.rendering.source_map import AnnotatedLineInfo

logger: DiagframeLogger = get_logger(__name__)


class TitleStyle(Enum):
    """Placement of a title or message."""

    MAIN_HEADER = "main_header"
    HEADER = "header"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class Renderer:
    """Renders diagnostic reports to text.

    Use [`plain`][diagframe.rendering.renderer.Renderer.plain] or
    [`styled`][diagframe.rendering.renderer.Renderer.styled] and adjust the
    result with the ``with_*`` methods, which return modified copies.

    Attributes:
        anonymized_line_numbers (bool): Print ``LL`` instead of line numbers.
        term_width (int): Terminal width used to cut long lines.
        theme (OutputTheme): Glyph set.
        stylesheet (Stylesheet): Styles of the rendered elements.
        short_message (bool): Render a one-line summary instead of the full report.
    """

    anonymized_line_numbers: bool = False
    term_width: int = DEFAULT_TERM_WIDTH
    theme: OutputTheme = OutputTheme.ASCII
    stylesheet: Stylesheet = field(default_factory=Stylesheet.plain)
    short_message: bool = False

    @classmethod
    def plain(cls) -> Renderer:
        """Return a renderer without terminal styling."""
        return cls()

    @classmethod
    def styled(cls) -> Renderer:
        """Return a renderer with the default terminal styling."""
        return cls(stylesheet=Stylesheet.styled())

    def with_anonymized_line_numbers(self, anonymized_line_numbers: bool) -> Renderer:
        """Return a copy that replaces line numbers with ``LL`` (or not)."""
        return replace(self, anonymized_line_numbers=anonymized_line_numbers)

    def with_short_message(self, short_message: bool) -> Renderer:
        """Return a copy that renders one-line summaries (or not)."""
        return replace(self, short_message=short_message)

    def with_term_width(self, term_width: int) -> Renderer:
        """Return a copy using a terminal width of ``term_width`` columns."""
        if term_width < 0:
            raise ValueError(f"term_width must be non-negative, got {term_width}")
        return replace(self, term_width=term_width)

    def with_theme(self, theme: OutputTheme) -> Renderer:
        """Return a copy drawing with ``theme``."""
        return replace(self, theme=theme)

    def with_style(self, name: str, style: Style) -> Renderer:
        """Return a copy with the stylesheet role ``name`` set to ``style``.

        Args:
            name (str): One of the [`Stylesheet`][diagframe.rendering.styles.Stylesheet]
                fields (``error``, ``line_num``, ``addition``, ...).
            style (Style): The new style.

        Returns:
            Renderer: The modified copy.
        """
        return replace(self, stylesheet=self.stylesheet.with_style(name, style))

    @property
    def painter(self) -> Painter:
        return Painter(
            theme=self.theme,
            anonymized_line_numbers=self.anonymized_line_numbers,
            short_message=self.short_message,
            term_width=self.term_width,
        )

    def render(self, groups: Sequence[Group]) -> str:
        """Render a report to text.

        Args:
            groups (Sequence[Group]): The report; the first group is the main diagnostic.

        Returns:
            str: The rendered report, without a trailing newline. Styled
            renderers embed ANSI escape sequences.

        Raises:
            EmptyReportError: If ``groups`` is empty (or, for short messages, the
                first group has no title).
            SpanOutOfBoundsError: If a span reaches past the end of its snippet.
        """
        return "\n".join(
            buffer.render(level, self.stylesheet) for buffer, level in self._draw(groups)
        )

    def render_lines(self, groups: Sequence[Group]) -> list[list[Segment]]:
        """Render a report to styled segments, one list of ``(text, Style)`` runs per line.

        This is the same drawing as [`render`][diagframe.rendering.renderer.Renderer.render]
        without the round-trip through ANSI escape sequences.
        """
        lines: list[list[Segment]] = []
        for buffer, level in self._draw(groups):
            lines.extend(buffer.segments(level, self.stylesheet))
        return lines

    def render_short_message(self, groups: Sequence[Group]) -> str:
        """Render the first group as ``path:line:col: level[id]: title: labels``."""
        buffer, level = self._draw_short_message(groups)
        return buffer.render(level, self.stylesheet)

    def _draw(self, groups: Sequence[Group]) -> list[tuple[StyledBuffer, Level]]:
        if not groups:
            raise EmptyReportError("Nothing to render: the report has no groups")
        if self.short_message:
            return [self._draw_short_message(groups)]

        if self.anonymized_line_numbers:
            max_line_num_len = len(ANONYMIZED_LINE_NUM)
        else:
            max_line_num_len = num_decimal_digits(max_line_number(groups))
        logger.debug(
            "rendering %d group(s), line number width %d", len(groups), max_line_num_len
        )

        drawn: list[tuple[StyledBuffer, Level]] = []
        og_primary_path: str | None = None
        for g, group in enumerate(groups):
            primary_path = _primary_path(group)
            if og_primary_path is None and primary_path is not None:
                og_primary_path = primary_path
            buffer = self._draw_group(
                g, group, len(groups), max_line_num_len, primary_path, og_primary_path
            )
            drawn.append((buffer, group.primary_level))
        return drawn

    def _draw_group(
        self,
        g: int,
        group: Group,
        group_len: int,
        max_line_num_len: int,
        primary_path: str | None,
        og_primary_path: str | None,
    ) -> StyledBuffer:
        p = self.painter
        highlighter = SpanHighlighter(p)
        formatter = DiffFormatter(p)
        buffer = StyledBuffer()
        sep_col = max_line_num_len + 1

        causes: deque[tuple[SourceMap, list[AnnotatedLineInfo]]] = deque()
        max_depth = 0
        for element in group.elements:
            if isinstance(element, Snippet) and not element.is_suggestion:
                sm = SourceMap(element.source, element.line_start)
                depth, annotated = sm.annotated_lines(element.annotations, element.fold)
                max_depth = max(max_depth, depth)
                causes.append((sm, annotated))

        elements = group.elements
        first: Element | None = elements[0] if elements else None
        if group.title is not None:
            self._render_title(
                buffer,
                group.title,
                max_line_num_len,
                TitleStyle.MAIN_HEADER if g == 0 else TitleStyle.HEADER,
                isinstance(first, Message),
                buffer.num_lines(),
            )
            line = buffer.num_lines()
            if isinstance(first, Message):
                p.draw_col_separator_no_space(buffer, line, sep_col)
            if first is None and g == 0 and group_len > 1:
                p.draw_col_separator_end(buffer, line, sep_col)

        seen_primary = False
        last_was_suggestion = False
        for idx, section in enumerate(elements):
            peek: Element | None = elements[idx + 1] if idx + 1 < len(elements) else None

            if isinstance(section, Message):
                self._render_title(
                    buffer,
                    section,
                    max_line_num_len,
                    TitleStyle.SECONDARY,
                    isinstance(peek, (Message, Padding)),
                    buffer.num_lines(),
                )
                last_was_suggestion = False

            elif isinstance(section, Snippet) and not section.is_suggestion:
                sm, annotated = causes.popleft()
                is_primary = primary_path == section.path and not seen_primary
                seen_primary |= is_primary
                highlighter.render_snippet(
                    buffer,
                    max_line_num_len,
                    section,
                    is_primary,
                    sm,
                    annotated,
                    max_depth,
                    peek is not None or (g == 0 and group_len > 1),
                )
                if g == 0:
                    line = buffer.num_lines()
                    if isinstance(peek, Message):
                        p.draw_col_separator_no_space(buffer, line, sep_col)
                    elif (isinstance(peek, Origin) and peek.primary) or (
                        peek is None and group_len > 1
                    ):
                        p.draw_col_separator_end(buffer, line, sep_col)
                last_was_suggestion = False

            elif isinstance(section, Snippet):
                formatter.render_suggestion(
                    buffer,
                    section,
                    max_line_num_len,
                    SourceMap(section.source, section.line_start),
                    primary_path if primary_path is not None else og_primary_path,
                    last_was_suggestion,
                )
                last_was_suggestion = True

            elif isinstance(section, Origin):
                is_primary = primary_path == section.path and not seen_primary
                seen_primary |= is_primary
                p.render_origin(buffer, max_line_num_len, section, buffer.num_lines())
                last_was_suggestion = False
                if g == 0:
                    line = buffer.num_lines()
                    if peek is None and group_len > 1:
                        p.draw_col_separator_end(buffer, line, sep_col)
                    elif isinstance(peek, Message):
                        p.draw_col_separator_no_space(buffer, line, sep_col)

            elif isinstance(section, Padding):
                line = buffer.num_lines()
                if peek is None:
                    p.draw_col_separator_end(buffer, line, sep_col)
                else:
                    p.draw_col_separator_no_space(buffer, line, sep_col)

        return buffer

    def _draw_short_message(self, groups: Sequence[Group]) -> tuple[StyledBuffer, Level]:
        if not groups:
            raise EmptyReportError("Nothing to render: the report has no groups")
        group = groups[0]
        title = group.title
        if title is None:
            raise EmptyReportError("A short message needs a group with a title")

        # The one-line form never carries the `--> ` origin prefix.
        short = replace(self, short_message=True)
        p = short.painter
        buffer = StyledBuffer()
        labels: str | None = None
        cause = next(
            (e for e in group.elements if isinstance(e, Snippet) and not e.is_suggestion),
            None,
        )
        if isinstance(cause, Snippet):
            labels = (
                ", ".join(
                    a.label
                    for a in cause.annotations
                    if a.kind.is_primary and a.label is not None and a.label.strip()
                )
                or None
            )
            if cause.path is not None:
                sm = SourceMap(cause.source, cause.line_start)
                _, annotated = sm.annotated_lines(cause.annotations, cause.fold)
                line, column = primary_location(annotated)
                origin = Origin(path=cause.path, line=line, char_column=column, primary=True)
                p.render_origin(buffer, 0, origin, 0)
                buffer.append(0, ": ", ElementStyle.LINE_AND_COLUMN)

        short._render_title(buffer, title, 0, TitleStyle.MAIN_HEADER, False, 0)
        if labels is not None:
            buffer.append(0, f": {labels}", ElementStyle.NO_STYLE)
        return buffer, title.level

    def _render_title(
        self,
        buffer: StyledBuffer,
        title: Title | Message,
        max_line_num_len: int,
        title_style: TitleStyle,
        is_cont: bool,
        line_offset: int,
    ) -> None:
        """Draw a group title (``error[E0308]: ...``) or a message (``= note: ...``)."""
        level = title.level
        if title_style is TitleStyle.SECONDARY:
            for _ in range(max_line_num_len):
                buffer.prepend(line_offset, " ", ElementStyle.NO_STYLE)
            self.painter.draw_note_separator(buffer, line_offset, max_line_num_len + 1, is_cont)
            label_style = ElementStyle.MAIN_HEADER_MSG
            text_style = ElementStyle.NO_STYLE
        else:
            label_style = ElementStyle.for_level(level.kind)
            if title_style is TitleStyle.HEADER:
                text_style = ElementStyle.HEADER_MSG
            elif self.short_message:
                text_style = ElementStyle.NO_STYLE
            else:
                text_style = ElementStyle.MAIN_HEADER_MSG

        label_width = 0
        if not level.hidden:
            label = level.as_str()
            buffer.append(line_offset, label, label_style)
            label_width += len(label)
            if isinstance(title, Title) and title.id is not None:
                buffer.append(line_offset, "[", label_style)
                if title.url is not None:
                    buffer.append(line_offset, f"\x1b]8;;{title.url}\x1b\\", label_style)
                buffer.append(line_offset, title.id, label_style)
                if title.url is not None:
                    buffer.append(line_offset, "\x1b]8;;\x1b\\", label_style)
                buffer.append(line_offset, "]", label_style)
                label_width += 2 + len(title.id)
            buffer.append(line_offset, ": ", text_style)
            label_width += 2

        # Continuation lines align with the text after `level: ` (and `= ` for messages).
        if title_style is TitleStyle.SECONDARY:
            padding = " " * (max_line_num_len + 3 + label_width)
        else:
            padding = " " * label_width

        if isinstance(title, Message):
            text, style = title.text, ElementStyle.NO_STYLE
        else:
            text, style = normalize_whitespace(title.text), text_style

        for i, line in enumerate(text.split("\n")):
            if i != 0:
                buffer.append(line_offset + i, padding, ElementStyle.NO_STYLE)
                if (
                    title_style is TitleStyle.SECONDARY
                    and is_cont
                    and self.theme is OutputTheme.UNICODE
                ):
                    # Join with the next note of the same window.
                    self.painter.draw_col_separator_no_space(
                        buffer, line_offset + i, max_line_num_len + 1
                    )
            buffer.append(line_offset + i, line, style)


def _primary_path(group: Group) -> str | None:
    """Return the path of the group's primary location.

    That is the path of the first cause with a primary annotation (or of the
    first primary origin), else the path of the first cause or origin.
    """
    for element in group.elements:
        if isinstance(element, Snippet) and not element.is_suggestion:
            if any(a.kind.is_primary for a in element.annotations):
                return element.path
        elif isinstance(element, Origin) and element.primary:
            return element.path
    for element in group.elements:
        if isinstance(element, Snippet) and not element.is_suggestion:
            return element.path
        if isinstance(element, Origin):
            return element.path
    return None


def newline_count(body: str) -> int:
    """Return the number of line breaks between the first and the last line of ``body``."""
    return max(len(rust_lines(body)) - 1, 0)


def max_line_number(groups: Sequence[Group]) -> int:
    """Return the largest line number printed for the report.

    Folded snippets only count lines up to the end of their last marker.
    """
    result = 1
    for group in groups:
        group_max = 1 if not group.elements else 0
        for element in group.elements:
            group_max = max(group_max, _element_max_line(element))
        result = max(result, group_max)
    return result


def _element_max_line(element: Element) -> int:
    if not isinstance(element, Snippet):
        return 0
    if not element.fold:
        return element.line_start + newline_count(element.source)
    raw = element.source.encode("utf-8")
    end = max((m.span[1] for m in element.markers), default=len(raw))
    end = min(end, len(raw))
    prefix = raw[:end].decode("utf-8", errors="ignore")
    return element.line_start + newline_count(prefix)

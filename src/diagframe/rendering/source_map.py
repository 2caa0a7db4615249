# topmark:header:start
#
#   project      : DiagFrame
#   file         : source_map.py
#   file_relpath : src/diagframe/rendering/source_map.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Mapping of byte spans onto source lines and columns.

[`SourceMap`][diagframe.rendering.source_map.SourceMap] splits a snippet into
lines and answers three questions for the renderer:

* where does a byte span start and end (line, character, display column)?
* which annotations land on which line, and how deep are nested multi-line spans?
* what does the code look like once a suggestion's patches are applied?

Multi-line annotations are broken into per-line parts so that the line drawing
code only has to deal with one line at a time:

```text
x |   foo(1 + bar(x,
  |  _________^              < MULTILINE_START
x | |             y),        < MULTILINE_LINE
  | |______________^ label   < MULTILINE_END
x |       z);
```
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Final

from diagframe.config.logging import get_logger
from diagframe.diagnostic.model import AnnotationKind, Patch
from diagframe.errors import SpanOutOfBoundsError
from diagframe.rendering.width import char_width

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from diagframe.config.logging import DiagframeLogger
    from diagframe.diagnostic.model import Annotation, Span

logger: DiagframeLogger = get_logger(__name__)

# A multi-line span shows at most this many lines after its first one.
MULTILINE_HEAD_LINES: Final[int] = 4
# Trimmed lines considered empty when deciding how much of a multi-line span to show.
_BARE_DELIMITERS: Final[frozenset[str]] = frozenset({"", "{", "}", "(", ")", "[", "]"})


@dataclass(frozen=True, order=True)
class Loc:
    """A position in the source.

    Attributes:
        line (int): Line number (as printed).
        char (int): Code point offset within the line.
        display (int): Display column within the line.
        byte (int): Byte offset within the whole source.
    """

    line: int = 0
    char: int = 0
    display: int = 0
    byte: int = 0


@dataclass(frozen=True)
class LineInfo:
    """One source line and its byte range (``end_byte`` includes the terminator)."""

    line: str
    line_index: int
    start_byte: int
    end_byte: int
    end_line_size: int


class LineAnnotationType(Enum):
    """How an annotation is drawn on one line."""

    SINGLELINE = "singleline"
    MULTILINE_START = "multiline_start"
    MULTILINE_END = "multiline_end"
    MULTILINE_LINE = "multiline_line"


@dataclass(frozen=True)
class LineAnnotation:
    """The part of an annotation drawn on a single line.

    ``depth`` is the nesting column of multi-line parts (unused for single-line ones).
    """

    start: Loc
    end: Loc
    kind: AnnotationKind
    label: str | None
    annotation_type: LineAnnotationType
    depth: int = 0
    highlight_source: bool = False

    @property
    def is_primary(self) -> bool:
        """Return True for a primary annotation."""
        return self.kind.is_primary

    @property
    def is_line(self) -> bool:
        """Return True for a vertical-line placeholder."""
        return self.annotation_type is LineAnnotationType.MULTILINE_LINE

    @property
    def is_multiline_edge(self) -> bool:
        """Return True for the start or end of a multi-line span."""
        return self.annotation_type in (
            LineAnnotationType.MULTILINE_START,
            LineAnnotationType.MULTILINE_END,
        )

    def len(self) -> int:
        """Return the displayed width of the annotation."""
        return abs(self.end.display - self.start.display)

    def has_label(self) -> bool:
        """Return True if the annotation has a non-empty label."""
        return bool(self.label)

    def takes_space(self) -> bool:
        """Return True if the annotation needs its own row (multi-line start/end)."""
        return self.is_multiline_edge


@dataclass
class AnnotatedLineInfo:
    """A source line and the annotation parts drawn on it."""

    line: str
    line_index: int
    annotations: list[LineAnnotation] = field(default_factory=list)


@dataclass
class MultilineAnnotation:
    """An annotation spanning several lines, before it is split per line."""

    depth: int
    start: Loc
    end: Loc
    kind: AnnotationKind
    label: str | None
    overlaps_exactly: bool = False
    highlight_source: bool = False

    def same_span(self, other: MultilineAnnotation) -> bool:
        return self.start == other.start and self.end == other.end

    def as_start(self) -> LineAnnotation:
        return LineAnnotation(
            start=self.start,
            end=Loc(
                line=self.start.line,
                char=self.start.char + 1,
                display=self.start.display + 1,
                byte=self.start.byte + 1,
            ),
            kind=self.kind,
            label=None,
            annotation_type=LineAnnotationType.MULTILINE_START,
            depth=self.depth,
            highlight_source=self.highlight_source,
        )

    def as_end(self) -> LineAnnotation:
        return LineAnnotation(
            start=Loc(
                line=self.end.line,
                char=max(self.end.char - 1, 0),
                display=max(self.end.display - 1, 0),
                byte=max(self.end.byte - 1, 0),
            ),
            end=self.end,
            kind=self.kind,
            label=self.label,
            annotation_type=LineAnnotationType.MULTILINE_END,
            depth=self.depth,
            highlight_source=self.highlight_source,
        )

    def as_line(self) -> LineAnnotation:
        return LineAnnotation(
            start=Loc(),
            end=Loc(),
            kind=self.kind,
            label=None,
            annotation_type=LineAnnotationType.MULTILINE_LINE,
            depth=self.depth,
            highlight_source=self.highlight_source,
        )


@dataclass(frozen=True)
class SubstitutionHighlight:
    """Character range ``start..end`` of inserted text on a line of a suggestion."""

    start: int
    end: int


def num_overlap(a_start: int, a_end: int, b_start: int, b_end: int, inclusive: bool) -> bool:
    """Return True if the ranges ``a_start..a_end`` and ``b_start..b_end`` overlap."""
    extra = 1 if inclusive else 0
    return b_start <= a_start < b_end + extra or a_start <= b_start < a_end + extra


def overlaps(a1: LineAnnotation, a2: LineAnnotation, padding: int) -> bool:
    """Return True if two line annotations overlap once ``a1`` is widened by ``padding``."""
    return num_overlap(
        a1.start.display,
        a1.end.display + padding,
        a2.start.display,
        a2.end.display,
        False,
    )


def _is_meaningful_line(text: str) -> bool:
    """Return False for blank lines, ``//`` comments and lone delimiters."""
    s = text.strip()
    is_comment = s.startswith("//") and not (s.startswith("///") or s.startswith("//!"))
    return not is_comment and s not in _BARE_DELIMITERS


class SourceMap:
    """Line index of a snippet's source."""

    def __init__(self, source: str, line_start: int) -> None:
        self.source = source
        self._bytes = source.encode("utf-8")
        self.lines: list[LineInfo] = []

        if not source:
            self.lines.append(LineInfo("", line_start, 0, 0, 0))
            return

        pos = 0
        byte_pos = 0
        idx = 0
        while pos < len(source):
            nl = source.find("\n", pos)
            if nl == -1:
                text, terminator = source[pos:], ""
                pos = len(source)
            else:
                text, terminator = source[pos:nl], "\n"
                pos = nl + 1
                if text.endswith("\r"):
                    text, terminator = text[:-1], "\r\n"
            text_len = len(text.encode("utf-8"))
            self.lines.append(
                LineInfo(
                    line=text,
                    line_index=line_start + idx,
                    start_byte=byte_pos,
                    end_byte=byte_pos + text_len + len(terminator),
                    end_line_size=len(terminator),
                )
            )
            byte_pos += text_len + len(terminator)
            idx += 1

    def __repr__(self) -> str:
        return f"SourceMap(lines={len(self.lines)}, bytes={len(self._bytes)})"

    @property
    def byte_len(self) -> int:
        """Return the length of the source in bytes."""
        return len(self._bytes)

    def get_line(self, idx: int) -> str | None:
        """Return the text of line ``idx`` (as numbered in the output), or None."""
        for info in self.lines:
            if info.line_index == idx:
                return info.line
        return None

    def _line_at(self, byte: int) -> LineInfo:
        for info in self.lines:
            if info.start_byte <= byte < info.end_byte:
                return info
        return self.lines[-1]

    def _loc(self, byte: int) -> Loc:
        info = self._line_at(byte)
        line_bytes = info.line.encode("utf-8")
        offset = byte - info.start_byte
        cut = max(min(offset, len(line_bytes)), 0)
        prefix = line_bytes[:cut].decode("utf-8", errors="ignore")
        char = len(prefix)
        # Pointing past the end of the text (at the terminator) counts as one more char.
        if offset - len(line_bytes) > 0:
            char += 1
        display = sum(char_width(ch) for ch in prefix)
        return Loc(line=info.line_index, char=char, display=display, byte=byte)

    def span_to_locations(self, span: Span) -> tuple[Loc, Loc]:
        """Return the start and end locations of a byte span."""
        start_byte, end_byte = span
        start = self._loc(start_byte)
        if start_byte == end_byte:
            return start, start
        end = self._loc(end_byte)
        end_info = self._line_at(end_byte)
        if start.line != end.line and end.byte > end_info.end_byte:
            end = replace(end, line=end.line + 1, char=0, display=0)
        return start, end

    def span_to_snippet(self, span: Span) -> str | None:
        """Return the source text of ``span``, or None if it is not a valid range."""
        start, end = span
        if start > end or end > len(self._bytes):
            return None
        try:
            return self._bytes[start:end].decode("utf-8")
        except UnicodeDecodeError:
            return None

    def span_to_lines(self, span: Span) -> list[LineInfo]:
        """Return the lines touched by ``span``."""
        start, end = span
        lines: list[LineInfo] = []
        for info in self.lines:
            if start >= info.end_byte:
                continue
            if end < info.start_byte:
                break
            lines.append(info)
        return lines

    def _check_bounds(self, spans: Iterable[Span]) -> None:
        source_len = len(self._bytes)
        for start, end in spans:
            # One past the last byte is allowed, to point at the end of the source.
            if end > source_len + 1:
                raise SpanOutOfBoundsError(start, end, source_len)

    def annotated_lines(
        self,
        annotations: Sequence[Annotation],
        fold: bool,
    ) -> tuple[int, list[AnnotatedLineInfo]]:
        """Attach annotations to the lines they are drawn on.

        Args:
            annotations (Sequence[Annotation]): The snippet's annotations.
            fold (bool): If True, lines without annotations are dropped.

        Returns:
            tuple[int, list[AnnotatedLineInfo]]: The maximum nesting depth of
            multi-line annotations and the annotated lines in source order.

        Raises:
            SpanOutOfBoundsError: If an annotation reaches past the end of the source.
        """
        self._check_bounds(a.span for a in annotations)

        infos = [
            AnnotatedLineInfo(line=info.line, line_index=info.line_index) for info in self.lines
        ]
        multiline: list[MultilineAnnotation] = []

        for ann in annotations:
            lo, hi = self.span_to_locations(ann.span)
            # An empty span still gets one underline cell.
            if lo.display == hi.display and lo.line == hi.line:
                hi = replace(hi, display=hi.display + 1)

            if lo.line == hi.line:
                self._add_annotation(
                    infos,
                    lo.line,
                    LineAnnotation(
                        start=lo,
                        end=hi,
                        kind=ann.kind,
                        label=ann.label,
                        annotation_type=LineAnnotationType.SINGLELINE,
                        highlight_source=ann.highlight_source,
                    ),
                )
            else:
                multiline.append(
                    MultilineAnnotation(
                        depth=1,
                        start=lo,
                        end=hi,
                        kind=ann.kind,
                        label=ann.label,
                        highlight_source=ann.highlight_source,
                    )
                )

        max_depth = self._assign_depths(multiline)

        for ml in multiline:
            end_ann = ml.as_end()
            if ml.overlaps_exactly:
                end_ann = replace(end_ann, annotation_type=LineAnnotationType.SINGLELINE)
            else:
                self._add_annotation(infos, ml.start.line, ml.as_start())
                middle = min(ml.start.line + MULTILINE_HEAD_LINES, ml.end.line)
                # Show up to 4 lines after the start, without a tail of empty-looking lines.
                until = ml.start.line
                for line in range(middle - 1, ml.start.line - 1, -1):
                    text = self.get_line(line)
                    if text is not None and _is_meaningful_line(text):
                        until = line + 1
                        break
                for line in range(ml.start.line + 1, until):
                    self._add_annotation(infos, line, ml.as_line())
                line_end = ml.end.line - 1
                end_text = self.get_line(line_end)
                end_is_empty = end_text is not None and not _is_meaningful_line(end_text)
                if middle < line_end and not end_is_empty:
                    self._add_annotation(infos, line_end, ml.as_line())
            self._add_annotation(infos, end_ann.end.line, end_ann)

        if fold:
            infos = [info for info in infos if info.annotations]

        logger.trace("annotated %d line(s), max multiline depth %d", len(infos), max_depth)
        return max_depth, infos

    @staticmethod
    def _assign_depths(multiline: list[MultilineAnnotation]) -> int:
        """Push overlapping multi-line annotations to different depths.

        Returns:
            int: The maximum depth.
        """
        multiline.sort(key=lambda ml: (ml.start.line, -ml.end.line))
        primary_spans: list[tuple[Loc, Loc]] = []
        for ann in [replace(ml) for ml in multiline]:
            if ann.kind.is_primary:
                primary_spans.append((ann.start, ann.end))
            for other in multiline:
                if not ann.same_span(other) and num_overlap(
                    ann.start.line, ann.end.line, other.start.line, other.end.line, True
                ):
                    other.depth += 1
                elif ann.same_span(other) and ann != other:
                    other.overlaps_exactly = True
                else:
                    if any(other.start == s and other.end == e for s, e in primary_spans):
                        other.kind = AnnotationKind.PRIMARY
                    break

        max_depth = max((ml.depth for ml in multiline), default=0)
        # Reverse the depths to minimize crossings in the drawing.
        for ml in multiline:
            ml.depth = max_depth - ml.depth + 1
        return max_depth

    def _add_annotation(
        self,
        infos: list[AnnotatedLineInfo],
        line_index: int,
        annotation: LineAnnotation,
    ) -> None:
        for info in infos:
            if info.line_index == line_index:
                info.annotations.append(annotation)
                return
        text = self.get_line(line_index)
        infos.append(
            AnnotatedLineInfo(line=text or "", line_index=line_index, annotations=[annotation])
        )
        infos.sort(key=lambda info: info.line_index)

    def splice_lines(
        self, patches: Sequence[Patch]
    ) -> list[tuple[str, list[Patch], list[list[SubstitutionHighlight]]]]:
        """Apply a suggestion's patches to the code it touches.

        Patches that do not change anything are dropped; replacements wrapping
        the original text are trimmed to the inserted part.

        Args:
            patches (Sequence[Patch]): The suggestion's patches (disjoint spans).

        Returns:
            list[tuple[str, list[Patch], list[list[SubstitutionHighlight]]]]:
            Zero or one ``(code, patches, highlights)`` tuple: the rewritten lines,
            the (trimmed) patches and, per output line, the ranges of inserted text.
            Empty when no line is highlighted.

        Raises:
            SpanOutOfBoundsError: If a patch reaches past the end of the source.
        """
        self._check_bounds(p.span for p in patches)

        parts = [p for p in patches if self.span_to_snippet(p.span) != p.replacement]
        if not parts:
            return []
        parts.sort(key=lambda p: p.span[0])

        lo = min(p.span[0] for p in parts)
        hi = max(p.span[1] for p in parts)
        lines = self.span_to_lines((lo, hi))

        highlights: list[list[SubstitutionHighlight]] = []
        prev_hi, _ = self.span_to_locations((lo, hi))
        prev_hi = replace(prev_hi, char=0)
        prev_line: str | None = lines[0].line if lines else None
        buf: list[str] = []
        line_highlight: list[SubstitutionHighlight] = []
        # Difference between the original and the rewritten line, in chars.
        acc = 0

        for i, part in enumerate(parts):
            part = part.trim_trivial_replacements(self)
            parts[i] = part
            cur_lo, cur_hi = self.span_to_locations(part.span)
            if prev_hi.line == cur_lo.line:
                _push_trailing(buf, prev_line, prev_hi, cur_lo)
            else:
                acc = 0
                highlights.append(line_highlight)
                line_highlight = []
                _push_trailing(buf, prev_line, prev_hi, None)
                for idx in range(prev_hi.line + 1, cur_lo.line):
                    between = self.get_line(idx)
                    if between is not None:
                        buf.append(between)
                        buf.append("\n")
                        highlights.append(line_highlight)
                        line_highlight = []
                cur_line = self.get_line(cur_lo.line)
                if cur_line is not None:
                    buf.append(cur_line[: cur_lo.char])

            first_line = part.replacement.split("\n")[0]
            length = _tab_expanded_len(first_line)
            line_highlight.append(
                SubstitutionHighlight(start=cur_lo.char + acc, end=cur_lo.char + acc + length)
            )
            buf.append(part.replacement)
            acc += length - (cur_hi.char - cur_lo.char)
            prev_hi = cur_hi
            prev_line = self.get_line(prev_hi.line)
            for line in part.replacement.split("\n")[1:]:
                acc = 0
                highlights.append(line_highlight)
                line_highlight = [SubstitutionHighlight(start=0, end=_tab_expanded_len(line))]

        highlights.append(line_highlight)
        text = "".join(buf)
        # A replacement ending with a newline already completes the last line.
        if not text.endswith("\n"):
            _push_trailing(buf, prev_line, prev_hi, None)
            text = "".join(buf)
        text = text.rstrip("\n")

        if all(not hl for hl in highlights):
            return []
        return [(text, parts, highlights)]


def _tab_expanded_len(text: str) -> int:
    return sum(4 if ch == "\t" else 1 for ch in text)


def _push_trailing(buf: list[str], line: str | None, lo: Loc, hi: Loc | None) -> None:
    """Append the part of ``line`` between ``lo`` and ``hi`` (or its end plus a newline)."""
    if line is None:
        return
    if lo.char < len(line):
        if hi is not None and hi.char < len(line):
            if hi.char > lo.char:
                buf.append(line[lo.char : hi.char])
        else:
            buf.append(line[lo.char :])
    if hi is None:
        buf.append("\n")

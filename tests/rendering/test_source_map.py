# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_source_map.py
#   file_relpath : tests/rendering/test_source_map.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `diagframe.rendering.source_map`."""

from __future__ import annotations

import pytest

from diagframe.diagnostic.model import AnnotationKind, Patch
from diagframe.errors import SpanOutOfBoundsError
from diagframe.rendering.source_map import LineAnnotationType, SourceMap


def test_lines_and_byte_ranges() -> None:
    sm = SourceMap("ab\r\ncd\n", 7)
    assert [info.line for info in sm.lines] == ["ab", "cd"]
    assert [info.line_index for info in sm.lines] == [7, 8]
    assert (sm.lines[0].start_byte, sm.lines[0].end_byte, sm.lines[0].end_line_size) == (0, 4, 2)
    assert (sm.lines[1].start_byte, sm.lines[1].end_byte) == (4, 7)
    assert sm.get_line(8) == "cd"
    assert sm.get_line(9) is None


def test_empty_source_has_one_empty_line() -> None:
    sm = SourceMap("", 1)
    assert len(sm.lines) == 1
    assert sm.get_line(1) == ""
    assert sm.byte_len == 0


def test_locations_count_chars_and_display_columns() -> None:
    sm = SourceMap("x\n中a\n", 1)
    start, end = sm.span_to_locations((5, 6))
    assert (start.line, start.char, start.display) == (2, 1, 2)
    assert (end.line, end.char, end.display) == (2, 2, 3)


def test_span_to_snippet() -> None:
    sm = SourceMap("héllo", 1)
    assert sm.span_to_snippet((0, 3)) == "hé"
    # Splitting a multi-byte character is not a valid range.
    assert sm.span_to_snippet((0, 2)) is None
    assert sm.span_to_snippet((0, 99)) is None


def test_annotated_lines_folds_unannotated_lines() -> None:
    sm = SourceMap("a\nb\nc\n", 1)
    ann = AnnotationKind.PRIMARY.span(2, 3)
    depth, folded = sm.annotated_lines([ann], fold=True)
    assert depth == 0
    assert [info.line_index for info in folded] == [2]
    assert folded[0].annotations[0].annotation_type is LineAnnotationType.SINGLELINE
    _, unfolded = sm.annotated_lines([ann], fold=False)
    assert [info.line_index for info in unfolded] == [1, 2, 3]


def test_empty_span_gets_one_cell() -> None:
    sm = SourceMap("abc", 1)
    _, lines = sm.annotated_lines([AnnotationKind.PRIMARY.span(1, 1)], fold=True)
    ann = lines[0].annotations[0]
    assert (ann.start.display, ann.end.display) == (1, 2)


def test_multiline_annotation_has_start_and_end() -> None:
    sm = SourceMap("fn f() {\n    x\n}\n", 1)
    depth, lines = sm.annotated_lines([AnnotationKind.PRIMARY.span(7, 16)], fold=True)
    assert depth == 1
    kinds = [a.annotation_type for info in lines for a in info.annotations]
    assert LineAnnotationType.MULTILINE_START in kinds
    assert LineAnnotationType.MULTILINE_END in kinds


def test_annotation_past_end_of_source() -> None:
    sm = SourceMap("abc", 1)
    # One past the end points at the end of the source.
    sm.annotated_lines([AnnotationKind.PRIMARY.span(3, 4)], fold=True)
    with pytest.raises(SpanOutOfBoundsError):
        sm.annotated_lines([AnnotationKind.PRIMARY.span(0, 5)], fold=True)


def test_splice_lines_applies_patch() -> None:
    sm = SourceMap("let x = 1;", 1)
    spliced = sm.splice_lines([Patch.of(8, 9, "2")])
    assert len(spliced) == 1
    code, patches, highlights = spliced[0]
    assert code == "let x = 2;"
    assert patches == [Patch.of(8, 9, "2")]
    assert [(h.start, h.end) for h in highlights[0]] == [(8, 9)]


def test_splice_lines_trims_wrapping_replacement() -> None:
    sm = SourceMap("let x = 1;", 1)
    code, patches, _ = sm.splice_lines([Patch.of(4, 5, "xyz")])[0]
    assert code == "let xyz = 1;"
    assert patches == [Patch(span=(5, 5), replacement="yz")]


def test_splice_lines_drops_no_op_patches() -> None:
    sm = SourceMap("let x = 1;", 1)
    assert sm.splice_lines([Patch.of(8, 9, "1")]) == []


def test_splice_lines_rejects_out_of_bounds() -> None:
    with pytest.raises(SpanOutOfBoundsError):
        SourceMap("abc", 1).splice_lines([Patch.of(0, 9, "x")])

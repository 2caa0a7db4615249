# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_svg.py
#   file_relpath : tests/export/test_svg.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for SVG export of terminal text."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from diagframe.export.fixture import validate_svg
from diagframe.export.svg import (
    VGA_COLORS,
    Palette,
    SvgOptions,
    render_svg,
    render_svg_from_segments,
    xterm_color,
)
from diagframe.rendering.styles import Style

NS = {"svg": "http://www.w3.org/2000/svg"}


def _line_spans(document: str) -> list[ET.Element]:
    root = ET.fromstring(document)
    text = root.find("svg:text", NS)
    assert text is not None
    return text.findall("svg:tspan", NS)


def test_document_geometry() -> None:
    document = render_svg("abc\nde\n")
    assert document.startswith(
        '<svg width="46px" height="74px" xmlns="http://www.w3.org/2000/svg">'
    )
    assert document.endswith("</svg>\n")
    spans = _line_spans(document)
    assert [(s.get("x"), s.get("y")) for s in spans] == [("10px", "28px"), ("10px", "46px")]


def test_plain_text_uses_default_classes_only() -> None:
    document = render_svg("hello")
    assert ".fg { fill: #AAAAAA }" in document
    assert ".bg { fill: #000000 }" in document
    assert ".fg-" not in document
    assert '<rect width="100%" height="100%" y="0" rx="4.5" class="bg" />' in document
    assert '<tspan x="10px" y="28px"><tspan>hello</tspan></tspan>' in document


def test_named_colors_declare_classes() -> None:
    document = render_svg("\x1b[1m\x1b[91merror\x1b[0m: x")
    assert f".fg-bright-red {{ fill: {VGA_COLORS['bright_red']} }}" in document
    assert '<tspan class="fg-bright-red bold">error</tspan><tspan>: x</tspan>' in document


def test_text_is_escaped() -> None:
    document = render_svg("<a & b>")
    assert "&lt;a &amp; b&gt;" in document
    ET.fromstring(document)


def test_extended_colors_are_inline() -> None:
    document = render_svg("\x1b[38;5;196mx\x1b[0m\x1b[38;2;1;2;3my")
    assert '<tspan fill="#FF0000">x</tspan>' in document
    assert '<tspan fill="#010203">y</tspan>' in document


def test_background_becomes_a_rect() -> None:
    document = render_svg("ab\x1b[44mcd\x1b[0m")
    assert '<rect x="26.8px" y="14.5px" width="16.8px" height="18px" class="bg-blue" />' in document
    assert f".bg-blue {{ fill: {VGA_COLORS['blue']} }}" in document


def test_wide_characters_count_two_cells() -> None:
    document = render_svg("中")
    # ceil(2 * 8.4) + 2 * 10
    assert document.startswith('<svg width="37px"')


def test_control_characters_are_replaced() -> None:
    document = render_svg_from_segments([[("a\x01b", Style())]])
    ET.fromstring(document)
    assert "a�b" in document


def test_custom_options() -> None:
    options = SvgOptions(
        font_family="monospace",
        font_size=12,
        line_height=20,
        padding=4,
        char_width=10.0,
        palette=Palette(fg="#FFFFFF", bg="#101010"),
    )
    document = render_svg("ab", options)
    assert document.startswith('<svg width="28px" height="48px"')
    assert "font: 12px monospace;" in document
    assert ".fg { fill: #FFFFFF }" in document
    assert '<tspan x="4px" y="24px">' in document


def test_rendered_documents_are_valid_fixtures() -> None:
    report = validate_svg(render_svg("line one\n\x1b[31mline two\x1b[0m\n\nfour"))
    assert report.ok, report.problems
    assert report.lines == 4


def test_empty_text() -> None:
    document = render_svg("")
    assert document.startswith('<svg width="20px" height="38px"')
    assert _line_spans(document) == []


@pytest.mark.parametrize(
    ("index", "expected"),
    [
        (1, "#AA0000"),
        (9, "#FF5555"),
        (16, "#000000"),
        (196, "#FF0000"),
        (231, "#FFFFFF"),
        (232, "#080808"),
        (255, "#EEEEEE"),
    ],
)
def test_xterm_color(index: int, expected: str) -> None:
    assert xterm_color(index) == expected

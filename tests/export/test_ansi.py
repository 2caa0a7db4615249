# topmark:header:start
#
#   project      : DiagFrame
#   file         : test_ansi.py
#   file_relpath : tests/export/test_ansi.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for ANSI escape parsing."""

from __future__ import annotations

import pytest

from diagframe.export.ansi import apply_sgr, parse_ansi, strip_ansi
from diagframe.rendering.styles import PLAIN, RESET, Style


def test_strip_ansi_removes_sgr_and_hyperlinks() -> None:
    text = "\x1b[1m\x1b[91merror\x1b[0m[\x1b]8;;https://x.y\x1b\\E1\x1b]8;;\x1b\\]"
    assert strip_ansi(text) == "error[E1]"
    assert strip_ansi("bell \x1b]0;title\x07ok") == "bell ok"


@pytest.mark.parametrize(
    ("params", "expected"),
    [
        ([], PLAIN),
        ([0], PLAIN),
        ([1], Style(bold=True)),
        ([2, 3, 4], Style(dim=True, italic=True, underline=True)),
        ([31], Style(fg="red")),
        ([94], Style(fg="bright_blue")),
        ([42], Style(bg="green")),
        ([103], Style(bg="bright_yellow")),
        ([38, 5, 208], Style(fg=208)),
        ([48, 2, 1, 2, 3], Style(bg=(1, 2, 3))),
        ([1, 31, 22, 39], PLAIN),
        ([38, 5], PLAIN),
        ([99], PLAIN),
    ],
)
def test_apply_sgr(params: list[int], expected: Style) -> None:
    assert apply_sgr(PLAIN, params) == expected


def test_apply_sgr_keeps_unrelated_attributes() -> None:
    style = Style(fg="red", bold=True, italic=True)
    assert apply_sgr(style, [23]) == Style(fg="red", bold=True)
    assert apply_sgr(style, [24, 49]) == style


def test_parse_ansi_merges_runs_and_carries_styles_over_lines() -> None:
    red = Style(fg="red")
    text = f"a\x1b[31mb\x1b[31mc\nd{RESET}e\n"
    assert parse_ansi(text) == [
        [("a", PLAIN), ("bc", red)],
        [("d", red), ("e", PLAIN)],
    ]


def test_parse_ansi_empty_lines() -> None:
    assert parse_ansi("") == []
    assert parse_ansi("x\n\ny") == [[("x", PLAIN)], [], [("y", PLAIN)]]


def test_parse_ansi_empty_parameters_count_as_reset() -> None:
    assert parse_ansi("\x1b[1mA\x1b[;31mB\x1b[mC") == [
        [("A", Style(bold=True)), ("B", Style(fg="red")), ("C", PLAIN)]
    ]


def test_parse_ansi_ignores_non_sgr_sequences() -> None:
    assert parse_ansi("\x1b[2Ka\x1b]8;;u\x1b\\b") == [[("ab", PLAIN)]]

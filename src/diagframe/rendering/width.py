# topmark:header:start
#
#   project      : DiagFrame
#   file         : width.py
#   file_relpath : src/diagframe/rendering/width.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Terminal display width and whitespace normalization.

Source code is printed with some characters replaced by visible glyphs so that
underlines stay aligned with the code they point at: tabs become four spaces,
C0 control characters become Unicode "control pictures" and bidirectional text
controls become U+FFFD. The width helpers below agree with that replacement
table, so a width computed on raw source matches the normalized output.
"""

from __future__ import annotations

from typing import Final

from wcwidth import wcwidth

TAB_WIDTH: Final[int] = 4

# Sorted by code point and free of duplicates (checked by the test-suite).
OUTPUT_REPLACEMENTS: Final[tuple[tuple[str, str], ...]] = (
    ("\x00", "␀"),
    ("\x01", "␁"),
    ("\x02", "␂"),
    ("\x03", "␃"),
    ("\x04", "␄"),
    ("\x05", "␅"),
    ("\x06", "␆"),
    ("\x07", "␇"),
    ("\x08", "␈"),
    ("\t", " " * TAB_WIDTH),
    ("\x0b", "␋"),
    ("\x0c", "␌"),
    ("\x0d", "␍"),
    ("\x0e", "␎"),
    ("\x0f", "␏"),
    ("\x10", "␐"),
    ("\x11", "␑"),
    ("\x12", "␒"),
    ("\x13", "␓"),
    ("\x14", "␔"),
    ("\x15", "␕"),
    ("\x16", "␖"),
    ("\x17", "␗"),
    ("\x18", "␘"),
    ("\x19", "␙"),
    ("\x1a", "␚"),
    ("\x1b", "␛"),
    ("\x1c", "␜"),
    ("\x1d", "␝"),
    ("\x1e", "␞"),
    ("\x1f", "␟"),
    ("\x7f", "␡"),
    # Zero width joiner: keeps grapheme clusters consistent across terminals.
    ("\u200d", ""),
    # Text flow controls make the bytes on disk differ from what is displayed.
    ("\u202a", "�"),
    ("\u202b", "�"),
    ("\u202c", "�"),
    ("\u202d", "�"),
    ("\u202e", "�"),
    ("\u2066", "�"),
    ("\u2067", "�"),
    ("\u2068", "�"),
    ("\u2069", "�"),
)

_REPLACEMENT_TABLE: Final[dict[int, str]] = {ord(k): v for k, v in OUTPUT_REPLACEMENTS}

# Characters that are printed as a single visible glyph after normalization.
_SINGLE_CELL: Final[frozenset[str]] = frozenset(
    k for k, _ in OUTPUT_REPLACEMENTS if k not in ("\t", "\u200d")
)


def char_width(ch: str) -> int:
    """Return the number of terminal cells used to display ``ch``.

    Args:
        ch (str): A single character.

    Returns:
        int: 4 for a tab, 1 for characters replaced by a visible glyph, otherwise
        the width reported by ``wcwidth`` (1 when unknown).
    """
    if ch == "\t":
        return TAB_WIDTH
    if ch in _SINGLE_CELL:
        return 1
    width = wcwidth(ch)
    return 1 if width < 0 else width


def str_width(s: str) -> int:
    """Return the display width of ``s`` (the sum of its character widths)."""
    return sum(char_width(ch) for ch in s)


def normalize_whitespace(s: str) -> str:
    """Replace characters that would garble terminal output with visible stand-ins."""
    return s.translate(_REPLACEMENT_TABLE)


def num_decimal_digits(num: int) -> int:
    """Return the number of decimal digits needed to print a non-negative integer."""
    return len(str(max(num, 0)))


def rust_lines(text: str) -> list[str]:
    """Split ``text`` into lines the way source files are read.

    Lines end with LF or CRLF; the terminator is not part of the line, and a
    trailing terminator does not open an extra empty line.

    Args:
        text (str): Text to split.

    Returns:
        list[str]: The lines of ``text`` (empty for an empty string).
    """
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [p[:-1] if p.endswith("\r") else p for p in parts]

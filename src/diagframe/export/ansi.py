# topmark:header:start
#
#   project      : DiagFrame
#   file         : ansi.py
#   file_relpath : src/diagframe/export/ansi.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Parse ANSI-styled terminal text back into styled segments.

The parser understands the SGR sequences written by
[`Style.render`][diagframe.rendering.styles.Style.render] and by common
terminal tools: reset, bold, dim, italic and underline (and their "off"
codes), the 8 standard and 8 bright foreground/background colors, and the
256-color and true-color forms (``38;5;n``, ``38;2;r;g;b`` and their
background counterparts). OSC sequences (such as OSC-8 hyperlinks) and any
other escape sequences are dropped.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING

from diagframe.config.logging import get_logger
from diagframe.rendering.styles import ANSI_COLOR_NAMES, PLAIN, Style
from diagframe.rendering.width import rust_lines

if TYPE_CHECKING:
    from diagframe.config.logging import DiagframeLogger
    from diagframe.rendering.buffer import Segment
    from diagframe.rendering.styles import Color

logger: DiagframeLogger = get_logger(__name__)

# OSC (terminated by BEL or ST), CSI, then any other two-character escape.
_ESCAPE_RE: re.Pattern[str] = re.compile(
    r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)|\x1b\[([0-9;:?]*)([@-~])|\x1b[@-Z\\-_]"
)


def strip_ansi(text: str) -> str:
    """Remove all escape sequences from ``text``."""
    return _ESCAPE_RE.sub("", text)


def _extended_color(params: list[int], i: int) -> tuple[Color | None, int]:
    """Decode ``5;n`` or ``2;r;g;b`` following a 38/48 code at ``params[i]``.

    Returns:
        tuple[Color | None, int]: The color (None when malformed) and the index
        of the last parameter consumed.
    """
    mode = params[i + 1] if i + 1 < len(params) else None
    if mode == 5 and i + 2 < len(params):
        return params[i + 2], i + 2
    if mode == 2 and i + 4 < len(params):
        r, g, b = params[i + 2 : i + 5]
        return (r, g, b), i + 4
    return None, len(params) - 1


def apply_sgr(style: Style, params: list[int]) -> Style:
    """Return ``style`` updated by the SGR parameter list ``params``."""
    if not params:
        return PLAIN
    i = 0
    while i < len(params):
        code = params[i]
        if code == 0:
            style = PLAIN
        elif code == 1:
            style = replace(style, bold=True)
        elif code == 2:
            style = replace(style, dim=True)
        elif code == 3:
            style = replace(style, italic=True)
        elif code == 4:
            style = replace(style, underline=True)
        elif code == 22:
            style = replace(style, bold=False, dim=False)
        elif code == 23:
            style = replace(style, italic=False)
        elif code == 24:
            style = replace(style, underline=False)
        elif 30 <= code <= 37:
            style = replace(style, fg=ANSI_COLOR_NAMES[code - 30])
        elif 90 <= code <= 97:
            style = replace(style, fg=f"bright_{ANSI_COLOR_NAMES[code - 90]}")
        elif 40 <= code <= 47:
            style = replace(style, bg=ANSI_COLOR_NAMES[code - 40])
        elif 100 <= code <= 107:
            style = replace(style, bg=f"bright_{ANSI_COLOR_NAMES[code - 100]}")
        elif code == 39:
            style = replace(style, fg=None)
        elif code == 49:
            style = replace(style, bg=None)
        elif code in (38, 48):
            color, i = _extended_color(params, i)
            if color is not None:
                style = replace(style, fg=color) if code == 38 else replace(style, bg=color)
        else:
            logger.trace("ignoring SGR parameter %d", code)
        i += 1
    return style


def _sgr_params(raw: str) -> list[int]:
    # Empty parameters count as 0 (`ESC[;1m` == `ESC[0;1m`).
    return [int(p) if p.isdigit() else 0 for p in re.split(r"[;:]", raw)] if raw else []


def parse_ansi(text: str) -> list[list[Segment]]:
    """Split ANSI-styled text into lines of ``(text, Style)`` segments.

    Styles carry over line breaks. Adjacent runs with equal styles are merged
    and empty runs are dropped, so an empty line is an empty list.

    Args:
        text (str): Terminal text, possibly containing escape sequences.

    Returns:
        list[list[Segment]]: One list of segments per line; a trailing line
        break does not open an extra line.
    """
    lines: list[list[Segment]] = []
    style = PLAIN
    for raw_line in rust_lines(text):
        runs: list[Segment] = []

        def push(chunk: str, chunk_style: Style) -> None:
            if not chunk:
                return
            if runs and runs[-1][1] == chunk_style:
                runs[-1] = (runs[-1][0] + chunk, chunk_style)
            else:
                runs.append((chunk, chunk_style))

        pos = 0
        for match in _ESCAPE_RE.finditer(raw_line):
            push(raw_line[pos : match.start()], style)
            pos = match.end()
            if match.group(2) == "m":
                style = apply_sgr(style, _sgr_params(match.group(1)))
        push(raw_line[pos:], style)
        lines.append(runs)
    return lines

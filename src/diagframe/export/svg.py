# topmark:header:start
#
#   project      : DiagFrame
#   file         : svg.py
#   file_relpath : src/diagframe/export/svg.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SVG snapshot documents of terminal output.

Styled terminal text is laid out on a fixed monospace grid: one ``<tspan>`` per
line, positioned at ``x = padding`` and ``y = padding + line_height * (i + 1)``,
inside a single ``<text>`` element over a background ``<rect>``. Styled runs
become nested ``<tspan class="...">`` elements whose classes are declared in a
``<style>`` block:

```svg
<svg width="740px" height="74px" xmlns="http://www.w3.org/2000/svg">
  <style>
    .fg { fill: #AAAAAA }
    .bg { fill: #000000 }
    .fg-bright-red { fill: #FF5555 }
    ...
  </style>

  <rect width="100%" height="100%" y="0" rx="4.5" class="bg" />

  <text xml:space="preserve" class="container fg">
    <tspan x="10px" y="28px"><tspan class="fg-bright-red bold">error</tspan>...</tspan>
  </text>

</svg>
```

Named colors resolve through a [`Palette`][diagframe.export.svg.Palette];
256-color and RGB colors are written as inline ``fill`` attributes.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final
from xml.sax.saxutils import escape

from diagframe.config.logging import get_logger
from diagframe.export.ansi import parse_ansi, strip_ansi
from diagframe.rendering.styles import ANSI_COLOR_NAMES
from diagframe.rendering.width import str_width

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from diagframe.config.logging import DiagframeLogger
    from diagframe.rendering.buffer import Segment
    from diagframe.rendering.styles import Color, Style

logger: DiagframeLogger = get_logger(__name__)

DEFAULT_FONT_FAMILY: Final[str] = "SFMono-Regular, Consolas, Liberation Mono, Menlo, monospace"

VGA_COLORS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "black": "#000000",
        "red": "#AA0000",
        "green": "#00AA00",
        "yellow": "#AA5500",
        "blue": "#0000AA",
        "magenta": "#AA00AA",
        "cyan": "#00AAAA",
        "white": "#AAAAAA",
        "bright_black": "#555555",
        "bright_red": "#FF5555",
        "bright_green": "#55FF55",
        "bright_yellow": "#FFFF55",
        "bright_blue": "#5555FF",
        "bright_magenta": "#FF55FF",
        "bright_cyan": "#55FFFF",
        "bright_white": "#FFFFFF",
    }
)

# Indexed colors 0..15 alias the named palette entries.
_INDEXED_NAMES: Final[tuple[str, ...]] = (
    *ANSI_COLOR_NAMES,
    *(f"bright_{name}" for name in ANSI_COLOR_NAMES),
)

# Characters XML 1.0 does not allow in documents.
_XML_INVALID_RE: Final[re.Pattern[str]] = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


@dataclass(frozen=True)
class Palette:
    """Colors of an SVG document.

    Attributes:
        fg (str): Default text color.
        bg (str): Canvas color.
        colors (Mapping[str, str]): Hex color of each named ANSI color.
    """

    fg: str = "#AAAAAA"
    bg: str = "#000000"
    colors: Mapping[str, str] = field(default_factory=lambda: VGA_COLORS)


@dataclass(frozen=True)
class SvgOptions:
    """Layout of an SVG document.

    Attributes:
        font_family (str): CSS font family list.
        font_size (int): Font size in pixels.
        line_height (int): Distance between baselines in pixels.
        padding (int): Left and top margin in pixels.
        char_width (float): Width of one terminal cell in pixels.
        palette (Palette): Colors.
    """

    font_family: str = DEFAULT_FONT_FAMILY
    font_size: int = 14
    line_height: int = 18
    padding: int = 10
    char_width: float = 8.4
    palette: Palette = field(default_factory=Palette)


def _num(value: float) -> str:
    return f"{value:g}"


def xterm_color(index: int) -> str:
    """Return the hex value of a 256-color palette entry (16..255)."""
    if index < 16:
        return VGA_COLORS[_INDEXED_NAMES[index]]
    if index < 232:
        levels = (0, 95, 135, 175, 215, 255)
        index -= 16
        r, g, b = levels[index // 36], levels[(index // 6) % 6], levels[index % 6]
        return f"#{r:02X}{g:02X}{b:02X}"
    gray = 8 + 10 * (index - 232)
    return f"#{gray:02X}{gray:02X}{gray:02X}"


def _resolve_color(color: Color, palette: Palette) -> tuple[str | None, str | None]:
    """Return ``(class suffix, inline hex)``; exactly one is set for a known color."""
    if isinstance(color, str):
        name = color.lower()
        if name in palette.colors:
            return name.replace("_", "-"), None
        logger.debug("unknown color name %r, using the default foreground", color)
        return None, None
    if isinstance(color, int):
        if 0 <= color < 16:
            return _INDEXED_NAMES[color].replace("_", "-"), None
        return None, xterm_color(max(0, min(color, 255)))
    r, g, b = color
    return None, f"#{r:02X}{g:02X}{b:02X}"


class _Document:
    """Accumulates the markup of one SVG document."""

    def __init__(self, options: SvgOptions) -> None:
        self.options = options
        self.used_classes: dict[str, str] = {}
        self.backgrounds: list[str] = []
        self.lines: list[str] = []
        self.max_cells = 0

    def add_line(self, index: int, segments: Sequence[Segment]) -> None:
        o = self.options
        baseline = o.padding + o.line_height * (index + 1)
        parts: list[str] = []
        col = 0
        for raw, style in segments:
            text = _XML_INVALID_RE.sub("�", strip_ansi(raw))
            if not text:
                continue
            width = str_width(text)
            if style.bg is not None:
                self._add_background(style.bg, baseline, col, width)
            parts.append(self._run(text, style))
            col += width
        self.max_cells = max(self.max_cells, col)
        self.lines.append(
            f'    <tspan x="{_num(o.padding)}px" y="{_num(baseline)}px">{"".join(parts)}</tspan>'
        )

    def _run(self, text: str, style: Style) -> str:
        classes: list[str] = []
        fill = ""
        if style.fg is not None:
            name, inline = _resolve_color(style.fg, self.options.palette)
            if name is not None:
                self._use(f"fg-{name}")
                classes.append(f"fg-{name}")
            elif inline is not None:
                fill = f' fill="{inline}"'
        classes.extend(
            effect
            for effect, on in (
                ("bold", style.bold),
                ("dim", style.dim),
                ("italic", style.italic),
                ("underline", style.underline),
            )
            if on
        )
        class_attr = f' class="{" ".join(classes)}"' if classes else ""
        return f"<tspan{class_attr}{fill}>{escape(text)}</tspan>"

    def _add_background(self, color: Color, baseline: int, col: int, cells: int) -> None:
        o = self.options
        name, inline = _resolve_color(color, o.palette)
        if name is not None:
            self._use(f"bg-{name}")
            paint = f'class="bg-{name}"'
        elif inline is not None:
            paint = f'fill="{inline}"'
        else:
            return
        self.backgrounds.append(
            f'  <rect x="{_num(o.padding + col * o.char_width)}px"'
            f' y="{_num(baseline - o.line_height * 0.75)}px"'
            f' width="{_num(cells * o.char_width)}px" height="{_num(o.line_height)}px"'
            f" {paint} />"
        )

    def _use(self, css_class: str) -> None:
        name = css_class.split("-", 1)[1].replace("-", "_")
        palette = self.options.palette
        self.used_classes[css_class] = palette.colors.get(name, palette.fg)

    def finish(self) -> str:
        o = self.options
        width = math.ceil(self.max_cells * o.char_width) + 2 * o.padding
        height = o.line_height * (len(self.lines) + 1) + 2 * o.padding
        color_rules = [
            f"    .{css_class} {{ fill: {value} }}"
            for css_class, value in sorted(self.used_classes.items())
        ]
        out = [
            f'<svg width="{width}px" height="{height}px" xmlns="http://www.w3.org/2000/svg">',
            "  <style>",
            f"    .fg {{ fill: {o.palette.fg} }}",
            f"    .bg {{ fill: {o.palette.bg} }}",
            *color_rules,
            "    .container {",
            f"      padding: 0 {_num(o.padding)}px;",
            f"      line-height: {_num(o.line_height)}px;",
            "    }",
            "    .bold { font-weight: bold; }",
            "    .dim { opacity: 0.7; }",
            "    .italic { font-style: italic; }",
            "    .underline { text-decoration-line: underline; }",
            "    tspan {",
            f"      font: {_num(o.font_size)}px {o.font_family};",
            "      white-space: pre;",
            f"      line-height: {_num(o.line_height)}px;",
            "    }",
            "  </style>",
            "",
            '  <rect width="100%" height="100%" y="0" rx="4.5" class="bg" />',
            *self.backgrounds,
            "",
            '  <text xml:space="preserve" class="container fg">',
            *self.lines,
            "  </text>",
            "",
            "</svg>",
        ]
        return "\n".join(out) + "\n"


def render_svg_from_segments(
    lines: Sequence[Sequence[Segment]], options: SvgOptions | None = None
) -> str:
    """Build an SVG document from lines of ``(text, Style)`` segments.

    Escape sequences left inside segment text (such as hyperlinks in titles)
    are removed.

    Args:
        lines (Sequence[Sequence[Segment]]): Styled lines, e.g. from
            [`Renderer.render_lines`][diagframe.rendering.renderer.Renderer.render_lines]
            or [`parse_ansi`][diagframe.export.ansi.parse_ansi].
        options (SvgOptions | None): Layout; defaults to `SvgOptions()`.

    Returns:
        str: The SVG document, ending with a newline.
    """
    doc = _Document(options or SvgOptions())
    for index, segments in enumerate(lines):
        doc.add_line(index, segments)
    logger.debug("SVG document: %d line(s), %d cell(s) wide", len(doc.lines), doc.max_cells)
    return doc.finish()


def render_svg(text: str, options: SvgOptions | None = None) -> str:
    """Convert (ANSI-styled) terminal text to an SVG document.

    Args:
        text (str): Terminal text; SGR escape sequences become SVG styling.
        options (SvgOptions | None): Layout; defaults to `SvgOptions()`.

    Returns:
        str: The SVG document, ending with a newline.
    """
    return render_svg_from_segments(parse_ansi(text), options)

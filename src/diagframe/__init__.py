# topmark:header:start
#
#   project      : DiagFrame
#   file         : __init__.py
#   file_relpath : src/diagframe/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame package.

DiagFrame renders compiler-style diagnostics (titles, annotated source
snippets, notes and suggested fixes) as terminal text, optionally styled with
ANSI escape sequences, and exports that text as SVG snapshot documents.

Typical use:
    ```python
    from diagframe import AnnotationKind, Group, Level, Renderer, Snippet

    report = [
        Group.with_title(Level.ERROR.title("mismatched types").with_id("E0308")).element(
            Snippet("let x: u32 = \\"a\\";", path="src/main.rs").annotation(
                AnnotationKind.PRIMARY.span(13, 16).with_label("expected `u32`")
            )
        )
    ]
    print(Renderer.styled().render(report))
    ```
"""

from __future__ import annotations

from diagframe.diagnostic.level import Level, LevelKind
from diagframe.diagnostic.model import (
    Annotation,
    AnnotationKind,
    Group,
    Message,
    Origin,
    Padding,
    Patch,
    Snippet,
    Title,
)
from diagframe.errors import (
    DiagframeError,
    EmptyReportError,
    FixtureMismatchError,
    ReportFormatError,
    SpanOutOfBoundsError,
)
from diagframe.export.svg import SvgOptions, render_svg
from diagframe.rendering.renderer import Renderer
from diagframe.rendering.styles import Style, Stylesheet
from diagframe.rendering.theme import OutputTheme

__all__ = [
    "Annotation",
    "AnnotationKind",
    "DiagframeError",
    "EmptyReportError",
    "FixtureMismatchError",
    "Group",
    "Level",
    "LevelKind",
    "Message",
    "Origin",
    "OutputTheme",
    "Padding",
    "Patch",
    "Renderer",
    "ReportFormatError",
    "Snippet",
    "SpanOutOfBoundsError",
    "Style",
    "Stylesheet",
    "SvgOptions",
    "Title",
    "render_svg",
]

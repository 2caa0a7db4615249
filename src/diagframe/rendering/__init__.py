# topmark:header:start
#
#   project      : DiagFrame
#   file         : __init__.py
#   file_relpath : src/diagframe/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Text rendering of diagnostic reports.

Public modules:
    - diagframe.rendering.renderer
    - diagframe.rendering.styles
    - diagframe.rendering.theme

The remaining modules (buffer, margin, source_map, highlight, suggestion,
painter, width) are building blocks of the renderer.
"""

from __future__ import annotations

# topmark:header:start
#
#   project      : DiagFrame
#   file         : __init__.py
#   file_relpath : src/diagframe/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic input model.

A report is a sequence of [`Group`][diagframe.diagnostic.model.Group]s. Each
group has an optional [`Title`][diagframe.diagnostic.model.Title] and an ordered
list of elements: messages, snippets (causes or suggestions), origins and
padding lines. All types are immutable; builder methods return copies.
"""

from __future__ import annotations

from diagframe.diagnostic.level import Level, LevelKind
from diagframe.diagnostic.model import (
    Annotation,
    AnnotationKind,
    Element,
    Group,
    Message,
    Origin,
    Padding,
    Patch,
    Snippet,
    Title,
)

__all__: list[str] = [
    "Annotation",
    "AnnotationKind",
    "Element",
    "Group",
    "Level",
    "LevelKind",
    "Message",
    "Origin",
    "Padding",
    "Patch",
    "Snippet",
    "Title",
]

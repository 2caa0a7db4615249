# topmark:header:start
#
#   project      : DiagFrame
#   file         : model.py
#   file_relpath : src/diagframe/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic data model.

All types are immutable; the builder-style methods return modified copies:

```python
group = Group.with_title(Level.ERROR.title("mismatched types").with_id("E0308")).element(
    Snippet(source, path="src/main.rs")
    .annotation(AnnotationKind.PRIMARY.span(13, 16).with_label("expected `u32`"))
    .annotation(AnnotationKind.CONTEXT.span(7, 10).with_label("expected due to this"))
)
```

Spans are half-open byte ranges ``(start, end)`` into the UTF-8 encoding of a
snippet's source. A report is a sequence of groups: the first group is the main
diagnostic, later ones are sub-diagnostics.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Union

from diagframe.diagnostic.level import Level

if TYPE_CHECKING:
    from diagframe.rendering.source_map import SourceMap

Span = tuple[int, int]


def _check_span(start: int, end: int) -> Span:
    if start < 0 or end < start:
        raise ValueError(f"Invalid span `{start}..{end}`")
    return (start, end)


@dataclass(frozen=True)
class Title:
    """The headline of a group: ``level[id]: text``.

    Attributes:
        level (Level): Severity of the diagnostic.
        text (str): The title text; whitespace is normalized when printed.
        id (str | None): Optional diagnostic code (e.g. ``E0308``).
        url (str | None): Optional URL; printed as a terminal hyperlink around the code.
    """

    level: Level
    text: str
    id: str | None = None
    url: str | None = None

    def with_id(self, id: str, url: str | None = None) -> Title:  # noqa: A002
        """Return a copy carrying the diagnostic code ``id`` (and an optional URL)."""
        return replace(self, id=id, url=url)


@dataclass(frozen=True)
class Message:
    """A secondary message, printed as ``= level: text``.

    The text is printed verbatim, so it may carry its own styling.
    """

    level: Level
    text: str


class AnnotationKind(str, Enum):
    """Kind of an annotation: the primary location or additional context."""

    PRIMARY = "primary"
    CONTEXT = "context"

    @property
    def is_primary(self) -> bool:
        """Return True for the primary kind."""
        return self is AnnotationKind.PRIMARY

    def span(self, start: int, end: int) -> Annotation:
        """Create an annotation of this kind over the byte range ``start..end``."""
        return Annotation(span=_check_span(start, end), kind=self)


@dataclass(frozen=True)
class Annotation:
    """A marked byte range of a snippet, with an optional label."""

    span: Span
    kind: AnnotationKind
    label: str | None = None
    highlight_source: bool = False

    def with_label(self, label: str | None) -> Annotation:
        """Return a copy with ``label`` attached."""
        return replace(self, label=label)

    def with_highlight_source(self, highlight_source: bool) -> Annotation:
        """Return a copy that also styles the annotated source code."""
        return replace(self, highlight_source=highlight_source)


@dataclass(frozen=True)
class Patch:
    """A suggested replacement of the byte range ``span`` with ``replacement``."""

    span: Span
    replacement: str

    @classmethod
    def of(cls, start: int, end: int, replacement: str) -> Patch:
        """Create a patch over ``start..end``."""
        return cls(span=_check_span(start, end), replacement=replacement)

    def is_addition(self, sm: SourceMap) -> bool:
        """Return True if the patch only inserts code."""
        return bool(self.replacement) and not self._replaces_meaningful_content(sm)

    def is_deletion(self, sm: SourceMap) -> bool:
        """Return True if the patch only removes code."""
        return not self.replacement.strip() and self._replaces_meaningful_content(sm)

    def is_replacement(self, sm: SourceMap) -> bool:
        """Return True if the patch overwrites existing code."""
        return bool(self.replacement) and self._replaces_meaningful_content(sm)

    def is_destructive_replacement(self, sm: SourceMap) -> bool:
        """Return True if the replacement loses part of the original code.

        Replacing ``abc`` with ``abcde`` is not destructive, replacing it with
        ``abx`` is, since the ``c`` is lost.
        """
        if not self.is_replacement(sm):
            return False
        snippet = sm.span_to_snippet(self.span)
        return snippet is None or as_substr(snippet.strip(), self.replacement.strip()) is None

    def _replaces_meaningful_content(self, sm: SourceMap) -> bool:
        snippet = sm.span_to_snippet(self.span)
        if snippet is None:
            return self.span[0] != self.span[1]
        return bool(snippet.strip())

    def trim_trivial_replacements(self, sm: SourceMap) -> Patch:
        """Turn a replacement that wraps the original code into an addition.

        Replacing ``AACC`` with ``AABBCC`` becomes an insertion of ``BB``.

        Returns:
            Patch: The trimmed patch (or ``self`` when nothing can be trimmed).
        """
        if not self.replacement:
            return self
        snippet = sm.span_to_snippet(self.span)
        if snippet is None:
            return self
        found = as_substr(snippet, self.replacement)
        if found is None:
            return self
        prefix, substr, suffix = found
        start, end = self.span
        return Patch(span=(start + prefix, max(end - suffix, 0)), replacement=substr)


def as_substr(original: str, suggestion: str) -> tuple[int, str, int] | None:
    """Detect a suggestion that is the original with text inserted in the middle.

    Args:
        original (str): The original text (e.g. ``AACC``).
        suggestion (str): The suggested text (e.g. ``AABBCC``).

    Returns:
        tuple[int, str, int] | None: The byte length of the common prefix, the
        inserted text and the byte length of the common suffix, or None.
    """
    common = 0
    for a, b in zip(original, suggestion):
        if a != b:
            break
        common += 1
    original_rest = original[common:]
    suggestion_rest = suggestion[common:]
    if not suggestion_rest.endswith(original_rest):
        return None
    inserted = suggestion_rest[: len(suggestion_rest) - len(original_rest)]
    return (
        len(original[:common].encode("utf-8")),
        inserted,
        len(original_rest.encode("utf-8")),
    )


Marker = Union[Annotation, Patch]


@dataclass(frozen=True)
class Snippet:
    """A piece of source code with annotations (a cause) or patches (a suggestion).

    Attributes:
        source (str): The source text.
        markers (tuple[Annotation, ...] | tuple[Patch, ...]): Annotations or patches.
        line_start (int): Line number of the first source line.
        path (str | None): Path printed in the location line.
        fold (bool): Hide lines without annotations.
    """

    source: str
    markers: tuple[Marker, ...] = ()
    line_start: int = 1
    path: str | None = None
    fold: bool = True

    def __post_init__(self) -> None:
        kinds = {type(m) for m in self.markers}
        if len(kinds) > 1:
            raise ValueError("A snippet holds either annotations or patches, not both")

    @property
    def is_suggestion(self) -> bool:
        """Return True if the snippet holds patches."""
        return any(isinstance(m, Patch) for m in self.markers)

    @property
    def annotations(self) -> tuple[Annotation, ...]:
        """Return the annotations of a cause snippet."""
        return tuple(m for m in self.markers if isinstance(m, Annotation))

    @property
    def patches(self) -> tuple[Patch, ...]:
        """Return the patches of a suggestion snippet."""
        return tuple(m for m in self.markers if isinstance(m, Patch))

    def annotation(self, annotation: Annotation) -> Snippet:
        """Return a copy with ``annotation`` appended."""
        return replace(self, markers=(*self.markers, annotation))

    def annotations_of(self, annotations: Iterable[Annotation]) -> Snippet:
        """Return a copy with all ``annotations`` appended."""
        return replace(self, markers=(*self.markers, *annotations))

    def patch(self, patch: Patch) -> Snippet:
        """Return a copy with ``patch`` appended."""
        return replace(self, markers=(*self.markers, patch))

    def patches_of(self, patches: Iterable[Patch]) -> Snippet:
        """Return a copy with all ``patches`` appended."""
        return replace(self, markers=(*self.markers, *patches))

    def with_path(self, path: str | None) -> Snippet:
        """Return a copy with the location path set."""
        return replace(self, path=path)

    def with_line_start(self, line_start: int) -> Snippet:
        """Return a copy whose first line is numbered ``line_start``."""
        return replace(self, line_start=line_start)

    def with_fold(self, fold: bool) -> Snippet:
        """Return a copy with folding of unannotated lines switched on or off."""
        return replace(self, fold=fold)


@dataclass(frozen=True)
class Origin:
    """A bare location line: ``--> path:line:col``."""

    path: str
    line: int | None = None
    char_column: int | None = None
    primary: bool = False
    label: str | None = None

    def with_line(self, line: int) -> Origin:
        """Return a copy pointing at ``line``."""
        return replace(self, line=line)

    def with_char_column(self, char_column: int) -> Origin:
        """Return a copy pointing at column ``char_column`` (1-based)."""
        return replace(self, char_column=char_column)

    def with_primary(self, primary: bool) -> Origin:
        """Return a copy marked as (not) being the primary location."""
        return replace(self, primary=primary)


@dataclass(frozen=True)
class Padding:
    """An empty separator line."""


Element = Union[Message, Snippet, Origin, Padding]


@dataclass(frozen=True)
class Group:
    """A titled block of diagnostic elements.

    Attributes:
        title (Title | None): Optional headline.
        elements (tuple[Element, ...]): Messages, snippets, origins and paddings, in order.
        primary_level (Level): Level used to color primary annotations.
    """

    title: Title | None = None
    elements: tuple[Element, ...] = field(default_factory=tuple)
    primary_level: Level = Level.ERROR

    @classmethod
    def with_title(cls, title: Title) -> Group:
        """Create a group headed by ``title``; its level colors primary annotations."""
        return cls(title=title, primary_level=title.level)

    @classmethod
    def with_level(cls, level: Level) -> Group:
        """Create an untitled group whose primary annotations use ``level``."""
        return cls(primary_level=level)

    def element(self, element: Element) -> Group:
        """Return a copy with ``element`` appended."""
        return replace(self, elements=(*self.elements, element))

    def elements_of(self, elements: Iterable[Element]) -> Group:
        """Return a copy with all ``elements`` appended."""
        return replace(self, elements=(*self.elements, *elements))

    def is_empty(self) -> bool:
        """Return True if the group has neither a title nor elements."""
        return self.title is None and not self.elements


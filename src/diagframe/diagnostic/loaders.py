# topmark:header:start
#
#   project      : DiagFrame
#   file         : loaders.py
#   file_relpath : src/diagframe/diagnostic/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load diagnostic reports from TOML documents.

A report document holds an array of ``[[group]]`` tables; each group holds an
array of ``[[group.element]]`` tables whose ``type`` selects the element kind:

```toml
[[group]]
level = "error"
title = "mismatched types"
id = "E0308"

[[group.element]]
type = "snippet"
path = "src/main.rs"
source = \"\"\"
fn main() {
    let x: u32 = "a";
}
\"\"\"
[[group.element.annotation]]
kind = "primary"
start = 29
end = 32
label = "expected `u32`"
```

Parsing is done with `tomlkit`. Any shape or type problem raises
[`ReportFormatError`][diagframe.errors.ReportFormatError] naming the table
path of the offending entry (``group[0].element[1].annotation[0]``).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from diagframe.config.logging import get_logger
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
from diagframe.errors import ReportFormatError

if TYPE_CHECKING:
    from diagframe.config.logging import DiagframeLogger
    from diagframe.diagnostic.model import Element

logger: DiagframeLogger = get_logger(__name__)

ELEMENT_TYPES: tuple[str, ...] = ("snippet", "suggestion", "message", "origin", "padding")

Table = dict[str, Any]


def load_report(source: str | Path) -> list[Group]:
    """Parse a report document.

    Args:
        source (str | Path): TOML text, or the path of a TOML file.

    Returns:
        list[Group]: The groups of the report, in document order.

    Raises:
        ReportFormatError: If the document is not valid TOML or does not
            describe a report.
        OSError: If ``source`` is a path that cannot be read.
    """
    if isinstance(source, Path):
        logger.debug("Loading report from %s", source)
        text = source.read_text(encoding="utf-8")
    else:
        text = source

    try:
        data_any: Any = tomlkit.parse(text).unwrap()
    except TomlkitParseError as exc:
        raise ReportFormatError("", f"invalid TOML: {exc}") from exc

    data = cast("Table", data_any)
    groups_any = data.get("group")
    if not isinstance(groups_any, list) or not groups_any:
        raise ReportFormatError("group", "expected at least one [[group]] table")

    groups = [
        _parse_group(_table(g, f"group[{i}]"), f"group[{i}]")
        for i, g in enumerate(cast("list[Any]", groups_any))
    ]
    logger.debug("Loaded report with %d group(s)", len(groups))
    return groups


# --- typed getters ---


def _table(value: object, where: str) -> Table:
    if not isinstance(value, dict):
        raise ReportFormatError(where, f"expected a table, got {type(value).__name__}")
    return cast("Table", value)


def _tables(table: Table, key: str, where: str) -> list[Table]:
    value = table.get(key, [])
    if not isinstance(value, list):
        raise ReportFormatError(f"{where}.{key}", "expected an array of tables")
    return [
        _table(item, f"{where}.{key}[{i}]") for i, item in enumerate(cast("list[Any]", value))
    ]


def _str(table: Table, key: str, where: str, *, required: bool = False) -> str | None:
    value = table.get(key)
    if value is None:
        if required:
            raise ReportFormatError(where, f"missing required key `{key}`")
        return None
    if not isinstance(value, str):
        raise ReportFormatError(f"{where}.{key}", f"expected a string, got {value!r}")
    return value


def _int(table: Table, key: str, where: str, default: int | None = None) -> int:
    value = table.get(key, default)
    if value is None:
        raise ReportFormatError(where, f"missing required key `{key}`")
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ReportFormatError(f"{where}.{key}", f"expected a non-negative integer, got {value!r}")
    return value


def _bool(table: Table, key: str, where: str, default: bool) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise ReportFormatError(f"{where}.{key}", f"expected a boolean, got {value!r}")
    return value


# --- element parsers ---


def _parse_level(table: Table, where: str, default: LevelKind | None = None) -> Level:
    raw = _str(table, "level", where, required=default is None)
    try:
        kind = LevelKind.parse(raw) if raw is not None else default
    except ValueError as exc:
        raise ReportFormatError(f"{where}.level", str(exc)) from exc
    assert kind is not None
    level = Level(kind)
    name = _str(table, "name", where)
    if name is not None:
        level = level.with_name(name)
    if _bool(table, "hidden", where, False):
        level = level.no_name()
    return level


def _parse_group(table: Table, where: str) -> Group:
    level = _parse_level(table, where, default=LevelKind.ERROR)
    text = _str(table, "title", where)
    if text is not None:
        title = Title(level=level, text=text)
        code = _str(table, "id", where)
        if code is not None:
            title = title.with_id(code, _str(table, "url", where))
        group = Group.with_title(title)
    else:
        group = Group.with_level(level)

    elements: list[Element] = []
    for i, element in enumerate(_tables(table, "element", where)):
        elements.append(_parse_element(element, f"{where}.element[{i}]"))
    return group.elements_of(elements)


def _parse_element(table: Table, where: str) -> Element:
    kind = _str(table, "type", where, required=True)
    if kind in ("snippet", "suggestion"):
        return _parse_snippet(table, where, suggestion=kind == "suggestion")
    if kind == "message":
        text = _str(table, "text", where, required=True)
        assert text is not None
        return Message(level=_parse_level(table, where), text=text)
    if kind == "origin":
        path = _str(table, "path", where, required=True)
        assert path is not None
        origin = Origin(
            path=path,
            primary=_bool(table, "primary", where, False),
            label=_str(table, "label", where),
        )
        if "line" in table:
            origin = origin.with_line(_int(table, "line", where))
        if "column" in table:
            origin = origin.with_char_column(_int(table, "column", where))
        return origin
    if kind == "padding":
        return Padding()
    allowed = ", ".join(ELEMENT_TYPES)
    raise ReportFormatError(f"{where}.type", f"unknown element type {kind!r} (expected: {allowed})")


def _parse_snippet(table: Table, where: str, *, suggestion: bool) -> Snippet:
    source = _str(table, "source", where, required=True)
    assert source is not None
    snippet = Snippet(
        source=source,
        line_start=_int(table, "line_start", where, default=1),
        path=_str(table, "path", where),
        fold=_bool(table, "fold", where, True),
    )
    if suggestion:
        if "annotation" in table:
            raise ReportFormatError(where, "a suggestion holds patches, not annotations")
        patches = _tables(table, "patch", where)
        if not patches:
            raise ReportFormatError(where, "a suggestion needs at least one [[patch]] table")
        return snippet.patches_of(
            _parse_patch(p, f"{where}.patch[{i}]") for i, p in enumerate(patches)
        )
    if "patch" in table:
        raise ReportFormatError(where, "a snippet holds annotations, not patches")
    return snippet.annotations_of(
        _parse_annotation(a, f"{where}.annotation[{i}]")
        for i, a in enumerate(_tables(table, "annotation", where))
    )


def _parse_annotation(table: Table, where: str) -> Annotation:
    raw_kind = _str(table, "kind", where) or AnnotationKind.CONTEXT.value
    try:
        kind = AnnotationKind(raw_kind.lower())
    except ValueError:
        raise ReportFormatError(
            f"{where}.kind", f"unknown annotation kind {raw_kind!r} (expected: primary, context)"
        ) from None
    start = _int(table, "start", where)
    end = _int(table, "end", where)
    try:
        annotation = kind.span(start, end)
    except ValueError as exc:
        raise ReportFormatError(where, str(exc)) from exc
    return annotation.with_label(_str(table, "label", where)).with_highlight_source(
        _bool(table, "highlight_source", where, False)
    )


def _parse_patch(table: Table, where: str) -> Patch:
    replacement = _str(table, "replacement", where, required=True)
    assert replacement is not None
    start = _int(table, "start", where)
    end = _int(table, "end", where)
    try:
        return Patch.of(start, end, replacement)
    except ValueError as exc:
        raise ReportFormatError(where, str(exc)) from exc

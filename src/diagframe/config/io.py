# topmark:header:start
#
#   project      : DiagFrame
#   file         : io.py
#   file_relpath : src/diagframe/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML I/O helpers for DiagFrame configuration.

Parsing and rendering use `tomlkit`. The helpers here are pure apart from
[`load_toml_dict`][diagframe.config.io.load_toml_dict], which reads a file;
they never mutate configuration objects.

Typed getters come in one flavor: ``*_or_none_checked`` returns None for a
missing key and raises [`ConfigError`][diagframe.errors.ConfigError] when the
value has the wrong type.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from diagframe.config.keys import Toml
from diagframe.config.logging import get_logger
from diagframe.constants import DEFAULT_TERM_WIDTH
from diagframe.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from diagframe.config.logging import DiagframeLogger

logger: DiagframeLogger = get_logger(__name__)

TomlTable = dict[str, Any]

E = TypeVar("E", bound=Enum)


# --- Defaults ---


def load_defaults_dict() -> TomlTable:
    """Return DiagFrame's runtime defaults as a TOML-table-compatible dict.

    This function performs no I/O; the returned dict is new on every call.
    """
    return {
        Toml.SECTION_RENDERER: {
            Toml.KEY_THEME: "ascii",
            Toml.KEY_TERM_WIDTH: DEFAULT_TERM_WIDTH,
            Toml.KEY_ANONYMIZED_LINE_NUMBERS: False,
            Toml.KEY_SHORT_MESSAGE: False,
            Toml.KEY_STYLED: False,
        },
        Toml.SECTION_SVG: {
            Toml.KEY_FONT_FAMILY: "SFMono-Regular, Consolas, Liberation Mono, Menlo, monospace",
            Toml.KEY_FONT_SIZE: 14,
            Toml.KEY_LINE_HEIGHT: 18,
            Toml.KEY_PADDING: 10,
            Toml.KEY_CHAR_WIDTH: 8.4,
            Toml.KEY_FG: "#AAAAAA",
            Toml.KEY_BG: "#000000",
        },
    }


# --- File I/O ---


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file.

    Args:
        path (Path): Path to a TOML document (``diagframe.toml`` or ``pyproject.toml``).

    Returns:
        TomlTable: The parsed content as plain Python values.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except TomlkitParseError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible `None` entries from mappings and lists."""
    if isinstance(value, Mapping):
        m = cast("Mapping[object, object]", value)
        return {str(k): _strip_none_for_toml(v) for k, v in m.items() if v is not None}
    if isinstance(value, list):
        return [_strip_none_for_toml(v) for v in cast("list[object]", value) if v is not None]
    return value


def to_toml(toml_dict: TomlTable) -> str:
    """Serialize a TOML mapping to a string.

    Args:
        toml_dict (TomlTable): TOML mapping to render; `None` values are omitted.

    Returns:
        str: The rendered TOML document.
    """
    cleaned: Any = _strip_none_for_toml(toml_dict)
    return cast("str", cast("Any", tomlkit).dumps(cleaned))


def nest_under_tool_section(toml_dict: TomlTable, name: str) -> TomlTable:
    """Return ``toml_dict`` nested as ``[tool.<name>]`` for inclusion in ``pyproject.toml``."""
    return {"tool": {name: toml_dict}}


# --- Typed getters ---


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Return the sub-table ``key`` of ``table`` (empty if missing).

    Raises:
        ConfigError: If the value exists but is not a table.
    """
    value: Any = table.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] must be a table, got {type(value).__name__}")
    return cast("TomlTable", value)


def warn_unknown_keys(table: TomlTable, allowed: frozenset[str], where: str) -> None:
    """Log (and otherwise ignore) keys of ``table`` that are not in ``allowed``."""
    for key in sorted(set(table) - allowed):
        logger.warning("Ignoring unknown config key %s.%s", where, key)


def get_bool_value_or_none_checked(table: TomlTable, key: str, where: str) -> bool | None:
    """Return a boolean value, None when missing.

    Raises:
        ConfigError: If the value is not a boolean.
    """
    value: Any = table.get(key)
    if value is None or isinstance(value, bool):
        return value
    raise ConfigError(f"{where}.{key} must be a boolean, got {value!r}")


def get_int_value_or_none_checked(
    table: TomlTable, key: str, where: str, *, minimum: int = 0
) -> int | None:
    """Return an integer value no smaller than ``minimum``, None when missing.

    Raises:
        ConfigError: If the value is not an integer or is out of range.
    """
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where}.{key} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{where}.{key} must be at least {minimum}, got {value}")
    return value


def get_float_value_or_none_checked(table: TomlTable, key: str, where: str) -> float | None:
    """Return a positive number as a float, None when missing.

    Raises:
        ConfigError: If the value is not a positive number.
    """
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{where}.{key} must be a positive number, got {value!r}")
    return float(value)


def get_string_value_or_none_checked(table: TomlTable, key: str, where: str) -> str | None:
    """Return a string value, None when missing.

    Raises:
        ConfigError: If the value is not a string.
    """
    value: Any = table.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(f"{where}.{key} must be a string, got {value!r}")


def get_enum_value_or_none_checked(
    table: TomlTable, key: str, where: str, enum_cls: type[E]
) -> E | None:
    """Return an enum member parsed from its (case-insensitive) value, None when missing.

    Raises:
        ConfigError: If the value does not name a member of ``enum_cls``.
    """
    raw = get_string_value_or_none_checked(table, key, where)
    if raw is None:
        return None
    for member in enum_cls:
        if str(member.value).lower() == raw.strip().lower():
            return member
    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise ConfigError(f"{where}.{key} must be one of: {allowed}; got {raw!r}")

# topmark:header:start
#
#   project      : DiagFrame
#   file         : model.py
#   file_relpath : src/diagframe/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Layered configuration for DiagFrame.

[`MutableConfig`][diagframe.config.model.MutableConfig] collects settings from
built-in defaults, project files and explicit ``--config`` files, plus CLI
overrides, then [`freeze`][diagframe.config.model.MutableConfig.freeze]s into an
immutable [`Config`][diagframe.config.model.Config].

Merge order (lowest to highest precedence):
    1) Built-in defaults
    2) ``[tool.diagframe]`` in ``pyproject.toml``, then ``diagframe.toml``
       (both looked up in the working directory)
    3) Files passed with ``--config``, in the order given
    4) CLI overrides (`MutableConfig.apply_cli_args`)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from diagframe.config.io import (
    get_bool_value_or_none_checked,
    get_enum_value_or_none_checked,
    get_float_value_or_none_checked,
    get_int_value_or_none_checked,
    get_string_value_or_none_checked,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
    warn_unknown_keys,
)
from diagframe.config.keys import Toml
from diagframe.config.logging import get_logger
from diagframe.constants import (
    DEFAULT_TERM_WIDTH,
    DEFAULT_TOML_CONFIG_NAME,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
)
from diagframe.errors import ConfigError
from diagframe.export.svg import Palette, SvgOptions
from diagframe.rendering.renderer import Renderer
from diagframe.rendering.theme import OutputTheme

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from diagframe.config.io import TomlTable
    from diagframe.config.logging import DiagframeLogger

logger: DiagframeLogger = get_logger(__name__)

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class Config:
    """Immutable runtime configuration.

    Attributes:
        theme (OutputTheme): Glyph set of the text renderer.
        term_width (int): Terminal width used to cut long source lines.
        anonymized_line_numbers (bool): Print ``LL`` instead of line numbers.
        short_message (bool): Render one-line summaries.
        styled (bool): Use the default ANSI stylesheet.
        svg (SvgOptions): Layout and palette of SVG documents.
        config_files (tuple[Path | str, ...]): Sources merged into this snapshot.
    """

    theme: OutputTheme = OutputTheme.ASCII
    term_width: int = DEFAULT_TERM_WIDTH
    anonymized_line_numbers: bool = False
    short_message: bool = False
    styled: bool = False
    svg: SvgOptions = field(default_factory=SvgOptions)
    config_files: tuple[Path | str, ...] = ()

    def renderer(self, styled: bool | None = None) -> Renderer:
        """Return a text renderer configured from this snapshot.

        Args:
            styled (bool | None): Force ANSI styling on or off; None follows `styled`.
        """
        use_styles = self.styled if styled is None else styled
        base = Renderer.styled() if use_styles else Renderer.plain()
        return (
            base.with_theme(self.theme)
            .with_term_width(self.term_width)
            .with_anonymized_line_numbers(self.anonymized_line_numbers)
            .with_short_message(self.short_message)
        )

    def to_toml_dict(self) -> TomlTable:
        """Convert this snapshot into a TOML-serializable dict (sources excluded)."""
        return {
            Toml.SECTION_RENDERER: {
                Toml.KEY_THEME: self.theme.value,
                Toml.KEY_TERM_WIDTH: self.term_width,
                Toml.KEY_ANONYMIZED_LINE_NUMBERS: self.anonymized_line_numbers,
                Toml.KEY_SHORT_MESSAGE: self.short_message,
                Toml.KEY_STYLED: self.styled,
            },
            Toml.SECTION_SVG: {
                Toml.KEY_FONT_FAMILY: self.svg.font_family,
                Toml.KEY_FONT_SIZE: self.svg.font_size,
                Toml.KEY_LINE_HEIGHT: self.svg.line_height,
                Toml.KEY_PADDING: self.svg.padding,
                Toml.KEY_CHAR_WIDTH: self.svg.char_width,
                Toml.KEY_FG: self.svg.palette.fg,
                Toml.KEY_BG: self.svg.palette.bg,
            },
        }


@dataclass
class MutableConfig:
    """Mutable configuration used during discovery and merging.

    Every setting is tri-state: None means "not set by this layer", so that
    [`merge_with`][diagframe.config.model.MutableConfig.merge_with] can let
    later layers override only what they actually set.
    """

    theme: OutputTheme | None = None
    term_width: int | None = None
    anonymized_line_numbers: bool | None = None
    short_message: bool | None = None
    styled: bool | None = None

    font_family: str | None = None
    font_size: int | None = None
    line_height: int | None = None
    padding: int | None = None
    char_width: float | None = None
    fg: str | None = None
    bg: str | None = None

    # Provenance
    config_files: list[Path | str] = field(default_factory=lambda: [])

    # ---------------------------- Build/freeze ----------------------------
    def freeze(self) -> Config:
        """Freeze this draft into an immutable `Config`; unset values take their defaults."""
        defaults = Config()
        svg_defaults = defaults.svg
        palette_defaults = svg_defaults.palette

        def pick(value: Any, default: Any) -> Any:
            return default if value is None else value

        return Config(
            theme=pick(self.theme, defaults.theme),
            term_width=pick(self.term_width, defaults.term_width),
            anonymized_line_numbers=pick(
                self.anonymized_line_numbers, defaults.anonymized_line_numbers
            ),
            short_message=pick(self.short_message, defaults.short_message),
            styled=pick(self.styled, defaults.styled),
            svg=SvgOptions(
                font_family=pick(self.font_family, svg_defaults.font_family),
                font_size=pick(self.font_size, svg_defaults.font_size),
                line_height=pick(self.line_height, svg_defaults.line_height),
                padding=pick(self.padding, svg_defaults.padding),
                char_width=pick(self.char_width, svg_defaults.char_width),
                palette=Palette(
                    fg=pick(self.fg, palette_defaults.fg),
                    bg=pick(self.bg, palette_defaults.bg),
                ),
            ),
            config_files=tuple(self.config_files),
        )

    # --------------------------- Loaders/parsers --------------------------
    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Return a draft holding the built-in defaults."""
        draft = cls.from_toml_dict(load_defaults_dict())
        draft.config_files = ["<defaults>"]
        return draft

    @classmethod
    def from_toml_dict(cls, data: TomlTable) -> MutableConfig:
        """Build a draft from a parsed configuration table.

        Unknown sections and keys are logged and ignored.

        Args:
            data (TomlTable): The content of ``diagframe.toml`` (or of ``[tool.diagframe]``).

        Returns:
            MutableConfig: The draft.

        Raises:
            ConfigError: If a known key has a value of the wrong type.
        """
        warn_unknown_keys(data, frozenset({Toml.SECTION_RENDERER, Toml.SECTION_SVG}), "<root>")

        renderer = get_table_value(data, Toml.SECTION_RENDERER)
        warn_unknown_keys(renderer, Toml.RENDERER_KEYS, Toml.SECTION_RENDERER)
        r = Toml.SECTION_RENDERER

        svg = get_table_value(data, Toml.SECTION_SVG)
        warn_unknown_keys(svg, Toml.SVG_KEYS, Toml.SECTION_SVG)
        s = Toml.SECTION_SVG

        return cls(
            theme=get_enum_value_or_none_checked(renderer, Toml.KEY_THEME, r, OutputTheme),
            term_width=get_int_value_or_none_checked(renderer, Toml.KEY_TERM_WIDTH, r),
            anonymized_line_numbers=get_bool_value_or_none_checked(
                renderer, Toml.KEY_ANONYMIZED_LINE_NUMBERS, r
            ),
            short_message=get_bool_value_or_none_checked(renderer, Toml.KEY_SHORT_MESSAGE, r),
            styled=get_bool_value_or_none_checked(renderer, Toml.KEY_STYLED, r),
            font_family=get_string_value_or_none_checked(svg, Toml.KEY_FONT_FAMILY, s),
            font_size=get_int_value_or_none_checked(svg, Toml.KEY_FONT_SIZE, s, minimum=1),
            line_height=get_int_value_or_none_checked(svg, Toml.KEY_LINE_HEIGHT, s, minimum=1),
            padding=get_int_value_or_none_checked(svg, Toml.KEY_PADDING, s),
            char_width=get_float_value_or_none_checked(svg, Toml.KEY_CHAR_WIDTH, s),
            fg=_hex_color(get_string_value_or_none_checked(svg, Toml.KEY_FG, s), f"{s}.fg"),
            bg=_hex_color(get_string_value_or_none_checked(svg, Toml.KEY_BG, s), f"{s}.bg"),
        )

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig | None:
        """Load a draft from ``diagframe.toml`` or from ``[tool.diagframe]`` in ``pyproject.toml``.

        Returns:
            MutableConfig | None: The draft, or None for a ``pyproject.toml``
            without a ``[tool.diagframe]`` table.

        Raises:
            ConfigError: If the file cannot be read, is not valid TOML or holds
                values of the wrong type.
        """
        logger.debug("Creating MutableConfig from TOML config: %s", path)
        data: TomlTable = load_toml_dict(path)

        if path.name == PYPROJECT_TOML_NAME:
            tool_any: Any = data.get("tool", {})
            section: Any = (
                tool_any.get(PYPROJECT_TOOL_SECTION) if isinstance(tool_any, dict) else None
            )
            if not isinstance(section, dict):
                logger.debug("No [tool.%s] table in %s", PYPROJECT_TOOL_SECTION, path)
                return None
            data = section

        try:
            draft = cls.from_toml_dict(data)
        except ConfigError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
        draft.config_files = [path]
        logger.debug("Generated MutableConfig: %s", draft)
        return draft

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return the config files of directory ``start``, lowest precedence first.

        ``pyproject.toml`` comes before ``diagframe.toml`` so that the tool
        file wins when both are present.
        """
        found: list[Path] = []
        for name in (PYPROJECT_TOML_NAME, DEFAULT_TOML_CONFIG_NAME):
            candidate = start / name
            if candidate.is_file():
                found.append(candidate)
        logger.debug("Discovered config files in %s: %s", start, found)
        return found

    @classmethod
    def load_merged(
        cls,
        *,
        cwd: Path | None = None,
        extra_config_files: Iterable[Path] | None = None,
        no_config: bool = False,
    ) -> MutableConfig:
        """Discover and merge configuration layers into a draft.

        Args:
            cwd (Path | None): Directory searched for project config files (default: CWD).
            extra_config_files (Iterable[Path] | None): Files merged after discovery, in order.
            no_config (bool): Skip discovery of project config files.

        Returns:
            MutableConfig: The merged draft, ready to receive CLI overrides and be frozen.
        """
        draft = cls.from_defaults()
        if not no_config:
            for path in cls.discover_local_config_files(cwd or Path.cwd()):
                layer = cls.from_toml_file(path)
                if layer is not None:
                    draft = draft.merge_with(layer)
        for extra in extra_config_files or ():
            layer = cls.from_toml_file(Path(extra))
            if layer is not None:
                draft = draft.merge_with(layer)
        return draft

    # ------------------------------- Merging -------------------------------
    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where the values set in ``other`` override this draft."""

        def over(name: str) -> Any:
            value = getattr(other, name)
            return getattr(self, name) if value is None else value

        return MutableConfig(
            theme=over("theme"),
            term_width=over("term_width"),
            anonymized_line_numbers=over("anonymized_line_numbers"),
            short_message=over("short_message"),
            styled=over("styled"),
            font_family=over("font_family"),
            font_size=over("font_size"),
            line_height=over("line_height"),
            padding=over("padding"),
            char_width=over("char_width"),
            fg=over("fg"),
            bg=over("bg"),
            config_files=self.config_files + other.config_files,
        )

    def apply_cli_args(self, args: Mapping[str, Any]) -> MutableConfig:
        """Apply CLI overrides in place; ``None`` values leave settings untouched.

        Args:
            args (Mapping[str, Any]): Field name to value, e.g. ``{"theme": OutputTheme.UNICODE}``.

        Returns:
            MutableConfig: ``self``, for chaining.

        Raises:
            ConfigError: If a key does not name a setting.
        """
        for name, value in args.items():
            if name == "config_files" or not hasattr(self, name):
                raise ConfigError(f"Unknown setting: {name!r}")
            if value is not None:
                logger.trace("CLI override %s=%r", name, value)
                setattr(self, name, value)
        return self


def _hex_color(value: str | None, where: str) -> str | None:
    if value is not None and not _HEX_COLOR_RE.match(value):
        raise ConfigError(f"{where} must be a #RRGGBB color, got {value!r}")
    return value

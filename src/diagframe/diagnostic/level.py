# topmark:header:start
#
#   project      : DiagFrame
#   file         : level.py
#   file_relpath : src/diagframe/diagnostic/level.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic severity levels.

A [`Level`][diagframe.diagnostic.level.Level] decides the label printed in
front of a title or message (``error``, ``warning``, ...) and the color of the
group's primary annotations. The label can be overridden or hidden:

```python
Level.ERROR.title("mismatched types")           # error: mismatched types
Level.HELP.with_name("try").message("...")      # = try: ...
Level.NOTE.no_name().message("...")             # = ...
```
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from diagframe.diagnostic.model import Message, Title
    from diagframe.rendering.styles import Style, Stylesheet


class LevelKind(str, Enum):
    """Severity of a diagnostic element."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    NOTE = "note"
    HELP = "help"

    @classmethod
    def parse(cls, value: str) -> LevelKind:
        """Parse a level name case-insensitively.

        Raises:
            ValueError: If ``value`` is not a known level name.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown level {value!r} (expected one of: {allowed})") from None


@dataclass(frozen=True)
class Level:
    """A severity level together with the label used to print it.

    Attributes:
        kind (LevelKind): The severity.
        name (str | None): Label override; None prints the default label.
        hidden (bool): If True, no label (and no ``: `` separator) is printed.
    """

    kind: LevelKind
    name: str | None = None
    hidden: bool = False

    ERROR: ClassVar[Level]
    WARNING: ClassVar[Level]
    INFO: ClassVar[Level]
    NOTE: ClassVar[Level]
    HELP: ClassVar[Level]

    def with_name(self, name: str | None) -> Level:
        """Return a copy printed with label ``name`` (None restores the default label)."""
        return replace(self, name=name, hidden=False)

    def no_name(self) -> Level:
        """Return a copy printed without any label."""
        return replace(self, name=None, hidden=True)

    def as_str(self) -> str:
        """Return the printed label."""
        return self.name if self.name is not None else self.kind.value

    def style(self, stylesheet: Stylesheet) -> Style:
        """Return the stylesheet entry of this level's severity."""
        return stylesheet.for_level(self.kind)

    def title(self, text: str) -> Title:
        """Create a group title at this level."""
        from diagframe.diagnostic.model import Title

        return Title(level=self, text=text)

    def message(self, text: str) -> Message:
        """Create a secondary message at this level."""
        from diagframe.diagnostic.model import Message

        return Message(level=self, text=text)


Level.ERROR = Level(LevelKind.ERROR)
Level.WARNING = Level(LevelKind.WARNING)
Level.INFO = Level(LevelKind.INFO)
Level.NOTE = Level(LevelKind.NOTE)
Level.HELP = Level(LevelKind.HELP)

# topmark:header:start
#
#   project      : DiagFrame
#   file         : cli_types.py
#   file_relpath : src/diagframe/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared Click parameter types for the DiagFrame CLI."""

from __future__ import annotations

from enum import Enum

import click


class EnumChoiceParam(click.Choice):
    """A case-insensitive choice among the values of a string-valued Enum.

    The option accepts the enum values (``--theme unicode``, ``--theme UNICODE``)
    and hands the matching member to the command. Help texts, error messages and
    shell completion come from `click.Choice`.

    Args:
        enum_cls (type[Enum]): Enum whose member values are the accepted choices.
    """

    def __init__(self, enum_cls: type[Enum]) -> None:
        self.enum_cls = enum_cls
        super().__init__([str(member.value) for member in enum_cls], case_sensitive=False)
        self.name = enum_cls.__name__.lower()

    def convert(
        self,
        value: object,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Enum:
        """Return the enum member named by ``value`` (members pass through)."""
        if isinstance(value, self.enum_cls):
            return value
        choice = super().convert(value, param, ctx)
        return self.enum_cls(str(choice))

    def __repr__(self) -> str:
        """Return a string representation."""
        return f"EnumChoiceParam({self.enum_cls.__name__})"

# topmark:header:start
#
#   project      : DiagFrame
#   file         : diff.py
#   file_relpath : src/diagframe/utils/diff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unified diff helpers for fixture comparison.

[`unified_diff`][diagframe.utils.diff.unified_diff] produces the diff carried by
[`FixtureMismatchError`][diagframe.errors.FixtureMismatchError];
[`render_patch`][diagframe.utils.diff.render_patch] formats it for display.
"""

from __future__ import annotations

import difflib
from typing import Sequence

from yachalk import chalk


def unified_diff(expected: str, actual: str, *, fromfile: str, tofile: str = "actual") -> str:
    """Return a unified diff between two texts (empty when they are equal)."""
    lines = difflib.unified_diff(
        expected.splitlines(keepends=True),
        actual.splitlines(keepends=True),
        fromfile=fromfile,
        tofile=tofile,
    )
    return "".join(line if line.endswith("\n") else f"{line}\n" for line in lines)


def render_patch(patch: Sequence[str] | str, show_line_numbers: bool = False) -> str:
    """Render a colorized preview of a unified diff.

    Args:
        patch: A unified diff as **either** a list/sequence of lines **or** a single
            multiline string.
        show_line_numbers: Whether to prefix output with line numbers.

    Returns:
        The formatted, colorized diff preview.
    """
    if isinstance(patch, str):
        lines: list[str] = patch.splitlines(keepends=False)
    else:
        lines = [line.rstrip("\n") for line in patch]

    # File headers first: `---`/`+++` would otherwise match the removal/addition markers.
    def process_line(line: str) -> str:
        content = line.replace("\r", "\\r")
        if line.startswith(("---", "+++")):
            return chalk.bold(content)
        match line[:1]:
            case "-":
                return chalk.bold.red(content)
            case "+":
                return chalk.bold.green(content)
            case "@":
                return chalk.cyan(content)
            case _:
                return chalk.white(content)

    if show_line_numbers:
        return "".join(f"{i:04d}|{process_line(line)}\n" for i, line in enumerate(lines, 1))
    return "".join(f"{process_line(line)}\n" for line in lines)

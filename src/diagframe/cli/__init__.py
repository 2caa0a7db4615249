# topmark:header:start
#
#   project      : DiagFrame
#   file         : __init__.py
#   file_relpath : src/diagframe/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame CLI package.

The console script entry point is defined in ``pyproject.toml`` as::

    [project.scripts]
    diagframe = "diagframe.cli.main:cli"

All subcommands live in [`diagframe.cli.commands`][].
"""

from __future__ import annotations

__all__: list[str] = []
# Do NOT import .main or commands at module import time

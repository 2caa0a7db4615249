# topmark:header:start
#
#   project      : DiagFrame
#   file         : __init__.py
#   file_relpath : src/diagframe/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for DiagFrame.

Settings are read from TOML documents with tomlkit: the ``[tool.diagframe]``
table of ``pyproject.toml``, a ``diagframe.toml`` file and explicit ``--config``
files, layered over built-in defaults. See
[`diagframe.config.model`][diagframe.config.model].
"""

from __future__ import annotations

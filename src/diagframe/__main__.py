# topmark:header:start
#
#   project      : DiagFrame
#   file         : __main__.py
#   file_relpath : src/diagframe/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running DiagFrame via ``python -m diagframe``.

It delegates directly to :func:`diagframe.cli.main.cli`, so the module
interface and the ``diagframe`` console script behave identically.

Examples:
    Render a report described in TOML::

        python -m diagframe render report.toml --format svg -o report.svg
"""

from __future__ import annotations

from diagframe.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()

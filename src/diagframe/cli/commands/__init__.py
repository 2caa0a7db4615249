# topmark:header:start
#
#   project      : DiagFrame
#   file         : __init__.py
#   file_relpath : src/diagframe/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click subcommands of the ``diagframe`` CLI."""

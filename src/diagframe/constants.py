# topmark:header:start
#
#   project      : DiagFrame
#   file         : constants.py
#   file_relpath : src/diagframe/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    DIAGFRAME_VERSION: str = get_version("diagframe")
except PackageNotFoundError:  # pragma: no cover - running from a source tree
    DIAGFRAME_VERSION = "0.0.0"

# Rendering defaults
DEFAULT_TERM_WIDTH: int = 140
ANONYMIZED_LINE_NUM: str = "LL"

# Configuration discovery
DEFAULT_TOML_CONFIG_NAME: str = "diagframe.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "diagframe"

# Environment variables
ENV_LOG_LEVEL: str = "DIAGFRAME_LOG_LEVEL"
ENV_SNAPSHOTS: str = "DIAGFRAME_SNAPSHOTS"
SNAPSHOTS_OVERWRITE: str = "overwrite"

# topmark:header:start
#
#   project      : DiagFrame
#   file         : logging.py
#   file_relpath : src/diagframe/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame logging: a TRACE level, a logger class and colored records.

Library modules obtain their logger with
[`get_logger`][diagframe.config.logging.get_logger] and log at ``debug`` or
``trace``. Nothing is printed until
[`setup_logging`][diagframe.config.logging.setup_logging] attaches a handler to
the ``diagframe`` package logger; the CLI does so for ``-v`` or when
``DIAGFRAME_LOG_LEVEL`` is set.

Records go to ``stderr`` so that rendered diagnostics and SVG documents
written to ``stdout`` stay byte-exact.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Callable, Final, cast

from yachalk import chalk

from diagframe.constants import ENV_LOG_LEVEL

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

PACKAGE_LOGGER: Final[str] = "diagframe"


class DiagframeLogger(logging.Logger):
    """Logger with a ``trace()`` method for records below DEBUG.

    TRACE records follow the renderer step by step (CLI overrides, buffer
    writes); they are only useful when debugging a rendering.
    """

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log ``msg % args`` with severity TRACE."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, extra=extra, stacklevel=2)


logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.setLoggerClass(DiagframeLogger)

LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"

# Highest threshold first; the first one at or below the record level wins.
_LEVEL_COLORS: Final[tuple[tuple[int, Callable[[str], str]], ...]] = (
    (logging.CRITICAL, chalk.red_bright),
    (logging.ERROR, chalk.red),
    (logging.WARNING, chalk.yellow),
    (logging.INFO, chalk.green),
    (logging.DEBUG, chalk.gray),
    (TRACE_LEVEL, chalk.blue),
)


class ChalkFormatter(logging.Formatter):
    """Formatter that colors each record by its severity with ``yachalk``."""

    def format(self, record: logging.LogRecord) -> str:
        """Format ``record`` and color the whole line."""
        message = super().format(record)
        for threshold, paint in _LEVEL_COLORS:
            if record.levelno >= threshold:
                return paint(message)
        return chalk.dim(message)


def resolve_env_log_level() -> int | None:
    """Return the level requested with ``DIAGFRAME_LOG_LEVEL``, or None.

    Accepts level names (``trace``, ``DEBUG``, ``warning``...) and numbers.
    Unknown names count as unset.
    """
    raw = os.environ.get(ENV_LOG_LEVEL, "").strip().upper()
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    if raw == "TRACE":
        return TRACE_LEVEL
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else None


def setup_logging(level: int | None = None) -> None:
    """Send DiagFrame log records at ``level`` and above to stderr.

    Only the ``diagframe`` package logger is configured; applications embedding
    the library keep their own root logger setup. Calling this again replaces
    the previous handler.

    Args:
        level (int | None): Logging level; None reads ``DIAGFRAME_LOG_LEVEL`` and
            falls back to WARNING.
    """
    if level is None:
        level = resolve_env_log_level() or logging.WARNING

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = False


def get_logger(name: str) -> DiagframeLogger:
    """Return the `DiagframeLogger` called ``name`` (use ``__name__``)."""
    return cast("DiagframeLogger", logging.getLogger(name))

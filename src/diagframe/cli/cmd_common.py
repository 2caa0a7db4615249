# topmark:header:start
#
#   project      : DiagFrame
#   file         : cmd_common.py
#   file_relpath : src/diagframe/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common command utilities for Click-based commands.

These helpers encapsulate plumbing shared by several commands: resolving the
effective configuration, translating library errors into CLI errors with the
right exit codes, and reading inputs / writing outputs.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from diagframe.cli.errors import (
    DiagframeConfigError,
    DiagframeFileNotFoundError,
    DiagframeFixtureMismatchError,
    DiagframeIOError,
    DiagframeReportError,
)
from diagframe.config.logging import get_logger
from diagframe.config.model import MutableConfig
from diagframe.errors import (
    ConfigError,
    EmptyReportError,
    FixtureMismatchError,
    ReportFormatError,
    SpanOutOfBoundsError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from diagframe.cli.console import ConsoleLike
    from diagframe.config.logging import DiagframeLogger
    from diagframe.config.model import Config

logger: DiagframeLogger = get_logger(__name__)

STDIN_SENTINEL: str = "-"


def get_console(ctx: click.Context) -> ConsoleLike:
    """Return the console stored on the context by the root group."""
    ctx.ensure_object(dict)
    return ctx.obj["console"]


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output verbosity: ``-v`` count minus ``-q`` count (0 = default)."""
    ctx.ensure_object(dict)
    return int(ctx.obj.get("verbosity", 0))


@contextmanager
def library_errors() -> Iterator[None]:
    """Translate library exceptions raised in the block into CLI errors.

    Exit code mapping:
        CONFIG_ERROR → ConfigError
        REPORT_ERROR → ReportFormatError, SpanOutOfBoundsError, EmptyReportError,
        UnicodeDecodeError
        FIXTURE_MISMATCH → FixtureMismatchError
        FILE_NOT_FOUND → FileNotFoundError, IsADirectoryError
        IO_ERROR → any other OSError
    """
    try:
        yield
    except ConfigError as exc:
        raise DiagframeConfigError(str(exc)) from exc
    except (ReportFormatError, SpanOutOfBoundsError, EmptyReportError) as exc:
        raise DiagframeReportError(str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise DiagframeReportError(f"Input is not valid UTF-8: {exc}") from exc
    except FixtureMismatchError as exc:
        raise DiagframeFixtureMismatchError(str(exc)) from exc
    except (FileNotFoundError, IsADirectoryError) as exc:
        raise DiagframeFileNotFoundError(f"File not found: {exc.filename}") from exc
    except OSError as exc:
        raise DiagframeIOError(f"I/O error: {exc}") from exc


def build_config(
    *,
    no_config: bool,
    config_paths: Sequence[str],
    overrides: Mapping[str, Any] | None = None,
) -> Config:
    """Resolve the effective configuration for a command.

    Args:
        no_config (bool): Skip discovery of project config files.
        config_paths (Sequence[str]): Extra config files from ``--config``.
        overrides (Mapping[str, Any] | None): CLI overrides; None values are ignored.

    Returns:
        Config: The frozen configuration.

    Raises:
        DiagframeConfigError: If a config source is invalid.
    """
    with library_errors():
        draft = MutableConfig.load_merged(
            extra_config_files=[Path(p) for p in config_paths],
            no_config=no_config,
        )
        draft.apply_cli_args(overrides or {})
        config = draft.freeze()
    logger.debug("Effective config: %s", config)
    return config


def read_text_input(path: str) -> str:
    """Read a UTF-8 text input; ``-`` reads standard input."""
    if path == STDIN_SENTINEL:
        return click.get_text_stream("stdin").read()
    logger.debug("Reading %s", path)
    return Path(path).read_text(encoding="utf-8")


def write_output(console: ConsoleLike, text: str, output_path: str | None) -> None:
    """Write a rendered document to ``output_path``, or verbatim to stdout when None."""
    if output_path is None:
        console.write(text)
        return
    with library_errors():
        Path(output_path).write_text(text, encoding="utf-8")
    logger.info("Wrote %s", output_path)

# topmark:header:start
#
#   project      : DiagFrame
#   file         : exit_codes.py
#   file_relpath : src/diagframe/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Standardized exit codes used by the DiagFrame CLI.

Codes above 63 follow the BSD ``sysexits.h`` conventions.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the DiagFrame CLI.

    Attributes:
        SUCCESS (int): The command completed successfully.
        FAILURE (int): Generic failure (e.g. a fixture is not well-formed).
        FIXTURE_MISMATCH (int): Rendered output differs from a stored fixture.
        USAGE_ERROR (int): Invalid command-line usage.
        REPORT_ERROR (int): A report document is malformed or cannot be rendered.
        FILE_NOT_FOUND (int): An input file does not exist.
        IO_ERROR (int): Reading or writing a file failed.
        CONFIG_ERROR (int): Configuration is missing, malformed or invalid.

    Usage:
        ```python
        import subprocess
        from diagframe.cli.exit_codes import ExitCode

        result = subprocess.run(["diagframe", "fixture", "check", "out.svg"])
        if result.returncode == ExitCode.SUCCESS:
            print("Fixture is well-formed.")
        ```
    """

    SUCCESS = 0
    FAILURE = 1
    FIXTURE_MISMATCH = 2
    USAGE_ERROR = 64
    REPORT_ERROR = 65
    FILE_NOT_FOUND = 66
    IO_ERROR = 74
    CONFIG_ERROR = 78

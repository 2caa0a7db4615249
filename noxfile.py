# topmark:header:start
#
#   project      : DiagFrame
#   file         : noxfile.py
#   file_relpath : noxfile.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagFrame project automation via Nox.

Sessions:
  - `lint`: Ruff lint on the sources and tests.
  - `format_check`: Verify formatting with Ruff.
  - `format`: Apply formatting with Ruff.
  - `qa`: Per-Python session that runs pytest and pyright.
  - `property_test`: Hypothesis property tests with more examples (opt-in).

Common invocations:
  - `nox -s lint`
  - `nox -s qa` (runs for all configured Python versions)
  - `nox -s property_test`
"""

from __future__ import annotations

import pathlib
import sys
import warnings
from typing import Any, cast

import nox

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomlkit

CURRENT_PYTHON_VERSION: str = f"{sys.version_info[0]}.{sys.version_info[1]}"

nox.options.sessions = ["lint", "format_check", "qa"]
nox.options.reuse_existing_virtualenvs = True


def _parse_pyproject_toml() -> dict[str, Any]:
    """Parse `pyproject.toml` (at noxfile import time, without project dependencies)."""
    path: pathlib.Path = pathlib.Path(__file__).parent / "pyproject.toml"
    if not path.exists():
        return {}
    data: str = path.read_text(encoding="utf-8")
    if sys.version_info >= (3, 11):
        return tomllib.loads(data)
    return cast("dict[str, Any]", tomlkit.parse(data).unwrap())


def get_supported_pythons() -> list[str]:
    """Resolve supported Python versions from the `pyproject.toml` classifiers.

    Returns:
        list[str]: Supported versions like ["3.10", "3.11", ...], sorted.
    """
    project_any = _parse_pyproject_toml().get("project")
    if not isinstance(project_any, dict):
        warnings.warn(
            "Could not find 'project' table in pyproject.toml. "
            f"Falling back to Python {CURRENT_PYTHON_VERSION}.",
            RuntimeWarning,
            stacklevel=2,
        )
        return [CURRENT_PYTHON_VERSION]

    prefix = "Programming Language :: Python :: "
    versions: set[str] = set()
    for c in cast("dict[str, Any]", project_any).get("classifiers", []):
        v = str(c).removeprefix(prefix).strip() if str(c).startswith(prefix) else ""
        parts = v.split(".")
        if len(parts) == 2 and all(p.isdigit() for p in parts):
            versions.add(f"{int(parts[0])}.{int(parts[1])}")

    def _key(s: str) -> tuple[int, int]:
        major_s, minor_s = s.split(".")
        return int(major_s), int(minor_s)

    return sorted(versions, key=_key) or [CURRENT_PYTHON_VERSION]


PYTHONS: list[str] = get_supported_pythons()
SOURCES: tuple[str, ...] = ("src", "tests", "noxfile.py")


@nox.session
def lint(session: nox.Session) -> None:
    """Run Ruff lint checks."""
    session.install("ruff")
    session.run("ruff", "check", *SOURCES)


@nox.session
def format_check(session: nox.Session) -> None:
    """Verify formatting without modifying files."""
    session.install("ruff")
    session.run("ruff", "format", "--check", *SOURCES)


@nox.session(name="format")
def format_(session: nox.Session) -> None:
    """Apply Ruff formatting."""
    session.install("ruff")
    session.run("ruff", "format", *SOURCES)


@nox.session(python=PYTHONS)
def qa(session: nox.Session) -> None:
    """Run the test-suite and the type checker."""
    session.install("-e", ".[test]", "pyright")
    session.run("pytest", *session.posargs)
    session.run("pyright")


@nox.session
def property_test(session: nox.Session) -> None:
    """Run the property tests with a larger example budget."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "-m",
        "property",
        "--hypothesis-profile=thorough",
        *session.posargs,
    )

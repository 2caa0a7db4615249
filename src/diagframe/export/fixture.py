# topmark:header:start
#
#   project      : DiagFrame
#   file         : fixture.py
#   file_relpath : src/diagframe/export/fixture.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Validation and comparison of SVG fixtures (``*.term.svg``).

A well-formed fixture is an ``<svg>`` document with a ``<style>`` block, a
background ``<rect>``, positive dimensions and a single ``<text>`` element
whose line ``<tspan>``s share one ``x`` and advance by exactly one line height.

[`assert_fixture`][diagframe.export.fixture.assert_fixture] compares rendered
output with a stored fixture. Set ``DIAGFRAME_SNAPSHOTS=overwrite`` to rewrite
fixtures that differ instead of failing.
"""

from __future__ import annotations

import math
import os
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from diagframe.config.logging import get_logger
from diagframe.constants import ENV_SNAPSHOTS, SNAPSHOTS_OVERWRITE
from diagframe.errors import FixtureMismatchError
from diagframe.utils.diff import unified_diff

if TYPE_CHECKING:
    from pathlib import Path

    from diagframe.config.logging import DiagframeLogger

logger: DiagframeLogger = get_logger(__name__)

SVG_NS: str = "http://www.w3.org/2000/svg"

_LENGTH_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(?:px)?\s*$")
_LINE_HEIGHT_RE = re.compile(r"line-height:\s*(\d+(?:\.\d+)?)px")


@dataclass
class FixtureReport:
    """Result of a fixture well-formedness check.

    Attributes:
        problems (list[str]): Human-readable problems; empty when the fixture is well-formed.
        lines (int): Number of line ``<tspan>`` elements found.
        width (float | None): Document width in pixels, when readable.
        height (float | None): Document height in pixels, when readable.
    """

    problems: list[str] = field(default_factory=list)
    lines: int = 0
    width: float | None = None
    height: float | None = None

    @property
    def ok(self) -> bool:
        """Return True if no problem was found."""
        return not self.problems


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _length(value: str | None) -> float | None:
    if value is None:
        return None
    match = _LENGTH_RE.match(value)
    return float(match.group(1)) if match else None


def validate_svg(text: str, line_height: float | None = None) -> FixtureReport:
    """Check that ``text`` is a well-formed fixture document.

    Args:
        text (str): The SVG document.
        line_height (float | None): Expected distance between line baselines;
            read from the document's ``line-height`` rule when None (18px if absent).

    Returns:
        FixtureReport: The problems found (none for a well-formed fixture).
    """
    report = FixtureReport()
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        report.problems.append(f"not well-formed XML: {exc}")
        return report

    if _local(root.tag) != "svg":
        report.problems.append(f"root element is <{_local(root.tag)}>, expected <svg>")
        return report

    report.width = _length(root.get("width"))
    report.height = _length(root.get("height"))
    for name, value in (("width", report.width), ("height", report.height)):
        if value is None or value <= 0:
            report.problems.append(f"{name} must be a positive length, got {root.get(name)!r}")

    styles = [el for el in root.iter() if _local(el.tag) == "style"]
    if not styles:
        report.problems.append("missing <style> block")
    if not any(_local(el.tag) == "rect" for el in root):
        report.problems.append("missing background <rect>")

    if line_height is None:
        style_text = "".join(el.text or "" for el in styles)
        match = _LINE_HEIGHT_RE.search(style_text)
        line_height = float(match.group(1)) if match else 18.0

    texts = [el for el in root.iter() if _local(el.tag) == "text"]
    if len(texts) != 1:
        report.problems.append(f"expected exactly one <text> element, found {len(texts)}")
        return report

    line_spans = [el for el in texts[0] if _local(el.tag) == "tspan"]
    report.lines = len(line_spans)
    xs = {span.get("x") for span in line_spans}
    if len(xs) > 1:
        report.problems.append(f"line tspans do not share one x: {sorted(map(str, xs))}")

    previous: float | None = None
    for i, span in enumerate(line_spans):
        y = _length(span.get("y"))
        if y is None:
            report.problems.append(f"line {i}: missing or invalid y {span.get('y')!r}")
            previous = None
            continue
        if previous is not None and not math.isclose(y - previous, line_height, abs_tol=1e-6):
            report.problems.append(
                f"line {i}: y advances by {y - previous:g}px, expected {line_height:g}px"
            )
        previous = y

    logger.debug("validated SVG: %d line(s), %d problem(s)", report.lines, len(report.problems))
    return report


def snapshots_overwrite() -> bool:
    """Return True if fixtures should be rewritten instead of compared."""
    return os.environ.get(ENV_SNAPSHOTS, "").strip().lower() == SNAPSHOTS_OVERWRITE


def assert_fixture(actual: str, path: Path) -> None:
    """Compare ``actual`` with the fixture stored at ``path``.

    A missing fixture is written and reported as a mismatch so that the caller
    re-runs against the new file. When ``DIAGFRAME_SNAPSHOTS=overwrite`` is set,
    a differing fixture is rewritten and no error is raised.

    Args:
        actual (str): The freshly rendered document.
        path (Path): Location of the stored fixture.

    Raises:
        FixtureMismatchError: If the fixture was missing, or differs from ``actual``
            (the error carries a unified diff).
    """
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(actual, encoding="utf-8")
        logger.info("Wrote new fixture %s", path)
        raise FixtureMismatchError(f"Fixture {path} did not exist and was written; re-run")

    expected = path.read_text(encoding="utf-8").replace("\r\n", "\n")
    if expected == actual.replace("\r\n", "\n"):
        return

    if snapshots_overwrite():
        path.write_text(actual, encoding="utf-8")
        logger.info("Updated fixture %s", path)
        return

    diff = unified_diff(expected, actual, fromfile=str(path))
    raise FixtureMismatchError(
        f"Fixture {path} does not match the rendered output"
        f" (set {ENV_SNAPSHOTS}={SNAPSHOTS_OVERWRITE} to update it)",
        diff=diff,
    )

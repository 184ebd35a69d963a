"""
Fontcover – report.py
=====================

Range compression of coverage results, and the reverse direction used when
a saved report is imported.

Report structure::

    {
      "Basic Latin": {
        "U+0020..U+0040": "FontA.ttf",
        "U+0041..U+007E": "FontB.ttf"
      },
      "Greek and Coptic": {
        "U+0378..U+0379": "Unassigned code point",
        ...
      }
    }

Values are a font identifier, ``"Unassigned code point"`` or
``"Missing font"``. Within a block, ranges are disjoint, ordered by start
code point and cover every code point of the analyzed range exactly once.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from fontcover.errors import MalformedReportImport
from fontcover.models import (
    MAX_CODE_POINT,
    MISSING_MARKER,
    UNASSIGNED_MARKER,
    CoverageResult,
    Report,
    format_range,
    report_value,
)

REPORT_MARKERS = frozenset({UNASSIGNED_MARKER, MISSING_MARKER})

RANGE_LABEL_RE = re.compile(
    r"U\+([0-9A-F]{4,6})(?:\.\.U\+([0-9A-F]{4,6}))?", re.IGNORECASE
)


# ============================================================
# Compression
# ============================================================


def compress_block(items: Iterable[tuple[int, str]]) -> dict[str, str]:
    """Run-length encode ``(code_point, value)`` pairs into range entries.

    A run is extended only while the value is equal *and* the next code
    point is exactly one greater than the run's last one; equal values
    separated by a gap produce separate ranges. Empty input gives an empty
    mapping.
    """
    out: dict[str, str] = {}
    it = iter(items)
    try:
        start, value = next(it)
    except StopIteration:
        return out
    end = start

    for code_point, item_value in it:
        if item_value == value and code_point == end + 1:
            end = code_point
            continue
        out[format_range(start, end)] = value
        start = end = code_point
        value = item_value

    out[format_range(start, end)] = value
    return out


def compress_result(result: CoverageResult) -> dict[str, str]:
    return compress_block(
        (item.code_point, report_value(item.classification)) for item in result.coverage
    )


def generate_report(coverage_results: Iterable[CoverageResult]) -> Report:
    """Compress coverage results into a report keyed by block name.

    Blocks with no classified code points are omitted. If two results share
    a block name, the later one wins; callers should not send duplicates.
    """
    report: Report = {}
    for result in coverage_results:
        block_report = compress_result(result)
        if not block_report:
            continue
        report[result.block_name] = block_report
    return report


# ============================================================
# Expansion
# ============================================================


def parse_range_label(label: str) -> tuple[int, int]:
    """Parse ``"U+0041"`` or ``"U+0041..U+005A"`` into ``(start, end)``.

    Raises:
        MalformedReportImport: the label is not a valid range label.
    """
    m = RANGE_LABEL_RE.fullmatch(label) if isinstance(label, str) else None
    if not m:
        raise MalformedReportImport(f"Invalid range label: {label!r}")

    start = int(m.group(1), 16)
    end = int(m.group(2), 16) if m.group(2) else start
    if start > end or end > MAX_CODE_POINT:
        raise MalformedReportImport(f"Invalid range label: {label!r}")
    return start, end


def expand_block_report(block_report: Mapping[str, str]) -> list[tuple[int, str]]:
    """Expand a block's range entries back into ``(code_point, value)`` pairs.

    Pairs are returned ordered by code point, whatever the mapping order.
    """
    ranges = sorted(
        (parse_range_label(label), value) for label, value in block_report.items()
    )
    return [
        (code_point, value)
        for (start, end), value in ranges
        for code_point in range(start, end + 1)
    ]


# ============================================================
# Import reconstruction
# ============================================================


def _check_block_report(block_name: Any, block_report: Any) -> None:
    if not isinstance(block_name, str):
        raise MalformedReportImport(f"Block name must be a string: {block_name!r}")
    if not isinstance(block_report, dict):
        raise MalformedReportImport(f"Block {block_name!r} is not an object")
    for label, value in block_report.items():
        parse_range_label(label)
        if not isinstance(value, str):
            raise MalformedReportImport(
                f"Block {block_name!r}, range {label}: value must be a string"
            )


def restore_config(report: Any) -> dict[str, list[str]]:
    """Reconstruct the per-block font lists referenced by a report.

    Every font-valued entry of each block is collected once, in first-seen
    order; the unassigned and missing markers are discarded. Fonts that
    were configured but never matched cannot be recovered, and the original
    priority order is only approximated.

    Raises:
        MalformedReportImport: the report is not a mapping of block name to
            a mapping of range label to string.
    """
    if not isinstance(report, dict):
        raise MalformedReportImport("Report root is not a JSON object")

    restored: dict[str, list[str]] = {}
    for block_name, block_report in report.items():
        _check_block_report(block_name, block_report)
        fonts: list[str] = []
        for value in block_report.values():
            if value in REPORT_MARKERS or value in fonts:
                continue
            fonts.append(value)
        restored[block_name] = fonts
    return restored


# ============================================================
# JSON files
# ============================================================


def write_report(report: Report, path: Path) -> None:
    path.write_text(
        json.dumps(report, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def read_json(path: Path) -> Any:
    """Read a JSON document (report or blocks config).

    Raises:
        MalformedReportImport: the file is not valid JSON.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise MalformedReportImport(f"{path}: invalid JSON: {e}") from e

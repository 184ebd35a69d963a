"""
Fontcover – pipeline.py
=======================

Batch report generation from a blocks-config document.

Blocks-config structure (a list, optionally wrapped as ``{"blocksConfig": [...]}``)::

    [
      {"block": "Basic Latin", "startCode": 32, "endCode": 126,
       "fonts": ["NotoSans-Regular.ttf", "CharisSIL-Regular.ttf"]},
      ...
    ]

Failure policy
--------------
- A block entry with a missing name or an invalid range is skipped and
  reported in ``ReportRun.block_errors``; other blocks are still analyzed.
- A font that fails to load only loses its coverage; the failure is
  reported in ``ReportRun.font_errors``.
- A document that is not a list of objects, or whose ``fonts`` values are
  not lists of strings, raises :class:`MalformedReportImport`.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from fontcover.coverage import GlyphSource, analyze_block_coverage
from fontcover.errors import InvalidBlockRange, MalformedReportImport
from fontcover.models import Block, BlockConfig, CoverageResult, Report
from fontcover.report import generate_report


@dataclass
class ReportRun:
    """Outcome of a batch run: the report plus per-block/per-font diagnostics."""

    report: Report
    results: list[CoverageResult] = field(default_factory=list)
    #: block name (``#index`` when unnamed, ``name#index`` when repeated) -> reason
    block_errors: dict[str, str] = field(default_factory=dict)
    #: block name -> font id -> reason
    font_errors: dict[str, dict[str, str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.block_errors and not self.font_errors


def _entry_label(entry: Any, index: int) -> str:
    if isinstance(entry, dict):
        name = entry.get("block", entry.get("name"))
        if isinstance(name, str) and name:
            return name
    return f"#{index}"


def _error_key(errors: dict[str, str], label: str, index: int) -> str:
    """Key for ``errors`` that does not collide with an earlier entry."""
    if label in errors:
        return f"{label}#{index}"
    return label


def _entry_fonts(entry: dict[str, Any], label: str) -> tuple[str, ...]:
    fonts = entry.get("fonts", [])
    if fonts is None:
        return ()
    if not isinstance(fonts, list) or not all(isinstance(f, str) for f in fonts):
        raise MalformedReportImport(f"Block {label!r}: 'fonts' must be a list of strings")
    return tuple(fonts)


def parse_blocks_config(data: Any) -> tuple[list[BlockConfig], dict[str, str]]:
    """Parse a blocks-config document.

    Returns:
        ``(configs, block_errors)``: usable entries in document order, and a
        mapping of rejected entries to the reason.

    Raises:
        MalformedReportImport: the document structure is invalid.
    """
    if isinstance(data, dict) and "blocksConfig" in data:
        data = data["blocksConfig"]
    if not isinstance(data, list):
        raise MalformedReportImport("Blocks config must be a list of block entries")

    configs: list[BlockConfig] = []
    errors: dict[str, str] = {}
    for index, entry in enumerate(data):
        label = _entry_label(entry, index)
        if not isinstance(entry, dict):
            raise MalformedReportImport(f"Blocks config entry {label} is not an object")

        fonts = _entry_fonts(entry, label)
        try:
            block = Block.from_dict(entry).validate()
        except InvalidBlockRange as e:
            errors[_error_key(errors, label, index)] = e.reason
            continue
        configs.append(BlockConfig(block=block, fonts=fonts))
    return configs, errors


def _analyze(
    config: BlockConfig, repository: GlyphSource
) -> CoverageResult | InvalidBlockRange:
    try:
        return analyze_block_coverage(config.block, config.fonts, repository)
    except InvalidBlockRange as e:
        return e


def build_report(
    configs: list[BlockConfig],
    repository: GlyphSource,
    jobs: int = 1,
) -> ReportRun:
    """Analyze every configured block and compress the results.

    Args:
        configs: Blocks with their font priority lists.
        repository: Shared glyph repository.
        jobs: Number of blocks analyzed concurrently. Results keep input
            order regardless.

    Returns:
        A :class:`ReportRun`; blocks that could not be analyzed are absent
        from the report and listed in ``block_errors``.
    """
    if jobs > 1 and len(configs) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            outcomes = list(pool.map(lambda c: _analyze(c, repository), configs))
    else:
        outcomes = [_analyze(c, repository) for c in configs]

    run = ReportRun(report={})
    for index, (config, outcome) in enumerate(zip(configs, outcomes)):
        if isinstance(outcome, InvalidBlockRange):
            key = _error_key(run.block_errors, config.block.name, index)
            run.block_errors[key] = outcome.reason
            continue
        run.results.append(outcome)
        if outcome.font_errors:
            run.font_errors[outcome.block_name] = dict(outcome.font_errors)

    run.report = generate_report(run.results)
    return run

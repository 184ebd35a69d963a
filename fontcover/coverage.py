"""
Fontcover – coverage.py
=======================

Per-block coverage analysis with priority-ordered font fallback.

For every code point of a block, in increasing order:

1. unassigned in Unicode -> :class:`~fontcover.models.Unassigned`
   (fonts are not consulted);
2. otherwise the first font in priority order with a glyph ->
   :class:`~fontcover.models.CoveredBy`;
3. otherwise -> :class:`~fontcover.models.Missing`.

Fonts are loaded once per call, before the scan. A font that fails to load
is dropped for this call and recorded in ``CoverageResult.font_errors``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol

from fontcover.errors import FontLoadError
from fontcover.glyph_repository import FontHandle
from fontcover.models import (
    MISSING,
    UNASSIGNED,
    Block,
    Classification,
    CodePointCoverage,
    CoveredBy,
    CoverageResult,
    CoverageStats,
    Missing,
)
from fontcover.unicode_data import is_assigned


class GlyphSource(Protocol):
    """What the analyzer needs from a glyph repository."""

    def load(self, font_id: str) -> FontHandle: ...

    def has_glyph(self, handle: FontHandle | None, code_point: int) -> bool: ...


def _load_font(
    repository: GlyphSource, font_id: str, errors: dict[str, str]
) -> FontHandle | None:
    """Load one font, recording the failure instead of raising."""
    try:
        return repository.load(font_id)
    except FontLoadError as e:
        errors[font_id] = e.reason
        return None


def load_fonts(
    repository: GlyphSource, font_ids: Iterable[str]
) -> tuple[list[tuple[str, FontHandle]], dict[str, str]]:
    """Load fonts in priority order.

    Returns:
        ``(loaded, errors)`` where ``loaded`` keeps list order and contains
        only fonts that loaded, and ``errors`` maps failed font ids to the
        reason.
    """
    errors: dict[str, str] = {}
    candidates = [(font_id, _load_font(repository, font_id, errors)) for font_id in font_ids]
    loaded = [(font_id, handle) for font_id, handle in candidates if handle is not None]
    return loaded, errors


def classify_code_point(
    code_point: int,
    fonts: list[tuple[str, FontHandle]],
    has_glyph: Callable[[FontHandle, int], bool],
) -> Classification:
    """Classify one code point against already-loaded fonts."""
    if not is_assigned(code_point):
        return UNASSIGNED
    for font_id, handle in fonts:
        if has_glyph(handle, code_point):
            return CoveredBy(font_id)
    return MISSING


def analyze_block_coverage(
    block: Block,
    font_priority_list: Iterable[str],
    repository: GlyphSource,
) -> CoverageResult:
    """Classify every code point of ``block``.

    Args:
        block: Block to scan; ``start_code`` and ``end_code`` are inclusive.
        font_priority_list: Font identifiers, highest priority first. May be
            empty.
        repository: Source of parsed fonts.

    Returns:
        The ordered per-code-point classification plus aggregate counts.

    Raises:
        InvalidBlockRange: ``block.start_code > block.end_code`` or a bound
            outside ``U+0000..U+10FFFF``.
    """
    block.validate()

    fonts, font_errors = load_fonts(repository, font_priority_list)

    stats = CoverageStats(total=block.size)
    coverage: list[CodePointCoverage] = []

    for code_point in range(block.start_code, block.end_code + 1):
        classification = classify_code_point(code_point, fonts, repository.has_glyph)
        if isinstance(classification, CoveredBy):
            stats.available += 1
        elif isinstance(classification, Missing):
            stats.missing += 1
        coverage.append(CodePointCoverage(code_point, classification))

    return CoverageResult(
        block_name=block.name,
        coverage=coverage,
        stats=stats,
        font_errors=font_errors,
    )

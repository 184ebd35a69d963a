"""Fontcover – Unicode block coverage of prioritized font fallback lists."""

from fontcover.coverage import analyze_block_coverage
from fontcover.errors import (
    FontcoverError,
    FontLoadError,
    InvalidBlockRange,
    MalformedReportImport,
)
from fontcover.glyph_repository import FontHandle, GlyphRepository, has_glyph
from fontcover.models import (
    MISSING_MARKER,
    UNASSIGNED_MARKER,
    Block,
    BlockConfig,
    CoveredBy,
    CoverageResult,
    Missing,
    Unassigned,
)
from fontcover.report import generate_report, restore_config
from fontcover.unicode_data import is_assigned

__version__ = "0.1.0"

__all__ = [
    "MISSING_MARKER",
    "UNASSIGNED_MARKER",
    "Block",
    "BlockConfig",
    "CoverageResult",
    "CoveredBy",
    "FontHandle",
    "FontLoadError",
    "FontcoverError",
    "GlyphRepository",
    "InvalidBlockRange",
    "MalformedReportImport",
    "Missing",
    "Unassigned",
    "analyze_block_coverage",
    "generate_report",
    "has_glyph",
    "is_assigned",
    "restore_config",
]

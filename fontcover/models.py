"""
Fontcover – models.py
=====================

Plain data types shared by the coverage pipeline.

Wire format
-----------
Blocks travel as JSON objects using the historical key names::

    {"block": "Basic Latin", "startCode": 32, "endCode": 126}

Coverage results serialize (see :meth:`CoverageResult.to_dict`) as::

    {
      "blockName": "Basic Latin",
      "coverage": [{"codePoint": 32, "status": "Available", "fontUsed": "A.ttf"}, ...],
      "stats": {"total": 95, "available": 95, "missing": 0},
      "fontErrors": {}
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from fontcover.errors import InvalidBlockRange

MAX_CODE_POINT = 0x10FFFF

#: Report value for code points that are not assigned in Unicode.
UNASSIGNED_MARKER = "Unassigned code point"
#: Report value for assigned code points no candidate font renders.
MISSING_MARKER = "Missing font"

STATUS_AVAILABLE = "Available"
STATUS_MISSING = MISSING_MARKER
STATUS_UNASSIGNED = UNASSIGNED_MARKER


# ============================================================
# Range labels
# ============================================================


def format_code_point(code_point: int) -> str:
    """Render ``code_point`` as ``U+XXXX`` (uppercase, at least 4 digits)."""
    return f"U+{code_point:04X}"


def format_range(start: int, end: int) -> str:
    """Render an inclusive range label.

    Examples::

        format_range(0x41, 0x41) == "U+0041"
        format_range(0x41, 0x5A) == "U+0041..U+005A"
    """
    if start == end:
        return format_code_point(start)
    return f"{format_code_point(start)}..{format_code_point(end)}"


# ============================================================
# Blocks
# ============================================================


@dataclass(frozen=True)
class Block:
    """A named, inclusive Unicode code point range."""

    name: str
    start_code: int
    end_code: int

    @property
    def size(self) -> int:
        return self.end_code - self.start_code + 1

    @property
    def range_label(self) -> str:
        return format_range(self.start_code, self.end_code)

    def validate(self) -> Block:
        """Return ``self`` or raise :class:`InvalidBlockRange`.

        Bounds must be ordered and lie within ``U+0000..U+10FFFF``.
        """
        if self.start_code > self.end_code:
            raise InvalidBlockRange(self.name, self.start_code, self.end_code)
        if self.start_code < 0 or self.end_code > MAX_CODE_POINT:
            raise InvalidBlockRange(
                self.name,
                self.start_code,
                self.end_code,
                "code points must be within U+0000..U+10FFFF",
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "block": self.name,
            "range": self.range_label,
            "startCode": self.start_code,
            "endCode": self.end_code,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Block:
        """Build a block from its JSON shape.

        Both ``"block"`` (historical) and ``"name"`` are accepted for the
        block name. Bounds must be integers; anything else raises
        :class:`InvalidBlockRange`.
        """
        if not isinstance(data, dict):
            raise InvalidBlockRange(None, None, None, "block entry is not an object")

        name = data.get("block", data.get("name"))
        if not isinstance(name, str) or not name:
            raise InvalidBlockRange(None, None, None, "block name missing")

        start = data.get("startCode")
        end = data.get("endCode")
        for bound in (start, end):
            # bool is an int subclass; reject it explicitly
            if not isinstance(bound, int) or isinstance(bound, bool):
                raise InvalidBlockRange(
                    name, start, end, "startCode/endCode must be integers"
                )

        return cls(name=name, start_code=start, end_code=end)


@dataclass(frozen=True)
class BlockConfig:
    """One block plus the ordered font priority list chosen for it."""

    block: Block
    fonts: tuple[str, ...] = ()


# ============================================================
# Classification
# ============================================================


@dataclass(frozen=True)
class Unassigned:
    """The code point is not assigned in Unicode."""


@dataclass(frozen=True)
class CoveredBy:
    """The code point is rendered by ``font`` (first match in priority order)."""

    font: str


@dataclass(frozen=True)
class Missing:
    """The code point is assigned but no candidate font has a glyph."""


Classification: TypeAlias = Unassigned | CoveredBy | Missing

UNASSIGNED = Unassigned()
MISSING = Missing()


def report_value(classification: Classification) -> str:
    """Map a classification to the value stored in a compressed report."""
    if isinstance(classification, CoveredBy):
        return classification.font
    if isinstance(classification, Unassigned):
        return UNASSIGNED_MARKER
    if isinstance(classification, Missing):
        return MISSING_MARKER
    raise TypeError(f"Not a classification: {classification!r}")


# ============================================================
# Coverage results
# ============================================================


@dataclass(frozen=True)
class CodePointCoverage:
    code_point: int
    classification: Classification

    def to_dict(self) -> dict[str, Any]:
        c = self.classification
        if isinstance(c, CoveredBy):
            return {
                "codePoint": self.code_point,
                "status": STATUS_AVAILABLE,
                "fontUsed": c.font,
            }
        status = STATUS_UNASSIGNED if isinstance(c, Unassigned) else STATUS_MISSING
        return {"codePoint": self.code_point, "status": status, "fontUsed": None}


@dataclass
class CoverageStats:
    total: int = 0
    available: int = 0
    missing: int = 0

    @property
    def unassigned(self) -> int:
        return self.total - self.available - self.missing

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "available": self.available,
            "missing": self.missing,
        }


@dataclass
class CoverageResult:
    """Per-block output of the analyzer, before compression."""

    block_name: str
    coverage: list[CodePointCoverage] = field(default_factory=list)
    stats: CoverageStats = field(default_factory=CoverageStats)
    #: font id -> load error message for fonts dropped during this analysis
    font_errors: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "blockName": self.block_name,
            "coverage": [item.to_dict() for item in self.coverage],
            "stats": self.stats.to_dict(),
            "fontErrors": dict(self.font_errors),
        }


#: Block name -> range label -> report value.
Report: TypeAlias = dict[str, dict[str, str]]

"""
Fontcover – errors.py
=====================

Exception types raised by the coverage pipeline.

Failure scopes
--------------
- :class:`FontLoadError`: a single font cannot be located or parsed. The
  analyzer degrades that font to "contributes no coverage" and continues.
- :class:`InvalidBlockRange`: a single block descriptor is unusable. Batch
  operations skip the block and report it.
- :class:`MalformedReportImport`: structured input (report or blocks config)
  has no safe interpretation. The whole operation fails.
"""

from __future__ import annotations


class FontcoverError(Exception):
    """Base class for all fontcover errors."""


class FontLoadError(FontcoverError):
    """A font resource could not be resolved or parsed."""

    def __init__(self, font_id: str, reason: str) -> None:
        self.font_id = font_id
        self.reason = reason
        super().__init__(f"Cannot load font {font_id!r}: {reason}")


class InvalidBlockRange(FontcoverError):
    """A block descriptor has an unusable code point range."""

    def __init__(
        self,
        block_name: str | None,
        start: object,
        end: object,
        reason: str | None = None,
    ) -> None:
        self.block_name = block_name
        self.start = start
        self.end = end
        if reason is None:
            reason = f"startCode {start!r} is greater than endCode {end!r}"
        self.reason = reason
        super().__init__(f"Invalid block {block_name!r}: {reason}")


class MalformedReportImport(FontcoverError):
    """Structured input (report or blocks config) is invalid."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)

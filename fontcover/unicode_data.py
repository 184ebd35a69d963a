"""
Fontcover – unicode_data.py
===========================

Unicode assignment oracle.

A code point is *assigned* when the Unicode Character Database gives it a
general category other than ``Cn``. Category data comes from
``fontTools.unicodedata``, which prefers the ``unicodedata2`` backport (the
latest UCD release) and falls back to the interpreter's ``unicodedata``.

All functions here are pure reads of static data and are safe to call from
multiple threads.
"""

from __future__ import annotations

from fontTools import unicodedata  # type: ignore[import]

from fontcover.models import MAX_CODE_POINT


def is_assigned(code_point: object) -> bool:
    """Return ``True`` if ``code_point`` is assigned in Unicode.

    Never raises: non-integers, negative values and values above
    ``U+10FFFF`` are reported as unassigned.
    """
    if not isinstance(code_point, int) or isinstance(code_point, bool):
        return False
    if code_point < 0 or code_point > MAX_CODE_POINT:
        return False
    return unicodedata.category(chr(code_point)) != "Cn"


def unicode_version() -> str:
    """Return the UCD version backing :func:`is_assigned`."""
    return str(unicodedata.unidata_version)

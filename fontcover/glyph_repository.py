"""
Fontcover – glyph_repository.py
===============================

Parsed-font cache answering "does this font have a glyph for this code point?".

Design
------
- Fonts are parsed with ``fontTools.ttLib.TTFont`` the first time their
  identifier is requested; the resulting :class:`FontHandle` keeps only the
  best Unicode cmap and is immutable afterwards.
- The cache is keyed by the exact identifier string, lives as long as the
  repository object and is never evicted.
- Concurrent ``load`` calls for the same uncached identifier are
  single-flight: one caller parses, the others wait and receive the same
  handle. Failed loads are not cached.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from fontTools.ttLib import TTFont  # type: ignore[import]

from fontcover.errors import FontLoadError
from fontcover.font_store import FontStore, is_font_collection

NAME_ID_FAMILY = 1


@dataclass(frozen=True)
class FontHandle:
    """Queryable, read-only view of one parsed font face."""

    font_id: str
    path: Path
    #: code point -> glyph name, from the font's best Unicode cmap
    cmap: Mapping[int, str]
    #: name of glyph id 0 (``.notdef`` in practice)
    notdef: str
    family: str | None = None


def has_glyph(handle: FontHandle | None, code_point: int) -> bool:
    """Return ``True`` if the font maps ``code_point`` to a real glyph.

    Lookup is by integer code point, so supplementary-plane characters are
    handled like any other. A mapping to glyph id 0 counts as missing.
    """
    if handle is None:
        return False
    glyph = handle.cmap.get(code_point)
    return glyph is not None and glyph != handle.notdef


def _family_name(tt: TTFont) -> str | None:
    """Return the first non-empty family name (nameID 1), best-effort."""
    if "name" not in tt:
        return None
    for rec in tt["name"].names:  # type: ignore[attr-defined]
        if rec.nameID != NAME_ID_FAMILY:
            continue
        try:
            s = rec.toUnicode()
        except UnicodeDecodeError:
            continue
        if s and s.strip():
            return s.strip()
    return None


def open_font_handle(font_id: str, path: Path, face_index: int | None) -> FontHandle:
    """Parse one font face from disk into a :class:`FontHandle`.

    Raises:
        FontLoadError: the file is not a font fontTools can read, the face
            index does not exist, or the font has no Unicode cmap.
    """
    collection = is_font_collection(path)
    if face_index is not None and not collection:
        raise FontLoadError(font_id, "face index given for a font that is not a collection")
    font_number = (face_index or 0) if collection else -1

    try:
        tt = TTFont(  # type: ignore[misc]
            path,
            fontNumber=font_number,
            lazy=True,
            recalcBBoxes=False,
            recalcTimestamp=False,
        )
    except Exception as e:
        raise FontLoadError(font_id, f"cannot open font: {e}") from e

    try:
        cmap = tt.getBestCmap()
        if cmap is None:
            raise FontLoadError(font_id, "font has no Unicode cmap")
        notdef = tt.getGlyphOrder()[0]
        family = _family_name(tt)
    except FontLoadError:
        raise
    except Exception as e:
        raise FontLoadError(font_id, f"cannot read cmap: {e}") from e
    finally:
        tt.close()

    return FontHandle(
        font_id=font_id,
        path=path,
        cmap=MappingProxyType(dict(cmap)),
        notdef=notdef,
        family=family,
    )


class GlyphRepository:
    """Process-lifetime cache of parsed fonts, keyed by font identifier."""

    def __init__(self, store: FontStore | None = None) -> None:
        self.store = store if store is not None else FontStore()
        self._fonts: dict[str, FontHandle] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def load(self, font_id: str) -> FontHandle:
        """Return the cached handle for ``font_id``, parsing it on first use.

        Raises:
            FontLoadError: the font cannot be resolved or parsed.
        """
        if not isinstance(font_id, str):
            raise FontLoadError(repr(font_id), "font identifier must be a string")

        handle = self._fonts.get(font_id)
        if handle is not None:
            return handle

        with self._registry_lock:
            key_lock = self._key_locks.setdefault(font_id, threading.Lock())

        with key_lock:
            # another caller may have finished the parse while we waited
            handle = self._fonts.get(font_id)
            if handle is None:
                try:
                    parsed = self._parse(font_id)
                except FontLoadError:
                    with self._registry_lock:
                        if self._key_locks.get(font_id) is key_lock:
                            del self._key_locks[font_id]
                    raise
                with self._registry_lock:
                    handle = self._fonts.setdefault(font_id, parsed)
        return handle

    def has_glyph(self, handle: FontHandle | None, code_point: int) -> bool:
        return has_glyph(handle, code_point)

    def cached_fonts(self) -> list[str]:
        return sorted(self._fonts)

    def clear(self) -> None:
        """Drop every cached handle. Loads already in progress still complete."""
        with self._registry_lock:
            self._fonts.clear()

    def _parse(self, font_id: str) -> FontHandle:
        path, face_index = self.store.resolve(font_id)
        return open_font_handle(font_id, path, face_index)

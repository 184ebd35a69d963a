"""
Fontcover – font_store.py
=========================

Font binary store: a flat directory of font files addressed by file name.

A *font identifier* is the file name relative to the store directory, e.g.
``"NotoSans-Regular.ttf"``. Collections (``.ttc``/``.otc``) may address a
face other than the first with a ``#N`` suffix: ``"NotoSansCJK.ttc#2"``.

The store directory defaults to ``$FONTCOVER_FONTS_DIR`` or ``./Fonts``.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from fontcover.errors import FontLoadError

FONTS_DIR_ENV = "FONTCOVER_FONTS_DIR"
DEFAULT_FONTS_DIR = "Fonts"

FONT_EXTENSIONS = {".ttf", ".otf", ".ttc", ".otc", ".woff", ".woff2"}


def default_fonts_dir() -> Path:
    return Path(os.environ.get(FONTS_DIR_ENV) or DEFAULT_FONTS_DIR)


def is_font_collection(path: Path) -> bool:
    """Return ``True`` if ``path`` starts with the ``ttcf`` collection tag.

    Both ``.ttc`` and ``.otc`` collections carry it. Unreadable files are
    not collections; opening them fails later with a load error.
    """
    try:
        with path.open("rb") as f:
            return f.read(4) == b"ttcf"
    except OSError:
        return False


def split_font_id(font_id: str) -> tuple[str, int | None]:
    """Split ``"name.ttc#2"`` into ``("name.ttc", 2)``.

    Identifiers without a numeric ``#N`` suffix are returned unchanged with
    a ``None`` face index.
    """
    name, sep, index = font_id.rpartition("#")
    if sep and name and index.isdigit():
        return name, int(index)
    return font_id, None


class FontStore:
    """Resolve font identifiers to files inside one directory."""

    def __init__(self, fonts_dir: Path | str | None = None) -> None:
        self.fonts_dir = Path(fonts_dir) if fonts_dir is not None else default_fonts_dir()

    def list_fonts(self) -> list[str]:
        """Return the sorted identifiers of all font files in the store.

        A missing directory is an empty store.
        """
        if not self.fonts_dir.is_dir():
            return []
        return sorted(
            p.name
            for p in self.fonts_dir.iterdir()
            if p.is_file() and p.suffix.lower() in FONT_EXTENSIONS
        )

    def resolve(self, font_id: str) -> tuple[Path, int | None]:
        """Return ``(path, face_index)`` for ``font_id``.

        Raises:
            FontLoadError: the identifier is empty, points outside the store,
                or names a file that does not exist.
        """
        file_name, face_index = split_font_id(font_id)
        if not file_name or Path(file_name).name != file_name:
            raise FontLoadError(font_id, "font identifier must be a plain file name")

        path = self.fonts_dir / file_name
        if not path.is_file():
            raise FontLoadError(font_id, f"file not found: {path}")
        return path, face_index

    def add_font(self, src: Path | str) -> str:
        """Copy a font file into the store and return its identifier.

        An existing file with the same name is replaced.
        """
        src = Path(src)
        if src.suffix.lower() not in FONT_EXTENSIONS:
            raise ValueError(f"Unsupported font file extension: {src.suffix or src.name}")
        if not src.is_file():
            raise FileNotFoundError(src)

        self.fonts_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, self.fonts_dir / src.name)
        return src.name

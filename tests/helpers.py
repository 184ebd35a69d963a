from dataclasses import dataclass
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fontcover.errors import FontLoadError
from fontcover.font_store import FontStore

BASIC_LATIN_PRINTABLE = range(0x0020, 0x007F)


def _glyph_name(cp: int) -> str:
    return f"uni{cp:04X}" if cp <= 0xFFFF else f"u{cp:05X}"


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((550, 700))
    pen.lineTo((550, 0))
    pen.closePath()
    return pen.glyph()


def build_test_font(
    path: Path,
    codepoints,
    *,
    family: str = "Test Family",
    notdef_codepoints=(),
) -> Path:
    """
    Build a minimal TrueType font with one box glyph per code point.

    ``notdef_codepoints`` are mapped in the cmap to glyph id 0 (.notdef).
    """
    names = {cp: _glyph_name(cp) for cp in codepoints}
    order = [".notdef", *names.values()]
    cmap = dict(names)
    for cp in notdef_codepoints:
        cmap[cp] = ".notdef"

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf({name: _box_glyph() for name in order})
    fb.setupHorizontalMetrics({name: (600, 50) for name in order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


def make_store(tmp_path: Path, fonts: dict) -> FontStore:
    """
    Factory helper: build a font store directory under ``tmp_path``.

    ``fonts`` maps file name -> iterable of covered code points.
    """
    fonts_dir = tmp_path / "Fonts"
    fonts_dir.mkdir(exist_ok=True)
    for file_name, codepoints in fonts.items():
        build_test_font(fonts_dir / file_name, codepoints, family=Path(file_name).stem)
    return FontStore(fonts_dir)


@dataclass(frozen=True)
class FakeHandle:
    font_id: str
    codepoints: frozenset


class FakeRepository:
    """
    In-memory glyph source for analyzer tests.

    Fonts absent from ``glyphs`` (or listed in ``broken``) fail to load.
    """

    def __init__(self, glyphs: dict, broken=()):
        self.glyphs = {k: frozenset(v) for k, v in glyphs.items()}
        self.broken = set(broken)
        self.load_calls: list[str] = []
        self.glyph_calls: list[tuple[str, int]] = []

    def load(self, font_id):
        self.load_calls.append(font_id)
        if font_id in self.broken or font_id not in self.glyphs:
            raise FontLoadError(font_id, "not available")
        return FakeHandle(font_id, self.glyphs[font_id])

    def has_glyph(self, handle, code_point):
        if handle is None:
            return False
        self.glyph_calls.append((handle.font_id, code_point))
        return code_point in handle.codepoints


def write_blocks_csv(path: Path, rows) -> Path:
    """Write a Unicode-Blocks.csv in the exported (dot-padded) layout."""
    lines = [".S..No.,Block,Range"]
    for idx, (name, start, end) in enumerate(rows, start=1):
        lines.append(f".{idx}.,{name},.U+{start:04X}....U+{end:04X}.")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path

"""
Fontcover – catalog.py
======================

Sources of Unicode block descriptors.

Two catalogs are available:

- :func:`parse_unicode_blocks` reads the ``Unicode-Blocks.csv`` layout
  (columns ``S.No.``, ``Block``, ``Range``), whose exported range cells
  are padded with dots, e.g. ``.U+0020....U+007E.``;
- :func:`builtin_blocks` uses the ``Blocks.txt`` data bundled with
  fontTools, covering every named block of the current Unicode release.

Both return blocks in catalog order. Cross-block disjointness is not
checked.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable
from pathlib import Path

from fontTools.unicodedata import Blocks  # type: ignore[import]

from fontcover.models import MAX_CODE_POINT, Block

NO_BLOCK = "No_Block"

_DOT_RUN_RE = re.compile(r"\.{2,}")
_CODE_RE = re.compile(r"^(?:U\+)?([0-9A-Fa-f]{1,6})$")


def parse_range_cell(cell: str) -> tuple[int, int] | None:
    """Parse a range cell such as ``.U+0020....U+007E.``.

    Returns:
        ``(start, end)`` or ``None`` if the cell is not a two-ended range.
    """
    raw = cell.strip().strip(".")
    raw = _DOT_RUN_RE.sub("..", raw)
    parts = raw.split("..")
    if len(parts) != 2:
        return None

    bounds: list[int] = []
    for part in parts:
        m = _CODE_RE.match(part.strip())
        if not m:
            return None
        bounds.append(int(m.group(1), 16))
    return bounds[0], bounds[1]


def _column(fieldnames: Iterable[str], wanted: str) -> str | None:
    for name in fieldnames:
        if name.strip() == wanted:
            return name
    return None


def parse_unicode_blocks(path: Path) -> list[Block]:
    """Read block descriptors from a ``Unicode-Blocks.csv`` file.

    Rows without a block name or with an unparseable range are skipped.
    Header cells are matched after stripping whitespace.
    """
    blocks: list[Block] = []
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or []
        block_col = _column(fieldnames, "Block")
        range_col = _column(fieldnames, "Range")
        if block_col is None or range_col is None:
            raise ValueError(f"{path}: expected 'Block' and 'Range' columns")

        for row in reader:
            name = (row.get(block_col) or "").strip()
            bounds = parse_range_cell(row.get(range_col) or "")
            if not name or bounds is None:
                continue
            blocks.append(Block(name=name, start_code=bounds[0], end_code=bounds[1]))
    return blocks


def builtin_blocks() -> list[Block]:
    """Return all named Unicode blocks from the bundled UCD ``Blocks.txt``."""
    starts = list(Blocks.RANGES)
    ends = [s - 1 for s in starts[1:]] + [MAX_CODE_POINT]
    return [
        Block(name=name, start_code=start, end_code=end)
        for start, end, name in zip(starts, ends, Blocks.VALUES)
        if name != NO_BLOCK
    ]


def find_block(blocks: Iterable[Block], name: str) -> Block | None:
    """Find a block by exact name, falling back to a case-insensitive match."""
    blocks = list(blocks)
    for block in blocks:
        if block.name == name:
            return block
    folded = name.casefold()
    for block in blocks:
        if block.name.casefold() == folded:
            return block
    return None


def load_catalog(csv_path: Path | None = None) -> list[Block]:
    """Return the CSV catalog when a path is given, else the built-in one."""
    if csv_path is not None:
        return parse_unicode_blocks(csv_path)
    return builtin_blocks()

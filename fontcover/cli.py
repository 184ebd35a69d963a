#!/usr/bin/env python3
"""
Fontcover – cli.py
==================

Command-line front end.

Subcommands
-----------
- ``blocks``: list the block catalog (built-in or from a CSV file).
- ``fonts``: list the fonts available in the font store.
- ``add-font``: copy a font file into the font store.
- ``analyze``: per-code-point coverage of one block.
- ``report``: compressed coverage report for many blocks.
- ``import-config``: rebuild per-block font lists from a saved report.

Status lines go to stdout; warnings (⚠️) and errors (❌) go to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from fontcover.catalog import find_block, load_catalog
from fontcover.coverage import analyze_block_coverage
from fontcover.errors import FontcoverError, MalformedReportImport
from fontcover.font_store import FontStore
from fontcover.glyph_repository import GlyphRepository
from fontcover.models import Block, BlockConfig
from fontcover.pipeline import ReportRun, build_report, parse_blocks_config
from fontcover.report import read_json, restore_config, write_report
from fontcover.unicode_data import unicode_version


def _warn(message: str) -> None:
    print(f"⚠️  Warning: {message}", file=sys.stderr)


def _fail(message: str) -> int:
    print(f"❌ Error: {message}", file=sys.stderr)
    return 1


def _write_json(data: Any, output: Path | None) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        print(text)
    else:
        output.write_text(text, encoding="utf-8")


def _print_run_warnings(run: ReportRun) -> None:
    for block_name, reason in run.block_errors.items():
        _warn(f"block {block_name!r} skipped: {reason}")
    for block_name, errors in run.font_errors.items():
        for font_id, reason in errors.items():
            _warn(f"block {block_name!r}: font {font_id!r} ignored: {reason}")


# ============================================================
# Subcommands
# ============================================================


def _load_catalog(args: argparse.Namespace) -> list[Block] | None:
    try:
        return load_catalog(args.csv)
    except (ValueError, OSError) as e:
        _fail(f"cannot read block catalog: {e}")
        return None


def cmd_blocks(args: argparse.Namespace) -> int:
    blocks = _load_catalog(args)
    if blocks is None:
        return 1
    if args.json:
        _write_json([b.to_dict() for b in blocks], None)
        return 0
    for block in blocks:
        print(f"{block.range_label}\t{block.name}")
    if args.verbose:
        print(f"{len(blocks)} blocks (Unicode {unicode_version()})")
    return 0


def cmd_fonts(args: argparse.Namespace) -> int:
    for font_id in FontStore(args.fonts_dir).list_fonts():
        print(font_id)
    return 0


def cmd_add_font(args: argparse.Namespace) -> int:
    store = FontStore(args.fonts_dir)
    try:
        font_id = store.add_font(args.font)
    except (ValueError, OSError) as e:
        return _fail(str(e))
    print(f"OK: added {font_id} to {store.fonts_dir}")
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    blocks = _load_catalog(args)
    if blocks is None:
        return 1
    block = find_block(blocks, args.block)
    if block is None:
        return _fail(f"unknown block: {args.block}")

    repository = GlyphRepository(FontStore(args.fonts_dir))
    try:
        result = analyze_block_coverage(block, args.fonts, repository)
    except FontcoverError as e:
        return _fail(str(e))

    for font_id, reason in result.font_errors.items():
        _warn(f"font {font_id!r} ignored: {reason}")

    if args.output is not None:
        _write_json(result.to_dict(), args.output)
        print(f"OK: wrote coverage to {args.output}")

    stats = result.stats
    print(
        f"{block.name} ({block.range_label}): "
        f"total={stats.total} available={stats.available} "
        f"missing={stats.missing} unassigned={stats.unassigned}"
    )
    return 0


def _configs_for_all_blocks(args: argparse.Namespace) -> list[BlockConfig] | None:
    blocks = _load_catalog(args)
    if blocks is None:
        return None
    fonts = tuple(args.font or ())
    return [BlockConfig(block=b, fonts=fonts) for b in blocks]


def cmd_report(args: argparse.Namespace) -> int:
    block_errors: dict[str, str] = {}
    if args.all_blocks:
        all_configs = _configs_for_all_blocks(args)
        if all_configs is None:
            return 1
        configs = all_configs
    else:
        if args.config is None:
            return _fail("a blocks config file or --all-blocks is required")
        if not args.config.exists():
            return _fail(f"input file not found: {args.config}")
        try:
            configs, block_errors = parse_blocks_config(read_json(args.config))
        except MalformedReportImport as e:
            return _fail(str(e))

    if args.verbose:
        print(f"Analyzing {len(configs)} blocks with {args.jobs} job(s)")

    repository = GlyphRepository(FontStore(args.fonts_dir))
    run = build_report(configs, repository, jobs=args.jobs)
    run.block_errors = {**block_errors, **run.block_errors}

    if args.verbose:
        for result in run.results:
            s = result.stats
            print(
                f"  {result.block_name}: {s.available}/{s.total} available, "
                f"{s.missing} missing"
            )

    _print_run_warnings(run)
    write_report(run.report, args.output)
    print(f"OK: wrote report for {len(run.report)} blocks to {args.output}")
    return 0


def cmd_import_config(args: argparse.Namespace) -> int:
    if not args.report.exists():
        return _fail(f"input file not found: {args.report}")
    try:
        restored = restore_config(read_json(args.report))
    except MalformedReportImport as e:
        return _fail(f"cannot import report: {e}")
    _write_json(restored, args.output)
    if args.output is not None:
        print(f"OK: wrote font configuration for {len(restored)} blocks to {args.output}")
    return 0


# ============================================================
# CLI
# ============================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fontcover",
        description="Analyze Unicode block coverage of prioritized font fallback lists.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(
        p: argparse.ArgumentParser, catalog: bool = False, fonts: bool = False
    ) -> None:
        if catalog:
            p.add_argument(
                "--csv",
                type=Path,
                default=None,
                help="Unicode-Blocks.csv catalog (default: built-in Unicode blocks)",
            )
        if fonts:
            p.add_argument(
                "--fonts-dir",
                type=Path,
                default=None,
                help="Font store directory (default: $FONTCOVER_FONTS_DIR or ./Fonts)",
            )
        p.add_argument("--verbose", action="store_true", help="Print progress details")

    p = sub.add_parser(
        "blocks",
        help="List Unicode blocks",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_common(p, catalog=True)
    p.add_argument("--json", action="store_true", help="Print blocks as JSON")
    p.set_defaults(func=cmd_blocks)

    p = sub.add_parser(
        "fonts",
        help="List fonts in the font store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_common(p, fonts=True)
    p.set_defaults(func=cmd_fonts)

    p = sub.add_parser(
        "add-font",
        help="Copy a font file into the font store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_common(p, fonts=True)
    p.add_argument("font", type=Path, help="Font file (ttf/otf/ttc/otc/woff/woff2)")
    p.set_defaults(func=cmd_add_font)

    p = sub.add_parser(
        "analyze",
        help="Analyze one block against a font priority list",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_common(p, catalog=True, fonts=True)
    p.add_argument("block", help="Block name, e.g. 'Basic Latin'")
    p.add_argument("fonts", nargs="*", help="Font identifiers, highest priority first")
    p.add_argument(
        "-o", "--output", type=Path, default=None, help="Write per-code-point JSON here"
    )
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser(
        "report",
        help="Generate a compressed coverage report",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_common(p, catalog=True, fonts=True)
    p.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=None,
        help="Blocks config JSON: [{block, startCode, endCode, fonts}, ...]",
    )
    p.add_argument(
        "--all-blocks",
        action="store_true",
        help="Analyze every catalog block with the --font list instead of a config",
    )
    p.add_argument(
        "--font",
        action="append",
        default=None,
        help="Font identifier for --all-blocks (repeat, highest priority first)",
    )
    p.add_argument("-j", "--jobs", type=int, default=1, help="Blocks analyzed in parallel")
    p.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("coverage_report.json"),
        help="Output report JSON file",
    )
    p.set_defaults(func=cmd_report)

    p = sub.add_parser(
        "import-config",
        help="Rebuild per-block font lists from a saved report",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_common(p)
    p.add_argument("report", type=Path, help="Report JSON produced by 'report'")
    p.add_argument(
        "-o", "--output", type=Path, default=None, help="Write the font lists here"
    )
    p.set_defaults(func=cmd_import_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
tilelevel CLI - Inspect and convert level files.

ROOT is an assets directory or a .zip archive containing levels/.

Usage:
    tilelevel info ROOT 1 1
    tilelevel validate ROOT
    tilelevel dump ROOT 1 1 --output level.json
    tilelevel convert ROOT 1 1 --to area --output world1_stage1.area.json
"""

import argparse
import json
import sys
from pathlib import Path

from tilelevel.area import to_area_document
from tilelevel.assets import open_asset_root
from tilelevel.errors import LevelLoadError
from tilelevel.loader import LevelLoader, discover_levels
from tilelevel.tiled import to_tiled_document


def _loader(args) -> LevelLoader:
    return LevelLoader(open_asset_root(args.root), levels_dir=args.levels_dir)


def _write_or_print(text: str, output) -> None:
    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_text(text + "\n", encoding="utf-8")
        print(f"Wrote: {output}")
    else:
        print(text)


def cmd_info(args):
    """Show a summary of one level."""
    loader = _loader(args)

    try:
        fmt, path = loader.select(args.world, args.stage)
        level = loader.load(args.world, args.stage)
    except LevelLoadError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    print(f"Level: world {level.world} stage {level.stage}")
    print(f"Source: {path} ({fmt.value})")
    print(f"Size: {level.width}x{level.height} tiles, {level.tile_width}x{level.tile_height} px per tile")
    print(f"Pixels: {level.pixel_width}x{level.pixel_height}")
    print(f"Tileset: {level.tileset_path or '(none)'}")
    print(f"Layout: {level.layout.value}")

    solid = level.solid_gids()
    print(f"Collision mask: {level.collision_flags.size} GIDs, solid: {solid or 'none'}")

    print(f"\nEntities: {len(level.entities)}")
    for entity in level.entities:
        extras = ", ".join(f"{k}={v}" for k, v in sorted(entity.extras.items()))
        suffix = f" [{extras}]" if extras else ""
        print(f"  - {entity.type} at ({entity.x}, {entity.y}){suffix}")

    return 0


def cmd_validate(args):
    """Load every level under ROOT and report failures."""
    reader = open_asset_root(args.root)
    loader = LevelLoader(reader, levels_dir=args.levels_dir)

    try:
        paths = reader.list_assets(args.levels_dir)
    except LevelLoadError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    found = discover_levels(paths)
    if not found:
        print(f"No level files found under {args.root}/{args.levels_dir}")
        return 1

    failures = 0
    for world, stage in found:
        result = loader.try_load(world, stage)
        if result.ok:
            level = result.level
            print(f"✓ world{world}_stage{stage}: {level.width}x{level.height}, {len(level.entities)} entities")
        else:
            failures += 1
            print(f"✗ world{world}_stage{stage}: [{result.error.code}] {result.error}")

    print(f"\n{len(found) - failures}/{len(found)} levels valid")
    return 1 if failures else 0


def cmd_dump(args):
    """Print the decoded level as JSON."""
    try:
        level = _loader(args).load(args.world, args.stage)
    except LevelLoadError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    _write_or_print(level.to_json(indent=args.indent), args.output)
    return 0


def cmd_convert(args):
    """Rewrite a level in the other document format."""
    try:
        level = _loader(args).load(args.world, args.stage)
    except LevelLoadError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    if args.to == "area":
        doc = to_area_document(level)
    else:
        doc = to_tiled_document(level)

    _write_or_print(json.dumps(doc, indent=args.indent), args.output)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="tilelevel - Inspect and convert tile level files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tilelevel info app/src/main/assets 1 1
  tilelevel validate assets.zip
  tilelevel convert app/src/main/assets 1 2 --to tiled -o world1_stage2.json
        """,
    )
    parser.add_argument("--levels-dir", default="levels", help="Level directory inside ROOT (default: levels)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # info
    info_parser = subparsers.add_parser("info", help="Show a summary of one level")
    info_parser.add_argument("root", help="Assets directory or .zip archive")
    info_parser.add_argument("world", type=int, help="World number")
    info_parser.add_argument("stage", type=int, help="Stage number")
    info_parser.set_defaults(func=cmd_info)

    # validate
    validate_parser = subparsers.add_parser("validate", help="Load every level and report errors")
    validate_parser.add_argument("root", help="Assets directory or .zip archive")
    validate_parser.set_defaults(func=cmd_validate)

    # dump
    dump_parser = subparsers.add_parser("dump", help="Print the decoded level as JSON")
    dump_parser.add_argument("root", help="Assets directory or .zip archive")
    dump_parser.add_argument("world", type=int, help="World number")
    dump_parser.add_argument("stage", type=int, help="Stage number")
    dump_parser.add_argument("--output", "-o", help="Write to file instead of stdout")
    dump_parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    dump_parser.set_defaults(func=cmd_dump)

    # convert
    convert_parser = subparsers.add_parser("convert", help="Rewrite a level as a Tiled or area document")
    convert_parser.add_argument("root", help="Assets directory or .zip archive")
    convert_parser.add_argument("world", type=int, help="World number")
    convert_parser.add_argument("stage", type=int, help="Stage number")
    convert_parser.add_argument("--to", choices=["tiled", "area"], required=True, help="Target document format")
    convert_parser.add_argument("--output", "-o", help="Write to file instead of stdout")
    convert_parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    convert_parser.set_defaults(func=cmd_convert)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

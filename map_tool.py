#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Map file tool.

Usage:
    python map_tool.py generate
    python map_tool.py inspect data/solid.beer_map [--kind solid] [--layout]
    python map_tool.py load
    python map_tool.py --data-dir maps generate
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional

import orjson

from logging_config import setup_logging
from map_errors import MapAcquisitionError, MapError, MapFileSystemError
from map_loader import MapLoader
from map_preset import generate_preset_maps
from map_settings import SETTINGS_FILE, MapSettings, load_map_settings
from map_tiles import tile_kind_from_name, tile_kind_name
from tile_layout import build_tile_layout, layout_as_rows
from tilemap import TileMap

logger = logging.getLogger(__name__)


def _print_json(obj: object) -> None:
    sys.stdout.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


def summarize_map(tilemap: TileMap) -> Dict[str, object]:
    counts: Counter[str] = Counter(tile_kind_name(tile) for _, _, tile in tilemap.occupied())
    width, height = tilemap.size()
    return {
        "spritesheet": tilemap.spritesheet,
        "width": width,
        "height": height,
        "occupied": sum(counts.values()),
        "kinds": dict(sorted(counts.items())),
    }


def _load_settings(args: argparse.Namespace) -> MapSettings:
    settings = load_map_settings(args.settings)
    if args.data_dir:
        settings = settings.model_copy(update={"data_dir": Path(args.data_dir)})
    return settings


def _cmd_generate(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    try:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MapFileSystemError(settings.data_dir, f"couldn't create map directory: {exc}") from exc
    generate_preset_maps(settings.decoration_path, settings.solid_path)
    _print_json({"decoration": str(settings.decoration_path), "solid": str(settings.solid_path)})
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    kind = tile_kind_from_name(args.kind) if args.kind else None
    tilemap = TileMap.load(args.path, kind=kind)
    summary = summarize_map(tilemap)
    if args.layout:
        settings = _load_settings(args)
        summary["layout"] = layout_as_rows(build_tile_layout(tilemap, args.layer, tile_size=settings.tile_size))
    _print_json(summary)
    return 0


def _cmd_load(args: argparse.Namespace) -> int:
    loader = MapLoader(_load_settings(args))
    try:
        layers = loader.acquire()
    except MapAcquisitionError as exc:
        logger.error("Cannot enter gameplay: %s", exc)
        _print_json({"state": loader.state.value, "error": str(exc)})
        return 1
    _print_json({
        "state": loader.state.value,
        "history": [state.value for state in loader.history],
        "layers": {name: summarize_map(tilemap) for name, tilemap in layers},
    })
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="beer_map 파일 생성/검사 도구")
    parser.add_argument("--settings", default=str(SETTINGS_FILE), help=f"Path to map settings JSON (default: {SETTINGS_FILE})")
    parser.add_argument("--data-dir", default=None, help="Map directory; overrides data_dir from the settings file")
    parser.add_argument("--log-level", default="INFO", help="Console log level")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("generate", help="Write the preset decoration/solid maps")

    inspect = sub.add_parser("inspect", help="Print a JSON summary of a map file")
    inspect.add_argument("path", help="Map file to inspect")
    inspect.add_argument("--kind", choices=["solid", "decoration", "door"], default=None, help="Require every tile to be this kind")
    inspect.add_argument("--layout", action="store_true", help="Include renderer tile placements")
    inspect.add_argument("--layer", default="map", help="Layer name used in placements")

    sub.add_parser("load", help="Run map acquisition with preset fallback")
    return parser.parse_args(argv)


_COMMANDS = {
    "generate": _cmd_generate,
    "inspect": _cmd_inspect,
    "load": _cmd_load,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    try:
        return _COMMANDS[args.command](args)
    except MapError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Preset maps used when no valid map file exists.

Generation is deterministic: a ground layer with a trim strip, and a solid
layer with one building (wall block plus roof) whose tiles are picked by
where each cell sits inside the building's bounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, Tuple

from config import ATLAS_COLUMNS, PRESET_MAP_H, PRESET_MAP_W, PRESET_SPRITESHEET
from map_errors import MapPresetError
from map_tiles import DecorationTile, SolidTile
from tilemap import TileMap

logger = logging.getLogger(__name__)


def atlas_cell(row: int, col: int) -> int:
    return row * ATLAS_COLUMNS + col


class Location(str, Enum):
    CENTER = "center"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


@dataclass(frozen=True)
class Bounds:
    """Inclusive tile rectangle; y grows upward, so ``max_y`` is the top row."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def cells(self) -> Iterator[Tuple[int, int]]:
        for x in range(self.min_x, self.max_x + 1):
            for y in range(self.min_y, self.max_y + 1):
                yield x, y

    def location(self, x: int, y: int) -> Location:
        if not self.contains(x, y):
            raise ValueError(f"cell ({x}, {y}) is outside {self}")
        # 코너 먼저: 코너는 두 변 조건을 동시에 만족한다
        if x == self.min_x and y == self.min_y:
            return Location.BOTTOM_LEFT
        if x == self.min_x and y == self.max_y:
            return Location.TOP_LEFT
        if x == self.max_x and y == self.min_y:
            return Location.BOTTOM_RIGHT
        if x == self.max_x and y == self.max_y:
            return Location.TOP_RIGHT
        if x == self.min_x:
            return Location.LEFT
        if x == self.max_x:
            return Location.RIGHT
        if y == self.min_y:
            return Location.BOTTOM
        if y == self.max_y:
            return Location.TOP
        return Location.CENTER


# =============================
# Texture tables
# =============================
GROUND_TEXTURE = 28

TRIM_ROWS = (6, 5, 4)
TRIM_LAST_COLUMN = 7
TRIM_TEXTURES: Dict[str, Tuple[int, int, int]] = {
    "first": (atlas_cell(16, 5), atlas_cell(17, 2), atlas_cell(17, 5)),
    "last": (atlas_cell(16, 6), atlas_cell(17, 4), atlas_cell(17, 6)),
    "middle": (atlas_cell(15, 1), atlas_cell(16, 1), atlas_cell(17, 1)),
}

WALL_BOUNDS = Bounds(min_x=5, min_y=10, max_x=10, max_y=14)
WALL_TEXTURES: Dict[Location, int] = {
    Location.CENTER: atlas_cell(4, 9),
    Location.TOP: atlas_cell(3, 9),
    Location.BOTTOM: atlas_cell(5, 9),
    Location.LEFT: atlas_cell(4, 8),
    Location.RIGHT: atlas_cell(4, 10),
    Location.TOP_LEFT: atlas_cell(3, 8),
    Location.TOP_RIGHT: atlas_cell(3, 10),
    Location.BOTTOM_LEFT: atlas_cell(5, 8),
    Location.BOTTOM_RIGHT: atlas_cell(5, 10),
}

ROOF_BOUNDS = Bounds(min_x=5, min_y=8, max_x=10, max_y=9)
ROOF_TEXTURES: Dict[Location, int] = {
    Location.TOP: atlas_cell(0, 18),
    Location.TOP_LEFT: atlas_cell(0, 17),
    Location.TOP_RIGHT: atlas_cell(0, 19),
    Location.BOTTOM: atlas_cell(3, 18),
    Location.BOTTOM_LEFT: atlas_cell(3, 17),
    Location.BOTTOM_RIGHT: atlas_cell(3, 19),
}


def _paint(tilemap: TileMap[SolidTile], bounds: Bounds, textures: Dict[Location, int], part: str) -> None:
    for x, y in bounds.cells():
        location = bounds.location(x, y)
        texture = textures.get(location)
        if texture is None:
            raise MapPresetError(f"{part} shape {bounds} has a {location.value} cell at ({x}, {y}) with no texture")
        tilemap.set(x, y, SolidTile(texture_index=texture))


# =============================
# Builders
# =============================
def build_decoration_map() -> TileMap[DecorationTile]:
    tilemap: TileMap[DecorationTile] = TileMap(PRESET_MAP_W, PRESET_MAP_H, PRESET_SPRITESHEET)
    tilemap.fill(DecorationTile(texture_index=GROUND_TEXTURE))
    for x in range(TRIM_LAST_COLUMN + 1):
        if x == 0:
            textures = TRIM_TEXTURES["first"]
        elif x == TRIM_LAST_COLUMN:
            textures = TRIM_TEXTURES["last"]
        else:
            textures = TRIM_TEXTURES["middle"]
        for y, texture in zip(TRIM_ROWS, textures):
            tilemap.set(x, y, DecorationTile(texture_index=texture))
    return tilemap


def build_solid_map() -> TileMap[SolidTile]:
    tilemap: TileMap[SolidTile] = TileMap(PRESET_MAP_W, PRESET_MAP_H, PRESET_SPRITESHEET)
    _paint(tilemap, WALL_BOUNDS, WALL_TEXTURES, "wall")
    _paint(tilemap, ROOF_BOUNDS, ROOF_TEXTURES, "roof")
    return tilemap


def generate_preset_maps(decoration_path: str | Path, solid_path: str | Path) -> None:
    """Build both preset layers and save them. Save errors propagate."""

    logger.info("Generating preset maps: %s, %s", decoration_path, solid_path)
    build_decoration_map().save(decoration_path)
    build_solid_map().save(solid_path)

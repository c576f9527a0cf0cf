#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Renderer-facing tile placements.

The renderer draws one sprite per occupied slot: the atlas cell comes from
``texture_index`` and the position from the tile coordinates scaled by the
tile pixel size.
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from config import ATLAS_COLUMNS, TILE_PIXEL_SIZE
from map_tiles import tile_kind_name
from tilemap import TileMap


class TilePlacement(BaseModel):
    model_config = ConfigDict(extra="forbid")

    layer: str
    kind: str
    x: int
    y: int
    texture_index: int
    atlas_col: int
    atlas_row: int
    px: int
    py: int


def build_tile_layout(
    tilemap: TileMap,
    layer: str,
    *,
    tile_size: int = TILE_PIXEL_SIZE,
    atlas_columns: int = ATLAS_COLUMNS,
) -> List[TilePlacement]:
    if tile_size <= 0 or atlas_columns <= 0:
        raise ValueError("tile_size and atlas_columns must be positive")
    return [
        TilePlacement(
            layer=layer,
            kind=tile_kind_name(tile),
            x=x,
            y=y,
            texture_index=tile.texture_index,
            atlas_col=tile.texture_index % atlas_columns,
            atlas_row=tile.texture_index // atlas_columns,
            px=x * tile_size,
            py=y * tile_size,
        )
        for x, y, tile in tilemap.occupied()
    ]


def layout_as_rows(placements: List[TilePlacement]) -> List[Dict[str, object]]:
    return [placement.model_dump() for placement in placements]

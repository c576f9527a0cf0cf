#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tile kinds stored in map layers.

Every tile kind lives in its own layer and exposes ``texture_index``, the
cell of the layer's spritesheet to draw. The set is closed: ``TILE_KINDS``
order is the variant tag written by ``map_codec``, so a new kind needs a new
entry there as well.
"""

from __future__ import annotations

from typing import Dict, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field

U32_MAX = 2**32 - 1


class SolidTile(BaseModel):
    """A tile that doesn't allow the player to go through it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    texture_index: int = Field(ge=0, le=U32_MAX)


class DecorationTile(BaseModel):
    """A tile that only exists for decoration purposes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    texture_index: int = Field(ge=0, le=U32_MAX)


class DoorTile(BaseModel):
    """A tile that moves the player to another scene or location."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    destination: str
    texture_index: int = Field(ge=0, le=U32_MAX)


Tile = Union[SolidTile, DecorationTile, DoorTile]

TILE_KINDS: Tuple[Type[BaseModel], ...] = (SolidTile, DecorationTile, DoorTile)

_KIND_NAMES: Dict[Type[BaseModel], str] = {
    SolidTile: "solid",
    DecorationTile: "decoration",
    DoorTile: "door",
}


def tile_kind_name(tile: Tile) -> str:
    return _KIND_NAMES[type(tile)]


def tile_kind_from_name(name: str) -> Type[BaseModel]:
    key = str(name).strip().lower()
    for kind, kind_name in _KIND_NAMES.items():
        if kind_name == key:
            return kind
    raise ValueError(f"Unknown tile kind: {name}")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Map acquisition at scene entry.

States: LOADING -> LOADED, or LOADING -> REGENERATING -> LOADED | FAILED.
A failed load regenerates the preset maps once and retries the load once;
there is no second regeneration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, NoReturn, Optional, Tuple

import map_preset
from map_errors import (
    MapAcquisitionError,
    MapError,
    MapFileSystemError,
    MapLoadError,
    MapPresetError,
    MapSaveError,
)
from map_settings import MapSettings, load_map_settings
from map_tiles import DecorationTile, SolidTile
from tilemap import TileMap


class MapAcquisitionState(str, Enum):
    LOADING = "LOADING"
    LOADED = "LOADED"
    REGENERATING = "REGENERATING"
    FAILED = "FAILED"


_ALLOWED_TRANSITIONS = {
    MapAcquisitionState.LOADING: {MapAcquisitionState.LOADED, MapAcquisitionState.REGENERATING},
    MapAcquisitionState.REGENERATING: {MapAcquisitionState.LOADED, MapAcquisitionState.FAILED},
    MapAcquisitionState.LOADED: set(),
    MapAcquisitionState.FAILED: set(),
}


@dataclass
class MapLayers:
    decoration: TileMap[DecorationTile]
    solid: TileMap[SolidTile]

    def __iter__(self) -> Iterator[Tuple[str, TileMap]]:
        yield "decoration", self.decoration
        yield "solid", self.solid


class MapLoader:
    """Loads both map layers, falling back to the presets at most once."""

    def __init__(self, settings: MapSettings):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings
        self.state = MapAcquisitionState.LOADING
        self.history: List[MapAcquisitionState] = [self.state]
        self.last_error: Optional[MapError] = None

    def _transition(self, next_state: MapAcquisitionState, *, reason: str = "") -> None:
        if next_state not in _ALLOWED_TRANSITIONS[self.state]:
            raise ValueError(f"invalid map acquisition transition: {self.state.value} -> {next_state.value} ({reason})")
        self.logger.info("map acquisition: %s -> %s %s", self.state.value, next_state.value, reason)
        self.state = next_state
        self.history.append(next_state)

    def _fail(self, message: str, exc: MapError) -> NoReturn:
        self.last_error = exc
        self._transition(MapAcquisitionState.FAILED, reason=str(exc))
        self.logger.error("%s: %s", message, exc)
        raise MapAcquisitionError(f"{message}: {exc}", cause=exc) from exc

    def _load_layers(self) -> MapLayers:
        decoration = TileMap.load(self.settings.decoration_path, kind=DecorationTile)
        solid = TileMap.load(self.settings.solid_path, kind=SolidTile)
        return MapLayers(decoration=decoration, solid=solid)

    def _regenerate(self) -> None:
        data_dir = self.settings.data_dir
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MapFileSystemError(data_dir, f"couldn't create map directory: {exc}") from exc
        map_preset.generate_preset_maps(self.settings.decoration_path, self.settings.solid_path)

    def acquire(self) -> MapLayers:
        if self.state != MapAcquisitionState.LOADING:
            raise RuntimeError(f"map acquisition already finished in state {self.state.value}")

        try:
            layers = self._load_layers()
        except MapLoadError as exc:
            self.last_error = exc
            self.logger.warning("Invalid map(s). Loading preset... (%s)", exc)
            self._transition(MapAcquisitionState.REGENERATING, reason=str(exc))
        else:
            self._transition(MapAcquisitionState.LOADED)
            return layers

        try:
            self._regenerate()
        except (MapSaveError, MapPresetError) as exc:
            self._fail("preset map generation failed", exc)

        try:
            layers = self._load_layers()
        except MapLoadError as exc:
            self._fail("preset maps could not be loaded", exc)

        self._transition(MapAcquisitionState.LOADED)
        return layers


def acquire_maps(settings: Optional[MapSettings] = None) -> MapLayers:
    loader = MapLoader(settings or load_map_settings())
    return loader.acquire()

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""TileMap: a width-tagged grid of optional tiles plus its spritesheet name.

Cell ``(x, y)`` is stored at flat index ``x + y * width``. Maps are built and
edited by a single owner, saved/loaded through ``map_codec``, and handed to
the renderer read-only.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from map_codec import decode_map, encode_map
from map_errors import MapDecodeError, MapFileSystemError
from map_tiles import Tile

T = TypeVar("T", bound=Tile)

logger = logging.getLogger(__name__)


class MapRowIterator(Generic[T]):
    """Read-only row traversal; every ``TileMap.iter()`` call gets a new one."""

    def __init__(self, tilemap: "TileMap[T]"):
        self._slots = tilemap._slots
        self._width = tilemap.width
        self._row = 0
        self._rows = len(self._slots) // self._width

    def __iter__(self) -> "MapRowIterator[T]":
        return self

    def __next__(self) -> Tuple[Optional[T], ...]:
        if self._row >= self._rows:
            raise StopIteration
        start = self._row * self._width
        self._row += 1
        return tuple(self._slots[start:start + self._width])

    def __len__(self) -> int:
        return self._rows - self._row


class TileMap(Generic[T]):
    def __init__(self, width: int, height: int, spritesheet: str):
        if width <= 0 or height <= 0:
            raise ValueError(f"map size must be positive, got {width}x{height}")
        self.spritesheet = spritesheet
        self.width = width
        self._slots: List[Optional[T]] = [None] * (width * height)

    @classmethod
    def _from_slots(cls, spritesheet: str, slots: List[Optional[T]], width: int) -> "TileMap[T]":
        if width <= 0:
            raise MapDecodeError(f"invalid map width {width}")
        if not slots or len(slots) % width != 0:
            raise MapDecodeError(f"{len(slots)} slots do not form rows of width {width}")
        tilemap = cls.__new__(cls)
        tilemap.spritesheet = spritesheet
        tilemap.width = width
        tilemap._slots = slots
        return tilemap

    @property
    def height(self) -> int:
        return len(self._slots) // self.width

    @property
    def slots(self) -> Tuple[Optional[T], ...]:
        return tuple(self._slots)

    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _index(self, x: int, y: int) -> int:
        for value in (x, y):
            if isinstance(value, bool) or not isinstance(value, int):
                raise IndexError(f"tile index out of range: ({x!r}, {y!r}) are not integer coordinates")
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"tile index out of range: ({x}, {y}) not in {self.width}x{self.height} map")
        return x + y * self.width

    def get(self, x: int, y: int) -> Optional[T]:
        return self._slots[self._index(x, y)]

    def set(self, x: int, y: int, tile: Optional[T]) -> None:
        self._slots[self._index(x, y)] = tile

    def __getitem__(self, pos: Tuple[int, int]) -> Optional[T]:
        x, y = pos
        return self.get(x, y)

    def __setitem__(self, pos: Tuple[int, int], tile: Optional[T]) -> None:
        x, y = pos
        self.set(x, y, tile)

    def fill(self, tile: Optional[T]) -> None:
        self._slots[:] = [tile] * len(self._slots)

    def iter(self) -> MapRowIterator[T]:
        return MapRowIterator(self)

    def __iter__(self) -> MapRowIterator[T]:
        return self.iter()

    def occupied(self) -> Iterator[Tuple[int, int, T]]:
        for y, row in enumerate(self.iter()):
            for x, tile in enumerate(row):
                if tile is not None:
                    yield x, y, tile

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileMap):
            return NotImplemented
        return (
            self.spritesheet == other.spritesheet
            and self.width == other.width
            and self._slots == other._slots
        )

    def __repr__(self) -> str:
        return f"TileMap(width={self.width}, height={self.height}, spritesheet={self.spritesheet!r})"

    # =============================
    # Persistence
    # =============================
    def to_bytes(self) -> bytes:
        return encode_map(self.spritesheet, self._slots, self.width)

    @classmethod
    def from_bytes(cls, data: bytes, kind: Optional[Type[T]] = None) -> "TileMap[T]":
        record = decode_map(data)
        if kind is not None:
            for idx, tile in enumerate(record.slots):
                if tile is not None and type(tile) is not kind:
                    raise MapDecodeError(f"slot {idx}: expected {kind.__name__}, found {type(tile).__name__}")
        return cls._from_slots(record.spritesheet, record.slots, record.width)

    @classmethod
    def load(cls, path: str | Path, kind: Optional[Type[T]] = None) -> "TileMap[T]":
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise MapFileSystemError(path, f"couldn't load map file: {exc}") from exc
        tilemap = cls.from_bytes(data, kind)
        logger.debug("loaded %r from %s", tilemap, path)
        return tilemap

    def save(self, path: str | Path) -> None:
        path = Path(path)
        data = self.to_bytes()
        try:
            path.write_bytes(data)
        except OSError as exc:
            raise MapFileSystemError(path, f"couldn't save map to file: {exc}") from exc
        logger.debug("saved %r to %s (%d bytes)", self, path, len(data))

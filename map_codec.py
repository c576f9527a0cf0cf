#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Binary map file codec.

Map file layout (little-endian):

    spritesheet   u32 byte length + UTF-8 bytes
    slots         u32 count, then per slot:
                      u8 presence (0 = empty, 1 = tile)
                      u8 variant tag   (index in map_tiles.TILE_KINDS)
                      payload          (fields in declaration order)
    width         u32

Payload fields are ``int`` (u32) or ``str`` (u32 byte length + UTF-8).
The codec checks well-formedness only; grid shape is checked by ``TileMap``.
"""

from __future__ import annotations

import logging
import struct
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ValidationError

from map_errors import MapDecodeError, MapEncodeError
from map_tiles import TILE_KINDS, Tile

logger = logging.getLogger(__name__)

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")

SLOT_EMPTY = 0
SLOT_TILE = 1


class MapRecord(NamedTuple):
    spritesheet: str
    slots: List[Optional[Tile]]
    width: int


def _payload_layout(kind: Type[BaseModel]) -> Tuple[Tuple[str, type], ...]:
    layout = []
    for name, info in kind.model_fields.items():
        if info.annotation not in (int, str):
            raise TypeError(f"{kind.__name__}.{name}: unsupported payload type {info.annotation!r}")
        layout.append((name, info.annotation))
    return tuple(layout)


_LAYOUTS: Dict[Type[BaseModel], Tuple[Tuple[str, type], ...]] = {kind: _payload_layout(kind) for kind in TILE_KINDS}
_TAGS: Dict[Type[BaseModel], int] = {kind: tag for tag, kind in enumerate(TILE_KINDS)}


# =============================
# Encoding
# =============================
class _Writer:
    def __init__(self) -> None:
        self.buf = bytearray()

    def u8(self, value: int) -> None:
        self.buf += _U8.pack(value)

    def u32(self, value: Any, what: str) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise MapEncodeError(f"{what}: expected an integer, got {type(value).__name__}")
        try:
            self.buf += _U32.pack(value)
        except struct.error as exc:
            raise MapEncodeError(f"{what}: {value} does not fit in u32") from exc

    def text(self, value: Any, what: str) -> None:
        if not isinstance(value, str):
            raise MapEncodeError(f"{what}: expected a string, got {type(value).__name__}")
        try:
            raw = value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MapEncodeError(f"{what}: not encodable as UTF-8") from exc
        self.u32(len(raw), f"{what} length")
        self.buf += raw


def encode_map(spritesheet: str, slots: Sequence[Optional[Tile]], width: int) -> bytes:
    w = _Writer()
    w.text(spritesheet, "spritesheet")
    w.u32(len(slots), "slot count")
    for idx, tile in enumerate(slots):
        if tile is None:
            w.u8(SLOT_EMPTY)
            continue
        tag = _TAGS.get(type(tile))
        if tag is None:
            raise MapEncodeError(f"slot {idx}: {type(tile).__name__} is not a tile kind")
        w.u8(SLOT_TILE)
        w.u8(tag)
        for name, annotation in _LAYOUTS[type(tile)]:
            value = getattr(tile, name)
            if annotation is str:
                w.text(value, f"slot {idx} {name}")
            else:
                w.u32(value, f"slot {idx} {name}")
    w.u32(width, "width")
    logger.debug("encoded map: %d slots, %d bytes", len(slots), len(w.buf))
    return bytes(w.buf)


# =============================
# Decoding
# =============================
class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = memoryview(data)
        self.pos = 0

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def _need(self, size: int, what: str) -> None:
        if self.remaining() < size:
            raise MapDecodeError(f"truncated map data while reading {what} at offset {self.pos}")

    def u8(self, what: str) -> int:
        self._need(_U8.size, what)
        (value,) = _U8.unpack_from(self.data, self.pos)
        self.pos += _U8.size
        return value

    def u32(self, what: str) -> int:
        self._need(_U32.size, what)
        (value,) = _U32.unpack_from(self.data, self.pos)
        self.pos += _U32.size
        return value

    def text(self, what: str) -> str:
        size = self.u32(f"{what} length")
        self._need(size, what)
        raw = bytes(self.data[self.pos:self.pos + size])
        self.pos += size
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MapDecodeError(f"{what} is not valid UTF-8") from exc


def _decode_tile(r: _Reader, idx: int) -> Tile:
    tag = r.u8(f"slot {idx} variant tag")
    if tag >= len(TILE_KINDS):
        raise MapDecodeError(f"slot {idx}: unknown variant tag {tag}")
    kind = TILE_KINDS[tag]
    payload: Dict[str, object] = {}
    for name, annotation in _LAYOUTS[kind]:
        if annotation is str:
            payload[name] = r.text(f"slot {idx} {name}")
        else:
            payload[name] = r.u32(f"slot {idx} {name}")
    try:
        return kind.model_validate(payload)
    except ValidationError as exc:
        raise MapDecodeError(f"slot {idx}: invalid {kind.__name__} payload") from exc


def decode_map(data: bytes) -> MapRecord:
    r = _Reader(data)
    spritesheet = r.text("spritesheet")
    count = r.u32("slot count")
    # 슬롯당 최소 1바이트: 잘린 파일이 거대한 count를 주장하는 경우 조기 거부
    if count > r.remaining():
        raise MapDecodeError(f"truncated map data: {count} slots declared, {r.remaining()} bytes left")

    slots: List[Optional[Tile]] = []
    for idx in range(count):
        presence = r.u8(f"slot {idx} presence tag")
        if presence == SLOT_EMPTY:
            slots.append(None)
        elif presence == SLOT_TILE:
            slots.append(_decode_tile(r, idx))
        else:
            raise MapDecodeError(f"slot {idx}: invalid presence tag {presence}")

    width = r.u32("width")
    if r.remaining():
        raise MapDecodeError(f"{r.remaining()} trailing bytes after map data")
    logger.debug("decoded map: %d slots, width %d", len(slots), width)
    return MapRecord(spritesheet=spritesheet, slots=slots, width=width)

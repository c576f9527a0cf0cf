#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Map file settings stored as JSON next to the map data.

- orjson: payload parsing/writing
- pydantic: schema validation

A missing settings file is seeded with defaults. A malformed one raises
``MapSettingsError``; there is no silent fallback.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import (
    DATA_DIR,
    DECORATION_MAP_NAME,
    MAP_SETTINGS_NAME,
    SOLID_MAP_NAME,
    TILE_PIXEL_SIZE,
)
from map_errors import MapSettingsError

SETTINGS_FILE = DATA_DIR / MAP_SETTINGS_NAME


class MapSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: Path = DATA_DIR
    decoration_file: str = Field(default=DECORATION_MAP_NAME, min_length=1)
    solid_file: str = Field(default=SOLID_MAP_NAME, min_length=1)
    tile_size: int = Field(default=TILE_PIXEL_SIZE, gt=0)

    @property
    def decoration_path(self) -> Path:
        return self.data_dir / self.decoration_file

    @property
    def solid_path(self) -> Path:
        return self.data_dir / self.solid_file


def _write_json(path: Path, obj: object) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    except OSError as exc:
        raise MapSettingsError(f"{path}: couldn't write settings: {exc}") from exc


def save_map_settings(settings: MapSettings, path: Optional[str | Path] = None) -> None:
    target = Path(path) if path is not None else SETTINGS_FILE
    _write_json(target, settings.model_dump(mode="json"))


def load_map_settings(path: Optional[str | Path] = None) -> MapSettings:
    source = Path(path) if path is not None else SETTINGS_FILE
    if not source.exists():
        settings = MapSettings(data_dir=source.parent)
        # data_dir 생략 = 설정 파일이 있는 폴더
        _write_json(source, settings.model_dump(mode="json", exclude={"data_dir"}))
        return settings

    try:
        payload = orjson.loads(source.read_bytes())
    except OSError as exc:
        raise MapSettingsError(f"{source}: couldn't read settings: {exc}") from exc
    except orjson.JSONDecodeError as exc:
        raise MapSettingsError(f"{source}: invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MapSettingsError(f"{source}: expected a JSON object")

    # 상대 경로 data_dir은 설정 파일 위치 기준
    data_dir = payload.get("data_dir")
    if data_dir is None:
        payload["data_dir"] = str(source.parent)
    elif not Path(str(data_dir)).is_absolute():
        payload["data_dir"] = str(source.parent / str(data_dir))

    try:
        return MapSettings.model_validate(payload)
    except ValidationError as exc:
        raise MapSettingsError(f"{source}: {exc}") from exc

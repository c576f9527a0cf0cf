#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tilemap configuration.

규칙: 이 파일에는 '상수/설정'만 둡니다. (로직 금지)
"""

from pathlib import Path

# --- Atlas ---
PRESET_SPRITESHEET = "city_tiles.png"
ATLAS_COLUMNS = 27           # city_tiles.png 한 줄의 셀 수
TILE_PIXEL_SIZE = 16

# --- Preset maps ---
PRESET_MAP_W, PRESET_MAP_H = 16, 16

# --- Files ---
DATA_DIR = Path("data")     # 실행 위치(cwd) 기준
MAP_FILE_SUFFIX = ".beer_map"
DECORATION_MAP_NAME = "decoration" + MAP_FILE_SUFFIX
SOLID_MAP_NAME = "solid" + MAP_FILE_SUFFIX
MAP_SETTINGS_NAME = "map_settings.json"

# --- Logging ---
LOG_FORMAT = "%(asctime)s : %(levelname)-8s : %(name)s : %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

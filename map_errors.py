#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Error taxonomy for map persistence.

Load failures are ``MapLoadError``, save failures are ``MapSaveError``.
Filesystem failures belong to both, so callers can catch either side.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class MapError(Exception):
    """Base class for every tilemap error."""


class MapLoadError(MapError):
    pass


class MapSaveError(MapError):
    pass


class MapDecodeError(MapLoadError, ValueError):
    """Bytes do not follow the map file layout."""


class MapEncodeError(MapSaveError, ValueError):
    """A map value has no representation in the map file layout."""


class MapFileSystemError(MapLoadError, MapSaveError):
    def __init__(self, path: str | Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"map file {self.path}: {reason}")


class MapAcquisitionError(MapError):
    """Maps could not be loaded even after regenerating the presets."""

    def __init__(self, message: str, cause: Optional[MapError] = None):
        super().__init__(message)
        self.cause = cause


class MapSettingsError(MapError, ValueError):
    pass


class MapPresetError(MapError, ValueError):
    """A preset shape has a cell the texture tables do not cover."""

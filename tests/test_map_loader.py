from __future__ import annotations

from pathlib import Path

import pytest

import map_loader
import map_preset
from map_errors import MapAcquisitionError, MapDecodeError, MapFileSystemError, MapPresetError
from map_loader import MapAcquisitionState, MapLoader, acquire_maps
from map_preset import Bounds
from map_settings import MapSettings
from map_tiles import DecorationTile, SolidTile
from tilemap import TileMap

S = MapAcquisitionState


def _settings(tmp_path: Path) -> MapSettings:
    return MapSettings(data_dir=tmp_path / "data")


def test_missing_files_regenerate_then_load(tmp_path: Path):
    settings = _settings(tmp_path)
    loader = MapLoader(settings)

    layers = loader.acquire()

    assert settings.decoration_path.exists()
    assert settings.solid_path.exists()
    assert layers.decoration.size() == (16, 16)
    assert layers.solid.size() == (16, 16)
    assert loader.state == S.LOADED
    assert loader.history == [S.LOADING, S.REGENERATING, S.LOADED]
    assert isinstance(loader.last_error, MapFileSystemError)


def test_valid_files_load_without_regeneration(tmp_path: Path, monkeypatch):
    settings = _settings(tmp_path)
    settings.data_dir.mkdir()
    deco = TileMap(2, 2, "d.png")
    deco[0, 0] = DecorationTile(texture_index=1)
    solid = TileMap(2, 2, "s.png")
    solid[1, 1] = SolidTile(texture_index=2)
    deco.save(settings.decoration_path)
    solid.save(settings.solid_path)

    def _boom(*args, **kwargs):
        raise AssertionError("presets must not be generated")

    monkeypatch.setattr(map_preset, "generate_preset_maps", _boom)
    loader = MapLoader(settings)
    layers = loader.acquire()

    assert layers.decoration == deco
    assert layers.solid == solid
    assert dict(layers) == {"decoration": deco, "solid": solid}
    assert loader.history == [S.LOADING, S.LOADED]


def test_corrupt_file_is_replaced_by_presets(tmp_path: Path):
    settings = _settings(tmp_path)
    settings.data_dir.mkdir()
    settings.decoration_path.write_bytes(b"\x01\x02")
    settings.solid_path.write_bytes(b"")

    loader = MapLoader(settings)
    layers = loader.acquire()

    assert isinstance(loader.last_error, MapDecodeError)
    assert layers.decoration[0, 6].texture_index == 16 * 27 + 5
    assert loader.state == S.LOADED


def test_generation_failure_ends_in_failed(tmp_path: Path, monkeypatch):
    settings = _settings(tmp_path)

    def _fail(decoration_path, solid_path):
        raise MapFileSystemError(decoration_path, "disk full")

    monkeypatch.setattr(map_preset, "generate_preset_maps", _fail)
    loader = MapLoader(settings)

    with pytest.raises(MapAcquisitionError, match="generation failed") as excinfo:
        loader.acquire()

    assert loader.state == S.FAILED
    assert loader.history == [S.LOADING, S.REGENERATING, S.FAILED]
    assert isinstance(excinfo.value.cause, MapFileSystemError)


def test_untextured_roof_shape_ends_in_failed(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(map_preset, "ROOF_BOUNDS", Bounds(min_x=5, min_y=7, max_x=10, max_y=9))
    loader = MapLoader(_settings(tmp_path))

    with pytest.raises(MapAcquisitionError, match="generation failed") as excinfo:
        loader.acquire()

    assert loader.state == S.FAILED
    assert loader.history == [S.LOADING, S.REGENERATING, S.FAILED]
    assert isinstance(excinfo.value.cause, MapPresetError)
    assert "roof shape" in str(excinfo.value)


def test_second_load_failure_does_not_loop(tmp_path: Path, monkeypatch):
    settings = _settings(tmp_path)
    calls = []

    def _write_garbage(decoration_path, solid_path):
        calls.append((decoration_path, solid_path))
        Path(decoration_path).write_bytes(b"garbage")
        Path(solid_path).write_bytes(b"garbage")

    monkeypatch.setattr(map_preset, "generate_preset_maps", _write_garbage)
    loader = MapLoader(settings)

    with pytest.raises(MapAcquisitionError, match="could not be loaded"):
        loader.acquire()

    assert len(calls) == 1
    assert loader.state == S.FAILED
    assert isinstance(loader.last_error, MapDecodeError)


def test_wrong_layer_kind_triggers_regeneration(tmp_path: Path):
    settings = _settings(tmp_path)
    settings.data_dir.mkdir()
    map_preset.build_decoration_map().save(settings.decoration_path)
    map_preset.build_decoration_map().save(settings.solid_path)

    loader = MapLoader(settings)
    layers = loader.acquire()

    assert S.REGENERATING in loader.history
    assert isinstance(layers.solid[5, 10], SolidTile)


def test_acquire_runs_only_once(tmp_path: Path):
    loader = MapLoader(_settings(tmp_path))
    loader.acquire()

    with pytest.raises(RuntimeError):
        loader.acquire()


def test_invalid_transition_raises(tmp_path: Path):
    loader = MapLoader(_settings(tmp_path))

    with pytest.raises(ValueError, match="invalid map acquisition transition"):
        loader._transition(S.FAILED)


def test_acquire_maps_uses_given_settings(tmp_path: Path):
    layers = acquire_maps(_settings(tmp_path))

    assert layers.solid.size() == (16, 16)


def test_acquire_maps_reads_default_settings(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(map_loader, "load_map_settings", lambda: _settings(tmp_path))

    layers = acquire_maps()

    assert layers.decoration.spritesheet == "city_tiles.png"

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

import map_preset
import map_tool
from logging_config import ColoredFormatter, setup_logging
from map_errors import MapFileSystemError
from map_tiles import DoorTile, SolidTile
from tilemap import TileMap


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _settings_arg(tmp_path: Path) -> list[str]:
    return ["--settings", str(tmp_path / "map_settings.json")]


def test_generate_writes_both_layers(tmp_path: Path, capsys):
    code = map_tool.main(_settings_arg(tmp_path) + ["generate"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert Path(out["decoration"]).exists()
    assert Path(out["solid"]).exists()


def test_inspect_summarizes_map(tmp_path: Path, capsys):
    tilemap = TileMap(2, 2, "atlas.png")
    tilemap[0, 0] = SolidTile(texture_index=2)
    tilemap[1, 1] = DoorTile(destination="room2", texture_index=9)
    path = tmp_path / "m.beer_map"
    tilemap.save(path)

    code = map_tool.main(_settings_arg(tmp_path) + ["inspect", str(path), "--layout"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["width"] == 2 and out["height"] == 2
    assert out["occupied"] == 2
    assert out["kinds"] == {"door": 1, "solid": 1}
    assert [row["texture_index"] for row in out["layout"]] == [2, 9]


def test_inspect_with_wrong_kind_fails(tmp_path: Path, capsys):
    path = tmp_path / "deco.beer_map"
    map_preset.build_decoration_map().save(path)

    assert map_tool.main(_settings_arg(tmp_path) + ["inspect", str(path), "--kind", "solid"]) == 1


def test_load_reports_state_and_sizes(tmp_path: Path, capsys):
    code = map_tool.main(_settings_arg(tmp_path) + ["load"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["state"] == "LOADED"
    assert out["history"] == ["LOADING", "REGENERATING", "LOADED"]
    assert out["layers"]["decoration"]["width"] == 16
    assert out["layers"]["solid"]["kinds"] == {"solid": 42}


def test_load_failure_exits_non_zero(tmp_path: Path, capsys, monkeypatch):
    def _fail(decoration_path, solid_path):
        raise MapFileSystemError(decoration_path, "read-only")

    monkeypatch.setattr(map_preset, "generate_preset_maps", _fail)

    code = map_tool.main(_settings_arg(tmp_path) + ["load"])

    assert code == 1
    out = json.loads(capsys.readouterr().out)
    assert out["state"] == "FAILED"
    assert "read-only" in out["error"]


def test_load_with_untextured_roof_exits_non_zero(tmp_path: Path, capsys, monkeypatch):
    monkeypatch.setattr(map_preset, "ROOF_BOUNDS", map_preset.Bounds(min_x=5, min_y=7, max_x=10, max_y=9))

    code = map_tool.main(_settings_arg(tmp_path) + ["load"])

    assert code == 1
    out = json.loads(capsys.readouterr().out)
    assert out["state"] == "FAILED"
    assert "roof shape" in out["error"]


@pytest.mark.parametrize("command", [["load"], ["generate"], ["inspect", "{map}", "--layout"]])
def test_unwritable_settings_location_exits_non_zero(tmp_path: Path, command):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    map_path = tmp_path / "m.beer_map"
    TileMap(1, 1, "atlas.png").save(map_path)
    argv = ["--settings", str(blocker / "map_settings.json")]
    argv += [str(map_path) if arg == "{map}" else arg for arg in command]

    assert map_tool.main(argv) == 1


def test_generate_into_unwritable_data_dir_exits_non_zero(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    code = map_tool.main(_settings_arg(tmp_path) + ["--data-dir", str(blocker / "maps"), "generate"])

    assert code == 1


def test_data_dir_option_overrides_settings(tmp_path: Path, capsys):
    maps = tmp_path / "maps"

    code = map_tool.main(_settings_arg(tmp_path) + ["--data-dir", str(maps), "generate"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert Path(out["decoration"]) == maps / "decoration.beer_map"
    assert (maps / "solid.beer_map").exists()
    assert not (tmp_path / "solid.beer_map").exists()


def test_default_paths_follow_working_directory():
    assert not map_tool.SETTINGS_FILE.is_absolute()
    assert map_tool.parse_args(["load"]).settings == str(Path("data") / "map_settings.json")


def test_parse_args_requires_command(monkeypatch):
    with pytest.raises(SystemExit):
        map_tool.parse_args([])


def test_setup_logging_installs_single_console_handler():
    handler = setup_logging("warning")

    root = logging.getLogger()
    assert root.handlers == [handler]
    assert handler.level == logging.WARNING
    assert isinstance(handler.formatter, ColoredFormatter)

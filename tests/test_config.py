"""Tests for the settings singleton."""

import json
from pathlib import Path

import pytest

from retrodeck.config import Config


@pytest.fixture(autouse=True)
def fresh_config():
    Config.reset()
    yield
    Config.reset()


def test_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("RETRODECK_LAUNCHBOX_DIR", str(tmp_path / "LB"))
    cfg = Config(tmp_path / "config.json")

    assert cfg.data_dir == tmp_path
    assert cfg.launchbox_dir == tmp_path / "LB"
    assert cfg.bigbox_path == tmp_path / "LB" / "BigBox.exe"
    assert cfg.poll_interval == 2.5
    assert cfg.query_timeout == 5.0
    assert cfg.retroarch_port == 55355
    assert cfg.credentials_path == tmp_path / "retrodeck-config.json"
    assert cfg.controls_cache_path.name == "game-controls.json"
    assert cfg.controls_overrides_path.name == "game-controls-overrides.json"


def test_saved_values_override_defaults(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"launchbox_dir": str(tmp_path / "Games"), "poll_interval": 1}), encoding="utf-8")
    cfg = Config(path)

    assert cfg.launchbox_dir == tmp_path / "Games"
    assert cfg.poll_interval == 1.0
    assert cfg.retroarch_cfg_path == tmp_path / "Games" / "Emulators" / "RetroArch" / "retroarch.cfg"


def test_set_persists(tmp_path: Path):
    path = tmp_path / "config.json"
    Config(path).set("theme", "light")

    assert json.loads(path.read_text(encoding="utf-8"))["theme"] == "light"
    Config.reset()
    assert Config(path).theme == "light"


def test_singleton(tmp_path: Path):
    assert Config(tmp_path / "config.json") is Config()

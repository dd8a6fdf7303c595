"""Tests for the override store, versioned cache and credential file."""

import json
from pathlib import Path

import pytest

from retrodeck.core.controls_cache import CACHE_VERSION, ControlsStore


@pytest.fixture
def store(tmp_path: Path) -> ControlsStore:
    return ControlsStore(
        tmp_path / "game-controls.json",
        tmp_path / "game-controls-overrides.json",
        tmp_path / "retrodeck-config.json",
    )


class TestOverrides:
    def test_save_override_merges_keys(self, store, tmp_path):
        store.save_override("Super Mario 64", "faceBottom", "Jump")
        store.save_override("Super Mario 64", "faceLeft", "Punch")

        data = json.loads((tmp_path / "game-controls-overrides.json").read_text(encoding="utf-8"))
        assert data == {"Super Mario 64": {"faceBottom": "Jump", "faceLeft": "Punch"}}

    def test_unknown_position_rejected(self, store, tmp_path):
        with pytest.raises(ValueError):
            store.save_override("Super Mario 64", "bigRedButton", "Explode")
        assert not (tmp_path / "game-controls-overrides.json").exists()

    def test_override_wins_over_cache(self, store):
        store.save_generated("Super Mario 64", {"faceBottom": "Jump", "faceLeft": "Punch"})
        store.save_override("Super Mario 64", "faceBottom", "Long Jump")

        assert store.get("Super Mario 64") == {"faceBottom": "Long Jump"}

    def test_titles_match_exactly(self, store):
        store.save_override("Super Mario 64", "start", "Pause")
        assert store.get("super mario 64") is None

    def test_hand_written_entries_are_cleaned(self, store, tmp_path):
        (tmp_path / "game-controls-overrides.json").write_text(
            json.dumps({
                "Super Mario 64": {"faceBottom": 5, "start": "Pause", "turbo": "Fast"},
                "Ico": {"faceBottom": 5},
                "Okami": ["not", "a", "map"],
            }),
            encoding="utf-8",
        )
        assert store.get_override("Super Mario 64") == {"start": "Pause"}
        assert store.get_override("Ico") is None
        assert store.get_override("Okami") is None


class TestGeneratedCache:
    def test_cache_file_layout(self, store, tmp_path):
        store.save_generated("Ico", {"faceBottom": "Jump", "bogus": "x", "start": ""})
        data = json.loads((tmp_path / "game-controls.json").read_text(encoding="utf-8"))
        assert data == {"version": CACHE_VERSION, "entries": {"Ico": {"faceBottom": "Jump"}}}
        assert store.get_cached("Ico") == {"faceBottom": "Jump"}

    def test_version_mismatch_empties_cache(self, store, tmp_path):
        (tmp_path / "game-controls.json").write_text(
            json.dumps({"version": CACHE_VERSION - 1, "entries": {"Ico": {"faceBottom": "Jump"}}}),
            encoding="utf-8",
        )
        assert store.get("Ico") is None

        store.save_generated("Okami", {"faceBottom": "Attack", "faceRight": "Jump"})
        data = json.loads((tmp_path / "game-controls.json").read_text(encoding="utf-8"))
        assert set(data["entries"]) == {"Okami"}

    def test_malformed_entries_are_cleaned(self, store, tmp_path):
        (tmp_path / "game-controls.json").write_text(
            json.dumps({"version": CACHE_VERSION, "entries": {
                "Ico": {"faceBottom": "Jump", "bogus": "x", "start": 3},
                "Okami": {"faceBottom": 5},
            }}),
            encoding="utf-8",
        )
        assert store.get_cached("Ico") == {"faceBottom": "Jump"}
        assert store.get_cached("Okami") is None

    def test_malformed_file_reads_as_empty(self, store, tmp_path):
        (tmp_path / "game-controls.json").write_text("{not json", encoding="utf-8")
        assert store.get_cached("Ico") is None


class TestCredential:
    def test_missing_credential(self, store):
        assert store.get_api_key() is None
        assert not store.is_ai_configured()

    def test_blank_credential_is_missing(self, store, tmp_path):
        (tmp_path / "retrodeck-config.json").write_text('{"anthropicApiKey": "   "}', encoding="utf-8")
        assert not store.is_ai_configured()

    def test_set_api_key_keeps_other_fields(self, store, tmp_path):
        path = tmp_path / "retrodeck-config.json"
        path.write_text('{"other": 1}', encoding="utf-8")
        store.set_api_key("  sk-ant-test  ")

        assert json.loads(path.read_text(encoding="utf-8")) == {"other": 1, "anthropicApiKey": "sk-ant-test"}
        assert store.get_api_key() == "sk-ant-test"
        assert store.is_ai_configured()

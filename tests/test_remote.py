"""Tests for RetroArch commands and the remote actions."""

import socket
from pathlib import Path

import psutil
import pytest

from retrodeck.core import remote
from retrodeck.core.remote import (
    RemoteControl,
    RetroArchCommander,
    ensure_network_cmd_enabled,
    kill_processes,
)
from retrodeck.models.state import ErrorState


class TestRetroArchConfig:
    def test_flips_disabled_setting(self, tmp_path: Path):
        cfg = tmp_path / "retroarch.cfg"
        cfg.write_text('video_fullscreen = "true"\nnetwork_cmd_enable = "false"\nnetwork_cmd_port = "55355"\n')

        assert ensure_network_cmd_enabled(cfg)
        text = cfg.read_text()
        assert 'network_cmd_enable = "true"' in text
        assert 'video_fullscreen = "true"' in text

    def test_already_enabled_untouched(self, tmp_path: Path):
        cfg = tmp_path / "retroarch.cfg"
        cfg.write_text('network_cmd_enable = "true"\n')
        assert not ensure_network_cmd_enabled(cfg)

    def test_missing_file(self, tmp_path: Path):
        assert not ensure_network_cmd_enabled(tmp_path / "retroarch.cfg")


class TestCommander:
    def test_sends_udp_datagram(self):
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as server:
            server.bind(("127.0.0.1", 0))
            server.settimeout(2.0)
            port = server.getsockname()[1]

            commander = RetroArchCommander("127.0.0.1", port)
            assert commander.save_state()
            data, _ = server.recvfrom(64)
            assert data == b"SAVE_STATE"

            assert commander.load_state()
            data, _ = server.recvfrom(64)
            assert data == b"LOAD_STATE"


class _FakeProc:
    def __init__(self, pid: int, name: str, gone: bool = False) -> None:
        self.pid = pid
        self.info = {"name": name}
        self.gone = gone
        self.killed = False

    def kill(self) -> None:
        if self.gone:
            raise psutil.NoSuchProcess(self.pid)
        self.killed = True


class TestKillProcesses:
    def test_only_targets_are_killed(self, monkeypatch):
        procs = [
            _FakeProc(1, "BigBox.exe"),
            _FakeProc(2, "explorer.exe"),
            _FakeProc(3, "RETROARCH.EXE"),
            _FakeProc(4, "dolphin.exe", gone=True),
        ]
        monkeypatch.setattr(remote.psutil, "process_iter", lambda attrs=None: iter(procs))

        assert kill_processes() == 2
        assert [p.killed for p in procs] == [True, False, True, False]

    def test_versioned_emulator_builds_are_killed(self, monkeypatch, plugin_manager):
        procs = [_FakeProc(1, "pcsx2-qt.exe"), _FakeProc(2, "notepad.exe")]
        monkeypatch.setattr(remote.psutil, "process_iter", lambda attrs=None: iter(procs))

        assert kill_processes(is_emulator=lambda n: plugin_manager.find_for_process(n) is not None) == 1
        assert [p.killed for p in procs] == [True, False]

    def test_exact_names_only_without_registry(self, monkeypatch):
        procs = [_FakeProc(1, "pcsx2-qt.exe")]
        monkeypatch.setattr(remote.psutil, "process_iter", lambda attrs=None: iter(procs))

        assert kill_processes() == 0


class TestRemoteControl:
    def test_demo_mode_does_nothing(self, tmp_path: Path):
        errors = []
        rc = RemoteControl(tmp_path / "BigBox.exe", RetroArchCommander(), errors.append, allow_system_actions=False)
        assert rc.close_game() == 0
        assert not rc.launch_bigbox()
        assert not rc.shutdown()
        assert errors == []

    def test_missing_bigbox_reports_error(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(remote, "kill_processes", lambda *args, **kwargs: 0)
        errors = []
        rc = RemoteControl(tmp_path / "BigBox.exe", RetroArchCommander(), errors.append, allow_system_actions=True)

        assert not rc.launch_bigbox()
        assert len(errors) == 1
        assert isinstance(errors[0], ErrorState)
        assert "BigBox" in errors[0].message

    def test_close_game_failure_reports_error(self, tmp_path: Path, monkeypatch):
        def boom(*args, **kwargs):
            raise psutil.Error("denied")

        monkeypatch.setattr(remote, "kill_processes", boom)
        errors = []
        rc = RemoteControl(tmp_path / "BigBox.exe", RetroArchCommander(), errors.append, allow_system_actions=True)

        assert rc.close_game() == 0
        assert [e.status for e in errors] == ["error"]

    def test_close_game_uses_plugin_registry(self, tmp_path: Path, monkeypatch, plugin_manager):
        procs = [_FakeProc(1, "pcsx2-v1.7.exe"), _FakeProc(2, "BigBox.exe")]
        monkeypatch.setattr(remote.psutil, "process_iter", lambda attrs=None: iter(procs))
        rc = RemoteControl(
            tmp_path / "BigBox.exe", RetroArchCommander(), [].append,
            allow_system_actions=True,
            is_emulator=lambda n: plugin_manager.find_for_process(n) is not None,
        )

        assert rc.close_game() == 2
        assert all(p.killed for p in procs)

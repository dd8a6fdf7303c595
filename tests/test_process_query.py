"""Tests for the async process query."""

import asyncio
import threading
import time

import psutil

from retrodeck.core import process_query
from retrodeck.core.process_query import DetectedProcess, ProcessQuery


class _FakeProc:
    def __init__(self, pid, name, cmdline):
        self.info = {"pid": pid, "name": name, "cmdline": cmdline}


def test_only_registered_emulators_returned(monkeypatch, plugin_manager):
    procs = [
        _FakeProc(10, "explorer.exe", ["explorer.exe"]),
        _FakeProc(11, "retroarch.exe", ["retroarch.exe", "-L", "cores\\n64.dll", "C:\\Games\\Mario 64.z64"]),
        _FakeProc(12, "pcsx2-qt.exe", None),
    ]
    monkeypatch.setattr(process_query.psutil, "process_iter", lambda attrs=None: iter(procs))

    found = asyncio.run(ProcessQuery(plugin_manager)())
    assert [p.name for p in found] == ["retroarch.exe", "pcsx2-qt.exe"]
    assert found[0].command_line == '"retroarch.exe" -L "cores\\n64.dll" "C:\\Games\\Mario 64.z64"'
    assert found[0].pid == 11
    assert found[1].command_line == ""


def test_timeout_reads_as_nothing_running(monkeypatch, plugin_manager):
    def slow_scan(matches):
        time.sleep(0.3)
        return []

    monkeypatch.setattr(process_query, "scan_processes", slow_scan)
    assert asyncio.run(ProcessQuery(plugin_manager, timeout=0.05)()) == []


def test_psutil_failure_reads_as_nothing_running(monkeypatch, plugin_manager):
    def broken(attrs=None):
        raise psutil.AccessDenied()

    monkeypatch.setattr(process_query.psutil, "process_iter", broken)
    assert asyncio.run(ProcessQuery(plugin_manager)()) == []


def test_hung_scan_blocks_new_scans_until_it_ends(monkeypatch, plugin_manager):
    release = threading.Event()
    calls = []

    def scan(matches):
        calls.append(1)
        if len(calls) == 1:
            release.wait(5)
        return [DetectedProcess(name="retroarch.exe", command_line="", pid=1)]

    monkeypatch.setattr(process_query, "scan_processes", scan)
    query = ProcessQuery(plugin_manager, timeout=0.05)

    async def scenario():
        first = await query()
        second = await query()
        assert query.is_scanning
        release.set()
        for _ in range(200):
            if not query.is_scanning:
                break
            await asyncio.sleep(0.01)
        third = await query()
        return first, second, third

    first, second, third = asyncio.run(scenario())
    assert first == [] and second == []
    assert [p.name for p in third] == ["retroarch.exe"]
    assert len(calls) == 2

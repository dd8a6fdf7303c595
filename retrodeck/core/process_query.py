"""OS process query: finds running emulator processes and their command lines.

The scan itself is blocking (psutil walks the whole process table), so it
runs in the default executor and is bounded by a timeout.  Any failure,
timeout included, is reported the same way as "nothing running".
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Sequence

import psutil
from loguru import logger

from retrodeck.plugins.plugin_manager import PluginManager


@dataclass(frozen=True)
class DetectedProcess:
    """A running process that matched the emulator registry."""

    name: str
    """Executable name (e.g. 'retroarch.exe')."""

    command_line: str
    """Command line rebuilt with path arguments quoted."""

    pid: int = 0


def _quote_arg(arg: str) -> str:
    if not arg or arg.startswith("-") or '"' in arg:
        return arg
    return f'"{arg}"'


def build_command_line(args: Sequence[str]) -> str:
    """Rebuild a command line string from psutil's argument list.

    Non-flag arguments are quoted, which reproduces how frontends write
    them (``-L "cores\\core.dll" -f "C:\\Games\\rom.z64"``) and keeps paths
    with spaces in one piece for the ROM extractor.
    """
    return " ".join(_quote_arg(a) for a in args)


def scan_processes(matches: Callable[[str], bool]) -> list[DetectedProcess]:
    """Blocking scan of the process table."""
    found: list[DetectedProcess] = []
    for proc in psutil.process_iter(["pid", "name", "cmdline"]):
        try:
            name = proc.info.get("name") or ""
            if not name or not matches(name):
                continue
            args = proc.info.get("cmdline") or []
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
        found.append(DetectedProcess(
            name=name,
            command_line=build_command_line(args),
            pid=proc.info.get("pid") or 0,
        ))
    return found


def _consume_result(future: asyncio.Future) -> None:
    if not future.cancelled() and future.exception() is not None:
        logger.debug("Abandoned process query failed: {}", future.exception())


class ProcessQuery:
    """Async, time-bounded query for processes known to the plugin registry."""

    def __init__(self, plugin_manager: PluginManager, timeout: float = 5.0) -> None:
        self._pm = plugin_manager
        self._timeout = timeout
        self._inflight: asyncio.Future | None = None

    def _matches(self, process_name: str) -> bool:
        return self._pm.find_for_process(process_name) is not None

    @property
    def is_scanning(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def __call__(self) -> list[DetectedProcess]:
        """Scan once.  A scan that outlived its timeout blocks new ones until it ends."""
        if self.is_scanning:
            logger.debug("Previous process query still running, skipping")
            return []
        loop = asyncio.get_running_loop()
        scan = loop.run_in_executor(None, scan_processes, self._matches)
        scan.add_done_callback(_consume_result)
        self._inflight = scan
        try:
            return await asyncio.wait_for(asyncio.shield(scan), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.debug("Process query timed out after {}s", self._timeout)
        except (psutil.Error, OSError) as e:
            logger.debug("Process query failed: {}", e)
        return []

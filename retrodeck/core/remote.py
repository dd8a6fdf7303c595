"""Remote actions the dashboard can trigger on the gaming PC.

* RetroArch save / load state over its UDP network-command interface
* close the running game (kill BigBox, LaunchBox and every emulator)
* shut the machine down
* start BigBox

Failures of the last three are surfaced to the dashboard as an
:class:`ErrorState` through the watcher.
"""

from __future__ import annotations

import platform
import re
import socket
import subprocess
from pathlib import Path
from typing import Callable, Iterable

import psutil
from loguru import logger

from retrodeck.models.state import ErrorState

RETROARCH_UDP_HOST = "127.0.0.1"
RETROARCH_UDP_PORT = 55355

SAVE_STATE = "SAVE_STATE"
LOAD_STATE = "LOAD_STATE"

KILL_TARGETS = (
    "BigBox.exe",
    "LaunchBox.exe",
    "retroarch.exe",
    "dolphin.exe",
    "xemu.exe",
    "pcsx2.exe",
)

_NETWORK_CMD_RE = re.compile(r'^(network_cmd_enable\s*=\s*)"false"', re.MULTILINE)


def is_windows() -> bool:
    return platform.system() == "Windows"


# -----------------------------------------------------------------------
# RetroArch
# -----------------------------------------------------------------------

def ensure_network_cmd_enabled(cfg_path: Path) -> bool:
    """Flip ``network_cmd_enable = "false"`` to ``"true"`` in *cfg_path*.

    Returns ``True`` if the file was changed.  A missing file or a file
    without the setting is left alone.
    """
    if not cfg_path.is_file():
        logger.info("RetroArch config not found at {}, skipping network command setup", cfg_path)
        return False
    try:
        text = cfg_path.read_text(encoding="utf-8")
        updated = _NETWORK_CMD_RE.sub(r'\1"true"', text)
        if updated == text:
            logger.debug("network_cmd_enable already true (or not present)")
            return False
        cfg_path.write_text(updated, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to update {}: {}", cfg_path, e)
        return False
    logger.info("Enabled network_cmd_enable in {}", cfg_path)
    return True


class RetroArchCommander:
    """Fire-and-forget UDP commands to RetroArch."""

    def __init__(self, host: str = RETROARCH_UDP_HOST, port: int = RETROARCH_UDP_PORT) -> None:
        self.host = host
        self.port = port

    def send(self, command: str) -> bool:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.sendto(command.encode("ascii"), (self.host, self.port))
        except OSError as e:
            logger.error("Failed to send {} to RetroArch: {}", command, e)
            return False
        logger.info("Sent to RetroArch: {}", command)
        return True

    def save_state(self) -> bool:
        return self.send(SAVE_STATE)

    def load_state(self) -> bool:
        return self.send(LOAD_STATE)


# -----------------------------------------------------------------------
# Processes
# -----------------------------------------------------------------------

def kill_processes(
    targets: Iterable[str] = KILL_TARGETS,
    is_emulator: Callable[[str], bool] | None = None,
) -> int:
    """Kill every process whose name matches one of *targets* (case-insensitive)
    or that *is_emulator* recognises (versioned builds such as ``pcsx2-qt.exe``).

    Returns the number of processes killed.  Processes that exit on their
    own while we look at them are skipped.
    """
    wanted = {t.lower() for t in targets}
    killed = 0
    for proc in psutil.process_iter(["name"]):
        name = proc.info.get("name") or ""
        if name.lower() not in wanted and not (is_emulator and name and is_emulator(name)):
            continue
        try:
            proc.kill()
            killed += 1
            logger.info("Killed {} (pid {})", name, proc.pid)
        except psutil.NoSuchProcess:
            continue
        except psutil.AccessDenied as e:
            logger.warning("Cannot kill {}: {}", name, e)
    return killed


class RemoteControl:
    """The dashboard's action bar.

    *set_error* receives an :class:`ErrorState` when an action fails; in the
    application this is :meth:`GameWatcher.set_state`.
    *is_emulator* widens Close Game to every executable the plugin registry
    recognises.
    """

    def __init__(
        self,
        bigbox_path: Path,
        commander: RetroArchCommander,
        set_error,
        allow_system_actions: bool | None = None,
        is_emulator: Callable[[str], bool] | None = None,
    ) -> None:
        self._bigbox_path = bigbox_path
        self._commander = commander
        self._set_error = set_error
        self._is_emulator = is_emulator
        self._system = is_windows() if allow_system_actions is None else allow_system_actions

    @property
    def commander(self) -> RetroArchCommander:
        return self._commander

    def save_state(self) -> bool:
        return self._commander.save_state()

    def load_state(self) -> bool:
        return self._commander.load_state()

    def close_game(self) -> int:
        """Kill the front-end and every known emulator."""
        if not self._system:
            logger.info("Demo mode: would kill {}", ", ".join(KILL_TARGETS))
            return 0
        try:
            return kill_processes(KILL_TARGETS, self._is_emulator)
        except psutil.Error as e:
            logger.error("Failed to close game: {}", e)
            self._set_error(ErrorState(f"Could not close the game: {e}"))
            return 0

    def shutdown(self) -> bool:
        """Close everything and power the machine off in five seconds."""
        self.close_game()
        if not self._system:
            logger.info("Demo mode: would shut down the system")
            return False
        try:
            subprocess.Popen(["shutdown", "/s", "/t", "5"])
        except OSError as e:
            logger.error("Failed to initiate shutdown: {}", e)
            self._set_error(ErrorState(f"Shutdown failed: {e}"))
            return False
        logger.info("System shutting down in 5 seconds")
        return True

    def launch_bigbox(self) -> bool:
        """Close whatever is running and start BigBox."""
        self.close_game()
        if not self._system:
            logger.info("Demo mode: would launch {}", self._bigbox_path)
            return False
        if not self._bigbox_path.is_file():
            logger.error("BigBox not found at {}", self._bigbox_path)
            self._set_error(ErrorState(f"BigBox not found: {self._bigbox_path}"))
            return False
        try:
            subprocess.Popen([str(self._bigbox_path)], cwd=str(self._bigbox_path.parent))
        except OSError as e:
            logger.error("Failed to start BigBox: {}", e)
            self._set_error(ErrorState(f"Could not start BigBox: {e}"))
            return False
        logger.info("BigBox started")
        return True

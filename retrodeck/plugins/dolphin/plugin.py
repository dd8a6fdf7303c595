"""Dolphin emulator plugin: GameCube / Wii detection and GCPad profile reading."""

from __future__ import annotations

import configparser
import re
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from retrodeck.models.controls import ControllerPositionMap, POSITION_KEYS
from retrodeck.plugins.base import EmulatorPlugin, strip_quotes

# ``Dolphin.exe --exec="D:\iso\game.iso"`` (optionally followed by more flags)
_EXEC_RE = re.compile(r"--exec=[\"']?(.+?)[\"']?(?:\s+-|$)", re.IGNORECASE)

# Dolphin/SDL/XInput input names → reference-controller positions.
# South/West/North/East are the physical face-button positions.
_XINPUT_TO_POSITION: dict[str, str] = {
    "Button S": "faceBottom",
    "Button W": "faceLeft",
    "Button N": "faceTop",
    "Button E": "faceRight",
    "Shoulder L": "shoulderL",
    "Shoulder R": "shoulderR",
    "Trigger L": "triggerL",
    "Trigger R": "triggerR",
    "Start": "start",
    "Back": "select",
    "Thumb L": "l3",
    "Thumb R": "r3",
}

# GCPad profile keys we read → GameCube button label
_GC_BUTTONS: dict[str, str] = {
    "Buttons/A": "A",
    "Buttons/B": "B",
    "Buttons/X": "X",
    "Buttons/Y": "Y",
    "Buttons/Z": "Z",
    "Buttons/Start": "Start",
    "Triggers/L": "L",
    "Triggers/R": "R",
}

# Analog inputs are always bound the same way by Dolphin's XInput defaults.
_STANDARD_ANALOG: dict[str, str] = {
    "leftStick": "Stick",
    "rightStick": "C-Stick",
    "dpad": "D-Pad",
}

_BACKTICK_RE = re.compile(r"`([^`]+)`")

# Minimum derived bindings for a profile to count as usable
_MIN_PROFILE_BINDINGS = 3


def gcpad_profile_dir(launchbox_dir: Path) -> Path:
    """Dolphin's GCPad profile folder inside a LaunchBox install."""
    return launchbox_dir / "Emulators" / "Dolphin" / "User" / "Config" / "Profiles" / "GCPad"


@dataclass
class GcPadProfile:
    """Bindings read from a Dolphin GCPad profile INI."""

    source: str
    """Profile filename (e.g. '8BitDo.ini')."""

    bindings: ControllerPositionMap = field(default_factory=dict)
    """Position key → GameCube button label (e.g. 'faceBottom' → 'A')."""

    def to_position_map(self) -> ControllerPositionMap:
        """Bindings plus the standard analog assignments, in position order."""
        merged = {**_STANDARD_ANALOG, **self.bindings}
        return {k: merged[k] for k in POSITION_KEYS if k in merged}

    def describe(self) -> str:
        """Human-readable rule list for the generation prompt."""
        lines = [f"- GC {label} → {pos}" for pos, label in self.bindings.items()]
        lines.append("- GC Control Stick → leftStick")
        lines.append("- GC C-Stick → rightStick")
        lines.append("- GC D-Pad → dpad")
        return f"Dolphin controller mapping (read from {self.source}):\n" + "\n".join(lines)


def _parse_binding(value: str) -> str:
    """Return the input name from a Dolphin expression like ```Button S```."""
    m = _BACKTICK_RE.search(value)
    if m:
        return m.group(1).strip()
    return value.strip().strip("`").strip()


def read_gcpad_profile(profile_dir: Path) -> GcPadProfile | None:
    """Parse the first ``*.ini`` profile in *profile_dir*.

    Returns ``None`` when the folder is missing, holds no profile, or the
    profile yields fewer than three bindings on the reference controller.
    """
    try:
        files = sorted(p for p in profile_dir.iterdir() if p.suffix.lower() == ".ini")
    except OSError as e:
        logger.debug("No Dolphin GCPad profiles at {}: {}", profile_dir, e)
        return None
    if not files:
        return None

    profile_path = files[0]
    parser = configparser.ConfigParser(strict=False, interpolation=None)
    parser.optionxform = str  # type: ignore[assignment]
    try:
        parser.read(str(profile_path), encoding="utf-8")
    except (configparser.Error, OSError, UnicodeDecodeError) as e:
        logger.debug("Failed to parse Dolphin profile {}: {}", profile_path, e)
        return None

    logger.info("Reading Dolphin GCPad profile: {}", profile_path.name)
    bindings: ControllerPositionMap = {}
    for section in parser.sections():
        for key, value in parser.items(section):
            gc_label = _GC_BUTTONS.get(key.strip())
            if gc_label is None:
                continue
            position = _XINPUT_TO_POSITION.get(_parse_binding(value))
            if position and position not in bindings:
                bindings[position] = gc_label

    if len(bindings) < _MIN_PROFILE_BINDINGS:
        logger.debug("Profile {} has only {} usable bindings", profile_path.name, len(bindings))
        return None

    return GcPadProfile(source=profile_path.name, bindings=bindings)


class DolphinPlugin(EmulatorPlugin):
    """Plugin for Dolphin: GameCube / Wii emulator."""

    @property
    def name(self) -> str:
        return "Dolphin"

    @property
    def process_name(self) -> str:
        return "Dolphin.exe"

    @property
    def display_name(self) -> str:
        return "Dolphin (GameCube / Wii)"

    def parse_rom_path(self, cmdline: str) -> str:
        """``--exec=<path>`` first, then the shared strategy."""
        if not cmdline:
            return ""
        m = _EXEC_RE.search(cmdline)
        if m:
            path = strip_quotes(m.group(1))
            if path:
                return path
        return super().parse_rom_path(cmdline)

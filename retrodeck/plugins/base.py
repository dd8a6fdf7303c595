"""Abstract base class for emulator plugins.

Each plugin describes one emulator the watcher can recognise in the OS
process list, and knows how to pull the running ROM out of that
emulator's command line.

Command-line parsing
~~~~~~~~~~~~~~~~~~~~
Frontends launch emulators with ad-hoc argument formats.  The shared
strategy implemented by :meth:`EmulatorPlugin.parse_rom_path` collects
every quoted substring plus the final whitespace-delimited token and
returns the first one with a known ROM / disc / archive extension::

    retroarch.exe -L "cores\\mupen64plus_next_libretro.dll" -f "C:\\Games\\Mario.z64"
                      ^ .dll: rejected                           ^ .z64: picked

Plugins with a more specific format override it and fall back to the
shared strategy.  Parsing never raises; ``""`` means "nothing plausible".
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod


ROM_EXTENSIONS: frozenset[str] = frozenset({
    # Nintendo 64
    "z64", "n64", "v64",
    # SNES
    "sfc", "smc", "fig",
    # NES / Famicom
    "nes", "unf", "fds",
    # Game Boy / GBA
    "gba", "gbc", "gb", "sgb",
    # DS / 3DS
    "nds", "3ds",
    # Disc-based (PS1, PS2, Saturn …)
    "iso", "bin", "cue", "img", "mdf", "chd", "pbp", "cso", "ecm",
    # GameCube / Wii
    "gcm", "gcz", "wbfs", "wad", "rvz", "dol", "elf",
    # Switch
    "nsp", "xci",
    # Genesis / Mega Drive / 32X
    "gen", "md", "smd", "32x",
    # Other Sega
    "gg", "sms", "sg",
    # PC Engine / TurboGrafx
    "pce",
    # Neo Geo Pocket
    "ngp", "ngc",
    # WonderSwan
    "ws", "wsc",
    # Atari
    "a26", "a78", "lnx",
    # Other
    "vec", "col",
    # Compressed
    "zip", "7z",
})

_QUOTED_RE = re.compile(r"\"([^\"]+)\"|'([^']+)'")
_EXT_RE = re.compile(r"\.(\w+)$")


def strip_quotes(text: str) -> str:
    """Drop one pair of matching surrounding quotes; inner apostrophes stay."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text.strip("\"")


def is_rom_extension(ext: str) -> bool:
    return ext.lower() in ROM_EXTENSIONS


def extract_paths_from_cmdline(cmdline: str) -> list[str]:
    """All quoted substrings, then the last whitespace-separated token."""
    paths = [m.group(1) or m.group(2) for m in _QUOTED_RE.finditer(cmdline)]
    tokens = cmdline.strip().split()
    if tokens:
        last = strip_quotes(tokens[-1])
        if last:
            paths.append(last)
    return paths


def find_rom_path(paths: list[str]) -> str:
    """First candidate whose extension is a known ROM format, else ``""``."""
    for p in paths:
        m = _EXT_RE.search(p.strip())
        if m and is_rom_extension(m.group(1)):
            return p.strip()
    return ""


class EmulatorPlugin(ABC):
    """Base class that every emulator plugin must implement."""

    #: Whether the emulator accepts RetroArch network commands
    #: (save / load state from the dashboard).
    supports_network_commands: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name of the emulator (e.g. 'RetroArch')."""
        ...

    @property
    @abstractmethod
    def process_name(self) -> str:
        """Executable name as reported by the OS (e.g. 'retroarch.exe')."""
        ...

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        return self.name

    @property
    def process_prefix(self) -> str | None:
        """Lowercase executable prefix catching versioned variants, or None.

        PCSX2 ships as ``pcsx2-qt.exe``, ``pcsx2-v1.7.exe`` … so it matches
        on ``pcsx2`` rather than on an exact name.
        """
        return None

    def matches_process(self, process_name: str) -> bool:
        """Exact (case-insensitive) name match, or prefix match if declared."""
        lower = process_name.lower()
        if lower == self.process_name.lower():
            return True
        prefix = self.process_prefix
        return bool(prefix) and lower.startswith(prefix)

    def parse_rom_path(self, cmdline: str) -> str:
        """Extract the running ROM path from a raw command line."""
        if not cmdline:
            return ""
        return find_rom_path(extract_paths_from_cmdline(cmdline))

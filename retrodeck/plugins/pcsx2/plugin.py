"""PCSX2 emulator plugin: PlayStation 2 detection."""

from __future__ import annotations

import re

from retrodeck.plugins.base import EmulatorPlugin, strip_quotes

# ``pcsx2-qt.exe -fullscreen -- "E:\PS2\game.iso"``
_DASH_DASH_RE = re.compile(r"(?:^|\s)--\s+[\"']?(.+?)[\"']?\s*$")


class Pcsx2Plugin(EmulatorPlugin):
    """Plugin for PCSX2.

    The executable name changes between releases (``pcsx2.exe``,
    ``pcsx2-qt.exe``, ``pcsx2-v1.7.exe`` …), hence the prefix match.
    """

    @property
    def name(self) -> str:
        return "PCSX2"

    @property
    def process_name(self) -> str:
        return "pcsx2.exe"

    @property
    def process_prefix(self) -> str | None:
        return "pcsx2"

    def parse_rom_path(self, cmdline: str) -> str:
        """Path after a ``--`` separator first, then the shared strategy."""
        if not cmdline:
            return ""
        m = _DASH_DASH_RE.search(cmdline)
        if m:
            path = strip_quotes(m.group(1))
            if path:
                return path
        return super().parse_rom_path(cmdline)

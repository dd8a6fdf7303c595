"""RetroArch plugin: the multi-system libretro frontend BigBox launches for most platforms."""

from __future__ import annotations

from retrodeck.plugins.base import EmulatorPlugin


class RetroArchPlugin(EmulatorPlugin):
    """Plugin for RetroArch.

    BigBox launches it as ``retroarch.exe -L "cores\\<core>.dll" -f "<rom>"``
    where ``-f`` is the fullscreen flag and the ROM is positional, so the
    shared extension-based strategy is enough.
    """

    supports_network_commands = True

    @property
    def name(self) -> str:
        return "RetroArch"

    @property
    def process_name(self) -> str:
        return "retroarch.exe"

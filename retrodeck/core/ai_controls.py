"""Per-game controller mapping resolution.

Resolution order
────────────────
1. Manual override  (``game-controls-overrides.json``)
2. Generated cache  (``game-controls.json``, version-gated)
3. Generation on a combined miss, then cached
4. Fallback → the GameCube profile bindings (when a Dolphin profile was
   read) or the static platform layout, else ``None``

Generation needs to know how the emulator maps the *original* console's
buttons onto the reference controller, otherwise it guesses by name
(N64 "A" is not the controller's A: Mupen64Plus puts it on the bottom
face button).  For GameCube the user's actual Dolphin GCPad profile is
the authoritative source and is read once per process.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Awaitable, Callable, Optional

from loguru import logger

from retrodeck.core.controller_layouts import get_controller_layout
from retrodeck.core.controls_cache import ControlsStore
from retrodeck.models.controls import ControllerPositionMap, sanitize_position_map
from retrodeck.plugins.dolphin.plugin import GcPadProfile, gcpad_profile_dir, read_gcpad_profile

TextGenerator = Callable[[str, str], Awaitable[Optional[str]]]

GAMECUBE = "Nintendo GameCube"

# Fewer recognised keys than this means a degenerate response
MIN_GENERATED_KEYS = 2

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


# -----------------------------------------------------------------------
# Emulator core mappings (original console button → position key)
# -----------------------------------------------------------------------

CORE_MAPPINGS: dict[str, str] = {
    "Nintendo 64": """RetroArch Mupen64Plus-Next core default mapping for N64:
- N64 A button → faceBottom (B on controller)
- N64 B button → faceLeft (Y on controller)
- N64 Z Trigger → triggerL (ZL on controller)
- N64 L shoulder → shoulderL (L on controller)
- N64 R shoulder → shoulderR (R on controller)
- N64 C-buttons → rightStick (right analog stick on controller)
- N64 Start → start
- N64 Control Stick → leftStick
- N64 D-Pad → dpad""",

    "Super Nintendo Entertainment System": """RetroArch SNES cores map 1:1 with the RetroPad:
- SNES B → faceBottom (B on controller)
- SNES A → faceRight (A on controller)
- SNES Y → faceLeft (Y on controller)
- SNES X → faceTop (X on controller)
- SNES L → shoulderL (L on controller)
- SNES R → shoulderR (R on controller)
- SNES Start → start
- SNES Select → select
- SNES D-Pad → dpad""",

    "Nintendo Entertainment System": """RetroArch NES core mapping:
- NES A → faceRight (A on controller)
- NES B → faceBottom (B on controller)
- NES Start → start
- NES Select → select
- NES D-Pad → dpad""",

    "Sony Playstation": """RetroArch PS1 core mapping:
- PS1 Cross → faceBottom (B on controller)
- PS1 Circle → faceRight (A on controller)
- PS1 Square → faceLeft (Y on controller)
- PS1 Triangle → faceTop (X on controller)
- PS1 L1 → shoulderL
- PS1 R1 → shoulderR
- PS1 L2 → triggerL (ZL)
- PS1 R2 → triggerR (ZR)
- PS1 Start → start
- PS1 Select → select
- PS1 Left Stick → leftStick
- PS1 Right Stick → rightStick
- PS1 D-Pad → dpad""",

    "Sony Playstation 2": """PS2 controller mapping:
- PS2 Cross → faceBottom (B on controller)
- PS2 Circle → faceRight (A on controller)
- PS2 Square → faceLeft (Y on controller)
- PS2 Triangle → faceTop (X on controller)
- PS2 L1 → shoulderL
- PS2 R1 → shoulderR
- PS2 L2 → triggerL (ZL)
- PS2 R2 → triggerR (ZR)
- PS2 L3 → l3
- PS2 R3 → r3
- PS2 Start → start
- PS2 Select → select
- PS2 Left Stick → leftStick
- PS2 Right Stick → rightStick
- PS2 D-Pad → dpad""",

    GAMECUBE: """Dolphin default mapping (no profile found):
- GC A → faceBottom (B on controller)
- GC B → faceLeft (Y on controller)
- GC X → faceTop (X on controller)
- GC Y → faceRight (A on controller)
- GC Z → shoulderR (R on controller)
- GC L → triggerL (ZL on controller)
- GC R → triggerR (ZR on controller)
- GC Start → start
- GC Control Stick → leftStick
- GC C-Stick → rightStick
- GC D-Pad → dpad""",

    "Sega Genesis": """RetroArch Genesis Plus GX core mapping (6-button pad):
- Genesis A → faceLeft (Y on controller)
- Genesis B → faceBottom (B on controller)
- Genesis C → faceRight (A on controller)
- Genesis X → shoulderL (L on controller)
- Genesis Y → faceTop (X on controller)
- Genesis Z → shoulderR (R on controller)
- Genesis Start → start
- Genesis Mode → select
- Genesis D-Pad → dpad""",

    "Nintendo Game Boy Advance": """RetroArch GBA core mapping:
- GBA A → faceRight (A on controller)
- GBA B → faceBottom (B on controller)
- GBA L → shoulderL (L on controller)
- GBA R → shoulderR (R on controller)
- GBA Start → start
- GBA Select → select
- GBA D-Pad → dpad""",
}


_PROMPT_TEMPLATE = """You are a retro gaming expert. For the game "{title}" on {platform}, give the in-game action for each controller button position.

The position keys refer to a modern controller (8BitDo Pro 3 / Switch layout):
- faceBottom = B button (bottom face button)
- faceRight = A button (right face button)
- faceLeft = Y button (left face button)
- faceTop = X button (top face button)
- shoulderL = L bumper
- shoulderR = R bumper
- triggerL = ZL trigger
- triggerR = ZR trigger
- dpad = directional pad
- leftStick = left analog stick
- rightStick = right analog stick
- l3 = left stick click
- r3 = right stick click
- start = + button
- select = - button{mapping_section}

Each label must be the in-game ACTION in "{title}" (what pressing the button does), not the original console's button name. Use the game's default control scheme.

Several positions may share the same label if the game binds them to the same function.

If you are unsure what a button does in this game, leave it out. Accuracy matters more than completeness.

Reply with ONLY a JSON object mapping position keys to short action labels (1-2 words, e.g. "Jump", "Attack", "Move", "Menu"). Include only positions the game uses.

Example for Super Mario 64 (N64):
{{"faceBottom":"Jump","faceLeft":"Punch","triggerL":"Crouch","shoulderR":"Camera","leftStick":"Move","rightStick":"C-Buttons","start":"Pause"}}"""


def build_prompt(title: str, platform: str, core_mapping: str = "") -> str:
    mapping_section = ""
    if core_mapping:
        mapping_section = (
            "\n\nIMPORTANT: use this emulator mapping to decide which position each original "
            "game button lands on. Do NOT map by button name:\n" + core_mapping
        )
    return _PROMPT_TEMPLATE.format(title=title, platform=platform, mapping_section=mapping_section)


def parse_response(text: str | None) -> ControllerPositionMap | None:
    """Extract a position map from free-form generated text.

    The first ``{...}`` span is parsed as JSON; unknown keys and non-string
    values are dropped.  Fewer than two recognised keys → ``None``.
    """
    if not text:
        return None
    m = _JSON_OBJECT_RE.search(text)
    if not m:
        return None
    try:
        parsed = json.loads(m.group(0))
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None

    result = sanitize_position_map(parsed)
    if len(result) < MIN_GENERATED_KEYS:
        return None
    return result


# -----------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------

class ControllerMapResolver:
    """Layered lookup of a game's controller map."""

    def __init__(
        self,
        store: ControlsStore,
        generator: TextGenerator | None,
        launchbox_dir: Path,
        generation_timeout: float = 30.0,
    ) -> None:
        self._store = store
        self._generate = generator
        self._launchbox_dir = Path(launchbox_dir)
        self._timeout = generation_timeout
        self._gcpad_loaded = False
        self._gcpad_profile: GcPadProfile | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def store(self) -> ControlsStore:
        return self._store

    def is_ai_configured(self) -> bool:
        return self._generate is not None and self._store.is_ai_configured()

    def save_override(self, title: str, position_key: str, label: str) -> None:
        self._store.save_override(title, position_key, label)

    async def resolve(self, title: str, platform: str) -> ControllerPositionMap | None:
        """Controller map for *title*, or ``None`` if nothing is known."""
        known = self._store.get(title)
        if known is not None:
            return known

        generated = await self.generate(title, platform)
        if generated is not None:
            self._store.save_generated(title, generated)
            return generated

        return self.fallback(platform)

    def fallback(self, platform: str) -> ControllerPositionMap | None:
        if platform == GAMECUBE:
            profile = self.gamecube_profile()
            if profile is not None:
                return profile.to_position_map()
        return get_controller_layout(platform)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def gamecube_profile(self) -> GcPadProfile | None:
        """The Dolphin GCPad profile, read on first use."""
        if not self._gcpad_loaded:
            self._gcpad_loaded = True
            self._gcpad_profile = read_gcpad_profile(gcpad_profile_dir(self._launchbox_dir))
        return self._gcpad_profile

    def core_mapping_context(self, platform: str) -> str:
        if platform == GAMECUBE:
            profile = self.gamecube_profile()
            if profile is not None:
                return profile.describe()
        return CORE_MAPPINGS.get(platform, "")

    async def generate(self, title: str, platform: str) -> ControllerPositionMap | None:
        """Ask the text generator for a mapping.  Never raises."""
        if self._generate is None:
            return None
        api_key = self._store.get_api_key()
        if not api_key:
            logger.info("No API key configured, skipping generation")
            return None

        prompt = build_prompt(title, platform, self.core_mapping_context(platform))
        logger.info("Generating controls for \"{}\" ({})", title, platform)
        try:
            text = await asyncio.wait_for(self._generate(prompt, api_key), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Generation timed out for \"{}\"", title)
            return None
        except Exception as e:
            logger.warning("Generation failed for \"{}\": {}", title, e)
            return None

        positions = parse_response(text)
        if positions is None:
            logger.info("Failed to parse generated controls for \"{}\"", title)
            return None
        logger.info("Generated {} mappings for \"{}\"", len(positions), title)
        return positions

"""Controller position keys and the position → action map type."""

from __future__ import annotations

from typing import Any, Mapping

# Physical positions on the reference controller (8BitDo Pro 3, Switch layout).
POSITION_KEYS: tuple[str, ...] = (
    "faceBottom",   # B
    "faceRight",    # A
    "faceLeft",     # Y
    "faceTop",      # X
    "shoulderL",    # L
    "shoulderR",    # R
    "triggerL",     # ZL
    "triggerR",     # ZR
    "dpad",
    "leftStick",
    "rightStick",
    "l3",
    "r3",
    "start",        # +
    "select",       # −
)

POSITION_DISPLAY_NAMES: dict[str, str] = {
    "faceBottom": "B",
    "faceRight": "A",
    "faceLeft": "Y",
    "faceTop": "X",
    "shoulderL": "L",
    "shoulderR": "R",
    "triggerL": "ZL",
    "triggerR": "ZR",
    "dpad": "D-Pad",
    "leftStick": "L Stick",
    "rightStick": "R Stick",
    "l3": "L3",
    "r3": "R3",
    "start": "+",
    "select": "−",
}

ControllerPositionMap = dict[str, str]
"""Mapping of position key → short action label.  Omitted keys = unused."""


def is_position_key(key: str) -> bool:
    return key in POSITION_DISPLAY_NAMES


def sanitize_position_map(raw: Mapping[str, Any] | None) -> ControllerPositionMap:
    """Keep only known position keys with non-empty string labels.

    Output follows :data:`POSITION_KEYS` order.
    """
    if not raw:
        return {}
    result: ControllerPositionMap = {}
    for key in POSITION_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            result[key] = value.strip()
    return result

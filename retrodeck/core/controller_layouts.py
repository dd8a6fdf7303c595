"""Per-platform fallback controller layouts.

Used when no game-specific mapping is available.  Labels name the
*original* console button sitting at each position of the reference
controller (8BitDo Pro 3, Switch layout)::

    faceBottom=B  faceRight=A  faceLeft=Y  faceTop=X
    shoulderL=L   shoulderR=R  triggerL=ZL triggerR=ZR
    l3=L3  r3=R3  start=+  select=−
"""

from __future__ import annotations

from retrodeck.models.controls import ControllerPositionMap


_LAYOUTS: dict[str, ControllerPositionMap] = {
    "Nintendo 64": {
        "faceBottom": "A",
        "faceLeft": "B",
        "triggerL": "Z",
        "shoulderL": "L",
        "shoulderR": "R",
        "dpad": "D-Pad",
        "leftStick": "Stick",
        "rightStick": "C",
        "start": "Start",
    },
    "Sony Playstation 2": {
        "faceBottom": "×",
        "faceRight": "○",
        "faceLeft": "□",
        "faceTop": "△",
        "shoulderL": "L1",
        "shoulderR": "R1",
        "triggerL": "L2",
        "triggerR": "R2",
        "l3": "L3",
        "r3": "R3",
        "dpad": "D-Pad",
        "leftStick": "L Stick",
        "rightStick": "R Stick",
        "start": "Start",
        "select": "Select",
    },
    "Nintendo GameCube": {
        "faceBottom": "A",
        "faceLeft": "B",
        "faceTop": "X",
        "faceRight": "Y",
        "shoulderR": "Z",
        "triggerL": "L",
        "triggerR": "R",
        "dpad": "D-Pad",
        "leftStick": "Stick",
        "rightStick": "C-Stick",
        "start": "Start",
    },
    "Super Nintendo Entertainment System": {
        "faceRight": "A",
        "faceBottom": "B",
        "faceTop": "X",
        "faceLeft": "Y",
        "shoulderL": "L",
        "shoulderR": "R",
        "dpad": "D-Pad",
        "start": "Start",
        "select": "Select",
    },
    "Nintendo Entertainment System": {
        "faceRight": "A",
        "faceBottom": "B",
        "dpad": "D-Pad",
        "start": "Start",
        "select": "Select",
    },
    "Sega Genesis": {
        "faceLeft": "A",
        "faceBottom": "B",
        "faceRight": "C",
        "shoulderL": "X",
        "faceTop": "Y",
        "shoulderR": "Z",
        "dpad": "D-Pad",
        "start": "Start",
        "select": "Mode",
    },
    "Sony Playstation": {
        "faceBottom": "×",
        "faceRight": "○",
        "faceLeft": "□",
        "faceTop": "△",
        "shoulderL": "L1",
        "shoulderR": "R1",
        "triggerL": "L2",
        "triggerR": "R2",
        "dpad": "D-Pad",
        "leftStick": "L Stick",
        "rightStick": "R Stick",
        "start": "Start",
        "select": "Select",
    },
    "Nintendo Game Boy Advance": {
        "faceRight": "A",
        "faceBottom": "B",
        "shoulderL": "L",
        "shoulderR": "R",
        "dpad": "D-Pad",
        "start": "Start",
        "select": "Select",
    },
}


def get_controller_layout(platform: str) -> ControllerPositionMap | None:
    """Fallback layout for *platform*, or ``None`` if none is registered."""
    layout = _LAYOUTS.get(platform)
    return dict(layout) if layout is not None else None

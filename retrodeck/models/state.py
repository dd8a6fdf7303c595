"""Companion state: the single value broadcast to the dashboard.

A tagged union of three immutable variants.  Transitions always replace
the whole value; nothing is patched in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from retrodeck.models.controls import ControllerPositionMap
from retrodeck.models.game import GameRecord


@dataclass(frozen=True)
class IdleState:
    """No game detected."""

    status: str = "idle"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status}


@dataclass(frozen=True)
class GameActiveState:
    """A game is running in a known emulator."""

    game: GameRecord
    emulator_process: str
    controller_map: ControllerPositionMap | None = None
    status: str = "game-active"

    def with_controller_map(self, controller_map: ControllerPositionMap | None) -> GameActiveState:
        return replace(self, controller_map=dict(controller_map) if controller_map else None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status,
            "game": self.game.to_dict(),
            "emulatorProcess": self.emulator_process,
        }
        if self.controller_map is not None:
            data["controllerMap"] = dict(self.controller_map)
        return data


@dataclass(frozen=True)
class ErrorState:
    """Something outside the detection pipeline failed (launch, kill …)."""

    message: str
    status: str = "error"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message}


CompanionState = Union[IdleState, GameActiveState, ErrorState]

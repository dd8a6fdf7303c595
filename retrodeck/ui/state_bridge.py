"""Qt signal relay for watcher state changes."""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from retrodeck.core.watcher import GameWatcher
from retrodeck.models.state import CompanionState


class StateBridge(QObject):
    """Re-emits every :class:`CompanionState` as a Qt signal.

    Pages connect to :attr:`state_changed` instead of subscribing to the
    watcher directly, so they are disconnected automatically with the
    widgets that own the slots.
    """

    state_changed = Signal(object)

    def __init__(self, watcher: GameWatcher, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._watcher = watcher
        self._unsubscribe = watcher.subscribe(self._relay)

    @property
    def watcher(self) -> GameWatcher:
        return self._watcher

    def current_state(self) -> CompanionState:
        return self._watcher.current_state

    def detach(self) -> None:
        self._unsubscribe()

    def _relay(self, state: CompanionState) -> None:
        self.state_changed.emit(state)

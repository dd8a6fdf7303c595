"""Action bar: remote actions for the gaming PC."""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QHBoxLayout, QWidget
from qfluentwidgets import FluentIcon as FIF, PrimaryPushButton, PushButton


class ActionBar(QWidget):
    """Row of action buttons.

    Save / load state only make sense for emulators that accept network
    commands and are hidden otherwise.
    """

    save_state_requested = Signal()
    load_state_requested = Signal()
    close_game_requested = Signal()
    launch_requested = Signal()
    shutdown_requested = Signal()

    def __init__(self, labels: dict[str, str], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        row = QHBoxLayout(self)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(10)

        self._save_btn = PushButton(FIF.SAVE, labels["save_state"], self)
        self._load_btn = PushButton(FIF.HISTORY, labels["load_state"], self)
        self._close_btn = PushButton(FIF.CLOSE, labels["close_game"], self)
        self._launch_btn = PrimaryPushButton(FIF.PLAY, labels["launch"], self)
        self._shutdown_btn = PushButton(FIF.POWER_BUTTON, labels["shutdown"], self)

        self._save_btn.clicked.connect(self.save_state_requested)
        self._load_btn.clicked.connect(self.load_state_requested)
        self._close_btn.clicked.connect(self.close_game_requested)
        self._launch_btn.clicked.connect(self.launch_requested)
        self._shutdown_btn.clicked.connect(self.shutdown_requested)

        row.addWidget(self._save_btn)
        row.addWidget(self._load_btn)
        row.addWidget(self._close_btn)
        row.addStretch()
        row.addWidget(self._launch_btn)
        row.addWidget(self._shutdown_btn)

        self.set_game_active(False, False)

    def set_game_active(self, active: bool, network_commands: bool) -> None:
        self._save_btn.setVisible(active and network_commands)
        self._load_btn.setVisible(active and network_commands)
        self._close_btn.setEnabled(active)

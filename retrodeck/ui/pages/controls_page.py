"""Controls page: what each controller position does in the running game.

Every label can be edited in place; an edit is stored as a manual override
for the game's title and wins over generated mappings from then on.
"""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QGridLayout, QHBoxLayout, QVBoxLayout, QWidget
from qfluentwidgets import (
    BodyLabel, CaptionLabel, CardWidget, InfoBar, InfoBarPosition, LineEdit,
    SmoothScrollArea, StrongBodyLabel, SubtitleLabel, setFont,
)
from loguru import logger

from retrodeck.core.ai_controls import ControllerMapResolver
from retrodeck.core.watcher import GameWatcher
from retrodeck.i18n import t
from retrodeck.models.controls import POSITION_DISPLAY_NAMES, POSITION_KEYS
from retrodeck.models.state import CompanionState, GameActiveState


class ControlsPage(QWidget):
    """Reference card for the 15 controller positions."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("controls_page")
        self._resolver: ControllerMapResolver | None = None
        self._watcher: GameWatcher | None = None
        self._title: str | None = None
        self._shown: dict[str, str] = {}
        self._edits: dict[str, LineEdit] = {}
        self._init_ui()
        self.update_state(None)

    def set_resolver(self, resolver: ControllerMapResolver) -> None:
        self._resolver = resolver
        self._refresh_ai_hint()

    def set_watcher(self, watcher: GameWatcher) -> None:
        self._watcher = watcher

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------

    def _init_ui(self) -> None:
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)

        scroll = SmoothScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setStyleSheet("QScrollArea { border: none; background: transparent; }")

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(36, 20, 36, 20)
        layout.setSpacing(16)

        layout.addWidget(SubtitleLabel(t("controls.title"), container))
        self._game_label = BodyLabel("", container)
        layout.addWidget(self._game_label)
        self._ai_hint = CaptionLabel("", container)
        self._ai_hint.setStyleSheet("color:#888;")
        layout.addWidget(self._ai_hint)

        card = CardWidget(container)
        grid = QGridLayout(card)
        grid.setContentsMargins(20, 16, 20, 16)
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(6)
        for row, key in enumerate(POSITION_KEYS):
            name = StrongBodyLabel(POSITION_DISPLAY_NAMES[key], card)
            setFont(name, 12, QFont.Weight.DemiBold)
            grid.addWidget(name, row, 0, Qt.AlignmentFlag.AlignVCenter)

            edit = LineEdit(card)
            edit.setPlaceholderText(t("controls.unassigned"))
            edit.setClearButtonEnabled(True)
            edit.editingFinished.connect(lambda k=key: self._on_edited(k))
            grid.addWidget(edit, row, 1)
            self._edits[key] = edit
        self._card = card
        layout.addWidget(card)

        hint_row = QHBoxLayout()
        hint = CaptionLabel(t("controls.edit_hint"), container)
        hint.setStyleSheet("color:#888;")
        hint_row.addWidget(hint)
        hint_row.addStretch()
        layout.addLayout(hint_row)

        layout.addStretch()
        scroll.setWidget(container)
        outer.addWidget(scroll)

    def _refresh_ai_hint(self) -> None:
        configured = self._resolver is not None and self._resolver.is_ai_configured()
        self._ai_hint.setText(t("controls.ai_on") if configured else t("controls.ai_off"))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def update_state(self, state: CompanionState | None) -> None:
        if not isinstance(state, GameActiveState):
            self._title = None
            self._game_label.setText(t("controls.no_game"))
            self._card.setEnabled(False)
            self._show_map({})
            return

        self._title = state.game.title
        self._card.setEnabled(True)
        if state.controller_map is None:
            self._game_label.setText(t("controls.loading", title=state.game.title))
        else:
            self._game_label.setText(state.game.title)
        self._show_map(state.controller_map or {})
        self._refresh_ai_hint()

    def _show_map(self, controller_map: dict[str, str]) -> None:
        self._shown = dict(controller_map)
        for key, edit in self._edits.items():
            edit.blockSignals(True)
            edit.setText(controller_map.get(key, ""))
            edit.blockSignals(False)

    def _on_edited(self, key: str) -> None:
        label = self._edits[key].text().strip()
        if not self._title or self._resolver is None:
            return
        if not label or label == self._shown.get(key, ""):
            return
        try:
            self._resolver.save_override(self._title, key, label)
        except ValueError as e:
            logger.error("Rejected override: {}", e)
            return
        self._shown[key] = label
        if self._watcher is not None:
            self._watcher.set_controller_map(self._title, dict(self._shown))
        InfoBar.success(
            title=t("controls.saved"),
            content=f"{POSITION_DISPLAY_NAMES[key]}: {label}",
            parent=self,
            position=InfoBarPosition.TOP,
            duration=2000,
        )

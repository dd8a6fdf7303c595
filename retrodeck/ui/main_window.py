"""Main application window using PySide6-Fluent-Widgets FluentWindow."""

from __future__ import annotations

from PySide6.QtCore import QSize
from PySide6.QtWidgets import QApplication
from qfluentwidgets import FluentIcon as FIF, FluentWindow, NavigationItemPosition

from retrodeck.config import Config
from retrodeck.i18n import t
from retrodeck.models.state import CompanionState
from retrodeck.ui.pages.controls_page import ControlsPage
from retrodeck.ui.pages.now_playing_page import NowPlayingPage
from retrodeck.ui.pages.settings_page import SettingsPage, apply_theme
from retrodeck.ui.state_bridge import StateBridge


class MainWindow(FluentWindow):
    """Dashboard window with sidebar navigation."""

    def __init__(self, config: Config) -> None:
        super().__init__()
        self._cfg = config
        self._bridge: StateBridge | None = None
        self._init_window()
        self._init_pages()
        apply_theme(self._cfg.theme)

    def _init_window(self) -> None:
        self.setWindowTitle(t("app.name"))
        self.setMinimumSize(QSize(960, 640))
        self.resize(1100, 720)

        desktop = QApplication.primaryScreen().availableGeometry()
        x = (desktop.width() - self.width()) // 2
        y = (desktop.height() - self.height()) // 2
        self.move(x, y)

    def _init_pages(self) -> None:
        self.now_playing_page = NowPlayingPage(self)
        self.controls_page = ControlsPage(self)
        self.settings_page = SettingsPage(self)

        self.addSubInterface(self.now_playing_page, FIF.GAME, t("nav.now_playing"))
        self.addSubInterface(self.controls_page, FIF.IOT, t("nav.controls"))
        self.addSubInterface(
            self.settings_page,
            FIF.SETTING,
            t("nav.settings"),
            position=NavigationItemPosition.BOTTOM,
        )

    def attach(self, bridge: StateBridge) -> None:
        """Route watcher states to the pages and render the current one."""
        self._bridge = bridge
        bridge.state_changed.connect(self._on_state)
        self._on_state(bridge.current_state())

    def _on_state(self, state: CompanionState) -> None:
        self.now_playing_page.update_state(state)
        self.controls_page.update_state(state)

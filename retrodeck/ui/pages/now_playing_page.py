"""Now Playing page: the detected game, its artwork and the action bar.

Renders whatever :class:`CompanionState` the watcher last broadcast:
an idle hint, the game card, or an error banner.
"""

from __future__ import annotations

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QGridLayout, QHBoxLayout, QVBoxLayout, QWidget
from qfluentwidgets import (
    BodyLabel, CaptionLabel, CardWidget, FluentIcon as FIF, IconWidget,
    InfoBar, InfoBarPosition, SmoothScrollArea, StrongBodyLabel,
    SubtitleLabel, TitleLabel, setFont,
)
from loguru import logger

from retrodeck.core.remote import RemoteControl
from retrodeck.i18n import t
from retrodeck.models.game import GameRecord, PlatformSummary
from retrodeck.models.state import CompanionState, ErrorState, GameActiveState
from retrodeck.plugins.plugin_manager import PluginManager
from retrodeck.ui.components.action_bar import ActionBar
from retrodeck.ui.components.artwork_view import ArtworkView


def format_play_time(seconds: int) -> str:
    if seconds <= 0:
        return "-"
    hours, rem = divmod(seconds, 3600)
    minutes = rem // 60
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


class _GameInfoCard(CardWidget):
    """Title, platform and LaunchBox metadata of one game."""

    _FIELDS = (
        ("developer", "now_playing.developer"),
        ("publisher", "now_playing.publisher"),
        ("genre", "now_playing.genre"),
        ("release_date", "now_playing.release_date"),
        ("rating", "now_playing.rating"),
        ("play_mode", "now_playing.play_mode"),
    )

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(20, 16, 20, 16)
        root.setSpacing(8)

        header = QHBoxLayout()
        header.setSpacing(12)
        icon = IconWidget(FIF.GAME, self)
        icon.setFixedSize(32, 32)
        header.addWidget(icon)

        col = QVBoxLayout()
        col.setSpacing(2)
        self._title = TitleLabel("", self)
        col.addWidget(self._title)
        self._subtitle = CaptionLabel("", self)
        self._subtitle.setStyleSheet("color:#888;")
        col.addWidget(self._subtitle)
        header.addLayout(col, 1)
        root.addLayout(header)

        grid = QGridLayout()
        grid.setHorizontalSpacing(24)
        grid.setVerticalSpacing(4)
        self._values: dict[str, BodyLabel] = {}
        fields = self._FIELDS + (("play_count", "now_playing.play_count"), ("play_time", "now_playing.play_time"))
        for i, (attr, key) in enumerate(fields):
            name = StrongBodyLabel(t(key), self)
            setFont(name, 12, QFont.Weight.DemiBold)
            value = BodyLabel("", self)
            grid.addWidget(name, i // 2, (i % 2) * 2)
            grid.addWidget(value, i // 2, (i % 2) * 2 + 1)
            self._values[attr] = value
        root.addLayout(grid)

    def set_game(self, game: GameRecord, emulator: str) -> None:
        self._title.setText(game.title)
        subtitle = t("now_playing.platform_via", platform=game.platform, process=emulator)
        if not game.is_cataloged:
            subtitle += "  ·  " + t("now_playing.not_in_library")
        self._subtitle.setText(subtitle)
        for attr, _ in self._FIELDS:
            self._values[attr].setText(getattr(game, attr) or "-")
        self._values["play_count"].setText(str(game.play_count))
        self._values["play_time"].setText(format_play_time(game.play_time))


class NowPlayingPage(QWidget):
    """Main dashboard page."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("now_playing_page")
        self._remote: RemoteControl | None = None
        self._pm: PluginManager | None = None
        self._library: list[PlatformSummary] = []
        self._state: CompanionState | None = None
        self._init_ui()
        self.update_state(None)

    def set_remote(self, remote: RemoteControl) -> None:
        self._remote = remote

    def set_plugin_manager(self, pm: PluginManager) -> None:
        self._pm = pm

    def set_library(self, platforms: list[PlatformSummary]) -> None:
        self._library = list(platforms)
        self.update_state(self._state)

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

        layout.addWidget(SubtitleLabel(t("now_playing.title"), container))
        self._status = BodyLabel("", container)
        self._status.setWordWrap(True)
        layout.addWidget(self._status)

        self._info_card = _GameInfoCard(container)
        layout.addWidget(self._info_card)

        self._artwork = ArtworkView(container)
        layout.addWidget(self._artwork)

        self._actions = ActionBar({
            "save_state": t("actions.save_state"),
            "load_state": t("actions.load_state"),
            "close_game": t("actions.close_game"),
            "launch": t("actions.launch_bigbox"),
            "shutdown": t("actions.shutdown"),
        }, container)
        self._actions.save_state_requested.connect(self._on_save_state)
        self._actions.load_state_requested.connect(self._on_load_state)
        self._actions.close_game_requested.connect(self._on_close_game)
        self._actions.launch_requested.connect(self._on_launch)
        self._actions.shutdown_requested.connect(self._on_shutdown)
        layout.addWidget(self._actions)

        layout.addStretch()
        scroll.setWidget(container)
        outer.addWidget(scroll)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def update_state(self, state: CompanionState | None) -> None:
        self._state = state
        if isinstance(state, GameActiveState):
            plugin = self._pm.find_for_process(state.emulator_process) if self._pm else None
            self._status.setText(t("now_playing.playing"))
            emulator = plugin.display_name if plugin else state.emulator_process
            self._info_card.set_game(state.game, emulator)
            self._info_card.show()
            self._artwork.set_images(state.game.images)
            self._artwork.show()
            self._actions.set_game_active(True, bool(plugin and plugin.supports_network_commands))
            return

        self._info_card.hide()
        self._artwork.hide()
        self._actions.set_game_active(False, False)
        if isinstance(state, ErrorState):
            self._status.setText(t("now_playing.error", message=state.message))
            InfoBar.error(
                title=t("now_playing.error_title"),
                content=state.message,
                parent=self,
                position=InfoBarPosition.TOP,
                duration=4000,
            )
        else:
            self._status.setText(self._idle_text())

    def _idle_text(self) -> str:
        if not self._library:
            return t("now_playing.idle")
        games = sum(p.game_count for p in self._library)
        return t("now_playing.idle") + "\n" + t(
            "now_playing.library", games=games, platforms=len(self._library),
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_save_state(self) -> None:
        if self._remote and self._remote.save_state():
            self._toast(t("actions.state_saved"))

    def _on_load_state(self) -> None:
        if self._remote and self._remote.load_state():
            self._toast(t("actions.state_loaded"))

    def _on_close_game(self) -> None:
        if self._remote:
            logger.info("Close game requested from dashboard")
            self._remote.close_game()

    def _on_launch(self) -> None:
        if self._remote:
            self._remote.launch_bigbox()

    def _on_shutdown(self) -> None:
        if self._remote:
            self._remote.shutdown()

    def _toast(self, text: str) -> None:
        InfoBar.success(
            title=text,
            content="",
            parent=self,
            position=InfoBarPosition.TOP,
            duration=2000,
        )

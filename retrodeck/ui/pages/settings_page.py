"""Settings page: library folder, generation API key, appearance.

Wraps all groups in a SmoothScrollArea so content is scrollable when the
window is small.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QFileDialog, QHBoxLayout, QVBoxLayout, QWidget
from qfluentwidgets import (
    BodyLabel, CaptionLabel, CardWidget, ComboBoxSettingCard, FluentIcon as FIF,
    IconWidget, InfoBar, InfoBarPosition, OptionsConfigItem, OptionsValidator,
    PasswordLineEdit, PrimaryPushButton, PushSettingCard, QConfig, SettingCardGroup,
    SmoothScrollArea, StrongBodyLabel, SubtitleLabel, Theme, setFont, setTheme,
)

from retrodeck import __version__
from retrodeck.config import Config
from retrodeck.core.controls_cache import ControlsStore
from retrodeck.i18n import t


THEMES = ("auto", "light", "dark")


def apply_theme(value: str) -> None:
    if value == "dark":
        setTheme(Theme.DARK)
    elif value == "light":
        setTheme(Theme.LIGHT)
    else:
        setTheme(Theme.AUTO)


class _AppQConfig(QConfig):
    """Connects the theme setting to qfluentwidgets' option cards."""

    theme_mode = OptionsConfigItem(
        "General", "ThemeMode", "dark", OptionsValidator(list(THEMES)),
    )


_app_qconfig = _AppQConfig()


# -----------------------------------------------------------------------
# Cards
# -----------------------------------------------------------------------

class _ApiKeyCard(CardWidget):
    """Password field plus save button for the generation credential."""

    saved = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setFixedHeight(96)

        root = QHBoxLayout(self)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(16)

        icon = IconWidget(FIF.ROBOT, self)
        icon.setFixedSize(16, 16)
        root.addWidget(icon, 0, Qt.AlignmentFlag.AlignVCenter)

        col = QVBoxLayout()
        col.setSpacing(2)
        col.addWidget(BodyLabel(t("settings.api_key"), self))
        self._status = CaptionLabel("", self)
        self._status.setStyleSheet("color:#888;")
        col.addWidget(self._status)
        root.addLayout(col, 1)

        self._edit = PasswordLineEdit(self)
        self._edit.setFixedWidth(280)
        self._edit.setPlaceholderText("sk-ant-…")
        root.addWidget(self._edit, 0, Qt.AlignmentFlag.AlignVCenter)

        save = PrimaryPushButton(t("settings.save"), self)
        save.clicked.connect(self._on_save)
        root.addWidget(save, 0, Qt.AlignmentFlag.AlignVCenter)

    def set_configured(self, configured: bool) -> None:
        self._status.setText(
            t("settings.api_key_configured") if configured else t("settings.api_key_missing")
        )

    def _on_save(self) -> None:
        key = self._edit.text().strip()
        if key:
            self._edit.clear()
            self.saved.emit(key)


class _AboutCard(CardWidget):
    """App name, version and description."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setFixedHeight(100)

        root = QHBoxLayout(self)
        root.setContentsMargins(20, 16, 20, 16)
        root.setSpacing(16)

        icon = IconWidget(FIF.INFO, self)
        icon.setFixedSize(36, 36)
        root.addWidget(icon, 0, Qt.AlignmentFlag.AlignVCenter)

        col = QVBoxLayout()
        col.setSpacing(4)
        col.setContentsMargins(0, 0, 0, 0)
        name = StrongBodyLabel(t("app.name"), self)
        setFont(name, 15, QFont.Weight.DemiBold)
        col.addWidget(name)
        ver = CaptionLabel(f"v{__version__}", self)
        ver.setStyleSheet("color:#888;")
        col.addWidget(ver)
        desc = CaptionLabel(t("settings.about_desc"), self)
        desc.setStyleSheet("color:#666;")
        col.addWidget(desc)
        root.addLayout(col, 1)


# -----------------------------------------------------------------------
# Page
# -----------------------------------------------------------------------

class SettingsPage(QWidget):
    """Settings page with Fluent-style setting cards inside a scroll area."""

    theme_changed = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("settings_page")
        self._config: Config | None = None
        self._store: ControlsStore | None = None
        self._init_ui()

    def set_config(self, config: Config) -> None:
        self._config = config
        self._library_card.setContent(str(config.launchbox_dir))
        if config.theme in THEMES:
            _app_qconfig.theme_mode.value = config.theme

    def set_controls_store(self, store: ControlsStore) -> None:
        self._store = store
        self._api_card.set_configured(store.is_ai_configured())

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
        layout.setSpacing(20)

        layout.addWidget(SubtitleLabel(t("settings.title"), container))

        # --- Library ---
        library_group = SettingCardGroup(t("settings.library_group"), container)
        self._library_card = PushSettingCard(
            t("settings.choose_dir"),
            FIF.FOLDER,
            t("settings.launchbox_dir"),
            "",
            parent=library_group,
        )
        self._library_card.clicked.connect(self._choose_library_dir)
        library_group.addSettingCard(self._library_card)
        layout.addWidget(library_group)

        # --- Controls generation ---
        ai_group = SettingCardGroup(t("settings.ai_group"), container)
        self._api_card = _ApiKeyCard(ai_group)
        self._api_card.saved.connect(self._on_api_key_saved)
        ai_group.addSettingCard(self._api_card)
        layout.addWidget(ai_group)

        # --- Appearance ---
        general_group = SettingCardGroup(t("settings.general_group"), container)
        self._theme_card = ComboBoxSettingCard(
            _app_qconfig.theme_mode,
            FIF.BRUSH,
            t("settings.theme"),
            t("settings.theme_desc"),
            [t("settings.theme_auto"), t("settings.theme_light"), t("settings.theme_dark")],
            parent=general_group,
        )
        general_group.addSettingCard(self._theme_card)
        layout.addWidget(general_group)

        # --- About ---
        about_group = SettingCardGroup(t("settings.about"), container)
        about_group.addSettingCard(_AboutCard(about_group))
        layout.addWidget(about_group)

        layout.addStretch()
        scroll.setWidget(container)
        outer.addWidget(scroll)

        _app_qconfig.theme_mode.valueChanged.connect(self._on_theme_changed)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _on_theme_changed(self, value: str) -> None:
        if self._config:
            self._config.set("theme", value)
        apply_theme(value)
        self.theme_changed.emit(value)

    def _choose_library_dir(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, t("settings.launchbox_dir"))
        if not folder:
            return
        if self._config:
            self._config.set("launchbox_dir", folder)
        self._library_card.setContent(folder)
        InfoBar.success(
            title=t("settings.save_success"),
            content=t("settings.restart_required"),
            parent=self,
            position=InfoBarPosition.TOP,
            duration=3000,
        )

    def _on_api_key_saved(self, key: str) -> None:
        if self._store is None:
            return
        self._store.set_api_key(key)
        self._api_card.set_configured(self._store.is_ai_configured())
        InfoBar.success(
            title=t("settings.save_success"),
            content=t("settings.api_key"),
            parent=self,
            position=InfoBarPosition.TOP,
            duration=2000,
        )

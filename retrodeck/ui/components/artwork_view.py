"""Artwork card: box art, screenshot and clear logo for the active game."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget
from qfluentwidgets import CaptionLabel, CardWidget

from retrodeck.i18n import t
from retrodeck.models.game import GameImages


class _ImageSlot(QWidget):
    """One captioned image, or a placeholder caption when the file is missing."""

    def __init__(self, caption: str, width: int, height: int, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._w = width
        self._h = height

        col = QVBoxLayout(self)
        col.setContentsMargins(0, 0, 0, 0)
        col.setSpacing(4)

        self._image = QLabel(self)
        self._image.setFixedSize(width, height)
        self._image.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._image.setStyleSheet("background:rgba(128,128,128,0.12); border-radius:6px;")
        col.addWidget(self._image)

        label = CaptionLabel(caption, self)
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setStyleSheet("color:#888;")
        col.addWidget(label)

    def set_path(self, path: str) -> None:
        pm = QPixmap(path) if path else QPixmap()
        if pm.isNull():
            self._image.clear()
            self._image.setText(t("artwork.missing"))
            return
        self._image.setPixmap(pm.scaled(
            self._w, self._h,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        ))


class ArtworkView(CardWidget):
    """Shows the resolved artwork slots of a :class:`GameImages`."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QHBoxLayout(self)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(16)

        self._box = _ImageSlot(t("artwork.box_front"), 180, 240, self)
        self._shot = _ImageSlot(t("artwork.screenshot"), 320, 240, self)
        self._logo = _ImageSlot(t("artwork.clear_logo"), 240, 120, self)
        root.addWidget(self._box)
        root.addWidget(self._shot)
        root.addWidget(self._logo, 0, Qt.AlignmentFlag.AlignTop)
        root.addStretch()

    def set_images(self, images: GameImages | None) -> None:
        images = images or GameImages()
        self._box.set_path(images.box_front)
        self._shot.set_path(images.screenshot)
        self._logo.set_path(images.clear_logo)

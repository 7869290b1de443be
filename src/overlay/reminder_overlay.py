"""Reminder overlay — the on-screen side of the reminder.

Two frameless, always-on-top windows:
- the icon: a small warmask badge with countdown/status text, draggable while
  unlocked and click-through while locked;
- the banner: large red text centred on the screen.

Positions are stored like the game's anchors: the icon centre relative to the
screen centre (point CENTER on GuiRoot CENTER, plus an x/y offset).
"""
from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import QPoint, QRect, Qt
from PyQt6.QtGui import QColor, QFont, QGuiApplication, QMouseEvent, QPainter, QPen
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget

from src.engine.conditions import BANNER_TEXT
from src.models.reminder import Position

logger = logging.getLogger(__name__)

ICON_SIZE = 64
BANNER_WIDTH = 600
BANNER_HEIGHT = 80
ANCHOR_POINT = "CENTER"
ANCHOR_PARENT = "GuiRoot"


def _screen_rect() -> QRect:
    screen = QGuiApplication.primaryScreen()
    if screen is None:
        return QRect(0, 0, 1920, 1080)
    return screen.geometry()


def _overlay_flags(click_through: bool) -> Qt.WindowType:
    flags = (
        Qt.WindowType.FramelessWindowHint
        | Qt.WindowType.WindowStaysOnTopHint
        | Qt.WindowType.Tool  # Hides from taskbar
    )
    if click_through:
        flags |= Qt.WindowType.WindowTransparentForInput
    return flags


class WarmaskIcon(QWidget):
    """Badge with a text line. Left-drag moves it while unlocked."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._text = ""
        self._text_color = QColor("#ffffff")
        self._locked = False
        self._drag_offset: Optional[QPoint] = None
        self.setWindowFlags(_overlay_flags(click_through=False))
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setFixedSize(ICON_SIZE, ICON_SIZE)

    def set_text(self, text: str, color: Optional[str]) -> None:
        self._text = text
        if color:
            self._text_color = QColor(color)
        self.update()

    def text(self) -> str:
        return self._text

    def set_locked(self, locked: bool) -> None:
        if locked == self._locked:
            return
        self._locked = locked
        visible = self.isVisible()
        self.setWindowFlags(_overlay_flags(click_through=locked))
        if visible:
            self.show()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = self.rect().adjusted(2, 2, -2, -2)
        painter.setPen(QPen(QColor("#948159"), 2))
        painter.setBrush(QColor(20, 20, 20, 200))
        painter.drawRoundedRect(rect, 10, 10)
        if self._text:
            font = QFont()
            font.setBold(True)
            font.setPointSize(14 if len(self._text) <= 4 else 11)
            painter.setFont(font)
            painter.setPen(self._text_color)
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, self._text)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if not self._locked and event.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._drag_offset is not None and event.buttons() & Qt.MouseButton.LeftButton:
            self.move(event.globalPosition().toPoint() - self._drag_offset)
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        self._drag_offset = None
        super().mouseReleaseEvent(event)


class WarningBanner(QWidget):
    """Centred red warning text. Always click-through."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowFlags(_overlay_flags(click_through=True))
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setFixedSize(BANNER_WIDTH, BANNER_HEIGHT)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        label = QLabel(BANNER_TEXT, self)
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setStyleSheet("color: rgb(255, 51, 51); font-size: 26px; font-weight: bold; background: transparent;")
        layout.addWidget(label)
        screen = _screen_rect()
        self.move(screen.center() - QPoint(BANNER_WIDTH // 2, BANNER_HEIGHT // 2))


class ReminderOverlay:
    """Display adapter backed by the icon and banner windows."""

    def __init__(self) -> None:
        self._icon = WarmaskIcon()
        self._banner = WarningBanner()
        self._icon.hide()
        self._banner.hide()

    def show_icon(self, text: str, color: Optional[str]) -> None:
        self._icon.set_text(text, color)
        if not self._icon.isVisible():
            self._icon.show()

    def hide_icon(self) -> None:
        if self._icon.isVisible():
            self._icon.hide()

    def show_banner(self) -> None:
        self._banner.show()
        self._banner.raise_()

    def hide_banner(self) -> None:
        if self._banner.isVisible():
            self._banner.hide()

    def icon_visible(self) -> bool:
        return self._icon.isVisible()

    def banner_visible(self) -> bool:
        return self._banner.isVisible()

    def get_widget_anchor(self) -> Optional[Position]:
        top_left = self._icon.pos()
        screen_center = _screen_rect().center()
        return Position(
            point=ANCHOR_POINT,
            relative_to=ANCHOR_PARENT,
            relative_point=ANCHOR_POINT,
            x=float(top_left.x() + ICON_SIZE // 2 - screen_center.x()),
            y=float(top_left.y() + ICON_SIZE // 2 - screen_center.y()),
        )

    def set_widget_anchor(self, position: Position) -> None:
        if position.relative_to != ANCHOR_PARENT or position.point != ANCHOR_POINT:
            logger.debug("Anchor %s/%s treated as screen centre offset", position.point, position.relative_to)
        screen_center = _screen_rect().center()
        target = QPoint(screen_center.x() + round(position.x), screen_center.y() + round(position.y))
        self._icon.move(target - QPoint(ICON_SIZE // 2, ICON_SIZE // 2))

    def set_locked(self, locked: bool) -> None:
        self._icon.set_locked(locked)

    def close(self) -> None:
        self._icon.close()
        self._banner.close()


def create_overlay() -> Optional[ReminderOverlay]:
    """Build the overlay windows. Returns None (reminder runs headless) if that fails."""
    try:
        return ReminderOverlay()
    except Exception as e:
        logger.error("Could not create reminder overlay: %s", e, exc_info=True)
        return None

import logging
from typing import Optional
from PyQt6.QtWidgets import QSystemTrayIcon, QApplication
from PyQt6.QtCore import Qt, QPoint, QRectF
from PyQt6.QtGui import QIcon, QPixmap, QPainter, QPen, QColor, QCursor

from config import Config
from screenshot_manager import ScreenshotManager, Capture
from settings_view import SettingsView
from annotation_window import AnnotationWindow

logger = logging.getLogger(__name__)


def camera_icon(running: bool = False) -> QIcon:
    """Camera inside a circle, drawn as a template-style monochrome glyph"""
    size = Config.TRAY_ICON_SIZE
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        color = QColor(0, 0, 0)
        pen_width = size * 0.07
        painter.setPen(QPen(color, pen_width))
        inset = pen_width
        painter.drawEllipse(QRectF(inset, inset, size - 2 * inset, size - 2 * inset))

        body = QRectF(size * 0.25, size * 0.36, size * 0.5, size * 0.34)
        painter.setBrush(color)
        painter.drawRoundedRect(body, size * 0.05, size * 0.05)
        painter.drawRect(QRectF(size * 0.41, size * 0.29, size * 0.18, size * 0.08))

        # Lens is punched out so the glyph works as a template image
        lens = QRectF(size * 0.40, size * 0.41, size * 0.20, size * 0.20)
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.drawEllipse(lens)
        if running:
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)
            painter.drawEllipse(lens.adjusted(size * 0.05, size * 0.05, -size * 0.05, -size * 0.05))
    finally:
        painter.end()

    icon = QIcon(pixmap)
    icon.setIsMask(True)
    return icon


class TrayApp:
    """Menu-bar icon hosting the settings popover and the note prompt"""

    def __init__(self, manager: ScreenshotManager):
        self.manager = manager
        self.popover = SettingsView(manager)
        self.annotation_window: Optional[AnnotationWindow] = None

        self.tray_icon = QSystemTrayIcon()
        self.tray_icon.activated.connect(self._tray_icon_activated)
        self._update_icon(manager.is_running)
        self.tray_icon.show()

        manager.running_changed.connect(self._update_icon)
        manager.annotation_requested.connect(self.present_annotation_window)

        if self.tray_icon.isVisible():
            logger.info("System tray icon created and visible")
        else:
            logger.warning("System tray icon created but not visible")

    def _update_icon(self, running: bool):
        self.tray_icon.setIcon(camera_icon(running))
        state = "capturing" if running else "paused"
        self.tray_icon.setToolTip(f"{Config.APP_NAME} ({state})")

    def _tray_icon_activated(self, reason):
        if reason in (QSystemTrayIcon.ActivationReason.Trigger,
                      QSystemTrayIcon.ActivationReason.Context):
            self.toggle_popover()

    def toggle_popover(self):
        if self.popover.isVisible():
            self.popover.hide()
            return
        self.popover.refresh()
        self.popover.move(self._popover_position())
        self.popover.show()
        self.popover.raise_()
        self.popover.activateWindow()

    def _popover_position(self) -> QPoint:
        """Top-left corner for the popover, centred under the icon"""
        width, height = Config.POPOVER_SIZE
        anchor = self.tray_icon.geometry()
        if anchor.isValid():
            point = QPoint(anchor.center().x() - width // 2, anchor.bottom() + 4)
        else:
            point = QCursor.pos() - QPoint(width // 2, 0)

        screen = QApplication.screenAt(point) or QApplication.primaryScreen()
        if screen is not None:
            bounds = screen.availableGeometry()
            x = min(max(point.x(), bounds.left()), bounds.right() - width)
            y = min(max(point.y(), bounds.top()), bounds.bottom() - height)
            point = QPoint(x, y)
        return point

    def present_annotation_window(self, capture: Capture):
        if capture is not self.manager.pending_capture:
            return
        if self.annotation_window is not None:
            self.annotation_window.dismiss()

        window = AnnotationWindow(capture.image)
        window.saved.connect(lambda text: self.manager.complete_annotation(text, capture))
        window.skipped.connect(lambda: self.manager.skip_annotation(capture))
        window.destroyed.connect(lambda: self._forget_window(window))
        self.annotation_window = window

        screen = QApplication.primaryScreen()
        if screen is not None:
            frame = window.frameGeometry()
            frame.moveCenter(screen.availableGeometry().center())
            window.move(frame.topLeft())
        window.show()
        window.raise_()
        window.activateWindow()

    def _forget_window(self, window: AnnotationWindow):
        if self.annotation_window is window:
            self.annotation_window = None

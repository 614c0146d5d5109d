from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPlainTextEdit, QPushButton, QSizePolicy
)
from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QPixmap, QKeySequence, QShortcut, QImage

from config import Config


class AnnotationWindow(QWidget):
    """Floating prompt asking for a short note about the latest capture"""

    saved = pyqtSignal(str)
    skipped = pyqtSignal()

    def __init__(self, image: QImage, parent=None):
        super().__init__(parent)
        self._image = image
        self._answered = False
        self.setup_ui()

    def setup_ui(self):
        self.setWindowTitle("Add Note to Screenshot")
        self.setWindowFlags(
            Qt.WindowType.Window |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.WindowTitleHint |
            Qt.WindowType.WindowCloseButtonHint
        )
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.resize(*Config.ANNOTATION_WINDOW_SIZE)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.preview = QLabel()
        self.preview.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview.setStyleSheet("background-color: rgba(0, 0, 0, 230);")
        self.preview.setSizePolicy(QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Ignored)
        layout.addWidget(self.preview, stretch=1)

        input_area = QVBoxLayout()
        input_area.setContentsMargins(16, 12, 16, 12)
        input_area.setSpacing(12)

        prompt = QLabel("Add a note (1-2 sentences)")
        prompt.setStyleSheet("color: gray;")
        input_area.addWidget(prompt)

        self.note_edit = QPlainTextEdit()
        self.note_edit.setFixedHeight(60)
        input_area.addWidget(self.note_edit)

        buttons = QHBoxLayout()
        self.skip_button = QPushButton("Skip")
        self.skip_button.clicked.connect(self.skip)
        self.save_button = QPushButton("Save")
        self.save_button.setDefault(True)
        self.save_button.clicked.connect(self.save)
        buttons.addWidget(self.skip_button)
        buttons.addStretch()
        buttons.addWidget(self.save_button)
        input_area.addLayout(buttons)

        layout.addLayout(input_area)

        # Ctrl maps to Cmd on macOS
        for sequence in ("Ctrl+Return", "Ctrl+Enter"):
            QShortcut(QKeySequence(sequence), self, activated=self.save)
        QShortcut(QKeySequence(Qt.Key.Key_Escape), self, activated=self.skip)

    def showEvent(self, event):
        super().showEvent(event)
        self._update_preview()
        QTimer.singleShot(Config.ANNOTATION_FOCUS_DELAY_MS, self.note_edit.setFocus)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._update_preview()

    def _update_preview(self):
        if self._image.isNull() or self.preview.width() <= 0 or self.preview.height() <= 0:
            return
        pixmap = QPixmap.fromImage(self._image).scaled(
            self.preview.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation
        )
        self.preview.setPixmap(pixmap)

    def note_text(self) -> str:
        return self.note_edit.toPlainText().strip()

    def save(self):
        if self._answered:
            return
        self._answered = True
        self.saved.emit(self.note_text())
        self.close()

    def skip(self):
        if self._answered:
            return
        self._answered = True
        self.skipped.emit()
        self.close()

    def dismiss(self):
        """Close without answering, when the capture was already handled"""
        self._answered = True
        self.close()

    def closeEvent(self, event):
        if not self._answered:
            self._answered = True
            self.skipped.emit()
        super().closeEvent(event)

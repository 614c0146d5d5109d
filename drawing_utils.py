from PyQt6.QtGui import QPainter, QPen, QColor, QFont, QFontMetricsF, QPainterPath
from PyQt6.QtCore import Qt, QRectF, QSizeF
from dataclasses import dataclass, field
from config import Config

# Word-wrapped, left-aligned, top-anchored layout
WRAPPED_TEXT_FLAGS = (
    Qt.AlignmentFlag.AlignLeft.value |
    Qt.AlignmentFlag.AlignTop.value |
    Qt.TextFlag.TextWordWrap.value
)
_UNBOUNDED_HEIGHT = 1.0e7


@dataclass
class NoteStyle:
    """Drawing style for a note box, scaled to the image it sits on"""
    font_size: float
    padding: float = Config.NOTE_PADDING
    corner_radius: float = Config.NOTE_CORNER_RADIUS
    border_width: float = Config.NOTE_BORDER_WIDTH
    text_color: QColor = field(default_factory=lambda: QColor(Config.NOTE_TEXT_COLOR))
    fill_color: QColor = field(default_factory=lambda: QColor(Config.NOTE_FILL_COLOR))
    border_color: QColor = field(default_factory=lambda: QColor(Config.NOTE_BORDER_COLOR))

    @classmethod
    def for_image_width(cls, width: int) -> 'NoteStyle':
        return cls(font_size=max(width * Config.NOTE_FONT_SCALE, Config.NOTE_MIN_FONT_SIZE))

    def font(self) -> QFont:
        font = QFont()
        font.setPixelSize(max(1, round(self.font_size)))
        font.setWeight(QFont.Weight.Medium)
        return font


class DrawHelper:
    """Helper class for common drawing operations"""

    @staticmethod
    def wrapped_text_size(text: str, font: QFont, max_width: float) -> QSizeF:
        """Bounding size of text word-wrapped to max_width"""
        metrics = QFontMetricsF(font)
        bounds = metrics.boundingRect(
            QRectF(0, 0, max_width, _UNBOUNDED_HEIGHT), WRAPPED_TEXT_FLAGS, text
        )
        return bounds.size()

    @staticmethod
    def draw_rounded_box(painter: QPainter, rect: QRectF, style: NoteStyle):
        """Fill a rounded rectangle and stroke its border"""
        path = QPainterPath()
        path.addRoundedRect(rect, style.corner_radius, style.corner_radius)
        painter.fillPath(path, style.fill_color)
        painter.strokePath(path, QPen(style.border_color, style.border_width))

    @staticmethod
    def draw_wrapped_text(painter: QPainter, rect: QRectF, text: str, style: NoteStyle):
        painter.setFont(style.font())
        painter.setPen(QPen(style.text_color))
        painter.drawText(rect, WRAPPED_TEXT_FLAGS, text)

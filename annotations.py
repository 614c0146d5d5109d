from dataclasses import dataclass
from PyQt6.QtGui import QPainter
from PyQt6.QtCore import QRectF
from drawing_utils import NoteStyle, DrawHelper


@dataclass
class NoteLayout:
    box: QRectF
    text: QRectF


class NoteAnnotation:
    """Text note in a translucent box, anchored to the upper-left corner"""

    def __init__(self, text: str, style: NoteStyle):
        self.text = text.strip()
        self.style = style

    def is_empty(self) -> bool:
        return not self.text

    def layout(self, image_width: int) -> NoteLayout:
        """Size the box around the wrapped text for an image of this width"""
        padding = self.style.padding
        max_text_width = max(1.0, image_width - padding * 4)
        text_size = DrawHelper.wrapped_text_size(self.text, self.style.font(), max_text_width)

        box_width = min(text_size.width() + padding * 2, image_width - padding * 2)
        box_height = text_size.height() + padding * 1.5
        box = QRectF(padding, padding, box_width, box_height)

        text_rect = QRectF(
            box.x() + padding,
            box.y() + padding * 0.75,
            max_text_width,
            text_size.height()
        )
        return NoteLayout(box=box, text=text_rect)

    def draw(self, painter: QPainter, image_width: int):
        if self.is_empty():
            return
        layout = self.layout(image_width)
        DrawHelper.draw_rounded_box(painter, layout.box, self.style)
        DrawHelper.draw_wrapped_text(painter, layout.text, self.text, self.style)

"""
Image post-processing for captures: note overlay, tier resize and JPEG encoding.

All work happens in device pixels. Captures from a Retina display keep their
full pixel size no matter what scale factor the display reports.
"""

import logging
from datetime import datetime
from typing import Optional
from PyQt6.QtGui import QImage, QPainter
from PyQt6.QtCore import Qt, QBuffer, QIODevice

from config import ImageQuality
from annotations import NoteAnnotation
from drawing_utils import NoteStyle

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def _device_pixels(image: QImage) -> QImage:
    """Copy of image whose logical size equals its pixel size"""
    normalized = QImage(image)
    normalized.setDevicePixelRatio(1.0)
    return normalized


def annotate_image(image: QImage, text: Optional[str]) -> QImage:
    """Composite a note box with text over the upper-left region"""
    note = NoteAnnotation(text or "", NoteStyle.for_image_width(image.width()))
    if note.is_empty():
        return image

    annotated = _device_pixels(image).convertToFormat(QImage.Format.Format_ARGB32_Premultiplied)
    painter = QPainter(annotated)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
        note.draw(painter, annotated.width())
    finally:
        painter.end()
    return annotated


def target_size(width: int, height: int, quality: ImageQuality):
    """Pixel size a capture of width x height is stored at for this tier"""
    max_width = quality.max_width
    if max_width is None or width <= max_width:
        return width, height
    # 2880x1800 -> 1920x1200 exactly
    return max_width, max(1, int(height * max_width / width))


def resize_for_quality(image: QImage, quality: ImageQuality) -> QImage:
    """Scale down to the tier's maximum width, keeping the aspect ratio"""
    width, height = image.width(), image.height()
    new_width, new_height = target_size(width, height, quality)
    if (new_width, new_height) == (width, height):
        return image

    resized = _device_pixels(image).scaled(
        new_width, new_height,
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation
    )
    resized.setDevicePixelRatio(1.0)
    return resized


def encode_jpeg(image: QImage, compression: float) -> bytes:
    """Encode as JPEG; compression runs from 0.0 (smallest) to 1.0 (best)"""
    quality = int(round(min(max(compression, 0.0), 1.0) * 100))
    # JPEG has no alpha channel
    opaque = image.convertToFormat(QImage.Format.Format_RGB32)

    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    try:
        if not opaque.save(buffer, "JPEG", quality):
            logger.error("JPEG encoder rejected the image")
            return b""
        return bytes(buffer.data())
    finally:
        buffer.close()


def build_filename(include_timestamp: bool, counter: int, now: Optional[datetime] = None) -> str:
    if include_timestamp:
        stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        return f"screenshot_{stamp}.jpg"
    return f"screenshot_{counter}.jpg"


def estimated_file_size(quality: ImageQuality, compression: float) -> str:
    """Rough size of a saved capture, for display"""
    size_kb = quality.estimated_kb * compression
    if size_kb < 1024:
        return f"~{int(round(size_kb))} KB"
    return f"~{size_kb / 1024:.1f} MB"

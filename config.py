import os
from enum import Enum
from pathlib import Path
from PyQt6.QtGui import QColor


class Config:
    APP_NAME = "AutoScreenshot"
    ORGANIZATION_NAME = "AutoScreenshot"
    LOG_LEVEL = os.environ.get("AUTOSCREENSHOT_LOG_LEVEL", "INFO").upper()

    DEFAULT_INTERVAL = 300.0  # seconds
    DEFAULT_COMPRESSION = 0.7
    DEFAULT_SAVE_DIRECTORY = str(Path.home() / "Screenshots" / "Auto")
    INTERVAL_CHOICES = [30, 60, 300, 600, 900, 1200, 1800, 3600]
    AUTO_RESUME_DELAY_MS = 1000

    SCREENCAPTURE_PATH = "/usr/sbin/screencapture"
    SCREENCAPTURE_SILENT_FLAG = "-x"
    CAPTURE_TIMEOUT = None  # block until the tool exits

    # Note overlay
    NOTE_PADDING = 20
    NOTE_FONT_SCALE = 0.018
    NOTE_MIN_FONT_SIZE = 16
    NOTE_CORNER_RADIUS = 12
    NOTE_BORDER_WIDTH = 1.5
    NOTE_TEXT_COLOR = QColor(255, 255, 255)
    NOTE_FILL_COLOR = QColor(0, 0, 0, 191)
    NOTE_BORDER_COLOR = QColor(255, 255, 255, 51)

    POPOVER_SIZE = (350, 580)
    ANNOTATION_WINDOW_SIZE = (600, 500)
    ANNOTATION_FOCUS_DELAY_MS = 100
    TRAY_ICON_SIZE = 64


class ImageQuality(Enum):
    ORIGINAL = "Original"
    HIGH = "High (1920px)"
    MEDIUM = "Medium (1280px)"
    LOW = "Low (960px)"
    VERY_LOW = "Very Low (640px)"
    MINIMAL = "Minimal (480px)"

    @property
    def max_width(self):
        """Maximum output width in pixels, or None for no limit"""
        return _MAX_WIDTHS[self]

    @property
    def estimated_kb(self) -> int:
        """Rough size of an uncompressed capture at this tier"""
        return _ESTIMATED_KB[self]

    @classmethod
    def from_label(cls, label, default=None):
        for quality in cls:
            if quality.value == label:
                return quality
        return default


_MAX_WIDTHS = {
    ImageQuality.ORIGINAL: None,
    ImageQuality.HIGH: 1920,
    ImageQuality.MEDIUM: 1280,
    ImageQuality.LOW: 960,
    ImageQuality.VERY_LOW: 640,
    ImageQuality.MINIMAL: 480,
}

_ESTIMATED_KB = {
    ImageQuality.ORIGINAL: 3000,
    ImageQuality.HIGH: 1500,
    ImageQuality.MEDIUM: 800,
    ImageQuality.LOW: 400,
    ImageQuality.VERY_LOW: 200,
    ImageQuality.MINIMAL: 100,
}


class AnnotationMode(Enum):
    NONE = 0
    MANUAL = 1
    PRESET = 2

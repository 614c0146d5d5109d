"""
User preferences backed by QSettings (the user defaults domain on macOS).
Every key is flat and fixed so existing stores keep working across versions.
"""

import logging
from dataclasses import dataclass
from PyQt6.QtCore import QSettings

from config import Config, ImageQuality, AnnotationMode

logger = logging.getLogger(__name__)


KEY_INTERVAL = "interval"
KEY_SAVE_DIRECTORY = "saveDirectory"
KEY_INCLUDE_TIMESTAMP = "includeTimestamp"
KEY_CAPTURE_SOUND = "captureSound"
KEY_SCREENSHOT_COUNT = "screenshotCount"
KEY_IS_RUNNING = "isRunning"
KEY_IMAGE_QUALITY = "imageQuality"
KEY_COMPRESSION_QUALITY = "compressionQuality"
KEY_ENABLE_ANNOTATION = "enableAnnotation"
KEY_PRESET_ANNOTATION = "presetAnnotation"
KEY_USE_PRESET_ANNOTATION = "usePresetAnnotation"


def open_settings() -> QSettings:
    """Open the application's native preference store"""
    return QSettings(Config.ORGANIZATION_NAME, Config.APP_NAME)


@dataclass
class Preferences:
    interval: float = Config.DEFAULT_INTERVAL
    save_directory: str = Config.DEFAULT_SAVE_DIRECTORY
    include_timestamp: bool = False
    capture_sound: bool = False
    screenshot_count: int = 0
    is_running: bool = False
    image_quality: ImageQuality = ImageQuality.MEDIUM
    compression_quality: float = Config.DEFAULT_COMPRESSION
    enable_annotation: bool = True
    preset_annotation: str = ""
    use_preset_annotation: bool = False

    @property
    def annotation_mode(self) -> AnnotationMode:
        """Mode the next capture will be handled with"""
        if self.enable_annotation and not self.use_preset_annotation:
            return AnnotationMode.MANUAL
        if self.use_preset_annotation and self.preset_annotation:
            return AnnotationMode.PRESET
        return AnnotationMode.NONE

    def set_manual_annotation(self, enabled: bool):
        self.enable_annotation = enabled
        if enabled:
            self.use_preset_annotation = False

    def set_preset_annotation(self, enabled: bool):
        self.use_preset_annotation = enabled
        if enabled:
            self.enable_annotation = False

    @classmethod
    def load(cls, settings: QSettings) -> 'Preferences':
        """Read preferences, filling in defaults for missing or zeroed keys"""
        prefs = cls()

        interval = settings.value(KEY_INTERVAL, 0.0, type=float)
        prefs.interval = interval if interval > 0 else Config.DEFAULT_INTERVAL

        save_directory = settings.value(KEY_SAVE_DIRECTORY, "", type=str)
        prefs.save_directory = save_directory or Config.DEFAULT_SAVE_DIRECTORY

        prefs.include_timestamp = settings.value(KEY_INCLUDE_TIMESTAMP, False, type=bool)
        prefs.capture_sound = settings.value(KEY_CAPTURE_SOUND, False, type=bool)
        prefs.screenshot_count = settings.value(KEY_SCREENSHOT_COUNT, 0, type=int)
        prefs.is_running = settings.value(KEY_IS_RUNNING, False, type=bool)

        compression = settings.value(KEY_COMPRESSION_QUALITY, 0.0, type=float)
        prefs.compression_quality = (
            min(compression, 1.0) if compression > 0 else Config.DEFAULT_COMPRESSION
        )

        prefs.enable_annotation = settings.value(KEY_ENABLE_ANNOTATION, True, type=bool)
        prefs.preset_annotation = settings.value(KEY_PRESET_ANNOTATION, "", type=str)
        prefs.use_preset_annotation = settings.value(KEY_USE_PRESET_ANNOTATION, False, type=bool)
        if prefs.enable_annotation and prefs.use_preset_annotation:
            logger.warning("Both annotation modes stored as enabled, keeping preset")
            prefs.enable_annotation = False

        label = settings.value(KEY_IMAGE_QUALITY, "", type=str)
        prefs.image_quality = ImageQuality.from_label(label, ImageQuality.MEDIUM)

        return prefs

    def save(self, settings: QSettings):
        """Write every key and flush the store"""
        settings.setValue(KEY_INTERVAL, float(self.interval))
        settings.setValue(KEY_SAVE_DIRECTORY, self.save_directory)
        settings.setValue(KEY_INCLUDE_TIMESTAMP, self.include_timestamp)
        settings.setValue(KEY_CAPTURE_SOUND, self.capture_sound)
        settings.setValue(KEY_SCREENSHOT_COUNT, int(self.screenshot_count))
        settings.setValue(KEY_IS_RUNNING, self.is_running)
        settings.setValue(KEY_IMAGE_QUALITY, self.image_quality.value)
        settings.setValue(KEY_COMPRESSION_QUALITY, float(self.compression_quality))
        settings.setValue(KEY_ENABLE_ANNOTATION, self.enable_annotation)
        settings.setValue(KEY_PRESET_ANNOTATION, self.preset_annotation)
        settings.setValue(KEY_USE_PRESET_ANNOTATION, self.use_preset_annotation)
        settings.sync()

        if settings.status() != QSettings.Status.NoError:
            logger.error(f"Could not persist preferences: {settings.status().name}")

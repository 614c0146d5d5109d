"""
Run state and capture pipeline.

A single repeating QTimer drives captures. Each tick shells out to the
capture tool, then routes the bitmap through the configured annotation mode
and saves it as a JPEG. Failures are logged and that tick is skipped.
"""

import os
import uuid
import logging
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional
from PyQt6.QtCore import QObject, QTimer, QSettings, pyqtSignal
from PyQt6.QtGui import QImage

from config import Config, ImageQuality, AnnotationMode
from preferences import Preferences, open_settings
from screenshot_utils import ScreenshotCapturer
from image_processing import (
    annotate_image, resize_for_quality, encode_jpeg, build_filename, estimated_file_size
)

logger = logging.getLogger(__name__)


@dataclass
class Capture:
    image: QImage
    temp_path: str
    timestamp: datetime = field(default_factory=datetime.now)


def _remove_temp_file(path: str):
    try:
        os.unlink(path)
    except OSError:
        pass


class ScreenshotManager(QObject):
    """Owns preferences, the capture timer and the per-tick pipeline"""

    running_changed = pyqtSignal(bool)
    screenshot_saved = pyqtSignal(str)
    count_changed = pyqtSignal(int)
    annotation_requested = pyqtSignal(object)
    preferences_changed = pyqtSignal()

    def __init__(self, settings: Optional[QSettings] = None, capturer=ScreenshotCapturer, parent=None):
        super().__init__(parent)
        self.settings = settings if settings is not None else open_settings()
        self.capturer = capturer
        self.prefs = Preferences.load(self.settings)

        # The stored flag only says whether to resume; we always boot stopped
        self._resume_on_launch = self.prefs.is_running
        self.prefs.is_running = False

        self.pending_capture: Optional[Capture] = None

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.take_screenshot)

    # ------------------------------------------------------------------
    # Run state
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.prefs.is_running

    @property
    def timer(self) -> QTimer:
        return self._timer

    def start(self):
        if self.is_running:
            return

        self.ensure_save_directory()
        self._timer.start(int(self.prefs.interval * 1000))
        self.prefs.is_running = True
        self.save_preferences()
        logger.info(f"Started capturing every {self.prefs.interval:g}s into {self.prefs.save_directory}")
        self.running_changed.emit(True)

    def stop(self):
        self._timer.stop()
        was_running = self.is_running
        self.prefs.is_running = False
        self.save_preferences()
        if was_running:
            logger.info("Stopped capturing")
            self.running_changed.emit(False)

    def toggle(self):
        if self.is_running:
            self.stop()
        else:
            self.start()

    def update_interval(self, seconds: float):
        was_running = self.is_running
        if was_running:
            self.stop()

        self.prefs.interval = float(seconds)
        self.save_preferences()

        if was_running:
            self.start()

    def schedule_resume(self) -> bool:
        """Restart capturing shortly after launch if it was running at exit"""
        if not self._resume_on_launch:
            return False
        logger.info("Resuming capture from previous session")
        QTimer.singleShot(Config.AUTO_RESUME_DELAY_MS, self.start)
        return True

    def ensure_save_directory(self) -> bool:
        try:
            Path(self.prefs.save_directory).expanduser().mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.error(f"Could not create {self.prefs.save_directory}: {e}")
            return False

    # ------------------------------------------------------------------
    # Capture pipeline
    # ------------------------------------------------------------------

    def take_screenshot(self):
        """One timer tick: capture, then route by annotation mode"""
        temp_path = os.path.join(tempfile.gettempdir(), f"{uuid.uuid4()}_screenshot.png")

        if not self.capturer.capture_to_file(temp_path, self.prefs.capture_sound):
            logger.warning("Capture failed, skipping this tick")
            _remove_temp_file(temp_path)
            return

        image = QImage(temp_path)
        if image.isNull():
            logger.warning(f"Could not decode capture at {temp_path}, skipping this tick")
            _remove_temp_file(temp_path)
            return

        capture = Capture(image=image, temp_path=temp_path)
        mode = self.prefs.annotation_mode

        if mode == AnnotationMode.MANUAL:
            if self.pending_capture is not None:
                logger.info("Previous capture still awaiting a note, saving it without one")
                self.skip_annotation()
            self.pending_capture = capture
            QTimer.singleShot(0, lambda: self.annotation_requested.emit(capture))
        elif mode == AnnotationMode.PRESET:
            self.process_and_save(capture, self.prefs.preset_annotation)
        else:
            self.process_and_save(capture, None)

    def _take_pending(self, capture: Optional[Capture]) -> Optional[Capture]:
        # A window answering for an older capture arrives too late to count
        if capture is not None and capture is not self.pending_capture:
            return None
        pending, self.pending_capture = self.pending_capture, None
        return pending

    def complete_annotation(self, text: str, capture: Optional[Capture] = None):
        pending = self._take_pending(capture)
        if pending is not None:
            self.process_and_save(pending, text)

    def skip_annotation(self, capture: Optional[Capture] = None):
        pending = self._take_pending(capture)
        if pending is not None:
            self.process_and_save(pending, None)

    def process_and_save(self, capture: Capture, annotation: Optional[str]) -> Optional[Path]:
        """Annotate, resize, compress and write one capture"""
        try:
            image = capture.image
            if annotation and annotation.strip():
                image = annotate_image(image, annotation)
            image = resize_for_quality(image, self.prefs.image_quality)

            data = encode_jpeg(image, self.prefs.compression_quality)
            if not data:
                logger.error("Encoding failed, capture dropped")
                return None

            if not self.ensure_save_directory():
                return None
            filename = build_filename(
                self.prefs.include_timestamp, self.prefs.screenshot_count, capture.timestamp
            )
            save_path = Path(self.prefs.save_directory).expanduser() / filename
            try:
                save_path.write_bytes(data)
            except OSError as e:
                logger.error(f"Could not write {save_path}: {e}")
                return None

            self.prefs.screenshot_count += 1
            self.save_preferences()
            logger.info(f"✅ Screenshot saved: {save_path} ({len(data) // 1024} KB)")
            self.screenshot_saved.emit(str(save_path))
            self.count_changed.emit(self.prefs.screenshot_count)
            return save_path
        finally:
            _remove_temp_file(capture.temp_path)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def save_preferences(self):
        self.prefs.save(self.settings)
        self.preferences_changed.emit()

    def set_save_directory(self, path: str):
        self.prefs.save_directory = path
        self.save_preferences()

    def set_include_timestamp(self, enabled: bool):
        self.prefs.include_timestamp = enabled
        self.save_preferences()

    def set_capture_sound(self, enabled: bool):
        self.prefs.capture_sound = enabled
        self.save_preferences()

    def set_image_quality(self, quality: ImageQuality):
        self.prefs.image_quality = quality
        self.save_preferences()

    def set_compression_quality(self, compression: float):
        self.prefs.compression_quality = min(max(compression, 0.0), 1.0)
        self.save_preferences()

    def set_manual_annotation(self, enabled: bool):
        self.prefs.set_manual_annotation(enabled)
        self.save_preferences()

    def set_preset_annotation(self, enabled: bool):
        self.prefs.set_preset_annotation(enabled)
        self.save_preferences()

    def set_preset_text(self, text: str):
        self.prefs.preset_annotation = text
        self.save_preferences()

    @property
    def estimated_file_size(self) -> str:
        return estimated_file_size(self.prefs.image_quality, self.prefs.compression_quality)

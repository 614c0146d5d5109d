"""
Shared pytest fixtures for the AutoScreenshot test suite.

Runs Qt headless, keeps preferences in a throwaway INI file and replaces the
screen capture tool with fakes that write generated PNGs.
"""

import os
import sys
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QSettings
from PyQt6.QtGui import QImage, QColor
from PyQt6.QtWidgets import QApplication

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def settings(tmp_path):
    """INI-backed store standing in for the user defaults domain"""
    store = QSettings(str(tmp_path / "prefs.ini"), QSettings.Format.IniFormat)
    yield store
    store.sync()


def make_image(width=2880, height=1800, color=QColor(40, 120, 200)) -> QImage:
    image = QImage(width, height, QImage.Format.Format_RGB32)
    image.fill(color)
    return image


class FakeCapturer:
    """Writes a solid PNG instead of shelling out"""

    def __init__(self, width=2880, height=1800, succeed=True, write_garbage=False):
        self.width = width
        self.height = height
        self.succeed = succeed
        self.write_garbage = write_garbage
        self.calls = []

    def capture_to_file(self, path, play_sound=False):
        self.calls.append((path, play_sound))
        if not self.succeed:
            return False
        if self.write_garbage:
            Path(path).write_bytes(b"not an image")
            return True
        return make_image(self.width, self.height).save(path, "PNG")


@pytest.fixture
def fake_capturer():
    return FakeCapturer()


@pytest.fixture
def manager(qapp, settings, fake_capturer, tmp_path):
    from screenshot_manager import ScreenshotManager

    settings.setValue("saveDirectory", str(tmp_path / "shots"))
    settings.setValue("enableAnnotation", False)
    settings.sync()
    mgr = ScreenshotManager(settings=settings, capturer=fake_capturer)
    yield mgr
    mgr.stop()

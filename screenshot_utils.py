import os
import sys
import logging
import platform
import subprocess
import shutil
from typing import List, Optional
from PyQt6.QtWidgets import QApplication

from config import Config

logger = logging.getLogger(__name__)


class ScreenshotBackend:
    """Base class for screenshot backends"""

    def __init__(self):
        self.name = "Base"
        self.available = False

    def is_available(self) -> bool:
        """Check if this backend is available"""
        return self.available

    def build_command(self, path: str, play_sound: bool) -> List[str]:
        """Command line that writes a full screen capture to path"""
        raise NotImplementedError

    def capture_to_file(self, path: str, play_sound: bool = False) -> bool:
        """Run the capture tool and block until it exits"""
        command = self.build_command(path, play_sound)
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=Config.CAPTURE_TIMEOUT
            )
        except (subprocess.TimeoutExpired, subprocess.SubprocessError, OSError) as e:
            logger.error(f"{self.name} capture failed: {e}")
            return False

        if result.returncode != 0:
            logger.error(f"{self.name} error ({result.returncode}): {result.stderr.strip()}")
            return False
        if not os.path.exists(path):
            logger.error(f"{self.name} exited cleanly but wrote no file")
            return False
        return True


class ScreencaptureBackend(ScreenshotBackend):
    """macOS screencapture backend"""

    def __init__(self):
        super().__init__()
        self.name = "screencapture (macOS)"
        self.available = (
            platform.system() == "Darwin" and
            os.path.exists(Config.SCREENCAPTURE_PATH)
        )

    def build_command(self, path: str, play_sound: bool) -> List[str]:
        arguments = [] if play_sound else [Config.SCREENCAPTURE_SILENT_FLAG]
        return [Config.SCREENCAPTURE_PATH] + arguments + [path]


class GrimScreenshotBackend(ScreenshotBackend):
    """Grim screenshot backend for Wayland (sway/wlroots)"""

    def __init__(self):
        super().__init__()
        self.name = "Grim (Wayland)"
        self.available = shutil.which('grim') is not None

    def build_command(self, path: str, play_sound: bool) -> List[str]:
        return ['grim', path]


class GnomeScreenshotBackend(ScreenshotBackend):
    """GNOME Screenshot backend"""

    def __init__(self):
        super().__init__()
        self.name = "GNOME Screenshot"
        self.available = (
            shutil.which('gnome-screenshot') is not None and
            os.environ.get('XDG_CURRENT_DESKTOP', '').lower() in ['gnome', 'ubuntu:gnome']
        )

    def build_command(self, path: str, play_sound: bool) -> List[str]:
        return ['gnome-screenshot', '-f', path]


class SpectacleScreenshotBackend(ScreenshotBackend):
    """KDE Spectacle backend"""

    def __init__(self):
        super().__init__()
        self.name = "Spectacle (KDE)"
        self.available = (
            shutil.which('spectacle') is not None and
            os.environ.get('XDG_CURRENT_DESKTOP', '').lower() in ['kde', 'plasma']
        )

    def build_command(self, path: str, play_sound: bool) -> List[str]:
        return ['spectacle', '-b', '-n', '-o', path]


class ImageMagickScreenshotBackend(ScreenshotBackend):
    """ImageMagick import backend (fallback)"""

    def __init__(self):
        super().__init__()
        self.name = "ImageMagick"
        self.available = shutil.which('import') is not None

    def build_command(self, path: str, play_sound: bool) -> List[str]:
        return ['import', '-window', 'root', path]


class QtScreenshotBackend(ScreenshotBackend):
    """Qt native grab of the primary screen (X11 and Windows)"""

    def __init__(self):
        super().__init__()
        self.name = "Qt Native"
        self.available = self._check_availability()

    def _check_availability(self) -> bool:
        if sys.platform == "darwin":
            return False
        session_type = os.environ.get('XDG_SESSION_TYPE', '').lower()
        if session_type == 'wayland' or os.environ.get('WAYLAND_DISPLAY'):
            return False
        return QApplication.instance() is not None and QApplication.primaryScreen() is not None

    def capture_to_file(self, path: str, play_sound: bool = False) -> bool:
        screen = QApplication.primaryScreen()
        if screen is None:
            logger.error("Qt capture failed: no primary screen")
            return False
        pixmap = screen.grabWindow(0)
        if pixmap.isNull() or not pixmap.save(path, "PNG"):
            logger.error("Qt capture failed: empty grab or unwritable path")
            return False
        return True


class ScreenshotCapturer:
    """Picks the first usable backend for this platform"""

    _backends = None
    _active_backend = None

    @staticmethod
    def _create_backends() -> List[ScreenshotBackend]:
        """Candidates in order of preference"""
        return [
            ScreencaptureBackend(),
            GrimScreenshotBackend(),
            GnomeScreenshotBackend(),
            SpectacleScreenshotBackend(),
            ImageMagickScreenshotBackend(),
            QtScreenshotBackend(),
        ]

    @classmethod
    def _initialize_backends(cls):
        if cls._backends is not None:
            return

        cls._backends = cls._create_backends()

        for backend in cls._backends:
            if backend.is_available():
                cls._active_backend = backend
                logger.info(f"Using screenshot backend: {backend.name}")
                break

        if cls._active_backend is None:
            logger.warning("No screenshot backend available! Install one of: "
                           "grim, gnome-screenshot, spectacle, or imagemagick")

    @classmethod
    def reset(cls):
        """Forget the detected backends so the next capture probes again"""
        cls._backends = None
        cls._active_backend = None

    @classmethod
    def active_backend(cls) -> Optional[ScreenshotBackend]:
        cls._initialize_backends()
        return cls._active_backend

    @classmethod
    def capture_to_file(cls, path: str, play_sound: bool = False) -> bool:
        """Capture the screen into path using the active backend"""
        backend = cls.active_backend()
        if backend is None:
            logger.error("ERROR: No screenshot backend available!")
            return False
        return backend.capture_to_file(path, play_sound)

    @classmethod
    def get_backend_info(cls) -> str:
        """Get information about available backends"""
        cls._initialize_backends()

        info = ["Screenshot Backend Information:", "=" * 35]
        for backend in cls._backends:
            status = "✓ AVAILABLE" if backend.is_available() else "✗ Not available"
            active = " (ACTIVE)" if backend is cls._active_backend else ""
            info.append(f"{backend.name:24} {status}{active}")

        info.append("\nEnvironment:")
        info.append(f"Platform: {platform.system()}")
        info.append(f"Session Type: {os.environ.get('XDG_SESSION_TYPE', 'unknown')}")
        info.append(f"Desktop: {os.environ.get('XDG_CURRENT_DESKTOP', 'unknown')}")
        return "\n".join(info)

#!/usr/bin/env python3
"""
AutoScreenshot - periodic screenshots from the menu bar
Workflow: Start from the menu-bar popover → a capture every interval → optional note → JPEG in the save folder
"""

import sys
import logging
from PyQt6.QtWidgets import QApplication, QSystemTrayIcon

from config import Config
from screenshot_manager import ScreenshotManager
from screenshot_utils import ScreenshotCapturer
from tray import TrayApp

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main():
    """Main function"""
    configure_logging()

    app = QApplication(sys.argv)
    app.setApplicationName(Config.APP_NAME)
    app.setOrganizationName(Config.ORGANIZATION_NAME)
    # Lives in the menu bar, closing the note window must not quit
    app.setQuitOnLastWindowClosed(False)

    if not QSystemTrayIcon.isSystemTrayAvailable():
        logger.warning("No system tray detected, the menu-bar icon may not appear")

    logger.debug(ScreenshotCapturer.get_backend_info())

    manager = ScreenshotManager()
    tray = TrayApp(manager)
    manager.schedule_resume()

    exit_code = app.exec()
    logger.info(f"Exiting ({manager.prefs.screenshot_count} screenshots taken)")
    del tray
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

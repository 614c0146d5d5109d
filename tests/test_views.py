from pathlib import Path

import pytest
from PyQt6.QtTest import QTest

from config import ImageQuality
from settings_view import SettingsView, format_interval
from annotation_window import AnnotationWindow
from tray import TrayApp, camera_icon
from conftest import make_image


@pytest.mark.parametrize("seconds, expected", [
    (30, "30 seconds"),
    (60, "1 minutes"),
    (300, "5 minutes"),
    (1800, "30 minutes"),
    (3600, "1 hour"),
    (7200, "2 hours"),
])
def test_format_interval(seconds, expected):
    assert format_interval(seconds) == expected


class TestSettingsView:

    def test_annotation_toggles_are_exclusive(self, manager):
        view = SettingsView(manager)

        view.preset_checkbox.setChecked(True)
        assert manager.prefs.use_preset_annotation
        assert not view.manual_checkbox.isChecked()
        assert not manager.prefs.enable_annotation

        view.manual_checkbox.setChecked(True)
        assert manager.prefs.enable_annotation
        assert not view.preset_checkbox.isChecked()
        assert manager.settings.value("usePresetAnnotation", type=bool) is False

    def test_preset_text_is_persisted(self, manager):
        view = SettingsView(manager)
        view.preset_checkbox.setChecked(True)
        view.preset_edit.setPlainText("Design review")
        assert manager.settings.value("presetAnnotation") == "Design review"

    def test_compression_slider_updates_estimate(self, manager):
        view = SettingsView(manager)
        view.compression_slider.setValue(5)

        assert manager.prefs.compression_quality == pytest.approx(0.5)
        assert view.compression_value.text() == "50%"
        assert view.size_hint.text() == "Est. file size: ~400 KB"

    def test_quality_and_interval_pickers(self, manager):
        view = SettingsView(manager)
        view._on_quality_selected(view.quality_combo.findData(ImageQuality.MINIMAL.value))
        view._on_interval_selected(view.interval_combo.findData(60.0))

        assert manager.prefs.image_quality is ImageQuality.MINIMAL
        assert manager.prefs.interval == 60
        assert view.interval_label.text() == "Interval: 1 minutes"

    def test_run_button_toggles_state(self, manager):
        view = SettingsView(manager)
        view.run_button.click()
        assert manager.is_running
        assert "Pause" in view.run_button.text()

        view.run_button.click()
        assert not manager.is_running
        assert "Start" in view.run_button.text()

    def test_counter_header_follows_saves(self, manager):
        view = SettingsView(manager)
        manager.take_screenshot()
        assert view.count_label.text() == "1 screenshots taken"


class TestAnnotationWindow:

    def test_save_emits_trimmed_text_once(self, qapp):
        window = AnnotationWindow(make_image(800, 500))
        notes, skips = [], []
        window.saved.connect(notes.append)
        window.skipped.connect(lambda: skips.append(True))

        window.note_edit.setPlainText("  Fixed the login bug \n")
        window.save()
        window.save()

        assert notes == ["Fixed the login bug"]
        assert skips == []

    def test_closing_counts_as_skip(self, qapp):
        window = AnnotationWindow(make_image(800, 500))
        skips = []
        window.skipped.connect(lambda: skips.append(True))
        window.show()
        window.close()
        assert skips == [True]

    def test_dismiss_answers_nothing(self, qapp):
        window = AnnotationWindow(make_image(800, 500))
        events = []
        window.saved.connect(events.append)
        window.skipped.connect(lambda: events.append("skip"))
        window.show()
        window.dismiss()
        assert events == []


class TestTray:

    def test_icon_renders(self, qapp):
        assert not camera_icon(False).isNull()
        assert not camera_icon(True).isNull()

    def test_manual_capture_round_trip(self, manager):
        tray = TrayApp(manager)
        manager.set_manual_annotation(True)

        manager.take_screenshot()
        QTest.qWait(20)
        window = tray.annotation_window
        assert window is not None

        window.note_edit.setPlainText("Reading the design doc")
        window.save()

        files = list(Path(manager.prefs.save_directory).glob("*.jpg"))
        assert len(files) == 1
        assert manager.pending_capture is None

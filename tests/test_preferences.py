import pytest

from config import Config, ImageQuality, AnnotationMode
from preferences import Preferences


class TestLoadDefaults:

    def test_empty_store(self, settings):
        prefs = Preferences.load(settings)

        assert prefs.interval == 300
        assert prefs.save_directory == Config.DEFAULT_SAVE_DIRECTORY
        assert prefs.include_timestamp is False
        assert prefs.capture_sound is False
        assert prefs.screenshot_count == 0
        assert prefs.is_running is False
        assert prefs.image_quality is ImageQuality.MEDIUM
        assert prefs.compression_quality == pytest.approx(0.7)
        assert prefs.enable_annotation is True
        assert prefs.use_preset_annotation is False
        assert prefs.annotation_mode is AnnotationMode.MANUAL

    def test_zero_values_fall_back(self, settings):
        settings.setValue("interval", 0.0)
        settings.setValue("compressionQuality", 0.0)
        settings.setValue("saveDirectory", "")
        prefs = Preferences.load(settings)

        assert prefs.interval == Config.DEFAULT_INTERVAL
        assert prefs.compression_quality == pytest.approx(Config.DEFAULT_COMPRESSION)
        assert prefs.save_directory == Config.DEFAULT_SAVE_DIRECTORY

    def test_unknown_quality_label(self, settings):
        settings.setValue("imageQuality", "Ultra (8K)")
        assert Preferences.load(settings).image_quality is ImageQuality.MEDIUM


class TestRoundTrip:

    def test_save_then_load(self, settings, tmp_path):
        prefs = Preferences(
            interval=600,
            save_directory=str(tmp_path / "out"),
            include_timestamp=True,
            capture_sound=True,
            screenshot_count=41,
            is_running=True,
            image_quality=ImageQuality.VERY_LOW,
            compression_quality=0.4,
            enable_annotation=False,
            preset_annotation="Sprint demo",
            use_preset_annotation=True,
        )
        prefs.save(settings)

        assert Preferences.load(settings) == prefs

    def test_fixed_store_keys(self, settings):
        Preferences().save(settings)
        assert set(settings.allKeys()) == {
            "interval", "saveDirectory", "includeTimestamp", "captureSound",
            "screenshotCount", "isRunning", "imageQuality", "compressionQuality",
            "enableAnnotation", "presetAnnotation", "usePresetAnnotation",
        }

    def test_quality_persisted_as_label(self, settings):
        Preferences(image_quality=ImageQuality.HIGH).save(settings)
        assert settings.value("imageQuality") == "High (1920px)"


class TestAnnotationModes:

    def test_enabling_manual_disables_preset(self):
        prefs = Preferences(enable_annotation=False, use_preset_annotation=True, preset_annotation="x")
        prefs.set_manual_annotation(True)
        assert prefs.enable_annotation and not prefs.use_preset_annotation
        assert prefs.annotation_mode is AnnotationMode.MANUAL

    def test_enabling_preset_disables_manual(self):
        prefs = Preferences(enable_annotation=True, preset_annotation="x")
        prefs.set_preset_annotation(True)
        assert prefs.use_preset_annotation and not prefs.enable_annotation
        assert prefs.annotation_mode is AnnotationMode.PRESET

    def test_disabling_leaves_other_alone(self):
        prefs = Preferences(enable_annotation=False, use_preset_annotation=True)
        prefs.set_manual_annotation(False)
        assert prefs.use_preset_annotation is True

    def test_preset_without_text_means_no_annotation(self):
        prefs = Preferences(enable_annotation=False, use_preset_annotation=True, preset_annotation="")
        assert prefs.annotation_mode is AnnotationMode.NONE

    def test_both_stored_enabled_keeps_preset(self, settings):
        settings.setValue("enableAnnotation", True)
        settings.setValue("usePresetAnnotation", True)
        prefs = Preferences.load(settings)
        assert prefs.use_preset_annotation is True
        assert prefs.enable_annotation is False

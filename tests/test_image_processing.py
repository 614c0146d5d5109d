from datetime import datetime

import pytest
from PyQt6.QtGui import QImage, QColor

from config import ImageQuality
from image_processing import (
    annotate_image, resize_for_quality, encode_jpeg, build_filename,
    estimated_file_size, target_size,
)
from annotations import NoteAnnotation
from drawing_utils import NoteStyle
from conftest import make_image

LIMITED_TIERS = [q for q in ImageQuality if q.max_width is not None]


class TestResize:

    @pytest.mark.parametrize("quality", LIMITED_TIERS, ids=lambda q: q.name)
    def test_wider_source_scales_to_tier_width(self, qapp, quality):
        source = make_image(2880, 1800)
        resized = resize_for_quality(source, quality)

        assert resized.width() == quality.max_width
        expected_height = 1800 * quality.max_width / 2880
        assert abs(resized.height() - expected_height) <= 1

    def test_original_keeps_dimensions(self, qapp):
        source = make_image(5120, 2880)
        resized = resize_for_quality(source, ImageQuality.ORIGINAL)
        assert (resized.width(), resized.height()) == (5120, 2880)

    def test_narrower_source_passes_through(self, qapp):
        source = make_image(800, 600)
        resized = resize_for_quality(source, ImageQuality.MEDIUM)
        assert resized is source

    def test_device_pixel_ratio_is_ignored(self, qapp):
        source = make_image(2880, 1800)
        source.setDevicePixelRatio(2.0)
        resized = resize_for_quality(source, ImageQuality.HIGH)

        assert (resized.width(), resized.height()) == (1920, 1200)
        assert resized.devicePixelRatio() == 1.0

    def test_target_size_truncates_height(self):
        assert target_size(1000, 333, ImageQuality.MINIMAL) == (480, 159)


class TestAnnotation:

    def test_empty_text_returns_same_image(self, qapp):
        source = make_image(640, 480)
        assert annotate_image(source, "") is source
        assert annotate_image(source, "   ") is source
        assert annotate_image(source, None) is source

    def test_note_is_drawn_in_upper_left(self, qapp):
        background = QColor(40, 120, 200)
        source = make_image(1280, 800, background)
        annotated = annotate_image(source, "Reviewing the quarterly numbers")

        assert (annotated.width(), annotated.height()) == (1280, 800)
        # inside the translucent box, away from the text
        assert annotated.pixelColor(30, 30).rgb() != background.rgb()
        # far corner is untouched
        assert annotated.pixelColor(1270, 790).rgb() == background.rgb()
        # source is not modified in place
        assert source.pixelColor(30, 30).rgb() == background.rgb()

    def test_box_wraps_long_text_within_image(self, qapp):
        style = NoteStyle.for_image_width(800)
        short = NoteAnnotation("Short", style).layout(800)
        long_text = " ".join(["wrapping"] * 80)
        long = NoteAnnotation(long_text, style).layout(800)

        assert short.box.x() == style.padding and short.box.y() == style.padding
        assert long.box.width() <= 800 - style.padding * 2
        assert long.box.height() > short.box.height()
        assert short.box.width() < long.box.width()

    def test_font_size_follows_image_width(self):
        assert NoteStyle.for_image_width(500).font_size == 16
        assert NoteStyle.for_image_width(2000).font_size == pytest.approx(36)


class TestEncoding:

    def test_encodes_jpeg(self, qapp):
        data = encode_jpeg(make_image(320, 200), 0.7)
        assert data[:2] == b"\xff\xd8"
        decoded = QImage.fromData(data, "JPEG")
        assert (decoded.width(), decoded.height()) == (320, 200)

    def test_lower_compression_factor_gives_smaller_file(self, qapp):
        image = annotate_image(make_image(640, 400), "Some detail so the encoder has work to do")
        small = encode_jpeg(image, 0.1)
        large = encode_jpeg(image, 1.0)
        assert len(small) < len(large)


class TestNamingAndEstimates:

    def test_timestamp_filename(self):
        when = datetime(2024, 3, 5, 14, 7, 9)
        assert build_filename(True, 12, when) == "screenshot_2024-03-05_14-07-09.jpg"

    def test_counter_filename(self):
        assert build_filename(False, 12) == "screenshot_12.jpg"

    @pytest.mark.parametrize("quality, compression, expected", [
        (ImageQuality.MEDIUM, 0.7, "~560 KB"),
        (ImageQuality.MINIMAL, 0.5, "~50 KB"),
        (ImageQuality.ORIGINAL, 0.7, "~2.1 MB"),
        (ImageQuality.HIGH, 1.0, "~1.5 MB"),
    ])
    def test_estimated_file_size(self, quality, compression, expected):
        assert estimated_file_size(quality, compression) == expected

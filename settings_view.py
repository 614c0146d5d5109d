import logging
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QComboBox, QCheckBox,
    QPlainTextEdit, QSlider, QFileDialog, QFrame, QScrollArea, QApplication
)
from PyQt6.QtCore import Qt, QSignalBlocker
from PyQt6.QtGui import QFont

from config import Config, ImageQuality
from screenshot_manager import ScreenshotManager

logger = logging.getLogger(__name__)

COMPRESSION_STEPS = 10


def format_interval(seconds: float) -> str:
    if seconds < 60:
        return f"{int(seconds)} seconds"
    if seconds < 3600:
        return f"{int(seconds / 60)} minutes"
    hours = int(seconds / 3600)
    return f"{hours} hour{'s' if seconds >= 7200 else ''}"


def _interval_label(seconds: int) -> str:
    # Picker entries read "1 minute", the header reads "1 minutes"
    if seconds == 60:
        return "1 minute"
    return format_interval(seconds)


def _hint(text: str, color: str) -> QLabel:
    label = QLabel(text)
    label.setWordWrap(True)
    label.setStyleSheet(
        f"background-color: {color}; border-radius: 6px; padding: 8px; font-size: 11px;"
    )
    return label


def _divider() -> QFrame:
    line = QFrame()
    line.setFrameShape(QFrame.Shape.HLine)
    line.setFrameShadow(QFrame.Shadow.Sunken)
    return line


class SettingsView(QWidget):
    """Popover with run control and every user preference"""

    def __init__(self, manager: ScreenshotManager, parent=None):
        super().__init__(parent)
        self.manager = manager
        self.setup_ui()
        self.refresh()

        manager.running_changed.connect(lambda _running: self.refresh())
        manager.count_changed.connect(lambda _count: self.refresh())
        manager.preferences_changed.connect(self.refresh)

    def setup_ui(self):
        self.setWindowFlags(Qt.WindowType.Popup)
        self.setFixedSize(*Config.POPOVER_SIZE)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        outer.addWidget(scroll)

        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setSpacing(14)
        scroll.setWidget(content)

        # Header
        title = QLabel(Config.APP_NAME)
        title_font = QFont()
        title_font.setPointSize(16)
        title_font.setBold(True)
        title.setFont(title_font)
        self.count_label = QLabel()
        self.count_label.setStyleSheet("color: gray; font-size: 11px;")
        layout.addWidget(title)
        layout.addWidget(self.count_label)
        layout.addWidget(_divider())

        self.run_button = QPushButton()
        self.run_button.setMinimumHeight(44)
        self.run_button.clicked.connect(self.manager.toggle)
        layout.addWidget(self.run_button)

        # Interval
        self.interval_label = QLabel()
        self.interval_combo = QComboBox()
        for seconds in Config.INTERVAL_CHOICES:
            self.interval_combo.addItem(_interval_label(seconds), float(seconds))
        self.interval_combo.activated.connect(self._on_interval_selected)
        layout.addWidget(self.interval_label)
        layout.addWidget(self.interval_combo)

        # Save location
        layout.addWidget(QLabel("Save Location"))
        location_row = QHBoxLayout()
        self.directory_label = QLabel()
        self.directory_label.setStyleSheet("color: gray; font-size: 11px;")
        self.directory_label.setMinimumWidth(0)
        choose_button = QPushButton("Choose...")
        choose_button.clicked.connect(self.select_folder)
        location_row.addWidget(self.directory_label, stretch=1)
        location_row.addWidget(choose_button)
        layout.addLayout(location_row)
        layout.addWidget(_divider())

        # Annotations
        layout.addWidget(self._section_title("Annotations"))
        self.manual_checkbox = QCheckBox("Enable annotation prompts")
        self.manual_checkbox.toggled.connect(self.manager.set_manual_annotation)
        layout.addWidget(self.manual_checkbox)
        self.manual_hint = _hint(
            "A window will appear after each screenshot to add notes", "rgba(0, 122, 255, 25)"
        )
        layout.addWidget(self.manual_hint)

        self.preset_checkbox = QCheckBox("Use preset annotation")
        self.preset_checkbox.toggled.connect(self.manager.set_preset_annotation)
        layout.addWidget(self.preset_checkbox)

        self.preset_panel = QWidget()
        preset_layout = QVBoxLayout(self.preset_panel)
        preset_layout.setContentsMargins(0, 0, 0, 0)
        preset_caption = QLabel("Preset text (applied to all screenshots)")
        preset_caption.setStyleSheet("color: gray; font-size: 11px;")
        self.preset_edit = QPlainTextEdit()
        self.preset_edit.setFixedHeight(60)
        self.preset_edit.textChanged.connect(self._on_preset_text_changed)
        preset_layout.addWidget(preset_caption)
        preset_layout.addWidget(self.preset_edit)
        preset_layout.addWidget(_hint(
            "This text will be automatically added to all screenshots", "rgba(52, 199, 89, 25)"
        ))
        layout.addWidget(self.preset_panel)
        layout.addWidget(_divider())

        # Image quality
        layout.addWidget(self._section_title("Image Quality"))
        self.quality_combo = QComboBox()
        for quality in ImageQuality:
            self.quality_combo.addItem(quality.value, quality.value)
        self.quality_combo.activated.connect(self._on_quality_selected)
        layout.addWidget(self.quality_combo)

        compression_row = QHBoxLayout()
        compression_row.addWidget(QLabel("Compression"))
        compression_row.addStretch()
        self.compression_value = QLabel()
        self.compression_value.setStyleSheet("color: gray;")
        compression_row.addWidget(self.compression_value)
        layout.addLayout(compression_row)

        self.compression_slider = QSlider(Qt.Orientation.Horizontal)
        self.compression_slider.setRange(1, COMPRESSION_STEPS)
        self.compression_slider.setSingleStep(1)
        self.compression_slider.setPageStep(1)
        self.compression_slider.valueChanged.connect(self._on_compression_changed)
        layout.addWidget(self.compression_slider)

        scale_row = QHBoxLayout()
        for text in ("Smaller", "Better Quality"):
            label = QLabel(text)
            label.setStyleSheet("color: gray; font-size: 10px;")
            scale_row.addWidget(label)
            if text == "Smaller":
                scale_row.addStretch()
        layout.addLayout(scale_row)

        self.size_hint = _hint("", "rgba(0, 122, 255, 25)")
        layout.addWidget(self.size_hint)
        layout.addWidget(_divider())

        # Options
        self.timestamp_checkbox = QCheckBox("Include timestamp in filename")
        self.timestamp_checkbox.toggled.connect(self.manager.set_include_timestamp)
        self.sound_checkbox = QCheckBox("Play camera sound")
        self.sound_checkbox.toggled.connect(self.manager.set_capture_sound)
        layout.addWidget(self.timestamp_checkbox)
        layout.addWidget(self.sound_checkbox)

        quit_button = QPushButton(f"Quit {Config.APP_NAME}")
        quit_button.setFlat(True)
        quit_button.setStyleSheet("color: red; font-size: 11px;")
        quit_button.clicked.connect(QApplication.quit)
        layout.addWidget(quit_button, alignment=Qt.AlignmentFlag.AlignHCenter)
        layout.addStretch()

    def _section_title(self, text: str) -> QLabel:
        label = QLabel(text)
        font = label.font()
        font.setBold(True)
        label.setFont(font)
        return label

    def refresh(self):
        """Sync every control with the manager's current preferences"""
        prefs = self.manager.prefs
        blockers = [QSignalBlocker(widget) for widget in (
            self.interval_combo, self.manual_checkbox, self.preset_checkbox,
            self.preset_edit, self.quality_combo, self.compression_slider,
            self.timestamp_checkbox, self.sound_checkbox,
        )]

        self.count_label.setText(f"{prefs.screenshot_count} screenshots taken")
        running = self.manager.is_running
        self.run_button.setText("⏸  Pause" if running else "▶  Start")
        self.run_button.setStyleSheet(
            "QPushButton { color: white; font-weight: bold; border-radius: 10px; "
            f"background-color: {'#FF9500' if running else '#34C759'}; }}"
        )

        self.interval_label.setText(f"Interval: {format_interval(prefs.interval)}")
        index = self.interval_combo.findData(float(prefs.interval))
        if index >= 0:
            self.interval_combo.setCurrentIndex(index)

        self.directory_label.setText(prefs.save_directory)
        self.directory_label.setToolTip(prefs.save_directory)

        self.manual_checkbox.setChecked(prefs.enable_annotation)
        self.manual_hint.setVisible(prefs.enable_annotation)
        self.preset_checkbox.setChecked(prefs.use_preset_annotation)
        self.preset_panel.setVisible(prefs.use_preset_annotation)
        if self.preset_edit.toPlainText() != prefs.preset_annotation:
            self.preset_edit.setPlainText(prefs.preset_annotation)

        self.quality_combo.setCurrentIndex(self.quality_combo.findData(prefs.image_quality.value))
        self.compression_slider.setValue(round(prefs.compression_quality * COMPRESSION_STEPS))
        self.compression_value.setText(f"{int(round(prefs.compression_quality * 100))}%")
        self.size_hint.setText(f"Est. file size: {self.manager.estimated_file_size}")

        self.timestamp_checkbox.setChecked(prefs.include_timestamp)
        self.sound_checkbox.setChecked(prefs.capture_sound)
        del blockers

    def _on_interval_selected(self, index: int):
        self.manager.update_interval(self.interval_combo.itemData(index))

    def _on_quality_selected(self, index: int):
        quality = ImageQuality.from_label(self.quality_combo.itemData(index))
        if quality is not None:
            self.manager.set_image_quality(quality)

    def _on_compression_changed(self, value: int):
        self.manager.set_compression_quality(value / COMPRESSION_STEPS)

    def _on_preset_text_changed(self):
        self.manager.set_preset_text(self.preset_edit.toPlainText())

    def select_folder(self):
        directory = QFileDialog.getExistingDirectory(
            None, "Choose Save Location", self.manager.prefs.save_directory,
            QFileDialog.Option.ShowDirsOnly
        )
        if directory:
            logger.info(f"Save location changed to {directory}")
            self.manager.set_save_directory(directory)

"""Dialog collecting the parameters of an AI quiz generation request."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from quizwhiz.constants.ai_constants import DIFFICULTIES, QUIZ_TYPES
from quizwhiz.constants.ui_constants import IMAGE_DIALOG_TITLE, IMAGE_FILE_FILTER
from quizwhiz.core.services.quiz_generator import MAX_GENERATED_QUESTIONS

_IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


class GenerateQuizDialog(QDialog):
    """Asks for a topic (or an image), difficulty, question count and quiz type."""

    def __init__(self, parent=None, *, from_image: bool = False) -> None:
        super().__init__(parent)
        self.setWindowTitle("Generate Quiz from Image" if from_image else "Generate Quiz with AI")
        self.setModal(True)
        self.setMinimumWidth(420)

        self._from_image = from_image
        self._image_path: Path | None = None

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        source_group = QGroupBox("Image" if self._from_image else "Topic")
        source_layout = QHBoxLayout()
        source_group.setLayout(source_layout)
        if self._from_image:
            self.image_label = QLabel("No image selected")
            source_layout.addWidget(self.image_label, stretch=1)
            choose_button = QPushButton("Choose…")
            choose_button.clicked.connect(self._handle_choose_image)
            source_layout.addWidget(choose_button)
        else:
            self.topic_input = QLineEdit()
            self.topic_input.setPlaceholderText("e.g. The Solar System")
            source_layout.addWidget(self.topic_input)
        layout.addWidget(source_group)

        options_group = QGroupBox("Options")
        options_layout = QVBoxLayout()
        options_group.setLayout(options_layout)

        difficulty_row = QHBoxLayout()
        difficulty_row.addWidget(QLabel("Difficulty:"))
        difficulty_row.addStretch()
        self.difficulty_combo = QComboBox()
        for difficulty in DIFFICULTIES:
            self.difficulty_combo.addItem(difficulty.capitalize(), userData=difficulty)
        self.difficulty_combo.setCurrentIndex(DIFFICULTIES.index("medium"))
        difficulty_row.addWidget(self.difficulty_combo)
        options_layout.addLayout(difficulty_row)

        count_row = QHBoxLayout()
        count_row.addWidget(QLabel("Number of questions:"))
        count_row.addStretch()
        self.count_spinbox = QSpinBox()
        self.count_spinbox.setRange(1, MAX_GENERATED_QUESTIONS)
        self.count_spinbox.setValue(5)
        count_row.addWidget(self.count_spinbox)
        options_layout.addLayout(count_row)

        if not self._from_image:
            type_row = QHBoxLayout()
            type_row.addWidget(QLabel("Question types:"))
            type_row.addStretch()
            self.type_combo = QComboBox()
            for quiz_type in QUIZ_TYPES:
                self.type_combo.addItem(quiz_type.replace("-", " ").capitalize(), userData=quiz_type)
            type_row.addWidget(self.type_combo)
            options_layout.addLayout(type_row)

        layout.addWidget(options_group)

        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.generate_button = QPushButton("Generate")
        self.generate_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.generate_button.setDefault(True)
        button_row.addWidget(self.generate_button)

        layout.addLayout(button_row)

    def _handle_choose_image(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(self, IMAGE_DIALOG_TITLE, str(Path.home()), IMAGE_FILE_FILTER)
        if not file_path:
            return
        self._image_path = Path(file_path)
        self.image_label.setText(self._image_path.name)

    def get_topic(self) -> str:
        return self.topic_input.text().strip() if not self._from_image else ""

    def get_difficulty(self) -> str:
        return self.difficulty_combo.currentData()

    def get_count(self) -> int:
        return self.count_spinbox.value()

    def get_quiz_type(self) -> str:
        return self.type_combo.currentData() if not self._from_image else "mixed"

    def get_image(self) -> tuple[bytes, str] | None:
        """Return the chosen image bytes and MIME type, or None when nothing was chosen."""
        if self._image_path is None:
            return None
        mime_type = _IMAGE_MIME_TYPES.get(self._image_path.suffix.lower(), "image/png")
        return self._image_path.read_bytes(), mime_type

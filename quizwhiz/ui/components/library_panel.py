"""Component listing the user's quizzes and the community catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizwhiz.constants.ui_constants import (
    COMMUNITY_IMPORT_BUTTON,
    COMMUNITY_SEARCH_PLACEHOLDER,
    EXPORT_ALL_DIALOG_TITLE,
    EXPORT_ALL_FILE_FILTER,
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    LIBRARY_DELETE_BUTTON,
    LIBRARY_EDIT_BUTTON,
    LIBRARY_EXPORT_ALL_BUTTON,
    LIBRARY_EXPORT_BUTTON,
    LIBRARY_GENERATE_BUTTON,
    LIBRARY_GENERATE_IMAGE_BUTTON,
    LIBRARY_IMPORT_BUTTON,
    LIBRARY_PLAY_BUTTON,
    LIBRARY_STUDY_BUTTON,
    NO_QUIZ_SELECTED_MESSAGE,
    STORAGE_FULL_MESSAGE,
)
from quizwhiz.core.models import Quiz
from quizwhiz.core.quiz_exporter import backup_filename, quiz_filename
from quizwhiz.core.quiz_importer import QuizImportError
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.quiz_schema import GeneratedQuiz
from quizwhiz.core.services.quiz_draft import QuizDraft
from quizwhiz.core.services.quiz_generator import QuizGenerationError
from quizwhiz.core.storage import StorageError, StorageQuotaExceededError
from quizwhiz.ui.dialog_helpers import confirm_delete_quiz, show_error, show_info, show_warning
from quizwhiz.ui.generate_dialog import GenerateQuizDialog


def _quiz_item(quiz: Quiz, subtitle: str = "") -> QListWidgetItem:
    count = len(quiz.questions)
    label = f"{quiz.title}  ·  {count} question{'s' if count != 1 else ''}"
    if subtitle:
        label = f"{label}  ·  {subtitle}"
    item = QListWidgetItem(label)
    item.setData(Qt.UserRole, quiz.id)
    return item


class LibraryPanel(QWidget):
    """UI component for browsing, importing, exporting and generating quizzes."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        on_play: Callable[[Quiz], None],
        on_study: Callable[[Quiz], None],
        on_edit: Callable[[QuizDraft], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.on_play = on_play
        self.on_study = on_study
        self.on_edit = on_edit
        self._last_export_dir: Path = Path.home()

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # My quizzes
        library_group = QGroupBox("My Quizzes", self)
        library_layout = QVBoxLayout()
        library_group.setLayout(library_layout)

        self.quiz_list = QListWidget(self)
        self.quiz_list.itemDoubleClicked.connect(lambda _: self._handle_play())
        library_layout.addWidget(self.quiz_list)

        action_row = QHBoxLayout()
        self.play_button = QPushButton(LIBRARY_PLAY_BUTTON, self)
        self.play_button.clicked.connect(self._handle_play)
        action_row.addWidget(self.play_button)

        self.study_button = QPushButton(LIBRARY_STUDY_BUTTON, self)
        self.study_button.clicked.connect(self._handle_study)
        action_row.addWidget(self.study_button)

        self.edit_button = QPushButton(LIBRARY_EDIT_BUTTON, self)
        self.edit_button.clicked.connect(self._handle_edit)
        action_row.addWidget(self.edit_button)

        self.delete_button = QPushButton(LIBRARY_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete)
        action_row.addWidget(self.delete_button)

        self.export_button = QPushButton(LIBRARY_EXPORT_BUTTON, self)
        self.export_button.clicked.connect(self._handle_export)
        action_row.addWidget(self.export_button)
        library_layout.addLayout(action_row)

        file_row = QHBoxLayout()
        self.import_button = QPushButton(LIBRARY_IMPORT_BUTTON, self)
        self.import_button.clicked.connect(self._handle_import)
        file_row.addWidget(self.import_button)

        self.export_all_button = QPushButton(LIBRARY_EXPORT_ALL_BUTTON, self)
        self.export_all_button.clicked.connect(self._handle_export_all)
        file_row.addWidget(self.export_all_button)

        file_row.addStretch()

        self.generate_button = QPushButton(LIBRARY_GENERATE_BUTTON, self)
        self.generate_button.clicked.connect(lambda: self._handle_generate(from_image=False))
        file_row.addWidget(self.generate_button)

        self.generate_image_button = QPushButton(LIBRARY_GENERATE_IMAGE_BUTTON, self)
        self.generate_image_button.clicked.connect(lambda: self._handle_generate(from_image=True))
        file_row.addWidget(self.generate_image_button)
        library_layout.addLayout(file_row)

        self.storage_label = QLabel("", self)
        library_layout.addWidget(self.storage_label)

        layout.addWidget(library_group, stretch=3)

        # Community
        community_group = QGroupBox("Community", self)
        community_layout = QVBoxLayout()
        community_group.setLayout(community_layout)

        self.search_input = QLineEdit(self)
        self.search_input.setPlaceholderText(COMMUNITY_SEARCH_PLACEHOLDER)
        self.search_input.textChanged.connect(lambda _: self.refresh_community())
        community_layout.addWidget(self.search_input)

        self.community_list = QListWidget(self)
        community_layout.addWidget(self.community_list)

        community_row = QHBoxLayout()
        self.community_play_button = QPushButton(LIBRARY_PLAY_BUTTON, self)
        self.community_play_button.clicked.connect(self._handle_play_community)
        community_row.addWidget(self.community_play_button)

        self.community_study_button = QPushButton(LIBRARY_STUDY_BUTTON, self)
        self.community_study_button.clicked.connect(self._handle_study_community)
        community_row.addWidget(self.community_study_button)

        self.community_import_button = QPushButton(COMMUNITY_IMPORT_BUTTON, self)
        self.community_import_button.clicked.connect(self._handle_import_community)
        community_row.addWidget(self.community_import_button)
        community_row.addStretch()
        community_layout.addLayout(community_row)

        layout.addWidget(community_group, stretch=2)

    # --- Refresh ---

    def refresh(self) -> None:
        self.refresh_library()
        self.refresh_community()

    def refresh_library(self) -> None:
        self.quiz_list.clear()
        for quiz in self.quiz_manager.list_my_quizzes():
            self.quiz_list.addItem(_quiz_item(quiz, quiz.created_at.strftime("%Y-%m-%d")))

        usage = self.quiz_manager.storage_usage()
        if usage.quota_bytes:
            self.storage_label.setText(
                f"Storage used: {usage.used_bytes / 1024:.0f} KB of {usage.quota_bytes / 1024:.0f} KB "
                f"({usage.percent:.0f}%)"
            )
        else:
            self.storage_label.setText(f"Storage used: {usage.used_bytes / 1024:.0f} KB")

    def refresh_community(self) -> None:
        self.community_list.clear()
        for entry in self.quiz_manager.list_community_quizzes(self.search_input.text()):
            self.community_list.addItem(_quiz_item(entry.quiz, f"by {entry.author}  ·  {entry.plays} plays"))

    # --- Selection helpers ---

    def _selected_quiz(self, list_widget: QListWidget) -> Quiz | None:
        item = list_widget.currentItem()
        if item is None:
            show_info(self, "No selection", NO_QUIZ_SELECTED_MESSAGE)
            return None
        quiz = self.quiz_manager.get_quiz(item.data(Qt.UserRole))
        if quiz is None:
            show_error(self, "Quiz missing", "The selected quiz no longer exists.")
            self.refresh()
        return quiz

    # --- My quizzes ---

    def _handle_play(self) -> None:
        quiz = self._selected_quiz(self.quiz_list)
        if quiz is not None:
            self.on_play(quiz)

    def _handle_study(self) -> None:
        quiz = self._selected_quiz(self.quiz_list)
        if quiz is not None:
            self.on_study(quiz)

    def _handle_edit(self) -> None:
        quiz = self._selected_quiz(self.quiz_list)
        if quiz is not None:
            self.on_edit(QuizDraft.from_quiz(quiz))

    def _handle_delete(self) -> None:
        quiz = self._selected_quiz(self.quiz_list)
        if quiz is None or not confirm_delete_quiz(self, quiz.title):
            return
        try:
            self.quiz_manager.delete_quiz(quiz.id)
        except StorageError as exc:
            show_error(self, "Delete failed", str(exc))
            return
        self.refresh_library()

    def _handle_export(self) -> None:
        quiz = self._selected_quiz(self.quiz_list)
        if quiz is None:
            return
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(self._last_export_dir / quiz_filename(quiz)),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return
        try:
            self.quiz_manager.export_quiz_file(quiz.id, Path(file_path))
        except (OSError, ValueError, KeyError) as exc:
            show_error(self, "Export failed", str(exc))
            return
        self._last_export_dir = Path(file_path).parent
        show_info(self, "Quiz exported", f"Quiz saved to {file_path}.")

    def _handle_export_all(self) -> None:
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_ALL_DIALOG_TITLE,
            str(self._last_export_dir / backup_filename()),
            EXPORT_ALL_FILE_FILTER,
        )
        if not file_path:
            return
        try:
            names = self.quiz_manager.export_all_quizzes(Path(file_path))
        except (OSError, ValueError) as exc:
            show_error(self, "Export failed", str(exc))
            return
        self._last_export_dir = Path(file_path).parent
        show_info(self, "Backup saved", f"Exported {len(names)} quizzes to {file_path}.")

    def _handle_import(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(self._last_export_dir),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return
        try:
            quiz = self.quiz_manager.import_quiz_file(Path(file_path))
        except QuizImportError as exc:
            show_error(self, "Import failed", str(exc))
            return
        except StorageQuotaExceededError:
            show_warning(self, "Storage Full", STORAGE_FULL_MESSAGE)
            return
        self.refresh_library()
        show_info(self, "Quiz imported", f"Imported \"{quiz.title}\" with {len(quiz.questions)} questions.")

    def _handle_generate(self, *, from_image: bool) -> None:
        if not self.quiz_manager.generator.is_configured:
            show_warning(
                self,
                "AI unavailable",
                "Set the GITHUB_TOKEN environment variable to enable AI quiz generation.",
            )
            return
        dialog = GenerateQuizDialog(self, from_image=from_image)
        if not dialog.exec():
            return

        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            if from_image:
                image = dialog.get_image()
                if image is None:
                    raise ValueError("Please choose an image.")
                generated = self.quiz_manager.generate_quiz_from_image(
                    image[0], image[1], dialog.get_difficulty(), dialog.get_count()
                )
            else:
                generated = self.quiz_manager.generate_quiz(
                    dialog.get_topic(), dialog.get_difficulty(), dialog.get_count(), dialog.get_quiz_type()
                )
        except (ValueError, OSError, QuizGenerationError) as exc:
            show_error(self, "Generation failed", str(exc))
            return
        finally:
            QApplication.restoreOverrideCursor()

        self._open_generated(generated)

    def _open_generated(self, generated: GeneratedQuiz) -> None:
        draft = QuizDraft()
        self.quiz_manager.append_generated(draft, generated.questions, generated.title)
        self.on_edit(draft)

    # --- Community ---

    def _handle_play_community(self) -> None:
        quiz = self._selected_quiz(self.community_list)
        if quiz is not None:
            self.on_play(quiz)

    def _handle_study_community(self) -> None:
        quiz = self._selected_quiz(self.community_list)
        if quiz is not None:
            self.on_study(quiz)

    def _handle_import_community(self) -> None:
        item = self.community_list.currentItem()
        if item is None:
            show_info(self, "No selection", NO_QUIZ_SELECTED_MESSAGE)
            return
        try:
            quiz = self.quiz_manager.import_community_quiz(item.data(Qt.UserRole))
        except KeyError as exc:
            show_error(self, "Import failed", str(exc))
            return
        except StorageQuotaExceededError:
            show_warning(self, "Storage Full", STORAGE_FULL_MESSAGE)
            return
        self.refresh_library()
        show_info(self, "Quiz added", f"\"{quiz.title}\" is now in your quizzes.")

    def apply_font_size(self, font_size: int) -> None:
        style = f"font-size: {font_size}pt;"
        buttons = [
            self.play_button,
            self.study_button,
            self.edit_button,
            self.delete_button,
            self.export_button,
            self.import_button,
            self.export_all_button,
            self.generate_button,
            self.generate_image_button,
            self.community_play_button,
            self.community_study_button,
            self.community_import_button,
        ]
        for button in buttons:
            button.setStyleSheet(style)

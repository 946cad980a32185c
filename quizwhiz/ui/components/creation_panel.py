"""Component for creating and editing a quiz draft."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QRadioButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from quizwhiz.constants.quiz_constants import MAX_TIME_LIMIT_SECONDS, MIN_TIME_LIMIT_SECONDS, MUSIC_TRACKS
from quizwhiz.constants.ui_constants import (
    CREATOR_ADD_BUTTON,
    CREATOR_CANCEL_BUTTON,
    CREATOR_DELETE_BUTTON,
    CREATOR_MOVE_DOWN_BUTTON,
    CREATOR_MOVE_UP_BUTTON,
    CREATOR_NEXT_BUTTON,
    CREATOR_PREV_BUTTON,
    CREATOR_SAVE_BUTTON,
    PLACEHOLDER_EXPLANATION,
    PLACEHOLDER_QUESTION,
    STORAGE_FULL_MESSAGE,
)
from quizwhiz.core.models import QuestionType, Quiz
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.quiz_validation import QuizValidationError
from quizwhiz.core.services.quiz_draft import QuestionDraft, QuizDraft
from quizwhiz.core.storage import StorageError, StorageQuotaExceededError
from quizwhiz.styling.color_palette import ColorPalette
from quizwhiz.ui.dialog_helpers import (
    confirm_delete_question,
    confirm_discard_draft,
    show_achievements,
    show_error,
    show_info,
    show_warning,
)
from quizwhiz.ui.question_renderer import render_question_with_options

_TYPE_LABELS: tuple[tuple[QuestionType, str], ...] = (
    (QuestionType.MULTIPLE_CHOICE, "Multiple choice"),
    (QuestionType.TRUE_FALSE, "True / False"),
    (QuestionType.TEXT_INPUT, "Text answer"),
    (QuestionType.ORDERING, "Ordering"),
)


class _OptionRow:
    """Widgets editing one answer option."""

    def __init__(self, panel: "CreationPanel", option_index: int) -> None:
        self.layout = QHBoxLayout()
        self.correct_radio = QRadioButton(panel)
        self.correct_radio.setToolTip("Mark as the correct answer")
        self.layout.addWidget(self.correct_radio)

        self.input = QLineEdit(panel)
        self.input.setPlaceholderText(f"Option {option_index + 1}")
        self.input.textEdited.connect(lambda text: panel._handle_option_edited(option_index, text))
        self.layout.addWidget(self.input, stretch=1)

        self.up_button = QPushButton(CREATOR_MOVE_UP_BUTTON, panel)
        self.up_button.clicked.connect(lambda: panel._handle_move_option(option_index, -1))
        self.layout.addWidget(self.up_button)

        self.down_button = QPushButton(CREATOR_MOVE_DOWN_BUTTON, panel)
        self.down_button.clicked.connect(lambda: panel._handle_move_option(option_index, 1))
        self.layout.addWidget(self.down_button)

    def set_visible(self, visible: bool) -> None:
        for widget in (self.correct_radio, self.input, self.up_button, self.down_button):
            widget.setVisible(visible)


class CreationPanel(QWidget):
    """UI component for editing a quiz draft question by question."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        on_saved: Callable[[Quiz], None],
        on_close: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.on_saved = on_saved
        self.on_close = on_close

        self._draft = QuizDraft()
        self._current_question_index: int = 0
        self._has_unsaved_changes: bool = False
        self._loading: bool = False
        self._preview_font_size: int = 14

        self._build_ui()
        self.load_draft(self._draft)

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Quiz settings
        quiz_row = QHBoxLayout()
        self.title_input = QLineEdit(self)
        self.title_input.setPlaceholderText("Quiz title")
        self.title_input.textEdited.connect(self._handle_title_edited)
        quiz_row.addWidget(self.title_input, stretch=1)

        quiz_row.addWidget(QLabel("Theme:", self))
        self.theme_combo = QComboBox(self)
        for key, colors in ColorPalette.QUIZ_THEMES.items():
            self.theme_combo.addItem(colors.label, userData=key)
        self.theme_combo.currentIndexChanged.connect(self._handle_theme_changed)
        quiz_row.addWidget(self.theme_combo)

        quiz_row.addWidget(QLabel("Music:", self))
        self.music_combo = QComboBox(self)
        for label, url in MUSIC_TRACKS:
            self.music_combo.addItem(label, userData=url)
        self.music_combo.currentIndexChanged.connect(self._handle_music_changed)
        quiz_row.addWidget(self.music_combo)

        self.shuffle_checkbox = QCheckBox("Shuffle questions", self)
        self.shuffle_checkbox.toggled.connect(self._handle_shuffle_toggled)
        quiz_row.addWidget(self.shuffle_checkbox)
        layout.addLayout(quiz_row)

        # Navigation
        action_row = QHBoxLayout()
        self.prev_button = QPushButton(CREATOR_PREV_BUTTON, self)
        self.prev_button.clicked.connect(lambda: self._navigate(-1))
        action_row.addWidget(self.prev_button)

        self.next_button = QPushButton(CREATOR_NEXT_BUTTON, self)
        self.next_button.clicked.connect(lambda: self._navigate(1))
        action_row.addWidget(self.next_button)

        self.add_button = QPushButton(CREATOR_ADD_BUTTON, self)
        self.add_button.clicked.connect(self._handle_add_question)
        action_row.addWidget(self.add_button)

        self.delete_button = QPushButton(CREATOR_DELETE_BUTTON, self)
        self.delete_button.clicked.connect(self._handle_delete_question)
        action_row.addWidget(self.delete_button)

        action_row.addStretch()

        self.type_combo = QComboBox(self)
        for question_type, label in _TYPE_LABELS:
            self.type_combo.addItem(label, userData=question_type)
        self.type_combo.currentIndexChanged.connect(self._handle_type_changed)
        action_row.addWidget(self.type_combo)

        self.time_limit_spinbox = QSpinBox(self)
        self.time_limit_spinbox.setRange(MIN_TIME_LIMIT_SECONDS, MAX_TIME_LIMIT_SECONDS)
        self.time_limit_spinbox.setSingleStep(5)
        self.time_limit_spinbox.setSuffix(" s")
        self.time_limit_spinbox.valueChanged.connect(self._handle_time_limit_changed)
        action_row.addWidget(self.time_limit_spinbox)
        layout.addLayout(action_row)

        # Question input
        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._handle_text_changed)
        layout.addWidget(self.question_input)

        # Options
        self.ordering_hint = QLabel("List the items in the CORRECT order. Players see them shuffled.", self)
        layout.addWidget(self.ordering_hint)

        self.options_layout = QVBoxLayout()
        self.correct_group = QButtonGroup(self)
        self.correct_group.setExclusive(True)
        self.correct_group.idToggled.connect(self._handle_correct_toggled)
        self.option_rows: list[_OptionRow] = []
        layout.addLayout(self.options_layout)

        self.answer_input = QLineEdit(self)
        self.answer_input.setPlaceholderText("Correct answer (matching ignores case and surrounding spaces)")
        self.answer_input.textEdited.connect(self._handle_answer_edited)
        layout.addWidget(self.answer_input)

        self.explanation_input = QLineEdit(self)
        self.explanation_input.setPlaceholderText(PLACEHOLDER_EXPLANATION)
        self.explanation_input.textEdited.connect(self._handle_explanation_edited)
        layout.addWidget(self.explanation_input)

        self.image_input = QLineEdit(self)
        self.image_input.setPlaceholderText("Optional: image URL shown above the question")
        self.image_input.textEdited.connect(self._handle_image_edited)
        layout.addWidget(self.image_input)

        # Preview
        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view, stretch=1)

        # Save row
        save_row = QHBoxLayout()
        self.status_label = QLabel("", self)
        save_row.addWidget(self.status_label, stretch=1)

        self.close_button = QPushButton(CREATOR_CANCEL_BUTTON, self)
        self.close_button.clicked.connect(self._handle_close)
        save_row.addWidget(self.close_button)

        self.save_button = QPushButton(CREATOR_SAVE_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save)
        save_row.addWidget(self.save_button)
        layout.addLayout(save_row)

    # --- Loading ---

    def load_draft(self, draft: QuizDraft) -> None:
        """Replace the edited draft and show its first question."""
        self._draft = draft
        self._loading = True
        self.title_input.setText(draft.title)
        theme_index = self.theme_combo.findData(draft.theme)
        self.theme_combo.setCurrentIndex(theme_index if theme_index >= 0 else 0)
        self.shuffle_checkbox.setChecked(draft.shuffle_questions)
        music_index = self.music_combo.findData(draft.background_music)
        self.music_combo.setCurrentIndex(music_index if music_index >= 0 else 0)
        self._loading = False

        self._current_question_index = 0
        self._populate_question()
        self._has_unsaved_changes = False

    def _ensure_option_rows(self, count: int) -> None:
        while len(self.option_rows) < count:
            row = _OptionRow(self, len(self.option_rows))
            self.correct_group.addButton(row.correct_radio, len(self.option_rows))
            self.options_layout.addLayout(row.layout)
            self.option_rows.append(row)

    def _current_question(self) -> QuestionDraft:
        return self._draft.get_question_at_index(self._current_question_index)

    def _populate_question(self) -> None:
        question = self._current_question()
        self._loading = True
        self.type_combo.setCurrentIndex(self.type_combo.findData(question.question_type))
        self.question_input.setPlainText(question.text)
        self.time_limit_spinbox.setValue(question.time_limit_seconds)
        self.explanation_input.setText(question.explanation)
        self.image_input.setText(question.image_ref)

        is_text = question.question_type == QuestionType.TEXT_INPUT
        is_ordering = question.question_type == QuestionType.ORDERING
        is_true_false = question.question_type == QuestionType.TRUE_FALSE

        self._ensure_option_rows(len(question.options))
        self.correct_group.setExclusive(False)
        for option_index, row in enumerate(self.option_rows):
            visible = not is_text and option_index < len(question.options)
            row.set_visible(visible)
            if not visible:
                continue
            row.input.setText(question.options[option_index])
            row.input.setReadOnly(is_true_false)
            row.correct_radio.setVisible(not is_ordering)
            row.correct_radio.setChecked(question.correct == option_index)
            row.up_button.setVisible(is_ordering)
            row.down_button.setVisible(is_ordering)
            row.up_button.setEnabled(option_index > 0)
            row.down_button.setEnabled(option_index < len(question.options) - 1)
        self.correct_group.setExclusive(True)

        self.answer_input.setVisible(is_text)
        self.answer_input.setText(question.correct if is_text and isinstance(question.correct, str) else "")
        self.ordering_hint.setVisible(is_ordering)
        self._loading = False

        count = self._draft.get_question_count()
        self.prev_button.setEnabled(self._current_question_index > 0)
        self.next_button.setEnabled(self._current_question_index < count - 1)
        self.delete_button.setEnabled(count > 1)
        self.status_label.setText(f"Question {self._current_question_index + 1} of {count}")
        self._refresh_preview()

    def _refresh_preview(self) -> None:
        question = self._current_question()
        options = [] if question.question_type == QuestionType.TEXT_INPUT else question.options
        html = render_question_with_options(
            question.text, options, self._preview_font_size, image_url=question.image_ref
        )
        self.preview_view.setHtml(html)

    def _mark_changed(self) -> None:
        self._has_unsaved_changes = True
        self._refresh_preview()

    # --- Quiz settings ---

    def _handle_title_edited(self, text: str) -> None:
        self._draft.title = text
        self._has_unsaved_changes = True

    def _handle_theme_changed(self, _index: int) -> None:
        if self._loading:
            return
        self._draft.theme = self.theme_combo.currentData()
        self._has_unsaved_changes = True

    def _handle_music_changed(self, _index: int) -> None:
        if self._loading:
            return
        self._draft.background_music = self.music_combo.currentData()
        self._has_unsaved_changes = True

    def _handle_shuffle_toggled(self, checked: bool) -> None:
        if self._loading:
            return
        self._draft.shuffle_questions = checked
        self._has_unsaved_changes = True

    # --- Question edits ---

    def _handle_type_changed(self, _index: int) -> None:
        if self._loading:
            return
        self._draft.change_type(self._current_question_index, self.type_combo.currentData())
        self._has_unsaved_changes = True
        self._populate_question()

    def _handle_text_changed(self) -> None:
        if self._loading:
            return
        self._draft.set_text(self._current_question_index, self.question_input.toPlainText())
        self._mark_changed()

    def _handle_option_edited(self, option_index: int, text: str) -> None:
        try:
            self._draft.set_option(self._current_question_index, option_index, text)
        except (ValueError, IndexError):
            return
        self._mark_changed()

    def _handle_correct_toggled(self, option_index: int, checked: bool) -> None:
        if self._loading or not checked:
            return
        try:
            self._draft.set_correct(self._current_question_index, option_index)
        except ValueError as exc:
            show_warning(self, "Invalid answer", str(exc))
            return
        self._has_unsaved_changes = True

    def _handle_answer_edited(self, text: str) -> None:
        self._draft.set_correct(self._current_question_index, text)
        self._has_unsaved_changes = True

    def _handle_explanation_edited(self, text: str) -> None:
        self._draft.set_explanation(self._current_question_index, text)
        self._has_unsaved_changes = True

    def _handle_image_edited(self, text: str) -> None:
        self._draft.set_image(self._current_question_index, text.strip())
        self._mark_changed()

    def _handle_time_limit_changed(self, value: int) -> None:
        if self._loading:
            return
        self._draft.set_time_limit(self._current_question_index, int(value))
        self._has_unsaved_changes = True

    def _handle_move_option(self, option_index: int, offset: int) -> None:
        if self._draft.move_option(self._current_question_index, option_index, offset):
            self._has_unsaved_changes = True
            self._populate_question()

    # --- Questions ---

    def _navigate(self, step: int) -> None:
        target = self._current_question_index + step
        if not 0 <= target < self._draft.get_question_count():
            return
        self._current_question_index = target
        self._populate_question()

    def _handle_add_question(self) -> None:
        self._current_question_index = self._draft.add_question()
        self._has_unsaved_changes = True
        self._populate_question()

    def _handle_delete_question(self) -> None:
        if not confirm_delete_question(self, self._current_question_index + 1):
            return
        if not self._draft.delete_question(self._current_question_index):
            show_info(self, "Cannot delete", "A quiz needs at least one question.")
            return
        self._current_question_index = min(self._current_question_index, self._draft.get_question_count() - 1)
        self._has_unsaved_changes = True
        self._populate_question()

    # --- Save / close ---

    def _handle_save(self) -> None:
        try:
            quiz, unlocked = self.quiz_manager.save_draft(self._draft)
        except QuizValidationError as exc:
            show_warning(self, "Please fix the following", "\n".join(exc.errors))
            return
        except StorageQuotaExceededError:
            show_warning(self, "Storage Full", STORAGE_FULL_MESSAGE)
            return
        except StorageError as exc:
            show_error(self, "Save failed", f"Could not save quiz: {exc}")
            return

        self._draft = QuizDraft.from_quiz(quiz)
        self._has_unsaved_changes = False
        show_achievements(self, unlocked)
        self.on_saved(quiz)

    def _handle_close(self) -> None:
        if self.check_unsaved_changes():
            self.on_close()

    def check_unsaved_changes(self) -> bool:
        """Returns True if it is ok to leave the editor."""
        if not self._has_unsaved_changes:
            return True
        if confirm_discard_draft(self):
            self._has_unsaved_changes = False
            return True
        return False

    def apply_font_size(self, font_size: int) -> None:
        style = f"font-size: {font_size}pt;"
        buttons = [
            self.prev_button,
            self.next_button,
            self.add_button,
            self.delete_button,
            self.save_button,
            self.close_button,
        ]
        for button in buttons:
            button.setStyleSheet(style)

    def set_preview_font_size(self, font_size: int) -> None:
        self._preview_font_size = font_size
        self._refresh_preview()

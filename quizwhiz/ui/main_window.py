"""Qt main window switching between the QuizWhiz modes."""

from __future__ import annotations

from enum import Enum, auto

from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quizwhiz.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from quizwhiz.constants.ui_constants import (
    MODE_BUTTON_CREATE,
    MODE_BUTTON_LIBRARY,
    MODE_BUTTON_LOG_OUT,
    MODE_BUTTON_PROGRESS,
    WINDOW_TITLE,
)
from quizwhiz.core.models import Quiz, QuizResult, User
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.services.quiz_draft import QuizDraft
from quizwhiz.core.storage import StorageError
from quizwhiz.styling.styles import Styles
from quizwhiz.ui.components.creation_panel import CreationPanel
from quizwhiz.ui.components.library_panel import LibraryPanel
from quizwhiz.ui.components.login_panel import LoginPanel
from quizwhiz.ui.components.player_panel import PlayerPanel
from quizwhiz.ui.components.progress_panel import ProgressPanel
from quizwhiz.ui.components.study_panel import StudyPanel
from quizwhiz.ui.dialog_helpers import (
    confirm_clear_history,
    confirm_delete_account,
    show_achievements,
    show_error,
    show_info,
)
from quizwhiz.ui.settings_dialog import SettingsDialog


class AppMode(Enum):
    """High-level UI mode of the main window."""

    LOGIN = auto()
    LIBRARY = auto()
    CREATOR = auto()
    PLAYER = auto()
    STUDY = auto()
    PROGRESS = auto()


class MainWindow(QMainWindow):
    """Main Qt window orchestrating the application modes."""

    def __init__(self, quiz_manager: QuizManager, share_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.quiz_manager = quiz_manager
        self.share_url = share_url or ""

        self._mode = AppMode.LOGIN
        self._return_mode = AppMode.LIBRARY

        # Font size settings
        self._ui_font_size: int = 10
        self._game_font_size: int = 14
        self._music_enabled: bool = True

        self._build_ui()
        self._apply_styles()

        user = self.quiz_manager.current_user()
        if user is not None:
            self._handle_logged_in(user)
        else:
            self._set_mode(AppMode.LOGIN)

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_mode_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)

        # Initialize components
        self.login_panel = LoginPanel(self.quiz_manager, on_logged_in=self._handle_logged_in, parent=self)
        self.library_panel = LibraryPanel(
            self.quiz_manager,
            on_play=self._start_playing,
            on_study=self._start_studying,
            on_edit=self._open_creator,
            parent=self,
        )
        self.creation_panel = CreationPanel(
            self.quiz_manager,
            on_saved=self._handle_quiz_saved,
            on_close=lambda: self._set_mode(AppMode.LIBRARY),
            parent=self,
        )
        self.player_panel = PlayerPanel(self.quiz_manager, on_finished=self._handle_play_finished, parent=self)
        self.study_panel = StudyPanel(on_close=lambda: self._set_mode(self._return_mode), parent=self)
        self.progress_panel = ProgressPanel(self.quiz_manager, on_play_focus=self._start_focus_session, parent=self)

        self._panel_for_mode = {
            AppMode.LOGIN: self.login_panel,
            AppMode.LIBRARY: self.library_panel,
            AppMode.CREATOR: self.creation_panel,
            AppMode.PLAYER: self.player_panel,
            AppMode.STUDY: self.study_panel,
            AppMode.PROGRESS: self.progress_panel,
        }
        for panel in self._panel_for_mode.values():
            self.mode_stack.addWidget(panel)

        root_layout.addWidget(self.mode_stack)

    def _build_mode_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.library_mode_button = QPushButton(MODE_BUTTON_LIBRARY, self)
        self.library_mode_button.setCheckable(True)
        self.library_mode_button.clicked.connect(lambda: self._switch_mode(AppMode.LIBRARY))
        button_row.addWidget(self.library_mode_button)

        self.create_mode_button = QPushButton(MODE_BUTTON_CREATE, self)
        self.create_mode_button.setCheckable(True)
        self.create_mode_button.clicked.connect(self._handle_new_quiz)
        button_row.addWidget(self.create_mode_button)

        self.progress_mode_button = QPushButton(MODE_BUTTON_PROGRESS, self)
        self.progress_mode_button.setCheckable(True)
        self.progress_mode_button.clicked.connect(lambda: self._switch_mode(AppMode.PROGRESS))
        button_row.addWidget(self.progress_mode_button)

        button_row.addStretch()

        self.user_label = QLabel("", self)
        button_row.addWidget(self.user_label)

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        self.settings_button = QPushButton("Settings", self)
        self.settings_button.clicked.connect(self._handle_settings)
        button_row.addWidget(self.settings_button)

        self.log_out_button = QPushButton(MODE_BUTTON_LOG_OUT, self)
        self.log_out_button.clicked.connect(self._handle_log_out)
        button_row.addWidget(self.log_out_button)

        layout.addLayout(button_row)

    def _set_mode(self, mode: AppMode) -> None:
        self._mode = mode
        self.library_mode_button.setChecked(mode == AppMode.LIBRARY)
        self.create_mode_button.setChecked(mode == AppMode.CREATOR)
        self.progress_mode_button.setChecked(mode == AppMode.PROGRESS)

        logged_in = mode != AppMode.LOGIN
        playing = mode == AppMode.PLAYER
        for button in (
            self.library_mode_button,
            self.create_mode_button,
            self.progress_mode_button,
            self.settings_button,
            self.log_out_button,
        ):
            button.setVisible(logged_in)
            button.setEnabled(not playing)
        self.user_label.setVisible(logged_in)

        if mode == AppMode.LIBRARY:
            self.library_panel.refresh()
        elif mode == AppMode.PROGRESS:
            self.progress_panel.refresh()

        self.mode_stack.setCurrentWidget(self._panel_for_mode[mode])

    def _switch_mode(self, mode: AppMode) -> None:
        """Switch modes from the top buttons, leaving the creator only when allowed."""
        if self._mode == AppMode.CREATOR and mode != AppMode.CREATOR:
            if not self.creation_panel.check_unsaved_changes():
                self._set_mode(AppMode.CREATOR)
                return
        self._set_mode(mode)

    # --- Accounts ---

    def _handle_logged_in(self, user: User) -> None:
        self.user_label.setText(f"Signed in as {user.username}")
        self._set_mode(AppMode.LIBRARY)
        if not user.has_seen_tutorial:
            show_info(self, f"Welcome to {APP_NAME}", HELP_TEXT)
            try:
                self.quiz_manager.mark_tutorial_seen()
            except StorageError as exc:
                show_error(self, "Save failed", str(exc))

    def _handle_log_out(self) -> None:
        if self._mode == AppMode.CREATOR and not self.creation_panel.check_unsaved_changes():
            return
        self.quiz_manager.log_out()
        self.user_label.setText("")
        self._set_mode(AppMode.LOGIN)

    # --- Creator ---

    def _handle_new_quiz(self) -> None:
        if self._mode == AppMode.CREATOR and not self.creation_panel.check_unsaved_changes():
            self._set_mode(AppMode.CREATOR)
            return
        self._open_creator(QuizDraft())

    def _open_creator(self, draft: QuizDraft) -> None:
        self.creation_panel.load_draft(draft)
        self._set_mode(AppMode.CREATOR)

    def _handle_quiz_saved(self, quiz: Quiz) -> None:
        show_info(self, "Quiz saved", f"\"{quiz.title}\" has been saved to your quizzes.")
        self._set_mode(AppMode.LIBRARY)

    # --- Playing and studying ---

    def _start_playing(self, quiz: Quiz) -> None:
        self._return_mode = self._mode
        self._set_mode(AppMode.PLAYER)
        if not self.player_panel.start(quiz):
            self._set_mode(self._return_mode)

    def _start_focus_session(self, quiz: Quiz) -> None:
        self._return_mode = AppMode.PROGRESS
        self._set_mode(AppMode.PLAYER)
        if not self.player_panel.start(quiz, record_results=False):
            self._set_mode(AppMode.PROGRESS)

    def _handle_play_finished(self, result: QuizResult | None) -> None:
        self._set_mode(self._return_mode)

    def _start_studying(self, quiz: Quiz) -> None:
        try:
            deck, unlocked = self.quiz_manager.start_study(quiz)
        except (ValueError, StorageError) as exc:
            show_error(self, "Cannot study quiz", str(exc))
            return
        self._return_mode = self._mode
        self.study_panel.load_deck(deck)
        self._set_mode(AppMode.STUDY)
        show_achievements(self, unlocked)

    # --- Top bar actions ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        if self.share_url:
            details += f"\n\nShare server: {self.share_url}"
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def _handle_settings(self) -> None:
        dialog = SettingsDialog(
            self,
            self._ui_font_size,
            self._game_font_size,
            self._music_enabled,
            self.share_url,
            self.quiz_manager.storage_usage(),
        )
        if not dialog.exec():
            return

        if dialog.clear_history_requested:
            self._handle_clear_history()
            return
        if dialog.delete_account_requested:
            self._handle_delete_account()
            return

        self._ui_font_size = dialog.get_ui_font_size()
        self._game_font_size = dialog.get_game_font_size()
        self._music_enabled = dialog.get_music_enabled()
        self._apply_styles()

    def _handle_clear_history(self) -> None:
        if not confirm_clear_history(self):
            return
        try:
            self.quiz_manager.clear_history()
        except StorageError as exc:
            show_error(self, "Clear failed", str(exc))
            return
        show_info(self, "History cleared", "Your quiz history has been deleted.")
        if self._mode == AppMode.PROGRESS:
            self.progress_panel.refresh()

    def _handle_delete_account(self) -> None:
        if not confirm_delete_account(self):
            return
        try:
            self.quiz_manager.delete_account()
        except StorageError as exc:
            show_error(self, "Delete failed", str(exc))
            return
        self.user_label.setText("")
        self._set_mode(AppMode.LOGIN)
        show_info(self, "Account deleted", "Your account and quizzes have been removed.")

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())

        # Apply UI font size to main buttons
        ui_style = f"font-size: {self._ui_font_size}pt;"
        buttons = [
            self.library_mode_button,
            self.create_mode_button,
            self.progress_mode_button,
            self.about_button,
            self.help_button,
            self.settings_button,
            self.log_out_button,
        ]
        for button in buttons:
            button.setStyleSheet(ui_style)

        # Pass settings to components
        self.login_panel.apply_font_size(self._ui_font_size)
        self.library_panel.apply_font_size(self._ui_font_size)
        self.creation_panel.apply_font_size(self._ui_font_size)
        self.creation_panel.set_preview_font_size(self._game_font_size)
        self.progress_panel.apply_font_size(self._ui_font_size)
        self.player_panel.set_game_font_size(self._game_font_size)
        self.player_panel.set_music_enabled(self._music_enabled)
        self.study_panel.set_game_font_size(self._game_font_size)

    def closeEvent(self, event) -> None:
        self.player_panel.stop()
        self.quiz_manager.close()
        super().closeEvent(event)

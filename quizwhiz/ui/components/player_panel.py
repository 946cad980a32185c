"""Component that plays one quiz session against the clock."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt, QTimer, QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizwhiz.constants.quiz_constants import (
    AUTO_ADVANCE_DELAY_MS,
    TICK_INTERVAL_MS,
    TIME_LIMIT_TICKING_WINDOW_SECONDS,
)
from quizwhiz.constants.ui_constants import (
    OPTION_MARKERS,
    PLAYER_CONTINUE_BUTTON,
    PLAYER_EXIT_BUTTON,
    PLAYER_SUBMIT_ORDER_BUTTON,
    PLAYER_SUBMIT_TEXT_BUTTON,
    STORAGE_FULL_MESSAGE,
)
from quizwhiz.core.answer_evaluator import describe_correct_answer
from quizwhiz.core.models import OrderingQuestion, Quiz, QuizResult, TextInputQuestion
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.services.game_session import QuizSession, SessionEvent, SessionState
from quizwhiz.core.storage import StorageError, StorageQuotaExceededError
from quizwhiz.styling.color_palette import ColorPalette, QuizThemeColors, quiz_theme_colors
from quizwhiz.styling.styles import Styles
from quizwhiz.ui.dialog_helpers import confirm_exit_quiz, show_achievements, show_error, show_info, show_warning
from quizwhiz.ui.question_renderer import render_question_text


class PlayerPanel(QWidget):
    """UI component running a ``QuizSession``.

    A one-second ``QTimer`` feeds ``tick()``; correct answers without an
    explanation continue after a short single-shot delay, anything else waits
    for the player to press Continue.
    """

    def __init__(
        self,
        quiz_manager: QuizManager,
        on_finished: Callable[[QuizResult | None], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("playerPanel")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.quiz_manager = quiz_manager
        self.on_finished = on_finished

        self._session: QuizSession | None = None
        self._colors: QuizThemeColors = ColorPalette.QUIZ_THEMES["classic"]
        self._game_font_size: int = 14
        self._displayed_position: int | None = None
        self._record_results: bool = True

        self._build_ui()
        self._configure_tick_timer()
        self._setup_music()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Header
        header_row = QHBoxLayout()
        self.progress_label = QLabel("", self)
        header_row.addWidget(self.progress_label)
        header_row.addStretch()
        self.streak_label = QLabel("", self)
        header_row.addWidget(self.streak_label)
        self.exit_button = QPushButton(PLAYER_EXIT_BUTTON, self)
        self.exit_button.clicked.connect(self._handle_exit)
        header_row.addWidget(self.exit_button)
        layout.addLayout(header_row)

        # Timer row
        timer_row = QHBoxLayout()
        self.time_label = QLabel("", self)
        self.time_label.setStyleSheet("padding: 2px 6px; border-radius: 4px;")
        timer_row.addWidget(self.time_label)
        self.time_progress = QProgressBar(self)
        self.time_progress.setTextVisible(False)
        timer_row.addWidget(self.time_progress, stretch=1)
        layout.addLayout(timer_row)

        self.countdown_label = QLabel("", self)
        self.countdown_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.countdown_label)

        self.question_view = QWebEngineView(self)
        self.question_view.page().setBackgroundColor(Qt.transparent)
        layout.addWidget(self.question_view, stretch=2)

        # Choice answers
        self.options_grid = QGridLayout()
        self.option_buttons: list[QPushButton] = []
        layout.addLayout(self.options_grid)

        # Ordering answers
        self.ordering_layout = QVBoxLayout()
        self.ordering_rows: list[tuple[QLabel, QPushButton, QPushButton]] = []
        layout.addLayout(self.ordering_layout)
        self.submit_order_button = QPushButton(PLAYER_SUBMIT_ORDER_BUTTON, self)
        self.submit_order_button.clicked.connect(self._handle_submit_order)
        layout.addWidget(self.submit_order_button)

        # Text answers
        text_row = QHBoxLayout()
        self.text_answer_input = QLineEdit(self)
        self.text_answer_input.setPlaceholderText("Type your answer")
        self.text_answer_input.returnPressed.connect(self._handle_submit_text)
        text_row.addWidget(self.text_answer_input, stretch=1)
        self.submit_text_button = QPushButton(PLAYER_SUBMIT_TEXT_BUTTON, self)
        self.submit_text_button.clicked.connect(self._handle_submit_text)
        text_row.addWidget(self.submit_text_button)
        layout.addLayout(text_row)

        # Feedback
        self.feedback_label = QLabel("", self)
        self.feedback_label.setWordWrap(True)
        self.feedback_label.setVisible(False)
        layout.addWidget(self.feedback_label)

        self.continue_button = QPushButton(PLAYER_CONTINUE_BUTTON, self)
        self.continue_button.clicked.connect(self._handle_continue)
        self.continue_button.setVisible(False)
        layout.addWidget(self.continue_button)

    def _configure_tick_timer(self) -> None:
        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(TICK_INTERVAL_MS)
        self.tick_timer.timeout.connect(self._handle_tick)

    def _setup_music(self) -> None:
        self._audio_output = QAudioOutput(self)
        self._audio_output.setVolume(0.3)
        self._music_player = QMediaPlayer(self)
        self._music_player.setAudioOutput(self._audio_output)
        loop_value = QMediaPlayer.Loops.Infinite
        if hasattr(loop_value, "value"):
            loop_value = loop_value.value
        self._music_player.setLoops(int(loop_value))

    # --- Session lifecycle ---

    def start(self, quiz: Quiz, *, record_results: bool = True) -> bool:
        """Start playing ``quiz``. Returns False when the quiz cannot be played."""
        try:
            session = self.quiz_manager.start_session(quiz)
        except ValueError as exc:
            show_error(self, "Cannot play quiz", str(exc))
            return False

        self._session = session
        self._record_results = record_results
        self._displayed_position = None
        self._colors = quiz_theme_colors(quiz.theme, quiz.custom_theme)
        self._apply_theme()
        session.add_listener(self._handle_session_event)

        if quiz.background_music:
            self._music_player.setSource(QUrl(quiz.background_music))
            self._music_player.play()

        self._render(session.snapshot())
        self.tick_timer.start()
        return True

    def stop(self) -> None:
        """Abandon the running session without recording a result."""
        self.tick_timer.stop()
        self._music_player.stop()
        if self._session is not None:
            self._session.remove_listener(self._handle_session_event)
            self._session = None
            self.quiz_manager.abandon_session()

    def _handle_tick(self) -> None:
        if self._session is not None:
            self._session.tick()

    def _handle_session_event(self, event: SessionEvent) -> None:
        self._render(event)
        if event.state == SessionState.ADVANCING:
            QTimer.singleShot(AUTO_ADVANCE_DELAY_MS, self._handle_auto_advance)
        elif event.state == SessionState.COMPLETED:
            # Deferred so the session finishes emitting before the result is recorded.
            QTimer.singleShot(0, self._finish)

    def _handle_auto_advance(self) -> None:
        if self._session is not None:
            self._session.advance()

    def _finish(self) -> None:
        session = self._session
        if session is None:
            return
        self.tick_timer.stop()
        self._music_player.stop()
        session.remove_listener(self._handle_session_event)
        self._session = None

        result = session.result
        if self._record_results:
            try:
                result, unlocked = self.quiz_manager.finish_session()
            except StorageQuotaExceededError:
                show_warning(self, "Storage Full", STORAGE_FULL_MESSAGE)
                unlocked = []
            except StorageError as exc:
                show_error(self, "Save failed", f"Could not save your result: {exc}")
                unlocked = []
        else:
            self.quiz_manager.abandon_session()
            unlocked = []

        show_info(
            self,
            "Quiz complete",
            f"You scored {result.score} out of {result.total_questions}.",
            font_point_size=self._game_font_size,
        )
        show_achievements(self, unlocked)
        self.on_finished(result)

    # --- Rendering ---

    def _render(self, event: SessionEvent) -> None:
        session = self._session
        if session is None:
            return

        self.progress_label.setText(f"Question {event.position + 1} of {session.question_count}")
        self.streak_label.setText(f"🔥 Streak {event.streak}" if event.streak >= 2 else "")

        starting = event.state == SessionState.STARTING
        self.countdown_label.setVisible(starting)
        self.countdown_label.setText(f"Get ready… {event.start_countdown}")
        self.question_view.setVisible(not starting)

        if event.state == SessionState.AWAITING_ANSWER:
            if self._displayed_position != event.position:
                self._display_question(session)
            elif self.ordering_rows:
                self._refresh_ordering_labels()
        self._update_timer(event, session)

        awaiting = event.state == SessionState.AWAITING_ANSWER
        for button in self.option_buttons:
            button.setEnabled(awaiting)
        for _, up_button, down_button in self.ordering_rows:
            up_button.setEnabled(awaiting)
            down_button.setEnabled(awaiting)
        self.submit_order_button.setEnabled(awaiting)
        self.text_answer_input.setEnabled(awaiting)
        self.submit_text_button.setEnabled(awaiting)

        if event.state in (SessionState.SHOWING_FEEDBACK, SessionState.ADVANCING):
            self._show_feedback(session, event.state == SessionState.SHOWING_FEEDBACK)
        elif event.state != SessionState.SUBMITTED:
            self.feedback_label.setVisible(False)
            self.continue_button.setVisible(False)

    def _display_question(self, session: QuizSession) -> None:
        self._displayed_position = session.position
        question = session.current_question
        self.question_view.setHtml(
            render_question_text(
                question.text,
                font_size=self._game_font_size + 6,
                text_color=self._colors.text,
                image_url=question.image_ref,
            )
        )

        is_text = isinstance(question, TextInputQuestion)
        is_ordering = isinstance(question, OrderingQuestion)
        self._rebuild_option_buttons([] if is_text or is_ordering else list(session.display_options))
        self._rebuild_ordering_rows(list(session.display_options) if is_ordering else [])
        self.submit_order_button.setVisible(is_ordering)
        self.text_answer_input.setVisible(is_text)
        self.submit_text_button.setVisible(is_text)
        self.text_answer_input.clear()
        if is_text:
            self.text_answer_input.setFocus()

    def _rebuild_option_buttons(self, options: list[str]) -> None:
        for button in self.option_buttons:
            self.options_grid.removeWidget(button)
            button.deleteLater()
        self.option_buttons = []
        for index, option in enumerate(options):
            marker = OPTION_MARKERS[index % len(OPTION_MARKERS)]
            color = ColorPalette.OPTION_COLORS[index % len(ColorPalette.OPTION_COLORS)]
            button = QPushButton(f"{marker}  {option}", self)
            button.setStyleSheet(Styles.get_option_button_style(color, self._game_font_size))
            button.clicked.connect(lambda _=False, choice=index: self._handle_choice(choice))
            self.options_grid.addWidget(button, index // 2, index % 2)
            self.option_buttons.append(button)

    def _rebuild_ordering_rows(self, items: list[str]) -> None:
        while self.ordering_layout.count():
            item = self.ordering_layout.takeAt(0)
            row_layout = item.layout()
            if row_layout is None:
                continue
            while row_layout.count():
                widget = row_layout.takeAt(0).widget()
                if widget is not None:
                    widget.deleteLater()
        self.ordering_rows = []
        for index, text in enumerate(items):
            row = QHBoxLayout()
            label = QLabel(f"{index + 1}. {text}", self)
            row.addWidget(label, stretch=1)
            up_button = QPushButton("▲", self)
            up_button.clicked.connect(lambda _=False, position=index: self._handle_move_item(position, -1))
            row.addWidget(up_button)
            down_button = QPushButton("▼", self)
            down_button.clicked.connect(lambda _=False, position=index: self._handle_move_item(position, 1))
            row.addWidget(down_button)
            self.ordering_layout.addLayout(row)
            self.ordering_rows.append((label, up_button, down_button))

    def _refresh_ordering_labels(self) -> None:
        if self._session is None:
            return
        for index, (text, (label, _, _)) in enumerate(zip(self._session.display_options, self.ordering_rows)):
            label.setText(f"{index + 1}. {text}")

    def _update_timer(self, event: SessionEvent, session: QuizSession) -> None:
        total = session.current_question.time_limit_seconds
        remaining = event.seconds_remaining
        self.time_progress.setRange(0, max(1, total))
        self.time_progress.setValue(remaining)
        self.time_label.setText(f"{remaining}s")

        base_style = f"padding: 2px 6px; border-radius: 4px; font-size: {self._game_font_size}pt;"
        in_window = (
            event.state == SessionState.AWAITING_ANSWER
            and 0 < remaining <= min(TIME_LIMIT_TICKING_WINDOW_SECONDS, total)
        )
        if in_window:
            background = "#b91c1c" if remaining % 2 == 0 else "#ef4444"
            self.time_label.setStyleSheet(base_style + f" color: #fff; background-color: {background};")
        else:
            self.time_label.setStyleSheet(base_style)

    def _show_feedback(self, session: QuizSession, wait_for_player: bool) -> None:
        answer = session.last_answer
        if answer is None:
            return
        question = session.current_question
        if answer.is_correct:
            message = "Correct!"
        elif answer.timed_out:
            message = f"Time's up! The answer was: {describe_correct_answer(question)}"
        else:
            message = f"Incorrect. The answer was: {describe_correct_answer(question)}"
        if question.explanation.strip():
            message = f"{message}\n\n{question.explanation}"
        self.feedback_label.setText(message)
        self.feedback_label.setStyleSheet(Styles.get_feedback_style(answer.is_correct))
        self.feedback_label.setVisible(True)
        self.continue_button.setVisible(wait_for_player)
        if wait_for_player:
            self.continue_button.setFocus()

    # --- Player input ---

    def _handle_choice(self, index: int) -> None:
        if self._session is not None:
            self._session.submit(index)

    def _handle_move_item(self, position: int, offset: int) -> None:
        if self._session is not None:
            self._session.move_ordering_item(position, offset)

    def _handle_submit_order(self) -> None:
        if self._session is not None:
            self._session.submit_arrangement()

    def _handle_submit_text(self) -> None:
        if self._session is None:
            return
        text = self.text_answer_input.text()
        if not text.strip():
            return
        self._session.submit(text)

    def _handle_continue(self) -> None:
        if self._session is not None:
            self._session.acknowledge()

    def _handle_exit(self) -> None:
        if self._session is None or not confirm_exit_quiz(self):
            return
        self.stop()
        self.on_finished(None)

    # --- Styling ---

    def _apply_theme(self) -> None:
        self.setStyleSheet(Styles.get_player_style(self._colors, self._game_font_size))
        self.countdown_label.setStyleSheet(f"font-size: {self._game_font_size * 3}pt; font-weight: bold;")

    def set_game_font_size(self, size: int) -> None:
        self._game_font_size = size
        self._apply_theme()
        for index, button in enumerate(self.option_buttons):
            color = ColorPalette.OPTION_COLORS[index % len(ColorPalette.OPTION_COLORS)]
            button.setStyleSheet(Styles.get_option_button_style(color, size))

    def set_music_enabled(self, enabled: bool) -> None:
        self._audio_output.setMuted(not enabled)

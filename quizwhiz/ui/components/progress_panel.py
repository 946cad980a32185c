"""Component showing stats, achievements, history and AI focus sessions."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizwhiz.constants.ui_constants import PROGRESS_FOCUS_BUTTON
from quizwhiz.core.achievements import ACHIEVEMENTS
from quizwhiz.core.models import Quiz, User
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.services.quiz_generator import QuizGenerationError
from quizwhiz.ui.dialog_helpers import show_error, show_info, show_warning

_STAT_LABELS: tuple[tuple[str, str], ...] = (
    ("quizzes_played", "Quizzes played"),
    ("questions_answered", "Questions answered"),
    ("perfect_scores", "Perfect scores"),
    ("quizzes_created", "Quizzes created"),
    ("study_sessions", "Study sessions"),
    ("ai_quizzes_generated", "AI quizzes generated"),
)


class ProgressPanel(QWidget):
    """UI component for the current user's progress."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        on_play_focus: Callable[[Quiz], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.on_play_focus = on_play_focus
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        top_row = QHBoxLayout()

        stats_group = QGroupBox("Stats", self)
        stats_layout = QGridLayout()
        stats_group.setLayout(stats_layout)
        self.stat_values: dict[str, QLabel] = {}
        for row, (attribute, label) in enumerate(_STAT_LABELS):
            stats_layout.addWidget(QLabel(label, self), row, 0)
            value_label = QLabel("0", self)
            value_label.setAlignment(Qt.AlignRight)
            stats_layout.addWidget(value_label, row, 1)
            self.stat_values[attribute] = value_label
        top_row.addWidget(stats_group, stretch=1)

        achievements_group = QGroupBox("Achievements", self)
        achievements_layout = QVBoxLayout()
        achievements_group.setLayout(achievements_layout)
        self.achievements_summary = QLabel("", self)
        achievements_layout.addWidget(self.achievements_summary)
        self.achievements_list = QListWidget(self)
        achievements_layout.addWidget(self.achievements_list)
        top_row.addWidget(achievements_group, stretch=2)

        layout.addLayout(top_row, stretch=1)

        history_group = QGroupBox("History", self)
        history_layout = QVBoxLayout()
        history_group.setLayout(history_layout)
        self.history_list = QListWidget(self)
        history_layout.addWidget(self.history_list)

        focus_row = QHBoxLayout()
        self.missed_label = QLabel("", self)
        focus_row.addWidget(self.missed_label, stretch=1)
        self.focus_button = QPushButton(PROGRESS_FOCUS_BUTTON, self)
        self.focus_button.clicked.connect(self._handle_focus_session)
        focus_row.addWidget(self.focus_button)
        history_layout.addLayout(focus_row)

        layout.addWidget(history_group, stretch=1)

    def refresh(self) -> None:
        user = self.quiz_manager.current_user()
        if user is None:
            return
        self._refresh_stats(user)
        self._refresh_achievements(user)

        self.history_list.clear()
        for result in self.quiz_manager.get_history():
            percent = result.score / result.total_questions * 100 if result.total_questions else 0
            self.history_list.addItem(
                f"{result.completed_at.astimezone().strftime('%Y-%m-%d %H:%M')}  ·  {result.quiz_title}  ·  "
                f"{result.score}/{result.total_questions} ({percent:.0f}%)"
            )

        missed = self.quiz_manager.get_missed_questions()
        self.missed_label.setText(f"{len(missed)} missed question{'s' if len(missed) != 1 else ''} to review")
        self.focus_button.setEnabled(bool(missed))

    def _refresh_stats(self, user: User) -> None:
        for attribute, label in self.stat_values.items():
            label.setText(str(getattr(user.stats, attribute)))

    def _refresh_achievements(self, user: User) -> None:
        unlocked = set(user.achievements)
        self.achievements_summary.setText(f"{len(unlocked)} of {len(ACHIEVEMENTS)} unlocked")
        self.achievements_list.clear()
        for achievement in ACHIEVEMENTS:
            done = achievement.id in unlocked
            prefix = achievement.icon if done else "🔒"
            item = QListWidgetItem(f"{prefix}  {achievement.title}: {achievement.description}")
            if not done:
                item.setForeground(Qt.gray)
            self.achievements_list.addItem(item)

    def _handle_focus_session(self) -> None:
        if not self.quiz_manager.generator.is_configured:
            show_warning(
                self,
                "AI unavailable",
                "Set the GITHUB_TOKEN environment variable to enable focus sessions.",
            )
            return
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            session = self.quiz_manager.generate_focus_session()
        except (ValueError, QuizGenerationError) as exc:
            show_error(self, "Focus session failed", str(exc))
            return
        finally:
            QApplication.restoreOverrideCursor()

        show_info(self, "Your Focus Session", session.analysis)
        self.on_play_focus(self.quiz_manager.focus_quiz(session))

    def apply_font_size(self, font_size: int) -> None:
        self.focus_button.setStyleSheet(f"font-size: {font_size}pt;")

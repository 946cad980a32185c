"""Qt UI components for the QuizWhiz application."""

from .dialog_helpers import (
    confirm_clear_history,
    confirm_delete_account,
    confirm_delete_question,
    confirm_delete_quiz,
    show_achievements,
    show_error,
    show_info,
    show_warning,
)
from .main_window import MainWindow
from .question_renderer import render_question_with_options

__all__ = [
    "MainWindow",
    "confirm_clear_history",
    "confirm_delete_account",
    "confirm_delete_question",
    "confirm_delete_quiz",
    "show_achievements",
    "show_error",
    "show_info",
    "show_warning",
    "render_question_with_options",
]

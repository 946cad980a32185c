"""Helper functions for common dialog patterns in the QuizWhiz UI."""

from __future__ import annotations

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QInputDialog, QLineEdit, QMessageBox, QWidget

from quizwhiz.core.achievements import Achievement


def _apply_optional_font(widget: QWidget, font_point_size: int | None) -> None:
    """Apply font size to a widget when requested."""
    if font_point_size is None or font_point_size <= 0:
        return

    font: QFont = widget.font()
    font.setPointSize(font_point_size)
    widget.setFont(font)


def _ask_yes_no(parent: QWidget, title: str, message: str) -> bool:
    reply = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def confirm_delete_question(parent: QWidget, question_number: int) -> bool:
    """Show confirmation dialog for deleting a question.

    Args:
        parent: Parent widget for the dialog
        question_number: The question number to display (1-indexed)

    Returns:
        True if user confirmed, False otherwise
    """
    return _ask_yes_no(parent, "Confirm Delete", f"Are you sure you want to delete question {question_number}?")


def confirm_delete_quiz(parent: QWidget, title: str) -> bool:
    """Ask before removing a quiz from the library."""
    return _ask_yes_no(parent, "Delete Quiz", f"Delete \"{title}\"? This cannot be undone.")


def confirm_discard_draft(parent: QWidget) -> bool:
    return _ask_yes_no(parent, "Discard Changes", "Close the editor? Unsaved changes will be lost.")


def confirm_exit_quiz(parent: QWidget) -> bool:
    return _ask_yes_no(parent, "Exit Quiz", "Exit the quiz? Your progress will not be saved.")


def confirm_clear_history(parent: QWidget) -> bool:
    return _ask_yes_no(
        parent,
        "Clear History",
        "Delete your whole quiz history? Achievements and stats are kept.",
    )


def confirm_delete_account(parent: QWidget) -> bool:
    """Ask twice: deleting an account also deletes every quiz it owns."""
    if not _ask_yes_no(
        parent,
        "Delete Account",
        "Delete your account and all of your quizzes? This cannot be undone.",
    ):
        return False
    return _ask_yes_no(parent, "Delete Account", "Are you absolutely sure?")


def ask_text(parent: QWidget, title: str, label: str, *, password: bool = False) -> str | None:
    """Prompt for a single line of text. Returns None when cancelled."""
    echo = QLineEdit.Password if password else QLineEdit.Normal
    text, accepted = QInputDialog.getText(parent, title, label, echo)
    if not accepted:
        return None
    return text


def show_error(parent: QWidget, title: str, message: str) -> None:
    """Show error dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Error message
    """
    QMessageBox.critical(parent, title, message)


def show_info(
    parent: QWidget,
    title: str,
    message: str,
    *,
    font_point_size: int | None = None,
) -> None:
    """Show information dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Information message
    """
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    _apply_optional_font(msg_box, font_point_size)
    if font_point_size is not None and font_point_size > 0:
        msg_box.setStyleSheet(
            f"QLabel {{ font-size: {font_point_size}pt; }}\n"
            f"QPushButton {{ font-size: {font_point_size}pt; }}"
        )
    msg_box.exec()


def show_warning(parent: QWidget, title: str, message: str) -> None:
    """Show warning dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Warning message
    """
    QMessageBox.warning(parent, title, message)


def show_achievements(parent: QWidget, unlocked: list[Achievement]) -> None:
    """Announce newly unlocked achievements. Does nothing when the list is empty."""
    if not unlocked:
        return
    lines = [f"{achievement.icon}  {achievement.title}: {achievement.description}" for achievement in unlocked]
    show_info(parent, "Achievement Unlocked!", "\n".join(lines))

"""Component for logging in, signing up and resetting a password."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizwhiz.constants.about import APP_NAME
from quizwhiz.constants.ui_constants import FORGOT_PASSWORD_BUTTON, LOGIN_BUTTON, SIGN_UP_BUTTON
from quizwhiz.core.models import User
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.services.account_service import AuthError
from quizwhiz.core.storage import StorageError
from quizwhiz.ui.dialog_helpers import ask_text, show_error, show_info
from quizwhiz.styling.styles import Styles


class LoginPanel(QWidget):
    """UI component shown while nobody is logged in."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        on_logged_in: Callable[[User], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.on_logged_in = on_logged_in
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        title = QLabel(f"Welcome to {APP_NAME}", self)
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(title)

        forms_row = QHBoxLayout()

        # Log in
        login_group = QGroupBox("Log In", self)
        login_layout = QVBoxLayout()
        login_group.setLayout(login_layout)
        self.login_identifier_input = QLineEdit(self)
        self.login_identifier_input.setPlaceholderText("Username or email")
        login_layout.addWidget(self.login_identifier_input)
        self.login_password_input = QLineEdit(self)
        self.login_password_input.setPlaceholderText("Password")
        self.login_password_input.setEchoMode(QLineEdit.Password)
        self.login_password_input.returnPressed.connect(self._handle_log_in)
        login_layout.addWidget(self.login_password_input)
        self.login_button = QPushButton(LOGIN_BUTTON, self)
        self.login_button.clicked.connect(self._handle_log_in)
        login_layout.addWidget(self.login_button)
        self.forgot_button = QPushButton(FORGOT_PASSWORD_BUTTON, self)
        self.forgot_button.setFlat(True)
        self.forgot_button.clicked.connect(self._handle_forgot_password)
        login_layout.addWidget(self.forgot_button)
        login_layout.addStretch()
        forms_row.addWidget(login_group)

        # Sign up
        signup_group = QGroupBox("Create Account", self)
        signup_layout = QVBoxLayout()
        signup_group.setLayout(signup_layout)
        self.signup_username_input = QLineEdit(self)
        self.signup_username_input.setPlaceholderText("Username")
        signup_layout.addWidget(self.signup_username_input)
        self.signup_email_input = QLineEdit(self)
        self.signup_email_input.setPlaceholderText("Email")
        signup_layout.addWidget(self.signup_email_input)
        self.signup_password_input = QLineEdit(self)
        self.signup_password_input.setPlaceholderText("Password")
        self.signup_password_input.setEchoMode(QLineEdit.Password)
        signup_layout.addWidget(self.signup_password_input)
        self.signup_button = QPushButton(SIGN_UP_BUTTON, self)
        self.signup_button.clicked.connect(self._handle_sign_up)
        signup_layout.addWidget(self.signup_button)
        signup_layout.addStretch()
        forms_row.addWidget(signup_group)

        layout.addLayout(forms_row)
        layout.addStretch()

    def _handle_log_in(self) -> None:
        try:
            user = self.quiz_manager.log_in(
                self.login_identifier_input.text(),
                self.login_password_input.text(),
            )
        except AuthError as exc:
            show_error(self, "Login failed", str(exc))
            return
        self.reset_state()
        self.on_logged_in(user)

    def _handle_sign_up(self) -> None:
        try:
            user = self.quiz_manager.sign_up(
                self.signup_username_input.text(),
                self.signup_email_input.text(),
                self.signup_password_input.text(),
            )
        except AuthError as exc:
            show_error(self, "Sign up failed", str(exc))
            return
        except StorageError as exc:
            show_error(self, "Sign up failed", f"Could not save your account: {exc}")
            return
        self.reset_state()
        self.on_logged_in(user)

    def _handle_forgot_password(self) -> None:
        email = ask_text(self, "Reset Password", "Email address:")
        if email is None:
            return
        try:
            code = self.quiz_manager.request_password_reset(email)
        except AuthError as exc:
            show_error(self, "Reset failed", str(exc))
            return

        # Accounts are local, so the code is shown instead of being emailed.
        show_info(self, "Reset Code", f"Your reset code is {code}.")
        entered_code = ask_text(self, "Reset Password", "Reset code:")
        if entered_code is None:
            return
        new_password = ask_text(self, "Reset Password", "New password:", password=True)
        if new_password is None:
            return
        try:
            self.quiz_manager.reset_password(email, entered_code, new_password)
        except AuthError as exc:
            show_error(self, "Reset failed", str(exc))
            return
        show_info(self, "Password Reset", "Your password has been updated. You can log in now.")

    def reset_state(self) -> None:
        for field in (
            self.login_identifier_input,
            self.login_password_input,
            self.signup_username_input,
            self.signup_email_input,
            self.signup_password_input,
        ):
            field.clear()

    def apply_font_size(self, font_size: int) -> None:
        style = f"font-size: {font_size}pt;"
        for button in (self.login_button, self.signup_button, self.forgot_button):
            button.setStyleSheet(style)

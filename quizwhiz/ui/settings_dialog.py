"""Settings dialog for configuring QuizWhiz preferences and account data."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from quizwhiz.core.quiz_manager import StorageUsage


class SettingsDialog(QDialog):
    """Dialog for configuring application settings.

    The account buttons close the dialog; the caller checks
    ``clear_history_requested`` / ``delete_account_requested`` afterwards.
    """

    def __init__(
        self,
        parent=None,
        ui_font_size: int = 10,
        game_font_size: int = 14,
        music_enabled: bool = True,
        share_url: str = "",
        storage_usage: StorageUsage | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(400)

        self._ui_font_size = ui_font_size
        self._game_font_size = game_font_size
        self._music_enabled = music_enabled
        self._share_url = share_url
        self._storage_usage = storage_usage

        self.clear_history_requested = False
        self.delete_account_requested = False

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        # Font settings group
        font_group = QGroupBox("Font Sizes")
        font_layout = QVBoxLayout()
        font_group.setLayout(font_layout)

        ui_font_row = QHBoxLayout()
        ui_font_label = QLabel("UI Font Size (buttons, menus):")
        self.ui_font_spinbox = QSpinBox()
        self.ui_font_spinbox.setRange(8, 24)
        self.ui_font_spinbox.setValue(self._ui_font_size)
        self.ui_font_spinbox.setSuffix(" pt")
        ui_font_row.addWidget(ui_font_label)
        ui_font_row.addStretch()
        ui_font_row.addWidget(self.ui_font_spinbox)
        font_layout.addLayout(ui_font_row)

        game_font_row = QHBoxLayout()
        game_font_label = QLabel("Game Font Size (questions, answers):")
        game_font_label.setToolTip("Font size for the play screen and flashcards")
        self.game_font_spinbox = QSpinBox()
        self.game_font_spinbox.setRange(10, 32)
        self.game_font_spinbox.setValue(self._game_font_size)
        self.game_font_spinbox.setSuffix(" pt")
        game_font_row.addWidget(game_font_label)
        game_font_row.addStretch()
        game_font_row.addWidget(self.game_font_spinbox)
        font_layout.addLayout(game_font_row)

        layout.addWidget(font_group)

        # Play settings group
        play_group = QGroupBox("Playing")
        play_layout = QVBoxLayout()
        play_group.setLayout(play_layout)

        self.music_checkbox = QCheckBox("Play background music when a quiz has a track")
        self.music_checkbox.setChecked(self._music_enabled)
        play_layout.addWidget(self.music_checkbox)

        if self._share_url:
            share_label = QLabel(f"Share server: {self._share_url}")
            share_label.setToolTip("Open this address in a browser on your network to browse and download quizzes.")
            share_label.setWordWrap(True)
            play_layout.addWidget(share_label)

        layout.addWidget(play_group)

        # Data group
        data_group = QGroupBox("Your Data")
        data_layout = QVBoxLayout()
        data_group.setLayout(data_layout)

        if self._storage_usage is not None:
            usage = self._storage_usage
            if usage.quota_bytes:
                text = f"Storage: {usage.used_bytes / 1024:.0f} KB of {usage.quota_bytes / 1024:.0f} KB"
            else:
                text = f"Storage: {usage.used_bytes / 1024:.0f} KB"
            data_layout.addWidget(QLabel(text))
            usage_bar = QProgressBar()
            usage_bar.setRange(0, 100)
            usage_bar.setValue(int(usage.percent))
            data_layout.addWidget(usage_bar)

        data_buttons = QHBoxLayout()
        self.clear_history_button = QPushButton("Clear History")
        self.clear_history_button.clicked.connect(self._handle_clear_history)
        data_buttons.addWidget(self.clear_history_button)

        self.delete_account_button = QPushButton("Delete Account")
        self.delete_account_button.setStyleSheet("color: #DC2626;")
        self.delete_account_button.clicked.connect(self._handle_delete_account)
        data_buttons.addWidget(self.delete_account_button)
        data_buttons.addStretch()
        data_layout.addLayout(data_buttons)

        layout.addWidget(data_group)

        # Buttons
        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.apply_button.setDefault(True)
        button_row.addWidget(self.apply_button)

        layout.addLayout(button_row)

    def _handle_clear_history(self) -> None:
        self.clear_history_requested = True
        self.accept()

    def _handle_delete_account(self) -> None:
        self.delete_account_requested = True
        self.accept()

    def get_ui_font_size(self) -> int:
        """Get the selected UI font size."""
        return self.ui_font_spinbox.value()

    def get_game_font_size(self) -> int:
        """Get the selected game font size."""
        return self.game_font_spinbox.value()

    def get_music_enabled(self) -> bool:
        return self.music_checkbox.isChecked()

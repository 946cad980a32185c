"""Centralized styles and font definitions for the application."""

from .color_palette import ColorPalette, QuizThemeColors, Theme

class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:checked {{
                background-color: {ColorPalette.ACCENT_PRIMARY.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                border: 1px solid {ColorPalette.ACCENT_PRIMARY.get(theme)};
            }}
            QLineEdit, QPlainTextEdit, QSpinBox, QComboBox {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QListWidget {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
            }}
            QGroupBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
            QGroupBox::title {{
                subcontrol-origin: margin;
                left: 10px;
                padding: 0 3px 0 3px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_player_style(colors: QuizThemeColors, font_size: int) -> str:
        return f"""
            QWidget#playerPanel {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 {colors.background}, stop:1 {colors.background_end});
            }}
            QWidget#playerPanel QLabel {{
                background: transparent;
                color: {colors.text};
                font-size: {font_size}pt;
            }}
            QWidget#playerPanel QProgressBar {{
                background-color: {colors.card};
                border: none;
                border-radius: 4px;
                height: 8px;
            }}
            QWidget#playerPanel QProgressBar::chunk {{
                background-color: {colors.accent};
                border-radius: 4px;
            }}
        """

    @staticmethod
    def get_option_button_style(color: str, font_size: int) -> str:
        return (
            f"QPushButton {{ background-color: {color}; color: #FFFFFF; border: none; border-radius: 8px;"
            f" padding: 18px; font-size: {font_size}pt; font-weight: bold; text-align: left; }}"
            f" QPushButton:disabled {{ background-color: {color}; color: rgba(255, 255, 255, 0.6); }}"
        )

    @staticmethod
    def get_feedback_style(is_correct: bool) -> str:
        color = ColorPalette.SUCCESS.get(Theme.LIGHT) if is_correct else ColorPalette.ERROR.get(Theme.LIGHT)
        return f"background-color: {color}; color: #FFFFFF; border-radius: 8px; padding: 12px; font-weight: bold;"

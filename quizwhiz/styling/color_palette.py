"""Color palette for QuizWhiz: app chrome colors plus the play-screen quiz themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from quizwhiz.core.models import CustomTheme


class Theme(Enum):
    """Application chrome theme."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific chrome theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


@dataclass(frozen=True)
class QuizThemeColors:
    """Colors of the play screen for one quiz theme."""
    label: str
    background: str
    background_end: str
    text: str
    accent: str
    card: str


class ColorPalette:
    """Centralized color definitions for the application."""

    # Text colors
    TEXT_PRIMARY = ThemeColors(
        light="#1F2937",      # Slate 800
        dark="#F5F5F5"
    )

    TEXT_SECONDARY = ThemeColors(
        light="#6B7280",      # Gray 500
        dark="#AAAAAA"
    )

    # Background colors
    BACKGROUND_PRIMARY = ThemeColors(
        light="#FFFFFF",
        dark="#1E1E1E"
    )

    BACKGROUND_SECONDARY = ThemeColors(
        light="#F3F4F6",      # Gray 100
        dark="#2D2D2D"
    )

    # Brand
    ACCENT_PRIMARY = ThemeColors(
        light="#DC2626",      # Red 600
        dark="#EF4444"
    )

    # Status colors
    SUCCESS = ThemeColors(
        light="#16A34A",
        dark="#4ADE80"
    )

    ERROR = ThemeColors(
        light="#DC2626",
        dark="#F87171"
    )

    BORDER_PRIMARY = ThemeColors(
        light="#D1D5DB",
        dark="#555555"
    )

    BUTTON_PRIMARY_TEXT = ThemeColors(
        light="#FFFFFF",
        dark="#FFFFFF"
    )

    BUTTON_SECONDARY_BG = ThemeColors(
        light="#F3F4F6",
        dark="#3A3A3A"
    )

    BUTTON_HOVER_BG = ThemeColors(
        light="#E5E7EB",
        dark="#505050"
    )

    # Answer buttons, in option order: red triangle, blue diamond, yellow circle, green square
    OPTION_COLORS: tuple[str, ...] = ("#EF4444", "#3B82F6", "#EAB308", "#22C55E")

    QUIZ_THEMES: dict[str, QuizThemeColors] = {
        "classic": QuizThemeColors("Classic Red", "#DC2626", "#7F1D1D", "#FFFFFF", "#EF4444", "#991B1B"),
        "cyberpunk": QuizThemeColors("Cyberpunk", "#0F172A", "#581C87", "#22D3EE", "#06B6D4", "#1E1B4B"),
        "nature": QuizThemeColors("Forest", "#065F46", "#134E4A", "#ECFDF5", "#10B981", "#064E3B"),
        "ocean": QuizThemeColors("Deep Sea", "#1E3A8A", "#0F172A", "#DBEAFE", "#3B82F6", "#312E81"),
    }


def quiz_theme_colors(theme: str, custom: CustomTheme | None = None) -> QuizThemeColors:
    """Resolve a quiz's theme name, falling back to classic for unknown names."""
    if theme == "custom" and custom is not None:
        return QuizThemeColors(
            "Custom", custom.background, custom.background, custom.text, custom.accent, custom.card_color
        )
    return ColorPalette.QUIZ_THEMES.get(theme, ColorPalette.QUIZ_THEMES["classic"])

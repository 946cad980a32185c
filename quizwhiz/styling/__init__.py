"""Styling module for the QuizWhiz application."""

from .color_palette import ColorPalette, QuizThemeColors, Theme, quiz_theme_colors

__all__ = ["ColorPalette", "QuizThemeColors", "Theme", "quiz_theme_colors"]

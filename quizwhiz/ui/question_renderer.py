"""Question rendering utilities for displaying quiz questions."""

from __future__ import annotations

from typing import List, Sequence

from quizwhiz.core.markdown_math_renderer import renderer
from quizwhiz.constants.ui_constants import OPTION_MARKERS


def _image_markdown(image_url: str) -> str:
    return f"![](<{image_url.strip()}>)" if image_url.strip() else ""


def render_question_with_options(
    question_text: str,
    options: List[str],
    font_size: int = 14,
    text_color: str = "#1F2937",
    image_url: str = "",
) -> str:
    """Render a quiz question with its options as HTML.

    Args:
        question_text: The question text (supports Markdown and LaTeX)
        options: Option strings; empty for text-answer questions
        font_size: Font size in points for the question text (default 14)
        text_color: CSS color for the body text
        image_url: Optional image shown above the question

    Returns:
        HTML string ready for display in QWebEngineView
    """
    markdown_lines = [_image_markdown(image_url), question_text.strip() or "(No question text)", ""]
    for idx, option in enumerate(options):
        marker = OPTION_MARKERS[idx % len(OPTION_MARKERS)]
        markdown_lines.append(f"**{marker}** {option or '(empty)'}")
    markdown = "\n\n".join(markdown_lines)
    return renderer.render_full_document(markdown, font_size=font_size, text_color=text_color)


def render_question_text(
    question_text: str, font_size: int = 18, text_color: str = "#FFFFFF", image_url: str = ""
) -> str:
    """Render only the question body; the player shows options as buttons."""
    markdown = "\n\n".join([_image_markdown(image_url), question_text or "(No question text)"])
    return renderer.render_full_document(markdown, font_size=font_size, text_color=text_color)


def render_flashcard_side(text: str, details: Sequence[str] = (), font_size: int = 18, image_url: str = "") -> str:
    """Render one side of a flashcard, with optional extra paragraphs under it."""
    markdown = "\n\n".join([_image_markdown(image_url), text.strip() or "(empty)", *[detail for detail in details if detail.strip()]])
    return renderer.render_full_document(markdown, font_size=font_size, text_color="#1F2937")

"""Endpoint and prompt settings for AI quiz generation."""

import os

GITHUB_MODELS_ENDPOINT: str = "https://models.github.ai/inference/chat/completions"
GITHUB_MODELS_MODEL: str = "gpt-4o-mini"
GITHUB_TOKEN: str | None = os.getenv("GITHUB_TOKEN")
GENERATION_TEMPERATURE: float = 0.9
REQUEST_TIMEOUT_SECONDS: float = 60.0
FOCUS_CONTEXT_LIMIT: int = 30000
FOCUS_QUESTION_COUNT: int = 5

DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")
QUIZ_TYPES: tuple[str, ...] = ("mixed", "multiple-choice", "true-false")

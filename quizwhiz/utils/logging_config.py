"""Logging configuration helpers for QuizWhiz."""

from __future__ import annotations

import logging
from logging import Logger
import os


def configure_logging(level: str | int | None = None) -> Logger:
    """Configure basic logging for the application and return the package logger.

    ``QUIZWHIZ_LOG_LEVEL`` overrides the default INFO level when no explicit
    level is passed.
    """
    resolved = level if level is not None else os.getenv("QUIZWHIZ_LOG_LEVEL", "INFO")
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("quizwhiz")

"""Utilities for importing quizzes from ``.qzx`` files.

A ``.qzx`` file is a single quiz serialized as JSON in the same camelCase
layout the app stores internally:

    {
      "id": "1717171717171",
      "userId": "...",
      "title": "Capitals",
      "createdAt": "2024-05-31T12:00:00.000Z",
      "theme": "classic",
      "shuffleQuestions": false,
      "questions": [
        {"type": "multiple-choice", "question": "Capital of France?",
         "options": ["Berlin", "Paris", "Rome", "Madrid"],
         "correctAnswer": 1, "timeLimit": 20, "explanation": ""}
      ]
    }

Architecture note:
    Parsing and validation are delegated to ``quiz_schema.decode_quiz`` so the
    desktop import, the share server's upload endpoint and backups all accept
    exactly the same documents. This module only deals with files and turns a
    decode failure into ``QuizImportError``.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path

from quizwhiz.constants.quiz_constants import QUIZ_FILE_EXTENSION
from quizwhiz.core.models import Quiz
from quizwhiz.core.quiz_schema import DecodeErr, decode_quiz


class QuizImportError(Exception):
    """Raised when a quiz file cannot be read or does not describe a valid quiz."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for an imported quiz and where it came from."""

    source_path: Path
    quiz: Quiz


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    file_path = Path(file_path)
    if file_path.suffix.lower() != QUIZ_FILE_EXTENSION:
        raise QuizImportError(f"Please select a valid {QUIZ_FILE_EXTENSION} file.")
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise QuizImportError(f"Could not read {file_path.name}: {exc}") from exc
    return ImportedQuiz(source_path=file_path, quiz=parse_quiz_document(text))


def parse_quiz_document(text: str | bytes) -> Quiz:
    """Decode ``.qzx`` content into a quiz."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise QuizImportError("Failed to parse quiz file. It might be corrupted.") from exc
    if not isinstance(data, dict) or not data.get("title") or not isinstance(data.get("questions"), list):
        raise QuizImportError("Invalid quiz format: a title and a list of questions are required.")

    decoded = decode_quiz(data)
    if isinstance(decoded, DecodeErr):
        raise QuizImportError(str(decoded.error)) from decoded.error
    return decoded.value

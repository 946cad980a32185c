"""Utilities for exporting quizzes as ``.qzx`` files and zip backups."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
import json
from pathlib import Path
import re
import zipfile

from quizwhiz.constants.quiz_constants import EXPORT_FOLDER_NAME, QUIZ_FILE_EXTENSION
from quizwhiz.core.models import Quiz
from quizwhiz.core.quiz_schema import quiz_to_json

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def sanitize_filename(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", name).lower()


def quiz_filename(quiz: Quiz) -> str:
    return f"{sanitize_filename(quiz.title)}{QUIZ_FILE_EXTENSION}"


def backup_filename(on: date | None = None) -> str:
    return f"quizwhiz_export_{(on or date.today()).isoformat()}.zip"


def serialize_quiz(quiz: Quiz) -> str:
    """Return the pretty-printed ``.qzx`` document for ``quiz``."""
    return json.dumps(quiz_to_json(quiz), indent=2, ensure_ascii=False)


def save_quiz_to_file(file_path: Path, quiz: Quiz) -> None:
    """Write ``quiz`` to ``file_path`` in the ``.qzx`` format."""

    if not quiz.questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = Path(file_path).resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_quiz(quiz) + "\n", encoding="utf-8")


def export_quizzes_to_zip(file_path: Path, quizzes: Sequence[Quiz]) -> list[str]:
    """Write every quiz into ``<EXPORT_FOLDER_NAME>/`` inside a zip archive.

    Returns the archive member names. Quizzes whose titles sanitize to the same
    name get a numeric suffix so none of them is overwritten.
    """
    if not quizzes:
        raise ValueError("There are no quizzes to export.")

    file_path = Path(file_path).resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    members: list[str] = []
    used: set[str] = set()
    with zipfile.ZipFile(file_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for quiz in quizzes:
            stem = sanitize_filename(quiz.title)
            name = f"{stem}{QUIZ_FILE_EXTENSION}"
            counter = 2
            while name in used:
                name = f"{stem}_{counter}{QUIZ_FILE_EXTENSION}"
                counter += 1
            used.add(name)
            member = f"{EXPORT_FOLDER_NAME}/{name}"
            archive.writestr(member, serialize_quiz(quiz))
            members.append(member)
    return members

"""Service for storing and retrieving quizzes."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import logging
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from quizwhiz.constants.quiz_constants import IMPORTED_TITLE_SUFFIX
from quizwhiz.constants.storage_constants import QUIZZES_KEY
from quizwhiz.core.models import Quiz
from quizwhiz.core.quiz_schema import quiz_from_json, quiz_to_json
from quizwhiz.core.quiz_validation import ensure_valid
from quizwhiz.core.storage import StoragePort

logger = logging.getLogger(__name__)


class QuizLibrary:
    """Keeps every user's quizzes in a single storage entry."""

    def __init__(self, storage: StoragePort) -> None:
        self._storage = storage

    def list_quizzes(self, owner_id: str | None = None) -> list[Quiz]:
        """Return quizzes, newest first. ``owner_id`` limits the list to one user."""
        quizzes = self._load_all()
        if owner_id is not None:
            quizzes = [quiz for quiz in quizzes if quiz.owner_id == owner_id]
        return sorted(quizzes, key=lambda quiz: quiz.created_at, reverse=True)

    def get_quiz(self, quiz_id: str) -> Quiz | None:
        for quiz in self._load_all():
            if quiz.id == quiz_id:
                return quiz
        return None

    def save_quiz(self, quiz: Quiz) -> Quiz:
        """Insert a new quiz or replace the stored quiz with the same id."""
        ensure_valid(quiz)
        quizzes = self._load_all()
        for index, existing in enumerate(quizzes):
            if existing.id == quiz.id:
                quizzes[index] = quiz
                break
        else:
            quizzes.append(quiz)
        self._save_all(quizzes)
        logger.info("Saved quiz %s (%s)", quiz.id, quiz.title)
        return quiz

    def delete_quiz(self, quiz_id: str) -> bool:
        quizzes = self._load_all()
        remaining = [quiz for quiz in quizzes if quiz.id != quiz_id]
        if len(remaining) == len(quizzes):
            return False
        self._save_all(remaining)
        logger.info("Deleted quiz %s", quiz_id)
        return True

    def delete_owned_by(self, owner_id: str) -> int:
        quizzes = self._load_all()
        remaining = [quiz for quiz in quizzes if quiz.owner_id != owner_id]
        removed = len(quizzes) - len(remaining)
        if removed:
            self._save_all(remaining)
        return removed

    def import_quiz(self, quiz: Quiz, owner_id: str) -> Quiz:
        """Store a copy of ``quiz`` owned by ``owner_id`` under a fresh id."""
        imported = replace(
            quiz,
            id=uuid4().hex,
            owner_id=owner_id,
            title=f"{quiz.title}{IMPORTED_TITLE_SUFFIX}",
            created_at=datetime.now(timezone.utc),
        )
        return self.save_quiz(imported)

    def _load_all(self) -> list[Quiz]:
        quizzes, unreadable = self._read_entries()
        if unreadable:
            logger.warning("Skipping %d unreadable stored quizzes", len(unreadable))
        return quizzes

    def _save_all(self, quizzes: list[Quiz]) -> None:
        # Entries that fail to decode are written back untouched.
        _, unreadable = self._read_entries()
        self._storage.save(QUIZZES_KEY, [quiz_to_json(quiz) for quiz in quizzes] + unreadable)

    def _read_entries(self) -> tuple[list[Quiz], list[Any]]:
        raw = self._storage.load(QUIZZES_KEY, default=[])
        quizzes: list[Quiz] = []
        unreadable: list[Any] = []
        for entry in raw if isinstance(raw, list) else []:
            try:
                quizzes.append(quiz_from_json(entry))
            except ValidationError:
                unreadable.append(entry)
        return quizzes, unreadable

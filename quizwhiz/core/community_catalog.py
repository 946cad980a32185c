"""Featured community quizzes bundled with the application."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path

from pydantic import Field, ValidationError

from quizwhiz.core.models import Quiz
from quizwhiz.core.quiz_schema import QuizDocument

logger = logging.getLogger(__name__)

_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "community_quizzes.json"


class _CommunityQuizDocument(QuizDocument):
    author: str
    likes: int = Field(0, ge=0)
    plays: int = Field(0, ge=0)


@dataclass(frozen=True, slots=True)
class CommunityQuiz:
    """A featured quiz together with its author and popularity counters."""

    quiz: Quiz
    author: str
    likes: int
    plays: int


class CommunityCatalog:
    """Read-only catalog of featured quizzes, most played first."""

    def __init__(self, entries: list[CommunityQuiz]):
        self._entries = sorted(entries, key=lambda entry: entry.plays, reverse=True)

    @classmethod
    def from_default_file(cls) -> "CommunityCatalog":
        return cls.from_file(_DATA_PATH)

    @classmethod
    def from_file(cls, path: Path) -> "CommunityCatalog":
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Community catalog unavailable (%s): %s", path, exc)
            return cls([])

        entries: list[CommunityQuiz] = []
        for item in raw if isinstance(raw, list) else []:
            try:
                document = _CommunityQuizDocument.model_validate(item)
            except ValidationError as exc:
                logger.warning("Skipping malformed community quiz: %s", exc)
                continue
            entries.append(
                CommunityQuiz(
                    quiz=document.to_domain(),
                    author=document.author,
                    likes=document.likes,
                    plays=document.plays,
                )
            )
        return cls(entries)

    def list_featured(self) -> list[CommunityQuiz]:
        return list(self._entries)

    def search(self, query: str) -> list[CommunityQuiz]:
        """Case-insensitive match on title or author."""
        needle = query.strip().lower()
        if not needle:
            return self.list_featured()
        return [
            entry
            for entry in self._entries
            if needle in entry.quiz.title.lower() or needle in entry.author.lower()
        ]

    def find(self, quiz_id: str) -> CommunityQuiz | None:
        for entry in self._entries:
            if entry.quiz.id == quiz_id:
                return entry
        return None

"""Domain models for the quiz application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Union

from quizwhiz.constants.quiz_constants import (
    DEFAULT_THEME,
    DEFAULT_TIME_LIMIT_SECONDS,
    TRUE_FALSE_OPTIONS,
)


class QuestionType(str, Enum):
    """Supported question formats."""

    MULTIPLE_CHOICE = "multiple-choice"
    TRUE_FALSE = "true-false"
    TEXT_INPUT = "text-input"
    ORDERING = "ordering"


@dataclass(frozen=True, slots=True, kw_only=True)
class _QuestionBase:
    text: str
    options: tuple[str, ...] = ()
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    image_ref: str = ""
    explanation: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class MultipleChoiceQuestion(_QuestionBase):
    """Question answered by picking one of the options."""

    question_type: ClassVar[QuestionType] = QuestionType.MULTIPLE_CHOICE
    correct_index: int


@dataclass(frozen=True, slots=True, kw_only=True)
class TrueFalseQuestion(_QuestionBase):
    """Question answered with True (index 0) or False (index 1)."""

    question_type: ClassVar[QuestionType] = QuestionType.TRUE_FALSE
    correct_index: int


@dataclass(frozen=True, slots=True, kw_only=True)
class TextInputQuestion(_QuestionBase):
    """Question answered by typing; matching ignores case and surrounding whitespace."""

    question_type: ClassVar[QuestionType] = QuestionType.TEXT_INPUT
    correct_text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class OrderingQuestion(_QuestionBase):
    """Question whose options are authored in the correct order.

    Players receive the options shuffled and answer with a permutation of the
    authored indices; only the identity permutation is correct.
    """

    question_type: ClassVar[QuestionType] = QuestionType.ORDERING


Question = Union[MultipleChoiceQuestion, TrueFalseQuestion, TextInputQuestion, OrderingQuestion]

# A submitted answer: option index, typed text, or an ordering permutation.
AnswerValue = Union[int, str, tuple[int, ...]]


def true_false_question(text: str, is_true: bool, **kwargs) -> TrueFalseQuestion:
    return TrueFalseQuestion(
        text=text,
        options=TRUE_FALSE_OPTIONS,
        correct_index=0 if is_true else 1,
        **kwargs,
    )


@dataclass(frozen=True, slots=True)
class CustomTheme:
    """User-defined colors for the play screen."""

    background: str = "#1e293b"
    text: str = "#ffffff"
    accent: str = "#ef4444"
    card_color: str = "#334155"
    card_opacity: float = 0.9
    background_image: str = ""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Quiz:
    """An authored quiz. Treated as read-only once a session starts."""

    id: str
    owner_id: str
    title: str
    questions: tuple[Question, ...]
    shuffle_questions: bool = False
    theme: str = DEFAULT_THEME
    custom_theme: CustomTheme | None = None
    background_music: str = ""
    created_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Outcome of a completed session. Answers follow the quiz's original question order."""

    id: str
    quiz_id: str
    quiz_title: str
    completed_at: datetime
    score: int
    total_questions: int
    answers: tuple[AnswerValue, ...]

    @property
    def is_perfect(self) -> bool:
        return self.total_questions > 0 and self.score == self.total_questions


@dataclass(slots=True)
class UserStats:
    """Activity counters used for achievements."""

    quizzes_created: int = 0
    quizzes_played: int = 0
    questions_answered: int = 0
    perfect_scores: int = 0
    study_sessions: int = 0
    ai_quizzes_generated: int = 0
    ai_images_generated: int = 0


@dataclass(slots=True)
class User:
    """Local account with its stats, unlocked achievements and play history."""

    id: str
    username: str
    email: str
    password_hash: str
    has_seen_tutorial: bool = False
    stats: UserStats = field(default_factory=UserStats)
    achievements: list[str] = field(default_factory=list)
    history: list[QuizResult] = field(default_factory=list)

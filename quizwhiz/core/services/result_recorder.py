"""Service for recording quiz results, activity counters and achievements."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging

from quizwhiz.core.achievements import Achievement, unlock_achievements
from quizwhiz.core.answer_evaluator import describe_answer, describe_correct_answer, evaluate_answer
from quizwhiz.core.models import Quiz, QuizResult, User
from quizwhiz.core.services.account_service import AccountService

logger = logging.getLogger(__name__)

_ACTIVITY_COUNTERS = {
    "create": "quizzes_created",
    "play": "quizzes_played",
    "study": "study_sessions",
    "ai_quiz": "ai_quizzes_generated",
    "ai_img": "ai_images_generated",
}


@dataclass(frozen=True, slots=True)
class MissedQuestion:
    """A question the user got wrong in a past session."""

    quiz_title: str
    question: str
    your_answer: str
    correct_answer: str
    explanation: str = ""

    def to_prompt_dict(self) -> dict[str, str]:
        return {
            "quiz": self.quiz_title,
            "question": self.question,
            "yourAnswer": self.your_answer,
            "correctAnswer": self.correct_answer,
        }


class ResultRecorder:
    """Updates a user's history and stats, then persists the user.

    Storage failures propagate unchanged; ``StorageQuotaExceededError`` in
    particular tells the caller the progress was not saved.
    """

    def __init__(self, accounts: AccountService) -> None:
        self._accounts = accounts

    def record_result(self, user: User, result: QuizResult) -> list[Achievement]:
        """Store a finished session and return any achievements it unlocked."""
        user.history.append(result)
        user.stats.quizzes_played += 1
        user.stats.questions_answered += result.total_questions
        if result.is_perfect:
            user.stats.perfect_scores += 1
        unlocked = unlock_achievements(user)
        self._accounts.update_user(user)
        logger.info(
            "Recorded result %d/%d on %s for %s",
            result.score,
            result.total_questions,
            result.quiz_title,
            user.username,
        )
        return unlocked

    def record_activity(self, user: User, kind: str, count: int = 1) -> list[Achievement]:
        """Bump one of the activity counters (``create``, ``play``, ``study``, ``ai_quiz``, ``ai_img``)."""
        stat = _ACTIVITY_COUNTERS.get(kind)
        if stat is None:
            raise ValueError(f"Unknown activity kind: {kind!r}")
        if count < 0:
            raise ValueError("Activity count must not be negative.")
        setattr(user.stats, stat, getattr(user.stats, stat) + count)
        unlocked = unlock_achievements(user)
        self._accounts.update_user(user)
        return unlocked


def missed_questions(history: Iterable[QuizResult], quizzes: Sequence[Quiz]) -> list[MissedQuestion]:
    """Collect wrongly answered questions from ``history``, newest first, without duplicates.

    Results whose quiz no longer exists, or whose answers no longer line up
    with the quiz's questions, are skipped.
    """
    quizzes_by_id = {quiz.id: quiz for quiz in quizzes}
    seen: set[tuple[str, str]] = set()
    missed: list[MissedQuestion] = []
    for result in sorted(history, key=lambda item: item.completed_at, reverse=True):
        quiz = quizzes_by_id.get(result.quiz_id)
        if quiz is None or len(quiz.questions) != len(result.answers):
            continue
        for question, answer in zip(quiz.questions, result.answers):
            key = (quiz.id, question.text)
            if key in seen or evaluate_answer(question, answer):
                continue
            seen.add(key)
            missed.append(
                MissedQuestion(
                    quiz_title=quiz.title,
                    question=question.text,
                    your_answer=describe_answer(question, answer),
                    correct_answer=describe_correct_answer(question),
                    explanation=question.explanation,
                )
            )
    return missed

"""Structural checks applied before a quiz is saved or played."""

from __future__ import annotations

from quizwhiz.core.models import (
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    Quiz,
    TextInputQuestion,
    TrueFalseQuestion,
)


class QuizValidationError(ValueError):
    """Raised when a quiz cannot be saved or played. ``errors`` lists every problem found."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("\n".join(errors))
        self.errors = list(errors)


def collect_question_errors(question: Question, number: int) -> list[str]:
    """Return messages for one question; ``number`` is 1-based for display."""
    errors: list[str] = []
    prefix = f"Question {number}"

    if not question.text.strip():
        errors.append(f"{prefix}: Add question text")

    if question.time_limit_seconds <= 0:
        errors.append(f"{prefix}: Time limit must be a positive number of seconds")

    if isinstance(question, (MultipleChoiceQuestion, OrderingQuestion)):
        if len(question.options) < 2:
            errors.append(f"{prefix}: Add at least two answer options")
        elif any(not option.strip() for option in question.options):
            errors.append(f"{prefix}: Fill in all {len(question.options)} answer options")

    if isinstance(question, MultipleChoiceQuestion):
        if not 0 <= question.correct_index < len(question.options):
            errors.append(f"{prefix}: Mark one answer as correct")
    elif isinstance(question, TrueFalseQuestion):
        if len(question.options) != 2 or question.correct_index not in (0, 1):
            errors.append(f"{prefix}: Mark True or False as correct")
    elif isinstance(question, TextInputQuestion):
        if not question.correct_text.strip():
            errors.append(f"{prefix}: Provide the correct text answer")

    return errors


def collect_quiz_errors(quiz: Quiz) -> list[str]:
    errors: list[str] = []
    if not quiz.title.strip():
        errors.append("Add a quiz title")
    if not quiz.questions:
        errors.append("Add at least one question")
    for number, question in enumerate(quiz.questions, start=1):
        errors.extend(collect_question_errors(question, number))
    return errors


def ensure_playable(quiz: Quiz) -> None:
    """Reject quizzes a session cannot run. The title is not required to play."""
    if not quiz.questions:
        raise QuizValidationError(["Quiz must contain at least one question."])
    errors: list[str] = []
    for number, question in enumerate(quiz.questions, start=1):
        errors.extend(collect_question_errors(question, number))
    if errors:
        raise QuizValidationError(errors)


def ensure_valid(quiz: Quiz) -> None:
    errors = collect_quiz_errors(quiz)
    if errors:
        raise QuizValidationError(errors)

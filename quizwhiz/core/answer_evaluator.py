"""Answer checking and scoring for every question type.

All functions here are pure: they look at a question and a submitted value
and never touch session state. The timeout sentinel is handled before any
type-specific comparison so that it can never be mistaken for a real answer,
even for text or ordering questions where ``-1`` would otherwise be compared
against a string or a permutation.
"""

from __future__ import annotations

from collections.abc import Sequence

from quizwhiz.constants.quiz_constants import TIMEOUT_ANSWER
from quizwhiz.core.models import (
    AnswerValue,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    TextInputQuestion,
    TrueFalseQuestion,
)


def is_timeout(answer: object) -> bool:
    """Return True for the "no answer given" sentinel."""
    return isinstance(answer, int) and not isinstance(answer, bool) and answer == TIMEOUT_ANSWER


def _is_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_permutation(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def normalize_text_answer(text: str) -> str:
    return text.strip().casefold()


def validate_submission(question: Question, answer: object) -> AnswerValue:
    """Check that ``answer`` has the right shape for ``question``.

    Returns the answer in canonical form (ordering permutations become
    tuples). The timeout sentinel is always accepted. Raises ``ValueError``
    for anything a well-behaved caller would never send.
    """
    if is_timeout(answer):
        return TIMEOUT_ANSWER

    if isinstance(question, (MultipleChoiceQuestion, TrueFalseQuestion)):
        if not _is_index(answer):
            raise ValueError(f"Expected an option index, got {answer!r}.")
        if not 0 <= answer < len(question.options):
            raise ValueError(
                f"Option index {answer} out of range for {len(question.options)} options."
            )
        return answer

    if isinstance(question, TextInputQuestion):
        if not isinstance(answer, str):
            raise ValueError(f"Expected a text answer, got {answer!r}.")
        return answer

    if isinstance(question, OrderingQuestion):
        if not _is_permutation(answer):
            raise ValueError(f"Expected a sequence of option indices, got {answer!r}.")
        permutation = tuple(answer)
        if len(permutation) != len(question.options):
            raise ValueError(
                f"Ordering answer has {len(permutation)} items, expected {len(question.options)}."
            )
        if not all(_is_index(item) for item in permutation) or sorted(permutation) != list(
            range(len(question.options))
        ):
            raise ValueError(f"Ordering answer {permutation!r} is not a permutation of the options.")
        return permutation

    raise TypeError(f"Unsupported question type: {type(question).__name__}")


def evaluate_answer(question: Question, answer: object) -> bool:
    """Return True when ``answer`` is correct for ``question``."""
    if is_timeout(answer):
        return False

    if isinstance(question, TextInputQuestion):
        return isinstance(answer, str) and normalize_text_answer(answer) == normalize_text_answer(
            question.correct_text
        )

    if isinstance(question, OrderingQuestion):
        if not _is_permutation(answer):
            return False
        permutation = list(answer)
        return permutation == list(range(len(question.options)))

    if isinstance(question, (MultipleChoiceQuestion, TrueFalseQuestion)):
        return _is_index(answer) and answer == question.correct_index

    return False


def score_answers(questions: Sequence[Question], answers: Sequence[object]) -> int:
    """Count correct answers, pairing ``answers[k]`` with ``questions[k]``."""
    if len(answers) != len(questions):
        raise ValueError(f"Expected {len(questions)} answers, got {len(answers)}.")
    return sum(1 for question, answer in zip(questions, answers) if evaluate_answer(question, answer))


def describe_correct_answer(question: Question) -> str:
    if isinstance(question, TextInputQuestion):
        return question.correct_text
    if isinstance(question, OrderingQuestion):
        return " → ".join(question.options)
    if 0 <= question.correct_index < len(question.options):
        return question.options[question.correct_index]
    return ""


def describe_answer(question: Question, answer: object) -> str:
    """Human-readable rendering of a submitted answer, used in history views."""
    if is_timeout(answer):
        return "No answer (time ran out)"
    if isinstance(question, TextInputQuestion):
        return str(answer)
    if isinstance(question, OrderingQuestion) and _is_permutation(answer):
        return " → ".join(
            question.options[index] for index in answer if _is_index(index) and 0 <= index < len(question.options)
        )
    if _is_index(answer) and 0 <= answer < len(question.options):
        return question.options[answer]
    return str(answer)

"""Editable quiz drafts used by the quiz creator."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from quizwhiz.constants.quiz_constants import (
    DEFAULT_OPTION_COUNT,
    DEFAULT_THEME,
    DEFAULT_TIME_LIMIT_SECONDS,
    MAX_TIME_LIMIT_SECONDS,
    MIN_TIME_LIMIT_SECONDS,
    TRUE_FALSE_OPTIONS,
)
from quizwhiz.core.models import (
    CustomTheme,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    QuestionType,
    Quiz,
    TextInputQuestion,
    TrueFalseQuestion,
)
from quizwhiz.core.quiz_validation import QuizValidationError, collect_quiz_errors


@dataclass(slots=True)
class QuestionDraft:
    """Mutable question as edited in the creator.

    ``correct`` holds an option index for choice questions, the expected text
    for text questions and ``None`` for ordering questions.
    """

    text: str = ""
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    options: list[str] = field(default_factory=lambda: [""] * DEFAULT_OPTION_COUNT)
    correct: int | str | None = 0
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    image_ref: str = ""
    explanation: str = ""

    def is_blank(self) -> bool:
        return not self.text.strip()

    def to_question(self) -> Question:
        common = {
            "text": self.text.strip(),
            "time_limit_seconds": self.time_limit_seconds,
            "image_ref": self.image_ref,
            "explanation": self.explanation.strip(),
        }
        if self.question_type == QuestionType.TEXT_INPUT:
            correct_text = self.correct if isinstance(self.correct, str) else ""
            return TextInputQuestion(correct_text=correct_text.strip(), **common)

        options = tuple(option.strip() for option in self.options)
        if self.question_type == QuestionType.ORDERING:
            return OrderingQuestion(options=options, **common)

        correct_index = self.correct if isinstance(self.correct, int) and not isinstance(self.correct, bool) else -1
        if self.question_type == QuestionType.TRUE_FALSE:
            return TrueFalseQuestion(options=TRUE_FALSE_OPTIONS, correct_index=correct_index, **common)
        return MultipleChoiceQuestion(options=options, correct_index=correct_index, **common)

    @classmethod
    def from_question(cls, question: Question) -> "QuestionDraft":
        if isinstance(question, TextInputQuestion):
            options, correct = [""], question.correct_text
        elif isinstance(question, OrderingQuestion):
            options, correct = list(question.options), None
        else:
            options, correct = list(question.options), question.correct_index
        return cls(
            text=question.text,
            question_type=question.question_type,
            options=options,
            correct=correct,
            time_limit_seconds=question.time_limit_seconds,
            image_ref=question.image_ref,
            explanation=question.explanation,
        )


class QuizDraft:
    """Manages the questions of a quiz while it is being written.

    A draft always holds at least one question. ``build()`` turns it into an
    immutable ``Quiz`` or raises ``QuizValidationError`` listing every problem.
    """

    def __init__(self, title: str = "") -> None:
        self.title = title
        self.theme = DEFAULT_THEME
        self.custom_theme: CustomTheme | None = None
        self.shuffle_questions = False
        self.background_music = ""
        self._questions: list[QuestionDraft] = [QuestionDraft()]
        self._quiz_id: str | None = None
        self._created_at: datetime | None = None

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizDraft":
        """Start editing an existing quiz; ``build()`` keeps its id and creation time."""
        draft = cls(quiz.title)
        draft.theme = quiz.theme
        draft.custom_theme = quiz.custom_theme
        draft.shuffle_questions = quiz.shuffle_questions
        draft.background_music = quiz.background_music
        draft._questions = [QuestionDraft.from_question(question) for question in quiz.questions] or [QuestionDraft()]
        draft._quiz_id = quiz.id
        draft._created_at = quiz.created_at
        return draft

    @property
    def quiz_id(self) -> str | None:
        return self._quiz_id

    @property
    def is_new(self) -> bool:
        return self._quiz_id is None

    def get_question_count(self) -> int:
        return len(self._questions)

    def get_question_at_index(self, index: int) -> QuestionDraft:
        self._check_index(index)
        return self._questions[index]

    def add_question(self) -> int:
        """Append a blank multiple-choice question and return its index."""
        self._questions.append(QuestionDraft())
        return len(self._questions) - 1

    def delete_question(self, index: int) -> bool:
        """Remove a question. The last remaining question cannot be removed."""
        self._check_index(index)
        if len(self._questions) <= 1:
            return False
        self._questions.pop(index)
        return True

    def change_type(self, index: int, question_type: QuestionType) -> None:
        """Switch a question's type, resetting its options and correct answer."""
        question = self.get_question_at_index(index)
        question_type = QuestionType(question_type)
        question.question_type = question_type
        if question_type == QuestionType.TRUE_FALSE:
            question.options = list(TRUE_FALSE_OPTIONS)
            question.correct = 0
        elif question_type == QuestionType.TEXT_INPUT:
            question.options = [""]
            question.correct = ""
        elif question_type == QuestionType.ORDERING:
            question.options = [""] * DEFAULT_OPTION_COUNT
            question.correct = None
        else:
            question.options = [""] * DEFAULT_OPTION_COUNT
            question.correct = 0

    def set_text(self, index: int, text: str) -> None:
        self.get_question_at_index(index).text = text

    def set_explanation(self, index: int, explanation: str) -> None:
        self.get_question_at_index(index).explanation = explanation

    def set_image(self, index: int, image_ref: str) -> None:
        self.get_question_at_index(index).image_ref = image_ref

    def set_option(self, index: int, option_index: int, text: str) -> None:
        question = self.get_question_at_index(index)
        if question.question_type == QuestionType.TRUE_FALSE:
            raise ValueError("True/False options cannot be edited.")
        if not 0 <= option_index < len(question.options):
            raise IndexError(f"Option index {option_index} out of range")
        question.options[option_index] = text

    def set_correct(self, index: int, value: int | str) -> None:
        question = self.get_question_at_index(index)
        if question.question_type == QuestionType.ORDERING:
            raise ValueError("Ordering questions are correct in the order they are written.")
        if question.question_type == QuestionType.TEXT_INPUT:
            if not isinstance(value, str):
                raise ValueError("Text questions need a text answer.")
            question.correct = value
            return
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < len(question.options):
            raise ValueError(f"Correct option must be an index between 0 and {len(question.options) - 1}.")
        question.correct = value

    def set_time_limit(self, index: int, seconds: int) -> None:
        if not isinstance(seconds, int) or isinstance(seconds, bool):
            raise ValueError("Time limit must be provided as an integer number of seconds.")
        if not MIN_TIME_LIMIT_SECONDS <= seconds <= MAX_TIME_LIMIT_SECONDS:
            raise ValueError(
                f"Time limit must be between {MIN_TIME_LIMIT_SECONDS} and {MAX_TIME_LIMIT_SECONDS} seconds."
            )
        self.get_question_at_index(index).time_limit_seconds = seconds

    def move_option(self, index: int, option_index: int, offset: int) -> bool:
        """Move an ordering item up (-1) or down (+1). Returns False at the edges."""
        question = self.get_question_at_index(index)
        target = option_index + offset
        if not (0 <= option_index < len(question.options) and 0 <= target < len(question.options)):
            return False
        question.options[option_index], question.options[target] = question.options[target], question.options[option_index]
        return True

    def append_generated(self, questions: Sequence[Question]) -> None:
        """Add generated questions, replacing the draft's only question if it is still blank."""
        drafts = [QuestionDraft.from_question(question) for question in questions]
        if not drafts:
            return
        if len(self._questions) == 1 and self._questions[0].is_blank():
            self._questions = drafts
        else:
            self._questions.extend(drafts)

    def build(self, owner_id: str) -> Quiz:
        quiz = Quiz(
            id=self._quiz_id or uuid4().hex,
            owner_id=owner_id,
            title=self.title.strip(),
            questions=tuple(question.to_question() for question in self._questions),
            shuffle_questions=self.shuffle_questions,
            theme=self.theme,
            custom_theme=self.custom_theme,
            background_music=self.background_music,
            created_at=self._created_at or datetime.now(timezone.utc),
        )
        errors = collect_quiz_errors(quiz)
        if errors:
            raise QuizValidationError(errors)
        return quiz

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._questions):
            raise IndexError(f"Question index {index} out of range")

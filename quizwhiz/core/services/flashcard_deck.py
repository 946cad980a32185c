"""Flashcard deck for study mode."""

from __future__ import annotations

from dataclasses import dataclass
import random

from quizwhiz.core.answer_evaluator import describe_correct_answer
from quizwhiz.core.models import Quiz


@dataclass(frozen=True, slots=True)
class Flashcard:
    front: str
    back: str
    explanation: str = ""
    image_ref: str = ""


class FlashcardDeck:
    """Cycles through one card per question; the back shows the correct answer."""

    def __init__(self, quiz: Quiz) -> None:
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")
        self._quiz = quiz
        self._cards: list[Flashcard] = [
            Flashcard(
                front=question.text,
                back=describe_correct_answer(question),
                explanation=question.explanation,
                image_ref=question.image_ref,
            )
            for question in quiz.questions
        ]
        self._position = 0
        self._flipped = False

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def position(self) -> int:
        return self._position

    @property
    def size(self) -> int:
        return len(self._cards)

    @property
    def is_flipped(self) -> bool:
        return self._flipped

    @property
    def current(self) -> Flashcard:
        return self._cards[self._position]

    def cards(self) -> list[Flashcard]:
        return list(self._cards)

    def flip(self) -> bool:
        self._flipped = not self._flipped
        return self._flipped

    def next(self) -> Flashcard:
        """Move forward, wrapping to the first card."""
        self._position = (self._position + 1) % len(self._cards)
        self._flipped = False
        return self.current

    def previous(self) -> Flashcard:
        self._position = (self._position - 1) % len(self._cards)
        self._flipped = False
        return self.current

    def shuffle(self, rng: random.Random | None = None) -> None:
        (rng or random.Random()).shuffle(self._cards)
        self._position = 0
        self._flipped = False

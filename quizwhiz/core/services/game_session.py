"""Session runner that plays one quiz from the first question to a result."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
import logging
import random
from uuid import uuid4

from quizwhiz.constants.quiz_constants import START_COUNTDOWN_SECONDS, TIMEOUT_ANSWER
from quizwhiz.core.answer_evaluator import evaluate_answer, is_timeout, score_answers, validate_submission
from quizwhiz.core.models import AnswerValue, OrderingQuestion, Question, Quiz, QuizResult
from quizwhiz.core.quiz_validation import ensure_playable

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a playthrough. Each question cycles AWAITING_ANSWER → SUBMITTED → (SHOWING_FEEDBACK | ADVANCING)."""

    STARTING = auto()
    AWAITING_ANSWER = auto()
    SUBMITTED = auto()
    SHOWING_FEEDBACK = auto()
    ADVANCING = auto()
    COMPLETED = auto()
    EXITED = auto()


class SessionStateError(RuntimeError):
    """Raised when the session API is used out of order."""


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Notification sent to listeners on every state change and countdown tick."""

    state: SessionState
    position: int
    seconds_remaining: int
    streak: int
    is_correct: bool | None = None
    start_countdown: int = 0


@dataclass(frozen=True, slots=True)
class SubmittedAnswer:
    """An answer recorded at a presentation position."""

    position: int
    question_index: int
    value: AnswerValue
    is_correct: bool
    submitted_at: datetime

    @property
    def timed_out(self) -> bool:
        return is_timeout(self.value)


SessionListener = Callable[[SessionEvent], None]


class QuizSession:
    """Drives one playthrough of a quiz.

    The host feeds the session with ``tick()`` once per second and with the
    player's ``submit()`` calls. Answers are kept by presentation position
    while playing and mapped back to the quiz's original question order only
    when the session completes, so ``result.answers[k]`` always belongs to
    ``quiz.questions[k]`` whether or not the questions were shuffled.
    """

    def __init__(
        self,
        quiz: Quiz,
        *,
        rng: random.Random | None = None,
        start_countdown_seconds: int = START_COUNTDOWN_SECONDS,
    ) -> None:
        ensure_playable(quiz)
        self._quiz = quiz
        self._questions: tuple[Question, ...] = tuple(quiz.questions)
        self._rng = rng or random.Random()
        self._listeners: list[SessionListener] = []

        self._presentation_order: tuple[int, ...] = self._build_presentation_order()
        self._position: int = 0
        self._answers: dict[int, SubmittedAnswer] = {}
        self._last_answer: SubmittedAnswer | None = None
        self._streak: int = 0
        self._result: QuizResult | None = None

        self._start_countdown: int = max(0, start_countdown_seconds)
        self._seconds_remaining: int = 0
        self._ordering_arrangement: list[int] = []
        self._enter_question()
        self._state = SessionState.STARTING if self._start_countdown > 0 else SessionState.AWAITING_ANSWER

    # --- Read-only view ---

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def presentation_order(self) -> tuple[int, ...]:
        return self._presentation_order

    @property
    def position(self) -> int:
        return self._position

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def current_question_index(self) -> int:
        """Index of the current question in the quiz's original order."""
        return self._presentation_order[self._position]

    @property
    def current_question(self) -> Question:
        return self._questions[self.current_question_index]

    @property
    def seconds_remaining(self) -> int:
        return self._seconds_remaining

    @property
    def start_countdown(self) -> int:
        return self._start_countdown

    @property
    def streak(self) -> int:
        return self._streak

    @property
    def last_answer(self) -> SubmittedAnswer | None:
        return self._last_answer

    @property
    def ordering_arrangement(self) -> tuple[int, ...]:
        """Current on-screen order of an ordering question, as indices into its authored options."""
        return tuple(self._ordering_arrangement)

    @property
    def display_options(self) -> tuple[str, ...]:
        question = self.current_question
        if isinstance(question, OrderingQuestion):
            return tuple(question.options[index] for index in self._ordering_arrangement)
        return question.options

    @property
    def is_finished(self) -> bool:
        return self._state in (SessionState.COMPLETED, SessionState.EXITED)

    @property
    def result(self) -> QuizResult:
        if self._result is None:
            raise SessionStateError("The session has not completed yet.")
        return self._result

    # --- Listeners ---

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self, is_correct: bool | None = None) -> SessionEvent:
        return SessionEvent(
            state=self._state,
            position=self._position,
            seconds_remaining=self._seconds_remaining,
            streak=self._streak,
            is_correct=is_correct,
            start_countdown=self._start_countdown,
        )

    def _emit(self, is_correct: bool | None = None) -> None:
        event = self.snapshot(is_correct)
        for listener in list(self._listeners):
            listener(event)

    # --- Inputs ---

    def tick(self) -> None:
        """Advance the clock by one second. Ignored unless a countdown is running."""
        if self._state == SessionState.STARTING:
            self._start_countdown = max(0, self._start_countdown - 1)
            if self._start_countdown == 0:
                self._state = SessionState.AWAITING_ANSWER
            self._emit()
            return

        if self._state != SessionState.AWAITING_ANSWER:
            return

        self._seconds_remaining = max(0, self._seconds_remaining - 1)
        if self._seconds_remaining == 0:
            logger.debug("Time ran out at position %d", self._position)
            self._record(TIMEOUT_ANSWER)
        else:
            self._emit()

    def submit(self, value: object) -> SubmittedAnswer | None:
        """Submit the player's answer for the current question.

        Returns the recorded answer, or None when the session is not waiting
        for one (before the start countdown ends, during feedback, after the
        question was already answered or timed out, or after the session ended).
        """
        if self._state != SessionState.AWAITING_ANSWER:
            logger.debug("Ignoring submission in state %s", self._state.name)
            return None
        canonical = validate_submission(self.current_question, value)
        return self._record(canonical)

    def submit_arrangement(self) -> SubmittedAnswer | None:
        """Submit the current ordering arrangement as the answer."""
        return self.submit(self.ordering_arrangement)

    def move_ordering_item(self, index: int, offset: int) -> bool:
        """Swap the item at ``index`` with its neighbour ``offset`` steps away (typically ±1)."""
        if self._state != SessionState.AWAITING_ANSWER:
            return False
        if not isinstance(self.current_question, OrderingQuestion):
            return False
        target = index + offset
        if not (0 <= index < len(self._ordering_arrangement) and 0 <= target < len(self._ordering_arrangement)):
            return False
        arrangement = self._ordering_arrangement
        arrangement[index], arrangement[target] = arrangement[target], arrangement[index]
        self._emit()
        return True

    def acknowledge(self) -> bool:
        """Dismiss feedback and continue. Returns False when no feedback is showing."""
        if self._state != SessionState.SHOWING_FEEDBACK:
            return False
        self._move_to_next_question()
        return True

    def advance(self) -> bool:
        """Continue after the auto-advance delay. Returns False unless the session is advancing."""
        if self._state != SessionState.ADVANCING:
            return False
        self._move_to_next_question()
        return True

    def end(self) -> None:
        """End the session early. Later ticks and submissions are ignored."""
        if self.is_finished:
            return
        self._state = SessionState.EXITED
        logger.debug("Session for quiz %s ended early at position %d", self._quiz.id, self._position)
        self._emit()

    # --- Internals ---

    def _build_presentation_order(self) -> tuple[int, ...]:
        order = list(range(len(self._questions)))
        if self._quiz.shuffle_questions:
            self._rng.shuffle(order)
        return tuple(order)

    def _enter_question(self) -> None:
        question = self.current_question
        self._seconds_remaining = question.time_limit_seconds
        if isinstance(question, OrderingQuestion):
            self._ordering_arrangement = self._shuffled_arrangement(len(question.options))
        else:
            self._ordering_arrangement = []

    def _shuffled_arrangement(self, size: int) -> list[int]:
        arrangement = list(range(size))
        if size < 2:
            return arrangement
        identity = list(arrangement)
        while arrangement == identity:
            self._rng.shuffle(arrangement)
        return arrangement

    def _record(self, value: AnswerValue) -> SubmittedAnswer:
        question = self.current_question
        is_correct = evaluate_answer(question, value)
        self._streak = self._streak + 1 if is_correct else 0

        answer = SubmittedAnswer(
            position=self._position,
            question_index=self.current_question_index,
            value=value,
            is_correct=is_correct,
            submitted_at=datetime.now(timezone.utc),
        )
        self._answers[self._position] = answer
        self._last_answer = answer

        self._state = SessionState.SUBMITTED
        self._emit(is_correct)

        if question.explanation.strip() or not is_correct:
            self._state = SessionState.SHOWING_FEEDBACK
        else:
            self._state = SessionState.ADVANCING
        self._emit(is_correct)
        return answer

    def _move_to_next_question(self) -> None:
        if self._position < len(self._questions) - 1:
            self._position += 1
            self._enter_question()
            self._state = SessionState.AWAITING_ANSWER
            self._emit()
            return
        self._finalize()

    def _finalize(self) -> None:
        answers: list[AnswerValue] = [TIMEOUT_ANSWER] * len(self._questions)
        for position, answer in self._answers.items():
            answers[self._presentation_order[position]] = answer.value

        self._result = QuizResult(
            id=uuid4().hex,
            quiz_id=self._quiz.id,
            quiz_title=self._quiz.title,
            completed_at=datetime.now(timezone.utc),
            score=score_answers(self._questions, answers),
            total_questions=len(self._questions),
            answers=tuple(answers),
        )
        self._state = SessionState.COMPLETED
        logger.debug(
            "Session for quiz %s completed with score %d/%d",
            self._quiz.id,
            self._result.score,
            self._result.total_questions,
        )
        self._emit()


def build_session(quiz: Quiz, *, seed: int | None = None, start_countdown_seconds: int = START_COUNTDOWN_SECONDS) -> QuizSession:
    """Convenience constructor with an optional reproducible shuffle seed."""
    rng = random.Random(seed) if seed is not None else None
    return QuizSession(quiz, rng=rng, start_countdown_seconds=start_countdown_seconds)


def play_answers(session: QuizSession, answers: Sequence[object]) -> QuizResult:
    """Feed ``answers`` in presentation order, acknowledging feedback, and return the result.

    The sentinel ``-1`` plays as a timeout by letting the countdown run out.
    """
    while session.state == SessionState.STARTING:
        session.tick()
    for value in answers:
        if session.state != SessionState.AWAITING_ANSWER:
            break
        if is_timeout(value):
            while session.state == SessionState.AWAITING_ANSWER:
                session.tick()
        else:
            session.submit(value)
        if not session.acknowledge():
            session.advance()
    return session.result

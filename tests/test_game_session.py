"""Tests for the quiz session state machine."""

import pytest

from conftest import make_quiz
from quizwhiz.core.models import MultipleChoiceQuestion, OrderingQuestion, TextInputQuestion
from quizwhiz.core.quiz_validation import QuizValidationError
from quizwhiz.core.services.game_session import SessionState, SessionStateError, build_session, play_answers


def _questions(count: int):
    return [
        MultipleChoiceQuestion(
            text=f"Question {number}",
            options=("a", "b", "c", "d"),
            correct_index=number % 4,
            time_limit_seconds=3,
        )
        for number in range(count)
    ]


class TestSessionStart:
    def test_start_countdown_precedes_first_question(self, sample_quiz):
        session = build_session(sample_quiz, seed=1)
        assert session.state == SessionState.STARTING
        for _ in range(3):
            session.tick()
        assert session.state == SessionState.AWAITING_ANSWER

    def test_submit_ignored_before_countdown_ends(self, sample_quiz):
        session = build_session(sample_quiz, seed=1)
        assert session.submit(1) is None

    def test_empty_quiz_cannot_be_played(self):
        with pytest.raises(QuizValidationError):
            build_session(make_quiz())

    def test_presentation_order_without_shuffle(self, sample_quiz):
        session = build_session(sample_quiz, seed=3)
        assert session.presentation_order == (0, 1, 2, 3)

    def test_shuffle_is_reproducible_with_seed(self):
        quiz = make_quiz(*_questions(6), shuffle=True)
        first = build_session(quiz, seed=42).presentation_order
        second = build_session(quiz, seed=42).presentation_order
        assert first == second
        assert sorted(first) == list(range(6))

    def test_unseeded_shuffle_rarely_keeps_authored_order(self):
        quiz = make_quiz(*_questions(4), shuffle=True)
        orders = [build_session(quiz).presentation_order for _ in range(200)]
        identity = tuple(range(4))
        assert all(sorted(order) == list(identity) for order in orders)
        # One in 24 orders is the identity, so 200 runs land near 8.
        assert sum(order == identity for order in orders) < 40
        assert len(set(orders)) > 10


class TestAnswering:
    def test_result_answers_follow_original_order(self):
        questions = _questions(5)
        quiz = make_quiz(*questions, shuffle=True)
        session = build_session(quiz, seed=7, start_countdown_seconds=0)
        order = session.presentation_order
        result = play_answers(session, [questions[index].correct_index for index in order])
        assert result.answers == tuple(question.correct_index for question in questions)
        assert result.score == 5
        assert result.is_perfect

    def test_score_with_timeout_and_wrong_answer(self):
        quiz = make_quiz(*_questions(3))
        session = build_session(quiz, seed=1, start_countdown_seconds=0)
        result = play_answers(session, [0, -1, 0])
        assert result.answers == (0, -1, 0)
        assert result.score == 1
        assert result.total_questions == 3

    def test_timeout_after_time_limit(self):
        quiz = make_quiz(*_questions(1))
        session = build_session(quiz, start_countdown_seconds=0)
        for _ in range(3):
            session.tick()
        assert session.last_answer is not None
        assert session.last_answer.timed_out
        assert session.state == SessionState.SHOWING_FEEDBACK

    def test_tick_after_submit_does_nothing(self):
        quiz = make_quiz(*_questions(2))
        session = build_session(quiz, start_countdown_seconds=0)
        session.submit(0)
        remaining = session.seconds_remaining
        state = session.state
        session.tick()
        assert session.seconds_remaining == remaining
        assert session.state == state

    def test_second_submission_is_ignored(self):
        quiz = make_quiz(*_questions(2))
        session = build_session(quiz, start_countdown_seconds=0)
        assert session.submit(0) is not None
        assert session.submit(1) is None

    def test_correct_answer_without_explanation_advances(self):
        quiz = make_quiz(*_questions(2))
        session = build_session(quiz, start_countdown_seconds=0)
        session.submit(0)
        assert session.state == SessionState.ADVANCING
        assert session.advance()
        assert session.position == 1
        assert session.state == SessionState.AWAITING_ANSWER

    def test_explanation_always_shows_feedback(self):
        question = MultipleChoiceQuestion(text="Q", options=("a", "b"), correct_index=0, explanation="Because.")
        session = build_session(make_quiz(question), start_countdown_seconds=0)
        session.submit(0)
        assert session.state == SessionState.SHOWING_FEEDBACK
        assert session.acknowledge()
        assert session.state == SessionState.COMPLETED

    def test_text_answer_is_normalized(self):
        question = TextInputQuestion(text="Capital of France?", correct_text="Paris")
        session = build_session(make_quiz(question), start_countdown_seconds=0)
        answer = session.submit(" paris ")
        assert answer.is_correct

    def test_misspelled_text_answer_is_wrong(self):
        question = TextInputQuestion(text="Capital of France?", correct_text="Paris")
        session = build_session(make_quiz(question), start_countdown_seconds=0)
        answer = session.submit("Pariss")
        assert not answer.is_correct
        assert session.state == SessionState.SHOWING_FEEDBACK
        assert session.acknowledge()
        assert session.result.score == 0
        assert session.result.answers == ("Pariss",)

    def test_single_question_play_through(self):
        question = MultipleChoiceQuestion(text="Pick C", options=("A", "B", "C", "D"), correct_index=2, time_limit_seconds=20)
        session = build_session(make_quiz(question), start_countdown_seconds=0)
        assert session.seconds_remaining == 20
        session.tick()
        answer = session.submit(2)
        assert answer.is_correct
        assert session.advance()
        assert session.state == SessionState.COMPLETED
        assert session.result.score == 1
        assert session.result.total_questions == 1
        assert session.result.answers == (2,)

    def test_each_question_gets_its_own_time_limit(self):
        questions = [
            MultipleChoiceQuestion(text="Quick", options=("a", "b"), correct_index=0, time_limit_seconds=5),
            MultipleChoiceQuestion(text="Slow", options=("a", "b"), correct_index=0, time_limit_seconds=30),
        ]
        session = build_session(make_quiz(*questions), start_countdown_seconds=0)
        assert session.seconds_remaining == 5
        session.tick()
        session.submit(0)
        assert session.advance()
        assert session.seconds_remaining == 30

    def test_result_unavailable_before_completion(self, sample_quiz):
        session = build_session(sample_quiz)
        with pytest.raises(SessionStateError):
            session.result


class TestOrdering:
    def test_initial_arrangement_is_never_identity(self):
        question = OrderingQuestion(text="Order", options=("a", "b"))
        for seed in range(20):
            session = build_session(make_quiz(question), seed=seed, start_countdown_seconds=0)
            assert session.ordering_arrangement == (1, 0)

    def test_moving_items_into_order_is_correct(self):
        question = OrderingQuestion(text="Order", options=("a", "b"))
        session = build_session(make_quiz(question), seed=5, start_countdown_seconds=0)
        assert session.move_ordering_item(0, 1)
        assert session.display_options == ("a", "b")
        answer = session.submit_arrangement()
        assert answer.is_correct

    def test_move_outside_bounds(self):
        question = OrderingQuestion(text="Order", options=("a", "b", "c"))
        session = build_session(make_quiz(question), seed=5, start_countdown_seconds=0)
        assert not session.move_ordering_item(0, -1)
        assert not session.move_ordering_item(2, 1)

    def test_arrangement_is_rebuilt_for_each_ordering_question(self):
        questions = [
            OrderingQuestion(text="Small to big", options=("Moon", "Earth", "Sun")),
            OrderingQuestion(text="Oldest first", options=("Rome", "Paris", "Berlin", "Oslo")),
        ]
        for seed in range(30):
            session = build_session(make_quiz(*questions), seed=seed, start_countdown_seconds=0)
            first = session.ordering_arrangement
            assert sorted(first) == [0, 1, 2]
            assert first != (0, 1, 2)

            assert not session.submit_arrangement().is_correct
            assert session.acknowledge()

            second = session.ordering_arrangement
            assert sorted(second) == [0, 1, 2, 3]
            assert second != (0, 1, 2, 3)

    def test_moves_notify_listeners(self):
        question = OrderingQuestion(text="Order", options=("a", "b", "c"))
        session = build_session(make_quiz(question), seed=5, start_countdown_seconds=0)
        events = []
        session.add_listener(events.append)
        assert session.move_ordering_item(0, 1)
        assert not session.move_ordering_item(0, -1)
        assert [event.state for event in events] == [SessionState.AWAITING_ANSWER]


class TestEnding:
    def test_end_ignores_later_input(self):
        quiz = make_quiz(*_questions(2))
        session = build_session(quiz, start_countdown_seconds=0)
        session.end()
        assert session.state == SessionState.EXITED
        assert session.submit(0) is None
        session.tick()
        assert session.state == SessionState.EXITED

    def test_listeners_receive_events(self):
        quiz = make_quiz(*_questions(1))
        session = build_session(quiz, start_countdown_seconds=0)
        events = []
        session.add_listener(events.append)
        session.submit(0)
        session.advance()
        states = [event.state for event in events]
        assert states == [SessionState.SUBMITTED, SessionState.ADVANCING, SessionState.COMPLETED]
        assert events[0].is_correct is True

"""Tests for answer checking and scoring."""

import pytest

from quizwhiz.core.answer_evaluator import (
    describe_answer,
    describe_correct_answer,
    evaluate_answer,
    is_timeout,
    score_answers,
    validate_submission,
)
from quizwhiz.core.models import OrderingQuestion, TextInputQuestion, true_false_question


class TestTimeout:
    def test_sentinel_is_timeout(self):
        assert is_timeout(-1)

    def test_booleans_and_other_values_are_not(self):
        assert not is_timeout(True)
        assert not is_timeout(0)
        assert not is_timeout("-1")

    def test_timeout_is_wrong_for_every_type(self, mixed_questions):
        for question in mixed_questions:
            assert evaluate_answer(question, -1) is False


class TestEvaluateAnswer:
    def test_multiple_choice(self, france_question):
        assert evaluate_answer(france_question, 1)
        assert not evaluate_answer(france_question, 0)

    def test_true_false(self):
        question = true_false_question("Water is wet.", False)
        assert evaluate_answer(question, 1)
        assert not evaluate_answer(question, 0)

    def test_text_ignores_case_and_whitespace(self):
        question = TextInputQuestion(text="Capital of France?", correct_text="Paris")
        assert evaluate_answer(question, " paris ")
        assert evaluate_answer(question, "PARIS")
        assert not evaluate_answer(question, "Lyon")

    def test_ordering_only_identity_is_correct(self):
        question = OrderingQuestion(text="Order", options=("a", "b", "c"))
        assert evaluate_answer(question, (0, 1, 2))
        assert evaluate_answer(question, [0, 1, 2])
        assert not evaluate_answer(question, (1, 0, 2))


class TestValidateSubmission:
    def test_index_out_of_range(self, france_question):
        with pytest.raises(ValueError):
            validate_submission(france_question, 4)

    def test_text_required_for_text_question(self):
        with pytest.raises(ValueError):
            validate_submission(TextInputQuestion(text="Q", correct_text="A"), 2)

    def test_ordering_must_be_permutation(self):
        question = OrderingQuestion(text="Order", options=("a", "b", "c"))
        with pytest.raises(ValueError):
            validate_submission(question, (0, 0, 1))
        with pytest.raises(ValueError):
            validate_submission(question, (0, 1))

    def test_ordering_is_canonicalized_to_tuple(self):
        question = OrderingQuestion(text="Order", options=("a", "b"))
        assert validate_submission(question, [1, 0]) == (1, 0)

    def test_timeout_always_accepted(self, mixed_questions):
        for question in mixed_questions:
            assert validate_submission(question, -1) == -1


class TestScoring:
    def test_score_counts_correct_answers(self, mixed_questions):
        answers = [1, -1, "rome", (1, 0, 2)]
        assert score_answers(mixed_questions, answers) == 2

    def test_length_mismatch(self, mixed_questions):
        with pytest.raises(ValueError):
            score_answers(mixed_questions, [1])


class TestDescriptions:
    def test_correct_answer_for_ordering(self):
        question = OrderingQuestion(text="Order", options=("Moon", "Earth", "Sun"))
        assert describe_correct_answer(question) == "Moon → Earth → Sun"

    def test_answer_descriptions(self, france_question):
        assert describe_answer(france_question, 0) == "Berlin"
        assert describe_answer(france_question, -1) == "No answer (time ran out)"

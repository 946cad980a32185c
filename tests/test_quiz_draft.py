"""Tests for the editable quiz draft used by the creator."""

import pytest

from conftest import make_quiz
from quizwhiz.core.models import (
    MultipleChoiceQuestion,
    OrderingQuestion,
    QuestionType,
    TextInputQuestion,
    TrueFalseQuestion,
)
from quizwhiz.core.quiz_validation import QuizValidationError
from quizwhiz.core.services.quiz_draft import QuizDraft


def _filled_draft() -> QuizDraft:
    draft = QuizDraft("Capitals")
    draft.set_text(0, "Capital of France?")
    for index, option in enumerate(("Berlin", "Paris", "Rome", "Madrid")):
        draft.set_option(0, index, option)
    draft.set_correct(0, 1)
    return draft


class TestQuizDraft:
    def test_new_draft_has_one_blank_question(self):
        draft = QuizDraft()
        assert draft.get_question_count() == 1
        assert draft.is_new
        assert draft.get_question_at_index(0).question_type == QuestionType.MULTIPLE_CHOICE

    def test_last_question_cannot_be_deleted(self):
        draft = QuizDraft()
        assert draft.delete_question(0) is False
        draft.add_question()
        assert draft.delete_question(0) is True
        assert draft.get_question_count() == 1

    def test_build_reports_every_problem(self):
        draft = QuizDraft()
        with pytest.raises(QuizValidationError) as excinfo:
            draft.build("owner")
        assert excinfo.value.errors == [
            "Add a quiz title",
            "Question 1: Add question text",
            "Question 1: Fill in all 4 answer options",
        ]

    def test_build_multiple_choice(self):
        quiz = _filled_draft().build("owner")
        question = quiz.questions[0]
        assert isinstance(question, MultipleChoiceQuestion)
        assert question.correct_index == 1
        assert quiz.owner_id == "owner"

    def test_change_type_resets_answer(self):
        draft = _filled_draft()
        draft.change_type(0, QuestionType.TRUE_FALSE)
        question = draft.build("owner").questions[0]
        assert isinstance(question, TrueFalseQuestion)
        assert question.options == ("True", "False")
        assert question.correct_index == 0

    def test_true_false_options_are_fixed(self):
        draft = _filled_draft()
        draft.change_type(0, QuestionType.TRUE_FALSE)
        with pytest.raises(ValueError):
            draft.set_option(0, 0, "Yes")

    def test_text_question_needs_answer(self):
        draft = _filled_draft()
        draft.change_type(0, QuestionType.TEXT_INPUT)
        with pytest.raises(QuizValidationError) as excinfo:
            draft.build("owner")
        assert excinfo.value.errors == ["Question 1: Provide the correct text answer"]
        draft.set_correct(0, " Paris ")
        question = draft.build("owner").questions[0]
        assert isinstance(question, TextInputQuestion)
        assert question.correct_text == "Paris"

    def test_ordering_items_move(self):
        draft = _filled_draft()
        draft.change_type(0, QuestionType.ORDERING)
        for index, item in enumerate(("b", "a", "c", "d")):
            draft.set_option(0, index, item)
        assert draft.move_option(0, 0, 1)
        assert not draft.move_option(0, 3, 1)
        question = draft.build("owner").questions[0]
        assert isinstance(question, OrderingQuestion)
        assert question.options == ("a", "b", "c", "d")

    def test_image_is_kept(self):
        draft = _filled_draft()
        draft.set_image(0, "https://example.com/paris.png")
        assert draft.build("owner").questions[0].image_ref == "https://example.com/paris.png"

    def test_time_limit_bounds(self):
        draft = QuizDraft()
        with pytest.raises(ValueError):
            draft.set_time_limit(0, 2)
        draft.set_time_limit(0, 45)
        assert draft.get_question_at_index(0).time_limit_seconds == 45

    def test_editing_existing_quiz_keeps_identity(self, sample_quiz):
        draft = QuizDraft.from_quiz(sample_quiz)
        assert not draft.is_new
        rebuilt = draft.build("owner")
        assert rebuilt.id == sample_quiz.id
        assert rebuilt.created_at == sample_quiz.created_at
        assert rebuilt.questions == sample_quiz.questions

    def test_generated_questions_replace_blank_question(self, france_question):
        draft = QuizDraft()
        draft.append_generated([france_question, france_question])
        assert draft.get_question_count() == 2
        draft.append_generated([france_question])
        assert draft.get_question_count() == 3


class TestEditingEmptyQuiz:
    def test_quiz_without_questions_starts_with_blank(self):
        draft = QuizDraft.from_quiz(make_quiz(title="Empty"))
        assert draft.get_question_count() == 1

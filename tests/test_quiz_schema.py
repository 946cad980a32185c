"""Tests for quiz documents and AI response decoding."""

from quizwhiz.core.models import MultipleChoiceQuestion, OrderingQuestion, TextInputQuestion, TrueFalseQuestion
from quizwhiz.core.quiz_schema import (
    DecodeErr,
    DecodeOk,
    decode_focus_session,
    decode_generated_quiz,
    decode_quiz,
    quiz_from_json,
    quiz_to_json,
)


def _document(**overrides):
    document = {
        "id": 1717171717171,
        "userId": "u1",
        "title": "Capitals",
        "createdAt": "2024-05-31T12:00:00.000Z",
        "questions": [
            {
                "type": "multiple-choice",
                "question": "Capital of France?",
                "options": ["Berlin", "Paris", "Rome", "Madrid"],
                "correctAnswer": 1,
                "timeLimit": 20,
            },
            {"type": "text-input", "question": "Capital of Italy?", "options": [""], "correctAnswer": "Rome"},
        ],
    }
    document.update(overrides)
    return document


class TestQuizDocuments:
    def test_decode_valid_document(self):
        decoded = decode_quiz(_document())
        assert isinstance(decoded, DecodeOk)
        quiz = decoded.value
        assert quiz.id == "1717171717171"
        assert isinstance(quiz.questions[0], MultipleChoiceQuestion)
        assert isinstance(quiz.questions[1], TextInputQuestion)
        assert quiz.questions[1].options == ()
        assert quiz.theme == "classic"
        assert quiz.created_at.tzinfo is not None

    def test_unknown_question_type(self):
        document = _document(questions=[{"type": "essay", "question": "Why?", "correctAnswer": 0}])
        decoded = decode_quiz(document)
        assert isinstance(decoded, DecodeErr)
        assert decoded.error.message == "Invalid quiz document"

    def test_non_positive_time_limit(self):
        document = _document()
        document["questions"][0]["timeLimit"] = 0
        assert isinstance(decode_quiz(document), DecodeErr)

    def test_structurally_valid_but_unplayable(self):
        document = _document()
        document["questions"][0]["correctAnswer"] = 7
        decoded = decode_quiz(document)
        assert isinstance(decoded, DecodeErr)
        assert decoded.error.message == "Quiz document failed validation"
        assert "Question 1: Mark one answer as correct" in decoded.error.issues

    def test_json_round_trip_keeps_every_question_type(self, sample_quiz):
        restored = quiz_from_json(quiz_to_json(sample_quiz))
        assert restored == sample_quiz

    def test_json_uses_camel_case(self, sample_quiz):
        data = quiz_to_json(sample_quiz)
        assert data["userId"] == "owner"
        assert data["shuffleQuestions"] is False
        assert data["questions"][3] == {
            "type": "ordering",
            "question": "Order by size",
            "image": "",
            "options": ["Moon", "Earth", "Sun"],
            "timeLimit": 20,
            "explanation": "",
            "correctAnswer": None,
        }


class TestGeneratedQuiz:
    def test_multiple_choice_padded_to_four_options(self):
        decoded = decode_generated_quiz(
            {"title": "Space", "questions": [{"question": "Red planet?", "options": ["Mars", "Venus"], "correctAnswer": 0}]}
        )
        assert isinstance(decoded, DecodeOk)
        question = decoded.value.questions[0]
        assert isinstance(question, MultipleChoiceQuestion)
        assert question.options == ("Mars", "Venus", "-", "-")
        assert question.time_limit_seconds == 20

    def test_true_false_is_detected(self):
        decoded = decode_generated_quiz(
            {"questions": [{"question": "Sky is green?", "options": ["True", "False"], "correctAnswer": 1}]},
            default_title="Untitled",
        )
        quiz = decoded.value
        assert quiz.title == "Untitled"
        assert isinstance(quiz.questions[0], TrueFalseQuestion)
        assert quiz.questions[0].correct_index == 1

    def test_correct_answer_out_of_range(self):
        decoded = decode_generated_quiz(
            {"questions": [{"question": "Q", "options": ["a", "b", "c"], "correctAnswer": 3}]}
        )
        assert isinstance(decoded, DecodeErr)

    def test_focus_session_requires_analysis(self):
        decoded = decode_focus_session({"questions": [{"question": "Q", "options": ["a", "b"], "correctAnswer": 0}]})
        assert isinstance(decoded, DecodeErr)

    def test_focus_session(self):
        decoded = decode_focus_session(
            {
                "analysis": " Work on geography. ",
                "questions": [{"question": "Q", "options": ["a", "b", "c", "d"], "correctAnswer": 2}],
            }
        )
        assert decoded.value.analysis == "Work on geography."
        assert not isinstance(decoded.value.questions[0], OrderingQuestion)

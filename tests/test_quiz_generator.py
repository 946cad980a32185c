"""Tests for AI quiz generation against a mocked chat completions endpoint."""

import json

import httpx
import pytest

from conftest import chat_completion
from quizwhiz.core.models import MultipleChoiceQuestion, TrueFalseQuestion
from quizwhiz.core.services.quiz_generator import QuizGenerationError, strip_code_fences
from quizwhiz.core.services.result_recorder import MissedQuestion

_GENERATED = {
    "title": "Space Basics",
    "questions": [
        {"question": "Red planet?", "options": ["Venus", "Mars", "Jupiter", "Saturn"], "correctAnswer": 1, "timeLimit": 15},
        {"question": "The sun is a star.", "options": ["True", "False"], "correctAnswer": 0},
    ],
}


class TestGenerateQuiz:
    def test_success(self, mock_generator):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=chat_completion(_GENERATED))

        quiz = mock_generator(handler).generate_quiz("space", "easy", 2, "mixed")
        assert quiz.title == "Space Basics"
        assert isinstance(quiz.questions[0], MultipleChoiceQuestion)
        assert quiz.questions[0].time_limit_seconds == 15
        assert isinstance(quiz.questions[1], TrueFalseQuestion)

        body = json.loads(requests[0].content)
        assert requests[0].headers["Authorization"] == "Bearer test-token"
        assert body["messages"][1]["content"] == 'Generate a easy difficulty quiz about "space" with 2 questions.'

    def test_code_fences_are_stripped(self, mock_generator):
        content = "```json\n" + json.dumps(_GENERATED) + "\n```"
        generator = mock_generator(lambda request: httpx.Response(200, json=chat_completion(content)))
        assert generator.generate_quiz("space").title == "Space Basics"

    def test_unauthorized(self, mock_generator):
        generator = mock_generator(lambda request: httpx.Response(401, json={"message": "Bad credentials"}))
        with pytest.raises(QuizGenerationError, match="Unauthorized"):
            generator.generate_quiz("space")

    def test_api_error_message(self, mock_generator):
        generator = mock_generator(lambda request: httpx.Response(429, json={"error": {"message": "Rate limit"}}))
        with pytest.raises(QuizGenerationError, match="Rate limit"):
            generator.generate_quiz("space")

    def test_invalid_json(self, mock_generator):
        generator = mock_generator(lambda request: httpx.Response(200, json=chat_completion("not json at all")))
        with pytest.raises(QuizGenerationError, match="invalid JSON"):
            generator.generate_quiz("space")

    def test_network_failure(self, mock_generator):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        with pytest.raises(QuizGenerationError, match="Could not reach"):
            mock_generator(handler).generate_quiz("space")

    def test_token_required(self, mock_generator):
        generator = mock_generator(lambda request: httpx.Response(200), token="")
        assert not generator.is_configured
        with pytest.raises(QuizGenerationError, match="token"):
            generator.generate_quiz("space")

    @pytest.mark.parametrize(
        ("topic", "difficulty", "count", "quiz_type"),
        [("", "easy", 5, "mixed"), ("space", "extreme", 5, "mixed"), ("space", "easy", 0, "mixed"), ("space", "easy", 5, "essay")],
    )
    def test_request_validation(self, mock_generator, topic, difficulty, count, quiz_type):
        generator = mock_generator(lambda request: httpx.Response(200))
        with pytest.raises(ValueError):
            generator.generate_quiz(topic, difficulty, count, quiz_type)


class TestImageAndFocus:
    def test_image_is_sent_as_data_url(self, mock_generator):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(json.loads(request.content))
            return httpx.Response(200, json=chat_completion(_GENERATED))

        mock_generator(handler).generate_quiz_from_image(b"\x89PNG", "image/png", "medium", 3)
        parts = requests[0]["messages"][1]["content"]
        assert parts[1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_focus_session(self, mock_generator):
        reply = {
            "analysis": "Review the planets.",
            "questions": [{"question": "Largest planet?", "options": ["Earth", "Jupiter", "Mars", "Venus"], "correctAnswer": 1}],
        }
        generator = mock_generator(lambda request: httpx.Response(200, json=chat_completion(reply)))
        missed = [MissedQuestion("Space", "Red planet?", "Venus", "Mars")]
        session = generator.generate_focus_session(missed)
        assert session.analysis == "Review the planets."
        assert len(session.questions) == 1

    def test_focus_session_needs_history(self, mock_generator):
        with pytest.raises(ValueError):
            mock_generator(lambda request: httpx.Response(200)).generate_focus_session([])


def test_strip_code_fences():
    assert strip_code_fences("```json\n{}\n```") == "{}"

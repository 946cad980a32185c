"""Tests for the FastAPI share server."""

from fastapi.testclient import TestClient
import pytest

from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.quiz_schema import quiz_to_json
from quizwhiz.server.api_server import create_api_app


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


@pytest.fixture
def saved_quiz(manager, sample_quiz):
    return manager.import_quiz(sample_quiz)


class TestBrowsing:
    def test_index_page(self, client, saved_quiz):
        response = client.get("/")
        assert response.status_code == 200
        assert "alice's quizzes" in response.text
        assert saved_quiz.title in response.text

    def test_list_quizzes(self, client, saved_quiz):
        response = client.get("/quizzes")
        assert response.status_code == 200
        assert response.json() == [
            {
                "id": saved_quiz.id,
                "title": "Capitals (Imported)",
                "question_count": 4,
                "theme": "classic",
                "created_at": response.json()[0]["created_at"],
            }
        ]

    def test_preview_hides_ordering_items(self, client, saved_quiz):
        response = client.get(f"/quizzes/{saved_quiz.id}")
        assert response.status_code == 200
        questions = response.json()["questions"]
        assert questions[0]["options"] == ["Berlin", "Paris", "Rome", "Madrid"]
        assert questions[3]["type"] == "ordering"
        assert questions[3]["options"] == []
        assert "correctAnswer" not in questions[0]

    def test_community_quiz_preview(self, client):
        assert client.get("/quizzes/9901").status_code == 200

    def test_unknown_quiz(self, client):
        assert client.get("/quizzes/missing").status_code == 404

    def test_export(self, client, saved_quiz):
        response = client.get(f"/quizzes/{saved_quiz.id}/export")
        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="capitals__imported_.qzx"'
        assert response.json()["title"] == "Capitals (Imported)"

    def test_community_search(self, client):
        response = client.get("/community", params={"q": "geek"})
        assert [entry["author"] for entry in response.json()] == ["ScienceGeek"]


class TestImport:
    def test_import_valid_document(self, client, manager, sample_quiz):
        response = client.post("/import", json=quiz_to_json(sample_quiz))
        assert response.status_code == 201
        assert response.json()["title"] == "Capitals (Imported)"
        assert len(manager.list_my_quizzes()) == 1

    def test_import_invalid_document(self, client, sample_quiz):
        document = quiz_to_json(sample_quiz)
        document["questions"][0]["correctAnswer"] = 9
        response = client.post("/import", json=document)
        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Quiz document failed validation"


class TestLoggedOut:
    def test_my_quizzes_require_login(self, storage, catalog):
        client = TestClient(create_api_app(QuizManager(storage, catalog=catalog)))
        assert client.get("/quizzes").status_code == 401
        assert client.get("/history").status_code == 401
        assert "No one is logged in" in client.get("/").text

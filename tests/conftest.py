"""Shared fixtures for the QuizWhiz test suite."""

from __future__ import annotations

from datetime import datetime, timezone
import json

import httpx
import pytest

from quizwhiz.core.community_catalog import CommunityCatalog, CommunityQuiz
from quizwhiz.core.models import (
    MultipleChoiceQuestion,
    OrderingQuestion,
    Quiz,
    TextInputQuestion,
    true_false_question,
)
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.core.services.quiz_generator import QuizGenerator
from quizwhiz.core.storage import InMemoryStorage


def make_quiz(*questions, quiz_id: str = "quiz-1", title: str = "Capitals", shuffle: bool = False, owner_id: str = "owner") -> Quiz:
    return Quiz(
        id=quiz_id,
        owner_id=owner_id,
        title=title,
        questions=tuple(questions),
        shuffle_questions=shuffle,
        created_at=datetime(2024, 5, 31, 12, 0, tzinfo=timezone.utc),
    )


def chat_completion(content) -> dict:
    """Build a chat completions response body around ``content``."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def france_question() -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(text="Capital of France?", options=("Berlin", "Paris", "Rome", "Madrid"), correct_index=1)


@pytest.fixture
def mixed_questions(france_question):
    return (
        france_question,
        true_false_question("The sun is a star.", True),
        TextInputQuestion(text="Capital of Italy?", correct_text="Rome"),
        OrderingQuestion(text="Order by size", options=("Moon", "Earth", "Sun")),
    )


@pytest.fixture
def sample_quiz(mixed_questions) -> Quiz:
    return make_quiz(*mixed_questions)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def community_quiz(france_question) -> CommunityQuiz:
    quiz = make_quiz(france_question, quiz_id="9901", title="The Wonders of Space", owner_id="community_1")
    return CommunityQuiz(quiz=quiz, author="ScienceGeek", likes=10, plays=100)


@pytest.fixture
def catalog(community_quiz) -> CommunityCatalog:
    return CommunityCatalog([community_quiz])


@pytest.fixture
def manager(storage, catalog) -> QuizManager:
    """A manager with a signed-up, logged-in user named ``alice``."""
    quiz_manager = QuizManager(storage, catalog=catalog, generator=QuizGenerator(token=""))
    quiz_manager.sign_up("alice", "alice@example.com", "secret")
    return quiz_manager


@pytest.fixture
def mock_generator():
    """Return a factory building a ``QuizGenerator`` whose HTTP calls go to ``handler``."""
    clients: list[httpx.Client] = []

    def factory(handler, token: str = "test-token") -> QuizGenerator:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return QuizGenerator(token=token, client=client, endpoint="https://models.test/chat/completions")

    yield factory
    for client in clients:
        client.close()

"""Tests for quiz storage in the library."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from conftest import make_quiz
from quizwhiz.core.quiz_validation import QuizValidationError
from quizwhiz.core.services.quiz_library import QuizLibrary
from quizwhiz.core.storage import InMemoryStorage, StorageQuotaExceededError


@pytest.fixture
def library(storage):
    return QuizLibrary(storage)


class TestQuizLibrary:
    def test_save_and_get(self, library, sample_quiz):
        library.save_quiz(sample_quiz)
        assert library.get_quiz(sample_quiz.id) == sample_quiz
        assert library.get_quiz("missing") is None

    def test_save_replaces_same_id(self, library, france_question):
        library.save_quiz(make_quiz(france_question, title="First"))
        library.save_quiz(make_quiz(france_question, title="Second"))
        quizzes = library.list_quizzes()
        assert [quiz.title for quiz in quizzes] == ["Second"]

    def test_list_filters_by_owner_newest_first(self, library, france_question):
        older = make_quiz(france_question, quiz_id="a", owner_id="u1")
        newer = make_quiz(france_question, quiz_id="b", owner_id="u1")
        newer = replace(newer, created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        other = make_quiz(france_question, quiz_id="c", owner_id="u2")
        for quiz in (older, newer, other):
            library.save_quiz(quiz)
        assert [quiz.id for quiz in library.list_quizzes("u1")] == ["b", "a"]

    def test_invalid_quiz_is_rejected(self, library, france_question):
        with pytest.raises(QuizValidationError):
            library.save_quiz(make_quiz(france_question, title="  "))

    def test_delete(self, library, sample_quiz):
        library.save_quiz(sample_quiz)
        assert library.delete_quiz(sample_quiz.id)
        assert not library.delete_quiz(sample_quiz.id)

    def test_import_creates_owned_copy(self, library, sample_quiz):
        imported = library.import_quiz(sample_quiz, "u9")
        assert imported.id != sample_quiz.id
        assert imported.owner_id == "u9"
        assert imported.title == "Capitals (Imported)"
        assert imported.questions == sample_quiz.questions

    def test_unreadable_entries_are_skipped(self, storage, library, sample_quiz):
        library.save_quiz(sample_quiz)
        storage.save("quizwhiz_quizzes", storage.load("quizwhiz_quizzes") + [{"id": "broken"}])
        assert [quiz.id for quiz in library.list_quizzes()] == [sample_quiz.id]

    def test_unreadable_entries_survive_rewrites(self, storage, library, sample_quiz, france_question):
        library.save_quiz(sample_quiz)
        storage.save("quizwhiz_quizzes", storage.load("quizwhiz_quizzes") + [{"id": "broken"}])
        library.save_quiz(make_quiz(france_question, quiz_id="second"))
        library.delete_quiz(sample_quiz.id)
        library.delete_owned_by("owner")
        assert storage.load("quizwhiz_quizzes") == [{"id": "broken"}]

    def test_quota_error_propagates(self, sample_quiz):
        library = QuizLibrary(InMemoryStorage(quota_bytes=50))
        with pytest.raises(StorageQuotaExceededError):
            library.save_quiz(sample_quiz)
        assert library.list_quizzes() == []

"""Tests for the QuizManager facade."""

import httpx
import pytest

from conftest import chat_completion
from quizwhiz.core.quiz_manager import NotLoggedInError, QuizManager
from quizwhiz.core.quiz_schema import FocusSession
from quizwhiz.core.services.game_session import SessionState, play_answers
from quizwhiz.core.services.quiz_draft import QuizDraft
from quizwhiz.core.storage import InMemoryStorage, StorageQuotaExceededError


def _draft(title: str = "Capitals") -> QuizDraft:
    draft = QuizDraft(title)
    draft.set_text(0, "Capital of France?")
    for index, option in enumerate(("Berlin", "Paris", "Rome", "Madrid")):
        draft.set_option(0, index, option)
    draft.set_correct(0, 1)
    return draft


class TestLibrary:
    def test_requires_login(self, storage, catalog):
        manager = QuizManager(storage, catalog=catalog)
        with pytest.raises(NotLoggedInError):
            manager.list_my_quizzes()

    def test_save_new_draft_unlocks_first_step(self, manager):
        quiz, unlocked = manager.save_draft(_draft())
        assert [achievement.id for achievement in unlocked] == ["create_1"]
        assert manager.list_my_quizzes() == [quiz]
        assert manager.current_user().stats.quizzes_created == 1

    def test_editing_does_not_count_as_creation(self, manager):
        quiz, _ = manager.save_draft(_draft())
        draft = QuizDraft.from_quiz(quiz)
        draft.title = "Renamed"
        updated, unlocked = manager.save_draft(draft)
        assert unlocked == []
        assert updated.id == quiz.id
        assert manager.current_user().stats.quizzes_created == 1

    def test_only_owner_can_delete(self, manager):
        quiz, _ = manager.save_draft(_draft())
        manager.log_out()
        manager.sign_up("bob", "bob@example.com", "pw")
        assert manager.delete_quiz(quiz.id) is False
        assert manager.get_quiz(quiz.id) is not None

    def test_community_import(self, manager):
        imported = manager.import_community_quiz("9901")
        assert imported.title == "The Wonders of Space (Imported)"
        assert imported.owner_id == manager.current_user().id
        with pytest.raises(KeyError):
            manager.import_community_quiz("missing")

    def test_file_round_trip(self, manager, tmp_path):
        quiz, _ = manager.save_draft(_draft())
        path = tmp_path / "capitals.qzx"
        manager.export_quiz_file(quiz.id, path)
        imported = manager.import_quiz_file(path)
        assert imported.title == "Capitals (Imported)"
        assert len(manager.list_my_quizzes()) == 2
        members = manager.export_all_quizzes(tmp_path / "backup.zip")
        assert len(members) == 2

    def test_storage_usage(self, catalog):
        manager = QuizManager(InMemoryStorage(quota_bytes=1_000_000), catalog=catalog)
        manager.sign_up("alice", "alice@example.com", "secret")
        usage = manager.storage_usage()
        assert usage.quota_bytes == 1_000_000
        assert 0 < usage.percent < 100


class TestSessions:
    def test_finish_records_result(self, manager, sample_quiz):
        session = manager.start_session(sample_quiz, seed=1)
        order = session.presentation_order
        correct = {0: 1, 1: 0, 2: "rome", 3: (0, 1, 2)}
        play_answers(session, [correct[index] for index in order])
        result, unlocked = manager.finish_session()
        assert result.is_perfect
        assert {achievement.id for achievement in unlocked} == {"play_1", "perf_1"}
        assert manager.get_history() == [result]
        assert manager.get_active_session() is None

    def test_finish_requires_completed_session(self, manager, sample_quiz):
        manager.start_session(sample_quiz)
        with pytest.raises(RuntimeError):
            manager.finish_session()

    def test_starting_again_ends_previous_session(self, manager, sample_quiz):
        first = manager.start_session(sample_quiz)
        manager.start_session(sample_quiz)
        assert first.state == SessionState.EXITED

    def test_quota_exceeded_when_recording(self, catalog, sample_quiz):
        storage = InMemoryStorage(quota_bytes=100_000)
        manager = QuizManager(storage, catalog=catalog)
        manager.sign_up("alice", "alice@example.com", "secret")
        session = manager.start_session(sample_quiz, seed=1)
        play_answers(session, [-1] * 4)
        # Leave room for only a few more characters.
        storage.save("padding", "x" * ((100_000 - storage.usage_bytes()) // 2 - 14))
        with pytest.raises(StorageQuotaExceededError):
            manager.finish_session()

    def test_study_counts_session(self, manager, sample_quiz):
        deck, unlocked = manager.start_study(sample_quiz)
        assert deck.size == 4
        assert [achievement.id for achievement in unlocked] == ["study_1"]


class TestProgress:
    def test_missed_questions_include_community_quizzes(self, manager):
        quiz = manager.get_quiz("9901")
        session = manager.start_session(quiz, seed=1)
        play_answers(session, [0])
        manager.finish_session()
        missed = manager.get_missed_questions()
        assert [item.question for item in missed] == ["Capital of France?"]

    def test_clear_history(self, manager, sample_quiz):
        session = manager.start_session(sample_quiz, seed=1)
        play_answers(session, [-1] * 4)
        manager.finish_session()
        manager.clear_history()
        assert manager.get_history() == []
        assert manager.current_user().stats.quizzes_played == 1

    def test_delete_account(self, manager):
        manager.save_draft(_draft())
        manager.delete_account()
        assert manager.current_user() is None

    def test_tutorial_flag(self, manager):
        assert manager.current_user().has_seen_tutorial is False
        manager.mark_tutorial_seen()
        assert manager.current_user().has_seen_tutorial is True


class TestGeneration:
    def test_generate_quiz_records_ai_use(self, storage, catalog, mock_generator):
        reply = {"title": "Space", "questions": [{"question": "Q", "options": ["a", "b", "c", "d"], "correctAnswer": 0}]}
        generator = mock_generator(lambda request: httpx.Response(200, json=chat_completion(reply)))
        manager = QuizManager(storage, catalog=catalog, generator=generator)
        manager.sign_up("alice", "alice@example.com", "secret")
        generated = manager.generate_quiz("space", "easy", 1, "multiple-choice")
        assert manager.current_user().stats.ai_quizzes_generated == 1
        assert "ai_quiz" in manager.current_user().achievements

        draft = QuizDraft()
        manager.append_generated(draft, generated.questions, generated.title)
        assert draft.title == "Space"
        assert draft.get_question_count() == 1

    def test_focus_quiz_wraps_questions(self, manager, france_question):
        quiz = manager.focus_quiz(FocusSession(analysis="Keep going.", questions=(france_question,)))
        assert quiz.title == "Focus Session"
        assert quiz.questions == (france_question,)
"""Tests for result recording, achievements and missed-question collection."""

from datetime import datetime, timedelta, timezone

import pytest

from quizwhiz.core.achievements import ACHIEVEMENTS, get_achievement, unlock_achievements
from quizwhiz.core.models import QuizResult, User, UserStats
from quizwhiz.core.services.account_service import AccountService
from quizwhiz.core.services.quiz_library import QuizLibrary
from quizwhiz.core.services.result_recorder import ResultRecorder, missed_questions


def _result(quiz, answers, *, score, minutes_ago=0, result_id="r1") -> QuizResult:
    return QuizResult(
        id=result_id,
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        completed_at=datetime(2024, 6, 1, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago),
        score=score,
        total_questions=len(quiz.questions),
        answers=tuple(answers),
    )


@pytest.fixture
def accounts(storage):
    return AccountService(storage, QuizLibrary(storage))


@pytest.fixture
def recorder(accounts):
    return ResultRecorder(accounts)


@pytest.fixture
def user(accounts):
    return accounts.sign_up("alice", "alice@example.com", "secret")


class TestAchievements:
    def test_ids_are_unique(self):
        ids = [achievement.id for achievement in ACHIEVEMENTS]
        assert len(ids) == len(set(ids))

    def test_unlock_only_once(self):
        user = User(id="u", username="u", email="u@example.com", password_hash="", stats=UserStats(quizzes_played=1))
        assert [achievement.id for achievement in unlock_achievements(user)] == ["play_1"]
        assert unlock_achievements(user) == []
        assert user.achievements == ["play_1"]

    def test_lookup(self):
        assert get_achievement("perf_1").title == "Brainiac"
        assert get_achievement("nope") is None


class TestResultRecorder:
    def test_perfect_result(self, accounts, recorder, user, sample_quiz):
        result = _result(sample_quiz, [1, 0, "Rome", (0, 1, 2)], score=4)
        unlocked = recorder.record_result(user, result)
        assert {achievement.id for achievement in unlocked} == {"play_1", "perf_1"}
        stored = accounts.get_user(user.id)
        assert stored.stats.quizzes_played == 1
        assert stored.stats.questions_answered == 4
        assert stored.stats.perfect_scores == 1
        assert stored.history == [result]

    def test_activity_counters(self, accounts, recorder, user):
        unlocked = recorder.record_activity(user, "study")
        assert [achievement.id for achievement in unlocked] == ["study_1"]
        assert accounts.get_user(user.id).stats.study_sessions == 1

    def test_unknown_activity(self, recorder, user):
        with pytest.raises(ValueError):
            recorder.record_activity(user, "dance")


class TestMissedQuestions:
    def test_collects_wrong_answers_newest_first(self, sample_quiz):
        older = _result(sample_quiz, [0, 0, "Rome", (0, 1, 2)], score=3, minutes_ago=10, result_id="old")
        newer = _result(sample_quiz, [1, 1, "Rome", (0, 1, 2)], score=3, result_id="new")
        missed = missed_questions([older, newer], [sample_quiz])
        assert [item.question for item in missed] == ["The sun is a star.", "Capital of France?"]
        assert missed[0].your_answer == "False"
        assert missed[0].correct_answer == "True"

    def test_deduplicates_questions(self, sample_quiz):
        first = _result(sample_quiz, [0, 0, "Rome", (0, 1, 2)], score=2, result_id="a")
        second = _result(sample_quiz, [0, 0, "Rome", (0, 1, 2)], score=2, minutes_ago=5, result_id="b")
        assert len(missed_questions([first, second], [sample_quiz])) == 1

    def test_skips_deleted_quizzes(self, sample_quiz):
        result = _result(sample_quiz, [0, 0, "x", (0, 1, 2)], score=1)
        assert missed_questions([result], []) == []

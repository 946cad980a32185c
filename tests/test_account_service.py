"""Tests for accounts, log-in and password reset."""

import pytest

from conftest import make_quiz
from quizwhiz.core.services.account_service import AccountService, AuthError, hash_password, verify_password
from quizwhiz.core.services.quiz_library import QuizLibrary


@pytest.fixture
def library(storage):
    return QuizLibrary(storage)


@pytest.fixture
def accounts(storage, library):
    return AccountService(storage, library)


class TestPasswords:
    def test_hash_is_salted(self):
        assert hash_password("secret") != hash_password("secret")

    def test_hash_uses_pbkdf2_sha256(self):
        assert hash_password("secret").startswith("$pbkdf2-sha256$")

    def test_verify(self):
        stored = hash_password("secret")
        assert verify_password("secret", stored)
        assert not verify_password("wrong", stored)

    def test_malformed_hash(self):
        assert not verify_password("secret", "not-a-hash")


class TestSignUpAndLogIn:
    def test_sign_up_logs_in(self, accounts):
        user = accounts.sign_up("alice", "alice@example.com", "secret")
        assert accounts.current_user() == user
        assert user.password_hash != "secret"

    @pytest.mark.parametrize(
        ("username", "email", "password", "message"),
        [
            ("", "a@example.com", "pw", "Please fill in all fields"),
            ("bob", "not-an-email", "pw", "Please enter a valid email address"),
        ],
    )
    def test_sign_up_validation(self, accounts, username, email, password, message):
        with pytest.raises(AuthError, match=message):
            accounts.sign_up(username, email, password)

    def test_duplicates_rejected(self, accounts):
        accounts.sign_up("alice", "alice@example.com", "secret")
        with pytest.raises(AuthError, match="Username already taken"):
            accounts.sign_up("alice", "other@example.com", "secret")
        with pytest.raises(AuthError, match="Email already registered"):
            accounts.sign_up("alice2", "alice@example.com", "secret")

    def test_log_in_with_username_or_email(self, accounts):
        accounts.sign_up("alice", "alice@example.com", "secret")
        accounts.log_out()
        assert accounts.current_user() is None
        assert accounts.log_in("alice", "secret").username == "alice"
        assert accounts.log_in("alice@example.com", "secret").username == "alice"

    def test_wrong_password(self, accounts):
        accounts.sign_up("alice", "alice@example.com", "secret")
        with pytest.raises(AuthError, match="Invalid username/email or password"):
            accounts.log_in("alice", "nope")

    def test_plain_text_passwords_are_upgraded(self, storage, accounts):
        storage.save(
            "quizwhiz_users",
            [{"id": "u1", "username": "old", "email": "old@example.com", "password": "hunter2"}],
        )
        user = accounts.log_in("old", "hunter2")
        assert user.id == "u1"
        assert verify_password("hunter2", user.password_hash)

    def test_upgraded_passwords_are_stored_once(self, storage, accounts):
        storage.save(
            "quizwhiz_users",
            [{"id": "u1", "username": "old", "email": "old@example.com", "password": "hunter2"}],
        )
        assert accounts.get_user("u1") is not None
        (record,) = storage.load("quizwhiz_users")
        assert "password" not in record
        assert verify_password("hunter2", record["passwordHash"])
        assert accounts.get_user("u1").password_hash == record["passwordHash"]


class TestUnreadableRecords:
    def test_unreadable_users_survive_rewrites(self, storage, accounts):
        user = accounts.sign_up("alice", "alice@example.com", "secret")
        broken = {"id": "bob", "username": "bob"}
        storage.save("quizwhiz_users", storage.load("quizwhiz_users") + [broken])
        assert accounts.get_user("bob") is None

        user.has_seen_tutorial = True
        accounts.update_user(user)
        accounts.sign_up("carol", "carol@example.com", "pw")
        accounts.delete_account(user.id)

        stored = storage.load("quizwhiz_users")
        assert broken in stored
        assert [entry["username"] for entry in stored if entry != broken] == ["carol"]


class TestPasswordReset:
    def test_reset_flow(self, accounts):
        accounts.sign_up("alice", "alice@example.com", "secret")
        code = accounts.request_password_reset("alice@example.com")
        assert len(code) == 6 and code.isdigit()
        accounts.reset_password("alice@example.com", code, "new-secret")
        assert accounts.log_in("alice", "new-secret").username == "alice"

    def test_code_is_single_use(self, accounts):
        accounts.sign_up("alice", "alice@example.com", "secret")
        code = accounts.request_password_reset("alice@example.com")
        accounts.reset_password("alice@example.com", code, "new-secret")
        with pytest.raises(AuthError, match="Invalid reset code"):
            accounts.reset_password("alice@example.com", code, "again")

    def test_unknown_email(self, accounts):
        with pytest.raises(AuthError, match="No account found with this email"):
            accounts.request_password_reset("ghost@example.com")


class TestAccountData:
    def test_clear_history_keeps_stats(self, accounts):
        user = accounts.sign_up("alice", "alice@example.com", "secret")
        user.stats.quizzes_played = 3
        accounts.update_user(user)
        cleared = accounts.clear_history(user.id)
        assert cleared.history == []
        assert cleared.stats.quizzes_played == 3

    def test_delete_account_removes_owned_quizzes(self, accounts, library, france_question):
        user = accounts.sign_up("alice", "alice@example.com", "secret")
        library.save_quiz(make_quiz(france_question, quiz_id="mine", owner_id=user.id))
        library.save_quiz(make_quiz(france_question, quiz_id="theirs", owner_id="someone"))
        accounts.delete_account(user.id)
        assert accounts.get_user(user.id) is None
        assert accounts.current_user() is None
        assert [quiz.id for quiz in library.list_quizzes()] == ["theirs"]

"""Local accounts: sign up, log in, password reset and account removal."""

from __future__ import annotations

import hmac
import logging
import secrets
from typing import Any
from uuid import uuid4

from passlib.context import CryptContext
from pydantic import ValidationError

from quizwhiz.constants.storage_constants import CURRENT_USER_KEY, USERS_KEY
from quizwhiz.core.models import User
from quizwhiz.core.quiz_schema import UserDocument
from quizwhiz.core.services.quiz_library import QuizLibrary
from quizwhiz.core.storage import StorageError, StoragePort

logger = logging.getLogger(__name__)

_password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class AuthError(ValueError):
    """Raised with a user-facing message when an account operation is refused."""


def hash_password(password: str) -> str:
    return _password_context.hash(password)


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        return _password_context.verify(password, stored_hash)
    except ValueError:
        # Not a hash this context recognizes.
        return False


class AccountService:
    """Manages the user list and the logged-in user in storage."""

    def __init__(self, storage: StoragePort, library: QuizLibrary) -> None:
        self._storage = storage
        self._library = library
        self._reset_codes: dict[str, str] = {}

    # --- Sessions ---

    def sign_up(self, username: str, email: str, password: str) -> User:
        username, email = username.strip(), email.strip()
        if not username or not email or not password.strip():
            raise AuthError("Please fill in all fields")
        if "@" not in email:
            raise AuthError("Please enter a valid email address")

        users = self._load_users()
        if any(user.username == username for user in users):
            raise AuthError("Username already taken")
        if any(user.email == email for user in users):
            raise AuthError("Email already registered")

        user = User(id=uuid4().hex, username=username, email=email, password_hash=hash_password(password))
        users.append(user)
        self._save_users(users)
        self._storage.save(CURRENT_USER_KEY, user.id)
        logger.info("Created account %s", username)
        return user

    def log_in(self, identifier: str, password: str) -> User:
        identifier = identifier.strip()
        if not identifier or not password.strip():
            raise AuthError("Please fill in all fields")
        for user in self._load_users():
            if identifier in (user.username, user.email) and verify_password(password, user.password_hash):
                if _password_context.needs_update(user.password_hash):
                    user.password_hash = hash_password(password)
                    self.update_user(user)
                self._storage.save(CURRENT_USER_KEY, user.id)
                logger.info("User %s logged in", user.username)
                return user
        raise AuthError("Invalid username/email or password")

    def log_out(self) -> None:
        self._storage.delete(CURRENT_USER_KEY)

    def current_user(self) -> User | None:
        user_id = self._storage.load(CURRENT_USER_KEY)
        if not isinstance(user_id, str):
            return None
        return self.get_user(user_id)

    # --- Password reset ---

    def request_password_reset(self, email: str) -> str:
        """Create a six-digit reset code. Delivery is simulated by returning it."""
        email = email.strip()
        if not email or "@" not in email:
            raise AuthError("Please enter a valid email address")
        if not any(user.email == email for user in self._load_users()):
            raise AuthError("No account found with this email")
        code = str(100000 + secrets.randbelow(900000))
        self._reset_codes[email] = code
        logger.info("Issued password reset code for %s", email)
        return code

    def reset_password(self, email: str, code: str, new_password: str) -> None:
        email = email.strip()
        expected = self._reset_codes.get(email)
        if expected is None or not hmac.compare_digest(expected, code.strip()):
            raise AuthError("Invalid reset code")
        if not new_password.strip():
            raise AuthError("Please enter a new password")
        users = self._load_users()
        for user in users:
            if user.email == email:
                user.password_hash = hash_password(new_password)
        self._save_users(users)
        del self._reset_codes[email]

    # --- Account data ---

    def get_user(self, user_id: str) -> User | None:
        for user in self._load_users():
            if user.id == user_id:
                return user
        return None

    def update_user(self, user: User) -> User:
        users = self._load_users()
        for index, existing in enumerate(users):
            if existing.id == user.id:
                users[index] = user
                break
        else:
            raise KeyError(f"Unknown user id: {user.id}")
        self._save_users(users)
        return user

    def clear_history(self, user_id: str) -> User:
        """Remove past results; quizzes, stats and achievements stay."""
        user = self._require_user(user_id)
        user.history = []
        return self.update_user(user)

    def delete_account(self, user_id: str) -> None:
        """Delete the account together with every quiz it owns."""
        self._require_user(user_id)
        removed = self._library.delete_owned_by(user_id)
        self._save_users([user for user in self._load_users() if user.id != user_id])
        if self._storage.load(CURRENT_USER_KEY) == user_id:
            self.log_out()
        logger.info("Deleted account %s and %d quizzes", user_id, removed)

    def _require_user(self, user_id: str) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise KeyError(f"Unknown user id: {user_id}")
        return user

    # --- Storage ---

    def _load_users(self) -> list[User]:
        users, unreadable, upgraded = self._read_records()
        if unreadable:
            logger.warning("Skipping %d unreadable user records", len(unreadable))
        if upgraded:
            try:
                self._write_records(users, unreadable)
            except StorageError as exc:
                logger.warning("Could not store %d upgraded password records: %s", upgraded, exc)
            else:
                logger.info("Upgraded %d clear-text password records", upgraded)
        return users

    def _save_users(self, users: list[User]) -> None:
        # Records that fail to decode are written back untouched.
        _, unreadable, _ = self._read_records()
        self._write_records(users, unreadable)

    def _read_records(self) -> tuple[list[User], list[Any], int]:
        raw = self._storage.load(USERS_KEY, default=[])
        users: list[User] = []
        unreadable: list[Any] = []
        upgraded = 0
        for entry in raw if isinstance(raw, list) else []:
            record = self._upgrade_record(entry)
            try:
                users.append(UserDocument.model_validate(record).to_domain())
            except ValidationError:
                unreadable.append(entry)
                continue
            if record is not entry:
                upgraded += 1
        return users, unreadable, upgraded

    def _write_records(self, users: list[User], unreadable: list[Any]) -> None:
        documents = [UserDocument.from_domain(user).to_json_dict() for user in users]
        self._storage.save(USERS_KEY, documents + unreadable)

    @staticmethod
    def _upgrade_record(entry: Any) -> Any:
        # Early records kept the password in clear text.
        if isinstance(entry, dict) and "password" in entry and "passwordHash" not in entry:
            entry = dict(entry)
            entry["passwordHash"] = hash_password(str(entry.pop("password")))
        return entry

"""Business logic shared between the Qt UI and the share server."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from pathlib import Path
from threading import Lock

from quizwhiz.constants.storage_constants import DATA_DIR, STORAGE_QUOTA_BYTES
from quizwhiz.core.achievements import Achievement
from quizwhiz.core.community_catalog import CommunityCatalog, CommunityQuiz
from quizwhiz.core.models import Question, Quiz, QuizResult, User
from quizwhiz.core.quiz_exporter import export_quizzes_to_zip, save_quiz_to_file
from quizwhiz.core.quiz_importer import load_quiz_from_file
from quizwhiz.core.quiz_schema import FocusSession, GeneratedQuiz
from quizwhiz.core.services.account_service import AccountService
from quizwhiz.core.services.flashcard_deck import FlashcardDeck
from quizwhiz.core.services.game_session import QuizSession, SessionState, build_session
from quizwhiz.core.services.quiz_draft import QuizDraft
from quizwhiz.core.services.quiz_generator import QuizGenerator
from quizwhiz.core.services.quiz_library import QuizLibrary
from quizwhiz.core.services.result_recorder import MissedQuestion, ResultRecorder, missed_questions
from quizwhiz.core.storage import JsonFileStorage, StoragePort

logger = logging.getLogger(__name__)


class NotLoggedInError(RuntimeError):
    """Raised when an operation needs a logged-in user and there is none."""


@dataclass(frozen=True, slots=True)
class StorageUsage:
    used_bytes: int
    quota_bytes: int | None

    @property
    def percent(self) -> float:
        if not self.quota_bytes:
            return 0.0
        return min(100.0, self.used_bytes / self.quota_bytes * 100)


class QuizManager:
    """Facade for quiz services: accounts, library, recorder, sessions and AI generation.

    The Qt thread and the share-server thread both call into the manager, so
    every service call is made while holding ``_lock``. Running sessions are
    owned by the Qt thread and are only created and finished here.
    """

    def __init__(
        self,
        storage: StoragePort | None = None,
        *,
        catalog: CommunityCatalog | None = None,
        generator: QuizGenerator | None = None,
    ) -> None:
        self._lock = Lock()

        # Services
        self._storage = storage if storage is not None else JsonFileStorage(DATA_DIR, STORAGE_QUOTA_BYTES)
        self._library = QuizLibrary(self._storage)
        self._accounts = AccountService(self._storage, self._library)
        self._recorder = ResultRecorder(self._accounts)
        self._catalog = catalog if catalog is not None else CommunityCatalog.from_default_file()
        self._generator = generator
        self._session: QuizSession | None = None
        self._quota_bytes: int | None = getattr(self._storage, "quota_bytes", None)

    # --- Accounts ---

    def sign_up(self, username: str, email: str, password: str) -> User:
        with self._lock:
            return self._accounts.sign_up(username, email, password)

    def log_in(self, identifier: str, password: str) -> User:
        with self._lock:
            return self._accounts.log_in(identifier, password)

    def log_out(self) -> None:
        with self._lock:
            self._end_session()
            self._accounts.log_out()

    def current_user(self) -> User | None:
        with self._lock:
            return self._accounts.current_user()

    def request_password_reset(self, email: str) -> str:
        with self._lock:
            return self._accounts.request_password_reset(email)

    def reset_password(self, email: str, code: str, new_password: str) -> None:
        with self._lock:
            self._accounts.reset_password(email, code, new_password)

    def mark_tutorial_seen(self) -> None:
        with self._lock:
            user = self._require_user()
            user.has_seen_tutorial = True
            self._accounts.update_user(user)

    def clear_history(self) -> User:
        with self._lock:
            return self._accounts.clear_history(self._require_user().id)

    def delete_account(self) -> None:
        with self._lock:
            self._end_session()
            self._accounts.delete_account(self._require_user().id)

    # --- Library ---

    def list_my_quizzes(self) -> list[Quiz]:
        with self._lock:
            return self._library.list_quizzes(self._require_user().id)

    def get_quiz(self, quiz_id: str) -> Quiz | None:
        """Find a quiz in the library or, failing that, in the community catalog."""
        with self._lock:
            return self._find_quiz(quiz_id)

    def save_draft(self, draft: QuizDraft) -> tuple[Quiz, list[Achievement]]:
        """Validate and store a draft. New quizzes count towards the creation achievements."""
        with self._lock:
            user = self._require_user()
            owner_id = user.id
            if not draft.is_new:
                existing = self._library.get_quiz(draft.quiz_id)
                if existing is not None:
                    owner_id = existing.owner_id
            quiz = self._library.save_quiz(draft.build(owner_id))
            unlocked: list[Achievement] = []
            if draft.is_new:
                unlocked = self._recorder.record_activity(user, "create")
            return quiz, unlocked

    def delete_quiz(self, quiz_id: str) -> bool:
        with self._lock:
            user = self._require_user()
            quiz = self._library.get_quiz(quiz_id)
            if quiz is None or quiz.owner_id != user.id:
                return False
            return self._library.delete_quiz(quiz_id)

    def import_quiz(self, quiz: Quiz) -> Quiz:
        with self._lock:
            return self._library.import_quiz(quiz, self._require_user().id)

    def import_quiz_file(self, file_path: Path) -> Quiz:
        imported = load_quiz_from_file(file_path)
        return self.import_quiz(imported.quiz)

    def export_quiz_file(self, quiz_id: str, file_path: Path) -> None:
        with self._lock:
            quiz = self._find_quiz(quiz_id)
        if quiz is None:
            raise KeyError(f"Unknown quiz id: {quiz_id}")
        save_quiz_to_file(file_path, quiz)

    def export_all_quizzes(self, file_path: Path) -> list[str]:
        with self._lock:
            quizzes = self._library.list_quizzes(self._require_user().id)
        return export_quizzes_to_zip(file_path, quizzes)

    def storage_usage(self) -> StorageUsage:
        with self._lock:
            return StorageUsage(used_bytes=self._storage.usage_bytes(), quota_bytes=self._quota_bytes)

    # --- Community ---

    def list_community_quizzes(self, query: str = "") -> list[CommunityQuiz]:
        with self._lock:
            return self._catalog.search(query)

    def import_community_quiz(self, quiz_id: str) -> Quiz:
        with self._lock:
            entry = self._catalog.find(quiz_id)
            if entry is None:
                raise KeyError(f"Unknown community quiz id: {quiz_id}")
            return self._library.import_quiz(entry.quiz, self._require_user().id)

    # --- Sessions ---

    def start_session(self, quiz: Quiz, *, seed: int | None = None) -> QuizSession:
        """Start a playthrough, abandoning any session still running."""
        with self._lock:
            self._require_user()
            self._end_session()
            self._session = build_session(quiz, seed=seed)
            logger.info("Started session for quiz %s", quiz.id)
            return self._session

    def get_active_session(self) -> QuizSession | None:
        with self._lock:
            return self._session

    def finish_session(self) -> tuple[QuizResult, list[Achievement]]:
        """Record the completed session's result for the current user."""
        with self._lock:
            session = self._session
            if session is None or session.state != SessionState.COMPLETED:
                raise RuntimeError("There is no completed session to record.")
            self._session = None
            result = session.result
            unlocked = self._recorder.record_result(self._require_user(), result)
            return result, unlocked

    def abandon_session(self) -> None:
        with self._lock:
            self._end_session()

    def start_study(self, quiz: Quiz) -> tuple[FlashcardDeck, list[Achievement]]:
        with self._lock:
            deck = FlashcardDeck(quiz)
            unlocked = self._recorder.record_activity(self._require_user(), "study")
            return deck, unlocked

    # --- Progress ---

    def get_history(self) -> list[QuizResult]:
        with self._lock:
            return sorted(self._require_user().history, key=lambda result: result.completed_at, reverse=True)

    def get_missed_questions(self) -> list[MissedQuestion]:
        with self._lock:
            user = self._require_user()
            quizzes = self._library.list_quizzes() + [entry.quiz for entry in self._catalog.list_featured()]
            return missed_questions(user.history, quizzes)

    # --- AI generation ---

    @property
    def generator(self) -> QuizGenerator:
        if self._generator is None:
            self._generator = QuizGenerator()
        return self._generator

    def generate_quiz(self, topic: str, difficulty: str, count: int, quiz_type: str) -> GeneratedQuiz:
        # Network call made without holding the lock.
        generated = self.generator.generate_quiz(topic, difficulty, count, quiz_type)
        self._record_ai_use()
        return generated

    def generate_quiz_from_image(self, image_bytes: bytes, mime_type: str, difficulty: str, count: int) -> GeneratedQuiz:
        generated = self.generator.generate_quiz_from_image(image_bytes, mime_type, difficulty, count)
        self._record_ai_use()
        return generated

    def generate_focus_session(self, missed: Sequence[MissedQuestion] | None = None) -> FocusSession:
        if missed is None:
            missed = self.get_missed_questions()
        return self.generator.generate_focus_session(missed)

    def focus_quiz(self, session: FocusSession) -> Quiz:
        """Wrap focus-session questions in a throw-away quiz for playing."""
        with self._lock:
            user = self._require_user()
        return Quiz(id="focus", owner_id=user.id, title="Focus Session", questions=tuple(session.questions))

    def append_generated(self, draft: QuizDraft, questions: Sequence[Question], title: str = "") -> None:
        draft.append_generated(questions)
        if title and not draft.title.strip():
            draft.title = title

    def close(self) -> None:
        """Release the AI client's connection pool, if one was created."""
        if self._generator is not None:
            self._generator.close()

    # --- Helpers ---

    def _record_ai_use(self) -> None:
        with self._lock:
            user = self._accounts.current_user()
            if user is not None:
                self._recorder.record_activity(user, "ai_quiz")

    def _find_quiz(self, quiz_id: str) -> Quiz | None:
        quiz = self._library.get_quiz(quiz_id)
        if quiz is not None:
            return quiz
        entry = self._catalog.find(quiz_id)
        return entry.quiz if entry is not None else None

    def _require_user(self) -> User:
        user = self._accounts.current_user()
        if user is None:
            raise NotLoggedInError("Please log in first.")
        return user

    def _end_session(self) -> None:
        if self._session is not None and not self._session.is_finished:
            self._session.end()
        self._session = None

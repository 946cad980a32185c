"""Pydantic documents for everything that crosses a boundary.

Quizzes, results and users are stored and exported as JSON using the
camelCase layout of the ``.qzx`` format. Data coming from outside (imported
files, AI responses) is decoded into a tagged result so that callers have to
handle the failure branch before any domain object exists.

Architecture note:
    Domain models stay plain dataclasses. The documents here own the wire
    layout and its validation, and convert to and from the domain with
    ``to_domain()`` / ``from_domain()``. Keeping the two apart means the
    runner never sees a question whose ``correctAnswer`` is a string for one
    type and an index for another; that ambiguity ends at this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from quizwhiz.constants.quiz_constants import (
    DEFAULT_OPTION_COUNT,
    DEFAULT_THEME,
    DEFAULT_TIME_LIMIT_SECONDS,
    GENERATED_OPTION_PLACEHOLDER,
    TRUE_FALSE_OPTIONS,
)
from quizwhiz.core.models import (
    AnswerValue,
    CustomTheme,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    Quiz,
    QuizResult,
    TextInputQuestion,
    TrueFalseQuestion,
    User,
    UserStats,
)
from quizwhiz.core.quiz_validation import collect_quiz_errors

T = TypeVar("T")


class SchemaError(ValueError):
    """Describes why external data did not match the expected schema."""

    def __init__(self, message: str, issues: list[str] | None = None) -> None:
        super().__init__(message if not issues else f"{message}: {'; '.join(issues)}")
        self.message = message
        self.issues = list(issues or [])


@dataclass(frozen=True)
class DecodeOk(Generic[T]):
    value: T


@dataclass(frozen=True)
class DecodeErr:
    error: SchemaError


DecodeResult = Union[DecodeOk[T], DecodeErr]


def _schema_error(message: str, exc: ValidationError) -> SchemaError:
    issues = [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    ]
    return SchemaError(message, issues)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _assume_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# --- Questions ---


class _QuestionDocumentBase(_Document):
    question: str
    image: str | None = ""
    options: list[str] = Field(default_factory=list)
    time_limit: int = Field(DEFAULT_TIME_LIMIT_SECONDS, alias="timeLimit", gt=0)
    explanation: str | None = ""

    def _common(self) -> dict[str, Any]:
        return {
            "text": self.question,
            "options": tuple(self.options),
            "time_limit_seconds": self.time_limit,
            "image_ref": self.image or "",
            "explanation": self.explanation or "",
        }


class MultipleChoiceDocument(_QuestionDocumentBase):
    type: Literal["multiple-choice"]
    correct_answer: int = Field(alias="correctAnswer")

    def to_domain(self) -> MultipleChoiceQuestion:
        return MultipleChoiceQuestion(correct_index=self.correct_answer, **self._common())


class TrueFalseDocument(_QuestionDocumentBase):
    type: Literal["true-false"]
    options: list[str] = Field(default_factory=lambda: list(TRUE_FALSE_OPTIONS))
    correct_answer: int = Field(alias="correctAnswer", ge=0, le=1)

    def to_domain(self) -> TrueFalseQuestion:
        return TrueFalseQuestion(correct_index=self.correct_answer, **self._common())


class TextInputDocument(_QuestionDocumentBase):
    type: Literal["text-input"]
    correct_answer: str = Field(alias="correctAnswer")

    def to_domain(self) -> TextInputQuestion:
        common = self._common()
        # The editor keeps a single blank option slot for text questions; it carries no meaning.
        common["options"] = tuple(option for option in self.options if option.strip())
        return TextInputQuestion(correct_text=self.correct_answer, **common)


class OrderingDocument(_QuestionDocumentBase):
    type: Literal["ordering"]
    correct_answer: None = Field(None, alias="correctAnswer")

    def to_domain(self) -> OrderingQuestion:
        return OrderingQuestion(**self._common())


QuestionDocument = Annotated[
    Union[MultipleChoiceDocument, TrueFalseDocument, TextInputDocument, OrderingDocument],
    Field(discriminator="type"),
]


def question_to_document(
    question: Question,
) -> MultipleChoiceDocument | TrueFalseDocument | TextInputDocument | OrderingDocument:
    common = {
        "question": question.text,
        "image": question.image_ref,
        "options": list(question.options),
        "timeLimit": question.time_limit_seconds,
        "explanation": question.explanation,
    }
    if isinstance(question, MultipleChoiceQuestion):
        return MultipleChoiceDocument(type="multiple-choice", correctAnswer=question.correct_index, **common)
    if isinstance(question, TrueFalseQuestion):
        return TrueFalseDocument(type="true-false", correctAnswer=question.correct_index, **common)
    if isinstance(question, TextInputQuestion):
        return TextInputDocument(type="text-input", correctAnswer=question.correct_text, **common)
    return OrderingDocument(type="ordering", correctAnswer=None, **common)


# --- Quizzes ---


class CustomThemeDocument(_Document):
    background: str
    background_image: str | None = Field(None, alias="backgroundImage")
    text: str
    accent: str
    card_color: str = Field(alias="cardColor")
    card_opacity: float = Field(alias="cardOpacity", ge=0.0, le=1.0)

    def to_domain(self) -> CustomTheme:
        return CustomTheme(
            background=self.background,
            text=self.text,
            accent=self.accent,
            card_color=self.card_color,
            card_opacity=self.card_opacity,
            background_image=self.background_image or "",
        )

    @classmethod
    def from_domain(cls, theme: CustomTheme) -> "CustomThemeDocument":
        return cls(
            background=theme.background,
            backgroundImage=theme.background_image or None,
            text=theme.text,
            accent=theme.accent,
            cardColor=theme.card_color,
            cardOpacity=theme.card_opacity,
        )


class QuizDocument(_Document):
    id: str
    user_id: str = Field("", alias="userId")
    title: str
    questions: list[QuestionDocument]
    created_at: datetime = Field(default_factory=_utc_now, alias="createdAt")
    theme: str | None = DEFAULT_THEME
    custom_theme: CustomThemeDocument | None = Field(None, alias="customTheme")
    shuffle_questions: bool | None = Field(False, alias="shuffleQuestions")
    background_music: str | None = Field("", alias="backgroundMusic")

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        # Older exports used millisecond timestamps as numeric ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> Quiz:
        return Quiz(
            id=self.id,
            owner_id=self.user_id,
            title=self.title,
            questions=tuple(question.to_domain() for question in self.questions),
            shuffle_questions=bool(self.shuffle_questions),
            theme=self.theme or DEFAULT_THEME,
            custom_theme=self.custom_theme.to_domain() if self.custom_theme else None,
            background_music=self.background_music or "",
            created_at=_assume_utc(self.created_at),
        )

    @classmethod
    def from_domain(cls, quiz: Quiz) -> "QuizDocument":
        return cls(
            id=quiz.id,
            userId=quiz.owner_id,
            title=quiz.title,
            questions=[question_to_document(question) for question in quiz.questions],
            createdAt=quiz.created_at,
            theme=quiz.theme,
            customTheme=CustomThemeDocument.from_domain(quiz.custom_theme) if quiz.custom_theme else None,
            shuffleQuestions=quiz.shuffle_questions,
            backgroundMusic=quiz.background_music,
        )


def quiz_to_json(quiz: Quiz) -> dict[str, Any]:
    return QuizDocument.from_domain(quiz).to_json_dict()


def quiz_from_json(data: Any) -> Quiz:
    """Load a stored quiz. Raises ``pydantic.ValidationError`` on malformed data."""
    return QuizDocument.model_validate(data).to_domain()


def decode_quiz(data: Any) -> DecodeResult[Quiz]:
    """Decode an untrusted quiz document (e.g. an imported file)."""
    try:
        quiz = QuizDocument.model_validate(data).to_domain()
    except ValidationError as exc:
        return DecodeErr(_schema_error("Invalid quiz document", exc))
    errors = collect_quiz_errors(quiz)
    if errors:
        return DecodeErr(SchemaError("Quiz document failed validation", errors))
    return DecodeOk(quiz)


# --- Results and users ---


class QuizResultDocument(_Document):
    id: str
    quiz_id: str = Field(alias="quizId")
    quiz_title: str = Field(alias="quizTitle")
    date: datetime
    score: int = Field(ge=0)
    total_questions: int = Field(alias="totalQuestions", ge=0)
    answers: list[Union[int, str, list[int]]] = Field(default_factory=list)

    @field_validator("id", "quiz_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> QuizResult:
        answers: list[AnswerValue] = [tuple(answer) if isinstance(answer, list) else answer for answer in self.answers]
        return QuizResult(
            id=self.id,
            quiz_id=self.quiz_id,
            quiz_title=self.quiz_title,
            completed_at=_assume_utc(self.date),
            score=self.score,
            total_questions=self.total_questions,
            answers=tuple(answers),
        )

    @classmethod
    def from_domain(cls, result: QuizResult) -> "QuizResultDocument":
        return cls(
            id=result.id,
            quizId=result.quiz_id,
            quizTitle=result.quiz_title,
            date=result.completed_at,
            score=result.score,
            totalQuestions=result.total_questions,
            answers=[list(answer) if isinstance(answer, tuple) else answer for answer in result.answers],
        )


class UserStatsDocument(_Document):
    quizzes_created: int = Field(0, alias="quizzesCreated")
    quizzes_played: int = Field(0, alias="quizzesPlayed")
    questions_answered: int = Field(0, alias="questionsAnswered")
    perfect_scores: int = Field(0, alias="perfectScores")
    study_sessions: int = Field(0, alias="studySessions")
    ai_quizzes_generated: int = Field(0, alias="aiQuizzesGenerated")
    ai_images_generated: int = Field(0, alias="aiImagesGenerated")

    def to_domain(self) -> UserStats:
        return UserStats(**self.model_dump(by_alias=False))

    @classmethod
    def from_domain(cls, stats: UserStats) -> "UserStatsDocument":
        return cls(
            quizzesCreated=stats.quizzes_created,
            quizzesPlayed=stats.quizzes_played,
            questionsAnswered=stats.questions_answered,
            perfectScores=stats.perfect_scores,
            studySessions=stats.study_sessions,
            aiQuizzesGenerated=stats.ai_quizzes_generated,
            aiImagesGenerated=stats.ai_images_generated,
        )


class UserDocument(_Document):
    id: str
    username: str
    email: str
    password_hash: str = Field("", alias="passwordHash")
    # Accounts created before the tutorial flag existed are treated as having seen it.
    has_seen_tutorial: bool = Field(True, alias="hasSeenTutorial")
    stats: UserStatsDocument = Field(default_factory=UserStatsDocument)
    achievements: list[str] = Field(default_factory=list)
    history: list[QuizResultDocument] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _fill_legacy_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            for key in ("stats", "achievements", "history"):
                if data.get(key) is None:
                    data.pop(key, None)
        return data

    def to_domain(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            password_hash=self.password_hash,
            has_seen_tutorial=self.has_seen_tutorial,
            stats=self.stats.to_domain(),
            achievements=list(self.achievements),
            history=[result.to_domain() for result in self.history],
        )

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            passwordHash=user.password_hash,
            hasSeenTutorial=user.has_seen_tutorial,
            stats=UserStatsDocument.from_domain(user.stats),
            achievements=list(user.achievements),
            history=[QuizResultDocument.from_domain(result) for result in user.history],
        )


# --- AI responses ---


@dataclass(frozen=True, slots=True)
class GeneratedQuiz:
    title: str
    questions: tuple[Question, ...]


@dataclass(frozen=True, slots=True)
class FocusSession:
    analysis: str
    questions: tuple[Question, ...]


def _looks_true_false(options: list[str]) -> bool:
    lowered = [option.lower() for option in options]
    return len(options) == 2 and any("true" in o for o in lowered) and any("false" in o for o in lowered)


class GeneratedQuestionDocument(_Document):
    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer", ge=0)
    time_limit: int | None = Field(None, alias="timeLimit")
    explanation: str | None = ""

    @model_validator(mode="after")
    def _check_correct_answer(self) -> "GeneratedQuestionDocument":
        limit = len(self.options) if _looks_true_false(self.options) else min(len(self.options), DEFAULT_OPTION_COUNT)
        if self.correct_answer >= limit:
            raise ValueError(f"correctAnswer {self.correct_answer} does not point at one of the options")
        return self

    def to_domain(self) -> Question:
        time_limit = self.time_limit if self.time_limit and self.time_limit > 0 else DEFAULT_TIME_LIMIT_SECONDS
        explanation = self.explanation or ""
        if _looks_true_false(self.options):
            is_true = "true" in self.options[self.correct_answer].lower()
            return TrueFalseQuestion(
                text=self.question,
                options=TRUE_FALSE_OPTIONS,
                correct_index=0 if is_true else 1,
                time_limit_seconds=time_limit,
                explanation=explanation,
            )
        options = list(self.options[:DEFAULT_OPTION_COUNT])
        while len(options) < DEFAULT_OPTION_COUNT:
            options.append(GENERATED_OPTION_PLACEHOLDER)
        return MultipleChoiceQuestion(
            text=self.question,
            options=tuple(options),
            correct_index=self.correct_answer,
            time_limit_seconds=time_limit,
            explanation=explanation,
        )


class GeneratedQuizDocument(_Document):
    title: str | None = None
    questions: list[GeneratedQuestionDocument] = Field(min_length=1)


class FocusSessionDocument(_Document):
    analysis: str
    questions: list[GeneratedQuestionDocument] = Field(min_length=1)


def decode_generated_quiz(data: Any, default_title: str = "Generated Quiz") -> DecodeResult[GeneratedQuiz]:
    try:
        document = GeneratedQuizDocument.model_validate(data)
    except ValidationError as exc:
        return DecodeErr(_schema_error("AI response does not describe a quiz", exc))
    return DecodeOk(
        GeneratedQuiz(
            title=(document.title or "").strip() or default_title,
            questions=tuple(question.to_domain() for question in document.questions),
        )
    )


def decode_focus_session(data: Any) -> DecodeResult[FocusSession]:
    try:
        document = FocusSessionDocument.model_validate(data)
    except ValidationError as exc:
        return DecodeErr(_schema_error("AI response does not describe a focus session", exc))
    return DecodeOk(
        FocusSession(
            analysis=document.analysis.strip(),
            questions=tuple(question.to_domain() for question in document.questions),
        )
    )

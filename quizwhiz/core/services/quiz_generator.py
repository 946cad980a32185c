"""AI quiz generation through the GitHub Models chat completions API."""

from __future__ import annotations

import base64
from collections.abc import Sequence
import json
import logging
import re
from typing import Any

import httpx

from quizwhiz.constants.ai_constants import (
    DIFFICULTIES,
    FOCUS_CONTEXT_LIMIT,
    FOCUS_QUESTION_COUNT,
    GENERATION_TEMPERATURE,
    GITHUB_MODELS_ENDPOINT,
    GITHUB_MODELS_MODEL,
    GITHUB_TOKEN,
    QUIZ_TYPES,
    REQUEST_TIMEOUT_SECONDS,
)
from quizwhiz.core.quiz_schema import (
    DecodeErr,
    FocusSession,
    GeneratedQuiz,
    decode_focus_session,
    decode_generated_quiz,
)
from quizwhiz.core.services.result_recorder import MissedQuestion

logger = logging.getLogger(__name__)

MAX_GENERATED_QUESTIONS = 50

_CODE_FENCE = re.compile(r"```(?:json)?\n?")

_QUIZ_JSON_SHAPE = """{
    "title": "A catchy title for the quiz",
    "questions": [
      {
        "question": "The question text",
        "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
        "correctAnswer": 0,
        "timeLimit": 20,
        "explanation": "Why the answer is correct"
      }
    ]
  }"""

_TYPE_CONSTRAINTS = {
    "true-false": (
        'Create ONLY True/False questions. The "options" array must be exactly ["True", "False"]. '
        '"correctAnswer" must be 0 (for True) or 1 (for False).'
    ),
    "multiple-choice": 'Create ONLY Multiple Choice questions. The "options" array must contain exactly 4 distinct strings.',
    "mixed": (
        "Create a mix of Multiple Choice and True/False questions. "
        'For Multiple Choice: "options" must have 4 strings. For True/False: "options" must be ["True", "False"].'
    ),
}


class QuizGenerationError(Exception):
    """Raised when the AI service cannot produce a usable quiz."""


def _system_prompt(quiz_type: str) -> str:
    return (
        "You are a helpful quiz generator for a quiz app. Generate a valid JSON object representing a quiz.\n"
        f"The JSON must follow this structure strictly:\n{_QUIZ_JSON_SHAPE}\n"
        f"{_TYPE_CONSTRAINTS[quiz_type]}\n\n"
        "CRITICAL INSTRUCTION: You MUST randomize the position of the correct answer for Multiple Choice questions. "
        'The "correctAnswer" index MUST vary between 0, 1, 2, and 3 across the questions.\n\n'
        "Ensure the JSON is valid and minified. Do not include markdown formatting."
    )


def strip_code_fences(content: str) -> str:
    return _CODE_FENCE.sub("", content).replace("```", "").strip()


def _check_request(difficulty: str, count: int) -> None:
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Difficulty must be one of {', '.join(DIFFICULTIES)}.")
    if not 1 <= count <= MAX_GENERATED_QUESTIONS:
        raise ValueError(f"Question count must be between 1 and {MAX_GENERATED_QUESTIONS}.")


class QuizGenerator:
    """Client for generating quizzes, image quizzes and focus sessions.

    Pass ``client`` to reuse a configured ``httpx.Client`` (tests inject one
    with a mock transport); otherwise the generator owns its own client.
    """

    def __init__(
        self,
        token: str | None = GITHUB_TOKEN,
        *,
        client: httpx.Client | None = None,
        endpoint: str = GITHUB_MODELS_ENDPOINT,
        model: str = GITHUB_MODELS_MODEL,
    ) -> None:
        self._token = (token or "").strip()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=REQUEST_TIMEOUT_SECONDS)
        self._endpoint = endpoint
        self._model = model

    @property
    def is_configured(self) -> bool:
        return bool(self._token)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "QuizGenerator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Public API ---

    def generate_quiz(
        self,
        topic: str,
        difficulty: str = "medium",
        count: int = 5,
        quiz_type: str = "mixed",
    ) -> GeneratedQuiz:
        topic = topic.strip()
        if not topic:
            raise ValueError("Please enter a topic.")
        _check_request(difficulty, count)
        if quiz_type not in QUIZ_TYPES:
            raise ValueError(f"Quiz type must be one of {', '.join(QUIZ_TYPES)}.")

        messages = [
            {"role": "system", "content": _system_prompt(quiz_type)},
            {"role": "user", "content": f'Generate a {difficulty} difficulty quiz about "{topic}" with {count} questions.'},
        ]
        quiz = self._decode_quiz(self._complete(messages))
        logger.info("Generated quiz %r with %d questions", quiz.title, len(quiz.questions))
        return quiz

    def generate_quiz_from_image(
        self,
        image_bytes: bytes,
        mime_type: str = "image/jpeg",
        difficulty: str = "medium",
        count: int = 5,
    ) -> GeneratedQuiz:
        if not image_bytes:
            raise ValueError("Please choose an image.")
        if not mime_type.startswith("image/"):
            raise ValueError(f"Unsupported image type: {mime_type}")
        _check_request(difficulty, count)

        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        instructions = (
            "Analyze the image provided. Identify the main subject, text, or context. "
            f"Generate a {difficulty} difficulty quiz with {count} multiple-choice questions based strictly on "
            "the content and context of the image. Create a catchy title, give each question 4 options, the "
            "index of the correct answer (0-3) and a brief explanation."
        )
        messages = [
            {"role": "system", "content": _system_prompt("multiple-choice")},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": instructions},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            },
        ]
        return self._decode_quiz(self._complete(messages))

    def generate_focus_session(self, missed: Sequence[MissedQuestion]) -> FocusSession:
        """Analyse past mistakes and produce new practice questions targeting them."""
        if not missed:
            raise ValueError("There are no missed questions to study yet.")

        history = json.dumps([item.to_prompt_dict() for item in missed], ensure_ascii=False)[:FOCUS_CONTEXT_LIMIT]
        prompt = (
            "I am a student using a quiz app. Here is a list of specific questions I have answered INCORRECTLY "
            f"in the past:\n{history}\n\n"
            "1. Analyze these mistakes to find common themes or weak topics.\n"
            '2. Write a short, encouraging "analysis" paragraph explaining what I need to work on.\n'
            f"3. Generate {FOCUS_QUESTION_COUNT} NEW multiple-choice questions that target these weak areas, "
            'each with 4 "options", a "correctAnswer" index and an "explanation".\n\n'
            'Return only valid JSON of the form {"analysis": "...", "questions": [...]}.'
        )
        messages = [
            {"role": "system", "content": "You are a supportive tutor that replies with JSON only."},
            {"role": "user", "content": prompt},
        ]
        decoded = decode_focus_session(self._parse_content(self._complete(messages)))
        if isinstance(decoded, DecodeErr):
            raise QuizGenerationError(str(decoded.error)) from decoded.error
        return decoded.value

    # --- Internals ---

    def _decode_quiz(self, content: str) -> GeneratedQuiz:
        decoded = decode_generated_quiz(self._parse_content(content))
        if isinstance(decoded, DecodeErr):
            raise QuizGenerationError(str(decoded.error)) from decoded.error
        return decoded.value

    def _complete(self, messages: list[dict[str, Any]]) -> str:
        if not self._token:
            raise QuizGenerationError("A GitHub token is required. Set GITHUB_TOKEN to enable AI features.")

        payload = {"messages": messages, "model": self._model, "temperature": GENERATION_TEMPERATURE}
        headers = {"Authorization": f"Bearer {self._token}", "Content-Type": "application/json"}
        try:
            response = self._client.post(self._endpoint, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("AI request failed: %s", exc)
            raise QuizGenerationError(f"Could not reach GitHub Models: {exc}") from exc

        if response.status_code == 401:
            raise QuizGenerationError(
                "Unauthorized (401). Please check that your token is valid, has the 'models' permission, "
                "and that your account has access to GitHub Models."
            )
        if response.is_error:
            raise QuizGenerationError(f"GitHub API Error: {self._error_message(response)}")

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise QuizGenerationError("Unexpected response from GitHub Models.") from exc

    @staticmethod
    def _parse_content(content: str) -> Any:
        cleaned = strip_code_fences(content or "")
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as exc:
            logger.warning("AI returned invalid JSON: %.200s", cleaned)
            raise QuizGenerationError("AI returned invalid JSON. Please try again.") from exc

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"{response.status_code} {response.reason_phrase} - {response.text}"
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if body.get("message"):
                return str(body["message"])
        return f"{response.status_code} {response.reason_phrase}"

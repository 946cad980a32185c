"""FastAPI share server: browse, preview, download and upload quizzes over the LAN."""

from __future__ import annotations

from datetime import datetime
from html import escape
from threading import Thread
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel
import uvicorn

from quizwhiz.constants.about import APP_NAME, APP_VERSION
from quizwhiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizwhiz.core.markdown_math_renderer import renderer
from quizwhiz.core.models import Quiz
from quizwhiz.core.quiz_exporter import quiz_filename, serialize_quiz
from quizwhiz.core.quiz_manager import NotLoggedInError, QuizManager
from quizwhiz.core.quiz_schema import DecodeErr, decode_quiz
from quizwhiz.core.storage import StorageQuotaExceededError

_PAGE_STYLE = """
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      a { color: #5eead4; }
      ul { padding-left: 1.2rem; line-height: 1.8; }
      .meta { color: #94a3b8; font-size: 0.9rem; }
"""


class QuizSummary(BaseModel):
    """Short description of a quiz used in listings."""

    id: str
    title: str
    question_count: int
    theme: str
    created_at: datetime


class QuestionPreview(BaseModel):
    """A question rendered for display; correct answers are not included."""

    position: int
    type: str
    question_html: str
    options: list[str]
    time_limit_seconds: int


class QuizPreview(QuizSummary):
    questions: list[QuestionPreview]


class CommunityEntry(QuizSummary):
    author: str
    likes: int
    plays: int


class HistoryEntry(BaseModel):
    id: str
    quiz_id: str
    quiz_title: str
    completed_at: datetime
    score: int
    total_questions: int


def _summary(quiz: Quiz) -> dict[str, Any]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "question_count": len(quiz.questions),
        "theme": quiz.theme,
        "created_at": quiz.created_at,
    }


def _preview(quiz: Quiz) -> QuizPreview:
    questions = [
        QuestionPreview(
            position=position,
            type=question.question_type.value,
            question_html=renderer.render_fragment(question.text),
            # Ordering items are listed in their authored (correct) order, so they are withheld.
            options=[] if question.question_type.value == "ordering" else list(question.options),
            time_limit_seconds=question.time_limit_seconds,
        )
        for position, question in enumerate(quiz.questions)
    ]
    return QuizPreview(questions=questions, **_summary(quiz))


def _render_index_page(manager: QuizManager) -> str:
    user = manager.current_user()
    my_quizzes = manager.list_my_quizzes() if user is not None else []
    community = manager.list_community_quizzes()

    def quiz_items(quizzes: list[Quiz]) -> str:
        if not quizzes:
            return "<li class=\"meta\">Nothing here yet.</li>"
        return "\n".join(
            f"<li><a href=\"/quizzes/{escape(quiz.id)}\">{escape(quiz.title)}</a> "
            f"<span class=\"meta\">{len(quiz.questions)} questions</span> "
            f"(<a href=\"/quizzes/{escape(quiz.id)}/export\">download .qzx</a>)</li>"
            for quiz in quizzes
        )

    owner_heading = f"{escape(user.username)}'s quizzes" if user is not None else "No one is logged in"
    return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{APP_NAME} Share</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>{_PAGE_STYLE}</style>
  </head>
  <body>
    <section class=\"card\">
      <h1>{APP_NAME}</h1>
      <h2>{owner_heading}</h2>
      <ul>{quiz_items(my_quizzes)}</ul>
    </section>
    <section class=\"card\">
      <h2>Community</h2>
      <ul>{quiz_items([entry.quiz for entry in community])}</ul>
    </section>
  </body>
</html>
"""


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _require_quiz(manager: QuizManager, quiz_id: str) -> Quiz:
    quiz = manager.get_quiz(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Quiz {quiz_id} not found.")
    return quiz


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} Share API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @app.exception_handler(NotLoggedInError)
    def handle_not_logged_in(request: Request, exc: NotLoggedInError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})

    @app.get("/", response_class=HTMLResponse)
    def serve_index_page(manager: QuizManager = Depends(quiz_manager_dep)) -> str:
        return _render_index_page(manager)

    @app.get("/quizzes", response_model=list[QuizSummary])
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, Any]]:
        return [_summary(quiz) for quiz in manager.list_my_quizzes()]

    @app.get("/quizzes/{quiz_id}", response_model=QuizPreview)
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizPreview:
        return _preview(_require_quiz(manager, quiz_id))

    @app.get("/quizzes/{quiz_id}/export")
    def export_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> Response:
        quiz = _require_quiz(manager, quiz_id)
        return Response(
            content=serialize_quiz(quiz),
            media_type="application/octet-stream",
            headers={"Content-Disposition": f'attachment; filename="{quiz_filename(quiz)}"'},
        )

    @app.post("/import", status_code=status.HTTP_201_CREATED, response_model=QuizSummary)
    def import_quiz(
        document: dict[str, Any] = Body(...),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        decoded = decode_quiz(document)
        if isinstance(decoded, DecodeErr):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": decoded.error.message, "issues": decoded.error.issues},
            )
        try:
            imported = manager.import_quiz(decoded.value)
        except StorageQuotaExceededError as exc:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
        return _summary(imported)

    @app.get("/community", response_model=list[CommunityEntry])
    def list_community(q: str = "", manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, Any]]:
        return [
            {**_summary(entry.quiz), "author": entry.author, "likes": entry.likes, "plays": entry.plays}
            for entry in manager.list_community_quizzes(q)
        ]

    @app.get("/history", response_model=list[HistoryEntry])
    def get_history(manager: QuizManager = Depends(quiz_manager_dep)) -> list[HistoryEntry]:
        return [
            HistoryEntry(
                id=result.id,
                quiz_id=result.quiz_id,
                quiz_title=result.quiz_title,
                completed_at=result.completed_at,
                score=result.score,
                total_questions=result.total_questions,
            )
            for result in manager.get_history()
        ]

    return app


def start_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizWhizShareServer", daemon=True)
    thread.start()
    return thread

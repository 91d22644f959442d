"""FastAPI server that exposes the quiz engine to dashboards."""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
import uvicorn

from quizdesk.constants.about import APP_NAME, APP_VERSION
from quizdesk.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizdesk.core.errors import NotFoundError, StorageError, ValidationError
from quizdesk.core.markdown_math_renderer import MarkdownMathRenderer
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.core.services.statistics import OwnerOverview, QuizStats, StudentStats
from quizdesk.server.schemas import (
    ActiveIn,
    LearnerQuestionOut,
    LearnerQuizOut,
    ParticipantIn,
    QuizCreateIn,
    QuizOut,
    QuizUpdateIn,
    SessionOut,
    SessionStartIn,
    SubmissionIn,
    SubmissionOut,
)


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_api_app(quiz_manager: QuizManager) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    renderer = MarkdownMathRenderer()
    _register_error_handlers(app)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    # --- Quizzes ---

    @app.get("/quizzes", response_model=list[QuizOut])
    def list_quizzes(
        owner_id: str | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[QuizOut]:
        return [QuizOut.from_quiz(quiz) for quiz in manager.list_quizzes(owner_id)]

    @app.post("/quizzes", response_model=QuizOut, status_code=201)
    def create_quiz(payload: QuizCreateIn, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizOut:
        quiz = manager.create_quiz(
            title=payload.title,
            description=payload.description,
            owner_id=payload.owner_id,
            questions=[q.to_question() for q in payload.questions],
            is_active=payload.is_active,
            time_limit_minutes=payload.time_limit_minutes,
        )
        return QuizOut.from_quiz(quiz)

    @app.get("/quizzes/{quiz_id}", response_model=LearnerQuizOut)
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> LearnerQuizOut:
        quiz = manager.get_quiz(quiz_id)
        # Hidden quizzes are invisible to learners.
        if not quiz.is_active:
            raise HTTPException(status_code=404, detail=f"Quiz '{quiz_id}' not found.")
        return LearnerQuizOut(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            time_limit_minutes=quiz.time_limit_minutes,
            total_points=quiz.total_points,
            questions=[
                LearnerQuestionOut(
                    id=q.id,
                    prompt_html=renderer.render_fragment(q.prompt),
                    options=[renderer.render_inline(option) for option in q.options],
                    points=q.points,
                )
                for q in quiz.questions
            ],
        )

    @app.patch("/quizzes/{quiz_id}", response_model=QuizOut)
    def update_quiz(
        quiz_id: str,
        payload: QuizUpdateIn,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuizOut:
        fields = payload.model_dump(exclude_unset=True)
        owner_id = fields.pop("owner_id", None)
        if not fields:
            raise HTTPException(status_code=400, detail="Nothing to update")
        if "questions" in fields:
            fields["questions"] = [q.to_question() for q in payload.questions or []]
        quiz = manager.update_quiz(quiz_id, owner_id=owner_id, **fields)
        return QuizOut.from_quiz(quiz)

    @app.put("/quizzes/{quiz_id}/active", response_model=QuizOut)
    def set_quiz_active(
        quiz_id: str,
        payload: ActiveIn,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> QuizOut:
        quiz = manager.set_quiz_active(quiz_id, payload.active, owner_id=payload.owner_id)
        return QuizOut.from_quiz(quiz)

    @app.delete("/quizzes/{quiz_id}", status_code=204)
    def delete_quiz(
        quiz_id: str,
        owner_id: str | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        if not manager.delete_quiz(quiz_id, owner_id=owner_id):
            raise HTTPException(status_code=404, detail=f"Quiz '{quiz_id}' not found.")
        return Response(status_code=204)

    # --- Submissions and results ---

    @app.post("/quizzes/{quiz_id}/submissions", response_model=SubmissionOut, status_code=201)
    def submit_quiz(
        quiz_id: str,
        payload: SubmissionIn,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> SubmissionOut:
        submission = manager.submit_quiz(
            quiz_id,
            payload.student_id,
            payload.student_name,
            payload.answers,
            payload.time_spent_seconds,
        )
        return SubmissionOut.from_submission(submission)

    @app.get("/quizzes/{quiz_id}/results", response_model=list[SubmissionOut])
    def get_results(
        quiz_id: str,
        owner_id: str | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[SubmissionOut]:
        return [SubmissionOut.from_submission(s) for s in manager.get_results(quiz_id, owner_id)]

    @app.get("/quizzes/{quiz_id}/stats")
    def get_quiz_stats(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> QuizStats:
        return manager.get_quiz_stats(quiz_id)

    @app.get("/students/{student_id}/submissions", response_model=list[SubmissionOut])
    def get_student_history(
        student_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[SubmissionOut]:
        return [SubmissionOut.from_submission(s) for s in manager.get_student_history(student_id)]

    @app.get("/students/{student_id}/stats")
    def get_student_stats(student_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> StudentStats:
        return manager.get_student_stats(student_id)

    @app.get("/owners/{owner_id}/overview")
    def get_owner_overview(owner_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> OwnerOverview:
        return manager.get_owner_overview(owner_id)

    # --- Live sessions ---

    @app.post("/quizzes/{quiz_id}/sessions", response_model=SessionOut, status_code=201)
    def start_session(
        quiz_id: str,
        payload: SessionStartIn,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> SessionOut:
        return SessionOut.from_session(manager.start_live_session(quiz_id, payload.owner_id))

    @app.get("/quizzes/{quiz_id}/sessions/live", response_model=SessionOut)
    def get_live_session(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> SessionOut:
        session = manager.get_live_session(quiz_id)
        if session is None:
            raise HTTPException(status_code=404, detail="No live session for this quiz")
        return SessionOut.from_session(session)

    @app.post("/sessions/{session_id}/participants", response_model=SessionOut)
    def join_session(
        session_id: str,
        payload: ParticipantIn,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> SessionOut:
        return SessionOut.from_session(manager.join_live_session(session_id, payload.student_id))

    @app.post("/sessions/{session_id}/stop", response_model=SessionOut)
    def stop_session(session_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> SessionOut:
        return SessionOut.from_session(manager.stop_live_session(session_id))

    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(quiz_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()

"""FastAPI server that exposes the quiz lifecycle endpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
import uvicorn

from quizroom.constants.about import APP_NAME, APP_VERSION
from quizroom.constants.network_constants import DEFAULT_API_PREFIX, DEFAULT_HOST, DEFAULT_PORT
from quizroom.core.errors import (
    QuizAuthorizationError,
    QuizConflictError,
    QuizNotFoundError,
    QuizPersistenceError,
    QuizServiceError,
    QuizValidationError,
)
from quizroom.core.quiz_manager import QuizManager
from quizroom.core.views import admin_view, participant_view, public_view, sanitize_questions, summary_view

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[QuizServiceError], int] = {
    QuizValidationError: 400,
    QuizConflictError: 400,
    QuizNotFoundError: 404,
    QuizAuthorizationError: 403,
    QuizPersistenceError: 500,
}


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CreatePayload(_Payload):
    """Payload schema for quiz creation."""

    title: str | None = None
    category: str | None = None
    questions: Any = None
    createdBy: str | None = None
    creatorName: str | None = None


class CreatorPayload(_Payload):
    """Creator identity sent to the admin endpoint."""

    createdBy: str | None = None
    creatorName: str | None = None


class JoinPayload(_Payload):
    code: str | None = None
    userId: str | None = None
    username: str | None = None


class StartPayload(_Payload):
    code: str | None = None
    createdBy: str | None = None
    creatorName: str | None = None


class AnswerPayload(_Payload):
    """Payload schema for a single submitted answer."""

    code: str | None = None
    userId: str | None = None
    questionIndex: int | None = None
    answer: str | None = None


class ScorePayload(_Payload):
    code: str | None = None
    userId: str | None = None
    score: int | float | None = None


def _status_for(exc: QuizServiceError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return 500


def _error_response(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuizServiceError)
    async def handle_quiz_error(request: Request, exc: QuizServiceError) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, QuizPersistenceError):
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc, exc.details)
            return _error_response(status_code, str(exc), exc.details or str(exc))
        return _error_response(status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return _error_response(400, "Invalid request body")


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_quiz_router(quiz_manager: QuizManager) -> APIRouter:
    """Build the quiz routes. Fixed paths are registered before ``/{code}``."""
    router = APIRouter()
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    @router.post("/create", status_code=201)
    async def create_quiz(
        payload: CreatePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        quiz = await manager.create_quiz(
            title=payload.title,
            category=payload.category,
            questions=payload.questions,
            created_by=payload.createdBy,
            creator_name=payload.creatorName,
        )
        return {"success": True, "code": quiz.code, "message": "Quiz created successfully"}

    @router.get("/list")
    async def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, Any]]:
        return [summary_view(quiz) for quiz in await manager.list_quizzes()]

    @router.get("/leaderboard/{code}")
    async def get_leaderboard(
        code: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, Any]]:
        return [row.to_dict() for row in await manager.get_leaderboard(code)]

    @router.get("/{code}/admin")
    async def get_admin_quiz(
        code: str,
        created_by: str | None = Query(default=None, alias="createdBy"),
        creator_name: str | None = Query(default=None, alias="creatorName"),
        payload: CreatorPayload | None = Body(default=None),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        if payload is not None:
            created_by = created_by or payload.createdBy
            creator_name = creator_name or payload.creatorName
        quiz = await manager.get_admin_quiz(code, created_by=created_by, creator_name=creator_name)
        return admin_view(quiz)

    @router.get("/{code}")
    async def get_quiz(
        code: str,
        user_id: str | None = Query(default=None, alias="userId"),
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        return public_view(await manager.get_quiz(code), caller_id=user_id)

    @router.post("/join")
    async def join_quiz(
        payload: JoinPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        result = await manager.join_quiz(payload.code, payload.userId, payload.username)
        return {
            "success": True,
            "message": "Joined quiz successfully" if result.newly_joined else "Already joined quiz",
            "quiz": participant_view(result.quiz),
        }

    @router.post("/start")
    async def start_quiz(
        payload: StartPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        quiz = await manager.start_quiz(
            payload.code,
            created_by=payload.createdBy,
            creator_name=payload.creatorName,
        )
        return {
            "success": True,
            "message": "Quiz started successfully",
            "questions": sanitize_questions(quiz),
        }

    @router.post("/submit-answer")
    async def submit_answer(
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        result = await manager.submit_answer(
            payload.code,
            payload.userId,
            payload.questionIndex,
            payload.answer,
        )
        # The correct answer is revealed only to the submitter, after submission.
        return {"success": True, "correct": result.correct, "correctAnswer": result.correct_answer}

    @router.post("/submit")
    async def submit_score(
        payload: ScorePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, Any]:
        rank = await manager.submit_score(payload.code, payload.userId, payload.score)
        return {"message": "Score submitted successfully", "currentRank": rank}

    return router


def create_api_app(quiz_manager: QuizManager, api_prefix: str = DEFAULT_API_PREFIX) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await quiz_manager.prepare()
        try:
            yield
        finally:
            await quiz_manager.shutdown()

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, lifespan=lifespan)
    _install_error_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(create_quiz_router(quiz_manager), prefix=api_prefix)
    return app


def run_api_server(
    quiz_manager: QuizManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    api_prefix: str = DEFAULT_API_PREFIX,
    log_level: str = "info",
) -> None:
    """Serve the FastAPI app with uvicorn until interrupted."""
    app = create_api_app(quiz_manager, api_prefix=api_prefix)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    server = uvicorn.Server(config)
    server.run()

"""Business logic for the quiz lifecycle: create, join, start, answer, score."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from quizroom.constants.quiz_constants import JOIN_CODE_MAX_ATTEMPTS
from quizroom.core.code_generator import JoinCodeGenerator
from quizroom.core.errors import (
    DuplicateJoinCodeError,
    JoinCodeExhaustedError,
    QuizAuthorizationError,
    QuizConflictError,
    QuizNotFoundError,
    QuizValidationError,
)
from quizroom.core.models import AnswerRecord, Participant, Quiz, QuizStatus, ScoreRecord, utc_now
from quizroom.core.services.leaderboard import LeaderboardRow, current_rank, rank_scores
from quizroom.core.services.quiz_builder import build_questions, require_fields
from quizroom.core.services.quiz_store import QuizStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JoinResult:
    quiz: Quiz
    newly_joined: bool


@dataclass(slots=True)
class AnswerResult:
    correct: bool
    correct_answer: str


class QuizManager:
    """Facade over the quiz store that enforces the lifecycle rules.

    Status only moves forward from WAITING to ACTIVE. Only the creator may
    read the admin view or start the quiz; the creator is recognised by
    comparing a caller-supplied identity with the stored one.
    """

    def __init__(
        self,
        store: QuizStore,
        code_generator: JoinCodeGenerator | None = None,
        max_code_attempts: int = JOIN_CODE_MAX_ATTEMPTS,
    ) -> None:
        self._store = store
        self._codes = code_generator or JoinCodeGenerator()
        self._max_code_attempts = max_code_attempts

    async def prepare(self) -> None:
        await self._store.ensure_indexes()

    async def shutdown(self) -> None:
        await self._store.close()

    # --- Creation ---

    async def create_quiz(
        self,
        title: str | None,
        category: str | None,
        questions: Any,
        created_by: str | None,
        creator_name: str | None = None,
    ) -> Quiz:
        require_fields(title=title, category=category, questions=questions, created_by=created_by)
        built_questions = build_questions(questions)

        for attempt in range(1, self._max_code_attempts + 1):
            quiz = Quiz(
                code=self._codes.next_code(),
                title=title,
                category=category,
                created_by=created_by,
                creator_name=creator_name or created_by,
                questions=built_questions,
            )
            try:
                await self._store.insert(quiz)
            except DuplicateJoinCodeError:
                logger.warning("Join code %s collided (attempt %d/%d)", quiz.code, attempt, self._max_code_attempts)
                continue
            logger.info("Created quiz %s with %d question(s)", quiz.code, len(built_questions))
            return quiz

        raise JoinCodeExhaustedError(
            "Failed to create quiz",
            details=f"No free join code after {self._max_code_attempts} attempts",
        )

    # --- Lookups ---

    async def get_quiz(self, code: str) -> Quiz:
        quiz = await self._store.find_by_code(code)
        if quiz is None:
            raise QuizNotFoundError(code)
        return quiz

    async def get_admin_quiz(
        self,
        code: str,
        created_by: str | None = None,
        creator_name: str | None = None,
    ) -> Quiz:
        quiz = await self.get_quiz(code)
        if not self._is_creator(quiz, created_by, creator_name):
            raise QuizAuthorizationError("Unauthorized access")
        return quiz

    async def list_quizzes(self) -> list[Quiz]:
        quizzes = await self._store.list_all()
        return sorted(quizzes, key=lambda quiz: quiz.created_at)

    async def get_leaderboard(self, code: str) -> list[LeaderboardRow]:
        quiz = await self.get_quiz(code)
        return rank_scores(quiz.scores)

    # --- Lifecycle ---

    async def join_quiz(self, code: str | None, user_id: str | None, username: str | None) -> JoinResult:
        require_fields(code=code, user_id=user_id, username=username)
        quiz = await self.get_quiz(code)
        self._ensure_waiting(quiz)
        if quiz.has_participant(user_id):
            return JoinResult(quiz=quiz, newly_joined=False)

        updated = await self._store.add_participant(code, Participant(user_id=user_id, username=username))
        if updated is not None:
            logger.info("User %s joined quiz %s", user_id, code)
            return JoinResult(quiz=updated, newly_joined=True)

        # Lost a race: another request joined this user or started the quiz.
        quiz = await self.get_quiz(code)
        self._ensure_waiting(quiz)
        if quiz.has_participant(user_id):
            return JoinResult(quiz=quiz, newly_joined=False)
        raise QuizNotFoundError(code)

    async def start_quiz(
        self,
        code: str | None,
        created_by: str | None = None,
        creator_name: str | None = None,
    ) -> Quiz:
        if not created_by and not creator_name:
            raise QuizValidationError("Missing required fields")
        require_fields(code=code)
        quiz = await self.get_quiz(code)
        if not self._is_creator(quiz, created_by, creator_name):
            raise QuizAuthorizationError("Only quiz creator can start the quiz")
        self._ensure_startable(quiz)

        updated = await self._store.activate(code, utc_now())
        if updated is None:
            self._ensure_startable(await self.get_quiz(code))
            raise QuizConflictError("Quiz cannot be started")
        logger.info("Quiz %s started with %d participant(s)", code, len(updated.participants))
        return updated

    async def submit_answer(
        self,
        code: str | None,
        user_id: str | None,
        question_index: int | None,
        answer: str | None,
    ) -> AnswerResult:
        require_fields(code=code)
        quiz = await self.get_quiz(code)
        self._ensure_active(quiz)
        if question_index is None or not 0 <= question_index < len(quiz.questions):
            raise QuizValidationError("Invalid question index")

        question = quiz.questions[question_index]
        is_correct = answer == question.correct_answer
        record = AnswerRecord(
            user_id=user_id,
            question_index=question_index,
            answer=answer,
            is_correct=is_correct,
        )
        if await self._store.append_answer(code, record) is None:
            self._ensure_active(await self.get_quiz(code))
            raise QuizConflictError("Quiz is not active")
        return AnswerResult(correct=is_correct, correct_answer=question.correct_answer)

    async def submit_score(self, code: str | None, user_id: str | None, score: float | None) -> int:
        require_fields(code=code)
        if user_id is None or score is None:
            raise QuizValidationError("Missing required fields")
        updated = await self._store.append_score(code, ScoreRecord(user_id=user_id, score=score))
        if updated is None:
            raise QuizNotFoundError(code)
        return current_rank(updated.scores, score)

    # --- Rules ---

    @staticmethod
    def _is_creator(quiz: Quiz, created_by: str | None, creator_name: str | None) -> bool:
        if created_by:
            return quiz.created_by == created_by
        if creator_name:
            return quiz.creator_name == creator_name
        return False

    @staticmethod
    def _ensure_waiting(quiz: Quiz) -> None:
        if quiz.status is not QuizStatus.WAITING:
            raise QuizConflictError("Quiz has already started")

    @staticmethod
    def _ensure_startable(quiz: Quiz) -> None:
        if quiz.status is QuizStatus.ACTIVE:
            raise QuizConflictError("Quiz is already started")
        if not quiz.participants:
            raise QuizConflictError("Cannot start quiz with no participants")

    @staticmethod
    def _ensure_active(quiz: Quiz) -> None:
        if quiz.status is not QuizStatus.ACTIVE:
            raise QuizConflictError("Quiz is not active")

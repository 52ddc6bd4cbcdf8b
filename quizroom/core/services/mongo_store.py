"""MongoDB-backed quiz store."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from quizroom.core.errors import DuplicateJoinCodeError, QuizPersistenceError
from quizroom.core.models import AnswerRecord, Participant, Quiz, QuizStatus, ScoreRecord
from quizroom.core.services.quiz_store import QuizStore

logger = logging.getLogger(__name__)

# Documents written before the lobby state was renamed still say "pending".
_WAITING_VALUES = [QuizStatus.WAITING.value, "pending"]


class MongoQuizStore(QuizStore):
    """Stores one document per quiz and relies on conditional updates for atomicity."""

    def __init__(self, collection: AsyncIOMotorCollection, client: AsyncIOMotorClient | None = None) -> None:
        self._collection = collection
        self._client = client

    @classmethod
    def from_url(cls, url: str, database: str, collection: str) -> "MongoQuizStore":
        client = AsyncIOMotorClient(url, tz_aware=True)
        return cls(client[database][collection], client=client)

    async def ensure_indexes(self) -> None:
        try:
            await self._collection.create_index([("code", ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise QuizPersistenceError("Failed to prepare quiz collection", details=str(exc)) from exc

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()

    async def insert(self, quiz: Quiz) -> None:
        try:
            await self._collection.insert_one(quiz.to_document())
        except DuplicateKeyError as exc:
            raise DuplicateJoinCodeError(quiz.code) from exc
        except PyMongoError as exc:
            raise QuizPersistenceError("Failed to create quiz", details=str(exc)) from exc

    async def find_by_code(self, code: str) -> Quiz | None:
        try:
            document = await self._collection.find_one({"code": code})
        except PyMongoError as exc:
            raise QuizPersistenceError("Failed to fetch quiz", details=str(exc)) from exc
        return Quiz.from_document(document) if document else None

    async def list_all(self) -> list[Quiz]:
        try:
            documents = await self._collection.find({}).to_list(length=None)
        except PyMongoError as exc:
            raise QuizPersistenceError("Failed to fetch quizzes", details=str(exc)) from exc
        return [Quiz.from_document(document) for document in documents]

    async def add_participant(self, code: str, participant: Participant) -> Quiz | None:
        return await self._update(
            {
                "code": code,
                "status": {"$in": _WAITING_VALUES},
                "participants.userId": {"$ne": participant.user_id},
            },
            {"$push": {"participants": participant.to_document()}},
            failure="Failed to join quiz",
        )

    async def activate(self, code: str, start_time: datetime) -> Quiz | None:
        return await self._update(
            {
                "code": code,
                "status": {"$in": _WAITING_VALUES},
                "participants.0": {"$exists": True},
            },
            {"$set": {"status": QuizStatus.ACTIVE.value, "startTime": start_time}},
            failure="Failed to start quiz",
        )

    async def append_answer(self, code: str, answer: AnswerRecord) -> Quiz | None:
        return await self._update(
            {"code": code, "status": QuizStatus.ACTIVE.value},
            {"$push": {"answers": answer.to_document()}},
            failure="Failed to submit answer",
        )

    async def append_score(self, code: str, score: ScoreRecord) -> Quiz | None:
        return await self._update(
            {"code": code},
            {"$push": {"scores": score.to_document()}},
            failure="Failed to submit score",
        )

    async def _update(self, query: dict[str, Any], update: dict[str, Any], failure: str) -> Quiz | None:
        try:
            document = await self._collection.find_one_and_update(
                query,
                update,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            logger.error("%s for query %s", failure, query, exc_info=True)
            raise QuizPersistenceError(failure, details=str(exc)) from exc
        return Quiz.from_document(document) if document else None

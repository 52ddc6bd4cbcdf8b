"""Builds the configured quiz store."""

from __future__ import annotations

from quizroom.constants.storage_constants import STORE_BACKEND_MEMORY, STORE_BACKEND_MONGO
from quizroom.core.config import Settings
from quizroom.core.services.quiz_store import InMemoryQuizStore, QuizStore


def create_store(settings: Settings) -> QuizStore:
    backend = settings.store_backend.lower()
    if backend == STORE_BACKEND_MEMORY:
        return InMemoryQuizStore()
    if backend == STORE_BACKEND_MONGO:
        # Imported lazily so the in-memory backend does not open a Mongo client.
        from quizroom.core.services.mongo_store import MongoQuizStore

        return MongoQuizStore.from_url(
            settings.mongo_url,
            database=settings.mongo_database,
            collection=settings.mongo_collection,
        )
    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")

"""Runtime settings for the quiz service, loaded from the environment."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from quizroom.constants.network_constants import DEFAULT_API_PREFIX, DEFAULT_HOST, DEFAULT_PORT
from quizroom.constants.quiz_constants import JOIN_CODE_MAX_ATTEMPTS
from quizroom.constants.storage_constants import (
    DEFAULT_MONGO_COLLECTION,
    DEFAULT_MONGO_DATABASE,
    DEFAULT_MONGO_URL,
    DEFAULT_STORE_BACKEND,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="QUIZROOM_", env_file=".env", extra="ignore")

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    api_prefix: str = DEFAULT_API_PREFIX
    log_level: str = "INFO"

    store_backend: str = Field(default=DEFAULT_STORE_BACKEND, description="memory or mongo")
    mongo_url: str = DEFAULT_MONGO_URL
    mongo_database: str = DEFAULT_MONGO_DATABASE
    mongo_collection: str = DEFAULT_MONGO_COLLECTION

    code_max_attempts: int = Field(default=JOIN_CODE_MAX_ATTEMPTS, ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()

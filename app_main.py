"""Application entry point for the QuizRoom service."""

from __future__ import annotations

from quizroom.constants.about import APP_NAME, APP_VERSION
from quizroom.core.code_generator import JoinCodeGenerator
from quizroom.core.config import get_settings
from quizroom.core.quiz_manager import QuizManager
from quizroom.core.services.store_factory import create_store
from quizroom.server.api_server import run_api_server
from quizroom.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, build the quiz manager, and serve the API."""
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting %s %s with the %s store", APP_NAME, APP_VERSION, settings.store_backend)

    quiz_manager = QuizManager(
        store=create_store(settings),
        code_generator=JoinCodeGenerator(),
        max_code_attempts=settings.code_max_attempts,
    )
    logger.info("Quiz API available at http://%s:%d%s", settings.host, settings.port, settings.api_prefix)
    run_api_server(
        quiz_manager,
        host=settings.host,
        port=settings.port,
        api_prefix=settings.api_prefix,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()

"""Exceptions raised by the quiz lifecycle service and its stores."""

from __future__ import annotations


class QuizServiceError(Exception):
    """Base class for errors reported back to the caller."""


class QuizValidationError(QuizServiceError):
    """Raised when request input is missing or malformed."""


class QuizNotFoundError(QuizServiceError):
    """Raised when no quiz exists for a join code."""

    def __init__(self, code: str) -> None:
        super().__init__("Quiz not found")
        self.code = code


class QuizAuthorizationError(QuizServiceError):
    """Raised when the caller is not the quiz creator."""


class QuizConflictError(QuizServiceError):
    """Raised when the quiz status does not permit the requested transition."""


class QuizPersistenceError(QuizServiceError):
    """Raised when the document store fails."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.details = details


class DuplicateJoinCodeError(QuizPersistenceError):
    """Raised by a store when a join code is already taken."""

    def __init__(self, code: str) -> None:
        super().__init__("Join code already in use", details=code)
        self.code = code


class JoinCodeExhaustedError(QuizPersistenceError):
    """Raised when no free join code was found within the attempt budget."""

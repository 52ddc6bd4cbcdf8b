"""Validation and normalization of incoming quiz definitions."""

from __future__ import annotations

import math
from typing import Any

from quizroom.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_SECONDS,
    MIN_MULTIPLE_CHOICE_OPTIONS,
    MULTIPLE_CHOICE_TYPE,
)
from quizroom.core.errors import QuizValidationError
from quizroom.core.models import Question


def require_fields(**values: Any) -> None:
    """Raise QuizValidationError if any value is None or an empty string/list."""
    missing = [name for name, value in values.items() if _is_blank(value)]
    if missing:
        raise QuizValidationError("Missing required fields")


def build_questions(raw_questions: Any) -> list[Question]:
    if not isinstance(raw_questions, list) or not raw_questions:
        raise QuizValidationError("Quiz must contain at least one question")
    return [_build_question(raw, position) for position, raw in enumerate(raw_questions, start=1)]


def _build_question(raw: Any, position: int) -> Question:
    if not isinstance(raw, dict):
        raise QuizValidationError(f"Question {position} has an invalid format")

    text = raw.get("text")
    question_type = raw.get("type")
    correct_answer = raw.get("correctAnswer")
    if _is_blank(text) or _is_blank(question_type) or _is_blank(correct_answer):
        raise QuizValidationError(f"Question {position} is missing text, type or correctAnswer")

    options = _validate_options(raw.get("options"), position)
    if question_type == MULTIPLE_CHOICE_TYPE and len(options) < MIN_MULTIPLE_CHOICE_OPTIONS:
        raise QuizValidationError(
            f"Question {position} needs at least {MIN_MULTIPLE_CHOICE_OPTIONS} options"
        )

    return Question(
        text=str(text),
        type=str(question_type),
        correct_answer=str(correct_answer),
        options=options,
        time_limit=_normalize_time_limit(raw.get("timeLimit"), position),
    )


def _validate_options(options: Any, position: int) -> list[str]:
    if options is None:
        return []
    if not isinstance(options, list):
        raise QuizValidationError(f"Question {position} options must be a list")
    return [_option_text(option, position) for option in options]


def _option_text(option: Any, position: int) -> str:
    if isinstance(option, str):
        return option
    if isinstance(option, bool) or not isinstance(option, (int, float)):
        raise QuizValidationError(f"Question {position} options must be strings or numbers")
    if isinstance(option, float) and option.is_integer():
        return str(int(option))
    return str(option)


def _normalize_time_limit(time_limit: Any, position: int) -> int:
    """Falsy limits fall back to the default; fractional seconds round up."""
    if not time_limit:
        return DEFAULT_TIME_LIMIT_SECONDS
    if isinstance(time_limit, bool):
        raise QuizValidationError(f"Question {position} time limit must be a number of seconds")
    try:
        seconds = float(time_limit)
    except (TypeError, ValueError) as exc:
        raise QuizValidationError(f"Question {position} time limit must be a number of seconds") from exc
    if not math.isfinite(seconds) or seconds < 0:
        raise QuizValidationError(f"Question {position} time limit must be a positive number")
    return math.ceil(seconds) or DEFAULT_TIME_LIMIT_SECONDS



def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False

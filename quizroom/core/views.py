"""Response shaping for quizzes. Only the admin view carries correct answers."""

from __future__ import annotations

from typing import Any

from quizroom.core.models import Question, Quiz


def sanitize_question(question: Question) -> dict[str, Any]:
    return {
        "text": question.text,
        "type": question.type,
        "options": list(question.options),
        "timeLimit": question.time_limit,
    }


def sanitize_questions(quiz: Quiz) -> list[dict[str, Any]]:
    return [sanitize_question(question) for question in quiz.questions]


def public_view(quiz: Quiz, caller_id: str | None = None) -> dict[str, Any]:
    return {
        "code": quiz.code,
        "title": quiz.title,
        "category": quiz.category,
        "questions": sanitize_questions(quiz),
        "status": quiz.status.value,
        "participantCount": len(quiz.participants),
        "creatorName": quiz.creator_name,
        "createdBy": quiz.created_by,
        "isCreator": caller_id is not None and quiz.created_by == caller_id,
    }


def participant_view(quiz: Quiz) -> dict[str, Any]:
    """View returned to a participant after joining."""
    return {
        "code": quiz.code,
        "title": quiz.title,
        "category": quiz.category,
        "questions": sanitize_questions(quiz),
        "participants": [p.to_document() for p in quiz.participants],
        "participantCount": len(quiz.participants),
        "status": quiz.status.value,
        "creatorName": quiz.creator_name,
        "createdBy": quiz.created_by,
    }


def summary_view(quiz: Quiz) -> dict[str, Any]:
    return {
        "code": quiz.code,
        "title": quiz.title,
        "category": quiz.category,
        "status": quiz.status.value,
        "createdBy": quiz.created_by,
        "participantCount": len(quiz.participants),
    }


def admin_view(quiz: Quiz) -> dict[str, Any]:
    return quiz.to_document()

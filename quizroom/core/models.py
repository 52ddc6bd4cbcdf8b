"""Domain models for the quiz service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from quizroom.constants.quiz_constants import DEFAULT_TIME_LIMIT_SECONDS
from quizroom.core.errors import QuizPersistenceError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuizStatus(str, Enum):
    """Lifecycle states of a quiz. Only WAITING -> ACTIVE is ever taken."""

    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: str | None) -> "QuizStatus":
        # Older documents were written with "pending" for the lobby state.
        if value in (None, "", "pending"):
            return cls.WAITING
        try:
            return cls(value)
        except ValueError as exc:
            raise QuizPersistenceError("Stored quiz has an unknown status", details=repr(value)) from exc


@dataclass(slots=True)
class Question:
    """A timed question. Owned by its quiz and never edited after creation."""

    text: str
    type: str
    correct_answer: str
    options: list[str] = field(default_factory=list)
    time_limit: int = DEFAULT_TIME_LIMIT_SECONDS

    def to_document(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "type": self.type,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "timeLimit": self.time_limit,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Question":
        return cls(
            text=document.get("text", ""),
            type=document.get("type", ""),
            correct_answer=document.get("correctAnswer", ""),
            options=list(document.get("options") or []),
            time_limit=document.get("timeLimit") or DEFAULT_TIME_LIMIT_SECONDS,
        )


@dataclass(slots=True)
class Participant:
    """A user who joined the quiz while it was waiting."""

    user_id: str
    username: str
    score: float = 0

    def to_document(self) -> dict[str, Any]:
        return {"userId": self.user_id, "username": self.username, "score": self.score}

    @classmethod
    def from_document(cls, document: dict[str, Any] | str) -> "Participant":
        if isinstance(document, str):
            # Plain user ids from the set-of-ids document layout.
            return cls(user_id=document, username=document)
        return cls(
            user_id=document.get("userId", ""),
            username=document.get("username", ""),
            score=document.get("score", 0),
        )


@dataclass(slots=True)
class ScoreRecord:
    """A caller-reported final score. A user may submit more than one."""

    user_id: str
    score: float
    submitted_at: datetime = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        return {"userId": self.user_id, "score": self.score, "submittedAt": self.submitted_at}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "ScoreRecord":
        return cls(
            user_id=document.get("userId", ""),
            score=document.get("score", 0),
            submitted_at=document.get("submittedAt") or utc_now(),
        )


@dataclass(slots=True)
class AnswerRecord:
    """One submitted answer for one question."""

    user_id: str
    question_index: int
    answer: str
    is_correct: bool
    timestamp: datetime = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "questionIndex": self.question_index,
            "answer": self.answer,
            "isCorrect": self.is_correct,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "AnswerRecord":
        return cls(
            user_id=document.get("userId", ""),
            question_index=document.get("questionIndex", 0),
            answer=document.get("answer", ""),
            is_correct=bool(document.get("isCorrect", False)),
            timestamp=document.get("timestamp") or utc_now(),
        )


@dataclass(slots=True)
class Quiz:
    """Root document addressed by its join code."""

    code: str
    title: str
    category: str
    created_by: str
    creator_name: str
    questions: list[Question]
    status: QuizStatus = QuizStatus.WAITING
    participants: list[Participant] = field(default_factory=list)
    scores: list[ScoreRecord] = field(default_factory=list)
    answers: list[AnswerRecord] = field(default_factory=list)
    start_time: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)

    def has_participant(self, user_id: str) -> bool:
        return any(p.user_id == user_id for p in self.participants)

    def to_document(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "title": self.title,
            "category": self.category,
            "createdBy": self.created_by,
            "creatorName": self.creator_name,
            "status": self.status.value,
            "questions": [q.to_document() for q in self.questions],
            "participants": [p.to_document() for p in self.participants],
            "scores": [s.to_document() for s in self.scores],
            "answers": [a.to_document() for a in self.answers],
            "startTime": self.start_time,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Quiz":
        return cls(
            code=document["code"],
            title=document.get("title", ""),
            category=document.get("category", ""),
            created_by=document.get("createdBy", ""),
            creator_name=document.get("creatorName") or document.get("createdBy", ""),
            questions=[Question.from_document(q) for q in document.get("questions") or []],
            status=QuizStatus.parse(document.get("status")),
            participants=[Participant.from_document(p) for p in document.get("participants") or []],
            scores=[ScoreRecord.from_document(s) for s in document.get("scores") or []],
            answers=[AnswerRecord.from_document(a) for a in document.get("answers") or []],
            start_time=document.get("startTime"),
            created_at=document.get("createdAt") or utc_now(),
        )

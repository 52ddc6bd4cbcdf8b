"""Ranking helpers for submitted quiz scores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from quizroom.core.models import ScoreRecord


@dataclass(slots=True)
class LeaderboardRow:
    """Immutable snapshot returned to consumers."""

    rank: int
    user_id: str
    score: float
    submitted_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "score": self.score,
            "submittedAt": self.submitted_at,
            "rank": self.rank,
        }


def rank_scores(scores: list[ScoreRecord]) -> list[LeaderboardRow]:
    """Sort scores descending and number them from 1.

    Every submission is ranked on its own, so a user who submitted twice
    appears twice. Equal scores keep their submission order.
    """
    ordered = sorted(scores, key=lambda s: s.score, reverse=True)
    return [
        LeaderboardRow(
            rank=position + 1,
            user_id=record.user_id,
            score=record.score,
            submitted_at=record.submitted_at,
        )
        for position, record in enumerate(ordered)
    ]


def current_rank(scores: list[ScoreRecord], score: float) -> int:
    """One plus the number of recorded scores strictly greater than ``score``."""
    return sum(1 for record in scores if record.score > score) + 1

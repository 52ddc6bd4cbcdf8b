from datetime import datetime, timedelta, timezone

from quizroom.core.models import ScoreRecord
from quizroom.core.services.leaderboard import current_rank, rank_scores

_T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _scores(*pairs):
    return [
        ScoreRecord(user_id=user_id, score=score, submitted_at=_T0 + timedelta(seconds=i))
        for i, (user_id, score) in enumerate(pairs)
    ]


def test_rank_scores_descending():
    rows = rank_scores(_scores(("a", 50), ("b", 90), ("c", 70)))
    assert [(r.user_id, r.rank) for r in rows] == [("b", 1), ("c", 2), ("a", 3)]


def test_ties_keep_submission_order():
    rows = rank_scores(_scores(("early", 80), ("late", 80), ("low", 10)))
    assert [(r.user_id, r.rank) for r in rows] == [("early", 1), ("late", 2), ("low", 3)]


def test_repeated_user_is_ranked_per_submission():
    rows = rank_scores(_scores(("a", 10), ("a", 30)))
    assert [(r.user_id, r.score, r.rank) for r in rows] == [("a", 30, 1), ("a", 10, 2)]


def test_current_rank_counts_strictly_greater():
    scores = _scores(("a", 90), ("b", 70))
    assert current_rank(scores, 80) == 2
    assert current_rank(scores, 90) == 1
    assert current_rank(scores, 10) == 3
    assert current_rank([], 0) == 1

"""Document store abstraction and the in-process implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from datetime import datetime
from threading import Lock

from quizroom.core.errors import DuplicateJoinCodeError
from quizroom.core.models import AnswerRecord, Participant, Quiz, QuizStatus, ScoreRecord


class QuizStore(ABC):
    """Persistence boundary for quizzes, addressed by the unique join code.

    Every mutating method is a single atomic operation. Conditional methods
    return the updated quiz, or None when the quiz is missing or the
    condition no longer holds; the caller re-reads to tell the two apart.
    """

    async def ensure_indexes(self) -> None:
        """Prepare the backing store. No-op unless the backend needs it."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def insert(self, quiz: Quiz) -> None:
        """Persist a new quiz, raising DuplicateJoinCodeError if the code is taken."""

    @abstractmethod
    async def find_by_code(self, code: str) -> Quiz | None: ...

    @abstractmethod
    async def list_all(self) -> list[Quiz]: ...

    @abstractmethod
    async def add_participant(self, code: str, participant: Participant) -> Quiz | None:
        """Append a participant if the quiz is waiting and the user has not joined."""

    @abstractmethod
    async def activate(self, code: str, start_time: datetime) -> Quiz | None:
        """Move a waiting quiz with at least one participant to active."""

    @abstractmethod
    async def append_answer(self, code: str, answer: AnswerRecord) -> Quiz | None:
        """Append an answer record if the quiz is active."""

    @abstractmethod
    async def append_score(self, code: str, score: ScoreRecord) -> Quiz | None: ...


class InMemoryQuizStore(QuizStore):
    """Lock-guarded dictionary of quizzes. Reads and writes go through copies."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._quizzes: dict[str, Quiz] = {}

    async def insert(self, quiz: Quiz) -> None:
        with self._lock:
            if quiz.code in self._quizzes:
                raise DuplicateJoinCodeError(quiz.code)
            self._quizzes[quiz.code] = copy.deepcopy(quiz)

    async def find_by_code(self, code: str) -> Quiz | None:
        with self._lock:
            quiz = self._quizzes.get(code)
            return copy.deepcopy(quiz) if quiz is not None else None

    async def list_all(self) -> list[Quiz]:
        with self._lock:
            return [copy.deepcopy(quiz) for quiz in self._quizzes.values()]

    async def add_participant(self, code: str, participant: Participant) -> Quiz | None:
        with self._lock:
            quiz = self._quizzes.get(code)
            if quiz is None or quiz.status is not QuizStatus.WAITING:
                return None
            if quiz.has_participant(participant.user_id):
                return None
            quiz.participants.append(copy.deepcopy(participant))
            return copy.deepcopy(quiz)

    async def activate(self, code: str, start_time: datetime) -> Quiz | None:
        with self._lock:
            quiz = self._quizzes.get(code)
            if quiz is None or quiz.status is not QuizStatus.WAITING or not quiz.participants:
                return None
            quiz.status = QuizStatus.ACTIVE
            quiz.start_time = start_time
            return copy.deepcopy(quiz)

    async def append_answer(self, code: str, answer: AnswerRecord) -> Quiz | None:
        with self._lock:
            quiz = self._quizzes.get(code)
            if quiz is None or quiz.status is not QuizStatus.ACTIVE:
                return None
            quiz.answers.append(copy.deepcopy(answer))
            return copy.deepcopy(quiz)

    async def append_score(self, code: str, score: ScoreRecord) -> Quiz | None:
        with self._lock:
            quiz = self._quizzes.get(code)
            if quiz is None:
                return None
            quiz.scores.append(copy.deepcopy(score))
            return copy.deepcopy(quiz)

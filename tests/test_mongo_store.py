from fastapi.testclient import TestClient
import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from quizroom.core.errors import DuplicateJoinCodeError, QuizPersistenceError
from quizroom.core.models import AnswerRecord, Participant, Question, Quiz, QuizStatus, ScoreRecord, utc_now
from quizroom.core.quiz_manager import QuizManager
from quizroom.core.services.mongo_store import MongoQuizStore
from quizroom.server.api_server import create_api_app


class _FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    async def to_list(self, length=None):
        return list(self._documents)


class _FakeCollection:
    """Records calls and replays canned results, in the shape motor returns."""

    def __init__(self, result=None, error=None):
        self.calls = []
        self._result = result
        self._error = error

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self._error is not None:
            raise self._error

    async def create_index(self, keys, **kwargs):
        self._record("create_index", keys, **kwargs)

    async def insert_one(self, document):
        self._record("insert_one", document)

    async def find_one(self, query):
        self._record("find_one", query)
        return self._result

    def find(self, query):
        self._record("find", query)
        return _FakeCursor(self._result or [])

    async def find_one_and_update(self, query, update, **kwargs):
        self._record("find_one_and_update", query, update, **kwargs)
        return self._result


def _quiz(**changes):
    quiz = Quiz(
        code="ABC123",
        title="T",
        category="C",
        created_by="u1",
        creator_name="u1",
        questions=[Question(text="Q1", type="multiple", correct_answer="A", options=["A", "B"])],
    )
    for name, value in changes.items():
        setattr(quiz, name, value)
    return quiz


@pytest.mark.asyncio
async def test_ensure_indexes_makes_code_unique():
    collection = _FakeCollection()
    await MongoQuizStore(collection).ensure_indexes()
    name, args, kwargs = collection.calls[0]
    assert name == "create_index"
    assert args[0] == [("code", 1)]
    assert kwargs["unique"] is True


@pytest.mark.asyncio
async def test_insert_maps_duplicate_key():
    store = MongoQuizStore(_FakeCollection(error=DuplicateKeyError("E11000 duplicate key")))
    with pytest.raises(DuplicateJoinCodeError):
        await store.insert(_quiz())


@pytest.mark.asyncio
async def test_driver_errors_become_persistence_errors():
    store = MongoQuizStore(_FakeCollection(error=ServerSelectionTimeoutError("no servers")))
    with pytest.raises(QuizPersistenceError) as excinfo:
        await store.find_by_code("ABC123")
    assert "no servers" in excinfo.value.details


@pytest.mark.asyncio
async def test_find_by_code_reads_document():
    document = _quiz().to_document()
    document["_id"] = "ignored"
    store = MongoQuizStore(_FakeCollection(result=document))
    quiz = await store.find_by_code("ABC123")
    assert quiz.code == "ABC123"
    assert await MongoQuizStore(_FakeCollection()).find_by_code("ABC123") is None


@pytest.mark.asyncio
async def test_add_participant_is_conditional_push():
    joined = _quiz(participants=[Participant(user_id="u2", username="Bob")])
    collection = _FakeCollection(result=joined.to_document())
    quiz = await MongoQuizStore(collection).add_participant("ABC123", Participant(user_id="u2", username="Bob"))

    _, (query, update), _ = collection.calls[0]
    assert query["code"] == "ABC123"
    assert query["participants.userId"] == {"$ne": "u2"}
    assert "waiting" in query["status"]["$in"]
    assert update == {"$push": {"participants": {"userId": "u2", "username": "Bob", "score": 0}}}
    assert quiz.participants[0].user_id == "u2"


@pytest.mark.asyncio
async def test_activate_requires_waiting_quiz_with_participants():
    collection = _FakeCollection(result=None)
    started_at = utc_now()
    assert await MongoQuizStore(collection).activate("ABC123", started_at) is None

    _, (query, update), _ = collection.calls[0]
    assert query["participants.0"] == {"$exists": True}
    assert update == {"$set": {"status": "active", "startTime": started_at}}


@pytest.mark.asyncio
async def test_append_score_pushes_record():
    record = ScoreRecord(user_id="u2", score=42)
    collection = _FakeCollection(result=_quiz(scores=[record]).to_document())
    quiz = await MongoQuizStore(collection).append_score("ABC123", record)

    _, (query, update), _ = collection.calls[0]
    assert query == {"code": "ABC123"}
    assert update["$push"]["scores"]["score"] == 42
    assert quiz.scores[0].score == 42


@pytest.mark.asyncio
async def test_list_all_reads_every_document():
    collection = _FakeCollection(result=[_quiz().to_document(), _quiz(code="XYZ789").to_document()])
    quizzes = await MongoQuizStore(collection).list_all()
    assert [q.code for q in quizzes] == ["ABC123", "XYZ789"]


@pytest.mark.asyncio
async def test_append_answer_only_targets_active_quiz():
    record = AnswerRecord(user_id="u2", question_index=0, answer="A", is_correct=True)
    collection = _FakeCollection(result=_quiz(status=QuizStatus.ACTIVE, answers=[record]).to_document())
    quiz = await MongoQuizStore(collection).append_answer("ABC123", record)

    _, (query, update), kwargs = collection.calls[0]
    assert query == {"code": "ABC123", "status": "active"}
    assert update["$push"]["answers"] == {
        "userId": "u2",
        "questionIndex": 0,
        "answer": "A",
        "isCorrect": True,
        "timestamp": record.timestamp,
    }
    assert kwargs["return_document"] is not None
    assert quiz.answers[0].is_correct is True


@pytest.mark.asyncio
async def test_append_answer_on_inactive_quiz_returns_none():
    record = AnswerRecord(user_id="u2", question_index=0, answer="A", is_correct=True)
    assert await MongoQuizStore(_FakeCollection(result=None)).append_answer("ABC123", record) is None


def test_unknown_stored_status_is_reported_as_json_error():
    document = _quiz().to_document()
    document["status"] = "finished"
    manager = QuizManager(store=MongoQuizStore(_FakeCollection(result=document)))
    with TestClient(create_api_app(manager, api_prefix="/api/quiz")) as client:
        r = client.get("/api/quiz/ABC123")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Stored quiz has an unknown status"
    assert "finished" in body["details"]

import pytest
from fastapi.testclient import TestClient

from quizroom.core.code_generator import JoinCodeGenerator
from quizroom.core.quiz_manager import QuizManager
from quizroom.core.services.quiz_store import InMemoryQuizStore
from quizroom.server.api_server import create_api_app

API = "/api/quiz"


def sample_questions():
    return [
        {"text": "Q1", "type": "multiple", "options": ["A", "B"], "correctAnswer": "A"},
        {"text": "What is **2 + 2**?", "type": "multiple", "options": ["3", "4", "5"], "correctAnswer": "4", "timeLimit": 15},
        {"text": "Name the capital of France", "type": "text", "correctAnswer": "Paris"},
    ]


@pytest.fixture()
def store():
    return InMemoryQuizStore()


@pytest.fixture()
def manager(store):
    return QuizManager(store=store, code_generator=JoinCodeGenerator(seed=1234))


@pytest.fixture()
def client(manager):
    app = create_api_app(manager, api_prefix=API)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def quiz_code(client):
    r = client.post(
        f"{API}/create",
        json={
            "title": "General knowledge",
            "category": "Trivia",
            "questions": sample_questions(),
            "createdBy": "u1",
            "creatorName": "Alice",
        },
    )
    assert r.status_code == 201
    return r.json()["code"]


@pytest.fixture()
def questions():
    return sample_questions()

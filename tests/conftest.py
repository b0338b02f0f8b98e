import json
import os

os.environ.setdefault("WEB_SESSION_SECRET", "test-secret")
os.environ.setdefault("AI_API_KEY", "test-key")
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("PUBLIC_BASE_URL", "http://quiz.internal:8000")

import httpx
import pytest
from fastapi.testclient import TestClient

from config import SELF_BASE_URL
from quizmaster.models.quiz import Question, QuizConfig, QuizSession
from quizmaster.services.llm import LLMClient
from quizmaster.services.quiz_client import QuizGenerationClient
from quizmaster.services.session_store import QuizSessionStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def make_question(i: int = 0, correct: int = 0) -> Question:
    return Question(
        question=f"Question {i + 1}?",
        options=[f"Q{i + 1} option {c}" for c in "ABCD"],
        correct_answer=correct,
        explanation=f"Because option {'ABCD'[correct]} is right.",
    )


def make_questions(correct):
    return [make_question(i, c) for i, c in enumerate(correct)]


def make_session(correct, mode="immediate", topic="Python") -> QuizSession:
    return QuizSession(
        config=QuizConfig(topic=topic, count=5, difficulty="medium"),
        questions=make_questions(correct),
        mode=mode,
    )


def tool_call_response(questions, name="create_mcqs"):
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {
                                "name": name,
                                "arguments": json.dumps({"questions": questions}),
                            },
                        }
                    ],
                }
            }
        ]
    }


class Recorder:
    """Mock transport handler that records every request it sees."""

    def __init__(self, responder):
        self.responder = responder
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wire_questions():
    return [q.to_dict() for q in make_questions([1, 2])]


@pytest.fixture
def app_state():
    from quizmaster.web.main import app

    saved = dict(app.state._state)
    app.state.sessions = QuizSessionStore()
    yield app
    app.state._state.clear()
    app.state._state.update(saved)


@pytest.fixture
def client(app_state):
    with TestClient(app_state) as c:
        yield c


@pytest.fixture
def use_endpoint(app_state):
    """Point the page flow at a fake generation endpoint."""

    def _install(responder) -> Recorder:
        rec = Recorder(responder)
        app_state.state.quiz_client = QuizGenerationClient(
            self_url=SELF_BASE_URL, transport=httpx.MockTransport(rec)
        )
        return rec

    return _install


@pytest.fixture
def use_upstream(app_state):
    """Point the generation API at a fake chat-completion server."""

    def _install(responder, *, api_key="test-key", provider="openai") -> Recorder:
        rec = Recorder(responder)
        app_state.state.llm = LLMClient(
            base_url="https://llm.test/v1",
            default_model="test-model",
            api_key=api_key,
            transport=httpx.MockTransport(rec),
        )
        app_state.state.llm_provider = provider
        return rec

    return _install

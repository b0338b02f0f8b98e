import asyncio

import httpx
import pytest

from quizmaster.models.quiz import QuizConfig
from quizmaster.services.quiz_client import QuizClientError, QuizGenerationClient

from conftest import Recorder

CONFIG = QuizConfig(topic="Machine Learning", count=10, difficulty="easy")


def _run(responder, **kwargs):
    kwargs.setdefault("self_url", "http://quiz.local/")
    rec = Recorder(responder)
    client = QuizGenerationClient(transport=httpx.MockTransport(rec), **kwargs)
    return asyncio.run(client.generate(CONFIG)), rec


def _fails(responder):
    with pytest.raises(QuizClientError) as exc:
        _run(responder)
    return str(exc.value)


def test_single_post_with_config(wire_questions):
    questions, rec = _run(lambda r: httpx.Response(200, json={"questions": wire_questions}))

    assert len(questions) == 2
    assert questions[0].correct_answer == 1
    assert rec.calls == 1
    req = rec.requests[0]
    assert req.method == "POST"
    assert str(req.url) == "http://quiz.local/api/generate-mcqs"
    assert rec.last_json() == {"topic": "Machine Learning", "count": 10, "difficulty": "easy"}
    assert "Authorization" not in req.headers


def test_explicit_endpoint_and_key(wire_questions):
    _, rec = _run(
        lambda r: httpx.Response(200, json={"questions": wire_questions}),
        endpoint_url="https://functions.example/generate-mcqs",
        api_key="pk-123",
    )
    req = rec.requests[0]
    assert str(req.url) == "https://functions.example/generate-mcqs"
    assert req.headers["Authorization"] == "Bearer pk-123"


def test_error_field_is_surfaced_verbatim():
    msg = _fails(lambda r: httpx.Response(429, json={"error": "Rate limit exceeded. Please try again in a moment."}))
    assert msg == "Rate limit exceeded. Please try again in a moment."


def test_non_2xx_without_error_field():
    assert _fails(lambda r: httpx.Response(502, text="bad gateway")) == "Failed to generate quiz"


@pytest.mark.parametrize("body", [{"questions": []}, {}, {"questions": None}])
def test_empty_question_list(body):
    assert _fails(lambda r: httpx.Response(200, json=body)) == "No questions generated"


def test_malformed_questions():
    body = {"questions": [{"question": "Q", "options": ["a"], "correctAnswer": 0, "explanation": ""}]}
    assert _fails(lambda r: httpx.Response(200, json=body)) == "Failed to generate quiz. Please try again."


def test_network_error():
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    assert _fails(boom) == "Failed to generate quiz. Please try again."


def test_no_endpoint_and_no_self_url_makes_no_request():
    rec = Recorder(lambda r: httpx.Response(200, json={}))
    client = QuizGenerationClient(transport=httpx.MockTransport(rec))

    with pytest.raises(QuizClientError) as exc:
        asyncio.run(client.generate(CONFIG))

    assert str(exc.value) == "Failed to generate quiz. Please try again."
    assert rec.calls == 0

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from quizmaster.models.quiz import QuizConfig
from quizmaster.services.quiz_gen import QuizGenerationError, generate_mcqs
from quizmaster.web.core.deps import requires_api_key

log = logging.getLogger("quizmaster")

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/api/generate-mcqs")
async def generate(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        return _error("Request body must be JSON.", 400)
    if not isinstance(payload, dict):
        return _error("Request body must be a JSON object.", 400)

    try:
        config = QuizConfig.parse(
            payload.get("topic"),
            payload.get("count"),
            payload.get("difficulty"),
        )
    except ValueError as e:
        return _error(str(e), 400)

    llm = request.app.state.llm
    if requires_api_key(request.app.state.llm_provider) and not llm.api_key:
        log.error("Error generating MCQs: AI_API_KEY is not configured")
        return _error("AI_API_KEY is not configured", 500)

    try:
        questions = await generate_mcqs(llm, config)
    except QuizGenerationError as e:
        log.error("Error generating MCQs (%s): %s", e.status_code, e.message)
        return _error(e.message, e.status_code)
    except Exception as e:
        log.exception("Error generating MCQs")
        return _error(str(e) or "Unknown error", 500)

    return JSONResponse({"questions": [q.to_dict() for q in questions]})


@router.get("/health")
async def health_check():
    return {"status": "healthy"}

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from quizmaster.constants import GENERIC_CLIENT_ERROR
from quizmaster.models.quiz import Question, QuizConfig

log = logging.getLogger("quizmaster")

GENERATE_PATH = "/api/generate-mcqs"


class QuizClientError(Exception):
    """Single user-facing message for a failed generation attempt."""


class QuizGenerationClient:
    """
    Issues exactly one POST per generate() call to the generation endpoint.
    No retry, no backoff.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        *,
        self_url: str = "",
        api_key: str = "",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint_url = (endpoint_url or "").strip() or None
        self.self_url = (self_url or "").strip().rstrip("/")
        self.api_key = (api_key or "").strip()
        self.timeout = timeout
        self._transport = transport

    def resolve_url(self) -> str:
        if self.endpoint_url:
            return self.endpoint_url
        if not self.self_url:
            log.error("No generation endpoint configured (GENERATE_ENDPOINT_URL / PUBLIC_BASE_URL)")
            raise QuizClientError(GENERIC_CLIENT_ERROR)
        return self.self_url + GENERATE_PATH

    async def generate(self, config: QuizConfig) -> List[Question]:
        url = self.resolve_url()
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        timeout = httpx.Timeout(self.timeout) if self.timeout else httpx.Timeout(None)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                r = await client.post(url, headers=headers, json=config.to_payload())
        except httpx.HTTPError as e:
            log.error("Error generating quiz: %s: %s", type(e).__name__, e)
            raise QuizClientError(GENERIC_CLIENT_ERROR) from e

        try:
            data = r.json()
        except ValueError:
            data = None

        if not r.is_success:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            log.warning("Generation endpoint returned %s: %r", r.status_code, message)
            raise QuizClientError(str(message or "Failed to generate quiz"))

        if not isinstance(data, dict):
            raise QuizClientError(GENERIC_CLIENT_ERROR)

        raw = data.get("questions")
        if not raw:
            raise QuizClientError("No questions generated")
        if not isinstance(raw, list):
            raise QuizClientError(GENERIC_CLIENT_ERROR)

        try:
            return [Question.from_dict(item) for item in raw]
        except ValueError as e:
            log.error("Malformed question in generation response: %s", e)
            raise QuizClientError(GENERIC_CLIENT_ERROR) from e

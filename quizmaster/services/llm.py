import json
import logging
from typing import Any, Dict, List, Optional

import httpx

log = logging.getLogger("quizmaster")


class LLMError(Exception):
    """
    Upstream call failed. status_code is the upstream HTTP status,
    or None when the request never got a response.
    """

    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body or ""
        super().__init__(f"LLM error ({status_code}): {self.body[:500]}")


class LLMClient:
    """
    Client for an OpenAI-compatible /chat/completions API
    (OpenAI, Groq, or a local server such as Ollama).

    Supports:
    - plain chat completions
    - forced function calling (tools + tool_choice) returning parsed arguments
    """

    def __init__(
        self,
        base_url: str,
        default_model: str,
        *,
        api_key: str = "",
        timeout: float = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.default_model = default_model
        self.api_key = (api_key or "").strip()
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        *,
        model: Optional[str] = None,
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[Dict[str, Any]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        if not self.base_url:
            raise LLMError(None, "LLM misconfigured: missing base_url.")

        payload: Dict[str, Any] = {
            "model": model or self.default_model,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools
        if tool_choice:
            payload["tool_choice"] = tool_choice
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if temperature is not None:
            payload["temperature"] = temperature

        url = f"{self.base_url}/chat/completions"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(url, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            raise LLMError(None, f"{type(e).__name__}: {e}") from e

        if r.status_code >= 400:
            body = (r.text or "")[:500]
            log.error("AI gateway error: %s %s", r.status_code, body)
            raise LLMError(r.status_code, body)

        try:
            data = r.json()
        except ValueError as e:
            raise LLMError(r.status_code, "Non-JSON response from AI") from e

        if not isinstance(data, dict):
            raise LLMError(r.status_code, "Unexpected response shape from AI")
        return data

    async def call_tool(
        self,
        *,
        system: str,
        prompt: str,
        tool: Dict[str, Any],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Force a single function call and return its decoded arguments.

        Returns None when the model answered without calling the requested
        function, or when the arguments are not a JSON object.
        """
        name = tool["function"]["name"]

        data = await self.chat_completion(
            [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            model=model,
            tools=[tool],
            tool_choice={"type": "function", "function": {"name": name}},
            max_tokens=max_tokens,
            temperature=temperature,
        )

        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return None
        msg = choices[0].get("message") or {}
        calls = msg.get("tool_calls") or []
        if not calls or not isinstance(calls[0], dict):
            return None

        fn = calls[0].get("function") or {}
        if fn.get("name") != name:
            log.warning("Unexpected tool call: %r", fn.get("name"))
            return None

        raw_args = fn.get("arguments")
        if isinstance(raw_args, dict):
            return raw_args
        try:
            args = json.loads(raw_args or "")
        except (TypeError, ValueError):
            log.warning("Tool arguments are not valid JSON (first 300): %r", str(raw_args)[:300])
            return None
        return args if isinstance(args, dict) else None

from __future__ import annotations

import os
import secrets
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from fastapi.templating import Jinja2Templates

from config import (
    AI_API_KEY,
    AI_BASE_URL,
    AI_MODEL,
    CORS_ORIGINS,
    DEFAULT_FEEDBACK_MODE,
    GENERATE_ENDPOINT_KEY,
    GENERATE_ENDPOINT_URL,
    GENERATE_TIMEOUT,
    GROQ_API_KEY,
    GROQ_BASE_URL,
    GROQ_MODEL,
    IS_PROD,
    LLM_PROVIDER,
    LLM_TIMEOUT,
    LOCAL_BASE_URL,
    LOCAL_MODEL,
    SELF_BASE_URL,
    SESSION_MAX_AGE,
    WEB_SESSION_SECRET,
)
from quizmaster.constants import FEEDBACK_IMMEDIATE, FEEDBACK_MODES
from quizmaster.services.llm import LLMClient
from quizmaster.services.quiz_client import QuizGenerationClient
from quizmaster.services.session_store import QuizSessionStore
from quizmaster.utils.text import format_duration

SESSION_SECRET = WEB_SESSION_SECRET

# -----------------------------
# Paths
# -----------------------------
CORE_DIR = os.path.dirname(os.path.abspath(__file__))
WEB_DIR = os.path.abspath(os.path.join(CORE_DIR, ".."))  # quizmaster/web

TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", os.path.join(WEB_DIR, "templates"))
STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(WEB_DIR, "static"))


# -----------------------------
# LLM provider
# -----------------------------
def provider_settings(provider: str = LLM_PROVIDER) -> Tuple[str, str, str]:
    """(base_url, model, api_key) for the configured provider."""
    provider = (provider or "").strip().lower()
    if provider == "groq":
        return GROQ_BASE_URL, GROQ_MODEL, (GROQ_API_KEY or AI_API_KEY)
    if provider == "local":
        return LOCAL_BASE_URL, LOCAL_MODEL, ""
    return AI_BASE_URL, AI_MODEL, AI_API_KEY


def requires_api_key(provider: str = LLM_PROVIDER) -> bool:
    return (provider or "").strip().lower() != "local"


def build_llm() -> LLMClient:
    base_url, model, api_key = provider_settings()
    return LLMClient(
        base_url=base_url,
        default_model=model,
        api_key=api_key,
        timeout=LLM_TIMEOUT,
    )


def build_quiz_client() -> QuizGenerationClient:
    return QuizGenerationClient(
        GENERATE_ENDPOINT_URL or None,
        self_url=SELF_BASE_URL,
        api_key=GENERATE_ENDPOINT_KEY,
        timeout=GENERATE_TIMEOUT,
    )


def parse_origins(raw: str) -> List[str]:
    raw = (raw or "").strip()
    if not raw or raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


DEFAULT_MODE = DEFAULT_FEEDBACK_MODE if DEFAULT_FEEDBACK_MODE in FEEDBACK_MODES else FEEDBACK_IMMEDIATE
ORIGINS = parse_origins(CORS_ORIGINS)

# -----------------------------
# Singletons
# -----------------------------
templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["duration"] = format_duration
llm = build_llm()
quiz_client = build_quiz_client()
sessions = QuizSessionStore(max_age=SESSION_MAX_AGE)


# -----------------------------
# Session helpers
# -----------------------------
def sid(request: Request) -> str:
    s = request.session.get("sid")
    if not s:
        s = secrets.token_urlsafe(16)
        request.session["sid"] = s
    return s


def flash(request: Request, message: str, level: str = "error") -> None:
    request.session["flash"] = {"message": str(message), "level": level}


def pop_flash(request: Request) -> Optional[Dict[str, Any]]:
    return request.session.pop("flash", None)

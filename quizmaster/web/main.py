from __future__ import annotations

import os
import time
from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.status import HTTP_403_FORBIDDEN

from config import LLM_PROVIDER
from quizmaster.constants import APP_NAME, APP_VERSION
from quizmaster.web.core.deps import (
    DEFAULT_MODE,
    IS_PROD,
    ORIGINS,
    SESSION_MAX_AGE,
    SESSION_SECRET,
    STATIC_DIR,
    llm,
    quiz_client,
    sessions,
    templates,
)
from quizmaster.web.routes.api import router as api_router
from quizmaster.web.routes.pages import router as pages_router


# -----------------------------
# App
# -----------------------------
app = FastAPI(title=APP_NAME, version=APP_VERSION)

# -----------------------------
# Sessions
# -----------------------------
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    same_site="lax",
    https_only=bool(IS_PROD),    # True only in prod (HTTPS), False in local HTTP
    max_age=SESSION_MAX_AGE,
)

# -----------------------------
# CORS (generation endpoint may be called from another origin)
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=ORIGINS,
    allow_credentials=ORIGINS != ["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

# -----------------------------
# Static
# -----------------------------
os.makedirs(STATIC_DIR, exist_ok=True)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# shared state
app.state.templates = templates
app.state.llm = llm
app.state.llm_provider = LLM_PROVIDER
app.state.quiz_client = quiz_client
app.state.sessions = sessions
app.state.default_mode = DEFAULT_MODE
app.state.clock = time.monotonic


# -----------------------------
# CSRF origin guard (same-origin) for the HTML forms
# -----------------------------
@app.middleware("http")
async def csrf_same_host_guard(request: Request, call_next):
    if request.method == "POST" and not request.url.path.startswith("/api/"):
        origin = request.headers.get("origin")
        referer = request.headers.get("referer")
        base_host = urlparse(str(request.base_url)).netloc

        ok = True
        if origin:
            ok = urlparse(origin).netloc == base_host
        elif referer:
            ok = urlparse(referer).netloc == base_host

        if not ok:
            return Response("CSRF blocked", status_code=HTTP_403_FORBIDDEN)

    return await call_next(request)


# -----------------------------
# Security headers
# -----------------------------
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"

    csp = (
        "default-src 'self'; "
        "base-uri 'self'; "
        "object-src 'none'; "
        "frame-ancestors 'none'; "
        "img-src 'self' data:; "
        "style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; "
        "connect-src 'self';"
    )

    response.headers["Content-Security-Policy"] = csp
    return response


# -----------------------------
# Routes
# -----------------------------
app.include_router(api_router)
app.include_router(pages_router)

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from quizmaster.constants import (
    DEFAULT_COUNT,
    DEFAULT_DIFFICULTY,
    DIFFICULTY_CHOICES,
    FEEDBACK_MODES,
    QUESTION_COUNTS,
)
from quizmaster.models.quiz import QuizConfig, QuizSession
from quizmaster.services.quiz_client import QuizClientError
from quizmaster.services.scoring import summarize
from quizmaster.views.quiz_view import QuizView
from quizmaster.web.core.deps import flash, pop_flash, sid

log = logging.getLogger("quizmaster")

router = APIRouter()


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _current(request: Request) -> Optional[QuizSession]:
    return request.app.state.sessions.get(sid(request))


def _view(request: Request, session: QuizSession) -> QuizView:
    return QuizView(session, clock=request.app.state.clock)


# -----------------------------
# Setup
# -----------------------------
@router.get("/", response_class=HTMLResponse)
def setup_page(request: Request):
    session = _current(request)
    if session is not None:
        return _see_other("/results" if session.completed else "/quiz")

    templates = request.app.state.templates
    store = request.app.state.sessions

    return templates.TemplateResponse(
        request,
        "setup.html",
        {
            "flash": pop_flash(request),
            "counts": QUESTION_COUNTS,
            "difficulties": DIFFICULTY_CHOICES,
            "modes": FEEDBACK_MODES,
            "default_count": DEFAULT_COUNT,
            "default_difficulty": DEFAULT_DIFFICULTY,
            "default_mode": request.app.state.default_mode,
            "loading": store.is_generating(sid(request)),
        },
    )


@router.post("/quiz/start")
async def start_quiz(
    request: Request,
    topic: str = Form(""),
    count: str = Form(str(DEFAULT_COUNT)),
    difficulty: str = Form(DEFAULT_DIFFICULTY),
    mode: str = Form(""),
):
    key = sid(request)
    store = request.app.state.sessions

    try:
        config = QuizConfig.parse(topic, count, difficulty)
    except ValueError as e:
        flash(request, str(e))
        return _see_other("/")

    mode = (mode or "").strip().lower()
    if mode not in FEEDBACK_MODES:
        mode = request.app.state.default_mode

    token = store.begin_generation(key)
    if token is None:
        flash(request, "A quiz is already being generated.")
        return _see_other("/")

    try:
        questions = await request.app.state.quiz_client.generate(config)
    except QuizClientError as e:
        flash(request, str(e))
        return _see_other("/")
    finally:
        current = store.end_generation(key, token)

    if not current:
        log.info("Quiz discarded | topic=%r | restarted while generating", config.topic)
        return _see_other("/")

    session = QuizSession(config=config, questions=questions, mode=mode)
    _view(request, session).enter()
    store.put(key, session)

    log.info(
        "Quiz started | topic=%r | questions=%d | difficulty=%s | mode=%s",
        config.topic,
        len(questions),
        config.difficulty,
        mode,
    )
    return _see_other("/quiz")


# -----------------------------
# Question flow
# -----------------------------
@router.get("/quiz", response_class=HTMLResponse)
def question_page(request: Request):
    session = _current(request)
    if session is None:
        return _see_other("/")
    if session.completed:
        return _see_other("/results")

    view = _view(request, session)
    view.enter()

    templates = request.app.state.templates
    return templates.TemplateResponse(request, "question.html", view.build_context())


@router.post("/quiz/answer")
def answer(request: Request, choice: str = Form("")):
    session = _current(request)
    if session is None:
        return _see_other("/")
    try:
        idx = int(choice)
    except ValueError:
        return _see_other("/quiz")
    _view(request, session).pick(idx)
    return _see_other("/results" if session.completed else "/quiz")


@router.post("/quiz/next")
def next_question(request: Request):
    session = _current(request)
    if session is None:
        return _see_other("/")
    _view(request, session).go_next()
    return _see_other("/results" if session.completed else "/quiz")


@router.post("/quiz/skip")
def skip_question(request: Request):
    session = _current(request)
    if session is None:
        return _see_other("/")
    _view(request, session).skip()
    return _see_other("/results" if session.completed else "/quiz")


# -----------------------------
# Results
# -----------------------------
@router.get("/results", response_class=HTMLResponse)
def results_page(request: Request):
    session = _current(request)
    if session is None:
        return _see_other("/")
    if not session.completed:
        return _see_other("/quiz")

    templates = request.app.state.templates
    return templates.TemplateResponse(
        request,
        "results.html",
        {"summary": summarize(session)},
    )


@router.post("/restart")
def restart(request: Request):
    request.app.state.sessions.clear(sid(request))
    pop_flash(request)
    return _see_other("/")

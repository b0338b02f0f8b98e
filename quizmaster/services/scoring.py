from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from quizmaster.constants import GRADE_BANDS
from quizmaster.models.quiz import QuizSession
from quizmaster.utils.text import format_duration, round_half_up


@dataclass
class BreakdownItem:
    number: int
    question: str
    status: str  # correct | incorrect | skipped
    your_answer: Optional[str]
    correct_answer: str
    explanation: str
    seconds: Optional[int] = None

    @property
    def time_label(self) -> str:
        return format_duration(self.seconds)


@dataclass
class QuizSummary:
    topic: str
    total: int
    correct: int
    incorrect: int
    skipped: int
    percentage: int
    grade: str
    grade_tone: str
    timed: bool = False
    total_seconds: Optional[int] = None
    items: List[BreakdownItem] = field(default_factory=list)

    @property
    def total_time_label(self) -> str:
        return format_duration(self.total_seconds)

    @property
    def average_seconds(self) -> Optional[int]:
        if self.total_seconds is None or not self.total:
            return None
        return round_half_up(self.total_seconds / self.total)


def percentage(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(correct / total * 100)


def grade_for(pct: int) -> Tuple[str, str]:
    for threshold, label, tone in GRADE_BANDS:
        if pct >= threshold:
            return label, tone
    _, label, tone = GRADE_BANDS[-1]
    return label, tone


def summarize(session: QuizSession) -> QuizSummary:
    """
    Immediate mode: every non-correct question is incorrect.
    Deferred mode: unanswered questions count as skipped instead.
    """
    total = session.total
    items: List[BreakdownItem] = []
    correct = 0
    skipped = 0

    for i, q in enumerate(session.questions):
        picked = session.answers[i] if i < len(session.answers) else None
        seconds = session.time_taken[i] if i < len(session.time_taken) else None

        if picked is not None and picked == q.correct_answer:
            status = "correct"
            correct += 1
        elif picked is None and session.deferred:
            status = "skipped"
            skipped += 1
        else:
            status = "incorrect"

        your = None
        if picked is not None and 0 <= picked < len(q.options):
            your = q.options[picked]

        items.append(
            BreakdownItem(
                number=i + 1,
                question=q.question,
                status=status,
                your_answer=your,
                correct_answer=q.options[q.correct_answer],
                explanation=q.explanation,
                seconds=seconds if session.deferred else None,
            )
        )

    pct = percentage(correct, total)
    label, tone = grade_for(pct)

    total_seconds = None
    if session.deferred:
        total_seconds = sum(int(s or 0) for s in session.time_taken)

    return QuizSummary(
        topic=session.config.topic,
        total=total,
        correct=correct,
        incorrect=total - correct - skipped,
        skipped=skipped,
        percentage=pct,
        grade=label,
        grade_tone=tone,
        timed=session.deferred,
        total_seconds=total_seconds,
        items=items,
    )

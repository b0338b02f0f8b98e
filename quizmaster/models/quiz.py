from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from quizmaster.constants import (
    DIFFICULTIES,
    FEEDBACK_DEFERRED,
    FEEDBACK_IMMEDIATE,
    FEEDBACK_MODES,
    OPTION_COUNT,
    QUESTION_COUNTS,
)
from quizmaster.utils.text import clean_text


def _as_index(value: Any) -> int:
    # JSON "number" may arrive as 2.0
    if isinstance(value, bool):
        raise ValueError("correctAnswer must be a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("correctAnswer must be a whole number")
        return int(value)
    if isinstance(value, int):
        return value
    raise ValueError("correctAnswer must be a number")


@dataclass
class Question:
    question: str
    options: List[str]
    correct_answer: int
    explanation: str

    def __post_init__(self):
        if not (self.question or "").strip():
            raise ValueError("Question text is empty")
        if len(self.options) != OPTION_COUNT:
            raise ValueError(f"Question must have exactly {OPTION_COUNT} options")
        if not (0 <= self.correct_answer < OPTION_COUNT):
            raise ValueError("correct_answer out of range")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        if not isinstance(data, dict):
            raise ValueError("Question must be an object")
        options = data.get("options")
        if not isinstance(options, list):
            raise ValueError("options must be a list")
        return cls(
            question=str(data.get("question") or "").strip(),
            options=[str(o) for o in options],
            correct_answer=_as_index(data.get("correctAnswer")),
            explanation=str(data.get("explanation") or "").strip(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class QuizConfig:
    topic: str
    count: int
    difficulty: str

    @classmethod
    def parse(cls, topic: Any, count: Any, difficulty: Any) -> "QuizConfig":
        """
        Build a config from loosely typed input (form fields or JSON).
        Raises ValueError with a message that can be shown to the user.
        """
        t = clean_text(str(topic or ""))
        if not t:
            raise ValueError("Please enter a topic.")

        try:
            n = int(count)
        except (TypeError, ValueError):
            raise ValueError("Question count must be a number.")
        if n not in QUESTION_COUNTS:
            allowed = ", ".join(str(c) for c in QUESTION_COUNTS)
            raise ValueError(f"Question count must be one of {allowed}.")

        d = str(difficulty or "").strip().lower()
        if d not in DIFFICULTIES:
            raise ValueError("Difficulty must be easy, medium or hard.")

        return cls(topic=t, count=n, difficulty=d)

    def to_payload(self) -> Dict[str, Any]:
        return {"topic": self.topic, "count": self.count, "difficulty": self.difficulty}


@dataclass
class QuizSession:
    config: QuizConfig
    questions: List[Question]
    mode: str = FEEDBACK_IMMEDIATE
    current_index: int = 0
    answers: List[Optional[int]] = field(default_factory=list)
    time_taken: List[Optional[int]] = field(default_factory=list)
    question_started_at: Optional[float] = None
    completed: bool = False

    def __post_init__(self):
        if not self.questions:
            raise ValueError("QuizSession needs at least one question")
        if self.mode not in FEEDBACK_MODES:
            raise ValueError(f"Unknown feedback mode: {self.mode!r}")
        n = len(self.questions)
        if not self.answers:
            self.answers = [None] * n
        if not self.time_taken:
            self.time_taken = [None] * n

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def deferred(self) -> bool:
        return self.mode == FEEDBACK_DEFERRED

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index >= self.total - 1

    @property
    def screen(self) -> str:
        return "results" if self.completed else "quiz"

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from quizmaster.constants import OPTION_LABELS
from quizmaster.models.quiz import QuizSession
from quizmaster.utils.text import ellipsize, round_half_up

log = logging.getLogger("quizmaster")

NEXT_LABEL = "Next Question"
FINISH_LABEL = "See Results"
CONTINUE_LABEL = "Continue"
SKIP_LABEL = "Skip"

TOPIC_MAX = 80


class QuizView:
    """
    Question flow over a QuizSession.

    Immediate mode:
    - Answer -> locked, show correct/incorrect + explanation
    - Next -> next question, on the last one "See Results" completes the quiz

    Deferred mode:
    - Answer can be changed until the user advances
    - Continue (needs a selection) / Skip both record elapsed seconds and advance
    - No grading until the results screen
    """

    def __init__(self, session: QuizSession, *, clock: Callable[[], float] = time.monotonic):
        self.session = session
        self._clock = clock

    # -----------------------------
    # helpers / guards
    # -----------------------------
    @property
    def selected(self) -> Optional[int]:
        return self.session.answers[self.session.current_index]

    @property
    def answered(self) -> bool:
        return self.selected is not None

    def _valid_idx(self, idx: int) -> bool:
        return 0 <= idx < len(self.session.current_question.options)

    def enter(self) -> None:
        if self.session.completed:
            return
        if self.session.question_started_at is None:
            self.session.question_started_at = self._clock()

    def elapsed_seconds(self) -> int:
        started = self.session.question_started_at
        if started is None:
            return 0
        return max(0, int(self._clock() - started))

    def _record_time(self) -> None:
        s = self.session
        s.time_taken[s.current_index] = self.elapsed_seconds()

    def _advance(self) -> None:
        s = self.session
        if s.is_last:
            s.completed = True
            s.question_started_at = None
            log.debug("Quiz completed | topic=%r", s.config.topic)
            return
        s.current_index += 1
        s.question_started_at = self._clock()

    # -----------------------------
    # interactions
    # -----------------------------
    def pick(self, idx: int) -> bool:
        s = self.session
        if s.completed or not self._valid_idx(idx):
            return False

        if not s.deferred and self.answered:
            # locked after the first pick
            return False

        s.answers[s.current_index] = idx
        return True

    def go_next(self) -> bool:
        s = self.session
        if s.completed or not self.answered:
            return False

        if s.deferred:
            self._record_time()
        self._advance()
        return True

    def skip(self) -> bool:
        s = self.session
        if s.completed or not s.deferred:
            return False

        s.answers[s.current_index] = None
        self._record_time()
        self._advance()
        return True

    # -----------------------------
    # template context
    # -----------------------------
    def _option_state(self, i: int) -> str:
        s = self.session
        q = s.current_question
        if s.deferred:
            return "selected" if i == self.selected else "default"
        if not self.answered:
            return "default"
        if i == q.correct_answer:
            return "correct"
        if i == self.selected:
            return "incorrect"
        return "default"

    def build_context(self) -> Dict[str, Any]:
        s = self.session
        q = s.current_question
        number = s.current_index + 1

        options: List[Dict[str, Any]] = []
        for i, text in enumerate(q.options):
            options.append(
                {
                    "index": i,
                    "label": OPTION_LABELS[i],
                    "text": text,
                    "state": self._option_state(i),
                }
            )

        reveal = (not s.deferred) and self.answered
        is_correct = reveal and self.selected == q.correct_answer

        if s.deferred:
            action_label = FINISH_LABEL if s.is_last else CONTINUE_LABEL
        else:
            action_label = FINISH_LABEL if s.is_last else NEXT_LABEL

        return {
            "topic": ellipsize(s.config.topic, TOPIC_MAX),
            "difficulty": s.config.difficulty,
            "deferred": s.deferred,
            "question": q.question,
            "number": number,
            "total": s.total,
            "progress": round_half_up(number / s.total * 100),
            "options": options,
            "locked": reveal,
            "reveal": reveal,
            "is_correct": is_correct,
            "explanation": q.explanation if reveal else "",
            "can_advance": self.answered,
            "action_label": action_label,
            "skip_label": SKIP_LABEL,
            "elapsed": self.elapsed_seconds() if s.deferred else None,
        }

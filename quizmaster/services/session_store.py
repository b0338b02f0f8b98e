from __future__ import annotations

import itertools
import logging
import time
from typing import Callable, Dict, Optional, Tuple

from quizmaster.models.quiz import QuizSession

log = logging.getLogger("quizmaster")


class QuizSessionStore:
    """
    In-memory quiz state, keyed by the browser session id.
    Nothing survives a restart of the process.

    A quiz untouched for longer than max_age seconds is evicted; that is the
    same lifetime the session cookie gets, so nobody can come back to it.
    """

    def __init__(
        self,
        *,
        max_age: Optional[float] = 60 * 60 * 24,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_age = max_age
        self._clock = clock
        self._sessions: Dict[str, Tuple[QuizSession, float]] = {}
        self._generating: Dict[str, int] = {}
        self._tokens = itertools.count(1)

    def get(self, sid: str) -> Optional[QuizSession]:
        self.evict_expired()
        entry = self._sessions.get(sid)
        if entry is None:
            return None
        session = entry[0]
        self._sessions[sid] = (session, self._clock())
        return session

    def put(self, sid: str, session: QuizSession) -> None:
        self.evict_expired()
        self._sessions[sid] = (session, self._clock())

    def clear(self, sid: str) -> None:
        self._sessions.pop(sid, None)
        # a generation still in flight loses its token and won't be stored
        self._generating.pop(sid, None)

    def evict_expired(self) -> int:
        if not self.max_age:
            return 0
        cutoff = self._clock() - self.max_age
        stale = [k for k, (_, seen) in self._sessions.items() if seen < cutoff]
        for k in stale:
            del self._sessions[k]
        if stale:
            log.debug("Evicted %d idle quiz session(s)", len(stale))
        return len(stale)

    # -----------------------------
    # in-flight generation guard
    # -----------------------------
    def is_generating(self, sid: str) -> bool:
        return sid in self._generating

    def begin_generation(self, sid: str) -> Optional[int]:
        """Token for a new generation, or None if one is already running."""
        if sid in self._generating:
            return None
        token = next(self._tokens)
        self._generating[sid] = token
        return token

    def end_generation(self, sid: str, token: int) -> bool:
        """True when token was still current, i.e. nobody restarted meanwhile."""
        if self._generating.get(sid) != token:
            return False
        del self._generating[sid]
        return True

    def __len__(self) -> int:
        return len(self._sessions)

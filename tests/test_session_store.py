from quizmaster.services.session_store import QuizSessionStore
from quizmaster.utils.text import clean_text, ellipsize, format_duration

from conftest import make_session


def test_sessions_are_isolated_per_sid():
    store = QuizSessionStore()
    a, b = make_session([0]), make_session([1])
    store.put("a", a)
    store.put("b", b)

    assert store.get("a") is a
    assert store.get("b") is b

    store.clear("a")
    assert store.get("a") is None
    assert store.get("b") is b
    assert len(store) == 1


def test_generation_guard():
    store = QuizSessionStore()
    token = store.begin_generation("a")
    assert token is not None
    assert store.begin_generation("a") is None
    assert store.begin_generation("b") is not None
    assert store.is_generating("a")

    assert store.end_generation("a", token)
    assert not store.is_generating("a")
    assert store.begin_generation("a") is not None

    store.clear("a")
    assert not store.is_generating("a")


def test_restart_cancels_in_flight_generation():
    store = QuizSessionStore()
    stale = store.begin_generation("a")
    store.clear("a")

    fresh = store.begin_generation("a")
    assert not store.end_generation("a", stale)
    # the newer generation keeps its slot
    assert store.is_generating("a")
    assert store.end_generation("a", fresh)


def test_idle_sessions_are_evicted(clock):
    store = QuizSessionStore(max_age=100, clock=clock)
    store.put("idle", make_session([0]))
    store.put("busy", make_session([1]))

    clock.advance(60)
    assert store.get("busy") is not None

    clock.advance(60)
    assert store.get("idle") is None
    assert store.get("busy") is not None
    assert len(store) == 1


def test_eviction_can_be_disabled(clock):
    store = QuizSessionStore(max_age=None, clock=clock)
    store.put("a", make_session([0]))
    clock.advance(10 ** 9)
    assert store.evict_expired() == 0
    assert store.get("a") is not None


def test_text_helpers():
    assert format_duration(None) == "-"
    assert format_duration(0) == "0:00"
    assert format_duration(125) == "2:05"
    assert clean_text("  a\tb \x00 c ") == "a b c"
    assert ellipsize("abcdef", 4) == "abc…"
    assert ellipsize("abc", 4) == "abc"

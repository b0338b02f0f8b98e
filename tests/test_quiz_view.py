from quizmaster.views.quiz_view import CONTINUE_LABEL, FINISH_LABEL, NEXT_LABEL, QuizView

from conftest import FakeClock, make_session


# -----------------------------
# immediate feedback
# -----------------------------
def test_pick_locks_and_reveals():
    view = QuizView(make_session([1, 2]))

    assert view.pick(0)
    assert not view.pick(1)  # locked
    assert view.session.answers == [0, None]

    ctx = view.build_context()
    assert ctx["reveal"] and ctx["locked"]
    assert not ctx["is_correct"]
    assert [o["state"] for o in ctx["options"]] == ["incorrect", "correct", "default", "default"]
    assert ctx["explanation"] == "Because option B is right."
    assert ctx["action_label"] == NEXT_LABEL


def test_next_requires_an_answer():
    view = QuizView(make_session([1, 2]))
    assert not view.go_next()
    assert view.session.current_index == 0


def test_selection_recorded_at_index_and_last_advance_completes():
    view = QuizView(make_session([1, 2]))

    view.pick(1)
    assert view.go_next()
    assert view.session.current_index == 1
    assert view.build_context()["action_label"] == FINISH_LABEL

    view.pick(3)
    assert view.go_next()
    assert view.session.completed
    assert view.session.screen == "results"
    assert view.session.answers == [1, 3]
    assert not view.pick(0)


def test_out_of_range_pick_is_ignored():
    view = QuizView(make_session([0]))
    assert not view.pick(4)
    assert not view.pick(-1)
    assert view.session.answers == [None]


def test_skip_is_deferred_only():
    view = QuizView(make_session([0, 1]))
    assert not view.skip()
    assert view.session.current_index == 0


def test_progress_and_labels():
    view = QuizView(make_session([0, 1, 2]))
    ctx = view.build_context()
    assert (ctx["number"], ctx["total"], ctx["progress"]) == (1, 3, 33)
    assert [o["label"] for o in ctx["options"]] == ["A", "B", "C", "D"]
    assert ctx["elapsed"] is None


# -----------------------------
# deferred feedback
# -----------------------------
def test_deferred_selection_changeable_and_not_revealed():
    view = QuizView(make_session([1, 2], mode="deferred"), clock=FakeClock())
    view.enter()

    assert view.pick(0)
    assert view.pick(2)
    ctx = view.build_context()
    assert not ctx["reveal"]
    assert ctx["explanation"] == ""
    assert [o["state"] for o in ctx["options"]] == ["default", "default", "selected", "default"]
    assert ctx["action_label"] == CONTINUE_LABEL


def test_deferred_continue_and_skip_record_elapsed_seconds():
    clock = FakeClock()
    view = QuizView(make_session([1, 2, 3], mode="deferred"), clock=clock)
    view.enter()

    clock.advance(7.5)
    assert view.build_context()["elapsed"] == 7
    view.pick(1)
    assert view.go_next()

    clock.advance(3)
    view.pick(0)
    assert view.skip()  # drops the selection

    clock.advance(12)
    assert not view.go_next()  # continue needs a selection
    assert view.skip()

    s = view.session
    assert s.completed
    assert s.answers == [1, None, None]
    assert s.time_taken == [7, 3, 12]


def test_enter_stamps_only_once():
    clock = FakeClock()
    view = QuizView(make_session([0, 1], mode="deferred"), clock=clock)
    view.enter()
    clock.advance(5)
    view.enter()
    assert view.elapsed_seconds() == 5

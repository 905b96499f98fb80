import pytest

from conftest import answer_current
from quiz_taker.core.models import ErrorKind
from quiz_taker.core.services.quiz_session import NavigationState, QuizSession
from quiz_taker.core.services.scheduler import ManualTickScheduler
from quiz_taker.core.services.snapshot_store import InMemorySnapshotStore


class FailingStore(InMemorySnapshotStore):
    def save(self, snapshot):
        raise OSError("disk full")


def test_fresh_session_when_store_is_empty(session, definition):
    assert session.engine.remaining_sec == definition.time_limit_sec
    assert not session.is_finished
    assert not session.review_mode
    assert not session.timer_running


def test_session_resumes_saved_progress(definition, scheduler):
    store = InMemorySnapshotStore(
        {"current_index": 1, "answers": {"q2": 1}, "remaining_sec": 17, "is_finished": False}
    )

    session = QuizSession.open(definition, store, scheduler)

    assert session.engine.current_index == 1
    assert session.engine.answers == {"q2": 1}
    assert session.engine.remaining_sec == 17


def test_unusable_snapshot_starts_fresh(definition, scheduler):
    store = InMemorySnapshotStore({"answers": {"q1": "not a number"}})

    session = QuizSession.open(definition, store, scheduler)

    assert session.engine.answers == {}


def test_start_runs_the_countdown(session, scheduler, definition):
    session.start()
    assert session.timer_running

    scheduler.fire(3)

    assert session.engine.remaining_sec == definition.time_limit_sec - 3


def test_timer_expiry_finishes_and_stops(session, scheduler, store, definition):
    session.start()

    scheduler.fire(definition.time_limit_sec + 5)

    assert session.is_finished
    assert session.engine.remaining_sec == 0
    assert not session.timer_running
    assert store.load()["is_finished"] is True
    assert store.load()["summary"]["total"] == 2


def test_finished_session_does_not_start_timer(definition, scheduler):
    store = InMemorySnapshotStore({"is_finished": True, "remaining_sec": 0})
    session = QuizSession.open(definition, store, scheduler)

    session.start()

    assert not session.timer_running


def test_every_successful_action_is_persisted(session, store):
    session.select(0)
    assert store.save_count == 1
    session.next()
    assert store.save_count == 2
    assert store.load()["current_index"] == 1

    rejected = session.next()

    assert rejected.error is ErrorKind.OUT_OF_RANGE
    assert store.save_count == 2


def test_ticks_are_persisted(session, scheduler, store):
    session.start()
    scheduler.fire(2)

    assert store.save_count == 2
    assert store.load()["remaining_sec"] == session.engine.remaining_sec


def test_finish_persists_stops_and_returns_summary(session, store):
    session.start()
    answer_current(session.engine, correct=True)

    summary = session.finish()

    assert summary.correct == 1
    assert not session.timer_running
    assert store.load()["summary"]["correct"] == 1
    assert session.finish() is summary


def test_go_to_rejects_out_of_range(session):
    result = session.go_to(5)

    assert not result.ok
    assert result.error is ErrorKind.OUT_OF_RANGE


def test_navigation_state_follows_answers(session):
    assert session.navigation_state() == NavigationState(can_prev=False, can_next=False, can_finish=False)

    session.select(0)
    assert session.navigation_state() == NavigationState(can_prev=False, can_next=True, can_finish=False)

    session.next()
    assert session.navigation_state() == NavigationState(can_prev=True, can_next=False, can_finish=False)

    session.select(1)
    assert session.navigation_state() == NavigationState(can_prev=True, can_next=False, can_finish=True)

    session.finish()
    assert session.navigation_state() == NavigationState(can_prev=False, can_next=False, can_finish=False)


def test_review_requires_finished_session(session):
    result = session.enter_review()

    assert result.error is ErrorKind.NOT_FINISHED
    assert not session.review_mode

    session.finish()

    assert session.enter_review().ok
    assert session.review_mode


def test_restart_clears_store_and_starts_over(session, store, scheduler, definition):
    session.start()
    session.select(0)
    scheduler.fire(5)
    session.finish()
    session.enter_review()
    old_engine = session.engine

    session.restart()

    assert session.engine is not old_engine
    assert store.load() is None
    assert not session.is_finished
    assert not session.review_mode
    assert session.engine.answers == {}
    assert session.engine.remaining_sec == definition.time_limit_sec
    assert session.timer_running


def test_listeners_are_notified(session, scheduler):
    calls = []
    session.add_listener(lambda s: calls.append(s.engine.current_index))
    session.start()

    session.select(0)
    session.next()
    session.prev()
    session.prev()
    scheduler.fire()

    assert calls == [0, 1, 0, 0]


def test_store_failures_do_not_break_the_session(definition, caplog):
    session = QuizSession(definition, FailingStore(), ManualTickScheduler())

    assert session.select(0).ok
    assert "Could not save session progress" in caplog.text


def test_snapshot_is_a_copy(session):
    snapshot = session.snapshot()
    snapshot["answers"]["q1"] = 0

    assert session.engine.answers == {}


@pytest.mark.parametrize("option_index", [-1, 2])
def test_invalid_selection_is_reported(session, store, option_index):
    result = session.select(option_index)

    assert result.error is ErrorKind.INVALID_OPTION
    assert store.save_count == 0


def test_resumed_finished_session_gets_a_summary(definition, scheduler):
    store = InMemorySnapshotStore({"is_finished": True, "answers": {"q1": 1}})

    session = QuizSession.open(definition, store, scheduler)

    summary = session.engine.summary
    assert summary is not None
    expected = int(session.engine.question_by_id("q1").correct_index == 1)
    assert summary.correct == expected
    assert summary.total == 2
    assert session.finish() is summary


@pytest.mark.parametrize(
    "snapshot",
    [
        {"answers": ["q1", 0]},
        {"question_times": [5]},
    ],
)
def test_snapshot_with_wrong_container_types_starts_fresh(definition, scheduler, snapshot):
    session = QuizSession.open(definition, InMemorySnapshotStore(snapshot), scheduler)

    assert session.engine.answers == {}
    assert session.engine.question_times == {}

import random

import pytest

from quiz_taker.core.models import QuestionDefinition, QuizDefinition
from quiz_taker.core.quiz_engine import QuizEngine
from quiz_taker.core.services.quiz_session import QuizSession
from quiz_taker.core.services.scheduler import ManualTickScheduler
from quiz_taker.core.services.snapshot_store import InMemorySnapshotStore


class FakeClock:
    """Wall clock that only moves when a test advances it."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_definition(time_limit_sec: int = 60, pass_threshold: float = 0.7) -> QuizDefinition:
    return QuizDefinition(
        title="Test",
        time_limit_sec=time_limit_sec,
        pass_threshold=pass_threshold,
        questions=(
            QuestionDefinition(id="q1", text="A?", options=("1", "2"), correct_index=1),
            QuestionDefinition(id="q2", text="B?", options=("3", "4"), correct_index=0),
        ),
    )


def make_topic_definition() -> QuizDefinition:
    return QuizDefinition(
        title="Topics",
        time_limit_sec=120,
        pass_threshold=0.5,
        questions=(
            QuestionDefinition(id="a1", text="Alpha 1", options=("x", "y", "z"), correct_index=0, topic="alpha"),
            QuestionDefinition(id="a2", text="Alpha 2", options=("x", "y", "z"), correct_index=1, topic="alpha"),
            QuestionDefinition(id="b1", text="Beta 1", options=("x", "y"), correct_index=1, topic="beta"),
            QuestionDefinition(id="n1", text="No topic", options=("x", "y"), correct_index=0),
        ),
    )


def answer_current(engine: QuizEngine, correct: bool) -> int:
    """Select the correct (or a wrong) option of the current question and return its index."""
    question = engine.current_question
    index = question.correct_index if correct else (question.correct_index + 1) % len(question.options)
    result = engine.select(index)
    assert result.ok
    return index


@pytest.fixture
def definition() -> QuizDefinition:
    return make_definition()


@pytest.fixture
def topic_definition() -> QuizDefinition:
    return make_topic_definition()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(definition, rng, clock) -> QuizEngine:
    return QuizEngine(definition, rng=rng, clock=clock)


@pytest.fixture
def store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture
def session(definition, store, scheduler, rng, clock) -> QuizSession:
    return QuizSession.open(definition, store, scheduler, rng=rng, clock=clock)

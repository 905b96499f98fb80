"""Session state machine for a single quiz attempt.

The engine is pure synchronous state: callers drive it with user actions and a
once-per-second ``tick()``. Question and option order are randomized on
construction and never change afterwards. ``to_state()`` captures everything
except that order, so restoring needs the original definition as well; answers
and question times are always keyed by question id, never by position.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Mapping

from quiz_taker.core.models import (
    ActionResult,
    ErrorKind,
    Question,
    QuizDefinition,
    QuizDefinitionError,
    QuizSummary,
    TopicStat,
)
from quiz_taker.core.shuffle import shuffle_items

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class QuizEngine:
    """Owns navigation, answers, countdown, time accounting and scoring."""

    def __init__(
        self,
        definition: QuizDefinition,
        *,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> None:
        if not definition.questions:
            raise QuizDefinitionError("Quiz must contain at least one question.")
        self._definition = definition
        self._clock = clock
        questions = [Question.from_definition(q, rng) for q in definition.questions]
        self._questions: tuple[Question, ...] = tuple(shuffle_items(questions, rng))
        self._questions_by_id = {q.id: q for q in self._questions}

        self.current_index: int = 0
        self.answers: dict[str, int] = {}
        self.remaining_sec: int = definition.time_limit_sec
        self.is_finished: bool = False
        self.question_times: dict[str, int] = {}
        self._summary: QuizSummary | None = None
        # Wall-clock time of the last navigation; empty until the first one.
        self._last_visit: float | None = None

    # --- Read-only views ---

    @property
    def definition(self) -> QuizDefinition:
        return self._definition

    @property
    def title(self) -> str:
        return self._definition.title

    @property
    def time_limit_sec(self) -> int:
        return self._definition.time_limit_sec

    @property
    def pass_threshold(self) -> float:
        return self._definition.pass_threshold

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def length(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Question:
        return self._questions[self.current_index]

    @property
    def has_next(self) -> bool:
        return self.current_index < self.length - 1

    @property
    def has_prev(self) -> bool:
        return self.current_index > 0

    @property
    def summary(self) -> QuizSummary | None:
        return self._summary

    def question_by_id(self, question_id: str) -> Question | None:
        return self._questions_by_id.get(question_id)

    # --- Navigation ---

    def go_to(self, index: int) -> ActionResult:
        """Move to ``index``; an out-of-range target is rejected without side effects."""
        if not 0 <= index < self.length:
            return ActionResult.failure(
                ErrorKind.OUT_OF_RANGE,
                f"Question index {index} out of range (0..{self.length - 1}).",
            )
        self._commit_time()
        self.current_index = index
        self._last_visit = self._clock()
        return ActionResult.success()

    def next(self) -> ActionResult:
        return self.go_to(self.current_index + 1)

    def prev(self) -> ActionResult:
        return self.go_to(self.current_index - 1)

    # --- Answers ---

    def select(self, option_index: int) -> ActionResult:
        """Record ``option_index`` for the current question, replacing any earlier choice."""
        if self.is_finished:
            return ActionResult.failure(
                ErrorKind.SESSION_FINISHED, "Answers cannot change after the quiz has finished."
            )
        option_count = len(self.current_question.options)
        if not 0 <= option_index < option_count:
            return ActionResult.failure(
                ErrorKind.INVALID_OPTION,
                f"Option index {option_index} out of range (0..{option_count - 1}).",
            )
        self.answers[self.current_question.id] = option_index
        return ActionResult.success()

    def get_selected_index(self) -> int | None:
        return self.answers.get(self.current_question.id)

    # --- Countdown ---

    def tick(self) -> None:
        """Advance the countdown by one second, finishing the quiz at zero."""
        if self.is_finished:
            return
        if self._last_visit is None:
            self._last_visit = self._clock()
        self.remaining_sec -= 1
        if self.remaining_sec <= 0:
            self.remaining_sec = 0
            self.finish()

    # --- Finish and scoring ---

    def finish(self) -> QuizSummary:
        """Finish the session and return its summary; later calls return the same summary."""
        if self.is_finished:
            if self._summary is None:
                self._summary = self._compute_summary()
            return self._summary
        self._commit_time()
        self.is_finished = True
        self._summary = self._compute_summary()
        logger.info(
            "Quiz '%s' finished: %d/%d correct, passed=%s",
            self.title,
            self._summary.correct,
            self._summary.total,
            self._summary.passed,
        )
        return self._summary

    def is_correct(self, question: Question) -> bool:
        return self.answers.get(question.id) == question.correct_index

    def _compute_summary(self) -> QuizSummary:
        correct = sum(1 for q in self._questions if self.is_correct(q))
        total = self.length
        percent = 0.0 if total == 0 else correct / total

        topic_counts: dict[str, list[int]] = {}
        for question in self._questions:
            if not question.topic:
                continue
            counts = topic_counts.setdefault(question.topic, [0, 0])
            counts[1] += 1
            if self.is_correct(question):
                counts[0] += 1

        return QuizSummary(
            correct=correct,
            total=total,
            percent=percent,
            passed=total > 0 and percent >= self.pass_threshold,
            topic_stats={
                topic: TopicStat(correct=c, total=t) for topic, (c, t) in topic_counts.items()
            },
            question_times=dict(self.question_times),
        )

    def _commit_time(self) -> None:
        """Add whole seconds spent on the current question since the last visit."""
        if self._last_visit is None or self.is_finished:
            return
        now = self._clock()
        elapsed = max(0, int(now - self._last_visit))
        question_id = self.current_question.id
        self.question_times[question_id] = self.question_times.get(question_id, 0) + elapsed
        self._last_visit = now

    # --- Serialization ---

    def to_state(self) -> dict[str, Any]:
        """Return a value snapshot of the session (question order excluded)."""
        return {
            "current_index": self.current_index,
            "answers": dict(self.answers),
            "remaining_sec": self.remaining_sec,
            "is_finished": self.is_finished,
            "summary": self._summary.to_dict() if self._summary is not None else None,
            "question_times": dict(self.question_times),
        }

    @classmethod
    def from_state(
        cls,
        definition: QuizDefinition,
        state: Mapping[str, Any],
        *,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> "QuizEngine":
        """Rebuild a session from ``definition`` and a snapshot taken by ``to_state``."""
        engine = cls(definition, rng=rng, clock=clock)

        current_index = state.get("current_index")
        if current_index is not None:
            if 0 <= int(current_index) < engine.length:
                engine.current_index = int(current_index)
            else:
                logger.warning("Ignoring out-of-range saved question index %s", current_index)

        for question_id, option_index in (state.get("answers") or {}).items():
            if engine.question_by_id(question_id) is not None:
                engine.answers[question_id] = int(option_index)
            else:
                logger.warning("Dropping saved answer for unknown question '%s'", question_id)

        remaining_sec = state.get("remaining_sec")
        if remaining_sec is not None:
            engine.remaining_sec = max(0, int(remaining_sec))

        engine.is_finished = bool(state.get("is_finished", False))

        summary = state.get("summary")
        if summary is not None:
            engine._summary = summary if isinstance(summary, QuizSummary) else QuizSummary.from_dict(summary)

        for question_id, seconds in (state.get("question_times") or {}).items():
            if engine.question_by_id(question_id) is not None:
                engine.question_times[question_id] = max(0, int(seconds))

        return engine

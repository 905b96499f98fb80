"""Domain models for the quiz application."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from quiz_taker.constants.quiz_constants import MIN_OPTION_COUNT
from quiz_taker.core.shuffle import shuffle_items


class ErrorKind(Enum):
    """Reasons an engine or session action can be rejected."""

    OUT_OF_RANGE = "out_of_range"
    INVALID_OPTION = "invalid_option"
    SESSION_FINISHED = "session_finished"
    NOT_FINISHED = "not_finished"
    INVALID_DEFINITION = "invalid_definition"


class QuizDefinitionError(ValueError):
    """Raised when quiz content cannot be turned into a playable quiz."""

    kind = ErrorKind.INVALID_DEFINITION


@dataclass(slots=True, frozen=True)
class ActionResult:
    """Outcome of a navigation, selection or session action."""

    ok: bool
    error: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def success(cls) -> "ActionResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "ActionResult":
        return cls(ok=False, error=error, message=message)


@dataclass(slots=True, frozen=True)
class QuestionDefinition:
    """Static multiple-choice question as supplied by the quiz source."""

    id: str
    text: str
    options: tuple[str, ...]
    correct_index: int
    topic: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence of options but store an immutable tuple.
        object.__setattr__(self, "options", tuple(self.options))
        if not str(self.id).strip():
            raise QuizDefinitionError("Question id must not be empty.")
        if len(self.options) < MIN_OPTION_COUNT:
            raise QuizDefinitionError(
                f"Question '{self.id}' must have at least {MIN_OPTION_COUNT} options."
            )
        if not 0 <= self.correct_index < len(self.options):
            raise QuizDefinitionError(
                f"Question '{self.id}' has correct index {self.correct_index} "
                f"outside of its {len(self.options)} options."
            )


@dataclass(slots=True, frozen=True)
class QuizDefinition:
    """Immutable quiz content: title, limits and the ordered question list."""

    title: str
    time_limit_sec: int
    pass_threshold: float
    questions: tuple[QuestionDefinition, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "questions", tuple(self.questions))
        if isinstance(self.time_limit_sec, bool) or not isinstance(self.time_limit_sec, int):
            raise QuizDefinitionError("Time limit must be an integer number of seconds.")
        if self.time_limit_sec <= 0:
            raise QuizDefinitionError("Time limit must be a positive integer.")
        if not 0.0 <= self.pass_threshold <= 1.0:
            raise QuizDefinitionError("Pass threshold must be a fraction between 0 and 1.")
        if not self.questions:
            raise QuizDefinitionError("Quiz must contain at least one question.")
        seen: set[str] = set()
        for question in self.questions:
            if question.id in seen:
                raise QuizDefinitionError(f"Duplicate question id '{question.id}'.")
            seen.add(question.id)


@dataclass(slots=True, frozen=True)
class TopicStat:
    """Correct/total counts for one topic label."""

    correct: int = 0
    total: int = 0


@dataclass(slots=True, frozen=True)
class QuizSummary:
    """Final score of a session; computed once at finish."""

    correct: int
    total: int
    percent: float
    passed: bool
    topic_stats: Mapping[str, TopicStat] = field(default_factory=dict)
    question_times: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only views over private copies; a computed summary never changes.
        object.__setattr__(self, "topic_stats", MappingProxyType(dict(self.topic_stats)))
        object.__setattr__(self, "question_times", MappingProxyType(dict(self.question_times)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "correct": self.correct,
            "total": self.total,
            "percent": self.percent,
            "passed": self.passed,
            "topic_stats": {
                topic: {"correct": stat.correct, "total": stat.total}
                for topic, stat in self.topic_stats.items()
            },
            "question_times": dict(self.question_times),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuizSummary":
        topic_stats = {
            topic: TopicStat(correct=int(stat["correct"]), total=int(stat["total"]))
            for topic, stat in (data.get("topic_stats") or {}).items()
        }
        return cls(
            correct=int(data["correct"]),
            total=int(data["total"]),
            percent=float(data["percent"]),
            passed=bool(data["passed"]),
            topic_stats=topic_stats,
            question_times={
                qid: int(seconds) for qid, seconds in (data.get("question_times") or {}).items()
            },
        )


@dataclass(slots=True, frozen=True)
class Question:
    """Question as presented in a session, with its options already shuffled."""

    id: str
    text: str
    options: tuple[str, ...]
    correct_index: int
    topic: str | None = None

    @classmethod
    def from_definition(
        cls, definition: QuestionDefinition, rng: random.Random | None = None
    ) -> "Question":
        """Shuffle the options once and remap the correct index to its new position."""
        if not 0 <= definition.correct_index < len(definition.options):
            raise QuizDefinitionError(
                f"Question '{definition.id}' has an invalid correct index."
            )
        tagged = shuffle_items(list(enumerate(definition.options)), rng)
        correct_index = next(
            position
            for position, (original_index, _) in enumerate(tagged)
            if original_index == definition.correct_index
        )
        return cls(
            id=definition.id,
            text=definition.text,
            options=tuple(text for _, text in tagged),
            correct_index=correct_index,
            topic=definition.topic or None,
        )

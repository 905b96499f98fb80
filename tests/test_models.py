import random

import pytest

from quiz_taker.core.models import (
    ActionResult,
    ErrorKind,
    Question,
    QuestionDefinition,
    QuizDefinition,
    QuizDefinitionError,
    QuizSummary,
    TopicStat,
)


def test_question_definition_rejects_bad_correct_index():
    with pytest.raises(QuizDefinitionError):
        QuestionDefinition(id="q1", text="?", options=("a", "b"), correct_index=2)
    with pytest.raises(QuizDefinitionError):
        QuestionDefinition(id="q1", text="?", options=("a", "b"), correct_index=-1)


def test_question_definition_requires_two_options():
    with pytest.raises(QuizDefinitionError):
        QuestionDefinition(id="q1", text="?", options=("a",), correct_index=0)


def test_question_definition_error_is_value_error_with_kind():
    with pytest.raises(ValueError) as excinfo:
        QuestionDefinition(id="", text="?", options=("a", "b"), correct_index=0)
    assert excinfo.value.kind is ErrorKind.INVALID_DEFINITION


def test_question_definition_stores_options_as_tuple():
    question = QuestionDefinition(id="q1", text="?", options=["a", "b"], correct_index=0)
    assert question.options == ("a", "b")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"time_limit_sec": 0},
        {"time_limit_sec": 1.5},
        {"pass_threshold": 1.2},
        {"pass_threshold": -0.1},
        {"questions": ()},
    ],
)
def test_quiz_definition_validation(kwargs):
    values = {
        "title": "Quiz",
        "time_limit_sec": 30,
        "pass_threshold": 0.5,
        "questions": (QuestionDefinition(id="q1", text="?", options=("a", "b"), correct_index=0),),
    }
    values.update(kwargs)
    with pytest.raises(QuizDefinitionError):
        QuizDefinition(**values)


def test_quiz_definition_rejects_duplicate_ids():
    question = QuestionDefinition(id="q1", text="?", options=("a", "b"), correct_index=0)
    with pytest.raises(QuizDefinitionError, match="Duplicate"):
        QuizDefinition(title="Quiz", time_limit_sec=30, pass_threshold=0.5, questions=(question, question))


def test_question_from_definition_remaps_correct_index():
    definition = QuestionDefinition(
        id="q1", text="Pick c", options=("a", "b", "c", "d", "e"), correct_index=2, topic="letters"
    )
    rng = random.Random(99)
    for _ in range(50):
        question = Question.from_definition(definition, rng)
        assert sorted(question.options) == sorted(definition.options)
        assert question.options[question.correct_index] == "c"
        assert question.topic == "letters"


def test_question_from_definition_normalizes_empty_topic():
    definition = QuestionDefinition(id="q1", text="?", options=("a", "b"), correct_index=0, topic="")
    assert Question.from_definition(definition).topic is None


def test_action_result_helpers():
    assert ActionResult.success().ok
    failure = ActionResult.failure(ErrorKind.OUT_OF_RANGE, "nope")
    assert not failure.ok
    assert failure.error is ErrorKind.OUT_OF_RANGE
    assert failure.message == "nope"


def test_summary_dict_conversion():
    summary = QuizSummary(
        correct=1,
        total=2,
        percent=0.5,
        passed=False,
        topic_stats={"alpha": TopicStat(correct=1, total=2)},
        question_times={"q1": 4, "q2": 0},
    )
    data = summary.to_dict()

    assert data["topic_stats"] == {"alpha": {"correct": 1, "total": 2}}
    assert QuizSummary.from_dict(data) == summary
    data["question_times"]["q1"] = 99
    assert summary.question_times["q1"] == 4


def test_summary_mappings_are_read_only_copies():
    times = {"q1": 3}
    summary = QuizSummary(
        correct=1,
        total=1,
        percent=1.0,
        passed=True,
        topic_stats={"t": TopicStat(correct=1, total=1)},
        question_times=times,
    )
    times["q1"] = 99

    with pytest.raises(TypeError):
        summary.question_times["q1"] = 0
    with pytest.raises(TypeError):
        summary.topic_stats["t"] = TopicStat()
    assert summary.question_times == {"q1": 3}
    assert summary.to_dict()["question_times"] == {"q1": 3}

"""Display helpers for progress, results and review mode.

Everything here is a pure function of engine data so the Qt window and the
web widget show exactly the same numbers.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
import math
from typing import Iterable, Mapping

from quiz_taker.constants.ui_constants import FAILED_LABEL, PASSED_LABEL, PROGRESS_TEMPLATE
from quiz_taker.core.markdown_math_renderer import renderer
from quiz_taker.core.models import Question, QuizSummary
from quiz_taker.core.quiz_engine import QuizEngine


@dataclass(slots=True, frozen=True)
class ReviewOption:
    text: str
    is_correct: bool
    is_chosen: bool

    @property
    def css_class(self) -> str:
        if self.is_correct:
            return "option correct"
        if self.is_chosen:
            return "option incorrect"
        return "option"


@dataclass(slots=True, frozen=True)
class ReviewItem:
    """One question as shown in review mode."""

    number: int
    question_id: str
    text: str
    options: tuple[ReviewOption, ...]
    answered_correctly: bool


def format_clock(seconds: int | None) -> str:
    """Format remaining seconds as MM:SS."""
    seconds = max(0, int(seconds or 0))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def progress_text(index: int, total: int) -> str:
    return PROGRESS_TEMPLATE.format(current=index + 1, total=total)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def average_question_time(question_times: Mapping[str, int]) -> int:
    if not question_times:
        return 0
    return round_half_up(sum(question_times.values()) / len(question_times))


def build_review_items(engine: QuizEngine) -> list[ReviewItem]:
    items: list[ReviewItem] = []
    for number, question in enumerate(engine.questions, start=1):
        chosen = engine.answers.get(question.id)
        options = tuple(
            ReviewOption(text=text, is_correct=i == question.correct_index, is_chosen=chosen == i)
            for i, text in enumerate(question.options)
        )
        items.append(
            ReviewItem(
                number=number,
                question_id=question.id,
                text=question.text,
                options=options,
                answered_correctly=engine.is_correct(question),
            )
        )
    return items


def render_summary_html(summary: QuizSummary, questions: Iterable[Question]) -> str:
    """Render score, timing and topic statistics as an HTML fragment."""
    texts = {question.id: question.text for question in questions}
    percent = round_half_up(summary.percent * 100)
    status_class = "passed" if summary.passed else "failed"
    status_label = PASSED_LABEL if summary.passed else FAILED_LABEL
    parts = [
        f"<p><b>{summary.correct} / {summary.total}</b> ({percent}%) "
        f"<span class=\"{status_class}\">{status_label}</span></p>"
    ]

    if summary.question_times:
        average = average_question_time(summary.question_times)
        parts.append(f"<div><b>Average time per question:</b> {average} s<ul>")
        for question_id, seconds in summary.question_times.items():
            text = escape(texts.get(question_id, question_id))
            parts.append(f"<li>{text} &mdash; <b>{seconds} s</b></li>")
        parts.append("</ul></div>")

    if summary.topic_stats:
        parts.append("<div><b>Topics:</b><ul>")
        for topic, stat in summary.topic_stats.items():
            parts.append(f"<li>{escape(topic)}: <b>{stat.correct} / {stat.total}</b></li>")
        parts.append("</ul></div>")

    return "\n".join(parts)


def render_review_html(items: Iterable[ReviewItem]) -> str:
    blocks: list[str] = []
    for item in items:
        lines = [
            "<div class=\"review-card\">",
            f"<div class=\"review-title\">Question {item.number}</div>",
            renderer.render_fragment(item.text),
            "<ul class=\"review-options\">",
        ]
        for option in item.options:
            marker = " (your answer)" if option.is_chosen else ""
            lines.append(
                f"<li class=\"{option.css_class}\">{renderer.render_inline(option.text)}{marker}</li>"
            )
        lines.append("</ul></div>")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)

"""Qt UI components for the quiz taker."""

from .dialog_helpers import confirm_restart, show_error, show_info
from .qt_scheduler import QtTickScheduler
from .question_renderer import render_question_document, render_review_document
from .quiz_window import QuizWindow

__all__ = [
    "QtTickScheduler",
    "QuizWindow",
    "confirm_restart",
    "render_question_document",
    "render_review_document",
    "show_error",
    "show_info",
]

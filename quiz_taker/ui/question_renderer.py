"""HTML documents shown in the window's QWebEngineView."""

from __future__ import annotations

from quiz_taker.core.markdown_math_renderer import renderer
from quiz_taker.styling import Styles, Theme


def render_question_document(question_text: str, font_size: int = 14) -> str:
    """Render the current question (Markdown + LaTeX) as a full HTML document.

    Args:
        question_text: The question text
        font_size: Font size in points for the question text (default 14)

    Returns:
        HTML string ready for display in QWebEngineView
    """
    return renderer.render_full_document(question_text or "(No question text)", font_size=font_size)


def render_review_document(summary_html: str, review_html: str | None = None, font_size: int = 14) -> str:
    """Render the result summary, followed by review cards when review mode is on."""
    body = summary_html if review_html is None else f"{summary_html}\n<hr />\n{review_html}"
    return renderer.wrap_with_mathjax(
        body,
        font_size=font_size,
        extra_css=Styles.get_review_css(Theme.LIGHT),
    )

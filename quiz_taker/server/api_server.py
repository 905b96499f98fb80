"""FastAPI server that exposes the quiz as a browser widget."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from quiz_taker.constants.about import APP_NAME, APP_VERSION
from quiz_taker.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_taker.core.markdown_math_renderer import MATHJAX_HEAD, renderer
from quiz_taker.core.models import ActionResult, ErrorKind
from quiz_taker.core.result_report import (
    build_review_items,
    format_clock,
    progress_text,
    render_review_html,
    render_summary_html,
)
from quiz_taker.core.services.quiz_session import QuizSession

_ERROR_STATUS = {
    ErrorKind.OUT_OF_RANGE: 422,
    ErrorKind.INVALID_OPTION: 422,
    ErrorKind.SESSION_FINISHED: 409,
    ErrorKind.NOT_FINISHED: 409,
    ErrorKind.INVALID_DEFINITION: 422,
}

_QUIZ_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>QuizTaker</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; --primary: #1f9aa5; --accent: #4ade80; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 48rem; margin-inline: auto; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      header { display: flex; justify-content: space-between; align-items: baseline; }
      #timer { font-variant-numeric: tabular-nums; color: #facc15; font-size: 1.2rem; }
      #progress { color: #94a3b8; }
      #question-text { font-size: 1.1rem; line-height: 1.6; }
      .option { display: flex; gap: 0.5rem; align-items: center; padding: 0.6rem 0.8rem; border-radius: 0.5rem; background: #16213d; margin: 0.4rem 0; cursor: pointer; list-style: none; }
      .option.correct { outline: 2px solid var(--accent); }
      .option.incorrect { outline: 2px solid #ef4444; }
      .nav { display: flex; gap: 0.75rem; flex-wrap: wrap; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.75rem 1.25rem; font-size: 1rem; background: var(--primary); color: #fff; cursor: pointer; }
      .primary-button:disabled { opacity: 0.5; cursor: not-allowed; }
      .passed { color: var(--accent); font-weight: bold; }
      .failed { color: #ef4444; font-weight: bold; }
      .review-card { background: #111a30; border-radius: 0.75rem; padding: 1rem 1.5rem; margin-bottom: 0.75rem; }
      .review-title { color: #94a3b8; }
      .review-options { padding: 0; }
    </style>
    __MATHJAX__
  </head>
  <body>
    <header>
      <h1 id=\"quiz-title\"></h1>
      <span id=\"timer\">00:00</span>
    </header>
    <section class=\"card\" id=\"question-section\">
      <p id=\"progress\"></p>
      <div id=\"question-text\"></div>
      <form id=\"options-form\"></form>
      <div class=\"nav\">
        <button id=\"btn-prev\" class=\"primary-button\" type=\"button\">Previous</button>
        <button id=\"btn-next\" class=\"primary-button\" type=\"button\">Next</button>
        <button id=\"btn-finish\" class=\"primary-button\" type=\"button\">Finish</button>
      </div>
    </section>
    <section class=\"hidden\" id=\"review-section\"></section>
    <section class=\"card hidden\" id=\"result-section\">
      <h2>Result</h2>
      <div id=\"result-summary\"></div>
      <div class=\"nav\">
        <button id=\"btn-review\" class=\"primary-button\" type=\"button\">Review Answers</button>
        <button id=\"btn-restart\" class=\"primary-button\" type=\"button\">Start Over</button>
      </div>
    </section>
    <script>
      const els = {
        title: document.getElementById('quiz-title'),
        timer: document.getElementById('timer'),
        progress: document.getElementById('progress'),
        questionSection: document.getElementById('question-section'),
        questionText: document.getElementById('question-text'),
        form: document.getElementById('options-form'),
        prev: document.getElementById('btn-prev'),
        next: document.getElementById('btn-next'),
        finish: document.getElementById('btn-finish'),
        review: document.getElementById('review-section'),
        result: document.getElementById('result-section'),
        resultSummary: document.getElementById('result-summary'),
        reviewButton: document.getElementById('btn-review'),
        restart: document.getElementById('btn-restart'),
      };
      let renderedQuestionId = null;
      let renderedReview = false;

      function setVisibility(element, isVisible) {
        element.classList.toggle('hidden', !isVisible);
      }

      async function typesetMath(targets) {
        for (let i = 0; i < 15; i++) {
          if (window.MathJax && window.MathJax.typesetPromise) {
            try {
              await window.MathJax.typesetPromise(targets);
              return;
            } catch (err) {
              console.warn('MathJax typeset attempt', i + 1, 'error:', err);
            }
          }
          await new Promise(resolve => setTimeout(resolve, 150));
        }
      }

      function renderQuestion(state) {
        const question = state.question;
        if (question.id === renderedQuestionId) {
          els.form.querySelectorAll('input').forEach(input => {
            input.checked = Number(input.value) === state.selected_index;
            input.disabled = state.is_finished;
          });
          return;
        }
        renderedQuestionId = question.id;
        els.questionText.innerHTML = question.html;
        els.form.innerHTML = '';
        question.options.forEach((optionHtml, index) => {
          const wrapper = document.createElement('label');
          wrapper.className = 'option';
          const input = document.createElement('input');
          input.type = 'radio';
          input.name = 'option';
          input.value = String(index);
          input.checked = state.selected_index === index;
          input.disabled = state.is_finished;
          input.addEventListener('change', () => send('/select', { option_index: index }));
          const span = document.createElement('span');
          span.innerHTML = optionHtml;
          wrapper.appendChild(input);
          wrapper.appendChild(span);
          els.form.appendChild(wrapper);
        });
        typesetMath([els.questionText, els.form]);
      }

      function render(state) {
        els.title.textContent = state.title;
        els.timer.textContent = state.clock;
        els.progress.textContent = state.progress;
        renderQuestion(state);
        els.prev.disabled = !state.navigation.can_prev;
        els.next.disabled = !state.navigation.can_next;
        els.finish.disabled = !state.navigation.can_finish;

        setVisibility(els.questionSection, !state.review_mode);
        setVisibility(els.result, state.is_finished);
        setVisibility(els.reviewButton, !state.review_mode);
        if (state.summary_html) {
          els.resultSummary.innerHTML = state.summary_html;
        }
        setVisibility(els.review, state.review_mode);
        if (state.review_mode && !renderedReview) {
          els.review.innerHTML = state.review_html;
          renderedReview = true;
          typesetMath([els.review]);
        }
      }

      async function refresh() {
        try {
          const response = await fetch('/state');
          render(await response.json());
        } catch (error) {
          console.error('Error fetching state:', error);
        }
      }

      async function send(path, body) {
        try {
          const response = await fetch(path, {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify(body || {})
          });
          if (!response.ok) {
            const payload = await response.json().catch(() => ({}));
            console.warn('Action rejected:', payload.detail);
          }
        } catch (error) {
          console.error('Error sending action:', error);
        }
        await refresh();
      }

      els.prev.addEventListener('click', () => send('/prev'));
      els.next.addEventListener('click', () => send('/next'));
      els.finish.addEventListener('click', () => send('/finish'));
      els.reviewButton.addEventListener('click', () => send('/review'));
      els.restart.addEventListener('click', async () => {
        renderedQuestionId = null;
        renderedReview = false;
        await send('/restart');
      });

      refresh();
      setInterval(refresh, 1000);
    </script>
  </body>
</html>
""".replace("__MATHJAX__", MATHJAX_HEAD)


class SelectPayload(BaseModel):
    """Payload schema for choosing an option of the current question."""

    option_index: int


class GoToPayload(BaseModel):
    """Payload schema for jumping to a question position."""

    index: int


def build_state_payload(session: QuizSession) -> dict[str, object]:
    """Describe everything the page needs to render the current session."""
    with session.locked() as engine:
        question = engine.current_question
        navigation = session.navigation_state()
        summary = engine.summary if engine.is_finished else None
        review_mode = session.review_mode
        return {
            "title": engine.title,
            "progress": progress_text(engine.current_index, engine.length),
            "current_index": engine.current_index,
            "total": engine.length,
            "remaining_sec": engine.remaining_sec,
            "clock": format_clock(engine.remaining_sec),
            "is_finished": engine.is_finished,
            "review_mode": review_mode,
            "question": {
                "id": question.id,
                "html": renderer.render_fragment(question.text),
                "options": [renderer.render_inline(option) for option in question.options],
            },
            "selected_index": engine.get_selected_index(),
            "navigation": {
                "can_prev": navigation.can_prev,
                "can_next": navigation.can_next,
                "can_finish": navigation.can_finish,
            },
            "summary": summary.to_dict() if summary is not None else None,
            "summary_html": (
                render_summary_html(summary, engine.questions) if summary is not None else None
            ),
            "review_html": render_review_html(build_review_items(engine)) if review_mode else None,
        }


def _raise_for_result(result: ActionResult) -> None:
    if result.ok:
        return
    status_code = _ERROR_STATUS.get(result.error, 400)
    raise HTTPException(status_code=status_code, detail=result.message)


def _get_quiz_session_dependency(quiz_session: QuizSession):
    def dependency() -> QuizSession:
        return quiz_session

    return dependency


def create_api_app(quiz_session: QuizSession) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz session."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        quiz_session.start()
        try:
            yield
        finally:
            quiz_session.stop()

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, lifespan=lifespan)
    session_dep = _get_quiz_session_dependency(quiz_session)

    @app.get("/", response_class=HTMLResponse)
    def serve_quiz_page() -> str:
        return _QUIZ_PAGE_HTML

    @app.get("/state")
    def get_state(session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        return build_state_payload(session)

    @app.post("/select")
    def select_option(
        payload: SelectPayload, session: QuizSession = Depends(session_dep)
    ) -> dict[str, object]:
        _raise_for_result(session.select(payload.option_index))
        return build_state_payload(session)

    @app.post("/next")
    def go_next(session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        _raise_for_result(session.next())
        return build_state_payload(session)

    @app.post("/prev")
    def go_prev(session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        _raise_for_result(session.prev())
        return build_state_payload(session)

    @app.post("/goto")
    def go_to(payload: GoToPayload, session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        _raise_for_result(session.go_to(payload.index))
        return build_state_payload(session)

    @app.post("/finish")
    def finish(session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        session.finish()
        return build_state_payload(session)

    @app.post("/review")
    def review(session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        _raise_for_result(session.enter_review())
        return build_state_payload(session)

    @app.post("/restart")
    def restart(session: QuizSession = Depends(session_dep)) -> dict[str, object]:
        session.restart()
        return build_state_payload(session)

    return app


def run_api_server(
    quiz_session: QuizSession,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the quiz widget until the process is interrupted."""
    app = create_api_app(quiz_session)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()

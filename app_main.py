"""Application entry point for QuizTaker."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from quiz_taker.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_taker.constants.quiz_constants import DEFAULT_QUIZ_PATH, DEFAULT_STATE_PATH
from quiz_taker.core.quiz_importer import QuizImportError, load_quiz_from_file
from quiz_taker.core.services.quiz_session import QuizSession
from quiz_taker.core.services.scheduler import IntervalTickScheduler
from quiz_taker.core.services.snapshot_store import (
    InMemorySnapshotStore,
    JsonFileSnapshotStore,
    SnapshotStore,
)
from quiz_taker.utils.logging_config import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Take a timed multiple-choice quiz.")
    parser.add_argument("--quiz", type=Path, default=DEFAULT_QUIZ_PATH, help="quiz file (.json or .txt)")
    parser.add_argument("--state", type=Path, default=DEFAULT_STATE_PATH, help="where progress is saved")
    parser.add_argument("--no-persist", action="store_true", help="keep progress in memory only")
    parser.add_argument("--web", action="store_true", help="serve the quiz in the browser instead of a window")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, load the quiz and launch the web or Qt widget."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logger = configure_logging()
    logger.info("Starting QuizTaker…")

    try:
        definition = load_quiz_from_file(args.quiz)
    except (OSError, QuizImportError) as exc:
        logger.error("Could not load quiz %s: %s", args.quiz, exc)
        sys.exit(1)

    store: SnapshotStore = InMemorySnapshotStore() if args.no_persist else JsonFileSnapshotStore(args.state)

    if args.web:
        from quiz_taker.server.api_server import run_api_server

        session = QuizSession.open(definition, store, IntervalTickScheduler())
        logger.info("Quiz available at http://%s:%d/", args.host, args.port)
        run_api_server(session, host=args.host, port=args.port)
        return

    from PySide6.QtWidgets import QApplication

    from quiz_taker.ui import QtTickScheduler, QuizWindow

    app = QApplication(sys.argv)
    session = QuizSession.open(definition, store, QtTickScheduler(app))
    window = QuizWindow(session)
    window.show()
    session.start()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

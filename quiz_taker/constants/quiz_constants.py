"""Quiz-related constants shared across UI, server and core layers."""

from pathlib import Path

PACKAGE_ROOT: Path = Path(__file__).resolve().parent.parent
DEFAULT_QUIZ_PATH: Path = PACKAGE_ROOT / "data" / "questions.json"

# Mirrors the storage key used by the browser version of the widget.
STATE_STORAGE_KEY: str = "quiz.state.v1"
DEFAULT_STATE_PATH: Path = Path.home() / ".quiz_taker" / f"{STATE_STORAGE_KEY}.json"

TICK_INTERVAL_SECONDS: float = 1.0
DEFAULT_PASS_THRESHOLD: float = 0.7
MIN_OPTION_COUNT: int = 2

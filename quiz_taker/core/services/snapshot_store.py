"""Persistence of session snapshots between runs."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class TopicStatPayload(BaseModel):
    correct: int = Field(ge=0)
    total: int = Field(ge=0)


class SummaryPayload(BaseModel):
    correct: int = Field(ge=0)
    total: int = Field(ge=0)
    percent: float
    passed: bool
    topic_stats: dict[str, TopicStatPayload] = Field(default_factory=dict)
    question_times: dict[str, int] = Field(default_factory=dict)


class SessionSnapshot(BaseModel):
    """Schema of a stored snapshot; every field is optional on load."""

    current_index: int | None = None
    answers: dict[str, int] | None = None
    remaining_sec: int | None = None
    is_finished: bool | None = None
    summary: SummaryPayload | None = None
    question_times: dict[str, int] | None = None


class SnapshotStore(Protocol):
    def save(self, snapshot: dict[str, Any]) -> None: ...

    def load(self) -> dict[str, Any] | None: ...

    def clear(self) -> None: ...


class JsonFileSnapshotStore:
    """Keeps the latest snapshot in a single JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def save(self, snapshot: dict[str, Any]) -> None:
        """Replace the stored snapshot; the file is swapped in atomically."""
        document = json.dumps(snapshot, ensure_ascii=False, indent=2)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(document, encoding="utf-8")
        tmp_path.replace(self._path)

    def load(self) -> dict[str, Any] | None:
        """Return the stored snapshot, or None when it is missing or unusable."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read saved session %s: %s", self._path, exc)
            return None
        try:
            parsed = SessionSnapshot.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring corrupt saved session %s: %s", self._path, exc)
            return None
        return parsed.model_dump(exclude_none=True)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class InMemorySnapshotStore:
    """Process-local store; keeps its own copy of every saved snapshot."""

    def __init__(self, snapshot: dict[str, Any] | None = None) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count = 0

    def save(self, snapshot: dict[str, Any]) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count += 1

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._snapshot)

    def clear(self) -> None:
        self._snapshot = None

"""Controller that owns one quiz attempt: engine, timer and persistence."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
import random
from threading import RLock
import time
from typing import Any, Callable, Iterator

from quiz_taker.core.models import ActionResult, ErrorKind, QuizDefinition, QuizSummary
from quiz_taker.core.quiz_engine import Clock, QuizEngine
from quiz_taker.core.services.scheduler import TickScheduler
from quiz_taker.core.services.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

SessionListener = Callable[["QuizSession"], None]


@dataclass(slots=True, frozen=True)
class NavigationState:
    """Which navigation buttons a view should enable."""

    can_prev: bool
    can_next: bool
    can_finish: bool


class QuizSession:
    """Facade the UI and web layers talk to; every public call is serialized."""

    def __init__(
        self,
        definition: QuizDefinition,
        store: SnapshotStore,
        scheduler: TickScheduler,
        *,
        engine: QuizEngine | None = None,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> None:
        # Re-entrant so listeners may read session state while being notified.
        self._lock = RLock()
        self._definition = definition
        self._store = store
        self._scheduler = scheduler
        self._rng = rng
        self._clock = clock
        self._engine = engine or QuizEngine(definition, rng=rng, clock=clock)
        self._review_mode = False
        self._listeners: list[SessionListener] = []

    @classmethod
    def open(
        cls,
        definition: QuizDefinition,
        store: SnapshotStore,
        scheduler: TickScheduler,
        *,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> "QuizSession":
        """Resume the stored session for ``definition`` or start a fresh one."""
        snapshot = store.load()
        engine = None
        if snapshot is not None:
            try:
                engine = QuizEngine.from_state(definition, snapshot, rng=rng, clock=clock)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Saved session could not be restored, starting over: %s", exc)
            else:
                logger.info("Resumed saved session for '%s'", definition.title)
                if engine.is_finished and engine.summary is None:
                    engine.finish()
        return cls(definition, store, scheduler, engine=engine, rng=rng, clock=clock)

    # --- Read access ---

    @property
    def engine(self) -> QuizEngine:
        return self._engine

    @property
    def definition(self) -> QuizDefinition:
        return self._definition

    @property
    def is_finished(self) -> bool:
        with self._lock:
            return self._engine.is_finished

    @property
    def review_mode(self) -> bool:
        with self._lock:
            return self._review_mode

    @property
    def timer_running(self) -> bool:
        return self._scheduler.is_running

    @contextmanager
    def locked(self) -> Iterator[QuizEngine]:
        """Hold the session lock while reading several engine fields at once."""
        with self._lock:
            yield self._engine

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return self._engine.to_state()

    def navigation_state(self) -> NavigationState:
        with self._lock:
            engine = self._engine
            if engine.is_finished or self._review_mode:
                return NavigationState(can_prev=False, can_next=False, can_finish=False)
            answered = engine.get_selected_index() is not None
            return NavigationState(
                can_prev=engine.has_prev,
                can_next=engine.has_next and answered,
                can_finish=not engine.has_next and answered,
            )

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    # --- Timer lifecycle ---

    def start(self) -> None:
        """Start the countdown unless the session is already finished."""
        with self._lock:
            if self._engine.is_finished:
                return
            remaining_sec = self._engine.remaining_sec
        self._scheduler.start(self._on_tick)
        logger.info("Countdown started with %d s remaining", remaining_sec)

    def stop(self) -> None:
        self._scheduler.stop()

    def _on_tick(self) -> None:
        with self._lock:
            self._engine.tick()
            finished = self._engine.is_finished
            self._persist()
        if finished:
            logger.info("Time limit reached; quiz finished automatically")
            self._scheduler.stop()
        self._notify()

    # --- User actions ---

    def select(self, option_index: int) -> ActionResult:
        return self._apply(lambda engine: engine.select(option_index))

    def next(self) -> ActionResult:
        return self._apply(QuizEngine.next)

    def prev(self) -> ActionResult:
        return self._apply(QuizEngine.prev)

    def go_to(self, index: int) -> ActionResult:
        return self._apply(lambda engine: engine.go_to(index))

    def finish(self) -> QuizSummary:
        with self._lock:
            summary = self._engine.finish()
            self._persist()
        self._scheduler.stop()
        self._notify()
        return summary

    def enter_review(self) -> ActionResult:
        with self._lock:
            if not self._engine.is_finished:
                return ActionResult.failure(
                    ErrorKind.NOT_FINISHED, "Answers can be reviewed once the quiz has finished."
                )
            self._review_mode = True
        self._notify()
        return ActionResult.success()

    def restart(self) -> None:
        """Discard saved progress and begin a new attempt with fresh randomization."""
        self._scheduler.stop()
        with self._lock:
            self._store.clear()
            self._engine = QuizEngine(self._definition, rng=self._rng, clock=self._clock)
            self._review_mode = False
            logger.info("Session restarted for '%s'", self._definition.title)
        self.start()
        self._notify()

    # --- Internals ---

    def _apply(self, action: Callable[[QuizEngine], ActionResult]) -> ActionResult:
        with self._lock:
            result = action(self._engine)
            if result.ok:
                self._persist()
            else:
                logger.debug("Rejected action: %s", result.message)
        if result.ok:
            self._notify()
        return result

    def _persist(self) -> None:
        try:
            self._store.save(self._engine.to_state())
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save session progress: %s", exc)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

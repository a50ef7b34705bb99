from __future__ import annotations

import logging
import queue
from concurrent.futures import CancelledError, Executor, Future
from typing import Any, Callable, Dict, Optional, Tuple

from esper import World

from match3.events.bus import (
    EventBus,
    EVENT_GAME_OVER,
    EVENT_HIGH_SCORE_LOADED,
    EVENT_HIGH_SCORE_LOAD_FAILED,
    EVENT_HIGH_SCORE_SAVED,
    EVENT_HIGH_SCORE_SAVE_FAILED,
    EVENT_TICK,
)
from match3.utils.high_score_store import HighScoreStore

logger = logging.getLogger(__name__)

Outcome = Tuple[str, Dict[str, Any]]


class HighScoreSystem:
    """Talks to the external high-score store on behalf of the session.

    Store calls run inline by default. Given an ``executor`` they run there and
    their outcome is queued; queued outcomes are emitted on the next tick so
    that subscribers only ever see events on the thread driving the bus.

    Store failures never propagate: they are logged and reported as
    ``EVENT_HIGH_SCORE_LOAD_FAILED`` / ``EVENT_HIGH_SCORE_SAVE_FAILED``.
    A save the store turns down (it already holds a better score) is followed
    by a fresh load so the session catches up with the stored record.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        store: HighScoreStore,
        *,
        executor: Executor | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.store = store
        self.executor = executor
        self._outcomes: "queue.SimpleQueue[Outcome]" = queue.SimpleQueue()
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)
        self.event_bus.subscribe(EVENT_HIGH_SCORE_SAVED, self.on_high_score_saved)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def load(self) -> Optional[Future]:
        return self._run(self.store.get_high_score, self._loaded, self._load_failed)

    def save(self, score: int) -> Optional[Future]:
        return self._run(
            lambda: self.store.save_high_score(score),
            lambda new_record: self._saved(score, new_record),
            lambda exc: self._save_failed(score, exc),
        )

    def on_game_over(self, sender, **kwargs):
        score = kwargs.get("score", 0)
        high_score = kwargs.get("high_score", 0)
        if score <= high_score:
            return
        self.save(score)

    def on_high_score_saved(self, sender, **kwargs):
        if kwargs.get("new_record"):
            return
        self.load()

    def on_tick(self, sender, **kwargs):
        self.flush()

    def flush(self) -> int:
        """Emit every queued store outcome; returns how many were emitted."""
        emitted = 0
        while True:
            try:
                name, payload = self._outcomes.get_nowait()
            except queue.Empty:
                return emitted
            self.event_bus.emit(name, **payload)
            emitted += 1

    def _run(
        self,
        call: Callable[[], Any],
        on_success: Callable[[Any], Outcome],
        on_failure: Callable[[Exception], Outcome],
    ) -> Optional[Future]:
        def _attempt() -> Outcome:
            try:
                return on_success(call())
            except Exception as exc:
                return on_failure(exc)

        if self.executor is None:
            self._emit(_attempt())
            return None

        def _done(future: Future) -> None:
            if future.cancelled():
                self._outcomes.put(on_failure(CancelledError()))
            else:
                self._outcomes.put(future.result())

        try:
            future = self.executor.submit(_attempt)
        except Exception as exc:
            self._emit(on_failure(exc))
            return None
        future.add_done_callback(_done)
        return future

    def _emit(self, outcome: Outcome) -> None:
        name, payload = outcome
        self.event_bus.emit(name, **payload)

    def _loaded(self, value: int) -> Outcome:
        return EVENT_HIGH_SCORE_LOADED, {"high_score": max(0, int(value))}

    def _load_failed(self, exc: Exception) -> Outcome:
        logger.error("Loading the high score failed; continuing with 0", exc_info=exc)
        return EVENT_HIGH_SCORE_LOAD_FAILED, {"error": exc}

    def _saved(self, score: int, new_record: bool) -> Outcome:
        logger.debug("High score %d saved (new record: %s)", score, new_record)
        return EVENT_HIGH_SCORE_SAVED, {"score": score, "new_record": bool(new_record)}

    def _save_failed(self, score: int, exc: Exception) -> Outcome:
        logger.error("Saving high score %d failed", score, exc_info=exc)
        return EVENT_HIGH_SCORE_SAVE_FAILED, {"score": score, "error": exc}

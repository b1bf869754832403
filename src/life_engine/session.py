"""Timer-backed activity sessions: start, pause, resume, end.

States::

    IDLE --start--> RUNNING --pause--> PAUSED --resume--> RUNNING
    RUNNING | PAUSED --end--> (completion event) --> IDLE

A session with a duration counts down and completes itself, exactly once,
when the remaining time reaches zero while running. A session without a
duration is a plain stopwatch that only ends on request.

Elapsed time is measured from clock deltas rather than by counting ticks, so
irregular or throttled ticks do not skew the recorded duration. Within one
run the elapsed time is capped at the remaining countdown, so a late tick
cannot credit more time than the session allowed.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable

from life_engine.exceptions import SessionStateError
from life_engine.models.enums import (
    MEDITATION_DURATION_S,
    QUICK_HIT_DURATION_S,
    STUDY_CAP_DURATION_S,
    TICK_INTERVAL_S,
    SessionKind,
    SessionState,
)
from life_engine.timing import Clock, TickHandle, TickScheduler

logger = logging.getLogger(__name__)

# Default countdown per kind; None means an open-ended stopwatch.
SESSION_PRESETS: dict[SessionKind, float | None] = {
    SessionKind.QUICK_HIT: QUICK_HIT_DURATION_S,
    SessionKind.MEDITATION: MEDITATION_DURATION_S,
    SessionKind.STUDY: STUDY_CAP_DURATION_S,
    SessionKind.WORKOUT: None,
}


@dataclass(frozen=True)
class SessionCompleted:
    """Emitted once when a session ends, manually or by running out."""

    kind: SessionKind
    elapsed_seconds: float
    context: str
    linked_kr_id: str | None
    auto_completed: bool

    @property
    def elapsed_minutes(self) -> float:
        return self.elapsed_seconds / 60

    @property
    def whole_minutes(self) -> int:
        return math.floor(self.elapsed_seconds / 60)


SessionListener = Callable[[SessionCompleted], None]


class SessionLifecycle:
    """State machine for one timed activity.

    ``context`` (e.g. the study topic) and ``linked_kr_id`` are carried into
    the completion event; set them any time before the session ends.
    """

    def __init__(
        self,
        kind: SessionKind,
        clock: Clock,
        ticker: TickScheduler,
        initial_duration_s: float | None = None,
        context: str = "",
        tick_interval_s: float = TICK_INTERVAL_S,
    ) -> None:
        if initial_duration_s is not None and initial_duration_s <= 0:
            raise SessionStateError("initial_duration_s must be positive")
        self.kind = kind
        self.context = context
        self.linked_kr_id: str | None = None
        self._clock = clock
        self._ticker = ticker
        self._tick_interval_s = tick_interval_s
        self._initial_duration = initial_duration_s
        self._listeners: list[SessionListener] = []
        self._lock = threading.RLock()
        self._handle: TickHandle | None = None
        self._reset()

    # -- Observation -------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_countdown(self) -> bool:
        return self._duration is not None

    @property
    def elapsed_seconds(self) -> float:
        with self._lock:
            return self._elapsed + self._run_elapsed()

    @property
    def remaining_seconds(self) -> float | None:
        """Countdown time left, or None for a stopwatch session."""
        with self._lock:
            if self._remaining is None:
                return None
            return max(self._remaining - self._run_elapsed(), 0.0)

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    # -- Transitions -------------------------------------------------------

    def start(self, duration_s: float | None = None) -> None:
        """Begin (or continue) running.

        With *duration_s* a fresh countdown of that length starts. Without
        it the session continues from its preserved remaining time, and a
        countdown that had reached zero restarts at its configured duration.
        """
        with self._lock:
            if self._state == SessionState.RUNNING:
                raise SessionStateError(f"{self.kind.value} session is already running")
            if duration_s is not None:
                if duration_s <= 0:
                    raise SessionStateError("duration_s must be positive")
                self._duration = duration_s
                self._remaining = duration_s
            elif self._remaining is not None and self._remaining <= 0:
                self._remaining = self._duration
            self._run_started_at = self._clock.now()
            self._state = SessionState.RUNNING
            self._handle = self._ticker.start(self._on_tick, self._tick_interval_s)
            logger.debug("%s session running", self.kind.value)

    def pause(self) -> None:
        with self._lock:
            if self._state != SessionState.RUNNING:
                raise SessionStateError(f"Cannot pause a {self._state.name.lower()} session")
            self._fold_run()
            self._stop_ticks()
            self._state = SessionState.PAUSED

    def resume(self) -> None:
        with self._lock:
            if self._state != SessionState.PAUSED:
                raise SessionStateError(f"Cannot resume a {self._state.name.lower()} session")
            self.start()

    def end(self) -> SessionCompleted:
        """Finish the session, notify listeners and return to IDLE."""
        with self._lock:
            if self._state == SessionState.IDLE:
                raise SessionStateError(f"No {self.kind.value} session in progress")
            return self._complete(auto=False)

    def cancel(self) -> None:
        """Abandon the session without emitting a completion event."""
        with self._lock:
            self._stop_ticks()
            self._reset()

    def tick(self) -> None:
        """Sample the clock; completes a countdown that has run out."""
        self._on_tick()

    # -- Internal ----------------------------------------------------------

    def _on_tick(self) -> None:
        with self._lock:
            if self._state != SessionState.RUNNING or self._remaining is None:
                return
            if self._remaining - self._run_elapsed() <= 0:
                self._complete(auto=True)

    def _complete(self, auto: bool) -> SessionCompleted:
        if self._state == SessionState.RUNNING:
            self._fold_run()
        self._stop_ticks()
        event = SessionCompleted(
            kind=self.kind,
            elapsed_seconds=self._elapsed,
            context=self.context,
            linked_kr_id=self.linked_kr_id,
            auto_completed=auto,
        )
        # Reset before notifying so the session cannot complete twice and
        # listeners may immediately start a new run.
        self._reset()
        logger.info(
            "%s session completed after %.0fs%s",
            event.kind.value,
            event.elapsed_seconds,
            " (timer ran out)" if auto else "",
        )
        for listener in list(self._listeners):
            listener(event)
        return event

    def _run_elapsed(self) -> float:
        if self._state != SessionState.RUNNING:
            return 0.0
        delta = max(self._clock.now() - self._run_started_at, 0.0)
        if self._remaining is not None:
            delta = min(delta, self._remaining)
        return delta

    def _fold_run(self) -> None:
        delta = self._run_elapsed()
        self._elapsed += delta
        if self._remaining is not None:
            self._remaining = max(self._remaining - delta, 0.0)
        self._run_started_at = self._clock.now()

    def _stop_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _reset(self) -> None:
        self._state = SessionState.IDLE
        self._duration = self._initial_duration
        self._remaining = self._initial_duration
        self._elapsed = 0.0
        self._run_started_at = 0.0
        self.linked_kr_id = None


def create_session(
    kind: SessionKind,
    clock: Clock,
    ticker: TickScheduler,
    duration_s: float | None = None,
    context: str = "",
) -> SessionLifecycle:
    """Build a session using the preset duration for *kind* unless overridden."""
    duration = duration_s if duration_s is not None else SESSION_PRESETS[kind]
    return SessionLifecycle(kind, clock, ticker, initial_duration_s=duration, context=context)

"""Clock and periodic-tick abstractions for timed sessions.

Sessions never sleep or read the system time directly: they sample an
injected ``Clock`` and are woken by an injected ``TickScheduler``. In
production the ticks come from an APScheduler background scheduler; tests
drive both by hand.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


class Clock(ABC):
    """Monotonic time source in seconds."""

    @abstractmethod
    def now(self) -> float:
        ...


class SystemClock(Clock):
    def now(self) -> float:
        return time.monotonic()


class TickHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        ...


class TickScheduler(ABC):
    """Calls a callback periodically until the returned handle is cancelled."""

    @abstractmethod
    def start(self, callback: Callable[[], None], interval_s: float) -> TickHandle:
        ...


class _JobHandle(TickHandle):
    def __init__(self, job) -> None:
        self._job = job
        self._cancelled = False

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self._job.remove()
        except LookupError:
            # Job already gone (scheduler shut down or removed elsewhere).
            pass


class APSchedulerTicker(TickScheduler):
    """Interval ticks on a shared APScheduler ``BackgroundScheduler``.

    The scheduler thread is started lazily on the first tick request.
    """

    def __init__(self, scheduler: BackgroundScheduler | None = None) -> None:
        self._scheduler = scheduler or BackgroundScheduler()
        self._lock = threading.Lock()

    def start(self, callback: Callable[[], None], interval_s: float) -> TickHandle:
        with self._lock:
            if not self._scheduler.running:
                self._scheduler.start()
                logger.debug("Started background tick scheduler")
        job = self._scheduler.add_job(
            callback,
            "interval",
            seconds=interval_s,
            max_instances=1,
            coalesce=True,
        )
        return _JobHandle(job)

    def shutdown(self) -> None:
        with self._lock:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)

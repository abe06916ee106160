from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Generic, Optional, Sequence, TypeVar

from ..common.clock import Clock
from ..core.constants import DEFAULT_REFRESH_INTERVAL_SECONDS
from ..core.exceptions import EventStoreError
from ..events.model import AttendanceEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveRefresher(Generic[T]):
    """Re-evaluates a computation over an event snapshot on a cancelable timer.

    The snapshot is fetched by `reload()` (initially on `start()`); a failed
    fetch keeps the previous snapshot and exposes `error` while the timer keeps
    running; there is no automatic retry. Each tick calls `evaluate(snapshot, clock.now())`, so an open
    session's elapsed time stays current. Tests drive `tick()` directly with a
    fixed clock instead of starting the thread.
    """

    def __init__(
        self,
        *,
        fetch: Callable[[], Sequence[AttendanceEvent]],
        evaluate: Callable[[Sequence[AttendanceEvent], datetime], T],
        clock: Clock,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        on_update: Optional[Callable[[T], None]] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._fetch = fetch
        self._evaluate = evaluate
        self._clock = clock
        self._interval = float(interval_seconds)
        self._on_update = on_update

        self._snapshot: Optional[tuple[AttendanceEvent, ...]] = None
        self._last_result: Optional[T] = None
        self._error: Optional[EventStoreError] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Optional[tuple[AttendanceEvent, ...]]:
        return self._snapshot

    @property
    def last_result(self) -> Optional[T]:
        return self._last_result

    @property
    def error(self) -> Optional[EventStoreError]:
        return self._error

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def reload(self) -> bool:
        """Fetch a fresh snapshot. Returns False (and keeps the old one) on failure."""

        try:
            events = self._fetch()
        except EventStoreError as e:
            self._error = e
            logger.warning("Event snapshot fetch failed, keeping previous snapshot: %s", e)
            return False

        self._snapshot = tuple(events)
        self._error = None
        return True

    def tick(self) -> Optional[T]:
        if self._snapshot is None:
            return None

        result = self._evaluate(self._snapshot, self._clock.now())
        self._last_result = result
        if self._on_update is not None:
            self._on_update(result)
        return result

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="attendance-live-refresh", daemon=True)
        self._thread.start()

    def cancel(self, *, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        self.reload()
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Live attendance re-evaluation failed")
            if self._stop.wait(self._interval):
                break

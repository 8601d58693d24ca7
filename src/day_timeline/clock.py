"""Wall-clock helpers and the background tick source."""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TickListener = Callable[[datetime, datetime], None]


def is_same_day(value: datetime, other: datetime) -> bool:
    return value.date() == other.date()


def start_of_hour(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def end_of_hour(value: datetime) -> datetime:
    """Return the first instant of the hour following ``value``."""
    return start_of_hour(value) + timedelta(hours=1)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up."""
    return math.floor(value + 0.5)


def to_seconds(delta: timedelta) -> int:
    return round_half_up(delta.total_seconds())


def idle_seconds(last_active_at: datetime, now: datetime) -> int:
    """Seconds to credit for the gap between ``last_active_at`` and ``now``.

    Time is only counted up to the end of the hour the gap started in.
    """
    if last_active_at.hour == now.hour and is_same_day(last_active_at, now):
        return max(to_seconds(now - last_active_at), 0)
    return to_seconds(end_of_hour(last_active_at) - last_active_at)


class ClockTicker:
    """Read the clock at a fixed interval and notify listeners of each change."""

    def __init__(
        self,
        interval_seconds: float,
        listeners: Iterable[TickListener] = (),
        clock: Clock = datetime.now,
    ) -> None:
        self._interval_seconds = interval_seconds
        self._listeners: list[TickListener] = list(listeners)
        self._clock = clock
        self._previous: Optional[datetime] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    def subscribe(self, listener: TickListener) -> None:
        self._listeners.append(listener)

    def mark(self, value: datetime) -> None:
        """Use ``value`` as the previous timestamp for the next tick."""
        self._previous = value

    def tick_once(self) -> datetime:
        current = self._clock()
        previous = self._previous or current
        self._previous = current
        for listener in self._listeners:
            try:
                listener(previous, current)
            except Exception:
                logger.exception("Tick listener %r failed at %s", listener, current)
        return current

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        if self._interval_seconds <= 0:
            return
        self._stop.clear()

        def _runner() -> None:
            while not self._stop.is_set():
                self.tick_once()
                self._stop.wait(self._interval_seconds)

        self._thread = threading.Thread(target=_runner, name="timeline-clock", daemon=True)
        self._thread.start()
        logger.info("Clock ticker started every %.1fs.", self._interval_seconds)

    def stop(self) -> None:
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
            logger.info("Clock ticker stopped.")
        self._previous = None

    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

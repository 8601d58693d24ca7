"""Timer that accumulates live seconds into the active slot."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .clock import end_of_hour
from .engine import TimelineEngine
from .models import TimelineSlot

logger = logging.getLogger(__name__)


class SlotTimer:
    """Runs against at most one slot at a time, fed by clock ticks."""

    def __init__(self, engine: TimelineEngine) -> None:
        self._engine = engine
        self._slot: Optional[TimelineSlot] = None
        engine.attach_timer(self)

    @property
    def slot(self) -> Optional[TimelineSlot]:
        return self._slot

    @property
    def is_running(self) -> bool:
        return self._slot is not None and self._slot.is_active

    def start(self, slot: TimelineSlot) -> None:
        current_hour = self._engine.now().hour
        if slot.hour != current_hour:
            raise ValueError(
                f"Cannot start hour {slot.hour}; the current hour is {current_hour}"
            )
        if self._slot is not None and self._slot is not slot:
            self.stop()
        self._engine.activate(slot)
        self._slot = slot
        logger.info("Timer started for hour %d.", slot.hour)

    def resume(self) -> None:
        """Pick up a slot that was already active, e.g. after restoring a snapshot."""
        self._slot = self._engine.active_slot
        if self._slot is not None:
            logger.info("Timer resumed for hour %d.", self._slot.hour)

    def stop(self) -> None:
        slot = self._slot or self._engine.active_slot
        if slot is None:
            return
        self._engine.deactivate(slot)
        self._slot = None
        logger.info("Timer stopped for hour %d.", slot.hour)

    def handle_tick(self, previous: datetime, current: datetime) -> None:
        slot = self._slot
        if slot is None or not slot.is_active or current <= previous:
            return
        credited = (min(current, end_of_hour(previous)) - previous).total_seconds()
        if credited > 0:
            self._engine.credit_seconds(slot, credited)
            logger.debug("Credited %.2fs to hour %d.", credited, slot.hour)

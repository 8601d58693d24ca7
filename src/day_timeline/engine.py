"""Hourly timeline state engine."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Protocol, Sequence, TypeVar

from . import slots as slot_ops
from .clock import Clock, idle_seconds, is_same_day
from .models import (
    HOURS_IN_DAY,
    MIDNIGHT_HOUR,
    Activity,
    Snapshot,
    TimelineSlot,
)

logger = logging.getLogger(__name__)

Anchor = TypeVar("Anchor")


class Timer(Protocol):
    def stop(self) -> None: ...


class TimelineEngine:
    """Owns the 24 slots of the current day and keeps them in step with the clock."""

    def __init__(self, clock: Clock = datetime.now, timer: Optional[Timer] = None) -> None:
        self._clock = clock
        self._timer = timer
        self._last_tick: Optional[datetime] = None
        self.slots: list[TimelineSlot] = slot_ops.generate_slots()

    def attach_timer(self, timer: Timer) -> None:
        self._timer = timer

    def now(self) -> datetime:
        return self._clock()

    @property
    def active_slot(self) -> Optional[TimelineSlot]:
        return slot_ops.find_active_slot(self.slots)

    def slot_for_hour(self, hour: int) -> TimelineSlot:
        if not 0 <= hour < HOURS_IN_DAY:
            raise KeyError(hour)
        return self.slots[hour]

    def initialize(self, snapshot: Snapshot) -> None:
        """Adopt a persisted snapshot and reconcile it with the current time."""
        now = self._clock()
        last_active_at = snapshot.last_active_at

        if snapshot.slots is None:
            self.slots = slot_ops.generate_slots()
            logger.info("No saved timeline; starting with empty slots.")
        else:
            self.slots = slot_ops.validate_slots(snapshot.slots)

        active = self.active_slot
        if active and is_same_day(last_active_at, now):
            credited = idle_seconds(last_active_at, now)
            active.activity_seconds += credited
            logger.info(
                "Credited %ds of idle time to hour %d (last active %s).",
                credited,
                active.hour,
                last_active_at.isoformat(),
            )
        elif snapshot.slots is not None and not is_same_day(last_active_at, now):
            logger.info(
                "Saved timeline is from %s; clearing tracked time.",
                last_active_at.date().isoformat(),
            )
            self.reset_all_slots()

    def assign_activity(self, slot: TimelineSlot, activity_id: Optional[str]) -> TimelineSlot:
        return slot_ops.assign_activity(slot, activity_id)

    def clear_activity(self, activity: Activity) -> None:
        slot_ops.clear_activity(self.slots, activity, self._clock().hour)

    def total_seconds(self, activity: Activity) -> int:
        return slot_ops.total_seconds(self.slots, activity)

    def reset_all_slots(self) -> None:
        slot_ops.reset_all_slots(self.slots)

    def activate(self, slot: TimelineSlot) -> None:
        for other in self.slots:
            if other is not slot and other.is_active:
                other.is_active = False
        slot.is_active = True

    def deactivate(self, slot: TimelineSlot) -> None:
        slot.is_active = False

    def credit_seconds(self, slot: TimelineSlot, seconds: float) -> None:
        if seconds > 0:
            slot.activity_seconds += seconds

    def tick(self, now: Optional[datetime] = None) -> None:
        current = now or self._clock()
        previous = self._last_tick or current
        self._last_tick = current
        self.handle_tick(previous, current)

    def handle_tick(self, previous: datetime, current: datetime) -> None:
        self.stop_expired_timer(current)
        self.reset_at_midnight(previous, current)

    def stop_expired_timer(self, current: datetime) -> bool:
        active = self.active_slot
        if active is None or active.hour == current.hour:
            return False
        logger.info("Hour %d is over; stopping its timer.", active.hour)
        if self._timer is not None:
            self._timer.stop()
        else:
            logger.warning("No timer attached; hour %d stays active.", active.hour)
        return True

    def reset_at_midnight(self, previous: datetime, current: datetime) -> bool:
        if previous.hour == current.hour or current.hour != MIDNIGHT_HOUR:
            return False
        logger.info("Midnight reached; resetting all slots.")
        self.reset_all_slots()
        return True

    def current_hour_target(self, anchors: Optional[Sequence[Anchor]]) -> Optional[Anchor]:
        return scroll_target(self._clock().hour, anchors)

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            last_active_at=self._clock(),
            slots=[slot.copy() for slot in self.slots],
        )


def scroll_target(hour: int, anchors: Optional[Sequence[Anchor]]) -> Optional[Anchor]:
    """Return the anchor to bring into view for ``hour``.

    The anchor of the preceding hour is used so the requested hour sits just
    below it. ``None`` means the top of the page.
    """
    if hour == MIDNIGHT_HOUR or not anchors:
        return None
    return anchors[hour - 1]

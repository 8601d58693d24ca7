"""Operations over a day's list of timeline slots."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .clock import round_half_up
from .models import HOURS_IN_DAY, Activity, MalformedSnapshot, TimelineSlot


def generate_slots() -> list[TimelineSlot]:
    """Return 24 empty slots ordered by hour."""
    return [TimelineSlot(hour=hour) for hour in range(HOURS_IN_DAY)]


def validate_slots(slots: Sequence[TimelineSlot]) -> list[TimelineSlot]:
    """Check that ``slots`` covers every hour exactly once and return them sorted.

    Raises MalformedSnapshot instead of truncating or padding.
    """
    if len(slots) != HOURS_IN_DAY:
        raise MalformedSnapshot(
            f"Expected {HOURS_IN_DAY} timeline slots, got {len(slots)}"
        )
    hours = sorted(slot.hour for slot in slots)
    if hours != list(range(HOURS_IN_DAY)):
        missing = sorted(set(range(HOURS_IN_DAY)) - set(hours))
        raise MalformedSnapshot(
            f"Timeline slot hours must be 0..23 each once; missing {missing}"
        )
    return sorted(slots, key=lambda slot: slot.hour)


def find_active_slot(slots: Iterable[TimelineSlot]) -> Optional[TimelineSlot]:
    return next((slot for slot in slots if slot.is_active), None)


def filter_slots_by_activity(
    slots: Iterable[TimelineSlot], activity: Activity
) -> list[TimelineSlot]:
    return [slot for slot in slots if slot.activity_id == activity.id]


def assign_activity(slot: TimelineSlot, activity_id: Optional[str]) -> TimelineSlot:
    """Point ``slot`` at an activity; seconds and the active flag are left alone."""
    slot.activity_id = activity_id
    return slot


def clear_activity(
    slots: Iterable[TimelineSlot], activity: Activity, current_hour: int
) -> None:
    """Detach ``activity`` from every slot that references it.

    Past and future hours also lose their seconds. The slot for
    ``current_hour`` keeps them so an in-progress session survives.
    """
    for slot in filter_slots_by_activity(slots, activity):
        slot.activity_id = None
        if slot.hour != current_hour:
            slot.activity_seconds = 0


def total_seconds(slots: Iterable[TimelineSlot], activity: Activity) -> int:
    """Sum the seconds tracked for ``activity``, rounding at every step."""
    total = 0
    for slot in filter_slots_by_activity(slots, activity):
        total = round_half_up(total + slot.activity_seconds)
    return total


def reset_all_slots(slots: Iterable[TimelineSlot]) -> None:
    for slot in slots:
        slot.activity_seconds = 0
        slot.is_active = False

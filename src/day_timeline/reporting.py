"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from typing import Iterable, Optional

from .engine import TimelineEngine
from .models import Activity, TimelineSlot
from .slots import total_seconds


class SummaryPrinter:
    """Render human-readable summaries of a timeline in the console."""

    def __init__(self, engine: TimelineEngine) -> None:
        self.engine = engine

    def print_daily_summary(self) -> None:
        slots = self.engine.slots
        tracked = [slot for slot in slots if slot.is_assigned or slot.activity_seconds]
        if not tracked:
            print("No activity tracked today.")
            return

        now = self.engine.now()
        print(f"Timeline for {now.strftime('%Y-%m-%d')}")
        print("-" * 40)
        for slot in tracked:
            marker = "*" if slot.is_active else " "
            label = slot.activity_id or "(unassigned)"
            print(
                f"{marker} {slot.hour:02d}:00  {label[:24]:<24} "
                f"{format_duration(slot.activity_seconds)}"
            )

        totals = aggregate_by_activity(slots)
        if totals:
            print()
            print("Totals by activity:")
            for activity_id, seconds in totals:
                print(f"  {activity_id:<30} {format_duration(seconds)}")


def aggregate_by_activity(slots: Iterable[TimelineSlot]) -> list[tuple[str, int]]:
    slots = list(slots)
    activity_ids = dict.fromkeys(
        slot.activity_id for slot in slots if slot.activity_id is not None
    )
    totals = [
        (activity_id, total_seconds(slots, Activity(id=activity_id)))
        for activity_id in activity_ids
    ]
    return sorted(totals, key=lambda item: item[1], reverse=True)


def format_duration(seconds: Optional[float]) -> str:
    total_seconds = int(round(seconds or 0))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"

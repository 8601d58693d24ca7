"""Domain models for the hourly timeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


HOURS_IN_DAY = 24
MIDNIGHT_HOUR = 0
SECONDS_IN_HOUR = 3600


class MalformedSnapshot(ValueError):
    """Raised when a persisted snapshot does not describe a full day of slots."""


@dataclass(slots=True)
class TimelineSlot:
    """One hourly bucket of the day."""

    hour: int
    activity_id: Optional[str] = None
    activity_seconds: float = 0
    is_active: bool = False

    @property
    def is_assigned(self) -> bool:
        return self.activity_id is not None

    def copy(self) -> "TimelineSlot":
        return TimelineSlot(
            hour=self.hour,
            activity_id=self.activity_id,
            activity_seconds=self.activity_seconds,
            is_active=self.is_active,
        )


@dataclass(frozen=True, slots=True)
class Activity:
    """Reference to an activity owned by the surrounding application.

    Only ``id`` is compared; ``name`` is carried for reports.
    """

    id: str
    name: Optional[str] = None


@dataclass(slots=True)
class Snapshot:
    """State persisted between runs: the slots plus the last observed time."""

    last_active_at: datetime
    slots: Optional[list[TimelineSlot]] = None

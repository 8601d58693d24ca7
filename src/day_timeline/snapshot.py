"""Wire format for persisted timeline snapshots."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import MalformedSnapshot, Snapshot, TimelineSlot
from .slots import validate_slots

logger = logging.getLogger(__name__)


class SlotRecord(BaseModel):
    hour: int = Field(ge=0, le=23)
    activity_id: Optional[str] = Field(default=None, alias="activityId")
    activity_seconds: float = Field(default=0, alias="activitySeconds")
    is_active: bool = Field(default=False, alias="isActive")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SnapshotPayload(BaseModel):
    last_active_at: datetime = Field(alias="lastActiveAt")
    timeline_items: Optional[list[SlotRecord]] = Field(default=None, alias="timelineItems")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("last_active_at", mode="before")
    @classmethod
    def _epoch_milliseconds(cls, value: Any) -> Any:
        # Numeric timestamps are epoch milliseconds.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return value


def _to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_snapshot(data: Union[dict[str, Any], str, bytes]) -> Snapshot:
    """Build a Snapshot from a decoded JSON mapping or raw JSON text."""
    try:
        if isinstance(data, (str, bytes)):
            payload = SnapshotPayload.model_validate_json(data)
        else:
            payload = SnapshotPayload.model_validate(data)
    except ValidationError as exc:
        raise MalformedSnapshot(f"Invalid timeline snapshot: {exc}") from exc

    slots: Optional[list[TimelineSlot]] = None
    if payload.timeline_items is not None:
        slots = validate_slots(
            [
                TimelineSlot(
                    hour=record.hour,
                    activity_id=record.activity_id,
                    activity_seconds=record.activity_seconds,
                    is_active=record.is_active,
                )
                for record in payload.timeline_items
            ]
        )
    return Snapshot(last_active_at=_to_local(payload.last_active_at), slots=slots)


def dump_snapshot(snapshot: Snapshot) -> dict[str, Any]:
    """Return the JSON-compatible form of ``snapshot``."""
    payload: dict[str, Any] = {"lastActiveAt": snapshot.last_active_at.isoformat()}
    if snapshot.slots is not None:
        payload["timelineItems"] = [
            SlotRecord(
                hour=slot.hour,
                activity_id=slot.activity_id,
                activity_seconds=slot.activity_seconds,
                is_active=slot.is_active,
            ).model_dump(by_alias=True)
            for slot in snapshot.slots
        ]
    return payload


def read_snapshot_file(path: Path) -> Optional[Snapshot]:
    """Load a snapshot written by the persistence layer, if there is one."""
    path = Path(path)
    if not path.exists():
        logger.info("No snapshot at %s.", path)
        return None
    snapshot = parse_snapshot(path.read_text(encoding="utf-8"))
    logger.info("Loaded snapshot from %s (last active %s).", path, snapshot.last_active_at)
    return snapshot


def format_snapshot(snapshot: Snapshot) -> str:
    return json.dumps(dump_snapshot(snapshot), indent=2)

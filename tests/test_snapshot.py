from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from day_timeline.models import MalformedSnapshot, Snapshot
from day_timeline.slots import generate_slots
from day_timeline.snapshot import dump_snapshot, format_snapshot, parse_snapshot, read_snapshot_file


def _items(count: int = 24) -> list[dict]:
    return [
        {"hour": hour, "activityId": None, "activitySeconds": 0, "isActive": False}
        for hour in range(count)
    ]


def test_parse_snapshot_reads_camel_case_records() -> None:
    items = _items()
    items[9] = {"hour": 9, "activityId": "a1", "activitySeconds": 1234.5, "isActive": True}

    snapshot = parse_snapshot({"lastActiveAt": "2026-10-19T09:30:00", "timelineItems": items})

    assert snapshot.last_active_at == datetime(2026, 10, 19, 9, 30)
    assert len(snapshot.slots) == 24
    assert snapshot.slots[9].activity_id == "a1"
    assert snapshot.slots[9].activity_seconds == 1234.5
    assert snapshot.slots[9].is_active is True


def test_parse_snapshot_without_items() -> None:
    snapshot = parse_snapshot('{"lastActiveAt": "2026-10-19T09:30:00"}')

    assert snapshot.slots is None


def test_parse_snapshot_sorts_items_by_hour() -> None:
    snapshot = parse_snapshot(
        {"lastActiveAt": "2026-10-19T09:30:00", "timelineItems": list(reversed(_items()))}
    )

    assert [slot.hour for slot in snapshot.slots] == list(range(24))


def test_parse_snapshot_accepts_epoch_milliseconds() -> None:
    snapshot = parse_snapshot({"lastActiveAt": 1760000000000})

    assert snapshot.last_active_at == datetime.fromtimestamp(1760000000)
    assert snapshot.last_active_at.tzinfo is None


def test_parse_snapshot_converts_aware_timestamps_to_local_time() -> None:
    snapshot = parse_snapshot({"lastActiveAt": "2026-10-19T10:00:00+00:00"})

    expected = datetime(2026, 10, 19, 10, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert snapshot.last_active_at == expected


@pytest.mark.parametrize(
    "payload",
    [
        {"lastActiveAt": "2026-10-19T09:30:00", "timelineItems": _items(23)},
        {"lastActiveAt": "2026-10-19T09:30:00", "timelineItems": _items(25)},
        {"timelineItems": _items()},
        {"lastActiveAt": "not a date"},
        {"lastActiveAt": "2026-10-19T09:30:00", "extra": True},
    ],
)
def test_parse_snapshot_rejects_malformed_payloads(payload: dict) -> None:
    with pytest.raises(MalformedSnapshot):
        parse_snapshot(payload)


def test_parse_snapshot_rejects_out_of_range_hour() -> None:
    items = _items()
    items[23]["hour"] = 24

    with pytest.raises(MalformedSnapshot):
        parse_snapshot({"lastActiveAt": "2026-10-19T09:30:00", "timelineItems": items})


def test_dump_snapshot_uses_wire_names() -> None:
    slots = generate_slots()
    slots[4].activity_id = "yoga"
    slots[4].activity_seconds = 300

    payload = dump_snapshot(Snapshot(last_active_at=datetime(2026, 10, 19, 4, 5), slots=slots))

    assert payload["lastActiveAt"] == "2026-10-19T04:05:00"
    assert payload["timelineItems"][4] == {
        "hour": 4,
        "activityId": "yoga",
        "activitySeconds": 300,
        "isActive": False,
    }
    assert json.loads(format_snapshot(Snapshot(last_active_at=datetime(2026, 10, 19)))) == {
        "lastActiveAt": "2026-10-19T00:00:00"
    }


def test_read_snapshot_file(tmp_path: Path) -> None:
    assert read_snapshot_file(tmp_path / "missing.json") is None

    path = tmp_path / "timeline.json"
    path.write_text(
        json.dumps({"lastActiveAt": "2026-10-19T08:00:00", "timelineItems": _items()}),
        encoding="utf-8",
    )

    snapshot = read_snapshot_file(path)

    assert snapshot is not None
    assert snapshot.last_active_at == datetime(2026, 10, 19, 8)
    assert len(snapshot.slots) == 24

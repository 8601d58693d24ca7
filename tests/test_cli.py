from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from day_timeline.cli import app

runner = CliRunner()


def _write_snapshot(path: Path, last_active_at: str, items: list[dict] | None) -> Path:
    payload: dict = {"lastActiveAt": last_active_at}
    if items is not None:
        payload["timelineItems"] = items
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _items() -> list[dict]:
    return [
        {"hour": hour, "activityId": None, "activitySeconds": 0, "isActive": False}
        for hour in range(24)
    ]


def _json_from(output: str) -> dict:
    return json.loads(output[output.index("{") : output.rindex("}") + 1])


def test_reconcile_clears_time_from_an_earlier_day(tmp_path: Path) -> None:
    items = _items()
    items[10] = {"hour": 10, "activityId": "write", "activitySeconds": 500, "isActive": True}
    path = _write_snapshot(tmp_path / "timeline.json", "2020-01-01T10:30:00", items)

    result = runner.invoke(app, ["reconcile", "--snapshot", str(path)])

    assert result.exit_code == 0
    payload = _json_from(result.stdout)
    assert payload["timelineItems"][10] == {
        "hour": 10,
        "activityId": "write",
        "activitySeconds": 0,
        "isActive": False,
    }


def test_reconcile_rejects_malformed_snapshot(tmp_path: Path) -> None:
    path = _write_snapshot(tmp_path / "timeline.json", "2020-01-01T10:30:00", _items()[:12])

    result = runner.invoke(app, ["reconcile", "--snapshot", str(path)])

    assert result.exit_code == 1


def test_summary_without_snapshot(tmp_path: Path) -> None:
    result = runner.invoke(app, ["summary", "--snapshot", str(tmp_path / "missing.json")])

    assert result.exit_code == 0
    assert "No activity tracked today." in result.stdout


def test_summary_shows_assigned_hours(tmp_path: Path) -> None:
    items = _items()
    items[6] = {"hour": 6, "activityId": "swim", "activitySeconds": 0, "isActive": False}
    path = _write_snapshot(tmp_path / "timeline.json", "2020-01-01T06:30:00", items)

    result = runner.invoke(app, ["summary", "--snapshot", str(path)])

    assert result.exit_code == 0
    assert "06:00  swim" in result.stdout
    assert "swim" in result.stdout

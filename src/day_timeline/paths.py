"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "DayTimeline"
APP_AUTHOR = "DayTimeline"


def get_data_dir() -> Path:
    """Directory that holds the saved timeline; created on first use."""
    data_dir = Path(
        PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True).user_data_path
    )
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_snapshot_path() -> Path:
    return get_data_dir() / "timeline.json"

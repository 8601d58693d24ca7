"""Configuration models and helpers for the timeline service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(slots=True)
class TimelineSettings:
    """Runtime configuration for the clock ticker and the local API."""

    tick_interval: timedelta = timedelta(seconds=1)
    host: str = "127.0.0.1"
    port: int = 8766

    @classmethod
    def from_intervals(
        cls,
        tick_seconds: float,
        host: str | None = None,
        port: int | None = None,
    ) -> "TimelineSettings":
        defaults = cls()
        return cls(
            tick_interval=timedelta(seconds=tick_seconds),
            host=host if host is not None else defaults.host,
            port=port if port is not None else defaults.port,
        )

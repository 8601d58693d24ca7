"""FastAPI application that exposes a local JSON API for the day timeline."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .clock import ClockTicker
from .config import TimelineSettings
from .engine import TimelineEngine, scroll_target
from .models import HOURS_IN_DAY, Activity, MalformedSnapshot, Snapshot, TimelineSlot
from .snapshot import dump_snapshot, parse_snapshot, read_snapshot_file
from .timer import SlotTimer

logger = logging.getLogger(__name__)


class TickerRunner:
    """Drive the engine and timer from a background clock ticker."""

    def __init__(
        self,
        engine: TimelineEngine,
        timer: SlotTimer,
        settings: TimelineSettings,
        lock: threading.Lock,
    ) -> None:
        self._engine = engine
        self._timer = timer
        self._lock = lock
        self._ticker = ClockTicker(
            settings.tick_interval.total_seconds(),
            listeners=[self._on_tick],
            clock=engine.now,
        )

    @property
    def ticker(self) -> ClockTicker:
        return self._ticker

    def start(self) -> None:
        self._ticker.start()

    def stop(self) -> None:
        self._ticker.stop()

    def is_running(self) -> bool:
        return self._ticker.is_running()

    def _on_tick(self, previous: datetime, current: datetime) -> None:
        with self._lock:
            self._timer.handle_tick(previous, current)
            self._engine.handle_tick(previous, current)


class ActivityAssignment(BaseModel):
    activity_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class TimerStart(BaseModel):
    hour: int

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    engine: Optional[TimelineEngine] = None,
    settings: Optional[TimelineSettings] = None,
    snapshot_path: Optional[Path] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_settings = settings or TimelineSettings()
    resolved_engine = engine or TimelineEngine()
    timer = SlotTimer(resolved_engine)
    lock = threading.Lock()
    runner = TickerRunner(resolved_engine, timer, resolved_settings, lock)

    def restore(snapshot: Snapshot) -> None:
        resolved_engine.initialize(snapshot)
        timer.resume()
        if timer.is_running:
            runner.ticker.mark(resolved_engine.now())

    if snapshot_path is not None:
        restored = read_snapshot_file(snapshot_path)
        if restored is not None:
            restore(restored)

    app = FastAPI(title="Day Timeline", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.engine = resolved_engine
    app.state.timer = timer
    app.state.lock = lock
    app.state.ticker_runner = runner

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        runner.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        runner.stop()

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        with lock:
            active = resolved_engine.active_slot
            now = resolved_engine.now()
        return {
            "ticker_running": request.app.state.ticker_runner.is_running(),
            "tick_seconds": resolved_settings.tick_interval.total_seconds(),
            "current_hour": now.hour,
            "active_hour": active.hour if active else None,
        }

    @app.get("/api/timeline")
    def timeline() -> Dict[str, Any]:
        with lock:
            slots = [_slot_payload(slot) for slot in resolved_engine.slots]
        return {"slots": slots}

    @app.get("/api/snapshot")
    def snapshot() -> Dict[str, Any]:
        with lock:
            return dump_snapshot(resolved_engine.to_snapshot())

    @app.post("/api/snapshot")
    def restore_snapshot(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        try:
            parsed = parse_snapshot(payload)
        except MalformedSnapshot as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        with lock:
            restore(parsed)
            return dump_snapshot(resolved_engine.to_snapshot())

    @app.put("/api/timeline/{hour}/activity")
    def assign(hour: int, payload: ActivityAssignment) -> Dict[str, Any]:
        with lock:
            slot = _lookup_slot(resolved_engine, hour)
            resolved_engine.assign_activity(slot, payload.activity_id)
            return _slot_payload(slot)

    @app.post("/api/timer/start")
    def start_timer(payload: TimerStart) -> Dict[str, Any]:
        with lock:
            slot = _lookup_slot(resolved_engine, payload.hour)
            try:
                timer.start(slot)
            except ValueError as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            return _slot_payload(slot)

    @app.post("/api/timer/stop")
    def stop_timer() -> Dict[str, Any]:
        with lock:
            timer.stop()
            active = resolved_engine.active_slot
        return {"active_hour": active.hour if active else None}

    @app.post("/api/activities/{activity_id}/clear")
    def clear(activity_id: str) -> Dict[str, Any]:
        activity = Activity(id=activity_id)
        with lock:
            resolved_engine.clear_activity(activity)
            slots = [_slot_payload(slot) for slot in resolved_engine.slots]
        return {"slots": slots}

    @app.get("/api/activities/{activity_id}/seconds")
    def tracked_seconds(activity_id: str) -> Dict[str, Any]:
        with lock:
            seconds = resolved_engine.total_seconds(Activity(id=activity_id))
        return {"activity_id": activity_id, "seconds": seconds}

    @app.get("/api/scroll-target")
    def scroll(
        hour: Optional[int] = Query(
            default=None,
            ge=0,
            le=HOURS_IN_DAY - 1,
            description="Hour to bring into view. Defaults to the current hour.",
        ),
    ) -> Dict[str, Any]:
        target_hour = hour if hour is not None else resolved_engine.now().hour
        anchors = list(range(HOURS_IN_DAY))
        return {"hour": target_hour, "anchor_hour": scroll_target(target_hour, anchors)}

    return app


def _lookup_slot(engine: TimelineEngine, hour: int) -> TimelineSlot:
    try:
        return engine.slot_for_hour(hour)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"No slot for hour {hour}") from exc


def _slot_payload(slot: TimelineSlot) -> Dict[str, Any]:
    return {
        "hour": slot.hour,
        "activity_id": slot.activity_id,
        "activity_seconds": slot.activity_seconds,
        "is_active": slot.is_active,
    }

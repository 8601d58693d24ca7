"""Helpers to launch the local timeline API."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TimelineSettings
from .webapp import create_app

logger = logging.getLogger(__name__)


def run_dashboard(
    *,
    snapshot_path: Optional[Path] = None,
    settings: Optional[TimelineSettings] = None,
    open_browser: bool = False,
    log_level: str = "info",
) -> None:
    """Start the FastAPI app and, optionally, open its docs in a browser tab."""
    resolved_settings = settings or TimelineSettings()
    app = create_app(settings=resolved_settings, snapshot_path=snapshot_path)

    if open_browser:
        url = f"http://{resolved_settings.host}:{resolved_settings.port}/docs"
        threading.Thread(
            target=_open_docs_when_ready, args=(url,), daemon=True
        ).start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(
        app,
        host=resolved_settings.host,
        port=resolved_settings.port,
        log_level=log_level,
    )


def _open_docs_when_ready(url: str, delay_seconds: float = 1.0) -> None:
    time.sleep(delay_seconds)
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error:
        logger.exception("Failed to launch browser for %s", url)
        return
    if not opened:
        logger.warning("No browser available to open %s", url)
